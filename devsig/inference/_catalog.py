"""Static catalog of known device signatures.

Declaration order is significant: when two entries score the same, the one
declared first wins.  Each reference entry can be told apart from every
entry declared before it by its exact screen, pixel ratio and any one of
its GPU hints.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from ._types import DeviceSignature, ScreenSize

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a device catalog is empty or malformed."""


# ---------------------------------------------------------------------------
# Reference signatures (screen sizes in device pixels, portrait)
# ---------------------------------------------------------------------------

REFERENCE_SIGNATURES: tuple[DeviceSignature, ...] = (
    # iPhone
    DeviceSignature(
        model_name="iPhone 15 Pro Max",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1290, 2796),
        gpu_hints=("A17 Pro",),
        expected_touch_points=5,
    ),
    DeviceSignature(
        model_name="iPhone 15 Pro",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1179, 2556),
        gpu_hints=("A17", "A17 Pro"),
        expected_touch_points=5,
    ),
    DeviceSignature(
        model_name="iPhone 15",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1179, 2556),
        gpu_hints=("A16",),
        expected_touch_points=5,
    ),
    DeviceSignature(
        model_name="iPhone 14 Pro Max",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1290, 2796),
        gpu_hints=("A16",),
    ),
    DeviceSignature(
        model_name="iPhone 14",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1170, 2532),
        gpu_hints=("A15",),
    ),
    DeviceSignature(
        model_name="iPhone 13 mini",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1080, 2340),
        gpu_hints=("A15",),
    ),
    DeviceSignature(
        model_name="iPhone 12",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1170, 2532),
        gpu_hints=("A14",),
    ),
    DeviceSignature(
        model_name="iPhone SE (3rd gen)",
        expected_pixel_ratio=2.0,
        expected_screen=ScreenSize(750, 1334),
        gpu_hints=("A15",),
    ),
    DeviceSignature(
        model_name="iPhone 11",
        expected_pixel_ratio=2.0,
        expected_screen=ScreenSize(828, 1792),
        gpu_hints=("A13",),
    ),
    # iPad
    DeviceSignature(
        model_name='iPad Pro 12.9"',
        expected_pixel_ratio=2.0,
        expected_screen=ScreenSize(2048, 2732),
        gpu_hints=("M2", "M1", "A12Z"),
        expected_touch_points=5,
    ),
    DeviceSignature(
        model_name='iPad Pro 11"',
        expected_pixel_ratio=2.0,
        expected_screen=ScreenSize(1668, 2388),
        gpu_hints=("M2", "M1", "A12Z"),
    ),
    DeviceSignature(
        model_name="iPad Air",
        expected_pixel_ratio=2.0,
        expected_screen=ScreenSize(1640, 2360),
        gpu_hints=("M1", "A14"),
    ),
    # Android
    DeviceSignature(
        model_name="Samsung Galaxy S23",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1080, 2340),
        gpu_hints=("Adreno (TM) 740",),
    ),
    DeviceSignature(
        model_name="Samsung Galaxy S22",
        expected_pixel_ratio=3.0,
        expected_screen=ScreenSize(1080, 2340),
        gpu_hints=("Adreno (TM) 730", "Xclipse 920"),
    ),
    DeviceSignature(
        model_name="Google Pixel 8",
        expected_pixel_ratio=2.625,
        expected_screen=ScreenSize(1080, 2400),
        gpu_hints=("Mali-G715",),
    ),
    DeviceSignature(
        model_name="Google Pixel 7",
        expected_pixel_ratio=2.625,
        expected_screen=ScreenSize(1080, 2400),
        gpu_hints=("Mali-G710",),
    ),
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _validate(signature: DeviceSignature) -> None:
    name = signature.model_name
    if not name or not name.strip():
        raise CatalogError("Device signature has an empty model name")
    if not signature.expected_pixel_ratio > 0:
        raise CatalogError(f"{name}: pixel ratio must be positive")
    screen = signature.expected_screen
    if screen.width <= 0 or screen.height <= 0:
        raise CatalogError(f"{name}: screen dimensions must be positive")
    if signature.expected_touch_points is not None and signature.expected_touch_points < 0:
        raise CatalogError(f"{name}: touch points must be non-negative")


class DeviceCatalog:
    """Read-only, ordered collection of device signatures."""

    def __init__(self, signatures: Iterable[DeviceSignature]) -> None:
        entries = tuple(signatures)
        if not entries:
            raise CatalogError("Device catalog must contain at least one signature")
        seen: set[str] = set()
        for signature in entries:
            _validate(signature)
            if signature.model_name in seen:
                raise CatalogError(f"Duplicate model name in catalog: {signature.model_name}")
            seen.add(signature.model_name)
        self._signatures = entries

    def __iter__(self) -> Iterator[DeviceSignature]:
        return iter(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)

    def __contains__(self, model_name: object) -> bool:
        return any(s.model_name == model_name for s in self._signatures)

    def __repr__(self) -> str:
        return f"DeviceCatalog({len(self._signatures)} signatures)"

    @property
    def signatures(self) -> tuple[DeviceSignature, ...]:
        return self._signatures

    def get(self, model_name: str) -> DeviceSignature | None:
        for signature in self._signatures:
            if signature.model_name == model_name:
                return signature
        return None

    def first_in_line(self, product_line: str) -> DeviceSignature | None:
        """First declared signature belonging to ``product_line``, if any."""
        for signature in self._signatures:
            if signature.product_line == product_line:
                return signature
        return None

    # -- loading -------------------------------------------------------------

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> DeviceCatalog:
        """Build a catalog from plain mappings (camelCase or snake_case keys)."""
        return cls(_signature_from_record(r) for r in records)

    @classmethod
    def from_json(cls, path: str | Path) -> DeviceCatalog:
        """Load a catalog from a JSON file holding a list of signatures."""
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except OSError as exc:
            raise CatalogError(f"Cannot read device catalog {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Invalid JSON in device catalog {path}: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("signatures", data.get("devices"))
        if not isinstance(data, list):
            raise CatalogError(f"Device catalog {path} must be a JSON list of signatures")
        catalog = cls.from_records(data)
        logger.debug("Loaded %d device signatures from %s", len(catalog), path)
        return catalog


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def _signature_from_record(record: Mapping[str, Any]) -> DeviceSignature:
    if not isinstance(record, Mapping):
        raise CatalogError(f"Device signature must be an object, got {type(record).__name__}")
    name = _pick(record, "modelName", "model_name", "name")
    ratio = _pick(record, "expectedPixelRatio", "expected_pixel_ratio", "dpr")
    screen = _pick(record, "expectedScreen", "expected_screen", "screen")
    hints = _pick(record, "gpuHints", "gpu_hints") or ()
    touch = _pick(record, "expectedTouchPoints", "expected_touch_points", "maxTouchPoints")

    if not isinstance(name, str):
        raise CatalogError(f"Device signature is missing a model name: {dict(record)!r}")
    if not isinstance(screen, Mapping):
        raise CatalogError(f"{name}: expected screen must be an object with width and height")
    if not isinstance(hints, (list, tuple)) or not all(isinstance(h, str) for h in hints):
        raise CatalogError(f"{name}: GPU hints must be a list of strings")
    try:
        return DeviceSignature(
            model_name=name,
            expected_pixel_ratio=float(ratio),
            expected_screen=ScreenSize(int(screen["width"]), int(screen["height"])),
            gpu_hints=tuple(hints),
            expected_touch_points=int(touch) if touch is not None else None,
        )
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise CatalogError(f"{name}: invalid signature field ({exc})") from exc


# ---------------------------------------------------------------------------
# Process-wide default catalog
# ---------------------------------------------------------------------------

REFERENCE_CATALOG = DeviceCatalog(REFERENCE_SIGNATURES)

_default: DeviceCatalog | None = None


def load_default_catalog() -> DeviceCatalog:
    """Build the process-wide catalog from configuration and install it.

    Call once at startup.  Uses the JSON file named by the ``catalog_path``
    setting when one is configured, otherwise the reference signatures.
    Raises :class:`CatalogError` when the configured file is unusable; the
    previously installed catalog is kept in that case.
    """
    global _default
    from ..config import get_settings

    settings = get_settings()
    if settings.catalog_path:
        _default = DeviceCatalog.from_json(settings.catalog_path)
        logger.info("Using device catalog %s", settings.catalog_path)
    else:
        _default = REFERENCE_CATALOG
    return _default


def default_catalog() -> DeviceCatalog:
    """The installed process-wide catalog, or the reference catalog.

    Never reads configuration or files, so it cannot fail.
    """
    return _default if _default is not None else REFERENCE_CATALOG


def reset_default_catalog() -> None:
    global _default
    _default = None
