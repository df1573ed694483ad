"""Shared dataclasses for device signature inference."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping


# Lower-cased tokens that identify a vendor product line inside a model name.
PRODUCT_LINES: tuple[str, ...] = ("iphone", "ipad", "galaxy", "pixel")

UNKNOWN_MODEL = "Unknown"


@dataclass(frozen=True)
class ScreenSize:
    width: int
    height: int


@dataclass(frozen=True)
class DeviceSignature:
    """Expected measurable characteristics of a known device model."""

    model_name: str
    expected_pixel_ratio: float
    expected_screen: ScreenSize
    gpu_hints: tuple[str, ...] = ()
    expected_touch_points: int | None = None  # None: touch is not distinguishing

    @property
    def product_line(self) -> str | None:
        name = self.model_name.lower()
        for token in PRODUCT_LINES:
            if token in name:
                return token
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "modelName": self.model_name,
            "expectedPixelRatio": self.expected_pixel_ratio,
            "expectedScreen": {
                "width": self.expected_screen.width,
                "height": self.expected_screen.height,
            },
            "gpuHints": list(self.gpu_hints),
            "expectedTouchPoints": self.expected_touch_points,
        }


# camelCase keys used by browser samples and analytics rows -> field names
_CAMEL_KEYS: dict[str, str] = {
    "screenWidth": "screen_width",
    "screenHeight": "screen_height",
    "pixelRatio": "pixel_ratio",
    "dpr": "pixel_ratio",
    "devicePixelRatio": "pixel_ratio",
    "gpuRenderer": "gpu_renderer",
    "gpuVendor": "gpu_vendor",
    "maxTouchPoints": "max_touch_points",
    "deviceCategory": "device_category",
    "operatingSystem": "operating_system",
    "deviceBrand": "device_brand",
    "deviceModel": "device_model",
    "hardwareConcurrency": "hardware_concurrency",
    "deviceMemory": "device_memory_gb",
}

_INT_FIELDS = frozenset(
    {"screen_width", "screen_height", "max_touch_points", "hardware_concurrency"}
)
_FLOAT_FIELDS = frozenset({"pixel_ratio", "device_memory_gb"})


def _coerce_int(value: object) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number >= 0 else None


def _coerce_float(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if number != number or number <= 0:  # NaN or non-positive
        return None
    return number


def _coerce_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ObservedCharacteristics:
    """Possibly partial measurements and hints for one client.

    Every field is optional; ``None`` means the signal is absent.
    """

    screen_width: int | None = None
    screen_height: int | None = None
    pixel_ratio: float | None = None
    gpu_renderer: str | None = None
    max_touch_points: int | None = None
    device_category: str | None = None
    operating_system: str | None = None
    browser: str | None = None
    device_brand: str | None = None
    device_model: str | None = None
    gpu_vendor: str | None = None
    hardware_concurrency: int | None = None
    device_memory_gb: float | None = None
    platform: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ObservedCharacteristics:
        """Build from a camelCase or snake_case mapping.

        Unknown keys are ignored and malformed values are dropped, so this
        never raises on bad input.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known or values.get(name) is not None:
                continue
            if name in _INT_FIELDS:
                values[name] = _coerce_int(raw)
            elif name in _FLOAT_FIELDS:
                values[name] = _coerce_float(raw)
            else:
                values[name] = _coerce_text(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class DeviceMatch:
    model_name: str
    score: int


@dataclass(frozen=True)
class ClassificationResult:
    detected_model: str
    confidence: int  # relative ranking score in [0, 100], not a probability
    characteristics: ObservedCharacteristics
    top_matches: tuple[DeviceMatch, ...]

    @property
    def is_unknown(self) -> bool:
        return self.detected_model == UNKNOWN_MODEL

    def to_dict(self) -> dict[str, Any]:
        return {
            "detectedModel": self.detected_model,
            "confidence": self.confidence,
            "characteristics": self.characteristics.to_dict(),
            "topMatches": [
                {"device": m.model_name, "score": m.score} for m in self.top_matches
            ],
        }


@dataclass(frozen=True)
class DisplayMetrics:
    width: int
    height: int
    pixel_ratio: float = 1.0
    gpu_renderer: str | None = None
    gpu_vendor: str | None = None
    source: str | None = None  # probe name


@dataclass(frozen=True)
class DetectionReport:
    characteristics: ObservedCharacteristics
    detection: ClassificationResult
    timestamp: str  # ISO-8601, UTC
    diagnostics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "characteristics": self.characteristics.to_dict(),
            "detection": self.detection.to_dict(),
            "timestamp": self.timestamp,
            "diagnostics": list(self.diagnostics),
        }


@dataclass(frozen=True)
class LocalSample:
    """One sample of the local machine, as cached between reports."""

    characteristics: ObservedCharacteristics
    diagnostics: tuple[str, ...] = ()
    sampled_at: float = 0.0  # time.monotonic() when taken
