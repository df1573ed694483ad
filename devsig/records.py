"""
Analytics record adapters.

Turns visitor and page-ranking rows (as returned by a web analytics
provider) into observed characteristics, and annotates them with a
device-model guess::

    from devsig.records import annotate_records

    rows = annotate_records([
        {"deviceCategory": "mobile", "operatingSystem": "iOS", "browser": "Safari"},
    ])
    rows[0]["deviceLabel"]  # "Mobile | iPhone 15 Pro Max | iOS | Safari"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from .inference import (
    UNKNOWN_MODEL,
    ClassificationResult,
    DeviceCatalog,
    ObservedCharacteristics,
    classify,
    default_catalog,
)

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# Values analytics providers use for "no data"
PLACEHOLDER_VALUES = frozenset({"", "n/a", "n/a (desktop)", "(not set)", "(other)", "unknown"})

_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "device_category": ("deviceCategory", "device_category"),
    "operating_system": ("operatingSystem", "operating_system", "os"),
    "browser": ("browser",),
    "device_brand": ("deviceBrand", "device_brand", "mobileDeviceBranding"),
    "device_model": ("deviceModel", "device_model", "mobileDeviceModel"),
}


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if value.lower() in PLACEHOLDER_VALUES:
        return None
    return value


def _lookup(record: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = _clean(record.get(key))
        if value is not None:
            return value
    return None


def from_analytics_record(record: Mapping[str, Any]) -> ObservedCharacteristics:
    """Build coarse characteristics from one analytics row.

    Placeholder values such as ``"N/A (Desktop)"`` or ``"(not set)"`` are
    treated as absent and the device category is lower-cased.
    """
    values = {name: _lookup(record, keys) for name, keys in _FIELD_KEYS.items()}
    if values["device_category"]:
        values["device_category"] = values["device_category"].lower()
    return ObservedCharacteristics(**values)


def _vendor_label(observed: ObservedCharacteristics) -> str | None:
    if not observed.device_brand:
        return None
    if observed.device_model:
        return f"{observed.device_brand} {observed.device_model}"
    return observed.device_brand


def estimate_device_type(
    record: Mapping[str, Any], catalog: DeviceCatalog | None = None
) -> str:
    """Best display string for the device behind ``record``.

    The detected model when one is found, otherwise the vendor-reported
    brand and model, otherwise ``"N/A"``.
    """
    observed = from_analytics_record(record)
    return _device_type(observed, classify(observed, catalog))


def _device_type(observed: ObservedCharacteristics, result: ClassificationResult) -> str:
    if result.detected_model and result.detected_model != UNKNOWN_MODEL:
        return result.detected_model
    return _vendor_label(observed) or NOT_AVAILABLE


def _label(observed: ObservedCharacteristics, device_type: str) -> str:
    category = observed.device_category
    return " | ".join(
        [
            category.capitalize() if category else NOT_AVAILABLE,
            device_type,
            observed.operating_system or NOT_AVAILABLE,
            observed.browser or NOT_AVAILABLE,
        ]
    )


def format_device_label(
    record: Mapping[str, Any], catalog: DeviceCatalog | None = None
) -> str:
    """``"<Category> | <device> | <OS> | <browser>"`` for table display."""
    observed = from_analytics_record(record)
    return _label(observed, _device_type(observed, classify(observed, catalog)))


def annotate_records(
    records: Iterable[Mapping[str, Any]], catalog: DeviceCatalog | None = None
) -> list[dict[str, Any]]:
    """Return copies of ``records`` with device annotations added.

    Adds ``detectedModel``, ``detectionConfidence`` and ``deviceLabel``.
    Each row is classified independently; input rows are not modified.
    """
    if catalog is None:
        catalog = default_catalog()
    annotated: list[dict[str, Any]] = []
    for record in records:
        observed = from_analytics_record(record)
        result = classify(observed, catalog)
        row = dict(record)
        row["detectedModel"] = result.detected_model
        row["detectionConfidence"] = result.confidence
        row["deviceLabel"] = _label(observed, _device_type(observed, result))
        annotated.append(row)
    logger.debug("Annotated %d analytics records", len(annotated))
    return annotated


def annotate_frame(frame: pd.DataFrame, catalog: DeviceCatalog | None = None) -> pd.DataFrame:
    """DataFrame variant of :func:`annotate_records`.

    Returns a copy with ``detected_model``, ``detection_confidence`` and
    ``device_label`` columns.
    """
    import pandas as pd

    if catalog is None:
        catalog = default_catalog()
    out = frame.copy()
    models: list[str] = []
    confidences: list[int] = []
    labels: list[str] = []
    for record in frame.to_dict(orient="records"):
        observed = from_analytics_record(record)
        result = classify(observed, catalog)
        models.append(result.detected_model)
        confidences.append(result.confidence)
        labels.append(_label(observed, _device_type(observed, result)))
    out["detected_model"] = pd.Series(models, index=frame.index, dtype="object")
    out["detection_confidence"] = pd.Series(confidences, index=frame.index, dtype="int64")
    out["device_label"] = pd.Series(labels, index=frame.index, dtype="object")
    return out


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

_SUPPORTED_SUFFIXES = (".csv", ".json", ".parquet")


def _suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in _SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file type {suffix or '(none)'!r}; "
            f"expected one of {', '.join(_SUPPORTED_SUFFIXES)}"
        )
    return suffix


def read_records(path: str | Path) -> pd.DataFrame:
    """Load analytics rows from a CSV, JSON (list of objects) or Parquet file."""
    import pandas as pd

    path = Path(path)
    suffix = _suffix(path)
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    return pd.read_parquet(path, engine="pyarrow")


def write_records(frame: pd.DataFrame, path: str | Path) -> None:
    """Write rows to CSV, JSON or Parquet depending on the file suffix."""
    path = Path(path)
    suffix = _suffix(path)
    if suffix == ".csv":
        frame.to_csv(path, index=False)
    elif suffix == ".json":
        frame.to_json(path, orient="records", indent=2)
    else:
        frame.to_parquet(path, engine="pyarrow", index=False)
