"""
devsig — device signature inference.

Identifies a physical device model from display metrics, GPU renderer
strings and touch support, degrading to coarse analytics hints (device
category, OS, browser, vendor brand) when measurements are missing.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .inference import (
    UNKNOWN_MODEL,
    CatalogError,
    ClassificationResult,
    DetectionReport,
    DeviceCatalog,
    DeviceMatch,
    DeviceSignature,
    ObservedCharacteristics,
    ScreenSize,
    classify,
    default_catalog,
    detection_report,
    load_default_catalog,
)
from .records import (
    annotate_frame,
    annotate_records,
    estimate_device_type,
    format_device_label,
    from_analytics_record,
)

__all__ = [
    "UNKNOWN_MODEL",
    "CatalogError",
    "ClassificationResult",
    "DetectionReport",
    "DeviceCatalog",
    "DeviceMatch",
    "DeviceSignature",
    "ObservedCharacteristics",
    "ScreenSize",
    "annotate_frame",
    "annotate_records",
    "classify",
    "default_catalog",
    "detection_report",
    "estimate_device_type",
    "format_device_label",
    "from_analytics_record",
    "load_default_catalog",
]
