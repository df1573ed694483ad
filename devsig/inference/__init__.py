"""Device signature inference for devsig.

Scores observed display, GPU and touch measurements (or coarse analytics
hints) against a static catalog of known devices.
"""

from __future__ import annotations

from ._catalog import (
    REFERENCE_CATALOG,
    REFERENCE_SIGNATURES,
    CatalogError,
    DeviceCatalog,
    default_catalog,
    load_default_catalog,
    reset_default_catalog,
)
from ._engine import classify, rank
from ._probe import sample_local_characteristics
from ._report import detection_report
from ._scoring import os_family, score_breakdown, score_signature
from ._types import (
    UNKNOWN_MODEL,
    ClassificationResult,
    DetectionReport,
    DeviceMatch,
    DeviceSignature,
    DisplayMetrics,
    LocalSample,
    ObservedCharacteristics,
    ScreenSize,
)

__all__ = [
    "REFERENCE_CATALOG",
    "REFERENCE_SIGNATURES",
    "UNKNOWN_MODEL",
    "CatalogError",
    "ClassificationResult",
    "DetectionReport",
    "DeviceCatalog",
    "DeviceMatch",
    "DeviceSignature",
    "DisplayMetrics",
    "LocalSample",
    "ObservedCharacteristics",
    "ScreenSize",
    "classify",
    "default_catalog",
    "detection_report",
    "load_default_catalog",
    "os_family",
    "rank",
    "reset_default_catalog",
    "sample_local_characteristics",
    "score_breakdown",
    "score_signature",
]
