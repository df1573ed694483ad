"""Device model classification with a graceful fallback chain."""

from __future__ import annotations

import logging

from ._catalog import DeviceCatalog, default_catalog
from ._scoring import (
    FALLBACK_CONFIDENCE,
    STRONG_SIGNAL_THRESHOLD,
    WEAK_SIGNAL_THRESHOLD,
    has_strong_signal,
    os_family,
    score_signature,
)
from ._types import (
    UNKNOWN_MODEL,
    ClassificationResult,
    DeviceMatch,
    DeviceSignature,
    ObservedCharacteristics,
)

logger = logging.getLogger(__name__)

TOP_MATCH_COUNT = 3

# Mobile OS family -> the product line its phones belong to.  Android has
# several vendors, so it is resolved through the brand hint instead.
_MOBILE_OS_LINES: dict[str, str] = {
    "ios": "iphone",
}

# Lower-cased brand substring -> product line
_BRAND_LINES: tuple[tuple[str, str], ...] = (
    ("samsung", "galaxy"),
    ("google", "pixel"),
    ("apple", "iphone"),
)

# Desktop OS family -> generic display label
_DESKTOP_LABELS: dict[str, str] = {
    "mac": "Mac",
    "windows": "Windows PC",
    "linux": "Linux PC",
    "chromeos": "Chromebook",
}
DESKTOP_LABEL = "Desktop"


def rank(observed: ObservedCharacteristics, catalog: DeviceCatalog) -> list[DeviceMatch]:
    """Score every signature; best first, ties in catalog order."""
    matches = [DeviceMatch(s.model_name, score_signature(s, observed)) for s in catalog]
    # list.sort is stable, so equal scores keep declaration order
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def _category(observed: ObservedCharacteristics) -> str | None:
    category = observed.device_category
    return category.strip().lower() if isinstance(category, str) else None


def _brand_line(brand: str | None) -> str | None:
    if not isinstance(brand, str):
        return None
    brand = brand.lower()
    for token, line in _BRAND_LINES:
        if token in brand:
            return line
    return None


def _coarse_fallback(
    observed: ObservedCharacteristics, catalog: DeviceCatalog
) -> tuple[str, str] | None:
    """Return ``(label, branch)`` for a low-confidence guess, or None."""
    category = _category(observed)
    family = os_family(observed.operating_system)

    if category == "mobile":
        line = _MOBILE_OS_LINES.get(family) if family else None
        entry: DeviceSignature | None = catalog.first_in_line(line) if line else None
        if entry is not None:
            return entry.model_name, "mobile-os"
        line = _brand_line(observed.device_brand)
        entry = catalog.first_in_line(line) if line else None
        if entry is not None:
            return entry.model_name, "mobile-brand"
        return None

    if category == "desktop":
        return _DESKTOP_LABELS.get(family or "", DESKTOP_LABEL), "desktop"

    return None


def classify(
    observed: ObservedCharacteristics | None = None,
    catalog: DeviceCatalog | None = None,
) -> ClassificationResult:
    """Infer the device model behind ``observed``.

    Never raises: missing signal lowers the confidence, and inputs that fit
    nothing come back as ``"Unknown"`` with the best raw score.

    Parameters
    ----------
    observed:
        Measurements and hints for one client.  ``None`` is treated as an
        empty observation.
    catalog:
        Signatures to score against.  Defaults to the process-wide catalog.

    Returns
    -------
    ClassificationResult
        ``detected_model`` is a catalog model name, a generic desktop label
        or ``"Unknown"``; ``top_matches`` always holds the best-ranked
        entries.
    """
    if observed is None:
        observed = ObservedCharacteristics()
    if catalog is None:
        catalog = default_catalog()

    ranking = rank(observed, catalog)
    top = tuple(ranking[:TOP_MATCH_COUNT])
    best = top[0]

    def _result(model: str, confidence: int) -> ClassificationResult:
        return ClassificationResult(
            detected_model=model,
            confidence=confidence,
            characteristics=observed,  # type: ignore[arg-type]
            top_matches=top,
        )

    if has_strong_signal(observed):
        if best.score >= STRONG_SIGNAL_THRESHOLD:
            logger.debug("Strong match %s (%d)", best.model_name, best.score)
            return _result(best.model_name, best.score)
        logger.debug("No strong match; best was %s (%d)", best.model_name, best.score)
        return _result(UNKNOWN_MODEL, best.score)

    if best.score >= WEAK_SIGNAL_THRESHOLD:
        logger.debug("Weak-signal match %s (%d)", best.model_name, best.score)
        return _result(best.model_name, best.score)

    fallback = _coarse_fallback(observed, catalog)
    if fallback is not None:
        label, branch = fallback
        logger.debug("Coarse fallback (%s): %s", branch, label)
        return _result(label, FALLBACK_CONFIDENCE)

    return _result(UNKNOWN_MODEL, best.score)
