"""Detection report for the local machine, with sample caching."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone

from ._catalog import DeviceCatalog, default_catalog
from ._engine import classify
from ._probe import sample_local_characteristics
from ._types import ClassificationResult, DetectionReport, LocalSample, ObservedCharacteristics

logger = logging.getLogger(__name__)


class LocalSampler:
    CACHE_TTL: float = 300.0  # 5 minutes

    def __init__(self) -> None:
        self._last: LocalSample | None = None

    def sample(self, force: bool = False) -> LocalSample:
        """Return the cached sample while it is fresh, otherwise take a new one."""
        now = time.monotonic()
        last = self._last
        if not force and last is not None and now - last.sampled_at < self.CACHE_TTL:
            return last

        characteristics, diagnostics = sample_local_characteristics()
        self._last = LocalSample(characteristics, tuple(diagnostics), now)
        logger.debug("Sampled local characteristics: %s", characteristics.to_dict())
        return self._last


def _classify_local(
    characteristics: ObservedCharacteristics, catalog: DeviceCatalog
) -> ClassificationResult:
    """Classify a local sample; desktops are never offered handheld models.

    Phone and tablet product lines are left out of a desktop's ranking.  When
    nothing else is in the catalog the desktop gets its generic label.
    """
    if characteristics.device_category != "desktop":
        return classify(characteristics, catalog)

    desktops = [s for s in catalog if s.product_line is None]
    if desktops:
        return classify(characteristics, DeviceCatalog(desktops))

    coarse = replace(
        characteristics,
        screen_width=None,
        screen_height=None,
        pixel_ratio=None,
        gpu_renderer=None,
        max_touch_points=None,
    )
    return replace(classify(coarse, catalog), characteristics=characteristics)


_sampler: LocalSampler | None = None


def detection_report(
    force: bool = False, catalog: DeviceCatalog | None = None
) -> DetectionReport:
    """One-liner API: sample this machine and classify it."""
    global _sampler
    if _sampler is None:
        _sampler = LocalSampler()
    if catalog is None:
        catalog = default_catalog()
    sample = _sampler.sample(force=force)
    detection = _classify_local(sample.characteristics, catalog)
    return DetectionReport(
        characteristics=sample.characteristics,
        detection=detection,
        timestamp=datetime.now(timezone.utc).isoformat(),
        diagnostics=list(sample.diagnostics),
    )
