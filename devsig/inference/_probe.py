"""Local environment sampling: display probes, registry and psutil metrics."""

from __future__ import annotations

import abc
import logging
import sys

from ._types import DisplayMetrics, ObservedCharacteristics

logger = logging.getLogger(__name__)


class DisplayProbe(abc.ABC):
    """Base class for platform-specific display metric probes."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        if self._timeout is None:
            from ..config import get_settings

            self._timeout = get_settings().probe_timeout
        return self._timeout

    @property
    @abc.abstractmethod
    def name(self) -> str: ...

    @abc.abstractmethod
    def check_availability(self) -> bool: ...

    @abc.abstractmethod
    def probe(self) -> DisplayMetrics | None: ...


class DisplayProbeRegistry:
    """Display probes keyed by name, tried in registration order."""

    def __init__(self) -> None:
        self._by_name: dict[str, DisplayProbe] = {}

    def register(self, probe: DisplayProbe) -> None:
        """Add ``probe`` unless one with the same name is already registered."""
        self._by_name.setdefault(probe.name, probe)

    @property
    def probes(self) -> list[DisplayProbe]:
        return list(self._by_name.values())

    def probe_best(self) -> tuple[DisplayMetrics | None, list[str]]:
        """Metrics from the first probe that yields any, plus why earlier ones did not."""
        diagnostics: list[str] = []
        for probe in self._by_name.values():
            metrics, reason = _run_probe(probe)
            if metrics is not None:
                return metrics, diagnostics
            diagnostics.append(f"{probe.name}: {reason}")
        return None, diagnostics


def _run_probe(probe: DisplayProbe) -> tuple[DisplayMetrics | None, str]:
    try:
        if not probe.check_availability():
            return None, "not available"
        metrics = probe.probe()
    except Exception as exc:
        logger.warning("Display probe %s failed: %s", probe.name, exc)
        return None, f"probe failed ({exc})"
    if metrics is None:
        return None, "available but no display detected"
    return metrics, ""


_registry: DisplayProbeRegistry | None = None


def get_probe_registry() -> DisplayProbeRegistry:
    """Process-wide registry holding the platform display probes."""
    global _registry
    if _registry is None:
        from ._displays import MacDisplayProbe, XrandrDisplayProbe

        registry = DisplayProbeRegistry()
        for probe in (MacDisplayProbe(), XrandrDisplayProbe()):
            registry.register(probe)
        _registry = registry
    return _registry


def reset_probe_registry() -> None:
    global _registry
    _registry = None


def sample_local_characteristics(
    registry: DisplayProbeRegistry | None = None,
) -> tuple[ObservedCharacteristics, list[str]]:
    """Sample this machine's display, GPU, CPU and memory characteristics.

    Display metrics come from the first available probe; CPU count and
    memory from psutil.  Missing pieces are left absent and explained in
    the returned diagnostics.
    """
    import psutil

    if registry is None:
        registry = get_probe_registry()
    display, diagnostics = registry.probe_best()

    concurrency = psutil.cpu_count(logical=True) or None
    try:
        memory_gb: float | None = round(psutil.virtual_memory().total / (1024**3), 1)
    except (AttributeError, OSError) as exc:
        diagnostics.append(f"psutil: memory unavailable ({exc})")
        memory_gb = None

    characteristics = ObservedCharacteristics(
        screen_width=display.width if display else None,
        screen_height=display.height if display else None,
        pixel_ratio=display.pixel_ratio if display else None,
        gpu_renderer=display.gpu_renderer if display else None,
        gpu_vendor=display.gpu_vendor if display else None,
        max_touch_points=None,
        device_category="desktop",
        hardware_concurrency=concurrency,
        device_memory_gb=memory_gb,
        platform=sys.platform,
        operating_system=_os_name(sys.platform),
    )
    if display is None:
        diagnostics.append("display: no probe produced metrics")
    return characteristics, diagnostics


def _os_name(platform: str) -> str | None:
    if platform == "darwin":
        return "Macintosh"
    if platform.startswith("win"):
        return "Windows"
    if platform.startswith("linux"):
        return "Linux"
    return None
