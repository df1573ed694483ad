"""Platform display probes (macOS system_profiler, X11 xrandr/glxinfo)."""

from __future__ import annotations

import json
import logging
import os
import re
import shutil
import subprocess
import sys

from ._probe import DisplayProbe
from ._types import DisplayMetrics

logger = logging.getLogger(__name__)

# "3024 x 1964", "1512 x 982 @ 120.00Hz", "current 1920 x 1080"
_DIMENSIONS = re.compile(r"(\d+)\s*x\s*(\d+)")
_XRANDR_CURRENT = re.compile(r"current\s+(\d+)\s*x\s*(\d+)")


def _parse_dimensions(text: object) -> tuple[int, int] | None:
    if not isinstance(text, str):
        return None
    match = _DIMENSIONS.search(text)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


class MacDisplayProbe(DisplayProbe):
    """Main display metrics from ``system_profiler SPDisplaysDataType``."""

    @property
    def name(self) -> str:
        return "macos"

    def check_availability(self) -> bool:
        return sys.platform == "darwin"

    def probe(self) -> DisplayMetrics | None:
        result = subprocess.run(
            ["system_profiler", "SPDisplaysDataType", "-json"],
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        if result.returncode != 0 or not result.stdout.strip():
            return None
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.warning("system_profiler returned invalid JSON")
            return None
        return self._parse(data)

    def _parse(self, data: dict) -> DisplayMetrics | None:
        for gpu in data.get("SPDisplaysDataType", []):
            screens = gpu.get("spdisplays_ndrvs") or []
            if not screens:
                continue
            main = next(
                (s for s in screens if s.get("spdisplays_main") == "spdisplays_yes"),
                screens[0],
            )
            pixels = _parse_dimensions(main.get("_spdisplays_pixels"))
            points = _parse_dimensions(main.get("_spdisplays_resolution"))
            if pixels is None:
                continue
            ratio = round(pixels[0] / points[0], 3) if points and points[0] else 1.0
            vendor = gpu.get("spdisplays_vendor", "")
            if isinstance(vendor, str) and vendor.startswith("sppci_vendor_"):
                vendor = vendor[len("sppci_vendor_"):]
            return DisplayMetrics(
                width=pixels[0],
                height=pixels[1],
                pixel_ratio=ratio,
                gpu_renderer=gpu.get("sppci_model"),
                gpu_vendor=vendor or None,
                source=self.name,
            )
        return None


class XrandrDisplayProbe(DisplayProbe):
    """X11 screen size from ``xrandr``; GPU renderer from ``glxinfo`` if present."""

    @property
    def name(self) -> str:
        return "xrandr"

    def check_availability(self) -> bool:
        return (
            sys.platform.startswith("linux")
            and bool(os.environ.get("DISPLAY"))
            and shutil.which("xrandr") is not None
        )

    def probe(self) -> DisplayMetrics | None:
        result = subprocess.run(
            ["xrandr", "--current"],
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            return None
        match = _XRANDR_CURRENT.search(result.stdout)
        if not match:
            return None
        renderer, vendor = self._gl_strings()
        return DisplayMetrics(
            width=int(match.group(1)),
            height=int(match.group(2)),
            pixel_ratio=1.0,
            gpu_renderer=renderer,
            gpu_vendor=vendor,
            source=self.name,
        )

    def _gl_strings(self) -> tuple[str | None, str | None]:
        if shutil.which("glxinfo") is None:
            return None, None
        try:
            result = subprocess.run(
                ["glxinfo", "-B"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("glxinfo failed: %s", exc)
            return None, None
        renderer = vendor = None
        for line in result.stdout.splitlines():
            key, _, value = line.partition(":")
            key = key.strip()
            if key == "OpenGL renderer string":
                renderer = value.strip() or None
            elif key == "OpenGL vendor string":
                vendor = value.strip() or None
        return renderer, vendor
