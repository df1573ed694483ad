"""Weighted partial-credit scoring of one signature against observations."""

from __future__ import annotations

from dataclasses import dataclass

from ._types import DeviceSignature, ObservedCharacteristics

# Tier weights (points) and tolerances
SCREEN_WEIGHT = 40
SCREEN_PARTIAL = 20
SCREEN_TOLERANCE_PX = 10
SCREEN_PARTIAL_TOLERANCE_PX = 50

PIXEL_RATIO_WEIGHT = 30
PIXEL_RATIO_PARTIAL = 15
PIXEL_RATIO_TOLERANCE = 0.1
PIXEL_RATIO_PARTIAL_TOLERANCE = 0.5

GPU_WEIGHT = 20
TOUCH_WEIGHT = 10
PLATFORM_AFFINITY_BONUS = 5

MAX_SCORE = 100

# Accept bars and the fixed confidence of a coarse fallback label
STRONG_SIGNAL_THRESHOLD = 50
WEAK_SIGNAL_THRESHOLD = 20
FALLBACK_CONFIDENCE = 15

# OS family -> substrings of the lower-cased OS name (checked in order)
_OS_FAMILIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("ios", ("ios", "ipados", "iphone os")),
    ("chromeos", ("chrome os", "chromeos", "cros")),
    ("android", ("android",)),
    ("mac", ("mac", "os x", "darwin")),
    ("windows", ("windows", "win32")),
    ("linux", ("linux", "ubuntu", "fedora", "debian")),
)

# Product lines consistent with each OS family
PRODUCT_LINES_BY_OS: dict[str, tuple[str, ...]] = {
    "ios": ("iphone", "ipad"),
    "android": ("galaxy", "pixel"),
}


def os_family(operating_system: str | None) -> str | None:
    """Map a free-form OS name (``"iOS"``, ``"Mac OS X"``...) to a family."""
    if not isinstance(operating_system, str):
        return None
    name = operating_system.lower()
    for family, tokens in _OS_FAMILIES:
        if any(token in name for token in tokens):
            return family
    return None


def _present(value: object) -> bool:
    """Positive number; zero, negatives, bools and non-numbers count as absent."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def has_screen(observed: ObservedCharacteristics) -> bool:
    return _present(observed.screen_width) and _present(observed.screen_height)


def has_strong_signal(observed: ObservedCharacteristics) -> bool:
    """Screen width and pixel ratio both present."""
    return _present(observed.screen_width) and _present(observed.pixel_ratio)


@dataclass(frozen=True)
class ScoreBreakdown:
    screen: int | None = None  # None: tier not evaluated
    pixel_ratio: int | None = None
    gpu: int | None = None
    touch: int | None = None
    platform_bonus: int = 0
    possible: int = MAX_SCORE

    @property
    def earned(self) -> int:
        return sum(p for p in (self.screen, self.pixel_ratio, self.gpu, self.touch) if p)

    @property
    def total(self) -> int:
        """Measurement points out of ``possible``, as a percentage, plus the bonus."""
        measured = (self.earned * MAX_SCORE * 2 + self.possible) // (self.possible * 2)
        return max(0, min(MAX_SCORE, measured + self.platform_bonus))


def possible_points(signature: DeviceSignature, touch_scored: bool) -> int:
    """Tier weight ``signature`` can earn.

    Screen and pixel ratio always count, observed or not.  GPU counts when
    the signature has hints, touch only when the touch tier was scored.
    """
    weight = SCREEN_WEIGHT + PIXEL_RATIO_WEIGHT
    if signature.gpu_hints:
        weight += GPU_WEIGHT
    if touch_scored:
        weight += TOUCH_WEIGHT
    return weight


def _screen_points(signature: DeviceSignature, observed: ObservedCharacteristics) -> int | None:
    if not has_screen(observed):
        return None
    dw = abs(signature.expected_screen.width - observed.screen_width)  # type: ignore[operator]
    dh = abs(signature.expected_screen.height - observed.screen_height)  # type: ignore[operator]
    if dw <= SCREEN_TOLERANCE_PX and dh <= SCREEN_TOLERANCE_PX:
        return SCREEN_WEIGHT
    if dw <= SCREEN_PARTIAL_TOLERANCE_PX and dh <= SCREEN_PARTIAL_TOLERANCE_PX:
        return SCREEN_PARTIAL
    return 0


def _pixel_ratio_points(
    signature: DeviceSignature, observed: ObservedCharacteristics
) -> int | None:
    if not _present(observed.pixel_ratio):
        return None
    diff = abs(signature.expected_pixel_ratio - observed.pixel_ratio)
    if diff < PIXEL_RATIO_TOLERANCE:
        return PIXEL_RATIO_WEIGHT
    if diff < PIXEL_RATIO_PARTIAL_TOLERANCE:
        return PIXEL_RATIO_PARTIAL
    return 0


def _gpu_points(signature: DeviceSignature, observed: ObservedCharacteristics) -> int | None:
    renderer = observed.gpu_renderer
    if not signature.gpu_hints or not isinstance(renderer, str) or not renderer:
        return None
    return GPU_WEIGHT if any(hint in renderer for hint in signature.gpu_hints) else 0


def _touch_points(signature: DeviceSignature, observed: ObservedCharacteristics) -> int | None:
    touch = observed.max_touch_points
    if signature.expected_touch_points is None:
        return None
    if not isinstance(touch, int) or isinstance(touch, bool):
        return None
    return TOUCH_WEIGHT if touch == signature.expected_touch_points else 0


def _platform_bonus(signature: DeviceSignature, observed: ObservedCharacteristics) -> int:
    # Coarse-only input: no screen width and no pixel ratio.
    if _present(observed.screen_width) or _present(observed.pixel_ratio):
        return 0
    family = os_family(observed.operating_system)
    if family is None:
        return 0
    if signature.product_line in PRODUCT_LINES_BY_OS.get(family, ()):
        return PLATFORM_AFFINITY_BONUS
    return 0


def score_breakdown(
    signature: DeviceSignature, observed: ObservedCharacteristics
) -> ScoreBreakdown:
    """Per-tier points for ``signature``; ``None`` marks a skipped tier."""
    touch = _touch_points(signature, observed)
    return ScoreBreakdown(
        screen=_screen_points(signature, observed),
        pixel_ratio=_pixel_ratio_points(signature, observed),
        gpu=_gpu_points(signature, observed),
        touch=touch,
        platform_bonus=_platform_bonus(signature, observed),
        possible=possible_points(signature, touch_scored=touch is not None),
    )


def score_signature(signature: DeviceSignature, observed: ObservedCharacteristics) -> int:
    """Score in ``[0, 100]`` for how well ``observed`` fits ``signature``."""
    return score_breakdown(signature, observed).total
