"""Tests for devsig.inference._scoring — per-signature weighted scoring."""

from __future__ import annotations

import pytest

from devsig.inference._scoring import (
    PLATFORM_AFFINITY_BONUS,
    os_family,
    score_breakdown,
    score_signature,
)
from devsig.inference._types import DeviceSignature, ObservedCharacteristics, ScreenSize

IPHONE_11 = DeviceSignature(
    model_name="iPhone 11",
    expected_pixel_ratio=2.0,
    expected_screen=ScreenSize(828, 1792),
    gpu_hints=("A13",),
)

IPHONE_15_PRO = DeviceSignature(
    model_name="iPhone 15 Pro",
    expected_pixel_ratio=3.0,
    expected_screen=ScreenSize(1179, 2556),
    gpu_hints=("A17", "A17 Pro"),
    expected_touch_points=5,
)

DESKTOP = DeviceSignature(
    model_name="Studio Display",
    expected_pixel_ratio=2.0,
    expected_screen=ScreenSize(5120, 2880),
)


# ---------------------------------------------------------------------------
# Screen tier
# ---------------------------------------------------------------------------


class TestScreenTier:
    def test_exact(self):
        obs = ObservedCharacteristics(screen_width=828, screen_height=1792)
        assert score_breakdown(IPHONE_11, obs).screen == 40

    def test_within_ten_pixels(self):
        obs = ObservedCharacteristics(screen_width=838, screen_height=1782)
        assert score_breakdown(IPHONE_11, obs).screen == 40

    def test_partial_within_fifty_pixels(self):
        obs = ObservedCharacteristics(screen_width=878, screen_height=1792)
        assert score_breakdown(IPHONE_11, obs).screen == 20

    def test_beyond_fifty_pixels(self):
        obs = ObservedCharacteristics(screen_width=879, screen_height=1792)
        assert score_breakdown(IPHONE_11, obs).screen == 0

    def test_one_axis_out_of_tolerance(self):
        obs = ObservedCharacteristics(screen_width=828, screen_height=1900)
        assert score_breakdown(IPHONE_11, obs).screen == 0

    def test_requires_both_dimensions(self):
        obs = ObservedCharacteristics(screen_width=828)
        assert score_breakdown(IPHONE_11, obs).screen is None


# ---------------------------------------------------------------------------
# Pixel ratio tier
# ---------------------------------------------------------------------------


class TestPixelRatioTier:
    def test_full_credit(self):
        obs = ObservedCharacteristics(pixel_ratio=2.05)
        assert score_breakdown(IPHONE_11, obs).pixel_ratio == 30

    def test_partial_credit(self):
        obs = ObservedCharacteristics(pixel_ratio=2.375)
        assert score_breakdown(IPHONE_11, obs).pixel_ratio == 15

    def test_no_credit(self):
        obs = ObservedCharacteristics(pixel_ratio=3.0)
        assert score_breakdown(IPHONE_11, obs).pixel_ratio == 0

    def test_absent(self):
        assert score_breakdown(IPHONE_11, ObservedCharacteristics()).pixel_ratio is None


# ---------------------------------------------------------------------------
# GPU and touch tiers
# ---------------------------------------------------------------------------


class TestGpuTier:
    def test_substring_match(self):
        obs = ObservedCharacteristics(gpu_renderer="Apple A17 Pro GPU")
        assert score_breakdown(IPHONE_15_PRO, obs).gpu == 20

    def test_case_sensitive(self):
        obs = ObservedCharacteristics(gpu_renderer="apple a17 pro gpu")
        assert score_breakdown(IPHONE_15_PRO, obs).gpu == 0

    def test_skipped_without_hints(self):
        obs = ObservedCharacteristics(gpu_renderer="Apple M2")
        assert score_breakdown(DESKTOP, obs).gpu is None


class TestTouchTier:
    def test_exact_match(self):
        obs = ObservedCharacteristics(max_touch_points=5)
        assert score_breakdown(IPHONE_15_PRO, obs).touch == 10

    def test_mismatch(self):
        obs = ObservedCharacteristics(max_touch_points=0)
        assert score_breakdown(IPHONE_15_PRO, obs).touch == 0

    def test_skipped_when_signature_has_no_touch(self):
        obs = ObservedCharacteristics(max_touch_points=5)
        assert score_breakdown(IPHONE_11, obs).touch is None

    def test_boolean_is_not_a_touch_count(self):
        obs = ObservedCharacteristics(max_touch_points=True)  # type: ignore[arg-type]
        breakdown = score_breakdown(IPHONE_15_PRO, obs)
        assert breakdown.touch is None
        assert breakdown.possible == 90


# ---------------------------------------------------------------------------
# Platform-affinity bonus
# ---------------------------------------------------------------------------


class TestPlatformBonus:
    def test_ios_phone(self):
        obs = ObservedCharacteristics(operating_system="iOS")
        assert score_breakdown(IPHONE_11, obs).platform_bonus == PLATFORM_AFFINITY_BONUS
        assert score_signature(IPHONE_11, obs) == 5

    def test_android_does_not_match_iphone(self):
        obs = ObservedCharacteristics(operating_system="Android")
        assert score_signature(IPHONE_11, obs) == 0

    def test_no_product_line(self):
        obs = ObservedCharacteristics(operating_system="iOS")
        assert score_signature(DESKTOP, obs) == 0

    def test_suppressed_by_screen_width(self):
        obs = ObservedCharacteristics(operating_system="iOS", screen_width=100, screen_height=100)
        assert score_breakdown(IPHONE_11, obs).platform_bonus == 0

    def test_suppressed_by_pixel_ratio(self):
        obs = ObservedCharacteristics(operating_system="iOS", pixel_ratio=1.0)
        assert score_breakdown(IPHONE_11, obs).platform_bonus == 0

    def test_added_to_gpu_only_score(self):
        obs = ObservedCharacteristics(operating_system="iOS", gpu_renderer="Adreno")
        assert score_signature(IPHONE_11, obs) == 5


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


class TestTotals:
    def test_perfect_match_without_touch_data(self):
        obs = ObservedCharacteristics(
            screen_width=1179, screen_height=2556, pixel_ratio=3.0, gpu_renderer="A17 Pro"
        )
        assert score_signature(IPHONE_15_PRO, obs) == 100

    def test_perfect_match_with_touch_data(self):
        obs = ObservedCharacteristics(
            screen_width=1179,
            screen_height=2556,
            pixel_ratio=3.0,
            gpu_renderer="A17 Pro",
            max_touch_points=5,
        )
        assert score_signature(IPHONE_15_PRO, obs) == 100

    def test_screen_and_ratio_at_least_seventy(self):
        obs = ObservedCharacteristics(screen_width=838, screen_height=1802, pixel_ratio=2.0)
        assert score_signature(IPHONE_11, obs) >= 70

    def test_gpu_miss_lowers_score(self):
        obs = ObservedCharacteristics(
            screen_width=828, screen_height=1792, pixel_ratio=2.0, gpu_renderer="A14"
        )
        breakdown = score_breakdown(IPHONE_11, obs)
        assert breakdown.earned == 70
        assert breakdown.possible == 90
        assert breakdown.total == 78

    def test_signature_without_hints_is_scored_without_gpu(self):
        obs = ObservedCharacteristics(screen_width=5120, screen_height=2880, pixel_ratio=2.0)
        assert score_breakdown(DESKTOP, obs).possible == 70
        assert score_signature(DESKTOP, obs) == 100

    def test_missing_gpu_observation_lowers_score(self):
        obs = ObservedCharacteristics(screen_width=1179, screen_height=2556, pixel_ratio=3.0)
        assert score_signature(IPHONE_15_PRO, obs) == 78

    def test_gpu_only_observation(self):
        obs = ObservedCharacteristics(gpu_renderer="Apple A17 Pro GPU")
        assert score_signature(IPHONE_15_PRO, obs) == 22

    def test_touch_only_observation(self):
        obs = ObservedCharacteristics(max_touch_points=5)
        breakdown = score_breakdown(IPHONE_15_PRO, obs)
        assert breakdown.possible == 100
        assert breakdown.total == 10

    def test_exact_screen_with_wrong_ratio(self):
        obs = ObservedCharacteristics(screen_width=1179, screen_height=2556, pixel_ratio=1.0)
        assert score_signature(IPHONE_15_PRO, obs) == 44

    def test_empty_observation_scores_zero(self):
        assert score_signature(IPHONE_15_PRO, ObservedCharacteristics()) == 0

    def test_malformed_values_count_as_absent(self):
        obs = ObservedCharacteristics(screen_width="wide", pixel_ratio="x")  # type: ignore[arg-type]
        assert score_signature(IPHONE_11, obs) == 0


# ---------------------------------------------------------------------------
# os_family
# ---------------------------------------------------------------------------


class TestOsFamily:
    @pytest.mark.parametrize(
        "name,family",
        [
            ("iOS", "ios"),
            ("iPadOS", "ios"),
            ("Android", "android"),
            ("Macintosh", "mac"),
            ("Mac OS X", "mac"),
            ("Windows", "windows"),
            ("Linux", "linux"),
            ("Chrome OS", "chromeos"),
            ("Tizen", None),
            (None, None),
        ],
    )
    def test_mapping(self, name, family):
        assert os_family(name) == family
