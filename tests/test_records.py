"""Tests for devsig.records — analytics record adapters."""

from __future__ import annotations

import pandas as pd
import pytest

from devsig.inference._catalog import REFERENCE_SIGNATURES, DeviceCatalog
from devsig.records import (
    annotate_frame,
    annotate_records,
    estimate_device_type,
    format_device_label,
    from_analytics_record,
    read_records,
    write_records,
)


@pytest.fixture
def catalog() -> DeviceCatalog:
    return DeviceCatalog(REFERENCE_SIGNATURES)


_VISITORS = [
    {
        "date": "20240301",
        "deviceCategory": "mobile",
        "operatingSystem": "iOS",
        "browser": "Safari",
        "deviceBrand": "Apple",
        "deviceModel": "iPhone",
    },
    {
        "date": "20240301",
        "deviceCategory": "desktop",
        "operatingSystem": "Windows",
        "browser": "Chrome",
        "deviceBrand": "N/A (Desktop)",
        "deviceModel": "N/A (Desktop)",
    },
    {
        "date": "20240302",
        "deviceCategory": "tablet",
        "operatingSystem": "Android",
        "browser": "Chrome",
        "deviceBrand": "Lenovo",
        "deviceModel": "Tab M10",
    },
    {
        "date": "20240302",
        "deviceCategory": "(not set)",
        "operatingSystem": "",
        "browser": "N/A",
    },
]


# ---------------------------------------------------------------------------
# from_analytics_record
# ---------------------------------------------------------------------------


class TestFromAnalyticsRecord:
    def test_camel_case_row(self):
        observed = from_analytics_record(_VISITORS[0])
        assert observed.device_category == "mobile"
        assert observed.operating_system == "iOS"
        assert observed.browser == "Safari"
        assert observed.device_brand == "Apple"
        assert observed.screen_width is None

    def test_placeholders_are_absent(self):
        observed = from_analytics_record(_VISITORS[1])
        assert observed.device_brand is None
        assert observed.device_model is None

    def test_category_lower_cased(self):
        observed = from_analytics_record({"device_category": "Desktop"})
        assert observed.device_category == "desktop"

    def test_empty_and_not_set(self):
        observed = from_analytics_record(_VISITORS[3])
        assert observed.to_dict() == {}

    def test_non_string_values_ignored(self):
        observed = from_analytics_record({"deviceCategory": float("nan"), "browser": 3})
        assert observed.device_category is None
        assert observed.browser is None


# ---------------------------------------------------------------------------
# estimate_device_type / format_device_label
# ---------------------------------------------------------------------------


class TestDeviceLabels:
    def test_detected_model(self, catalog):
        assert estimate_device_type(_VISITORS[0], catalog) == "iPhone 15 Pro Max"

    def test_generic_desktop_label(self, catalog):
        assert estimate_device_type(_VISITORS[1], catalog) == "Windows PC"

    def test_vendor_fallback_when_unknown(self, catalog):
        assert estimate_device_type(_VISITORS[2], catalog) == "Lenovo Tab M10"

    def test_brand_only_fallback(self, catalog):
        record = {"deviceCategory": "tablet", "deviceBrand": "Amazon"}
        assert estimate_device_type(record, catalog) == "Amazon"

    def test_not_available(self, catalog):
        assert estimate_device_type(_VISITORS[3], catalog) == "N/A"

    def test_format_label(self, catalog):
        assert format_device_label(_VISITORS[0], catalog) == (
            "Mobile | iPhone 15 Pro Max | iOS | Safari"
        )
        assert format_device_label(_VISITORS[1], catalog) == (
            "Desktop | Windows PC | Windows | Chrome"
        )
        assert format_device_label(_VISITORS[3], catalog) == "N/A | N/A | N/A | N/A"


# ---------------------------------------------------------------------------
# annotate_records / annotate_frame
# ---------------------------------------------------------------------------


class TestAnnotate:
    def test_annotate_records(self, catalog):
        rows = annotate_records(_VISITORS, catalog)
        assert [r["detectedModel"] for r in rows] == [
            "iPhone 15 Pro Max",
            "Windows PC",
            "Unknown",
            "Unknown",
        ]
        assert [r["detectionConfidence"] for r in rows] == [15, 15, 5, 0]
        assert rows[2]["deviceLabel"] == "Tablet | Lenovo Tab M10 | Android | Chrome"
        assert rows[0]["date"] == "20240301"

    def test_inputs_not_mutated(self, catalog):
        original = dict(_VISITORS[0])
        annotate_records([original], catalog)
        assert "detectedModel" not in original

    def test_order_independent(self, catalog):
        forward = annotate_records(_VISITORS, catalog)
        backward = annotate_records(list(reversed(_VISITORS)), catalog)
        assert forward == list(reversed(backward))

    def test_annotate_frame(self, catalog):
        frame = pd.DataFrame(_VISITORS)
        out = annotate_frame(frame, catalog)
        assert list(out["detected_model"]) == [
            "iPhone 15 Pro Max",
            "Windows PC",
            "Unknown",
            "Unknown",
        ]
        assert out["detection_confidence"].dtype == "int64"
        assert out["device_label"].iloc[1] == "Desktop | Windows PC | Windows | Chrome"
        assert "detected_model" not in frame.columns

    def test_annotate_frame_with_missing_values(self, catalog):
        frame = pd.DataFrame(
            [{"deviceCategory": "mobile", "operatingSystem": None, "deviceBrand": "Google"}]
        )
        out = annotate_frame(frame, catalog)
        assert out["detected_model"].iloc[0] == "Google Pixel 8"


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


class TestRecordFiles:
    def test_csv_round_trip(self, tmp_path, catalog):
        src = tmp_path / "visitors.csv"
        pd.DataFrame(_VISITORS).to_csv(src, index=False)
        frame = read_records(src)
        assert frame["deviceBrand"].iloc[3] == ""
        out = tmp_path / "out.csv"
        write_records(annotate_frame(frame, catalog), out)
        assert "detected_model" in pd.read_csv(out).columns

    def test_json_records(self, tmp_path):
        src = tmp_path / "visitors.json"
        pd.DataFrame(_VISITORS).to_json(src, orient="records")
        frame = read_records(src)
        assert len(frame) == 4
        assert frame["operatingSystem"].iloc[0] == "iOS"

    def test_parquet(self, tmp_path, catalog):
        out = tmp_path / "visitors.parquet"
        write_records(annotate_frame(pd.DataFrame(_VISITORS[:2]), catalog), out)
        frame = read_records(out)
        assert list(frame["detected_model"]) == ["iPhone 15 Pro Max", "Windows PC"]

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported file type"):
            read_records(tmp_path / "visitors.xlsx")
