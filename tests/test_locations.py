"""
출생지 → 지방시 보정 테스트
"""
import pytest

from manse.services.locations import MAJOR_CITIES, Location, find_city, resolve_location


class TestOffsets:

    @pytest.mark.parametrize("case", [
        {"city": "ソウル", "offset": -32},
        {"city": "東京", "offset": 19},
        {"city": "北京", "offset": -14},
        {"city": "ニューヨーク", "offset": 4},
        {"city": "ロンドン", "offset": -1},
    ])
    def test_offset_minutes(self, case):
        location = MAJOR_CITIES[case["city"]]
        assert location.offset_minutes == case["offset"], \
            f"{case['city']}: Expected {case['offset']}, got {location.offset_minutes}"

    def test_utc_offset_from_meridian(self):
        assert MAJOR_CITIES["東京"].utc_offset_hours == 9.0
        assert MAJOR_CITIES["北京"].utc_offset_hours == 8.0
        assert MAJOR_CITIES["ニューヨーク"].utc_offset_hours == -5.0


class TestFindCity:

    @pytest.mark.parametrize("name", ["Seoul", "seoul", "서울", "ソウル", " Seoul "])
    def test_aliases(self, name):
        assert find_city(name).name == "ソウル"

    def test_unknown(self):
        assert find_city("Atlantis") is None


class TestResolveLocation:

    def test_none(self):
        assert resolve_location(None) is None

    def test_location_passthrough(self):
        loc = Location("custom", 127.0, 37.5)
        assert resolve_location(loc) is loc

    def test_mapping(self):
        loc = resolve_location({"longitude": 127.5, "latitude": 36.0})
        assert loc.longitude == 127.5
        assert loc.standard_meridian == 135.0
        assert loc.offset_minutes == -30

    def test_mapping_uses_default_meridian(self):
        loc = resolve_location({"longitude": 116.0}, default_meridian=120.0)
        assert loc.standard_meridian == 120.0
        assert loc.offset_minutes == -16

    @pytest.mark.parametrize("value", [
        "Atlantis",
        {"latitude": 37.0},
        {"longitude": "east"},
        {"longitude": 200.0},
        12345,
    ])
    def test_unresolvable(self, value):
        assert resolve_location(value) is None
