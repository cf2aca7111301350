"""
대운 테스트
"""
from datetime import datetime

import pytest

from manse.services.errors import InvalidInput
from manse.services.ganji import Pillar, stem_of
from manse.services.luck_cycle import Gender, LuckCycleCalculator, parse_gender
from manse.services.solar_terms import SolarTermPeriod

PERIOD = SolarTermPeriod(
    name="立春",
    index=1,
    term_year=2023,
    start=datetime(2023, 2, 4, 11, 42),
    end=datetime(2023, 3, 6, 6, 36),
)
MOMENT = datetime(2023, 2, 10, 10, 42)


class TestParseGender:

    @pytest.mark.parametrize("value", ["M", "m", "male", "Male", "남", "남성", Gender.MALE])
    def test_male(self, value):
        assert parse_gender(value) is Gender.MALE

    @pytest.mark.parametrize("value", ["F", "female", "여", "여성"])
    def test_female(self, value):
        assert parse_gender(value) is Gender.FEMALE

    def test_none(self):
        assert parse_gender(None) is None

    def test_unknown(self):
        with pytest.raises(InvalidInput):
            parse_gender("X")


class TestDirection:
    """양남음녀 순행, 음남양녀 역행"""

    @pytest.mark.parametrize("case", [
        {"stem": "甲", "gender": Gender.MALE, "direction": "forward"},
        {"stem": "甲", "gender": Gender.FEMALE, "direction": "backward"},
        {"stem": "癸", "gender": Gender.MALE, "direction": "backward"},
        {"stem": "癸", "gender": Gender.FEMALE, "direction": "forward"},
    ])
    def test_direction(self, case):
        result = LuckCycleCalculator.direction_of(stem_of(case["stem"]), case["gender"])
        assert result == case["direction"]


class TestCompute:

    def test_forward(self):
        luck = LuckCycleCalculator().compute(
            Pillar.parse("甲寅"), stem_of("甲"), Gender.MALE, MOMENT, PERIOD
        )
        assert luck.direction == "forward"
        assert luck.start_age == 8
        assert [p.pillar.hanja for p in luck.pillars[:3]] == ["乙卯", "丙辰", "丁巳"]
        assert [p.start_age for p in luck.pillars[:3]] == [8, 18, 28]
        assert len(luck.pillars) == 10
        assert not luck.approximate

    def test_backward(self):
        luck = LuckCycleCalculator().compute(
            Pillar.parse("甲寅"), stem_of("癸"), Gender.MALE, MOMENT, PERIOD
        )
        assert luck.direction == "backward"
        assert luck.start_age == 2
        assert [p.pillar.hanja for p in luck.pillars[:3]] == ["癸丑", "壬子", "辛亥"]

    def test_minimum_start_age(self):
        moment = datetime(2023, 3, 6, 1, 0)
        assert LuckCycleCalculator.start_age_of(moment, PERIOD, "forward") == 1

    def test_unknown_bounds(self):
        period = SolarTermPeriod(name="驚蟄", index=2, term_year=2023)
        luck = LuckCycleCalculator(count=3).compute(
            Pillar.parse("乙卯"), stem_of("癸"), Gender.FEMALE, MOMENT, period
        )
        assert luck.start_age is None
        assert luck.approximate
        assert all(p.start_age is None for p in luck.pillars)
        assert len(luck.pillars) == 3

    def test_no_gender(self):
        assert LuckCycleCalculator().compute(
            Pillar.parse("甲寅"), stem_of("甲"), None, MOMENT, PERIOD
        ) is None
