"""
십이운성 테스트
"""
import pytest

from manse.services.ganji import BRANCHES, STEMS, Pillar, branch_of, stem_of
from manse.services.twelve_fortune import FORTUNE_KOREAN, FORTUNE_SEQUENCE, TwelveFortuneCalculator


class TestFortuneOf:

    @pytest.mark.parametrize("case", [
        {"stem": "甲", "branch": "亥", "fortune": "長生"},
        {"stem": "甲", "branch": "卯", "fortune": "帝旺"},
        {"stem": "甲", "branch": "午", "fortune": "死"},
        {"stem": "乙", "branch": "午", "fortune": "長生"},
        {"stem": "乙", "branch": "巳", "fortune": "沐浴"},
        {"stem": "乙", "branch": "未", "fortune": "養"},
        {"stem": "丙", "branch": "午", "fortune": "帝旺"},
        {"stem": "庚", "branch": "巳", "fortune": "長生"},
        {"stem": "辛", "branch": "子", "fortune": "長生"},
        {"stem": "癸", "branch": "卯", "fortune": "長生"},
        {"stem": "癸", "branch": "子", "fortune": "臨官"},
    ])
    def test_table(self, case):
        result = TwelveFortuneCalculator.fortune_of(stem_of(case["stem"]), branch_of(case["branch"]))
        assert result == case["fortune"], \
            f"{case['stem']}-{case['branch']}: Expected {case['fortune']}, got {result}"

    def test_each_stem_covers_all_stages(self):
        for stem in STEMS:
            stages = {TwelveFortuneCalculator.fortune_of(stem, b) for b in BRANCHES}
            assert stages == set(FORTUNE_SEQUENCE)

    def test_korean_names(self):
        assert set(FORTUNE_KOREAN) == set(FORTUNE_SEQUENCE)


class TestCalculate:

    def test_pillars(self):
        pillars = {
            "year": Pillar.parse("癸卯"),
            "month": Pillar.parse("壬戌"),
            "day": Pillar.parse("丙午"),
            "hour": Pillar.parse("甲午"),
        }
        assert TwelveFortuneCalculator.calculate(pillars) == {
            "year": "沐浴", "month": "墓", "day": "帝旺", "hour": "帝旺",
        }

    def test_missing_hour(self):
        pillars = {
            "year": Pillar.parse("己酉"),
            "month": Pillar.parse("丙子"),
            "day": Pillar.parse("辛巳"),
            "hour": None,
        }
        assert TwelveFortuneCalculator.calculate(pillars) == {
            "year": "臨官", "month": "長生", "day": "死",
        }
