"""
월주 계산 테스트
- 절기 구간 기준 (양력 월 아님)
- 보정 테이블: 항목마다 검증
"""
from datetime import date, datetime

import pytest

from manse.services.ganji import Pillar, stem_of
from manse.services.month_pillar import (
    DEFAULT_MONTH_OVERRIDES,
    MonthOverride,
    MonthOverrideTable,
    MonthPillarCalculator,
)
from manse.services.solar_terms import SolarTermPeriod


class TestPillarFor:
    """구간 인덱스 + 연간 → 월주"""

    @pytest.mark.parametrize("case", [
        {"year_stem": "甲", "index": 1, "ganji": "丙寅"},
        {"year_stem": "己", "index": 1, "ganji": "丙寅"},
        {"year_stem": "乙", "index": 1, "ganji": "戊寅"},
        {"year_stem": "丙", "index": 1, "ganji": "庚寅"},
        {"year_stem": "丁", "index": 1, "ganji": "壬寅"},
        {"year_stem": "戊", "index": 1, "ganji": "甲寅"},
        {"year_stem": "癸", "index": 1, "ganji": "甲寅"},
        {"year_stem": "甲", "index": 0, "ganji": "乙丑"},
        {"year_stem": "癸", "index": 11, "ganji": "甲子"},
    ])
    def test_table(self, case):
        result = MonthPillarCalculator.pillar_for(case["index"], stem_of(case["year_stem"]))
        assert result.hanja == case["ganji"], \
            f"Expected {case['ganji']}, got {result.hanja}"

    def test_index_out_of_range(self):
        with pytest.raises(ValueError):
            MonthPillarCalculator.pillar_for(12, stem_of("甲"))


class TestComputeWithPeriod:

    def test_period_term_year_decides_stem(self):
        """1월 소한 구간은 그 해 절기 연도 천간 기준 → 전년도 12월 간지와 동일"""
        calc = MonthPillarCalculator()
        period = SolarTermPeriod(name="小寒", index=0, term_year=2024)
        result = calc.compute(datetime(2024, 1, 20, 12), period)
        assert result.pillar.hanja == "乙丑"
        assert not result.approximate
        assert not result.overridden

    def test_explicit_year_stem(self):
        calc = MonthPillarCalculator()
        period = SolarTermPeriod(name="立春", index=1, term_year=2023)
        result = calc.compute(datetime(2023, 2, 10), period, year_stem=stem_of("甲"))
        assert result.pillar.hanja == "丙寅"

    def test_approximate_without_period(self):
        calc = MonthPillarCalculator()
        result = calc.compute(datetime(2023, 3, 15, 12))
        assert result.pillar.hanja == "乙卯"
        assert result.period_index == 2
        assert result.approximate


class TestProviderRegression:
    """실제 절기 데이터 기준 월주"""

    @pytest.mark.parametrize("case", [
        {"moment": datetime(2023, 6, 19, 12), "ganji": "戊午"},
        {"moment": datetime(2023, 7, 19, 12), "ganji": "己未"},
        {"moment": datetime(2023, 11, 7, 12), "ganji": "壬戌"},
        {"moment": datetime(2023, 12, 21, 12), "ganji": "甲子"},
        {"moment": datetime(1986, 5, 26, 5), "ganji": "癸巳"},
        {"moment": datetime(2025, 1, 3, 12), "ganji": "丙子"},
        {"moment": datetime(2025, 1, 10, 12), "ganji": "丁丑"},
    ])
    def test_month(self, provider, case):
        period = provider.solar_term_period_of(case["moment"])
        result = MonthPillarCalculator().compute(case["moment"], period)
        assert result.pillar.hanja == case["ganji"], \
            f"{case['moment']}: Expected {case['ganji']}, got {result.pillar.hanja}"


class TestOverrideTable:

    @pytest.mark.parametrize(
        "entry", DEFAULT_MONTH_OVERRIDES.entries, ids=lambda e: e.day.isoformat()
    )
    def test_default_entries(self, entry):
        """기본 보정 테이블 항목별 검증"""
        calc = MonthPillarCalculator()
        result = calc.compute(datetime.combine(entry.day, datetime.min.time()))
        assert result.overridden
        assert result.pillar == Pillar.parse(entry.pillar)

    def test_custom_table_wins(self):
        table = MonthOverrideTable(
            [MonthOverride(date(2023, 3, 1), "甲寅", "regional almanac")],
            version="test-1",
        )
        calc = MonthPillarCalculator(table)
        period = SolarTermPeriod(name="驚蟄", index=2, term_year=2023)

        overridden = calc.compute(datetime(2023, 3, 1, 12), period)
        assert overridden.pillar.hanja == "甲寅"
        assert overridden.overridden

        regular = calc.compute(datetime(2023, 3, 2, 12), period)
        assert regular.pillar.hanja == "乙卯"
        assert not regular.overridden

    def test_invalid_entry_rejected(self):
        with pytest.raises(ValueError):
            MonthOverrideTable([MonthOverride(date(2023, 3, 1), "甲卯")])

    def test_duplicate_entry_rejected(self):
        with pytest.raises(ValueError):
            MonthOverrideTable([
                MonthOverride(date(2023, 3, 1), "甲寅"),
                MonthOverride(date(2023, 3, 1), "乙卯"),
            ])

    def test_table_metadata(self):
        table = MonthOverrideTable(
            [MonthOverride(date(2023, 5, 1), "丙辰"), MonthOverride(date(2023, 3, 1), "甲寅")],
            version="7",
        )
        assert len(table) == 2
        assert table.version == "7"
        assert [e.day for e in table.entries] == [date(2023, 3, 1), date(2023, 5, 1)]
        assert table.lookup(date(2023, 4, 1)) is None
