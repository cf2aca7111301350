"""
연주 / 일주 / 시주 계산
- 연주: 1984년 = 甲子년 기준, 입춘(또는 설날) 경계
- 일주: 2000년 1월 1일 = 戊午일 기준 (연속 일수 mod 60)
- 시주: 일간 기준 자시 천간 + 시지 인덱스
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from manse.services.errors import ProviderUnavailable
from manse.services.ganji import BRANCHES, STEMS, Pillar, Stem
from manse.services.lunar_provider import LunarDate, LunarProvider
from manse.services.solar_terms import SolarTerm

logger = logging.getLogger(__name__)

REFERENCE_YEAR = 1984           # 甲子년
DAY_ANCHOR_DATE = date(2000, 1, 1)
DAY_ANCHOR_INDEX = 54           # 戊午일

# 입춘 근사일 (절기 데이터 없을 때)
APPROX_LICHUN = (2, 4)

YEAR_BOUNDARY_MODES = ("lichun", "lunar_new_year")


def year_pillar_of(saju_year: int) -> Pillar:
    """사주 연도 → 연주"""
    return Pillar.from_index((saju_year - REFERENCE_YEAR) % 60)


# ===== 연주 =====

class YearPillarCalculator:
    """
    연주 계산기

    경계 규칙:
    - lichun: 입춘 당일(날짜 기준)부터 새해
    - lunar_new_year: 음력 연도 기준 (설날)
    """

    def __init__(self, provider: LunarProvider, boundary: str = "lichun"):
        if boundary not in YEAR_BOUNDARY_MODES:
            raise ValueError(f"알 수 없는 연주 경계: {boundary!r}")
        self.provider = provider
        self.boundary = boundary

    def _lichun(self, year: int) -> Optional[SolarTerm]:
        try:
            return self.provider.lichun_of(year)
        except ProviderUnavailable as e:
            logger.warning(f"[Year] 입춘 조회 실패: {e}")
            return None

    def _lunar_date(self, day: date) -> Optional[LunarDate]:
        try:
            return self.provider.lunar_date_of(datetime.combine(day, time(12)))
        except ProviderUnavailable as e:
            logger.warning(f"[Year] 음력 조회 실패: {e}")
            return None

    def saju_year(
        self,
        day: date,
        lunar_date: Optional[LunarDate] = None,
        zone_shift: timedelta = timedelta(0),
    ) -> Tuple[int, bool]:
        """
        Args:
            day: 출생지 표준시 기준 일주 기준일
            zone_shift: 출생지 표준시 → 제공자 표준시 차이 (입춘 시각을 출생지 날짜로 환산)

        Returns:
            (사주 연도, 근사 여부)
        """
        if self.boundary == "lunar_new_year":
            if lunar_date is None:
                lunar_date = self._lunar_date(day)
            if lunar_date is not None:
                return lunar_date.year, False
            logger.warning(f"[Year] 음력 데이터 없음 → 입춘 기준으로 대체: {day.isoformat()}")

        lichun = self._lichun(day.year)
        if lichun is None:
            approx = date(day.year, *APPROX_LICHUN)
            return (day.year - 1 if day < approx else day.year), True

        lichun_day = (lichun.moment - zone_shift).date()
        return (day.year - 1 if day < lichun_day else day.year), False

    def compute(
        self,
        day: date,
        lunar_date: Optional[LunarDate] = None,
        zone_shift: timedelta = timedelta(0),
    ) -> Tuple[Pillar, bool]:
        year, approximate = self.saju_year(day, lunar_date, zone_shift)
        return year_pillar_of(year), approximate


# ===== 일주 =====

class DayPillarCalculator:
    """일주 계산기 (월/음력 구조와 무관)"""

    @staticmethod
    def compute(day: date) -> Pillar:
        days_diff = (day - DAY_ANCHOR_DATE).days
        return Pillar.from_index(DAY_ANCHOR_INDEX + days_diff)


# ===== 시주 =====

class HourPillarCalculator:
    """
    시주 계산기

    시간 → 지지 (2시간 단위):
    - 子시: 23:00~00:59
    - 丑시: 01:00~02:59
    - ...
    - 亥시: 21:00~22:59

    일간 → 자시 천간:
    - 甲己일 → 甲子시
    - 乙庚일 → 丙子시
    - 丙辛일 → 戊子시
    - 丁壬일 → 庚子시
    - 戊癸일 → 壬子시
    """

    HOUR_RANGES = [
        ("23:00", "00:59"), ("01:00", "02:59"), ("03:00", "04:59"),
        ("05:00", "06:59"), ("07:00", "08:59"), ("09:00", "10:59"),
        ("11:00", "12:59"), ("13:00", "14:59"), ("15:00", "16:59"),
        ("17:00", "18:59"), ("19:00", "20:59"), ("21:00", "22:59"),
    ]

    @staticmethod
    def slot_of(hour: int) -> int:
        """시간 → 시지 인덱스"""
        return ((hour + 1) // 2) % 12

    @staticmethod
    def zi_stem_of(day_stem: Stem) -> Stem:
        """일간 → 자시 천간"""
        return STEMS[(day_stem.index % 5) * 2]

    @classmethod
    def compute(cls, day_stem: Stem, hour: int) -> Pillar:
        """
        Args:
            day_stem: 일간 (자시 23시대는 다음날 일간이어야 함)
            hour: 보정된 시 (0-23)
        """
        slot = cls.slot_of(hour)
        stem = STEMS[(cls.zi_stem_of(day_stem).index + slot) % 10]
        return Pillar(stem, BRANCHES[slot])

    @classmethod
    def hour_range(cls, slot: int) -> Tuple[str, str]:
        return cls.HOUR_RANGES[slot]
