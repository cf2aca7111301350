"""
음력 / 절기 데이터 제공자

엔진은 LunarProvider 인터페이스에만 의존:
- lunar_date_of(moment) → LunarDate | None
- solar_term_period_of(moment) → SolarTermPeriod | None
- solar_terms_for_year(year) → 12절 | None

운영 구현: EphemLunarProvider
- 절기: ephem (태양 시황경)
- 음력: korean_lunar_calendar (한국천문연구원 데이터 기반)
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from korean_lunar_calendar import KoreanLunarCalendar

from manse.config import Settings, get_settings
from manse.services.cache import SolarTermCache
from manse.services.errors import ProviderUnavailable
from manse.services.solar_terms import (
    LICHUN_INDEX,
    SolarTerm,
    SolarTermPeriod,
    compute_terms_for_year,
    locate_period,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LunarDate:
    """음력 날짜"""
    year: int
    month: int
    day: int
    is_leap_month: bool = False


class LunarProvider(ABC):
    """음력/절기 데이터 제공자 인터페이스"""

    # 결과 품질 정보의 calculation_method
    method = "external"

    @abstractmethod
    def lunar_date_of(self, moment: datetime) -> Optional[LunarDate]:
        ...

    @abstractmethod
    def solar_term_period_of(self, moment: datetime) -> Optional[SolarTermPeriod]:
        ...

    @abstractmethod
    def solar_terms_for_year(self, year: int) -> Optional[Tuple[SolarTerm, ...]]:
        ...

    def lichun_of(self, year: int) -> Optional[SolarTerm]:
        """해당 연도 입춘"""
        terms = self.solar_terms_for_year(year)
        if not terms:
            return None
        return terms[LICHUN_INDEX]


class EphemLunarProvider(LunarProvider):
    """
    ephem + korean_lunar_calendar 기반 제공자

    - 절기 시각은 settings.timezone_offset_hours 기준 표준시
    - 지원 범위 밖 연도는 None (→ 엔진 근사 모드)
    """

    method = "ephem_astronomical"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[SolarTermCache] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache or SolarTermCache(maxsize=self.settings.solar_term_cache_size)

    # ========== 음력 ==========

    def lunar_date_of(self, moment: datetime) -> Optional[LunarDate]:
        calendar = KoreanLunarCalendar()
        if not calendar.setSolarDate(moment.year, moment.month, moment.day):
            logger.warning(f"[Lunar] 음력 변환 범위 밖: {moment.date().isoformat()}")
            return None

        return LunarDate(
            year=calendar.lunarYear,
            month=calendar.lunarMonth,
            day=calendar.lunarDay,
            is_leap_month=bool(calendar.isIntercalation),
        )

    # ========== 절기 ==========

    def _terms(self, year: int) -> Tuple[SolarTerm, ...]:
        """
        Raises:
            ProviderUnavailable: 지원 범위 밖 / 계산 실패
        """
        if not (self.settings.solar_term_min_year <= year <= self.settings.solar_term_max_year):
            raise ProviderUnavailable(
                f"{year}년은 절기 지원 범위 밖 "
                f"({self.settings.solar_term_min_year}~{self.settings.solar_term_max_year})"
            )
        return self.cache.get_or_compute(
            year,
            lambda y: compute_terms_for_year(y, self.settings.timezone_offset_hours),
        )

    def _terms_or_none(self, year: int) -> Optional[Tuple[SolarTerm, ...]]:
        try:
            return self._terms(year)
        except ProviderUnavailable as e:
            logger.warning(f"[SolarTerm] {e}")
            return None

    def solar_terms_for_year(self, year: int) -> Optional[Tuple[SolarTerm, ...]]:
        return self._terms_or_none(year)

    def solar_term_period_of(self, moment: datetime) -> Optional[SolarTermPeriod]:
        terms = self._terms_or_none(moment.year)
        if terms is None:
            return None

        prev_terms = None
        next_terms = None
        if moment < terms[0].moment:
            prev_terms = self._terms_or_none(moment.year - 1)
        elif moment >= terms[-1].moment:
            next_terms = self._terms_or_none(moment.year + 1)

        return locate_period(moment, terms, prev_terms=prev_terms, next_terms=next_terms)
