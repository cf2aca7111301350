"""
12절기(節) 계산 및 절기 구간 판정
- 월주 계산의 핵심: 어느 절기 구간인지 판단
- ephem 태양 시황경(apparent longitude) 기반 절입 시각 계산
- 구간 인덱스: 0=소한(丑월) ... 11=대설(子월)
"""
import bisect
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

import ephem

from manse.services.errors import ProviderUnavailable

logger = logging.getLogger(__name__)

TROPICAL_YEAR_DAYS = 365.2422
LONGITUDE_TOLERANCE_DEG = 1e-6
MAX_ITERATIONS = 50


@dataclass(frozen=True)
class SolarTermInfo:
    """절기 정의"""
    name: str           # 절기 이름 (한자)
    korean_name: str    # 절기 이름 (한글)
    longitude: float    # 태양 황경 (도)
    approx_month: int   # 대략적인 양력 월
    approx_day: int     # 대략적인 양력 일


# 구간 인덱스 순서 (양력 1월 소한부터)
MAJOR_TERMS: Tuple[SolarTermInfo, ...] = (
    SolarTermInfo("小寒", "소한", 285.0, 1, 6),    # 丑월 시작
    SolarTermInfo("立春", "입춘", 315.0, 2, 4),    # 寅월 시작
    SolarTermInfo("驚蟄", "경칩", 345.0, 3, 6),    # 卯월 시작
    SolarTermInfo("清明", "청명", 15.0, 4, 5),     # 辰월 시작
    SolarTermInfo("立夏", "입하", 45.0, 5, 6),     # 巳월 시작
    SolarTermInfo("芒種", "망종", 75.0, 6, 6),     # 午월 시작
    SolarTermInfo("小暑", "소서", 105.0, 7, 7),    # 未월 시작
    SolarTermInfo("立秋", "입추", 135.0, 8, 8),    # 申월 시작
    SolarTermInfo("白露", "백로", 165.0, 9, 8),    # 酉월 시작
    SolarTermInfo("寒露", "한로", 195.0, 10, 8),   # 戌월 시작
    SolarTermInfo("立冬", "입동", 225.0, 11, 7),   # 亥월 시작
    SolarTermInfo("大雪", "대설", 255.0, 12, 7),   # 子월 시작
)

LICHUN_INDEX = 1


@dataclass(frozen=True)
class SolarTerm:
    """절입 시각 (표준시, naive datetime)"""
    name: str
    korean_name: str
    index: int
    longitude: float
    moment: datetime


@dataclass(frozen=True)
class SolarTermPeriod:
    """
    절기 구간

    term_year: 이 구간이 속한 절기 순환의 양력 연도 (그 해 1월 소한부터 시작)
    - 1/1 ~ 소한 직전: 전년도 대설 구간 (index 11, term_year = 전년도)
    """
    name: str
    index: int
    term_year: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def branch_index(self) -> int:
        """구간 → 월지 (0→丑, 1→寅, ..., 11→子)"""
        return (self.index + 1) % 12

    @property
    def korean_name(self) -> str:
        return MAJOR_TERMS[self.index].korean_name


def approximate_period(moment: datetime) -> SolarTermPeriod:
    """절기 데이터 없을 때: 양력 월 기준 근사 구간"""
    index = moment.month - 1
    return SolarTermPeriod(
        name=MAJOR_TERMS[index].name,
        index=index,
        term_year=moment.year,
    )


# ============ ephem 천문 계산 ============

def apparent_solar_longitude(when: ephem.Date) -> float:
    """태양 시황경 (도, 0~360) - 해당 시점 춘분점 기준"""
    sun = ephem.Sun(when)
    equatorial = ephem.Equatorial(sun.g_ra, sun.g_dec, epoch=when)
    ecliptic = ephem.Ecliptic(equatorial, epoch=when)
    return math.degrees(float(ecliptic.lon)) % 360.0


def find_term_moment_utc(target_longitude: float, guess_utc: datetime) -> datetime:
    """
    태양 황경이 target_longitude가 되는 UTC 시각 (뉴턴 반복)

    Args:
        target_longitude: 목표 황경 (도)
        guess_utc: 초기 추정 시각 (대략적인 절입일)
    """
    when = ephem.Date(guess_utc)
    for _ in range(MAX_ITERATIONS):
        diff = (target_longitude - apparent_solar_longitude(when) + 180.0) % 360.0 - 180.0
        if abs(diff) < LONGITUDE_TOLERANCE_DEG:
            break
        when = ephem.Date(when + diff / 360.0 * TROPICAL_YEAR_DAYS)
    return when.datetime()


def compute_terms_for_year(year: int, timezone_offset_hours: float = 9.0) -> Tuple[SolarTerm, ...]:
    """
    해당 양력 연도의 12절 절입 시각 (소한 → 대설 순)

    Raises:
        ProviderUnavailable: ephem 계산 실패
    """
    offset = timedelta(hours=timezone_offset_hours)
    terms = []
    try:
        for idx, info in enumerate(MAJOR_TERMS):
            guess = datetime(year, info.approx_month, info.approx_day, 12) - offset
            moment_utc = find_term_moment_utc(info.longitude, guess)
            local = (moment_utc + offset).replace(microsecond=0)
            terms.append(SolarTerm(info.name, info.korean_name, idx, info.longitude, local))
    except (ValueError, OverflowError) as e:
        raise ProviderUnavailable(f"{year}년 절기 계산 실패: {e}") from e

    logger.debug(f"[SolarTerm] {year}년 입춘={terms[LICHUN_INDEX].moment.isoformat()}")
    return tuple(terms)


# ============ 구간 판정 ============

def locate_period(
    moment: datetime,
    terms: Sequence[SolarTerm],
    prev_terms: Optional[Sequence[SolarTerm]] = None,
    next_terms: Optional[Sequence[SolarTerm]] = None,
) -> SolarTermPeriod:
    """
    moment가 속한 절기 구간

    절입 시각과 정확히 같은 순간은 새 구간으로 판정
    (terms는 moment.year의 절기)
    """
    moments = [t.moment for t in terms]
    pos = bisect.bisect_right(moments, moment) - 1

    if pos < 0:
        # 1월 소한 이전 → 전년도 대설 구간
        start = prev_terms[-1].moment if prev_terms else None
        return SolarTermPeriod(
            name=MAJOR_TERMS[11].name,
            index=11,
            term_year=moment.year - 1,
            start=start,
            end=terms[0].moment,
        )

    term = terms[pos]
    if pos + 1 < len(terms):
        end = terms[pos + 1].moment
    else:
        end = next_terms[0].moment if next_terms else None

    return SolarTermPeriod(
        name=term.name,
        index=term.index,
        term_year=moment.year,
        start=term.moment,
        end=end,
    )
