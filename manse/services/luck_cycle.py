"""
대운(大運) 계산
- 양남음녀 순행, 음남양녀 역행
- 월주 다음/이전 간지부터 10년 단위
- 대운수: 출생 ~ 다음(순행) / 이전(역행) 절입까지 일수 ÷ 3
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from manse.services.errors import InvalidInput
from manse.services.ganji import Pillar, Polarity, Stem
from manse.services.solar_terms import SolarTermPeriod

logger = logging.getLogger(__name__)

DAYS_PER_YEAR_OF_LUCK = 3


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


_GENDER_ALIASES = {
    "m": Gender.MALE, "male": Gender.MALE, "남": Gender.MALE, "남성": Gender.MALE,
    "f": Gender.FEMALE, "female": Gender.FEMALE, "여": Gender.FEMALE, "여성": Gender.FEMALE,
}


def parse_gender(value) -> Optional[Gender]:
    """
    'M'/'F' (male/female/남/여 포함) → Gender

    Raises:
        InvalidInput: 알 수 없는 값
    """
    if value is None:
        return None
    if isinstance(value, Gender):
        return value
    gender = _GENDER_ALIASES.get(str(value).strip().lower())
    if gender is None:
        raise InvalidInput(f"알 수 없는 성별: {value!r}")
    return gender


@dataclass(frozen=True)
class LuckPillar:
    order: int
    pillar: Pillar
    start_age: Optional[int] = None


@dataclass(frozen=True)
class LuckCycle:
    direction: str                  # "forward" | "backward"
    start_age: Optional[int]
    pillars: Tuple[LuckPillar, ...]
    approximate: bool = False


class LuckCycleCalculator:
    """대운 계산기"""

    def __init__(self, count: int = 10):
        self.count = count

    @staticmethod
    def direction_of(year_stem: Stem, gender: Gender) -> str:
        is_yang_year = year_stem.polarity is Polarity.YANG
        is_male = gender is Gender.MALE
        if is_male == is_yang_year:
            return "forward"
        return "backward"

    @staticmethod
    def start_age_of(
        moment: datetime,
        period: Optional[SolarTermPeriod],
        direction: str,
    ) -> Optional[int]:
        """절입까지 일수 ÷ 3 (반올림, 최소 1)"""
        if period is None:
            return None
        if direction == "forward":
            if period.end is None:
                return None
            days = (period.end - moment).total_seconds() / 86400
        else:
            if period.start is None:
                return None
            days = (moment - period.start).total_seconds() / 86400
        return max(1, int(round(days / DAYS_PER_YEAR_OF_LUCK)))

    def compute(
        self,
        month_pillar: Pillar,
        year_stem: Stem,
        gender: Optional[Gender],
        moment: datetime,
        period: Optional[SolarTermPeriod],
    ) -> Optional[LuckCycle]:
        if gender is None:
            return None

        direction = self.direction_of(year_stem, gender)
        step = 1 if direction == "forward" else -1
        start_age = self.start_age_of(moment, period, direction)

        pillars = tuple(
            LuckPillar(
                order=i + 1,
                pillar=month_pillar.shift(step * (i + 1)),
                start_age=start_age + 10 * i if start_age is not None else None,
            )
            for i in range(self.count)
        )

        logger.info(
            f"[Daeun] month_pillar={month_pillar.hanja} | direction={direction} | "
            f"start_age={start_age} | list[:3]={[p.pillar.hanja for p in pillars[:3]]}"
        )

        return LuckCycle(
            direction=direction,
            start_age=start_age,
            pillars=pillars,
            approximate=start_age is None,
        )
