"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
월주 계산
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
우선순위:
0. 보정 테이블 (버전 관리, 날짜별 지정값)
1. 절기 구간 → 월지 (0=소한→丑 ... 11=대설→子)
2. 연간 → 소한(丑월) 천간 오프셋 + 구간 인덱스
3. 절기 데이터 없음 → 양력 월 근사 (approximate)

양력 월(date.month)을 절기 대용으로 쓰면 절입일 전후 ~5일이
모두 틀어지므로, 근사 모드 외에는 절대 사용하지 않음
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, Optional, Tuple

from manse.services.ganji import BRANCHES, STEMS, Pillar, Stem
from manse.services.pillars import year_pillar_of
from manse.services.solar_terms import SolarTermPeriod, approximate_period

logger = logging.getLogger(__name__)

# 연간 → 첫 구간(소한, 丑월) 천간 인덱스
# 甲己 → 乙丑, 乙庚 → 丁丑, 丙辛 → 己丑, 丁壬 → 辛丑, 戊癸 → 癸丑
MONTH_STEM_OFFSETS = {0: 1, 1: 3, 2: 5, 3: 7, 4: 9}


@dataclass(frozen=True)
class MonthOverride:
    """날짜별 월주 지정값"""
    day: date
    pillar: str
    reason: str = ""


class MonthOverrideTable:
    """
    월주 보정 테이블

    일반 알고리즘보다 먼저 조회. 적용된 결과는 overridden으로 표시.
    항목마다 단위 테스트 필수.
    """

    def __init__(self, entries: Iterable[MonthOverride] = (), version: str = "0"):
        self.version = version
        self._entries: Dict[date, MonthOverride] = {}
        for entry in entries:
            Pillar.parse(entry.pillar)  # 유효한 60갑자인지 검증
            if entry.day in self._entries:
                raise ValueError(f"중복 보정 항목: {entry.day.isoformat()}")
            self._entries[entry.day] = entry

    @property
    def entries(self) -> Tuple[MonthOverride, ...]:
        return tuple(sorted(self._entries.values(), key=lambda e: e.day))

    def lookup(self, day: date) -> Optional[Pillar]:
        entry = self._entries.get(day)
        if entry is None:
            return None
        return Pillar.parse(entry.pillar)

    def __len__(self) -> int:
        return len(self._entries)


# 검증된 보정 항목 없음 (기존 특수 케이스는 테스트의 known discrepancy로 관리)
DEFAULT_MONTH_OVERRIDES = MonthOverrideTable(entries=(), version="2024.1")


@dataclass(frozen=True)
class MonthPillarResult:
    pillar: Pillar
    period_index: int
    approximate: bool = False
    overridden: bool = False


class MonthPillarCalculator:
    """월주 계산기"""

    def __init__(self, overrides: Optional[MonthOverrideTable] = None):
        self.overrides = overrides if overrides is not None else DEFAULT_MONTH_OVERRIDES

    @staticmethod
    def stem_for(period_index: int, year_stem: Stem) -> Stem:
        offset = MONTH_STEM_OFFSETS[year_stem.index % 5]
        return STEMS[(offset + period_index) % 10]

    @classmethod
    def pillar_for(cls, period_index: int, year_stem: Stem) -> Pillar:
        """구간 인덱스 + 연간 → 월주"""
        if not 0 <= period_index < 12:
            raise ValueError(f"절기 구간 인덱스 범위 오류: {period_index}")
        branch = BRANCHES[(period_index + 1) % 12]
        return Pillar(cls.stem_for(period_index, year_stem), branch)

    def compute(
        self,
        moment: datetime,
        period: Optional[SolarTermPeriod] = None,
        year_stem: Optional[Stem] = None,
    ) -> MonthPillarResult:
        """
        Args:
            moment: 보정된 출생 시각
            period: 제공자가 판정한 절기 구간 (None → 근사)
            year_stem: 구간의 절기 연도 천간 (생략 시 period.term_year로 계산)
        """
        approximate = period is None
        if period is None:
            period = approximate_period(moment)
            logger.warning(
                f"[Month] 절기 구간 없음 → 양력 {moment.month}월 근사 ({period.name})"
            )

        override = self.overrides.lookup(moment.date())
        if override is not None:
            logger.info(
                f"[Month] 보정 테이블 적용 v{self.overrides.version}: "
                f"{moment.date().isoformat()} → {override.hanja}"
            )
            return MonthPillarResult(
                pillar=override,
                period_index=period.index,
                approximate=approximate,
                overridden=True,
            )

        if year_stem is None:
            year_stem = year_pillar_of(period.term_year).stem

        return MonthPillarResult(
            pillar=self.pillar_for(period.index, year_stem),
            period_index=period.index,
            approximate=approximate,
        )
