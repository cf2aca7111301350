"""
사주 계산 엔진 (오케스트레이터)
- 입력 전처리 → 연/월/일/시주 → 십신 / 십이운성 / 십이신살 / 대운
- 결과는 SajuResult (pydantic) 로 변환
- 잘못된 입력은 예외 대신 degraded 결과로 반환
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence, Tuple

from manse.config import Settings, get_settings
from manse.models.schemas import (
    ElementProfile,
    FourPillars,
    HiddenStemTenGodModel,
    LocationModel,
    LuckCycleModel,
    LuckPillarModel,
    LunarDateModel,
    PillarModel,
    ProcessedDateTimeModel,
    QualityInfo,
    SajuResult,
    SolarTermPeriodModel,
    TenGodsModel,
)
from manse.services.cache import SolarTermCache
from manse.services.datetime_processor import DateTimeProcessor, ProcessedDateTime
from manse.services.errors import InvalidInput
from manse.services.ganji import ELEMENT_ORDER, Pillar
from manse.services.luck_cycle import LuckCycle, LuckCycleCalculator, parse_gender
from manse.services.lunar_provider import EphemLunarProvider, LunarProvider
from manse.services.month_pillar import MonthOverrideTable, MonthPillarCalculator, MonthPillarResult
from manse.services.pillars import DayPillarCalculator, HourPillarCalculator, YearPillarCalculator
from manse.services.solar_terms import LICHUN_INDEX
from manse.services.ten_gods import TenGodCalculator, TenGodProfile
from manse.services.twelve_fortune import TwelveFortuneCalculator
from manse.services.twelve_spirit import DEFAULT_SPIRIT_RULES, SpiritRule, TwelveSpiritCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PillarSet:
    """내부 계산 결과 (4주 + 근사/보정 여부)"""
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Optional[Pillar]
    month_result: MonthPillarResult
    year_approximate: bool

    def as_dict(self) -> Dict[str, Optional[Pillar]]:
        return {"year": self.year, "month": self.month, "day": self.day, "hour": self.hour}


class SajuEngine:
    """
    사주 계산 엔진

    모든 협력 객체는 생성자 주입 (전역 상태 없음)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[LunarProvider] = None,
        cache: Optional[SolarTermCache] = None,
        overrides: Optional[MonthOverrideTable] = None,
        spirit_rules: Sequence[SpiritRule] = DEFAULT_SPIRIT_RULES,
        now=None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache or SolarTermCache(maxsize=self.settings.solar_term_cache_size)
        self.provider = provider or EphemLunarProvider(settings=self.settings, cache=self.cache)
        self._now = now or datetime.now

        self.processor = DateTimeProcessor(self.provider, self.settings, now=self._now)
        self.year_calculator = YearPillarCalculator(self.provider, self.settings.year_boundary)
        self.month_calculator = MonthPillarCalculator(overrides)
        self.ten_god_calculator = TenGodCalculator()
        self.fortune_calculator = TwelveFortuneCalculator()
        self.spirit_calculator = TwelveSpiritCalculator(spirit_rules)
        self.luck_calculator = LuckCycleCalculator(count=self.settings.luck_cycle_count)

    def update_options(self, **options: Any) -> None:
        """전처리 기본 옵션 변경 (use_local_time, zi_hour_rollover)"""
        self.processor.update_options(**options)

    # ========== 메인 ==========

    def calculate(
        self,
        birth_date: Any,
        birth_hour: Any = None,
        gender: Any = None,
        location: Any = None,
        birth_minute: Any = 0,
    ) -> SajuResult:
        """
        사주 계산

        Args:
            birth_date: 양력 생년월일 (date / datetime / 'YYYY-MM-DD')
            birth_hour: 출생 시 (0-23, None = 시간 미상)
            gender: 'M' / 'F' (대운 계산용, 선택)
            location: 도시 이름 또는 {longitude, latitude}
            birth_minute: 출생 분 (0-59)
        """
        processed = self.processor.process(birth_date, birth_hour, location, birth_minute)
        errors = list(processed.errors)

        try:
            gender_value = parse_gender(gender)
        except InvalidInput as e:
            logger.warning(f"[Engine] {e} → 성별 없이 계산")
            errors.append(str(e))
            gender_value = None

        pillars = self._compute_pillars(processed)
        pillar_map = pillars.as_dict()

        ten_gods = self.ten_god_calculator.calculate(pillar_map)
        fortunes = self.fortune_calculator.calculate(pillar_map)
        spirits = self.spirit_calculator.calculate(pillar_map)
        luck = self.luck_calculator.compute(
            month_pillar=pillars.month,
            year_stem=pillars.year.stem,
            gender=gender_value,
            moment=processed.lookup_moment,
            period=processed.solar_term_period,
        )

        approximate = (
            processed.approximate
            or pillars.year_approximate
            or pillars.month_result.approximate
        )
        near_boundary, boundary_reason = self._near_boundary(processed)

        logger.info(
            f"[Engine] {processed.original_date.isoformat()} → "
            f"{pillars.year.hanja} {pillars.month.hanja} {pillars.day.hanja} "
            f"{pillars.hour.hanja if pillars.hour else '--'} "
            f"(approximate={approximate}, degraded={bool(errors)})"
        )

        four_pillars = FourPillars(
            **{
                position: self._to_pillar_model(pillar, fortunes.get(position), spirits.get(position))
                for position, pillar in pillar_map.items()
                if pillar is not None
            }
        )

        quality = QualityInfo(
            has_birth_time=processed.hour_known,
            degraded=bool(errors),
            approximate=approximate,
            boundary_ambiguous=processed.boundary_ambiguous,
            month_overridden=pillars.month_result.overridden,
            override_version=self.month_calculator.overrides.version,
            solar_term_boundary=near_boundary,
            boundary_reason=boundary_reason,
            calculation_method="approximate" if approximate else self.provider.method,
            error=errors[0] if errors else None,
            warnings=list(processed.warnings),
        )

        lunar = self._to_lunar_model(processed)
        return SajuResult(
            four_pillars=four_pillars,
            lunar_date=lunar,
            ten_gods=self._to_ten_gods_model(ten_gods),
            element_profile=self._element_profile(pillars),
            processed_date_time=self._to_processed_model(processed, lunar, errors),
            twelve_fortunes=fortunes,
            twelve_spirits=spirits,
            hidden_stems={
                position: [stem.hanja for stem in pillar.branch.hidden_stems]
                for position, pillar in pillar_map.items()
                if pillar is not None
            },
            luck_cycle=self._to_luck_model(luck),
            gender=gender_value,
            quality=quality,
        )

    def current_saju(self, location: Any = None, gender: Any = None) -> SajuResult:
        """현재 시각 사주"""
        now = self._now()
        return self.calculate(now.date(), now.hour, gender, location, now.minute)

    # ========== 4주 ==========

    def _compute_pillars(self, processed: ProcessedDateTime) -> PillarSet:
        effective = processed.effective_date

        # 음력은 보정 시각의 날짜 기준 → 자시 이월로 날짜가 바뀌면 다시 조회
        lunar = processed.lunar_date
        if processed.adjusted_date.date() != effective:
            lunar = None
        year_pillar, year_approximate = self.year_calculator.compute(
            effective, lunar, processed.zone_shift
        )

        month_result = self.month_calculator.compute(
            processed.adjusted_date,
            processed.solar_term_period,
        )

        day_pillar = DayPillarCalculator.compute(effective)

        hour_pillar = None
        if processed.hour_known:
            hour_pillar = HourPillarCalculator.compute(day_pillar.stem, processed.adjusted_date.hour)

        return PillarSet(
            year=year_pillar,
            month=month_result.pillar,
            day=day_pillar,
            hour=hour_pillar,
            month_result=month_result,
            year_approximate=year_approximate,
        )

    def _near_boundary(self, processed: ProcessedDateTime) -> Tuple[bool, Optional[str]]:
        """절입 ±boundary_window_hours 이내 여부"""
        period = processed.solar_term_period
        if period is None:
            return True, "approx_calculation"

        window = timedelta(hours=self.settings.boundary_window_hours)
        moment = processed.lookup_moment
        edges = ((period.start, period.index), (period.end, (period.index + 1) % 12))
        for edge, term_index in edges:
            if edge is not None and abs(moment - edge) <= window:
                if term_index == LICHUN_INDEX:
                    return True, "near_ipchun"
                return True, "near_term_change"
        return False, None

    @staticmethod
    def _element_profile(pillars: PillarSet) -> ElementProfile:
        counts = {element.value: 0 for element in ELEMENT_ORDER}
        for pillar in pillars.as_dict().values():
            if pillar is None:
                continue
            counts[pillar.stem.element.value] += 1
            counts[pillar.branch.element.value] += 1

        return ElementProfile(
            main_element=pillars.day.stem.element.value,
            secondary_element=pillars.month.stem.element.value,
            yin_yang=pillars.day.stem.polarity.value,
            element_counts=counts,
        )

    # ========== 변환 ==========

    @staticmethod
    def _to_pillar_model(
        pillar: Pillar,
        fortune: Optional[str] = None,
        spirit: Optional[str] = None,
    ) -> PillarModel:
        return PillarModel(
            stem=pillar.stem.hanja,
            branch=pillar.branch.hanja,
            ganji=pillar.hanja,
            ganji_hangul=pillar.hangul,
            stem_element=pillar.stem.element.value,
            branch_element=pillar.branch.element.value,
            stem_polarity=pillar.stem.polarity.value,
            branch_polarity=pillar.branch.polarity.value,
            stem_index=pillar.stem.index,
            branch_index=pillar.branch.index,
            cycle_index=pillar.cycle_index,
            fortune=fortune,
            spirit=spirit,
            hidden_stems=[stem.hanja for stem in pillar.branch.hidden_stems],
        )

    @staticmethod
    def _to_lunar_model(processed: ProcessedDateTime) -> Optional[LunarDateModel]:
        lunar = processed.lunar_date
        if lunar is None:
            return None
        return LunarDateModel(
            year=lunar.year,
            month=lunar.month,
            day=lunar.day,
            is_leap_month=lunar.is_leap_month,
        )

    @staticmethod
    def _to_processed_model(
        processed: ProcessedDateTime,
        lunar: Optional[LunarDateModel],
        errors: Sequence[str] = (),
    ) -> ProcessedDateTimeModel:
        period = processed.solar_term_period
        location = processed.location
        return ProcessedDateTimeModel(
            original_date=processed.original_date,
            adjusted_date=processed.adjusted_date,
            effective_date=processed.effective_date,
            offset_minutes=processed.offset_minutes,
            hour_known=processed.hour_known,
            lunar_date=lunar,
            solar_term_period=SolarTermPeriodModel(
                name=period.name,
                index=period.index,
                term_year=period.term_year,
                start=period.start,
                end=period.end,
            ) if period else None,
            location=LocationModel(
                name=location.name,
                longitude=location.longitude,
                latitude=location.latitude,
                standard_meridian=location.standard_meridian,
            ) if location else None,
            errors=list(errors),
        )

    @staticmethod
    def _to_ten_gods_model(profile: TenGodProfile) -> TenGodsModel:
        return TenGodsModel(
            stems={pos: god.value for pos, god in profile.stems.items()},
            branches={pos: god.value for pos, god in profile.branches.items()},
            hidden_stems={
                pos: [
                    HiddenStemTenGodModel(stem=item.stem.hanja, ten_god=item.ten_god.value)
                    for item in items
                ]
                for pos, items in profile.hidden_stems.items()
            },
        )

    @staticmethod
    def _to_luck_model(luck: Optional[LuckCycle]) -> Optional[LuckCycleModel]:
        if luck is None:
            return None
        return LuckCycleModel(
            direction=luck.direction,
            start_age=luck.start_age,
            pillars=[
                LuckPillarModel(order=item.order, ganji=item.pillar.hanja, start_age=item.start_age)
                for item in luck.pillars
            ],
        )
