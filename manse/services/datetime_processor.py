"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
출생 일시 전처리
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
입력 정규화 → 지방시 보정 → 음력/절기 조회 → ProcessedDateTime

순서가 중요: 절기/음력 조회는 반드시 보정된 시각으로
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from manse.config import Settings, get_settings
from manse.services.errors import AmbiguousBoundary, InvalidInput, ProviderUnavailable
from manse.services.locations import Location, resolve_location
from manse.services.lunar_provider import LunarDate, LunarProvider
from manse.services.solar_terms import SolarTermPeriod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedDateTime:
    """전처리된 출생 일시 (호출마다 새로 생성, 불변)"""
    original_date: datetime
    adjusted_date: datetime         # 지방시 보정 후
    effective_date: date            # 일주 기준일 (23시 → 다음날)
    lookup_moment: datetime         # 절기 조회 시각 (제공자 표준시)
    hour_known: bool
    offset_minutes: int = 0
    zone_shift: timedelta = timedelta(0)    # 출생지 표준시 → 제공자 표준시
    lunar_date: Optional[LunarDate] = None
    solar_term_period: Optional[SolarTermPeriod] = None
    location: Optional[Location] = None
    degraded: bool = False
    approximate: bool = False
    boundary_ambiguous: bool = False
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


class DateTimeProcessor:
    """
    출생 일시 전처리기

    상태: 인스턴스 기본 옵션만 (use_local_time, zi_hour_rollover)
    """

    def __init__(
        self,
        provider: LunarProvider,
        settings: Optional[Settings] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.settings = settings or get_settings()
        self._now = now or datetime.now
        self._options: Dict[str, bool] = {
            "use_local_time": self.settings.use_local_time,
            "zi_hour_rollover": self.settings.zi_hour_rollover,
        }

    @property
    def options(self) -> Dict[str, bool]:
        return dict(self._options)

    def update_options(self, **options: Any) -> None:
        """기본 옵션 변경 (다음 호출부터 적용)"""
        unknown = set(options) - set(self._options)
        if unknown:
            raise ValueError(f"알 수 없는 옵션: {sorted(unknown)}")
        self._options.update({key: bool(value) for key, value in options.items()})
        logger.info(f"[DateTime] 옵션 변경: {self._options}")

    # ========== 입력 파싱 ==========

    @staticmethod
    def _parse_date(value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip()[:10])
            except ValueError as e:
                raise InvalidInput(f"날짜 형식 오류: {value!r}") from e
        raise InvalidInput(f"날짜 형식 오류: {value!r}")

    @staticmethod
    def _parse_int(value: Any, name: str, upper: int) -> int:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise InvalidInput(f"{name} 형식 오류: {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"{name} 형식 오류: {value!r}") from e
        if not 0 <= number <= upper:
            raise InvalidInput(f"{name} 범위 오류 (0~{upper}): {value!r}")
        return number

    # ========== 제공자 조회 ==========

    def _lookup(self, fn: Callable, *args):
        try:
            return fn(*args)
        except ProviderUnavailable as e:
            logger.warning(f"[DateTime] 제공자 조회 실패: {e}")
            return None

    @staticmethod
    def _shifted(moment: datetime, delta: timedelta, what: str, warnings: list) -> datetime:
        """시각 이동 (0001-01-01 / 9999-12-31 범위를 넘으면 이동 생략)"""
        try:
            return moment + delta
        except OverflowError:
            logger.warning(f"[DateTime] {what} 생략 - 날짜 범위 초과: {moment.isoformat()}")
            warnings.append(f"{what} 생략 - 날짜 범위 초과")
            return moment

    def _check_boundary(self, day_start: datetime) -> None:
        """
        시간 미상일 때 당일 절입 여부 확인

        Raises:
            AmbiguousBoundary: 당일 중 절입 시각 존재
        """
        terms = self._lookup(self.provider.solar_terms_for_year, day_start.year)
        if not terms:
            return
        day_end = day_start + timedelta(days=1)
        for term in terms:
            if day_start <= term.moment < day_end:
                raise AmbiguousBoundary(
                    f"{day_start.date().isoformat()} {term.name} 절입 "
                    f"({term.moment.strftime('%H:%M')}) - 시간 미상, 절입 후로 판정"
                )

    # ========== 메인 ==========

    def process(
        self,
        birth_date: Any,
        birth_hour: Any = None,
        location: Any = None,
        birth_minute: Any = 0,
    ) -> ProcessedDateTime:
        errors = []
        warnings = []

        # 1. 입력 정규화 (실패해도 예외 없이 기본값)
        try:
            day = self._parse_date(birth_date)
        except InvalidInput as e:
            logger.warning(f"[DateTime] {e} → 현재 날짜로 대체")
            errors.append(str(e))
            day = self._now().date()

        hour: Optional[int] = None
        if birth_hour is not None:
            try:
                hour = self._parse_int(birth_hour, "시간", 23)
            except InvalidInput as e:
                logger.warning(f"[DateTime] {e} → 0시로 대체")
                errors.append(str(e))
                hour = 0

        minute = 0
        if hour is not None and birth_minute not in (None, 0):
            try:
                minute = self._parse_int(birth_minute, "분", 59)
            except InvalidInput as e:
                logger.warning(f"[DateTime] {e} → 0분으로 대체")
                errors.append(str(e))

        hour_known = hour is not None
        original = datetime.combine(day, time(hour or 0, minute))

        # 2. 위치 해석
        resolved = resolve_location(location, self.settings.default_standard_meridian)
        if location is not None and resolved is None:
            warnings.append(f"위치 해석 실패: {location!r} - 지방시 보정 생략")

        # 3. 지방시 보정 (조회 전에 적용)
        offset = 0
        if resolved is not None and hour_known and self._options["use_local_time"]:
            offset = resolved.offset_minutes
        adjusted = self._shifted(original, timedelta(minutes=offset), "지방시 보정", warnings)
        if adjusted == original:
            offset = 0

        if hour_known and self._options["zi_hour_rollover"] and adjusted.hour == 23:
            effective = self._shifted(adjusted, timedelta(days=1), "자시 이월", warnings).date()
        else:
            effective = adjusted.date()

        # 출생지 표준시 → 제공자 표준시
        zone_shift = timedelta(0)
        if resolved is not None:
            zone_shift = timedelta(
                hours=self.settings.timezone_offset_hours - resolved.utc_offset_hours
            )

        # 4. 절기 구간 조회
        boundary_ambiguous = False
        if hour_known:
            lookup = self._shifted(adjusted, zone_shift, "표준시 변환", warnings)
        else:
            day_start = self._shifted(
                datetime.combine(day, time(0)), zone_shift, "표준시 변환", warnings
            )
            lookup = self._shifted(day_start, timedelta(hours=12), "정오 조회", warnings)
            try:
                self._check_boundary(day_start)
            except AmbiguousBoundary as e:
                logger.info(f"[DateTime] {e}")
                warnings.append(str(e))
                boundary_ambiguous = True
                lookup = self._shifted(
                    day_start, timedelta(days=1, seconds=-1), "일말 조회", warnings
                )

        period = self._lookup(self.provider.solar_term_period_of, lookup)
        approximate = period is None
        if approximate:
            warnings.append("절기 데이터 없음 - 양력 월 기준 근사 계산")

        # 5. 음력
        lunar = self._lookup(self.provider.lunar_date_of, adjusted)
        if lunar is None:
            warnings.append("음력 변환 실패")

        logger.debug(
            f"[DateTime] {original.isoformat()} → {adjusted.isoformat()} "
            f"(offset={offset}분, effective={effective.isoformat()}, "
            f"period={period.name if period else None})"
        )

        return ProcessedDateTime(
            original_date=original,
            adjusted_date=adjusted,
            effective_date=effective,
            lookup_moment=lookup,
            hour_known=hour_known,
            offset_minutes=offset,
            zone_shift=zone_shift,
            lunar_date=lunar,
            solar_term_period=period,
            location=resolved,
            degraded=bool(errors),
            approximate=approximate,
            boundary_ambiguous=boundary_ambiguous,
            errors=tuple(errors),
            warnings=tuple(warnings),
        )
