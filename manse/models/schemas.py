"""
Pydantic 스키마 정의
계산 결과 모델 (HTTP 계층 등 외부에서 그대로 직렬화)
"""
from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from manse.services.luck_cycle import Gender


class PillarModel(BaseModel):
    """사주 기둥 (년/월/일/시주)"""
    stem: str = Field(..., description="천간 (甲乙丙丁戊己庚辛壬癸)")
    branch: str = Field(..., description="지지 (子丑寅卯辰巳午未申酉戌亥)")
    ganji: str = Field(..., description="간지 조합 (예: 甲子)")
    ganji_hangul: str = Field(..., description="간지 한글 (예: 갑자)")

    # 오행 / 음양
    stem_element: str = Field(..., description="천간 오행 (木火土金水)")
    branch_element: str = Field(..., description="지지 오행")
    stem_polarity: str = Field(..., description="천간 음양 (陽/陰)")
    branch_polarity: str = Field(..., description="지지 음양")

    # 인덱스
    stem_index: int = Field(..., ge=0, le=9, description="천간 인덱스 (0-9)")
    branch_index: int = Field(..., ge=0, le=11, description="지지 인덱스 (0-11)")
    cycle_index: int = Field(..., ge=0, le=59, description="60갑자 순번 (0=甲子)")

    # 파생 정보
    fortune: Optional[str] = Field(None, description="십이운성")
    spirit: Optional[str] = Field(None, description="십이신살")
    hidden_stems: List[str] = Field(default_factory=list, description="지장간 (본기 먼저)")


class FourPillars(BaseModel):
    """사주 원국 (4개 기둥)"""
    year: PillarModel = Field(..., description="년주")
    month: PillarModel = Field(..., description="월주")
    day: PillarModel = Field(..., description="일주 (일간=나)")
    hour: Optional[PillarModel] = Field(None, description="시주 (시간 미입력시 None)")


class LunarDateModel(BaseModel):
    year: int
    month: int
    day: int
    is_leap_month: bool = False


class SolarTermPeriodModel(BaseModel):
    name: str = Field(..., description="절기 이름 (立春 등)")
    index: int = Field(..., ge=0, le=11, description="구간 인덱스 (0=小寒 ... 11=大雪)")
    term_year: int = Field(..., description="절기 순환 연도")
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class LocationModel(BaseModel):
    name: str
    longitude: float
    latitude: float
    standard_meridian: float


class ProcessedDateTimeModel(BaseModel):
    """전처리된 출생 일시"""
    original_date: datetime
    adjusted_date: datetime = Field(..., description="지방시 보정 후 시각")
    effective_date: date = Field(..., description="일주 기준일")
    offset_minutes: int = Field(0, description="지방시 보정 (분)")
    hour_known: bool
    lunar_date: Optional[LunarDateModel] = None
    solar_term_period: Optional[SolarTermPeriodModel] = None
    location: Optional[LocationModel] = None
    errors: List[str] = Field(default_factory=list, description="입력 오류 (기본값으로 대체된 항목)")


class HiddenStemTenGodModel(BaseModel):
    stem: str
    ten_god: str


class TenGodsModel(BaseModel):
    """일간 기준 십신"""
    stems: Dict[str, str] = Field(default_factory=dict, description="천간 십신 (위치별)")
    branches: Dict[str, str] = Field(default_factory=dict, description="지지 십신 (본기 기준)")
    hidden_stems: Dict[str, List[HiddenStemTenGodModel]] = Field(
        default_factory=dict, description="지장간 십신"
    )


class ElementProfile(BaseModel):
    """오행 프로필"""
    main_element: str = Field(..., description="일간 오행")
    secondary_element: str = Field(..., description="월간 오행")
    yin_yang: str = Field(..., description="일간 음양")
    element_counts: Dict[str, int] = Field(default_factory=dict, description="오행별 개수")


class LuckPillarModel(BaseModel):
    order: int
    ganji: str
    start_age: Optional[int] = None


class LuckCycleModel(BaseModel):
    """대운 정보"""
    direction: Literal["forward", "backward"] = Field(..., description="대운 방향 (순행/역행)")
    start_age: Optional[int] = Field(None, description="대운수")
    pillars: List[LuckPillarModel] = Field(default_factory=list, description="대운 간지 리스트")


class QualityInfo(BaseModel):
    """계산 품질 정보"""
    has_birth_time: bool = Field(..., description="출생시간 입력 여부")
    degraded: bool = Field(False, description="잘못된 입력을 기본값으로 대체함")
    approximate: bool = Field(False, description="절기/음력 데이터 없이 근사 계산")
    boundary_ambiguous: bool = Field(False, description="시간 미상 + 절입일 (절입 후로 판정)")
    month_overridden: bool = Field(False, description="월주 보정 테이블 적용")
    override_version: Optional[str] = Field(None, description="보정 테이블 버전")
    solar_term_boundary: bool = Field(False, description="절기 경계 근처 여부")
    boundary_reason: Optional[str] = Field(None, description="near_ipchun / near_term_change")
    calculation_method: str = Field("ephem_astronomical", description="계산 방식")
    error: Optional[str] = Field(None, description="입력 오류 메시지")
    warnings: List[str] = Field(default_factory=list)


class SajuResult(BaseModel):
    """사주 계산 결과"""
    four_pillars: FourPillars
    lunar_date: Optional[LunarDateModel] = None
    ten_gods: TenGodsModel
    element_profile: ElementProfile
    processed_date_time: ProcessedDateTimeModel
    twelve_fortunes: Dict[str, str] = Field(default_factory=dict)
    twelve_spirits: Dict[str, str] = Field(default_factory=dict)
    hidden_stems: Dict[str, List[str]] = Field(default_factory=dict)
    luck_cycle: Optional[LuckCycleModel] = None
    gender: Optional[Gender] = None
    quality: QualityInfo
