"""
Manse Engine Settings
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
만세력 계산 엔진 설정:
- 지방시(경도) 보정
- 절기 계산 범위 / 캐시
- 연주 경계 (입춘 / 설날)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # 지방시 보정
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    use_local_time: bool = True
    default_standard_meridian: float = 135.0  # 동경 135도 (KST/JST)

    # 절기 시각을 표현하는 표준시 (UTC+9)
    timezone_offset_hours: float = 9.0

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # 연주 / 시주 규칙
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    year_boundary: Literal["lichun", "lunar_new_year"] = "lichun"
    zi_hour_rollover: bool = True  # 23시 = 다음날 자시

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # 절기 계산 (ephem)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    solar_term_min_year: int = 1600
    solar_term_max_year: int = 2500
    solar_term_cache_size: int = 256

    # 절기 경계 판정 (±시간)
    boundary_window_hours: int = 48

    # 대운
    luck_cycle_count: int = 10

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "MANSE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_logging(settings: Optional[Settings] = None) -> None:
    """로깅 초기화 (애플리케이션 진입점에서 1회 호출)"""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("manse").setLevel(level)
