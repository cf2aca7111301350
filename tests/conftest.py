"""
공용 fixture

- settings: .env 무시 (테스트 환경 고정)
- engine: ephem/음력 제공자 사용 (절기 캐시 공유를 위해 세션 단위)
- NullProvider / FailingProvider: 데이터 없음 / 조회 실패 경로 검증용
"""
from datetime import datetime
from typing import Optional, Tuple

import pytest

from manse.config import Settings
from manse.services.errors import ProviderUnavailable
from manse.services.lunar_provider import EphemLunarProvider, LunarDate, LunarProvider
from manse.services.saju_engine import SajuEngine
from manse.services.solar_terms import SolarTerm, SolarTermPeriod


class NullProvider(LunarProvider):
    """데이터가 하나도 없는 제공자"""

    method = "null"

    def lunar_date_of(self, moment: datetime) -> Optional[LunarDate]:
        return None

    def solar_term_period_of(self, moment: datetime) -> Optional[SolarTermPeriod]:
        return None

    def solar_terms_for_year(self, year: int) -> Optional[Tuple[SolarTerm, ...]]:
        return None


class FailingProvider(LunarProvider):
    """모든 조회에서 ProviderUnavailable"""

    method = "failing"

    def lunar_date_of(self, moment: datetime) -> Optional[LunarDate]:
        raise ProviderUnavailable("lunar backend down")

    def solar_term_period_of(self, moment: datetime) -> Optional[SolarTermPeriod]:
        raise ProviderUnavailable("solar term backend down")

    def solar_terms_for_year(self, year: int) -> Optional[Tuple[SolarTerm, ...]]:
        raise ProviderUnavailable("solar term backend down")


@pytest.fixture(scope="session")
def settings():
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def provider(settings):
    return EphemLunarProvider(settings=settings)


@pytest.fixture(scope="session")
def engine(settings, provider):
    return SajuEngine(settings=settings, provider=provider)


@pytest.fixture
def null_provider():
    return NullProvider()


@pytest.fixture
def failing_provider():
    return FailingProvider()
