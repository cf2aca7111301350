"""
계산 오류 분류

- InvalidInput: 잘못된 날짜/시간 입력 → 기본값 대체 (degraded)
- ProviderUnavailable: 음력/절기 데이터 조회 실패 → 근사 계산 (approximate)
- AmbiguousBoundary: 출생시간 미상 + 절입일 → 절입 후 구간으로 확정
"""


class CalculationError(Exception):
    """계산 오류"""
    code = "calculation_error"


class InvalidInput(CalculationError):
    """입력값 파싱 실패"""
    code = "invalid_input"


class ProviderUnavailable(CalculationError):
    """음력/절기 데이터 제공자 조회 실패"""
    code = "provider_unavailable"


class AmbiguousBoundary(CalculationError):
    """절입 시각 기준 판정 불가 (시간 미상)"""
    code = "ambiguous_boundary"
