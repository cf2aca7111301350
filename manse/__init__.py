"""만세력 기반 사주(四柱) 계산 엔진"""
from manse.services.saju_engine import SajuEngine

__version__ = "1.0.0"
