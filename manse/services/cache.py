"""
절기 캐시
- 연도별 12절 절입 시각 (한 번 계산하면 불변)
- 생성자 주입 방식 (모듈 전역 캐시 없음)
"""
import threading
from typing import Callable, Tuple

from cachetools import LRUCache

from manse.services.solar_terms import SolarTerm


class SolarTermCache:
    """
    연도 → 절기 테이블 캐시

    캐시 전략:
    1. 키: 양력 연도
    2. 값: SolarTerm 튜플 (불변, 스레드 간 공유 가능)
    3. 최초 계산 결과만 저장 (populate-once-read-many)
    """

    def __init__(self, maxsize: int = 256):
        self._terms = LRUCache(maxsize=maxsize)
        self._lock = threading.Lock()

        # 통계
        self._hits = 0
        self._misses = 0

    def get_or_compute(
        self,
        year: int,
        compute: Callable[[int], Tuple[SolarTerm, ...]],
    ) -> Tuple[SolarTerm, ...]:
        """캐시 조회, 없으면 계산 후 저장"""
        with self._lock:
            cached = self._terms.get(year)
            if cached is not None:
                self._hits += 1
                return cached
            self._misses += 1

        # 계산은 락 밖에서 (ephem 계산이 느림)
        terms = compute(year)

        with self._lock:
            return self._terms.setdefault(year, terms)

    def __contains__(self, year: int) -> bool:
        with self._lock:
            return year in self._terms

    # ========== 통계 ==========

    def get_stats(self) -> dict:
        """캐시 통계 조회"""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0

            return {
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": f"{hit_rate:.1f}%",
                "size": len(self._terms),
                "maxsize": self._terms.maxsize,
            }

    def clear(self):
        """캐시 초기화"""
        with self._lock:
            self._terms.clear()
            self._hits = 0
            self._misses = 0
