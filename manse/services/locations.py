"""
출생지 → 경도 변환 (지방시 보정용)

보정 분 = (경도 - 표준자오선) × 4분
- 서울 126.98° / 표준 135° → -32분
- 도쿄 139.77° / 표준 135° → +19분
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """출생지 좌표"""
    name: str
    longitude: float
    latitude: float
    standard_meridian: float = 135.0

    @property
    def offset_minutes(self) -> int:
        """경도 1도 = 4분"""
        return round((self.longitude - self.standard_meridian) * 4)

    @property
    def utc_offset_hours(self) -> float:
        """표준자오선 기준 표준시 (UTC+h)"""
        return self.standard_meridian / 15.0


# (경도, 위도, 표준자오선)
_CITIES: Dict[str, tuple] = {
    "東京": (139.77, 35.68, 135.0),
    "ソウル": (126.98, 37.57, 135.0),
    "京都": (135.77, 35.02, 135.0),
    "大阪": (135.50, 34.70, 135.0),
    "名古屋": (136.91, 35.18, 135.0),
    "福岡": (130.40, 33.60, 135.0),
    "札幌": (141.35, 43.07, 135.0),
    "那覇": (127.68, 26.22, 135.0),
    "北京": (116.41, 39.90, 120.0),
    "上海": (121.47, 31.23, 120.0),
    "台北": (121.56, 25.03, 120.0),
    "香港": (114.17, 22.28, 120.0),
    "釜山": (129.04, 35.18, 135.0),
    "光州": (126.85, 35.15, 135.0),
    "平壌": (125.75, 39.03, 135.0),
    "ニューヨーク": (-74.01, 40.71, -75.0),
    "ロンドン": (-0.13, 51.51, 0.0),
    "パリ": (2.35, 48.86, 15.0),
    "シドニー": (151.21, -33.87, 150.0),
    "シンガポール": (103.82, 1.35, 120.0),
}

# 별칭 (한글/영문/한자) → 대표 이름
_ALIASES: Dict[str, str] = {
    "tokyo": "東京", "도쿄": "東京",
    "seoul": "ソウル", "서울": "ソウル", "首爾": "ソウル", "漢城": "ソウル",
    "kyoto": "京都", "교토": "京都",
    "osaka": "大阪", "오사카": "大阪",
    "nagoya": "名古屋", "나고야": "名古屋",
    "fukuoka": "福岡", "후쿠오카": "福岡",
    "sapporo": "札幌", "삿포로": "札幌",
    "naha": "那覇", "나하": "那覇",
    "beijing": "北京", "베이징": "北京",
    "shanghai": "上海", "상하이": "上海",
    "taipei": "台北", "타이베이": "台北",
    "hong kong": "香港", "hongkong": "香港", "홍콩": "香港",
    "busan": "釜山", "부산": "釜山", "プサン": "釜山",
    "gwangju": "光州", "광주": "光州",
    "pyongyang": "平壌", "평양": "平壌", "平壤": "平壌",
    "new york": "ニューヨーク", "뉴욕": "ニューヨーク",
    "london": "ロンドン", "런던": "ロンドン",
    "paris": "パリ", "파리": "パリ",
    "sydney": "シドニー", "시드니": "シドニー",
    "singapore": "シンガポール", "싱가포르": "シンガポール",
}

MAJOR_CITIES: Dict[str, Location] = {
    name: Location(name, lon, lat, meridian)
    for name, (lon, lat, meridian) in _CITIES.items()
}


def find_city(name: str) -> Optional[Location]:
    """도시 이름 (일본어/한국어/영어) → Location"""
    key = str(name).strip()
    if key in MAJOR_CITIES:
        return MAJOR_CITIES[key]
    canonical = _ALIASES.get(key) or _ALIASES.get(key.lower())
    if canonical:
        return MAJOR_CITIES[canonical]
    return None


def resolve_location(
    value: Union[str, Mapping[str, Any], Location, None],
    default_meridian: float = 135.0,
) -> Optional[Location]:
    """
    도시 이름 또는 {longitude, latitude[, standard_meridian]} → Location

    해석 불가능하면 None (→ 보정 없음)
    """
    if value is None:
        return None
    if isinstance(value, Location):
        return value
    if isinstance(value, str):
        location = find_city(value)
        if location is None:
            logger.warning(f"[Location] 등록되지 않은 도시: {value!r}")
        return location
    if isinstance(value, Mapping):
        try:
            longitude = float(value["longitude"])
            latitude = float(value.get("latitude", 0.0))
            meridian = float(value.get("standard_meridian", default_meridian))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"[Location] 좌표 해석 실패: {value!r}")
            return None
        if not (-180.0 <= longitude <= 180.0):
            logger.warning(f"[Location] 경도 범위 밖: {longitude}")
            return None
        name = str(value.get("name", f"{longitude:.2f},{latitude:.2f}"))
        return Location(name, longitude, latitude, meridian)

    logger.warning(f"[Location] 지원하지 않는 위치 형식: {type(value).__name__}")
    return None
