"""
십이운성(十二運星)
- 일간 오행별 장생 위치에서 시작
- 양간: 순행, 음간: 역행
"""
from typing import Dict, Mapping, Optional

from manse.services.ganji import Branch, Element, Pillar, Polarity, Stem

FORTUNE_SEQUENCE = (
    "長生", "沐浴", "冠帯", "臨官", "帝旺", "衰",
    "病", "死", "墓", "絶", "胎", "養",
)

FORTUNE_KOREAN = {
    "長生": "장생", "沐浴": "목욕", "冠帯": "관대", "臨官": "건록",
    "帝旺": "제왕", "衰": "쇠", "病": "병", "死": "사",
    "墓": "묘", "絶": "절", "胎": "태", "養": "양",
}

# 오행 → (양간 장생 지지, 음간 장생 지지)
CHANGSHENG_ANCHORS = {
    Element.WOOD: (11, 6),   # 甲 亥 / 乙 午
    Element.FIRE: (2, 9),    # 丙 寅 / 丁 酉
    Element.EARTH: (2, 9),   # 戊 寅 / 己 酉 (화토동법)
    Element.METAL: (5, 0),   # 庚 巳 / 辛 子
    Element.WATER: (8, 3),   # 壬 申 / 癸 卯
}


class TwelveFortuneCalculator:
    """십이운성 계산기"""

    @staticmethod
    def step_of(day_stem: Stem, branch: Branch) -> int:
        yang_anchor, yin_anchor = CHANGSHENG_ANCHORS[day_stem.element]
        if day_stem.polarity is Polarity.YANG:
            return (branch.index - yang_anchor) % 12
        return (yin_anchor - branch.index) % 12

    @classmethod
    def fortune_of(cls, day_stem: Stem, branch: Branch) -> str:
        return FORTUNE_SEQUENCE[cls.step_of(day_stem, branch)]

    @classmethod
    def calculate(cls, pillars: Mapping[str, Optional[Pillar]]) -> Dict[str, str]:
        day_stem = pillars["day"].stem
        return {
            position: cls.fortune_of(day_stem, pillar.branch)
            for position, pillar in pillars.items()
            if pillar is not None
        }
