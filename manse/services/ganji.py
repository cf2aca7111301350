"""
60갑자 기본 테이블
- 천간(10개) × 지지(12개) 중 음양이 같은 60개 조합만 유효
- 천간/지지 오행, 음양, 지장간
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

# 천간 (10개)
CHEONGAN = ["갑", "을", "병", "정", "무", "기", "경", "신", "임", "계"]
CHEONGAN_HANJA = ["甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸"]

# 지지 (12개)
JIJI = ["자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해"]
JIJI_HANJA = ["子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥"]


class Element(str, Enum):
    """오행 (상생 순서)"""
    WOOD = "木"
    FIRE = "火"
    EARTH = "土"
    METAL = "金"
    WATER = "水"

    @property
    def order(self) -> int:
        return ELEMENT_ORDER.index(self)

    @property
    def korean(self) -> str:
        return ELEMENT_KOREAN[self.order]

    def generates(self, other: "Element") -> bool:
        """상생: 목→화→토→금→수→목"""
        return (self.order + 1) % 5 == other.order

    def controls(self, other: "Element") -> bool:
        """상극: 목→토→수→화→금→목"""
        return (self.order + 2) % 5 == other.order


ELEMENT_ORDER = [Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER]
ELEMENT_KOREAN = ["목", "화", "토", "금", "수"]


class Polarity(str, Enum):
    YANG = "陽"
    YIN = "陰"

    @property
    def korean(self) -> str:
        return "양" if self is Polarity.YANG else "음"


def polarity_of_index(idx: int) -> Polarity:
    """짝수 인덱스 = 양, 홀수 = 음 (천간/지지 공통)"""
    return Polarity.YANG if idx % 2 == 0 else Polarity.YIN


# 지지-오행 매핑 (인덱스 순)
JIJI_ELEMENT = [
    Element.WATER, Element.EARTH, Element.WOOD, Element.WOOD,
    Element.EARTH, Element.FIRE, Element.FIRE, Element.EARTH,
    Element.METAL, Element.METAL, Element.EARTH, Element.WATER,
]

# 지장간 (본기 먼저, 천간 인덱스)
HIDDEN_STEMS = {
    0: (9,),          # 子: 癸
    1: (5, 9, 7),     # 丑: 己 癸 辛
    2: (0, 2, 4),     # 寅: 甲 丙 戊
    3: (1,),          # 卯: 乙
    4: (4, 1, 9),     # 辰: 戊 乙 癸
    5: (2, 6, 4),     # 巳: 丙 庚 戊
    6: (3, 5),        # 午: 丁 己
    7: (5, 3, 1),     # 未: 己 丁 乙
    8: (6, 8, 4),     # 申: 庚 壬 戊
    9: (7,),          # 酉: 辛
    10: (4, 7, 3),    # 戌: 戊 辛 丁
    11: (8, 0),       # 亥: 壬 甲
}


@dataclass(frozen=True)
class Stem:
    """천간"""
    index: int

    @property
    def hanja(self) -> str:
        return CHEONGAN_HANJA[self.index]

    @property
    def hangul(self) -> str:
        return CHEONGAN[self.index]

    @property
    def element(self) -> Element:
        return ELEMENT_ORDER[self.index // 2]

    @property
    def polarity(self) -> Polarity:
        return polarity_of_index(self.index)

    def __str__(self) -> str:
        return self.hanja


@dataclass(frozen=True)
class Branch:
    """지지"""
    index: int

    @property
    def hanja(self) -> str:
        return JIJI_HANJA[self.index]

    @property
    def hangul(self) -> str:
        return JIJI[self.index]

    @property
    def element(self) -> Element:
        return JIJI_ELEMENT[self.index]

    @property
    def polarity(self) -> Polarity:
        return polarity_of_index(self.index)

    @property
    def hidden_stems(self) -> Tuple[Stem, ...]:
        return tuple(STEMS[i] for i in HIDDEN_STEMS[self.index])

    @property
    def main_stem(self) -> Stem:
        return self.hidden_stems[0]

    def clashes(self, other: "Branch") -> bool:
        """충: 6칸 차이 (子午, 丑未, ...)"""
        return (self.index - other.index) % 12 == 6

    def harms(self, other: "Branch") -> bool:
        """육해: 子未 丑午 寅巳 卯辰 申亥 酉戌"""
        return (self.index + other.index) % 12 == 7

    def __str__(self) -> str:
        return self.hanja


STEMS: Tuple[Stem, ...] = tuple(Stem(i) for i in range(10))
BRANCHES: Tuple[Branch, ...] = tuple(Branch(i) for i in range(12))


def stem_of(name: Union[str, int, Stem]) -> Stem:
    """한자/한글/인덱스 → 천간"""
    if isinstance(name, Stem):
        return name
    if isinstance(name, int):
        return STEMS[name % 10]
    if name in CHEONGAN_HANJA:
        return STEMS[CHEONGAN_HANJA.index(name)]
    if name in CHEONGAN:
        return STEMS[CHEONGAN.index(name)]
    raise ValueError(f"알 수 없는 천간: {name!r}")


def branch_of(name: Union[str, int, Branch]) -> Branch:
    """한자/한글/인덱스 → 지지"""
    if isinstance(name, Branch):
        return name
    if isinstance(name, int):
        return BRANCHES[name % 12]
    if name in JIJI_HANJA:
        return BRANCHES[JIJI_HANJA.index(name)]
    if name in JIJI:
        return BRANCHES[JIJI.index(name)]
    raise ValueError(f"알 수 없는 지지: {name!r}")


@dataclass(frozen=True)
class Pillar:
    """
    사주 기둥 (천간 + 지지)

    천간/지지 인덱스의 홀짝이 같은 조합만 유효 (60갑자)
    """
    stem: Stem
    branch: Branch

    def __post_init__(self):
        if self.stem.index % 2 != self.branch.index % 2:
            raise ValueError(
                f"유효하지 않은 간지 조합: {self.stem.hanja}{self.branch.hanja}"
            )

    @classmethod
    def from_index(cls, n: int) -> "Pillar":
        """60갑자 순번 → 기둥 (0 = 甲子)"""
        return cls(STEMS[n % 10], BRANCHES[n % 12])

    @classmethod
    def parse(cls, text: str) -> "Pillar":
        """'甲子' / '갑자' → 기둥"""
        s = str(text).strip().replace(" ", "")
        if len(s) != 2:
            raise ValueError(f"간지 문자열은 2글자여야 합니다: {text!r}")
        return cls(stem_of(s[0]), branch_of(s[1]))

    @property
    def cycle_index(self) -> int:
        # n ≡ stem (mod 10), n ≡ branch (mod 12)
        return (6 * self.stem.index - 5 * self.branch.index) % 60

    def shift(self, steps: int) -> "Pillar":
        return Pillar.from_index(self.cycle_index + steps)

    @property
    def hanja(self) -> str:
        return f"{self.stem.hanja}{self.branch.hanja}"

    @property
    def hangul(self) -> str:
        return f"{self.stem.hangul}{self.branch.hangul}"

    def __str__(self) -> str:
        return self.hanja


SIXTY_GANJI: Tuple[Pillar, ...] = tuple(Pillar.from_index(i) for i in range(60))


def is_valid_pair(stem_idx: int, branch_idx: int) -> bool:
    return stem_idx % 2 == branch_idx % 2
