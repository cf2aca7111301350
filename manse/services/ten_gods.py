"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
십신(十神) 계산
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
일간(나) 기준 오행 생극 관계:
- 같은 오행       → 비견 / 겁재
- 내가 생하는 오행 → 식신 / 상관
- 내가 극하는 오행 → 편재 / 정재
- 나를 극하는 오행 → 편관 / 정관
- 나를 생하는 오행 → 편인 / 정인
(음양 같으면 앞, 다르면 뒤)

relation() 규칙 함수가 유일한 기준.
조회 매트릭스는 규칙 함수로 생성하고 규칙 함수로 검증한다.
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from manse.services.ganji import BRANCHES, STEMS, Branch, Element, Pillar, Polarity, Stem

logger = logging.getLogger(__name__)


class TenGod(str, Enum):
    BI_GYEON = "比肩"
    GEOB_JAE = "劫財"
    SIK_SIN = "食神"
    SANG_GWAN = "傷官"
    PYEON_JAE = "偏財"
    JEONG_JAE = "正財"
    PYEON_GWAN = "偏官"
    JEONG_GWAN = "正官"
    PYEON_IN = "偏印"
    JEONG_IN = "正印"

    @property
    def korean(self) -> str:
        return TEN_GOD_KOREAN[self]


TEN_GOD_KOREAN = {
    TenGod.BI_GYEON: "비견", TenGod.GEOB_JAE: "겁재",
    TenGod.SIK_SIN: "식신", TenGod.SANG_GWAN: "상관",
    TenGod.PYEON_JAE: "편재", TenGod.JEONG_JAE: "정재",
    TenGod.PYEON_GWAN: "편관", TenGod.JEONG_GWAN: "정관",
    TenGod.PYEON_IN: "편인", TenGod.JEONG_IN: "정인",
}

# 관계 → (음양 같음, 음양 다름)
_RELATION_LABELS = {
    "same": (TenGod.BI_GYEON, TenGod.GEOB_JAE),
    "i_generate": (TenGod.SIK_SIN, TenGod.SANG_GWAN),
    "i_conquer": (TenGod.PYEON_JAE, TenGod.JEONG_JAE),
    "conquers_me": (TenGod.PYEON_GWAN, TenGod.JEONG_GWAN),
    "generates_me": (TenGod.PYEON_IN, TenGod.JEONG_IN),
}


def element_relation(self_element: Element, target_element: Element) -> str:
    if self_element is target_element:
        return "same"
    if self_element.generates(target_element):
        return "i_generate"
    if self_element.controls(target_element):
        return "i_conquer"
    if target_element.controls(self_element):
        return "conquers_me"
    return "generates_me"


def relation(
    self_element: Element,
    target_element: Element,
    self_polarity: Polarity,
    target_polarity: Polarity,
) -> TenGod:
    """십신 규칙 함수"""
    same, different = _RELATION_LABELS[element_relation(self_element, target_element)]
    return same if self_polarity is target_polarity else different


def stem_relation(day_stem: Stem, target: Stem) -> TenGod:
    return relation(day_stem.element, target.element, day_stem.polarity, target.polarity)


def branch_relation(day_stem: Stem, target: Branch) -> TenGod:
    return relation(day_stem.element, target.element, day_stem.polarity, target.polarity)


# ============ 조회 매트릭스 ============

def build_branch_matrix() -> Dict[Tuple[int, int], TenGod]:
    """(일간 인덱스, 지지 인덱스) → 십신 (10×12)"""
    return {
        (stem.index, branch.index): branch_relation(stem, branch)
        for stem in STEMS
        for branch in BRANCHES
    }


def build_stem_matrix() -> Dict[Tuple[int, int], TenGod]:
    """(일간 인덱스, 천간 인덱스) → 십신 (10×10)"""
    return {
        (stem.index, target.index): stem_relation(stem, target)
        for stem in STEMS
        for target in STEMS
    }


def verify_branch_matrix(matrix: Mapping[Tuple[int, int], TenGod]) -> List[str]:
    """매트릭스와 규칙 함수 불일치 목록 (빈 리스트 = 일치)"""
    mismatches = []
    for stem in STEMS:
        for branch in BRANCHES:
            expected = branch_relation(stem, branch)
            actual = matrix.get((stem.index, branch.index))
            if actual != expected:
                mismatches.append(
                    f"{stem.hanja}-{branch.hanja}: matrix={actual} rule={expected.value}"
                )
    return mismatches


def verify_stem_matrix(matrix: Mapping[Tuple[int, int], TenGod]) -> List[str]:
    mismatches = []
    for stem in STEMS:
        for target in STEMS:
            expected = stem_relation(stem, target)
            actual = matrix.get((stem.index, target.index))
            if actual != expected:
                mismatches.append(
                    f"{stem.hanja}-{target.hanja}: matrix={actual} rule={expected.value}"
                )
    return mismatches


BRANCH_MATRIX = build_branch_matrix()
STEM_MATRIX = build_stem_matrix()


@dataclass(frozen=True)
class HiddenStemTenGod:
    stem: Stem
    ten_god: TenGod


@dataclass(frozen=True)
class TenGodProfile:
    """사주 전체 십신"""
    stems: Dict[str, TenGod]
    branches: Dict[str, TenGod]
    hidden_stems: Dict[str, Tuple[HiddenStemTenGod, ...]]


class TenGodCalculator:
    """십신 계산기 (매트릭스 조회, 생성 시 규칙 함수로 검증)"""

    def __init__(
        self,
        branch_matrix: Optional[Mapping[Tuple[int, int], TenGod]] = None,
        stem_matrix: Optional[Mapping[Tuple[int, int], TenGod]] = None,
    ):
        self.branch_matrix = branch_matrix if branch_matrix is not None else BRANCH_MATRIX
        self.stem_matrix = stem_matrix if stem_matrix is not None else STEM_MATRIX

        mismatches = verify_branch_matrix(self.branch_matrix) + verify_stem_matrix(self.stem_matrix)
        if mismatches:
            logger.error(f"[TenGod] 매트릭스 불일치 {len(mismatches)}건: {mismatches[:3]}")
            raise ValueError(f"십신 매트릭스가 규칙 함수와 불일치: {mismatches[:3]}")

    def for_stem(self, day_stem: Stem, target: Stem) -> TenGod:
        return self.stem_matrix[(day_stem.index, target.index)]

    def for_branch(self, day_stem: Stem, target: Branch) -> TenGod:
        return self.branch_matrix[(day_stem.index, target.index)]

    def hidden_stems(self, day_stem: Stem, target: Branch) -> Tuple[HiddenStemTenGod, ...]:
        """지장간별 십신 (본기 먼저)"""
        return tuple(
            HiddenStemTenGod(stem=hidden, ten_god=self.for_stem(day_stem, hidden))
            for hidden in target.hidden_stems
        )

    def calculate(self, pillars: Mapping[str, Optional[Pillar]]) -> TenGodProfile:
        """
        Args:
            pillars: {"year", "month", "day", "hour"} → 기둥 (hour는 None 가능)
        """
        day_stem = pillars["day"].stem
        stems = {}
        branches = {}
        hidden = {}

        for position, pillar in pillars.items():
            if pillar is None:
                continue
            stems[position] = self.for_stem(day_stem, pillar.stem)
            branches[position] = self.for_branch(day_stem, pillar.branch)
            hidden[position] = self.hidden_stems(day_stem, pillar.branch)

        return TenGodProfile(stems=stems, branches=branches, hidden_stems=hidden)
