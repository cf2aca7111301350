"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
십이신살(十二神殺) 계산
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
규칙 리스트를 순서대로 모두 평가, 마지막으로 매칭된 규칙이 우선

1. 삼합 기준 12신살 (연주: 일지 기준, 나머지: 연지 기준)
2. 세파: 월/일/시지가 연지와 충
3. 월파: 일/시지가 월지와 충
4. 육해: 연/월/시지 ↔ 일지, 일지 ↔ 시지
5. 겁살 조합: 寅申 동시 존재, 丙申/壬寅 일주, 丙申 시주
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from manse.services.ganji import Branch, Pillar

SPIRIT_SEQUENCE = (
    "劫殺", "災殺", "天殺", "地殺", "年殺", "月殺",
    "亡神殺", "将星殺", "攀鞍殺", "駅馬殺", "六害殺", "華蓋殺",
)

YEAR_BREAK = "歳破"
MONTH_BREAK = "月破"
SIX_HARM = "六害殺"
ROBBERY = "劫殺"

SPIRIT_KOREAN = {
    "劫殺": "겁살", "災殺": "재살", "天殺": "천살", "地殺": "지살",
    "年殺": "년살", "月殺": "월살", "亡神殺": "망신살", "将星殺": "장성살",
    "攀鞍殺": "반안살", "駅馬殺": "역마살", "六害殺": "육해살", "華蓋殺": "화개살",
    "歳破": "세파", "月破": "월파",
}

# 삼합 그룹(지지 인덱스 % 4) → 겁살 지지 (묘고 다음 칸)
# 申子辰 → 巳, 巳酉丑 → 寅, 寅午戌 → 亥, 亥卯未 → 申
ROBBERY_BRANCH_BY_GROUP = {0: 5, 1: 2, 2: 11, 3: 8}

POSITIONS = ("year", "month", "day", "hour")

Pillars = Mapping[str, Optional[Pillar]]


def cycle_spirit(reference: Branch, target: Branch) -> str:
    """기준 지지의 삼합 그룹 → 대상 지지의 12신살"""
    start = ROBBERY_BRANCH_BY_GROUP[reference.index % 4]
    return SPIRIT_SEQUENCE[(target.index - start) % 12]


def _present(pillars: Pillars) -> Dict[str, Pillar]:
    return {pos: pillars[pos] for pos in POSITIONS if pillars.get(pos) is not None}


# ============ 규칙 ============

def _cycle_rule(pillars: Pillars) -> Dict[str, str]:
    present = _present(pillars)
    out = {}
    for pos, pillar in present.items():
        reference = present["day"].branch if pos == "year" else present["year"].branch
        out[pos] = cycle_spirit(reference, pillar.branch)
    return out


def _year_clash_rule(pillars: Pillars) -> Dict[str, str]:
    present = _present(pillars)
    year_branch = present["year"].branch
    return {
        pos: YEAR_BREAK
        for pos in ("month", "day", "hour")
        if pos in present and present[pos].branch.clashes(year_branch)
    }


def _month_clash_rule(pillars: Pillars) -> Dict[str, str]:
    present = _present(pillars)
    month_branch = present["month"].branch
    return {
        pos: MONTH_BREAK
        for pos in ("day", "hour")
        if pos in present and present[pos].branch.clashes(month_branch)
    }


def _six_harm_rule(pillars: Pillars) -> Dict[str, str]:
    present = _present(pillars)
    day_branch = present["day"].branch
    out = {
        pos: SIX_HARM
        for pos in ("year", "month", "hour")
        if pos in present and present[pos].branch.harms(day_branch)
    }
    if "hour" in present and day_branch.harms(present["hour"].branch):
        out["day"] = SIX_HARM
    return out


def _robbery_rule(pillars: Pillars) -> Dict[str, str]:
    present = _present(pillars)
    out = {}

    branch_indices = {pillar.branch.index for pillar in present.values()}
    if 2 in branch_indices and 8 in branch_indices:
        # 寅申 동시 존재 → 일/월/연/시 순서로 첫 번째 寅 또는 申
        for pos in ("day", "month", "year", "hour"):
            if pos in present and present[pos].branch.index in (2, 8):
                out[pos] = ROBBERY
                break

    if present["day"].hanja in ("丙申", "壬寅"):
        out["day"] = ROBBERY
    if "hour" in present and present["hour"].hanja == "丙申":
        out["hour"] = ROBBERY
    return out


@dataclass(frozen=True)
class SpiritRule:
    name: str
    evaluate: Callable[[Pillars], Dict[str, str]]


DEFAULT_SPIRIT_RULES: Tuple[SpiritRule, ...] = (
    SpiritRule("cycle", _cycle_rule),
    SpiritRule("year_clash", _year_clash_rule),
    SpiritRule("month_clash", _month_clash_rule),
    SpiritRule("six_harm", _six_harm_rule),
    SpiritRule("robbery", _robbery_rule),
)


class TwelveSpiritCalculator:
    """십이신살 계산기 (규칙 리스트, 후순위 우선)"""

    def __init__(self, rules: Sequence[SpiritRule] = DEFAULT_SPIRIT_RULES):
        self.rules = tuple(rules)

    def trace(self, pillars: Pillars) -> Dict[str, List[Tuple[str, str]]]:
        """위치별 매칭된 (규칙, 신살) 목록 - 평가 순서대로"""
        matches: Dict[str, List[Tuple[str, str]]] = {pos: [] for pos in _present(pillars)}
        for rule in self.rules:
            for pos, label in rule.evaluate(pillars).items():
                matches[pos].append((rule.name, label))
        return matches

    def calculate(self, pillars: Pillars) -> Dict[str, str]:
        return {
            pos: hits[-1][1]
            for pos, hits in self.trace(pillars).items()
            if hits
        }
