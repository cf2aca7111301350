"""
60갑자 기본 테이블 테스트
"""
import pytest

from manse.services.ganji import (
    BRANCHES,
    SIXTY_GANJI,
    STEMS,
    Element,
    Pillar,
    Polarity,
    branch_of,
    is_valid_pair,
    stem_of,
)


class TestStemBranch:
    """천간/지지 속성"""

    def test_stem_elements(self):
        expected = ["木", "木", "火", "火", "土", "土", "金", "金", "水", "水"]
        assert [s.element.value for s in STEMS] == expected

    def test_stem_polarity_alternates(self):
        assert STEMS[0].polarity is Polarity.YANG
        assert STEMS[1].polarity is Polarity.YIN
        assert STEMS[9].polarity is Polarity.YIN

    def test_branch_elements(self):
        assert branch_of("子").element is Element.WATER
        assert branch_of("寅").element is Element.WOOD
        assert branch_of("午").element is Element.FIRE
        assert branch_of("申").element is Element.METAL
        assert all(branch_of(b).element is Element.EARTH for b in "丑辰未戌")

    def test_hidden_stems_main_first(self):
        """지장간: 본기 먼저"""
        assert [s.hanja for s in branch_of("子").hidden_stems] == ["癸"]
        assert [s.hanja for s in branch_of("寅").hidden_stems] == ["甲", "丙", "戊"]
        assert [s.hanja for s in branch_of("亥").hidden_stems] == ["壬", "甲"]
        assert branch_of("丑").main_stem.hanja == "己"

    def test_lookup_by_hangul_and_index(self):
        assert stem_of("갑") == STEMS[0]
        assert stem_of(13) == STEMS[3]
        assert branch_of("해") == BRANCHES[11]
        with pytest.raises(ValueError):
            stem_of("X")

    def test_clash_and_harm(self):
        assert branch_of("子").clashes(branch_of("午"))
        assert not branch_of("子").clashes(branch_of("未"))
        assert branch_of("子").harms(branch_of("未"))
        assert branch_of("寅").harms(branch_of("巳"))
        assert branch_of("酉").harms(branch_of("戌"))


class TestElementCycle:
    """오행 생극"""

    def test_generates(self):
        assert Element.WOOD.generates(Element.FIRE)
        assert Element.WATER.generates(Element.WOOD)
        assert not Element.FIRE.generates(Element.WOOD)

    def test_controls(self):
        assert Element.WOOD.controls(Element.EARTH)
        assert Element.FIRE.controls(Element.METAL)
        assert Element.WATER.controls(Element.FIRE)


class TestPillar:
    """60갑자 기둥"""

    def test_sixty_unique(self):
        assert len({p.hanja for p in SIXTY_GANJI}) == 60
        assert SIXTY_GANJI[0].hanja == "甲子"
        assert SIXTY_GANJI[59].hanja == "癸亥"

    def test_cycle_index_roundtrip(self):
        for n, pillar in enumerate(SIXTY_GANJI):
            assert pillar.cycle_index == n, f"{pillar.hanja}: expected {n}, got {pillar.cycle_index}"

    def test_invalid_pair_rejected(self):
        """음양이 다른 조합 (甲亥 등) 은 만들 수 없음"""
        assert not is_valid_pair(0, 11)
        with pytest.raises(ValueError):
            Pillar(STEMS[0], BRANCHES[11])
        with pytest.raises(ValueError):
            Pillar.parse("甲亥")

    def test_parse(self):
        assert Pillar.parse("戊午").cycle_index == 54
        assert Pillar.parse("갑자").hanja == "甲子"
        assert Pillar.parse("갑자").hangul == "갑자"
        with pytest.raises(ValueError):
            Pillar.parse("甲")

    def test_shift_wraps(self):
        assert Pillar.parse("癸亥").shift(1).hanja == "甲子"
        assert Pillar.parse("甲子").shift(-1).hanja == "癸亥"
        assert Pillar.parse("甲寅").shift(2).hanja == "丙辰"
