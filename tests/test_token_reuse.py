"""One token kind composed into several spaces at different offsets."""
from enum import auto

from tokau.core.space import DYNAMIC, SpaceToken, define_space
from tokau.core.token import NameToken, RangeToken


class CommonToken(NameToken):
    START = auto()
    END = auto()
    PAUSE = auto()


class SpecialToken(NameToken):
    ALPHA = auto()
    BETA = auto()


class TextTokens(RangeToken, count=100):
    pass


class AudioTokens(RangeToken, count=50):
    pass


COMMON_FIRST = define_space("common-first", [CommonToken, SpecialToken, TextTokens])
SPECIAL_FIRST = define_space("special-first", [SpecialToken, CommonToken, AudioTokens],
                             dynamic=True)
TEXT_FIRST = define_space("text-first", [TextTokens, CommonToken], dynamic=True)
MIXED = define_space("mixed", [AudioTokens, SpecialToken, TextTokens, CommonToken])


class TestPositionsAcrossSpaces:
    def test_offsets(self):
        assert COMMON_FIRST.offset_of(CommonToken) == 0
        assert SPECIAL_FIRST.offset_of(CommonToken) == 2
        assert TEXT_FIRST.offset_of(CommonToken) == 100
        assert MIXED.offset_of(CommonToken) == 152

    def test_same_token_different_positions(self):
        assert CommonToken.END.inside(COMMON_FIRST) == 1
        assert CommonToken.END.inside(SPECIAL_FIRST) == 3
        assert CommonToken.END.inside(TEXT_FIRST) == 101
        assert CommonToken.END.inside(MIXED) == 153

    def test_range_inside(self):
        assert TextTokens.inside(COMMON_FIRST, 0) == 5
        assert TextTokens.inside(TEXT_FIRST, 0) == 0
        assert TextTokens.inside(MIXED, 99) == 151
        assert TextTokens.inside(MIXED, 100) is None

    def test_reserved(self):
        assert COMMON_FIRST.reserved == 105
        assert SPECIAL_FIRST.reserved == 55
        assert TEXT_FIRST.reserved == 103
        assert MIXED.reserved == 155


class TestDecodeAcrossSpaces:
    def test_reverse_lookups(self):
        assert COMMON_FIRST.try_as(CommonToken, 2) is CommonToken.PAUSE
        assert SPECIAL_FIRST.try_as(CommonToken, 4) is CommonToken.PAUSE
        assert TEXT_FIRST.try_as(CommonToken, 102) is CommonToken.PAUSE
        assert MIXED.try_as(CommonToken, 154) is CommonToken.PAUSE

    def test_same_id_different_meaning(self):
        assert COMMON_FIRST.decode(0) == SpaceToken(CommonToken, CommonToken.START)
        assert SPECIAL_FIRST.decode(0) == SpaceToken(SpecialToken, SpecialToken.ALPHA)
        assert TEXT_FIRST.decode(0) == SpaceToken(TextTokens, TextTokens(0))
        assert MIXED.decode(0) == SpaceToken(AudioTokens, AudioTokens(0))

    def test_dynamic_tokens(self):
        assert SPECIAL_FIRST.decode(55) == SpaceToken(DYNAMIC, 0)
        assert TEXT_FIRST.decode(55) == SpaceToken(TextTokens, TextTokens(55))
        assert TEXT_FIRST.decode(200) == SpaceToken(DYNAMIC, 97)
        assert COMMON_FIRST.try_decode(200) is None

    def test_round_trip_consistency(self):
        for space in (COMMON_FIRST, SPECIAL_FIRST, TEXT_FIRST, MIXED):
            for member in CommonToken:
                token_id = space.encode(member)
                assert space.decode(token_id) == SpaceToken(CommonToken, member)

    def test_cross_space_isolation(self):
        """A position from one space decodes as something else in another."""
        token_id = CommonToken.START.inside(MIXED)
        assert MIXED.try_as(CommonToken, token_id) is CommonToken.START
        assert COMMON_FIRST.try_as(CommonToken, token_id) is None
        assert SPECIAL_FIRST.decode(token_id) == SpaceToken(DYNAMIC, token_id - 55)
