"""对手画像测试"""
import pytest

from core.cards import Card, str_to_cards
from core.combinations import CardCombination, ComboType
from brain.opponent import OpponentProfile


def single(power: int) -> CardCombination:
    return CardCombination.from_cards([Card.from_power(power)])


class TestRecordFailure:
    """弱点记录测试"""

    def test_no_record_can_beat(self):
        profile = OpponentProfile(seat=1)
        assert profile.can_possibly_beat(single(0))

    def test_ceiling_blocks_equal_and_higher(self):
        profile = OpponentProfile(seat=1)
        profile.record_failure(single(20))
        assert profile.can_possibly_beat(single(19))
        assert not profile.can_possibly_beat(single(20))
        assert not profile.can_possibly_beat(single(30))

    def test_ceiling_only_rises(self):
        profile = OpponentProfile(seat=1)
        profile.record_failure(single(11))
        profile.record_failure(single(27))
        assert profile.weaknesses[ComboType.SINGLE] == 27
        profile.record_failure(single(11))
        assert profile.weaknesses[ComboType.SINGLE] == 27

    def test_monotonic_after_two_failures(self):
        # 放过 11 和 27 后阈值为 27: 低于阈值仍可能压过，不低于阈值则不能
        profile = OpponentProfile(seat=1)
        profile.record_failure(single(11))
        profile.record_failure(single(27))
        assert profile.can_possibly_beat(single(19))
        assert not profile.can_possibly_beat(single(30))

    def test_per_type(self):
        profile = OpponentProfile(seat=1)
        profile.record_failure(single(40))
        pair = CardCombination.from_cards(str_to_cards("KS KC"))
        assert profile.can_possibly_beat(pair)

    def test_invalid_ignored(self):
        profile = OpponentProfile(seat=1)
        profile.record_failure(CardCombination.invalid())
        assert profile.weaknesses == {}


class TestRecordPlay:
    """出牌统计测试"""

    def test_counts(self):
        profile = OpponentProfile(seat=2)
        profile.record_play(single(5))
        profile.record_play(single(9))
        assert profile.played_stats[ComboType.SINGLE] == 2

    def test_invalid_ignored(self):
        profile = OpponentProfile(seat=2)
        profile.record_play(CardCombination.invalid())
        assert profile.played_stats == {}

    def test_reset(self):
        profile = OpponentProfile(seat=2, cards_remaining=4)
        profile.record_play(single(5))
        profile.record_failure(single(9))
        profile.reset()
        assert profile.cards_remaining == 13
        assert profile.played_stats == {}
        assert profile.weaknesses == {}
