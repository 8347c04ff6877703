"""出牌打分测试"""
from dataclasses import fields, replace

import pytest

from core.cards import str_to_cards
from core.combinations import CardCombination
from bot.config import PhaseWeights
from bot.scoring import ScoredMove, score_hand, build_scored_moves


def combo(s: str) -> CardCombination:
    return CardCombination.from_cards(str_to_cards(s))


@pytest.fixture
def zero():
    """全部权重为 0"""
    return PhaseWeights.from_dict({f.name: 0.0 for f in fields(PhaseWeights)})


class TestScoreHand:
    """score_hand 测试"""

    def test_empty(self):
        assert score_hand([], PhaseWeights()) == 0.0

    def test_hand_score_weight(self, zero):
        weights = replace(zero, hand_score_weight=1.0)
        assert score_hand(str_to_cards("2S 2C 2D 3S"), weights) == 58.0

    def test_total_cards(self, zero):
        weights = replace(zero, total_card_weight=-1.0)
        assert score_hand(str_to_cards("3S 9H KD"), weights) == -3.0


class TestBuildScoredMoves:
    """build_scored_moves 测试"""

    def test_remaining(self):
        hand = str_to_cards("3S 4S 9H")
        scored = build_scored_moves(hand, [combo("9H"), combo("3S")], PhaseWeights())
        assert [m.remaining for m in scored] == [str_to_cards("3S 4S"), str_to_cards("4S 9H")]
        assert all(isinstance(m, ScoredMove) for m in scored)

    def test_finish_bonus(self, zero):
        weights = replace(zero, finish_bonus=1000.0)
        scored = build_scored_moves(str_to_cards("5S"), [combo("5S")], weights)
        assert scored[0].score == 1000.0
        assert scored[0].remaining == []

    def test_bomb_penalty(self, zero):
        weights = replace(zero, use_bomb_penalty=3.0)
        scored = build_scored_moves(str_to_cards("7S 7C 7D 7H 3S"), [combo("7S 7C 7D 7H")], weights)
        assert scored[0].score == -3.0

    def test_high_card_penalty(self, zero):
        weights = replace(zero, use_high_card_penalty=1.0)
        scored = build_scored_moves(str_to_cards("7H 3S"), [combo("7H")], weights)
        assert scored[0].score == -19.0

    def test_two_penalty(self, zero):
        weights = replace(zero, use_two_penalty=4.0)
        scored = build_scored_moves(str_to_cards("2S 2H 3S"), [combo("2S 2H")], weights)
        assert scored[0].score == -8.0

    def test_blocker_bonus_only_with_threat(self, zero):
        weights = replace(zero, blocker_high_card_bonus=1.0)
        hand = str_to_cards("7H 3S")
        assert build_scored_moves(hand, [combo("7H")], weights, threat=True)[0].score == 19.0
        assert build_scored_moves(hand, [combo("7H")], weights, threat=False)[0].score == 0.0
