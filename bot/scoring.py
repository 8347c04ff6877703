"""
分阶段出牌打分

出牌得分 = 剩余手牌得分 - 使用惩罚 (+ 出完奖励 / 阻挡奖励)
"""
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from core.cards import Card
from core.combinations import CardCombination, ComboType
from core.rules import RuleEngine

from .config import PhaseWeights
from .evaluator import HandProfile, evaluate_hand, profile_hand


@dataclass
class ScoredMove:
    """
    带得分的候选出牌

    Attributes:
        cards: 出的牌
        combo: 牌型
        score: 得分
        remaining: 出牌后剩余手牌
        profile: 剩余手牌的牌型统计
    """
    cards: Tuple[Card, ...]
    combo: CardCombination
    score: float
    remaining: List[Card]
    profile: HandProfile


def _score_with_profile(hand: Sequence[Card], profile: HandProfile, weights: PhaseWeights) -> float:
    score = weights.hand_score_weight * evaluate_hand(hand)
    score += weights.straight_card_weight * profile.straight_cards
    score += weights.pine_card_weight * profile.pine_cards
    score += weights.pair_weight * profile.pairs
    score += weights.triple_weight * profile.triples
    score += weights.quad_weight * profile.quads
    score += weights.single_weight * profile.singles
    score += weights.total_card_weight * profile.total_cards
    return score


def score_hand(hand: Sequence[Card], weights: PhaseWeights) -> float:
    """按阶段权重给手牌打分"""
    return _score_with_profile(hand, profile_hand(hand), weights)


def build_scored_moves(
    hand: Sequence[Card],
    moves: Iterable[CardCombination],
    weights: PhaseWeights,
    threat: bool = False,
) -> List[ScoredMove]:
    """
    给每个候选出牌打分

    Args:
        hand: 当前手牌
        moves: 候选牌型
        weights: 阶段权重
        threat: 是否有对手快出完 (单张按牌力加分)

    Returns:
        与 moves 顺序一致的 ScoredMove 列表
    """
    scored = []
    for combo in moves:
        removal = RuleEngine.remove_cards(hand, combo.cards)
        remaining = removal.hand
        profile = profile_hand(remaining)
        score = _score_with_profile(remaining, profile, weights)

        if not remaining:
            score += weights.finish_bonus
        score -= weights.use_high_card_penalty * combo.value
        if combo.combo_type == ComboType.BOMB:
            score -= weights.use_bomb_penalty
        twos = sum(1 for c in combo.cards if c.is_pig)
        score -= weights.use_two_penalty * twos
        if threat and combo.combo_type == ComboType.SINGLE:
            score += weights.blocker_high_card_bonus * combo.value

        scored.append(ScoredMove(
            cards=tuple(combo.cards),
            combo=combo,
            score=score,
            remaining=remaining,
            profile=profile,
        ))
    return scored
