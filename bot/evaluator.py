"""
手牌评估

对一手牌做静态打分，并给出牌型统计 (供分阶段打分使用)
"""
from dataclasses import dataclass
from typing import Iterable, List

from core.cards import Card, Rank, sort_hand
from core.combinations import CardCombination

from .organizer import (
    OrganizedHand,
    PartitionStrategy,
    extract_pines,
    extract_quads,
    extract_sets,
    extract_straights,
    get_tactical_options,
)

# 打分表
SCORE_PIG = 20.0
SCORE_BOMB = 30.0
SCORE_STRAIGHT_CARD = 5.0
SCORE_TRIPLE = 10.0
SCORE_PAIR = 5.0
SCORE_HIGH_SINGLE = 2.0
SCORE_LOW_SINGLE = -2.0


def single_score(card: Card) -> float:
    """散牌得分: 2 为 +20，J/Q/K/A 为 +2，其余 -2"""
    if card.is_pig:
        return SCORE_PIG
    if Rank.JACK <= card.rank <= Rank.ACE:
        return SCORE_HIGH_SINGLE
    return SCORE_LOW_SINGLE


def _score_parts(
    bombs: List[CardCombination],
    straights: List[CardCombination],
    triples: List[CardCombination],
    pairs: List[CardCombination],
    singles: Iterable[Card],
) -> float:
    score = SCORE_BOMB * len(bombs)
    score += sum(SCORE_STRAIGHT_CARD * s.count for s in straights)
    score += SCORE_TRIPLE * len(triples)
    score += SCORE_PAIR * len(pairs)
    score += sum(single_score(c) for c in singles)
    return score


def evaluate_hand(hand: Iterable[Card]) -> float:
    """
    静态手牌得分

    依次提取 四张 -> 顺子 -> 三张 -> 对子 -> 散牌 并按打分表累加
    四张之外的 2 不参与组合，逐张按 +20 计分

    Args:
        hand: 手牌

    Returns:
        得分 (越高越好)
    """
    quads, rest = extract_quads(hand)
    pigs = [c for c in rest if c.is_pig]
    rest = [c for c in rest if not c.is_pig]

    straights, rest = extract_straights(rest)
    triples, pairs, singles = extract_sets(rest)
    return _score_parts(quads, straights, triples, pairs, pigs + singles)


def score_partition(organized: OrganizedHand) -> float:
    """按打分表给一个划分打分 (连对与四张同按炸弹计)"""
    return _score_parts(
        organized.bombs,
        organized.straights,
        organized.triples,
        organized.pairs,
        organized.trash,
    )


def best_partition(hand: Iterable[Card]) -> OrganizedHand:
    """
    两种策略中得分更高的划分

    平局时取 STRAIGHTS_FIRST
    """
    options = get_tactical_options(hand)
    straights_first = options[PartitionStrategy.STRAIGHTS_FIRST]
    pairs_first = options[PartitionStrategy.PAIRS_FIRST]
    if score_partition(pairs_first) > score_partition(straights_first):
        return pairs_first
    return straights_first


@dataclass
class HandProfile:
    """
    手牌牌型统计

    提取顺序: 连对 -> 顺子 -> 按点数计数
    """
    singles: int = 0
    pairs: int = 0
    triples: int = 0
    quads: int = 0
    straights: int = 0
    straight_cards: int = 0
    pines: int = 0
    pine_cards: int = 0
    twos: int = 0
    total_cards: int = 0


def profile_hand(hand: Iterable[Card]) -> HandProfile:
    hand = sort_hand(hand)
    profile = HandProfile(total_cards=len(hand))
    profile.twos = sum(1 for c in hand if c.is_pig)

    pines, rest = extract_pines(hand)
    profile.pines = len(pines)
    profile.pine_cards = sum(p.count for p in pines)

    straights, rest = extract_straights(rest)
    profile.straights = len(straights)
    profile.straight_cards = sum(s.count for s in straights)

    counts = {}
    for card in rest:
        counts[card.rank] = counts.get(card.rank, 0) + 1
    for n in counts.values():
        if n == 1:
            profile.singles += 1
        elif n == 2:
            profile.pairs += 1
        elif n == 3:
            profile.triples += 1
        elif n == 4:
            profile.quads += 1
    return profile
