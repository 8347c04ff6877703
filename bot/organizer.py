"""
手牌整理

把一手牌贪心地划分为 炸弹 / 顺子 / 三张 / 对子 / 散牌

贪心结果依赖提取顺序，因此提供两种策略作为不同的战术方案:
- STRAIGHTS_FIRST: 炸弹 -> 顺子 -> 三张/对子
- PAIRS_FIRST: 炸弹 -> 三张/对子 -> 顺子

所有提取都基于一张点数计数表完成，平局时取最低点数、同点数取最低花色
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from core.cards import Card, NUM_RANKS, Rank, sort_hand
from core.combinations import CardCombination, MIN_PINE_PAIRS, MIN_STRAIGHT_LEN
from core.rules import RuleEngine


class PartitionStrategy(Enum):
    """划分策略 (仅提取顺序不同)"""
    STRAIGHTS_FIRST = "straights_first"
    PAIRS_FIRST = "pairs_first"


@dataclass
class OrganizedHand:
    """
    一手牌的战术划分 (各部分互不相交且覆盖全部手牌)

    Attributes:
        bombs: 四张与连对
        straights: 顺子
        triples: 三张
        pairs: 对子
        trash: 不属于任何结构的散牌
        strategy: 生成该划分的策略
    """
    bombs: List[CardCombination] = field(default_factory=list)
    straights: List[CardCombination] = field(default_factory=list)
    triples: List[CardCombination] = field(default_factory=list)
    pairs: List[CardCombination] = field(default_factory=list)
    trash: List[Card] = field(default_factory=list)
    strategy: PartitionStrategy = PartitionStrategy.STRAIGHTS_FIRST

    def structures(self) -> List[CardCombination]:
        """所有多张结构 (不含散牌)"""
        return self.bombs + self.straights + self.triples + self.pairs

    def all_combinations(self) -> List[CardCombination]:
        """所有结构 + 每张散牌作为单张"""
        singles = [RuleEngine.identify_combination([c]) for c in self.trash]
        return self.structures() + singles

    def cards(self) -> List[Card]:
        result = list(self.trash)
        for combo in self.structures():
            result.extend(combo.cards)
        return sort_hand(result)

    def structure_of(self, card: Card) -> Optional[CardCombination]:
        """card 所属的结构，散牌返回 None"""
        for combo in self.structures():
            if card in combo.cards:
                return combo
        return None

    def __len__(self) -> int:
        return len(self.trash) + sum(c.count for c in self.structures())


class RankTable:
    """
    点数计数表

    buckets[rank] 为该点数剩余的牌，按花色升序
    """

    def __init__(self, cards: Iterable[Card]):
        self.buckets: List[List[Card]] = [[] for _ in range(NUM_RANKS)]
        for card in sort_hand(cards):
            self.buckets[card.rank].append(card)

    def count(self, rank: int) -> int:
        return len(self.buckets[rank])

    def take(self, rank: int, n: int) -> List[Card]:
        """取出该点数花色最低的 n 张"""
        taken = self.buckets[rank][:n]
        del self.buckets[rank][:n]
        return taken

    def longest_run(self, min_count: int, min_len: int) -> Optional[Tuple[int, int]]:
        """
        找出每个点数至少 min_count 张的最长连续段 (不含 2)

        Returns:
            (起始点数, 长度)，长度不足 min_len 时返回 None；等长取最低起点
        """
        best_start, best_len = -1, 0
        start, length = -1, 0
        for rank in range(Rank.TWO):
            if self.count(rank) >= min_count:
                if length == 0:
                    start = rank
                length += 1
                if length > best_len:
                    best_start, best_len = start, length
            else:
                length = 0
        if best_len < min_len:
            return None
        return best_start, best_len

    def remaining(self) -> List[Card]:
        return [c for bucket in self.buckets for c in bucket]


def extract_quads(hand: Iterable[Card]) -> Tuple[List[CardCombination], List[Card]]:
    """提取全部四张 (从低到高)"""
    table = RankTable(hand)
    quads = []
    for rank in range(NUM_RANKS):
        if table.count(rank) == 4:
            quads.append(RuleEngine.identify_combination(table.take(rank, 4)))
    return quads, table.remaining()


def extract_pines(hand: Iterable[Card]) -> Tuple[List[CardCombination], List[Card]]:
    """反复提取最长的连对 (至少 3 对)"""
    table = RankTable(hand)
    pines = []
    while True:
        run = table.longest_run(min_count=2, min_len=MIN_PINE_PAIRS)
        if run is None:
            break
        start, length = run
        cards = []
        for rank in range(start, start + length):
            cards.extend(table.take(rank, 2))
        pines.append(RuleEngine.identify_combination(cards))
    return pines, table.remaining()


def extract_bombs(hand: Iterable[Card]) -> Tuple[List[CardCombination], List[Card]]:
    """
    提取炸弹: 先四张，再反复提取最长连对

    Returns:
        (炸弹列表, 剩余牌)
    """
    quads, rest = extract_quads(hand)
    pines, rest = extract_pines(rest)
    return quads + pines, rest


def extract_straights(hand: Iterable[Card]) -> Tuple[List[CardCombination], List[Card]]:
    """
    反复提取最长顺子 (至少 3 张，不含 2)，每个点数取花色最低的一张

    Returns:
        (顺子列表, 剩余牌)
    """
    table = RankTable(hand)
    straights = []
    while True:
        run = table.longest_run(min_count=1, min_len=MIN_STRAIGHT_LEN)
        if run is None:
            break
        start, length = run
        cards = []
        for rank in range(start, start + length):
            cards.extend(table.take(rank, 1))
        straights.append(RuleEngine.identify_combination(cards))
    return straights, table.remaining()


def extract_sets(
    hand: Iterable[Card],
) -> Tuple[List[CardCombination], List[CardCombination], List[Card]]:
    """
    按点数分组提取三张与对子

    Returns:
        (三张列表, 对子列表, 剩余散牌)
    """
    table = RankTable(hand)
    triples, pairs, remaining = [], [], []
    for rank in range(NUM_RANKS):
        cards = table.buckets[rank]
        if len(cards) == 3:
            triples.append(RuleEngine.identify_combination(cards))
        elif len(cards) == 2:
            pairs.append(RuleEngine.identify_combination(cards))
        else:
            # 四张应已作为炸弹提取
            remaining.extend(cards)
    return triples, pairs, remaining


def partition_hand(
    hand: Iterable[Card],
    strategy: PartitionStrategy = PartitionStrategy.STRAIGHTS_FIRST,
) -> OrganizedHand:
    """
    按策略划分手牌

    Args:
        hand: 手牌
        strategy: 提取顺序

    Returns:
        OrganizedHand
    """
    organized = OrganizedHand(strategy=strategy)
    pool = sort_hand(hand)
    if not pool:
        return organized

    organized.bombs, pool = extract_bombs(pool)
    if strategy == PartitionStrategy.STRAIGHTS_FIRST:
        organized.straights, pool = extract_straights(pool)
        organized.triples, organized.pairs, pool = extract_sets(pool)
    else:
        organized.triples, organized.pairs, pool = extract_sets(pool)
        organized.straights, pool = extract_straights(pool)
    organized.trash = sort_hand(pool)
    return organized


def partition_hand_pairs_first(hand: Iterable[Card]) -> OrganizedHand:
    """对子优先于顺子的划分"""
    return partition_hand(hand, PartitionStrategy.PAIRS_FIRST)


def get_tactical_options(hand: Iterable[Card]) -> Dict[PartitionStrategy, OrganizedHand]:
    """两种策略的划分结果"""
    hand = list(hand)
    return {strategy: partition_hand(hand, strategy) for strategy in PartitionStrategy}
