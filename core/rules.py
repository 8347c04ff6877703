"""
规则引擎 - 牌型检测、大小比较、合法性验证

所有方法都是纯函数，无状态
"""
from collections import Counter
from typing import List, NamedTuple, Optional, Sequence

from .cards import Card, Rank, sort_hand
from .combinations import CardCombination, ComboType, MIN_STRAIGHT_LEN, MIN_PINE_PAIRS


class RemovalResult(NamedTuple):
    """移除手牌的结果"""
    ok: bool
    hand: List[Card]


class RuleEngine:
    """
    进城规则引擎

    提供牌型检测、大小比较 (含砍牌规则)、合法性验证等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_consecutive(ranks: Sequence[int]) -> bool:
        """
        检查点数列表是否连续

        Args:
            ranks: 已排序的点数列表

        Returns:
            是否连续
        """
        for i in range(len(ranks) - 1):
            if ranks[i + 1] - ranks[i] != 1:
                return False
        return True

    @staticmethod
    def all_same_rank(cards: Sequence[Card]) -> bool:
        if not cards:
            return False
        return all(c.rank == cards[0].rank for c in cards)

    @staticmethod
    def is_straight(cards: Sequence[Card]) -> bool:
        """顺子: 至少 3 张，点数严格连续且不重复，不含 2"""
        if len(cards) < MIN_STRAIGHT_LEN:
            return False
        ranks = sorted(c.rank for c in cards)
        if ranks[-1] == Rank.TWO:
            return False
        return RuleEngine.is_consecutive(ranks)

    @staticmethod
    def is_consecutive_pairs(cards: Sequence[Card]) -> bool:
        """连对: 偶数张且至少 3 对，每对同点数，对与对点数连续，不含 2"""
        n = len(cards)
        if n < MIN_PINE_PAIRS * 2 or n % 2 != 0:
            return False
        ranks = sorted(c.rank for c in cards)
        if ranks[-1] == Rank.TWO:
            return False

        pair_ranks = []
        for i in range(0, n, 2):
            if ranks[i] != ranks[i + 1]:
                return False
            pair_ranks.append(ranks[i])
        return RuleEngine.is_consecutive(pair_ranks)

    @staticmethod
    def is_quad(cards: Sequence[Card]) -> bool:
        return len(cards) == 4 and RuleEngine.all_same_rank(cards)

    @staticmethod
    def is_valid_set(cards: Sequence[Card]) -> bool:
        """
        检查是否为合法牌型

        Args:
            cards: 牌列表

        Returns:
            是否合法
        """
        if not cards:
            return False
        if len(cards) == 1:
            return True

        # 同点数: 对子/三张/四张
        if RuleEngine.all_same_rank(cards):
            return len(cards) <= 4

        return RuleEngine.is_straight(cards) or RuleEngine.is_consecutive_pairs(cards)

    @staticmethod
    def identify_combination(cards: Sequence[Card]) -> CardCombination:
        """
        识别牌型

        Args:
            cards: 牌列表

        Returns:
            牌型，非法时返回 INVALID 哨兵 (不抛异常)
        """
        if not RuleEngine.is_valid_set(cards):
            return CardCombination.invalid()

        ordered = tuple(sort_hand(cards))
        n = len(ordered)
        value = ordered[-1].power

        if n == 1:
            return CardCombination(ComboType.SINGLE, ordered, value, 1)

        if RuleEngine.all_same_rank(ordered):
            combo_type = {2: ComboType.PAIR, 3: ComboType.TRIPLE, 4: ComboType.BOMB}[n]
            return CardCombination(combo_type, ordered, value, n)

        if RuleEngine.is_straight(ordered):
            return CardCombination(ComboType.STRAIGHT, ordered, value, n)

        # 连对归为炸弹
        return CardCombination(ComboType.BOMB, ordered, value, n)

    @staticmethod
    def can_beat(prev_cards: Sequence[Card], new_cards: Sequence[Card]) -> bool:
        """
        判断 new_cards 能否压过 prev_cards (含砍猪规则)

        砍牌层级:
        - 5 连对: 单 2、对 2、四张、4 连对、3 连对、更小的 5 连对
        - 4 连对: 单 2、对 2、四张、3 连对、更小的 4 连对
        - 四张: 单 2、对 2、3 连对、更小的四张 (比点数)
        - 3 连对: 单 2、更小的 3 连对
        - 其它: 牌型与张数相同，最大牌力更高者胜

        Args:
            prev_cards: 桌面上的牌
            new_cards: 新出的牌

        Returns:
            能否压过
        """
        prev = RuleEngine.identify_combination(prev_cards)
        new = RuleEngine.identify_combination(new_cards)
        if not prev.is_valid or not new.is_valid:
            return False

        new_pine = new.pine_pairs
        prev_pine = prev.pine_pairs
        prev_single_two = prev.combo_type == ComboType.SINGLE and prev.cards[0].is_pig
        prev_pair_two = prev.combo_type == ComboType.PAIR and prev.cards[0].is_pig

        if new_pine == 5:
            if prev_single_two or prev_pair_two or prev.is_quad or prev_pine in (3, 4):
                return True
            if prev_pine == 5:
                return new.value > prev.value

        if new_pine == 4:
            if prev_single_two or prev_pair_two or prev.is_quad or prev_pine == 3:
                return True
            if prev_pine == 4:
                return new.value > prev.value

        if new.is_quad:
            if prev_single_two or prev_pair_two or prev_pine == 3:
                return True
            if prev.is_quad:
                return new.cards[0].rank > prev.cards[0].rank

        if new_pine == 3:
            if prev_single_two:
                return True
            if prev_pine == 3:
                return new.value > prev.value

        # 常规比较: 张数与牌型都必须相同
        if prev.count != new.count or prev.combo_type != new.combo_type:
            return False
        return new.value > prev.value

    @staticmethod
    def has_cards(hand: Sequence[Card], cards: Sequence[Card]) -> bool:
        """检查手牌是否包含全部 cards (多重集合语义)"""
        hand_counter = Counter(hand)
        for card, count in Counter(cards).items():
            if hand_counter.get(card, 0) < count:
                return False
        return True

    @staticmethod
    def remove_cards(hand: Sequence[Card], cards: Sequence[Card]) -> RemovalResult:
        """
        从手牌中移除牌

        任何一张牌不在手中时不做修改，返回 ok=False

        Args:
            hand: 当前手牌
            cards: 要移除的牌

        Returns:
            RemovalResult(ok, 新手牌)
        """
        if not RuleEngine.has_cards(hand, cards):
            return RemovalResult(False, list(hand))

        pending = Counter(cards)
        remaining = []
        for card in hand:
            if pending[card] > 0:
                pending[card] -= 1
                continue
            remaining.append(card)
        return RemovalResult(True, remaining)

    @staticmethod
    def is_valid_play(
        cards: Sequence[Card],
        table: Optional[CardCombination],
        hand: Sequence[Card],
    ) -> bool:
        """
        验证出牌是否合法

        Args:
            cards: 要出的牌
            table: 桌面牌型 (None 或 INVALID 表示主动出牌)
            hand: 当前手牌

        Returns:
            是否合法
        """
        if not cards or not RuleEngine.is_valid_set(cards):
            return False

        if not RuleEngine.has_cards(hand, cards):
            return False

        # 主动出牌: 只要牌型正确且在手中就合法
        if table is None or not table.is_valid:
            return True

        return RuleEngine.can_beat(table.cards, cards)
