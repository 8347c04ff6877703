"""
牌型定义与出牌生成器

进城共有 5 种合法牌型 (含 INVALID 哨兵)
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, List, Tuple, Iterable
import itertools

from .cards import Card, Rank, sort_hand


class ComboType(IntEnum):
    """牌型类型"""
    INVALID = 0    # 非法牌型 (哨兵，不抛异常)
    SINGLE = 1     # 单张
    PAIR = 2       # 对子
    TRIPLE = 3     # 三张
    BOMB = 4       # 炸弹 (四张相同 或 连对)
    STRAIGHT = 5   # 顺子 (至少3张)


# 顺子/连对的最小长度
MIN_STRAIGHT_LEN = 3      # 顺子至少 3 张
MIN_PINE_PAIRS = 3        # 连对至少 3 对

# 各牌型所需的最少牌数
MIN_CARDS_FOR_TYPE: Dict[ComboType, int] = {
    ComboType.SINGLE: 1,
    ComboType.PAIR: 2,
    ComboType.TRIPLE: 3,
    ComboType.STRAIGHT: MIN_STRAIGHT_LEN,
    ComboType.BOMB: 4,
}


@dataclass(frozen=True, slots=True)
class CardCombination:
    """
    不可变牌型表示

    Attributes:
        combo_type: 牌型
        cards: 组成牌型的牌 (按牌力升序)
        value: 最大一张牌的牌力，INVALID 为 -1
        count: 牌数
    """
    combo_type: ComboType
    cards: Tuple[Card, ...] = ()
    value: int = -1
    count: int = 0

    @classmethod
    def invalid(cls) -> 'CardCombination':
        """创建 INVALID 哨兵"""
        return cls(combo_type=ComboType.INVALID)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> 'CardCombination':
        """从牌列表识别牌型"""
        from .rules import RuleEngine
        return RuleEngine.identify_combination(list(cards))

    @property
    def is_valid(self) -> bool:
        return self.combo_type != ComboType.INVALID

    @property
    def is_bomb(self) -> bool:
        return self.combo_type == ComboType.BOMB

    @property
    def is_quad(self) -> bool:
        return self.combo_type == ComboType.BOMB and self.count == 4

    @property
    def pine_pairs(self) -> int:
        """连对的对数，非连对返回 0"""
        if self.combo_type == ComboType.BOMB and self.count >= 6:
            return self.count // 2
        return 0

    def __len__(self) -> int:
        return self.count

    def __str__(self) -> str:
        if not self.is_valid:
            return "INVALID"
        return f"{self.combo_type.name}[{' '.join(str(c) for c in self.cards)}]"


class MoveGenerator:
    """
    合法出牌生成器

    根据手牌生成所有可能的出牌组合
    """

    def __init__(self, hand: Iterable[Card]):
        """
        Args:
            hand: 手牌列表
        """
        self.hand = sort_hand(hand)
        # 点数 -> 该点数的牌 (按花色升序)
        self.by_rank: Dict[int, List[Card]] = {}
        for card in self.hand:
            self.by_rank.setdefault(card.rank, []).append(card)

    def gen_singles(self) -> List[List[Card]]:
        """生成所有单张"""
        return [[c] for c in self.hand]

    def _gen_sets(self, size: int) -> List[List[Card]]:
        """生成所有同点数组合 (枚举所有花色组合)"""
        result = []
        for rank in sorted(self.by_rank):
            cards = self.by_rank[rank]
            if len(cards) >= size:
                for combo in itertools.combinations(cards, size):
                    result.append(list(combo))
        return result

    def gen_pairs(self) -> List[List[Card]]:
        """生成所有对子"""
        return self._gen_sets(2)

    def gen_triples(self) -> List[List[Card]]:
        """生成所有三张"""
        return self._gen_sets(3)

    def gen_quads(self) -> List[List[Card]]:
        """生成所有四张炸弹"""
        return self._gen_sets(4)

    def _gen_serial(self, repeat: int, min_len: int) -> List[List[Card]]:
        """
        生成连续牌型的通用方法

        每个点数取花色最小的 repeat 张牌

        Args:
            repeat: 每个点数取牌张数 (1=顺子, 2=连对)
            min_len: 最小连续点数个数
        """
        # 2 不能参与顺子/连对
        ranks = sorted(
            r for r, cards in self.by_rank.items()
            if r != Rank.TWO and len(cards) >= repeat
        )

        result = []
        for start in range(len(ranks)):
            for end in range(start + 1, len(ranks)):
                if ranks[end] - ranks[end - 1] != 1:
                    break
                length = end - start + 1
                if length < min_len:
                    continue
                cards = []
                for r in ranks[start:end + 1]:
                    cards.extend(self.by_rank[r][:repeat])
                result.append(cards)
        return result

    def _top_variants(self, serial: List[List[Card]], repeat: int) -> List[List[Card]]:
        """
        为连续牌型追加最高点数换用其它花色的变体

        压牌时比较最大牌力，最高点数的花色决定能否压过
        """
        result = []
        for cards in serial:
            result.append(cards)
            body, top = cards[:-repeat], cards[-repeat:]
            for combo in itertools.combinations(self.by_rank[top[0].rank], repeat):
                if list(combo) != top:
                    result.append(body + list(combo))
        return result

    def gen_straights(self, required_len: int = 0, all_tops: bool = False) -> List[List[Card]]:
        """生成顺子"""
        straights = self._gen_serial(1, MIN_STRAIGHT_LEN)
        if required_len:
            straights = [s for s in straights if len(s) == required_len]
        if all_tops:
            straights = self._top_variants(straights, 1)
        return straights

    def gen_pines(self, all_tops: bool = False) -> List[List[Card]]:
        """生成连对 (3 对及以上)"""
        pines = self._gen_serial(2, MIN_PINE_PAIRS)
        if all_tops:
            pines = self._top_variants(pines, 2)
        return pines

    def gen_bombs(self, all_tops: bool = False) -> List[List[Card]]:
        """生成所有炸弹 (四张 + 连对)"""
        return self.gen_quads() + self.gen_pines(all_tops)

    def generate_all(self) -> List[CardCombination]:
        """
        生成所有可能的出牌 (主动出牌)

        Returns:
            所有合法牌型列表
        """
        from .rules import RuleEngine

        groups = (
            self.gen_singles(),
            self.gen_pairs(),
            self.gen_triples(),
            self.gen_quads(),
            self.gen_straights(),
            self.gen_pines(),
        )
        return [RuleEngine.identify_combination(cards) for group in groups for cards in group]

    def generate_responses(self, table: CardCombination) -> List[CardCombination]:
        """
        生成对桌面牌型的合法压牌

        Args:
            table: 桌面上需要压过的牌型 (INVALID 表示主动出牌)

        Returns:
            所有能压过的牌型 (不含 PASS)
        """
        from .rules import RuleEngine

        if not table.is_valid:
            return self.generate_all()

        candidates: List[List[Card]] = []

        # 同类型更大的牌
        if table.combo_type == ComboType.SINGLE:
            candidates.extend(self.gen_singles())
        elif table.combo_type == ComboType.PAIR:
            candidates.extend(self.gen_pairs())
        elif table.combo_type == ComboType.TRIPLE:
            candidates.extend(self.gen_triples())
        elif table.combo_type == ComboType.STRAIGHT:
            candidates.extend(self.gen_straights(required_len=table.count, all_tops=True))

        # 炸弹 (同类比较 或 砍牌) 统一交给 can_beat 判定
        candidates.extend(self.gen_bombs(all_tops=True))

        responses = []
        seen = set()
        for cards in candidates:
            key = tuple(cards)
            if key in seen:
                continue
            seen.add(key)
            if RuleEngine.can_beat(table.cards, cards):
                responses.append(RuleEngine.identify_combination(cards))
        return responses
