"""
牌的定义与编码

进城 (Tien Len) 使用 52 张牌：
- 点数 0..12 对应 3, 4, ..., K, A, 2
- 花色 0..3 对应 黑桃 < 梅花 < 方块 < 红桃
- 牌力 power = rank * 4 + suit，是严格全序
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Tuple
import numpy as np


class Rank(IntEnum):
    """点数定义 (与服务端编码保持一致)"""
    THREE = 0
    FOUR = 1
    FIVE = 2
    SIX = 3
    SEVEN = 4
    EIGHT = 5
    NINE = 6
    TEN = 7
    JACK = 8
    QUEEN = 9
    KING = 10
    ACE = 11
    TWO = 12


class Suit(IntEnum):
    """花色定义"""
    SPADES = 0
    CLUBS = 1
    DIAMONDS = 2
    HEARTS = 3


NUM_RANKS = 13
NUM_SUITS = 4
DECK_SIZE = 52
HAND_SIZE = 13

# 点数到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    0: '3', 1: '4', 2: '5', 3: '6', 4: '7', 5: '8', 6: '9',
    7: '10', 8: 'J', 9: 'Q', 10: 'K', 11: 'A', 12: '2',
}

SUIT_TO_STR: Dict[int, str] = {0: 'S', 1: 'C', 2: 'D', 3: 'H'}

STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}
STR_TO_SUIT: Dict[str, int] = {v: k for k, v in SUIT_TO_STR.items()}


@dataclass(frozen=True, slots=True, order=False)
class Card:
    """
    不可变单张牌

    Attributes:
        rank: 点数 0..12 (3..2)
        suit: 花色 0..3
    """
    rank: int
    suit: int

    def __post_init__(self):
        if not 0 <= self.rank < NUM_RANKS:
            raise ValueError(f"rank out of range: {self.rank}")
        if not 0 <= self.suit < NUM_SUITS:
            raise ValueError(f"suit out of range: {self.suit}")

    @property
    def power(self) -> int:
        """牌力 (rank * 4 + suit)"""
        return self.rank * NUM_SUITS + self.suit

    @property
    def is_pig(self) -> bool:
        """是否为 2 (俗称"猪")"""
        return self.rank == Rank.TWO

    @classmethod
    def from_power(cls, power: int) -> 'Card':
        return cls(rank=power // NUM_SUITS, suit=power % NUM_SUITS)

    def __lt__(self, other: 'Card') -> bool:
        return self.power < other.power

    def __le__(self, other: 'Card') -> bool:
        return self.power <= other.power

    def __gt__(self, other: 'Card') -> bool:
        return self.power > other.power

    def __ge__(self, other: 'Card') -> bool:
        return self.power >= other.power

    def __str__(self) -> str:
        return RANK_TO_STR[self.rank] + SUIT_TO_STR[self.suit]

    def __repr__(self) -> str:
        return f"Card({self})"


# 完整牌组 (52 张，按牌力升序)
FULL_DECK: Tuple[Card, ...] = tuple(Card.from_power(p) for p in range(DECK_SIZE))


def card_index(card: Card) -> int:
    """牌在 52 维状态数组中的下标 (即牌力)"""
    return card.power


def new_deck() -> List[Card]:
    """返回按牌力排序的新牌组"""
    return list(FULL_DECK)


def shuffle_deck(deck: List[Card], rng: np.random.Generator) -> List[Card]:
    """
    洗牌 (返回新列表)

    Args:
        deck: 牌组
        rng: 显式注入的随机数生成器，保证结果可复现

    Returns:
        打乱后的牌组副本
    """
    order = rng.permutation(len(deck))
    return [deck[i] for i in order]


def sort_hand(cards: Iterable[Card]) -> List[Card]:
    """按牌力升序排序"""
    return sorted(cards, key=lambda c: c.power)


def smallest_card(hand: List[Card]) -> Card:
    """手牌中牌力最小的牌"""
    if not hand:
        raise ValueError("empty hand")
    return min(hand, key=lambda c: c.power)


def max_power(cards: Iterable[Card]) -> int:
    """最大牌力，空集合返回 -1"""
    return max((c.power for c in cards), default=-1)


def card_from_str(token: str) -> Card:
    """
    解析单张牌

    Args:
        token: 如 "3S", "10H", "2D"

    Returns:
        Card
    """
    token = token.strip().upper()
    if len(token) < 2:
        raise ValueError(f"invalid card token: {token!r}")
    rank_str, suit_str = token[:-1], token[-1]
    if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
        raise ValueError(f"invalid card token: {token!r}")
    return Card(rank=STR_TO_RANK[rank_str], suit=STR_TO_SUIT[suit_str])


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 空格分隔的牌，如 "3S 4S 5D"

    Returns:
        牌列表
    """
    return [card_from_str(t) for t in s.split()]


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3S 4S 5D"，空列表返回 "Pass"
    """
    cards = sort_hand(cards)
    if not cards:
        return "Pass"
    return ' '.join(str(c) for c in cards)


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量 (下标 = 牌力)

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组
    """
    array = np.zeros(DECK_SIZE, dtype=np.float32)
    for card in cards:
        array[card_index(card)] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """
    将 52 维数组转换回牌列表

    Args:
        array: 52 维 numpy 数组

    Returns:
        按牌力排序的牌列表
    """
    return [Card.from_power(int(i)) for i in np.flatnonzero(array[:DECK_SIZE] > 0)]
