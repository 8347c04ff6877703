"""
机器人记忆

每个机器人座位持有一份私有视角:
- 52 张牌各自的状态 (未知 / 我的 / 已出 / 对手)
- 各座位的对手画像
- 当前桌面需要压过的牌型
"""
from enum import IntEnum
from typing import Iterable, List, Optional
import logging
import numpy as np

from core.cards import Card, DECK_SIZE, HAND_SIZE, card_index
from core.combinations import CardCombination
from core.rules import RuleEngine
from core.state import NUM_SEATS

from .opponent import OpponentProfile

logger = logging.getLogger(__name__)


class CardStatus(IntEnum):
    """机器人对某张牌的认知"""
    UNKNOWN = 0    # 不知道在谁手里
    MINE = 1       # 在自己手里
    PLAYED = 2     # 已打出
    OPPONENT = 3   # 推断在对手手里


class GameMemory:
    """
    对局记忆

    Attributes:
        deck_status: 52 维状态数组，下标 = rank * 4 + suit
        opponents: 按座位索引的对手画像，None 表示尚无观察
        current_combo: 当前桌面牌型
    """

    def __init__(self):
        self.deck_status = np.zeros(DECK_SIZE, dtype=np.int8)
        self.opponents: List[Optional[OpponentProfile]] = [None] * NUM_SEATS
        self.current_combo = CardCombination.invalid()

    def reset(self):
        """新一局: 全部牌回到未知，清空所有对手记录"""
        self.deck_status[:] = CardStatus.UNKNOWN
        for profile in self.opponents:
            if profile is not None:
                profile.reset()
        self.current_combo = CardCombination.invalid()

    def profile(self, seat: int) -> OpponentProfile:
        """获取座位的画像，不存在时创建"""
        p = self.opponents[seat]
        if p is None:
            p = OpponentProfile(seat=seat, cards_remaining=HAND_SIZE)
            self.opponents[seat] = p
        return p

    def known_profile(self, seat: int) -> Optional[OpponentProfile]:
        return self.opponents[seat % NUM_SEATS]

    def _mark(self, cards: Iterable[Card], status: CardStatus):
        for card in cards:
            self.deck_status[card_index(card)] = status

    def mark_mine(self, cards: Iterable[Card]):
        self._mark(cards, CardStatus.MINE)

    def mark_played(self, cards: Iterable[Card]):
        self._mark(cards, CardStatus.PLAYED)

    def mark_opponent(self, cards: Iterable[Card]):
        self._mark(cards, CardStatus.OPPONENT)

    def status_of(self, card: Card) -> CardStatus:
        return CardStatus(int(self.deck_status[card_index(card)]))

    def update_hand(self, hand: Iterable[Card]):
        """同步手牌: 旧的 MINE 先回退为 UNKNOWN，再标记新手牌"""
        self.deck_status[self.deck_status == CardStatus.MINE] = CardStatus.UNKNOWN
        self.mark_mine(hand)

    def update_table(self, cards: Iterable[Card]):
        """记录桌面牌型; 空列表表示桌面清空"""
        cards = list(cards)
        if not cards:
            self.current_combo = CardCombination.invalid()
            return
        self.current_combo = RuleEngine.identify_combination(cards)
        self.mark_played(cards)

    def record_play(self, seat: int, cards: Iterable[Card]):
        """记录某座位出牌 (须在 update_table 之后调用)"""
        cards = list(cards)
        if not cards:
            return
        p = self.profile(seat)
        p.record_play(self.current_combo)
        p.cards_remaining = max(0, p.cards_remaining - len(cards))
        logger.debug(
            "seat %d played %s, %d cards left", seat, self.current_combo, p.cards_remaining
        )

    def record_pass(self, seat: int):
        """记录某座位对当前桌面牌型过牌"""
        if not self.current_combo.is_valid:
            return
        self.profile(seat).record_failure(self.current_combo)
        logger.debug("seat %d passed on %s", seat, self.current_combo)

    def unaccounted_mask(self) -> np.ndarray:
        """状态为 UNKNOWN 或 OPPONENT 的牌"""
        return (self.deck_status == CardStatus.UNKNOWN) | (self.deck_status == CardStatus.OPPONENT)

    def unaccounted_indices(self) -> np.ndarray:
        return np.flatnonzero(self.unaccounted_mask())

    def is_boss(self, card: Card) -> bool:
        """没有更大的牌处于未知或对手手中"""
        idx = card_index(card)
        return not self.unaccounted_mask()[idx + 1:].any()

    def is_played(self, card: Card) -> bool:
        return self.deck_status[card_index(card)] == CardStatus.PLAYED

    def summary(self) -> str:
        """调试用状态摘要"""
        counts = np.bincount(self.deck_status, minlength=len(CardStatus))
        return ", ".join(f"{s.name}={int(counts[s])}" for s in CardStatus)
