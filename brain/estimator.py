"""
推断器

基于 GameMemory 的概率估计，所有方法都不修改记忆
"""
from typing import List
import numpy as np

from core.cards import Card, Rank, card_index
from core.combinations import CardCombination, ComboType, MIN_CARDS_FOR_TYPE
from core.state import NUM_SEATS

from .memory import GameMemory

# 无对手数据时的中性可能性
UNKNOWN_LIKELIHOOD = 0.5
# 有数据时的基础可能性
BASE_LIKELIHOOD = 0.7
# 每打出一次同型牌后的衰减系数
EXHAUSTION_DECAY = 0.8


class Estimator:
    """
    推断引擎

    Attributes:
        memory: 所属座位的对局记忆
    """

    def __init__(self, memory: GameMemory):
        self.memory = memory

    def get_boss_cards(self, hand: List[Card]) -> List[Card]:
        """手牌中当前无法被压过的牌"""
        return [c for c in hand if self.memory.is_boss(c)]

    def lead_turn_probability(self, card: Card) -> float:
        """
        打出这张单牌后拿回出牌权的概率

        更大的未知牌在各家均匀分布的启发式: 1 / (更大未知牌数 + 1)
        """
        if self.memory.is_boss(card):
            return 1.0
        higher_unknown = int(self.memory.unaccounted_mask()[card_index(card) + 1:].sum())
        return 1.0 / (higher_unknown + 1)

    def calculate_dominance(self, hand: List[Card]) -> float:
        """
        手牌控制力 (0..1)

        手牌平均牌力 / (手牌平均牌力 + 未出现牌平均牌力)
        """
        if not hand:
            return 0.0
        unseen = self.memory.unaccounted_indices()
        # 手牌本身不算未出现
        hand_idx = np.array([card_index(c) for c in hand])
        unseen = np.setdiff1d(unseen, hand_idx)
        if unseen.size == 0:
            return 1.0

        avg_hand = float(hand_idx.mean())
        avg_unseen = float(unseen.mean())
        if avg_hand + avg_unseen == 0:
            return 0.5
        return avg_hand / (avg_hand + avg_unseen)

    def is_safe_from_next_players(self, combo: CardCombination, my_seat: int) -> float:
        """
        按出牌顺序检查下家们能否压过 combo

        从下家开始累计"已证明压不过"的座位数，遇到第一个可能压过的对手即停止累计

        Returns:
            累计数 / 有画像的座位数，没有任何画像时返回 0.0
        """
        safe = 0
        checked = 0
        accumulating = True
        for offset in range(1, NUM_SEATS):
            profile = self.memory.known_profile(my_seat + offset)
            if profile is None:
                continue
            checked += 1
            if accumulating and not profile.can_possibly_beat(combo):
                safe += 1
            else:
                accumulating = False
        if checked == 0:
            return 0.0
        return safe / checked

    def get_combo_likelihood(self, seat: int, combo_type: ComboType) -> float:
        """
        某座位还能打出该牌型的可能性

        - 剩余牌数低于牌型最少张数时为 0
        - 否则按已打出次数做衰减，初始 0.7
        """
        profile = self.memory.known_profile(seat)
        if profile is None:
            return UNKNOWN_LIKELIHOOD

        minimum = MIN_CARDS_FOR_TYPE.get(combo_type)
        if minimum is None:
            return 0.0
        if profile.cards_remaining < minimum:
            return 0.0

        played = profile.played_stats.get(combo_type, 0)
        return BASE_LIKELIHOOD * (EXHAUSTION_DECAY ** played)

    def get_dominance_score(self, combo: CardCombination, my_seat: int) -> float:
        """
        利用对手已暴露的单张弱点

        只对单张有效: 出 J 及以上的高牌，且牌力严格低于对手记录的单张上限时加分
        """
        if combo.combo_type != ComboType.SINGLE:
            return 0.0
        if combo.cards[0].rank < Rank.JACK:
            return 0.0

        score = 0.0
        for offset in range(1, NUM_SEATS):
            profile = self.memory.known_profile(my_seat + offset)
            if profile is None:
                continue
            ceiling = profile.weaknesses.get(ComboType.SINGLE)
            if ceiling is not None and combo.value < ceiling:
                score += combo.value / ceiling
        return score
