"""
对手画像

记录某个座位被观察到的弱点 (没能压过的最大牌力) 与出牌频次
"""
from dataclasses import dataclass, field
from typing import Dict

from core.cards import HAND_SIZE
from core.combinations import CardCombination, ComboType


@dataclass
class OpponentProfile:
    """
    单个对手的行为记录

    Attributes:
        seat: 座位
        cards_remaining: 剩余手牌数
        weaknesses: 牌型 -> 该对手没能压过的最大牌力
        played_stats: 牌型 -> 该对手打出的次数
    """
    seat: int
    cards_remaining: int = HAND_SIZE
    weaknesses: Dict[ComboType, int] = field(default_factory=dict)
    played_stats: Dict[ComboType, int] = field(default_factory=dict)

    def record_play(self, combo: CardCombination):
        """记录一次出牌"""
        if not combo.is_valid:
            return
        self.played_stats[combo.combo_type] = self.played_stats.get(combo.combo_type, 0) + 1

    def record_failure(self, combo: CardCombination):
        """记录没能 (或不愿) 压过的牌型; 上限只升不降"""
        if not combo.is_valid:
            return
        current = self.weaknesses.get(combo.combo_type)
        if current is None or combo.value > current:
            self.weaknesses[combo.combo_type] = combo.value

    def can_possibly_beat(self, combo: CardCombination) -> bool:
        """
        是否没有证据表明该对手压不过 combo

        对手曾放过不低于阈值的牌型时，更大的同型牌同样压不过

        Returns:
            False 当且仅当 combo.value >= 记录的阈值
        """
        max_failed = self.weaknesses.get(combo.combo_type)
        if max_failed is None:
            return True
        return combo.value < max_failed

    def reset(self):
        self.cards_remaining = HAND_SIZE
        self.weaknesses.clear()
        self.played_stats.clear()
