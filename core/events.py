"""
对局事件

由对局编排方 (Arena 或外部服务) 按顺序推送给每个机器人座位
"""
from dataclasses import dataclass
from typing import Tuple

from .cards import Card


@dataclass(frozen=True)
class GameStarted:
    """开局: 发给该座位的私有手牌"""
    seat: int
    hand: Tuple[Card, ...]
    first_turn_seat: int = 0


@dataclass(frozen=True)
class CardPlayed:
    """某座位出牌"""
    seat: int
    cards: Tuple[Card, ...]
    next_turn_seat: int = -1
    new_round: bool = False


@dataclass(frozen=True)
class TurnPassed:
    """某座位过牌; new_round 表示本轮结束、桌面清空"""
    seat: int
    next_turn_seat: int = -1
    new_round: bool = False


@dataclass(frozen=True)
class GameEnded:
    """对局结束, finish_order 为按出完顺序排列的座位"""
    finish_order: Tuple[int, ...] = ()
