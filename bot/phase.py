"""
对局阶段检测
"""
from enum import Enum
from typing import Optional

from core.cards import HAND_SIZE
from core.state import Game

# 进入残局的手牌阈值
END_PHASE_CARDS = 5


class GamePhase(Enum):
    """策略阶段"""
    OPENING = "opening"  # 所有在局玩家都还有 13 张
    MID = "mid"          # 中盘
    END = "end"          # 有人出完或有人剩 5 张及以下


def detect_phase(game: Optional[Game]) -> GamePhase:
    """
    根据在局玩家的手牌数与出完状态推断阶段

    END 优先于 OPENING / MID
    """
    if game is None or not game.players:
        return GamePhase.MID

    active = 0
    opening = True
    end = False
    for player in game.players.values():
        if player.finished or not player.hand:
            end = True
            continue
        active += 1
        if len(player.hand) != HAND_SIZE:
            opening = False
        if len(player.hand) <= END_PHASE_CARDS:
            end = True

    if active == 0 or end:
        return GamePhase.END
    if opening:
        return GamePhase.OPENING
    return GamePhase.MID


def detect_threat(game: Optional[Game], seat: int, threshold: int) -> bool:
    """其他在局玩家中是否有人手牌数不超过 threshold"""
    if game is None or threshold <= 0:
        return False
    for player in game.players.values():
        if player.seat == seat or not player.is_active:
            continue
        if len(player.hand) <= threshold:
            return True
    return False


def min_opponent_cards(game: Optional[Game], seat: int) -> int:
    """其他在局玩家的最少手牌数，没有对手时返回 HAND_SIZE"""
    if game is None:
        return HAND_SIZE
    counts = [
        len(p.hand) for p in game.players.values()
        if p.seat != seat and p.is_active
    ]
    return min(counts, default=HAND_SIZE)
