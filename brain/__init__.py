"""
Brain Layer - 隐藏信息追踪与推断

Modules:
    memory: 对局记忆 (牌状态 + 桌面)
    opponent: 对手画像
    estimator: 概率推断
"""
from .memory import CardStatus, GameMemory
from .opponent import OpponentProfile
from .estimator import Estimator

__all__ = [
    "CardStatus",
    "GameMemory",
    "OpponentProfile",
    "Estimator",
]
