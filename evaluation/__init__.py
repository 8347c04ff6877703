"""
Evaluation Layer - 机器人对战

Modules:
    arena: 对战竞技场
"""
from .arena import (
    MAX_STEPS,
    MatchResult,
    SeriesResult,
    Arena,
)

__all__ = [
    "MAX_STEPS",
    "MatchResult",
    "SeriesResult",
    "Arena",
]
