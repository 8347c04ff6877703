"""
Bot Layer - 手牌整理、评估与决策

Modules:
    organizer: 手牌划分
    evaluator: 静态评估
    phase: 阶段检测
    config: 调参
    scoring: 分阶段打分
    agents: 机器人
"""
from .organizer import (
    PartitionStrategy,
    OrganizedHand,
    partition_hand,
    partition_hand_pairs_first,
    get_tactical_options,
    extract_bombs,
    extract_straights,
    extract_sets,
)
from .evaluator import HandProfile, evaluate_hand, profile_hand, score_partition, best_partition
from .phase import GamePhase, detect_phase, detect_threat
from .config import PhaseWeights, BotTuning, DEFAULT_TUNING
from .scoring import ScoredMove, score_hand, build_scored_moves
from .agents import Move, Bot, BotBrain, SimpleBot, RandomBot, create_bot

__all__ = [
    # organizer
    "PartitionStrategy",
    "OrganizedHand",
    "partition_hand",
    "partition_hand_pairs_first",
    "get_tactical_options",
    "extract_bombs",
    "extract_straights",
    "extract_sets",
    # evaluator
    "HandProfile",
    "evaluate_hand",
    "profile_hand",
    "score_partition",
    "best_partition",
    # phase
    "GamePhase",
    "detect_phase",
    "detect_threat",
    # config
    "PhaseWeights",
    "BotTuning",
    "DEFAULT_TUNING",
    # scoring
    "ScoredMove",
    "score_hand",
    "build_scored_moves",
    # agents
    "Move",
    "Bot",
    "BotBrain",
    "SimpleBot",
    "RandomBot",
    "create_bot",
]
