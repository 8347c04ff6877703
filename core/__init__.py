"""
Core Layer - 纯游戏逻辑 (无 AI 依赖)

Modules:
    cards: 牌定义与编码
    combinations: 牌型与出牌生成
    rules: 规则引擎
    state: 对局状态
    events: 对局事件
"""
from .cards import (
    Card,
    Rank,
    Suit,
    FULL_DECK,
    DECK_SIZE,
    HAND_SIZE,
    card_index,
    new_deck,
    shuffle_deck,
    sort_hand,
    smallest_card,
    card_from_str,
    cards_to_str,
    str_to_cards,
    cards_to_array,
    array_to_cards,
)

from .combinations import (
    ComboType,
    CardCombination,
    MoveGenerator,
    MIN_STRAIGHT_LEN,
    MIN_PINE_PAIRS,
    MIN_CARDS_FOR_TYPE,
)

from .rules import RuleEngine, RemovalResult

from .state import (
    Phase,
    Player,
    Game,
    GameError,
    NotPlayingError,
    UnknownPlayerError,
    NotYourTurnError,
    PlayerFinishedError,
    InvalidPlayError,
    CardsNotInHandError,
    CannotBeatError,
    NUM_SEATS,
)

from .events import GameStarted, CardPlayed, TurnPassed, GameEnded

__all__ = [
    # cards
    "Card",
    "Rank",
    "Suit",
    "FULL_DECK",
    "DECK_SIZE",
    "HAND_SIZE",
    "card_index",
    "new_deck",
    "shuffle_deck",
    "sort_hand",
    "smallest_card",
    "card_from_str",
    "cards_to_str",
    "str_to_cards",
    "cards_to_array",
    "array_to_cards",
    # combinations
    "ComboType",
    "CardCombination",
    "MoveGenerator",
    "MIN_STRAIGHT_LEN",
    "MIN_PINE_PAIRS",
    "MIN_CARDS_FOR_TYPE",
    # rules
    "RuleEngine",
    "RemovalResult",
    # state
    "Phase",
    "Player",
    "Game",
    "GameError",
    "NotPlayingError",
    "UnknownPlayerError",
    "NotYourTurnError",
    "PlayerFinishedError",
    "InvalidPlayError",
    "CardsNotInHandError",
    "CannotBeatError",
    "NUM_SEATS",
    # events
    "GameStarted",
    "CardPlayed",
    "TurnPassed",
    "GameEnded",
]
