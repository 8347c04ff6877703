"""
游戏状态定义

使用不可变数据结构:
- 状态迁移返回新实例，机器人拿到的快照无法被修改
- 易于在测试中复现 (发牌使用显式注入的随机数生成器)
"""
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple
from enum import Enum
import numpy as np

from .cards import Card, HAND_SIZE, new_deck, shuffle_deck, sort_hand
from .combinations import CardCombination, MoveGenerator
from .rules import RuleEngine


NUM_SEATS = 4
MIN_PLAYERS = 2


class Phase(Enum):
    """对局阶段"""
    LOBBY = "lobby"        # 等待玩家
    PLAYING = "playing"    # 出牌阶段
    ENDED = "ended"        # 对局结束


class GameError(ValueError):
    """非法的状态迁移"""


class NotPlayingError(GameError):
    pass


class UnknownPlayerError(GameError):
    pass


class NotYourTurnError(GameError):
    pass


class PlayerFinishedError(GameError):
    pass


class InvalidPlayError(GameError):
    pass


class CardsNotInHandError(GameError):
    pass


class CannotBeatError(GameError):
    pass


@dataclass(frozen=True)
class Player:
    """
    座位上的玩家

    Attributes:
        user_id: 用户 ID
        seat: 座位 0..3
        hand: 手牌 (按牌力升序)
        has_passed: 本轮是否已过牌
        finished: 是否已出完
    """
    user_id: str
    seat: int
    hand: Tuple[Card, ...] = ()
    has_passed: bool = False
    finished: bool = False

    @property
    def card_count(self) -> int:
        return len(self.hand)

    @property
    def is_active(self) -> bool:
        return not self.finished and len(self.hand) > 0


@dataclass(frozen=True)
class Game:
    """
    不可变对局快照

    Attributes:
        phase: 对局阶段
        players: user_id -> Player
        current_turn: 当前行动座位
        last_combo: 桌面上需要压过的牌型 (INVALID 表示新一轮)
        last_player_seat: 最近出牌的座位
        finish_order: 出完顺序 (座位)
        discards: 已打出的牌
        step_count: 步数
    """
    phase: Phase
    players: Dict[str, Player] = field(default_factory=dict, hash=False)
    current_turn: int = 0
    last_combo: CardCombination = field(default_factory=CardCombination.invalid)
    last_player_seat: int = -1
    finish_order: Tuple[int, ...] = ()
    discards: Tuple[Card, ...] = ()
    step_count: int = 0

    @classmethod
    def deal(
        cls,
        user_ids: Sequence[str],
        rng: np.random.Generator,
        last_winner_seat: int = -1,
    ) -> 'Game':
        """
        洗牌、发牌并确定首家

        Args:
            user_ids: 按座位排列的用户 ID，空字符串表示空座
            rng: 随机数生成器
            last_winner_seat: 上一局赢家座位，-1 表示无

        Returns:
            出牌阶段的初始状态
        """
        seated = [(seat, uid) for seat, uid in enumerate(user_ids[:NUM_SEATS]) if uid]
        if len(seated) < MIN_PLAYERS:
            raise GameError(f"need at least {MIN_PLAYERS} players, got {len(seated)}")

        deck = shuffle_deck(new_deck(), rng)
        players = {}
        for i, (seat, uid) in enumerate(seated):
            hand = tuple(sort_hand(deck[i * HAND_SIZE:(i + 1) * HAND_SIZE]))
            players[uid] = Player(user_id=uid, seat=seat, hand=hand)

        seats = {p.seat for p in players.values()}
        if last_winner_seat in seats:
            first = last_winner_seat
        else:
            # 没有上局赢家时，持有最小牌的玩家先出
            first = min(players.values(), key=lambda p: p.hand[0].power).seat

        return cls(phase=Phase.PLAYING, players=players, current_turn=first)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def player_at(self, seat: int) -> Optional[Player]:
        for player in self.players.values():
            if player.seat == seat:
                return player
        return None

    def active_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.is_active]

    def count_players_with_cards(self) -> int:
        return len(self.active_players())

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.ENDED

    @property
    def is_lead(self) -> bool:
        """当前是否为主动出牌"""
        return not self.last_combo.is_valid

    def legal_moves(self, seat: int) -> List[CardCombination]:
        """指定座位当前所有能出的牌 (不含 PASS)"""
        player = self.player_at(seat)
        if player is None or not player.hand:
            return []
        return MoveGenerator(player.hand).generate_responses(self.last_combo)

    def _next_seat(self, players: Dict[str, Player], from_seat: int, skip_passed: bool) -> Optional[int]:
        by_seat = {p.seat: p for p in players.values()}
        for offset in range(1, NUM_SEATS + 1):
            seat = (from_seat + offset) % NUM_SEATS
            player = by_seat.get(seat)
            if player is None or not player.is_active:
                continue
            if skip_passed and player.has_passed:
                continue
            return seat
        return None

    def _check_actor(self, seat: int) -> Player:
        if self.phase != Phase.PLAYING:
            raise NotPlayingError(f"game is {self.phase.value}")
        player = self.player_at(seat)
        if player is None:
            raise UnknownPlayerError(f"no player at seat {seat}")
        if self.current_turn != seat:
            raise NotYourTurnError(f"seat {seat} acted on seat {self.current_turn}'s turn")
        if player.finished:
            raise PlayerFinishedError(f"seat {seat} already finished")
        return player

    @staticmethod
    def _new_round(players: Dict[str, Player]) -> Dict[str, Player]:
        return {
            uid: p if p.finished else replace(p, has_passed=False)
            for uid, p in players.items()
        }

    # ------------------------------------------------------------------
    # 状态迁移
    # ------------------------------------------------------------------

    def with_play(self, seat: int, cards: Sequence[Card]) -> 'Game':
        """
        出牌后的新状态

        Args:
            seat: 出牌座位
            cards: 出的牌

        Returns:
            新状态
        """
        player = self._check_actor(seat)
        if not cards:
            raise InvalidPlayError("must play at least one card")

        removal = RuleEngine.remove_cards(player.hand, cards)
        if not removal.ok:
            raise CardsNotInHandError(f"seat {seat} does not hold all of {list(cards)}")

        combo = RuleEngine.identify_combination(cards)
        if not combo.is_valid:
            raise InvalidPlayError(f"not a valid combination: {list(cards)}")
        if self.last_combo.is_valid and not RuleEngine.can_beat(self.last_combo.cards, combo.cards):
            raise CannotBeatError(f"{combo} does not beat {self.last_combo}")

        updated = replace(player, hand=tuple(removal.hand), finished=not removal.hand)
        players = dict(self.players)
        players[player.user_id] = updated

        finish_order = self.finish_order
        if updated.finished:
            finish_order = finish_order + (seat,)

        base = replace(
            self,
            players=players,
            last_combo=combo,
            last_player_seat=seat,
            finish_order=finish_order,
            discards=self.discards + combo.cards,
            step_count=self.step_count + 1,
        )

        remaining = base.active_players()
        if len(remaining) <= 1:
            # 最后一名补进出完顺序
            losers = tuple(p.seat for p in remaining)
            return replace(base, phase=Phase.ENDED, finish_order=finish_order + losers)

        next_seat = self._next_seat(players, seat, skip_passed=True)
        if next_seat is None:
            # 其他人都已过牌: 新一轮
            players = self._new_round(players)
            next_seat = seat if updated.is_active else self._next_seat(players, seat, skip_passed=False)
            return replace(
                base,
                players=players,
                current_turn=next_seat,
                last_combo=CardCombination.invalid(),
            )
        return replace(base, current_turn=next_seat)

    def with_pass(self, seat: int) -> 'Game':
        """
        过牌后的新状态

        Args:
            seat: 过牌座位

        Returns:
            新状态
        """
        player = self._check_actor(seat)
        if not self.last_combo.is_valid:
            raise InvalidPlayError("cannot pass when leading a new round")

        players = dict(self.players)
        players[player.user_id] = replace(player, has_passed=True)

        still_in = [p for p in players.values() if p.is_active and not p.has_passed]
        if len(still_in) <= 1:
            players = self._new_round(players)
            if still_in:
                next_seat = still_in[0].seat
            else:
                # 最后出牌者已出完，由其下家开始新一轮
                next_seat = self._next_seat(players, self.last_player_seat, skip_passed=False)
            return replace(
                self,
                players=players,
                current_turn=next_seat,
                last_combo=CardCombination.invalid(),
                step_count=self.step_count + 1,
            )

        return replace(
            self,
            players=players,
            current_turn=self._next_seat(players, seat, skip_passed=True),
            step_count=self.step_count + 1,
        )
