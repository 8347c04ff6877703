"""
对战竞技场

用 Game 状态机驱动机器人对局，并按顺序向每个座位推送事件
"""
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from collections import defaultdict
import numpy as np
import logging

from core.cards import smallest_card
from core.combinations import CardCombination
from core.events import CardPlayed, GameEnded, GameStarted, TurnPassed
from core.state import Game, GameError, MIN_PLAYERS, NUM_SEATS
from bot.agents import Bot, Move

logger = logging.getLogger(__name__)

# 单局最大步数，超出后按剩余手牌数结算
MAX_STEPS = 1000


@dataclass
class MatchResult:
    """对局结果"""
    finish_order: Tuple[int, ...]
    winner_seat: int
    length: int
    chops: int
    truncated: bool = False


@dataclass
class SeriesResult:
    """多局对战结果"""
    names: Tuple[str, ...]
    matches: List[MatchResult] = field(default_factory=list)
    wins: Dict[int, int] = field(default_factory=lambda: defaultdict(int))

    @property
    def total_games(self) -> int:
        return len(self.matches)

    def win_rate(self, seat: int) -> float:
        if not self.matches:
            return 0.0
        return self.wins[seat] / len(self.matches)

    @property
    def avg_length(self) -> float:
        if not self.matches:
            return 0.0
        return float(np.mean([m.length for m in self.matches]))

    def __repr__(self) -> str:
        lines = [f"Series Results ({self.total_games} games):"]
        for seat, name in enumerate(self.names):
            lines.append(f"  seat {seat} [{name}]: {self.win_rate(seat):.2%}")
        lines.append(f"  avg length: {self.avg_length:.1f}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    bots 按座位排列，座位 i 的 user_id 为 "seat{i}"
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, max_steps: int = MAX_STEPS):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_steps = max_steps

    @staticmethod
    def _user_ids(bots: Sequence[Bot]) -> List[str]:
        return [f"seat{seat}" for seat in range(len(bots))]

    @staticmethod
    def _broadcast(bots: Sequence[Bot], event) -> None:
        for bot in bots:
            bot.on_event(event)

    def _fallback(self, game: Game, seat: int) -> Move:
        """机器人给出非法动作时的替代: 跟牌过牌，主动出最小单张"""
        if game.is_lead:
            player = game.player_at(seat)
            return Move.play([smallest_card(list(player.hand))])
        return Move.pass_move()

    def _apply(self, game: Game, seat: int, move: Move) -> Game:
        if move.pass_turn:
            return game.with_pass(seat)
        return game.with_play(seat, move.cards)

    def play_game(self, bots: Sequence[Bot], last_winner_seat: int = -1) -> MatchResult:
        """
        进行一局

        Args:
            bots: 按座位排列的 2~4 个机器人
            last_winner_seat: 上一局赢家 (先出)

        Returns:
            对局结果
        """
        if not MIN_PLAYERS <= len(bots) <= NUM_SEATS:
            raise ValueError(f"need {MIN_PLAYERS}..{NUM_SEATS} bots, got {len(bots)}")

        user_ids = self._user_ids(bots)
        game = Game.deal(user_ids, self.rng, last_winner_seat)
        for bot in bots:
            player = game.player_at(bot.seat)
            bot.on_event(GameStarted(seat=bot.seat, hand=player.hand, first_turn_seat=game.current_turn))

        chops = 0
        truncated = False
        while not game.is_finished:
            if game.step_count >= self.max_steps:
                truncated = True
                logger.warning("game truncated after %d steps", game.step_count)
                break

            seat = game.current_turn
            bot = bots[seat]
            table = game.last_combo
            move = bot.play(game, user_ids[seat])
            try:
                next_game = self._apply(game, seat, move)
            except GameError as e:
                logger.warning("seat %d [%s] illegal move %s: %s", seat, bot.name, move, e)
                move = self._fallback(game, seat)
                next_game = self._apply(game, seat, move)

            new_round = not next_game.is_finished and next_game.is_lead
            if move.pass_turn:
                event = TurnPassed(seat=seat, next_turn_seat=next_game.current_turn, new_round=new_round)
            else:
                if table.is_valid and CardCombination.from_cards(move.cards).is_bomb:
                    chops += 1
                event = CardPlayed(
                    seat=seat,
                    cards=tuple(move.cards),
                    next_turn_seat=next_game.current_turn,
                    new_round=new_round,
                )
            self._broadcast(bots, event)
            game = next_game

        finish_order = game.finish_order
        if truncated:
            # 未出完的按剩余手牌数排在后面
            rest = sorted(
                (p for p in game.players.values() if p.seat not in finish_order),
                key=lambda p: (p.card_count, p.seat),
            )
            finish_order = finish_order + tuple(p.seat for p in rest)

        self._broadcast(bots, GameEnded(finish_order=finish_order))
        result = MatchResult(
            finish_order=finish_order,
            winner_seat=finish_order[0],
            length=game.step_count,
            chops=chops,
            truncated=truncated,
        )
        logger.info(
            "game over: winner seat %d, order %s, %d steps, %d chops",
            result.winner_seat, result.finish_order, result.length, result.chops,
        )
        return result

    def play_series(self, bots: Sequence[Bot], n_games: int) -> SeriesResult:
        """
        连续对局，上一局赢家先出

        Args:
            bots: 按座位排列的机器人
            n_games: 局数

        Returns:
            SeriesResult
        """
        series = SeriesResult(names=tuple(b.name for b in bots))
        last_winner = -1
        for _ in range(n_games):
            result = self.play_game(bots, last_winner)
            series.matches.append(result)
            series.wins[result.winner_seat] += 1
            last_winner = result.winner_seat
        logger.info("%r", series)
        return series
