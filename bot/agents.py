"""
机器人

- BotBrain: 记忆 + 推断 + 手牌整理的启发式机器人
- SimpleBot: 总是出最小的合法牌
- RandomBot: 随机出牌 (基线)

机器人只读取 Game 快照并返回 Move，由调用方负责应用到对局
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging
import numpy as np

from core.cards import Card, cards_to_str
from core.combinations import CardCombination, ComboType, MoveGenerator
from core.events import CardPlayed, GameEnded, GameStarted, TurnPassed
from core.state import NUM_SEATS, Game, Player
from brain.memory import GameMemory
from brain.estimator import Estimator

from .config import BotTuning, DEFAULT_TUNING, PhaseWeights
from .evaluator import best_partition
from .organizer import OrganizedHand
from .phase import GamePhase, detect_phase, detect_threat, min_opponent_cards
from .scoring import ScoredMove, build_scored_moves, score_hand

logger = logging.getLogger(__name__)

# 主动出牌时利用对手弱点的最低收益
EXPLOIT_THRESHOLD = 0.5


@dataclass(frozen=True)
class Move:
    """机器人的决定: 过牌或出牌"""
    pass_turn: bool
    cards: Tuple[Card, ...] = ()

    @classmethod
    def pass_move(cls) -> 'Move':
        return cls(pass_turn=True)

    @classmethod
    def play(cls, cards) -> 'Move':
        return cls(pass_turn=False, cards=tuple(cards))

    def __str__(self) -> str:
        return "Pass" if self.pass_turn else cards_to_str(self.cards)


class Bot:
    """机器人基类"""

    def __init__(self, seat: int, name: str = "bot"):
        self.seat = seat
        self.name = name

    def calculate_move(self, game: Game, player: Optional[Player]) -> Move:
        raise NotImplementedError

    def on_event(self, event) -> None:
        """接收对局事件，默认忽略"""

    def reset(self) -> None:
        pass

    def play(self, game: Game, user_id: str) -> Move:
        """按 user_id 找到自己的玩家并决策，不在局中时过牌"""
        player = game.players.get(user_id)
        if player is None:
            return Move.pass_move()
        return self.calculate_move(game, player)


def _weakest(moves: List[CardCombination]) -> CardCombination:
    return min(moves, key=lambda m: (m.value, m.count))


class SimpleBot(Bot):
    """总是出牌力最小的合法牌，能出就出"""

    def __init__(self, seat: int, name: str = "simple"):
        super().__init__(seat, name)

    def calculate_move(self, game: Game, player: Optional[Player]) -> Move:
        if player is None or not player.hand:
            return Move.pass_move()
        moves = MoveGenerator(player.hand).generate_responses(game.last_combo)
        if not moves:
            return Move.pass_move()
        return Move.play(_weakest(moves).cards)


class RandomBot(Bot):
    """随机选择一个合法动作 (跟牌时包含过牌)"""

    def __init__(self, seat: int, rng: Optional[np.random.Generator] = None, name: str = "random"):
        super().__init__(seat, name)
        self.rng = rng if rng is not None else np.random.default_rng()

    def calculate_move(self, game: Game, player: Optional[Player]) -> Move:
        if player is None or not player.hand:
            return Move.pass_move()
        moves = MoveGenerator(player.hand).generate_responses(game.last_combo)
        options: List[Optional[CardCombination]] = list(moves)
        if game.last_combo.is_valid:
            options.append(None)
        if not options:
            return Move.pass_move()
        choice = options[int(self.rng.integers(len(options)))]
        if choice is None:
            return Move.pass_move()
        return Move.play(choice.cards)


class BotBrain(Bot):
    """
    启发式机器人

    每个座位一份 GameMemory / Estimator，按事件顺序同步更新

    决策分两种状态:
    - 跟牌: 优先最小的不拆结构的压牌，只能拆结构时过牌 (残局或有威胁时除外)
    - 主动出牌: 优先利用对手暴露的弱点，否则按 散牌 -> 小结构 -> 2 -> 炸弹 的顺序出
    任何情况下能一次出完都直接出完
    """

    def __init__(self, seat: int, tuning: BotTuning = DEFAULT_TUNING, name: str = "brain"):
        super().__init__(seat, name)
        self.tuning = tuning
        self.memory = GameMemory()
        self.estimator = Estimator(self.memory)

    def reset(self) -> None:
        self.memory.reset()

    # ------------------------------------------------------------------
    # 事件
    # ------------------------------------------------------------------

    def on_event(self, event) -> None:
        if isinstance(event, GameStarted):
            self.memory.reset()
            if event.seat == self.seat:
                self.memory.mark_mine(event.hand)
        elif isinstance(event, CardPlayed):
            self.memory.update_table(event.cards)
            if event.seat != self.seat:
                self.memory.record_play(event.seat, event.cards)
            if event.new_round:
                self.memory.update_table([])
        elif isinstance(event, TurnPassed):
            if event.seat != self.seat:
                self.memory.record_pass(event.seat)
            if event.new_round:
                self.memory.update_table([])
        elif isinstance(event, GameEnded):
            self.memory.reset()

    # ------------------------------------------------------------------
    # 决策
    # ------------------------------------------------------------------

    def calculate_move(self, game: Game, player: Optional[Player]) -> Move:
        """
        计算当前座位的动作

        Args:
            game: 对局快照 (只读)
            player: 自己的玩家记录

        Returns:
            Move
        """
        if player is None or not player.hand:
            return Move.pass_move()

        hand = list(player.hand)
        self.memory.update_hand(hand)

        table = game.last_combo
        moves = MoveGenerator(hand).generate_responses(table)
        if not moves:
            logger.debug("seat %d has no legal move on %s", self.seat, table)
            return Move.pass_move()

        # 一次出完
        for combo in moves:
            if combo.count == len(hand):
                logger.debug("seat %d finishes with %s", self.seat, combo)
                return Move.play(combo.cards)

        organized = best_partition(hand)
        if table.is_valid:
            move = self._respond(game, hand, moves, organized)
        else:
            move = self._lead(game, hand, organized)
        logger.debug("seat %d decided %s (table %s)", self.seat, move, table)
        return move

    def _respond(
        self,
        game: Game,
        hand: List[Card],
        moves: List[CardCombination],
        organized: OrganizedHand,
    ) -> Move:
        phase = detect_phase(game)
        weights = self.tuning.for_phase(phase)
        threat = detect_threat(game, self.seat, self.tuning.threat_threshold)

        if phase == GamePhase.END or threat:
            # 残局或有人快出完: 允许拆牌，取得分最高的压牌
            best = self._best_scored(hand, moves, weights, threat)
            current = score_hand(hand, weights)
            if not threat and best.score < current + self.tuning.pass_threshold:
                return Move.pass_move()
            return Move.play(best.cards)

        intact = [m for m in moves if not self.dismantles(m, organized)]
        if not intact:
            return Move.pass_move()
        # 同型能压时不动用炸弹
        return Move.play(min(intact, key=lambda m: (m.is_bomb, m.value, m.count)).cards)

    def _lead(
        self,
        game: Game,
        hand: List[Card],
        organized: OrganizedHand,
    ) -> Move:
        structures = organized.all_combinations()

        if min_opponent_cards(game, self.seat) == 1:
            return self._lead_blocking(structures)

        phase = detect_phase(game)
        if phase == GamePhase.END:
            weights = self.tuning.for_phase(phase)
            threat = detect_threat(game, self.seat, self.tuning.threat_threshold)
            return Move.play(self._best_scored(hand, structures, weights, threat).cards)

        exploit = self._exploit(structures)
        if exploit is not None:
            return Move.play(exploit.cards)

        return Move.play(self.lead_order(structures)[0].cards)

    def _lead_blocking(self, structures: List[CardCombination]) -> Move:
        """有对手只剩一张: 先出多张牌型，否则出最大的单张"""
        multi = [c for c in structures if c.count > 1]
        if multi:
            return Move.play(self.lead_order(multi)[0].cards)
        return Move.play(max(structures, key=lambda c: c.value).cards)

    def _exploit(self, structures: List[CardCombination]) -> Optional[CardCombination]:
        """收益最高的弱点利用，低于阈值返回 None (不动用 2 与炸弹)"""
        best, best_value = None, EXPLOIT_THRESHOLD
        for combo in structures:
            if combo.is_bomb or any(c.is_pig for c in combo.cards):
                continue
            value = self.exploit_value(combo)
            if value > best_value or (value == best_value and best is not None and combo.value < best.value):
                best, best_value = combo, value
        if best is not None:
            logger.debug("seat %d exploits weakness with %s (%.2f)", self.seat, best, best_value)
        return best

    def exploit_value(self, combo: CardCombination) -> float:
        """
        利用对手弱点的收益

        单张高牌弱点得分 + 下家们压不过的安全度 * 下家们没有该牌型的平均可能性
        """
        dominance = self.estimator.get_dominance_score(combo, self.seat)
        safety = self.estimator.is_safe_from_next_players(combo, self.seat)
        if safety == 0.0:
            return dominance

        likelihoods = [
            self.estimator.get_combo_likelihood((self.seat + offset) % NUM_SEATS, combo.combo_type)
            for offset in range(1, NUM_SEATS)
        ]
        scarcity = 1.0 - float(np.mean(likelihoods))
        return dominance + safety * (0.5 + scarcity)

    def _best_scored(
        self,
        hand: List[Card],
        moves: List[CardCombination],
        weights: PhaseWeights,
        threat: bool,
    ) -> ScoredMove:
        scored = build_scored_moves(hand, moves, weights, threat)
        for m in scored:
            if m.combo.combo_type != ComboType.SINGLE:
                continue
            card = m.cards[0]
            if self.memory.is_boss(card):
                m.score += self.tuning.boss_bonus
            m.score += self.tuning.lead_probability_weight * self.estimator.lead_turn_probability(card)
        return max(scored, key=lambda m: (m.score, -m.combo.value))

    @staticmethod
    def dismantles(combo: CardCombination, organized: OrganizedHand) -> bool:
        """出这手牌是否会拆散整理出的结构 (原样打出整个结构不算拆)"""
        played = set(combo.cards)
        for card in combo.cards:
            structure = organized.structure_of(card)
            if structure is not None and set(structure.cards) != played:
                return True
        return False

    @staticmethod
    def lead_order(structures: List[CardCombination]) -> List[CardCombination]:
        """
        主动出牌的优先级

        非 2 散牌 (从小到大) -> 非炸弹结构 (按牌力) -> 2 -> 炸弹
        """
        def key(combo: CardCombination):
            if combo.is_bomb:
                tier = 3
            elif any(c.is_pig for c in combo.cards):
                tier = 2
            elif combo.combo_type == ComboType.SINGLE:
                tier = 0
            else:
                tier = 1
            return tier, combo.value

        return sorted(structures, key=key)


BOT_KINDS = ("brain", "simple", "random")


def create_bot(kind: str, seat: int, rng: Optional[np.random.Generator] = None) -> Bot:
    """
    按名称创建机器人

    Args:
        kind: "brain" / "simple" / "random"
        seat: 座位
        rng: RandomBot 使用的随机数生成器

    Returns:
        Bot
    """
    if kind == "brain":
        return BotBrain(seat)
    if kind == "simple":
        return SimpleBot(seat)
    if kind == "random":
        return RandomBot(seat, rng)
    raise ValueError(f"Unknown bot kind: {kind}, choose from {BOT_KINDS}")
