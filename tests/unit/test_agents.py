"""机器人测试"""
import pytest
import numpy as np

from core.cards import sort_hand, str_to_cards
from core.combinations import CardCombination
from core.events import CardPlayed, GameEnded, GameStarted, TurnPassed
from core.rules import RuleEngine
from core.state import Game, Phase, Player
from brain.memory import CardStatus
from bot.agents import Move, BotBrain, SimpleBot, RandomBot, create_bot


# 对手手牌 (多于 5 张，不触发残局)
FILLER = [
    "3C 5C 6D 8D JC QC AS 2S",
    "3H 5H 8H 9S JD QD AC 2C",
    "10H JH QH KH AD 2D 6S",
]


def make_game(my_hand, table=None, others=FILLER):
    hands = [my_hand] + list(others)
    players = {
        f"p{seat}": Player(user_id=f"p{seat}", seat=seat, hand=tuple(sort_hand(str_to_cards(h))))
        for seat, h in enumerate(hands)
    }
    last = CardCombination.invalid()
    if table:
        last = RuleEngine.identify_combination(str_to_cards(table))
    return Game(
        phase=Phase.PLAYING,
        players=players,
        current_turn=0,
        last_combo=last,
        last_player_seat=3 if table else -1,
    )


def decide(bot, game):
    return bot.calculate_move(game, game.player_at(bot.seat))


class TestMove:
    """Move 测试"""

    def test_pass(self):
        move = Move.pass_move()
        assert move.pass_turn
        assert move.cards == ()
        assert str(move) == "Pass"

    def test_play(self):
        move = Move.play(str_to_cards("4S 3S"))
        assert not move.pass_turn
        assert str(move) == "3S 4S"


class TestFactory:
    """create_bot 测试"""

    def test_kinds(self):
        assert isinstance(create_bot("brain", 0), BotBrain)
        assert isinstance(create_bot("simple", 1), SimpleBot)
        assert isinstance(create_bot("random", 2, np.random.default_rng(0)), RandomBot)
        assert create_bot("simple", 1).seat == 1

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_bot("god", 0)


class TestSimpleBot:
    """SimpleBot 测试"""

    def test_lead_lowest(self):
        bot = SimpleBot(0)
        move = decide(bot, make_game("3S 9H 9C"))
        assert move.cards == tuple(str_to_cards("3S"))

    def test_respond_lowest(self):
        bot = SimpleBot(0)
        move = decide(bot, make_game("3S 7H 9C", table="5S"))
        assert move.cards == tuple(str_to_cards("7H"))

    def test_pass_when_nothing_beats(self):
        bot = SimpleBot(0)
        assert decide(bot, make_game("3S 4S", table="2H")).pass_turn

    def test_play_unknown_user(self):
        bot = SimpleBot(0)
        assert bot.play(make_game("3S"), "nobody").pass_turn


class TestRandomBot:
    """RandomBot 测试"""

    def test_legal(self):
        bot = RandomBot(0, np.random.default_rng(5))
        game = make_game("3S 4C 5D 9H 9D KS", table="6S")
        for _ in range(20):
            move = decide(bot, game)
            if not move.pass_turn:
                assert RuleEngine.is_valid_play(move.cards, game.last_combo, game.player_at(0).hand)

    def test_never_passes_on_lead(self):
        bot = RandomBot(0, np.random.default_rng(5))
        game = make_game("3S 4C 5D")
        for _ in range(20):
            assert not decide(bot, game).pass_turn


class TestBotBrainEvents:
    """BotBrain 事件处理测试"""

    def test_game_started_marks_hand(self):
        bot = BotBrain(0)
        hand = tuple(str_to_cards("3S 9H"))
        bot.on_event(GameStarted(seat=0, hand=hand))
        assert bot.memory.status_of(hand[0]) == CardStatus.MINE

    def test_card_played(self):
        bot = BotBrain(0)
        bot.on_event(CardPlayed(seat=2, cards=tuple(str_to_cards("9S 9C"))))
        assert bot.memory.is_played(str_to_cards("9S")[0])
        assert bot.memory.known_profile(2).cards_remaining == 11
        assert bot.memory.current_combo.is_valid

    def test_own_play_not_profiled(self):
        bot = BotBrain(0)
        bot.on_event(CardPlayed(seat=0, cards=tuple(str_to_cards("9S"))))
        assert bot.memory.known_profile(0) is None

    def test_new_round_clears_table(self):
        bot = BotBrain(0)
        bot.on_event(CardPlayed(seat=1, cards=tuple(str_to_cards("9S"))))
        bot.on_event(TurnPassed(seat=2))
        assert bot.memory.known_profile(2).weaknesses
        bot.on_event(TurnPassed(seat=3, new_round=True))
        assert not bot.memory.current_combo.is_valid

    def test_game_ended_resets(self):
        bot = BotBrain(0)
        bot.on_event(GameStarted(seat=0, hand=tuple(str_to_cards("3S"))))
        bot.on_event(GameEnded(finish_order=(0, 1, 2, 3)))
        assert (bot.memory.deck_status == CardStatus.UNKNOWN).all()


class TestBotBrainRespond:
    """BotBrain 跟牌测试"""

    def test_empty_hand_passes(self):
        bot = BotBrain(0)
        assert bot.calculate_move(make_game("3S"), None).pass_turn
        game = make_game("3S")
        player = Player(user_id="p0", seat=0)
        assert bot.calculate_move(game, player).pass_turn

    def test_no_legal_move_passes(self):
        bot = BotBrain(0)
        assert decide(bot, make_game("3S 4D 7C", table="2H")).pass_turn

    def test_finishing_move(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("8S 8C", table="4S 4C"))
        assert move.cards == tuple(str_to_cards("8S 8C"))

    def test_weakest_intact_beat(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("5S 9H KD 7S 7C 10S 10C 10D", table="4S"))
        assert move.cards == tuple(str_to_cards("5S"))

    def test_restraint_keeps_pair(self):
        bot = BotBrain(0)
        # 只有拆 K 对才能压过 Q
        move = decide(bot, make_game("KS KC 3D 6H 9D 4S 4C 4H", table="QS"))
        assert move.pass_turn

    def test_restraint_does_not_break_quad(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("7S 7C 7D 7H 3D 4D", table="5S"))
        assert move.pass_turn

    def test_quad_chops_two(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("7S 7C 7D 7H 3D 4D", table="2H"))
        assert move.cards == tuple(str_to_cards("7S 7C 7D 7H"))

    def test_spare_two_before_quad(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("3S 3C 3D 3H 2H 9D 5C", table="2S"))
        assert move.cards == tuple(str_to_cards("2H"))

    def test_urgent_allows_dismantling(self):
        bot = BotBrain(0)
        others = ["2H AH", FILLER[1], FILLER[2]]
        move = decide(bot, make_game("KS KC 3D 6H 9D 4S 4C 4H", table="QS", others=others))
        assert not move.pass_turn
        assert RuleEngine.can_beat(str_to_cards("QS"), move.cards)

    def test_does_not_mutate_game(self):
        bot = BotBrain(0)
        game = make_game("5S 9H KD 7S 7C 10S 10C 10D", table="4S")
        before = dict(game.players)
        decide(bot, game)
        assert game.players == before
        assert game.last_combo.is_valid


class TestBotBrainLead:
    """BotBrain 主动出牌测试"""

    def test_finishing_straight(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("5S 6C 7D"))
        assert move.cards == tuple(str_to_cards("5S 6C 7D"))

    def test_dump_lowest_trash(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("3D 6H 9D KS KC 4S 4C 4H"))
        assert move.cards == tuple(str_to_cards("3D"))

    def test_structures_before_bombs(self):
        bot = BotBrain(0)
        move = decide(bot, make_game("7S 7C 7D 7H KS KC"))
        assert move.cards == tuple(str_to_cards("KS KC"))

    def test_blocker_leads_multi(self):
        bot = BotBrain(0)
        others = ["QS", FILLER[1], FILLER[2]]
        move = decide(bot, make_game("3D 6H 9D KS KC 4S 4C 4H", others=others))
        assert move.cards == tuple(str_to_cards("4S 4C 4H"))

    def test_blocker_leads_highest_single(self):
        bot = BotBrain(0)
        others = ["QS", FILLER[1], FILLER[2]]
        move = decide(bot, make_game("3D 9D KS", others=others))
        assert move.cards == tuple(str_to_cards("KS"))

    def test_exploits_single_weakness(self):
        bot = BotBrain(0)
        # 三家都放过了 2D
        bot.on_event(CardPlayed(seat=0, cards=tuple(str_to_cards("2D"))))
        bot.on_event(TurnPassed(seat=1))
        bot.on_event(TurnPassed(seat=2))
        bot.on_event(TurnPassed(seat=3, new_round=True))
        move = decide(bot, make_game("3D 6H 8C 9D JS 4S 4C 4H"))
        assert move.cards == tuple(str_to_cards("JS"))

    def test_lead_order(self):
        structures = [
            RuleEngine.identify_combination(str_to_cards(s))
            for s in ["7S 7C 7D 7H", "2H", "KS KC", "9D", "3D"]
        ]
        ordered = BotBrain.lead_order(structures)
        assert [str(c) for c in ordered] == [
            "SINGLE[3D]", "SINGLE[9D]", "PAIR[KS KC]", "SINGLE[2H]", "BOMB[7S 7C 7D 7H]",
        ]


class TestDismantles:
    """拆牌判断测试"""

    def test_whole_structure(self):
        from bot.organizer import partition_hand
        organized = partition_hand(str_to_cards("KS KC 3D"))
        pair = RuleEngine.identify_combination(str_to_cards("KS KC"))
        single_k = RuleEngine.identify_combination(str_to_cards("KS"))
        trash = RuleEngine.identify_combination(str_to_cards("3D"))
        assert not BotBrain.dismantles(pair, organized)
        assert BotBrain.dismantles(single_k, organized)
        assert not BotBrain.dismantles(trash, organized)
