"""推断器测试"""
import pytest

from core.cards import Card, str_to_cards
from core.combinations import CardCombination, ComboType
from brain.memory import GameMemory
from brain.estimator import Estimator


def single(s: str) -> CardCombination:
    return CardCombination.from_cards(str_to_cards(s))


def fail_on(memory: GameMemory, seat: int, power: int):
    """让 seat 对某张单牌过牌"""
    memory.update_table([Card.from_power(power)])
    memory.record_pass(seat)


@pytest.fixture
def memory():
    return GameMemory()


@pytest.fixture
def estimator(memory):
    return Estimator(memory)


class TestComboLikelihood:
    """牌型可能性测试"""

    def test_unknown_seat(self, estimator):
        assert estimator.get_combo_likelihood(1, ComboType.PAIR) == 0.5

    def test_base(self, memory, estimator):
        memory.profile(1)
        assert estimator.get_combo_likelihood(1, ComboType.SINGLE) == pytest.approx(0.7)

    def test_exhaustion(self, memory, estimator):
        memory.update_table(str_to_cards("9S 9C"))
        memory.record_play(1, str_to_cards("9S 9C"))
        assert estimator.get_combo_likelihood(1, ComboType.PAIR) == pytest.approx(0.56)
        assert estimator.get_combo_likelihood(1, ComboType.SINGLE) == pytest.approx(0.7)

    def test_physical_minimum(self, memory, estimator):
        memory.profile(1).cards_remaining = 1
        assert estimator.get_combo_likelihood(1, ComboType.PAIR) == 0.0
        assert estimator.get_combo_likelihood(1, ComboType.SINGLE) == pytest.approx(0.7)

    def test_bomb_minimum(self, memory, estimator):
        memory.profile(2).cards_remaining = 3
        assert estimator.get_combo_likelihood(2, ComboType.BOMB) == 0.0
        assert estimator.get_combo_likelihood(2, ComboType.STRAIGHT) == pytest.approx(0.7)


class TestSafety:
    """安全度测试"""

    def test_no_profiles(self, estimator):
        assert estimator.is_safe_from_next_players(single("AH"), 0) == 0.0

    def test_all_blocked(self, memory, estimator):
        for seat in (1, 2, 3):
            fail_on(memory, seat, 40)
        assert estimator.is_safe_from_next_players(single("AH"), 0) == 1.0

    def test_stops_at_first_threat(self, memory, estimator):
        fail_on(memory, 1, 50)
        fail_on(memory, 2, 40)
        fail_on(memory, 3, 40)
        # 下家可能压过，后面的座位不再累计
        assert estimator.is_safe_from_next_players(single("AH"), 0) == 0.0

    def test_partial(self, memory, estimator):
        fail_on(memory, 1, 40)
        fail_on(memory, 2, 50)
        fail_on(memory, 3, 40)
        assert estimator.is_safe_from_next_players(single("AH"), 0) == pytest.approx(1 / 3)

    def test_seat_order_wraps(self, memory, estimator):
        fail_on(memory, 0, 40)
        assert estimator.is_safe_from_next_players(single("AH"), 3) == 1.0


class TestDominanceScore:
    """弱点利用得分测试"""

    def test_non_single(self, memory, estimator):
        fail_on(memory, 1, 40)
        assert estimator.get_dominance_score(single("KS KC"), 0) == 0.0

    def test_low_single(self, memory, estimator):
        fail_on(memory, 1, 40)
        assert estimator.get_dominance_score(single("10H"), 0) == 0.0

    def test_high_single(self, memory, estimator):
        fail_on(memory, 1, 40)
        # JS 牌力 32
        assert estimator.get_dominance_score(single("JS"), 0) == pytest.approx(32 / 40)

    def test_sums_seats(self, memory, estimator):
        fail_on(memory, 1, 40)
        fail_on(memory, 2, 50)
        assert estimator.get_dominance_score(single("JS"), 0) == pytest.approx(32 / 40 + 32 / 50)

    def test_at_or_above_ceiling(self, memory, estimator):
        fail_on(memory, 1, 30)
        assert estimator.get_dominance_score(single("JS"), 0) == 0.0


class TestBossAndLead:
    """boss 牌与出牌权测试"""

    def test_boss_cards(self, memory, estimator):
        hand = str_to_cards("3S 2H")
        memory.mark_mine(hand)
        assert estimator.get_boss_cards(hand) == str_to_cards("2H")

    def test_lead_probability_boss(self, memory, estimator):
        memory.mark_mine(str_to_cards("2H"))
        assert estimator.lead_turn_probability(str_to_cards("2H")[0]) == 1.0

    def test_lead_probability(self, memory, estimator):
        # AH 之上还有 4 张未知
        assert estimator.lead_turn_probability(str_to_cards("AH")[0]) == pytest.approx(0.2)
        memory.mark_mine(str_to_cards("2H"))
        assert estimator.lead_turn_probability(str_to_cards("AH")[0]) == pytest.approx(0.25)


class TestCalculateDominance:
    """手牌控制力测试"""

    def test_empty(self, estimator):
        assert estimator.calculate_dominance([]) == 0.0

    def test_nothing_unseen(self, memory, estimator):
        hand = str_to_cards("2H")
        memory.mark_played([Card.from_power(p) for p in range(51)])
        memory.mark_mine(hand)
        assert estimator.calculate_dominance(hand) == 1.0

    def test_ratio(self, memory, estimator):
        hand = str_to_cards("2H")
        memory.mark_mine(hand)
        # 未出现牌为 0..50，平均 25
        assert estimator.calculate_dominance(hand) == pytest.approx(51 / (51 + 25))

    def test_weakest_hand(self, memory, estimator):
        hand = str_to_cards("3S")
        memory.mark_played([Card.from_power(p) for p in range(2, 52)])
        memory.mark_mine(hand)
        # 只剩 3C (下标 1) 未出现: 0 / (0 + 1)
        assert estimator.calculate_dominance(hand) == 0.0
