from blackjack_gui.core.hand import HandResult, best_value
from blackjack_gui.core.cards import parse_cards

from conftest import make_hand


def test_best_value_prefers_highest_total_not_over_21():
    assert best_value(parse_cards(["AS", "6H"])) == 17
    assert best_value(parse_cards(["AS", "AH", "9D"])) == 21
    assert best_value(parse_cards(["AS", "6H", "KD"])) == 17


def test_best_value_returns_lowest_total_when_busted():
    assert best_value(parse_cards(["KS", "QH", "5D"])) == 25
    assert best_value([]) == 0


def test_blackjack_and_natural():
    hand = make_hand("AS", "KH")
    assert hand.is_blackjack and hand.is_natural
    split = make_hand("AS", "KH", is_split_hand=True)
    assert split.is_blackjack and not split.is_natural
    assert not make_hand("7S", "7H", "7D").is_blackjack


def test_soft_hand_detection():
    assert make_hand("AS", "6H").is_soft
    assert not make_hand("AS", "6H", "KD").is_soft
    assert not make_hand("10S", "7H").is_soft


def test_result_is_written_once():
    hand = make_hand("10S", "7H")
    assert hand.record_result(HandResult.WIN)
    assert not hand.record_result(HandResult.LOSE)
    assert hand.result is HandResult.WIN


def test_busted_hand_is_finished():
    hand = make_hand("10S", "7H", "9D")
    assert hand.is_busted
    assert hand.is_finished
    assert not hand.completed


def test_copy_does_not_share_cards():
    hand = make_hand("10S", "7H")
    clone = hand.copy()
    clone.add_card(parse_cards(["2C"])[0])
    assert len(hand.cards) == 2


def test_best_value_counts_one_ace_high_at_most():
    assert best_value(parse_cards(["AS", "5H", "AD"])) == 17
    assert best_value(parse_cards(["10S", "KH", "4D"])) == 24
