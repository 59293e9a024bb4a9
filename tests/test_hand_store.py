from blackjack_gui.core.cards import parse_cards
from blackjack_gui.core.hand import HandResult
from blackjack_gui.core.hand_store import HandStore

from conftest import make_hand


def test_reads_return_copies():
    store = HandStore()
    index = store.add_player_hand(parse_cards(["10S", "6H"]), bet=50)
    hand = store.player_hand(index)
    hand.bet = 999
    assert store.player_hand(index).bet == 50


def test_out_of_range_access_is_a_no_op():
    store = HandStore()
    assert store.player_hand(0) is None
    assert store.add_card(3, parse_cards(["2C"])[0]) is None
    assert not store.complete_hand(1)
    assert not store.update_player_hand(0, make_hand("2C"))
    assert store.remove_hand(0) is None
    assert not store.insert_hand(make_hand("2C"), 2)


def test_replace_with_keeps_order():
    store = HandStore()
    store.add_player_hand(parse_cards(["2C", "3C"]))
    store.add_player_hand(parse_cards(["8S", "8H"]))
    store.add_player_hand(parse_cards(["4C", "5C"]))
    assert store.replace_with(1, [make_hand("8S"), make_hand("8H")])
    values = [hand.best_value for hand in store.player_hands()]
    assert values == [5, 8, 8, 9]


def test_record_result_only_once():
    store = HandStore()
    store.add_player_hand(parse_cards(["10S", "9H"]))
    assert store.record_result(0, HandResult.LOSE)
    assert not store.record_result(0, HandResult.WIN)
    assert store.player_hand(0).result is HandResult.LOSE


def test_added_cards_are_face_up():
    store = HandStore()
    store.add_player_hand()
    hand = store.add_card(0, parse_cards(["AS"])[0].with_face_down(True))
    assert not hand.cards[0].face_down


def test_dealer_hole_card_reveal():
    store = HandStore()
    up, hole = parse_cards(["10C", "7D"])
    store.add_dealer_card(up)
    store.add_dealer_card(hole.with_face_down(True))
    assert store.dealer_hand.cards[1].face_down
    revealed = store.reveal_dealer_cards()
    assert not any(card.face_down for card in revealed.cards)
    assert store.dealer_value == 17


def test_initialize_hands_archives_previous_round():
    store = HandStore()
    store.initialize_hands()
    assert store.completed_rounds() == []
    store.add_player_hand(parse_cards(["10S", "9H"]), bet=10)
    store.initialize_hands()
    assert len(store) == 0
    assert len(store.completed_rounds()) == 1
    assert store.completed_rounds()[0][0].bet == 10
    store.reset()
    assert store.completed_rounds() == []


def test_all_hands_complete_and_total_bet():
    store = HandStore()
    store.add_player_hand(parse_cards(["10S", "9H"]), bet=10)
    store.add_player_hand(parse_cards(["10S", "6H", "9D"]), bet=20)
    assert store.total_bet() == 30
    assert not store.all_hands_complete()
    store.complete_hand(0)
    assert store.all_hands_complete()
