import pytest

from blackjack_gui.core.errors import ActionInProgress, InsufficientFunds, InvalidAction
from blackjack_gui.core.game import Stage
from blackjack_gui.core.hand import HandResult

from conftest import deal_round


def test_split_pair_creates_two_funded_hands(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C", "3D", "2D"], bet=100)
    snapshot = manager.split()
    assert snapshot.balance == 800
    assert snapshot.pot == 200
    assert [hand.bet for hand in snapshot.player_hands] == [100, 100]
    assert [hand.best_value for hand in snapshot.player_hands] == [11, 10]
    assert all(hand.is_split_hand for hand in snapshot.player_hands)
    assert snapshot.current_hand_index == 0
    assert snapshot.stage is Stage.PLAYER_TURN


def test_split_hands_are_played_in_order(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C", "3D", "2D"], bet=100)
    manager.split()
    assert manager.stand().current_hand_index == 1
    snapshot = manager.stand()
    assert snapshot.stage is Stage.NEW_ROUND
    assert [hand.result for hand in snapshot.player_hands] == [HandResult.LOSE, HandResult.LOSE]
    assert snapshot.balance == 800
    assert "You lost $200 this round." in [note.text for note in snapshot.notifications]


def test_split_aces_take_one_card_and_21_pays_even_money(manager):
    deal_round(manager, ["AS", "9C", "AH", "8C", "KD", "5D"], bet=100)
    snapshot = manager.split()
    first, second = snapshot.player_hands
    assert first.split_aces and second.split_aces
    assert first.completed and first.best_value == 21
    assert snapshot.current_hand_index == 1
    assert not snapshot.allowed_actions.can_hit
    with pytest.raises(InvalidAction):
        manager.hit()

    snapshot = manager.stand()
    assert snapshot.stage is Stage.NEW_ROUND
    assert [hand.result for hand in snapshot.player_hands] == [HandResult.WIN, HandResult.LOSE]
    assert snapshot.balance == 1000


def test_resplit_is_allowed(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C", "8D", "2D", "3D"], bet=100)
    manager.split()
    snapshot = manager.split()
    assert len(snapshot.player_hands) == 3
    assert snapshot.balance == 700
    assert snapshot.pot == 300


def test_split_rejects_non_pairs(manager):
    deal_round(manager, ["KS", "10C", "QH", "7C"], bet=100)
    with pytest.raises(InvalidAction):
        manager.split()
    assert len(manager.snapshot().player_hands) == 1
    assert manager.ledger.balance == 900


def test_split_without_funds_changes_nothing(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C"], bet=600)
    with pytest.raises(InsufficientFunds):
        manager.split()
    snapshot = manager.snapshot()
    assert len(snapshot.player_hands) == 1
    assert snapshot.balance == 400


def test_split_outside_player_turn(manager):
    with pytest.raises(InvalidAction):
        manager.split()


def test_split_has_its_own_reentrancy_guard(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C"], bet=100)
    manager.split_flow.in_progress = True
    with pytest.raises(ActionInProgress):
        manager.split_flow.split_hand(0)
    assert not manager.snapshot().allowed_actions.can_split
    manager.split_flow.in_progress = False
    assert manager.snapshot().allowed_actions.can_split


def test_split_with_exactly_enough_funds(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C", "3D", "2D"], bet=500)
    snapshot = manager.split()
    assert snapshot.balance == 0
    assert snapshot.pot == 0
    assert [hand.bet for hand in snapshot.player_hands] == [500, 500]


def test_split_one_unit_short_is_rejected(manager):
    deal_round(manager, ["8S", "10C", "8H", "7C"], bet=501)
    with pytest.raises(InsufficientFunds):
        manager.split()
    snapshot = manager.snapshot()
    assert snapshot.balance == 499
    assert len(snapshot.player_hands) == 1
