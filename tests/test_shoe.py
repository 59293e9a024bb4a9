import random

import pytest

from blackjack_gui.core.cards import parse_cards
from blackjack_gui.core.shoe import Shoe, StackedSource


def test_shoe_holds_52_cards_per_deck():
    assert len(Shoe(1, rng=random.Random(1))) == 52
    assert len(Shoe(6, rng=random.Random(1))) == 312


def test_shoe_rejects_non_positive_deck_count():
    with pytest.raises(ValueError):
        Shoe(0)


def test_deal_returns_partial_when_short():
    shoe = Shoe(1, rng=random.Random(2))
    assert len(shoe.deal(50)) == 50
    rest = shoe.deal(5)
    assert len(rest) == 2
    assert shoe.deal(1) == []
    assert shoe.deal(0) == []


def test_reshuffle_if_low_uses_threshold():
    shoe = Shoe(1, low_card_threshold=15, rng=random.Random(3))
    shoe.deal(37)
    assert len(shoe) == 15
    assert not shoe.reshuffle_if_low()
    shoe.deal(1)
    assert shoe.reshuffle_if_low()
    assert len(shoe) == 52


def test_reshuffle_can_change_deck_count():
    shoe = Shoe(1, rng=random.Random(4))
    shoe.reshuffle(2)
    assert len(shoe) == 104
    assert shoe.number_of_decks == 2


def test_stacked_source_deals_in_order_then_falls_back():
    stacked = parse_cards(["2C", "10C", "3C"])
    source = StackedSource(stacked, fallback=Shoe(1, rng=random.Random(5)))
    assert source.deal(2) == stacked[:2]
    dealt = source.deal(3)
    assert dealt[0] == stacked[2]
    assert len(dealt) == 3
    assert len(source) == 0


def test_stacked_source_without_fallback_runs_dry():
    source = StackedSource(parse_cards(["2C"]))
    assert len(source.deal(3)) == 1
    assert source.deal(1) == []


def test_dealt_cards_do_not_return_before_reshuffle():
    shoe = Shoe(1, rng=random.Random(4))
    dealt = [card for _ in range(52) for card in shoe.deal(1)]
    assert len({card.id for card in dealt}) == 52
    assert len({(card.rank, card.suit) for card in dealt}) == 52
    assert shoe.deal(1) == []
