import pytest

from blackjack_gui.core.cards import Card, Rank, Suit, parse_cards, standard_cards


def test_parse_cards_accepts_letters_digits_and_symbols():
    cards = parse_cards(["AS", "10h", "Td", "K♦", "2♣"])
    assert [card.rank for card in cards] == [Rank.ACE, Rank.TEN, Rank.TEN, Rank.KING, Rank.TWO]
    assert [card.suit for card in cards] == [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.DIAMONDS, Suit.CLUBS]


def test_parse_cards_rejects_unknown_tokens():
    with pytest.raises(ValueError):
        parse_cards(["1X"])


def test_card_values():
    ace, king, seven = parse_cards(["AS", "KH", "7D"])
    assert ace.values == (1, 11)
    assert king.values == (10,)
    assert seven.values == (7,)
    assert ace.is_ace and not king.is_ace


def test_cards_compare_by_identity():
    first, second = parse_cards(["AS", "AS"])
    assert first != second
    flipped = first.with_face_down(True)
    assert flipped == first
    assert flipped.face_down and not first.face_down


def test_standard_cards_multi_deck_ids_are_unique():
    cards = standard_cards(2)
    assert len(cards) == 104
    assert len({card.id for card in cards}) == 104


def test_card_str_uses_symbols():
    assert str(Card(Suit.HEARTS, Rank.QUEEN)) == "Q♥"
    assert str(Card(Suit.CLUBS, Rank.TEN)) == "10♣"
