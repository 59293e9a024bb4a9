"""Card utilities."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Tuple
from uuid import uuid4


class Suit(str, Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]


class Rank(int, Enum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        return RANK_SYMBOLS.get(self, str(self.value))


SUITS = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)
RANKS = tuple(Rank)
SUIT_SYMBOLS = {Suit.SPADES: "♠", Suit.HEARTS: "♥", Suit.DIAMONDS: "♦", Suit.CLUBS: "♣"}
RANK_SYMBOLS = {Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"}
SYMBOL_TO_RANK = {**{str(r.value): r for r in Rank if r <= Rank.TEN}, "T": Rank.TEN, **{v: k for k, v in RANK_SYMBOLS.items()}}
SYMBOL_TO_SUIT = {
    **{v: k for k, v in SUIT_SYMBOLS.items()},
    "S": Suit.SPADES,
    "H": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "C": Suit.CLUBS,
}


@dataclass(frozen=True)
class Card:
    """A single physical card.

    Equality and hashing use ``id`` only, so two aces of spades from
    different decks in the same shoe are distinct cards.
    """

    suit: Suit = field(compare=False)
    rank: Rank = field(compare=False)
    face_down: bool = field(default=False, compare=False)
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def values(self) -> Tuple[int, ...]:
        if self.rank is Rank.ACE:
            return (1, 11)
        if self.rank >= Rank.JACK:
            return (10,)
        return (int(self.rank),)

    @property
    def is_ace(self) -> bool:
        return self.rank is Rank.ACE

    def with_face_down(self, face_down: bool) -> "Card":
        return replace(self, face_down=face_down)

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"


def standard_cards(number_of_decks: int = 1) -> List[Card]:
    """Build ``52 * number_of_decks`` fresh cards in suit/rank order."""

    return [Card(suit, rank) for _ in range(number_of_decks) for suit in SUITS for rank in RANKS]


def parse_cards(repr_cards: Iterable[str]) -> List[Card]:
    """Parse tokens such as ``"AS"``, ``"10h"`` or ``"K♦"`` into cards."""

    cards = []
    for token in repr_cards:
        rank_symbol, suit_symbol = token[:-1].upper(), token[-1]
        suit = SYMBOL_TO_SUIT.get(suit_symbol.upper())
        if rank_symbol not in SYMBOL_TO_RANK or suit is None:
            raise ValueError(f"Unknown card token: {token!r}")
        cards.append(Card(suit, SYMBOL_TO_RANK[rank_symbol]))
    return cards


__all__ = ["Card", "Rank", "Suit", "SUITS", "RANKS", "parse_cards", "standard_cards"]
