"""Multi-deck shoe and pluggable card sources."""
from __future__ import annotations

import logging
import random
import threading
from typing import Iterable, List, Optional, Protocol

from .cards import Card, standard_cards

LOGGER = logging.getLogger(__name__)

LOW_CARD_THRESHOLD = 15


class CardSource(Protocol):
    """Anything that can hand out the next ``count`` cards."""

    def deal(self, count: int) -> List[Card]:
        ...


class Shoe:
    """A shuffled shoe of one or more standard decks."""

    def __init__(
        self,
        number_of_decks: int = 1,
        *,
        low_card_threshold: int = LOW_CARD_THRESHOLD,
        rng: random.Random | None = None,
    ) -> None:
        if number_of_decks <= 0:
            raise ValueError("number_of_decks must be positive")
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self.low_card_threshold = low_card_threshold
        self.number_of_decks = number_of_decks
        self._cards: List[Card] = []
        self.reshuffle(number_of_decks)

    def reshuffle(self, number_of_decks: Optional[int] = None) -> None:
        """Replace the shoe with a fresh ``52 * number_of_decks`` shuffled cards."""

        if number_of_decks is not None:
            if number_of_decks <= 0:
                raise ValueError("number_of_decks must be positive")
            self.number_of_decks = number_of_decks
        cards = standard_cards(self.number_of_decks)
        self._rng.shuffle(cards)
        with self._lock:
            self._cards = cards
        LOGGER.debug("Shoe reshuffled with %d deck(s)", self.number_of_decks)

    def deal(self, count: int) -> List[Card]:
        """Remove up to ``count`` cards from the front; short shoes return fewer."""

        if count <= 0:
            return []
        with self._lock:
            dealt, self._cards = self._cards[:count], self._cards[count:]
        return dealt

    def is_low(self) -> bool:
        return len(self) < self.low_card_threshold

    def reshuffle_if_low(self) -> bool:
        if not self.is_low():
            return False
        self.reshuffle()
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._cards)


class StackedSource:
    """Deals a fixed card sequence first-in-first-out, then defers to ``fallback``."""

    def __init__(self, cards: Iterable[Card], fallback: Optional[CardSource] = None) -> None:
        self._cards: List[Card] = list(cards)
        self._lock = threading.Lock()
        self.fallback = fallback

    def deal(self, count: int) -> List[Card]:
        if count <= 0:
            return []
        with self._lock:
            dealt, self._cards = self._cards[:count], self._cards[count:]
        if len(dealt) < count and self.fallback is not None:
            dealt.extend(self.fallback.deal(count - len(dealt)))
        return dealt

    def __len__(self) -> int:
        with self._lock:
            return len(self._cards)


__all__ = ["CardSource", "Shoe", "StackedSource", "LOW_CARD_THRESHOLD"]
