"""Active player hands, dealer hand and the archive of finished rounds."""
from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

from .cards import Card
from .hand import Hand, HandResult

LOGGER = logging.getLogger(__name__)


class HandStore:
    """Indexed store for the hands of the current round.

    Reads hand out copies; writes replace hands by index. Indices are only
    stable inside one round because splits insert new hands.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._player_hands: List[Hand] = []
        self._dealer_hand = Hand()
        self._completed_rounds: List[List[Hand]] = []

    def initialize_hands(self) -> None:
        """Archive the current player hands and start from an empty table."""

        with self._lock:
            if self._player_hands:
                self._completed_rounds.append(self._player_hands)
            self._player_hands = []
            self._dealer_hand = Hand()
        LOGGER.debug("Hands initialized, %d round(s) archived", len(self._completed_rounds))

    def reset(self) -> None:
        with self._lock:
            self._player_hands = []
            self._dealer_hand = Hand()
            self._completed_rounds = []

    # ---------------- Player hands ----------------

    def player_hands(self) -> List[Hand]:
        with self._lock:
            return [hand.copy() for hand in self._player_hands]

    def player_hand(self, index: int) -> Optional[Hand]:
        with self._lock:
            if not 0 <= index < len(self._player_hands):
                LOGGER.debug("No player hand at index %d", index)
                return None
            return self._player_hands[index].copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._player_hands)

    def add_player_hand(self, cards: Iterable[Card] = (), bet: int = 0) -> int:
        with self._lock:
            self._player_hands.append(Hand(cards=list(cards), bet=bet))
            index = len(self._player_hands) - 1
        LOGGER.debug("Added player hand %d with bet %d", index, bet)
        return index

    def update_player_hand(self, index: int, hand: Hand) -> bool:
        with self._lock:
            if not 0 <= index < len(self._player_hands):
                LOGGER.debug("Cannot update missing hand %d", index)
                return False
            self._player_hands[index] = hand.copy()
            return True

    def add_card(self, index: int, card: Card) -> Optional[Hand]:
        with self._lock:
            if not 0 <= index < len(self._player_hands):
                return None
            hand = self._player_hands[index]
            hand.add_card(card.with_face_down(False))
            LOGGER.debug("Hand %d receives %s (%d)", index, card, hand.best_value)
            return hand.copy()

    def complete_hand(self, index: int) -> bool:
        with self._lock:
            if not 0 <= index < len(self._player_hands):
                return False
            self._player_hands[index].completed = True
            return True

    def record_result(self, index: int, result: HandResult) -> bool:
        """Write a hand result once; a hand that already has one keeps it."""

        with self._lock:
            if not 0 <= index < len(self._player_hands):
                return False
            return self._player_hands[index].record_result(result)

    def all_hands_complete(self) -> bool:
        with self._lock:
            return all(hand.is_finished for hand in self._player_hands)

    def total_bet(self) -> int:
        with self._lock:
            return sum(hand.bet for hand in self._player_hands)

    # ---------------- Splitting ----------------

    def remove_hand(self, index: int) -> Optional[Hand]:
        with self._lock:
            if not 0 <= index < len(self._player_hands):
                LOGGER.debug("Invalid index to remove: %d", index)
                return None
            return self._player_hands.pop(index)

    def insert_hand(self, hand: Hand, index: int) -> bool:
        with self._lock:
            if not 0 <= index <= len(self._player_hands):
                LOGGER.debug("Invalid index for insert: %d", index)
                return False
            self._player_hands.insert(index, hand.copy())
            return True

    def replace_with(self, index: int, hands: Iterable[Hand]) -> bool:
        """Swap the hand at ``index`` for ``hands`` in one step."""

        with self._lock:
            if self.remove_hand(index) is None:
                return False
            for offset, hand in enumerate(hands):
                self.insert_hand(hand, index + offset)
            return True

    # ---------------- Dealer ----------------

    @property
    def dealer_hand(self) -> Hand:
        with self._lock:
            return self._dealer_hand.copy()

    @property
    def dealer_value(self) -> int:
        with self._lock:
            return self._dealer_hand.best_value

    def add_dealer_card(self, card: Card) -> Hand:
        with self._lock:
            self._dealer_hand.add_card(card)
            LOGGER.debug("Dealer receives %s", "hole card" if card.face_down else card)
            return self._dealer_hand.copy()

    def reveal_dealer_cards(self) -> Hand:
        with self._lock:
            self._dealer_hand.cards = [card.with_face_down(False) for card in self._dealer_hand.cards]
            return self._dealer_hand.copy()

    # ---------------- History ----------------

    def completed_rounds(self) -> List[List[Hand]]:
        with self._lock:
            return [[hand.copy() for hand in round_hands] for round_hands in self._completed_rounds]


__all__ = ["HandStore"]
