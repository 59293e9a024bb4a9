"""Splitting a pair into two hands."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

from . import rules
from .errors import ActionInProgress, InsufficientFunds, InvalidAction
from .game import Stage
from .hand import BLACKJACK, Hand

if TYPE_CHECKING:
    from .round_manager import RoundManager

LOGGER = logging.getLogger(__name__)


class SplitFlow:
    """Runs a split against the round manager's ledger and hand store."""

    def __init__(self, manager: "RoundManager") -> None:
        self.manager = manager
        self.in_progress = False

    def split_hand(self, index: int) -> Tuple[int, int]:
        """Split the hand at ``index`` and return the indices of the two new hands.

        Raises:
            ActionInProgress: another split or round action is still running.
            InvalidAction: wrong stage, or the hand is not an unfinished pair.
            InsufficientFunds: the balance does not cover a second stake.
        """

        if self.in_progress:
            raise ActionInProgress("split")
        with self.manager.action_guard("split"):
            self.in_progress = True
            try:
                return self._split(index)
            finally:
                self.in_progress = False

    def _split(self, index: int) -> Tuple[int, int]:
        manager = self.manager
        if manager.stage is not Stage.PLAYER_TURN:
            raise InvalidAction("Cannot split outside the player's turn")
        hand = manager.hands.player_hand(index)
        if hand is None or not rules.is_pair(hand) or hand.is_finished:
            raise InvalidAction("Hand cannot be split")
        balance = manager.ledger.balance
        if balance < hand.bet:
            raise InsufficientFunds(hand.bet, balance)

        manager.ledger.place_bet(hand.bet)
        aces = all(card.is_ace for card in hand.cards)
        new_hands = [
            Hand(cards=[card], bet=hand.bet, split_aces=aces, is_split_hand=True) for card in hand.cards
        ]
        manager.hands.replace_with(index, new_hands)
        first, second = index, index + 1
        for hand_index in (first, second):
            manager.deal_to_hand(hand_index)
        manager.recalc_pot_from_hands()

        for hand_index in (first, second):
            split_hand = manager.hands.player_hand(hand_index)
            if split_hand is not None and split_hand.best_value == BLACKJACK:
                manager.hands.complete_hand(hand_index)
        LOGGER.info("Split hand %d into %d hands%s", index, len(manager.hands), " (aces)" if aces else "")
        manager.notify(f"Hand split! Playing {len(manager.hands)} hands.")
        manager.advance_turn()
        return first, second


__all__ = ["SplitFlow"]
