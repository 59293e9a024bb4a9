"""Blackjack hand model and evaluation."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from itertools import product
from typing import List

from .cards import Card

BLACKJACK = 21


class HandResult(str, Enum):
    UNDEFINED = "—"
    BLACKJACK = "Blackjack!"
    BUST = "Busted!"
    PUSH = "Push"
    WIN = "Win"
    LOSE = "Lose"


def best_value(cards: List[Card]) -> int:
    """Highest total not above 21, or the lowest total when every choice busts."""

    totals = {sum(combo) for combo in product(*(card.values for card in cards))}
    valid = [total for total in totals if total <= BLACKJACK]
    return max(valid) if valid else min(totals)


@dataclass
class Hand:
    """A player or dealer hand with its bet metadata."""

    cards: List[Card] = field(default_factory=list)
    bet: int = 0
    completed: bool = False
    doubled_down: bool = False
    split_aces: bool = False
    is_split_hand: bool = False
    result: HandResult = HandResult.UNDEFINED

    @property
    def best_value(self) -> int:
        return best_value(self.cards)

    @property
    def is_busted(self) -> bool:
        return self.best_value > BLACKJACK

    @property
    def is_blackjack(self) -> bool:
        return len(self.cards) == 2 and self.best_value == BLACKJACK

    @property
    def is_natural(self) -> bool:
        """Two-card 21 that was not produced by a split."""

        return self.is_blackjack and not self.is_split_hand

    @property
    def is_soft(self) -> bool:
        hard = sum(min(card.values) for card in self.cards)
        return any(card.is_ace for card in self.cards) and hard + 10 == self.best_value

    @property
    def is_resolved(self) -> bool:
        return self.result is not HandResult.UNDEFINED

    @property
    def is_finished(self) -> bool:
        return self.completed or self.is_busted

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def record_result(self, result: HandResult) -> bool:
        """Set the result once; later calls are ignored and return ``False``."""

        if self.is_resolved or result is HandResult.UNDEFINED:
            return False
        self.result = result
        return True

    def copy(self) -> "Hand":
        return replace(self, cards=list(self.cards))


__all__ = ["Hand", "HandResult", "best_value", "BLACKJACK"]
