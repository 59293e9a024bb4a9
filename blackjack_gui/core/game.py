"""Round stages and the read-only views handed to the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from itertools import count
from typing import List, Optional, Tuple

from . import rules
from .cards import Card
from .hand import Hand

_NOTIFICATION_IDS = count(1)


class Stage(Enum):
    IDLE = auto()
    DEALING = auto()
    INSURANCE_PROMPT = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    EVALUATION = auto()
    PAYOUT = auto()
    NEW_ROUND = auto()

    @property
    def is_between_rounds(self) -> bool:
        return self in (Stage.IDLE, Stage.NEW_ROUND)


@dataclass(frozen=True)
class AllowedActions:
    can_hit: bool = False
    can_stand: bool = False
    can_double_down: bool = False
    can_split: bool = False
    can_surrender: bool = False


NO_ACTIONS = AllowedActions()


def derive_allowed_actions(
    stage: Stage, hand: Optional[Hand], balance: int, split_in_progress: bool = False
) -> AllowedActions:
    """Compute the legal player actions from the stage and the active hand alone."""

    if stage is not Stage.PLAYER_TURN or hand is None:
        return NO_ACTIONS
    return AllowedActions(
        can_hit=rules.can_hit(hand),
        can_stand=not hand.is_finished,
        can_double_down=rules.can_double(hand, balance),
        can_split=rules.can_split(hand, balance) and not split_in_progress,
        # Surrender stays open until the hand completes, hits included.
        can_surrender=not hand.is_finished,
    )


@dataclass(frozen=True)
class Notification:
    text: str
    id: int = field(default_factory=lambda: next(_NOTIFICATION_IDS))


@dataclass(frozen=True)
class TableSnapshot:
    """Everything the presentation layer may read about the table."""

    stage: Stage
    current_hand_index: int
    player_hands: Tuple[Hand, ...]
    dealer_cards: Tuple[Card, ...]
    dealer_reveals_hole_card: bool
    balance: int
    highest_balance: int
    pot: int
    insurance_bet: int
    allowed_actions: AllowedActions
    show_lost: bool = False
    already_refilled: bool = False
    round_number: int = 0
    cards_in_shoe: int = 0
    notifications: Tuple[Notification, ...] = ()

    @property
    def total_bet(self) -> int:
        return sum(hand.bet for hand in self.player_hands)

    @property
    def active_hand(self) -> Optional[Hand]:
        if 0 <= self.current_hand_index < len(self.player_hands):
            return self.player_hands[self.current_hand_index]
        return None

    @property
    def dealer_up_card(self) -> Optional[Card]:
        return self.dealer_cards[0] if self.dealer_cards else None

    @property
    def insurance_cap(self) -> int:
        return rules.insurance_cap(self.active_hand)

    @property
    def dealer_value(self) -> Optional[int]:
        if not self.dealer_reveals_hole_card:
            return None
        return Hand(cards=list(self.dealer_cards)).best_value

    def hand_labels(self) -> List[str]:
        labels = []
        for idx, hand in enumerate(self.player_hands, start=1):
            label = f"Hand {idx}: ${hand.bet} ({hand.best_value})"
            if hand.doubled_down:
                label += " Doubled"
            if hand.is_resolved:
                label += f" {hand.result.value}"
            labels.append(label)
        return labels


__all__ = [
    "Stage",
    "AllowedActions",
    "NO_ACTIONS",
    "derive_allowed_actions",
    "Notification",
    "TableSnapshot",
]
