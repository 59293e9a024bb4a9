"""Blackjack payout and table rules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cards import Card
from .hand import Hand, HandResult

DEALER_STANDS_ON = 17


@dataclass(frozen=True)
class Settlement:
    result: HandResult
    payout: int


def blackjack_payout(bet: int) -> int:
    """Stake plus 3:2 winnings, rounded up to the next whole unit."""

    return (bet * 5 + 1) // 2


def settle_hand(player: Hand, dealer: Hand, natural: bool) -> Settlement:
    """Return the result and the amount credited back for one player hand.

    The stake was already deducted when the bet was placed, so a loss pays 0,
    a push returns the stake and a win pays twice the stake.
    """

    bet = player.bet
    if natural and not player.is_split_hand:
        if dealer.is_blackjack:
            return Settlement(HandResult.PUSH, bet)
        return Settlement(HandResult.BLACKJACK, blackjack_payout(bet))
    if player.is_busted:
        return Settlement(HandResult.BUST, 0)
    if dealer.is_busted:
        return Settlement(HandResult.WIN, bet * 2)
    player_value, dealer_value = player.best_value, dealer.best_value
    if player_value > dealer_value:
        return Settlement(HandResult.WIN, bet * 2)
    if player_value == dealer_value:
        return Settlement(HandResult.PUSH, bet)
    return Settlement(HandResult.LOSE, 0)


def insurance_payout(insurance_bet: int, up_card: Optional[Card], dealer: Hand) -> int:
    """Insurance pays 2:1 (stake plus twice the stake) against a dealer natural."""

    if insurance_bet <= 0 or up_card is None or not up_card.is_ace:
        return 0
    if not dealer.is_blackjack:
        return 0
    return insurance_bet * 3


def dealer_should_draw(dealer: Hand, hits_soft_17: bool = False) -> bool:
    value = dealer.best_value
    if value < DEALER_STANDS_ON:
        return True
    return hits_soft_17 and value == DEALER_STANDS_ON and dealer.is_soft


def can_hit(hand: Hand) -> bool:
    if hand.is_finished:
        return False
    return not (hand.split_aces and len(hand.cards) == 2)


def can_double(hand: Hand, balance: int) -> bool:
    return len(hand.cards) == 2 and not hand.is_finished and balance >= hand.bet


def is_pair(hand: Hand) -> bool:
    return len(hand.cards) == 2 and hand.cards[0].rank == hand.cards[1].rank


def can_split(hand: Hand, balance: int) -> bool:
    return is_pair(hand) and not hand.is_finished and balance >= hand.bet


def surrender_refund(hand: Hand) -> int:
    return hand.bet // 2


def insurance_cap(hand: Optional[Hand]) -> int:
    return hand.bet // 2 if hand is not None else 0


__all__ = [
    "Settlement",
    "DEALER_STANDS_ON",
    "blackjack_payout",
    "settle_hand",
    "insurance_payout",
    "dealer_should_draw",
    "can_hit",
    "can_double",
    "can_split",
    "is_pair",
    "surrender_refund",
    "insurance_cap",
]
