"""Player bankroll, highest balance and pot accounting."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from .cards import Card
from .errors import InsufficientFunds
from .hand import Hand
from .persist import BalanceStore, MemoryBalanceStore, PersistedBankroll
from .rules import Settlement, insurance_payout, settle_hand

LOGGER = logging.getLogger(__name__)

STARTING_BALANCE = 1000


class BankrollLedger:
    """Owns balance, highest balance and the current pot.

    All mutations run under one lock and are persisted immediately. The pot
    never exceeds the balance: every balance decrease clamps it down.
    """

    def __init__(
        self,
        balance: int = STARTING_BALANCE,
        *,
        pot: int = 0,
        highest_balance: Optional[int] = None,
        store: Optional[BalanceStore] = None,
    ) -> None:
        if balance < 0:
            raise ValueError("balance must be non-negative")
        self._lock = threading.RLock()
        self._balance = balance
        self._highest = max(balance, highest_balance or 0)
        self._pot = max(0, min(pot, balance))
        self.store: BalanceStore = store if store is not None else MemoryBalanceStore()

    @classmethod
    def load(cls, store: BalanceStore, starting_balance: int = STARTING_BALANCE) -> "BankrollLedger":
        """Restore from ``store``; a saved pot above the saved balance is discarded."""

        saved = store.load()
        if saved is None or saved.balance < 0:
            return cls(starting_balance, store=store)
        pot = saved.pot if 0 < saved.pot <= saved.balance else 0
        return cls(saved.balance, pot=pot, highest_balance=saved.highest_balance, store=store)

    # ---------------- Reads ----------------

    @property
    def balance(self) -> int:
        with self._lock:
            return self._balance

    @property
    def highest_balance(self) -> int:
        with self._lock:
            return self._highest

    @property
    def current_pot(self) -> int:
        with self._lock:
            return self._pot

    def snapshot(self) -> PersistedBankroll:
        with self._lock:
            return PersistedBankroll(balance=self._balance, pot=self._pot, highest_balance=self._highest)

    # ---------------- Mutations ----------------

    def adjust_balance(self, delta: int) -> int:
        with self._lock:
            if self._balance + delta < 0:
                raise InsufficientFunds(-delta, self._balance)
            self._balance += delta
            self._after_balance_change()
            LOGGER.debug("Balance adjusted by %+d to %d", delta, self._balance)
            return self._balance

    def place_bet(self, amount: int) -> int:
        """Deduct a stake, raising :class:`InsufficientFunds` when it is not covered."""

        if amount < 0:
            raise ValueError("bet amount must be positive")
        with self._lock:
            if amount > self._balance:
                raise InsufficientFunds(amount, self._balance)
            return self.adjust_balance(-amount)

    def set_pot(self, amount: int) -> int:
        with self._lock:
            self._pot = max(0, min(amount, self._balance))
            self._save()
            return self._pot

    def clear_pot(self) -> None:
        self.set_pot(0)

    def settle_hand_result(self, player: Hand, dealer: Hand, natural: bool) -> Settlement:
        """Credit the payout for one hand; hands that already carry a result are skipped."""

        if player.is_resolved:
            return Settlement(player.result, 0)
        settlement = settle_hand(player, dealer, natural)
        if settlement.payout:
            self.adjust_balance(settlement.payout)
        return settlement

    def settle_insurance(self, insurance_bet: int, up_card: Optional[Card], dealer: Hand) -> int:
        payout = insurance_payout(insurance_bet, up_card, dealer)
        if payout:
            self.adjust_balance(payout)
        return payout

    def refill_to(self, target: int) -> None:
        with self._lock:
            self._balance = target
            self._highest = max(self._highest, target)
            self._pot = 0
            self._save()
        LOGGER.info("Bankroll refilled to %d", target)

    def reset(self, balance: int) -> None:
        """Start over from ``balance``; the only way the highest balance goes down."""

        with self._lock:
            self._balance = balance
            self._highest = balance
            self._pot = 0
            self._save()
        LOGGER.info("Bankroll reset to %d", balance)

    def set_initial_pot(self, amount: int) -> None:
        with self._lock:
            self._balance = amount
            self._highest = amount
            self._pot = amount
            self._save()

    def _after_balance_change(self) -> None:
        if self._balance > self._highest:
            self._highest = self._balance
        if self._balance < self._pot:
            self._pot = self._balance
        self._save()

    def _save(self) -> None:
        self.store.save(PersistedBankroll(balance=self._balance, pot=self._pot, highest_balance=self._highest))


__all__ = ["BankrollLedger", "STARTING_BALANCE"]
