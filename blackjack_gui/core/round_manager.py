"""High level round orchestration."""
from __future__ import annotations

import json
import logging
import random
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Deque, Iterable, Iterator, List, Optional

from . import rules
from .cards import Card
from .errors import ActionInProgress, GameError, InsufficientFunds, InvalidAction
from .game import AllowedActions, Notification, Stage, TableSnapshot, derive_allowed_actions
from .hand import BLACKJACK, Hand, HandResult
from .hand_store import HandStore
from .ledger import STARTING_BALANCE, BankrollLedger
from .persist import BalanceStore, JsonBalanceStore, MemoryBalanceStore, default_store
from .shoe import LOW_CARD_THRESHOLD, CardSource, Shoe, StackedSource
from .split import SplitFlow

LOGGER = logging.getLogger(__name__)

REFILL_AMOUNT = 1000
# Oldest events drop off once the log is full.
MAX_NOTIFICATIONS = 20


@dataclass
class GameConfig:
    name: str = "Blackjack"
    starting_balance: int = STARTING_BALANCE
    refill_amount: int = REFILL_AMOUNT
    number_of_decks: int = 1
    low_card_threshold: int = LOW_CARD_THRESHOLD
    dealer_hits_soft_17: bool = False
    save_file: Optional[Path] = None


def load_game_config(path: Path | str) -> GameConfig:
    """Read a JSON table configuration; missing keys keep their defaults."""

    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    defaults = GameConfig()
    save_file = data.get("save_file")
    if save_file is not None:
        save_file = Path(save_file)
        if not save_file.is_absolute():
            save_file = path.parent / save_file
    config = GameConfig(
        name=str(data.get("table_name", defaults.name)),
        starting_balance=int(data.get("starting_balance", defaults.starting_balance)),
        refill_amount=int(data.get("refill_amount", defaults.refill_amount)),
        number_of_decks=int(data.get("decks", defaults.number_of_decks)),
        low_card_threshold=int(data.get("low_card_threshold", defaults.low_card_threshold)),
        dealer_hits_soft_17=bool(data.get("dealer_hits_soft_17", defaults.dealer_hits_soft_17)),
        save_file=save_file,
    )
    if config.number_of_decks <= 0:
        raise ValueError("decks must be positive")
    if config.starting_balance < 0 or config.refill_amount < 0:
        raise ValueError("balances must be non-negative")
    return config


class RoundManager:
    """Drives one player's rounds from the bet to the payout.

    Every action entry point holds a single non-reentrant action lock for its
    whole duration, so an overlapping call is rejected with
    :class:`ActionInProgress` instead of interleaving with a half-applied
    action. Actions return a :class:`TableSnapshot` or raise a
    :class:`GameError` before mutating anything.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        store: Optional[BalanceStore] = None,
        source: Optional[CardSource] = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GameConfig()
        if store is None:
            store = JsonBalanceStore(self.config.save_file) if self.config.save_file else MemoryBalanceStore()
        self.shoe = Shoe(
            self.config.number_of_decks,
            low_card_threshold=self.config.low_card_threshold,
            rng=rng,
        )
        self.source: CardSource = source if source is not None else self.shoe
        self.ledger = BankrollLedger.load(store, self.config.starting_balance)
        self.hands = HandStore()
        self.split_flow = SplitFlow(self)
        self.stage = Stage.IDLE
        self.current_hand_index = 0
        self.insurance_bet = 0
        self.has_played_round = False
        self.dealer_reveals_hole_card = False
        self.show_lost = False
        self.already_refilled = False
        self.round_number = 0
        self.notifications: Deque[Notification] = deque(maxlen=MAX_NOTIFICATIONS)
        self._listeners: List[Callable[[Notification], None]] = []
        self._on_player_lost: Optional[Callable[[], None]] = None
        self._action_lock = threading.Lock()
        self._busy_action: Optional[str] = None
        self._round_starting_balance = 0

    # ---------------- Guards and notifications ----------------

    @contextmanager
    def action_guard(self, action: str) -> Iterator[None]:
        """Hold the action lock, rejecting the call if another action holds it."""

        if not self._action_lock.acquire(blocking=False):
            LOGGER.info("Rejected %s while %s is in progress", action, self._busy_action)
            self.notify("Action already in progress. Please wait.")
            raise ActionInProgress(action)
        self._busy_action = action
        try:
            yield
        finally:
            self._busy_action = None
            self._action_lock.release()

    @property
    def is_processing_action(self) -> bool:
        return self._action_lock.locked()

    @contextmanager
    def _action(self, action: str) -> Iterator[None]:
        """Run one guarded action; a rejected action is echoed as a notification."""

        with self.action_guard(action):
            try:
                yield
            except GameError as exc:
                LOGGER.info("%s rejected: %s", action, exc)
                self.notify(f"Cannot {action}: {exc}")
                raise

    @contextmanager
    def _player_action(self, action: str) -> Iterator[int]:
        with self._action(action):
            if self.stage is not Stage.PLAYER_TURN:
                raise InvalidAction("it is not the player's turn")
            yield self.current_hand_index

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def set_on_player_lost(self, callback: Callable[[], None]) -> None:
        self._on_player_lost = callback

    def notify(self, text: str) -> Notification:
        note = Notification(text)
        self.notifications.append(note)
        for listener in list(self._listeners):
            try:
                listener(note)
            except Exception:  # pragma: no cover
                LOGGER.exception("Notification listener failed")
        return note

    def remove_notification(self, notification_id: int) -> None:
        kept = [note for note in self.notifications if note.id != notification_id]
        self.notifications = deque(kept, maxlen=MAX_NOTIFICATIONS)

    # ---------------- Between rounds ----------------

    def _require_between_rounds(self, action: str) -> None:
        if not self.stage.is_between_rounds:
            raise InvalidAction(f"cannot {action} while a round is in progress")

    def set_pot(self, amount: int) -> TableSnapshot:
        with self._action("set pot"):
            self._require_between_rounds("change the pot")
            pot = self.ledger.set_pot(amount)
            if pot != amount:
                LOGGER.debug("Pot request %d clamped to %d", amount, pot)
        return self.snapshot()

    def clear_pot(self) -> TableSnapshot:
        return self.set_pot(0)

    def set_initial_pot(self, amount: int) -> TableSnapshot:
        """Seed balance, highest balance and pot with ``amount``."""

        if amount < 0:
            raise ValueError("amount must be non-negative")
        with self._action("set initial pot"):
            self._require_between_rounds("set the initial pot")
            self.ledger.set_initial_pot(amount)
        return self.snapshot()

    def set_number_of_decks(self, count: int) -> TableSnapshot:
        with self._action("change decks"):
            self._require_between_rounds("change the number of decks")
            self.shoe.reshuffle(count)
            self.config.number_of_decks = count
        return self.snapshot()

    def stack_cards(self, cards: Iterable[Card]) -> None:
        """Deal ``cards`` in order before falling back to the shoe."""

        self.source = StackedSource(cards, fallback=self.shoe)

    def refill_balance(self) -> TableSnapshot:
        with self._action("refill"):
            self._require_between_rounds("refill the balance")
            self.ledger.refill_to(self.config.refill_amount)
            self.already_refilled = True
            self.show_lost = False
            self.notify(f"Balance refilled to ${self.config.refill_amount}.")
        return self.snapshot()

    def reset_game(self) -> TableSnapshot:
        with self._action("reset"):
            self.ledger.reset(self.config.refill_amount)
            self.hands.reset()
            self.shoe.reshuffle()
            self.stage = Stage.IDLE
            self.current_hand_index = 0
            self.insurance_bet = 0
            self.has_played_round = False
            self.dealer_reveals_hole_card = False
            self.show_lost = False
            self.already_refilled = False
            self.round_number = 0
            self.notifications.clear()
            self.notify("Successfully reset game.")
        return self.snapshot()

    # ---------------- Round flow ----------------

    def start_round(self) -> TableSnapshot:
        with self._action("start round"):
            self._require_between_rounds("start a new round")
            starting_balance = self.ledger.balance
            wager = self.ledger.current_pot
            if wager <= 0:
                raise InvalidAction("Place a bet before dealing")
            wager = self._place_initial_bet(wager)

            if self.has_played_round:
                self.hands.initialize_hands()
            if self.shoe.reshuffle_if_low():
                self.notify("Shuffling a fresh shoe.")
            self.stage = Stage.DEALING
            self.current_hand_index = 0
            self.insurance_bet = 0
            self.dealer_reveals_hole_card = False
            self.has_played_round = True
            self.round_number += 1
            self._round_starting_balance = starting_balance
            LOGGER.info("Round %d started with a bet of %d", self.round_number, wager)

            self.hands.add_player_hand(bet=wager)
            self._deal_initial_cards()

            hand = self.hands.player_hand(0)
            dealer = self.hands.dealer_hand
            if hand is not None and hand.is_blackjack:
                self._settle_initial_blackjack(hand, dealer)
            elif dealer.cards and dealer.cards[0].is_ace:
                self.stage = Stage.INSURANCE_PROMPT
                self.notify("Dealer shows an Ace. Insurance?")
            else:
                self.stage = Stage.PLAYER_TURN
        return self.snapshot()

    def _place_initial_bet(self, wager: int) -> int:
        try:
            self.ledger.place_bet(wager)
        except InsufficientFunds:
            wager = self.ledger.set_pot(self.ledger.balance)
            self.notify(f"Pot adjusted to ${wager} due to insufficient funds.")
            try:
                self.ledger.place_bet(wager)
            except InsufficientFunds as exc:
                self.notify(f"Error placing bet after pot adjustment: {exc}")
                raise
        return wager

    def _deal_initial_cards(self) -> None:
        self.deal_to_hand(0)
        self.hands.add_dealer_card(self._draw())
        self.deal_to_hand(0)
        self.hands.add_dealer_card(self._draw().with_face_down(True))

    def _settle_initial_blackjack(self, hand: Hand, dealer: Hand) -> None:
        self.notify("Player has Blackjack!")
        settlement = self.ledger.settle_hand_result(hand, dealer, natural=True)
        if settlement.result is HandResult.PUSH:
            self.notify("Push! Both have Blackjack.")
        self.hands.record_result(0, settlement.result)
        self.hands.complete_hand(0)
        self._reveal_dealer()
        self._payout()

    def take_insurance(self, amount: int) -> TableSnapshot:
        """Stake ``amount`` on insurance; an unaffordable amount counts as declining."""

        with self._action("take insurance"):
            if self.stage is not Stage.INSURANCE_PROMPT:
                raise InvalidAction("Insurance is only offered when the dealer shows an Ace")
            balance = self.ledger.balance
            if amount > balance:
                self.insurance_bet = 0
                self.notify("Insufficient funds for insurance. No insurance taken.")
            elif amount > 0:
                self.ledger.place_bet(amount)
                self.insurance_bet = amount
                self.notify(f"Insurance bet of ${amount} placed.")
            else:
                self.insurance_bet = 0
                self.notify("Insurance declined.")
            self.stage = Stage.PLAYER_TURN
        return self.snapshot()

    def decline_insurance(self) -> TableSnapshot:
        return self.take_insurance(0)

    def hit(self) -> TableSnapshot:
        with self._player_action("hit") as index:
            hand = self._active_hand(index)
            if not rules.can_hit(hand):
                if hand.split_aces and not hand.is_finished:
                    raise InvalidAction("Cannot hit split Aces after receiving the second card")
                raise InvalidAction("Hand is already complete")
            hand = self.deal_to_hand(index)
            if hand.best_value == BLACKJACK:
                self.hands.complete_hand(index)
            elif hand.is_busted:
                self.hands.complete_hand(index)
                self.hands.record_result(index, HandResult.BUST)
                self.notify(f"Busted with {hand.best_value}.")
            self.advance_turn()
        return self.snapshot()

    def stand(self) -> TableSnapshot:
        with self._player_action("stand") as index:
            hand = self._active_hand(index)
            if hand.is_finished:
                raise InvalidAction("Hand is already complete")
            self.hands.complete_hand(index)
            self.advance_turn()
        return self.snapshot()

    def double_down(self) -> TableSnapshot:
        with self._player_action("double down") as index:
            hand = self._active_hand(index)
            if len(hand.cards) != 2 or hand.is_finished:
                raise InvalidAction("Double down needs an unfinished two-card hand")
            balance = self.ledger.balance
            if balance < hand.bet:
                raise InsufficientFunds(hand.bet, balance)
            self.ledger.place_bet(hand.bet)
            hand.bet *= 2
            hand.doubled_down = True
            self.hands.update_player_hand(index, hand)
            self.notify(f"Double Down! Bet is now {hand.bet}.")
            self.recalc_pot_from_hands()

            hand = self.forced_single_hit(index)
            self.hands.complete_hand(index)
            if hand.is_busted:
                self.hands.record_result(index, HandResult.BUST)
                self.notify(f"Busted with {hand.best_value}.")
            self.advance_turn()
        return self.snapshot()

    def split(self) -> TableSnapshot:
        try:
            self.split_flow.split_hand(self.current_hand_index)
        except ActionInProgress:
            raise
        except GameError as exc:
            LOGGER.info("split rejected: %s", exc)
            self.notify(f"Cannot Split: {exc}")
            raise
        return self.snapshot()

    def surrender(self) -> TableSnapshot:
        with self._player_action("surrender") as index:
            hand = self._active_hand(index)
            if hand.is_finished:
                raise InvalidAction("Hand is already complete")
            refund = rules.surrender_refund(hand)
            self.ledger.adjust_balance(refund)
            self.hands.complete_hand(index)
            self.hands.record_result(index, HandResult.LOSE)
            self.notify(f"Hand surrendered. Refund ${refund}.")
            self.advance_turn()
        return self.snapshot()

    def forced_single_hit(self, index: int) -> Hand:
        """Draw one card onto hand ``index`` without any turn bookkeeping."""

        return self.deal_to_hand(index)

    # ---------------- Turn and dealer ----------------

    def advance_turn(self) -> None:
        """Move past finished hands; hand over to the dealer once none remain."""

        self.check_turn_complete()
        if self.stage is Stage.DEALER_TURN:
            self._complete_round()

    def check_turn_complete(self) -> None:
        while True:
            hand = self.hands.player_hand(self.current_hand_index)
            if hand is None or not hand.is_finished:
                break
            self.current_hand_index += 1
        if self.current_hand_index >= len(self.hands):
            self.stage = Stage.DEALER_TURN

    def _complete_round(self) -> None:
        self.stage = Stage.DEALER_TURN
        dealer = self._reveal_dealer()
        up_card = dealer.cards[0] if dealer.cards else None
        if self.ledger.settle_insurance(self.insurance_bet, up_card, dealer):
            self.notify("Insurance pays 2:1!")
        elif self.insurance_bet:
            self.notify(f"Insurance lost ${self.insurance_bet}.")

        while rules.dealer_should_draw(dealer, self.config.dealer_hits_soft_17):
            dealer = self.hands.add_dealer_card(self._draw())
        LOGGER.info("Dealer finishes with %d", dealer.best_value)

        self.stage = Stage.EVALUATION
        for index in range(len(self.hands)):
            self._evaluate_hand(index, dealer)
        self._payout()

    def _evaluate_hand(self, index: int, dealer: Hand) -> None:
        hand = self.hands.player_hand(index)
        if hand is None or hand.is_resolved:
            return
        settlement = self.ledger.settle_hand_result(hand, dealer, natural=hand.is_blackjack)
        self.hands.record_result(index, settlement.result)
        self.hands.complete_hand(index)

    def _payout(self) -> None:
        self.stage = Stage.PAYOUT
        final_balance = self.ledger.balance
        net = final_balance - self._round_starting_balance
        if net > 0:
            self.notify(f"You won ${net} this round.")
        elif net < 0:
            self.notify(f"You lost ${-net} this round.")
        else:
            self.notify("No net change in balance this round.")
        if final_balance < self.ledger.current_pot:
            self.ledger.set_pot(final_balance)
        self.check_if_lost()
        self.stage = Stage.NEW_ROUND
        LOGGER.info("Round %d finished, net %+d, balance %d", self.round_number, net, final_balance)

    def check_if_lost(self) -> bool:
        if self.ledger.balance != 0:
            return False
        self.show_lost = True
        self.notify(f"You're out of money! Refill to ${self.config.refill_amount} to keep playing.")
        if self._on_player_lost is not None:
            self._on_player_lost()
        return True

    # ---------------- Cards ----------------

    def _draw(self) -> Card:
        cards = self.source.deal(1)
        if not cards:
            LOGGER.info("Card source exhausted, reshuffling the shoe")
            self.shoe.reshuffle()
            cards = self.shoe.deal(1)
        return cards[0]

    def deal_to_hand(self, index: int) -> Hand:
        hand = self.hands.add_card(index, self._draw())
        if hand is None:
            raise InvalidAction(f"No hand at index {index}")
        return hand

    def _reveal_dealer(self) -> Hand:
        self.dealer_reveals_hole_card = True
        return self.hands.reveal_dealer_cards()

    def recalc_pot_from_hands(self) -> int:
        return self.ledger.set_pot(self.hands.total_bet())

    def _active_hand(self, index: int) -> Hand:
        hand = self.hands.player_hand(index)
        if hand is None:
            raise InvalidAction("No active hand")
        return hand

    # ---------------- Reads ----------------

    @property
    def allowed_actions(self) -> AllowedActions:
        return derive_allowed_actions(
            self.stage,
            self.hands.player_hand(self.current_hand_index),
            self.ledger.balance,
            self.split_flow.in_progress,
        )

    def snapshot(self) -> TableSnapshot:
        dealer = self.hands.dealer_hand
        if self.dealer_reveals_hole_card:
            dealer_cards = tuple(dealer.cards)
        else:
            dealer_cards = tuple(card for card in dealer.cards if not card.face_down)
        bankroll = self.ledger.snapshot()
        return TableSnapshot(
            stage=self.stage,
            current_hand_index=self.current_hand_index,
            player_hands=tuple(self.hands.player_hands()),
            dealer_cards=dealer_cards,
            dealer_reveals_hole_card=self.dealer_reveals_hole_card,
            balance=bankroll.balance,
            highest_balance=bankroll.highest_balance,
            pot=bankroll.pot,
            insurance_bet=self.insurance_bet,
            allowed_actions=self.allowed_actions,
            show_lost=self.show_lost,
            already_refilled=self.already_refilled,
            round_number=self.round_number,
            cards_in_shoe=len(self.shoe),
            notifications=tuple(self.notifications),
        )


def create_default_game() -> RoundManager:
    return RoundManager(GameConfig(), store=default_store())


def create_game_from_file(path: Path | str) -> RoundManager:
    return RoundManager(load_game_config(path))


__all__ = [
    "RoundManager",
    "GameConfig",
    "load_game_config",
    "create_default_game",
    "create_game_from_file",
    "REFILL_AMOUNT",
]
