"""Minimal Tkinter fallback UI."""
from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable

from ..core.errors import GameError
from ..core.game import Stage, TableSnapshot
from ..core.round_manager import RoundManager


def describe_table(snapshot: TableSnapshot) -> str:
    dealer = " ".join(str(card) for card in snapshot.dealer_cards) or "-"
    if snapshot.dealer_value is not None:
        dealer += f" ({snapshot.dealer_value})"
    lines = [f"Dealer: {dealer}"]
    for idx, (hand, label) in enumerate(zip(snapshot.player_hands, snapshot.hand_labels())):
        marker = ">" if idx == snapshot.current_hand_index and snapshot.stage is Stage.PLAYER_TURN else " "
        lines.append(f"{marker} {label}: {' '.join(str(card) for card in hand.cards)}")
    lines.append(f"Balance: ${snapshot.balance}  Pot: ${snapshot.pot}")
    if snapshot.notifications:
        lines.append(snapshot.notifications[-1].text)
    return "\n".join(lines)


def launch_tk(manager: RoundManager) -> int:
    root = tk.Tk()
    root.title(f"{manager.config.name} (Fallback)")
    status = tk.StringVar(value=describe_table(manager.snapshot()))
    bet = tk.IntVar(value=10)

    def run(action: Callable[[], TableSnapshot]) -> None:
        try:
            snapshot = action()
        except GameError as exc:
            snapshot = manager.snapshot()
            status.set(f"{describe_table(snapshot)}\n{exc}")
            return
        status.set(describe_table(snapshot))

    def deal() -> TableSnapshot:
        manager.set_pot(bet.get())
        snapshot = manager.start_round()
        if snapshot.stage is Stage.INSURANCE_PROMPT:
            snapshot = manager.decline_insurance()
        return snapshot

    controls = ttk.Frame(root)
    controls.pack(padx=20, pady=10)
    ttk.Spinbox(controls, from_=1, to=100000, increment=10, textvariable=bet, width=8).pack(side=tk.LEFT)
    for text, action in (
        ("Deal", deal),
        ("Hit", manager.hit),
        ("Stand", manager.stand),
        ("Double", manager.double_down),
        ("Split", manager.split),
        ("Surrender", manager.surrender),
        ("Refill", manager.refill_balance),
    ):
        ttk.Button(controls, text=text, command=lambda action=action: run(action)).pack(side=tk.LEFT)
    ttk.Label(root, textvariable=status, justify=tk.LEFT).pack(padx=20, pady=10)
    root.mainloop()
    return 0


__all__ = ["launch_tk", "describe_table"]
