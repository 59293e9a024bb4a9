"""Qt widgets representing the blackjack table."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PyQt6 import QtWidgets

from ..core.errors import GameError
from ..core.game import Notification, Stage, TableSnapshot
from ..core.round_manager import RoundManager
from .widgets import CardRow

LOGGER = logging.getLogger(__name__)


class TableWindow(QtWidgets.QMainWindow):
    def __init__(self, manager: RoundManager, source: Optional[str] = None) -> None:
        super().__init__()
        self.manager = manager
        self.setWindowTitle(manager.config.name)
        self.resize(900, 600)
        self.view = TableView(manager)
        self.setCentralWidget(self.view)
        self.status = self.statusBar()
        self.status.showMessage(f"Loaded {source}" if source else f"Welcome to {manager.config.name}")
        manager.subscribe(self._on_notification)
        manager.set_on_player_lost(self._on_player_lost)

    def _on_notification(self, note: Notification) -> None:
        self.status.showMessage(note.text, 5000)

    def _on_player_lost(self) -> None:
        answer = QtWidgets.QMessageBox.question(
            self,
            "Out of Money",
            f"You're out of money. Refill to ${self.manager.config.refill_amount}?",
        )
        if answer == QtWidgets.QMessageBox.StandardButton.Yes:
            self.view.refill_after_round = True


class TableView(QtWidgets.QWidget):
    def __init__(self, manager: RoundManager) -> None:
        super().__init__()
        self.manager = manager
        self.refill_after_round = False
        self._build_ui()
        self.update_view(manager.snapshot())

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        header = QtWidgets.QHBoxLayout()
        self.balance_label = QtWidgets.QLabel("Balance: $0")
        self.highest_label = QtWidgets.QLabel("Highest: $0")
        self.round_label = QtWidgets.QLabel("Round #0")
        header.addWidget(self.balance_label)
        header.addWidget(self.highest_label)
        header.addStretch()
        header.addWidget(self.round_label)
        layout.addLayout(header)

        self.dealer_row = CardRow("Dealer")
        layout.addWidget(self.dealer_row)

        self.hands_box = QtWidgets.QVBoxLayout()
        layout.addLayout(self.hands_box, stretch=1)
        self.hand_rows: List[CardRow] = []

        self.message_label = QtWidgets.QLabel()
        layout.addWidget(self.message_label)

        betting = QtWidgets.QHBoxLayout()
        betting.addWidget(QtWidgets.QLabel("Pot:"))
        self.pot_spin = QtWidgets.QSpinBox()
        self.pot_spin.setSingleStep(10)
        betting.addWidget(self.pot_spin)
        self.set_pot_btn = self._button("Set Pot", lambda: self.manager.set_pot(self.pot_spin.value()), betting)
        self.clear_pot_btn = self._button("Clear", self.manager.clear_pot, betting)
        self.deal_btn = self._button("Deal", self.manager.start_round, betting)
        betting.addStretch()
        layout.addLayout(betting)

        insurance = QtWidgets.QHBoxLayout()
        insurance.addWidget(QtWidgets.QLabel("Insurance:"))
        self.insurance_spin = QtWidgets.QSpinBox()
        insurance.addWidget(self.insurance_spin)
        self.insure_btn = self._button(
            "Take", lambda: self.manager.take_insurance(self.insurance_spin.value()), insurance
        )
        self.decline_btn = self._button("Decline", self.manager.decline_insurance, insurance)
        insurance.addStretch()
        layout.addLayout(insurance)

        controls = QtWidgets.QHBoxLayout()
        self.hit_btn = self._button("Hit", self.manager.hit, controls)
        self.stand_btn = self._button("Stand", self.manager.stand, controls)
        self.double_btn = self._button("Double", self.manager.double_down, controls)
        self.split_btn = self._button("Split", self.manager.split, controls)
        self.surrender_btn = self._button("Surrender", self.manager.surrender, controls)
        controls.addStretch()
        self.refill_btn = self._button("Refill", self.manager.refill_balance, controls)
        self.reset_btn = self._button("Reset", self.manager.reset_game, controls)
        layout.addLayout(controls)

    def _button(
        self, text: str, action: Callable[[], TableSnapshot], layout: QtWidgets.QHBoxLayout
    ) -> QtWidgets.QPushButton:
        button = QtWidgets.QPushButton(text)
        button.clicked.connect(lambda: self._run(action))
        layout.addWidget(button)
        return button

    def _run(self, action: Callable[[], TableSnapshot]) -> None:
        try:
            snapshot = action()
        except GameError as exc:
            self.message_label.setText(str(exc))
            snapshot = self.manager.snapshot()
        if self.refill_after_round and snapshot.stage.is_between_rounds:
            self.refill_after_round = False
            snapshot = self.manager.refill_balance()
        self.update_view(snapshot)

    def update_view(self, snapshot: TableSnapshot) -> None:
        self.balance_label.setText(f"Balance: ${snapshot.balance}")
        self.highest_label.setText(f"Highest: ${snapshot.highest_balance}")
        self.round_label.setText(f"Round #{snapshot.round_number}")

        dealer_caption = "Dealer"
        if snapshot.dealer_value is not None:
            dealer_caption += f" ({snapshot.dealer_value})"
        self.dealer_row.set_cards(snapshot.dealer_cards, dealer_caption)
        self._update_hands(snapshot)

        between_rounds = snapshot.stage.is_between_rounds
        self.pot_spin.setMaximum(snapshot.balance)
        self.pot_spin.setValue(snapshot.pot)
        for button in (self.set_pot_btn, self.clear_pot_btn, self.deal_btn, self.refill_btn):
            button.setEnabled(between_rounds)

        insuring = snapshot.stage is Stage.INSURANCE_PROMPT
        self.insurance_spin.setMaximum(snapshot.insurance_cap)
        for widget in (self.insurance_spin, self.insure_btn, self.decline_btn):
            widget.setEnabled(insuring)

        allowed = snapshot.allowed_actions
        self.hit_btn.setEnabled(allowed.can_hit)
        self.stand_btn.setEnabled(allowed.can_stand)
        self.double_btn.setEnabled(allowed.can_double_down)
        self.split_btn.setEnabled(allowed.can_split)
        self.surrender_btn.setEnabled(allowed.can_surrender)

        if snapshot.notifications:
            self.message_label.setText(snapshot.notifications[-1].text)

    def _update_hands(self, snapshot: TableSnapshot) -> None:
        labels = snapshot.hand_labels()
        while len(self.hand_rows) < len(labels):
            row = CardRow("")
            self.hands_box.addWidget(row)
            self.hand_rows.append(row)
        for idx, row in enumerate(self.hand_rows):
            if idx >= len(labels):
                row.hide()
                continue
            row.show()
            caption = labels[idx]
            if idx == snapshot.current_hand_index and snapshot.stage is Stage.PLAYER_TURN:
                caption = "> " + caption
            row.set_cards(snapshot.player_hands[idx].cards, caption)


__all__ = ["TableWindow", "TableView"]
