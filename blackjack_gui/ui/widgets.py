"""Reusable Qt widgets for the blackjack UI."""
from __future__ import annotations

from typing import Optional

from PyQt6 import QtCore, QtWidgets

from ..core.cards import Card, Suit

RED_SUITS = (Suit.HEARTS, Suit.DIAMONDS)


class CardLabel(QtWidgets.QLabel):
    """Label that renders one playing card, or its back when face down."""

    def __init__(self, card: Optional[Card] = None, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.setMinimumWidth(48)
        self.set_card(card)

    def set_card(self, card: Optional[Card]) -> None:
        colour = "#b00" if card is not None and card.suit in RED_SUITS else "#000"
        if card is None or card.face_down:
            self.setText("??")
            colour = "#fff"
            background = "#245"
        else:
            self.setText(str(card))
            background = "#fff"
        self.setStyleSheet(
            f"border: 1px solid #666; padding: 6px; background: {background}; color: {colour}; font-weight: bold;"
        )


class CardRow(QtWidgets.QWidget):
    """Horizontal strip of :class:`CardLabel` widgets with a caption."""

    def __init__(self, caption: str, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        self.caption = QtWidgets.QLabel(caption)
        self.caption.setMinimumWidth(220)
        layout.addWidget(self.caption)
        self._cards_layout = QtWidgets.QHBoxLayout()
        layout.addLayout(self._cards_layout)
        layout.addStretch()

    def set_cards(self, cards, caption: Optional[str] = None) -> None:
        while self._cards_layout.count():
            item = self._cards_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        for card in cards:
            self._cards_layout.addWidget(CardLabel(card))
        if caption is not None:
            self.caption.setText(caption)


__all__ = ["CardLabel", "CardRow"]
