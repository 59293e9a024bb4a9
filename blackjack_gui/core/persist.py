"""Bankroll persistence helpers."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Protocol

LOGGER = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class PersistedBankroll:
    balance: int
    pot: int = 0
    highest_balance: int = 0


class BalanceStore(Protocol):
    def load(self) -> Optional[PersistedBankroll]:
        ...

    def save(self, state: PersistedBankroll) -> None:
        ...


class MemoryBalanceStore:
    """Keeps the last saved bankroll in memory."""

    def __init__(self, initial: Optional[PersistedBankroll] = None) -> None:
        self.state = initial
        self.saves = 0

    def load(self) -> Optional[PersistedBankroll]:
        return self.state

    def save(self, state: PersistedBankroll) -> None:
        self.state = state
        self.saves += 1


class JsonBalanceStore:
    """Stores balance, pot and highest balance as a small JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Optional[PersistedBankroll]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            balance = int(data["balance"])
            pot = int(data.get("pot", 0))
            highest = int(data.get("highest_balance", balance))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            LOGGER.warning("Ignoring unreadable bankroll file %s: %s", self.path, exc)
            return None
        return PersistedBankroll(balance=balance, pot=pot, highest_balance=highest)

    def save(self, state: PersistedBankroll) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(asdict(state), indent=2), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Failed to save bankroll to %s: %s", self.path, exc)


def default_store(filename: str = "bankroll.json") -> JsonBalanceStore:
    return JsonBalanceStore(DATA_PATH / filename)


__all__ = [
    "PersistedBankroll",
    "BalanceStore",
    "MemoryBalanceStore",
    "JsonBalanceStore",
    "default_store",
    "DATA_PATH",
]
