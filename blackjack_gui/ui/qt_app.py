"""PyQt6 application bootstrap."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from PyQt6 import QtWidgets

from ..core.persist import DATA_PATH
from ..core.round_manager import RoundManager, create_default_game, create_game_from_file
from .table import TableWindow


def _load_manager_via_dialog(parent: Optional[QtWidgets.QWidget]) -> Optional[tuple[RoundManager, str]]:
    dialog = QtWidgets.QFileDialog(parent)
    dialog.setWindowTitle("Select Blackjack Table Configuration")
    dialog.setDirectory(str(DATA_PATH))
    dialog.setNameFilter("Config Files (*.json)")
    dialog.setFileMode(QtWidgets.QFileDialog.FileMode.ExistingFile)
    while True:
        if dialog.exec() != QtWidgets.QDialog.DialogCode.Accepted:
            return None
        filenames = dialog.selectedFiles()
        if not filenames:
            return None
        path = Path(filenames[0])
        try:
            manager = create_game_from_file(path)
        except (OSError, ValueError) as exc:  # pragma: no cover - GUI feedback
            QtWidgets.QMessageBox.critical(parent, "Failed to Load", str(exc))
            continue
        return manager, str(path)


def launch_qt(argv: Sequence[str], manager: Optional[RoundManager] = None) -> int:
    app = QtWidgets.QApplication(list(argv))
    source: Optional[str] = None

    if manager is None and len(argv) > 1:
        candidate = Path(argv[1]).expanduser()
        if candidate.exists():
            try:
                manager = create_game_from_file(candidate)
                source = str(candidate)
            except (OSError, ValueError) as exc:  # pragma: no cover - GUI feedback
                QtWidgets.QMessageBox.critical(None, "Configuration Error", str(exc))
        else:
            QtWidgets.QMessageBox.warning(None, "Missing Configuration", f"Unable to open {candidate}.")

    if manager is None:
        if DATA_PATH.exists() and any(DATA_PATH.glob("*.json")):
            result = _load_manager_via_dialog(None)
        else:
            result = None
        if result is None:
            manager = create_default_game()
            source = "default settings"
        else:
            manager, source = result

    window = TableWindow(manager, source)
    window.show()
    return app.exec()


__all__ = ["launch_qt"]
