"""Application bootstrap for the blackjack GUI."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .core.round_manager import RoundManager, create_default_game, create_game_from_file

LOGGER = logging.getLogger(__name__)

VERBOSE_FLAGS = ("-v", "--verbose")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def split_log_level(argv: List[str]) -> Tuple[List[str], int]:
    """Strip the verbosity flags from ``argv`` and return the matching log level."""

    remaining = [arg for arg in argv if arg not in VERBOSE_FLAGS]
    level = logging.DEBUG if len(remaining) != len(argv) else logging.INFO
    return remaining, level


def manager_from_argv(argv: List[str]) -> Optional[RoundManager]:
    """Build a manager from the table config named on the command line, if any."""

    if len(argv) < 2:
        return None
    path = Path(argv[1]).expanduser()
    if not path.exists():
        LOGGER.warning("Table configuration %s not found", path)
        return None
    try:
        return create_game_from_file(path)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Ignoring table configuration %s: %s", path, exc)
        return None


def run(argv: Optional[list[str]] = None) -> int:
    """Run the blackjack GUI application.

    ``blackjack-gui [-v] [table.json]``; without a usable config the Qt
    window offers a file dialog and the Tk fallback plays with defaults.
    """

    argv, level = split_log_level(list(sys.argv if argv is None else argv))
    logging.basicConfig(level=level, format=LOG_FORMAT)
    manager = manager_from_argv(argv)
    try:
        from .ui.qt_app import launch_qt
    except ImportError as exc:  # pragma: no cover - Qt not available during tests
        LOGGER.warning("Falling back to Tkinter UI due to PyQt6 load failure")
        LOGGER.debug("PyQt6 import error: %s", exc)
        from .ui.tk_app import launch_tk

        try:
            return launch_tk(manager or create_default_game())
        except Exception:  # pragma: no cover - headless CI
            LOGGER.warning("Tkinter fallback unavailable", exc_info=True)
            print("Unable to launch a graphical interface in this environment.")
            return 1

    return launch_qt(argv, manager)


__all__ = ["run", "split_log_level", "manager_from_argv"]
