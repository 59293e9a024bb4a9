import json
import logging

from blackjack_gui.app import manager_from_argv, split_log_level


def test_verbose_flag_switches_to_debug():
    assert split_log_level(["blackjack-gui"]) == (["blackjack-gui"], logging.INFO)
    argv, level = split_log_level(["blackjack-gui", "--verbose", "table.json"])
    assert argv == ["blackjack-gui", "table.json"]
    assert level == logging.DEBUG


def test_manager_from_config_argument(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(
        json.dumps({"table_name": "Side Room", "starting_balance": 400, "save_file": "bankroll.json"})
    )
    manager = manager_from_argv(["blackjack-gui", str(config_path)])
    assert manager is not None
    assert manager.config.name == "Side Room"
    assert manager.ledger.balance == 400


def test_unusable_config_argument_is_ignored(tmp_path):
    assert manager_from_argv(["blackjack-gui"]) is None
    assert manager_from_argv(["blackjack-gui", str(tmp_path / "missing.json")]) is None
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"decks": 0}))
    assert manager_from_argv(["blackjack-gui", str(broken)]) is None
