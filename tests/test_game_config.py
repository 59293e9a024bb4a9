import json

import pytest

from blackjack_gui.core.round_manager import GameConfig, RoundManager, create_game_from_file, load_game_config

from conftest import deal_round


def test_load_game_config(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(
        json.dumps(
            {
                "table_name": "High Roller",
                "starting_balance": 5000,
                "refill_amount": 2000,
                "decks": 6,
                "low_card_threshold": 30,
                "dealer_hits_soft_17": True,
                "save_file": "bankroll.json",
            }
        )
    )

    config = load_game_config(config_path)
    assert config.name == "High Roller"
    assert config.starting_balance == 5000
    assert config.refill_amount == 2000
    assert config.number_of_decks == 6
    assert config.low_card_threshold == 30
    assert config.dealer_hits_soft_17
    assert config.save_file == tmp_path / "bankroll.json"

    manager = RoundManager(config)
    assert len(manager.shoe) == 312
    assert manager.ledger.balance == 5000


def test_missing_keys_keep_defaults(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text("{}")
    assert load_game_config(config_path) == GameConfig()


def test_invalid_deck_count_is_rejected(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(json.dumps({"decks": 0}))
    with pytest.raises(ValueError):
        load_game_config(config_path)


def test_bankroll_survives_a_restart(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(json.dumps({"save_file": "bankroll.json"}))

    manager = create_game_from_file(config_path)
    deal_round(manager, ["10S", "6C", "9S", "10C", "8D"], bet=100)
    manager.stand()
    assert manager.ledger.balance == 1100

    restarted = create_game_from_file(config_path)
    assert restarted.ledger.balance == 1100
    assert restarted.ledger.highest_balance == 1100
    assert restarted.ledger.current_pot == 100


def test_dealer_hits_soft_17_when_configured(store):
    manager = RoundManager(GameConfig(dealer_hits_soft_17=True), store=store)
    deal_round(manager, ["10S", "6C", "8S", "AC", "2D"], bet=100)
    snapshot = manager.stand()
    assert snapshot.dealer_value == 19
    assert snapshot.balance == 900
