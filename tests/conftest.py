import random

import pytest

from blackjack_gui.core.cards import parse_cards
from blackjack_gui.core.hand import Hand
from blackjack_gui.core.persist import MemoryBalanceStore
from blackjack_gui.core.round_manager import GameConfig, RoundManager


def make_hand(*tokens, bet=0, **kwargs):
    return Hand(cards=parse_cards(tokens), bet=bet, **kwargs)


def deal_round(manager, tokens, bet=100):
    """Stack ``tokens`` (player, dealer up, player, dealer hole, then draws) and deal."""

    manager.stack_cards(parse_cards(tokens))
    manager.set_pot(bet)
    return manager.start_round()


@pytest.fixture
def store():
    return MemoryBalanceStore()


@pytest.fixture
def manager(store):
    return RoundManager(GameConfig(), store=store, rng=random.Random(7))
