"""
Shared fixtures: frozen registries, games with seeded rollers and engines.
"""

import pytest

from buttonmen.core.config import reset_config
from buttonmen.core.engine import RulesEngine
from buttonmen.core.game import Game, GameState, Player
from buttonmen.core.registry import build_registries, reset_registries
from buttonmen.core.roller import DiceRoller
from buttonmen.modules.action_log import ActionLogModule
from buttonmen.modules.attacks import AttacksModule
from buttonmen.modules.skills import SkillsModule


def make_game(alice_dice, bob_dice, state=GameState.START_TURN, seed=42, active_player_index=0):
    """Two-player game; Alice (p1) attacks by default."""
    return Game(
        players=[
            Player('p1', 'Alice', list(alice_dice)),
            Player('p2', 'Bob', list(bob_dice)),
        ],
        active_player_index=active_player_index,
        state=state,
        roller=DiceRoller(seed),
    )


@pytest.fixture(autouse=True)
def fresh_singletons():
    """Config and registries are re-read for every test."""
    reset_config()
    reset_registries()
    yield
    reset_config()
    reset_registries()


@pytest.fixture
def registries():
    """Registries with every standard module."""
    return build_registries([AttacksModule(), SkillsModule(), ActionLogModule()])


@pytest.fixture
def game_factory():
    return make_game


@pytest.fixture
def engine_factory(registries):
    """Build an engine around a fresh game."""
    def factory(alice_dice, bob_dice, **kwargs):
        return RulesEngine(make_game(alice_dice, bob_dice, **kwargs), registries)
    return factory
