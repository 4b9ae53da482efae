"""
Attack effects.

An effect function changes the participating dice once an attack has been
validated: rerolls, capture flags and attack-specific bookkeeping. Moving
captured dice between rosters is left to the resolver.
"""

from typing import List

from ...core.die import Die
from ...core.game import Game


def _reroll(game: Game, die: Die) -> None:
    if die.does_reroll:
        die.roll(game.roller)


def capture_effect(game: Game, attackers: List[Die], defenders: List[Die]) -> None:
    """Attackers reroll; every defender is captured."""
    for attacker in attackers:
        _reroll(game, attacker)
    for defender in defenders:
        defender.captured = True


def trip_effect(game: Game, attackers: List[Die], defenders: List[Die]) -> None:
    """
    Both dice reroll; the defender is captured only if the attacker now shows
    at least as much.
    """
    attacker = attackers[0]
    defender = defenders[0]

    _reroll(game, attacker)
    attacker.value_after_trip_attack = attacker.value
    _reroll(game, defender)

    if attacker.value >= defender.value:
        defender.captured = True


def no_effect(game: Game, attackers: List[Die], defenders: List[Die]) -> None:
    pass
