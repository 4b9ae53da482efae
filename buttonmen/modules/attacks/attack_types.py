"""
Standard Button Men attack types.

Power, Skill, Pass and Surrender are available to every die. Speed, Berserk
and Trip are only candidates when a die with the matching skill adds them
through its attack_list handler.
"""

from typing import List

from ...core.die import Die
from ...core.game import Game
from ...core.hooks import Hook
from ..base import AttackTypeDefinition, Availability
from .effects import capture_effect, no_effect, trip_effect
from .search import search_manyvone, search_nodice, search_onevmany, search_onevone

MODULE = 'attacks'


# ========== Shared checks ==========

def _contains(pool: List[Die], die: Die) -> bool:
    return any(d is die for d in pool)


def participants_ok(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
    """
    Attackers come from the active player's dice in play, defenders from the
    opponent's, every die shows a value and none appears twice.
    """
    dice = attackers + defenders
    if len({id(d) for d in dice}) != len(dice):
        return False
    if any(d.value is None for d in dice):
        return False

    attacker_pool = game.attacker_dice()
    defender_pool = game.defender_dice()
    return (all(_contains(attacker_pool, d) for d in attackers) and
            all(_contains(defender_pool, d) for d in defenders))


def dice_capable(game: Game, attack_type: str, attackers: List[Die], defenders: List[Die]) -> bool:
    """Give each die's skills the chance to veto its role in the attack."""
    if game.skills is None:
        return True
    for attacker in attackers:
        if not game.skills.check_capability(Hook.VALID_ATTACKER, attacker, attack_type,
                                            attackers, defenders):
            return False
    for defender in defenders:
        if not game.skills.check_capability(Hook.VALID_TARGET, defender, attack_type,
                                            attackers, defenders):
            return False
    return True


def _sum_values(dice: List[Die]) -> int:
    return sum(d.value for d in dice)


# ========== Validators ==========

def validate_power(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
    if len(attackers) != 1 or len(defenders) != 1:
        return False
    if not participants_ok(game, attackers, defenders):
        return False
    return (attackers[0].value >= defenders[0].value and
            dice_capable(game, 'Power', attackers, defenders))


def validate_skill(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
    if len(attackers) < 1 or len(defenders) != 1:
        return False
    if not participants_ok(game, attackers, defenders):
        return False
    return (_sum_values(attackers) == defenders[0].value and
            dice_capable(game, 'Skill', attackers, defenders))


def _one_against_sum(attack_type: str):
    """Validator for one skilled attacker against defenders adding up to its value."""
    def validate(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
        if len(attackers) != 1 or len(defenders) < 1:
            return False
        if not attackers[0].has_skill(attack_type):
            return False
        if not participants_ok(game, attackers, defenders):
            return False
        return (attackers[0].value == _sum_values(defenders) and
                dice_capable(game, attack_type, attackers, defenders))

    validate.__name__ = f"validate_{attack_type.lower()}"
    return validate


validate_speed = _one_against_sum('Speed')
validate_berserk = _one_against_sum('Berserk')


def validate_trip(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
    if len(attackers) != 1 or len(defenders) != 1:
        return False
    if not attackers[0].has_skill('Trip'):
        return False
    return (participants_ok(game, attackers, defenders) and
            dice_capable(game, 'Trip', attackers, defenders))


def validate_no_dice(game: Game, attackers: List[Die], defenders: List[Die]) -> bool:
    return not attackers and not defenders


# ========== Definitions ==========

def power_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Power',
        description='One die captures one opposing die showing the same or a lower value',
        module=MODULE,
        validate=validate_power,
        search=lambda game: search_onevone(game, 'Power', validate_power),
        apply=capture_effect,
    )


def skill_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Skill',
        description='Several dice whose values add up exactly to one opposing die capture it',
        module=MODULE,
        validate=validate_skill,
        search=lambda game: search_manyvone(game, 'Skill', validate_skill),
        apply=capture_effect,
    )


def speed_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Speed',
        description='A Speed die captures opposing dice whose values add up exactly to its value',
        module=MODULE,
        validate=validate_speed,
        search=lambda game: search_onevmany(game, 'Speed', validate_speed, required_skill='Speed'),
        apply=capture_effect,
        base=False,
        required_skill='Speed',
    )


def berserk_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Berserk',
        description='A Berserk die captures opposing dice adding up to its value, then halves',
        module=MODULE,
        validate=validate_berserk,
        search=lambda game: search_onevmany(game, 'Berserk', validate_berserk,
                                            required_skill='Berserk'),
        apply=capture_effect,
        incompatible_with=('Skill',),
        base=False,
        required_skill='Berserk',
    )


def trip_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Trip',
        description='Both dice reroll; the target is captured if the Trip die shows at least as much',
        module=MODULE,
        validate=validate_trip,
        search=lambda game: search_onevone(game, 'Trip', validate_trip),
        apply=trip_effect,
        base=False,
        required_skill='Trip',
    )


def pass_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Pass',
        description='Do nothing this turn; only allowed when no attack is possible',
        module=MODULE,
        validate=validate_no_dice,
        search=lambda game: search_nodice(game, 'Pass', validate_no_dice),
        apply=no_effect,
        availability=Availability.WHEN_NO_ATTACKS,
    )


def surrender_attack() -> AttackTypeDefinition:
    return AttackTypeDefinition(
        name='Surrender',
        description='Concede the round',
        module=MODULE,
        validate=validate_no_dice,
        search=lambda game: search_nodice(game, 'Surrender', validate_no_dice),
        apply=no_effect,
        availability=Availability.ALWAYS,
    )


def core_attack_types() -> List[AttackTypeDefinition]:
    """Return the attack types provided by the attacks module."""
    return [
        power_attack(),
        skill_attack(),
        speed_attack(),
        berserk_attack(),
        trip_attack(),
        pass_attack(),
        surrender_attack(),
    ]
