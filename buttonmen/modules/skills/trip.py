"""Trip skill: the die may make Trip attacks."""

from ...core.hooks import AttackListContext, Hook, HookResult
from ..base import SkillDefinition


def trip_attack_list(context: AttackListContext) -> HookResult:
    if 'Trip' not in context.attack_types:
        context.attack_types.append('Trip')
    return HookResult.CONTINUE


def trip_skill() -> SkillDefinition:
    return SkillDefinition(
        name='Trip',
        abbreviation='t',
        description='Can make Trip attacks: both dice reroll and the higher one wins',
        module='skills',
        handlers={Hook.ATTACK_LIST: trip_attack_list},
    )
