"""Speed skill: the die may capture several dice adding up to its value."""

from ...core.hooks import AttackListContext, Hook, HookResult
from ..base import SkillDefinition


def speed_attack_list(context: AttackListContext) -> HookResult:
    if 'Speed' not in context.attack_types:
        context.attack_types.append('Speed')
    return HookResult.CONTINUE


def speed_skill() -> SkillDefinition:
    return SkillDefinition(
        name='Speed',
        abbreviation='z',
        description='Can make Speed attacks against dice adding up to its value',
        module='skills',
        handlers={Hook.ATTACK_LIST: speed_attack_list},
    )
