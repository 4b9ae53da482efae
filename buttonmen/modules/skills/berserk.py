"""
Berserk skill.

A Berserk die may make Berserk attacks (one die against dice adding up to
its value) but never Skill attacks. After a Berserk attack it loses the
skill and is halved, rounding up, and rerolled.
"""

from typing import Optional

from ...core.hooks import AttackListContext, CapabilityContext, CaptureContext, Hook, HookResult
from ..base import SkillDefinition

INCOMPATIBLE_ATTACK_TYPES = ('Skill',)


def berserk_attack_list(context: AttackListContext) -> HookResult:
    for attack_type in INCOMPATIBLE_ATTACK_TYPES:
        if attack_type in context.attack_types:
            context.attack_types.remove(attack_type)
    if 'Berserk' not in context.attack_types:
        context.attack_types.append('Berserk')
    return HookResult.CONTINUE


def berserk_valid_attacker(context: CapabilityContext) -> Optional[HookResult]:
    if context.attack_type in INCOMPATIBLE_ATTACK_TYPES:
        context.allowed = False
        return HookResult.STOP
    return None


def berserk_capture(context: CaptureContext) -> Optional[HookResult]:
    if context.attack_type != 'Berserk' or len(context.attackers) != 1:
        return None

    attacker = context.attackers[0]
    attacker.remove_skill('Berserk')

    # Swing and option status do not survive the split
    new_attacker, _ = attacker.split()
    new_attacker.roll(context.roller)
    context.attackers[0] = new_attacker
    return HookResult.CONTINUE_AFTER_MUTATION


def berserk_skill() -> SkillDefinition:
    return SkillDefinition(
        name='Berserk',
        abbreviation='B',
        description='Can make Berserk attacks but not Skill attacks; halves after a Berserk attack',
        module='skills',
        handlers={
            Hook.ATTACK_LIST: berserk_attack_list,
            Hook.VALID_ATTACKER: berserk_valid_attacker,
            Hook.CAPTURE: berserk_capture,
        },
    )
