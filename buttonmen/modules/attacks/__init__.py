"""
Attacks Module - the standard Button Men attack types.

Provides:
- Power, Skill, Pass and Surrender, available to every die
- Speed, Berserk and Trip, made available by die skills
- Subset-sum attack search (search.py)

Usage:
    registries = build_registries([AttacksModule(), SkillsModule()])
    speed = registries.attack_types.get('Speed')
    speed.find_attacks(game)  # [AttackProposal('Speed', (z(20):7,), (2, 5)), ...]
"""

from typing import List

from ..base import AttackTypeDefinition, Module
from .attack_types import core_attack_types


class AttacksModule(Module):
    """Standard attack types every game needs."""

    @property
    def name(self) -> str:
        return "attacks"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def display_name(self) -> str:
        return "Attack Types"

    @property
    def description(self) -> str:
        return "Power, Skill, Speed, Berserk, Trip, Pass and Surrender attacks"

    @property
    def is_core(self) -> bool:
        return True

    def register_attack_types(self) -> List[AttackTypeDefinition]:
        return core_attack_types()
