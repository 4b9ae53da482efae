"""
Skills Module - die skills that change the rules of an attack.

Provides:
- Speed: adds the Speed attack type
- Trip: adds the Trip attack type
- Berserk: replaces Skill with Berserk and halves the die after a Berserk attack

Skills are dispatched in the order they are registered here.
"""

from typing import List

from ..base import Module, SkillDefinition
from .berserk import berserk_skill
from .speed import speed_skill
from .trip import trip_skill


class SkillsModule(Module):
    """Die skills with hook handlers."""

    @property
    def name(self) -> str:
        return "skills"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def display_name(self) -> str:
        return "Die Skills"

    @property
    def description(self) -> str:
        return "Speed, Trip and Berserk die skills"

    def dependencies(self) -> List[str]:
        return ['attacks']

    def register_skills(self) -> List[SkillDefinition]:
        return [
            speed_skill(),
            trip_skill(),
            berserk_skill(),
        ]
