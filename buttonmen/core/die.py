"""
Die: the mutable unit of game state.

A die has a current value, a number of sides, an ordered set of skills and a
few life-cycle flags. Its recipe (e.g. 'zB(20)', '(X=7)', '(4/8=8)') is
derived from the skills and the size part and is used both for display and
for detecting identity changes across an attack.

Once a die is out of play its value, sides, skills and recipe are frozen:
every mutation primitive raises DieOutOfPlayError.
"""

from dataclasses import dataclass, field, fields, replace
from typing import List, Optional, Tuple

from .errors import DieOutOfPlayError
from .models import DieView, generate_id
from .roller import DiceRoller


# Recipe letters for the skills this package implements
SKILL_CODES = {
    'Berserk': 'B',
    'Speed': 'z',
    'Trip': 't',
}

# Bookkeeping that only describes the most recent attack
TRANSIENT_FIELDS = (
    'recipe_before_splitting',
    'recipe_before_growing',
    'recipe_before_shrinking',
    'value_after_trip_attack',
)


def skill_code(skill: str) -> str:
    """Recipe letter for a skill (unknown skills use their first letter)."""
    return SKILL_CODES.get(skill, skill[:1])


@dataclass(frozen=True)
class DieState:
    """Complete copy of a die's fields, used for rollback."""
    die_id: str
    sides: int
    value: Optional[int]
    skills: Tuple[str, ...]
    swing_type: Optional[str]
    option_sides: Optional[Tuple[int, int]]
    does_reroll: bool
    out_of_play: bool
    captured: bool
    captured_by: Optional[str]
    recipe_before_splitting: Optional[str]
    recipe_before_growing: Optional[str]
    recipe_before_shrinking: Optional[str]
    value_after_trip_attack: Optional[int]


@dataclass(eq=False)
class Die:
    """
    A single Button Men die.

    Dice compare by identity: two dice showing the same value are still
    different pieces on the table.

    Attributes:
        sides: Current number of faces
        value: Current face value (None until first rolled)
        skills: Skill names, in the order they were attached
        swing_type: Swing letter (e.g. 'X') for swing dice
        option_sides: The two possible sizes of an option die
        does_reroll: Whether the die rerolls after attacking
        out_of_play: Terminal flag; the die no longer takes part in attacks
        captured: Whether the die has been captured
        captured_by: Player id of the capturing player
        die_id: Stable identifier used by serialized proposals
    """
    sides: int
    value: Optional[int] = None
    skills: List[str] = field(default_factory=list)
    swing_type: Optional[str] = None
    option_sides: Optional[Tuple[int, int]] = None
    does_reroll: bool = True
    out_of_play: bool = False
    captured: bool = False
    captured_by: Optional[str] = None
    recipe_before_splitting: Optional[str] = None
    recipe_before_growing: Optional[str] = None
    recipe_before_shrinking: Optional[str] = None
    value_after_trip_attack: Optional[int] = None
    die_id: str = field(default_factory=lambda: generate_id('die'))

    def __post_init__(self) -> None:
        if self.sides < 1:
            raise ValueError(f"A die needs at least 1 side, got {self.sides}")
        if self.value is not None and not 1 <= self.value <= self.sides:
            raise ValueError(f"Value {self.value} is outside 1..{self.sides}")
        if self.option_sides is not None:
            self.option_sides = tuple(self.option_sides)
            if self.sides not in self.option_sides:
                raise ValueError(
                    f"Option die sized {self.sides} must use one of {self.option_sides}"
                )
        # Keep skill order but drop duplicates
        self.skills = list(dict.fromkeys(self.skills))

    # ========== Identity ==========

    @property
    def recipe(self) -> str:
        """Canonical text identity, e.g. 'zB(20)'."""
        prefix = ''.join(skill_code(skill) for skill in self.skills)
        if self.swing_type:
            size = f"{self.swing_type}={self.sides}"
        elif self.option_sides:
            size = f"{self.option_sides[0]}/{self.option_sides[1]}={self.sides}"
        else:
            size = str(self.sides)
        return f"{prefix}({size})"

    @property
    def recipe_status(self) -> str:
        """Recipe plus current value, e.g. 'zB(20):7'."""
        return f"{self.recipe}:{self.value}"

    def has_skill(self, skill: str) -> bool:
        return skill in self.skills

    # ========== Mutation primitives ==========

    def _ensure_in_play(self, operation: str) -> None:
        if self.out_of_play:
            raise DieOutOfPlayError(f"Cannot {operation} die {self.die_id} {self.recipe}: it is out of play")

    def roll(self, roller: DiceRoller) -> int:
        """
        Give the die a new face value in 1..sides.

        Args:
            roller: The game's roller

        Returns:
            The new value
        """
        self._ensure_in_play('roll')
        self.value = roller.roll_die(self.sides)
        return self.value

    def set_value(self, value: int) -> None:
        """Turn the die to a specific face."""
        self._ensure_in_play('set the value of')
        if not 1 <= value <= self.sides:
            raise ValueError(f"Value {value} is outside 1..{self.sides}")
        self.value = value

    def resize(self, sides: int, roller: Optional[DiceRoller] = None) -> None:
        """
        Change the number of sides.

        The value never goes stale: with a roller the die is rerolled,
        otherwise the value is clamped into the new range.

        Args:
            sides: New number of sides
            roller: Optional roller used to reroll after the size change
        """
        self._ensure_in_play('resize')
        if sides < 1:
            raise ValueError(f"A die needs at least 1 side, got {sides}")

        old_recipe = self.recipe
        if sides > self.sides:
            self.recipe_before_growing = old_recipe
        elif sides < self.sides:
            self.recipe_before_shrinking = old_recipe
        self.sides = sides

        if roller is not None:
            self.value = roller.roll_die(sides)
        elif self.value is not None:
            self.value = min(self.value, sides)

    def add_skill(self, skill: str) -> None:
        self._ensure_in_play('add a skill to')
        if skill not in self.skills:
            self.skills.append(skill)

    def remove_skill(self, skill: str) -> bool:
        """
        Remove a skill from the die.

        Returns:
            True if the die had the skill
        """
        self._ensure_in_play('remove a skill from')
        if skill in self.skills:
            self.skills.remove(skill)
            return True
        return False

    def split(self) -> Tuple['Die', 'Die']:
        """
        Split the die into two dice of half the size.

        The first die keeps this die's id and gets the larger half; the second
        gets a fresh id. Swing and option status are discarded, skills are
        kept. Both values are clamped into their new range. This die itself is
        not changed; callers replace it with the returned dice.

        Returns:
            Tuple of the two new dice
        """
        self._ensure_in_play('split')
        before = self.recipe

        if self.sides > 1:
            small = self.sides // 2
            large = self.sides - small
        else:
            small = large = 1

        halves = []
        for die_id, sides in ((self.die_id, large), (generate_id('die'), small)):
            half = Die(
                sides=sides,
                value=None if self.value is None else min(self.value, sides),
                skills=list(self.skills),
                does_reroll=self.does_reroll,
                die_id=die_id,
            )
            half.recipe_before_splitting = before
            halves.append(half)

        return halves[0], halves[1]

    def take_out_of_play(self) -> None:
        """Mark the die as out of play. There is no way back."""
        self.out_of_play = True

    def clear_transient(self) -> None:
        """Forget bookkeeping left over from a previous attack."""
        for name in TRANSIENT_FIELDS:
            setattr(self, name, None)

    # ========== Snapshots ==========

    def snapshot(self) -> DieState:
        """Copy every field, for rollback."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values['skills'] = tuple(self.skills)
        return DieState(**values)

    def restore(self, state: DieState) -> None:
        """
        Put the die back into a previously captured state.

        Rollback is the one operation allowed on out-of-play dice, since it
        only ever returns them to a state they already had.
        """
        for f in fields(state):
            value = getattr(state, f.name)
            if f.name == 'skills':
                value = list(value)
            setattr(self, f.name, value)

    def view(self) -> DieView:
        """Immutable projection for attack records."""
        return DieView(
            die_id=self.die_id,
            recipe=self.recipe,
            value=self.value,
            max=self.sides,
            does_reroll=self.does_reroll,
            captured=self.captured,
            out_of_play=self.out_of_play,
            skills=tuple(self.skills),
            recipe_before_splitting=self.recipe_before_splitting,
            recipe_before_growing=self.recipe_before_growing,
            recipe_before_shrinking=self.recipe_before_shrinking,
            value_after_trip_attack=self.value_after_trip_attack,
        )

    def copy(self) -> 'Die':
        """Independent copy with the same id."""
        return replace(self, skills=list(self.skills))

    def __repr__(self) -> str:
        return f"Die({self.recipe_status}, id={self.die_id})"
