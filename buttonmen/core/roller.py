"""
Seeded die roller.

Each game owns one DiceRoller so that games never share random state and a
game can be replayed from its seed.
"""

import random
from typing import Optional


class DiceRoller:
    """
    Produces face values for dice.

    The only contract the engine relies on is that roll_die(sides) returns a
    value in 1..sides.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize roller.

        Args:
            seed: Random seed for deterministic rolls (testing/replay)
        """
        self.rng = random.Random(seed)
        self.seed = seed

    def roll_die(self, sides: int) -> int:
        """Roll a single die with the given number of sides."""
        if sides < 1:
            raise ValueError(f"Dice must have at least 1 side, got {sides}")
        return self.rng.randint(1, sides)

