"""
Game state seen by the rules engine.

Only what attack resolution needs is modelled here: the two players with
their rosters and captured piles, whose turn it is, and the coarse game
state predicate. The round/turn state machine itself lives outside the
engine.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING
import logging

from .die import Die, DieState
from .errors import InternalInconsistencyError
from .roller import DiceRoller

if TYPE_CHECKING:
    from .hooks import SkillRegistry

logger = logging.getLogger(__name__)


class GameState(IntEnum):
    """Phases of a Button Men game, in play order."""
    START_GAME = 10
    SPECIFY_DICE = 20
    CHOOSE_AUXILIARY_DICE = 22
    CHOOSE_RESERVE_DICE = 24
    DETERMINE_INITIATIVE = 26
    REACT_TO_INITIATIVE = 27
    START_ROUND = 30
    START_TURN = 40
    ADJUST_FIRE_DICE = 42
    END_TURN = 48
    END_ROUND = 50
    END_GAME = 60


@dataclass
class Player:
    """
    One side of the table.

    Attributes:
        player_id: Stable identifier
        name: Display name used by the action log
        dice: Active roster, in button order
        captured: Dice this player has captured
    """
    player_id: str
    name: str
    dice: List[Die] = field(default_factory=list)
    captured: List[Die] = field(default_factory=list)

    def in_play_dice(self) -> List[Die]:
        """Roster dice that can take part in an attack."""
        return [d for d in self.dice if not d.out_of_play and not d.captured]


@dataclass(frozen=True)
class GameSnapshot:
    """Roster layout plus every die's state, for rollback."""
    rosters: Tuple[Tuple[Tuple[Die, ...], Tuple[Die, ...]], ...]
    dice: Tuple[Tuple[Die, DieState], ...]


class Game:
    """
    A two-player game as far as attack resolution is concerned.

    Each game owns its dice and its roller; nothing here is shared between
    games. The skill registry is the shared, read-only catalog bound by the
    engine so attack type validation can consult skill capability hooks.
    """

    def __init__(self, players: List[Player], active_player_index: int = 0,
                 state: GameState = GameState.START_TURN, round_number: int = 1,
                 roller: Optional[DiceRoller] = None,
                 skills: Optional['SkillRegistry'] = None):
        if len(players) != 2:
            raise ValueError(f"A game needs exactly 2 players, got {len(players)}")
        if active_player_index not in (0, 1):
            raise ValueError(f"Invalid active player index: {active_player_index}")

        self.players = players
        self.active_player_index = active_player_index
        self.state = state
        self.round_number = round_number
        self.roller = roller or DiceRoller()
        self.skills = skills

    # ========== Turn ==========

    @property
    def attacker(self) -> Player:
        """The player whose turn it is."""
        return self.players[self.active_player_index]

    @property
    def defender(self) -> Player:
        return self.players[1 - self.active_player_index]

    def attacker_dice(self) -> List[Die]:
        return self.attacker.in_play_dice()

    def defender_dice(self) -> List[Die]:
        return self.defender.in_play_dice()

    def player_names(self) -> Dict[str, str]:
        """Map of player id to display name."""
        return {p.player_id: p.name for p in self.players}

    # ========== Lookup ==========

    def all_dice(self) -> List[Die]:
        """Every die on the table, rosters and captured piles."""
        dice = []
        for player in self.players:
            dice.extend(player.dice)
            dice.extend(player.captured)
        return dice

    def find_die(self, die_id: str) -> Optional[Die]:
        """Find a roster die by id."""
        for player in self.players:
            for die in player.dice:
                if die.die_id == die_id:
                    return die
        return None

    def owner_of(self, die: Die) -> Optional[Player]:
        """Player whose roster holds this exact die object."""
        for player in self.players:
            if any(d is die for d in player.dice):
                return player
        return None

    # ========== Mutation (resolver only) ==========

    def replace_die(self, old: Die, new: List[Die]) -> None:
        """
        Put one or more dice in place of a roster die, keeping its position.

        Raises:
            InternalInconsistencyError: If the die is in no roster
        """
        for player in self.players:
            for index, die in enumerate(player.dice):
                if die is old:
                    player.dice[index:index + 1] = list(new)
                    return
        raise InternalInconsistencyError(
            f"Cannot replace die {old.die_id}: it is not in any roster"
        )

    def capture(self, die: Die, by_player: Player) -> None:
        """Move a die from its owner's roster to the capturing player's pile."""
        owner = self.owner_of(die)
        if owner is None:
            raise InternalInconsistencyError(
                f"Cannot capture die {die.die_id}: it is not in any roster"
            )
        owner.dice = [d for d in owner.dice if d is not die]
        die.captured = True
        die.captured_by = by_player.player_id
        by_player.captured.append(die)
        logger.debug(f"{by_player.name} captured {die.recipe_status}")

    # ========== Rollback ==========

    def snapshot(self) -> GameSnapshot:
        """Capture rosters and die states so a failed attack can be undone."""
        rosters = tuple(
            (tuple(p.dice), tuple(p.captured)) for p in self.players
        )
        dice = tuple((d, d.snapshot()) for d in self.all_dice())
        return GameSnapshot(rosters=rosters, dice=dice)

    def restore(self, snapshot: GameSnapshot) -> None:
        """Put rosters and every die back as they were at snapshot time."""
        for player, (dice, captured) in zip(self.players, snapshot.rosters):
            player.dice = list(dice)
            player.captured = list(captured)
        for die, state in snapshot.dice:
            die.restore(state)
