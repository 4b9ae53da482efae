"""
Attack resolution.

An attack moves through a fixed life cycle:

    proposed -> validated -> applied -> capture resolved -> recorded

A proposal the player got wrong (unknown or illegal type, dice on the wrong
side, failed validation) is rejected with a failed Result and nothing
changes. A proposal that could not have come from a correct caller (dice out
of play or not on the table) and any failure after validation are internal
errors: the game is restored to its state before the call and the error is
raised.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING
import logging

from .die import Die
from .errors import InternalInconsistencyError
from .event_bus import EventBus
from .game import Game, Player
from .hooks import CaptureContext, Hook
from .models import AttackProposal, AttackRecord, DieView, Event
from .result import ErrorCode, Result

if TYPE_CHECKING:
    from ..modules.base import AttackTypeDefinition
    from .registry import Registries

logger = logging.getLogger(__name__)

ATTACK_RESOLVED = 'attack.resolved'


def _views(dice: List[Die]) -> Tuple[DieView, ...]:
    return tuple(d.view() for d in dice)


class AttackResolver:
    """
    Validates and applies attacks for one game.

    The resolver is the only code that changes dice during an attack.
    """

    def __init__(self, game: Game, registries: 'Registries', event_bus: Optional[EventBus] = None):
        self.game = game
        self.registries = registries
        self.event_bus = event_bus

    def _reject(self, proposal: AttackProposal, message: str, code: ErrorCode) -> Result:
        logger.info(f"Rejected {proposal.attack_type} attack: {message}")
        return Result.fail(message, code)

    def _check_dice(self, proposal: AttackProposal) -> None:
        """Every die must be a die that is in play and in a roster."""
        for die in proposal.dice():
            if not isinstance(die, Die):
                raise InternalInconsistencyError(
                    f"Proposal contains a non-die entry: {die!r}",
                    attack_type=proposal.attack_type,
                )
            if die.out_of_play:
                raise InternalInconsistencyError(
                    f"Die {die.die_id} {die.recipe} is out of play",
                    attack_type=proposal.attack_type,
                )
            if self.game.owner_of(die) is None:
                raise InternalInconsistencyError(
                    f"Die {die.die_id} {die.recipe} is not in any roster",
                    attack_type=proposal.attack_type,
                )

    def validate(self, proposal: AttackProposal) -> Result:
        """
        Check a proposal without changing anything.

        Returns:
            Result with the attack type definition as data, or a failed
            Result explaining why the attack may not be made

        Raises:
            InternalInconsistencyError: If the proposal names dice that are
                out of play or not on the table, or a skill handler breaks
                while legality is checked
        """
        definition = self.registries.attack_types.get(proposal.attack_type)
        if definition is None:
            return self._reject(proposal, f"Unknown attack type '{proposal.attack_type}'",
                                ErrorCode.UNKNOWN_ATTACK_TYPE)

        try:
            return self._validate(definition, proposal)
        except InternalInconsistencyError as e:
            e.attack_type = e.attack_type or proposal.attack_type
            logger.critical(f"Inconsistent {proposal.attack_type} proposal: {e}")
            raise

    def _validate(self, definition: 'AttackTypeDefinition', proposal: AttackProposal) -> Result:
        self._check_dice(proposal)

        legal = self.registries.attack_types.legal_attack_types(self.game, self.registries.skills)
        if proposal.attack_type not in legal:
            return self._reject(proposal, f"{proposal.attack_type} attack is not legal now",
                                ErrorCode.ATTACK_NOT_LEGAL)

        dice = proposal.dice()
        if len({id(d) for d in dice}) != len(dice):
            return self._reject(proposal, "A die may only take part once", ErrorCode.INVALID_ATTACK)

        attacker = self.game.attacker
        for die in proposal.attackers:
            if self.game.owner_of(die) is not attacker:
                return self._reject(proposal, f"{die.recipe} is not one of {attacker.name}'s dice",
                                    ErrorCode.WRONG_ROSTER)
        for die in proposal.defenders:
            if self.game.owner_of(die) is attacker:
                return self._reject(proposal, f"{die.recipe} cannot be attacked by its owner",
                                    ErrorCode.WRONG_ROSTER)

        if not definition.validate_attack(self.game, list(proposal.attackers), list(proposal.defenders)):
            return self._reject(proposal, f"Invalid {proposal.attack_type} attack",
                                ErrorCode.INVALID_ATTACK)

        return Result.ok(definition)

    def resolve(self, proposal: AttackProposal) -> Result:
        """
        Validate and apply an attack.

        Args:
            proposal: Attack type plus attacking and defending dice

        Returns:
            Result with the AttackRecord as data, or a failed Result if the
            attack may not be made

        Raises:
            InternalInconsistencyError: On an impossible proposal or a
                failure during application; the game is left unchanged
        """
        validation = self.validate(proposal)
        if not validation:
            return validation
        definition = validation.data

        acting = self.game.attacker
        snapshot = self.game.snapshot()
        try:
            record = self._apply(definition, proposal, acting)
        except InternalInconsistencyError as e:
            self.game.restore(snapshot)
            e.attack_type = e.attack_type or proposal.attack_type
            logger.critical(f"Attack rolled back: {e}")
            raise
        except Exception:
            self.game.restore(snapshot)
            logger.critical(f"Unexpected error in {proposal.attack_type} attack, rolled back",
                            exc_info=True)
            raise

        logger.info(
            f"{acting.name} resolved {proposal.attack_type} attack with "
            f"{len(proposal.attackers)} attacker(s) against {len(proposal.defenders)} defender(s)"
        )

        if self.event_bus is not None:
            self.event_bus.publish(Event.create(
                event_type=ATTACK_RESOLVED,
                actor_id=acting.player_id,
                data={
                    'record': record,
                    'game_state': int(self.game.state),
                    'round_number': self.game.round_number,
                },
            ))

        return Result.ok(record)

    def _apply(self, definition: 'AttackTypeDefinition', proposal: AttackProposal,
               acting: Player) -> AttackRecord:
        attackers = list(proposal.attackers)
        defenders = list(proposal.defenders)

        for die in attackers + defenders:
            die.clear_transient()
        pre_attack = {'attacker': _views(attackers), 'defender': _views(defenders)}

        definition.apply_effects(self.game, attackers, defenders)

        context = CaptureContext(
            attack_type=definition.name,
            attackers=list(attackers),
            defenders=list(defenders),
            roller=self.game.roller,
        )
        context = self.registries.skills.dispatch(Hook.CAPTURE, attackers + defenders, context)

        self._write_back(attackers, context.attackers)
        self._write_back(defenders, context.defenders)

        for defender in context.defenders:
            if defender.captured:
                self.game.capture(defender, acting)

        post_attack = {
            'attacker': _views(context.attackers),
            'defender': _views(context.defenders),
        }
        return AttackRecord(
            attack_type=definition.name,
            pre_attack=pre_attack,
            post_attack=post_attack,
            acting_player_id=acting.player_id,
        )

    def _write_back(self, originals: List[Die], current: List[Die]) -> None:
        """Put dice that a capture handler substituted into the rosters."""
        for original, die in zip(originals, current):
            if die is not original:
                self.game.replace_die(original, [die])
