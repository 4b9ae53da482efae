"""
Rules engine for Button Men.

The RulesEngine is the main API for one game. It coordinates the shared
registries, the game's event bus and the attack resolver to provide the
three caller operations: list the legal attack types, find the concrete
attacks for a type, and resolve a proposed attack.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging

from .errors import InternalInconsistencyError
from .event_bus import EventBus
from .game import Game
from .models import AttackProposal
from .registry import Registries, get_registries
from .resolver import AttackResolver
from .result import Result

if TYPE_CHECKING:
    from ..modules.base import AttackTypeDefinition

logger = logging.getLogger(__name__)


class RulesEngine:
    """
    Main API for attack rules in one game.

    Each engine owns its game and event bus; the registries are shared
    read-only by every engine in the process.

    Attributes:
        game: The game being played
        registries: Frozen attack type and skill registries
        event_bus: EventBus for this game
        extensions: Per-engine objects attached by modules (e.g. 'action_log')
    """

    def __init__(self, game: Game, registries: Optional[Registries] = None):
        """
        Create an engine for a game.

        Args:
            game: Game to run attacks in
            registries: Registries to use; defaults to the process-wide ones
        """
        self.game = game
        self.registries = registries or get_registries()
        self.event_bus = EventBus()
        self.extensions: Dict[str, Any] = {}

        game.skills = self.registries.skills
        self.resolver = AttackResolver(game, self.registries, self.event_bus)

        for module in self.registries.modules:
            try:
                module.initialize(self)
            except Exception as e:
                # Don't fail engine creation if module initialization fails
                logger.warning(f"Module '{module.name}' initialization failed: {e}")

    # ========== Attacks ==========

    def list_legal_attack_types(self) -> List[str]:
        """
        Attack types the active player may declare right now.

        Returns:
            Attack type names; empty outside the START_TURN state

        Raises:
            InternalInconsistencyError: If an attack_list handler breaks
        """
        try:
            return self.registries.attack_types.legal_attack_types(self.game, self.registries.skills)
        except InternalInconsistencyError as e:
            logger.critical(f"Could not list attack types: {e}")
            raise

    def find_attacks(self, attack_type: str) -> List[AttackProposal]:
        """
        Every concrete attack of one type the active player could make.

        Args:
            attack_type: Attack type name

        Returns:
            List of proposals; empty if the type is not legal now

        Raises:
            ValueError: If the attack type is not registered
        """
        definition = self.registries.attack_types.get(attack_type)
        if definition is None:
            raise ValueError(f"Unknown attack type '{attack_type}'")

        if attack_type not in self.list_legal_attack_types():
            return []
        return self._find(definition)

    def find_all_attacks(self) -> Dict[str, List[AttackProposal]]:
        """Proposals for every legal attack type, keyed by type."""
        return {
            name: self._find(self.registries.attack_types.get(name))
            for name in self.list_legal_attack_types()
        }

    def _find(self, definition: 'AttackTypeDefinition') -> List[AttackProposal]:
        try:
            return definition.find_attacks(self.game)
        except InternalInconsistencyError as e:
            e.attack_type = e.attack_type or definition.name
            logger.critical(f"Attack search failed: {e}")
            raise

    def validate(self, proposal: AttackProposal) -> Result:
        """Check a proposal without applying it."""
        return self.resolver.validate(proposal)

    def resolve(self, proposal: AttackProposal) -> Result:
        """
        Resolve a proposed attack.

        Returns:
            Result with the AttackRecord, or a failed Result for an attack
            the player may not make

        Raises:
            InternalInconsistencyError: If the game would become inconsistent;
                the game is rolled back first
        """
        return self.resolver.resolve(proposal)
