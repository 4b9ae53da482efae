"""
Attack type registry and the process-wide static registries.

The registries are built once from the loaded modules and then frozen. After
that they are read-only and shared by every game in the process; all
per-game state lives in Game and RulesEngine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING
import logging

from .errors import DuplicateRegistrationError, InternalInconsistencyError, RegistryFrozenError
from .game import Game, GameState
from .hooks import AttackListContext, Hook, SkillRegistry

if TYPE_CHECKING:
    from ..modules.base import AttackTypeDefinition, Module

logger = logging.getLogger(__name__)


class AttackTypeRegistry:
    """Catalog of attack type definitions, in registration order."""

    def __init__(self):
        self._types: Dict[str, 'AttackTypeDefinition'] = {}
        self._frozen = False

    def register(self, definition: 'AttackTypeDefinition') -> None:
        """
        Register an attack type.

        Raises:
            DuplicateRegistrationError: If the name is already taken
            RegistryFrozenError: If the registry has been frozen
        """
        if self._frozen:
            raise RegistryFrozenError("Attack type registry is frozen; register attack types at start-up")
        if definition.name in self._types:
            raise DuplicateRegistrationError(f"Attack type '{definition.name}' is already registered")
        self._types[definition.name] = definition
        logger.debug(f"Registered attack type {definition.name} from {definition.module}")

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional['AttackTypeDefinition']:
        return self._types.get(name)

    def names(self) -> List[str]:
        return list(self._types)

    def definitions(self) -> List['AttackTypeDefinition']:
        return list(self._types.values())

    def base_types(self) -> List[str]:
        """Types that are candidates without any skill adding them."""
        return [name for name, definition in self._types.items() if definition.base]

    def _in_registry_order(self, names) -> List[str]:
        wanted = set(names)
        return [name for name in self._types if name in wanted]

    def suppress_incompatible(self, names: List[str]) -> List[str]:
        """
        Drop every type that another present type declares incompatible.

        The outcome depends only on which types are present, never on the
        order they were added in.
        """
        present = set(names)
        suppressed = set()
        for name in present:
            suppressed |= self._types[name].incompatible_with
        return self._in_registry_order(present - suppressed)

    def candidate_attack_types(self, game: Game, skills: SkillRegistry) -> List[str]:
        """
        Attack types the active player's dice could make this turn.

        Base types plus whatever the dice's attack_list handlers add, minus
        whatever they or incompatibilities remove.

        Raises:
            InternalInconsistencyError: If a skill adds an unregistered type
        """
        context = AttackListContext(attack_types=self.base_types())
        context = skills.dispatch(Hook.ATTACK_LIST, game.attacker_dice(), context)

        unknown = [name for name in context.attack_types if name not in self._types]
        if unknown:
            raise InternalInconsistencyError(
                f"attack_list produced unregistered attack types: {', '.join(unknown)}",
                hook=Hook.ATTACK_LIST.value,
            )

        return self.suppress_incompatible(context.attack_types)

    def legal_attack_types(self, game: Game, skills: SkillRegistry) -> List[str]:
        """
        Attack types the active player may declare right now.

        A type is legal when it is a candidate and at least one concrete
        attack exists for it. Types available only when nothing else is
        (Pass) and types that are always available (Surrender) follow their
        own rule. Nothing is legal outside the START_TURN state.

        Returns:
            Attack type names in registration order
        """
        from ..modules.base import Availability

        if game.state != GameState.START_TURN:
            return []

        legal = []
        fallback = []
        for name in self.candidate_attack_types(game, skills):
            definition = self._types[name]
            if definition.availability is Availability.ALWAYS:
                legal.append(name)
            elif definition.availability is Availability.WHEN_NO_ATTACKS:
                fallback.append(name)
            elif definition.find_attacks(game):
                legal.append(name)

        has_attack = any(
            self._types[name].availability is Availability.ON_FIND for name in legal
        )
        if not has_attack:
            legal.extend(fallback)

        return self._in_registry_order(legal)

    def to_dict(self) -> List[dict]:
        return [definition.to_dict() for definition in self._types.values()]


@dataclass
class Registries:
    """The frozen catalogs every game in the process shares."""
    attack_types: AttackTypeRegistry
    skills: SkillRegistry
    modules: List['Module'] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'modules': [
                {
                    'name': m.name,
                    'display_name': m.display_name,
                    'version': m.version,
                    'is_core': m.is_core,
                    'dependencies': m.dependencies(),
                }
                for m in self.modules
            ],
            'attack_types': self.attack_types.to_dict(),
            'skills': self.skills.to_dict(),
        }


def build_registries(modules: Optional[List['Module']] = None) -> Registries:
    """
    Register every module's attack types and skills, then freeze.

    Args:
        modules: Modules in dependency order; None loads all available modules

    Returns:
        Frozen Registries
    """
    if modules is None:
        from .module_loader import ModuleLoader
        modules = ModuleLoader().load_modules()

    attack_types = AttackTypeRegistry()
    skills = SkillRegistry()

    for module in modules:
        for definition in module.register_attack_types():
            attack_types.register(definition)
        for definition in module.register_skills():
            skills.register(definition)

    attack_types.freeze()
    skills.freeze()

    logger.info(
        f"Registries ready: {len(attack_types.names())} attack types, "
        f"{len(skills.skill_names())} skills from {len(modules)} modules"
    )
    return Registries(attack_types=attack_types, skills=skills, modules=list(modules))


# Global registries (lazy-loaded)
_registries: Optional[Registries] = None


def get_registries() -> Registries:
    """
    Get the process-wide registries (singleton pattern).

    Returns:
        Frozen Registries built from all available modules
    """
    global _registries
    if _registries is None:
        _registries = build_registries()
    return _registries


def reset_registries() -> None:
    """Drop the cached registries (tests only)."""
    global _registries
    _registries = None


__all__ = [
    'AttackTypeRegistry', 'Registries', 'build_registries',
    'get_registries', 'reset_registries',
]
