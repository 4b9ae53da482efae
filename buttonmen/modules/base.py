"""
Module system base classes for the Button Men engine.

Provides the interfaces that modules implement to register attack types and
skills with the engine.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, TYPE_CHECKING

from ..core.hooks import Hook

if TYPE_CHECKING:
    from ..core.die import Die
    from ..core.engine import RulesEngine
    from ..core.game import Game
    from ..core.models import AttackProposal


class Availability(Enum):
    """When an attack type with no dice requirement shows up as legal."""
    ON_FIND = 'on_find'
    WHEN_NO_ATTACKS = 'when_no_attacks'
    ALWAYS = 'always'


class AttackTypeDefinition:
    """
    Defines an attack type as a strategy record.

    Attack types are stateless once registered: the three callables receive
    everything they need as arguments.

    Attributes:
        name: Unique attack type name (e.g. 'Power', 'Speed')
        description: Human-readable description
        module: Which module provides this type
        validate: (game, attackers, defenders) -> bool
        search: (game) -> list of AttackProposal
        apply: (game, attackers, defenders) -> None; mutates the dice
        incompatible_with: Types this one suppresses when both are candidates
        base: Whether the type is a candidate without any skill adding it
        required_skill: Skill an attacker must carry, if any
        availability: When the type counts as legal

    Examples:
        AttackTypeDefinition('Power', 'One die captures a lower or equal die', 'attacks',
                             validate=validate_power, search=find_power, apply=capture_effect)
    """

    def __init__(self, name: str, description: str, module: str,
                 validate: Callable[['Game', List['Die'], List['Die']], bool],
                 search: Callable[['Game'], List['AttackProposal']],
                 apply: Callable[['Game', List['Die'], List['Die']], None],
                 incompatible_with: Iterable[str] = (),
                 base: bool = True,
                 required_skill: Optional[str] = None,
                 availability: Availability = Availability.ON_FIND):
        self.name = name
        self.description = description
        self.module = module
        self.validate = validate
        self.search = search
        self.apply = apply
        self.incompatible_with: FrozenSet[str] = frozenset(incompatible_with)
        self.base = base
        self.required_skill = required_skill
        self.availability = availability

    def validate_attack(self, game: 'Game', attackers: List['Die'], defenders: List['Die']) -> bool:
        return bool(self.validate(game, list(attackers), list(defenders)))

    def find_attacks(self, game: 'Game') -> List['AttackProposal']:
        return list(self.search(game))

    def apply_effects(self, game: 'Game', attackers: List['Die'], defenders: List['Die']) -> None:
        self.apply(game, attackers, defenders)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'module': self.module,
            'incompatible_with': sorted(self.incompatible_with),
            'base': self.base,
            'required_skill': self.required_skill,
            'availability': self.availability.value,
        }

    def __repr__(self) -> str:
        return f"AttackTypeDefinition({self.name!r})"


class SkillDefinition:
    """
    Defines a die skill and the hooks it handles.

    Attributes:
        name: Skill name as it appears on dice (e.g. 'Berserk')
        abbreviation: Recipe letter (e.g. 'B')
        description: Human-readable description
        module: Which module provides this skill
        handlers: Mapping of Hook to handler callable
    """

    def __init__(self, name: str, abbreviation: str, description: str, module: str,
                 handlers: Optional[Dict[Hook, Callable]] = None):
        self.name = name
        self.abbreviation = abbreviation
        self.description = description
        self.module = module
        self.handlers = {Hook(hook): handler for hook, handler in (handlers or {}).items()}

    def __repr__(self) -> str:
        return f"SkillDefinition({self.name!r})"


class Module(ABC):
    """
    Base class for all modules.

    Modules extend the engine with attack types, skills and listeners.

    To create a module:
    1. Subclass Module
    2. Implement name and version properties
    3. Implement register_* methods to provide types
    4. Optional: implement dependencies() to specify required modules
    5. Optional: implement initialize() to hook into each engine
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Module name (e.g., 'attacks')"""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Module version (semver, e.g., '1.0.0')"""
        pass

    @property
    def display_name(self) -> str:
        """Human-readable display name. Defaults to the module name."""
        return self.name.replace('_', ' ').title()

    @property
    def description(self) -> str:
        return f"{self.display_name} module"

    @property
    def is_core(self) -> bool:
        """Whether the engine cannot work without this module."""
        return False

    def dependencies(self) -> List[str]:
        """
        Return list of module names that this module depends on.

        Dependencies are registered before this module.

        Example:
            def dependencies(self) -> List[str]:
                return ['attacks']
        """
        return []

    def initialize(self, engine: 'RulesEngine') -> None:
        """
        Called once for every engine that is created.

        Override to subscribe to the engine's event bus or attach
        per-game helpers to engine.extensions.

        Args:
            engine: RulesEngine instance
        """
        pass

    def register_attack_types(self) -> List[AttackTypeDefinition]:
        """
        Return attack types this module provides.

        Example:
            return core_attack_types()
        """
        return []

    def register_skills(self) -> List[SkillDefinition]:
        """
        Return skills this module provides.

        Example:
            return [berserk_skill(), speed_skill()]
        """
        return []
