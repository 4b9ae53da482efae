"""
Skill hook dispatch.

Skills change the rules by attaching handlers to a closed set of hooks. When
the engine reaches a hook it asks the SkillRegistry to dispatch it over the
dice taking part: every distinct skill on those dice whose handler is
registered for the hook runs once, in skill registration order, against a
copy of the caller's context. The (possibly modified) copy is returned.

Example:
    registry = SkillRegistry()
    registry.register_skill('Berserk', Hook.ATTACK_LIST, berserk_attack_list)
    context = registry.dispatch(Hook.ATTACK_LIST, dice, AttackListContext(['Power', 'Skill']))
    context.attack_types  # ['Power', 'Berserk']
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING
import logging

from .die import Die
from .errors import DuplicateRegistrationError, InternalInconsistencyError, RegistryFrozenError
from .roller import DiceRoller

if TYPE_CHECKING:
    from ..modules.base import SkillDefinition

logger = logging.getLogger(__name__)


class Hook(str, Enum):
    """Extension points skills can attach handlers to."""
    ATTACK_LIST = 'attack_list'
    CAPTURE = 'capture'
    VALID_ATTACKER = 'valid_attacker'
    VALID_TARGET = 'valid_target'

    def __str__(self) -> str:
        return self.value


class HookResult(Enum):
    """What a handler reports back to the dispatcher."""
    CONTINUE = 'continue'
    CONTINUE_AFTER_MUTATION = 'continue_after_mutation'
    STOP = 'stop'


# ========== Contexts ==========

@dataclass
class AttackListContext:
    """Candidate attack type names for the current turn."""
    attack_types: List[str] = field(default_factory=list)
    attack_type: Optional[str] = None

    def copy(self) -> 'AttackListContext':
        return replace(self, attack_types=list(self.attack_types))

    def problems(self) -> Optional[str]:
        if not all(isinstance(name, str) for name in self.attack_types):
            return "attack_types must only contain attack type names"
        return None


@dataclass
class CaptureContext:
    """
    The dice of an attack whose effects have just been applied.

    Handlers may substitute dice in place but the number of attackers and
    defenders is fixed when the context is created.
    """
    attack_type: str
    attackers: List[Die]
    defenders: List[Die]
    roller: DiceRoller
    expected_attackers: int = -1
    expected_defenders: int = -1

    def __post_init__(self) -> None:
        if self.expected_attackers < 0:
            self.expected_attackers = len(self.attackers)
        if self.expected_defenders < 0:
            self.expected_defenders = len(self.defenders)

    def copy(self) -> 'CaptureContext':
        return replace(self, attackers=list(self.attackers), defenders=list(self.defenders))

    def problems(self) -> Optional[str]:
        if not isinstance(self.attackers, list) or not isinstance(self.defenders, list):
            return "attackers and defenders must be lists"
        if len(self.attackers) != self.expected_attackers:
            return (f"expected {self.expected_attackers} attacker(s), "
                    f"found {len(self.attackers)}")
        if len(self.defenders) != self.expected_defenders:
            return (f"expected {self.expected_defenders} defender(s), "
                    f"found {len(self.defenders)}")
        for die in self.attackers + self.defenders:
            if not isinstance(die, Die):
                return f"non-die entry {die!r}"
        return None


@dataclass
class CapabilityContext:
    """Asks whether one die may take part in an attack in a given role."""
    attack_type: str
    die: Die
    attackers: List[Die] = field(default_factory=list)
    defenders: List[Die] = field(default_factory=list)
    allowed: bool = True

    def copy(self) -> 'CapabilityContext':
        return replace(self, attackers=list(self.attackers), defenders=list(self.defenders))

    def problems(self) -> Optional[str]:
        if not isinstance(self.allowed, bool):
            return f"allowed must be a bool, got {self.allowed!r}"
        return None


HOOK_CONTEXTS = {
    Hook.ATTACK_LIST: AttackListContext,
    Hook.CAPTURE: CaptureContext,
    Hook.VALID_ATTACKER: CapabilityContext,
    Hook.VALID_TARGET: CapabilityContext,
}

Handler = Callable[[object], Optional[HookResult]]


# ========== Registry ==========

class SkillRegistry:
    """
    Catalog of skill handlers, keyed by skill and hook.

    Built once at start-up and then frozen; after that it is read-only and can
    be shared by any number of games.
    """

    def __init__(self):
        self._order: List[str] = []
        self._handlers: Dict[Tuple[str, Hook], Handler] = {}
        self._definitions: Dict[str, 'SkillDefinition'] = {}
        self._frozen = False

    def _ensure_open(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Skill registry is frozen; register skills at start-up")

    def register(self, definition: 'SkillDefinition') -> None:
        """
        Register a skill and all its hook handlers.

        Args:
            definition: SkillDefinition provided by a module

        Raises:
            DuplicateRegistrationError: If the skill is already registered
            RegistryFrozenError: If the registry has been frozen
        """
        self._ensure_open()
        if definition.name in self._definitions:
            raise DuplicateRegistrationError(f"Skill '{definition.name}' is already registered")
        self._definitions[definition.name] = definition
        if definition.name not in self._order:
            self._order.append(definition.name)
        for hook, handler in definition.handlers.items():
            self.register_skill(definition.name, hook, handler)

    def register_skill(self, skill_id: str, hook: Hook, handler: Handler) -> None:
        """
        Attach one handler for one hook.

        A skill's place in the dispatch order is fixed by its first
        registration.
        """
        self._ensure_open()
        hook = Hook(hook)
        key = (skill_id, hook)
        if key in self._handlers:
            raise DuplicateRegistrationError(
                f"Skill '{skill_id}' already has a handler for {hook}"
            )
        if skill_id not in self._order:
            self._order.append(skill_id)
        self._handlers[key] = handler
        logger.debug(f"Registered {hook} handler for skill {skill_id}")

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def skill_names(self) -> List[str]:
        """Registered skills in registration order."""
        return list(self._order)

    def get(self, skill_id: str) -> Optional['SkillDefinition']:
        return self._definitions.get(skill_id)

    def hooks_for(self, skill_id: str) -> List[Hook]:
        return [hook for (name, hook) in self._handlers if name == skill_id]

    def ordered_skills(self, dice: Iterable[Die]) -> List[str]:
        """
        Distinct skills on the given dice, in registration order.

        Skills nobody registered are left out.
        """
        present = set()
        for die in dice:
            present.update(die.skills)
        return [skill for skill in self._order if skill in present]

    # ========== Dispatch ==========

    def dispatch(self, hook: Hook, dice: Iterable[Die], context):
        """
        Run every relevant handler for a hook.

        Args:
            hook: Hook being reached
            dice: Dice taking part; their skills decide which handlers run
            context: Hook context; it is copied, the caller's object is untouched

        Returns:
            The context after all handlers ran

        Raises:
            InternalInconsistencyError: If a handler fails or leaves the
                context malformed
        """
        hook = Hook(hook)
        expected = HOOK_CONTEXTS[hook]
        if not isinstance(context, expected):
            raise TypeError(f"{hook} needs a {expected.__name__}, got {type(context).__name__}")

        context = context.copy()
        attack_type = getattr(context, 'attack_type', None)

        for skill_id in self.ordered_skills(list(dice)):
            handler = self._handlers.get((skill_id, hook))
            if handler is None:
                continue

            logger.debug(f"Dispatching {hook} to {skill_id}")
            try:
                result = handler(context)
            except InternalInconsistencyError as e:
                e.hook = e.hook or hook.value
                e.skill_id = e.skill_id or skill_id
                e.attack_type = e.attack_type or attack_type
                raise
            except Exception as e:
                raise InternalInconsistencyError(
                    f"Handler raised {type(e).__name__}: {e}",
                    hook=hook.value, skill_id=skill_id, attack_type=attack_type,
                ) from e

            if result is not None and not isinstance(result, HookResult):
                raise InternalInconsistencyError(
                    f"Handler returned {result!r} instead of a HookResult",
                    hook=hook.value, skill_id=skill_id, attack_type=attack_type,
                )

            problem = context.problems()
            if problem:
                raise InternalInconsistencyError(
                    f"Inconsistent {hook} context: {problem}",
                    hook=hook.value, skill_id=skill_id, attack_type=attack_type,
                )

            if result is HookResult.STOP:
                logger.debug(f"{skill_id} stopped {hook} dispatch")
                break

        return context

    def check_capability(self, hook: Hook, die: Die, attack_type: str,
                         attackers: List[Die], defenders: List[Die]) -> bool:
        """
        Ask a die's skills whether it may act in the given role.

        Args:
            hook: Hook.VALID_ATTACKER or Hook.VALID_TARGET

        Returns:
            False if any skill on the die vetoed it
        """
        context = CapabilityContext(
            attack_type=attack_type, die=die,
            attackers=list(attackers), defenders=list(defenders),
        )
        return self.dispatch(hook, [die], context).allowed

    def to_dict(self) -> List[dict]:
        """Registered skills with their hooks, for listings."""
        skills = []
        for name in self._order:
            definition = self._definitions.get(name)
            skills.append({
                'name': name,
                'abbreviation': definition.abbreviation if definition else None,
                'description': definition.description if definition else '',
                'module': definition.module if definition else None,
                'hooks': [hook.value for hook in self.hooks_for(name)],
            })
        return skills
