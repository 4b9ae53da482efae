"""
Shared data models for the Button Men engine.

- DieView: immutable projection of a die, used in attack snapshots
- AttackProposal: an attack type plus the dice taking part in it
- AttackRecord: the pre/post snapshot pair of a resolved attack
- Event: notification published on a game's event bus
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from .die import Die


def generate_id(prefix: str) -> str:
    """
    Generate a unique ID with the given prefix.

    Args:
        prefix: Prefix for the ID (e.g., 'die', 'evt')

    Returns:
        String like 'die_a1b2c3d4e5f6'
    """
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DieView:
    """
    Read-only snapshot of a die at one point of an attack.

    This is what the action log consumes. The transitional fields are only set
    when the corresponding change happened during the attack.
    """
    die_id: str
    recipe: str
    value: Optional[int]
    max: int
    does_reroll: bool = True
    captured: bool = False
    out_of_play: bool = False
    skills: Tuple[str, ...] = ()
    recipe_before_splitting: Optional[str] = None
    recipe_before_growing: Optional[str] = None
    recipe_before_shrinking: Optional[str] = None
    value_after_trip_attack: Optional[int] = None

    @property
    def recipe_status(self) -> str:
        """Recipe and current value, e.g. 'zB(20):7'."""
        return f"{self.recipe}:{self.value}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'die_id': self.die_id,
            'recipe': self.recipe,
            'recipe_status': self.recipe_status,
            'value': self.value,
            'max': self.max,
            'does_reroll': self.does_reroll,
            'captured': self.captured,
            'out_of_play': self.out_of_play,
            'skills': list(self.skills),
        }
        for key in ('recipe_before_splitting', 'recipe_before_growing',
                    'recipe_before_shrinking', 'value_after_trip_attack'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class AttackProposal:
    """
    An attack type together with the attacking and defending dice.

    Produced by the attack search as a candidate or built by a caller as a
    proposal to resolve. Dice are compared by identity, so two dice showing
    the same value are different participants.
    """
    attack_type: str
    attackers: Tuple['Die', ...] = ()
    defenders: Tuple['Die', ...] = ()

    def dice(self) -> Tuple['Die', ...]:
        """All participating dice, attackers first."""
        return self.attackers + self.defenders

    def key(self) -> Tuple[str, frozenset, frozenset]:
        """Order-independent identity of the proposal."""
        return (
            self.attack_type,
            frozenset(id(d) for d in self.attackers),
            frozenset(id(d) for d in self.defenders),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, referring to dice by id."""
        return {
            'attack_type': self.attack_type,
            'attackers': [d.die_id for d in self.attackers],
            'defenders': [d.die_id for d in self.defenders],
        }


@dataclass(frozen=True)
class AttackRecord:
    """
    Immutable outcome of one resolved attack.

    Attributes:
        attack_type: Name of the attack type
        pre_attack: {'attacker': (DieView, ...), 'defender': (DieView, ...)} before the attack
        post_attack: Same shape after effects and capture hooks
        acting_player_id: Player who made the attack
        fire_cache: Optional fire turn-down details ({'fire_recipes', 'old_values', 'new_values'})
    """
    attack_type: str
    pre_attack: Dict[str, Tuple[DieView, ...]]
    post_attack: Dict[str, Tuple[DieView, ...]]
    acting_player_id: Optional[str] = None
    fire_cache: Optional[Dict[str, Any]] = None

    def to_params(self) -> Dict[str, Any]:
        """
        Convert to the params of an 'attack' action log entry.

        Returns:
            Dict with attack_type, pre_attack_dice, post_attack_dice and,
            when present, fire_cache
        """
        params = {
            'attack_type': self.attack_type,
            'pre_attack_dice': {
                side: [view.to_dict() for view in views]
                for side, views in self.pre_attack.items()
            },
            'post_attack_dice': {
                side: [view.to_dict() for view in views]
                for side, views in self.post_attack.items()
            },
        }
        if self.fire_cache:
            params['fire_cache'] = self.fire_cache
        return params


@dataclass
class Event:
    """
    Notification published on a game's event bus.

    Attributes:
        event_id: Unique identifier
        timestamp: When this event occurred
        event_type: Type of event (e.g., 'attack.resolved')
        actor_id: Player who caused this event
        data: Event-specific data
    """
    event_id: str
    timestamp: datetime
    event_type: str
    actor_id: Optional[str]
    data: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(event_type: str, data: Dict[str, Any],
               actor_id: Optional[str] = None,
               event_id: str = None) -> 'Event':
        """
        Create a new event.

        Args:
            event_type: Type of event
            data: Event data
            actor_id: Who caused this (optional)
            event_id: Optional specific ID

        Returns:
            New Event instance
        """
        return Event(
            event_id=event_id or generate_id('evt'),
            timestamp=now(),
            event_type=event_type,
            actor_id=actor_id,
            data=data
        )
