"""
Action Log Module - human-readable history of a game.

Provides:
- GameAction: one log entry with a friendly_message() renderer
- ActionLog: per-engine log that turns every resolved attack into an entry

Usage:
    engine = RulesEngine(game)
    log = engine.extensions['action_log']
    engine.resolve(proposal)
    log.messages()  # ['Alice performed Power attack using [(20):15] against [(8):3]; ...']
"""

from typing import Dict, List, Optional, TYPE_CHECKING
import logging

from ...core.models import Event
from ..base import Module
from .game_action import GameAction

if TYPE_CHECKING:
    from ...core.engine import RulesEngine

logger = logging.getLogger(__name__)


class ActionLog:
    """
    Action log for one game.

    Subscribes to the engine's 'attack.resolved' events; other entries
    (initiative, swing choices, round ends) are added by the caller.
    """

    def __init__(self, engine: 'RulesEngine'):
        self.engine = engine
        self.actions: List[GameAction] = []
        engine.event_bus.subscribe('attack.resolved', self.on_attack_resolved)

    def on_attack_resolved(self, event: Event) -> None:
        record = event.data['record']
        self.add(GameAction(
            game_state=event.data['game_state'],
            action_type='attack',
            acting_player_id=event.actor_id,
            params=record.to_params(),
        ))

    def add(self, action: GameAction) -> None:
        self.actions.append(action)
        logger.debug(f"Logged {action.action_type} action")

    def messages(self, player_names: Optional[Dict[str, str]] = None,
                 round_number: Optional[int] = None,
                 game_state: Optional[int] = None) -> List[str]:
        """
        Render every entry, oldest first.

        Defaults come from the engine's game. Entries that render empty
        (hidden for now) are left out.
        """
        game = self.engine.game
        if player_names is None:
            player_names = game.player_names()
        if round_number is None:
            round_number = game.round_number
        if game_state is None:
            game_state = game.state

        rendered = [
            action.friendly_message(player_names, round_number, game_state)
            for action in self.actions
        ]
        return [message for message in rendered if message]

    def to_list(self) -> List[dict]:
        return [action.to_dict() for action in self.actions]


class ActionLogModule(Module):
    """Keeps a readable log of resolved attacks for every engine."""

    @property
    def name(self) -> str:
        return "action_log"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def display_name(self) -> str:
        return "Action Log"

    @property
    def description(self) -> str:
        return "Human-readable messages for attacks and other game actions"

    def initialize(self, engine: 'RulesEngine') -> None:
        engine.extensions['action_log'] = ActionLog(engine)


__all__ = ['ActionLog', 'ActionLogModule', 'GameAction']
