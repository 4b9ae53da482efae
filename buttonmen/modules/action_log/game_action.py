"""
GameAction: one entry of a game's action log.

Entries are rendered to text on demand with friendly_message(). Each action
type has its own renderer; the mapping between the two is GameAction.RENDERERS.

Params are normally a dict matching the action type's schema (schemas.py).
Entries written before structured params existed carry a plain string, which
is rendered literally.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import json
import logging

import jsonschema

from ...core.game import GameState
from .schemas import ACTION_SCHEMAS

logger = logging.getLogger(__name__)


@dataclass
class RenderContext:
    """Who is who, and where the game is now, at render time."""
    player_names: Dict[str, str]
    round_number: int
    game_state: int

    def name(self, player_id: Any) -> str:
        return self.player_names.get(player_id, str(player_id))


def _number(value: Any) -> str:
    """Print whole floats without a fractional part (scores like 30.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _append(messages: List[str], message: str) -> None:
    if message:
        messages.append(message)


# ========== Per-die descriptions ==========

def message_size_change(pre: Dict[str, Any], post: Dict[str, Any]) -> str:
    if pre.get('max') != post.get('max'):
        return f"changed size from {pre.get('max')} to {post.get('max')} sides"
    if pre.get('force_report_die_size') or post.get('force_report_die_size'):
        return 'remained the same size'
    return ''


def message_recipe_change(pre: Dict[str, Any], post: Dict[str, Any], show_from: bool = True) -> str:
    if pre['recipe'] == post['recipe']:
        return ''
    message = 'recipe changed'
    if show_from:
        message += f" from {pre['recipe']}"
    return message + f" to {post['recipe']}"


def message_value_change(pre: Dict[str, Any], post: Dict[str, Any]) -> str:
    if post.get('does_reroll', True):
        return f"rerolled {pre.get('value')} => {post.get('value')}"
    return 'does not reroll'


def message_capture(post: Dict[str, Any]) -> str:
    return 'was captured' if post.get('captured') else 'was not captured'


def message_out_of_play(pre: Dict[str, Any], post: Dict[str, Any]) -> str:
    if post.get('out_of_play') and not pre.get('out_of_play'):
        return 'was taken out of play'
    return ''


def message_grow_shrink(info: Dict[str, Any]) -> str:
    if info.get('recipe_before_growing'):
        return f"{info['recipe_before_growing']} which grew into "
    if info.get('recipe_before_shrinking'):
        return f"{info['recipe_before_shrinking']} which shrunk into "
    return ''


def message_split(pre_attackers: List[Dict[str, Any]], post_attackers: List[Dict[str, Any]]) -> str:
    """One attacker that split into several dice."""
    before = pre_attackers[0]
    changed = ''
    first = post_attackers[0]
    if first.get('recipe_before_splitting') and before['recipe'] != first['recipe_before_splitting']:
        changed = f" changed to {first['recipe_before_splitting']}, which then"

    parts = [
        f"{message_grow_shrink(info)}{info['recipe']} showing {info.get('value')}"
        for info in post_attackers
    ]
    return (f"Attacker {before['recipe']} showing {before.get('value')}{changed} split into: "
            f"{', '.join(parts[:-1])}, and {parts[-1]}")


def pre_attack_message(attackers: List[str], defenders: List[str]) -> str:
    message = ''
    if attackers:
        message += f" using [{','.join(attackers)}]"
    if defenders:
        message += f" against [{','.join(defenders)}]"
    return message


def message_defender(pre_dice: Dict[str, list], post_dice: Dict[str, list],
                     defender_rerolls_early: bool) -> str:
    messages = []
    for index, pre in enumerate(pre_dice['defender']):
        post = post_dice['defender'][index]
        events: List[str] = []
        _append(events, message_recipe_change(pre, post, show_from=False))
        if defender_rerolls_early or not post.get('captured'):
            _append(events, message_value_change(pre, post))
        _append(events, message_capture(post))
        _append(events, message_out_of_play(pre, post))
        messages.append(f"Defender {pre['recipe']} {', '.join(events)}")
    return '; '.join(messages)


def message_attacker(pre_dice: Dict[str, list], post_dice: Dict[str, list]) -> str:
    if len(pre_dice['attacker']) < len(post_dice['attacker']):
        return message_split(pre_dice['attacker'], post_dice['attacker'])

    messages = []
    for index, pre in enumerate(pre_dice['attacker']):
        post = post_dice['attacker'][index]
        events: List[str] = []
        _append(events, message_size_change(pre, post))
        _append(events, message_recipe_change(pre, post))
        _append(events, message_value_change(pre, post))
        _append(events, message_out_of_play(pre, post))
        if events:
            messages.append(f"Attacker {pre['recipe']} {', '.join(events)}")
    return '; '.join(messages)


def fire_turndown_message(fire_cache: Dict[str, list], acting_name: str) -> str:
    changes = [
        f"{recipe} from {old} to {new}"
        for recipe, old, new in zip(fire_cache['fire_recipes'],
                                    fire_cache['old_values'],
                                    fire_cache['new_values'])
        if old != new
    ]
    return f"{acting_name} turned down fire dice: {', '.join(changes)}; "


class GameAction:
    """
    Record of an action which happened during a game.

    Attributes:
        game_state: GameState of the game when the action occurred
        action_type: Type of action which was taken (e.g. 'attack')
        acting_player_id: Player who took the action
        params: Action details; format depends on action_type
    """

    def __init__(self, game_state: int, action_type: str, acting_player_id: Optional[str],
                 params: Union[Dict[str, Any], str]):
        if not params:
            raise ValueError("Action log params can't be empty")
        self.game_state = int(game_state)
        self.action_type = action_type
        self.acting_player_id = acting_player_id
        self.params = params

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_state': self.game_state,
            'action_type': self.action_type,
            'acting_player_id': self.acting_player_id,
            'params': self.params,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameAction':
        return cls(data['game_state'], data['action_type'],
                   data.get('acting_player_id'), data['params'])

    def friendly_message(self, player_names: Dict[str, str], round_number: int,
                         game_state: int) -> str:
        """
        Creates a human-readable action log message.

        Args:
            player_names: Map of player id to display name
            round_number: Current round (some entries reveal more in later rounds)
            game_state: Current game state (same)

        Returns:
            Message text; may be empty for entries that must stay hidden for now
        """
        out = RenderContext(player_names, round_number, int(game_state))

        if isinstance(self.params, str):
            return self._legacy_message(out)

        renderer = self.RENDERERS.get(self.action_type)
        if renderer is None:
            return f"Internal error: could not print action log entry of type: {self.action_type}"

        try:
            jsonschema.validate(self.params, ACTION_SCHEMAS[self.action_type])
        except jsonschema.ValidationError as e:
            logger.warning(f"Malformed {self.action_type} log entry, printing it as is: {e.message}")
            return self._passthrough()

        return renderer(self, out)

    def _legacy_message(self, out: RenderContext) -> str:
        if self.action_type == 'attack':
            return f"{out.name(self.acting_player_id)} {self.params}"
        if self.action_type == 'end_winner':
            return f"End of round: {out.name(self.acting_player_id)} {self.params}"
        return self.params

    def _passthrough(self) -> str:
        if isinstance(self.params.get('message'), str):
            return self.params['message']
        return json.dumps(self.params, sort_keys=True, default=str)

    # ========== Renderers ==========

    def _message_end_draw(self, out: RenderContext) -> str:
        scores = self.params['round_score_array']
        return (f"Round {self.params['round_number']} ended in a draw "
                f"({_number(scores[0])} vs. {_number(scores[1])})")

    def _message_end_winner(self, out: RenderContext) -> str:
        message = (f"End of round: {out.name(self.acting_player_id)} "
                   f"won round {self.params['round_number']}")
        if self.params.get('result_forced'):
            return message + ' because opponent surrendered'
        scores = self.params['round_score_array']
        return message + f" ({_number(max(scores))} vs. {_number(min(scores))})"

    def _message_needs_firing(self, out: RenderContext) -> str:
        acting_name = out.name(self.acting_player_id)
        attack_dice = self.params['attack_dice']
        attackers = [info['recipe_status'] for info in attack_dice['attacker']]
        defenders = [info['recipe_status'] for info in attack_dice['defender']]
        return (f"{acting_name} chose to perform a {self.params['attack_type']} attack"
                f"{pre_attack_message(attackers, defenders)}; "
                f"{acting_name} must turn down fire dice to complete this attack")

    def _message_fire_cancel(self, out: RenderContext) -> str:
        return f"{out.name(self.acting_player_id)} chose to abandon this attack and start over"

    def _message_attack(self, out: RenderContext) -> str:
        attack_type = self.params['attack_type']
        pre_dice = self.params['pre_attack_dice']
        post_dice = self.params['post_attack_dice']
        acting_name = out.name(self.acting_player_id)

        if attack_type == 'Pass':
            return f"{acting_name} passed"
        if attack_type == 'Surrender':
            return f"{acting_name} surrendered"

        # Trip reports the defender's reroll before the capture
        defender_rerolls_early = attack_type == 'Trip'

        fire_cache = self.params.get('fire_cache')
        if fire_cache:
            message = fire_turndown_message(fire_cache, acting_name)
        else:
            attackers = [info.get('recipe_status', info['recipe']) for info in pre_dice['attacker']]
            defenders = [info.get('recipe_status', info['recipe']) for info in pre_dice['defender']]
            message = (f"{acting_name} performed {attack_type} attack"
                       f"{pre_attack_message(attackers, defenders)}; ")

        defender_message = message_defender(pre_dice, post_dice, defender_rerolls_early)

        if not defender_rerolls_early:
            return message + defender_message + '; ' + message_attacker(pre_dice, post_dice)

        # Only Trip gets here, so there is exactly one attacker
        mid_dice = deepcopy(pre_dice)
        post_attackers = post_dice['attacker']
        if post_attackers and post_attackers[0].get('value_after_trip_attack') is not None:
            mid_dice['attacker'][0]['value'] = post_attackers[0]['value_after_trip_attack']

        message += message_attacker(pre_dice, mid_dice)
        message += '; ' + defender_message

        splitting_after_trip = len(mid_dice['attacker']) != len(post_attackers)
        morphing_after_trip = bool(post_attackers and post_attackers[0].get('has_just_morphed'))
        if splitting_after_trip or morphing_after_trip:
            message += '; ' + message_attacker(mid_dice, post_dice)

        return message

    def _message_choose_die_values(self, out: RenderContext) -> str:
        message = f"{out.name(self.acting_player_id)} set"

        # Values stay hidden while the opponent may still be choosing
        if (out.round_number != self.params['round_number'] or
                out.game_state != GameState.SPECIFY_DICE):
            die_messages = []
            swing_values = self.params['swing_values']
            if swing_values:
                swings = ', '.join(f"{swing}={value}" for swing, value in swing_values.items())
                die_messages.append(f"swing values: {swings}")
            option_values = self.params['option_values']
            if option_values:
                options = ', '.join(
                    recipe.replace(')', f"={value})") for recipe, value in option_values.items()
                )
                die_messages.append(f"option dice: {options}")
            message += ' ' + ' and '.join(die_messages)
        else:
            message += ' die sizes'
        return message

    def _message_choose_swing(self, out: RenderContext) -> str:
        message = f"{out.name(self.acting_player_id)} set swing values"
        if (out.round_number != self.params['round_number'] or
                out.game_state != GameState.SPECIFY_DICE):
            swings = ', '.join(
                f"{swing}={value}" for swing, value in self.params['swing_values'].items()
            )
            message += f": {swings}"
        return message

    def _message_reroll_chance(self, out: RenderContext) -> str:
        message = f"{out.name(self.acting_player_id)} rerolled a chance die"
        if self.params['gained_initiative']:
            message += ' and gained initiative'
        else:
            message += ', but did not gain initiative'
        pre = self.params['pre_reroll']
        return message + f": {pre['recipe']} rerolled {pre['value']} => {self.params['post_reroll']['value']}"

    def _message_turndown_focus(self, out: RenderContext) -> str:
        post = self.params['post_turndown']
        focus = ', '.join(
            f"{die['recipe']} from {die['value']} to {post[index]['value']}"
            for index, die in enumerate(self.params['pre_turndown'])
        )
        return (f"{out.name(self.acting_player_id)} gained initiative by turning down "
                f"focus dice: {focus}")

    def _message_init_decline(self, out: RenderContext) -> str:
        return (f"{out.name(self.acting_player_id)} chose not to try to gain initiative "
                f"using chance or focus dice")

    def _message_add_reserve(self, out: RenderContext) -> str:
        return f"{out.name(self.acting_player_id)} added a reserve die: {self.params['die']['recipe']}"

    def _message_decline_reserve(self, out: RenderContext) -> str:
        return f"{out.name(self.acting_player_id)} chose not to add a reserve die"

    def _message_add_auxiliary(self, out: RenderContext) -> str:
        # While players are still choosing, making a choice at all leaks information
        if (out.round_number != self.params['round_number'] or
                out.game_state != GameState.CHOOSE_AUXILIARY_DICE):
            return (f"{out.name(self.acting_player_id)} chose to use auxiliary die "
                    f"{self.params['die']['recipe']} in this game")
        return ''

    def _message_decline_auxiliary(self, out: RenderContext) -> str:
        return (f"{out.name(self.acting_player_id)} chose not to use auxiliary dice in this game: "
                f"neither player will get an auxiliary die")

    def _message_determine_initiative(self, out: RenderContext) -> str:
        messages = [
            f"{out.name(self.params['initiative_winner_id'])} won initiative for round "
            f"{self.params['round_number']}"
        ]

        rolls = []
        slow_button_players = []
        slow_dice: Dict[str, List[str]] = {}
        for player_id, player_data in self.params['player_data'].items():
            dice = player_data['initiative_dice']
            slow_dice[player_id] = [die['recipe'] for die in dice if not die['included']]
            rolls.append(
                f"{out.name(player_id)} rolled [{', '.join(die['recipe_status'] for die in dice)}]"
            )
            if player_data['slow_button']:
                slow_button_players.append(player_id)
        messages.append(f"Initial die values: {', '.join(rolls)}")

        # Two-player game
        if len(slow_button_players) == 2:
            messages.append('Both buttons have the "slow" button special, '
                            'and cannot win initiative normally')
        elif len(slow_button_players) == 1:
            messages.append(f"{out.name(slow_button_players[0])}'s button has the \"slow\" "
                            f"button special, and cannot win initiative normally")
        else:
            for player_id, recipes in slow_dice.items():
                if recipes:
                    messages.append(
                        f"{out.name(player_id)} has dice which are not counted for initiative "
                        f"due to die skills: [{', '.join(recipes)}]"
                    )

        if 'tied_player_ids' in self.params:
            messages.append('Initiative was determined by a coin flip')

        return '. '.join(messages) + '.'

    def _message_play_another_turn(self, out: RenderContext) -> str:
        message = f"{out.name(self.acting_player_id)} gets another turn"
        if self.params['cause'] == 'TimeAndSpace':
            message += ' because a Time and Space die rolled odd'
        return message

    def _message_ornery_reroll(self, out: RenderContext) -> str:
        messages = []
        pre_info = self.params['pre_reroll_die_info']
        for index, post in enumerate(self.params['post_reroll_die_info']):
            if not post.get('has_just_rerolled_ornery'):
                continue
            pre = pre_info[index]
            events: List[str] = []
            _append(events, message_size_change(pre, post))
            _append(events, message_recipe_change(pre, post))
            _append(events, message_value_change(pre, post))
            if events:
                messages.append(f"{pre['recipe']} {', '.join(events)}")

        if not messages:
            return ''
        return (f"{out.name(self.acting_player_id)}'s idle ornery dice rerolled at end of turn: "
                f"{'; '.join(messages)}")

    RENDERERS = {
        'attack': _message_attack,
        'end_draw': _message_end_draw,
        'end_winner': _message_end_winner,
        'needs_firing': _message_needs_firing,
        'fire_cancel': _message_fire_cancel,
        'choose_die_values': _message_choose_die_values,
        'choose_swing': _message_choose_swing,
        'reroll_chance': _message_reroll_chance,
        'turndown_focus': _message_turndown_focus,
        'init_decline': _message_init_decline,
        'add_reserve': _message_add_reserve,
        'decline_reserve': _message_decline_reserve,
        'add_auxiliary': _message_add_auxiliary,
        'decline_auxiliary': _message_decline_auxiliary,
        'determine_initiative': _message_determine_initiative,
        'play_another_turn': _message_play_another_turn,
        'ornery_reroll': _message_ornery_reroll,
    }

    def __repr__(self) -> str:
        return f"GameAction({self.action_type!r}, player={self.acting_player_id!r})"
