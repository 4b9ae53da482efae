"""
JSON-compatible serialization of games, proposals and attack records.

Incoming payloads are validated against GAME_SCHEMA / PROPOSAL_SCHEMA before
anything is built from them. Proposals refer to dice by die_id.

A die can be given either as an object or as a recipe string such as
'zB(20):7', '(X=7)', '(4/8=8):3'. Skill letters are the recipe letters in
die.SKILL_CODES.
"""

from typing import Any, Dict, Optional
import re

import jsonschema

from .config import get_config
from .die import Die, SKILL_CODES
from .game import Game, GameState, Player
from .models import AttackProposal, AttackRecord
from .roller import DiceRoller

SKILLS_BY_CODE = {code: skill for skill, code in SKILL_CODES.items()}

RECIPE_PATTERN = re.compile(r'^(?P<skills>[A-Za-z]*)\((?P<size>[^)]+)\)(?::(?P<value>\d+))?$')
SWING_PATTERN = re.compile(r'^(?P<swing>[A-Z])=(?P<sides>\d+)$')
OPTION_PATTERN = re.compile(r'^(?P<a>\d+)/(?P<b>\d+)(?:=(?P<sides>\d+))?$')


DIE_SCHEMA = {
    "oneOf": [
        {"type": "string", "pattern": RECIPE_PATTERN.pattern},
        {
            "type": "object",
            "properties": {
                "die_id": {"type": "string"},
                "sides": {"type": "integer", "minimum": 1},
                "value": {"type": ["integer", "null"], "minimum": 1},
                "skills": {"type": "array", "items": {"type": "string"}},
                "swing_type": {"type": ["string", "null"]},
                "option_sides": {
                    "oneOf": [
                        {"type": "null"},
                        {"type": "array", "items": {"type": "integer", "minimum": 1},
                         "minItems": 2, "maxItems": 2},
                    ]
                },
                "does_reroll": {"type": "boolean"},
                "out_of_play": {"type": "boolean"},
                "captured": {"type": "boolean"},
                "captured_by": {"type": ["string", "null"]},
            },
            "required": ["sides"],
        },
    ]
}

PLAYER_SCHEMA = {
    "type": "object",
    "properties": {
        "player_id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "dice": {"type": "array", "items": DIE_SCHEMA},
        "captured": {"type": "array", "items": DIE_SCHEMA},
    },
    "required": ["player_id", "dice"],
}

GAME_SCHEMA = {
    "type": "object",
    "properties": {
        "players": {"type": "array", "items": PLAYER_SCHEMA, "minItems": 2, "maxItems": 2},
        "active_player_index": {"type": "integer", "minimum": 0, "maximum": 1},
        "state": {"enum": [state.name for state in GameState]},
        "round_number": {"type": "integer", "minimum": 1},
        "rng_seed": {"type": ["integer", "null"]},
    },
    "required": ["players"],
}

PROPOSAL_SCHEMA = {
    "type": "object",
    "properties": {
        "attack_type": {"type": "string", "minLength": 1},
        "attackers": {"type": "array", "items": {"type": "string"}},
        "defenders": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["attack_type"],
}


# ========== Dice ==========

def parse_recipe(text: str) -> Die:
    """
    Build a die from recipe notation.

    Args:
        text: e.g. 'zB(20)', 'z(20):7', '(X=7):3', '(4/8=8)'

    Returns:
        New Die (value None unless ':value' is given)

    Raises:
        ValueError: If the recipe cannot be parsed
    """
    match = RECIPE_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"Cannot parse die recipe '{text}'")

    skills = []
    for code in match.group('skills'):
        if code not in SKILLS_BY_CODE:
            raise ValueError(f"Unknown skill letter '{code}' in recipe '{text}'")
        skills.append(SKILLS_BY_CODE[code])

    size = match.group('size')
    swing_type = None
    option_sides = None
    if size.isdigit():
        sides = int(size)
    elif SWING_PATTERN.match(size):
        swing = SWING_PATTERN.match(size)
        swing_type = swing.group('swing')
        sides = int(swing.group('sides'))
    elif OPTION_PATTERN.match(size):
        option = OPTION_PATTERN.match(size)
        option_sides = (int(option.group('a')), int(option.group('b')))
        sides = int(option.group('sides') or option.group('a'))
    else:
        raise ValueError(f"Cannot parse die size '{size}' in recipe '{text}'")

    value = match.group('value')
    return Die(
        sides=sides,
        value=int(value) if value else None,
        skills=skills,
        swing_type=swing_type,
        option_sides=option_sides,
    )


def die_from_dict(data: Any) -> Die:
    if isinstance(data, str):
        return parse_recipe(data)

    kwargs = {
        key: data[key]
        for key in ('sides', 'value', 'swing_type', 'does_reroll',
                    'out_of_play', 'captured', 'captured_by', 'die_id')
        if key in data
    }
    if data.get('option_sides'):
        kwargs['option_sides'] = tuple(data['option_sides'])
    return Die(skills=list(data.get('skills', [])), **kwargs)


def die_to_dict(die: Die) -> Dict[str, Any]:
    return {
        'die_id': die.die_id,
        'recipe': die.recipe,
        'sides': die.sides,
        'value': die.value,
        'skills': list(die.skills),
        'swing_type': die.swing_type,
        'option_sides': list(die.option_sides) if die.option_sides else None,
        'does_reroll': die.does_reroll,
        'out_of_play': die.out_of_play,
        'captured': die.captured,
        'captured_by': die.captured_by,
    }


# ========== Games ==========

def game_from_dict(data: Dict[str, Any], roller: Optional[DiceRoller] = None) -> Game:
    """
    Build a game from a payload.

    Dice without a value are rolled with the game's roller. The roller is
    seeded from the payload's rng_seed, falling back to RNG_SEED.

    Raises:
        jsonschema.ValidationError: If the payload does not match GAME_SCHEMA
        ValueError: If a die is invalid or die ids repeat
    """
    jsonschema.validate(data, GAME_SCHEMA)

    if roller is None:
        seed = data.get('rng_seed')
        roller = DiceRoller(seed if seed is not None else get_config().rng_seed)

    players = []
    for index, player_data in enumerate(data['players']):
        players.append(Player(
            player_id=player_data['player_id'],
            name=player_data.get('name', f"Player {index + 1}"),
            dice=[die_from_dict(d) for d in player_data['dice']],
            captured=[die_from_dict(d) for d in player_data.get('captured', [])],
        ))

    if players[0].player_id == players[1].player_id:
        raise ValueError("Players need distinct player ids")

    game = Game(
        players=players,
        active_player_index=data.get('active_player_index', 0),
        state=GameState[data.get('state', GameState.START_TURN.name)],
        round_number=data.get('round_number', 1),
        roller=roller,
    )

    die_ids = [d.die_id for d in game.all_dice()]
    if len(set(die_ids)) != len(die_ids):
        raise ValueError("Die ids must be unique within a game")

    for die in game.all_dice():
        if die.value is None and not die.out_of_play:
            die.roll(game.roller)

    return game


def game_to_dict(game: Game) -> Dict[str, Any]:
    return {
        'players': [
            {
                'player_id': player.player_id,
                'name': player.name,
                'dice': [die_to_dict(d) for d in player.dice],
                'captured': [die_to_dict(d) for d in player.captured],
            }
            for player in game.players
        ],
        'active_player_index': game.active_player_index,
        'state': game.state.name,
        'round_number': game.round_number,
        'rng_seed': game.roller.seed,
    }


# ========== Proposals and records ==========

def proposal_from_dict(data: Dict[str, Any], game: Game) -> AttackProposal:
    """
    Build a proposal from a payload, looking dice up by id.

    Raises:
        jsonschema.ValidationError: If the payload does not match PROPOSAL_SCHEMA
        ValueError: If a die id is not in any roster
    """
    jsonschema.validate(data, PROPOSAL_SCHEMA)

    def lookup(die_id: str) -> Die:
        die = game.find_die(die_id)
        if die is None:
            raise ValueError(f"No die with id '{die_id}' in play")
        return die

    return AttackProposal(
        attack_type=data['attack_type'],
        attackers=tuple(lookup(i) for i in data.get('attackers', [])),
        defenders=tuple(lookup(i) for i in data.get('defenders', [])),
    )


def proposal_to_dict(proposal: AttackProposal) -> Dict[str, Any]:
    return proposal.to_dict()


def record_to_dict(record: AttackRecord) -> Dict[str, Any]:
    data = record.to_params()
    data['acting_player_id'] = record.acting_player_id
    return data
