"""
JSON Schemas for structured action log params, one per action type.

Keys are snake_case. Only the fields a message actually reads are required;
extra fields are allowed so older entries with additional data still render.
"""

from typing import Any, Dict

NUMBER = {"type": "number"}
NULLABLE_INT = {"type": ["integer", "null"]}

DIE_INFO = {
    "type": "object",
    "properties": {
        "recipe": {"type": "string"},
        "recipe_status": {"type": "string"},
        "value": NULLABLE_INT,
        "max": {"type": "integer"},
        "does_reroll": {"type": "boolean"},
        "captured": {"type": "boolean"},
        "out_of_play": {"type": "boolean"},
        "recipe_before_splitting": {"type": "string"},
        "recipe_before_growing": {"type": "string"},
        "recipe_before_shrinking": {"type": "string"},
        "value_after_trip_attack": {"type": "integer"},
        "has_just_morphed": {"type": "boolean"},
        "force_report_die_size": {"type": "boolean"},
        "has_just_rerolled_ornery": {"type": "boolean"},
    },
    "required": ["recipe"],
}

ATTACK_DICE = {
    "type": "object",
    "properties": {
        "attacker": {"type": "array", "items": DIE_INFO},
        "defender": {"type": "array", "items": DIE_INFO},
    },
    "required": ["attacker", "defender"],
}

ROUND_SCORES = {"type": "array", "items": NUMBER, "minItems": 2}

ANY_OBJECT = {"type": "object"}


ACTION_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "attack": {
        "type": "object",
        "properties": {
            "attack_type": {"type": "string"},
            "pre_attack_dice": ATTACK_DICE,
            "post_attack_dice": ATTACK_DICE,
            "fire_cache": {
                "type": "object",
                "properties": {
                    "fire_recipes": {"type": "array", "items": {"type": "string"}},
                    "old_values": {"type": "array", "items": {"type": "integer"}},
                    "new_values": {"type": "array", "items": {"type": "integer"}},
                },
                "required": ["fire_recipes", "old_values", "new_values"],
            },
        },
        "required": ["attack_type", "pre_attack_dice", "post_attack_dice"],
    },
    "end_draw": {
        "type": "object",
        "properties": {
            "round_number": {"type": "integer"},
            "round_score_array": ROUND_SCORES,
        },
        "required": ["round_number", "round_score_array"],
    },
    "end_winner": {
        "type": "object",
        "properties": {
            "round_number": {"type": "integer"},
            "round_score_array": ROUND_SCORES,
            "result_forced": {"type": "boolean"},
        },
        "required": ["round_number", "round_score_array"],
    },
    "needs_firing": {
        "type": "object",
        "properties": {
            "attack_type": {"type": "string"},
            "attack_dice": {
                "type": "object",
                "properties": {
                    "attacker": {"type": "array", "items": {
                        "type": "object", "required": ["recipe_status"]}},
                    "defender": {"type": "array", "items": {
                        "type": "object", "required": ["recipe_status"]}},
                },
                "required": ["attacker", "defender"],
            },
        },
        "required": ["attack_type", "attack_dice"],
    },
    "fire_cancel": ANY_OBJECT,
    "choose_die_values": {
        "type": "object",
        "properties": {
            "round_number": {"type": "integer"},
            "swing_values": {"type": "object", "additionalProperties": {"type": "integer"}},
            "option_values": {"type": "object", "additionalProperties": {"type": "integer"}},
        },
        "required": ["round_number", "swing_values", "option_values"],
    },
    "choose_swing": {
        "type": "object",
        "properties": {
            "round_number": {"type": "integer"},
            "swing_values": {"type": "object", "additionalProperties": {"type": "integer"}},
        },
        "required": ["round_number", "swing_values"],
    },
    "reroll_chance": {
        "type": "object",
        "properties": {
            "gained_initiative": {"type": "boolean"},
            "pre_reroll": {"type": "object", "required": ["recipe", "value"]},
            "post_reroll": {"type": "object", "required": ["value"]},
        },
        "required": ["gained_initiative", "pre_reroll", "post_reroll"],
    },
    "turndown_focus": {
        "type": "object",
        "properties": {
            "pre_turndown": {"type": "array", "items": {
                "type": "object", "required": ["recipe", "value"]}},
            "post_turndown": {"type": "array", "items": {
                "type": "object", "required": ["value"]}},
        },
        "required": ["pre_turndown", "post_turndown"],
    },
    "init_decline": ANY_OBJECT,
    "add_reserve": {
        "type": "object",
        "properties": {
            "die": {"type": "object", "required": ["recipe"]},
        },
        "required": ["die"],
    },
    "decline_reserve": ANY_OBJECT,
    "add_auxiliary": {
        "type": "object",
        "properties": {
            "round_number": {"type": "integer"},
            "die": {"type": "object", "required": ["recipe"]},
        },
        "required": ["round_number", "die"],
    },
    "decline_auxiliary": ANY_OBJECT,
    "determine_initiative": {
        "type": "object",
        "properties": {
            "initiative_winner_id": {"type": "string"},
            "round_number": {"type": "integer"},
            "player_data": {
                "type": "object",
                "additionalProperties": {
                    "type": "object",
                    "properties": {
                        "initiative_dice": {"type": "array", "items": {
                            "type": "object",
                            "properties": {
                                "recipe": {"type": "string"},
                                "recipe_status": {"type": "string"},
                                "included": {"type": "boolean"},
                            },
                            "required": ["recipe", "recipe_status", "included"],
                        }},
                        "slow_button": {"type": "boolean"},
                    },
                    "required": ["initiative_dice", "slow_button"],
                },
            },
            "tied_player_ids": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["initiative_winner_id", "round_number", "player_data"],
    },
    "play_another_turn": {
        "type": "object",
        "properties": {
            "cause": {"type": "string"},
        },
        "required": ["cause"],
    },
    "ornery_reroll": {
        "type": "object",
        "properties": {
            "pre_reroll_die_info": {"type": "array", "items": DIE_INFO},
            "post_reroll_die_info": {"type": "array", "items": DIE_INFO},
        },
        "required": ["pre_reroll_die_info", "post_reroll_die_info"],
    },
}
