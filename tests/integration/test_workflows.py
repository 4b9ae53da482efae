"""
Integration tests for complete workflows.
"""

import pytest

from buttonmen.core.engine import RulesEngine
from buttonmen.core.game import GameState
from buttonmen.core.serialization import game_from_dict, game_to_dict, proposal_from_dict


@pytest.fixture
def payload():
    """Alice has a Speed die and a Berserk die; Bob has four small dice."""
    return {
        'players': [
            {'player_id': 'p1', 'name': 'Alice', 'dice': [
                {'die_id': 'speed', 'sides': 20, 'value': 7, 'skills': ['Speed']},
                {'die_id': 'berserk', 'sides': 12, 'value': 8, 'skills': ['Berserk']},
            ]},
            {'player_id': 'p2', 'name': 'Bob', 'dice': [
                {'die_id': 'two', 'sides': 4, 'value': 2},
                {'die_id': 'five_a', 'sides': 6, 'value': 5},
                {'die_id': 'five_b', 'sides': 6, 'value': 5},
                {'die_id': 'three', 'sides': 4, 'value': 3},
            ]},
        ],
        'rng_seed': 2024,
    }


def test_find_then_resolve_speed(payload, registries):
    """Enumerate, pick a proposal, resolve it and read the log."""
    engine = RulesEngine(game_from_dict(payload), registries)

    assert engine.list_legal_attack_types() == ['Power', 'Speed', 'Berserk', 'Surrender']

    attacks = engine.find_all_attacks()
    assert len(attacks['Speed']) == 2
    # 8 = 5 + 3, with either five
    assert {tuple(d.die_id for d in p.defenders) for p in attacks['Berserk']} == {
        ('five_a', 'three'), ('five_b', 'three'),
    }

    speed_attack = attacks['Speed'][0]
    result = engine.resolve(speed_attack)
    assert result.success

    game = engine.game
    captured = [d.die_id for d in game.players[0].captured]
    assert captured == [d.die_id for d in speed_attack.defenders]
    assert len(game.players[1].dice) == 2

    messages = engine.extensions['action_log'].messages()
    assert len(messages) == 1
    assert messages[0].startswith('Alice performed Speed attack using [z(20):7] against [')


def test_turns_alternate_through_serialized_state(payload, registries):
    """Each request rebuilds the game from the previous answer."""
    engine = RulesEngine(game_from_dict(payload), registries)
    proposal = proposal_from_dict(
        {'attack_type': 'Berserk', 'attackers': ['berserk'], 'defenders': ['five_a', 'three']},
        engine.game,
    )
    assert engine.resolve(proposal).success

    data = game_to_dict(engine.game)
    berserk = [d for d in data['players'][0]['dice'] if d['die_id'] == 'berserk'][0]
    assert berserk['sides'] == 6
    assert berserk['skills'] == []

    # Bob's turn
    data['active_player_index'] = 1
    bob_engine = RulesEngine(game_from_dict(data), registries)
    assert bob_engine.game.attacker.name == 'Bob'
    for proposal in bob_engine.find_attacks('Power'):
        assert proposal.attackers[0] in bob_engine.game.players[1].dice
        assert proposal.defenders[0] in bob_engine.game.players[0].dice


def test_games_do_not_share_state(payload, registries):
    """Two engines over the same registries stay independent."""
    first = RulesEngine(game_from_dict(payload), registries)
    second = RulesEngine(game_from_dict(payload), registries)

    proposal = first.find_attacks('Speed')[0]
    first.resolve(proposal)

    assert len(first.game.players[1].dice) == 2
    assert len(second.game.players[1].dice) == 4
    assert second.extensions['action_log'].messages() == []
    assert first.event_bus is not second.event_bus


def test_end_of_turn_state_allows_nothing(payload, registries):
    payload['state'] = GameState.END_TURN.name
    engine = RulesEngine(game_from_dict(payload), registries)

    assert engine.list_legal_attack_types() == []
    assert engine.find_attacks('Power') == []
    assert engine.find_all_attacks() == {}


def test_unknown_attack_type_lookup(payload, registries):
    engine = RulesEngine(game_from_dict(payload), registries)
    with pytest.raises(ValueError):
        engine.find_attacks('Shadow')


def test_every_found_attack_validates(payload, registries):
    """Search results always pass validation."""
    engine = RulesEngine(game_from_dict(payload), registries)
    for proposals in engine.find_all_attacks().values():
        for proposal in proposals:
            assert engine.validate(proposal).success


def test_default_registries(payload):
    """Without explicit registries the engine uses every discovered module."""
    engine = RulesEngine(game_from_dict(payload))
    assert 'action_log' in engine.extensions
    assert engine.registries.skills.skill_names() == ['Speed', 'Trip', 'Berserk']
