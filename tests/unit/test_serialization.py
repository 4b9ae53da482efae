"""
Unit tests for game, proposal and record serialization.
"""

import jsonschema
import pytest

from buttonmen.core.die import Die
from buttonmen.core.game import GameState
from buttonmen.core.models import AttackProposal
from buttonmen.core.serialization import (
    die_from_dict, die_to_dict, game_from_dict, game_to_dict, parse_recipe,
    proposal_from_dict, record_to_dict,
)


def game_payload(**overrides):
    payload = {
        'players': [
            {'player_id': 'p1', 'name': 'Alice', 'dice': [
                {'die_id': 'a1', 'sides': 20, 'value': 15},
                'z(12):7',
            ]},
            {'player_id': 'p2', 'name': 'Bob', 'dice': [
                {'die_id': 'b1', 'sides': 8, 'value': 3},
                '(X=6)',
            ]},
        ],
        'rng_seed': 7,
    }
    payload.update(overrides)
    return payload


class TestRecipes:
    """Test recipe parsing."""

    def test_skills_and_value(self):
        die = parse_recipe('zB(20):7')
        assert die.sides == 20
        assert die.value == 7
        assert die.skills == ['Speed', 'Berserk']

    def test_swing(self):
        die = parse_recipe('(X=7):3')
        assert die.swing_type == 'X'
        assert die.sides == 7
        assert die.value == 3

    def test_option(self):
        die = parse_recipe('t(4/8=8)')
        assert die.option_sides == (4, 8)
        assert die.sides == 8
        assert die.value is None

    def test_option_defaults_to_first_size(self):
        assert parse_recipe('(4/8)').sides == 4

    def test_recipe_round_trip(self):
        assert parse_recipe('zB(X=12)').recipe == 'zB(X=12)'

    @pytest.mark.parametrize('text', ['q(6)', '(abc)', '6', '(6):x'])
    def test_bad_recipes(self, text):
        with pytest.raises(ValueError):
            parse_recipe(text)


class TestDice:
    """Test die dicts."""

    def test_object_form(self):
        die = die_from_dict({'die_id': 'd1', 'sides': 8, 'value': 4,
                             'skills': ['Trip'], 'option_sides': [4, 8]})
        assert die.die_id == 'd1'
        assert die.option_sides == (4, 8)
        assert die.recipe == 't(4/8=8)'

    def test_to_dict(self):
        data = die_to_dict(Die(6, value=2, skills=['Speed'], die_id='d1'))
        assert data['recipe'] == 'z(6)'
        assert data['value'] == 2
        assert data['option_sides'] is None
        assert data['captured'] is False


class TestGames:
    """Test game payloads."""

    def test_build_game(self):
        game = game_from_dict(game_payload())

        assert game.state == GameState.START_TURN
        assert game.active_player_index == 0
        assert game.attacker.name == 'Alice'
        assert game.find_die('a1').value == 15
        assert game.players[0].dice[1].recipe_status == 'z(12):7'

    def test_unrolled_dice_are_rolled(self):
        game = game_from_dict(game_payload())
        swing = game.players[1].dice[1]
        assert 1 <= swing.value <= 6

    def test_seed_makes_rolls_reproducible(self):
        first = game_from_dict(game_payload())
        second = game_from_dict(game_payload())
        assert first.players[1].dice[1].value == second.players[1].dice[1].value

    def test_default_names(self):
        payload = game_payload()
        del payload['players'][1]['name']
        assert game_from_dict(payload).players[1].name == 'Player 2'

    def test_state_by_name(self):
        game = game_from_dict(game_payload(state='END_TURN', active_player_index=1))
        assert game.state == GameState.END_TURN
        assert game.attacker.name == 'Bob'

    def test_one_player_fails_schema(self):
        payload = game_payload()
        payload['players'] = payload['players'][:1]
        with pytest.raises(jsonschema.ValidationError):
            game_from_dict(payload)

    def test_unknown_state_fails_schema(self):
        with pytest.raises(jsonschema.ValidationError):
            game_from_dict(game_payload(state='LUNCH'))

    def test_duplicate_player_ids(self):
        payload = game_payload()
        payload['players'][1]['player_id'] = 'p1'
        with pytest.raises(ValueError):
            game_from_dict(payload)

    def test_duplicate_die_ids(self):
        payload = game_payload()
        payload['players'][1]['dice'][0]['die_id'] = 'a1'
        with pytest.raises(ValueError):
            game_from_dict(payload)

    def test_round_trip_keeps_ids_and_values(self):
        game = game_from_dict(game_payload())
        data = game_to_dict(game)
        again = game_from_dict(data)

        assert [d.die_id for d in again.all_dice()] == [d.die_id for d in game.all_dice()]
        assert [d.value for d in again.all_dice()] == [d.value for d in game.all_dice()]
        assert data['rng_seed'] == 7
        assert data['state'] == 'START_TURN'


class TestProposals:
    """Test proposals and records."""

    def test_proposal_from_ids(self):
        game = game_from_dict(game_payload())
        proposal = proposal_from_dict(
            {'attack_type': 'Power', 'attackers': ['a1'], 'defenders': ['b1']}, game)

        assert proposal.attackers == (game.find_die('a1'),)
        assert proposal.defenders == (game.find_die('b1'),)
        assert proposal.to_dict() == {'attack_type': 'Power', 'attackers': ['a1'], 'defenders': ['b1']}

    def test_unknown_die_id(self):
        game = game_from_dict(game_payload())
        with pytest.raises(ValueError):
            proposal_from_dict({'attack_type': 'Power', 'attackers': ['zz']}, game)

    def test_missing_attack_type(self):
        game = game_from_dict(game_payload())
        with pytest.raises(jsonschema.ValidationError):
            proposal_from_dict({'attackers': ['a1']}, game)

    def test_record_to_dict(self, engine_factory):
        attacker = Die(20, value=15, die_id='a1')
        defender = Die(8, value=3, die_id='b1')
        engine = engine_factory([attacker], [defender])

        record = engine.resolve(AttackProposal('Power', (attacker,), (defender,))).data
        data = record_to_dict(record)

        assert data['attack_type'] == 'Power'
        assert data['acting_player_id'] == 'p1'
        assert data['pre_attack_dice']['defender'][0]['die_id'] == 'b1'
        assert data['post_attack_dice']['defender'][0]['captured'] is True
        assert 'fire_cache' not in data
