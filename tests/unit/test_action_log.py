"""
Unit tests for action log entries and their messages.
"""

import pytest

from buttonmen.core.die import Die
from buttonmen.core.game import GameState
from buttonmen.core.models import AttackProposal
from buttonmen.modules.action_log import GameAction
from buttonmen.modules.action_log.game_action import message_split

NAMES = {'p1': 'Alice', 'p2': 'Bob'}


def render(action_type, params, acting_player_id='p1', round_number=1,
           game_state=GameState.START_TURN):
    action = GameAction(GameState.START_TURN, action_type, acting_player_id, params)
    return action.friendly_message(NAMES, round_number, game_state)


def die_info(recipe, value, **extra):
    info = {'recipe': recipe, 'recipe_status': f"{recipe}:{value}", 'value': value,
            'max': int(recipe.split('(')[1].rstrip(')').split('=')[-1])}
    info.update(extra)
    return info


class TestAttackMessages:
    """Attack entries."""

    def test_power_attack_from_engine(self, engine_factory):
        attacker = Die(20, value=15)
        defender = Die(8, value=3)
        engine = engine_factory([attacker], [defender])

        engine.resolve(AttackProposal('Power', (attacker,), (defender,)))

        assert engine.extensions['action_log'].messages() == [
            f"Alice performed Power attack using [(20):15] against [(8):3]; "
            f"Defender (8) was captured; Attacker (20) rerolled 15 => {attacker.value}"
        ]

    def test_pass(self, engine_factory):
        engine = engine_factory([Die(6, value=1)], [Die(6, value=5)])
        engine.resolve(AttackProposal('Pass'))
        assert engine.extensions['action_log'].messages() == ['Alice passed']

    def test_surrender(self):
        params = {'attack_type': 'Surrender',
                  'pre_attack_dice': {'attacker': [], 'defender': []},
                  'post_attack_dice': {'attacker': [], 'defender': []}}
        assert render('attack', params, acting_player_id='p2') == 'Bob surrendered'

    def test_does_not_reroll(self):
        params = {
            'attack_type': 'Power',
            'pre_attack_dice': {'attacker': [die_info('(10)', 7)], 'defender': [die_info('(6)', 2)]},
            'post_attack_dice': {
                'attacker': [die_info('(10)', 7, does_reroll=False)],
                'defender': [die_info('(6)', 2, captured=True)],
            },
        }
        assert render('attack', params) == (
            "Alice performed Power attack using [(10):7] against [(6):2]; "
            "Defender (6) was captured; Attacker (10) does not reroll"
        )

    def test_trip_reports_defender_reroll_first(self):
        params = {
            'attack_type': 'Trip',
            'pre_attack_dice': {'attacker': [die_info('t(6)', 1)], 'defender': [die_info('(20)', 19)]},
            'post_attack_dice': {
                'attacker': [die_info('t(6)', 4, value_after_trip_attack=4)],
                'defender': [die_info('(20)', 2, captured=True)],
            },
        }
        assert render('attack', params) == (
            "Alice performed Trip attack using [t(6):1] against [(20):19]; "
            "Attacker t(6) rerolled 1 => 4; Defender (20) rerolled 19 => 2, was captured"
        )

    def test_trip_not_captured(self):
        params = {
            'attack_type': 'Trip',
            'pre_attack_dice': {'attacker': [die_info('t(6)', 1)], 'defender': [die_info('(20)', 19)]},
            'post_attack_dice': {
                'attacker': [die_info('t(6)', 2, value_after_trip_attack=2)],
                'defender': [die_info('(20)', 17)],
            },
        }
        assert render('attack', params).endswith("Defender (20) rerolled 19 => 17, was not captured")

    def test_fire_turndown(self):
        params = {
            'attack_type': 'Power',
            'pre_attack_dice': {'attacker': [die_info('(10)', 5)], 'defender': [die_info('(8)', 7)]},
            'post_attack_dice': {
                'attacker': [die_info('(10)', 3)],
                'defender': [die_info('(8)', 7, captured=True)],
            },
            'fire_cache': {'fire_recipes': ['F(6)', 'F(4)'], 'old_values': [5, 2], 'new_values': [3, 2]},
        }
        assert render('attack', params) == (
            "Alice turned down fire dice: F(6) from 5 to 3; "
            "Defender (8) was captured; Attacker (10) rerolled 5 => 3"
        )

    def test_split(self):
        pre = [die_info('B(X=7)', 5)]
        post = [
            die_info('(4)', 4, recipe_before_splitting='(X=7)'),
            die_info('(3)', 3, recipe_before_splitting='(X=7)'),
        ]
        assert message_split(pre, post) == (
            "Attacker B(X=7) showing 5 changed to (X=7), which then split into: "
            "(4) showing 4, and (3) showing 3"
        )

    def test_split_with_growth(self):
        pre = [die_info('(8)', 6)]
        post = [
            die_info('(8)', 4, recipe_before_splitting='(8)', recipe_before_growing='(4)'),
            die_info('(4)', 2, recipe_before_splitting='(8)'),
        ]
        assert message_split(pre, post) == (
            "Attacker (8) showing 6 split into: (4) which grew into (8) showing 4, and (4) showing 2"
        )


class TestRoundMessages:
    """Round results and setup choices."""

    def test_end_draw(self):
        params = {'round_number': 2, 'round_score_array': [30.0, 30.0]}
        assert render('end_draw', params) == 'Round 2 ended in a draw (30 vs. 30)'

    def test_end_winner(self):
        params = {'round_number': 1, 'round_score_array': [22, 40.5]}
        assert render('end_winner', params) == 'End of round: Alice won round 1 (40.5 vs. 22)'

    def test_end_winner_forced(self):
        params = {'round_number': 3, 'round_score_array': [0, 0], 'result_forced': True}
        assert render('end_winner', params, acting_player_id='p2') == (
            'End of round: Bob won round 3 because opponent surrendered'
        )

    def test_choose_swing_hidden_while_choosing(self):
        params = {'round_number': 1, 'swing_values': {'X': 7, 'Y': 3}}
        assert render('choose_swing', params, game_state=GameState.SPECIFY_DICE) == (
            'Alice set swing values'
        )
        assert render('choose_swing', params) == 'Alice set swing values: X=7, Y=3'

    def test_choose_die_values(self):
        params = {'round_number': 1, 'swing_values': {'X': 7}, 'option_values': {'(4/8)': 8}}
        assert render('choose_die_values', params, game_state=GameState.SPECIFY_DICE) == (
            'Alice set die sizes'
        )
        assert render('choose_die_values', params, round_number=2) == (
            'Alice set swing values: X=7 and option dice: (4/8=8)'
        )

    def test_add_auxiliary_hidden_while_choosing(self):
        params = {'round_number': 1, 'die': {'recipe': '+(6)'}}
        assert render('add_auxiliary', params, game_state=GameState.CHOOSE_AUXILIARY_DICE) == ''
        assert render('add_auxiliary', params) == 'Alice chose to use auxiliary die +(6) in this game'

    def test_decline_auxiliary(self):
        assert render('decline_auxiliary', {'declined': True}, acting_player_id='p2') == (
            'Bob chose not to use auxiliary dice in this game: '
            'neither player will get an auxiliary die'
        )

    def test_reserve(self):
        assert render('add_reserve', {'die': {'recipe': 'r(12)'}}) == 'Alice added a reserve die: r(12)'
        assert render('decline_reserve', {'declined': True}) == 'Alice chose not to add a reserve die'


class TestInitiativeMessages:
    """Initiative entries."""

    def test_determine_initiative(self):
        params = {
            'initiative_winner_id': 'p2',
            'round_number': 1,
            'player_data': {
                'p1': {'initiative_dice': [
                    {'recipe': '(6)', 'recipe_status': '(6):2', 'included': True},
                ], 'slow_button': False},
                'p2': {'initiative_dice': [
                    {'recipe': '(8)', 'recipe_status': '(8):1', 'included': True},
                    {'recipe': 'z(4)', 'recipe_status': 'z(4):1', 'included': False},
                ], 'slow_button': False},
            },
        }
        assert render('determine_initiative', params) == (
            'Bob won initiative for round 1. '
            'Initial die values: Alice rolled [(6):2], Bob rolled [(8):1, z(4):1]. '
            'Bob has dice which are not counted for initiative due to die skills: [z(4)].'
        )

    def test_determine_initiative_slow_and_tied(self):
        params = {
            'initiative_winner_id': 'p1',
            'round_number': 2,
            'player_data': {
                'p1': {'initiative_dice': [], 'slow_button': False},
                'p2': {'initiative_dice': [], 'slow_button': True},
            },
            'tied_player_ids': ['p1', 'p2'],
        }
        assert render('determine_initiative', params) == (
            'Alice won initiative for round 2. '
            'Initial die values: Alice rolled [], Bob rolled []. '
            'Bob\'s button has the "slow" button special, and cannot win initiative normally. '
            'Initiative was determined by a coin flip.'
        )

    def test_reroll_chance(self):
        params = {'gained_initiative': True,
                  'pre_reroll': {'recipe': 'c(6)', 'value': 2},
                  'post_reroll': {'value': 5}}
        assert render('reroll_chance', params) == (
            'Alice rerolled a chance die and gained initiative: c(6) rerolled 2 => 5'
        )

    def test_turndown_focus(self):
        params = {'pre_turndown': [{'recipe': 'f(8)', 'value': 6}],
                  'post_turndown': [{'value': 2}]}
        assert render('turndown_focus', params) == (
            'Alice gained initiative by turning down focus dice: f(8) from 6 to 2'
        )

    def test_init_decline(self):
        assert render('init_decline', {'declined': True}) == (
            'Alice chose not to try to gain initiative using chance or focus dice'
        )


class TestTurnMessages:
    """Other turn entries."""

    def test_needs_firing(self):
        params = {'attack_type': 'Power',
                  'attack_dice': {'attacker': [{'recipe_status': '(10):5'}],
                                  'defender': [{'recipe_status': '(8):7'}]}}
        assert render('needs_firing', params) == (
            'Alice chose to perform a Power attack using [(10):5] against [(8):7]; '
            'Alice must turn down fire dice to complete this attack'
        )

    def test_fire_cancel(self):
        assert render('fire_cancel', {'attack_type': 'Power'}) == (
            'Alice chose to abandon this attack and start over'
        )

    def test_play_another_turn(self):
        assert render('play_another_turn', {'cause': 'TimeAndSpace'}) == (
            'Alice gets another turn because a Time and Space die rolled odd'
        )

    def test_ornery_reroll(self):
        params = {
            'pre_reroll_die_info': [die_info('o(6)', 2), die_info('(4)', 1)],
            'post_reroll_die_info': [die_info('o(6)', 5, has_just_rerolled_ornery=True),
                                     die_info('(4)', 1)],
        }
        assert render('ornery_reroll', params) == (
            "Alice's idle ornery dice rerolled at end of turn: o(6) rerolled 2 => 5"
        )

    def test_ornery_reroll_nothing_rerolled(self):
        params = {'pre_reroll_die_info': [die_info('(4)', 1)],
                  'post_reroll_die_info': [die_info('(4)', 1)]}
        assert render('ornery_reroll', params) == ''


class TestFallbacks:
    """Legacy, unknown and malformed entries."""

    def test_legacy_string_attack(self):
        assert render('attack', 'performed Power attack') == 'Alice performed Power attack'

    def test_legacy_string_end_winner(self):
        assert render('end_winner', 'won round 1 (30 vs. 20)') == (
            'End of round: Alice won round 1 (30 vs. 20)'
        )

    def test_legacy_string_other(self):
        assert render('end_draw', 'Round 1 ended in a draw') == 'Round 1 ended in a draw'

    def test_unknown_type(self):
        assert render('bogus', {'x': 1}) == (
            'Internal error: could not print action log entry of type: bogus'
        )

    def test_malformed_with_message(self):
        assert render('end_draw', {'message': 'Round ended'}) == 'Round ended'

    def test_malformed_without_message(self):
        assert render('end_draw', {'round_number': 'two'}) == '{"round_number": "two"}'

    def test_unknown_player_id(self):
        assert render('fire_cancel', {'attack_type': 'Power'}, acting_player_id='p9') == (
            'p9 chose to abandon this attack and start over'
        )

    def test_empty_params(self):
        with pytest.raises(ValueError):
            GameAction(GameState.START_TURN, 'attack', 'p1', {})


class TestActionLog:
    """The per-engine log."""

    def test_entries_follow_resolved_attacks(self, engine_factory):
        attacker = Die(20, value=15)
        defender = Die(8, value=3)
        engine = engine_factory([attacker], [defender])

        engine.resolve(AttackProposal('Power', (attacker,), (defender,)))

        entries = engine.extensions['action_log'].to_list()
        assert len(entries) == 1
        assert entries[0]['action_type'] == 'attack'
        assert entries[0]['acting_player_id'] == 'p1'
        assert entries[0]['game_state'] == 40

    def test_rejected_attacks_are_not_logged(self, engine_factory):
        engine = engine_factory([Die(6, value=1)], [Die(6, value=5)])
        engine.resolve(AttackProposal('Power'))
        assert engine.extensions['action_log'].to_list() == []

    def test_hidden_entries_are_skipped(self, engine_factory):
        engine = engine_factory([Die(6, value=1)], [Die(6, value=5)],
                                state=GameState.CHOOSE_AUXILIARY_DICE)
        log = engine.extensions['action_log']
        log.add(GameAction(GameState.CHOOSE_AUXILIARY_DICE, 'add_auxiliary', 'p1',
                           {'round_number': 1, 'die': {'recipe': '+(6)'}}))
        log.add(GameAction(GameState.CHOOSE_AUXILIARY_DICE, 'decline_auxiliary', 'p2',
                           {'declined': True}))

        assert len(log.messages()) == 1
        assert log.messages()[0].startswith('Bob chose not to use auxiliary dice')

    def test_dict_round_trip(self):
        action = GameAction(GameState.END_ROUND, 'end_draw', None,
                            {'round_number': 1, 'round_score_array': [10, 10]})
        restored = GameAction.from_dict(action.to_dict())
        assert restored.to_dict() == action.to_dict()
