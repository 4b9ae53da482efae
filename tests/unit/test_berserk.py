"""
Unit tests for the Berserk skill.
"""

import pytest

from buttonmen.core.die import Die
from buttonmen.core.hooks import AttackListContext, Hook
from buttonmen.core.models import AttackProposal
from buttonmen.modules.skills.berserk import berserk_attack_list


@pytest.fixture
def berserk_engine(engine_factory):
    berserk = Die(20, value=5, skills=['Berserk'], die_id='ber')
    bob = [Die(4, value=3, die_id='b1'), Die(4, value=2, die_id='b2'), Die(12, value=11, die_id='b3')]
    return engine_factory([berserk], bob)


def test_attack_list_swaps_skill_for_berserk():
    context = AttackListContext(['Power', 'Skill'])
    berserk_attack_list(context)
    assert context.attack_types == ['Power', 'Berserk']


def test_attack_list_through_registry(registries):
    die = Die(20, value=5, skills=['Berserk'])
    context = registries.skills.dispatch(Hook.ATTACK_LIST, [die], AttackListContext(['Power', 'Skill']))
    assert context.attack_types == ['Power', 'Berserk']


def test_berserk_attack_halves_die(berserk_engine):
    game = berserk_engine.game
    original = game.find_die('ber')
    defenders = (game.find_die('b1'), game.find_die('b2'))

    result = berserk_engine.resolve(AttackProposal('Berserk', (original,), defenders))

    assert result.success
    assert len(game.players[0].dice) == 1
    halved = game.players[0].dice[0]
    assert halved is not original
    assert halved.die_id == 'ber'
    assert halved.sides == 10
    assert halved.skills == []
    assert 1 <= halved.value <= 10
    assert halved.recipe_before_splitting == '(20)'

    assert [d.die_id for d in game.players[0].captured] == ['b1', 'b2']
    assert [d.die_id for d in game.players[1].dice] == ['b3']


def test_berserk_record_shows_new_die(berserk_engine):
    game = berserk_engine.game
    original = game.find_die('ber')
    defenders = (game.find_die('b1'), game.find_die('b2'))

    record = berserk_engine.resolve(AttackProposal('Berserk', (original,), defenders)).data

    pre = record.pre_attack['attacker'][0]
    post = record.post_attack['attacker'][0]
    assert pre.recipe == 'B(20)'
    assert pre.max == 20
    assert post.recipe == '(10)'
    assert post.max == 10


def test_berserk_message(berserk_engine):
    game = berserk_engine.game
    original = game.find_die('ber')
    defenders = (game.find_die('b1'), game.find_die('b2'))

    berserk_engine.resolve(AttackProposal('Berserk', (original,), defenders))

    halved = game.players[0].dice[0]
    message = berserk_engine.extensions['action_log'].messages()[0]
    assert message == (
        "Alice performed Berserk attack using [B(20):5] against [(4):3,(4):2]; "
        "Defender (4) was captured; Defender (4) was captured; "
        f"Attacker B(20) changed size from 20 to 10 sides, "
        f"recipe changed from B(20) to (10), rerolled 5 => {halved.value}"
    )


def test_power_attack_does_not_halve(berserk_engine):
    game = berserk_engine.game
    berserk = game.find_die('ber')

    berserk_engine.resolve(AttackProposal('Power', (berserk,), (game.find_die('b1'),)))

    assert game.players[0].dice == [berserk]
    assert berserk.sides == 20
    assert berserk.skills == ['Berserk']


def test_no_skill_attacks_with_berserk_die(engine_factory):
    berserk = Die(20, value=5, skills=['Berserk'])
    helper = Die(6, value=2)
    target = Die(10, value=7)
    engine = engine_factory([berserk, helper], [target])

    result = engine.resolve(AttackProposal('Skill', (berserk, helper), (target,)))

    assert not result.success
    assert result.error_code == 'attack_not_legal'


def test_odd_swing_die_rounds_up(engine_factory):
    berserk = Die(7, value=5, skills=['Berserk'], swing_type='X')
    target = Die(6, value=5)
    engine = engine_factory([berserk], [target])

    engine.resolve(AttackProposal('Berserk', (berserk,), (target,)))

    halved = engine.game.players[0].dice[0]
    assert halved.sides == 4
    assert halved.swing_type is None
    assert halved.recipe_before_splitting == '(X=7)'
