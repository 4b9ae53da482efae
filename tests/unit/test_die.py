"""
Unit tests for Die.
"""

import pytest

from buttonmen.core.die import Die
from buttonmen.core.errors import DieOutOfPlayError, InternalInconsistencyError
from buttonmen.core.roller import DiceRoller


class TestRecipe:
    """Test recipe notation."""

    def test_plain_die(self):
        assert Die(20).recipe == '(20)'

    def test_skills_prefix_in_order(self):
        die = Die(20, skills=['Speed', 'Berserk'])
        assert die.recipe == 'zB(20)'

    def test_swing_die(self):
        assert Die(7, swing_type='X').recipe == '(X=7)'

    def test_option_die(self):
        assert Die(8, option_sides=(4, 8)).recipe == '(4/8=8)'

    def test_recipe_status(self):
        assert Die(20, value=7, skills=['Speed']).recipe_status == 'z(20):7'

    def test_duplicate_skills_dropped(self):
        die = Die(6, skills=['Trip', 'Trip', 'Speed'])
        assert die.skills == ['Trip', 'Speed']


class TestConstruction:
    """Test field checks."""

    def test_value_out_of_range(self):
        with pytest.raises(ValueError):
            Die(6, value=7)

    def test_no_sides(self):
        with pytest.raises(ValueError):
            Die(0)

    def test_option_size_must_be_an_option(self):
        with pytest.raises(ValueError):
            Die(6, option_sides=(4, 8))

    def test_dice_compare_by_identity(self):
        first = Die(6, value=3)
        second = Die(6, value=3)
        assert first != second
        assert first == first

    def test_ids_are_unique(self):
        assert Die(6).die_id != Die(6).die_id


class TestMutation:
    """Test the mutation primitives."""

    def test_roll_stays_in_range(self):
        roller = DiceRoller(1)
        die = Die(6)
        for _ in range(50):
            assert 1 <= die.roll(roller) <= 6

    def test_roll_is_reproducible_with_seed(self):
        first = Die(20)
        second = Die(20)
        first.roll(DiceRoller(99))
        second.roll(DiceRoller(99))
        assert first.value == second.value

    def test_set_value(self):
        die = Die(6, value=1)
        die.set_value(5)
        assert die.value == 5

        with pytest.raises(ValueError):
            die.set_value(9)

    def test_grow_records_old_recipe(self):
        die = Die(4, value=3)
        die.resize(8)
        assert die.sides == 8
        assert die.value == 3
        assert die.recipe_before_growing == '(4)'
        assert die.recipe_before_shrinking is None

    def test_shrink_clamps_value(self):
        die = Die(12, value=11)
        die.resize(6)
        assert die.value == 6
        assert die.recipe_before_shrinking == '(12)'

    def test_resize_with_roller_rerolls(self):
        die = Die(12, value=11)
        die.resize(4, DiceRoller(3))
        assert 1 <= die.value <= 4

    def test_add_and_remove_skill(self):
        die = Die(6)
        die.add_skill('Speed')
        die.add_skill('Speed')
        assert die.skills == ['Speed']

        assert die.remove_skill('Speed') is True
        assert die.remove_skill('Speed') is False
        assert die.skills == []


class TestSplit:
    """Test splitting a die in two."""

    def test_odd_die_splits_larger_half_first(self):
        die = Die(7, value=6, skills=['Berserk'], swing_type='X')
        first, second = die.split()

        assert (first.sides, second.sides) == (4, 3)
        assert first.die_id == die.die_id
        assert second.die_id != die.die_id
        assert (first.value, second.value) == (4, 3)

    def test_split_drops_swing_and_option_keeps_skills(self):
        die = Die(8, value=2, skills=['Speed'], option_sides=(4, 8))
        first, second = die.split()

        for half in (first, second):
            assert half.swing_type is None
            assert half.option_sides is None
            assert half.skills == ['Speed']
            assert half.recipe_before_splitting == 'z(4/8=8)'

    def test_split_leaves_original_untouched(self):
        die = Die(20, value=15)
        die.split()
        assert die.sides == 20
        assert die.value == 15

    def test_one_sided_die(self):
        first, second = Die(1, value=1).split()
        assert first.sides == 1
        assert second.sides == 1


class TestOutOfPlay:
    """An out-of-play die is frozen."""

    @pytest.fixture
    def die(self):
        die = Die(6, value=4, skills=['Trip'])
        die.take_out_of_play()
        return die

    @pytest.mark.parametrize('mutate', [
        lambda d: d.roll(DiceRoller(1)),
        lambda d: d.set_value(2),
        lambda d: d.resize(8),
        lambda d: d.add_skill('Speed'),
        lambda d: d.remove_skill('Trip'),
        lambda d: d.split(),
    ])
    def test_mutation_raises(self, die, mutate):
        with pytest.raises(DieOutOfPlayError):
            mutate(die)
        assert die.value == 4
        assert die.sides == 6
        assert die.recipe == 't(6)'

    def test_error_is_internal_inconsistency(self):
        assert issubclass(DieOutOfPlayError, InternalInconsistencyError)

    def test_restore_is_allowed(self):
        die = Die(6, value=4)
        state = die.snapshot()
        die.take_out_of_play()

        die.restore(state)

        assert die.out_of_play is False
        die.set_value(1)


class TestSnapshots:
    """Test snapshot, restore and views."""

    def test_restore_round_trip(self):
        die = Die(6, value=4, skills=['Speed'])
        state = die.snapshot()

        die.resize(10)
        die.add_skill('Trip')
        die.captured = True
        die.restore(state)

        assert die.sides == 6
        assert die.value == 4
        assert die.skills == ['Speed']
        assert die.captured is False
        assert die.recipe_before_growing is None

    def test_clear_transient(self):
        die = Die(6, value=4)
        die.resize(8)
        die.value_after_trip_attack = 3
        die.clear_transient()
        assert die.recipe_before_growing is None
        assert die.value_after_trip_attack is None

    def test_view_omits_unset_transitional_keys(self):
        data = Die(6, value=4, die_id='d1').view().to_dict()
        assert data['recipe_status'] == '(6):4'
        assert data['max'] == 6
        assert 'recipe_before_splitting' not in data
        assert 'value_after_trip_attack' not in data

    def test_view_is_independent_of_die(self):
        die = Die(6, value=4)
        view = die.view()
        die.set_value(1)
        assert view.value == 4

    def test_copy_keeps_id_but_not_identity(self):
        die = Die(6, value=4, skills=['Speed'])
        clone = die.copy()
        assert clone.die_id == die.die_id
        assert clone is not die
        clone.add_skill('Trip')
        assert die.skills == ['Speed']
