"""
Attack search strategies.

Each strategy enumerates candidate (attackers, defenders) combinations for an
attack type over the active player's dice and the opponent's dice, and keeps
the ones the type's validate function accepts. Validation is always the
final filter, so a strategy only has to avoid missing combinations.

Subset-sum search (one attacker against several defenders or several
attackers against one defender) tries every combination for small rosters.
Larger rosters use a depth-first walk that only enters branches from which
the remaining target is still reachable.
"""

from functools import lru_cache
from itertools import combinations
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from ...core.config import get_config
from ...core.die import Die
from ...core.errors import SearchLimitError
from ...core.game import Game
from ...core.models import AttackProposal

logger = logging.getLogger(__name__)

Validator = Callable[[Game, List[Die], List[Die]], bool]


def _limits(roster_limit: Optional[int], powerset_threshold: Optional[int]) -> Tuple[int, int]:
    config = get_config()
    if roster_limit is None:
        roster_limit = config.search_roster_limit
    if powerset_threshold is None:
        powerset_threshold = config.powerset_threshold
    return roster_limit, powerset_threshold


def subsets_with_sum(dice: Sequence[Die], target: int,
                     roster_limit: Optional[int] = None,
                     powerset_threshold: Optional[int] = None) -> List[Tuple[Die, ...]]:
    """
    Every non-empty subset of dice whose values add up to target.

    Subsets are returned as tuples in roster order. Dice with equal values
    are distinct, so [5, 5] yields two single-die subsets for target 5.
    Dice without a value never take part.

    Args:
        dice: Candidate dice
        target: Sum to reach
        roster_limit: Largest roster searched (default from config)
        powerset_threshold: Up to this many dice every combination is tried
            (default from config)

    Returns:
        List of subsets

    Raises:
        SearchLimitError: If there are more dice than roster_limit
    """
    roster_limit, powerset_threshold = _limits(roster_limit, powerset_threshold)

    dice = [d for d in dice if d.value is not None]
    if len(dice) > roster_limit:
        raise SearchLimitError(
            f"Cannot search {len(dice)} dice; the limit is {roster_limit}"
        )
    if target < 1 or not dice:
        return []

    if len(dice) <= powerset_threshold:
        return [
            subset
            for size in range(1, len(dice) + 1)
            for subset in combinations(dice, size)
            if sum(d.value for d in subset) == target
        ]

    return _pruned_subsets(dice, target)


def _pruned_subsets(dice: List[Die], target: int) -> List[Tuple[Die, ...]]:
    values = [d.value for d in dice]
    count = len(values)

    # Largest sum and smallest single value still available from index i on
    suffix_max = [0] * (count + 1)
    suffix_min = [float('inf')] * (count + 1)
    for i in range(count - 1, -1, -1):
        suffix_max[i] = suffix_max[i + 1] + values[i]
        suffix_min[i] = min(suffix_min[i + 1], values[i])

    @lru_cache(maxsize=None)
    def reachable(index: int, remaining: int) -> bool:
        if remaining == 0:
            return True
        if index == count or remaining > suffix_max[index] or remaining < suffix_min[index]:
            return False
        return reachable(index + 1, remaining - values[index]) or reachable(index + 1, remaining)

    results: List[Tuple[Die, ...]] = []

    def walk(index: int, remaining: int, chosen: List[Die]) -> None:
        if remaining == 0:
            results.append(tuple(chosen))
            return
        if index == count:
            return
        value = values[index]
        if value <= remaining and reachable(index + 1, remaining - value):
            chosen.append(dice[index])
            walk(index + 1, remaining - value, chosen)
            chosen.pop()
        if reachable(index + 1, remaining):
            walk(index + 1, remaining, chosen)

    if reachable(0, target):
        walk(0, target, [])
    return results


def search_onevone(game: Game, attack_type: str, validate: Validator) -> List[AttackProposal]:
    """Every single attacker against every single defender."""
    return [
        AttackProposal(attack_type, (attacker,), (defender,))
        for attacker in game.attacker_dice()
        for defender in game.defender_dice()
        if validate(game, [attacker], [defender])
    ]


def search_onevmany(game: Game, attack_type: str, validate: Validator,
                    required_skill: Optional[str] = None,
                    roster_limit: Optional[int] = None,
                    powerset_threshold: Optional[int] = None) -> List[AttackProposal]:
    """
    One attacker against a group of defenders whose values add up to the
    attacker's value.
    """
    attackers = [
        d for d in game.attacker_dice()
        if d.value is not None and (required_skill is None or d.has_skill(required_skill))
    ]
    if not attackers:
        return []

    defenders = game.defender_dice()
    proposals = []
    for attacker in attackers:
        for group in subsets_with_sum(defenders, attacker.value, roster_limit, powerset_threshold):
            if validate(game, [attacker], list(group)):
                proposals.append(AttackProposal(attack_type, (attacker,), group))
    return proposals


def search_manyvone(game: Game, attack_type: str, validate: Validator,
                    roster_limit: Optional[int] = None,
                    powerset_threshold: Optional[int] = None) -> List[AttackProposal]:
    """
    A group of attackers whose values add up to one defender's value.
    """
    attackers = game.attacker_dice()
    proposals = []
    for defender in game.defender_dice():
        if defender.value is None:
            continue
        for group in subsets_with_sum(attackers, defender.value, roster_limit, powerset_threshold):
            if validate(game, list(group), [defender]):
                proposals.append(AttackProposal(attack_type, group, (defender,)))
    return proposals


def search_nodice(game: Game, attack_type: str, validate: Validator) -> List[AttackProposal]:
    """Attacks made without dice (Pass, Surrender)."""
    if validate(game, [], []):
        return [AttackProposal(attack_type)]
    return []
