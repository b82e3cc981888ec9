"""Split an outing's players into named groups.

Balanced mode sorts players by skill (highest first) and deals them out
snake-draft style, so each pass over the groups runs in the opposite
direction to the one before. Randomized mode shuffles instead of sorting
and deals the same way.
"""

import logging
import random
from typing import Optional, Sequence

from pyuca import Collator

from constants import GOLF_GROUP_NAMES
from models import Group, GroupingMode, PlayerResponse

logger = logging.getLogger(__name__)

# Unicode Collation Algorithm with the default table: case and accents only
# break ties after the base letters, e.g. "alice" < "Bob" < "Émile" < "Fred"
_collator = Collator()


class InvalidGroupCountError(ValueError):
    """Raised when the requested number of groups is not a positive integer."""


def group_name(index: int) -> str:
    """Name for the group at ``index``, suffixed with its cycle past the catalog."""
    catalog_size = len(GOLF_GROUP_NAMES)
    cycle = index // catalog_size
    name = GOLF_GROUP_NAMES[index % catalog_size]
    if cycle > 0:
        name = f"{name} ({cycle + 1})"
    return name


def balanced_order(players: Sequence[PlayerResponse]) -> list[PlayerResponse]:
    # sorted() is stable; raw name last keeps the order total
    return sorted(players, key=lambda p: (-p.skill, _collator.sort_key(p.name), p.name))


def shuffled_order(players: Sequence[PlayerResponse], rng=None) -> list[PlayerResponse]:
    """Fisher-Yates shuffle of a copy of ``players``.

    ``rng`` only needs a ``randrange`` method; defaults to ``random.SystemRandom``.
    """
    rng = rng or random.SystemRandom()
    ordered = list(players)
    for i in range(len(ordered) - 1, 0, -1):
        j = rng.randrange(i + 1)
        ordered[i], ordered[j] = ordered[j], ordered[i]
    return ordered


def snake_indices(count: int, number_of_groups: int):
    """Yield the group index for each of ``count`` players in snake-draft order.

    The boundary group takes two players in a row before the direction turns,
    e.g. 0, 1, 2, 2, 1, 0, 0, 1, ... for three groups.
    """
    index = 0
    direction = 1
    for _ in range(count):
        yield index
        index += direction
        if index >= number_of_groups or index < 0:
            direction = -direction
            index += direction


def generate_groups(
    number_of_groups: int,
    players: Sequence[PlayerResponse],
    mode: GroupingMode = GroupingMode.BALANCED,
    rng=None,
) -> list[Group]:
    """Partition ``players`` into ``number_of_groups`` named groups.

    Returns an empty list when there are no players. Every group is returned,
    in index order, even when it ends up with nobody in it. ``players`` itself
    is left untouched.
    """
    if isinstance(number_of_groups, bool) or not isinstance(number_of_groups, int) or number_of_groups < 1:
        raise InvalidGroupCountError(f"Number of groups must be a positive integer, got {number_of_groups!r}")

    if not players:
        return []

    if GroupingMode(mode) is GroupingMode.RANDOMIZED:
        ordered = shuffled_order(players, rng)
    else:
        ordered = balanced_order(players)

    groups = [Group(name=group_name(i)) for i in range(number_of_groups)]
    for player, index in zip(ordered, snake_indices(len(ordered), number_of_groups)):
        groups[index].players.append(player)

    for group in groups:
        group.total_skill = sum(p.skill for p in group.players)

    logger.debug(
        "Dealt %d players into %d groups (%s)", len(ordered), number_of_groups, GroupingMode(mode).value
    )
    return groups


def skill_spread(groups: Sequence[Group]) -> Optional[int]:
    """Spread between the strongest and weakest group's total skill."""
    if not groups:
        return None
    totals = [g.total_skill for g in groups]
    return max(totals) - min(totals)
