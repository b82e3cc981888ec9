import random
from collections import Counter

import pytest

from constants import GOLF_GROUP_NAMES
from grouping import (
    InvalidGroupCountError,
    balanced_order,
    generate_groups,
    group_name,
    shuffled_order,
    skill_spread,
    snake_indices,
)
from models import GroupingMode, PlayerResponse


def make_players(skills):
    return [PlayerResponse(id=f"id-{i}", name=f"Golfer {i:02d}", skill=s) for i, s in enumerate(skills)]


def assignment(groups):
    return [[p.id for p in g.players] for g in groups]


class RecordingRandom:
    """Always picks index 0 and remembers the bounds it was asked for."""

    def __init__(self):
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return 0


def test_snake_indices_turn_at_the_boundary():
    assert list(snake_indices(10, 3)) == [0, 1, 2, 2, 1, 0, 0, 1, 2, 2]


def test_snake_indices_single_group_never_leaves_it():
    assert list(snake_indices(5, 1)) == [0, 0, 0, 0, 0]


def test_worked_example_ten_players_three_groups():
    players = make_players([10, 9, 8, 7, 6, 5, 4, 3, 2, 1])
    groups = generate_groups(3, players)

    assert [[p.skill for p in g.players] for g in groups] == [[10, 5, 4], [9, 6, 3], [8, 7, 2, 1]]
    assert [g.total_skill for g in groups] == [19, 18, 18]
    assert skill_spread(groups) == 1


def test_balanced_sort_ignores_input_order():
    players = make_players([3, 9, 1, 7, 5, 10, 2, 8, 6, 4])
    groups = generate_groups(3, players)

    assert [g.total_skill for g in groups] == [19, 18, 18]


def test_ties_broken_by_name():
    players = [
        PlayerResponse(id="c", name="Charlie", skill=5),
        PlayerResponse(id="a", name="Alice", skill=5),
        PlayerResponse(id="b", name="Bob", skill=5),
    ]
    assert [p.name for p in balanced_order(players)] == ["Alice", "Bob", "Charlie"]

    groups = generate_groups(3, players)
    assert assignment(groups) == [["a"], ["b"], ["c"]]


@pytest.mark.parametrize("names,expected", [
    (["Bob", "alice"], ["alice", "Bob"]),
    (["Fred", "Émile"], ["Émile", "Fred"]),
    (["zoe", "Émile", "Fred", "alice", "Bob"], ["alice", "Bob", "Émile", "Fred", "zoe"]),
])
def test_ties_use_collation_not_code_points(names, expected):
    players = [PlayerResponse(id=name, name=name, skill=5) for name in names]

    assert [p.name for p in balanced_order(players)] == expected


def test_collated_tie_decides_group_membership():
    players = [
        PlayerResponse(id="bob", name="Bob", skill=6),
        PlayerResponse(id="alice", name="alice", skill=6),
    ]
    groups = generate_groups(2, players)

    assert assignment(groups) == [["alice"], ["bob"]]


@pytest.mark.parametrize("mode", list(GroupingMode))
@pytest.mark.parametrize("count,number_of_groups", [(1, 3), (4, 4), (7, 2), (13, 4), (30, 6)])
def test_every_player_assigned_exactly_once(mode, count, number_of_groups):
    players = make_players([(i % 10) + 1 for i in range(count)])
    groups = generate_groups(number_of_groups, players, mode, rng=random.Random(count))

    placed = Counter(pid for ids in assignment(groups) for pid in ids)
    assert placed == Counter(p.id for p in players)
    assert len(groups) == number_of_groups


def test_balanced_mode_is_deterministic():
    players = make_players([4, 8, 8, 2, 10, 6, 6, 1, 9])
    first = generate_groups(4, players)
    second = generate_groups(4, list(reversed(players)))

    assert [g.model_dump_json() for g in first] == [g.model_dump_json() for g in second]


def test_randomized_mode_varies_assignments():
    players = make_players([5, 5, 5, 5, 5, 5])
    rng = random.Random(1234)
    outcomes = {
        tuple(tuple(ids) for ids in assignment(generate_groups(2, players, GroupingMode.RANDOMIZED, rng)))
        for _ in range(50)
    }
    assert len(outcomes) > 1


def test_shuffle_draws_from_shrinking_range():
    rng = RecordingRandom()
    players = make_players([1, 2, 3, 4])

    ordered = shuffled_order(players, rng)

    assert rng.calls == [4, 3, 2]
    assert [p.skill for p in ordered] == [2, 3, 4, 1]


def test_shuffle_of_single_player_draws_nothing():
    rng = RecordingRandom()
    assert shuffled_order(make_players([7]), rng) == make_players([7])
    assert rng.calls == []


@pytest.mark.parametrize("mode", list(GroupingMode))
def test_input_sequence_is_not_mutated(mode):
    players = make_players([2, 9, 4, 7, 1])
    snapshot = list(players)

    generate_groups(2, players, mode, rng=random.Random(7))

    assert players == snapshot


def test_empty_players_gives_no_groups():
    assert generate_groups(3, []) == []


def test_single_group_holds_everyone():
    players = make_players([3, 6, 9, 2])
    groups = generate_groups(1, players)

    assert len(groups) == 1
    assert len(groups[0].players) == 4
    assert groups[0].total_skill == 20


def test_more_groups_than_players_keeps_empty_groups():
    players = make_players([8, 3])
    groups = generate_groups(5, players)

    assert [len(g.players) for g in groups] == [1, 1, 0, 0, 0]
    assert [g.total_skill for g in groups] == [8, 3, 0, 0, 0]
    assert groups[4].name == GOLF_GROUP_NAMES[4]


@pytest.mark.parametrize("bad", [0, -2, True, 2.5, "3"])
def test_invalid_group_count_rejected(bad):
    with pytest.raises(InvalidGroupCountError):
        generate_groups(bad, make_players([5]))


def test_group_names_cycle_with_suffix():
    assert group_name(0) == "The Fairway Fanatics"
    assert group_name(25) == "The Zany Zephyrs"
    assert group_name(26) == "The Fairway Fanatics (2)"
    assert group_name(53) == "The Driving Divas/Dudes (3)"


def test_group_names_unique_up_to_two_catalogs():
    number_of_groups = 2 * len(GOLF_GROUP_NAMES)
    groups = generate_groups(number_of_groups, make_players([5]))

    names = [g.name for g in groups]
    assert len(set(names)) == number_of_groups


def test_skill_spread_of_nothing():
    assert skill_spread([]) is None
