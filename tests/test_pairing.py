import random

import pytest

from riichipairing.exceptions import NoPairingAvailableException, ValidationException
from riichipairing.models.tournament import (
    Pairing,
    PairingHistory,
    RoundData,
    SeatAssignment,
    build_opponent_history,
)
from riichipairing.pairing import (
    PairingOptimizer,
    RoundScheduler,
    WheelScheduler,
    assign_seats,
    pad_player_ids,
    rotate_wheel_lists,
    score_tables,
    split_into_tables,
    use_wheel,
)


def _ids(count):
    return [f"p{i + 1}" for i in range(count)]


def _round(round_number, tables):
    return RoundData(
        round_number=round_number,
        pairings=assign_seats(tables, random.Random(0)),
    )


def _groupings(tables):
    return {frozenset(table) for table in tables}


# ========== Opponent history ==========


def test_history_counts_every_pair_at_a_table():
    history = build_opponent_history(
        [_round(1, [["a", "b", "c", "d"]]), _round(2, [["a", "b", "e", "f"]])]
    )

    assert history.times_played("a", "b") == 2
    assert history.times_played("b", "a") == 2
    assert history.times_played("c", "d") == 1
    assert history.times_played("c", "e") == 0
    assert history.have_played("e", "f")
    assert history.total_meetings == 12


def test_history_skips_incomplete_tables_and_empty_rounds():
    short = RoundData(
        round_number=1,
        pairings=[
            Pairing(
                table_number=1,
                players=[
                    SeatAssignment(player_id="a", seat="East"),
                    SeatAssignment(player_id="b", seat="South"),
                ],
            )
        ],
    )
    history = build_opponent_history([short, RoundData(round_number=2)])

    assert history.counts == {}


def test_table_penalty_is_sum_of_squared_meetings():
    history = PairingHistory()
    history.add_table(["a", "b", "c", "d"])
    history.add_table(["a", "b", "e", "f"])

    # a-b met twice (4), a-e once (1), b-e once (1)
    assert history.table_penalty(["a", "b", "e", "x"]) == 6
    assert history.table_penalty(["w", "x", "y", "z"]) == 0


def test_history_dict_round_trip():
    history = PairingHistory()
    history.add_table(["a", "b", "c", "d"])
    history.add_table(["a", "b", "e", "f"])

    restored = PairingHistory.from_dict(history.to_dict())

    assert restored.counts == history.counts


# ========== Optimizer ==========


def test_optimizer_rejects_roster_not_divisible_by_four():
    optimizer = PairingOptimizer(rng=random.Random(1))

    with pytest.raises(ValidationException):
        optimizer.optimize(_ids(7), PairingHistory())


def test_optimizer_exits_early_without_history():
    optimizer = PairingOptimizer(rng=random.Random(1))
    result = optimizer.optimize(_ids(12), PairingHistory())

    assert result.score == 0
    assert result.iterations_run == 1
    assert sorted(pid for table in result.tables for pid in table) == sorted(_ids(12))
    assert all(len(table) == 4 for table in result.tables)


def test_optimizer_is_at_least_as_good_as_its_first_shuffle():
    players = _ids(16)
    history = build_opponent_history(
        [_round(1, split_into_tables(players)), _round(2, split_into_tables(players))]
    )

    first = list(players)
    random.Random(9).shuffle(first)
    single_partition_score = score_tables(split_into_tables(first), history)

    result = PairingOptimizer(
        iterations=300, rng=random.Random(9), min_iterations=1
    ).optimize(players, history)

    assert result.score <= single_partition_score


def test_optimizer_quality_is_monotone_in_iterations():
    players = _ids(16)
    history = build_opponent_history([_round(1, split_into_tables(players))])
    history.add_table(["p1", "p5", "p9", "p13"])

    few = PairingOptimizer(iterations=5, rng=random.Random(4), min_iterations=1)
    many = PairingOptimizer(iterations=500, rng=random.Random(4), min_iterations=1)

    assert many.optimize(players, history).score <= few.optimize(players, history).score


def test_optimizer_avoids_rematches_when_possible():
    players = _ids(16)
    history = build_opponent_history([_round(1, split_into_tables(players))])

    result = PairingOptimizer(rng=random.Random(3)).optimize(players, history)

    assert result.score == 0
    for table in result.tables:
        for i, a in enumerate(table):
            for b in table[i + 1 :]:
                assert not history.have_played(a, b)


def test_optimizer_allows_all_filler_table():
    players = _ids(4) + ["filler:pad-0", "filler:pad-1", "filler:pad-2", "filler:pad-3"]
    result = PairingOptimizer(rng=random.Random(2)).optimize(players, PairingHistory())

    assert len(result.tables) == 2


@pytest.mark.parametrize(
    "num_players, expected",
    [(8, 10000), (100, 4000), (4000, 200), (0, 0)],
)
def test_iterations_scale_down_with_roster_size(num_players, expected):
    optimizer = PairingOptimizer(iterations=10000, min_iterations=200, work_budget=400000)

    assert optimizer.iterations_for(num_players) == expected


def test_optimizer_is_deterministic_for_a_seed():
    players = _ids(12)
    history = build_opponent_history([_round(1, split_into_tables(players))])

    first = PairingOptimizer(rng=random.Random(11)).optimize(players, history)
    second = PairingOptimizer(rng=random.Random(11)).optimize(players, history)

    assert first.tables == second.tables


# ========== Wheel ==========


def test_rotate_moves_each_list_by_its_own_step():
    lists = [["a0", "a1", "a2"], ["b0", "b1", "b2"], ["c0", "c1", "c2"], ["d0", "d1", "d2"]]

    rotated = rotate_wheel_lists(lists, round_number=2)

    assert rotated[0] == ["a1", "a2", "a0"]
    assert rotated[1] == ["b2", "b0", "b1"]
    assert rotated[2] == ["c0", "c1", "c2"]
    assert rotated[3] == ["d1", "d2", "d0"]


def test_wheel_first_round_deals_every_player_once():
    tables = WheelScheduler(rng=random.Random(5)).first_round(_ids(24))

    assert len(tables) == 6
    assert sorted(pid for table in tables for pid in table) == sorted(_ids(24))


@pytest.mark.parametrize("num_players", [8, 12, 20, 40, 64])
def test_wheel_round_two_never_repeats_round_one_groupings(num_players):
    wheel = WheelScheduler(rng=random.Random(num_players))
    players = _ids(num_players)
    first_tables = wheel.first_round(players)
    first_round = _round(1, first_tables)

    second_tables = wheel.generate(players, 2, first_round.pairings)

    assert _groupings(second_tables) != _groupings(first_tables)
    assert sorted(pid for table in second_tables for pid in table) == sorted(players)


def test_wheel_is_deterministic_for_a_given_first_round():
    players = _ids(32)
    first_round = _round(1, WheelScheduler(rng=random.Random(8)).first_round(players))

    third_a = WheelScheduler(rng=random.Random(1)).generate(players, 3, first_round.pairings)
    third_b = WheelScheduler(rng=random.Random(2)).generate(players, 3, first_round.pairings)

    assert third_a == third_b


def test_wheel_keeps_large_roster_free_of_early_rematches():
    players = _ids(64)
    wheel = WheelScheduler(rng=random.Random(6))
    rounds = [_round(1, wheel.first_round(players))]
    for round_number in (2, 3):
        tables = wheel.generate(players, round_number, rounds[0].pairings)
        rounds.append(_round(round_number, tables))

    history = build_opponent_history(rounds)
    assert max(history.counts.values()) == 1


def test_wheel_needs_first_round():
    with pytest.raises(NoPairingAvailableException):
        WheelScheduler(rng=random.Random(1)).generate(_ids(20), 2, None)


def test_wheel_refills_vacated_slots_with_newcomers():
    players = _ids(20)
    first_tables = WheelScheduler(rng=random.Random(3)).first_round(players)
    first_round = _round(1, first_tables)
    roster = [pid for pid in players if pid != "p7"] + ["late-1"]

    tables = WheelScheduler().generate(roster, 2, first_round.pairings)
    seated = [pid for table in tables for pid in table]

    assert "p7" not in seated
    assert "late-1" in seated
    assert sorted(seated) == sorted(roster)


def test_wheel_pads_slots_left_by_dropped_players():
    players = _ids(20)
    first_round = _round(1, WheelScheduler(rng=random.Random(3)).first_round(players))
    roster = pad_player_ids(players[:17])

    tables = WheelScheduler().generate(roster, 2, first_round.pairings)
    seated = [pid for table in tables for pid in table]

    assert len(seated) == 20
    assert sorted(pid for pid in seated if pid.startswith("p")) == sorted(players[:17])
    assert sum(1 for pid in seated if pid.startswith("filler:")) == 3


def test_wheel_fails_when_newcomers_do_not_fit():
    players = _ids(20)
    first_round = _round(1, WheelScheduler(rng=random.Random(3)).first_round(players))
    roster = players + [f"late-{i}" for i in range(4)]

    with pytest.raises(NoPairingAvailableException):
        WheelScheduler().generate(roster, 2, first_round.pairings)


# ========== Scheduler ==========


@pytest.mark.parametrize(
    "active, round_number, expected",
    [(100, 1, False), (16, 2, False), (17, 2, True), (28, 3, False), (29, 3, True)],
)
def test_wheel_threshold(active, round_number, expected):
    assert use_wheel(active, round_number) is expected


def test_pad_player_ids_adds_distinct_fillers():
    padded = pad_player_ids(_ids(9))

    assert len(padded) == 12
    assert padded[9:] == ["filler:pad-0", "filler:pad-1", "filler:pad-2"]


def test_assign_seats_gives_four_distinct_winds_in_slot_order():
    pairings = assign_seats([["a", "b", "c", "d"], ["e", "f", "g", "h"]], random.Random(1))

    assert [p.table_number for p in pairings] == [1, 2]
    assert pairings[0].player_ids == ["a", "b", "c", "d"]
    for pairing in pairings:
        assert sorted(a.seat for a in pairing.players) == ["East", "North", "South", "West"]


def test_scheduler_covers_roster_with_padding():
    scheduler = RoundScheduler(rng=random.Random(4), iterations=200)
    pairings = scheduler.generate(_ids(10), 1, [])

    seated = [pid for p in pairings for pid in p.player_ids]
    assert len(pairings) == 3
    assert sorted(pid for pid in seated if not pid.startswith("filler:")) == sorted(_ids(10))
    assert len(set(seated)) == len(seated)


def test_scheduler_falls_back_to_optimizer_without_first_round():
    scheduler = RoundScheduler(rng=random.Random(4), iterations=200)
    pairings = scheduler.generate(_ids(20), 2, [])

    assert sorted(pid for p in pairings for pid in p.player_ids) == sorted(_ids(20))


def test_scheduler_rejects_duplicate_roster():
    with pytest.raises(ValidationException):
        RoundScheduler(rng=random.Random(1)).generate(["a", "a", "b", "c"], 1, [])
