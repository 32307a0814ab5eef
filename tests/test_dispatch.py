"""Tests for Dispatcher and its schedules."""

from datetime import datetime, timedelta, timezone

import pytest

from querybench.catalog import CATALOG_NAMES, MAX_CPU_DAY_BY_HOUR, MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR
from querybench.dispatch import Dispatcher, RoundRobinSchedule, WeightedSchedule
from querybench.errors import UnsupportedQueryError, WindowTooLargeError
from querybench.generators import CassandraDevops, InfluxDevops

T0 = datetime(2016, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def generator() -> CassandraDevops:
    """Cassandra generator over thirty hours."""
    return CassandraDevops("benchmark_db", T0, T0 + timedelta(hours=30), seed=5)


def test_round_robin_schedule() -> None:
    """Test plain rotation."""
    s = RoundRobinSchedule(["a", "b", "c"])

    assert [s.select(i) for i in range(7)] == ["a", "b", "c", "a", "b", "c", "a"]
    with pytest.raises(ValueError):
        RoundRobinSchedule([])


def test_weighted_schedule_counts_and_spread() -> None:
    """Test that each entry fires weight times per cycle, interleaved."""
    s = WeightedSchedule({"a": 2, "b": 1})

    assert [s.select(i) for i in range(6)] == ["a", "b", "a", "a", "b", "a"]

    s = WeightedSchedule({"x": 5, "y": 3, "z": 1})
    assert len(s) == 9
    cycle = [s.select(i) for i in range(9)]
    assert cycle.count("x") == 5
    assert cycle.count("y") == 3
    assert cycle.count("z") == 1
    assert "xxx" not in "".join(cycle)


@pytest.mark.parametrize("weights", [{}, {"a": 0}, {"a": -1}, {"a": 1.5}, {"a": True}])
def test_weighted_schedule_rejects_bad_weights(weights: dict) -> None:
    """Test weight validation."""
    with pytest.raises(ValueError):
        WeightedSchedule(weights)


def test_round_robin_coverage(generator: CassandraDevops) -> None:
    """Test that each entry fires exactly M times over M full rotations."""
    dispatcher = Dispatcher(generator)
    size = len(generator.eligible(32))
    coverage = dispatcher.coverage(size * 7, 32)

    assert size == len(CATALOG_NAMES) - 1
    assert set(coverage) == set(generator.eligible(32))
    assert all(count == 7 for count in coverage.values())


def test_rotation_shrinks_for_small_fleet(generator: CassandraDevops) -> None:
    """Test that shapes needing more hosts than exist are left out."""
    dispatcher = Dispatcher(generator)
    coverage = dispatcher.coverage(100, 3)

    assert set(coverage) == {
        "max-cpu-1-host-1-hr",
        "max-cpu-2-host-1-hr",
        "max-cpu-1-host-12-hr",
        MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR,
    }


def test_selection_is_deterministic(generator: CassandraDevops) -> None:
    """Test that selection depends only on the iteration index."""
    a = Dispatcher(generator)
    b = Dispatcher(CassandraDevops("other", T0, T0 + timedelta(hours=30), seed=99))

    assert [a.select(i, 64) for i in range(50)] == [b.select(i, 64) for i in range(50)]


def test_dispatch_fills_pooled_query(generator: CassandraDevops) -> None:
    """Test a 4-host query from an 8-host fleet via its alias."""
    dispatcher = Dispatcher(generator, query_type="4-host-1-hr")
    q = dispatcher.dispatch(0, 8)

    assert q.aggregation_type == "max"
    assert len(q.tag_sets[0]) == 4
    assert q.time_end - q.time_start == timedelta(hours=1)
    generator.release(q)

    again = dispatcher.dispatch(1, 8)
    assert again is q
    generator.release(again)


def test_dispatch_four_hosts_on_two_hour_range() -> None:
    """Test the 4-host entry on a two-hour range and an 8-host fleet."""
    generator = CassandraDevops("benchmark_db", T0, T0 + timedelta(hours=2), seed=11)
    dispatcher = Dispatcher(generator, query_type="max-cpu-4-host-1-hr")
    fleet = {f"hostname=host_{n}" for n in range(8)}

    for i in range(50):
        q = dispatcher.dispatch(i, 8)
        assert q.keyspace == "benchmark_db"
        assert q.aggregation_type == "max"
        assert q.group_by_duration == timedelta(minutes=1)
        assert q.time_end - q.time_start == timedelta(hours=1)
        assert T0 <= q.time_start <= T0 + timedelta(hours=1)
        assert len(q.tag_sets) == 1
        assert len(set(q.tag_sets[0])) == 4
        assert set(q.tag_sets[0]) <= fleet
        generator.release(q)


def test_single_entry_query_type(generator: CassandraDevops) -> None:
    """Test that a named query type always fires that entry."""
    dispatcher = Dispatcher(generator, query_type="groupby")

    assert set(dispatcher.coverage(10, 4)) == {MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR}


def test_weighted_dispatcher(generator: CassandraDevops) -> None:
    """Test weights given by alias."""
    dispatcher = Dispatcher(generator, weights={"1-host-1-hr": 3, "groupby": 1})
    coverage = dispatcher.coverage(40, 8)

    assert coverage["max-cpu-1-host-1-hr"] == 30
    assert coverage[MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR] == 10


def test_unknown_query_type(generator: CassandraDevops) -> None:
    """Test that unknown query types fail up front."""
    with pytest.raises(ValueError):
        Dispatcher(generator, query_type="lastpoint")
    with pytest.raises(ValueError):
        Dispatcher(generator, weights={"all": 1})


@pytest.mark.parametrize("i,scale_var", [(0, 0), (0, -4), (-1, 8)])
def test_bad_dispatch_arguments(generator: CassandraDevops, i: int, scale_var: int) -> None:
    """Test scale var and index validation."""
    with pytest.raises(ValueError):
        Dispatcher(generator).dispatch(i, scale_var)


def test_unsupported_entry_in_rotation(generator: CassandraDevops) -> None:
    """Test that placeholders surface as UnsupportedQueryError and leak nothing."""
    dispatcher = Dispatcher(generator, include_unsupported=True)
    index = CATALOG_NAMES.index(MAX_CPU_DAY_BY_HOUR)
    idle_before = generator.pool.idle

    assert dispatcher.select(index, 32) == MAX_CPU_DAY_BY_HOUR
    with pytest.raises(UnsupportedQueryError):
        dispatcher.dispatch(index, 32)
    assert generator.pool.idle == max(idle_before, 1)


def test_day_window_on_short_range_is_fatal() -> None:
    """Test the whole-fleet shape against a two-hour benchmark range."""
    generator = InfluxDevops("benchmark_db", T0, T0 + timedelta(hours=2))
    dispatcher = Dispatcher(generator, query_type=MEAN_CPU_ALL_HOSTS_DAY_BY_HOUR)

    with pytest.raises(WindowTooLargeError):
        dispatcher.dispatch(0, 8)
