import numpy as np
import pytest

from slotsim.channel.SlotTimeline import SlotState
from slotsim.engine.errors import InvalidParameter, OutOfRange
from slotsim.entities.ContenderPool import UNSET_BACKOFF, ContenderPool


def test_initial_state():
    pool = ContenderPool(node_count=4, initial_cw=16)

    assert len(pool) == 4
    for node in pool:
        assert node.backoff is None
        assert node.contention_window == 16
        assert node.sensed_channel_state is SlotState.IDLE
        assert node.collisions == 0
        assert not node.is_ready()


def test_empty_pool():
    pool = ContenderPool(node_count=0, initial_cw=1)
    assert len(pool) == 0
    assert list(pool) == []


@pytest.mark.parametrize("node_count, initial_cw", [(-1, 4), (3, 0), (3, -8)])
def test_invalid_construction(node_count, initial_cw):
    with pytest.raises(InvalidParameter):
        ContenderPool(node_count, initial_cw)


def test_snapshot_index_checked():
    pool = ContenderPool(2, 4)
    with pytest.raises(OutOfRange):
        pool[2]


def test_count_down_draws_in_window_then_decrements(backoff_rng):
    pool = ContenderPool(node_count=200, initial_cw=8)
    mask = np.ones(len(pool), dtype=bool)

    expired = pool.count_down(mask, backoff_rng)

    # drawn in [1, 8] then decremented once
    assert np.all(pool.backoff >= 0)
    assert np.all(pool.backoff <= 7)
    assert np.array_equal(expired, pool.backoff == 0)


def test_count_down_only_touches_masked_nodes(backoff_rng):
    pool = ContenderPool(node_count=3, initial_cw=4)
    pool.backoff[:] = [3, 3, UNSET_BACKOFF]
    mask = np.array([True, False, False])

    pool.count_down(mask, backoff_rng)

    assert pool.backoff.tolist() == [2, 3, UNSET_BACKOFF]


def test_window_one_is_always_ready(backoff_rng):
    pool = ContenderPool(node_count=5, initial_cw=1)
    expired = pool.count_down(pool.contending(), backoff_rng)
    assert expired.all()
    assert all(node.is_ready() for node in pool)


def test_record_success_and_collision():
    pool = ContenderPool(node_count=3, initial_cw=4)
    pool.backoff[:] = 0

    pool.record_success(0)
    pool.record_collision(np.array([1, 2]))
    pool.record_collision(np.array([2]))

    assert pool[0].backoff is None
    assert pool[0].successes == 1
    assert pool[0].contention_window == 4
    assert pool[1].contention_window == 8
    assert pool[2].contention_window == 16
    assert pool[2].collisions == 2
    assert pool.backoff.tolist() == [UNSET_BACKOFF] * 3


def test_sense_all_or_masked():
    pool = ContenderPool(node_count=3, initial_cw=4)
    pool.sense(SlotState.COLLISION)
    assert [n.sensed_channel_state for n in pool] == [SlotState.COLLISION] * 3

    pool.sense(SlotState.IDLE, np.array([False, True, False]))
    assert pool[1].sensed_channel_state is SlotState.IDLE
    assert pool.contending().tolist() == [False, True, False]


def test_copy_is_independent():
    pool = ContenderPool(node_count=2, initial_cw=4)
    clone = pool.copy()
    clone.record_collision(np.array([0]))

    assert pool[0].contention_window == 4
    assert clone[0].contention_window == 8
    assert clone.initial_cw == 4
