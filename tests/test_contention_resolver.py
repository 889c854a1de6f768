import numpy as np
import pytest

from slotsim.channel.SlotTimeline import SlotState, SlotTimeline
from slotsim.engine.errors import CapacityExceeded
from slotsim.engine.random import RandomManager
from slotsim.entities.ContenderPool import ContenderPool
from slotsim.protocols.mac.ContentionResolver import ContentionResolver, SlotOutcome


def test_single_ready_node_transmits(backoff_rng):
    pool = ContenderPool(node_count=1, initial_cw=1)
    timeline = SlotTimeline(20)
    resolver = ContentionResolver(pkt_size=3, rng=backoff_rng)

    resolution = resolver.resolve(5, pool, timeline)

    assert resolution.outcome is SlotOutcome.SUCCESS
    assert resolution.ready.tolist() == [0]
    assert resolution.slots_marked == 3
    assert [timeline.get(i) for i in range(5, 9)] == [SlotState.TRANSMISSION] * 3 + [SlotState.IDLE]
    assert pool[0].backoff is None
    assert pool[0].contention_window == 1
    assert pool[0].successes == 1


def test_two_ready_nodes_collide(backoff_rng):
    pool = ContenderPool(node_count=2, initial_cw=1)
    timeline = SlotTimeline(20)
    resolver = ContentionResolver(pkt_size=2, rng=backoff_rng)

    resolution = resolver.resolve(0, pool, timeline)

    assert resolution.outcome is SlotOutcome.COLLISION
    assert sorted(resolution.ready.tolist()) == [0, 1]
    assert [timeline.get(i) for i in range(3)] == [
        SlotState.COLLISION,
        SlotState.COLLISION,
        SlotState.IDLE,
    ]
    assert [node.contention_window for node in pool] == [2, 2]
    assert [node.backoff for node in pool] == [None, None]


def test_no_ready_node_leaves_slot_unchanged(backoff_rng):
    pool = ContenderPool(node_count=3, initial_cw=4)
    pool.backoff[:] = 3
    timeline = SlotTimeline(10)
    resolver = ContentionResolver(pkt_size=4, rng=backoff_rng)

    resolution = resolver.resolve(0, pool, timeline)

    assert resolution.outcome is SlotOutcome.NO_ATTEMPT
    assert resolution.slots_marked == 0
    assert timeline.get(0) is SlotState.IDLE
    assert pool.backoff.tolist() == [2, 2, 2]


def test_busy_channel_freezes_then_waits_one_idle_slot(backoff_rng):
    pool = ContenderPool(node_count=2, initial_cw=8)
    pool.backoff[:] = [3, 5]
    resolver = ContentionResolver(pkt_size=1, rng=backoff_rng)

    ready = resolver.evaluate(SlotState.TRANSMISSION, pool)
    assert len(ready) == 0
    assert pool.backoff.tolist() == [3, 5]
    assert pool[0].sensed_channel_state is SlotState.TRANSMISSION

    ready = resolver.evaluate(SlotState.COLLISION, pool)
    assert pool[1].sensed_channel_state is SlotState.COLLISION

    # first idle slot after the burst: only resynchronisation
    ready = resolver.evaluate(SlotState.IDLE, pool)
    assert len(ready) == 0
    assert pool.backoff.tolist() == [3, 5]
    assert pool[0].sensed_channel_state is SlotState.IDLE

    # second idle slot: countdown resumes
    resolver.evaluate(SlotState.IDLE, pool)
    assert pool.backoff.tolist() == [2, 4]


def test_mixed_pool_uses_pre_slot_snapshot(backoff_rng):
    pool = ContenderPool(node_count=3, initial_cw=8)
    pool.backoff[:] = [1, 1, 1]
    pool.sensed[:] = [SlotState.IDLE, SlotState.TRANSMISSION, SlotState.IDLE]
    resolver = ContentionResolver(pkt_size=1, rng=backoff_rng)

    ready = resolver.evaluate(SlotState.IDLE, pool)

    # node 1 only resynchronises in this slot, even though it ends up sensing idle
    assert ready.tolist() == [0, 2]
    assert pool.backoff.tolist() == [0, 1, 0]
    assert pool[1].sensed_channel_state is SlotState.IDLE


def test_classification_is_reproducible():
    pool = ContenderPool(node_count=50, initial_cw=4)
    timeline = SlotTimeline(10)

    outcomes = []
    for _ in range(2):
        rng = RandomManager(root_seed=99).get_or_create_stream("contention/backoff")
        resolver = ContentionResolver(pkt_size=2, rng=rng)
        snapshot = pool.copy()
        ready = resolver.evaluate(timeline.get(0), snapshot)
        outcomes.append((ready.tolist(), resolver.classify(ready), snapshot.backoff.tolist()))

    assert outcomes[0] == outcomes[1]


def test_node_order_does_not_change_outcome(backoff_rng):
    pool = ContenderPool(node_count=6, initial_cw=8)
    pool.backoff[:] = [1, 4, 1, 3, 2, 1]
    pool.sensed[:] = [SlotState.IDLE] * 5 + [SlotState.COLLISION]
    order = np.array([5, 3, 1, 0, 4, 2])

    permuted = pool.copy()
    for column in ("backoff", "contention_window", "sensed"):
        setattr(permuted, column, getattr(pool, column)[order].copy())

    resolver = ContentionResolver(pkt_size=1, rng=backoff_rng)
    ready = resolver.evaluate(SlotState.IDLE, pool)
    permuted_ready = resolver.evaluate(SlotState.IDLE, permuted)

    assert sorted(order[permuted_ready].tolist()) == sorted(ready.tolist()) == [0, 2]


@pytest.mark.parametrize(
    "size, outcome",
    [(0, SlotOutcome.NO_ATTEMPT), (1, SlotOutcome.SUCCESS), (2, SlotOutcome.COLLISION), (7, SlotOutcome.COLLISION)],
)
def test_classify(size, outcome):
    assert ContentionResolver.classify(np.arange(size)) is outcome


def test_ready_set_larger_than_pool(backoff_rng):
    pool = ContenderPool(node_count=2, initial_cw=4)
    resolver = ContentionResolver(pkt_size=1, rng=backoff_rng)
    with pytest.raises(CapacityExceeded):
        resolver.commit(0, np.arange(3), pool, SlotTimeline(5))
