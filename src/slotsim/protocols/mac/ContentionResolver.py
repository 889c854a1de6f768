from enum import Enum, auto
from typing import NamedTuple

import numpy as np

from slotsim.channel.SlotTimeline import SlotState, SlotTimeline
from slotsim.engine.errors import CapacityExceeded
from slotsim.engine.random import RandomGenerator
from slotsim.entities.ContenderPool import ContenderPool


class SlotOutcome(Enum):
    """classification of a slot by the number of nodes whose backoff expired"""

    NO_ATTEMPT = auto()
    SUCCESS = auto()
    COLLISION = auto()


class Resolution(NamedTuple):
    outcome: SlotOutcome
    ready: np.ndarray  # indices of the nodes that transmitted in this slot
    slots_marked: int


"""
Slotted CSMA/CA with binary exponential backoff.

For every slot, each node is evaluated against the state the channel had when the
slot began and against what the node itself sensed one slot earlier:

1. channel idle, node sensed idle: the node counts down (drawing a backoff first
   if it has none). A backoff reaching 0 makes the node ready to transmit.
2. channel idle, node sensed busy: the node must observe one full idle slot
   before it trusts the channel, so it only records the idle state.
3. channel busy: the node freezes its backoff and records the busy state.

Nodes never look at each other within a slot, so the evaluation is done on whole
columns of the pool at once and the iteration order cannot change the outcome.
"""


class ContentionResolver:
    def __init__(self, pkt_size: int, rng: RandomGenerator):
        self.pkt_size = pkt_size
        self.rng = rng

    def evaluate(self, channel_state: SlotState, pool: ContenderPool) -> np.ndarray:
        """
        Runs the per-node state machine for one slot.
        Returns the indices of the ready nodes (the ready set).
        """
        if channel_state.is_busy:
            pool.sense(channel_state)
            return np.empty(0, dtype=np.intp)

        contending = pool.contending()  # snapshot before any write
        expired = pool.count_down(contending, self.rng)
        pool.sense(SlotState.IDLE, ~contending)
        return np.flatnonzero(expired)

    @staticmethod
    def classify(ready: np.ndarray) -> SlotOutcome:
        if len(ready) == 0:
            return SlotOutcome.NO_ATTEMPT
        if len(ready) == 1:
            return SlotOutcome.SUCCESS
        return SlotOutcome.COLLISION

    def commit(
        self,
        slot_index: int,
        ready: np.ndarray,
        pool: ContenderPool,
        timeline: SlotTimeline,
    ) -> Resolution:
        """Applies the outcome of the slot to the timeline and to the ready nodes."""
        if len(ready) > len(pool):
            raise CapacityExceeded(
                f"{len(ready)} ready nodes in a pool of {len(pool)}"
            )

        outcome = self.classify(ready)
        slots_marked = 0
        if outcome is SlotOutcome.SUCCESS:
            slots_marked = timeline.mark_range(slot_index, self.pkt_size, SlotState.TRANSMISSION)
            pool.record_success(int(ready[0]))
        elif outcome is SlotOutcome.COLLISION:
            slots_marked = timeline.mark_range(slot_index, self.pkt_size, SlotState.COLLISION)
            pool.record_collision(ready)

        return Resolution(outcome=outcome, ready=ready, slots_marked=slots_marked)

    def resolve(
        self, slot_index: int, pool: ContenderPool, timeline: SlotTimeline
    ) -> Resolution:
        ready = self.evaluate(timeline.get(slot_index), pool)
        return self.commit(slot_index, ready, pool, timeline)
