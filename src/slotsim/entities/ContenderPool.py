from typing import NamedTuple, Optional

import numpy as np

from slotsim.channel.SlotTimeline import SlotState
from slotsim.engine.errors import InvalidParameter, OutOfRange
from slotsim.engine.random import RandomGenerator

UNSET_BACKOFF = -1


class Contender(NamedTuple):
    """Read-only snapshot of a single node of the pool."""

    index: int
    backoff: Optional[int]
    contention_window: int
    sensed_channel_state: SlotState
    collisions: int
    successes: int

    def is_ready(self) -> bool:
        return self.backoff == 0


class ContenderPool:
    """
    The set of contending nodes sharing the channel.

    Every node behaves the same way, nodes only differ by their state. The state
    is kept column-wise (one array per attribute) so that a whole slot can be
    evaluated against the same pre-slot snapshot:

    - backoff: remaining backoff slots, UNSET_BACKOFF when it must be drawn again
    - contention_window: doubles at every collision the node is involved in
    - sensed: channel state the node observed in the previous slot
    """

    def __init__(self, node_count: int, initial_cw: int):
        if node_count < 0:
            raise InvalidParameter(f"node_count must be non-negative, got {node_count}")
        if initial_cw < 1:
            raise InvalidParameter(f"initial_cw must be positive, got {initial_cw}")

        self.initial_cw = initial_cw
        self.backoff = np.full(node_count, UNSET_BACKOFF, dtype=np.int64)
        self.contention_window = np.full(node_count, initial_cw, dtype=np.int64)
        self.sensed = np.full(node_count, SlotState.IDLE, dtype=np.int8)
        self.collisions = np.zeros(node_count, dtype=np.int64)
        self.successes = np.zeros(node_count, dtype=np.int64)

    def __len__(self) -> int:
        return len(self.backoff)

    def __getitem__(self, i: int) -> Contender:
        if i < 0 or i >= len(self):
            raise OutOfRange(f"Node {i} is not in a pool of {len(self)}")
        backoff = int(self.backoff[i])
        return Contender(
            index=i,
            backoff=None if backoff == UNSET_BACKOFF else backoff,
            contention_window=int(self.contention_window[i]),
            sensed_channel_state=SlotState(int(self.sensed[i])),
            collisions=int(self.collisions[i]),
            successes=int(self.successes[i]),
        )

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    # ------------------------------------------------------------------
    # per-slot operations, applied to the nodes selected by a mask

    def contending(self) -> np.ndarray:
        """Nodes that sensed an idle channel in the previous slot."""
        return self.sensed == SlotState.IDLE

    def count_down(self, mask: np.ndarray, rng: RandomGenerator) -> np.ndarray:
        """
        Decrements the backoff of the masked nodes, drawing a new one
        uniformly in [1, contention_window] first where it is unset.
        Returns the mask of the nodes whose backoff expired.
        """
        unset = mask & (self.backoff == UNSET_BACKOFF)
        n_draws = int(np.count_nonzero(unset))
        if n_draws:
            self.backoff[unset] = rng.integers(
                low=1, high=self.contention_window[unset] + 1, size=n_draws
            )
        self.backoff[mask] -= 1
        return mask & (self.backoff == 0)

    def sense(self, channel_state: SlotState, mask: np.ndarray = None) -> None:
        """Stores the observed channel state for the masked nodes (all by default)."""
        if mask is None:
            self.sensed.fill(channel_state)
        else:
            self.sensed[mask] = channel_state

    def record_success(self, node: int) -> None:
        self.backoff[node] = UNSET_BACKOFF
        self.successes[node] += 1

    def record_collision(self, nodes: np.ndarray) -> None:
        self.backoff[nodes] = UNSET_BACKOFF
        self.contention_window[nodes] *= 2
        self.collisions[nodes] += 1

    def copy(self) -> "ContenderPool":
        clone = ContenderPool(0, self.initial_cw)
        clone.backoff = self.backoff.copy()
        clone.contention_window = self.contention_window.copy()
        clone.sensed = self.sensed.copy()
        clone.collisions = self.collisions.copy()
        clone.successes = self.successes.copy()
        return clone
