from enum import IntEnum

import numpy as np

from slotsim.engine.errors import OutOfRange


class SlotState(IntEnum):
    """define the channel states of a slot"""

    IDLE = 0
    TRANSMISSION = 1
    COLLISION = 2

    @property
    def is_busy(self) -> bool:
        return self is not SlotState.IDLE


class SlotTimeline:
    """
    Fixed-horizon sequence of slot states.

    All the slots start IDLE. Transmission and collision bursts are written
    with mark_range(); a burst reaching past the horizon is clamped at the
    last slot, so the timeline never grows after construction.
    """

    def __init__(self, horizon: int):
        if horizon <= 0:
            raise OutOfRange(f"Timeline horizon must be positive, got {horizon}")
        self._horizon = horizon
        self._slots = np.full(horizon, SlotState.IDLE, dtype=np.int8)

    @property
    def horizon(self) -> int:
        return self._horizon

    def __len__(self) -> int:
        return self._horizon

    def _check_index(self, i: int) -> None:
        if i < 0 or i >= self._horizon:
            raise OutOfRange(f"Slot {i} is outside the timeline [0, {self._horizon})")

    def get(self, i: int) -> SlotState:
        self._check_index(i)
        return SlotState(int(self._slots[i]))

    def mark_range(self, start: int, length: int, state: SlotState) -> int:
        """
        Sets slots [start, start + length) to state, clamped to the horizon.
        Returns the number of slots actually written.
        """
        self._check_index(start)
        if length < 0:
            raise OutOfRange(f"Burst length must be non-negative, got {length}")

        end = min(start + length, self._horizon)
        self._slots[start:end] = state
        return end - start
