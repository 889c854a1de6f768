from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from slotsim.engine.config import (
    INITIAL_DELTA,
    INITIAL_EFFICIENCY,
    SAMPLING_INTERVAL,
    STABILITY_THRESHOLD,
)
from slotsim.engine.errors import InvalidParameter


class ConvergenceState(Enum):
    RUNNING = auto()
    CONVERGED = auto()


@dataclass(frozen=True)
class ConvergenceSample:
    slot_index: int
    efficiency: float
    delta: float
    converged: bool


class ConvergenceMonitor:
    """
    Decides when the measured efficiency has reached steady state.

    Every sampling_interval slots the efficiency (transmission slots over
    elapsed slots) is compared with the previous sample. The run is declared
    converged when two consecutive deltas are below the threshold, so that a
    single flat sample is not enough.
    """

    def __init__(
        self,
        sampling_interval: int = SAMPLING_INTERVAL,
        threshold: float = STABILITY_THRESHOLD,
    ):
        if sampling_interval <= 0:
            raise InvalidParameter(f"sampling_interval must be positive, got {sampling_interval}")
        if threshold <= 0:
            raise InvalidParameter(f"threshold must be positive, got {threshold}")
        self.sampling_interval = sampling_interval
        self.threshold = threshold
        self.previous_efficiency = INITIAL_EFFICIENCY
        self.previous_delta = INITIAL_DELTA
        self.state = ConvergenceState.RUNNING

    @property
    def converged(self) -> bool:
        return self.state is ConvergenceState.CONVERGED

    def is_sampling_slot(self, slot_index: int) -> bool:
        return slot_index > 0 and slot_index % self.sampling_interval == 0

    def evaluate(self, slot_index: int, transmission_count: int) -> Optional[ConvergenceSample]:
        """
        Takes a sample if slot_index is a sampling slot, None otherwise.
        Once converged the monitor does not sample anymore.
        """
        if self.converged or not self.is_sampling_slot(slot_index):
            return None

        efficiency = transmission_count / slot_index
        delta = abs(efficiency - self.previous_efficiency)

        if delta < self.threshold and self.previous_delta < self.threshold:
            self.state = ConvergenceState.CONVERGED
        else:
            self.previous_efficiency = efficiency
            self.previous_delta = delta

        return ConvergenceSample(
            slot_index=slot_index,
            efficiency=efficiency,
            delta=delta,
            converged=self.converged,
        )
