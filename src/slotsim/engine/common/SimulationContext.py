from dataclasses import dataclass
from numbers import Integral, Real

from slotsim.engine.config import (
    MAX_CW_SIZE,
    MAX_NODE_COUNT,
    MAX_PKT_SIZE,
    MAX_SLOTS,
    SAMPLING_INTERVAL,
    STABILITY_THRESHOLD,
)
from slotsim.engine.errors import InvalidParameter
from slotsim.engine.random import RandomManager


def _check_int(name: str, value, low: int, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if value < low or value > high:
        raise InvalidParameter(f"{name} must be in [{low}, {high}], got {value}")


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of a single run."""

    pkt_size: int
    node_count: int
    cw_size: int
    horizon: int = MAX_SLOTS
    sampling_interval: int = SAMPLING_INTERVAL
    threshold: float = STABILITY_THRESHOLD

    def validate(self) -> "SimulationConfig":
        _check_int("pkt_size", self.pkt_size, 1, MAX_PKT_SIZE)
        _check_int("node_count", self.node_count, 0, MAX_NODE_COUNT)
        _check_int("cw_size", self.cw_size, 1, MAX_CW_SIZE)
        _check_int("horizon", self.horizon, 1, float("inf"))
        _check_int("sampling_interval", self.sampling_interval, 1, self.horizon)
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, Real):
            raise InvalidParameter(f"threshold must be a number, got {self.threshold!r}")
        if not self.threshold > 0:
            raise InvalidParameter(f"threshold must be positive, got {self.threshold}")
        return self


class SimulationContext:
    """
    This class provides the context of the simulation to the engine:
    the run parameters and the random manager owning its streams.
    """

    def __init__(self, config: SimulationConfig, random_manager: RandomManager):
        self.config = config.validate()
        self.random_manager = random_manager
