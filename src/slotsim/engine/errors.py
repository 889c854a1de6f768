"""
Exceptions raised by the simulation core.

InvalidParameter and NonConvergenceError are the outcomes a caller is expected
to handle. OutOfRange and CapacityExceeded are contract violations: they can
only be triggered by a construction bug, never by user input that went through
SimulationConfig.validate().
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from slotsim.engine.SimulationEngine import SimulationStats


class SimulationError(Exception):
    """Base class of every error raised by the simulator."""


class InvalidParameter(SimulationError, ValueError):
    """Out of range or malformed simulation inputs."""


class NonConvergenceError(SimulationError):
    """
    The whole horizon was simulated without meeting the stability criterion.
    The statistics accumulated up to the horizon are attached as a snapshot.
    """

    def __init__(self, message: str, stats: Optional["SimulationStats"] = None):
        super().__init__(message)
        self.stats = stats


class OutOfRange(SimulationError, IndexError):
    """Access to a slot outside the configured horizon."""


class CapacityExceeded(SimulationError, RuntimeError):
    """More ready contenders than the pool holds."""
