from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from slotsim.channel.SlotTimeline import SlotState, SlotTimeline
from slotsim.engine.config import BACKOFF_STREAM
from slotsim.engine.ConvergenceMonitor import ConvergenceMonitor
from slotsim.engine.common.Entity import Entity
from slotsim.engine.common.SimulationContext import SimulationConfig, SimulationContext
from slotsim.engine.common.convergence_signals import ConvergenceSignal
from slotsim.engine.errors import NonConvergenceError
from slotsim.engine.random import RandomManager
from slotsim.entities.ContenderPool import ContenderPool
from slotsim.protocols.mac.ContentionResolver import ContentionResolver, Resolution, SlotOutcome


@dataclass
class SlotCounters:
    idle: int = 0
    transmission: int = 0
    collision: int = 0
    completed_packets: int = 0

    @property
    def slots(self) -> int:
        return self.idle + self.transmission + self.collision


@dataclass(frozen=True)
class SimulationStats:
    final_slot_index: int
    idle_count: int
    transmission_count: int
    collision_count: int
    completed_packets: int
    converged: bool

    @property
    def throughput(self) -> float:
        if self.final_slot_index == 0:
            return 0.0
        return self.completed_packets / self.final_slot_index

    @property
    def transmission_fraction(self) -> float:
        if self.final_slot_index == 0:
            return 0.0
        return self.transmission_count / self.final_slot_index

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["throughput"] = self.throughput
        data["transmission_fraction"] = self.transmission_fraction
        return data


class SimulationEngine(Entity):
    """
    Drives the slot-by-slot simulation of one run.

    The engine owns every piece of mutable state of the run (timeline, pool,
    counters and convergence monitor), so independent engines can be used side
    by side in the same process. Attached monitors receive a ConvergenceSignal
    at each efficiency sample.
    """

    def __init__(self, context: SimulationContext):
        super().__init__()
        self.context = context
        config = context.config

        self.timeline = SlotTimeline(config.horizon)
        self.pool = ContenderPool(config.node_count, config.cw_size)
        self.resolver = ContentionResolver(
            pkt_size=config.pkt_size,
            rng=context.random_manager.get_or_create_stream(BACKOFF_STREAM),
        )
        self.convergence = ConvergenceMonitor(
            sampling_interval=config.sampling_interval,
            threshold=config.threshold,
        )
        self.counters = SlotCounters()
        self.current_slot = 0
        self._converged_stats: Optional[SimulationStats] = None

    @classmethod
    def create(
        cls,
        pkt_size: int,
        node_count: int,
        cw_size: int,
        seed: int = 0,
        antithetic: bool = False,
        **config_overrides,
    ) -> "SimulationEngine":
        """Builds an engine with its own RandomManager seeded with seed."""
        config = SimulationConfig(
            pkt_size=pkt_size, node_count=node_count, cw_size=cw_size, **config_overrides
        )
        random_manager = RandomManager(root_seed=seed, antithetic=antithetic)
        return cls(SimulationContext(config, random_manager))

    @property
    def horizon(self) -> int:
        return self.timeline.horizon

    def step(self) -> Resolution:
        """
        Simulates the current slot: resolves the contention, commits the burst
        (if any) and counts the slot with the state it holds after the commit.
        """
        i = self.current_slot
        resolution = self.resolver.resolve(i, self.pool, self.timeline)
        if resolution.outcome is SlotOutcome.SUCCESS:
            self.counters.completed_packets += 1

        state = self.timeline.get(i)
        if state is SlotState.IDLE:
            self.counters.idle += 1
        elif state is SlotState.TRANSMISSION:
            self.counters.transmission += 1
        else:
            self.counters.collision += 1

        self.current_slot += 1
        return resolution

    def snapshot(self, final_slot_index: int, converged: bool) -> SimulationStats:
        return SimulationStats(
            final_slot_index=final_slot_index,
            idle_count=self.counters.idle,
            transmission_count=self.counters.transmission,
            collision_count=self.counters.collision,
            completed_packets=self.counters.completed_packets,
            converged=converged,
        )

    def _sample(self, slot_index: int) -> Optional[bool]:
        sample = self.convergence.evaluate(slot_index, self.counters.transmission)
        if sample is None:
            return None

        self._notify_monitors(
            ConvergenceSignal(
                sample=sample,
                idle_count=self.counters.idle,
                transmission_count=self.counters.transmission,
                collision_count=self.counters.collision,
                completed_packets=self.counters.completed_packets,
            )
        )
        return sample.converged

    def run(self) -> SimulationStats:
        """
        Runs until convergence or until the horizon is exhausted.
        Raises NonConvergenceError in the latter case, with the statistics
        accumulated over the whole horizon attached.
        Once converged, further calls return the same statistics.
        """
        if self._converged_stats is not None:
            return self._converged_stats

        while self.current_slot < self.horizon:
            slot_index = self.current_slot
            self.step()
            if self._sample(slot_index):
                self._converged_stats = self.snapshot(final_slot_index=slot_index, converged=True)
                return self._converged_stats

        raise NonConvergenceError(
            f"Simulation did not converge within {self.horizon} slots",
            stats=self.snapshot(final_slot_index=self.horizon, converged=False),
        )
