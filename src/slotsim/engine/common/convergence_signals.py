from typing import Any, Dict

from slotsim.engine.common.Entity import EntitySignal
from slotsim.engine.ConvergenceMonitor import ConvergenceSample


class ConvergenceSignal(EntitySignal):
    """
    Emitted by the engine at every efficiency sample.
    Carries the sample and the aggregate counters at that slot.
    """

    def __init__(
        self,
        sample: ConvergenceSample,
        idle_count: int,
        transmission_count: int,
        collision_count: int,
        completed_packets: int,
    ):
        event_type = "CONVERGED" if sample.converged else "SAMPLE"
        super().__init__(
            slot_index=sample.slot_index,
            event_type=event_type,
            descriptor=(
                f"efficiency={sample.efficiency:.6f} delta={sample.delta:.6f}"
                f"{' (converged)' if sample.converged else ''}"
            ),
        )
        self.sample = sample
        self.idle_count = idle_count
        self.transmission_count = transmission_count
        self.collision_count = collision_count
        self.completed_packets = completed_packets

    def get_log_data(self) -> Dict[str, Any]:
        data = super().get_log_data()
        data.update(
            {
                "efficiency": self.sample.efficiency,
                "delta": self.sample.delta,
                "idle": self.idle_count,
                "transmission": self.transmission_count,
                "collision": self.collision_count,
                "packets": self.completed_packets,
            }
        )
        return data
