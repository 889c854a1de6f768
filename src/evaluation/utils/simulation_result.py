import os
import json
import pandas as pd
from typing import Any, Dict, Optional

from slotsim.engine.SimulationEngine import SimulationStats
from slotsim.engine.common.trace_monitor import EfficiencyTraceMonitor


class SimulationResult:
    """
    This data class holds the outcome of one run: the final statistics and,
    if a trace monitor was attached, the efficiency samples.
    """

    def __init__(
        self,
        stats: SimulationStats,
        parameters: Dict[str, Any],
        trace_monitor: Optional[EfficiencyTraceMonitor] = None,
    ):
        self.stats = stats
        self.parameters = parameters
        self.trace_data = pd.DataFrame()

        if trace_monitor and trace_monitor.log:
            self.trace_data = trace_monitor.get_dataframe()

    def to_row(self) -> Dict[str, Any]:
        """Flat record of the run, one row of a sweep table."""
        row = dict(self.parameters)
        row.update(self.stats.to_dict())
        return row

    def save(self, run_output_dir: str) -> None:
        """
        Saves stats.json and, if there are samples, trace.csv in the given folder.
        """
        os.makedirs(run_output_dir, exist_ok=True)
        with open(os.path.join(run_output_dir, "stats.json"), "w") as f:
            json.dump(self.to_row(), f, indent=4)
        if not self.trace_data.empty:
            self.trace_data.to_csv(os.path.join(run_output_dir, "trace.csv"))

    @property
    def converged(self) -> bool:
        return self.stats.converged
