from pathlib import Path
from typing import List

import numpy as np
import pandas as pd
import scipy.stats as stats

from .repetition import RepetitionResults

CONFIG_COLUMNS = ["pkt_size", "node_count", "cw_size"]
METRIC_COLUMNS = ["throughput", "transmission_fraction", "final_slot_index"]


def confidence_interval(samples: pd.Series, confidence: float = 0.95) -> float:
    """Half width of the Student-t confidence interval of the mean."""
    n = samples.count()
    if n < 2:
        return np.nan
    sem = samples.std(ddof=1) / np.sqrt(n)
    return float(stats.t.ppf((1 + confidence) / 2, df=n - 1) * sem)


class SimulationResults:
    def __init__(self, id: str, repetitions: List[RepetitionResults]):
        self.id = id
        self.repetitions = repetitions

    @classmethod
    def from_folder(cls, folder_path: Path) -> "SimulationResults":
        """Loads every replication (a folder with a stats.json) below folder_path."""
        folder_path = Path(folder_path)
        repetitions = [
            RepetitionResults.from_folder(stats_file.parent)
            for stats_file in sorted(folder_path.rglob("stats.json"))
        ]
        return cls(id=folder_path.name, repetitions=repetitions)

    def get_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([rep.stats for rep in self.repetitions])

    def summarize(self, confidence: float = 0.95) -> pd.DataFrame:
        """
        Mean and confidence interval half width of each metric, per configuration.
        Only converged replications enter the statistics; the number of
        non-converged ones is reported in its own column.
        """
        df = self.get_dataframe()
        if df.empty:
            return pd.DataFrame()

        rows = []
        for config, group in df.groupby(CONFIG_COLUMNS):
            converged = group[group["converged"]]
            row = dict(zip(CONFIG_COLUMNS, config))
            row["repetitions"] = len(group)
            row["non_converged"] = len(group) - len(converged)
            for metric in METRIC_COLUMNS:
                row[f"{metric}_mean"] = converged[metric].mean()
                row[f"{metric}_ci"] = confidence_interval(converged[metric], confidence)
            rows.append(row)

        return pd.DataFrame(rows).sort_values(CONFIG_COLUMNS).reset_index(drop=True)

    def __repr__(self) -> str:
        return f"SimulationResults(id={self.id}, repetitions={self.repetitions})"
