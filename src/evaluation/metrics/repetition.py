from pathlib import Path
import json


class RepetitionResults:
    """Results of one replication, as saved by SimulationResult.save()."""

    def __init__(self, id: str, stats: dict):
        self.id = id
        self.stats = stats

    @classmethod
    def from_folder(cls, folder_path: Path) -> "RepetitionResults":
        with open(folder_path / "stats.json", "r") as f:
            stats = json.load(f)

        return cls(folder_path.name, stats)

    def __repr__(self):
        return f"RepetitionResults(id={self.id})"
