import pandas as pd
from typing import List, TYPE_CHECKING
from abc import ABC, abstractmethod

# Avoid circular import issues at type-checking time
if TYPE_CHECKING:
    from slotsim.engine.common.Entity import Entity, EntitySignal


class Monitor(ABC):
    """
    Base class for evaluation monitors.
    """

    def __init__(self, monitor_name: str = "base_monitor", verbose: bool = True):
        self.log: List[dict] = []
        self.verbose = verbose
        self.monitor_name = monitor_name

    @abstractmethod
    def update(self, entity: "Entity", signal: "EntitySignal"):
        """
        Called by an entity when a signal is emitted.
        Concrete monitors will implement the filter logic
        and append structured data to self.log.
        """
        pass

    def get_dataframe(self) -> pd.DataFrame:
        """
        Converts the accumulated log into a pandas DataFrame, indexed by slot.
        """
        if not self.log:
            return pd.DataFrame()

        df = pd.DataFrame(self.log)
        if 'slot' in df.columns:
            df.set_index('slot', inplace=True)
            df.sort_index(inplace=True)
        return df
