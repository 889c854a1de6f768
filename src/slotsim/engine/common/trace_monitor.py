from typing import TYPE_CHECKING

from slotsim.engine.common.Monitor import Monitor

# Avoid circular import issues at type-checking time
if TYPE_CHECKING:
    from slotsim.engine.common.Entity import Entity, EntitySignal


class EfficiencyTraceMonitor(Monitor):
    """
    Monitor that tracks the efficiency samples taken by the engine.
    The resulting DataFrame is the efficiency curve of the run, one row per sample.
    """

    def __init__(self, monitor_name: str = "trace", verbose=False):
        super().__init__(monitor_name=monitor_name, verbose=verbose)

    def update(self, entity: "Entity", signal: "EntitySignal"):
        # only signals carrying structured data are logged
        if not hasattr(signal, "get_log_data"):
            return

        self.log.append(signal.get_log_data())
        if self.verbose:
            print(f"[TRACE_MONITOR] [slot {signal.slot_index}] {signal.descriptor}")
