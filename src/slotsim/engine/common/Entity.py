from typing import Any, Dict, List, TYPE_CHECKING
if TYPE_CHECKING:
    from slotsim.engine.common.Monitor import Monitor

'''
This base class is the base class of any entity. It makes
the entity observable (in the design pattern observer sense),
and allows to attach/detach Monitors that gathers statistics
'''


class EntitySignal:
    """
    This class defines standardized signals sent by entities to the monitors
    Entities that generates phenomena that need to be monitored, must create an object
    that inherits from this base class and notify the monitors.
    The concrete monitor that is specific for this type of signal will implement
    its update() function to filter out all the signals except the interesting ones.
    """

    def __init__(self, slot_index: int, event_type: str, descriptor: str):
        self.slot_index = slot_index
        self.event_type = event_type
        self.descriptor = descriptor  # For human-readable logs, not for CSV data.

    def get_log_data(self) -> Dict[str, Any]:
        """
        returns signal data as dictionary (ready to be converted in a pandas DataFrame row).
        Each signal must override this method to include its own specific data
        """
        return {
            "slot": self.slot_index,
            "event": self.event_type
        }


class Entity:
    def __init__(self):
        self._monitors: List["Monitor"] = []

    def attach_monitor(self, monitor: "Monitor"):
        '''
        attach monitor to this entity
        '''
        if monitor not in self._monitors:  # if already attached, ignore
            self._monitors.append(monitor)

    def detach_monitor(self, monitor: "Monitor"):
        '''
        detach monitor from this entity
        '''
        if monitor in self._monitors:  # if monitor is not attached, do nothing
            self._monitors.remove(monitor)

    def _notify_monitors(self, signal: EntitySignal):
        if not self._monitors:  # if no monitor are attached, return
            return

        for monitor in self._monitors:
            monitor.update(entity=self, signal=signal)
