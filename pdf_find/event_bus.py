# event_bus.py
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class EventBus:
    """
    Minimal publish/subscribe bus. Listeners are called synchronously,
    in registration order, with the event payload as keyword arguments.
    """
    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def on(self, event_name: str, listener: Callable):
        self._listeners.setdefault(event_name, []).append(listener)

    def off(self, event_name: str, listener: Callable):
        listeners = self._listeners.get(event_name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def dispatch(self, event_name: str, **payload):
        """Calls every listener registered for event_name."""
        listeners = self._listeners.get(event_name)
        if not listeners:
            return
        # Copy so listeners can unsubscribe while being called
        for listener in list(listeners):
            listener(**payload)
