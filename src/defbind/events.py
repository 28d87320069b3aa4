"""
Definition events.

Definitions reference events by id (e.g. a container's triggerChangeChildren).
The hosting application triggers events through a DefinitionEventService; the
definitions that listen for an id receive the payload.
"""
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class DefinitionEvent:
    """Reference to an event by id."""
    event_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'eventId': self.event_id} if self.event_id is not None else {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DefinitionEvent':
        return cls(event_id=data.get('eventId'))


def _pack(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class DefinitionEventService:
    """Dispatches event payloads to subscribers by event id."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[List[Any]], None]]] = {}

    def subscribe(self, event_id: str, callback: Callable[[List[Any]], None]) -> Callable[[], None]:
        """Subscribe to an event id.

        Args:
            event_id: Event to listen for
            callback: Receives the payload, always packed into a list

        Returns:
            Function that removes the subscription
        """
        callbacks = self._subscribers.setdefault(event_id, [])
        if callback not in callbacks:
            callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)
        return unsubscribe

    def trigger_event_by_id(self, event_id: Union[str, List[str]], payload: Any = None) -> None:
        """Trigger one or more events with a payload (best-effort per subscriber)."""
        packed = _pack(payload)
        for eid in _pack(event_id):
            for callback in list(self._subscribers.get(eid, [])):
                try:
                    callback(packed)
                except Exception as e:
                    logger.warning(f"Error in definition event callback for {eid!r}: {e}")
