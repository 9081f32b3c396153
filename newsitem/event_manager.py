# newsitem/event_manager.py

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .models.types import ChangeAction, ChangeEvent, EntityType, NodeInfo
from .utils.logger import NewsItemLogger


class EventType(Enum):
    """Event types delivered to subscribers."""
    DOCUMENT_CHANGED = "document:changed"
    LANGUAGE_CHANGED = "language:changed"
    DOCUMENT_INVALIDATED = "document:invalidated"


class EventManager:
    """
    Synchronous event dispatch for committed news item changes.

    Handlers run inline, in subscription order, in the calling thread. A
    handler that raises propagates to the caller of the mutating operation.
    """
    def __init__(self, logger: Optional[NewsItemLogger] = None):
        self.logger = logger or NewsItemLogger(name=__name__)
        self._handlers: Dict[EventType, List[Callable[..., None]]] = {
            event_type: [] for event_type in EventType
        }

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[..., None]
    ) -> None:
        """Register an event handler."""
        if not isinstance(event_type, EventType):
            raise TypeError(f"event_type must be an EventType, got {type(event_type)}")

        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        """Remove an event handler."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def emit(self, event_type: EventType, **data) -> None:
        """Deliver an event to every handler of event_type."""
        # Copy so a handler may unsubscribe itself
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def notify(
        self,
        actor: str,
        entity_type: Union[EntityType, str],
        action: ChangeAction,
        data: Any = None,
        node: Optional[NodeInfo] = None
    ) -> ChangeEvent:
        """
        Report a committed change to DOCUMENT_CHANGED subscribers.

        Args:
            actor: Identifier of the caller that made the change
            entity_type: Kind of entity changed
            action: What happened to it
            data: Entity payload or snapshot
            node: Identifying attributes of the changed link element

        Returns:
            ChangeEvent: The delivered event
        """
        if isinstance(entity_type, EntityType):
            entity_type = entity_type.value

        event = ChangeEvent(
            actor=actor,
            entity_type=entity_type,
            action=action,
            data=data,
            node=node
        )
        self.logger.log_change(event)
        self.emit(EventType.DOCUMENT_CHANGED, event=event)
        return event
