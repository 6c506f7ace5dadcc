"""
Domain Events
=============
Login events and the in-process bus that delivers them to observers.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog

from .collaborators.models import UserProfile

logger = structlog.get_logger(__name__)

USER_LOGIN = "user.login"


@dataclass
class LoginEvent:
    """Emitted on every successful login, whatever the strategy."""
    user: UserProfile
    token: str
    strategy: str
    event_type: str = USER_LOGIN
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat(),
            "strategy": self.strategy,
            "user": self.user.model_dump(),
            "token": self.token,
        }


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


class EventBus:
    """
    In-memory event bus for domain events.

    Handlers may be sync or async. A failing handler is logged and never
    affects the publisher or the other handlers.
    """

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Subscribe to events of a specific type"""
        self.subscribers.setdefault(event_type, []).append(handler)
        logger.debug("Handler subscribed", handler=_handler_name(handler), event_type=event_type)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        """Unsubscribe from events of a specific type"""
        try:
            self.subscribers.get(event_type, []).remove(handler)
        except ValueError:
            logger.warning("Handler not subscribed", handler=_handler_name(handler), event_type=event_type)

    async def publish(self, event: Any) -> None:
        """Publish an event to all subscribers"""
        handlers = list(self.subscribers.get(event.event_type, []))
        if not handlers:
            logger.debug("No subscribers", event_type=event.event_type)
            return

        await asyncio.gather(*(self._handle_event(handler, event) for handler in handlers))

    async def _handle_event(self, handler: Callable, event: Any) -> None:
        try:
            result = handler(event)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(
                "Event handler failed",
                handler=_handler_name(handler),
                event_type=event.event_type,
                event_id=getattr(event, "event_id", None),
                error=str(e),
            )


async def emit_login(
    events: Optional[EventBus],
    user: UserProfile,
    token: str,
    strategy: str,
) -> LoginEvent:
    """Build and publish a ``user.login`` event."""
    event = LoginEvent(user=user, token=token, strategy=strategy)
    logger.info(
        "User logged in",
        event_id=event.event_id,
        user_id=user.id,
        strategy=strategy,
    )
    if events is not None:
        await events.publish(event)
    return event
