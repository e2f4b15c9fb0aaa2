"""Minimal synchronous publish/subscribe bus and message payloads."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
import logging
import threading
from typing import Any, Callable, DefaultDict, List, Tuple

__all__ = [
    "DepthMessage",
    "HeadingMessage",
    "PositionMessage",
    "ResetMessage",
    "MessageBus",
    "RecordingSubscriber",
    "Handler",
]

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class DepthMessage:
    depth_m: float


@dataclass(frozen=True, slots=True)
class HeadingMessage:
    heading_deg: float
    stamp: float


@dataclass(frozen=True, slots=True)
class PositionMessage:
    latitude: float
    longitude: float
    stamp: float


@dataclass(frozen=True, slots=True)
class ResetMessage:
    data: bool = True


class MessageBus:
    """Deliver messages to topic subscribers in the publisher's thread.

    Handlers run in subscription order. Exceptions raised by a handler
    propagate to the publisher and stop delivery to later handlers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        with self._lock:
            self._subscribers[topic].append(handler)
        LOGGER.debug("Subscribed %r to %s", handler, topic)

    def unsubscribe(self, topic: str, handler: Handler) -> bool:
        with self._lock:
            handlers = self._subscribers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def publish(self, topic: str, message: Any) -> int:
        """Deliver ``message`` to every handler on ``topic``; return the count."""

        with self._lock:
            handlers = list(self._subscribers.get(topic, []))
        for handler in handlers:
            handler(message)
        return len(handlers)


@dataclass
class RecordingSubscriber:
    """Collect every message received on subscribed topics."""

    messages: List[Tuple[str, Any]] = field(default_factory=list)

    def listen(self, bus: MessageBus, topic: str) -> None:
        bus.subscribe(topic, lambda message: self.messages.append((topic, message)))

    def on(self, topic: str) -> List[Any]:
        return [message for name, message in self.messages if name == topic]

    def last(self, topic: str) -> Any:
        received = self.on(topic)
        if not received:
            raise LookupError(f"No messages received on {topic}")
        return received[-1]
