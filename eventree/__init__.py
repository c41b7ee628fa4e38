"""eventree: hierarchical in-process publish/subscribe events."""

from .config import EventConfig
from .dispatch import Emission
from .event import Event, get_global_event, connect, on, emit
from .exceptions import EventError, InvalidEventNameError, NotCallableError
from .queue import HandlerQueue
from .tree import EventNode, EventTree, parse_segments

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventConfig",
    "Emission",
    "get_global_event",
    "connect",
    "on",
    "emit",
    "EventError",
    "InvalidEventNameError",
    "NotCallableError",
    "HandlerQueue",
    "EventNode",
    "EventTree",
    "parse_segments",
]
