"""Hierarchical event object: connect, block, hook and emit on event paths.

Event names are paths whose levels are split by a separator (``":"`` by
default). Emitting ``"mouse:click"`` notifies handlers connected at
``"mouse"`` first and then those at ``"mouse:click"``. Emitting ``"mouse"``
only notifies handlers connected at ``"mouse"``.

Usage:
    event = Event()

    @event.on("mouse")
    def on_mouse(name, *args):
        ...

    event.emit("mouse:click", 10, 20)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from eventree.config import EventConfig
from eventree.dispatch import Emission, StopFlag, dispatch
from eventree.exceptions import NotCallableError
from eventree.queue import handler_key
from eventree.tree import EventNode, EventTree, parse_segments

log = logging.getLogger(__name__)

Handler = Callable[..., Any]
Hook = Callable[[str], Any]


def _require_callable(value: Any, role: str) -> None:
    if not callable(value):
        raise NotCallableError(f"{role} must be callable, got {type(value).__name__}")


class Event:
    """A tree of events with their handlers, hooks and block state.

    Operations that attach something (``connect``, ``add_pre_hook``,
    ``add_post_hook``, ``emit``) create missing nodes along the path.
    Operations that detach or change state (``disconnect``, ``block``,
    ``unblock``, ``remove_*_hook``) do nothing on a path that was never
    created.
    """

    def __init__(self, config: EventConfig | None = None, **overrides: Any):
        if config is None:
            config = EventConfig(**overrides)
        elif overrides:
            config = EventConfig(**{**config.model_dump(), **overrides})
        self._config = config
        self._tree = EventTree()
        self._flag = StopFlag()
        self._active: list[Emission] = []

    def __repr__(self) -> str:
        return f"Event(separator={self._config.separator!r}, roots={list(self._tree.roots)})"

    @property
    def config(self) -> EventConfig:
        return self._config

    @property
    def tree(self) -> EventTree:
        return self._tree

    @property
    def stopped(self) -> bool:
        """Stop flag of the innermost running emission, or of the object when idle."""
        if self._active:
            return self._active[-1].stopped
        return self._flag.is_set

    def _segments(self, event_name: str) -> list[str]:
        return parse_segments(event_name, self._config.separator)

    def _resolve_leaf(self, event_name: str) -> EventNode:
        return self._tree.resolve(self._segments(event_name))[-1]

    def _lookup_leaf(self, event_name: str) -> EventNode | None:
        chain = self._tree.lookup(self._segments(event_name))
        return chain[-1] if chain else None

    # === Connections ===

    def connect(self, event_name: str, handler: Handler) -> None:
        """Call ``handler(event_name, *args, **kwargs)`` whenever ``event_name``
        or any event below it is emitted.

        Connecting the same handler twice makes it run twice. It keeps the
        block count it already had.
        """
        _require_callable(handler, "Handler")
        node = self._resolve_leaf(event_name)
        node.block_counts.setdefault(handler_key(handler), 0)
        node.handlers.push_back(handler)
        log.debug("Connected %r to %s", handler, event_name)

    def disconnect(self, event_name: str, handler: Handler) -> None:
        """Remove every connection of ``handler`` at ``event_name`` and its block state."""
        node = self._lookup_leaf(event_name)
        if node is None:
            return
        removed = node.handlers.remove(handler)
        node.block_counts.pop(handler_key(handler), None)
        log.debug("Disconnected %r from %s (%d entries)", handler, event_name, removed)

    def on(self, event_name: str) -> Callable[[Handler], Handler]:
        """Decorator that connects the function to ``event_name``."""

        def decorator(fn: Handler) -> Handler:
            self.connect(event_name, fn)
            return fn

        return decorator

    # === Blocking ===

    def block(self, event_name: str, handler: Handler) -> None:
        """Skip ``handler`` at this exact node until a matching ``unblock``.

        Blocks nest: two ``block`` calls need two ``unblock`` calls. Nothing
        happens if the handler is not connected at ``event_name``.
        """
        node = self._lookup_leaf(event_name)
        key = handler_key(handler)
        if node is None or key not in node.block_counts:
            return
        node.block_counts[key] += 1
        log.debug("Blocked %r at %s (count %d)", handler, event_name, node.block_counts[key])

    def unblock(self, event_name: str, handler: Handler) -> None:
        """Undo one ``block`` call. The count never goes below zero."""
        node = self._lookup_leaf(event_name)
        key = handler_key(handler)
        if node is None or not node.block_counts.get(key):
            return
        node.block_counts[key] -= 1
        log.debug("Unblocked %r at %s (count %d)", handler, event_name, node.block_counts[key])

    def is_blocked(self, event_name: str, handler: Handler) -> bool:
        node = self._lookup_leaf(event_name)
        return node is not None and node.block_counts.get(handler_key(handler), 0) > 0

    @contextmanager
    def blocked(self, event_name: str, handler: Handler) -> Iterator[None]:
        """Block ``handler`` at ``event_name`` for the duration of a ``with`` block."""
        self.block(event_name, handler)
        try:
            yield
        finally:
            self.unblock(event_name, handler)

    # === Hooks ===

    def add_pre_hook(self, event_name: str, hook: Hook) -> None:
        """Call ``hook(event_name)`` before any handler runs.

        Pre-hooks run root to leaf and, within a node, in the order they were
        added. They cannot be blocked, get no emission arguments, and their
        return values are ignored.
        """
        _require_callable(hook, "Pre-hook")
        self._resolve_leaf(event_name).pre_hooks.push_back(hook)
        log.debug("Added pre-hook %r to %s", hook, event_name)

    def remove_pre_hook(self, event_name: str, hook: Hook) -> None:
        node = self._lookup_leaf(event_name)
        if node is not None:
            node.pre_hooks.remove(hook)
            log.debug("Removed pre-hook %r from %s", hook, event_name)

    def add_post_hook(self, event_name: str, hook: Hook) -> None:
        """Call ``hook(event_name)`` after all handlers, even if the emission was stopped.

        Post-hooks run leaf to root and, within a node, newest first.
        """
        _require_callable(hook, "Post-hook")
        self._resolve_leaf(event_name).post_hooks.push_front(hook)
        log.debug("Added post-hook %r to %s", hook, event_name)

    def remove_post_hook(self, event_name: str, hook: Hook) -> None:
        node = self._lookup_leaf(event_name)
        if node is not None:
            node.post_hooks.remove(hook)
            log.debug("Removed post-hook %r from %s", hook, event_name)

    # === Emission ===

    def emit(self, event_name: str, *args: Any, **kwargs: Any) -> Emission:
        """Emit ``event_name``, notifying handlers from the root down to it.

        Extra arguments are passed on to every handler after the event name.
        Returns the finished Emission.
        """
        return self._emit(event_name, args, kwargs, None)

    def emit_with_accumulator(
        self,
        event_name: str,
        accumulator: Callable[[Any], Any],
        *args: Any,
        **kwargs: Any,
    ) -> Emission:
        """Emit ``event_name`` and feed each called handler's return value to ``accumulator``.

        A handler returning several values returns a tuple, which the
        accumulator receives as a single argument.
        """
        _require_callable(accumulator, "Accumulator")
        return self._emit(event_name, args, kwargs, accumulator)

    def _emit(
        self,
        event_name: str,
        args: tuple,
        kwargs: dict[str, Any],
        accumulator: Callable[[Any], Any] | None,
    ) -> Emission:
        segments = self._segments(event_name)
        self._flag.reset()
        flag = self._flag if self._config.shared_stop_flag else StopFlag()
        emission = Emission(event_name, args, kwargs, accumulator, flag)
        chain = self._tree.resolve(segments)

        self._active.append(emission)
        try:
            return dispatch(chain, emission)
        finally:
            self._active.pop()

    def stop(self) -> None:
        """Skip the remaining handlers of the running emission.

        Meant to be called from a pre-hook or a handler. Post-hooks still run.
        Outside an emission it only sets a flag that the next emit clears.
        """
        if self._active:
            self._active[-1].stop()
            log.debug("Stop requested for %s", self._active[-1].event_name)
        else:
            self._flag.set()

    # === Clearing ===

    def clear(self, event_name: str | None = None) -> None:
        """Remove handlers, hooks and block state.

        With no argument the whole tree is dropped. With an event name, the
        node at that path and everything below it is dropped, unless the
        ``prune_on_clear`` setting is off, in which case nothing happens.
        """
        if event_name is None:
            self._tree.clear()
            log.debug("Cleared all events")
            return
        segments = self._segments(event_name)
        if not self._config.prune_on_clear:
            return
        if self._tree.prune(segments):
            log.debug("Cleared %s", event_name)


_global_event: Event | None = None


def get_global_event() -> Event:
    """Return the process-wide Event, creating it on first use.

    There is no way to reset it. Tests should build their own Event objects.
    """
    global _global_event
    if _global_event is None:
        _global_event = Event()
    return _global_event


def connect(event_name: str, handler: Handler) -> None:
    """Connect ``handler`` on the global Event."""
    get_global_event().connect(event_name, handler)


def on(event_name: str) -> Callable[[Handler], Handler]:
    """Decorator connecting the function on the global Event."""
    return get_global_event().on(event_name)


def emit(event_name: str, *args: Any, **kwargs: Any) -> Emission:
    """Emit ``event_name`` on the global Event."""
    return get_global_event().emit(event_name, *args, **kwargs)
