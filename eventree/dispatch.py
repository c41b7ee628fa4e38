"""Emission dispatch: pre-hooks, handlers and post-hooks over a node chain."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence, TYPE_CHECKING

from eventree.queue import handler_key

if TYPE_CHECKING:
    from eventree.tree import EventNode

log = logging.getLogger(__name__)


class StopFlag:
    """Mutable boolean shared by reference between an emission and its owner."""

    __slots__ = ("is_set",)

    def __init__(self):
        self.is_set = False

    def __repr__(self) -> str:
        return f"StopFlag({self.is_set})"

    def set(self) -> None:
        self.is_set = True

    def reset(self) -> None:
        self.is_set = False


class Emission:
    """State of one call to ``emit``.

    The stop flag is held by reference. An Event hands every emission a fresh
    flag by default, so a nested emit cannot reset the flag of the emission
    it was started from. In shared-flag mode every emission gets the Event's
    single flag instead.
    """

    __slots__ = ("event_name", "args", "kwargs", "accumulator", "flag", "handlers_called")

    def __init__(
        self,
        event_name: str,
        args: tuple = (),
        kwargs: dict[str, Any] | None = None,
        accumulator: Callable[[Any], Any] | None = None,
        flag: StopFlag | None = None,
    ):
        self.event_name = event_name
        self.args = args
        self.kwargs = kwargs or {}
        self.accumulator = accumulator
        self.flag = flag if flag is not None else StopFlag()
        self.handlers_called = 0

    def __repr__(self) -> str:
        return (
            f"Emission({self.event_name!r}, stopped={self.stopped}, "
            f"handlers_called={self.handlers_called})"
        )

    @property
    def stopped(self) -> bool:
        return self.flag.is_set

    def stop(self) -> None:
        self.flag.set()


def run_pre_hooks(chain: Sequence["EventNode"], event_name: str) -> None:
    """Call pre-hooks root to leaf, each node's hooks in the order they were added."""
    for node in chain:
        for hook in node.pre_hooks:
            hook(event_name)


def run_handlers(chain: Sequence["EventNode"], emission: Emission) -> None:
    """Call unblocked handlers root to leaf until the emission is stopped.

    The stop flag is checked before every handler, blocked ones included, so
    a stop takes effect at the next handler and ends the whole phase.
    """
    event_name = emission.event_name
    accumulator = emission.accumulator
    for node in chain:
        for handler in node.handlers:
            if emission.stopped:
                log.debug("Emission of %s stopped after %d handler(s)",
                          event_name, emission.handlers_called)
                return
            if node.block_counts.get(handler_key(handler)) != 0:
                continue
            result = handler(event_name, *emission.args, **emission.kwargs)
            emission.handlers_called += 1
            if accumulator is not None:
                accumulator(result)


def run_post_hooks(chain: Sequence["EventNode"], event_name: str) -> None:
    """Call post-hooks leaf to root, each node's hooks in stored (newest first) order."""
    for node in reversed(chain):
        for hook in node.post_hooks:
            hook(event_name)


def dispatch(chain: Sequence["EventNode"], emission: Emission) -> Emission:
    """Run all three phases of an emission over a resolved node chain.

    Post-hooks run even if the handler phase was stopped, and also when a
    pre-hook or handler raises; the exception then propagates to the caller.
    """
    log.debug("Emitting %s over %d node(s)", emission.event_name, len(chain))
    try:
        run_pre_hooks(chain, emission.event_name)
        run_handlers(chain, emission)
    finally:
        run_post_hooks(chain, emission.event_name)
    log.debug("Emitted %s: %d handler(s) called", emission.event_name, emission.handlers_called)
    return emission
