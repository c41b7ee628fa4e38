"""Event tree: one node per event name segment, created on first use."""

from __future__ import annotations

import logging
from typing import Hashable, Iterator

from eventree.config import DEFAULT_SEPARATOR
from eventree.exceptions import InvalidEventNameError
from eventree.queue import HandlerQueue

log = logging.getLogger(__name__)


def parse_segments(event_name: str, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    """Split an event name into its hierarchy levels.

    Empty segments from leading, trailing or repeated separators are
    dropped, so ``"a::b:"`` gives ``["a", "b"]``.

    Raises:
        InvalidEventNameError: If ``event_name`` is not a string or has no
            non-empty segment.
    """
    if not isinstance(event_name, str):
        raise InvalidEventNameError(
            f"Event name must be a string, got {type(event_name).__name__}"
        )
    segments = [s for s in event_name.split(separator) if s]
    if not segments:
        raise InvalidEventNameError(f"Event name {event_name!r} has no segments")
    return segments


class EventNode:
    """Handlers, hooks and block state for one exact event path."""

    __slots__ = ("name", "handlers", "pre_hooks", "post_hooks", "block_counts", "children")

    def __init__(self, name: str):
        self.name = name
        self.handlers = HandlerQueue()
        self.pre_hooks = HandlerQueue()
        # Filled with push_front: the last post-hook added runs first.
        self.post_hooks = HandlerQueue()
        # Keyed by handler_key, not by the handler itself.
        self.block_counts: dict[Hashable, int] = {}
        self.children: dict[str, EventNode] = {}

    def __repr__(self) -> str:
        return (
            f"EventNode({self.name!r}, handlers={len(self.handlers)}, "
            f"children={list(self.children)})"
        )


class EventTree:
    """Mapping from root segment to root node, with path resolution.

    ``resolve`` creates any missing node on the way down and is used by
    operations that attach something (connect, hooks, emit). ``lookup`` never
    creates and is used by operations that must do nothing on unknown paths.
    """

    def __init__(self):
        self._roots: dict[str, EventNode] = {}

    def __len__(self) -> int:
        return len(self._roots)

    @property
    def roots(self) -> dict[str, EventNode]:
        return self._roots

    def resolve(self, segments: list[str]) -> list[EventNode]:
        """Return the root-to-leaf chain for ``segments``, creating nodes as needed."""
        chain: list[EventNode] = []
        level = self._roots
        for segment in segments:
            node = level.get(segment)
            if node is None:
                node = level[segment] = EventNode(segment)
                log.debug("Created node %r at depth %d", segment, len(chain))
            chain.append(node)
            level = node.children
        return chain

    def lookup(self, segments: list[str]) -> list[EventNode] | None:
        """Return the root-to-leaf chain for ``segments``, or None if any node is missing."""
        chain: list[EventNode] = []
        level = self._roots
        for segment in segments:
            node = level.get(segment)
            if node is None:
                return None
            chain.append(node)
            level = node.children
        return chain

    def prune(self, segments: list[str]) -> bool:
        """Drop the node at ``segments`` together with its whole subtree.

        Returns True if a node was removed.
        """
        *parents, leaf = segments
        if parents:
            chain = self.lookup(parents)
            if chain is None:
                return False
            level = chain[-1].children
        else:
            level = self._roots
        if leaf not in level:
            return False
        del level[leaf]
        return True

    def clear(self) -> None:
        self._roots = {}

    def walk(self, separator: str = DEFAULT_SEPARATOR) -> Iterator[tuple[str, EventNode]]:
        """Yield ``(path, node)`` for every node, depth first."""
        stack = [(name, node) for name, node in reversed(self._roots.items())]
        while stack:
            path, node = stack.pop()
            yield path, node
            stack.extend(
                (f"{path}{separator}{name}", child)
                for name, child in reversed(node.children.items())
            )
