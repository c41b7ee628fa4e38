"""Double-ended, insertion-ordered queue used for handler and hook lists."""

from __future__ import annotations

from itertools import count
from types import MethodType
from typing import Any, Hashable, Iterable, Iterator


def handler_key(item: Any) -> Hashable:
    """Identity key for a handler or hook.

    Plain callables are keyed by ``id``, so unhashable callables work and
    equal-but-distinct objects stay separate. Bound methods are keyed by
    receiver and function, since every ``obj.method`` access builds a new
    method object.
    """
    if isinstance(item, MethodType):
        return (id(item.__self__), id(item.__func__))
    return id(item)


class HandlerQueue:
    """Ordered collection of callables.

    Items can be pushed at either end and removed by identity (see
    ``handler_key``). Removing an item costs one step per stored entry of that
    item, not per entry in the queue. Iteration walks a snapshot, so the queue
    may be changed while it is being iterated (for example a handler
    disconnecting itself during an emission) and the change only shows up on
    the next pass.
    """

    __slots__ = ("_front", "_back", "_index", "_seq")

    def __init__(self, items: Iterable[Any] = ()):
        # _front is kept oldest first and read reversed; _back is read as is.
        self._front: dict[int, Any] = {}
        self._back: dict[int, Any] = {}
        self._index: dict[Hashable, list[int]] = {}
        self._seq = count()
        for item in items:
            self.push_back(item)

    def __repr__(self) -> str:
        return f"HandlerQueue({list(self)!r})"

    def __len__(self) -> int:
        return len(self._front) + len(self._back)

    def __bool__(self) -> bool:
        return bool(self._front or self._back)

    def __contains__(self, item: Any) -> bool:
        return handler_key(item) in self._index

    def __iter__(self) -> Iterator[Any]:
        return self.get_iterator()

    def _add(self, side: dict[int, Any], item: Any) -> None:
        seq = next(self._seq)
        side[seq] = item
        self._index.setdefault(handler_key(item), []).append(seq)

    def push_back(self, item: Any) -> None:
        self._add(self._back, item)

    def push_front(self, item: Any) -> None:
        self._add(self._front, item)

    def remove(self, item: Any) -> int:
        """Remove every entry of ``item``.

        Returns the number of entries removed; zero when ``item`` is absent.
        """
        seqs = self._index.pop(handler_key(item), [])
        for seq in seqs:
            if seq in self._front:
                del self._front[seq]
            else:
                del self._back[seq]
        return len(seqs)

    def get_iterator(self) -> Iterator[Any]:
        """Iterate over the current contents, front to back."""
        return iter((*reversed(self._front.values()), *self._back.values()))

    def clear(self) -> None:
        self._front.clear()
        self._back.clear()
        self._index.clear()
