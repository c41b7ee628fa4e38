"""Shared test fixtures."""

import pytest

from eventree.event import Event


@pytest.fixture
def event():
    """A private Event, so tests never share state through the global one."""
    return Event()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def recorder(calls):
    """Build handlers/hooks that append a tag (and their arguments) to ``calls``."""

    def make(tag, result=None, with_args=False):
        def fn(event_name, *args, **kwargs):
            calls.append((tag, event_name, args, kwargs) if with_args else tag)
            return result

        fn.__name__ = f"record_{tag}"
        return fn

    return make
