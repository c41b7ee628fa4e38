"""Configuration for Event objects."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_SEPARATOR = ":"


class EventConfig(BaseModel):
    """Settings for a single Event object.

    Attributes:
        separator: String splitting an event name into hierarchy levels.
        shared_stop_flag: If True, every emission (nested ones included) shares
            one object-level stop flag, and a nested emit resets it for the
            outer one. If False, each emission carries its own flag.
        prune_on_clear: If True, ``clear(name)`` drops the node at ``name`` and
            everything below it. If False, ``clear(name)`` does nothing.
    """

    model_config: ClassVar[dict] = ConfigDict(frozen=True, extra="forbid")

    separator: str = DEFAULT_SEPARATOR
    shared_stop_flag: bool = False
    prune_on_clear: bool = True

    @field_validator("separator")
    @classmethod
    def _separator_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("separator must be a non-empty string")
        return value
