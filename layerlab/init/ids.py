"""Identifier generators for new layers, neurons and connections."""

import itertools
import uuid
from typing import Protocol, runtime_checkable


@runtime_checkable
class IdGenerator(Protocol):
    """Protocol for unique id generation."""

    def new_id(self) -> str:
        """Return an identifier not handed out before in this session."""
        ...


class UuidIdGenerator:
    """Random uuid4 strings."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIdGenerator:
    """Deterministic ids of the form ``<prefix>-<n>``.

    Args:
        prefix: Text placed before the counter.
        start: First counter value.
    """

    def __init__(self, prefix: str = "id", start: int = 0) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
