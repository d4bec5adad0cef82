"""Persisted state storage interface."""

from typing import Protocol


class StateStore(Protocol):
    """Interface for reading and writing the serialized task store."""

    def read(self) -> str:
        """Read the persisted text. Empty string if nothing is stored yet."""
        ...

    def write(self, content: str) -> None:
        """Overwrite the persisted text."""
        ...
