"""State store interface."""

from typing import Protocol


class StateStore(Protocol):
    """Interface for persisting named string slots.

    Implementations raise StorageError when a slot cannot be accessed.
    """

    def read(self, key: str) -> str | None:
        """Read a slot. Returns None if not set."""
        ...

    def write(self, key: str, value: str) -> None:
        """Write/overwrite a slot."""
        ...

    def remove(self, key: str) -> None:
        """Remove a slot if present."""
        ...
