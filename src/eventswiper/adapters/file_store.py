"""File-based state storage adapter."""

from pathlib import Path

from eventswiper.core.errors import StorageError


class FileStateStore:
    """
    File-based state storage.

    Implements StateStore protocol. Each slot gets its own file.
    """

    def __init__(self, state_dir: Path | str):
        self.state_dir = Path(state_dir).expanduser()

    def _path_for_key(self, key: str) -> Path:
        """Get the file path for a slot."""
        return self.state_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        """Read a slot. Returns None if not set."""
        path = self._path_for_key(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        """Write/overwrite a slot via a temp file so readers never see half a value."""
        path = self._path_for_key(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def remove(self, key: str) -> None:
        """Remove a slot if present."""
        try:
            self._path_for_key(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot remove {key}: {e}") from e


class MemoryStateStore:
    """
    In-memory state storage.

    Implements StateStore protocol. Used in tests.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self.slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)
