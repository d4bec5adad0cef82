"""File-based state storage adapter."""

from pathlib import Path


class StateIOError(Exception):
    """Raised when persisted state cannot be read or written."""

    def __init__(
        self,
        message: str,
        fallback_path: Path | None = None,
        content: str | None = None,
    ):
        super().__init__(message)
        self.fallback_path = fallback_path
        self.content = content


class FileStateStore:
    """
    Single-file state storage.

    Implements StateStore protocol. A missing file reads as empty state.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def read(self) -> str:
        """Read the persisted text. Empty string if the file does not exist."""
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StateIOError(f"Failed to read {self.path}: {e}") from e

    def write(self, content: str) -> None:
        """Overwrite the file, creating parent directories."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StateIOError(f"Failed to write {self.path}: {e}") from e
