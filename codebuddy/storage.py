"""Filesystem storage for the user's saved code files."""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    name: str
    size: int
    last_modified: str

    def to_dict(self) -> dict:
        return asdict(self)


class FileStorage:
    """Manages named text files in a single directory."""

    def __init__(self, files_dir: str | Path = "user_files"):
        self.files_dir = Path(files_dir)
        self.files_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        """Resolve a user-supplied name to a path inside the files directory."""
        safe_name = secure_filename(name or "")
        if not safe_name:
            raise ValueError(f"Invalid file name: {name!r}")
        return self.files_dir / safe_name

    def list_files(self) -> list[StoredFile]:
        """List stored files, newest first."""
        self.files_dir.mkdir(parents=True, exist_ok=True)
        files = []
        for path in self.files_dir.iterdir():
            if not path.is_file():
                continue
            stats = path.stat()
            files.append(StoredFile(
                name=path.name,
                size=stats.st_size,
                last_modified=datetime.fromtimestamp(stats.st_mtime).isoformat(),
            ))
        return sorted(files, key=lambda f: f.last_modified, reverse=True)

    def read_file(self, name: str) -> str:
        """Read a file's content. Raises FileNotFoundError if it doesn't exist."""
        path = self._path(name)
        if not path.is_file():
            raise FileNotFoundError(name)
        return path.read_text(encoding="utf-8")

    def save_file(self, name: str, content: str) -> StoredFile:
        """Create or overwrite a file."""
        path = self._path(name)
        self.files_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(content or "", encoding="utf-8")
        logger.info("Saved %s (%d chars)", path.name, len(content or ""))
        stats = path.stat()
        return StoredFile(
            name=path.name,
            size=stats.st_size,
            last_modified=datetime.fromtimestamp(stats.st_mtime).isoformat(),
        )

    def delete_file(self, name: str) -> None:
        """Delete a file. Raises FileNotFoundError if it doesn't exist."""
        path = self._path(name)
        if not path.is_file():
            raise FileNotFoundError(name)
        path.unlink()
        logger.info("Deleted %s", path.name)

    def clear(self) -> int:
        """Delete every stored file; returns how many were removed."""
        count = 0
        for path in self.files_dir.iterdir():
            if path.is_file() and path.name != ".gitkeep":
                path.unlink()
                count += 1
        return count
