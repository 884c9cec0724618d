"""File-backed storage for feed documents."""

import logging
import os
import tempfile
from pathlib import Path

from tubecast.feeds.document import FeedDocument
from tubecast.utils.errors import FeedNotFoundError, RepositoryError

logger = logging.getLogger(__name__)


class FeedRepository:
    """Load and save feed documents as ``<feeds_dir>/<name>.xml``.

    Example:
        >>> repository = FeedRepository(Path("./feeds"))
        >>> document = repository.load("my-channel")
        >>> repository.save("my-channel", document)
    """

    def __init__(self, feeds_dir: Path) -> None:
        """Initialize the repository.

        Args:
            feeds_dir: Directory holding the feed files
        """
        self.feeds_dir = feeds_dir

    def path_for(self, name: str) -> Path:
        """Return the file path for a feed name.

        Raises:
            RepositoryError: If the name would escape the feeds directory
        """
        if not name or name != Path(name).name or name in (".", ".."):
            raise RepositoryError(f"Invalid feed name: {name!r}")
        return self.feeds_dir / f"{name}.xml"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load(self, name: str) -> FeedDocument:
        """Load a feed document.

        Raises:
            FeedNotFoundError: If no feed is stored under ``name``
            FeedParseError: If the stored file is not valid RSS
            RepositoryError: If the file cannot be read
        """
        path = self.path_for(name)
        if not path.exists():
            raise FeedNotFoundError(name)

        try:
            data = path.read_bytes()
        except OSError as e:
            raise RepositoryError(f"Could not read feed {path}: {e}") from e

        logger.debug(f"Loaded feed '{name}' from {path} ({len(data)} bytes)")
        return FeedDocument.from_bytes(data)

    def save(self, name: str, document: FeedDocument) -> Path:
        """Replace the stored feed with ``document``.

        The new content is written to a temporary file in the same directory
        and renamed over the old one, so readers only ever see a complete feed.

        Returns:
            Path of the written feed

        Raises:
            RepositoryError: If the feed cannot be written
        """
        path = self.path_for(name)
        try:
            self.feeds_dir.mkdir(parents=True, exist_ok=True)
            self._write_file_atomic(path, document.to_bytes())
        except OSError as e:
            raise RepositoryError(f"Could not write feed {path}: {e}") from e

        logger.debug(f"Saved feed '{name}' to {path}")
        return path

    def _write_file_atomic(self, file_path: Path, content: bytes) -> None:
        """Write file via temp file + fsync + rename."""
        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent, prefix=".tmp_", suffix=".xml"
        )

        try:
            with open(temp_fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            Path(temp_path).replace(file_path)

            # Persist the rename; not every filesystem supports directory fsync
            try:
                dir_fd = os.open(file_path.parent, os.O_RDONLY)
                try:
                    os.fsync(dir_fd)
                finally:
                    os.close(dir_fd)
            except (OSError, AttributeError) as e:
                logger.debug(f"Directory fsync not supported: {e}")

        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise
