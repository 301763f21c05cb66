"""File-backed store with whole-document atomic replacement."""

import os
import tempfile
from pathlib import Path
from typing import Optional
import structlog

from eth_wallet.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

SECURE_FILE_MODE = 0o600


class FileStore:
    """
    Reads and writes whole documents on the local filesystem.

    Writes go to a temporary file in the target directory which then
    replaces the destination, so a reader sees either the previous
    document or the new one.
    """

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_all(self, path: str) -> Optional[bytes]:
        """Return the document bytes, or None when no document exists."""
        try:
            return Path(path).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def write_all(self, path: str, data: bytes) -> None:
        target = Path(path)
        directory = target.parent if str(target.parent) else Path('.')

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
        except OSError as e:
            raise PersistenceError(f"Failed to prepare write of {path}: {e}") from e

        try:
            with os.fdopen(fd, 'wb') as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            # The document holds a private key
            if os.name == 'posix':
                os.chmod(tmp_name, SECURE_FILE_MODE)
            os.replace(tmp_name, target)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Failed to remove temporary file", path=tmp_name)
            raise PersistenceError(f"Failed to write {path}: {e}") from e

        logger.debug("Document written", path=str(target), size=len(data))
