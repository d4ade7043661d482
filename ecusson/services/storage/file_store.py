"""
File-backed Blob Store

DESIGN DECISION: Each key of the app group is one file inside the group
directory. Writes go to a temporary file in the same directory and are then
moved into place with os.replace, which is atomic on the same filesystem.
A reader in another process therefore sees the previous or the new blob,
never a torn one.

TRADEOFFS:
- Last writer wins between processes (acceptable for one person's ledger)
- No change notification (the refresh signal covers that)
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from ecusson.services.storage.interface import (
    BlobStoreInterface,
    StorageUnavailableError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class FileBlobStore(BlobStoreInterface):
    """
    Blob store rooted at a shared app group directory.
    """

    def __init__(self, group_dir: Union[str, Path]):
        self._group_dir = Path(group_dir)

    @property
    def group_dir(self) -> Path:
        return self._group_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid blob key: {key!r}")
        return self._group_dir / f"{key}.json"

    def read(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            with path.open("rb") as handle:
                return handle.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read '{key}': {e}") from e

    def write(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            self._group_dir.mkdir(parents=True, exist_ok=True)
            # Keep the temp file in the target directory so the replace stays atomic
            fd, tmp = tempfile.mkstemp(prefix=f".{key}_", suffix=".tmp", dir=self._group_dir)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write '{key}': {e}") from e

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp, path)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write '{key}': {e}") from e
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageUnavailableError(f"Cannot delete '{key}': {e}") from e
        return True
