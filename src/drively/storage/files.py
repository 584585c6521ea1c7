"""
File storage provider used by DocumentStore.

Paths are names relative to the provider's root. LocalFileStorage wraps
every OSError in StorageIOError, so the store only has one failure type to
handle.
"""
import contextlib
import os
import shutil
import stat
from pathlib import Path
from typing import Optional, Protocol

from drively.errors import StorageIOError


class FileStorage(Protocol):
    def read_file(self, name: str) -> Optional[bytes]:
        """Return the file's bytes, or None if it does not exist."""
        ...

    def write_file(self, name: str, data: bytes) -> None: ...

    def copy_file(self, src: str, dst: str) -> None: ...

    def delete_file(self, name: str) -> None: ...

    def exists(self, name: str) -> bool: ...


class LocalFileStorage:
    """
    Files under a root directory on local disk.

    Directory: 0700 (rwx------), created on first write.
    Files:     0600 (rw-------)

    write_file() writes to a sibling temp file and os.replace()s it into
    place, so a crash mid-write leaves either the old or the new content.
    """

    def __init__(self, root: Path):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, name: str) -> Path:
        return self._root / name

    def _ensure_root(self) -> None:
        if not self._root.exists():
            self._root.mkdir(parents=True, exist_ok=True)
            os.chmod(self._root, stat.S_IRWXU)  # 0700

    def read_file(self, name: str) -> Optional[bytes]:
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(f"Failed to read {name}: {exc}") from exc

    def write_file(self, name: str, data: bytes) -> None:
        target = self._path(name)
        tmp = target.with_name(target.name + ".tmp")
        try:
            self._ensure_root()
            tmp.write_bytes(data)
            os.chmod(tmp, stat.S_IRUSR | stat.S_IWUSR)  # 0600
            os.replace(tmp, target)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageIOError(f"Failed to write {name}: {exc}") from exc

    def copy_file(self, src: str, dst: str) -> None:
        try:
            self._ensure_root()
            shutil.copyfile(self._path(src), self._path(dst))
            os.chmod(self._path(dst), stat.S_IRUSR | stat.S_IWUSR)
        except OSError as exc:
            raise StorageIOError(f"Failed to copy {src} -> {dst}: {exc}") from exc

    def delete_file(self, name: str) -> None:
        """Delete name; does not raise if it is already absent."""
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageIOError(f"Failed to delete {name}: {exc}") from exc

    def exists(self, name: str) -> bool:
        return self._path(name).exists()
