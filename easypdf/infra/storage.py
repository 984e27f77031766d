from __future__ import annotations

import logging
import os
import stat
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from easypdf.config import settings


logger = logging.getLogger(__name__)


class Storage(ABC):
    """Destination for rendered PDF bytes."""

    @abstractmethod
    def save(self, path: str | Path, data: bytes) -> str:  # returns path
        """Write ``data`` at ``path`` and return the written path as a string.

        An existing file is replaced, never appended to.
        """

    @abstractmethod
    def delete(self, path: str | Path) -> None:
        """Remove the file at ``path`` (ignored when missing)."""


class LocalStorage(Storage):
    """Local file system implementation of Storage.

    Data is first written to a temporary file next to the target and then
    moved into place with ``os.replace``, so readers never observe a partially
    written file. Missing parent directories are an error unless
    ``create_dirs`` is set.
    """

    def __init__(self, create_dirs: Optional[bool] = None) -> None:
        self._create_dirs = settings.create_dirs if create_dirs is None else create_dirs

    def save(self, path: str | Path, data: bytes) -> str:
        target = Path(path)
        if self._create_dirs:
            target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            # mkstemp creates 0600; give the file the mode a plain open() would.
            os.chmod(tmp_name, _target_mode(target))
            os.replace(tmp_name, target)
        except BaseException:
            self._discard(tmp_name)
            raise

        logger.info("wrote %d bytes to %s", len(data), target)
        return str(target)

    def delete(self, path: str | Path) -> None:
        target = Path(path)
        if target.exists():
            target.unlink()

    @staticmethod
    def _discard(tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("could not remove temporary file %s: %s", tmp_name, exc)


def _target_mode(target: Path) -> int:
    """Mode of the file being replaced, or 0666 minus the umask for a new one."""

    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def get_storage() -> Storage:
    """Return the Storage for the current settings.

    Only the local file system is supported.
    """

    return LocalStorage(create_dirs=settings.create_dirs)
