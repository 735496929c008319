"""Filesystem storage for per-record binary assets.

Layout under the configured storage root::

    <root>/<record_id>/<record_id>-cover<ext>
    <root>/<record_id>/<record_id>-background<ext>

Writes go to a temporary file in the record directory which is then renamed
over the target, so readers see either the previous bytes or the new ones.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Tuple

from comicbooks.domain.errors import StorageUnavailable
from comicbooks.domain.value_objects.enums import AssetRole
from comicbooks.infrastructure.keyed_lock import KeyedLock
from comicbooks.logging_config import get_logger

logger = get_logger("asset_store")

_TMP_SUFFIX = ".part"


def _current_umask() -> int:
    # The umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def extension_of(filename: str) -> str:
    """Return ``filename`` from its last ``.`` onwards, or ``""`` without one."""
    start = filename.rfind(".")
    if start == -1:
        return ""
    return filename[start:].strip()


class AssetStore:
    """Stores uploaded cover and background images for catalog records.

    The store knows nothing about records beyond the id used as a path
    segment; callers validate that the record exists.
    """

    def __init__(self, storage_root: str | os.PathLike[str]) -> None:
        self._root = Path(storage_root)
        self._file_mode = 0o666 & ~_current_umask()
        self._locks = KeyedLock[Tuple[int, AssetRole]]()
        self.ensure_root()

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        """Create the storage root if missing.

        A failure is logged, not raised: later writes fail on their own with
        :class:`StorageUnavailable`.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error(
                "Could not create the directory where uploaded assets will be stored",
                extra={"storage_root": str(self._root), "error": str(exc)},
            )

    def asset_path(self, record_id: int, role: AssetRole | str, filename: str) -> Path:
        role = AssetRole.parse(role)
        extension = extension_of(filename)
        if any(sep and sep in extension for sep in (os.sep, os.altsep, "/")):
            raise StorageUnavailable("Extension must not contain a path separator", filename)
        return self._record_dir(record_id) / f"{record_id}-{role.value}{extension}"

    def _record_dir(self, record_id: int) -> Path:
        return self._root / str(record_id)

    def store_asset(
        self, record_id: int, role: AssetRole | str, filename: str, content: bytes
    ) -> Path:
        """Write ``content`` as the ``role`` asset of ``record_id``.

        :raises InvalidRole: ``role`` is not a known asset role.
        :raises StorageUnavailable: the record directory or the file could not be written.
        :return: Path of the stored file.
        """
        role = AssetRole.parse(role)
        target = self.asset_path(record_id, role, filename)
        with self._locks.hold((record_id, role)):
            self._ensure_record_dir(self._record_dir(record_id))
            self._write_atomic(target, content)
        logger.info(
            "Stored asset",
            extra={
                "record_id": record_id,
                "role": role.value,
                "path": str(target),
                "size": len(content),
            },
        )
        return target

    def _ensure_record_dir(self, record_dir: Path) -> None:
        if record_dir.is_dir():
            return
        try:
            record_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error(
                "Could not create record asset directory",
                extra={"directory": str(record_dir), "error": str(exc)},
            )
            raise StorageUnavailable("Could not create asset directory", record_dir.name) from exc

    def _write_atomic(self, target: Path, content: bytes) -> None:
        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(target.parent), prefix=f".{target.name}.", suffix=_TMP_SUFFIX
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            # mkstemp creates 0600; stored assets follow the umask like a plain write
            os.chmod(tmp_path, self._file_mode)
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as exc:
            logger.error(
                "Could not store asset file",
                extra={"file_name": target.name, "error": str(exc)},
            )
            raise StorageUnavailable("Could not store file", target.name) from exc
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
