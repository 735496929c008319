"""Error taxonomy for catalog records and their stored assets.

Each error carries enough context (role, file or directory name, record id)
to diagnose the failure from a log line alone. ``http_status_for`` gives the
status a request-handling layer should answer with.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CatalogError(RuntimeError):
    """Base class for errors raised by the catalog core."""


class InvalidRole(CatalogError, ValueError):
    """Raised when an asset role is not one of the known roles."""

    def __init__(self, role: object) -> None:
        super().__init__(f"Unknown asset role: {role!r}")
        self.role = role


class NotFound(CatalogError, LookupError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, record_id: int) -> None:
        super().__init__(f"{entity} not found: id={record_id}")
        self.entity = entity
        self.record_id = record_id


class StorageUnavailable(CatalogError):
    """Raised when an asset directory or file cannot be written."""

    def __init__(self, message: str, target: str) -> None:
        super().__init__(f"{message}: {target}")
        self.target = target


class PersistenceFailure(CatalogError):
    """Raised when a record update fails after its asset was already written.

    The file at ``orphaned_path`` stays on disk without a record referencing it.
    """

    def __init__(
        self, record_id: int, orphaned_path: Path, cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(
            f"Could not persist asset path for record {record_id}; orphaned file: {orphaned_path}"
        )
        self.record_id = record_id
        self.orphaned_path = orphaned_path
        self.cause = cause


def http_status_for(exc: BaseException) -> int:
    """Map a catalog error to the HTTP status a caller should report."""

    if isinstance(exc, InvalidRole):
        return 400
    if isinstance(exc, NotFound):
        return 404
    return 500
