from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

STATUS_TODO = "To do"
STATUS_NEXT = "Next"
STATUS_DONE = "Done"
UNIT_STATUSES = {STATUS_TODO, STATUS_NEXT, STATUS_DONE}


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the record store is not configured."""


class RepositoryUpstreamError(RepositoryError):
    """Raised when the record store rejects a request or cannot be reached."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested record does not exist."""


@dataclass(slots=True)
class UnitRecord:
    id: str
    name: str
    link: str
    tags: list[str] = field(default_factory=list)
    hash: str | None = None
    status: str | None = None
    done_date: str | None = None


class UnitRepository(Protocol):
    @property
    def supports_hash_lookup(self) -> bool: ...

    async def close(self) -> None: ...

    async def find_by_hash(self, content_hash: str) -> UnitRecord | None: ...

    async def find_by_link(self, link: str) -> UnitRecord | None: ...

    async def list_units(self) -> list[UnitRecord]: ...

    async def create_unit(self, *, name: str, link: str, tags: list[str], content_hash: str) -> UnitRecord: ...

    async def update_unit(
        self,
        record_id: str,
        *,
        name: str,
        link: str,
        tags: list[str],
        content_hash: str,
    ) -> UnitRecord: ...

    async def set_status(self, record_id: str, *, status: str, done_date: date | None) -> UnitRecord: ...

    async def delete_unit(self, record_id: str) -> None: ...
