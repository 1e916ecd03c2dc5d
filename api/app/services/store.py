from __future__ import annotations

from dataclasses import replace
from datetime import date
from uuid import uuid4

from app.services.units import RepositoryNotFoundError, UnitRecord


class InMemoryUnitStore:
    """Process-local unit store for development without Airtable credentials."""

    def __init__(self, units: list[UnitRecord] | None = None) -> None:
        self.units: dict[str, UnitRecord] = {unit.id: unit for unit in units or []}

    @property
    def supports_hash_lookup(self) -> bool:
        return True

    async def close(self) -> None:
        return None

    async def find_by_hash(self, content_hash: str) -> UnitRecord | None:
        return next((unit for unit in self.units.values() if unit.hash == content_hash), None)

    async def find_by_link(self, link: str) -> UnitRecord | None:
        return next((unit for unit in self.units.values() if unit.link == link), None)

    async def list_units(self) -> list[UnitRecord]:
        return list(self.units.values())

    async def create_unit(self, *, name: str, link: str, tags: list[str], content_hash: str) -> UnitRecord:
        unit = UnitRecord(id=f"rec{uuid4().hex[:14]}", name=name, link=link, tags=list(tags), hash=content_hash)
        self.units[unit.id] = unit
        return unit

    async def update_unit(
        self,
        record_id: str,
        *,
        name: str,
        link: str,
        tags: list[str],
        content_hash: str,
    ) -> UnitRecord:
        unit = self._get(record_id)
        updated = replace(unit, name=name, link=link, tags=list(tags), hash=content_hash)
        self.units[record_id] = updated
        return updated

    async def set_status(self, record_id: str, *, status: str, done_date: date | None) -> UnitRecord:
        unit = self._get(record_id)
        updated = replace(unit, status=status, done_date=done_date.isoformat() if done_date else None)
        self.units[record_id] = updated
        return updated

    async def delete_unit(self, record_id: str) -> None:
        self._get(record_id)
        del self.units[record_id]

    def _get(self, record_id: str) -> UnitRecord:
        unit = self.units.get(record_id)
        if unit is None:
            raise RepositoryNotFoundError("record not found")
        return unit
