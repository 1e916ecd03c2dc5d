from __future__ import annotations

import logging
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx

from app.services.units import (
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    RepositoryUpstreamError,
    UnitRecord,
)

NAME_FIELD = "Name"
LINK_FIELD = "Link"
TAGS_FIELD = "Tags"
STATUS_FIELD = "Status"
DONE_DATE_FIELD = "Done date"

logger = logging.getLogger(__name__)


class AirtableRepository:
    """Reading-list units stored in an Airtable table via the REST API."""

    def __init__(
        self,
        *,
        pat: str | None,
        base_id: str | None,
        table: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout_seconds: float = 10.0,
        hash_field: str | None = "hash",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.pat = pat
        self.base_id = base_id
        self.table = table
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.hash_field = hash_field or None
        self._client = client
        self._owns_client = client is None

    @property
    def supports_hash_lookup(self) -> bool:
        return self.hash_field is not None

    @property
    def table_url(self) -> str:
        return f"{self.api_url}/{self.base_id}/{quote(self.table, safe='')}"

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def find_by_hash(self, content_hash: str) -> UnitRecord | None:
        if self.hash_field is None:
            raise RepositoryUnavailableError("hash field lookups are disabled")
        return await self._find_first(self.hash_field, content_hash)

    async def find_by_link(self, link: str) -> UnitRecord | None:
        return await self._find_first(LINK_FIELD, link)

    async def list_units(self) -> list[UnitRecord]:
        units: list[UnitRecord] = []
        offset: str | None = None
        while True:
            params = {"offset": offset} if offset else None
            payload = await self._request("GET", self.table_url, params=params)
            units.extend(self._to_unit(record) for record in payload.get("records", []))
            offset = payload.get("offset")
            if not offset:
                return units

    async def create_unit(self, *, name: str, link: str, tags: list[str], content_hash: str) -> UnitRecord:
        fields = self._unit_fields(name=name, link=link, tags=tags, content_hash=content_hash)
        payload = await self._request("POST", self.table_url, json={"fields": fields, "typecast": True})
        return self._to_unit(payload)

    async def update_unit(
        self,
        record_id: str,
        *,
        name: str,
        link: str,
        tags: list[str],
        content_hash: str,
    ) -> UnitRecord:
        fields = self._unit_fields(name=name, link=link, tags=tags, content_hash=content_hash)
        payload = await self._request(
            "PATCH",
            self._record_url(record_id),
            json={"fields": fields, "typecast": True},
            record_scoped=True,
        )
        return self._to_unit(payload)

    async def set_status(self, record_id: str, *, status: str, done_date: date | None) -> UnitRecord:
        fields = {
            STATUS_FIELD: status,
            DONE_DATE_FIELD: done_date.isoformat() if done_date else None,
        }
        payload = await self._request(
            "PATCH",
            self._record_url(record_id),
            json={"fields": fields, "typecast": True},
            record_scoped=True,
        )
        return self._to_unit(payload)

    async def delete_unit(self, record_id: str) -> None:
        await self._request("DELETE", self._record_url(record_id), record_scoped=True)

    async def _find_first(self, field_name: str, value: str) -> UnitRecord | None:
        params = {
            "filterByFormula": f"{{{field_name}}}={_formula_string(value)}",
            "maxRecords": 1,
        }
        payload = await self._request("GET", self.table_url, params=params)
        records = payload.get("records") or []
        return self._to_unit(records[0]) if records else None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        record_scoped: bool = False,
    ) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {self.pat}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("airtable request failed method=%s error=%s", method, exc)
            raise RepositoryUpstreamError(f"Airtable request failed: {exc}") from exc

        if response.status_code == 404 and record_scoped:
            # a 404 on the table URL itself means a wrong base or table name
            raise RepositoryNotFoundError("record not found")
        if response.is_error:
            logger.warning(
                "airtable error response method=%s status=%s body=%s",
                method,
                response.status_code,
                response.text,
            )
            raise RepositoryUpstreamError(
                f"Airtable API error: {response.status_code} {response.reason_phrase} - {response.text}"
            )
        return response.json()

    def _get_client(self) -> httpx.AsyncClient:
        if not self.pat or not self.base_id:
            raise RepositoryUnavailableError("RL_AIRTABLE_PAT and RL_AIRTABLE_BASE_ID are required")
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
            self._owns_client = True
        return self._client

    def _record_url(self, record_id: str) -> str:
        return f"{self.table_url}/{quote(record_id, safe='')}"

    def _unit_fields(self, *, name: str, link: str, tags: list[str], content_hash: str) -> dict[str, Any]:
        fields: dict[str, Any] = {NAME_FIELD: name, LINK_FIELD: link, TAGS_FIELD: tags}
        if self.hash_field is not None:
            fields[self.hash_field] = content_hash
        return fields

    def _to_unit(self, record: dict[str, Any]) -> UnitRecord:
        fields = record.get("fields") or {}
        raw_tags = fields.get(TAGS_FIELD)
        return UnitRecord(
            id=str(record.get("id", "")),
            name=_as_text(fields.get(NAME_FIELD)) or "",
            link=_as_text(fields.get(LINK_FIELD)) or "",
            tags=[tag for tag in raw_tags if isinstance(tag, str)] if isinstance(raw_tags, list) else [],
            hash=_as_text(fields.get(self.hash_field)) if self.hash_field else None,
            status=_as_text(fields.get(STATUS_FIELD)),
            done_date=_as_text(fields.get(DONE_DATE_FIELD)),
        )


def _formula_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None
