from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.core.config import Settings
from app.core.urls import InvalidURLError
from app.services.reading_list import check_unit, list_tags, save_unit, set_unit_status
from app.services.store import InMemoryUnitStore
from app.services.units import STATUS_DONE, STATUS_TODO, UnitRecord


class LinkOnlyStore(InMemoryUnitStore):
    """Store without a hash column, so duplicates are found by canonical link."""

    @property
    def supports_hash_lookup(self) -> bool:
        return False

    async def find_by_hash(self, content_hash: str) -> UnitRecord | None:
        raise AssertionError("hash lookups are disabled")


def _settings(**overrides: object) -> Settings:
    return Settings(store_backend="memory", otel_enabled=False, **overrides)


def test_save_unit_deduplicates_by_link_without_hash_support() -> None:
    store = LinkOnlyStore()

    async def run() -> tuple[bool, bool]:
        first = await save_unit(
            store,
            _settings(),
            url="https://example.com/post/?gclid=1",
            title="Post",
            tags=["a"],
            source="Extension",
        )
        second = await save_unit(
            store,
            _settings(),
            url="https://example.com/post",
            title="Post again",
            tags=[],
            source="Extension",
        )
        return first.duplicate, second.duplicate

    assert asyncio.run(run()) == (False, True)
    assert len(store.units) == 1


def test_save_unit_finds_records_stored_without_hash() -> None:
    store = InMemoryUnitStore([UnitRecord(id="recOld", name="Old", link="https://example.com/a")])

    async def run() -> tuple[bool, bool]:
        check = await check_unit(store, _settings(), url="https://example.com/a/")
        save = await save_unit(
            store,
            _settings(),
            url="https://example.com/a/?utm_source=feed",
            title="Again",
            tags=[],
            source="Extension",
        )
        return check.unit is not None, save.duplicate

    assert asyncio.run(run()) == (True, True)
    assert list(store.units) == ["recOld"]


def test_save_unit_drops_fragment_when_configured() -> None:
    store = InMemoryUnitStore()
    settings = _settings(canonical_keep_fragment=False)

    outcome = asyncio.run(
        save_unit(store, settings, url="https://example.com/a#intro", title="A", tags=[], source="Extension")
    )

    assert outcome.canonical.canonical == "https://example.com/a"


def test_save_unit_invalid_url_does_not_touch_store() -> None:
    store = InMemoryUnitStore()

    with pytest.raises(InvalidURLError):
        asyncio.run(save_unit(store, _settings(), url="not-a-url", title="A", tags=[], source="Extension"))
    assert store.units == {}


def test_check_unit_returns_canonical_for_missing_record() -> None:
    outcome = asyncio.run(check_unit(InMemoryUnitStore(), _settings(), url="HTTPS://Example.com/x/"))

    assert outcome.unit is None
    assert outcome.canonical.canonical == "https://example.com/x"


def test_list_tags_skips_blank_tags() -> None:
    store = InMemoryUnitStore(
        [
            UnitRecord(id="rec1", name="A", link="https://a.example/", tags=["Web", "  "]),
            UnitRecord(id="rec2", name="B", link="https://b.example/", tags=["web ", "Async"]),
        ]
    )

    assert asyncio.run(list_tags(store)) == ["async", "web"]


def test_set_unit_status_stamps_done_date_only_for_done() -> None:
    store = InMemoryUnitStore([UnitRecord(id="rec1", name="A", link="https://a.example/")])

    done = asyncio.run(set_unit_status(store, record_id="rec1", status=STATUS_DONE, today=date(2024, 2, 29)))
    assert done.done_date == "2024-02-29"

    todo = asyncio.run(set_unit_status(store, record_id="rec1", status=STATUS_TODO, today=date(2024, 3, 1)))
    assert todo.status == STATUS_TODO
    assert todo.done_date is None
