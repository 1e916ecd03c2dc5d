from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from app.core.config import Settings
from app.core.urls import CanonicalURL, canonicalize
from app.services.units import STATUS_DONE, UnitRecord, UnitRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SaveOutcome:
    duplicate: bool
    unit: UnitRecord
    canonical: CanonicalURL
    updated: bool = False


@dataclass(slots=True)
class CheckOutcome:
    canonical: CanonicalURL
    unit: UnitRecord | None


def canonicalize_for(raw_url: str, settings: Settings) -> CanonicalURL:
    return canonicalize(raw_url, keep_fragment=settings.canonical_keep_fragment)


async def save_unit(
    repository: UnitRepository,
    settings: Settings,
    *,
    url: str,
    title: str,
    tags: list[str],
    source: str,
    force_update: bool = False,
    record_id: str | None = None,
) -> SaveOutcome:
    canonical = canonicalize_for(url, settings)

    if force_update and record_id:
        unit = await repository.update_unit(
            record_id,
            name=title,
            link=canonical.canonical,
            tags=tags,
            content_hash=canonical.hash,
        )
        logger.info("unit updated id=%s source=%s canonical=%s", unit.id, source, canonical.canonical)
        return SaveOutcome(duplicate=False, unit=unit, canonical=canonical, updated=True)

    existing = None
    if repository.supports_hash_lookup:
        existing = await repository.find_by_hash(canonical.hash)
    if existing is None:
        # records written without a hash are only reachable by their link
        existing = await repository.find_by_link(canonical.canonical)
    if existing is not None:
        logger.info("duplicate save id=%s source=%s canonical=%s", existing.id, source, canonical.canonical)
        return SaveOutcome(duplicate=True, unit=existing, canonical=canonical)

    unit = await repository.create_unit(
        name=title,
        link=canonical.canonical,
        tags=tags,
        content_hash=canonical.hash,
    )
    logger.info("unit created id=%s source=%s canonical=%s", unit.id, source, canonical.canonical)
    return SaveOutcome(duplicate=False, unit=unit, canonical=canonical)


async def check_unit(repository: UnitRepository, settings: Settings, *, url: str) -> CheckOutcome:
    canonical = canonicalize_for(url, settings)
    unit = await repository.find_by_link(canonical.canonical)
    return CheckOutcome(canonical=canonical, unit=unit)


async def list_tags(repository: UnitRepository) -> list[str]:
    tags: set[str] = set()
    for unit in await repository.list_units():
        for tag in unit.tags:
            if tag.strip():
                tags.add(tag.strip().lower())
    return sorted(tags)


async def set_unit_status(
    repository: UnitRepository,
    *,
    record_id: str,
    status: str,
    today: date | None = None,
) -> UnitRecord:
    done_date = None
    if status == STATUS_DONE:
        done_date = today or datetime.now(timezone.utc).date()
    unit = await repository.set_status(record_id, status=status, done_date=done_date)
    logger.info("unit status changed id=%s status=%s", unit.id, status)
    return unit

