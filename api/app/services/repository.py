from functools import lru_cache

from app.core.config import get_settings
from app.services.airtable import AirtableRepository
from app.services.store import InMemoryUnitStore
from app.services.units import UnitRepository


@lru_cache
def get_repository() -> UnitRepository:
    settings = get_settings()
    if settings.store_backend == "memory":
        return InMemoryUnitStore()
    return AirtableRepository(
        pat=settings.airtable_pat,
        base_id=settings.airtable_base_id,
        table=settings.airtable_table,
        api_url=settings.airtable_api_url,
        timeout_seconds=settings.airtable_timeout_seconds,
        hash_field=settings.airtable_hash_field,
    )
