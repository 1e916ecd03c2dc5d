from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import Settings, get_settings

router = APIRouter()


@router.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    if settings.store_backend == "airtable" and not (settings.airtable_pat and settings.airtable_base_id):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Airtable store is not configured",
        )
    return {"status": "ok", "store": settings.store_backend}
