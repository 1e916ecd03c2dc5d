from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.config import Settings, get_settings
from app.core.urls import InvalidURLError
from app.schemas.units import (
    CanonicalizeOut,
    CanonicalizeRequest,
    CheckOut,
    CheckRequest,
    DeleteOut,
    ExistingData,
    MarkDoneOut,
    RecordRequest,
    SaveOut,
    SaveRequest,
    StatusOut,
    TagsOut,
)
from app.services.reading_list import canonicalize_for, check_unit, list_tags, save_unit, set_unit_status
from app.services.repository import get_repository
from app.services.units import (
    STATUS_DONE,
    STATUS_NEXT,
    STATUS_TODO,
    RepositoryError,
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    UnitRecord,
)

router = APIRouter()


@router.post("/canonicalize", response_model=CanonicalizeOut)
async def canonicalize_url(payload: CanonicalizeRequest, settings: Settings = Depends(get_settings)) -> CanonicalizeOut:
    try:
        result = canonicalize_for(payload.url, settings)
    except InvalidURLError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CanonicalizeOut(canonical=result.canonical, hash=result.hash)


@router.post("/save", response_model=SaveOut)
async def save(
    payload: SaveRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    repository=Depends(get_repository),
) -> SaveOut:
    try:
        outcome = await save_unit(
            repository,
            settings,
            url=payload.url,
            title=payload.title,
            tags=payload.tags,
            source=payload.source,
            force_update=payload.force_update,
            record_id=payload.record_id,
        )
    except InvalidURLError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryError as exc:
        raise _repository_http_error(exc) from exc

    if outcome.duplicate:
        return SaveOut(
            duplicate=True,
            existing_id=outcome.unit.id,
            existing_data=_existing_data(outcome.unit),
        )
    if outcome.updated:
        return SaveOut(duplicate=False, id=outcome.unit.id, updated=True)

    response.status_code = status.HTTP_201_CREATED
    return SaveOut(duplicate=False, id=outcome.unit.id)


@router.post("/check", response_model=CheckOut)
async def check(
    payload: CheckRequest,
    settings: Settings = Depends(get_settings),
    repository=Depends(get_repository),
) -> CheckOut:
    try:
        outcome = await check_unit(repository, settings, url=payload.url)
    except InvalidURLError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryError as exc:
        raise _repository_http_error(exc) from exc

    if outcome.unit is None:
        return CheckOut(exists=False, canonical_url=outcome.canonical.canonical)
    return CheckOut(
        exists=True,
        record_id=outcome.unit.id,
        canonical_url=outcome.canonical.canonical,
        existing_data=_existing_data(outcome.unit),
    )


@router.get("/tags", response_model=TagsOut)
async def tags(repository=Depends(get_repository)) -> TagsOut:
    try:
        unique_tags = await list_tags(repository)
    except RepositoryError as exc:
        raise _repository_http_error(exc) from exc
    return TagsOut(tags=unique_tags, count=len(unique_tags))


@router.post("/mark-done", response_model=MarkDoneOut)
async def mark_done(payload: RecordRequest, repository=Depends(get_repository)) -> MarkDoneOut:
    unit = await _set_status(repository, payload.record_id, STATUS_DONE)
    return MarkDoneOut(success=True, record_id=unit.id, done_date=unit.done_date)


@router.post("/mark-next", response_model=StatusOut)
async def mark_next(payload: RecordRequest, repository=Depends(get_repository)) -> StatusOut:
    unit = await _set_status(repository, payload.record_id, STATUS_NEXT)
    return StatusOut(success=True, record_id=unit.id, status=unit.status)


@router.post("/mark-todo", response_model=StatusOut)
async def mark_todo(payload: RecordRequest, repository=Depends(get_repository)) -> StatusOut:
    unit = await _set_status(repository, payload.record_id, STATUS_TODO)
    return StatusOut(success=True, record_id=unit.id, status=unit.status)


@router.delete("/delete", response_model=DeleteOut)
async def delete(payload: RecordRequest, repository=Depends(get_repository)) -> DeleteOut:
    try:
        await repository.delete_unit(payload.record_id)
    except RepositoryError as exc:
        raise _repository_http_error(exc) from exc
    return DeleteOut(success=True)


async def _set_status(repository, record_id: str, unit_status: str) -> UnitRecord:
    try:
        return await set_unit_status(repository, record_id=record_id, status=unit_status)
    except RepositoryError as exc:
        raise _repository_http_error(exc) from exc


def _existing_data(unit: UnitRecord) -> ExistingData:
    return ExistingData(title=unit.name, tags=unit.tags, status=unit.status, done_date=unit.done_date)


def _repository_http_error(exc: RepositoryError) -> HTTPException:
    if isinstance(exc, RepositoryNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, RepositoryUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
