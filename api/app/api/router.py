from fastapi import APIRouter, Depends

from app.api.routes import health, units
from app.core.security import get_basic_principal

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(
    units.router,
    prefix="/api",
    tags=["units"],
    dependencies=[Depends(get_basic_principal)],
)
