"""Health check endpoint with a data directory writability check."""

from typing import Annotated

from fastapi import APIRouter, Depends

from rolekeeper.api.v1.deps import SettingsDep, get_store
from rolekeeper.core.store import RecordStore
from rolekeeper.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    settings: SettingsDep,
    store: Annotated[RecordStore, Depends(get_store)],
) -> HealthResponse:
    """
    Return service health status and storage availability.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        storage="writable" if store.ping() else "unavailable",
    )
