"""Health check endpoint with database connectivity and cache state."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rolodex.core.config import settings
from rolodex.core.database import check_db_connected, get_db
from rolodex.core.dependencies import AccountServices, get_account_services
from rolodex.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Session = Depends(get_db),
    services: AccountServices = Depends(get_account_services),
) -> HealthResponse:
    """
    Return service health, database connectivity and the published cache versions.
    Reads the published references only; never triggers a refresh.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    snapshot = services.roles.current
    allow_list = services.allow_list.current

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        role_snapshot_version=snapshot.version if snapshot is not None else None,
        handler_allow_list_size=len(allow_list) if allow_list is not None else None,
        refresh_running=services.scheduler.running,
    )
