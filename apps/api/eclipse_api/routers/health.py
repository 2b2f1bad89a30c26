from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from eclipse_api.core.config import get_settings
from eclipse_api.db import MongoConnection, get_connection
from eclipse_api.schemas.health import DatabaseCheckResponse, StatusResponse


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=StatusResponse)
def read_health() -> StatusResponse:
    settings = get_settings()
    return StatusResponse(
        message=f"{settings.app_name} is running",
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/test", response_model=StatusResponse)
def read_test() -> StatusResponse:
    return StatusResponse(message="API is working!", timestamp=datetime.now(timezone.utc))


@router.get("/dbtest", response_model=DatabaseCheckResponse)
def read_database_check(
    connection: MongoConnection = Depends(get_connection),
) -> DatabaseCheckResponse:
    """Verify MongoDB connectivity by listing the collections."""
    return DatabaseCheckResponse(
        message="Database connection successful!",
        collections=connection.list_collection_names(),
        timestamp=datetime.now(timezone.utc),
    )
