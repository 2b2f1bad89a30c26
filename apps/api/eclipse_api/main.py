import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eclipse_api.core.config import get_settings
from eclipse_api.core.errors import StoreUnavailableError
from eclipse_api.core.logging_config import configure_logging
from eclipse_api.db import MongoConnection
from eclipse_api.repositories.user import UserRepository
from eclipse_api.routers import auth, health
from eclipse_api.schemas.auth import ErrorResponse


logger = logging.getLogger(__name__)
settings = get_settings()

MONGO_MAX_ATTEMPTS = 5
MONGO_INITIAL_DELAY_SECONDS = 1.0


async def wait_for_mongo(connection: MongoConnection) -> None:
    """Ensure the users indexes exist, retrying while MongoDB starts up."""

    repository = UserRepository()

    def ensure_indexes() -> None:
        repository.ensure_indexes(connection.users)

    delay = MONGO_INITIAL_DELAY_SECONDS
    for attempt in range(1, MONGO_MAX_ATTEMPTS + 1):
        try:
            await asyncio.to_thread(ensure_indexes)
            if attempt > 1:
                logger.info("Connected to MongoDB after %d attempts", attempt)
            return
        except StoreUnavailableError:
            if attempt == MONGO_MAX_ATTEMPTS:
                logger.error("Failed to reach MongoDB after %d attempts", attempt)
                raise
            logger.warning(
                "MongoDB not ready (attempt %d/%d)", attempt, MONGO_MAX_ATTEMPTS
            )
            await asyncio.sleep(delay)
            delay *= 2


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    await wait_for_mongo(app.state.mongo)
    yield
    app.state.mongo.close()


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=message).model_dump()
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
app.state.mongo = MongoConnection(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.resolved_cors_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)

app.include_router(auth.router)
app.include_router(health.router)


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    import uvicorn

    uvicorn.run("eclipse_api.main:app", host="0.0.0.0", port=4000)
