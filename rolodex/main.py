"""FastAPI application entrypoint. No business logic; only wiring, lifecycle and middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rolodex.api.v1 import router as v1_router
from rolodex.core.config import settings
from rolodex.core.dependencies import get_account_services

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the role/allow-list refresh thread with the app and stop it on shutdown."""
    services = get_account_services()
    if settings.ROLE_REFRESH_ENABLED:
        services.scheduler.start()
    else:
        logger.info("Role refresh disabled; snapshot loads on first use only.")
    try:
        yield
    finally:
        services.scheduler.stop(timeout=settings.ROLE_REFRESH_INTERVAL_SEC + 5)
        close = getattr(services.directory, "close", None)
        if close is not None:
            close()


app = FastAPI(
    title="Rolodex API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Rolodex API"}
