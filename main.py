# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Congregation Service
====================
Backend for congregation management: intake requests, membership, pocket
users, backups and the pocket schedule, plus public directory lookups.

Layers:
    controllers (HTTP)  ->  services (access gate + business rules)  ->  repositories

Every operation ends in one Outcome rendered by the outcome reporter.

Port: 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.controllers import (
    congregation_controller,
    member_controller,
    pocket_controller,
    public_controller,
    system_controller,
)
from app.core.config import settings
from app.core.dependencies import close_http_client, init_http_client
from app.core.errors import add_exception_handlers
from app.core.logging import get_logger
from app.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


# ── Lifespan ──
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Open the shared upstream client; warn about unset upstream URLs."""
    init_http_client()
    for name in settings.missing_upstreams():
        logger.warning("%s is not configured; its endpoints will fail", name)
    logger.info(
        "%s v%s starting (auto-approve requests: %s)",
        settings.SERVICE_NAME,
        settings.SERVICE_VERSION,
        settings.AUTO_APPROVE_REQUESTS,
    )
    yield
    await close_http_client()
    logger.info("%s shutting down", settings.SERVICE_NAME)


# ── FastAPI App ──
app = FastAPI(
    title="Congregation Service",
    description="Congregation management: membership, pocket users, backups and schedules.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)

add_exception_handlers(app)

app.include_router(system_controller.router)
app.include_router(congregation_controller.router)
app.include_router(member_controller.router)
app.include_router(pocket_controller.router)
app.include_router(public_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
