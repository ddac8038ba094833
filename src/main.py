import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from create_tables import create_tables
from settings import CLEANUP_JOB_ENABLED, CORS_ORIGINS, LOG_LEVEL, RETENTION_DAYS

from modules.signatures.job import start_cleanup_job
from modules.signatures.controllers.signature_controller import router as signature_router
from modules.signatures.controllers.lifecycle_controller import router as lifecycle_router
from modules.signatures.controllers.lifecycle_controller import admin_router as statistics_router
from modules.events.controllers.webhook_controller import router as webhook_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    logger.info("Starting content signatures service")
    create_tables()
    scheduler = None
    if CLEANUP_JOB_ENABLED:
        scheduler = start_cleanup_job()
        logger.info("Retention cleanup job started (%d day retention)", RETENTION_DAYS)
    yield
    # --- Shutdown logic ---
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("Content signatures service stopped")


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


app = FastAPI(
    title="Content Signatures",
    description="API for collecting fingerprinted approvals of page content",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=[
        "Accept",
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "Origin",
    ],
    max_age=86400,
)
app.add_exception_handler(Exception, unexpected_error_handler)

# Routers
app.include_router(signature_router, prefix="/signatures", tags=["signatures"])
app.include_router(lifecycle_router, prefix="/events", tags=["events"])
app.include_router(statistics_router, prefix="/admin", tags=["admin"])
app.include_router(webhook_router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
