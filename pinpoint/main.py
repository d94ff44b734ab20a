"""FastAPI application setup for pinpoint-weather."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import router as api_router
from .config import settings
from utils.logging_utils import setup_logging


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging(level=settings.log_level, job_name=settings.job_name)
    yield


app = FastAPI(title="Pinpoint Weather", lifespan=lifespan)


@app.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
