from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgchart.api.v1.router import api_router
from orgchart.core.config import settings
from orgchart.core.store import build_store

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    if getattr(application.state, "store", None) is None:
        try:
            application.state.store = build_store(settings)
        except Exception:
            logger.exception("Failed to initialize organization store; continuing without data")
            application.state.store = None
    yield


app = FastAPI(
    title="Organization Chart API",
    description="Organization chart management and evaluation relations",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)
app.state.store = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Organization Chart API"}
