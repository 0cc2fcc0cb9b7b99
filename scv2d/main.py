"""
FastAPI application entry point for the SCV decomposition API.

This module configures logging and CORS, registers the API routers, and starts
the ASGI server when executed directly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scv2d import __version__
from scv2d.api import api_router
from scv2d.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    The service holds no connections or caches beyond the settings singleton,
    so startup and shutdown only log.
    """
    logger.info(
        f"SCV Decomposition API starting (group_order={settings.group_order.value}, "
        f"column_layout={settings.column_layout.value})"
    )
    yield
    logger.info("SCV Decomposition API shutting down")


# Create FastAPI application
app = FastAPI(
    title="SCV Decomposition API",
    version=__version__,
    description=(
        "Two-dimensional decomposition of the squared coefficient of variation "
        "by income source and population feature."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "SCV Decomposition API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scv2d.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
