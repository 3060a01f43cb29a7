"""
API Workbench - FastAPI Application Entry Point

HTTP surface of the project persistence engine: UI and command layers load,
save, rename and synchronize project trees through these routes.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .exceptions import register_exception_handlers
from .logging_config import setup_logging
from .routers import projects, workspaces
from .services.registry import get_registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    setup_logging(level=logging.getLevelName(config.LOG_LEVEL.upper()))
    yield
    # Shutdown: loaded trees are in-memory only
    get_registry().clear()


app = FastAPI(
    title="API Workbench",
    description="Project tree persistence and synchronization for an API testing workbench",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS middleware
# Allow all origins for development; restrict in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "API Workbench",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(projects.router)
app.include_router(workspaces.router)
