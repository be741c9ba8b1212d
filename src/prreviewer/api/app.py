"""FastAPI app factory"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.assignment import seed_shared_random
from ..core.config.settings import get_config
from ..core.storage.database import init_db
from .errors import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    config = get_config()
    db = init_db(config.get_database_url())
    await db.create_tables()

    if config.selection_seed is not None:
        seed_shared_random(config.selection_seed)

    # Store in app state for access in routes
    app.state.db = db
    app.state.config = config

    logger.info("PR reviewer API started")

    yield

    # Shutdown
    await db.close()
    logger.info("PR reviewer API stopped")


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="PR Reviewer API",
        description="Automatic reviewer assignment for pull requests",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routes
    from .routes import pull_requests, stats, teams, users

    app.include_router(teams.router, tags=["teams"])
    app.include_router(users.router, tags=["users"])
    app.include_router(pull_requests.router, tags=["pull requests"])
    app.include_router(stats.router, tags=["stats"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "pr-reviewer"}

    return app


app = create_app()
