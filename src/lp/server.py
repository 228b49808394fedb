"""FastAPI application factory and server configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lp.config import get_settings
from lp.db.base import close_db, init_db
from lp.errors import register_error_handlers
from lp.middleware import AuthMiddleware, RateLimitMiddleware, RequestIDMiddleware
from lp.routes import auth, categories, plans, resources, segments, tasks, users
from lp.services.resources import close_cache_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    # Startup
    await init_db()

    yield

    # Shutdown
    await close_cache_client()
    await close_db()


def include_routers(app: FastAPI) -> None:
    app.include_router(auth.router, prefix="/v1/auth", tags=["auth"])
    app.include_router(plans.router, prefix="/v1/plans", tags=["plans"])
    app.include_router(segments.router, prefix="/v1/segments", tags=["segments"])
    app.include_router(tasks.router, prefix="/v1/tasks", tags=["tasks"])
    app.include_router(resources.router, prefix="/v1/resources", tags=["resources"])
    app.include_router(
        categories.router, prefix="/v1/categories", tags=["categories"]
    )
    app.include_router(users.router, prefix="/v1/users", tags=["users"])


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Middleware; the last one added runs first
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    include_routers(app)

    # Health check
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "learning-plans"}

    @app.get("/")
    async def root():
        return JSONResponse(
            content={
                "service": settings.app_name,
                "version": "0.1.0",
                "docs": "/docs" if settings.debug else None,
            }
        )

    return app


app = create_app()
