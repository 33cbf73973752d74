from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_config import configure_logging
from .repositories import Repository, UsernameTakenError, get_repository
from .routers import posts as posts_router
from .routers import users as users_router
from .seed import Seeder, seed_sample_posts
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "posts",
        "description": "CRUD operations for posts with recency listing, category filtering, and search.",
    },
    {"name": "users", "description": "User records."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    seed: Optional[Seeder] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The repository is created once at startup (unless one is injected), kept
    on ``app.state.repository`` for request handlers, and closed at shutdown.
    The seed callable runs once at startup; when none is given the sample
    posts are seeded only if SEED_SAMPLE_DATA is enabled.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if seed is None and settings.seed_sample_data:
        seed = seed_sample_posts

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repo = repository if repository is not None else get_repository(settings)
        app.state.repository = repo
        logger.info("Starting with %s backend", type(repo).__name__)
        if seed is not None:
            seed(repo)
        try:
            yield
        finally:
            repo.close()
            logger.info("Repository closed")

    app = FastAPI(
        title="BlogWiki Backend",
        description="Backend API service for storing, listing and searching wiki/blog posts.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_errors(exc),
            },
        )

    @app.exception_handler(UsernameTakenError)
    async def username_taken_handler(request: Request, exc: UsernameTakenError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": "Username already exists"})

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(posts_router.router)
    app.include_router(users_router.router)
    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic may put the raw exception object under "ctx"
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


app = create_app()


if __name__ == "__main__":
    _settings = app.state.settings
    uvicorn.run(app, host=_settings.host, port=_settings.port)
