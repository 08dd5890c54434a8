from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import StoreError, TodoError, ValidationError
from .logging_config import configure_logging, get_logger
from .models import utcnow
from .repositories import build_repository
from .routers import todos as todos_router
from .schemas import HealthOut
from .secrets_provider import SecretsProvider
from .settings import Settings, get_settings

logger = get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]


def _jsonable_errors(exc: RequestValidationError) -> list:
    # Error contexts may hold exception instances that are not JSON serializable
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


def _error_body(exc: TodoError) -> dict:
    body = {"error": exc.kind, "message": exc.message}
    if isinstance(exc, ValidationError):
        body["code"] = exc.code
    return body


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The storage backend is chosen and connected once, when the application starts,
    and released on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.secrets = SecretsProvider(settings)
        app.state.repository = build_repository(settings, app.state.secrets)
        logger.info("Environment: %s, storage backend: %s", settings.environment, app.state.repository.name)
        try:
            yield
        finally:
            app.state.repository.close()

    app = FastAPI(
        title="Todo API",
        description="REST API for a todo list stored in a JSON file or PostgreSQL.",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "-"
        logger.info(
            "%s %s (ip=%s, user-agent=%s)",
            request.method,
            request.url.path,
            client,
            request.headers.get("user-agent", "-"),
        )
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Malformed requests (e.g. a body that is not valid JSON) are client errors.

        Response format:
            {"error": "ValidationError", "code": "InvalidBody", "message": ..., "detail": [...]}
        """
        return JSONResponse(
            status_code=400,
            content={
                "error": "ValidationError",
                "code": "InvalidBody",
                "message": "Request validation failed",
                "detail": _jsonable_errors(exc),
            },
        )

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
        if isinstance(exc, StoreError):
            # Storage details stay in the logs
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.kind, "message": "Internal server error"},
            )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "InternalError", "message": "Internal server error"},
        )

    # PUBLIC_INTERFACE
    @app.get("/api/health", response_model=HealthOut, summary="Health Check", tags=["health"])
    def health_check(request: Request) -> HealthOut:
        """
        Health check endpoint.

        Returns:
            Status, server time, environment and active storage backend.
        """
        repository = getattr(request.app.state, "repository", None)
        return HealthOut(
            status="OK",
            timestamp=utcnow(),
            environment=settings.environment,
            backend=repository.name if repository is not None else "none",
        )

    app.include_router(todos_router.router)
    return app


app = create_app()
