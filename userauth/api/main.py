"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount the users/claims router under the /api prefix
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - infrastructure.db: MongoDB client lifecycle (init/close + indexes)
  - interfaces.api.http.router: user and claim endpoints

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - With the in-memory store (tests/dev) no MongoDB client is created

Notes:
  - Middleware order matters: RequestContext → CORS → routes
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..container import get_user_repository, reset_container, uses_in_memory_store
from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import DatabaseError
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..infrastructure.db import close_client, ensure_user_indexes, init_client
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes the MongoDB client and indexes."""
    settings = get_settings()
    in_memory = uses_in_memory_store()

    if not in_memory:
        init_client(
            settings.mongo_uri,
            server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
            timeout_ms=settings.mongo_timeout_ms,
        )

    try:
        if not in_memory:
            # R: índice único de email; si Mongo no responde, el arranque falla.
            ensure_user_indexes(get_user_repository().collection)

        logger.info(
            "UserAuth API starting up",
            extra={
                "app_env": settings.app_env,
                "in_memory_store": in_memory,
                "mongo_database": settings.mongo_database,
            },
        )

        yield

    finally:
        if not in_memory:
            close_client()
        reset_container()
        logger.info("UserAuth API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="UserAuth API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "users", "description": "User lifecycle and login (JWT)"},
            {"name": "claims", "description": "Authorization claim catalogue"},
        ],
    )

    # R: Middleware order (bottom = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    )

    app.include_router(router, prefix="/api")
    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        """
        Liveness + backend check.

        Returns:
            ok: True if the store answers a ping
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = "connected"
        try:
            get_user_repository().ping()
        except DatabaseError as exc:
            logger.warning("Health check: DB unavailable", extra={"error": exc.message})
            db_status = "disconnected"

        ok = db_status == "connected"
        return JSONResponse(
            status_code=200 if ok else 503,
            content={
                "ok": ok,
                "db": db_status,
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.get("/metrics")
    def metrics():
        """Expose Prometheus metrics (text format)."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
