"""Project Status Dashboard API - Main Application Module.

This module initializes the FastAPI application with configuration,
middleware, routing, and lifecycle management for the dashboard stores.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, get_config_summary, settings
from app.core.dependencies import get_project_store, get_storage, get_ui_store
from app.core.logging_config import configure_logging
from app.domains.project.service import ProjectStore

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    configure_logging()
    ConfigValidator.validate_required_settings()
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})")
    logger.debug(f"Configuration: {get_config_summary()}")

    # Load both stores up front so a broken storage backend shows at startup
    get_project_store()
    get_ui_store()

    yield

    logger.info(f"Shutting down {settings.app_name}")
    storage = get_storage()
    dispose = getattr(storage, "dispose", None)
    if dispose:
        dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Project status tracking with weekly updates, charts and presentation mode",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        if exc.status_code >= 500:
            logger.error(f"{error_code}: {message}")

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": message,
                "error_code": error_code,
                "details": details,
                "timestamp": _timestamp(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": "Validation error",
                "error_code": "VALIDATION_ERROR",
                "details": errors,
                "timestamp": _timestamp(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.domains.project.controller import router as project_router
    from app.domains.report.controller import router as report_router
    from app.domains.ui.controller import router as ui_router

    @app.get("/health")
    async def health_check(project_store: ProjectStore = Depends(get_project_store)):
        """Report whether the stores can reach their storage backend."""
        try:
            project_store.storage.load(project_store.storage_key)
            storage_status = "healthy"
        except Exception as e:
            logger.error(f"Storage health check failed: {str(e)}")
            storage_status = "unhealthy"

        if project_store.last_persist_error is not None:
            storage_status = "degraded"

        return {
            "status": "healthy" if storage_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": _timestamp(),
            "services": {
                "storage": storage_status,
                "storage_backend": settings.storage_backend,
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "Project status dashboard API",
            "docs_url": "/docs" if settings.is_development else None,
        }

    app.include_router(project_router)
    app.include_router(report_router)
    app.include_router(ui_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    configure_logging()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
