"""
Todo List API - FastAPI Server
CRUD API over a single todo table, with health check and CORS support
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn
import logging

# Import internal modules
import config
from todo_core.api import router as todo_router
from todo_core.database import DatabaseManager
from todo_core.exceptions import TodoValidationError
from todo_core.logging_setup import configure_logging
from todo_core.models import ErrorResponse, HealthResponse
from todo_core.repository import TodoRepository
from todo_core.service import TodoService

# Setup logging
configure_logging(config.LOG_LEVEL, config.LOG_FILE, config.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and release it on shutdown"""
    logger.info("Starting Todo List API...")
    app.state.db_manager.initialize()
    yield
    logger.info("Todo List API shutting down...")
    app.state.db_manager.close()


def _error_response(request: Request, status_code: int, error: str, message: str,
                    detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=datetime.utcnow(),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed payloads, path or query parameters are client errors"""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning(f"Rejected request {request.method} {request.url.path}: {detail}")
    return _error_response(request, 400, "ValidationError", "Invalid input data", detail)


async def todo_validation_handler(request: Request, exc: TodoValidationError):
    logger.warning(f"Rejected request {request.method} {request.url.path}: {exc}")
    return _error_response(request, 400, type(exc).__name__, "Invalid input data", str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    error = "NotFound" if exc.status_code == 404 else "HTTPError"
    return _error_response(request, exc.status_code, error, str(exc.detail))


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    """Store failures are reported as server errors and never retried"""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return _error_response(request, 500, "StoreFailure", "Database operation failed")


def create_app(db_manager: Optional[DatabaseManager] = None) -> FastAPI:
    """
    Build the application around a store handle.

    Args:
        db_manager: Store handle; built from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    if db_manager is None:
        db_manager = DatabaseManager(config.database_config())

    app = FastAPI(
        title="Todo List API",
        description="Task list management API",
        version=config.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.db_manager = db_manager
    app.state.todo_service = TodoService(TodoRepository(db_manager))

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials="*" not in config.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(TodoValidationError, todo_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(todo_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        """Health check endpoint with database status."""
        manager: DatabaseManager = request.app.state.db_manager
        service: TodoService = request.app.state.todo_service

        connected = manager.ping()
        return HealthResponse(
            status="healthy" if connected else "degraded",
            version=config.API_VERSION,
            environment=config.ENVIRONMENT,
            timestamp=datetime.utcnow(),
            database="connected" if connected else "unavailable",
            todos_completed=service.count_by_status(True) if connected else None,
            todos_pending=service.count_by_status(False) if connected else None,
        )

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "name": "Todo List API",
            "version": config.API_VERSION,
            "status": "operational",
            "docs": "/docs"
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "api_server:app",
        host=config.API_HOST,
        port=config.API_PORT,
        workers=config.API_WORKERS,
        reload=False,
        log_level=config.LOG_LEVEL.lower()
    )
