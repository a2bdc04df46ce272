"""
Lesson Activity Composer

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lesson_activities.api.middleware.request_id import RequestIdMiddleware
from lesson_activities.api.v1 import router as api_v1_router
from lesson_activities.composition.errors import CompositionError
from lesson_activities.config import get_settings
from lesson_activities.database import close_db, init_db
from lesson_activities.logging_config import configure_logging, get_logger
from lesson_activities.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Lesson Activity Composer

    Ordered, typed activities for curriculum lessons.

    ## Features

    - **Activities**: insert, rename, publish and reorder a lesson's activities
    - **Payloads**: readings, sources, images, vocabulary, quizzes and graphic organizers
    - **Nested ordering**: vocabulary terms, quiz questions and choices
    - **Reference-aware delete**: keep or delete lesson plan directions that point at an activity
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# add_middleware stacks innermost-first: CORS is added last so it wraps everything
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for error responses (500s often bypass the CORS middleware)."""
    origin = request.headers.get("origin") or ""
    allow_origin = origin if origin in settings.cors_origins else settings.cors_origins[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    """JSON error body stamped with the request id, with CORS headers."""
    headers = _cors_headers(request)
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
        content.setdefault("request_id", req_id)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(CompositionError)
async def composition_exception_handler(request: Request, exc: CompositionError):
    """Map composition errors to their HTTP status."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s: %s",
        type(exc).__name__,
        exc.message,
        exc_info=exc.status_code >= 500 and exc.__cause__ is not None,
        extra={"path": request.url.path, "code": exc.code},
    )
    return _error_response(request, exc.status_code, exc.to_dict())


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Ensure 404/405 etc. responses have CORS headers."""
    return _error_response(request, exc.status_code, {"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Request body or query failed validation (bad activity_type, policy, index...)."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "code": "validation_error", "errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    content = {"detail": "Internal server error"}
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected",
    )


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lesson_activities.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
