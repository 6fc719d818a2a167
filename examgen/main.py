import logging
import os
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import get_session_store
from .api.v1 import api_router
from .config import get_settings
from .exceptions import ExamGenError, SessionNotFoundError, ValidationError
from .services.session_store import SessionSweeper


def apply_logging_preferences(settings):
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.protocols.websockets").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    if not settings.debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)


settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s"
)

apply_logging_preferences(settings)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    apply_logging_preferences(settings)
    logger.info("Starting Exam Question Generator", version="0.1.0")
    os.makedirs(settings.upload_dir, exist_ok=True)

    sweeper = SessionSweeper(get_session_store(), interval_seconds=settings.session_sweep_interval_seconds)
    sweeper.start()

    yield

    await sweeper.stop()
    logger.info("Shutting down Exam Question Generator")


def _error_response(status_code: int, exc: ExamGenError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.message,
            "error_code": exc.error_code,
            "details": exc.details,
        }
    )


def create_application() -> FastAPI:
    app = FastAPI(
        title="Exam Question Generator",
        description="Bloom's Taxonomy exam question generation from uploaded course material, with exam paper assembly and PDF export",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("Request validation failed", path=request.url.path, errors=str(exc.errors()))
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_errors(exc)}
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning("Request rejected", path=request.url.path, error=exc.message)
        return _error_response(400, exc)

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
        logger.info("Session not found", path=request.url.path, **exc.details)
        return _error_response(404, exc)

    @app.exception_handler(ExamGenError)
    async def exam_gen_error_handler(request: Request, exc: ExamGenError):
        logger.error("Request failed", path=request.url.path, error_code=exc.error_code, error=exc.message)
        return _error_response(500, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": getattr(request.state, "request_id", None),
            }
        )

    # Health check and realtime relay at root
    from .api.v1.endpoints import health, websocket
    app.include_router(health.router, tags=["health"])
    app.include_router(websocket.router, tags=["websocket"])

    # Include API router
    app.include_router(api_router, prefix="/api")

    return app


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "examgen.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )
