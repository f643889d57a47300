"""FastAPI application entry point with lifespan, logging, and error mapping."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.config import Settings, settings as default_settings
from app.dependencies import create_store
from app.models import HealthResponse
from app.routers import movies
from app.services.database import MovieStore
from app.services.errors import MovieServiceError

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())[1:]]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Settings | None = None, store: MovieStore | None = None) -> FastAPI:
    """Build the API. Passing ``store`` skips connecting to MongoDB."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store if store is not None else create_store(settings)
        logger.info(
            "Application started: store=%s  strict_query_params=%s",
            type(app.state.store).__name__, settings.strict_query_params,
        )
        yield
        await app.state.store.close()
        logger.info("Application shutting down")

    app = FastAPI(
        title="Movies API",
        description="API for managing movies",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s → %d  (%.0f ms)",
            request.method, request.url.path, response.status_code, elapsed,
        )
        return response

    @app.exception_handler(MovieServiceError)
    async def service_error_handler(request: Request, exc: MovieServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": _format_validation_errors(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "An internal error occurred."},
        )

    @app.get("/", response_class=PlainTextResponse, tags=["system"])
    async def root():
        return "Hello World!"

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health(request: Request):
        """Check that the record store answers."""
        db_ok = await request.app.state.store.ping()
        return HealthResponse(status="healthy" if db_ok else "degraded", database=db_ok)

    app.include_router(movies.router)
    return app


app = create_app()
