"""FastAPI application factory and lifespan.

Run with: uvicorn --factory app.main:create_application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import AppError, ConfigError
from app.core.logging_config import configure_logging
from app.db.session import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: optionally create tables; shutdown: release the connection pool."""
    if app.state.settings.create_tables_on_startup:
        await app.state.db.create_all()
    logger.info("Started %s", app.state.settings.app_name)
    yield
    await app.state.db.dispose()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [{"loc": e.get("loc"), "msg": e.get("msg")} for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"message": "Validation failed", "errors": jsonable_encoder(errors)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_application(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    if not settings.jwt_secret_key:
        raise ConfigError("JWT_SECRET_KEY is not set; refusing to start without a signing secret")
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.db = Database(
        settings.async_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.debug,
    )

    # CORS: the single-page client in dev; extra origins from CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    else:
        cors_origins = [
            "http://localhost:5173",
            "http://localhost:5174",
            *[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "Welcome to the Workout Generator API"}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app
