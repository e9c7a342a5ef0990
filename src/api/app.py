"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from src.adapter.services.database import Database
from src.api.error import register_error_handlers
from src.api.routes import accounts, payments, services, users

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the application from an ApplicationConfig-like object

    The Database handle lives on app.state; tables are created at startup
    when AUTO_CREATE_TABLES is set and the engine is disposed at shutdown.
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    database = Database(config.DB_URI)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            await database.create_all()
        logger.info("Studio credit service started")
        yield
        await database.dispose()

    app = FastAPI(
        title="Studio Credit Service",
        description="Credit ledger, payments and paid generation for the image studio",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)"
            )
            return response

    register_error_handlers(app)

    prefix = config.API_PREFIX
    app.include_router(users.router, prefix=prefix)
    app.include_router(accounts.router, prefix=prefix)
    app.include_router(payments.router, prefix=prefix)
    app.include_router(services.router, prefix=prefix)

    @app.get(f"{prefix}/health", tags=["Health"])
    async def health():
        return {"status": "ok", "message": "Server is running"}

    return app
