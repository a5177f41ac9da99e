from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from complaintdesk.api.v1.router import router as api_v1_router
from complaintdesk.config.settings import settings
from complaintdesk.core.exceptions import BaseAppException
from complaintdesk.core.logging import get_logger, setup_logging
from complaintdesk.core.middleware import register_middlewares
from complaintdesk.db.init_db import init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # For production, manage the schema with migrations
    if not settings.is_production():
        init_db()
    yield


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware and the domain exception handler.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)

    @app.exception_handler(BaseAppException)
    async def handle_app_exception(request: Request, exc: BaseAppException) -> JSONResponse:
        logger.warning(
            f"Unhandled application error: {exc.message}",
            extra={"error_code": exc.error_code.value, "path": str(request.url.path)},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "app": settings.APP_NAME, "environment": settings.ENVIRONMENT}

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
