from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking_admin.api.router import router as api_router
from booking_admin.config.logging import get_logger, setup_logging
from booking_admin.config.settings import settings
from booking_admin.core.handlers import register_exception_handlers
from booking_admin.core.middleware import register_middlewares
from booking_admin.db.init_db import init_db, seed_defaults
from booking_admin.db.session import SessionLocal, engine

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware and exception handlers.
    - Includes the API router under API_PREFIX.
    """
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    origins = settings.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # browsers reject credentials with a wildcard origin
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    def on_startup() -> None:
        # production deployments manage the schema with migrations
        if not settings.is_production():
            init_db(engine)
        if settings.SEED_ADMIN:
            with SessionLocal() as db:
                seed_defaults(db, settings)
        logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("booking_admin.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
