#Create FASTAPI app
#Load Settings once and hand them to every route through app.state
#Expose banner, health, version, feature and db routes

from typing import Optional

import uvicorn
from fastapi import FastAPI

from introspect.config.settings import Settings
from introspect.routes import db_routes, health, metadata_routes
from introspect.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title="Introspection Service", version=settings.APP_VERSION)
    app.state.settings = settings

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Server listening on port {settings.PORT}")

    app.include_router(metadata_routes.router)
    app.include_router(health.router)
    app.include_router(db_routes.router)

    return app


def run() -> None:
    """Console entry point: serve on 0.0.0.0:PORT."""
    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
