from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campusqa.api.v1.router import router as api_v1_router
from campusqa.config.settings import Settings, settings as default_settings
from campusqa.core.exceptions import BaseAppException
from campusqa.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(config: Optional[Settings] = None, init_schema: bool = True) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode and logging from Settings.
    - Registers the handler for application exceptions.
    - Includes the versioned API router under API_V1_STR.
    - Creates missing tables on startup outside production.
    """
    config = config or default_settings
    setup_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_schema and not config.is_production():
            from campusqa.db.init_db import init_db
            init_db()
        logger.info(f"{config.APP_NAME} started ({config.ENVIRONMENT})")
        yield

    app = FastAPI(
        title=config.APP_NAME,
        debug=config.DEBUG,
        version=config.API_VERSION,
        lifespan=lifespan,
    )

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(api_v1_router, prefix=config.API_V1_STR)
    return app


app = create_app()
