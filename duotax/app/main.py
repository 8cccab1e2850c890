from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import register_exception_handlers
from .api.routes.depreciation import router as depreciation_router
from .api.routes.meta import router as meta_router
from .config import AppSettings, get_settings


def configure_logging(level: str) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("duotax").setLevel(level.upper())


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Build FastAPI instance with registered routers."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        description="Depreciation schedules for fixed assets under straight-line, declining balance, "
        "sum-of-years-digits, units-of-production and MACRS methods.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    register_exception_handlers(app)

    app.include_router(meta_router, prefix="/api", tags=["Health"])
    app.include_router(depreciation_router, prefix="/api", tags=["Depreciation"])

    return app


app = create_app()
