"""FastAPI application factory for the report render service."""

from __future__ import annotations

from fastapi import FastAPI

from sqlaudit import __version__
from sqlaudit.config import SqlAuditConfig


def create_app(config: SqlAuditConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or SqlAuditConfig.load()

    app = FastAPI(
        title="SQL Audit Report Service",
        version=__version__,
        docs_url="/api/docs",
    )
    app.state.config = config

    from sqlaudit.web.api.exports import router as exports_router

    app.include_router(exports_router, prefix="/api")

    return app
