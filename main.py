# -*- coding: utf-8 -*-
"""
Main FastAPI application for the EventNest campus event system.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import create_first_user
from eventnest.config import load_settings
from eventnest.database import Database, utcnow
from eventnest.errors import EventNestError, eventnest_error_handler, unhandled_error_response
from eventnest.logging_config import request_id_var, setup_logging
from eventnest.routes import (admin_fastapi, attendance_fastapi, auth_fastapi, certificates_fastapi,
                              events_fastapi, registrations_fastapi)
from eventnest.services import build_services

logger = logging.getLogger("eventnest")


def create_app(settings=None, services=None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)

    Path(settings.certificates_dir).mkdir(parents=True, exist_ok=True)
    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        create_first_user.create_first_user(database.SessionLocal, settings)
        logger.info("EventNest backend started (environment=%s)", settings.environment)
        yield
        database.dispose()
        logger.info("EventNest backend stopped")

    # /docs, /redoc and the schema are hidden in production
    app = FastAPI(
        title="EventNest API",
        description="Campus events: registration, QR check-in and certificates",
        version="1.0.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.services = services or build_services(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, "http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        started = time.monotonic()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # answered here so the 500 still carries the request id
                response = unhandled_error_response(request, exc, settings.is_production)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id

        if not (settings.is_production and request.url.path == "/health"):
            logging.getLogger("eventnest.http").info(
                "%s %s %s %.1fms [%s]",
                request.method,
                request.url.path,
                response.status_code,
                (time.monotonic() - started) * 1000,
                request_id,
            )
        return response

    app.add_exception_handler(EventNestError, eventnest_error_handler)

    app.include_router(auth_fastapi.router)
    app.include_router(events_fastapi.router)
    app.include_router(registrations_fastapi.router)
    app.include_router(attendance_fastapi.router)
    app.include_router(certificates_fastapi.router)
    app.include_router(admin_fastapi.router)

    # Rendered certificate PDFs
    app.mount("/static/certificates", StaticFiles(directory=settings.certificates_dir), name="certificates")

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "timestamp": utcnow().isoformat()}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=4000)
