from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from branchgate.core.config import settings
from branchgate.core.exceptions import BranchGateException, ConflictError, InternalError
from branchgate.core.logging import setup_logging
from branchgate.core.request_context import REQUEST_ID_HEADER, install_request_context_middleware
from branchgate.core.security_headers import install_security_headers_middleware
from branchgate.routers import addresses, auth, branches, devices, locations, me, users

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    settings.validate_runtime_security()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Starting %s: %s", settings.APP_NAME, settings.safe_summary())
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    install_security_headers_middleware(app, settings)
    install_request_context_middleware(app)

    prefix = settings.API_V1_STR
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(me.router, prefix=f"{prefix}/me", tags=["auth"])
    app.include_router(users.router, prefix=f"{prefix}/users", tags=["users"])
    app.include_router(locations.router, prefix=prefix, tags=["locations"])
    app.include_router(addresses.router, prefix=f"{prefix}/addresses", tags=["addresses"])
    app.include_router(branches.router, prefix=f"{prefix}/branches", tags=["branches"])
    app.include_router(devices.router, prefix=prefix, tags=["devices"])

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(BranchGateException)
    async def handle_branchgate_exception(_: Request, exc: BranchGateException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message)
        headers = exc.headers if getattr(exc, "headers", None) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(_: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Constraint violation: %s", exc.orig.__class__.__name__)
        error = ConflictError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(_: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Storage failure", exc_info=exc)
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    return app


app = create_app()
