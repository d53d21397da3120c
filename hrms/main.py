from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hrms.db.session import get_engine, verify_connection
from hrms.errors import register_exception_handlers
from hrms.firebase_auth import FirebaseConfig, FirebaseTokenValidator
from hrms.firebase_auth.config import GOOGLE_SECURETOKEN_JWKS_URI
from hrms.logging_config import configure_app_logging
from hrms.routers import (
    admin,
    applications,
    auth,
    calendar,
    dashboard,
    departments,
    employees,
    evaluations,
    health,
    recruitment,
    reports,
    training,
)
from hrms.security.config import load_security_config
from hrms.security.dependencies import enforce_security
from hrms.security.rate_limit import FixedWindowRateLimiter, rate_limit
from hrms.security.roles import RoleResolver
from hrms.settings import Settings, get_settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def build_token_verifier(settings: Settings) -> FirebaseTokenValidator | None:
    if not settings.firebase_project_id:
        logger.warning("HRMS_FIREBASE_PROJECT_ID not set; bearer-protected routes will fail")
        return None
    config = FirebaseConfig(
        project_id=settings.firebase_project_id,
        jwks_uri=settings.firebase_jwks_uri or GOOGLE_SECURETOKEN_JWKS_URI,
        clock_skew_seconds=settings.clock_skew_seconds,
        jwks_cache_ttl_seconds=settings.jwks_cache_ttl_seconds,
    )
    return FirebaseTokenValidator(config=config)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    reports_dir = settings.resolved_reports_dir()
    reports_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        app.state.security_config = load_security_config(settings.resolved_security_config_path())
        logger.info("Loaded security config: %s", settings.resolved_security_config_path())

        if settings.db_verify_on_startup:
            verify_connection(
                get_engine(),
                retries=settings.db_connect_retries,
                base_delay=settings.db_connect_base_delay,
            )

        yield
        logger.info("App shutdown")

    # Global dependencies: route rules and the general rate limit apply with
    # zero changes to route handlers.
    app = FastAPI(
        title="HRMS API",
        dependencies=[Depends(enforce_security), Depends(rate_limit("general"))],
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.token_verifier = build_token_verifier(settings)
    app.state.role_resolver = RoleResolver(ttl_seconds=settings.role_cache_ttl_seconds)
    app.state.rate_limiter = FixedWindowRateLimiter(settings.rate_limit_window_seconds)
    app.state.rate_limits = {"general": settings.rate_limit_general, "auth": settings.rate_limit_auth}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for module in (
        health,
        auth,
        admin,
        departments,
        employees,
        recruitment,
        applications,
        training,
        evaluations,
        calendar,
        dashboard,
        reports,
    ):
        app.include_router(module.router, prefix=API_PREFIX)

    app.mount("/public/reports", StaticFiles(directory=reports_dir), name="reports")

    return app


app = create_app()
