from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from submission_authz.authz import ActionRules, RoleGroups
from submission_authz.db.init_db import init_db
from submission_authz.logging_config import configure_app_logging
from submission_authz.routers import admin, health, profile, submissions
from submission_authz.security.cookies import LoginCookie
from submission_authz.security.dependencies import enforce_authorization
from submission_authz.settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings = get_settings()
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        # Built once; never mutated afterwards.
        app.state.action_rules = ActionRules.from_role_groups(RoleGroups())
        app.state.login_cookie = LoginCookie(settings.resolved_cookie_signing_key(), name=settings.session_cookie_name)
        logger.info("Loaded action rules actions=%s", sorted(app.state.action_rules.grants))

        init_db()
        logger.info("Database initialized (tables ensured + seed if needed)")

        yield

    # Global dependency: gates every endpoint marked with @protect.
    app = FastAPI(dependencies=[Depends(enforce_authorization)], lifespan=lifespan)

    app.include_router(health.router)
    app.include_router(profile.router)
    app.include_router(submissions.router)
    app.include_router(admin.router)

    return app


app = create_app()
