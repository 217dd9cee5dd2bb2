"""
Application factory.

``create_app`` builds every shared collaborator from a ``Settings``
instance, so importing this module has no side effects.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.middleware import register_exception_handlers, register_middleware
from api.routes import router as api_router
from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import build_engine, build_session_factory, init_db
from media.intake import MediaStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    app = FastAPI(
        title="User Auth Service",
        version="1.0.0",
        description="Signup, login and a token-protected profile endpoint.",
    )

    # Collaborators shared (read-only) by every request
    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.media = MediaStore(
        settings.upload_dir,
        url_prefix=settings.media_url_prefix,
        max_bytes=settings.max_upload_bytes,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)
    app.include_router(api_router)
    app.mount(
        settings.media_url_prefix,
        StaticFiles(directory=str(app.state.media.upload_dir)),
        name="uploads",
    )

    @app.on_event("startup")
    async def on_startup():
        await init_db(engine)
        if settings.jwt_secret == Settings.model_fields["jwt_secret"].default:
            logger.warning("JWT_SECRET not set — using the development default secret")
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()

    return app
