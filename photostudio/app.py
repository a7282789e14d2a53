from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .admin_api import router as admin_router
from .applications_api import router as applications_router, legacy_router as applications_legacy_router
from .auth import router as auth_router
from .comments_api import router as comments_router
from .config import Settings, get_settings
from .db import init_db, make_engine
from .errors import install_error_handlers
from .gallery_api import router as gallery_router
from .logging_setup import setup_logging
from .security import PasswordHasher, TokenService

log = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None, tokens: Optional[TokenService] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_path)

    engine = make_engine(settings.database_url)
    passwords = PasswordHasher(settings.bcrypt_rounds)
    try:
        init_db(engine, passwords, settings)
    except SQLAlchemyError as e:
        # never serve traffic without a reachable store
        log.critical("DB_UNREACHABLE %s", e)
        engine.dispose()
        raise SystemExit(1)

    app = FastAPI(title="Photo Studio API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.passwords = passwords
    app.state.tokens = tokens or TokenService(settings.jwt_secret, settings.token_ttl_seconds)

    install_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(gallery_router)
    app.include_router(comments_router)
    app.include_router(applications_router, prefix="/api/applications")
    app.include_router(applications_router, prefix="/api/customers", include_in_schema=False)
    app.include_router(applications_legacy_router)
    app.include_router(admin_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.on_event("shutdown")
    def close_pool():
        engine.dispose()
        log.info("DB pool closed")

    log.info("WEB_STARTUP")
    return app
