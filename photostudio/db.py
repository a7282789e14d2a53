from __future__ import annotations
import logging
from typing import Iterator
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from . import models
from .config import Settings
from .security import PasswordHasher

log = logging.getLogger(__name__)

def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty db
            return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)

def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

def init_db(engine: Engine, passwords: PasswordHasher, settings: Settings) -> None:
    """Check the store is reachable, create tables, seed the bootstrap admin."""
    ping(engine)
    SQLModel.metadata.create_all(engine)
    if not (settings.admin_email and settings.admin_password):
        return
    email = settings.admin_email.strip().lower()
    with Session(engine) as session:
        existing = session.exec(select(models.User).where(models.User.email == email)).first()
        if existing:
            return
        admin = models.User(
            role=models.ROLE_ADMIN,
            first_name=settings.admin_first_name,
            email=email,
            password_hash=passwords.hash(settings.admin_password),
        )
        session.add(admin)
        session.commit()
        log.info("ADMIN_SEEDED email=%s", email)

def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
