"""Credential store: the only place that reads or writes ``password_hash``."""
from __future__ import annotations
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import Conflict, NotFound
from .models import User, ROLE_CUSTOMER

def normalize_email(email: str) -> str:
    return email.strip().lower()

def get_user(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)

def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()

def create_user(
    session: Session,
    *,
    first_name: str,
    email: str,
    password_hash: str,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
    role: str = ROLE_CUSTOMER,
) -> User:
    email = normalize_email(email)
    if get_user_by_email(session, email):
        raise Conflict("Email already in use")
    user = User(
        role=role,
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=password_hash,
        phone=phone,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same address
        session.rollback()
        raise Conflict("Email already in use")
    session.refresh(user)
    return user

def list_users(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(desc(User.created_at), desc(User.id))).all())

def set_active(session: Session, user_id: int, active: bool) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    user.is_active = active
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
