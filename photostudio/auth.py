from __future__ import annotations
import logging
import re
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session

from . import users_service
from .db import get_session
from .errors import (
    AccountDeactivated, Forbidden, MissingCredential, Unauthenticated,
    UnknownUser, ValidationError,
)
from .models import User, ROLE_ADMIN
from .security import PasswordHasher, TokenService

log = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens

def get_passwords(request: Request) -> PasswordHasher:
    return request.app.state.passwords

# ===== Schemas =====
class AuthenticatedUser(BaseModel):
    """What the gate attaches to a request: identity fields only, read live from the store."""
    id: int
    role: str
    first_name: str
    last_name: Optional[str] = None
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def of(cls, user: User) -> "AuthenticatedUser":
        return cls(id=user.id, role=user.role, first_name=user.first_name, last_name=user.last_name, email=user.email)

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: str
    first_name: str
    last_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime

class UserEnvelope(BaseModel):
    user: UserOut

class RegisterIn(BaseModel):
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def _phone_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class LoginOut(BaseModel):
    token: str
    user: AuthenticatedUser

class MeOut(BaseModel):
    user: AuthenticatedUser

# ===== gate =====
def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise MissingCredential()
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise MissingCredential()
    return token

def authenticate(session: Session, tokens: TokenService, authorization: Optional[str]) -> AuthenticatedUser:
    # 1) signature + expiry, 2) live lookup; claims are only used to find the user
    claims = tokens.verify(_bearer_token(authorization))
    user = users_service.get_user(session, claims.user_id)
    if not user:
        raise UnknownUser()
    if not user.is_active:
        raise AccountDeactivated()
    return AuthenticatedUser.of(user)

def current_user(
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_tokens),
    authorization: Optional[str] = Header(None),
) -> AuthenticatedUser:
    return authenticate(session, tokens, authorization)

def require_admin(user: AuthenticatedUser = Depends(current_user)) -> AuthenticatedUser:
    if not user.is_admin:
        raise Forbidden("Forbidden: admin only")
    return user

def optional_user(
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_tokens),
    authorization: Optional[str] = Header(None),
) -> Optional[AuthenticatedUser]:
    """Gate for routes that also serve anonymous callers; any auth failure means anonymous."""
    if not authorization:
        return None
    try:
        return authenticate(session, tokens, authorization)
    except (Unauthenticated, AccountDeactivated):
        return None

# ===== Router =====
router = APIRouter(prefix="/api/auth", tags=["auth"])

def _split_name(payload: RegisterIn) -> tuple[Optional[str], Optional[str]]:
    first = (payload.first_name or "").strip() or None
    last = (payload.last_name or "").strip() or None
    if not first and payload.name:
        parts = payload.name.split()
        if parts:
            first = parts[0]
            last = " ".join(parts[1:]) or last
    return first, last

@router.post("/register", response_model=UserEnvelope, status_code=201)
def register(
    payload: RegisterIn,
    session: Session = Depends(get_session),
    passwords: PasswordHasher = Depends(get_passwords),
):
    first, last = _split_name(payload)
    if not first or not payload.email or not payload.password:
        raise ValidationError("name (or first_name), email and password are required")
    email = users_service.normalize_email(payload.email)
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    user = users_service.create_user(
        session,
        first_name=first,
        last_name=last,
        email=email,
        phone=(payload.phone or "").strip() or None,
        password_hash=passwords.hash(payload.password),
    )
    log.info("USER_REGISTERED id=%s", user.id)
    return UserEnvelope(user=UserOut.model_validate(user))

@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    session: Session = Depends(get_session),
    passwords: PasswordHasher = Depends(get_passwords),
    tokens: TokenService = Depends(get_tokens),
):
    if not payload.email or not payload.password:
        raise ValidationError("email and password are required")
    user = users_service.get_user_by_email(session, payload.email)
    if not user:
        log.info("LOGIN_FAILED reason=unknown_email")
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        log.info("LOGIN_FAILED id=%s reason=deactivated", user.id)
        raise AccountDeactivated()
    if not passwords.verify(payload.password, user.password_hash):
        log.info("LOGIN_FAILED id=%s reason=bad_password", user.id)
        raise Unauthenticated("Invalid email or password")
    log.info("LOGIN_OK id=%s", user.id)
    return LoginOut(token=tokens.issue(user), user=AuthenticatedUser.of(user))

@router.get("/me", response_model=MeOut)
def me(user: AuthenticatedUser = Depends(current_user)):
    return MeOut(user=user)
