"""
Opaque crypto primitives: password hashing and the stateless token service.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``role``, ``iat`` and
``exp``. Nothing is stored server-side, so a token stays valid until it
expires; the gate in ``auth`` re-reads the user on every request.
"""
from __future__ import annotations
import time
from typing import Callable, NamedTuple
from jose import jwt, JWTError
from passlib.context import CryptContext

from .errors import ExpiredToken, InvalidToken

ALGORITHM = "HS256"


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self._ctx = CryptContext(
            schemes=["bcrypt_sha256"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._ctx.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return self._ctx.verify(password, hashed)
        except ValueError:
            # unrecognised or corrupt hash
            return False


class TokenClaims(NamedTuple):
    user_id: int
    role: str


class TokenService:
    def __init__(self, secret: str, ttl_seconds: int, clock: Callable[[], float] = time.time):
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def issue(self, user) -> str:
        now = int(self.clock())
        claims = {
            "sub": str(user.id),
            "role": user.role,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        try:
            # expiry is checked against self.clock below, not the wall clock
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM], options={"verify_exp": False})
        except JWTError:
            raise InvalidToken()
        exp = payload.get("exp")
        if not isinstance(exp, int):
            raise InvalidToken()
        if self.clock() >= exp:
            raise ExpiredToken()
        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise InvalidToken("Invalid token payload")
        role = payload.get("role")
        if not isinstance(role, str):
            raise InvalidToken("Invalid token payload")
        return TokenClaims(user_id=user_id, role=role)
