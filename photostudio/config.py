from __future__ import annotations
import os
import re
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

_DURATION = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}

def parse_duration(raw: str) -> int:
    """'7d' / '12h' / '30m' / '90s' / '3600' -> seconds."""
    m = _DURATION.match(raw or "")
    if not m:
        raise ValueError(f"invalid duration: {raw!r}")
    seconds = int(m.group(1)) * _UNITS[m.group(2)]
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {raw!r}")
    return seconds

class Settings(BaseModel):
    database_url: str = "sqlite:///./photostudio.db"
    jwt_secret: str = "change_this_in_prod"
    token_ttl_seconds: int = Field(default=7 * 86400, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    log_path: Optional[str] = None
    # bootstrap admin, created at startup when missing
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_first_name: str = "Admin"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        values = {
            "database_url": env.get("DATABASE_URL"),
            "jwt_secret": env.get("JWT_SECRET"),
            "log_level": env.get("LOG_LEVEL"),
            "log_path": env.get("LOG_PATH"),
            "admin_email": env.get("ADMIN_EMAIL"),
            "admin_password": env.get("ADMIN_PASSWORD"),
            "admin_first_name": env.get("ADMIN_FIRST_NAME"),
            "host": env.get("HOST"),
        }
        if env.get("JWT_EXPIRES_IN"):
            values["token_ttl_seconds"] = parse_duration(env["JWT_EXPIRES_IN"])
        if env.get("BCRYPT_SALT_ROUNDS"):
            values["bcrypt_rounds"] = int(env["BCRYPT_SALT_ROUNDS"])
        if env.get("PORT"):
            values["port"] = int(env["PORT"])
        if env.get("CORS_ORIGINS"):
            values["cors_origins"] = [o.strip() for o in env["CORS_ORIGINS"].split(",") if o.strip()]
        return cls(**{k: v for k, v in values.items() if v is not None})

@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
