from __future__ import annotations
from typing import Optional
from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    role: str = Field(default=ROLE_CUSTOMER, max_length=20)
    first_name: str = Field(max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: str = Field(index=True, unique=True, max_length=255)  # stored lower-cased
    password_hash: str
    phone: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)

class Photo(SQLModel, table=True):
    __tablename__ = "photos"
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_user_id: int = Field(foreign_key="users.id", index=True)
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    file_path: str = Field(max_length=512)
    thumbnail_path: Optional[str] = Field(default=None, max_length=512)
    width: Optional[int] = None
    height: Optional[int] = None
    taken_at: Optional[datetime] = None
    is_public: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)

class Comment(SQLModel, table=True):
    __tablename__ = "comments"
    id: Optional[int] = Field(default=None, primary_key=True)
    photo_id: int = Field(foreign_key="photos.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    # a reply's parent always lives on the same photo
    parent_comment_id: Optional[int] = Field(default=None, foreign_key="comments.id")
    content: str
    is_flagged: bool = Field(default=False)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

class Application(SQLModel, table=True):
    __tablename__ = "applications"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    full_name: str = Field(max_length=200)
    email: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    event_date: Optional[date] = None
    event_type: Optional[str] = Field(default=None, max_length=100)
    message: str
    status: str = Field(default="pending", index=True, max_length=50)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
