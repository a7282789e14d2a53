from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, Response
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from . import photos_service
from .auth import AuthenticatedUser, current_user, optional_user, require_admin
from .db import get_session
from .paging import paginate

router = APIRouter(prefix="/api/gallery", tags=["gallery"])

DEFAULT_LIMIT = 20

class PhotoIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    file_path: Optional[str] = None
    thumbnail_path: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    taken_at: Optional[datetime] = None
    is_public: bool = True

class PhotoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_user_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    file_path: str
    thumbnail_path: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    taken_at: Optional[datetime] = None
    is_public: bool
    created_at: datetime

class PhotoEnvelope(BaseModel):
    photo: PhotoOut

class PhotoPageOut(BaseModel):
    page: int
    limit: int
    photos: List[PhotoOut]

class PhotosOut(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    photos: List[PhotoOut]

def _out(photos) -> List[PhotoOut]:
    return [PhotoOut.model_validate(p) for p in photos]

@router.get("", response_model=PhotoPageOut)
def list_public_photos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    pg = paginate(page, limit, DEFAULT_LIMIT)
    return PhotoPageOut(page=pg.page, limit=pg.limit, photos=_out(photos_service.list_public(session, pg)))

# ---- /photos contract (older clients); declared before /{photo_id} ----

@router.get("/photos", response_model=PhotosOut, response_model_exclude_unset=True)
def list_all_photos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    user: Optional[AuthenticatedUser] = Depends(optional_user),
):
    is_admin = bool(user and user.is_admin)
    if page is None and limit is None:
        return PhotosOut(photos=_out(photos_service.list_all(session, is_admin)))
    pg = paginate(page, limit, DEFAULT_LIMIT)
    return PhotosOut(page=pg.page, limit=pg.limit, photos=_out(photos_service.list_all(session, is_admin, pg)))

def _create(payload: PhotoIn, session: Session, admin: AuthenticatedUser) -> PhotoEnvelope:
    photo = photos_service.create_photo(session, admin.id, **payload.model_dump())
    return PhotoEnvelope(photo=PhotoOut.model_validate(photo))

def _delete(photo_id: int, session: Session) -> Response:
    photos_service.delete_photo(session, photo_id)
    return Response(status_code=204)

@router.post("/photos", response_model=PhotoEnvelope, status_code=201)
def create_photo_legacy(payload: PhotoIn, session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return _create(payload, session, admin)

@router.delete("/photos/{photo_id}", status_code=204)
def delete_photo_legacy(photo_id: int = Path(..., gt=0), session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return _delete(photo_id, session)

# ---- main contract ----

@router.get("/{photo_id}", response_model=PhotoEnvelope)
def get_photo(photo_id: int = Path(..., gt=0), session: Session = Depends(get_session), user: AuthenticatedUser = Depends(current_user)):
    photo = photos_service.get_photo(session, photo_id, user.is_admin)
    return PhotoEnvelope(photo=PhotoOut.model_validate(photo))

@router.post("", response_model=PhotoEnvelope, status_code=201)
def create_photo(payload: PhotoIn, session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return _create(payload, session, admin)

@router.delete("/{photo_id}", status_code=204)
def delete_photo(photo_id: int = Path(..., gt=0), session: Session = Depends(get_session), admin: AuthenticatedUser = Depends(require_admin)):
    return _delete(photo_id, session)
