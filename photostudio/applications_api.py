from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session

from . import applications_service
from .auth import AuthenticatedUser, current_user, require_admin
from .db import get_session
from .paging import paginate

# mounted under /api/applications and /api/customers
router = APIRouter(tags=["applications"])
# bare /apply and /applications paths used by older pages
legacy_router = APIRouter(tags=["applications"])

DEFAULT_LIMIT = 20

class ApplicationIn(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    event_date: Optional[date] = None
    event_type: Optional[str] = None
    message: Optional[str] = None

    @field_validator("event_date", mode="before")
    @classmethod
    def _blank_date(cls, v):
        return v or None

    @field_validator("phone", "event_type", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class StatusIn(BaseModel):
    status: Optional[str] = None

class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    event_date: Optional[date] = None
    event_type: Optional[str] = None
    message: str
    status: str
    created_at: datetime
    updated_at: datetime

class ApplicationEnvelope(BaseModel):
    application: ApplicationOut

class ApplicationPageOut(BaseModel):
    page: int
    limit: int
    applications: List[ApplicationOut]

def _submit(payload: ApplicationIn, session: Session, user: AuthenticatedUser) -> ApplicationEnvelope:
    app = applications_service.create_application(session, user.id, **payload.model_dump())
    return ApplicationEnvelope(application=ApplicationOut.model_validate(app))

def _list(page: Optional[str], limit: Optional[str], status: Optional[str], session: Session) -> ApplicationPageOut:
    pg = paginate(page, limit, DEFAULT_LIMIT)
    rows = applications_service.list_applications(session, pg, status)
    return ApplicationPageOut(page=pg.page, limit=pg.limit, applications=[ApplicationOut.model_validate(a) for a in rows])

@router.post("", response_model=ApplicationEnvelope, status_code=201)
def submit_application(payload: ApplicationIn, session: Session = Depends(get_session), user: AuthenticatedUser = Depends(current_user)):
    return _submit(payload, session, user)

@router.get("", response_model=ApplicationPageOut)
def list_applications(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    admin: AuthenticatedUser = Depends(require_admin),
):
    return _list(page, limit, status, session)

@router.get("/{app_id}", response_model=ApplicationEnvelope)
def get_application(app_id: int = Path(..., gt=0), session: Session = Depends(get_session), user: AuthenticatedUser = Depends(current_user)):
    app = applications_service.get_application(session, app_id, user.id, user.is_admin)
    return ApplicationEnvelope(application=ApplicationOut.model_validate(app))

@router.patch("/{app_id}/status", response_model=ApplicationEnvelope)
def update_application_status(
    payload: StatusIn,
    app_id: int = Path(..., gt=0),
    session: Session = Depends(get_session),
    admin: AuthenticatedUser = Depends(require_admin),
):
    app = applications_service.update_status(session, app_id, payload.status)
    return ApplicationEnvelope(application=ApplicationOut.model_validate(app))

@legacy_router.post("/apply", response_model=ApplicationEnvelope, status_code=201)
def apply(payload: ApplicationIn, session: Session = Depends(get_session), user: AuthenticatedUser = Depends(current_user)):
    return _submit(payload, session, user)

@legacy_router.get("/applications", response_model=ApplicationPageOut)
def list_applications_legacy(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    admin: AuthenticatedUser = Depends(require_admin),
):
    return _list(page, limit, status, session)
