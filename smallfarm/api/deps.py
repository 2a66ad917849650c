from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, Request

from ..infra.auth import SessionVerifier, bearer_token
from ..infra.config import AppConfig
from ..infra.farm_store import FarmStore
from ..schemas import SessionUser


def get_store(request: Request) -> FarmStore:
    return request.app.state.store


def get_settings(request: Request) -> AppConfig:
    return request.app.state.settings


def get_crop_details_provider(request: Request):
    return request.app.state.crop_details


def _verifier(request: Request) -> SessionVerifier:
    return request.app.state.verifier


def optional_session(
    request: Request, authorization: Optional[str] = Header(default=None)
) -> Optional[SessionUser]:
    token = bearer_token(authorization)
    if not token:
        return None
    return _verifier(request).verify(token)


def require_session(
    request: Request, authorization: Optional[str] = Header(default=None)
) -> SessionUser:
    user = optional_session(request, authorization)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
