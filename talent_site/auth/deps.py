from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from talent_site.config import Config
from talent_site.db import Database
from talent_site.errors import StorageUnavailable

from .security import verify_access_token


ADMIN_ROLE = "admin"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def get_config(request: Request) -> Config:
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise HTTPException(status_code=500, detail="server_config_missing")
    return cfg


def get_database(request: Request) -> Database:
    """Storage handle for data routes; raises StorageUnavailable in demo mode."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise StorageUnavailable()
    return db


def read_session_token(request: Request, cfg: Config) -> Optional[str]:
    return request.cookies.get(cfg.AUTH_COOKIE_NAME) or None


def get_optional_admin_session(
    request: Request,
    cfg: Config = Depends(get_config),
) -> Optional[Dict[str, Any]]:
    """Like `get_admin_session` but returns None instead of rejecting.

    Used by pages that render differently for logged-in admins.
    """
    claims = verify_access_token(token=read_session_token(request, cfg), secret=cfg.AUTH_JWT_SECRET)
    if claims is not None:
        request.state.admin = claims
    return claims


def get_admin_session(
    request: Request,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """Authenticate a request from the session cookie.

    On success the decoded claims are attached to `request.state.admin`.
    """
    token = read_session_token(request, cfg)
    if not token:
        raise _unauthorized("missing_token")

    claims = verify_access_token(token=token, secret=cfg.AUTH_JWT_SECRET)
    if claims is None:
        raise _unauthorized("token_invalid")

    request.state.admin = claims
    return claims


def require_admin(session: Dict[str, Any] = Depends(get_admin_session)) -> Dict[str, Any]:
    if session.get("role") != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="admin_required")
    return session
