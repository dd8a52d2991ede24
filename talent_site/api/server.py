from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from talent_site import __version__, pages, store
from talent_site.auth import (
    create_access_token,
    credentials_match,
    get_config,
    get_database,
    get_optional_admin_session,
    require_admin,
)
from talent_site.auth.deps import ADMIN_ROLE
from talent_site.config import Config, load_config
from talent_site.db import Database, init_db
from talent_site.errors import ApiError


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


# -----------------------------
# Request bodies
# -----------------------------
# Required fields are Optional here on purpose: missing/blank values are rejected
# by the store with 400 rather than by pydantic with 422.


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class BookingRequest(BaseModel):
    # Bounded to the BIGINT range so out-of-range ids fail validation, not the driver.
    talent_id: Optional[int] = Field(default=None, ge=1, le=2**63 - 1)
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    meeting_time: Optional[str] = None


class QuestionRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


# -----------------------------
# Auth cookie
# -----------------------------


def _set_session_cookie(response: Response, *, token: str, cfg: Config) -> None:
    response.set_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        value=str(token),
        httponly=True,
        samesite="strict",
        secure=cfg.AUTH_COOKIE_SECURE,
        max_age=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES) * 60,
        path=cfg.AUTH_COOKIE_PATH,
        domain=cfg.AUTH_COOKIE_DOMAIN,
    )


def _clear_session_cookie(response: Response, cfg: Config) -> None:
    response.delete_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        path=cfg.AUTH_COOKIE_PATH,
        domain=cfg.AUTH_COOKIE_DOMAIN,
        secure=cfg.AUTH_COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )


# -----------------------------
# Pages
# -----------------------------

pages_router = APIRouter()


@pages_router.get("/", response_class=HTMLResponse)
def index(request: Request) -> str:
    db: Database | None = request.app.state.db
    talents = None
    if db is not None:
        with db.connection() as conn:
            talents = store.list_talents(conn)
    return pages.render_index(talents)


@pages_router.get("/admin", response_class=HTMLResponse)
def admin_page(
    request: Request,
    session: Optional[Dict[str, Any]] = Depends(get_optional_admin_session),
) -> str:
    if session is None or session.get("role") != ADMIN_ROLE:
        return pages.render_login()

    db: Database | None = request.app.state.db
    bookings = questions = None
    if db is not None:
        with db.connection() as conn:
            bookings = store.list_bookings(conn, limit=50)
            questions = store.list_questions(conn, limit=50)
    return pages.render_admin_panel(session, bookings=bookings, questions=questions)


@pages_router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    return {"status": "ok", "storage": request.app.state.db is not None}


# -----------------------------
# Admin session
# -----------------------------

auth_router = APIRouter(prefix="/admin")


@auth_router.post("/login")
def admin_login(
    payload: LoginRequest,
    response: Response,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    ok = credentials_match(
        payload.username,
        payload.password,
        expected_username=cfg.ADMIN_USERNAME,
        expected_password=cfg.ADMIN_PASSWORD,
    )
    if not ok:
        _debug("Admin login rejected")
        raise ApiError(401, "invalid_credentials")

    token = create_access_token(
        secret=cfg.AUTH_JWT_SECRET,
        subject=cfg.ADMIN_USERNAME,
        role=ADMIN_ROLE,
        expires_minutes=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES),
    )
    _set_session_cookie(response, token=token, cfg=cfg)
    _debug(f"Admin login ok username={cfg.ADMIN_USERNAME}")
    return {"ok": True}


@auth_router.post("/logout")
def admin_logout(response: Response, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    """Clear the session cookie. Always succeeds."""
    _clear_session_cookie(response, cfg)
    return {"ok": True}


# -----------------------------
# Public data API
# -----------------------------

api_router = APIRouter(prefix="/api")


@api_router.get("/talents")
def list_talents(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        return store.list_talents(conn)


@api_router.post("/bookings")
def create_booking(payload: BookingRequest, db: Database = Depends(get_database)) -> Dict[str, Any]:
    with db.connection() as conn:
        return store.create_booking(
            conn,
            talent_id=payload.talent_id,
            client_name=payload.client_name,
            client_email=payload.client_email,
            meeting_time=payload.meeting_time,
        )


@api_router.post("/questions")
def create_question(payload: QuestionRequest, db: Database = Depends(get_database)) -> Dict[str, Any]:
    with db.connection() as conn:
        return store.create_question(
            conn,
            name=payload.name,
            email=payload.email,
            message=payload.message,
        )


# -----------------------------
# Admin data API (every route gated)
# -----------------------------

admin_api_router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


@admin_api_router.get("/bookings")
def admin_list_bookings(
    limit: int = Query(100, ge=1, le=500),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        return store.list_bookings(conn, limit=limit)


@admin_api_router.get("/questions")
def admin_list_questions(
    limit: int = Query(100, ge=1, le=500),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        return store.list_questions(conn, limit=limit)


# -----------------------------
# Errors
# -----------------------------


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        _debug(f"Invalid request on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "invalid_request"})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        _debug(f"UNHANDLED ERROR on {request.url.path}: {exc!r}")
        return JSONResponse(status_code=500, content={"error": "internal_error"})


# -----------------------------
# App factory
# -----------------------------


def _check_secret(cfg: Config) -> None:
    if not cfg.uses_insecure_secret:
        return
    if cfg.is_production:
        raise RuntimeError("AUTH_JWT_SECRET must be set in production")
    _debug("WARNING: AUTH_JWT_SECRET is unset; using the insecure development fallback")


def create_app(cfg: Config) -> FastAPI:
    """Build the application around an explicit config.

    Config and the storage handle live on `app.state`; handlers reach them through
    the dependencies in `talent_site.auth.deps`.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _check_secret(cfg)
        if not cfg.ADMIN_PASSWORD:
            _debug("WARNING: ADMIN_PASSWORD is unset; admin login is disabled")

        db: Database | None = app.state.db
        if db is None:
            _debug("DATABASE_URL not set; running without storage (data endpoints disabled)")
        else:
            init_db(db)
        _debug(f"Started env={cfg.ENVIRONMENT}")
        try:
            yield
        finally:
            if db is not None:
                db.close()

    app = FastAPI(title="Talent Site", version=__version__, lifespan=lifespan)
    app.state.cfg = cfg
    app.state.db = Database(cfg.DB_DSN, pool_max=cfg.DB_POOL_MAX) if cfg.storage_configured else None

    _register_error_handlers(app)
    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(api_router)
    app.include_router(admin_api_router)
    return app


app = create_app(load_config())
