"""Auth API routes: password login, identity-provider login, logout and current user."""

import secrets
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from warden.application.services.auth_service import (
    authenticate_admin,
    build_identity_principal,
    claims_from_id_token,
    upsert_identity_user,
)
from warden.application.services.session_service import SessionManager
from warden.config import Settings
from warden.core.exceptions import EntityNotFoundException, UnauthorizedException
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.domain.schemas.auth import PASSWORD_SOURCE, LoginRequest, Principal, UserRead
from warden.infrastructure.database import get_db
from warden.infrastructure.oidc import OIDCError, OIDCRegistry, TokenSet, generate_pkce_pair
from warden.interfaces.api.deps import RequestSession, get_request_session, require_session
from warden.interfaces.deps import (
    get_admin_repository,
    get_oidc_registry,
    get_session_manager,
    get_settings_dep,
    get_user_repository,
)

router = APIRouter(prefix="/api", tags=["Auth"])
logger = structlog.get_logger(__name__)

HOME_URL = "/"
LOGIN_FAILURE_URL = "/login"


def _set_session_cookie(response: Response, sessions: SessionManager, sid: str) -> None:
    settings = sessions.settings
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        sessions.sign(sid),
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def _clear_session_cookie(response: Response, sessions: SessionManager) -> None:
    response.delete_cookie(
        sessions.settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=sessions.settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/login", response_model=Principal)
def password_login(
    body: LoginRequest,
    current: RequestSession = Depends(get_request_session),
    admins: AdminRepository = Depends(get_admin_repository),
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_settings_dep),
):
    principal = authenticate_admin(admins, body.email, body.password, settings)
    if principal is None:
        raise UnauthorizedException("Invalid credentials")

    sid = sessions.login(principal, previous_sid=current.sid)
    response = JSONResponse(content=principal.model_dump(mode="json", by_alias=True))
    _set_session_cookie(response, sessions, sid)
    return response


@router.get("/login")
async def begin_provider_login(
    request: Request,
    return_to: Optional[str] = None,
    current: RequestSession = Depends(get_request_session),
    registry: OIDCRegistry = Depends(get_oidc_registry),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Redirect the browser to the identity provider's authorization endpoint."""
    client = await registry.get(request.url.hostname)
    code_verifier, code_challenge = generate_pkce_pair()
    state = secrets.token_urlsafe(32)
    nonce = secrets.token_urlsafe(32)

    try:
        auth_url = await client.authorization_url(state=state, nonce=nonce, code_challenge=code_challenge)
    except OIDCError as e:
        logger.error("Identity provider discovery failed", error=str(e))
        return RedirectResponse(LOGIN_FAILURE_URL, status_code=302)

    # Only same-site paths are accepted as post-login destinations
    if not return_to or not return_to.startswith("/") or return_to.startswith("//"):
        return_to = HOME_URL

    pending = {
        "state": state,
        "nonce": nonce,
        "code_verifier": code_verifier,
        "hostname": client.hostname,
        "return_to": return_to,
    }
    await run_in_threadpool(sessions.destroy, current.sid)
    sid = await run_in_threadpool(sessions.create, {"oidc": pending})
    logger.info("Identity provider login started", hostname=client.hostname)

    response = RedirectResponse(auth_url, status_code=302)
    _set_session_cookie(response, sessions, sid)
    return response


def _finish_provider_login(
    users: UserRepository,
    sessions: SessionManager,
    settings: Settings,
    tokens: TokenSet,
    previous_sid: Optional[str],
) -> str:
    claims = claims_from_id_token(tokens.claims)
    user = upsert_identity_user(users, claims, settings)
    principal = build_identity_principal(user, claims, settings)
    return sessions.login(
        principal,
        previous_sid=previous_sid,
        claims=tokens.claims,
        tokens={"access_token": tokens.access_token, "refresh_token": tokens.refresh_token},
    )


@router.get("/callback")
async def provider_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    current: RequestSession = Depends(get_request_session),
    registry: OIDCRegistry = Depends(get_oidc_registry),
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_settings_dep),
):
    """Finish the identity-provider login and start a signed-in session."""
    pending = current.data.get("oidc")

    async def fail(reason: str) -> RedirectResponse:
        logger.warning("Identity provider login failed", reason=reason)
        await run_in_threadpool(sessions.destroy, current.sid)
        response = RedirectResponse(LOGIN_FAILURE_URL, status_code=302)
        _clear_session_cookie(response, sessions)
        return response

    if error:
        return await fail(f"provider error: {error}")
    if not pending or not code or not state:
        return await fail("no login in progress")
    if not secrets.compare_digest(state.encode(), str(pending.get("state", "")).encode()):
        return await fail("state mismatch")

    client = await registry.get(pending.get("hostname") or request.url.hostname)
    try:
        tokens = await client.exchange_code(code, pending["code_verifier"], pending["nonce"])
    except (OIDCError, KeyError) as e:
        return await fail(str(e))

    try:
        sid = await run_in_threadpool(_finish_provider_login, users, sessions, settings, tokens, current.sid)
    except (KeyError, ValueError) as e:
        return await fail(f"unusable claims: {e}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("User upsert failed", exc_info=e)
        return await fail("user upsert failed")

    response = RedirectResponse(pending.get("return_to") or HOME_URL, status_code=302)
    _set_session_cookie(response, sessions, sid)
    return response


@router.get("/logout")
def logout(
    current: RequestSession = Depends(get_request_session),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.destroy(current.sid)
    if current.principal is not None:
        logger.info("Session ended", principal_id=current.principal.id)
    response = RedirectResponse(HOME_URL, status_code=302)
    _clear_session_cookie(response, sessions)
    return response


@router.get("/auth/user", response_model=None)
def current_user(
    principal: Principal = Depends(require_session),
    users: UserRepository = Depends(get_user_repository),
):
    """Password sessions get the principal back; identity-provider sessions get their user row."""
    if principal.source == PASSWORD_SOURCE:
        return JSONResponse(content=principal.model_dump(mode="json", by_alias=True))

    user = users.get_by_id(principal.id)
    if user is None:
        raise EntityNotFoundException("User not found")
    return JSONResponse(content=UserRead.model_validate(user).model_dump(mode="json", by_alias=True))
