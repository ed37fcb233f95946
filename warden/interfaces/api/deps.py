"""FastAPI dependencies for session resolution and the authorization gate.

Every handler that needs an identity resolves it here, once, into a
``Principal`` that it then passes explicitly to the services.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from warden.application.services.session_service import SessionManager, principal_from_session
from warden.core.exceptions import ForbiddenException, UnauthorizedException
from warden.domain.schemas.auth import Principal
from warden.interfaces.deps import get_session_manager


@dataclass
class RequestSession:
    sid: Optional[str]
    data: dict
    principal: Optional[Principal]


def get_request_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> RequestSession:
    """Read the signed session cookie and load the matching session row."""
    cookie = request.cookies.get(sessions.settings.SESSION_COOKIE_NAME)
    sid = sessions.sid_from_cookie(cookie)
    data = sessions.load(sid)
    if data is None:
        return RequestSession(sid=None, data={}, principal=None)
    return RequestSession(sid=sid, data=data, principal=principal_from_session(data))


def require_session(session: RequestSession = Depends(get_request_session)) -> Principal:
    if session.principal is None:
        raise UnauthorizedException("Unauthorized")
    return session.principal


def require_admin(principal: Principal = Depends(require_session)) -> Principal:
    if not principal.is_admin:
        raise ForbiddenException("Forbidden")
    return principal


def require_super_admin(principal: Principal = Depends(require_session)) -> Principal:
    if not principal.is_super_admin:
        raise ForbiddenException("Forbidden")
    return principal
