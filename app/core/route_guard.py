"""
Route guard: runs before every request and redirects based on the token cookie.

| path class   | valid token          | invalid token                  | no token          |
|--------------|----------------------|--------------------------------|-------------------|
| protected    | allow                | redirect to sign-in, drop cookie | redirect to sign-in |
| auth-only    | redirect to dashboard | allow                         | allow             |
| unclassified | allow                | allow                          | allow             |

Verification is local (signature + expiry); the user store is never consulted.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple
import logging

from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.config.settings import settings
from app.core.security import verify_token

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES: Tuple[str, ...] = ("/dashboard", "/complete-profile")
AUTH_ONLY_PREFIXES: Tuple[str, ...] = ("/auth/signin", "/auth/signup")

SIGNIN_PATH = "/auth/signin"
DASHBOARD_PATH = "/dashboard"


class PathClass(str, Enum):
    PROTECTED = "protected"
    AUTH_ONLY = "auth_only"
    UNCLASSIFIED = "unclassified"


class TokenState(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ABSENT = "absent"


class GuardDecision(NamedTuple):
    redirect_to: Optional[str] = None
    clear_cookie: bool = False

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


ALLOW = GuardDecision()


def classify_path(path: str) -> PathClass:
    if path.startswith(PROTECTED_PREFIXES):
        return PathClass.PROTECTED
    if path.startswith(AUTH_ONLY_PREFIXES):
        return PathClass.AUTH_ONLY
    return PathClass.UNCLASSIFIED


def token_state(token: Optional[str]) -> TokenState:
    if not token:
        return TokenState.ABSENT
    if verify_token(token) is None:
        return TokenState.INVALID
    return TokenState.VALID


def decide(path_class: PathClass, state: TokenState) -> GuardDecision:
    if path_class == PathClass.PROTECTED:
        if state == TokenState.ABSENT:
            return GuardDecision(redirect_to=SIGNIN_PATH)
        if state == TokenState.INVALID:
            return GuardDecision(redirect_to=SIGNIN_PATH, clear_cookie=True)
        return ALLOW
    if path_class == PathClass.AUTH_ONLY and state == TokenState.VALID:
        return GuardDecision(redirect_to=DASHBOARD_PATH)
    return ALLOW


class RouteGuardMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path_class = classify_path(scope["path"])
        if path_class == PathClass.UNCLASSIFIED:
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        decision = decide(path_class, token_state(request.cookies.get(settings.cookie_name)))
        if decision.allowed:
            await self.app(scope, receive, send)
            return

        logger.info("Route guard redirecting %s -> %s", scope["path"], decision.redirect_to)
        response = RedirectResponse(url=decision.redirect_to, status_code=307)
        if decision.clear_cookie:
            response.delete_cookie(settings.cookie_name, path="/")
        await response(scope, receive, send)
