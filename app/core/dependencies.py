"""
Core dependencies for route protection
"""

from fastapi import HTTPException, Request, status
from app.config.settings import settings
from app.core.security import TokenClaims, verify_token
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def get_token_from_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.cookie_name)


def get_current_claims(request: Request) -> TokenClaims:
    """Extract current user claims from the token cookie"""
    claims = verify_token(get_token_from_cookie(request))
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return claims


def get_optional_claims(request: Request) -> Optional[TokenClaims]:
    """Claims when a valid cookie is present, None otherwise (anonymous access allowed)"""
    return verify_token(get_token_from_cookie(request))
