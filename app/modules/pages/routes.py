"""
Page endpoints behind the route guard. The UI itself is served elsewhere;
these only describe which page the browser landed on.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from app.core.dependencies import get_optional_claims
from app.core.security import TokenClaims

router = APIRouter(tags=["pages"])


def _page(name: str, claims: Optional[TokenClaims] = None) -> dict:
    page = {"page": name}
    if claims is not None:
        page["user"] = claims.model_dump()
    return page


@router.get("/dashboard")
async def dashboard(claims: Optional[TokenClaims] = Depends(get_optional_claims)):
    return _page("dashboard", claims)


@router.get("/dashboard/profile")
async def dashboard_profile(claims: Optional[TokenClaims] = Depends(get_optional_claims)):
    return _page("dashboard/profile", claims)


@router.get("/complete-profile")
async def complete_profile(claims: Optional[TokenClaims] = Depends(get_optional_claims)):
    return _page("complete-profile", claims)


@router.get("/auth/signin")
async def signin():
    return _page("auth/signin")


@router.get("/auth/signup")
async def signup():
    return _page("auth/signup")
