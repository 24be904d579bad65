from fastapi import APIRouter, Depends, Request, Response
from app.config.settings import settings
from app.core.dependencies import get_token_from_cookie
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, MessageResponse, RegisterResponse, SessionResponse
)
from app.modules.auth.service import AuthService
from supabase import Client

router = APIRouter(tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.token_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user; the token travels only in the cookie"""
    user, token = service.register(register_data)
    set_token_cookie(response, token)
    return RegisterResponse(message="user created successfully", user=user)


@router.post("/login", response_model=MessageResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Login and receive the token cookie"""
    _, token = service.login(login_data)
    set_token_cookie(response, token)
    return MessageResponse(message="user logged in successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Drop the token cookie. The token itself stays valid until it expires."""
    response.delete_cookie(
        settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return MessageResponse(message="logged out successfully")


@router.get("/session", response_model=SessionResponse)
async def get_session(
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Who is logged in, as seen from the browser"""
    user = service.get_session_user(get_token_from_cookie(request))
    return SessionResponse(user=user)
