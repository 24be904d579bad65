import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException
from pydantic import EmailStr, TypeAdapter, ValidationError
from supabase import Client

from app.config.settings import settings
from app.core.errors import INTERNAL_ERROR
from app.core.security import create_access_token, hash_password, verify_password, verify_token
from app.core.validation import is_missing
from app.modules.auth.schemas import LoginRequest, RegisterRequest, SessionUser

logger = logging.getLogger(__name__)

# Columns safe to hand back to clients; password_hash is never projected
USER_PUBLIC_COLUMNS = "id, name, email"

_email_adapter = TypeAdapter(EmailStr)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("users")\
            .select("id, name, email, password_hash")\
            .eq("email", email)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def register(self, register_data: RegisterRequest) -> Tuple[SessionUser, str]:
        """Create a user with a hashed password and mint its first token"""
        if any(is_missing(v) for v in (register_data.name, register_data.email, register_data.password)):
            raise HTTPException(status_code=400, detail="data is missing")
        try:
            _email_adapter.validate_python(register_data.email)
        except ValidationError:
            raise HTTPException(status_code=400, detail="invalid email")
        if not settings.jwt_secret:
            logger.error("JWT_SECRET is not configured; refusing to create user")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

        try:
            if self._find_user_by_email(register_data.email) is not None:
                raise HTTPException(status_code=409, detail="user already exists")

            result = self.supabase.table("users").insert({
                "name": register_data.name,
                "email": register_data.email,
                "password_hash": hash_password(register_data.password),
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

            user = SessionUser(**result.data[0])
            token = create_access_token(user.id, user.email)
            logger.info(f"Registered user {user.id}")
            return user, token
        except HTTPException:
            raise
        except Exception as e:
            # The existence check and insert are not atomic; the unique index catches the race
            error_message = str(e).lower()
            if "duplicate" in error_message or "23505" in error_message:
                raise HTTPException(status_code=409, detail="user already exists")
            logger.exception("Registration failed")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    def login(self, login_data: LoginRequest) -> Tuple[SessionUser, str]:
        """Check credentials and mint a token"""
        if is_missing(login_data.email) or is_missing(login_data.password):
            raise HTTPException(status_code=400, detail="data is missing")
        try:
            db_user = self._find_user_by_email(login_data.email)
            if db_user is None:
                raise HTTPException(status_code=404, detail="user not found")
            if not verify_password(login_data.password, db_user.get("password_hash") or ""):
                raise HTTPException(status_code=401, detail="wrong password")

            user = SessionUser(**db_user)
            return user, create_access_token(user.id, user.email)
        except HTTPException:
            raise
        except Exception:
            logger.exception("Login failed")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    def get_session_user(self, token: Optional[str]) -> SessionUser:
        """Resolve the cookie token to the user row it names"""
        if not token:
            raise HTTPException(status_code=401, detail="Not authenticated")
        claims = verify_token(token)
        if claims is None:
            raise HTTPException(status_code=401, detail="Invalid token")
        try:
            result = self.supabase.table("users")\
                .select(USER_PUBLIC_COLUMNS)\
                .eq("id", claims.user_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="user not found")
            return SessionUser(**result.data[0])
        except HTTPException:
            raise
        except Exception:
            logger.exception("Session lookup failed")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
