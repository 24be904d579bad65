from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SessionUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: str

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class RegisterResponse(MessageResponse):
    user: SessionUser


class SessionResponse(BaseModel):
    success: bool = True
    user: SessionUser
