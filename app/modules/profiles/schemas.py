from pydantic import BaseModel
from typing import Any, Optional
from datetime import datetime


class ProfileRequest(BaseModel):
    """Raw profile payload; values are coerced and checked in ProfileService"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Any = None
    gender: Optional[str] = None
    height: Any = None
    weight: Any = None
    goal: Optional[str] = None
    level: Optional[str] = None
    place: Optional[str] = None
    equipment: Any = None
    injuries: Any = None
    others: Any = None
    days: Any = None
    session_time: Any = None
    able: Optional[bool] = None


class ProfileResponse(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    age: int
    gender: str
    height: float
    weight: float
    goal: str
    level: str
    place: str
    equipment: Any
    injuries: Any = None
    others: Any = None
    days: int
    session_time: int
    able: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileEnvelope(BaseModel):
    success: bool = True
    message: str = "done"
    profile: ProfileResponse
