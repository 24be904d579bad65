from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    success: bool = True
    response: str


class ExercisesResponse(BaseModel):
    success: bool = True
    exercises: List[Dict[str, Any]]
