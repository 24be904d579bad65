from typing import Optional

from fastapi import APIRouter, Depends, Request
from app.config.settings import settings
from app.core.dependencies import get_optional_claims, get_token_from_cookie
from app.core.security import TokenClaims
from app.database.supabase_client import get_supabase
from app.modules.assistant.gemini_client import GeminiClient
from app.modules.assistant.schemas import ChatRequest, ChatResponse, ExercisesResponse
from app.modules.assistant.service import AssistantService
from supabase import Client

router = APIRouter(tags=["assistant"])


def get_gemini_client() -> Optional[GeminiClient]:
    """None when no API key is configured; the endpoints answer 500 in that case"""
    if not settings.gemini_api_key:
        return None
    return GeminiClient(api_key=settings.gemini_api_key)


def get_assistant_service(
    supabase: Client = Depends(get_supabase),
    gemini: Optional[GeminiClient] = Depends(get_gemini_client)
) -> AssistantService:
    return AssistantService(supabase, gemini)


@router.post("/ai-bot", response_model=ChatResponse)
async def ai_bot(
    chat_data: ChatRequest,
    claims: Optional[TokenClaims] = Depends(get_optional_claims),
    service: AssistantService = Depends(get_assistant_service)
):
    """Chat with the fitness assistant; a valid cookie personalises the answer"""
    return ChatResponse(response=service.chat(chat_data.message, claims))


@router.post("/generate-exercises", response_model=ExercisesResponse)
async def generate_exercises(
    request: Request,
    service: AssistantService = Depends(get_assistant_service)
):
    """Generate a workout plan from the current user's profile"""
    return ExercisesResponse(exercises=service.generate_exercises(get_token_from_cookie(request)))
