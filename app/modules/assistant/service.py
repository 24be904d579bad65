import json
import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from supabase import Client

from app.core.errors import INTERNAL_ERROR
from app.core.security import TokenClaims, verify_token
from app.modules.assistant.gemini_client import GeminiClient, GeminiError
from app.modules.assistant.prompts import build_chat_prompt, build_exercises_prompt
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService

logger = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to generate exercises. Please try again."

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one"""
    return _FENCE_RE.sub("", text.strip()).strip()


def parse_exercises(text: str) -> List[Dict[str, Any]]:
    """Decode the model output into a list of exercise objects. Raises ValueError."""
    exercises = json.loads(strip_code_fences(text))
    if not isinstance(exercises, list) or not all(isinstance(ex, dict) for ex in exercises):
        raise ValueError("expected a JSON array of exercise objects")
    return exercises


class AssistantService:
    def __init__(self, supabase: Client, gemini: Optional[GeminiClient]):
        self.supabase = supabase
        self.gemini = gemini
        self.profiles = ProfileService(supabase)

    def _profile_for_chat(self, claims: Optional[TokenClaims]) -> Optional[ProfileResponse]:
        if claims is None:
            return None
        try:
            return self.profiles.find_profile(claims.user_id)
        except Exception as e:
            # Personalisation is optional; answer without it
            logger.warning(f"Could not load profile for chat personalisation: {e}")
            return None

    def chat(self, message: Optional[str], claims: Optional[TokenClaims] = None) -> str:
        """Answer a fitness question, personalised when the caller has a profile"""
        if not message or not message.strip():
            raise HTTPException(status_code=400, detail="Please enter your message")
        if self.gemini is None:
            raise HTTPException(status_code=500, detail="API key is not found, add it to .env file")

        prompt = build_chat_prompt(message.strip(), self._profile_for_chat(claims))
        try:
            return self.gemini.generate(prompt)
        except GeminiError:
            logger.exception("Chat generation failed")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    def generate_exercises(self, token: Optional[str]) -> List[Dict[str, Any]]:
        """Workout plan for the token's user, built from their profile"""
        if not token:
            raise HTTPException(status_code=401, detail="Not authenticated")
        claims = verify_token(token)
        if claims is None:
            raise HTTPException(status_code=401, detail="Invalid token")

        try:
            profile = self.profiles.find_profile(claims.user_id)
            if profile is None:
                raise HTTPException(
                    status_code=404,
                    detail="Profile not found. Please complete your profile first."
                )
            if self.gemini is None:
                raise HTTPException(status_code=500, detail="API key not configured")

            exercises = parse_exercises(self.gemini.generate(build_exercises_prompt(profile)))
            logger.info(f"Generated {len(exercises)} exercises for user {claims.user_id}")
            return exercises
        except HTTPException:
            raise
        except Exception:
            logger.exception("Error generating exercises")
            raise HTTPException(status_code=500, detail=GENERATION_FAILED)
