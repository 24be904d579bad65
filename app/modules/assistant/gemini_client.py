"""
Thin client for the Gemini REST generateContent endpoint.
One request per call: no retries, bounded by gemini_timeout_seconds.
"""

import logging
from typing import Optional

import requests

from app.config.settings import settings

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Upstream call failed or returned no text"""


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model or settings.gemini_model
        self.api_base = (api_base or settings.gemini_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.gemini_timeout_seconds
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def generate(self, prompt: str, temperature: float = 0.7) -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }
        try:
            r = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GeminiError(f"Gemini request failed: {e}") from e

        if not r.ok:
            raise GeminiError(f"Gemini HTTP {r.status_code}")
        data = r.json()
        candidates = data.get("candidates") or [{}]
        parts = candidates[0].get("content", {}).get("parts", [])
        txt = "".join(p.get("text", "") for p in parts).strip()
        if not txt:
            raise GeminiError("Gemini returned an empty response")
        return txt
