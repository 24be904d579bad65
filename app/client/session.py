"""
Client-side view of the login session.

Every call goes back to the API: nothing is cached between calls, so the
answer always reflects the current cookie.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class SessionClient:
    def __init__(self, http: Optional[requests.Session] = None, base_url: str = ""):
        # Any requests/httpx style session works as long as it keeps cookies
        self.http = http or requests.Session()
        self.base_url = base_url.rstrip("/")

    def _call(self, method: str, path: str) -> Optional[Dict[str, Any]]:
        try:
            response = getattr(self.http, method)(f"{self.base_url}{path}")
            return response.json()
        except Exception as e:
            logger.error(f"Session request {method.upper()} {path} failed: {e}")
            return None

    def get_session(self) -> Optional[Dict[str, Any]]:
        """The logged-in user, or None"""
        result = self._call("get", "/api/session")
        if result and result.get("success"):
            return result.get("user")
        return None

    def is_authenticated(self) -> bool:
        return self.get_session() is not None

    def logout(self) -> bool:
        result = self._call("post", "/api/logout")
        return bool(result and result.get("success"))

    def has_completed_profile(self) -> bool:
        result = self._call("get", "/api/profile/get")
        return bool(result and result.get("success"))
