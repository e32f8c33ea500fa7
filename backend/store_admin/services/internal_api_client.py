"""
Internal API Connector
Handles same-origin calls from the AI actions dispatcher to the generation
and translation endpoints
"""
import logging
from typing import Dict, List, Optional

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from store_admin.core.auth import INTERNAL_CALL_HEADER, extract_session_token, security
from store_admin.core.config import settings

logger = logging.getLogger(__name__)


class InternalApiError(Exception):
    """An internal endpoint answered with a non-2xx status"""


class InternalApiClient:
    """
    Connector for the service's own /api/ai endpoints

    Requests carry the shared INTERNAL_API_TOKEN so the endpoints accept them
    without a dashboard session and the rate limiter skips them. The caller's
    session token is forwarded as well, which is what authenticates the call
    when no internal token is configured.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        session_token: Optional[str] = None
    ):
        """
        Args:
            base_url: Where the API is reachable (INTERNAL_API_BASE_URL)
            token: Shared internal token (INTERNAL_API_TOKEN)
            transport: Optional httpx transport, e.g. ASGITransport for in-process calls
            timeout: Request timeout in seconds
            session_token: The dashboard session JWT of the user running the action
        """
        self.base_url = (base_url or settings.INTERNAL_API_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.INTERNAL_API_TOKEN
        self.transport = transport
        self.timeout = timeout or settings.INTERNAL_API_TIMEOUT
        self.headers = {"Content-Type": "application/json"}
        if self.token:
            self.headers[INTERNAL_CALL_HEADER] = self.token
        if session_token:
            self.headers["Authorization"] = f"Bearer {session_token}"

    async def _post(self, path: str, payload: Dict) -> Dict:
        """POST JSON and return the decoded body"""
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            response = await client.post(
                path,
                json=payload,
                headers=self.headers,
                timeout=self.timeout
            )

        if response.status_code >= 400:
            logger.error(f"Internal call {path} failed: {response.status_code} {response.text[:200]}")
            raise InternalApiError(f"{path} returned {response.status_code}")

        return response.json()

    async def generate(self, task: str, prompt: str, data: Dict) -> Dict:
        """Call POST /api/ai/generate"""
        return await self._post("/api/ai/generate", {
            "task": task,
            "prompt": prompt,
            "data": data,
        })

    async def translate_batch(
        self,
        texts: List[Dict[str, str]],
        from_language: str,
        to_language: str,
        context: str
    ) -> List[Dict[str, str]]:
        """
        Call POST /api/ai/translate in batch mode

        Args:
            texts: [{"field": ..., "text": ...}, ...]

        Returns:
            [{"field": ..., "translation": ...}, ...]
        """
        result = await self._post("/api/ai/translate", {
            "batch": True,
            "texts": texts,
            "fromLanguage": from_language,
            "toLanguage": to_language,
            "context": context,
        })
        return result.get("translations", [])


def get_internal_client(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> InternalApiClient:
    """FastAPI dependency; tests override it with an in-process transport"""
    return InternalApiClient(session_token=extract_session_token(request, credentials))
