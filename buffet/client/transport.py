"""HTTP transport for the dashboard client.

Wraps an httpx.AsyncClient that keeps the session cookie, applies the request
timeout and retries idempotent reads with exponential backoff. Mutations are
sent exactly once.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from ..config import API_BASE_URL, API_RETRY_ATTEMPTS, API_RETRY_DELAY, API_TIMEOUT
from .errors import ApiError, NetworkError, ServerError, error_from_response, normalize_error

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (NetworkError, ServerError)


class ApiClient:
    """Async JSON client for the buffet REST API"""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT,
        retry_attempts: int = API_RETRY_ATTEMPTS,
        retry_delay: float = API_RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise normalize_error(e) from e

        if response.is_error:
            raise error_from_response(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send one request; GETs are retried on network and 5xx errors"""
        method = method.upper()
        kwargs: dict = {}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None and v != ""}

        attempts = self.retry_attempts + 1 if method == "GET" else 1
        logger.debug(f"📡 API Request: {method} {self.base_url}{path}")

        for attempt in range(attempts):
            try:
                return await self._send(method, path, **kwargs)
            except RETRYABLE_ERRORS as e:
                if attempt == attempts - 1:
                    logger.error(f"🚨 {method} {path} failed after {attempt + 1} attempt(s): {e}")
                    raise
                delay = self.retry_delay * (2**attempt)
                logger.warning(
                    f"⏳ {method} {path} failed ({e}); retrying in {delay:.1f}s "
                    f"(attempt {attempt + 2}/{attempts})"
                )
                await asyncio.sleep(delay)
            except ApiError as e:
                logger.warning(f"❌ {method} {path} rejected: {e} (status: {e.status})")
                raise

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # Auth
    async def login(self, username: str, password: str) -> dict:
        return await self.post("/auth/login", {"username": username, "password": password})

    async def logout(self) -> dict:
        return await self.post("/auth/logout")

    async def me(self) -> dict:
        return await self.get("/auth/me")
