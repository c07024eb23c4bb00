"""Resilient Printful Client — wraps the Printful REST API with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429) and transient errors (5xx, connection): exponential backoff with jitter
    - Client errors (4xx except 429): immediate failure, no retry
    - All failures mapped to ExternalServiceError("printful", ...)
    - Responses unwrapped to Printful's `result` field

Design Decisions:
    - Wrapper over raw httpx: routes and services never see HTTP details
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - Mockup polling lives here (bounded attempts, configurable interval) so tests can
      set the interval to zero
"""

import asyncio
import logging
import random
from typing import Any

import httpx

from samu.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class PrintfulClient:
    """Async Printful API client with retry logic."""

    def __init__(
        self,
        api_key: str,
        store_id: str,
        base_url: str = "https://api.printful.com",
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.store_id = store_id
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "X-PF-Store-Id": self.store_id,
            "Content-Type": "application/json",
        }

    async def request(
        self, method: str, path: str, body: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Call Printful and return the `result` payload."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = await client.request(method, path, json=body, params=params)
                except httpx.TimeoutException:
                    raise ExternalServiceError("printful", "request timed out", http_status=504)
                except httpx.TransportError as e:
                    if attempt >= self.max_retries:
                        raise ExternalServiceError("printful", f"connection failed: {e}")
                    await self._backoff(attempt, f"connection error: {e}")
                    continue

                if response.status_code in _RETRYABLE_STATUS and attempt < self.max_retries:
                    await self._backoff(
                        attempt, f"HTTP {response.status_code}",
                        retry_after=response.headers.get("retry-after"),
                    )
                    continue

                return self._unwrap(response)

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.is_error:
            error = data.get("error") if isinstance(data, dict) else None
            message = (
                (error or {}).get("message") if isinstance(error, dict) else error
            ) or (data.get("message") if isinstance(data, dict) else None) \
                or f"HTTP {response.status_code}"
            raise ExternalServiceError("printful", str(message))
        return data.get("result") if isinstance(data, dict) else data

    async def _backoff(
        self, attempt: int, reason: str, retry_after: str | None = None,
    ) -> None:
        if retry_after and retry_after.isdigit():
            delay_ms = int(retry_after) * 1000
        else:
            delay_ms = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay_ms * 0.25 * (2 * random.random() - 1)
        wait_ms = max(0, delay_ms + jitter)
        logger.warning(
            f"Printful {reason}, retry {attempt + 1}/{self.max_retries} in {wait_ms:.0f}ms",
            extra={"attempt": attempt + 1, "service": "printful"},
        )
        await asyncio.sleep(wait_ms / 1000)

    # ─── API operations ─────────────────────────────────────────

    async def get_product(self, product_id: int) -> dict:
        return await self.request("GET", f"/products/{product_id}") or {}

    async def create_sync_product(self, payload: dict) -> dict:
        return await self.request("POST", "/store/products", payload) or {}

    async def estimate_shipping(self, payload: dict) -> list:
        return await self.request("POST", "/shipping/rates", payload) or []

    async def create_order(self, payload: dict) -> dict:
        return await self.request("POST", "/orders", payload) or {}

    async def generate_mockups(
        self,
        product_id: int,
        payload: dict,
        *,
        attempts: int,
        interval_seconds: float,
    ) -> list[str]:
        """Create a mockup task and poll it. Returns [] on timeout, raises on failure."""
        task = await self.request(
            "POST", f"/mockup-generator/create-task/{product_id}", payload,
        ) or {}
        task_key = task.get("task_key")
        if not task_key:
            raise ExternalServiceError("printful", "mockup task was not created")

        for attempt in range(attempts):
            await asyncio.sleep(interval_seconds)
            result = await self.request(
                "GET", "/mockup-generator/task", params={"task_key": task_key},
            ) or {}
            status = result.get("status")
            logger.info(
                f"Mockup task {task_key} status: {status}",
                extra={"attempt": attempt + 1, "service": "printful"},
            )
            if status == "completed":
                return [
                    m["mockup_url"] for m in result.get("mockups") or []
                    if m.get("mockup_url")
                ]
            if status == "failed":
                raise ExternalServiceError("printful", "mockup generation failed")
        return []
