"""
Inference client: OpenAI-compatible chat completions.

Features:
  - Retry with exponential backoff + jitter (handles 429, 500, 502, 503, 504)
  - Reusable client (connection pooling)
  - Typed failure: every error surfaces as InferenceFailed. Generation has
    no local fallback.
"""

import asyncio
import logging
import random
import time
from typing import Any, Optional

import httpx

from ..core.config import get_settings
from ..core.errors import InferenceFailed

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}
MAX_RETRIES = 3
BASE_DELAY = 1.0
MAX_DELAY = 16.0


def _new_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(connect=10, read=120, write=30, pool=10),
        limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
    )


class InferenceClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str = "llama-3.1-70b",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        http_client: Optional[httpx.AsyncClient] = None,
        max_retries: int = MAX_RETRIES,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self._http = http_client

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = _new_http_client()
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    # ── Retry logic ──────────────────────────────────────────────────

    async def _retry_request(self, url: str, **kwargs) -> httpx.Response:
        """POST with exponential backoff + jitter."""
        client = self._client()
        last_exc = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = await client.post(url, **kwargs)

                if resp.status_code not in RETRYABLE_STATUS:
                    if resp.status_code >= 400:
                        logger.error("Inference API error %d: %s", resp.status_code, resp.text[:500])
                    resp.raise_for_status()
                    return resp

                last_exc = httpx.HTTPStatusError(
                    f"{resp.status_code}", request=resp.request, response=resp
                )
                if attempt >= self.max_retries:
                    break

                retry_after = resp.headers.get("retry-after")
                delay = float(retry_after) if retry_after else min(
                    MAX_DELAY, BASE_DELAY * (2 ** attempt) + random.uniform(0, 1)
                )
                logger.warning(
                    "Inference %d (attempt %d/%d), retrying in %.1fs",
                    resp.status_code, attempt + 1, self.max_retries + 1, delay,
                )
                await asyncio.sleep(delay)

            except httpx.TimeoutException as e:
                last_exc = e
                if attempt >= self.max_retries:
                    break
                delay = min(MAX_DELAY, BASE_DELAY * (2 ** attempt) + random.uniform(0, 1))
                logger.warning(
                    "Inference timeout (attempt %d/%d), retrying in %.1fs",
                    attempt + 1, self.max_retries + 1, delay,
                )
                await asyncio.sleep(delay)

            except httpx.HTTPStatusError:
                raise  # Non-retryable HTTP errors

        raise last_exc or RuntimeError("Inference request failed after retries")

    async def _complete(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        if not self.api_key:
            raise ValueError("No inference API key. Set INFERENCE_API_KEY.")

        payload: dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
        }
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        start = time.monotonic()
        resp = await self._retry_request(url, json=payload, headers=headers)
        data = resp.json()

        usage = data.get("usage", {})
        logger.info(
            "Inference: %dms | in=%d out=%d tokens | model=%s",
            int((time.monotonic() - start) * 1000),
            usage.get("prompt_tokens", 0),
            usage.get("completion_tokens", 0),
            payload["model"],
        )
        choices = data.get("choices") or [{}]
        return choices[0].get("message", {}).get("content") or ""

    # ── Public surface ───────────────────────────────────────────────

    async def infer(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Single prompt → text."""
        try:
            return await self._complete(
                [{"role": "user", "content": prompt}],
                model=model, temperature=temperature, max_tokens=max_tokens,
            )
        except Exception as e:
            logger.error("Inference failed: %s", e)
            raise InferenceFailed(f"Inference failed: {e}") from e

    async def chat(self, messages: list[dict]) -> str:
        """Ordered [{role, content}, ...] → assistant text."""
        try:
            return await self._complete(messages)
        except Exception as e:
            logger.error("Chat inference failed: %s", e)
            raise InferenceFailed(f"Chat inference failed: {e}") from e


# ── Process-wide instance ────────────────────────────────────────────

_client: Optional[InferenceClient] = None


def get_inference_client() -> InferenceClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = InferenceClient(
            base_url=settings.inference_base_url,
            api_key=settings.inference_api_key,
            model=settings.inference_model,
            temperature=settings.inference_temperature,
            max_tokens=settings.inference_max_tokens,
        )
    return _client


async def close_client() -> None:
    """Close the shared HTTP client. Call on app shutdown."""
    global _client
    if _client:
        await _client.close()
        _client = None
