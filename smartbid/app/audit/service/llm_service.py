"""Gemini generateContent relay.

The browser builds the audit prompt and response schema; this client only
forwards them to Google and hands back the provider's JSON untouched.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from smartbid.app.audit.exceptions import LLMConfigurationError, LLMProviderError

logger = logging.getLogger(__name__)

# Request fields forwarded to generateContent
RELAYED_FIELDS = ('contents', 'systemInstruction', 'generationConfig')


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, LLMProviderError):
        # Rate limits and server errors are transient; other 4xx are not
        return exc.status is None or exc.status == 429 or exc.status >= 500
    return False


class GeminiClient:
    """Async client for the Gemini generateContent endpoint.

    Failed calls are retried up to ``max_attempts`` times, waiting
    ``backoff_base`` seconds after the first failure and doubling each time.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        *,
        max_attempts: int = 3,
        backoff_base: float = 1.0,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self._sleep = sleep or asyncio.sleep
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f'{self.base_url}/models/{self.model}:generateContent'

    async def generate_content(self, body: dict[str, Any]) -> dict[str, Any]:
        """Relay a generateContent request and return the provider JSON verbatim.

        Raises:
            LLMConfigurationError: If no API key is configured (no call is made)
            LLMProviderError: If every attempt failed
        """
        if not self.api_key:
            raise LLMConfigurationError()

        payload = {k: body[k] for k in RELAYED_FIELDS if body.get(k) is not None}
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_base),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    data = await self._post(payload)
        except httpx.TransportError as e:
            raise LLMProviderError(f'Google API unreachable: {e}') from e

        return data

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(
            self.endpoint,
            json=payload,
            headers={'x-goog-api-key': self.api_key},
        )
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_success and isinstance(data, dict):
            return data

        message = 'Google API Error'
        if isinstance(data, dict):
            error = data.get('error')
            if isinstance(error, dict):
                message = error.get('message') or message
            elif isinstance(error, str):
                message = error
        elif not response.is_success:
            message = f'{message}: HTTP {response.status_code}'
        else:
            message = 'Google API returned a non-JSON response'
        logger.warning(f'[LLM] generateContent failed ({response.status_code}): {message[:200]}')
        raise LLMProviderError(message, status=response.status_code)

    async def close(self) -> None:
        await self._client.aclose()
