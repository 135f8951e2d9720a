"""AI advisor client for a Gemini-compatible generateContent endpoint."""

from typing import Any, Dict, Optional, Sequence
import httpx
import structlog

from cloudinventory.advisor.summary import build_prompt
from cloudinventory.core.base_client import BaseClient
from cloudinventory.core.exceptions import AdvisorException
from cloudinventory.core.models import CloudResource
from cloudinventory.core.utils import retry_with_backoff, safe_get

logger = structlog.get_logger(__name__)

MISSING_KEY_MESSAGE = "Error: API Key is missing. Please check your configuration."
FAILURE_MESSAGE = "Failed to generate insights. Please try again later."
EMPTY_ANSWER_MESSAGE = "No insights generated."


class AdvisorClient(BaseClient):
    """Sends inventory summaries to the generative text service.

    The response is opaque natural-language text. Failures never leave
    ``analyze_inventory``; they are turned into display strings.
    """

    def __init__(self, config: Dict[str, Any], http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(config, "AdvisorClient")
        self.api_key = config.get("api_key")
        self.model = config.get("model", "gemini-3-flash-preview")
        self.base_url = config.get("base_url", "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
        self.timeout_seconds = float(config.get("timeout_seconds", 30.0))
        self.retry_attempts = int(config.get("retry_attempts", 3))
        self.retry_backoff_factor = float(config.get("retry_backoff_factor", 1.0))
        self._http = http_client
        self._owns_http = http_client is None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def connect(self) -> None:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout_seconds)
            self._owns_http = True
        self._connected = True
        self.logger.info("Advisor client connected", model=self.model)

    async def disconnect(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None
        self._connected = False
        self.logger.info("Advisor client disconnected")

    async def health_check(self) -> bool:
        return self._connected and bool(self.api_key)

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        response = await self._http.post(
            self.endpoint,
            json=payload,
            headers={"x-goog-api-key": self.api_key},
        )
        response.raise_for_status()
        return response

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the answer text (may be empty)."""
        if not self.api_key:
            raise AdvisorException("API key is missing")
        await self.ensure_connected()

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        post = retry_with_backoff(
            max_retries=self.retry_attempts,
            backoff_factor=self.retry_backoff_factor,
            max_wait=10.0,
            retry_on=(httpx.TransportError,)
        )(self._post)

        try:
            response = await post(payload)
        except httpx.HTTPStatusError as e:
            raise AdvisorException(
                f"Advisor request failed with status {e.response.status_code}",
                {"status_code": e.response.status_code}
            ) from e
        except httpx.TransportError as e:
            raise AdvisorException(f"Advisor transport error: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise AdvisorException("Advisor returned a non-JSON response") from e

        candidates = body.get("candidates") if isinstance(body, dict) else None
        if not isinstance(candidates, list) or not candidates:
            return ""
        parts = safe_get(candidates[0], "content.parts")
        if not isinstance(parts, list):
            return ""
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict))

    async def analyze_inventory(self, resources: Sequence[CloudResource], question: str) -> str:
        """Ask the advisor about a scored inventory; always returns display text."""
        if not self.api_key:
            self.logger.warning("Advisor called without an API key")
            return MISSING_KEY_MESSAGE

        prompt = build_prompt(resources, question)
        try:
            answer = await self.generate(prompt)
        except Exception as e:
            self.logger.error("Advisor request failed", error=str(e))
            return FAILURE_MESSAGE

        self.logger.info("Advisor answered", answer_chars=len(answer))
        return answer or EMPTY_ANSWER_MESSAGE
