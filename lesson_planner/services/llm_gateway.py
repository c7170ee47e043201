import logging
import time
from typing import Literal

import httpx

from lesson_planner.config import Settings, settings as default_settings
from lesson_planner.core.exceptions import GenerationFailed

logger = logging.getLogger(__name__)

ResponseFormat = Literal["text", "json"]


class LLMGateway:
    """
    Thin transport to an OpenAI-compatible chat completions endpoint.

    One call to complete() is one outbound request. Retries belong to the
    caller; every failure surfaces as GenerationFailed with the cause chained.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_tokens: int | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or default_settings
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.api_url = f"{(base_url or settings.llm_base_url).rstrip('/')}/chat/completions"
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self._client = client

        logger.info("✅ LLMGateway initialized")
        logger.debug(f"   API URL: {self.api_url}")
        logger.debug(f"   Model: {self.model}")
        logger.debug(f"   Timeout: {self.timeout}s")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(
        self,
        system_instruction: str,
        prompt: str,
        response_format: ResponseFormat = "text",
        *,
        temperature: float | None = None,
        model: str | None = None,
    ) -> str:
        """
        Send one prompt and return the raw completion text.

        Args:
            system_instruction: System message for the model
            prompt: Fully composed user message
            response_format: "json" asks the provider for a JSON object
            temperature: Sampling temperature for this call
            model: Model override for this call

        Returns:
            Raw completion text (never empty)

        Raises:
            GenerationFailed: On any transport, auth, rate-limit or provider error
        """
        if not self.api_key:
            raise GenerationFailed("LLM_API_KEY is not configured")

        model = model or self.model
        start_time = time.time()
        logger.info(f"🤖 Calling LLM (model: {model}, format: {response_format})")
        logger.debug(f"   Prompt length: {len(prompt)} chars")

        payload: dict = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if response_format == "json":
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._get_client().post(
                self.api_url, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            error_msg = f"LLM API HTTP error: {status}"
            if status == 401:
                error_msg += " - Invalid API key"
            elif status == 429:
                error_msg += " - Rate limit exceeded"
            elif status >= 500:
                error_msg += " - Provider server error"
            logger.error(f"❌ {error_msg}")
            raise GenerationFailed(error_msg, status_code=status) from e
        except httpx.TimeoutException as e:
            error_msg = f"LLM API request timed out after {self.timeout}s"
            logger.error(f"❌ {error_msg}")
            raise GenerationFailed(error_msg) from e
        except httpx.RequestError as e:
            error_msg = f"LLM API request failed: {e}"
            logger.error(f"❌ {error_msg}")
            raise GenerationFailed(error_msg) from e
        except ValueError as e:
            error_msg = "LLM API returned a non-JSON body"
            logger.error(f"❌ {error_msg}")
            raise GenerationFailed(error_msg) from e

        choices = result.get("choices") or []
        if not choices:
            raise GenerationFailed("No choices returned from LLM API")

        content = (choices[0].get("message") or {}).get("content")
        if not content or not content.strip():
            raise GenerationFailed("LLM API returned an empty completion")

        finish_reason = choices[0].get("finish_reason")
        if finish_reason == "length":
            raise GenerationFailed("LLM completion was truncated (finish_reason=length)")

        if "usage" in result:
            usage = result["usage"]
            logger.debug(
                f"   Token usage: prompt={usage.get('prompt_tokens', 0)}, "
                f"completion={usage.get('completion_tokens', 0)}, "
                f"total={usage.get('total_tokens', 0)}"
            )

        duration = time.time() - start_time
        logger.info(f"✅ Generated response ({len(content)} chars) in {duration:.3f}s")
        return content
