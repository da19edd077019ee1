"""
LLM Service: Centralized interface for all LLM API calls.

One instance wraps one provider:
- "openai": OpenAI Chat Completions
- "groq":   Groq through its OpenAI-compatible endpoint
- "google": Gemini through google-genai

The entry point is `call()`, which always returns the raw response text.
"""

import json
import time
from typing import Any, Optional, Literal
from openai import OpenAI, OpenAIError, RateLimitError, APITimeoutError
from google import genai
import logging

logger = logging.getLogger(__name__)

Provider = Literal["openai", "groq", "google"]

_OPENAI_COMPATIBLE = {"openai", "groq"}


class LLMService:
    """
    Service for making LLM API calls with retry logic and error handling.

    Both `provider` and `model_id` are required; callers build one service
    per provider from Settings.
    """

    def __init__(
        self,
        api_key: str,
        *,
        provider: Provider,
        model_id: str,
        base_url: Optional[str] = None,
        max_retries: int = 3,
        initial_retry_delay: float = 1.0,
        timeout: int = 60,
    ):
        if not api_key:
            raise LLMServiceError(f"{provider} API key not configured")

        self.provider = provider
        self.model_id = model_id
        self.max_retries = max_retries
        self.initial_retry_delay = initial_retry_delay
        self.timeout = timeout

        self.client = None
        self.gemini_client = None
        if provider in _OPENAI_COMPATIBLE:
            if base_url:
                self.client = OpenAI(api_key=api_key, base_url=base_url)
            else:
                self.client = OpenAI(api_key=api_key)
        elif provider == "google":
            self.gemini_client = genai.Client(api_key=api_key)
        else:
            raise LLMServiceError(f"Unknown LLM provider: {provider}")

    # ─── Primary entry point ───────────────────────────────────────────

    def call(
        self,
        prompt: str,
        system_message: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        json_mode: bool = True,
    ) -> str:
        """Route the prompt to this service's provider and return raw text."""
        if self.provider == "google":
            return self._call_gemini(prompt, temperature=temperature, json_mode=json_mode)
        return self._call_chat_completions(
            prompt,
            system_message=system_message,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )

    # ─── OpenAI-compatible Chat Completions ───────────────────────────

    def _call_chat_completions(
        self,
        prompt: str,
        system_message: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        json_mode: bool = True,
    ) -> str:
        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "starting",
            "provider": self.provider,
            "model": self.model_id,
            "params": {"json_mode": json_mode, "temperature": temperature}
        }))

        messages = []
        if system_message:
            messages.append({"role": "system", "content": system_message})
        messages.append({"role": "user", "content": prompt})

        def _api_call():
            kwargs = {
                "model": self.model_id,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "timeout": self.timeout,
            }
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}
            response = self.client.chat.completions.create(**kwargs)
            content = response.choices[0].message.content
            if not content:
                raise LLMServiceError(f"Empty response from {self.model_id}")
            return content

        return self._execute_with_retry(_api_call, f"{self.provider}-{self.model_id}")

    # ─── Gemini ───────────────────────────────────────────────────────

    def _call_gemini(
        self,
        prompt: str,
        temperature: float = 0.7,
        json_mode: bool = True,
    ) -> str:
        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "starting",
            "provider": self.provider,
            "model": self.model_id,
            "params": {"temperature": temperature}
        }))

        def _api_call():
            config = {"temperature": temperature}
            if json_mode:
                config["response_mime_type"] = "application/json"
            response = self.gemini_client.models.generate_content(
                model=self.model_id, contents=prompt, config=config
            )
            if not response.text:
                raise LLMServiceError(f"Empty response from {self.model_id}")
            return response.text

        return self._execute_with_retry(_api_call, f"Gemini-{self.model_id}")

    # ─── Helpers ──────────────────────────────────────────────────────

    def _execute_with_retry(self, api_call_fn, model_name: str) -> Any:
        """Execute API call with exponential backoff retry logic."""
        last_error = None
        delay = self.initial_retry_delay
        start_time = time.time()

        for attempt in range(self.max_retries):
            try:
                result = api_call_fn()
                duration_ms = int((time.time() - start_time) * 1000)

                logger.info(json.dumps({
                    "step": "LLM_CALL",
                    "status": "complete",
                    "model": model_name,
                    "output": {"response_length": len(str(result)) if result else 0},
                    "duration_ms": duration_ms,
                    "attempts": attempt + 1
                }))

                if attempt > 0:
                    logger.info(f"{model_name} call succeeded on attempt {attempt + 1}")
                return result

            except RateLimitError as e:
                last_error = e
                logger.warning(
                    f"{model_name} rate limit hit (attempt {attempt + 1}/{self.max_retries}). "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
                delay *= 2

            except APITimeoutError as e:
                last_error = e
                logger.warning(
                    f"{model_name} timeout (attempt {attempt + 1}/{self.max_retries}). "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
                delay *= 2

            except LLMServiceError:
                raise

            except OpenAIError as e:
                logger.error(f"{model_name} API error: {str(e)}")
                raise LLMServiceError(f"{model_name} API error: {str(e)}") from e

            except Exception as e:
                logger.error(f"{model_name} unexpected error: {str(e)}")
                raise LLMServiceError(f"{model_name} unexpected error: {str(e)}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "failed",
            "model": model_name,
            "error": str(last_error),
            "duration_ms": duration_ms,
            "attempts": self.max_retries
        }))
        raise LLMServiceError(
            f"{model_name} failed after {self.max_retries} attempts. Last error: {str(last_error)}"
        ) from last_error


class LLMServiceError(Exception):
    """Custom exception for LLM service errors"""
    pass
