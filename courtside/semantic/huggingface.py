"""Challenge analysis delegated to the Hugging Face inference API."""

import asyncio
import logging
from typing import Any

import httpx

from courtside.config import (
    HUGGINGFACE_BACKOFF_SECONDS,
    HUGGINGFACE_MAX_ATTEMPTS,
    SEMANTIC_MAX_TOKENS,
    settings,
)
from courtside.models.failure import FailureKind, SemanticAnalyzerError
from courtside.semantic.base import SYSTEM_PROMPT, SemanticAnalyzer

logger = logging.getLogger(__name__)

HUGGINGFACE_API = "https://api-inference.huggingface.co/models"


def _generated_text(data: Any) -> str | None:
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("generated_text")
    if isinstance(data, dict):
        return data.get("generated_text")
    return None


class HuggingFaceAnalyzer(SemanticAnalyzer):
    """
    Analyzer backed by a hosted Hugging Face text-generation model.

    The API answers 503 while a cold model loads; those responses are
    retried with a linearly growing delay.
    """

    name = "huggingface"

    def __init__(
        self,
        model: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        max_attempts: int = HUGGINGFACE_MAX_ATTEMPTS,
        backoff_seconds: float = HUGGINGFACE_BACKOFF_SECONDS,
    ) -> None:
        self.model = model or settings.huggingface_model
        self.api_token = api_token if api_token is not None else settings.huggingface_api_token
        self.timeout = timeout or settings.semantic_timeout_seconds
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds

    @property
    def url(self) -> str:
        return f"{HUGGINGFACE_API}/{self.model}"

    def _headers(self) -> dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {}

    async def _complete(self, prompt: str) -> str:
        body = {
            "inputs": f"{SYSTEM_PROMPT}\n\n{prompt}",
            "parameters": {
                "max_new_tokens": SEMANTIC_MAX_TOKENS,
                "temperature": 0.1,
                "return_full_text": False,
            },
        }

        last_error = "no attempts made"
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    response = await client.post(self.url, json=body)
                except httpx.HTTPError as e:
                    last_error = str(e)
                    logger.warning("Hugging Face attempt %d failed: %s", attempt, e)
                else:
                    if response.status_code == 503:
                        last_error = "model loading"
                        logger.info(
                            "Model loading, attempt %d/%d", attempt, self.max_attempts
                        )
                    elif response.is_error:
                        raise SemanticAnalyzerError(
                            self.name, f"HTTP {response.status_code}: {response.text}"
                        )
                    else:
                        return self._read_text(response)

                if attempt < self.max_attempts:
                    await asyncio.sleep(self.backoff_seconds * attempt)

        raise SemanticAnalyzerError(
            self.name,
            f"gave up after {self.max_attempts} attempts: {last_error}",
            kind=FailureKind.SERVICE_UNAVAILABLE,
        )

    def _read_text(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as e:
            raise SemanticAnalyzerError(
                self.name, "non-JSON body", kind=FailureKind.UNPARSEABLE_RESPONSE
            ) from e

        if isinstance(data, dict) and data.get("error"):
            raise SemanticAnalyzerError(self.name, str(data["error"]))

        text = _generated_text(data)
        if text is None:
            raise SemanticAnalyzerError(
                self.name, "reply has no generated_text", kind=FailureKind.UNPARSEABLE_RESPONSE
            )
        return text
