"""Challenge analysis delegated to a local Ollama model."""

import logging

import httpx

from courtside.config import SEMANTIC_MAX_TOKENS, settings
from courtside.models.failure import FailureKind, SemanticAnalyzerError
from courtside.semantic.base import SYSTEM_PROMPT, SemanticAnalyzer

logger = logging.getLogger(__name__)


class OllamaAnalyzer(SemanticAnalyzer):
    """Analyzer backed by an Ollama server."""

    name = "ollama"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            base_url: Ollama server URL. Defaults to settings.ollama_base_url.
            model: Model to run. Defaults to settings.ollama_model.
            timeout: Request timeout in seconds.
        """
        self.base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self.model = model or settings.ollama_model
        self.timeout = timeout or settings.semantic_timeout_seconds

    async def health_check(self) -> bool:
        """
        Check if the Ollama server is running.

        Returns:
            True if the server answered the model listing, False otherwise
        """
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self.base_url}/api/tags")
        except httpx.HTTPError:
            return False

        if response.status_code != 200:
            return False
        try:
            models = response.json().get("models") or []
        except ValueError:
            models = []
        logger.info("Ollama is running with %d models available", len(models))
        return True

    async def _complete(self, prompt: str) -> str:
        if not await self.health_check():
            raise SemanticAnalyzerError(
                self.name,
                f"Ollama is not running at {self.base_url}",
                kind=FailureKind.SERVICE_UNAVAILABLE,
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/api/generate",
                    json={
                        "model": self.model,
                        "system": SYSTEM_PROMPT,
                        "prompt": prompt,
                        "stream": False,
                        "format": "json",
                        "options": {"temperature": 0.1, "num_predict": SEMANTIC_MAX_TOKENS},
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Ollama request failed: %s", e)
            raise SemanticAnalyzerError(self.name, str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise SemanticAnalyzerError(
                self.name, "Ollama returned a non-JSON body", kind=FailureKind.UNPARSEABLE_RESPONSE
            ) from e
        return str(data.get("response") or "")
