"""Challenge analysis delegated to Claude."""

import logging

import anthropic
from anthropic.types import TextBlock

from courtside.config import SEMANTIC_MAX_TOKENS, settings
from courtside.models.failure import FailureKind, SemanticAnalyzerError
from courtside.semantic.base import SYSTEM_PROMPT, SemanticAnalyzer

logger = logging.getLogger(__name__)


class ClaudeAnalyzer(SemanticAnalyzer):
    """Analyzer backed by the Anthropic Messages API."""

    name = "claude"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            api_key: Anthropic API key. Defaults to settings.anthropic_api_key.
            model: Model name. Defaults to settings.anthropic_model.
            client: Preconfigured client, mainly for tests.
        """
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.model = model or settings.anthropic_model
        self._client = client

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise SemanticAnalyzerError(
                    self.name,
                    "Anthropic API key not configured",
                    kind=FailureKind.SERVICE_UNAVAILABLE,
                )
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=settings.semantic_timeout_seconds,
            )
        return self._client

    async def _complete(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=SEMANTIC_MAX_TOKENS,
                temperature=0.1,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.warning("Claude request failed: %s", e)
            raise SemanticAnalyzerError(self.name, str(e)) from e

        if response.usage:
            logger.info(
                "token_usage",
                extra={
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )

        return "".join(block.text for block in response.content if isinstance(block, TextBlock))
