from __future__ import annotations

import logging
from typing import Any

import anthropic

from spark.app.domain.errors import ConfigurationError, ModelResponseError
from spark.app.domain.models import ImageSource

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicClient:
    """Single-shot text (or text+image) completion against the Messages API."""

    def __init__(
        self,
        api_key: str | None,
        model_name: str = DEFAULT_MODEL,
        client: Any | None = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._client = client or self._configure_api()

    def _configure_api(self) -> anthropic.Anthropic:
        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY")
        return anthropic.Anthropic(api_key=self.api_key, max_retries=0)

    def _build_content(self, prompt: str, image: ImageSource | None) -> str | list[dict[str, Any]]:
        if image is None:
            return prompt
        return [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.base64_data,
                },
            },
            {"type": "text", "text": prompt},
        ]

    def generate_content(
        self,
        prompt: str,
        *,
        image: ImageSource | None = None,
        max_tokens: int = 2000,
    ) -> str:
        """Return the text of the first response segment."""
        try:
            response = self._client.messages.create(
                model=self.model_name,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": self._build_content(prompt, image)}],
            )
        except anthropic.APIStatusError as err:
            logger.error("LLM API returned %s: %s", err.status_code, err)
            raise ModelResponseError(
                f"LLM API error: {err.status_code} - {err.message}",
                upstream_status=err.status_code,
            ) from err
        except anthropic.APIError as err:
            logger.error("LLM API call failed: %s", err)
            raise ModelResponseError(f"LLM API error: {err}") from err

        content = getattr(response, "content", None) or []
        text = getattr(content[0], "text", None) if content else None
        if not isinstance(text, str):
            raise ModelResponseError("Model response did not include text content")
        return text
