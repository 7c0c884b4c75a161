from __future__ import annotations

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from spark.app.domain.errors import ConfigurationError, ModelResponseError
from spark.app.domain.models import ImageSource
from spark.services.llm_client import AnthropicClient

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class FakeMessages:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAnthropic:
    def __init__(self, messages: FakeMessages) -> None:
        self.messages = messages


def _text_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class TestAnthropicClient:
    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            AnthropicClient(api_key=None)
        assert excinfo.value.setting == "ANTHROPIC_API_KEY"

    def test_returns_first_text_segment(self) -> None:
        messages = FakeMessages(_text_response('{"mini_ideas": []}'))
        client = AnthropicClient(api_key="k", model_name="test-model", client=FakeAnthropic(messages))

        assert client.generate_content("hello", max_tokens=3000) == '{"mini_ideas": []}'
        call = messages.calls[0]
        assert call["model"] == "test-model"
        assert call["max_tokens"] == 3000
        assert call["messages"] == [{"role": "user", "content": "hello"}]

    def test_image_is_sent_before_text(self) -> None:
        messages = FakeMessages(_text_response("{}"))
        client = AnthropicClient(api_key="k", client=FakeAnthropic(messages))

        client.generate_content("describe", image=ImageSource(media_type="image/jpeg", base64_data="QUJD"))

        content = messages.calls[0]["messages"][0]["content"]
        assert content[0]["type"] == "image"
        assert content[0]["source"] == {"type": "base64", "media_type": "image/jpeg", "data": "QUJD"}
        assert content[1] == {"type": "text", "text": "describe"}

    def test_status_error_becomes_model_response_error(self) -> None:
        error = anthropic.APIStatusError(
            "overloaded",
            response=httpx.Response(529, request=_REQUEST),
            body=None,
        )
        client = AnthropicClient(api_key="k", client=FakeAnthropic(FakeMessages(error=error)))

        with pytest.raises(ModelResponseError) as excinfo:
            client.generate_content("hello")
        assert excinfo.value.upstream_status == 529

    def test_connection_error_becomes_model_response_error(self) -> None:
        error = anthropic.APIConnectionError(request=_REQUEST)
        client = AnthropicClient(api_key="k", client=FakeAnthropic(FakeMessages(error=error)))

        with pytest.raises(ModelResponseError):
            client.generate_content("hello")

    def test_empty_content_raises(self) -> None:
        client = AnthropicClient(api_key="k", client=FakeAnthropic(FakeMessages(SimpleNamespace(content=[]))))
        with pytest.raises(ModelResponseError, match="text content"):
            client.generate_content("hello")
