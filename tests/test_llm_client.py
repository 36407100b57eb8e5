"""
Unit tests for the completion gateway.
The OpenAI client is replaced with a mock; no network calls are made.
"""
import httpx
import openai
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from caption_studio.errors import UpstreamError
from caption_studio.models import CompletionOptions
from caption_studio.services.llm_client import CompletionGateway


OPTIONS = CompletionOptions(model='gpt-4', max_tokens=500, temperature=0.7)


def fake_response(*contents):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


@pytest.fixture
def openai_client():
    return MagicMock()


@pytest.fixture
def gateway(openai_client):
    return CompletionGateway(api_key='test-key', client=openai_client)


class TestComplete:

    def test_sends_system_and_user_messages_with_options(self, gateway, openai_client):
        openai_client.chat.completions.create.return_value = fake_response('caption')

        gateway.complete('system text', 'user text', OPTIONS)

        openai_client.chat.completions.create.assert_called_once_with(
            model='gpt-4',
            messages=[
                {'role': 'system', 'content': 'system text'},
                {'role': 'user', 'content': 'user text'},
            ],
            max_tokens=500,
            temperature=0.7,
        )

    def test_returns_first_choice_untrimmed(self, gateway, openai_client):
        openai_client.chat.completions.create.return_value = fake_response('  first \n', 'second')

        assert gateway.complete('s', 'u', OPTIONS) == '  first \n'

    def test_api_error_raises_upstream_error_without_retry(self, gateway, openai_client):
        request = httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')
        openai_client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        with pytest.raises(UpstreamError):
            gateway.complete('s', 'u', OPTIONS)

        assert openai_client.chat.completions.create.call_count == 1

    def test_timeout_raises_upstream_error(self, gateway, openai_client):
        request = httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')
        openai_client.chat.completions.create.side_effect = openai.APITimeoutError(request=request)

        with pytest.raises(UpstreamError, match='timed out'):
            gateway.complete('s', 'u', OPTIONS)

    def test_empty_choices_raise_upstream_error(self, gateway, openai_client):
        openai_client.chat.completions.create.return_value = fake_response()

        with pytest.raises(UpstreamError, match='Malformed'):
            gateway.complete('s', 'u', OPTIONS)

    def test_null_content_raises_upstream_error(self, gateway, openai_client):
        openai_client.chat.completions.create.return_value = fake_response(None)

        with pytest.raises(UpstreamError):
            gateway.complete('s', 'u', OPTIONS)


class TestClientInitialization:

    def test_missing_api_key_raises_upstream_error(self):
        gateway = CompletionGateway(api_key=None)

        with pytest.raises(UpstreamError, match='OPENAI_API_KEY'):
            gateway.complete('s', 'u', OPTIONS)

    def test_client_created_lazily_once(self):
        with patch('caption_studio.services.llm_client.OpenAI') as mock_openai:
            mock_openai.return_value.chat.completions.create.return_value = fake_response('ok')
            gateway = CompletionGateway(api_key='sk-test')

            mock_openai.assert_not_called()
            gateway.complete('s', 'u', OPTIONS)
            gateway.complete('s', 'u', OPTIONS)

            mock_openai.assert_called_once_with(api_key='sk-test')
