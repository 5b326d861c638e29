"""
Vision client request shape and error mapping, against httpx.MockTransport.
"""

import json

import httpx
import pytest

from hair_app.adapters.ai.grok_vision import GrokVisionClient
from hair_app.application.errors import (
    VisionAPIError,
    VisionRateLimitError,
    VisionRequestError,
    VisionTimeoutError,
)


def _ok(content):
    return httpx.Response(200, json={'choices': [{'message': {'role': 'assistant', 'content': content}}]})


def _client(handler, **kwargs):
    kwargs.setdefault('api_key', 'xai-test')
    return GrokVisionClient(
        base_url='https://api.x.test/v1',
        model='grok-test-vision',
        timeout=5,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestRequests:

    def test_analyze_images_payload(self) -> None:
        seen = []

        def handler(request):
            seen.append(request)
            return _ok('**AI Description**\nLooks healthy')

        text = _client(handler).analyze_images(['https://cdn.test/a.jpg', 'https://cdn.test/b.jpg'], 'Describe')

        assert text == '**AI Description**\nLooks healthy'
        assert len(seen) == 1
        request = seen[0]
        assert str(request.url) == 'https://api.x.test/v1/chat/completions'
        assert request.headers['Authorization'] == 'Bearer xai-test'
        body = json.loads(request.content)
        assert body['model'] == 'grok-test-vision'
        assert body['temperature'] == 0.7
        assert 'max_tokens' not in body
        parts = body['messages'][0]['content']
        assert [p['type'] for p in parts] == ['image_url', 'image_url', 'text']
        assert parts[0]['image_url'] == {'url': 'https://cdn.test/a.jpg', 'detail': 'high'}
        assert parts[2]['text'] == 'Describe'

    def test_complete_sends_max_tokens(self) -> None:
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return _ok('Use a silk pillowcase.')

        assert _client(handler).complete('Question?', max_tokens=500) == 'Use a silk pillowcase.'
        assert bodies[0]['max_tokens'] == 500
        assert bodies[0]['messages'] == [{'role': 'user', 'content': 'Question?'}]

    def test_env_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv('XAI_API_KEY', 'from-env')
        monkeypatch.delenv('XAI_API_URL', raising=False)
        monkeypatch.delenv('XAI_MODEL', raising=False)
        monkeypatch.delenv('XAI_TIMEOUT', raising=False)

        client = GrokVisionClient()

        assert client.api_key == 'from-env'
        assert client.base_url == 'https://api.x.ai/v1'
        assert client.model == 'grok-2-vision-latest'
        assert client.timeout == 120.0


class TestErrors:

    @pytest.mark.parametrize("status,error", [
        (429, VisionRateLimitError),
        (400, VisionRequestError),
        (500, VisionAPIError),
        (401, VisionAPIError),
    ])
    def test_status_mapping(self, status, error) -> None:
        client = _client(lambda request: httpx.Response(status, json={'error': 'nope'}))

        with pytest.raises(error):
            client.analyze_images(['https://cdn.test/a.jpg'], 'Describe')

    def test_timeout(self) -> None:
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(VisionTimeoutError):
            _client(handler).complete('hi')

    def test_connection_error(self) -> None:
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(VisionAPIError):
            _client(handler).complete('hi')

    @pytest.mark.parametrize("body", [{}, {'choices': []}, {'choices': [{'message': {'content': None}}]}])
    def test_malformed_body(self, body) -> None:
        client = _client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(VisionAPIError, match='Analysis format error'):
            client.complete('hi')

    def test_non_json_body(self) -> None:
        client = _client(lambda request: httpx.Response(200, text='<html>gateway</html>'))

        with pytest.raises(VisionAPIError):
            client.complete('hi')

    def test_missing_key(self) -> None:
        calls = []
        client = _client(lambda request: calls.append(request) or _ok('x'), api_key='')

        with pytest.raises(VisionAPIError):
            client.analyze_images(['https://cdn.test/a.jpg'], 'Describe')
        assert calls == []

    def test_errors_share_user_message(self) -> None:
        assert VisionRateLimitError("429").user_message == 'Failed to analyze image due to an API error.'
