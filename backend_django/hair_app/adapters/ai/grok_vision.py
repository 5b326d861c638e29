"""xAI (Grok) chat-completions client.

The API is OpenAI compatible: images go in as ``image_url`` content parts
ahead of the text prompt, and the answer is ``choices[0].message.content``.
Upstream failures are mapped onto the VisionAPIError hierarchy; nothing is
retried.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ...application.errors import (
    VisionAPIError,
    VisionRateLimitError,
    VisionRequestError,
    VisionTimeoutError,
)
from ...application.ports.ai_services import VisionAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.x.ai/v1'
DEFAULT_MODEL = 'grok-2-vision-latest'
DEFAULT_TIMEOUT = 120.0
TEMPERATURE = 0.7


class GrokVisionClient(VisionAnalyzer):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv('XAI_API_KEY', '')
        self.base_url = (base_url or os.getenv('XAI_API_URL') or DEFAULT_API_URL).rstrip('/')
        self.model = model or os.getenv('XAI_MODEL') or DEFAULT_MODEL
        if timeout is None:
            timeout = float(os.getenv('XAI_TIMEOUT', DEFAULT_TIMEOUT))
        self.timeout = timeout
        self.transport = transport

    def analyze_images(self, image_urls: Sequence[str], prompt: str) -> str:
        content: List[Dict[str, Any]] = [
            {'type': 'image_url', 'image_url': {'url': url, 'detail': 'high'}}
            for url in image_urls
        ]
        content.append({'type': 'text', 'text': prompt})
        logger.info("Sending %d image(s) for hair analysis", len(image_urls))
        return self._chat(content, timeout=self.timeout)

    def complete(self, prompt: str, max_tokens: int = 500, timeout: float = 30.0) -> str:
        return self._chat(prompt, timeout=timeout, max_tokens=max_tokens)

    def _chat(self, content: Any, timeout: float, max_tokens: Optional[int] = None) -> str:
        if not self.api_key:
            raise VisionAPIError("XAI_API_KEY missing")
        body: Dict[str, Any] = {
            'model': self.model,
            'messages': [{'role': 'user', 'content': content}],
            'temperature': TEMPERATURE,
        }
        if max_tokens:
            body['max_tokens'] = max_tokens

        start = time.perf_counter()
        try:
            with httpx.Client(timeout=timeout, transport=self.transport) as client:
                resp = client.post(
                    f"{self.base_url}/chat/completions",
                    json=body,
                    headers={'Authorization': f"Bearer {self.api_key}"},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.TimeoutException as exc:
            raise VisionTimeoutError(f"timeout after {timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            logger.error("Vision API returned %s: %s", code, exc.response.text[:500])
            if code == 429:
                raise VisionRateLimitError(f"{code}: rate limited") from exc
            if code == 400:
                raise VisionRequestError(f"{code}: request rejected") from exc
            raise VisionAPIError(f"{code}: upstream error") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise VisionAPIError(f"request failed: {exc}") from exc
        finally:
            logger.info("vision.call elapsed_ms=%d", int((time.perf_counter() - start) * 1000))

        return _message_content(data)


def _message_content(data: Any) -> str:
    try:
        content = data['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError) as exc:
        logger.error("Unexpected vision API response shape: %r", data)
        raise VisionAPIError("Analysis format error") from exc
    if not isinstance(content, str):
        raise VisionAPIError("Analysis format error")
    return content
