from __future__ import annotations

from typing import Protocol, Sequence


class VisionAnalyzer(Protocol):
    def analyze_images(self, image_urls: Sequence[str], prompt: str) -> str:
        """Send all images with one prompt in a single call and return the reply text.

        Raises VisionAPIError (or a subclass) on any upstream failure.
        """
        ...

    def complete(self, prompt: str, max_tokens: int = 500, timeout: float = 30.0) -> str:
        """Text-only completion used by the analyst chat."""
        ...
