from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.utils import timezone

from ..ports.ai_services import VisionAnalyzer
from ...domain.prompts import CHAT_FALLBACK_REPLY, build_chat_prompt

logger = logging.getLogger(__name__)

CHAT_MAX_TOKENS = 500
CHAT_TIMEOUT = 30.0


@dataclass
class ChatInput:
    message: str
    analysis: Optional[Dict[str, Any]] = None
    submission: Optional[Dict[str, Any]] = None
    history: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ChatReply:
    response: str
    timestamp: str


class ChatWithAnalyst:
    def __init__(self, analyzer: VisionAnalyzer) -> None:
        self.analyzer = analyzer

    def execute(self, inp: ChatInput) -> ChatReply:
        prompt = build_chat_prompt(inp.message, inp.analysis, inp.submission, inp.history)
        text = self.analyzer.complete(prompt, max_tokens=CHAT_MAX_TOKENS, timeout=CHAT_TIMEOUT)
        if not text or not text.strip():
            logger.warning("Empty chat completion, sending fallback reply")
            text = CHAT_FALLBACK_REPLY
        return ChatReply(response=text, timestamp=timezone.now().isoformat())
