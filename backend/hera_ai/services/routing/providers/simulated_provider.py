"""
Simulated Provider - offline stand-in for a backend without credentials

Used in development when an API key is not configured, so the rest of the
routing pipeline (selection, fallback, scoring, caching) still runs end to
end. Responses are deterministic templates keyed by task type.
"""

import logging
import re
from datetime import datetime, timezone
from typing import AsyncIterator

from .base_provider import BaseProvider, ProviderConfig, ProviderResponse
from hera_ai.services.routing.models import AIRequest, TaskType

logger = logging.getLogger(__name__)


TEMPLATES = {
    TaskType.LEARNING.value: (
        "Key concept summary for: {topic}\n\n"
        "Section 1 - Definition and scope.\n"
        "Section 2 - Worked example.\n"
        "Section 3 - Common mistakes and how to avoid them."
    ),
    TaskType.QUESTION_GENERATION.value: (
        "Q1. What is the main idea behind {topic}?\n"
        "Q2. Give one practical application of {topic}.\n"
        "Q3. Which misconception about {topic} is most common?"
    ),
    TaskType.CODE.value: "Here is a starting point for {topic}:\n\n```python\ndef solution():\n    raise NotImplementedError\n```",
    TaskType.ANALYSIS.value: (
        "Summary analysis of {topic}: the available data points to steady "
        "performance with two areas to watch. Recommendation: review monthly."
    ),
    TaskType.CREATIVE.value: "A short piece inspired by {topic}.",
    TaskType.REASONING.value: "Step 1: restate {topic}. Step 2: list assumptions. Conclusion: more data is needed.",
    TaskType.CHAT.value: "Thanks for your message about {topic}. How else can I help?",
    TaskType.GENERATION.value: "Draft content for {topic}.",
}


class SimulatedProvider(BaseProvider):
    """Deterministic provider that never leaves the process."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.provider_name = config.provider_type
        self.model = config.model or f"simulated-{config.provider_type}"

        logger.warning(
            f"Simulated provider in use for '{self.provider_name}' (no credentials configured)"
        )

    def _render(self, request: AIRequest) -> str:
        topic = re.sub(r"\s+", " ", request.prompt.strip())[:80]
        template = TEMPLATES.get(request.task, TEMPLATES[TaskType.CHAT.value])
        return f"[{self.provider_name}:simulated] " + template.format(topic=topic)

    async def generate(self, request: AIRequest) -> ProviderResponse:
        started = datetime.now(timezone.utc)
        self._validate_request(request)

        content = self._render(request)
        tokens_used = self.estimate_tokens(request.prompt) + self.estimate_tokens(content)
        return self._finish(request, content, tokens_used, started, simulated=True)

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        self._validate_request(request)

        words = self._render(request).split(" ")
        for index, word in enumerate(words):
            yield word if index == len(words) - 1 else f"{word} "

    async def health_check(self) -> bool:
        return True
