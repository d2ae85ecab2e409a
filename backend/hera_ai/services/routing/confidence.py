"""
Confidence scoring for AI responses.

The score is a heuristic quality estimate in [0, 1], not a calibrated
probability. The router only depends on the ConfidenceScorer interface, so a
different scorer can be injected without touching routing.
"""

from abc import ABC, abstractmethod

from .models import AIRequest, ProviderDescriptor, TaskType

BASE_CONFIDENCE = 0.5
CONTENT_BONUS = 0.1
LONG_RESPONSE_CHARS = 100
CODE_FENCE = "```"


class ConfidenceScorer(ABC):
    """Scores a successful provider response."""

    @abstractmethod
    def score(self, request: AIRequest, descriptor: ProviderDescriptor, content: str) -> float:
        pass


class HeuristicConfidenceScorer(ConfidenceScorer):
    """
    Default scorer.

    Starts at 0.5, adds the provider's bonus, then 0.1 for each content signal:
    - response longer than 100 characters
    - learning task mentioning "Section"
    - code task containing a code fence
    - analysis task mentioning "analysis"

    The result is clamped to [0, 1].
    """

    def score(self, request: AIRequest, descriptor: ProviderDescriptor, content: str) -> float:
        content = content or ""
        task = request.task
        confidence = BASE_CONFIDENCE + descriptor.confidence_bonus

        if len(content) > LONG_RESPONSE_CHARS:
            confidence += CONTENT_BONUS

        if task == TaskType.LEARNING.value and "Section" in content:
            confidence += CONTENT_BONUS
        elif task == TaskType.CODE.value and CODE_FENCE in content:
            confidence += CONTENT_BONUS
        elif task == TaskType.ANALYSIS.value and "analysis" in content:
            confidence += CONTENT_BONUS

        return max(0.0, min(1.0, confidence))
