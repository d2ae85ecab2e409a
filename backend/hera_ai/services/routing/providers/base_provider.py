"""
Base Provider - Common interface for all AI providers

This module defines the standard interface that all provider adapters must
implement. An adapter translates the generic AIRequest into its backend's
native call shape (chat-completion messages with a task-specific system
prompt) and reports a uniform ProviderResponse.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any, AsyncIterator

from hera_ai.core.exceptions import ProviderError
from hera_ai.services.routing.models import AIRequest, TaskType

logger = logging.getLogger(__name__)


SYSTEM_PROMPTS: Dict[str, str] = {
    TaskType.LEARNING.value: (
        "You are HERA's learning assistant. Explain concepts clearly, cite the "
        "relevant Section of any standard or act you rely on, and structure the "
        "answer for study."
    ),
    TaskType.QUESTION_GENERATION.value: (
        "You generate assessment questions. Produce clear questions with the "
        "correct answer and a short explanation for each."
    ),
    TaskType.CODE.value: (
        "You are a senior software engineer. Answer with working code in fenced "
        "code blocks and keep explanations short."
    ),
    TaskType.ANALYSIS.value: (
        "You are a business analyst for HERA. Provide a structured analysis with "
        "findings, supporting data and recommendations."
    ),
    TaskType.CREATIVE.value: (
        "You are a creative writer. Produce original, engaging content in the "
        "requested tone."
    ),
    TaskType.REASONING.value: (
        "You reason step by step. Lay out assumptions, work through the problem "
        "and state a clear conclusion."
    ),
    TaskType.CHAT.value: "You are HERA, a helpful business assistant.",
    TaskType.GENERATION.value: "You generate accurate, well-structured business content.",
}

DEFAULT_SYSTEM_PROMPT = SYSTEM_PROMPTS[TaskType.CHAT.value]


@dataclass
class ProviderConfig:
    """Connection and generation settings for one provider adapter."""
    provider_type: str
    model: str
    api_key: str = ""
    base_url: Optional[str] = None
    max_tokens: int = 4096
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    cost_per_token: float = 0.0


@dataclass
class ProviderResponse:
    """Standard response format for all providers."""
    content: str
    model: str
    tokens_used: int
    cost_usd: float
    latency_ms: int
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseProvider(ABC):
    """
    Base class for all AI providers.

    Defines the standard interface that all providers must implement:
    - Text generation
    - Streaming generation
    - Health checks
    - Cost calculation
    - Performance monitoring
    """

    provider_name = "base"

    def __init__(self, config: ProviderConfig):
        """
        Initialize provider with configuration.

        Args:
            config: Provider-specific configuration
        """
        self.config = config
        self.model = config.model
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self.timeout_seconds = config.timeout_seconds
        self.cost_per_token = config.cost_per_token

        # Performance tracking
        self.total_requests = 0
        self.total_tokens = 0
        self.total_cost = 0.0
        self.total_latency = 0.0

    @abstractmethod
    async def generate(self, request: AIRequest) -> ProviderResponse:
        """
        Generate text completion.

        Args:
            request: The generation request

        Returns:
            Provider response with generated content

        Raises:
            ProviderError: If generation fails
        """
        pass

    @abstractmethod
    def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        """
        Generate streaming text completion.

        Args:
            request: The generation request

        Yields:
            Streaming content chunks

        Raises:
            ProviderError: If generation fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check provider health.

        Returns:
            True if healthy, False otherwise
        """
        pass

    def calculate_cost(self, tokens_used: int) -> float:
        """Calculate cost in USD for token usage."""
        return tokens_used * self.cost_per_token

    def estimate_tokens(self, text: str) -> int:
        """
        Estimate token count for text.

        Args:
            text: Input text

        Returns:
            Estimated token count
        """
        # Rough estimation: 1 token ≈ 4 characters
        return len(text or "") // 4

    def system_prompt_for(self, request: AIRequest) -> str:
        """Task-specific system prompt for a request."""
        return SYSTEM_PROMPTS.get(request.task, DEFAULT_SYSTEM_PROMPT)

    def build_messages(self, request: AIRequest) -> List[Dict[str, str]]:
        """Translate a request into chat-completion messages."""
        messages = [{"role": "system", "content": self.system_prompt_for(request)}]
        if request.context:
            messages.append({
                "role": "system",
                "content": f"Context:\n{json.dumps(request.context, default=str)}"
            })
        messages.append({"role": "user", "content": request.prompt})
        return messages

    def _generation_limits(self, request: AIRequest) -> Dict[str, Any]:
        """Resolve max_tokens/temperature for a request against provider limits."""
        temperature = request.temperature if request.temperature is not None else self.temperature
        return {
            "max_tokens": min(request.max_tokens or self.max_tokens, self.max_tokens),
            "temperature": temperature,
        }

    def _update_stats(self, tokens_used: int, cost_usd: float, latency_ms: int):
        """Update performance statistics."""
        self.total_requests += 1
        self.total_tokens += tokens_used
        self.total_cost += cost_usd
        self.total_latency += latency_ms

    def get_stats(self) -> Dict[str, Any]:
        """Get performance statistics."""
        return {
            "total_requests": self.total_requests,
            "total_tokens": self.total_tokens,
            "total_cost_usd": self.total_cost,
            "average_latency_ms": self.total_latency / max(self.total_requests, 1),
            "average_cost_per_token": self.total_cost / max(self.total_tokens, 1),
            "model": self.model,
            "provider_type": self.__class__.__name__
        }

    def reset_stats(self):
        """Reset performance statistics."""
        self.total_requests = 0
        self.total_tokens = 0
        self.total_cost = 0.0
        self.total_latency = 0.0

    def _create_metadata(self, **kwargs) -> Dict[str, Any]:
        """Create metadata dictionary with common fields."""
        metadata = {
            "provider": self.provider_name,
            "model": self.model,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **kwargs
        }
        return metadata

    def _validate_request(self, request: AIRequest) -> None:
        """
        Validate generation request.

        Raises:
            ProviderError: If request is invalid
        """
        error = request.validation_error()
        if error:
            raise ProviderError(error, provider=self.provider_name)

    def _finish(self, request: AIRequest, content: str, tokens_used: int, started: datetime, **metadata) -> ProviderResponse:
        """Assemble a ProviderResponse, update stats and log the call."""
        latency_ms = int((datetime.now(timezone.utc) - started).total_seconds() * 1000)
        cost_usd = self.calculate_cost(tokens_used)
        response = ProviderResponse(
            content=content,
            model=self.model,
            tokens_used=tokens_used,
            cost_usd=cost_usd,
            latency_ms=latency_ms,
            metadata=self._create_metadata(**metadata)
        )
        self._update_stats(tokens_used, cost_usd, latency_ms)
        self._log_request(request, response)
        return response

    def _log_request(self, request: AIRequest, response: Optional[ProviderResponse] = None, error: Optional[Exception] = None):
        """Log request details for monitoring."""
        log_data = {
            "provider": self.provider_name,
            "model": self.model,
            "prompt_length": len(request.prompt or ""),
            "max_tokens": request.max_tokens,
            "temperature": request.temperature
        }

        if response:
            log_data.update({
                "tokens_used": response.tokens_used,
                "cost_usd": response.cost_usd,
                "latency_ms": response.latency_ms,
                "success": True
            })
        elif error:
            log_data.update({
                "error": str(error),
                "success": False
            })

        logger.info("Provider request", extra=log_data)
