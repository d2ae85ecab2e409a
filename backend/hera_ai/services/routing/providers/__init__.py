"""
Provider implementations for different AI services.

Each provider implements a consistent interface for:
- Text generation
- Streaming generation
- Health checks
- Cost calculation
- Performance monitoring
"""

from .base_provider import BaseProvider, ProviderConfig, ProviderResponse
from .claude_provider import ClaudeProvider
from .openai_provider import DeepSeekProvider, OllamaProvider, OpenAIProvider
from .simulated_provider import SimulatedProvider

__all__ = [
    "BaseProvider",
    "ProviderConfig",
    "ProviderResponse",
    "ClaudeProvider",
    "DeepSeekProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "SimulatedProvider",
]
