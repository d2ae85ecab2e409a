"""
Routing Module

AI request routing across multiple providers with fallback.

Architecture:
- models: AIRequest / AIResponse / ProviderDescriptor data model
- providers: individual AI provider adapters
- ProviderRegistry: injectable set of providers with availability flags
- TaskRouter: task-specific provider selection
- ConfidenceScorer: replaceable response quality heuristic
- cache: bounded response caches keyed by request fingerprint
- AIRequestRouter: selection, fallback, scoring and caching in one call
"""

from .models import (
    AIRequest,
    AIResponse,
    Capability,
    ProviderDescriptor,
    ProviderStatus,
    ProviderType,
    StreamEvent,
    TaskType,
)
from .registry import ProviderRegistry, build_default_registry
from .confidence import ConfidenceScorer, HeuristicConfidenceScorer
from .cache import InMemoryResponseCache, RedisResponseCache, ResponseCache, build_response_cache
from .task_router import DEFAULT_TASK_PREFERENCES, TaskRouter
from .ai_router import AIRequestRouter

__all__ = [
    "AIRequest",
    "AIResponse",
    "Capability",
    "ProviderDescriptor",
    "ProviderStatus",
    "ProviderType",
    "StreamEvent",
    "TaskType",
    "ProviderRegistry",
    "build_default_registry",
    "ConfidenceScorer",
    "HeuristicConfidenceScorer",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "ResponseCache",
    "build_response_cache",
    "DEFAULT_TASK_PREFERENCES",
    "TaskRouter",
    "AIRequestRouter",
]
