"""
Provider Registry - explicit, injectable set of AI providers

Holds each provider's descriptor and adapter in registration order, the
availability flag the router consults, and per-provider outcome counters used
to report ``provider_status`` and ``success_rate`` on responses.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Any, Union

from hera_ai.core.config import Settings
from hera_ai.core.exceptions import ConfigurationError, ProviderNotFoundError
from .models import Capability, ProviderDescriptor, ProviderStatus, ProviderType, provider_key
from .providers import (
    BaseProvider,
    ClaudeProvider,
    DeepSeekProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderConfig,
    SimulatedProvider,
)

logger = logging.getLogger(__name__)

DEGRADED_MIN_CALLS = 3
DEGRADED_SUCCESS_RATE = 0.8

ALL_CAPABILITIES = tuple(c.value for c in Capability)


@dataclass
class ProviderOutcomes:
    """Call outcome counters for one provider."""
    successes: int = 0
    failures: int = 0

    @property
    def total(self) -> int:
        return self.successes + self.failures

    @property
    def success_rate(self) -> Optional[float]:
        if self.total == 0:
            return None
        return self.successes / self.total


class ProviderRegistry:
    """
    Registry of AI providers.

    Registration order is significant: it is the order the router falls back
    through once a task's preferred providers are exhausted.
    """

    def __init__(self):
        self._descriptors: Dict[str, ProviderDescriptor] = {}
        self._adapters: Dict[str, BaseProvider] = {}
        self._outcomes: Dict[str, ProviderOutcomes] = {}

    def register(self, descriptor: ProviderDescriptor, adapter: BaseProvider) -> None:
        """Add a provider. Raises ConfigurationError on duplicate ids."""
        name = provider_key(descriptor.name)
        if name in self._descriptors:
            raise ConfigurationError(
                f"AI provider '{name}' is already registered",
                details={"provider_id": name}
            )

        descriptor.name = name
        self._descriptors[name] = descriptor
        self._adapters[name] = adapter
        self._outcomes[name] = ProviderOutcomes()

        logger.info(
            f"Registered AI provider '{name}' "
            f"(model={descriptor.model or 'n/a'}, available={descriptor.available})"
        )

    def __contains__(self, provider_id: Any) -> bool:
        return provider_key(provider_id) in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def get(self, provider_id: Union[str, ProviderType]) -> ProviderDescriptor:
        name = provider_key(provider_id)
        if name not in self._descriptors:
            raise ProviderNotFoundError(name)
        return self._descriptors[name]

    def adapter(self, provider_id: Union[str, ProviderType]) -> BaseProvider:
        name = provider_key(provider_id)
        if name not in self._adapters:
            raise ProviderNotFoundError(name)
        return self._adapters[name]

    def provider_ids(self) -> List[str]:
        """All provider ids in registration order."""
        return list(self._descriptors)

    def descriptors(self) -> List[ProviderDescriptor]:
        return list(self._descriptors.values())

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def is_available(self, provider_id: Union[str, ProviderType, None]) -> bool:
        """True if the provider is registered and flagged available."""
        descriptor = self._descriptors.get(provider_key(provider_id))
        return bool(descriptor and descriptor.available)

    def available_providers(self) -> List[str]:
        """Available provider ids in registration order."""
        return [name for name, d in self._descriptors.items() if d.available]

    def set_available(self, provider_id: Union[str, ProviderType], available: bool) -> ProviderDescriptor:
        descriptor = self.get(provider_id)
        if descriptor.available != available:
            logger.warning(
                f"AI provider '{descriptor.name}' marked {'up' if available else 'down'}"
            )
        descriptor.available = available
        return descriptor

    def mark_available(self, provider_id: Union[str, ProviderType]) -> ProviderDescriptor:
        return self.set_available(provider_id, True)

    def mark_unavailable(self, provider_id: Union[str, ProviderType]) -> ProviderDescriptor:
        return self.set_available(provider_id, False)

    # ------------------------------------------------------------------
    # Outcome tracking
    # ------------------------------------------------------------------

    def record_success(self, provider_id: str) -> None:
        outcomes = self._outcomes.get(provider_key(provider_id))
        if outcomes is not None:
            outcomes.successes += 1

    def record_failure(self, provider_id: str) -> None:
        outcomes = self._outcomes.get(provider_key(provider_id))
        if outcomes is not None:
            outcomes.failures += 1

    def success_rate(self, provider_id: str) -> Optional[float]:
        outcomes = self._outcomes.get(provider_key(provider_id))
        return outcomes.success_rate if outcomes else None

    def status(self, provider_id: Optional[str]) -> ProviderStatus:
        """
        Reported health of a provider.

        Unavailable when unknown or flagged down; degraded once enough calls
        have been observed and the success rate fell below the threshold.
        """
        if not self.is_available(provider_id):
            return ProviderStatus.UNAVAILABLE

        outcomes = self._outcomes[provider_key(provider_id)]
        if outcomes.total >= DEGRADED_MIN_CALLS and outcomes.success_rate < DEGRADED_SUCCESS_RATE:
            return ProviderStatus.DEGRADED
        return ProviderStatus.AVAILABLE

    def reset_outcomes(self) -> None:
        for name in self._outcomes:
            self._outcomes[name] = ProviderOutcomes()

    def get_provider_info(self) -> List[Dict[str, Any]]:
        """Descriptors plus live status, for monitoring endpoints."""
        info = []
        for name, descriptor in self._descriptors.items():
            outcomes = self._outcomes[name]
            info.append({
                **descriptor.to_dict(),
                "status": self.status(name).value,
                "success_rate": outcomes.success_rate,
                "total_calls": outcomes.total,
                "adapter": self._adapters[name].__class__.__name__,
            })
        return info


# ----------------------------------------------------------------------
# Default registry
# ----------------------------------------------------------------------

def build_default_registry(settings: Settings) -> ProviderRegistry:
    """
    Build the registry from application settings.

    Registration order (openai, claude, deepseek, ollama) is the final
    fallback order. A backend without credentials gets the simulated adapter
    when simulation is enabled (by default only in development); otherwise it
    is left out.
    """
    registry = ProviderRegistry()
    timeout = settings.AI_PROVIDER_TIMEOUT_SECONDS

    hosted = [
        (
            ProviderDescriptor(
                name=ProviderType.OPENAI.value,
                priority=1,
                capabilities=ALL_CAPABILITIES,
                cost_per_token=settings.OPENAI_COST_PER_TOKEN,
                max_tokens=128000,
                model=settings.OPENAI_MODEL,
                timeout_seconds=timeout,
                confidence_bonus=0.2,
            ),
            OpenAIProvider,
            ProviderConfig(
                provider_type=ProviderType.OPENAI.value,
                model=settings.OPENAI_MODEL,
                api_key=settings.OPENAI_API_KEY,
                max_tokens=4096,
                timeout_seconds=timeout,
                cost_per_token=settings.OPENAI_COST_PER_TOKEN,
            ),
        ),
        (
            ProviderDescriptor(
                name=ProviderType.CLAUDE.value,
                priority=2,
                capabilities=ALL_CAPABILITIES,
                cost_per_token=settings.CLAUDE_COST_PER_TOKEN,
                max_tokens=200000,
                model=settings.CLAUDE_MODEL,
                timeout_seconds=timeout,
                confidence_bonus=0.3,
            ),
            ClaudeProvider,
            ProviderConfig(
                provider_type=ProviderType.CLAUDE.value,
                model=settings.CLAUDE_MODEL,
                api_key=settings.ANTHROPIC_API_KEY,
                max_tokens=4096,
                timeout_seconds=timeout,
                cost_per_token=settings.CLAUDE_COST_PER_TOKEN,
            ),
        ),
        (
            ProviderDescriptor(
                name=ProviderType.DEEPSEEK.value,
                priority=3,
                capabilities=("chat", "code", "analysis", "reasoning"),
                cost_per_token=settings.DEEPSEEK_COST_PER_TOKEN,
                max_tokens=64000,
                model=settings.DEEPSEEK_MODEL,
                timeout_seconds=timeout,
                confidence_bonus=0.1,
            ),
            DeepSeekProvider,
            ProviderConfig(
                provider_type=ProviderType.DEEPSEEK.value,
                model=settings.DEEPSEEK_MODEL,
                api_key=settings.DEEPSEEK_API_KEY,
                base_url=settings.DEEPSEEK_BASE_URL,
                max_tokens=2048,
                timeout_seconds=timeout,
                cost_per_token=settings.DEEPSEEK_COST_PER_TOKEN,
            ),
        ),
    ]

    for descriptor, adapter_cls, config in hosted:
        if config.api_key:
            registry.register(descriptor, adapter_cls(config))
        elif settings.simulate_missing_providers:
            registry.register(descriptor, SimulatedProvider(config))
        else:
            logger.warning(f"AI provider '{descriptor.name}' not configured (missing API key)")

    if settings.OLLAMA_ENABLED:
        registry.register(
            ProviderDescriptor(
                name=ProviderType.OLLAMA.value,
                priority=4,
                capabilities=("chat", "code"),
                cost_per_token=0.0,
                max_tokens=8192,
                model=settings.OLLAMA_MODEL,
                timeout_seconds=timeout,
                confidence_bonus=-0.1,
            ),
            OllamaProvider(ProviderConfig(
                provider_type=ProviderType.OLLAMA.value,
                model=settings.OLLAMA_MODEL,
                base_url=settings.OLLAMA_BASE_URL,
                max_tokens=1024,
                timeout_seconds=timeout,
            )),
        )

    if len(registry) == 0:
        logger.error("No AI providers configured; every request will report a total outage")

    return registry
