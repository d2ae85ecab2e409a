"""
Routing data model - requests, responses and provider descriptors

Every router, provider adapter and cache in the routing package speaks in
these types, so callers get the same flat response envelope regardless of
which backend ultimately served the request.
"""

import base64
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Any, Tuple, Union


class TaskType(str, Enum):
    """Kinds of AI work a request can ask for."""
    LEARNING = "learning"
    QUESTION_GENERATION = "question_generation"
    CODE = "code"
    ANALYSIS = "analysis"
    CREATIVE = "creative"
    REASONING = "reasoning"
    CHAT = "chat"
    GENERATION = "generation"


class ProviderType(str, Enum):
    """Built-in AI providers."""
    OPENAI = "openai"
    CLAUDE = "claude"
    DEEPSEEK = "deepseek"
    OLLAMA = "ollama"


class ProviderStatus(str, Enum):
    """Health of a provider as reported on responses."""
    AVAILABLE = "available"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


class Capability(str, Enum):
    """Capability tags a provider can advertise."""
    CHAT = "chat"
    CODE = "code"
    ANALYSIS = "analysis"
    CREATIVE = "creative"
    REASONING = "reasoning"
    MULTIMODAL = "multimodal"


AUTO_PROVIDER = "auto"
NO_PROVIDER = "none"
REALTIME_MARKER = "REALTIME"
FINGERPRINT_PROMPT_CHARS = 50


def provider_key(provider: Union[str, Enum, None]) -> Optional[str]:
    """Normalize a provider id (enum member or string) to its plain string form."""
    if provider is None:
        return None
    if isinstance(provider, Enum):
        return str(provider.value)
    return str(provider)


def task_key(task_type: Union[str, Enum]) -> str:
    """Normalize a task type to its plain string form."""
    if isinstance(task_type, Enum):
        return str(task_type.value)
    return str(task_type)


@dataclass
class ProviderDescriptor:
    """Static configuration for one AI backend."""
    name: str
    priority: int
    capabilities: Tuple[str, ...]
    cost_per_token: float
    max_tokens: int
    available: bool = True
    model: str = ""
    timeout_seconds: float = 30.0
    confidence_bonus: float = 0.0

    def supports(self, capability: Union[str, Capability]) -> bool:
        """Check whether the provider advertises a capability tag."""
        return task_key(capability) in self.capabilities

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["capabilities"] = list(self.capabilities)
        return data


@dataclass(frozen=True)
class AIRequest:
    """A normalized AI task. Created fresh per call and never mutated."""
    smart_code: str
    task_type: Union[TaskType, str]
    prompt: str
    context: Optional[Dict[str, Any]] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    preferred_provider: Optional[str] = None
    fallback_enabled: bool = True
    organization_id: Optional[str] = None
    user_id: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.options is None:
            object.__setattr__(self, "options", {})

    @property
    def task(self) -> str:
        return task_key(self.task_type)

    @property
    def preferred(self) -> Optional[str]:
        """Explicit provider preference, or None when unset or ``auto``."""
        preferred = provider_key(self.preferred_provider)
        if not preferred or preferred == AUTO_PROVIDER:
            return None
        return preferred

    @property
    def is_realtime(self) -> bool:
        return REALTIME_MARKER in (self.smart_code or "")

    @property
    def timeout(self) -> Optional[float]:
        timeout = self.options.get("timeout")
        if timeout is None:
            return None
        return float(timeout)

    def validation_error(self) -> Optional[str]:
        """Reason this request can never be served by any provider, or None."""
        if not self.prompt or not self.prompt.strip():
            return "Request must have a non-empty prompt"
        if self.temperature is not None and not 0 <= self.temperature <= 2:
            return "temperature must be between 0 and 2"
        return None

    def fingerprint(self) -> str:
        """
        Cache key for this request.

        Built from the smart code, the task type and the first characters of
        the base64-encoded prompt.
        """
        encoded = base64.b64encode((self.prompt or "").encode("utf-8")).decode("ascii")
        return f"{self.smart_code}:{self.task}:{encoded[:FINGERPRINT_PROMPT_CHARS]}"


@dataclass(frozen=True)
class AIResponse:
    """Outcome of processing one AIRequest."""
    success: bool
    smart_code: str
    provider_used: str = NO_PROVIDER
    response: Optional[str] = None
    tokens_used: Optional[int] = None
    cost_estimate: Optional[float] = None
    confidence_score: Optional[float] = None
    processing_time_ms: Optional[int] = None
    fallback_used: Optional[bool] = None
    fallback_attempts: int = 0
    model_used: Optional[str] = None
    provider_status: ProviderStatus = ProviderStatus.UNAVAILABLE
    success_rate: Optional[float] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["provider_status"] = task_key(self.provider_status)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AIResponse":
        values = dict(data)
        if values.get("provider_status") is not None:
            values["provider_status"] = ProviderStatus(values["provider_status"])
        return cls(**values)

    @classmethod
    def failure(
        cls,
        request: AIRequest,
        error: str,
        fallback_attempts: int = 0,
        fallback_used: bool = False,
        processing_time_ms: Optional[int] = None,
    ) -> "AIResponse":
        """Build the failure-shaped response used for every unsuccessful outcome."""
        return cls(
            success=False,
            smart_code=getattr(request, "smart_code", "") or "",
            provider_used=NO_PROVIDER,
            fallback_used=fallback_used,
            fallback_attempts=fallback_attempts,
            processing_time_ms=processing_time_ms,
            provider_status=ProviderStatus.UNAVAILABLE,
            error=error or "AI request failed",
        )


@dataclass(frozen=True)
class StreamEvent:
    """
    One event from a streaming request.

    ``chunk`` events carry text as the backend produces it; the stream always
    ends with a single ``complete`` event carrying the final response.
    """
    event: str
    content: Optional[str] = None
    response: Optional[AIResponse] = None

    CHUNK = "chunk"
    COMPLETE = "complete"

    def to_dict(self) -> Dict[str, Any]:
        if self.event == self.COMPLETE and self.response is not None:
            return {"event": self.event, "response": self.response.to_dict()}
        return {"event": self.event, "content": self.content}

