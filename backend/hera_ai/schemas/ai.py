"""
AI Router Pydantic Schemas

Request/response models for the AI routing API endpoints. They are a 1:1
JSON mapping of the routing data model.
"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field

from hera_ai.services.routing.models import AIRequest, AIResponse, ProviderStatus, TaskType


# ============================================================================
# REQUEST MODELS
# ============================================================================

class AIRequestSchema(BaseModel):
    """A single AI task."""

    smart_code: str = Field(..., min_length=1, description="Namespaced classification tag, e.g. HERA.AI.CHAT.COMPLETION.v1")
    task_type: TaskType = Field(..., description="Kind of AI work requested")
    prompt: str = Field(..., description="Free-text prompt")
    context: Optional[Dict[str, Any]] = Field(None, description="Opaque context passed to the provider")
    max_tokens: Optional[int] = Field(None, gt=0, description="Generation limit")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="Sampling temperature")
    preferred_provider: Optional[str] = Field(None, description="Provider id or 'auto'")
    fallback_enabled: bool = Field(True, description="Try other providers when the first one fails")
    organization_id: Optional[str] = Field(None, description="Tenant for attribution")
    user_id: Optional[str] = Field(None, description="User for attribution")
    options: Dict[str, Any] = Field(default_factory=dict, description="response_format, timeout, ...")

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "smart_code": "HERA.AI.CHAT.COMPLETION.v1",
                "task_type": "chat",
                "prompt": "Summarise today's salon bookings",
                "preferred_provider": "auto",
                "fallback_enabled": True,
                "organization_id": "org_123"
            }]
        }
    }

    def to_request(self) -> AIRequest:
        return AIRequest(**self.model_dump())


class BatchRequestSchema(BaseModel):
    """Several AI tasks processed concurrently."""

    requests: List[AIRequestSchema] = Field(..., min_length=1, max_length=50)
    max_concurrency: Optional[int] = Field(None, gt=0)


class ProviderAvailabilityUpdate(BaseModel):
    """Mark a provider up or down."""

    available: bool


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class AIResponseSchema(BaseModel):
    """Outcome of one AI task. ``response`` is set iff success, ``error`` iff not."""

    success: bool
    response: Optional[str] = None
    provider_used: str
    tokens_used: Optional[int] = None
    cost_estimate: Optional[float] = None
    confidence_score: Optional[float] = Field(None, ge=0, le=1)
    processing_time_ms: Optional[int] = None
    fallback_used: Optional[bool] = None
    fallback_attempts: int = 0
    model_used: Optional[str] = None
    provider_status: ProviderStatus
    success_rate: Optional[float] = None
    error: Optional[str] = None
    smart_code: str
    timestamp: str

    @classmethod
    def from_response(cls, response: AIResponse) -> "AIResponseSchema":
        return cls.model_validate(response.to_dict())


class BatchResponseSchema(BaseModel):
    responses: List[AIResponseSchema]
    succeeded: int
    failed: int


class ProviderInfoSchema(BaseModel):
    """Provider descriptor with live status."""

    name: str
    priority: int
    capabilities: List[str]
    cost_per_token: float
    max_tokens: int
    available: bool
    model: str
    timeout_seconds: float
    confidence_bonus: float
    status: ProviderStatus
    success_rate: Optional[float] = None
    total_calls: int
    adapter: str
