from .ai import (
    AIRequestSchema,
    AIResponseSchema,
    BatchRequestSchema,
    BatchResponseSchema,
    ProviderAvailabilityUpdate,
    ProviderInfoSchema,
)

__all__ = [
    "AIRequestSchema",
    "AIResponseSchema",
    "BatchRequestSchema",
    "BatchResponseSchema",
    "ProviderAvailabilityUpdate",
    "ProviderInfoSchema",
]
