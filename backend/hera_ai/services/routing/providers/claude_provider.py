"""
Claude Provider - High-quality reasoning, analysis and content generation

This provider implements the Anthropic messages API for reasoning-intensive
tasks, analysis and learning content.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict

from anthropic import AsyncAnthropic
from .base_provider import BaseProvider, ProviderConfig, ProviderResponse
from hera_ai.core.exceptions import MissingAPIKeyError, ProviderError
from hera_ai.services.routing.models import AIRequest

logger = logging.getLogger(__name__)

MAX_TEMPERATURE = 1.0


class ClaudeProvider(BaseProvider):
    """
    Claude provider for high-quality reasoning and content generation.

    Optimized for:
    - Analysis and complex reasoning
    - Learning content with citations
    - Creative writing
    """

    provider_name = "claude"

    def __init__(self, config: ProviderConfig, client: Any = None):
        """Initialize Claude provider."""
        super().__init__(config)

        if client is None:
            if not config.api_key:
                raise MissingAPIKeyError(self.provider_name)
            client = AsyncAnthropic(
                api_key=config.api_key,
                timeout=config.timeout_seconds
            )
        self.client = client

        # Claude-specific configuration
        self.model = config.model or "claude-3-5-sonnet-20241022"

        logger.info(f"Claude provider initialized: {self.model}")

    def _message_params(self, request: AIRequest) -> Dict[str, Any]:
        # The messages API takes the system prompt separately from the turns
        system = self.system_prompt_for(request)
        if request.context:
            system = f"{system}\n\nContext:\n{json.dumps(request.context, default=str)}"

        params = {
            "model": self.model,
            "system": system,
            "messages": [{"role": "user", "content": request.prompt}],
            **self._generation_limits(request),
        }
        # Anthropic accepts temperatures in [0, 1] only
        params["temperature"] = min(params["temperature"], MAX_TEMPERATURE)
        return params

    async def generate(self, request: AIRequest) -> ProviderResponse:
        """Generate text completion using Claude."""
        started = datetime.now(timezone.utc)

        try:
            self._validate_request(request)

            response = await self.client.messages.create(**self._message_params(request))

            content = "".join(
                block.text for block in response.content
                if getattr(block, "type", "text") == "text"
            )
            tokens_used = response.usage.input_tokens + response.usage.output_tokens

            return self._finish(
                request,
                content,
                tokens_used,
                started,
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
                stop_reason=response.stop_reason
            )

        except ProviderError as e:
            self._log_request(request, error=e)
            raise

        except Exception as e:
            error_msg = f"Claude generation failed: {e}"
            logger.error(error_msg)
            self._log_request(request, error=e)
            raise ProviderError(error_msg, provider=self.provider_name) from e

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        """Generate streaming text completion using Claude."""
        try:
            self._validate_request(request)

            stream = await self.client.messages.create(
                stream=True,
                **self._message_params(request)
            )

            async for event in stream:
                if event.type == "content_block_delta" and event.delta.type == "text_delta":
                    yield event.delta.text

        except ProviderError:
            raise

        except Exception as e:
            error_msg = f"Claude streaming failed: {e}"
            logger.error(error_msg)
            raise ProviderError(error_msg, provider=self.provider_name) from e

    async def health_check(self) -> bool:
        """Check Claude provider health."""
        try:
            response = await self.client.messages.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=1,
                temperature=0
            )
            return len(response.content) > 0

        except Exception as e:
            logger.error(f"Claude health check failed: {e}")
            return False
