"""
OpenAI Provider - General purpose chat, code and generation

This provider implements the OpenAI chat completions API. DeepSeek and
Ollama reuse it through their OpenAI-compatible endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict

from openai import AsyncOpenAI
from .base_provider import BaseProvider, ProviderConfig, ProviderResponse
from hera_ai.core.exceptions import MissingAPIKeyError, ProviderError
from hera_ai.services.routing.models import AIRequest

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """
    OpenAI provider for general-purpose tasks.

    Optimized for:
    - Chat and question answering
    - Code generation
    - Structured (JSON) output
    """

    provider_name = "openai"
    default_model = "gpt-4o-mini"
    requires_api_key = True

    def __init__(self, config: ProviderConfig, client: Any = None):
        """Initialize OpenAI-compatible provider."""
        super().__init__(config)

        if client is None:
            if self.requires_api_key and not config.api_key:
                raise MissingAPIKeyError(self.provider_name)
            client = AsyncOpenAI(
                api_key=config.api_key or self.provider_name,
                base_url=config.base_url,
                timeout=config.timeout_seconds
            )
        self.client = client

        self.model = config.model or self.default_model

        logger.info(f"{self.__class__.__name__} initialized: {self.model}")

    def _completion_params(self, request: AIRequest, stream: bool) -> Dict[str, Any]:
        params = {
            "model": self.model,
            "messages": self.build_messages(request),
            "stream": stream,
            **self._generation_limits(request),
        }
        if request.options.get("response_format") == "json":
            params["response_format"] = {"type": "json_object"}
        return params

    async def generate(self, request: AIRequest) -> ProviderResponse:
        """Generate text completion."""
        started = datetime.now(timezone.utc)

        try:
            self._validate_request(request)

            response = await self.client.chat.completions.create(
                **self._completion_params(request, stream=False)
            )

            choice = response.choices[0]
            content = choice.message.content
            if content is None:
                raise ProviderError("Empty completion returned", provider=self.provider_name)

            if response.usage:
                tokens_used = response.usage.total_tokens
            else:
                tokens_used = self.estimate_tokens(request.prompt) + self.estimate_tokens(content)

            return self._finish(
                request,
                content,
                tokens_used,
                started,
                finish_reason=choice.finish_reason
            )

        except ProviderError as e:
            self._log_request(request, error=e)
            raise

        except Exception as e:
            error_msg = f"{self.provider_name} generation failed: {e}"
            logger.error(error_msg)
            self._log_request(request, error=e)
            raise ProviderError(error_msg, provider=self.provider_name) from e

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        """Generate streaming text completion."""
        try:
            self._validate_request(request)

            stream = await self.client.chat.completions.create(
                **self._completion_params(request, stream=True)
            )

            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content

        except ProviderError:
            raise

        except Exception as e:
            error_msg = f"{self.provider_name} streaming failed: {e}"
            logger.error(error_msg)
            raise ProviderError(error_msg, provider=self.provider_name) from e

    async def health_check(self) -> bool:
        """Check provider health with a minimal request."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=1,
                temperature=0
            )
            return response.choices[0].message.content is not None

        except Exception as e:
            logger.error(f"{self.provider_name} health check failed: {e}")
            return False


class DeepSeekProvider(OpenAIProvider):
    """
    DeepSeek provider for cost-effective analysis and research.

    Uses the OpenAI SDK against DeepSeek's compatible endpoint.
    """

    provider_name = "deepseek"
    default_model = "deepseek-chat"


class OllamaProvider(OpenAIProvider):
    """
    Ollama provider for local inference.

    Free and private, but the least capable backend; used as the last resort.
    """

    provider_name = "ollama"
    default_model = "llama3.1:8b"
    requires_api_key = False

    def calculate_cost(self, tokens_used: int) -> float:
        """Local inference is free."""
        return 0.0
