"""
AI Request Router - provider selection, fallback, scoring and caching

Given a task, picks the best available backend, executes it and fails over
transparently, returning the same flat AIResponse whichever provider served
the request. ``process_request`` and ``process_stream`` never raise: every
failure, including unexpected internal errors, comes back as a failure
response.
"""

import asyncio
import dataclasses
import logging
import time
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from hera_ai.core.exceptions import ProviderTimeoutError
from .cache import InMemoryResponseCache, ResponseCache
from .confidence import ConfidenceScorer, HeuristicConfidenceScorer
from .models import AIRequest, AIResponse, ProviderDescriptor, StreamEvent
from .providers import ProviderResponse
from .registry import ProviderRegistry
from .task_router import TaskRouter

logger = logging.getLogger(__name__)

NO_PROVIDER_ERROR = "No AI providers available"
ALL_FAILED_ERROR = "All AI providers failed"
CANCELLED_ERROR = "Request cancelled"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class AIRequestRouter:
    """
    Routes AI requests across the providers of a registry.

    Candidate providers are tried strictly in order, never in parallel: the
    primary provider first, then every other available provider in
    registration order. Each call runs under a deadline; a timeout is a
    provider failure like any other.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: Optional[ResponseCache] = None,
        scorer: Optional[ConfidenceScorer] = None,
        task_preferences: Optional[Dict[str, Sequence[str]]] = None,
        batch_concurrency: Optional[int] = None
    ):
        """
        Initialize the router.

        Args:
            registry: Providers to route across
            cache: Response cache (default: bounded in-memory LRU)
            scorer: Confidence scorer (default: heuristic scorer)
            task_preferences: Override of the task -> provider preference table
            batch_concurrency: Default cap on concurrent requests in a batch
        """
        self.registry = registry
        self.task_router = TaskRouter(registry, task_preferences)
        self.cache = cache if cache is not None else InMemoryResponseCache()
        self.scorer = scorer or HeuristicConfidenceScorer()
        self.batch_concurrency = batch_concurrency

        logger.info(
            f"AI request router initialized with providers: {', '.join(registry.provider_ids()) or 'none'}"
        )

    def select_provider(self, request: AIRequest) -> Optional[str]:
        """Provider that should serve the request first, or None on total outage."""
        return self.task_router.select_provider(request)

    # ------------------------------------------------------------------
    # Single request
    # ------------------------------------------------------------------

    async def process_request(
        self,
        request: AIRequest,
        cancel_event: Optional[asyncio.Event] = None
    ) -> AIResponse:
        """
        Process one request.

        Args:
            request: The AI request
            cancel_event: When set, no further provider is attempted

        Returns:
            Success or failure response; never raises
        """
        started = time.perf_counter()

        try:
            response = await self._process(request, started, cancel_event)
        except Exception as e:
            logger.error(f"AI request processing failed unexpectedly: {e}", exc_info=True)
            response = AIResponse.failure(
                request,
                f"Unexpected error while processing AI request: {e}",
                processing_time_ms=_elapsed_ms(started)
            )

        self._log_completion(request, response)
        return response

    async def _process(
        self,
        request: AIRequest,
        started: float,
        cancel_event: Optional[asyncio.Event]
    ) -> AIResponse:
        invalid = request.validation_error()
        if invalid:
            return AIResponse.failure(request, invalid, processing_time_ms=_elapsed_ms(started))

        fingerprint = request.fingerprint()

        cached = await self._lookup(fingerprint)
        if cached is not None:
            return cached

        primary = self.select_provider(request)
        if primary is None:
            return AIResponse.failure(request, NO_PROVIDER_ERROR, processing_time_ms=_elapsed_ms(started))

        last_error = None
        attempts = 0

        for provider_id in self.task_router.candidate_order(request, primary):
            if cancel_event is not None and cancel_event.is_set():
                return AIResponse.failure(
                    request,
                    CANCELLED_ERROR,
                    fallback_attempts=attempts,
                    fallback_used=attempts > 0,
                    processing_time_ms=_elapsed_ms(started)
                )

            # Availability may have been toggled while earlier candidates ran
            if not self.registry.is_available(provider_id):
                continue

            descriptor = self.registry.get(provider_id)

            try:
                result = await self._invoke(provider_id, descriptor, request)
            except Exception as e:
                self.registry.record_failure(provider_id)
                attempts += 1
                last_error = str(e) or e.__class__.__name__
                logger.warning(
                    f"Provider '{provider_id}' failed: {last_error}",
                    extra={
                        "smart_code": request.smart_code,
                        "provider": provider_id,
                        "attempt": attempts,
                        "fallback_enabled": request.fallback_enabled
                    }
                )
                if not request.fallback_enabled:
                    break
                continue

            self.registry.record_success(provider_id)
            response = self._build_response(
                request, provider_id, descriptor, primary,
                content=result.content,
                tokens_used=result.tokens_used,
                model=result.model,
                attempts=attempts,
                started=started
            )
            await self._store(fingerprint, request, response)
            return response

        return AIResponse.failure(
            request,
            last_error or ALL_FAILED_ERROR,
            fallback_attempts=attempts,
            fallback_used=attempts > 1,
            processing_time_ms=_elapsed_ms(started)
        )

    async def _invoke(
        self,
        provider_id: str,
        descriptor: ProviderDescriptor,
        request: AIRequest
    ) -> ProviderResponse:
        """Call one provider adapter under its deadline."""
        adapter = self.registry.adapter(provider_id)
        timeout = request.timeout or descriptor.timeout_seconds

        try:
            return await asyncio.wait_for(adapter.generate(request), timeout=timeout)
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(provider_id, timeout)

    def _build_response(
        self,
        request: AIRequest,
        provider_id: str,
        descriptor: ProviderDescriptor,
        primary: str,
        content: str,
        tokens_used: int,
        model: Optional[str],
        attempts: int,
        started: float
    ) -> AIResponse:
        # Serving from anything but the primary, or anything but an explicitly
        # requested provider, is a fallback
        fallback_used = provider_id != primary or (
            request.preferred is not None and provider_id != request.preferred
        )

        return AIResponse(
            success=True,
            smart_code=request.smart_code,
            provider_used=provider_id,
            response=content,
            tokens_used=tokens_used,
            cost_estimate=tokens_used * descriptor.cost_per_token,
            confidence_score=self.scorer.score(request, descriptor, content),
            processing_time_ms=_elapsed_ms(started),
            fallback_used=fallback_used,
            fallback_attempts=attempts,
            model_used=model or descriptor.model or None,
            provider_status=self.registry.status(provider_id),
            success_rate=self.registry.success_rate(provider_id),
        )

    async def _lookup(self, fingerprint: str) -> Optional[AIResponse]:
        try:
            cached = await self.cache.get(fingerprint)
        except Exception as e:
            logger.warning(f"Response cache lookup failed, treating as a miss: {e}")
            return None
        if cached is None:
            return None
        # A hit is served without trying any provider
        return dataclasses.replace(cached, fallback_used=False, fallback_attempts=0)

    async def _store(self, fingerprint: str, request: AIRequest, response: AIResponse) -> None:
        if request.is_realtime:
            return
        try:
            await self.cache.set(fingerprint, response)
        except Exception as e:
            logger.warning(f"Response cache write failed, returning uncached response: {e}")

    def _log_completion(self, request: Any, response: AIResponse) -> None:
        """Structured completion record for analytics ingestion."""
        logger.info(
            "AI request completed" if response.success else "AI request failed",
            extra={
                "smart_code": response.smart_code,
                "task_type": getattr(request, "task", None),
                "organization_id": getattr(request, "organization_id", None),
                "user_id": getattr(request, "user_id", None),
                "provider": response.provider_used,
                "success": response.success,
                "tokens_used": response.tokens_used,
                "cost_usd": response.cost_estimate,
                "confidence_score": response.confidence_score,
                "latency_ms": response.processing_time_ms,
                "fallback_used": response.fallback_used,
                "fallback_attempts": response.fallback_attempts,
                "error": response.error,
            }
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def process_batch(
        self,
        requests: Sequence[AIRequest],
        max_concurrency: Optional[int] = None
    ) -> List[AIResponse]:
        """
        Process requests concurrently.

        Results are in input order. Each item is isolated: one request's
        failure only shows up in its own response.
        """
        limit = max_concurrency or self.batch_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def run(request: AIRequest) -> AIResponse:
            if semaphore is None:
                return await self.process_request(request)
            async with semaphore:
                return await self.process_request(request)

        return list(await asyncio.gather(*(run(request) for request in requests)))

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    async def process_stream(
        self,
        request: AIRequest,
        cancel_event: Optional[asyncio.Event] = None
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream a request through the providers' native streaming APIs.

        Yields ``chunk`` events as text arrives, then exactly one ``complete``
        event with the final response. A provider failing before its first
        chunk falls back to the next candidate; once text has been emitted a
        failure ends the stream. Never raises.
        """
        started = time.perf_counter()
        response = None

        try:
            fingerprint = request.fingerprint()

            invalid = request.validation_error()
            cached = None if invalid else await self._lookup(fingerprint)
            if invalid:
                response = AIResponse.failure(request, invalid, processing_time_ms=_elapsed_ms(started))
            elif cached is not None:
                if cached.response:
                    yield StreamEvent(StreamEvent.CHUNK, content=cached.response)
                response = cached
            else:
                primary = self.select_provider(request)
                if primary is None:
                    response = AIResponse.failure(
                        request, NO_PROVIDER_ERROR, processing_time_ms=_elapsed_ms(started)
                    )
                else:
                    last_error = None
                    attempts = 0

                    for provider_id in self.task_router.candidate_order(request, primary):
                        if cancel_event is not None and cancel_event.is_set():
                            last_error = CANCELLED_ERROR
                            break
                        if not self.registry.is_available(provider_id):
                            continue

                        descriptor = self.registry.get(provider_id)
                        adapter = self.registry.adapter(provider_id)
                        timeout = request.timeout or descriptor.timeout_seconds
                        parts: List[str] = []

                        try:
                            async for piece in self._stream_with_deadline(
                                adapter.generate_stream(request), provider_id, timeout
                            ):
                                parts.append(piece)
                                yield StreamEvent(StreamEvent.CHUNK, content=piece)
                        except Exception as e:
                            self.registry.record_failure(provider_id)
                            attempts += 1
                            last_error = str(e) or e.__class__.__name__
                            logger.warning(
                                f"Provider '{provider_id}' stream failed: {last_error}",
                                extra={"smart_code": request.smart_code, "provider": provider_id}
                            )
                            if parts or not request.fallback_enabled:
                                break
                            continue

                        self.registry.record_success(provider_id)
                        content = "".join(parts)
                        response = self._build_response(
                            request, provider_id, descriptor, primary,
                            content=content,
                            tokens_used=adapter.estimate_tokens(request.prompt) + adapter.estimate_tokens(content),
                            model=adapter.model,
                            attempts=attempts,
                            started=started
                        )
                        await self._store(fingerprint, request, response)
                        break

                    if response is None:
                        response = AIResponse.failure(
                            request,
                            last_error or ALL_FAILED_ERROR,
                            fallback_attempts=attempts,
                            fallback_used=attempts > 1,
                            processing_time_ms=_elapsed_ms(started)
                        )

        except Exception as e:
            logger.error(f"AI stream processing failed unexpectedly: {e}", exc_info=True)
            response = AIResponse.failure(
                request,
                f"Unexpected error while streaming AI request: {e}",
                processing_time_ms=_elapsed_ms(started)
            )

        self._log_completion(request, response)
        yield StreamEvent(StreamEvent.COMPLETE, response=response)

    async def _stream_with_deadline(
        self,
        stream: AsyncIterator[str],
        provider_id: str,
        timeout: float
    ) -> AsyncIterator[str]:
        """Re-yield a provider stream, failing if any chunk takes longer than ``timeout``."""
        iterator = stream.__aiter__()
        try:
            while True:
                try:
                    piece = await asyncio.wait_for(iterator.__anext__(), timeout=timeout)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError:
                    raise ProviderTimeoutError(provider_id, timeout)
                yield piece
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    # ------------------------------------------------------------------
    # Monitoring and management
    # ------------------------------------------------------------------

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform health check on all providers.

        Returns:
            Health status for each provider
        """
        health_status = {}

        for provider_id in self.registry.provider_ids():
            try:
                is_healthy = await self.registry.adapter(provider_id).health_check()
                health_status[provider_id] = {
                    "status": "healthy" if is_healthy else "unhealthy",
                    "available": self.registry.is_available(provider_id),
                    "provider_status": self.registry.status(provider_id).value,
                }
            except Exception as e:
                health_status[provider_id] = {
                    "status": "unhealthy",
                    "available": self.registry.is_available(provider_id),
                    "error": str(e),
                }

        return health_status

    def get_routing_info(self) -> Dict[str, Any]:
        """Routing configuration, for monitoring endpoints."""
        return {
            "providers": self.registry.provider_ids(),
            "available_providers": self.registry.available_providers(),
            "task_routing": self.task_router.task_routing,
            "scorer": self.scorer.__class__.__name__,
            "cache": self.cache.__class__.__name__,
        }

    async def get_cache_stats(self) -> Dict[str, Any]:
        return await self.cache.get_stats()

    async def clear_cache(self) -> None:
        await self.cache.clear()
