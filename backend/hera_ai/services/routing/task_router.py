"""
Task Router - Task-specific provider selection

This module decides which provider serves a request and in which order the
remaining providers are tried when it fails.
"""

import logging
from typing import Dict, List, Optional, Sequence, Union

from .models import AIRequest, ProviderType, TaskType, provider_key, task_key
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


OPENAI = ProviderType.OPENAI.value
CLAUDE = ProviderType.CLAUDE.value
DEEPSEEK = ProviderType.DEEPSEEK.value

# Assumed per-provider strengths, best first. Static configuration, not learned.
DEFAULT_TASK_PREFERENCES: Dict[str, List[str]] = {
    TaskType.LEARNING.value: [CLAUDE, OPENAI, DEEPSEEK],
    TaskType.QUESTION_GENERATION.value: [OPENAI, CLAUDE, DEEPSEEK],
    TaskType.CODE.value: [OPENAI, CLAUDE, DEEPSEEK],
    TaskType.ANALYSIS.value: [CLAUDE, DEEPSEEK, OPENAI],
    TaskType.CREATIVE.value: [CLAUDE, OPENAI, DEEPSEEK],
    TaskType.REASONING.value: [CLAUDE, OPENAI, DEEPSEEK],
    TaskType.CHAT.value: [OPENAI, CLAUDE, DEEPSEEK],
    TaskType.GENERATION.value: [OPENAI, CLAUDE, DEEPSEEK],
}


class TaskRouter:
    """
    Task-specific provider selection.

    Routing Strategy:
    - An explicit, available ``preferred_provider`` always wins
    - Otherwise the first available provider in the task's preference list
    - Otherwise the first available provider in registration order
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        task_preferences: Optional[Dict[str, Sequence[str]]] = None
    ):
        self.registry = registry
        preferences = task_preferences if task_preferences is not None else DEFAULT_TASK_PREFERENCES
        self.task_routing: Dict[str, List[str]] = {
            task_key(task): [provider_key(p) for p in providers]
            for task, providers in preferences.items()
        }

    def preferred_order(self, task_type: Union[TaskType, str]) -> List[str]:
        """Preference list for a task type (empty for unknown task types)."""
        return list(self.task_routing.get(task_key(task_type), []))

    def select_provider(self, request: AIRequest) -> Optional[str]:
        """
        Select the best available provider for a request.

        Returns:
            Provider id, or None when no provider is available at all
        """
        preferred = request.preferred
        if preferred:
            if self.registry.is_available(preferred):
                return preferred
            logger.info(
                f"Preferred provider '{preferred}' unavailable, routing by task type",
                extra={"smart_code": request.smart_code, "task_type": request.task}
            )

        for provider_id in self.preferred_order(request.task):
            if self.registry.is_available(provider_id):
                return provider_id

        available = self.registry.available_providers()
        return available[0] if available else None

    def candidate_order(self, request: AIRequest, primary: Optional[str] = None) -> List[str]:
        """
        Providers to try for a request, in order.

        The primary provider first, then every other available provider in
        registration order.
        """
        if primary is None:
            primary = self.select_provider(request)
        if primary is None:
            return []

        return [primary] + [
            provider_id for provider_id in self.registry.available_providers()
            if provider_id != primary
        ]

    def update_task_routing(self, task_type: Union[TaskType, str], providers: Sequence[str]):
        """
        Replace a task's provider preference list.

        Args:
            task_type: The task type
            providers: Provider ids, best first
        """
        self.task_routing[task_key(task_type)] = [provider_key(p) for p in providers]
        logger.info(f"Updated routing: {task_key(task_type)} -> {', '.join(self.task_routing[task_key(task_type)])}")
