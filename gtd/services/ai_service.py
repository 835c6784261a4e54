"""
AI advice service for the GTD agent.

Forwards prompt message pairs to one of three hosted chat-completion
backends and returns the extracted text reply. Stateless: no retries,
no caching, one outbound request per call.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel

from gtd.constants import (
    AI_ERROR_BODY_LIMIT,
    AI_MAX_TOKENS,
    AI_TEMPERATURE,
    DEFAULT_AI_PROVIDER,
    DEFAULT_AI_TIMEOUT,
    ConfigManager,
    get_config_manager,
)
from gtd.exceptions import AIServiceError, ConfigurationError
from gtd.models.base import Context, Project, Task
from gtd.services.prompts import (
    Message,
    build_chat_prompt,
    build_implementation_prompt,
    build_organization_prompt,
    build_scheduling_prompt,
    build_what_to_do_now_prompt,
)

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "AI API key not configured. Please set the AI_API_KEY environment variable."
FALLBACK_REPLY = "Unable to get a reply from the AI service."


class AISettings(BaseModel):
    """Connection settings for the hosted AI backend."""

    provider: str = DEFAULT_AI_PROVIDER
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    timeout: int = DEFAULT_AI_TIMEOUT

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "AISettings":
        """Resolve settings from the environment, then config.json, then defaults."""
        config = config or get_config_manager()
        return cls(
            provider=config.get_str("ai_provider", DEFAULT_AI_PROVIDER),
            api_key=config.get_str("ai_api_key", None),
            base_url=config.get_str("ai_base_url", None),
            model=config.get_str("ai_model", None),
            timeout=config.get_int("ai_timeout", DEFAULT_AI_TIMEOUT),
        )


# =============================================================================
# Providers
# =============================================================================


class ChatProvider(ABC):
    """Request/response shape of one hosted chat backend."""

    name: str = ""
    default_url: str = ""
    default_model: str = ""

    @abstractmethod
    def build_payload(self, messages: List[Message], model: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        pass


def _first_choice_content(container: Any) -> Optional[str]:
    """Pull choices[0].message.content out of a chat-completions style body."""
    if not isinstance(container, dict):
        return None
    choices = container.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    return message.get("content") if isinstance(message, dict) else None


class QwenProvider(ChatProvider):
    """Alibaba DashScope text-generation API."""

    name = "qwen"
    default_url = "https://dashscope.aliyuncs.com/api/v1/services/aigc/text-generation/generation"
    default_model = "qwen-turbo"

    def build_payload(self, messages: List[Message], model: str) -> Dict[str, Any]:
        return {
            "model": model,
            "input": {"messages": messages},
            "parameters": {
                "temperature": AI_TEMPERATURE,
                "max_tokens": AI_MAX_TOKENS,
            },
        }

    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        output = data.get("output") if isinstance(data, dict) else None
        if not isinstance(output, dict):
            return None
        return output.get("text") or _first_choice_content(output)


class ChatCompletionsProvider(ChatProvider):
    """OpenAI-compatible /chat/completions API."""

    def build_payload(self, messages: List[Message], model: str) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": messages,
            "temperature": AI_TEMPERATURE,
            "max_tokens": AI_MAX_TOKENS,
        }

    def extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        return _first_choice_content(data)


class ZhipuProvider(ChatCompletionsProvider):
    name = "zhipu"
    default_url = "https://open.bigmodel.cn/api/paas/v4/chat/completions"
    default_model = "glm-4"


class OpenAIProvider(ChatCompletionsProvider):
    name = "openai"
    default_url = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-3.5-turbo"


PROVIDERS: Dict[str, ChatProvider] = {
    provider.name: provider
    for provider in (QwenProvider(), ZhipuProvider(), OpenAIProvider())
}


def get_provider(name: str) -> ChatProvider:
    """Look up a provider by name.

    Raises:
        ConfigurationError: If the provider is not supported.
    """
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ConfigurationError(f"Unsupported AI provider: {name}")


# =============================================================================
# Service
# =============================================================================


class AIService:
    """
    Turns GTD advice requests into prompts and sends them to the AI backend.

    Settings are resolved on every call unless given explicitly, so changes
    to the environment take effect without a restart.

    Usage:
        service = AIService()
        advice = service.get_task_organization_advice(task, projects, contexts)
    """

    def __init__(
        self,
        settings: Optional[AISettings] = None,
        config: Optional[ConfigManager] = None,
    ) -> None:
        """
        Args:
            settings: Fixed settings. When omitted they are resolved per call.
            config: ConfigManager to resolve settings from. Defaults to the
                shared one for GTD_DATA_DIR.
        """
        self._settings = settings
        self._config = config

    @property
    def settings(self) -> AISettings:
        if self._settings is not None:
            return self._settings
        if self._config is not None:
            self._config.reload()
        return AISettings.from_config(self._config)

    def complete(self, messages: List[Message]) -> str:
        """Send messages to the configured backend and return the reply text.

        Raises:
            ConfigurationError: If the API key is missing or the provider unknown.
            AIServiceError: If the request fails or the backend answers non-2xx.
        """
        settings = self.settings
        if not settings.api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

        provider = get_provider(settings.provider)
        url = settings.base_url or provider.default_url
        payload = provider.build_payload(messages, settings.model or provider.default_model)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {settings.api_key}",
        }

        logger.debug(f"Calling {provider.name} at {url}")
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=settings.timeout)
        except requests.RequestException as e:
            raise AIServiceError(f"AI API request failed: {e}")

        if not response.ok:
            raise AIServiceError(
                f"AI API error: {response.status_code} - {response.text[:AI_ERROR_BODY_LIMIT]}"
            )

        try:
            data = response.json()
        except ValueError:
            raise AIServiceError("AI API returned a response that is not valid JSON")

        if not isinstance(data, dict):
            return FALLBACK_REPLY
        return provider.extract_text(data) or FALLBACK_REPLY

    def get_task_organization_advice(
        self, task: Task, projects: List[Project], contexts: List[Context]
    ) -> str:
        return self.complete(build_organization_prompt(task, projects, contexts))

    def get_scheduling_advice(
        self, tasks: List[Task], current_date: Optional[datetime] = None
    ) -> str:
        return self.complete(build_scheduling_prompt(tasks, current_date))

    def get_what_to_do_now_advice(
        self, tasks: List[Task], contexts: List[Context], current_context: Optional[str] = None
    ) -> str:
        return self.complete(build_what_to_do_now_prompt(tasks, contexts, current_context))

    def get_implementation_guidance(self, task: Task) -> str:
        return self.complete(build_implementation_prompt(task))

    def chat(
        self,
        message: str,
        tasks: Optional[List[Task]] = None,
        projects: Optional[List[Project]] = None,
        current_task: Optional[Task] = None,
    ) -> str:
        return self.complete(build_chat_prompt(message, tasks, projects, current_task))
