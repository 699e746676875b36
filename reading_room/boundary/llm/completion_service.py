"""
Completion service.

Turns role-tagged messages into generated text. Used for final answers
and for the small reasoning steps of the pipeline (query analysis,
pronoun resolution, re-ranking).

Dependencies: langchain_google_genai, langchain_core, tenacity
System role: Completion capability
"""

import logging
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from reading_room.core.exceptions import GenerationError

logger = logging.getLogger(__name__)

_ROLE_TO_MESSAGE = {
    "system": SystemMessage,
    "user": HumanMessage,
    "human": HumanMessage,
    "assistant": AIMessage,
    "ai": AIMessage,
}


def to_langchain_messages(messages: list[dict[str, str] | BaseMessage]) -> list[BaseMessage]:
    """
    Convert {role, content} dicts to LangChain messages.

    Args:
        messages: Dicts or already-built LangChain messages

    Returns:
        list[BaseMessage]: Messages ready for the chat model

    Raises:
        GenerationError: If a role is unknown
    """
    converted: list[BaseMessage] = []
    for message in messages:
        if isinstance(message, BaseMessage):
            converted.append(message)
            continue
        role = message.get("role", "user").lower()
        message_cls = _ROLE_TO_MESSAGE.get(role)
        if message_cls is None:
            raise GenerationError(f"Unsupported message role: {role}")
        converted.append(message_cls(content=message.get("content", "")))
    return converted


def content_to_text(content: Any) -> str:
    """Normalise LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


class CompletionService:
    """
    Chat completion client.

    One ChatGoogleGenerativeAI instance is kept per (model, max_tokens)
    pair and reused across requests.
    """

    def __init__(
        self,
        default_model: str,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        retry_attempts: int = 3,
    ) -> None:
        """
        Initialize completion client settings.

        Args:
            default_model: Model used when a call does not name one
            temperature: Sampling temperature
            max_tokens: Default max output tokens
            retry_attempts: Attempts before giving up
        """
        self.default_model = default_model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._models: dict[tuple[str, int], ChatGoogleGenerativeAI] = {}
        self._retrying = AsyncRetrying(
            retry=retry_if_exception_type(Exception),
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:complete - Retry {retry_state.attempt_number}/{retry_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )

    def _get_model(self, model: str, max_tokens: int) -> ChatGoogleGenerativeAI:
        key = (model, max_tokens)
        if key not in self._models:
            self._models[key] = ChatGoogleGenerativeAI(
                model=model,
                temperature=self.temperature,
                max_output_tokens=max_tokens,
            )
        return self._models[key]

    async def complete(
        self,
        messages: list[dict[str, str] | BaseMessage],
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """
        Generate a response for role-tagged messages.

        Args:
            messages: [{"role": "system"|"user"|"assistant", "content": str}, ...]
            model: Model override
            max_tokens: Max output tokens override

        Returns:
            str: Generated text

        Raises:
            GenerationError: On provider failure or an empty response
        """
        model_name = model or self.default_model
        chat_model = self._get_model(model_name, max_tokens or self.max_tokens)
        lc_messages = to_langchain_messages(messages)

        try:
            async for attempt in self._retrying.copy():
                with attempt:
                    response = await chat_model.ainvoke(lc_messages)
        except Exception as e:
            logger.error(f"{__name__}:complete - {type(e).__name__}: {e}")
            raise GenerationError(
                "Completion provider failed",
                model=model_name,
                details={"error_type": type(e).__name__},
            ) from e

        text = content_to_text(response.content).strip()
        if not text:
            raise GenerationError("Completion provider returned an empty response", model=model_name)

        logger.debug(f"{__name__}:complete - model={model_name}, chars={len(text)}")
        return text
