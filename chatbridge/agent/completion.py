"""Chat completion client backed by OpenRouter.

OpenRouter exposes an OpenAI-compatible API, so the LangChain OpenAI chat
model is pointed at it. Retries are disabled: a failed call is reported once
and the orchestrator turns it into a user-visible notice.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI

from chatbridge.exceptions import CompletionError
from chatbridge.models.messages import ChatMessage, MessageRole

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class CompletionClient(ABC):
    """Ordered messages in, one reply string out."""

    @abstractmethod
    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        """Return the reply text or raise :class:`CompletionError`."""


def _to_langchain_message(message: ChatMessage) -> BaseMessage:
    if message.role == MessageRole.ASSISTANT:
        return AIMessage(content=message.content)
    return HumanMessage(content=message.content)


def _extract_text(response: BaseMessage) -> str:
    content = response.content
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    return content or ""


class OpenRouterCompletionClient(CompletionClient):
    """Completion client for any chat model served by OpenRouter."""

    def __init__(
        self,
        api_key: str,
        model: str = "moonshotai/kimi-k2:free",
        base_url: str = OPENROUTER_BASE_URL,
        app_name: str = "chat-bridge",
    ) -> None:
        self.model = model
        self._llm = ChatOpenAI(
            model=model,
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            default_headers={"X-Title": app_name},
        )
        logger.info("OpenRouter completion client initialised with model=%s", model)

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        lc_messages = [_to_langchain_message(m) for m in messages]
        logger.info(
            "Requesting completion from %s with %d message(s)", self.model, len(lc_messages)
        )

        try:
            response = await self._llm.ainvoke(lc_messages)
        except openai.APIStatusError as exc:
            raise CompletionError(
                f"OpenRouter API error: {exc.message}", status_code=exc.status_code
            ) from exc
        except openai.APIError as exc:
            raise CompletionError(f"OpenRouter API error: {exc.message}") from exc

        text = _extract_text(response)
        if not text.strip():
            raise CompletionError("OpenRouter API error: response has no reply content")
        return text
