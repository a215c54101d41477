"""Exception types raised by the chat bridge."""

from typing import Optional


class ChatBridgeError(Exception):
    """Base class for chat bridge errors."""


class ConfigurationError(ChatBridgeError):
    """Required settings are missing or invalid."""


class StoreError(ChatBridgeError):
    """A document store operation did not affect the expected record."""


class CompletionError(ChatBridgeError):
    """The completion service failed or returned no usable reply."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReplyDeliveryError(ChatBridgeError):
    """A message could not be delivered to the chat."""

    def __init__(self, message: str, chat_id: int | str | None = None):
        super().__init__(message)
        self.chat_id = chat_id
