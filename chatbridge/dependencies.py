"""Dependency injection providers for FastAPI."""

from motor.motor_asyncio import AsyncIOMotorClient

from chatbridge.agent.completion import OpenRouterCompletionClient
from chatbridge.config import get_settings
from chatbridge.conversation.orchestrator import TurnOrchestrator
from chatbridge.conversation.policy import DailySessionPolicy, QuotaPolicy
from chatbridge.memory.chat_store import MongoChatStore
from chatbridge.memory.user_store import MongoUserStore
from chatbridge.telegram.sender import TelegramReplySender

# Process-wide connection holders; no conversation state lives here.
_mongo_client: AsyncIOMotorClient | None = None
_reply_sender: TelegramReplySender | None = None
_orchestrator: TurnOrchestrator | None = None


def get_mongo_client() -> AsyncIOMotorClient:
    """Return singleton MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=5_000,
        )
    return _mongo_client


def get_chat_store() -> MongoChatStore:
    settings = get_settings()
    db = get_mongo_client()[settings.mongodb_database]
    return MongoChatStore(db[settings.chats_collection])


def get_user_store() -> MongoUserStore:
    settings = get_settings()
    db = get_mongo_client()[settings.mongodb_database]
    return MongoUserStore(db[settings.users_collection])


def get_reply_sender() -> TelegramReplySender:
    """Return singleton Telegram reply sender."""
    global _reply_sender
    if _reply_sender is None:
        _reply_sender = TelegramReplySender.from_token(get_settings().telegram_bot_token)
    return _reply_sender


def get_orchestrator() -> TurnOrchestrator:
    """Return singleton TurnOrchestrator instance.

    Raises ``ConfigurationError`` while required settings are missing.
    """
    global _orchestrator
    if _orchestrator is None:
        settings = get_settings()
        _orchestrator = TurnOrchestrator(
            users=get_user_store(),
            turns=get_chat_store(),
            completion=OpenRouterCompletionClient(
                api_key=settings.openrouter_api_key,
                model=settings.openrouter_model,
                base_url=settings.openrouter_base_url,
                app_name=settings.app_name,
            ),
            sender=get_reply_sender(),
            quota=QuotaPolicy(limit=settings.usage_limit),
            sessions=DailySessionPolicy(),
            history_limit=settings.history_limit,
            limit_message=settings.limit_notice,
            error_message=settings.error_message,
        )
    return _orchestrator


async def close_resources() -> None:
    """Release process-wide clients."""
    global _mongo_client, _reply_sender, _orchestrator
    if _reply_sender is not None:
        await _reply_sender.shutdown()
    if _mongo_client is not None:
        _mongo_client.close()
    _mongo_client = None
    _reply_sender = None
    _orchestrator = None
