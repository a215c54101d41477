"""FastAPI application entry point with lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chatbridge.api.router import api_router
from chatbridge.api.webhook import router as webhook_router
from chatbridge.config import get_settings
from chatbridge.dependencies import close_resources, get_chat_store
from chatbridge.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Missing environment variables: %s", exc)
    else:
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format=LOG_FORMAT,
        )
        logger.info(
            "Environment variables loaded: telegram=%s, openrouter=%s, mongodb=%s",
            bool(settings.telegram_bot_token),
            bool(settings.openrouter_api_key),
            bool(settings.mongodb_uri),
        )
        try:
            await get_chat_store().ensure_indexes()
            logger.info("Chat history indexes ensured")
        except Exception as exc:
            logger.warning("Could not ensure chat history indexes: %s", exc)

    yield

    await close_resources()
    logger.info("Chat bridge shut down cleanly")


app = FastAPI(
    title="Chat Bridge",
    description="Telegram webhook bridge to OpenRouter chat models with per-user quotas",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Server configuration error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Server configuration error"},
    )


app.include_router(webhook_router, prefix="/webhook", tags=["webhook"])
app.include_router(api_router, prefix="/api")
