"""Telegram webhook endpoint.

Telegram retries any update that is not answered with a 2xx status, so this
route acknowledges every update it receives, whether it was processed,
ignored, refused for quota, or failed downstream.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from chatbridge.conversation.orchestrator import TurnOrchestrator
from chatbridge.conversation.validator import parse_update
from chatbridge.dependencies import get_orchestrator

logger = logging.getLogger(__name__)
router = APIRouter()

ACK: dict[str, Any] = {"ok": True}


@router.post("")
async def telegram_webhook(
    request: Request,
    orchestrator: TurnOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Handle one Telegram update and acknowledge it."""
    body = await request.body()
    logger.debug("Raw webhook body: %r", body[:2000])

    message = parse_update(body)
    if message is None:
        return ACK

    outcome = await orchestrator.handle(message)
    logger.info("Update from sender %s resolved as %s", message.sender_id, outcome.value)
    return ACK
