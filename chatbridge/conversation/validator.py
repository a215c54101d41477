"""Inbound webhook payload validation.

Telegram delivers every kind of update to the webhook: edited messages,
stickers, photos, membership changes and so on. Only plain text messages are
actionable. Anything else, including bodies that are not JSON at all, is
reported as ``None`` so the caller acknowledges the update and stops.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from chatbridge.models.telegram import InboundMessage, TelegramUpdate

logger = logging.getLogger(__name__)


def parse_update(body: bytes | str | Mapping[str, Any]) -> Optional[InboundMessage]:
    """Return the actionable message carried by ``body``, or ``None``.

    Decode failures are logged as warnings; well-formed updates that simply
    carry no text message are logged at info level.
    """
    if isinstance(body, Mapping):
        payload: Any = body
    else:
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Failed to decode webhook payload: %s", exc)
            return None

    if not isinstance(payload, Mapping):
        logger.info("Ignoring webhook payload of type %s", type(payload).__name__)
        return None

    try:
        update = TelegramUpdate.model_validate(payload)
    except ValidationError as exc:
        logger.info(
            "Ignoring non-actionable update %s: %d validation issue(s)",
            payload.get("update_id"),
            exc.error_count(),
        )
        logger.debug("Update payload: %s", payload)
        return None

    return InboundMessage.from_update(update)
