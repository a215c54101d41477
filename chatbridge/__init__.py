"""Telegram to OpenRouter chat bridge with per-user quotas."""

__version__ = "0.1.0"
