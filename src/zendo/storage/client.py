# src/zendo/storage/client.py

"""Supabase client singleton"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, create_client  # type: ignore

from ..config import Settings

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None


def get_supabase_client(settings: Settings) -> Client:
    """Get or create the Supabase client for the configured project."""
    global _supabase_client

    if _supabase_client is None:
        if not settings.remote_configured:
            raise ValueError("Supabase URL and key must be set")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_key)  # type: ignore[arg-type]
        logger.info("Supabase client created url=%s", settings.supabase_url)

    return _supabase_client


def reset_supabase_client() -> None:
    """Reset the Supabase client singleton (useful for testing)"""
    global _supabase_client
    _supabase_client = None
