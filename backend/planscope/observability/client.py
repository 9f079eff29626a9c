"""Process-wide Opik client, created on first use."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from planscope.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[Opik] = None
_client_lock = Lock()
_init_attempted = False


def init_opik() -> Optional[Opik]:
    """
    Create the Opik client at most once per process.

    Returns ``None`` while tracing is disabled, when ``OPIK_API_KEY`` is missing or
    when the SDK refuses to start; plan endpoints keep working untraced.
    """
    global _client, _init_attempted

    with _client_lock:
        if _init_attempted:
            return _client
        _init_attempted = True
        _client = _build_client()
    return _client


def get_opik_client() -> Optional[Opik]:
    if _client is not None:
        return _client
    return init_opik()


def reset_opik_client() -> None:
    """Forget the cached client so the next call re-reads settings."""
    global _client, _init_attempted

    with _client_lock:
        _client = None
        _init_attempted = False


def _build_client() -> Optional[Opik]:
    if not settings.opik_enabled:
        logger.debug("Opik tracing disabled.")
        return None
    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; plan traces are off.")
        return None

    try:
        client = Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception as exc:  # pragma: no cover - SDK/network failure
        logger.warning("Failed to initialize Opik, plan traces are off: %s", exc)
        return None

    logger.info("Opik tracing on (project=%s).", settings.opik_project)
    return client
