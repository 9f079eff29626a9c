"""Opik traces around plan requests, LLM calls and metrics."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from planscope.core.context import get_request_id
from planscope.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace for the duration of the block.

    ``request_id`` defaults to the id of the HTTP request being served and metadata
    entries whose value is ``None`` are dropped. Without an Opik client the block
    runs untraced and receives ``None``. Exceptions are attached to the trace as
    ``error_info`` and re-raised.
    """
    opik_trace = _start_trace(name, _trace_metadata(metadata, request_id or get_request_id()))
    try:
        yield opik_trace
    except Exception as exc:
        _call_quietly(opik_trace, name, "update", error_info={"message": str(exc)})
        raise
    finally:
        _call_quietly(opik_trace, name, "end")


def _trace_metadata(metadata: Optional[Dict[str, Any]], request_id: Optional[str]) -> Optional[Dict[str, Any]]:
    payload = {key: value for key, value in (metadata or {}).items() if value is not None}
    if request_id:
        payload.setdefault("request_id", request_id)
    return payload or None


def _start_trace(name: str, metadata: Optional[Dict[str, Any]]) -> Optional["Trace"]:
    client = get_opik_client()
    if client is None:
        return None
    try:
        return client.trace(name=name, metadata=metadata)
    except Exception as exc:  # pragma: no cover - SDK/network failure
        logger.debug("Unable to start Opik trace %s: %s", name, exc)
        return None


def _call_quietly(opik_trace: Optional["Trace"], name: str, method: str, **kwargs: Any) -> None:
    if opik_trace is None:
        return
    try:
        getattr(opik_trace, method)(**kwargs)
    except Exception:  # pragma: no cover - SDK/network failure
        logger.debug("Opik trace %s failed during %s", name, method, exc_info=True)
