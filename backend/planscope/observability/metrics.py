"""Plan metrics (selection counts, latencies, copy source) recorded as Opik traces."""
from __future__ import annotations

from typing import Any, Dict, Optional

from planscope.observability.tracing import trace

METRIC_PREFIX = "metric:"


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Emit ``value`` as an empty ``metric:<name>`` trace; ``metadata`` rides along as tags."""
    with trace(f"{METRIC_PREFIX}{name}", metadata={"value": value, **(metadata or {})}):
        pass
