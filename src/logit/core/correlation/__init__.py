"""
Trace (correlation) id propagation.

Usage:
    from logit.core.correlation import new_scope, resolve

    trace_id = resolve(request.headers.get("X-Trace-Id"))

    with new_scope(trace_id) as trace:
        logger.info("handling request", "orders.create", trace=trace)
"""

from .manager import (
    TraceContext,
    current_context,
    current_trace_id,
    generate_id,
    new_scope,
    resolve,
)

__all__ = [
    "TraceContext",
    "current_context",
    "current_trace_id",
    "generate_id",
    "new_scope",
    "resolve",
]
