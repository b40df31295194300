"""
RequestContext - per-request values threaded explicitly through the pipeline.

The trace id lives here instead of in process-global state so that concurrent
requests can never observe each other's ids.
"""

import uuid
from dataclasses import dataclass, field

TRACE_ID_HEADER = "X-Trace-Id"


def new_trace_id() -> str:
    """Generate a short opaque trace id (first 8 chars of a uuid4)."""
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable container for request-scoped metadata.

    Attributes:
        trace_id: Correlation id for logs and outbound calls of one request
    """

    trace_id: str = field(default_factory=new_trace_id)

    @classmethod
    def from_header(cls, value: str | None) -> "RequestContext":
        """Use the inbound header value when present, otherwise generate one."""
        if value is None or not value.strip():
            return cls()
        return cls(trace_id=value.strip())
