"""Request middleware: trace id correlation."""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from models.request_context import TRACE_ID_HEADER, RequestContext
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)


class TraceIdMiddleware(BaseHTTPMiddleware):
    """
    Attach a RequestContext to every request.

    The inbound X-Trace-Id header is reused when present, otherwise a new id
    is generated. The id is stored on request.state, echoed back in the
    response header and dropped when the request ends.
    """

    async def dispatch(self, request: Request, call_next):
        ctx = RequestContext.from_header(request.headers.get(TRACE_ID_HEADER))
        request.state.request_context = ctx
        request.state.trace_id = ctx.trace_id

        start = time.monotonic()
        logger.info(
            f"Request start: {request.method} {request.url.path}",
            extra=log_extra(ctx.trace_id, method=request.method, path=request.url.path),
        )
        response = await call_next(request)
        response.headers[TRACE_ID_HEADER] = ctx.trace_id
        logger.info(
            f"Request end: {response.status_code}",
            extra=log_extra(
                ctx.trace_id,
                status=response.status_code,
                elapsed_ms=int((time.monotonic() - start) * 1000),
            ),
        )
        return response
