"""FastAPI dependencies for orchestrator and request context access."""

from fastapi import Request

from models.request_context import RequestContext


def get_orchestrator():
    """Dependency to get orchestrator instance (singleton pattern)."""
    from tools.web.factory import create_search_orchestrator_from_env

    if not hasattr(get_orchestrator, "_instance"):
        get_orchestrator._instance = create_search_orchestrator_from_env()
    return get_orchestrator._instance


def reset_orchestrator() -> None:
    """Drop the cached orchestrator instance (used on shutdown)."""
    if hasattr(get_orchestrator, "_instance"):
        del get_orchestrator._instance


def get_request_context(request: Request) -> RequestContext:
    """Request context set by TraceIdMiddleware, or a fresh one."""
    ctx = getattr(request.state, "request_context", None)
    return ctx if ctx is not None else RequestContext()


def get_orchestrator_provider():
    """
    Dependency returning a callable that builds or fetches the orchestrator.

    Routes call it only once they know the pipeline must run, so requests that
    skip the pipeline never depend on it being configurable.
    """
    return get_orchestrator
