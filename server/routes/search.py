"""Search endpoint: runs the retrieval pipeline for one query."""

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from models.request_context import RequestContext
from server.dependencies import get_orchestrator_provider, get_request_context
from server.schemas.responses import SearchResponseDTO
from tools.web.query_normalizer import normalize
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)

router = APIRouter(tags=["Search"])


@router.get("/", include_in_schema=False)
async def root_redirect():
    return RedirectResponse(url="/v1/search")


@router.get("/v1/search", response_model=SearchResponseDTO)
async def search(
    q: str | None = Query(None, description="Natural-language query"),
    ctx: RequestContext = Depends(get_request_context),
    orchestrator_provider=Depends(get_orchestrator_provider),
):
    """
    Answer a query from web sources.

    A missing or blank `q` skips the pipeline and returns the empty state.
    Pipeline failures are reported as fallback answers, never as 5xx.
    """
    if q is None or not q.strip():
        return SearchResponseDTO.empty(q, ctx.trace_id)

    orchestrator = await run_in_threadpool(orchestrator_provider)
    # The pipeline blocks on network I/O; keep it off the event loop
    result = await run_in_threadpool(orchestrator.search, q, ctx.trace_id)

    logger.info(
        "Search request served",
        extra=log_extra(ctx.trace_id, fallback=result.is_fallback, source_count=len(result.sources)),
    )
    return SearchResponseDTO.from_answer_result(q, normalize(q), result, ctx.trace_id)
