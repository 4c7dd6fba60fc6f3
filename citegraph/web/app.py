from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import (
    Depends,
    FastAPI,
    File,
    HTTPException,
    Query,
    Request,
    UploadFile,
)
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from citegraph.api.models import (
    CitationContextModel,
    CyclesResult,
    HighlightResult,
    NeighborModel,
    NeighborsResult,
    NodeDetail,
    NodeSummary,
    NodeView,
    StatsResult,
)
from citegraph.config.settings import settings
from citegraph.graph.builder import GraphParseError
from citegraph.graph.export import node_link_payload
from citegraph.graph.filters import FilterCriteria, evaluate_filters
from citegraph.graph.neighbors import (
    citation_contexts,
    group_neighbors,
    paper_authors,
    resolve_neighbors,
)
from citegraph.graph.stats import graph_stats, list_results
from citegraph.session import GraphSession, GraphSnapshot, NoGraphLoadedError

logger = logging.getLogger("citegraph.web")
logging.basicConfig(level=settings.LOG_LEVEL.upper())

LOAD_FAILED_DETAIL = "Failed to parse the graph document. Please check the file format."


# -------------------------------------------------------------------
# Lifespan: optionally preload a graph at startup
# -------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup/shutdown handler:
    - Create an empty session
    - Load settings.GRAPH_FILE into it when configured
    """
    session = GraphSession()

    if settings.GRAPH_FILE is not None:
        try:
            session.load_file(settings.GRAPH_FILE)
        except GraphParseError:
            logger.exception(
                "Failed to load %s at startup; starting without a graph",
                settings.GRAPH_FILE,
            )
    else:
        logger.info("No GRAPH_FILE configured; waiting for an upload")

    app.state.session = session

    yield


app = FastAPI(
    title="Citation Graph Explorer API",
    description="Load a citation graph and query cycles, filters and neighbors.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log method, path, and response status.
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")
    start = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    logger.info(
        f"Completed {request.method} {request.url.path} "
        f"with status {response.status_code} in {duration_ms:.2f}ms"
    )

    return response


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------


def _get_session(app_obj: FastAPI) -> GraphSession:
    """
    Fetch the session from app.state, initializing if needed.
    """
    session = getattr(app_obj.state, "session", None)
    if session is None:
        session = GraphSession()
        app_obj.state.session = session
    return session


def _require_snapshot(request: Request) -> GraphSnapshot:
    try:
        return _get_session(request.app).require_snapshot()
    except NoGraphLoadedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def filter_query(
    search_term: str = Query("", alias="searchTerm"),
    node_type: str = Query("all", alias="nodeType"),
    min_year: Optional[int] = Query(None, alias="minYear"),
    author_name: str = Query("", alias="authorName"),
    fields_of_study: str = Query("", alias="fieldsOfStudy"),
    is_open_access: bool = Query(False, alias="isOpenAccess"),
) -> FilterCriteria:
    """
    Build FilterCriteria from query parameters (same camelCase names as the
    POST /filter body).
    """
    try:
        return FilterCriteria(
            search_term=search_term,
            node_type=node_type,
            min_year=min_year,
            author_name=author_name,
            fields_of_study=fields_of_study,
            is_open_access=is_open_access,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


UPLOAD_CHUNK_BYTES = 64 * 1024


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=f"Graph document exceeds {settings.MAX_UPLOAD_BYTES} bytes.",
    )


async def _read_upload(request: Request, file: UploadFile) -> bytes:
    """
    Read an uploaded document, giving up with 413 as soon as it passes
    settings.MAX_UPLOAD_BYTES.
    """
    limit = settings.MAX_UPLOAD_BYTES

    declared = request.headers.get("content-length")
    # the multipart body always carries some framing on top of the file
    if declared and declared.isdigit() and int(declared) > limit + UPLOAD_CHUNK_BYTES:
        raise _too_large()

    chunks: List[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise _too_large()
        chunks.append(chunk)
    return b"".join(chunks)


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------


@app.get("/health", summary="Health check")
async def health(request: Request) -> dict:
    return {
        "status": "ok",
        "graph_loaded": _get_session(request.app).snapshot is not None,
    }


@app.post(
    "/graph",
    response_model=StatsResult,
    summary="Upload a JSON graph document and make it the current graph",
)
async def upload_graph(
    request: Request,
    file: UploadFile = File(..., description="JSON document with 'nodes' and 'edges'"),
) -> StatsResult:
    """
    Parse and analyze an uploaded document.

    On failure the previously loaded graph (if any) stays current and a
    generic 400 is returned; the cause is only logged.
    """
    session = _get_session(request.app)

    content = await _read_upload(request, file)

    try:
        snapshot = await run_in_threadpool(session.load, content, file.filename)
    except GraphParseError as exc:
        logger.exception("Rejected upload %r", file.filename)
        raise HTTPException(status_code=400, detail=LOAD_FAILED_DETAIL) from exc

    return StatsResult.from_stats(graph_stats(snapshot.graph, snapshot.cycles))


@app.get("/graph", summary="Node-link document for the renderer")
async def get_graph(
    request: Request,
    criteria: FilterCriteria = Depends(filter_query),
) -> Dict[str, Any]:
    snapshot = _require_snapshot(request)
    highlighted = () if criteria.is_default() else evaluate_filters(snapshot.graph, criteria)
    return node_link_payload(snapshot.graph, highlighted, snapshot.cycles)


@app.get("/stats", response_model=StatsResult, summary="Headline graph statistics")
async def get_stats(request: Request) -> StatsResult:
    snapshot = _require_snapshot(request)
    return StatsResult.from_stats(graph_stats(snapshot.graph, snapshot.cycles))


@app.get("/cycles", response_model=CyclesResult, summary="Citation cycles")
async def get_cycles(request: Request) -> CyclesResult:
    snapshot = _require_snapshot(request)
    return CyclesResult(
        count=len(snapshot.cycles),
        cycles=[list(cycle) for cycle in snapshot.cycles],
    )


@app.post(
    "/filter",
    response_model=HighlightResult,
    summary="Evaluate filter criteria and return the highlighted node ids",
)
async def apply_filter(criteria: FilterCriteria, request: Request) -> HighlightResult:
    snapshot = _require_snapshot(request)
    highlighted = evaluate_filters(snapshot.graph, criteria)
    return HighlightResult(count=len(highlighted), node_ids=sorted(highlighted))


@app.get(
    "/nodes",
    response_model=List[NodeSummary],
    summary="Ordered result list, optionally restricted by filters",
)
async def list_nodes(
    request: Request,
    criteria: FilterCriteria = Depends(filter_query),
    limit: int = Query(settings.RESULT_LIMIT, ge=1),
) -> List[NodeSummary]:
    snapshot = _require_snapshot(request)

    highlighted = None
    if not criteria.is_default():
        highlighted = evaluate_filters(snapshot.graph, criteria)

    nodes = list_results(snapshot.graph, highlighted)
    return [NodeSummary.from_node(n) for n in nodes[:limit]]


@app.get(
    "/nodes/{node_id:path}/neighbors",
    response_model=NeighborsResult,
    summary="Nodes connected to a node, grouped by relationship",
)
async def get_neighbors(node_id: str, request: Request) -> NeighborsResult:
    snapshot = _require_snapshot(request)
    if node_id not in snapshot.graph:
        raise HTTPException(status_code=404, detail=f"Node {node_id} not found")

    neighbors = resolve_neighbors(snapshot.graph, node_id)
    grouped = group_neighbors(neighbors)

    return NeighborsResult(
        node_id=node_id,
        count=len(neighbors),
        groups={
            rel.value: [NeighborModel.from_neighbor(n) for n in items]
            for rel, items in grouped.items()
        },
    )


@app.get(
    "/nodes/{node_id:path}",
    response_model=NodeView,
    summary="Details of a single node",
)
async def get_node(node_id: str, request: Request) -> NodeView:
    snapshot = _require_snapshot(request)
    node = snapshot.graph.lookup(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node {node_id} not found")

    return NodeView(
        node=NodeDetail.from_node(node),
        authors=[NodeSummary.from_node(a) for a in paper_authors(snapshot.graph, node_id)],
        citation_contexts=[
            CitationContextModel.from_context(c)
            for c in citation_contexts(snapshot.graph, node_id)
        ],
    )
