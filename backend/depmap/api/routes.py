from fastapi import APIRouter, File, HTTPException, UploadFile

from depmap.api.serializers import serialize
from depmap.api.session_store import get_session_store
from depmap.config import CLOSURE_MAX_DEPTH, MAX_UPLOAD_MB
from depmap.graph.builder import build_graph
from depmap.graph.query import search
from depmap.pipeline.controller import PipelineController
from depmap.planning.scheduler import schedule_waves
from depmap.renderer.mermaid import render_dependency_mermaid
from depmap.schemas import SearchRequest, WavesRequest
from depmap.sheets.loader import load_sheets

router = APIRouter(
    prefix="/dependencies",
    tags=["dependencies"],
)


def _session_or_404(session_id: str):
    extraction = get_session_store().get(session_id)
    if extraction is None:
        raise HTTPException(
            status_code=404,
            detail="Session not found. Please upload the file again.",
        )
    return extraction


# ============================================================
# UPLOAD - decode, extract, build graph
# ============================================================

@router.post("/upload")
def upload_dependency_file(file: UploadFile = File(...)):
    limit = MAX_UPLOAD_MB * 1024 * 1024
    # one byte past the limit is enough to reject the upload
    content = file.file.read(limit + 1)

    if len(content) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {MAX_UPLOAD_MB} MB upload limit",
        )

    try:
        sheets = load_sheets(file.filename, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    context = PipelineController().run(sheets, schedule=False)

    if not context.ok:
        # zero valid records: the user has to fix the file
        raise HTTPException(status_code=422, detail=" ".join(context.error_messages()))

    session_id = get_session_store().put(context.extraction)
    print(f"[Routes] Session {session_id}: {context.extraction.summary}")

    return {
        "status": "success",
        "data": {
            "sessionId": session_id,
            **serialize(context.extraction),
            "graph": serialize(context.graph),
        },
    }


# ============================================================
# SEARCH - direct + bounded transitive neighbourhood
# ============================================================

@router.post("/search")
def search_dependencies(request: SearchRequest):
    if not request.search_term.strip():
        raise HTTPException(status_code=400, detail="searchTerm must not be empty")

    extraction = _session_or_404(request.session_id)
    max_depth = request.max_depth if request.max_depth is not None else CLOSURE_MAX_DEPTH

    result = search(extraction.records, request.search_term, max_depth=max_depth)

    if result is None:
        return {
            "status": "success",
            "data": None,
            "message": "No results found",
        }

    return {
        "status": "success",
        "data": serialize(result),
    }


# ============================================================
# WAVES - migration sequencing
# ============================================================

@router.post("/waves")
def plan_waves(request: WavesRequest):
    extraction = _session_or_404(request.session_id)
    schedule = schedule_waves(extraction.records)

    response = {
        "status": "success",
        "data": serialize(schedule),
    }

    if request.include_mermaid:
        graph = build_graph(extraction.records)
        response["mermaid"] = render_dependency_mermaid(graph, schedule)

    return response


@router.get("/graph/{session_id}/mermaid")
def graph_mermaid(session_id: str, waves: bool = False):
    extraction = _session_or_404(session_id)
    graph = build_graph(extraction.records)
    schedule = schedule_waves(extraction.records) if waves else None

    return {
        "status": "success",
        "mermaid": render_dependency_mermaid(graph, schedule),
    }
