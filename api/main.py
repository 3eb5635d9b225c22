import json
import logging
from typing import Any, Dict

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from fairchance.forms import FormValidationError
from fairchance.settings import API_DEBUG, LOG_LEVEL
from fairchance.stages import NoticeSendError, SendInProgressError
from fairchance.store import FormStore
from fairchance.workflow import VIEWS
from .deps import WorkflowRegistry, get_registry, get_settings, get_store

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fair Chance API",
    version="0.1.0",
    description="HTTP layer over the fair-chance hiring workflow: assessment, notices, reassessment.",
    debug=API_DEBUG,
)

# --- CORS ----------------------------------------------------------
# Dev-only origins for the front-end dev servers.
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


# ---------- error mapping ----------
@app.exception_handler(FormValidationError)
async def form_invalid(request: Request, exc: FormValidationError):
    return JSONResponse(status_code=422, content={"detail": "Form is invalid", "errors": exc.errors})


@app.exception_handler(SendInProgressError)
async def send_pending(request: Request, exc: SendInProgressError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(NoticeSendError)
async def send_failed(request: Request, exc: NoticeSendError):
    logger.warning(f"Notice delivery failed: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def action_unavailable(request: Request, exc: ValueError):
    # illegal transitions and actions outside their phase
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# ---------- health-check ----------
@app.get("/")
def root(settings=Depends(get_settings)):
    return {
        "status": "ok",
        "msg": "Fair Chance API is alive",
        "minResponseDays": settings.min_response_days,
    }


# every page of the front end; only the guided ones have a flow entry point
PAGES = (
    "overview",
    "assessment",
    "preliminary-notice",
    "reassessment",
    "final-decision",
    "legal-overview",
    "complaint-process",
)


@app.get("/views")
def list_views():
    return [{"name": page, "guided": page in VIEWS} for page in PAGES]


# ---------- stored case records ----------
@app.get("/cases")
def list_cases(store: FormStore = Depends(get_store)):
    return sorted(store)


@app.get("/cases/{case_id}")
def get_case(case_id: str, store: FormStore = Depends(get_store)):
    record = store.load(case_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Case not found")
    return record.to_json_dict()


@app.delete("/cases/{case_id}", status_code=204)
def clear_case(
    case_id: str,
    store: FormStore = Depends(get_store),
    registry: WorkflowRegistry = Depends(get_registry),
):
    """Start over: forget the stored record and the live flow."""
    store.clear(case_id)
    registry.drop(case_id)
    return Response(status_code=204)


# ---------- guided flow ----------
@app.get("/flow/{case_id}")
def flow_state(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    return registry.get(case_id).snapshot()


@app.post("/flow/{case_id}/start")
def flow_start(
    case_id: str,
    view: str = Query("assessment", description="Entry view of the flow"),
    registry: WorkflowRegistry = Depends(get_registry),
):
    if view not in VIEWS:
        raise HTTPException(status_code=404, detail=f"Unknown view {view!r}")
    wf = registry.get(case_id)
    wf.start(view)
    return wf.snapshot()


@app.post("/flow/{case_id}/submit")
def flow_submit(
    case_id: str,
    data: Dict[str, Any] = Body(...),
    registry: WorkflowRegistry = Depends(get_registry),
):
    wf = registry.get(case_id)
    wf.submit(data)
    return wf.snapshot()


@app.post("/flow/{case_id}/draft")
def flow_draft(
    case_id: str,
    data: Dict[str, Any] = Body(...),
    registry: WorkflowRegistry = Depends(get_registry),
):
    wf = registry.get(case_id)
    wf.save_draft(data)
    return wf.snapshot()


@app.post("/flow/{case_id}/edit")
def flow_edit(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    wf = registry.get(case_id)
    wf.edit()
    return wf.snapshot()


@app.post("/flow/{case_id}/back")
def flow_back(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    wf = registry.get(case_id)
    wf.back()
    return wf.snapshot()


@app.post("/flow/{case_id}/send")
async def flow_send(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    wf = registry.get(case_id)
    await wf.send()
    return wf.snapshot()


@app.post("/flow/{case_id}/response")
def flow_view_response(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    wf = registry.get(case_id)
    wf.view_response()
    return wf.snapshot()


@app.get("/flow/{case_id}/summary")
def flow_summary(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    summary = registry.get(case_id).summary()
    for key in ("activities", "evidence"):
        summary[key] = [{"label": label, "value": value} for label, value in summary[key]]
    return summary


@app.get("/flow/{case_id}/letter", response_class=PlainTextResponse)
def flow_letter(case_id: str, registry: WorkflowRegistry = Depends(get_registry)):
    return registry.get(case_id).letter()


@app.get("/flow/{case_id}/countdown")
def flow_countdown(
    case_id: str,
    accuracy_challenged: bool = Query(False, alias="accuracyChallenged"),
    registry: WorkflowRegistry = Depends(get_registry),
):
    return registry.get(case_id).countdown(accuracy_challenged).as_dict()


# ---------- GET /flow/{case_id}/countdown/stream ----------
@app.get("/flow/{case_id}/countdown/stream")
async def flow_countdown_stream(
    case_id: str,
    accuracy_challenged: bool = Query(False, alias="accuracyChallenged"),
    registry: WorkflowRegistry = Depends(get_registry),
):
    """
    Server-sent events: one ``tick`` per interval until the window closes,
    then a final ``expired`` event.  Disconnecting stops the schedule.
    """
    ticks = registry.get(case_id).ticks(accuracy_challenged)

    async def event_stream():
        async for view in ticks:
            kind = "expired" if view.expired else "tick"
            yield f"data: {json.dumps({'type': kind, 'content': view.as_dict()})}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")
