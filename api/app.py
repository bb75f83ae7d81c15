from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging, os, typing as t

# ---- Engine imports ----
from placement_core.config import load_config
from placement_core.engine import evaluate
from placement_core.export import mistakes_csv, review_csv, to_json
from placement_core.question_bank import load_bank
from placement_core.remediation import build_library
from placement_core.report_html import render_report_html
from placement_core.types import EvaluationResult, QuestionItem, QuestionSet
from placement_core.validators import QuestionSetError

log = logging.getLogger(__name__)

CFG = load_config()
LIBRARY = build_library(CFG.get("PRESCRIPTIONS"))
try:
    QUESTIONS: QuestionSet | None = load_bank(CFG.get("QUESTION_SET_PATH"))
    LOAD_ERROR: str | None = None
except QuestionSetError as e:
    log.error("question set not loaded: %s", e)
    QUESTIONS, LOAD_ERROR = None, str(e)

app = FastAPI(title="Placement Engine API")

@app.get("/")
def root():
    return {"status": "ok", "service": "placement-engine"}

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class EvaluateReq(BaseModel):
    answers: dict[str, str | list[str] | None] = Field(default_factory=dict)
    top_n: int | None = Field(default=None, ge=1)
    candidate: str | None = None

# ---- Helpers ----
def _questions() -> QuestionSet:
    if QUESTIONS is None:
        raise HTTPException(422, LOAD_ERROR or "question set not loaded")
    return QUESTIONS

def _run(req: EvaluateReq) -> EvaluationResult:
    qs = _questions()
    top_n = req.top_n if req.top_n is not None else CFG.get("REVIEW_TOP_N")
    return evaluate(qs, req.answers, top_n=top_n, library=LIBRARY)

def _serialize_item(it: QuestionItem) -> dict[str, t.Any]:
    return {
        "id": it.id,
        "type": it.type,
        "skill": it.skill,
        "level_hint": it.level_hint,
        "prompt": it.prompt,
        "passage": it.passage,
        "options": list(it.options) if it.options else None,
        "tts_text": it.tts_text,
        "blanks": it.blank_count,
    }

# ---- Health ----
@app.get("/health")
def health():
    return {
        "question_set": QUESTIONS.title if QUESTIONS else None,
        "items": len(QUESTIONS.items) if QUESTIONS else 0,
        "error": LOAD_ERROR,
    }

@app.get("/questions")
def questions():
    qs = _questions()
    return {
        "title": qs.title,
        "sections": [
            {"title": sec.title, "items": [_serialize_item(it) for it in sec.items]}
            for sec in qs.sections
        ],
    }

@app.post("/evaluate")
def evaluate_endpoint(req: EvaluateReq):
    return _run(req).to_dict()

@app.post("/evaluate/export.json")
def export_json(req: EvaluateReq):
    return to_json(_run(req))

@app.post("/evaluate/report.html")
def report_html(req: EvaluateReq):
    return {"html": render_report_html(_run(req), candidate=req.candidate or "Candidate")}

def _csv_response(body: str, name: str) -> Response:
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=\"{name}\""},
    )

@app.post("/evaluate/mistakes.csv")
def export_mistakes(req: EvaluateReq):
    return _csv_response(mistakes_csv(_run(req)), "mistakes.csv")

@app.post("/evaluate/review.csv")
def export_review(req: EvaluateReq):
    return _csv_response(review_csv(_run(req)), "review.csv")
