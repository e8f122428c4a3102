"""
Review Routes - one dry-run/apply endpoint per review rule.

Every endpoint accepts the same body (dryRun, statuses, sessionRange) and
returns either a dry-run report (counts + samples) or an apply report
(successCount / errorCount / totalProcessed). Read failures return
HTTP 500 with {"success": false, "error": ...}; individual write failures
only show up in errorCount.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config import settings
from infrastructure.record_store import OracleRecordStore, RecordStore
from middleware.rate_limit import limiter
from models.review_models import (
    ReviewFailureResponse,
    ReviewRequest,
    ReviewRulesResponse,
    TextReplaceRequest,
)
from services.corpus_reader import CorpusReadError
from services.review_rules.registry import build_rule, describe_rules
from services.review_service import ReviewRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/review", tags=["Review"])

_FAILURE_RESPONSES = {500: {"model": ReviewFailureResponse}}


def get_record_store() -> RecordStore:
    return OracleRecordStore()


def get_review_runner(store: RecordStore = Depends(get_record_store)) -> ReviewRunner:
    return ReviewRunner(store)


def _failure(error: str, details: Optional[Dict[str, Any]] = None, status_code: int = 500) -> JSONResponse:
    body = ReviewFailureResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def _run_review(rule_name: str, payload: Optional[ReviewRequest], runner: ReviewRunner, **params):
    payload = payload or ReviewRequest()
    try:
        rule = build_rule(rule_name, **params)
        report = await runner.run(rule, payload.to_scope(), dry_run=payload.dry_run)
        return report.to_response()
    except CorpusReadError as e:
        logger.error(f"review {rule_name} aborted: {e}")
        return _failure(str(e), {"table": e.table.value, "offset": e.offset})
    except Exception as e:
        logger.error(f"review {rule_name} failed: {e}", exc_info=True)
        return _failure(str(e))


@router.get("/rules", response_model=ReviewRulesResponse)
async def list_review_rules():
    return {"success": True, "rules": describe_rules()}


@router.post("/explanation-citations", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_explanation_citations(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("explanation-citations", payload, runner)


@router.post("/answer-options", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_answer_options(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("answer-options", payload, runner)


@router.post("/double-quotes", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_double_quotes(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("double-quotes", payload, runner)


@router.post("/explanation-quotes", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_explanation_quotes(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("explanation-quotes", payload, runner)


@router.post("/sentence-endings", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_sentence_endings(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("sentence-endings", payload, runner)


@router.post("/terminal-periods", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_terminal_periods(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("terminal-periods", payload, runner)


@router.post("/example-commas", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_example_commas(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("example-commas", payload, runner)


@router.post("/vocabulary-mismatch", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_vocabulary_mismatch(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("vocabulary-mismatch", payload, runner)


@router.post("/question-flags", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_question_flags(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("question-flags", payload, runner)


@router.post("/text-replace", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_text_replace(
    request: Request,
    payload: TextReplaceRequest,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review(
        "text-replace",
        payload,
        runner,
        search_text=payload.search_text,
        replace_text=payload.replace_text,
    )


@router.post("/example-sentences", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_example_sentences(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("example-sentences", payload, runner)


@router.post("/short-option-periods", responses=_FAILURE_RESPONSES)
@limiter.limit(settings.RATE_LIMIT_REVIEW)
async def review_short_option_periods(
    request: Request,
    payload: Optional[ReviewRequest] = None,
    runner: ReviewRunner = Depends(get_review_runner),
):
    return await _run_review("short-option-periods", payload, runner)
