import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, File, Form, HTTPException, Query, Request, UploadFile, status

from app.analysis import get_default_engine
from app.core.config import settings
from app.core.errors import ATSCheckerError, RequestValidationFailed, UnsupportedFormatError
from app.core.rate_limit import rate_limit
from app.parsing.parse import parse_document, source_type_for
from app.schemas.analysis import AnalysisRecord, AnalyzeResponse, AnalyzeTextRequest, AtsResult, HistoryItem
from app.storage import analysis_store

router = APIRouter()
logger = logging.getLogger(__name__)

INVALID_FILE_TYPE_MESSAGE = "Invalid file type. Only PDF, DOC, DOCX, and TXT files are allowed."


def _raise_checker_error(exc: ATSCheckerError) -> None:
    if exc.status_code >= 500:
        logger.exception("resume_request_failed status=%s", exc.status_code)
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def _require_job_description(job_description: str | None) -> str:
    if not job_description or not job_description.strip():
        raise RequestValidationFailed("Job description is required")
    return job_description


def _validate_upload(resume: UploadFile | None) -> tuple[UploadFile, str]:
    if resume is None or not resume.filename:
        raise RequestValidationFailed("No resume file uploaded")
    try:
        extension = source_type_for(resume.filename)
    except UnsupportedFormatError as exc:
        raise UnsupportedFormatError(INVALID_FILE_TYPE_MESSAGE) from exc
    return resume, extension


async def _read_limited(resume: UploadFile) -> bytes:
    content = await resume.read(settings.upload_max_bytes + 1)
    if len(content) > settings.upload_max_bytes:
        raise RequestValidationFailed(
            f"File too large. Maximum size is {settings.upload_max_bytes // (1024 * 1024)} MB.",
            status_code=413,
        )
    return content


def _extract_resume_text(content: bytes, extension: str) -> tuple[str, str]:
    uploads_dir = Path(settings.uploads_dir)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4()}.{extension}"
    upload_path = uploads_dir / stored_name
    upload_path.write_bytes(content)
    try:
        parsed = parse_document(upload_path)
    finally:
        upload_path.unlink(missing_ok=True)

    for warning in parsed.parsing_warnings:
        logger.info("resume_parse_warning file=%s: %s", stored_name, warning)
    return stored_name, parsed.text


def _persist(*, filename: str, original_name: str, resume_text: str, job_description: str, result: AtsResult) -> AnalyzeResponse:
    record = analysis_store.save_analysis(
        filename=filename,
        original_name=original_name,
        resume_text=resume_text,
        job_description=job_description,
        result=result,
    )
    logger.info(
        "resume_analyzed id=%s ats_score=%s keyword_density=%s formatting_score=%s",
        record.id,
        result.ats_score,
        result.keyword_analysis.keyword_density,
        result.formatting_analysis.score,
    )
    return AnalyzeResponse(id=record.id, **dict(result))


@router.post("/resume/analyze", response_model=AnalyzeResponse)
@rate_limit()
async def analyze_resume(
    request: Request,
    resume: UploadFile | None = File(default=None),
    job_description: str | None = Form(default=None, alias="jobDescription"),
):
    _ = request
    try:
        upload, extension = _validate_upload(resume)
        job_text = _require_job_description(job_description)
        content = await _read_limited(upload)
        stored_name, resume_text = _extract_resume_text(content, extension)
        result = get_default_engine().analyze(resume_text, job_text)
        return _persist(
            filename=stored_name,
            original_name=upload.filename or stored_name,
            resume_text=resume_text,
            job_description=job_text,
            result=result,
        )
    except ATSCheckerError as exc:
        _raise_checker_error(exc)


@router.post("/resume/analyze-text", response_model=AnalyzeResponse)
@rate_limit()
async def analyze_resume_text(request: Request, payload: AnalyzeTextRequest):
    _ = request
    try:
        job_text = _require_job_description(payload.job_description)
        result = get_default_engine().analyze(payload.resume_text, job_text)
        return _persist(
            filename="text",
            original_name=payload.original_name,
            resume_text=payload.resume_text,
            job_description=job_text,
            result=result,
        )
    except ATSCheckerError as exc:
        _raise_checker_error(exc)


@router.get("/resume/history", response_model=list[HistoryItem])
async def analysis_history(limit: int = Query(default=settings.history_limit, ge=1, le=50)):
    try:
        return analysis_store.list_history(limit=limit)
    except ATSCheckerError as exc:
        _raise_checker_error(exc)


@router.get("/resume/{analysis_id}", response_model=AnalysisRecord)
async def get_analysis(analysis_id: str):
    try:
        record = analysis_store.get_analysis(analysis_id)
    except ATSCheckerError as exc:
        _raise_checker_error(exc)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return record
