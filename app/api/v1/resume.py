import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from app.core.config import settings
from app.core.security import current_user_id, require_api_key
from app.parsing.parse import SUPPORTED_EXTENSIONS, parse_resume_file, resume_extension
from app.schemas.users import ResumeAnalysisResponse, ResumeHistoryResponse
from app.services import resume_service
from app.services.errors import CareerServiceError
from app.api.v1.errors import raise_http_error

router = APIRouter(dependencies=[Depends(require_api_key)])
logger = logging.getLogger(__name__)

UPLOAD_CHUNK_BYTES = 1024 * 64


async def _read_limited(upload: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Max {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def _extract_upload_text(upload: UploadFile) -> str:
    if resume_extension(upload.filename) not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only .pdf, .docx, .txt and .md files are allowed.",
        )

    content = await _read_limited(upload)
    try:
        parsed = parse_resume_file(upload.filename, content)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if parsed.parsing_warnings:
        logger.warning(
            json.dumps(
                {
                    "event": "resume_upload_warning",
                    "filename": upload.filename,
                    "warnings": parsed.parsing_warnings,
                }
            )
        )
    return parsed.text


@router.post("/resume/analyze", response_model=ResumeAnalysisResponse)
async def analyze_resume(
    resume_text: str = Form(default=""),
    resume: UploadFile | None = File(default=None),
    user_id: str | None = Depends(current_user_id),
):
    try:
        resume_service.check_scan_allowance(user_id)
    except CareerServiceError as exc:
        raise_http_error(exc)

    text = (resume_text or "").strip()
    if not text and resume is not None:
        text = await _extract_upload_text(resume)

    try:
        return await resume_service.analyze_for_user(user_id, text)
    except CareerServiceError as exc:
        raise_http_error(exc)


@router.get("/resume/history", response_model=ResumeHistoryResponse)
def resume_history(user_id: str | None = Depends(current_user_id)):
    try:
        return resume_service.history(user_id)
    except CareerServiceError as exc:
        raise_http_error(exc)
