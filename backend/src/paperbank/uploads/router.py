"""Upload API endpoint for PaperBank

POST /papers/upload accepts multipart/form-data with one PDF and its
descriptive fields. The paper is stored in object storage and registered as
pending; it becomes public only after an admin approves it.
"""

import json
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError

from ..auth.dependencies import CurrentActor
from ..dependencies import AppSettings, BlobStore, DbSession, Registry
from ..documents.schemas import DocumentResponse
from ..domain.documents.errors import DocumentValidationError
from ..domain.documents.validation import (
    PaperSubmission,
    is_supported_mime_type,
    normalize_tags,
    validate_file_size,
)
from .pipeline import log_orphan_blob, submit_document
from .schemas import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/papers", tags=["Uploads"])


def parse_tags(raw: Optional[str]) -> List[str]:
    """Parse the tags form field.

    Accepts a JSON array of strings or a comma-separated list.

    Example:
        >>> parse_tags('["graphs", "trees"]')
        ['graphs', 'trees']
        >>> parse_tags('graphs, trees')
        ['graphs', 'trees']
    """
    if not raw or not raw.strip():
        return []

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = raw.split(",")

    if isinstance(parsed, str):
        parsed = [parsed]
    if not isinstance(parsed, list):
        raise DocumentValidationError("Tags must be a list of strings", fields=["tags"])

    return normalize_tags(str(tag) for tag in parsed)


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_paper(
    actor: CurrentActor,
    registry: Registry,
    storage: BlobStore,
    db: DbSession,
    settings: AppSettings,
    file: Annotated[Optional[UploadFile], File()] = None,
    title: Annotated[str, Form()] = "",
    subject: Annotated[str, Form()] = "",
    class_name: Annotated[str, Form(alias="class")] = "",
    semester: Annotated[str, Form()] = "",
    year: Annotated[str, Form()] = "",
    exam_type: Annotated[str, Form()] = "",
    tags: Annotated[Optional[str], Form()] = None,
):
    """Submit a paper for moderation.

    Validation:
    - File type must be application/pdf
    - File size up to MAX_UPLOAD_SIZE_BYTES (8 MB by default)
    - At most MAX_TAGS_PER_DOCUMENT tags
    - title, subject, class, semester, year and exam_type are required

    Example:
        curl -X POST https://paperbank.example.edu/api/papers/upload \\
             -H "Authorization: Bearer $TOKEN" \\
             -F "file=@ds_final.pdf" -F "title=Data Structures Final 2024" \\
             -F "subject=Data Structures" -F "class=BSc CS" -F "semester=3" \\
             -F "year=2024" -F "exam_type=final" -F 'tags=["trees","graphs"]'
    """
    payload = b""
    content_type = "application/pdf"

    if file is not None:
        if not is_supported_mime_type(file.content_type):
            raise DocumentValidationError(
                f"Unsupported file type: {file.content_type}. Only PDF files are allowed",
                fields=["file"],
            )

        payload = await file.read()
        content_type = file.content_type

        if payload:
            is_valid, error_msg = validate_file_size(len(payload), settings.MAX_UPLOAD_SIZE_BYTES)
            if not is_valid:
                raise DocumentValidationError(error_msg, fields=["file"])

    tag_list = parse_tags(tags)
    if len(tag_list) > settings.MAX_TAGS_PER_DOCUMENT:
        raise DocumentValidationError(
            f"At most {settings.MAX_TAGS_PER_DOCUMENT} tags are allowed",
            fields=["tags"],
        )

    submission = PaperSubmission(
        title=title,
        subject=subject,
        class_name=class_name,
        semester=semester,
        year=year,
        exam_type=exam_type,
        tags=tag_list,
    )

    document = await submit_document(
        registry,
        storage,
        actor,
        submission,
        payload,
        content_type,
        key_prefix=settings.STORAGE_KEY_PREFIX,
    )

    storage_key = document.file_name
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log_orphan_blob(storage_key, actor, reason="commit failed")
        raise

    db.refresh(document)
    return UploadResponse(paper=DocumentResponse.model_validate(document))
