# Health Documents Feature - Router

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.config import settings
from app.core.logging import logger
from app.dependencies import get_document_service, get_ingestion_pipeline
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.documents.models import DocumentType
from app.features.documents.schemas import DocumentListResponse, UpdateClaimStatusRequest
from app.features.documents.service import DocumentIngestionPipeline, DocumentService
from app.services.document_reader import UploadedFile
from app.shared.exceptions import BadRequestException, ExtractionFailedException


router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    family_member_id: str = Form(...),
    current_user: AuthenticatedUser = Depends(get_current_user),
    pipeline: DocumentIngestionPipeline = Depends(get_ingestion_pipeline),
):
    """
    Upload a medical document for a family member.

    The file is read by the AI and stored as a structured record.

    - **file**: PDF, image (PNG, JPG, WEBP, GIF) or plain text
    - **family_member_id**: Family member the document belongs to
    """
    if not file.filename:
        raise BadRequestException("No file provided")

    if file.size is not None and file.size > settings.MAX_UPLOAD_BYTES:
        raise ExtractionFailedException("The uploaded file is too large")

    # Read at most one byte past the limit
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ExtractionFailedException("The uploaded file is too large")
    logger.info(f"Upload {file.filename} ({len(data)} bytes) for family member {family_member_id}")

    upload = UploadedFile(file_name=file.filename, content_type=file.content_type, data=data)
    return await pipeline.ingest(upload, family_member_id, current_user.id)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    family_member_id: Optional[str] = None,
    document_type: Optional[DocumentType] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """
    List documents, newest first by the date on the document.

    - **family_member_id**: Only this family member's documents
    - **document_type**: Only documents of this type, e.g. "Receipt"
    """
    documents = await service.list_documents(
        current_user.id,
        family_member_id=family_member_id,
        document_type=document_type,
    )
    return DocumentListResponse(documents=documents, total=len(documents))


@router.get("/{document_id}")
async def get_document(
    document_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    return await service.get_document(current_user.id, document_id)


@router.patch("/{document_id}/claim-status")
async def update_claim_status(
    document_id: str,
    request: UpdateClaimStatusRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    """Set the insurance claim status of a receipt."""
    return await service.update_claim_status(current_user.id, document_id, request.claim_status)
