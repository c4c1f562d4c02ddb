# Health Documents Feature - Schemas

from typing import List
from pydantic import BaseModel

from app.features.documents.models import ClaimStatus, HealthDocument


class DocumentListResponse(BaseModel):
    """Response schema for a list of documents, newest first."""
    documents: List[HealthDocument]
    total: int


class UpdateClaimStatusRequest(BaseModel):
    """Request schema for moving a receipt through the claim workflow."""
    claim_status: ClaimStatus
