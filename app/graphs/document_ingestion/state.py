"""LangGraph state schema for the document ingestion workflow."""

from typing import Any, Dict, Optional, TypedDict

from pydantic import BaseModel

from app.features.family.models import FamilyMember
from app.services.document_reader import DocumentContent, UploadedFile


class DocumentIngestionState(TypedDict, total=False):
    """State schema for the document ingestion workflow."""

    # Input - provided when starting the workflow
    upload: UploadedFile
    family_member_id: str
    owner_id: str

    # Resolved target member
    family_member: FamilyMember

    # Reader output
    content: DocumentContent

    # Raw AI output, normalized in place by later nodes
    extracted: Dict[str, Any]

    # Committed record (a HealthDocument variant)
    document: Optional[BaseModel]
