# Insurance Co-Pilot Feature - Schemas

from typing import List
from pydantic import BaseModel

from app.features.documents.models import ReceiptDocument


class BillListResponse(BaseModel):
    bills: List[ReceiptDocument]
    total: int


class BillAnalysisResponse(BaseModel):
    document_id: str
    content: str  # Markdown
