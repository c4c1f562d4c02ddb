# AI Assistant Feature - Schemas

from typing import List, Optional
from pydantic import BaseModel, Field

from app.features.assistant.models import HealthInsight


class InsightListResponse(BaseModel):
    insights: List[HealthInsight]
    language: str


class ChatRequest(BaseModel):
    """Question about the user's records, optionally scoped to one family member."""
    message: str = Field(..., min_length=1)
    family_member_id: Optional[str] = None


class VisitSummaryRequest(BaseModel):
    family_member_id: Optional[str] = None


class TranslateRequest(BaseModel):
    text: str
    language: str = Field(..., min_length=1)


class TextResponse(BaseModel):
    """Markdown or plain text produced by the assistant."""
    content: str
