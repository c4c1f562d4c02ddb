# AI Assistant Feature - Router

from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies import get_assistant_service, get_document_service
from app.features.assistant.schemas import (
    ChatRequest,
    InsightListResponse,
    TextResponse,
    TranslateRequest,
    VisitSummaryRequest,
)
from app.features.assistant.service import DEFAULT_LANGUAGE, AssistantService
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.documents.service import DocumentService


router = APIRouter(prefix="/assistant", tags=["AI Assistant"])


@router.get("/insights", response_model=InsightListResponse)
async def get_insights(
    family_member_id: Optional[str] = None,
    language: str = DEFAULT_LANGUAGE,
    current_user: AuthenticatedUser = Depends(get_current_user),
    documents: DocumentService = Depends(get_document_service),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """
    Proactive insights over the user's documents.

    - **family_member_id**: Only this family member's documents
    - **language**: Translate the insights (default English)
    """
    docs = await documents.list_documents(current_user.id, family_member_id=family_member_id)
    insights = await assistant.health_insights(docs, language=language)
    return InsightListResponse(insights=insights, language=language)


@router.post("/chat", response_model=TextResponse)
async def chat(
    request: ChatRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    documents: DocumentService = Depends(get_document_service),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Answer a question grounded in the user's documents."""
    docs = await documents.list_documents(current_user.id, family_member_id=request.family_member_id)
    return TextResponse(content=await assistant.chat(request.message, docs))


@router.post("/visit-summary", response_model=TextResponse)
async def visit_summary(
    request: VisitSummaryRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    documents: DocumentService = Depends(get_document_service),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Pre-visit briefing for a doctor, in markdown."""
    docs = await documents.list_documents(current_user.id, family_member_id=request.family_member_id)
    return TextResponse(content=await assistant.visit_summary(docs))


@router.post("/translate", response_model=TextResponse)
async def translate(
    request: TranslateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    return TextResponse(content=await assistant.translate(request.text, request.language))
