"""
Shared dependencies across the application.

Collaborators are built once in the application lifespan and kept on
``app.state``; these functions hand them, or services wrapping them, to the
routers.
"""

from fastapi import Depends, Request

from app.config import settings
from app.features.assistant.service import AssistantService
from app.features.auth.dependencies import get_current_user
from app.features.doctors.service import DoctorAccessService
from app.features.documents.service import DocumentIngestionPipeline, DocumentService
from app.features.family.service import FamilyService
from app.features.insurance.service import InsuranceService
from app.services.ai_client import AIHealthClient
from app.store.base import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_ai_client(request: Request) -> AIHealthClient:
    return request.app.state.ai_client


def get_ingestion_pipeline(request: Request) -> DocumentIngestionPipeline:
    return request.app.state.ingestion_pipeline


def get_document_service(store: RecordStore = Depends(get_store)) -> DocumentService:
    return DocumentService(store)


def get_family_service(store: RecordStore = Depends(get_store)) -> FamilyService:
    return FamilyService(store, avatar_base_url=settings.AVATAR_BASE_URL)


def get_doctor_access_service(request: Request, store: RecordStore = Depends(get_store)) -> DoctorAccessService:
    return DoctorAccessService(
        store,
        public_base_url=settings.PUBLIC_BASE_URL,
        clock=request.app.state.clock,
    )


def get_insurance_service(store: RecordStore = Depends(get_store)) -> InsuranceService:
    return InsuranceService(store)


def get_assistant_service(
    store: RecordStore = Depends(get_store),
    ai_client: AIHealthClient = Depends(get_ai_client),
) -> AssistantService:
    return AssistantService(ai_client, id_generator=store.id_generator)


__all__ = [
    "get_current_user",
    "get_store",
    "get_ai_client",
    "get_ingestion_pipeline",
    "get_document_service",
    "get_family_service",
    "get_doctor_access_service",
    "get_insurance_service",
    "get_assistant_service",
]
