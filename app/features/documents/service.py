# Health Documents Feature - Service

from typing import List, Optional, Union

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.core.time_utils import Clock, utc_now
from app.features.documents.models import ClaimStatus, DocumentType, HealthDocument, ReceiptDocument
from app.features.documents.queries import DocumentQueryService
from app.graphs.document_ingestion import DocumentIngestionNodes, build_document_ingestion_graph
from app.services.ai_client import AIHealthClient
from app.services.document_reader import DocumentReader, UploadedFile
from app.shared.exceptions import BadRequestException, NotFoundException
from app.store.base import RecordKind, RecordStore


class DocumentIngestionPipeline:
    """Upload -> AI extraction -> normalized record committed to the store."""

    def __init__(
        self,
        store: RecordStore,
        ai_client: AIHealthClient,
        reader: Optional[DocumentReader] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Clock = utc_now,
        max_upload_bytes: Optional[int] = None,
    ):
        self.nodes = DocumentIngestionNodes(
            store,
            ai_client,
            reader=reader,
            id_generator=id_generator,
            clock=clock,
            max_upload_bytes=max_upload_bytes,
        )
        self.graph = build_document_ingestion_graph(self.nodes)

    async def ingest(self, upload: UploadedFile, family_member_id: str, owner_id: str) -> HealthDocument:
        """
        Ingest one uploaded file for a family member.

        Raises:
            ExtractionFailedException: the file is unsupported or the AI could not read it
            NotFoundException: the family member does not belong to the owner
        """
        result = await self.graph.ainvoke({
            "upload": upload,
            "family_member_id": family_member_id,
            "owner_id": owner_id,
        })
        return result["document"]


class DocumentService:
    """Reads and claim-status updates for a user's documents."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.queries = DocumentQueryService(store)

    async def list_documents(
        self,
        owner_id: str,
        family_member_id: Optional[str] = None,
        document_type: Optional[Union[DocumentType, str]] = None,
    ) -> List[HealthDocument]:
        return await self.queries.filtered(owner_id, family_member_id=family_member_id, document_type=document_type)

    async def get_document(self, owner_id: str, document_id: str) -> HealthDocument:
        document = await self.store.get(RecordKind.DOCUMENTS, document_id)
        if document is None or document.user_id not in self.store.owner_ids(owner_id):
            raise NotFoundException("Document not found")
        return document

    async def update_claim_status(self, owner_id: str, document_id: str, claim_status: ClaimStatus) -> ReceiptDocument:
        """Move a receipt through the claim workflow. Only receipts carry a claim status."""
        document = await self.get_document(owner_id, document_id)
        if not isinstance(document, ReceiptDocument):
            raise BadRequestException("Claim status can only be set on receipts")

        updated = await self.store.update(RecordKind.DOCUMENTS, document_id, {"claim_status": claim_status})
        logger.info(f"Claim status of {document_id}: {document.claim_status.value} -> {claim_status.value}")
        return updated
