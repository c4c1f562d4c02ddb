# Insurance Co-Pilot Feature - Service

from typing import List, Optional

from app.features.documents.models import DocumentType, ReceiptDocument
from app.features.documents.queries import DocumentQueryService, by_family_member, by_type
from app.features.insurance.models import InsurancePolicy
from app.shared.exceptions import NotFoundException
from app.store.base import RecordKind, RecordStore


class InsuranceService:
    """Policy lookup and the bills shown in the insurance co-pilot."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.queries = DocumentQueryService(store)

    async def get_policy(self, owner_id: str) -> InsurancePolicy:
        """
        The owner's policy, falling back to the shared demo policy.

        Raises:
            NotFoundException: neither exists
        """
        policies = await self.store.list(RecordKind.INSURANCE_POLICIES, {"user_id": owner_id})
        if not policies:
            raise NotFoundException("No insurance policy on file")

        for policy in policies:
            if policy.user_id == owner_id:
                return policy
        return policies[0]

    async def list_bills(self, owner_id: str, family_member_id: Optional[str] = None) -> List[ReceiptDocument]:
        """Receipts, newest first, optionally for a single family member."""
        predicates = [by_type(DocumentType.RECEIPT)]
        if family_member_id:
            predicates.append(by_family_member(family_member_id))
        return await self.queries.for_user(owner_id, *predicates)

    async def get_bill(self, owner_id: str, document_id: str) -> ReceiptDocument:
        document = await self.store.get(RecordKind.DOCUMENTS, document_id)
        if (
            document is None
            or document.user_id not in self.store.owner_ids(owner_id)
            or not isinstance(document, ReceiptDocument)
        ):
            raise NotFoundException("Bill not found")
        return document
