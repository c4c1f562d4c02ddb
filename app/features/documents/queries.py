# Health Documents Feature - Query/View layer
#
# Pure projections over document sequences. Inputs from the record store are
# already newest-first; every function here keeps the input order.

from typing import Callable, Iterable, List, Optional, Union

from app.features.doctors.models import Doctor
from app.features.documents.models import DocumentType, HealthDocument
from app.store.base import RecordKind, RecordStore


DocumentPredicate = Callable[[HealthDocument], bool]


def by_family_member(family_member_id: str) -> DocumentPredicate:
    return lambda doc: doc.family_member_id == family_member_id


def by_type(document_type: Union[DocumentType, str]) -> DocumentPredicate:
    wanted = DocumentType(document_type).value
    return lambda doc: doc.document_type == wanted


def doctor_scoped(doctor: Doctor) -> DocumentPredicate:
    """Documents of the family members a doctor has been granted."""
    allowed = frozenset(doctor.family_member_ids)
    return lambda doc: doc.family_member_id in allowed


def all_of(*predicates: DocumentPredicate) -> DocumentPredicate:
    """Conjunction; with no predicates every document matches."""
    return lambda doc: all(predicate(doc) for predicate in predicates)


def apply(documents: Iterable[HealthDocument], *predicates: DocumentPredicate) -> List[HealthDocument]:
    match = all_of(*predicates)
    return [doc for doc in documents if match(doc)]


class DocumentQueryService:
    """Loads documents from the store and derives views over them."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def for_user(self, user_id: str, *predicates: DocumentPredicate) -> List[HealthDocument]:
        documents = await self.store.list(RecordKind.DOCUMENTS, {"user_id": user_id})
        return apply(documents, *predicates)

    async def for_doctor(self, doctor: Doctor) -> List[HealthDocument]:
        documents = await self.store.list(
            RecordKind.DOCUMENTS, {"family_member_id": list(doctor.family_member_ids)}
        )
        return apply(documents, doctor_scoped(doctor))

    async def filtered(
        self,
        user_id: str,
        family_member_id: Optional[str] = None,
        document_type: Optional[Union[DocumentType, str]] = None,
    ) -> List[HealthDocument]:
        predicates = []
        if family_member_id:
            predicates.append(by_family_member(family_member_id))
        if document_type:
            predicates.append(by_type(document_type))
        return await self.for_user(user_id, *predicates)
