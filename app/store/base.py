"""Record store interface shared by every persistence backend."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from app.core.ids import IdGenerator
from app.features.auth.models import UserAccount
from app.features.doctors.models import Doctor
from app.features.documents.models import parse_health_document
from app.features.family.models import FamilyMember
from app.features.insurance.models import InsurancePolicy


class RecordKind(str, Enum):
    """Collections owned by the record store."""
    DOCUMENTS = "documents"
    FAMILY_MEMBERS = "family_members"
    DOCTORS = "doctors"
    INSURANCE_POLICIES = "insurance_policies"
    USERS = "users"


ID_PREFIXES: Dict[RecordKind, str] = {
    RecordKind.DOCUMENTS: "doc",
    RecordKind.FAMILY_MEMBERS: "fam",
    RecordKind.DOCTORS: "doctor",
    RecordKind.INSURANCE_POLICIES: "policy",
    RecordKind.USERS: "user",
}

_MODEL_TYPES = {
    RecordKind.FAMILY_MEMBERS: FamilyMember,
    RecordKind.DOCTORS: Doctor,
    RecordKind.INSURANCE_POLICIES: InsurancePolicy,
    RecordKind.USERS: UserAccount,
}

Filters = Mapping[str, Any]


def parse_record(kind: RecordKind, data: Mapping[str, Any]) -> BaseModel:
    """Validate a raw mapping into the model type stored under ``kind``."""
    if kind is RecordKind.DOCUMENTS:
        return parse_health_document(dict(data))
    return _MODEL_TYPES[kind].model_validate(dict(data))


def sort_by_timestamp(documents: Iterable[BaseModel]) -> List[BaseModel]:
    """Newest clinical timestamp first; equal timestamps keep their input order."""
    # sorted() stays stable with reverse=True
    return sorted(documents, key=lambda doc: doc.timestamp, reverse=True)


class RecordStore(ABC):
    """Async CRUD over the app's collections.

    Implementations must return document listings newest-first by clinical
    ``timestamp`` with ties in insertion order, and must widen a ``user_id``
    filter to the shared demo owner when one is configured.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None, shared_owner_id: str = ""):
        self.id_generator = id_generator or IdGenerator()
        self.shared_owner_id = shared_owner_id

    async def connect(self) -> None:
        """Open connections. Called once at startup."""

    async def close(self) -> None:
        """Release connections. Called once at shutdown."""

    @abstractmethod
    async def list(self, kind: RecordKind, filters: Optional[Filters] = None) -> List[Any]:
        ...

    @abstractmethod
    async def get(self, kind: RecordKind, record_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def insert(self, kind: RecordKind, record: BaseModel) -> Any:
        ...

    @abstractmethod
    async def update(self, kind: RecordKind, record_id: str, patch: Mapping[str, Any]) -> Any:
        ...

    @abstractmethod
    async def delete(self, kind: RecordKind, record_id: str) -> bool:
        ...

    async def count(self, kind: RecordKind, filters: Optional[Filters] = None) -> int:
        return len(await self.list(kind, filters))

    def owner_ids(self, user_id: str) -> List[str]:
        """Owner ids a ``user_id`` filter matches."""
        if self.shared_owner_id and self.shared_owner_id != user_id:
            return [user_id, self.shared_owner_id]
        return [user_id]

    def expand_filters(self, kind: RecordKind, filters: Optional[Filters]) -> Dict[str, Any]:
        """Normalize filters: ``user_id`` widened to the shared owner, enums to values."""
        expanded: Dict[str, Any] = {}
        for field, value in (filters or {}).items():
            if field == "user_id" and kind is not RecordKind.USERS and isinstance(value, str):
                value = self.owner_ids(value)
            if isinstance(value, (list, tuple, set, frozenset)):
                expanded[field] = [_plain(v) for v in value]
            else:
                expanded[field] = _plain(value)
        return expanded

    def with_id(self, kind: RecordKind, record: BaseModel) -> BaseModel:
        """Copy of ``record`` carrying a generated id when it has none."""
        if getattr(record, "id", None):
            return record.model_copy(deep=True)
        return record.model_copy(
            update={"id": self.id_generator.new_id(ID_PREFIXES[kind])},
            deep=True,
        )

    @staticmethod
    def patched(kind: RecordKind, record: BaseModel, patch: Mapping[str, Any]) -> BaseModel:
        """Re-validated copy of ``record`` with ``patch`` applied. The id never changes."""
        data = record.model_dump()
        data.update({k: v for k, v in patch.items() if k != "id"})
        return parse_record(kind, data)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def matches(record: BaseModel, filters: Mapping[str, Any]) -> bool:
    """Equality match; a list value means "any of"."""
    for field, expected in filters.items():
        actual = _plain(getattr(record, field, None))
        if isinstance(expected, list):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True
