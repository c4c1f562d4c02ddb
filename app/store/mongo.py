"""MongoDB record store backed by Beanie.

One collection per record kind, keyed by the record id. Each stored row
keeps the record's JSON form under ``payload``; secondary indexes cover the
lookups the app performs most: documents by ``(user_id, family_member_id)``
and doctors by ``access_token`` and ``(user_id, directory_id)``.
"""

from typing import Any, Dict, List, Mapping, Optional, Type

from beanie import Document, Indexed
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.database import Database
from app.shared.exceptions import NotFoundException
from app.store.base import Filters, RecordKind, RecordStore, parse_record, sort_by_timestamp


class StoredHealthDocument(Document):
    record_id: Indexed(str, unique=True)
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "health_documents"
        indexes = [
            IndexModel([("payload.user_id", ASCENDING), ("payload.family_member_id", ASCENDING)]),
        ]


class StoredFamilyMember(Document):
    record_id: Indexed(str, unique=True)
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "family_members"
        indexes = [IndexModel([("payload.user_id", ASCENDING)])]


class StoredDoctor(Document):
    record_id: Indexed(str, unique=True)
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "doctors"
        indexes = [
            IndexModel([("payload.access_token", ASCENDING)]),
            IndexModel([("payload.user_id", ASCENDING), ("payload.directory_id", ASCENDING)]),
        ]


class StoredInsurancePolicy(Document):
    record_id: Indexed(str, unique=True)
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "insurance_policies"
        indexes = [IndexModel([("payload.user_id", ASCENDING)])]


class StoredUserAccount(Document):
    record_id: Indexed(str, unique=True)
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Settings:
        name = "users"
        indexes = [IndexModel([("payload.email", ASCENDING)])]


STORED_MODELS: Dict[RecordKind, Type[Document]] = {
    RecordKind.DOCUMENTS: StoredHealthDocument,
    RecordKind.FAMILY_MEMBERS: StoredFamilyMember,
    RecordKind.DOCTORS: StoredDoctor,
    RecordKind.INSURANCE_POLICIES: StoredInsurancePolicy,
    RecordKind.USERS: StoredUserAccount,
}


class MongoRecordStore(RecordStore):
    """Record store persisting to MongoDB."""

    def __init__(
        self,
        mongodb_url: str,
        database_name: str,
        id_generator: Optional[IdGenerator] = None,
        shared_owner_id: str = "",
    ):
        super().__init__(id_generator=id_generator, shared_owner_id=shared_owner_id)
        self.mongodb_url = mongodb_url
        self.database_name = database_name

    async def connect(self) -> None:
        await Database.connect_db(
            self.mongodb_url,
            self.database_name,
            document_models=list(STORED_MODELS.values()),
        )

    async def close(self) -> None:
        await Database.close_db()

    @staticmethod
    def _query(filters: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            f"payload.{field}": {"$in": value} if isinstance(value, list) else value
            for field, value in filters.items()
        }

    async def _find_row(self, kind: RecordKind, record_id: str) -> Optional[Document]:
        return await STORED_MODELS[kind].find_one({"record_id": record_id})

    async def list(self, kind: RecordKind, filters: Optional[Filters] = None) -> List[Any]:
        query = self._query(self.expand_filters(kind, filters))
        # _id order is insertion order for ids minted by this process
        rows = await STORED_MODELS[kind].find(query).sort("+_id").to_list()
        records = [parse_record(kind, row.payload) for row in rows]
        if kind is RecordKind.DOCUMENTS:
            return sort_by_timestamp(records)
        return records

    async def get(self, kind: RecordKind, record_id: str) -> Optional[Any]:
        row = await self._find_row(kind, record_id)
        return parse_record(kind, row.payload) if row is not None else None

    async def insert(self, kind: RecordKind, record: BaseModel) -> Any:
        stored = self.with_id(kind, record)
        payload = stored.model_dump(mode="json")

        row = await self._find_row(kind, stored.id)
        if row is not None:
            row.payload = payload
            await row.save()
        else:
            await STORED_MODELS[kind](record_id=stored.id, payload=payload).insert()

        logger.debug(f"Inserted {kind.value} record {stored.id}")
        return stored

    async def update(self, kind: RecordKind, record_id: str, patch: Mapping[str, Any]) -> Any:
        row = await self._find_row(kind, record_id)
        if row is None:
            raise NotFoundException(f"{kind.value} record {record_id} not found")

        updated = self.patched(kind, parse_record(kind, row.payload), patch)
        row.payload = updated.model_dump(mode="json")
        await row.save()

        logger.debug(f"Updated {kind.value} record {record_id}: {sorted(patch)}")
        return updated

    async def delete(self, kind: RecordKind, record_id: str) -> bool:
        row = await self._find_row(kind, record_id)
        if row is None:
            return False
        await row.delete()
        logger.debug(f"Deleted {kind.value} record {record_id}")
        return True
