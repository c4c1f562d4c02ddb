"""In-process record store.

Default backend. Collections live on the store object, which the app builds
once at startup and injects into every service.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.shared.exceptions import NotFoundException
from app.store.base import Filters, RecordKind, RecordStore, matches, sort_by_timestamp


class InMemoryRecordStore(RecordStore):
    """Dict-backed store; mutations are serialized with an ``asyncio.Lock``."""

    def __init__(self, id_generator: Optional[IdGenerator] = None, shared_owner_id: str = ""):
        super().__init__(id_generator=id_generator, shared_owner_id=shared_owner_id)
        # dicts keep insertion order, which breaks timestamp ties
        self._collections: Dict[RecordKind, Dict[str, BaseModel]] = {kind: {} for kind in RecordKind}
        self._lock = asyncio.Lock()

    async def close(self) -> None:
        for collection in self._collections.values():
            collection.clear()
        logger.info("Cleared in-memory record store")

    async def list(self, kind: RecordKind, filters: Optional[Filters] = None) -> List[Any]:
        expanded = self.expand_filters(kind, filters)
        records = [
            record.model_copy(deep=True)
            for record in self._collections[kind].values()
            if matches(record, expanded)
        ]
        if kind is RecordKind.DOCUMENTS:
            return sort_by_timestamp(records)
        return records

    async def get(self, kind: RecordKind, record_id: str) -> Optional[Any]:
        record = self._collections[kind].get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def insert(self, kind: RecordKind, record: BaseModel) -> Any:
        async with self._lock:
            stored = self.with_id(kind, record)
            self._collections[kind][stored.id] = stored
        logger.debug(f"Inserted {kind.value} record {stored.id}")
        return stored.model_copy(deep=True)

    async def update(self, kind: RecordKind, record_id: str, patch: Mapping[str, Any]) -> Any:
        async with self._lock:
            current = self._collections[kind].get(record_id)
            if current is None:
                raise NotFoundException(f"{kind.value} record {record_id} not found")
            updated = self.patched(kind, current, patch)
            self._collections[kind][record_id] = updated
        logger.debug(f"Updated {kind.value} record {record_id}: {sorted(patch)}")
        return updated.model_copy(deep=True)

    async def delete(self, kind: RecordKind, record_id: str) -> bool:
        async with self._lock:
            removed = self._collections[kind].pop(record_id, None)
        if removed is not None:
            logger.debug(f"Deleted {kind.value} record {record_id}")
        return removed is not None
