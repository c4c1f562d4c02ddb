"""Record store behaviour: ordering, ownership widening and CRUD."""

import pytest

from app.features.documents.models import ClaimStatus, ReceiptDocument
from app.shared.exceptions import NotFoundException
from app.store.base import RecordKind, sort_by_timestamp
from app.store.memory import InMemoryRecordStore
from tests.fakes import OWNER, make_lab_report, make_receipt, make_scan, run, utc


def test_insert_assigns_generated_id(store):
    doc = run(store.insert(RecordKind.DOCUMENTS, make_lab_report()))
    assert doc.id == "doc-1"


def test_insert_keeps_existing_id(store):
    doc = run(store.insert(RecordKind.DOCUMENTS, make_lab_report(id="doc-custom")))
    assert doc.id == "doc-custom"
    assert run(store.get(RecordKind.DOCUMENTS, "doc-custom")) is not None


def test_documents_listed_newest_first(store):
    async def scenario():
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(timestamp=utc(2024, 1, 1)))
        await store.insert(RecordKind.DOCUMENTS, make_scan(timestamp=utc(2024, 3, 1)))
        await store.insert(RecordKind.DOCUMENTS, make_receipt(timestamp=utc(2024, 2, 1)))
        return await store.list(RecordKind.DOCUMENTS, {"user_id": OWNER})

    docs = run(scenario())
    assert [d.timestamp for d in docs] == [utc(2024, 3, 1), utc(2024, 2, 1), utc(2024, 1, 1)]


def test_equal_timestamps_keep_insertion_order(store):
    async def scenario():
        for name in ("first", "second", "third"):
            await store.insert(RecordKind.DOCUMENTS, make_lab_report(timestamp=utc(2024, 1, 1), file_name=name))
        return await store.list(RecordKind.DOCUMENTS)

    assert [d.file_name for d in run(scenario())] == ["first", "second", "third"]


def test_sort_by_timestamp_is_stable():
    a = make_lab_report(timestamp=utc(2024, 1, 1), file_name="a")
    b = make_lab_report(timestamp=utc(2024, 5, 1), file_name="b")
    c = make_lab_report(timestamp=utc(2024, 1, 1), file_name="c")
    assert [d.file_name for d in sort_by_timestamp([a, b, c])] == ["b", "a", "c"]


def test_user_filter_includes_shared_demo_owner(id_generator):
    store = InMemoryRecordStore(id_generator=id_generator, shared_owner_id="demo-user")

    async def scenario():
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(user_id="demo-user"))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(user_id=OWNER))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(user_id="someone-else"))
        return await store.list(RecordKind.DOCUMENTS, {"user_id": OWNER})

    owners = {d.user_id for d in run(scenario())}
    assert owners == {OWNER, "demo-user"}


def test_without_shared_owner_only_real_owner_matches(store):
    async def scenario():
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(user_id="demo-user"))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(user_id=OWNER))
        return await store.list(RecordKind.DOCUMENTS, {"user_id": OWNER})

    assert [d.user_id for d in run(scenario())] == [OWNER]


def test_list_filter_accepts_several_values(store):
    async def scenario():
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(family_member_id="fam-a"))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(family_member_id="fam-b"))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(family_member_id="fam-c"))
        return await store.list(RecordKind.DOCUMENTS, {"family_member_id": ["fam-a", "fam-c"]})

    assert sorted(d.family_member_id for d in run(scenario())) == ["fam-a", "fam-c"]


def test_update_revalidates_and_keeps_variant(store):
    async def scenario():
        receipt = await store.insert(RecordKind.DOCUMENTS, make_receipt())
        return await store.update(RecordKind.DOCUMENTS, receipt.id, {"claim_status": ClaimStatus.SUBMITTED})

    updated = run(scenario())
    assert isinstance(updated, ReceiptDocument)
    assert updated.claim_status == ClaimStatus.SUBMITTED


def test_update_missing_record_raises(store):
    with pytest.raises(NotFoundException):
        run(store.update(RecordKind.DOCUMENTS, "doc-missing", {"hospital": "x"}))


def test_returned_records_are_copies(store):
    async def scenario():
        doc = await store.insert(RecordKind.DOCUMENTS, make_lab_report())
        doc.hospital = "Changed outside the store"
        return await store.get(RecordKind.DOCUMENTS, doc.id)

    assert run(scenario()).hospital == ""


def test_delete_and_count(store):
    async def scenario():
        doc = await store.insert(RecordKind.DOCUMENTS, make_lab_report())
        await store.insert(RecordKind.DOCUMENTS, make_scan())
        deleted = await store.delete(RecordKind.DOCUMENTS, doc.id)
        missing = await store.delete(RecordKind.DOCUMENTS, doc.id)
        return deleted, missing, await store.count(RecordKind.DOCUMENTS)

    assert run(scenario()) == (True, False, 1)
