"""Document ingestion workflow: extraction, normalization and commit."""

from datetime import datetime, timezone

import pytest

from app.features.documents.models import ClaimStatus, ClinicalDocument, LabReportDocument, ReceiptDocument
from app.features.documents.queries import DocumentQueryService, by_family_member
from app.features.documents.service import DocumentIngestionPipeline
from app.graphs.document_ingestion import backfill_abnormal_flags
from app.services.document_reader import UploadedFile
from app.shared.exceptions import ExtractionFailedException, NotFoundException
from app.store.base import RecordKind
from tests.fakes import OWNER, make_lab_report, run, utc


LAB_EXTRACTION = {
    "document_type": "Lab Report",
    "report_type": "Lipid Panel",
    "hospital": "City Health Clinic",
    "timestamp": "2024-05-20",
    "extracted_values": {
        "Total Cholesterol": {"value": 210, "unit": "mg/dL", "ref": "70 - 200", "is_abnormal": False},
        "Triglycerides": {"value": 150, "unit": "mg/dL", "ref": "70 - 200", "is_abnormal": False},
        "LDL": {"value": 140, "unit": "mg/dL", "ref": "<100", "is_abnormal": True},
    },
    "diagnosis": ["Hyperlipidemia"],
    "medications": [],
    "abnormalities": ["High LDL"],
    "patient_summary": "Your cholesterol is high.",
    "doctor_summary": "Hyperlipidemia.",
}

RECEIPT_EXTRACTION = {
    "document_type": "Receipt",
    "report_type": "Pharmacy Bill",
    "hospital": "Apollo Pharmacy",
    "timestamp": "2024-02-10",
    "billing_info": {"total_amount": 2044.64, "items": [{"name": "FENOLIP 145", "amount": 800.13}]},
}


def _upload(name="report.txt", data=b"LIPID PANEL\nLDL 140 mg/dL"):
    return UploadedFile(file_name=name, content_type="text/plain", data=data)


@pytest.fixture
def pipeline(store, ai_client, id_generator, clock):
    return DocumentIngestionPipeline(store, ai_client, id_generator=id_generator, clock=clock)


# ============ ABNORMALITY BACK-FILL ============

def test_backfill_flags_value_above_range():
    values = {"Total Cholesterol": {"value": 210, "unit": "mg/dL", "ref": "70 - 200", "is_abnormal": False}}
    assert backfill_abnormal_flags(values)["Total Cholesterol"]["is_abnormal"] is True


def test_backfill_leaves_value_inside_range():
    values = {"Triglycerides": {"value": 150, "unit": "mg/dL", "ref": "70 - 200", "is_abnormal": False}}
    assert backfill_abnormal_flags(values)["Triglycerides"]["is_abnormal"] is False


def test_backfill_ignores_one_sided_reference():
    values = {"LDL": {"value": 140, "unit": "mg/dL", "ref": "<100", "is_abnormal": None}}
    assert backfill_abnormal_flags(values)["LDL"]["is_abnormal"] is None


def test_backfill_ignores_text_values():
    values = {"Urine Color": {"value": "Dark Yellow", "unit": "", "ref": "1 - 2", "is_abnormal": False}}
    assert backfill_abnormal_flags(values)["Urine Color"]["is_abnormal"] is False


def test_backfill_never_clears_existing_flag():
    values = {"Hemoglobin": {"value": 14, "unit": "g/dL", "ref": "13.5-17.5", "is_abnormal": True}}
    assert backfill_abnormal_flags(values)["Hemoglobin"]["is_abnormal"] is True


def test_backfill_flags_value_below_range():
    values = {"Hemoglobin": {"value": 10.2, "unit": "g/dL", "ref": "13.5-17.5", "is_abnormal": False}}
    assert backfill_abnormal_flags(values)["Hemoglobin"]["is_abnormal"] is True


# ============ PIPELINE ============

def test_ingest_lab_report(pipeline, ai_client, family, store, clock):
    ai_client.extraction = LAB_EXTRACTION

    doc = run(pipeline.ingest(_upload(), "fam-a", OWNER))

    assert isinstance(doc, LabReportDocument)
    assert doc.id == "doc-1"
    assert doc.user_id == OWNER
    assert doc.family_member_id == "fam-a"
    assert doc.file_name == "report.txt"
    assert doc.uploaded_at == clock.now
    assert doc.timestamp == datetime(2024, 5, 20, tzinfo=timezone.utc)
    assert doc.extracted_values["Total Cholesterol"].is_abnormal is True
    assert doc.extracted_values["Triglycerides"].is_abnormal is False
    assert doc.extracted_values["LDL"].is_abnormal is True
    assert run(store.count(RecordKind.DOCUMENTS)) == 1


def test_new_lab_report_appears_first_for_member(pipeline, ai_client, family, store):
    ai_client.extraction = LAB_EXTRACTION

    async def scenario():
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(family_member_id="fam-a", timestamp=utc(2023, 12, 1)))
        await store.insert(RecordKind.DOCUMENTS, make_lab_report(family_member_id="fam-b", timestamp=utc(2024, 6, 1)))
        doc = await pipeline.ingest(_upload(), "fam-a", OWNER)
        listing = await DocumentQueryService(store).for_user(OWNER, by_family_member("fam-a"))
        return doc, listing

    doc, listing = run(scenario())
    assert listing[0].id == doc.id
    assert listing[0].extracted_values["LDL"].ref == "<100"
    assert len(listing) == 2


def test_receipt_starts_not_submitted(pipeline, ai_client, family):
    ai_client.extraction = RECEIPT_EXTRACTION

    doc = run(pipeline.ingest(_upload("bill.txt"), "fam-b", OWNER))

    assert isinstance(doc, ReceiptDocument)
    assert doc.claim_status == ClaimStatus.NOT_SUBMITTED
    assert doc.billing_info.total_amount == 2044.64


def test_receipt_with_printed_amounts_is_parsed(pipeline, ai_client, family):
    ai_client.extraction = {
        **RECEIPT_EXTRACTION,
        "billing_info": {
            "total_amount": "₹2,044.64",
            "items": [{"name": "FENOLIP 145", "amount": "Rs. 800.13"}, {"name": "Dispensing", "amount": "n/a"}],
        },
    }

    doc = run(pipeline.ingest(_upload("bill.txt"), "fam-b", OWNER))

    assert doc.billing_info.total_amount == 2044.64
    assert [(i.name, i.amount) for i in doc.billing_info.items] == [("FENOLIP 145", 800.13)]


def test_receipt_with_unreadable_total_keeps_the_document(pipeline, ai_client, family, store):
    ai_client.extraction = {**RECEIPT_EXTRACTION, "billing_info": {"total_amount": "see attached", "items": []}}

    doc = run(pipeline.ingest(_upload("bill.txt"), "fam-b", OWNER))

    assert isinstance(doc, ReceiptDocument)
    assert doc.billing_info is None
    assert run(store.count(RecordKind.DOCUMENTS)) == 1


def test_lab_report_has_no_claim_status(pipeline, ai_client, family):
    ai_client.extraction = {**LAB_EXTRACTION, "claim_status": "Denied"}

    doc = run(pipeline.ingest(_upload(), "fam-a", OWNER))

    assert not hasattr(doc, "claim_status")
    assert "claim_status" not in doc.model_dump()


def test_unparseable_timestamp_becomes_now(pipeline, ai_client, family, clock):
    ai_client.extraction = {**LAB_EXTRACTION, "timestamp": "sometime last spring"}
    doc = run(pipeline.ingest(_upload(), "fam-a", OWNER))
    assert doc.timestamp == clock.now


def test_missing_timestamp_becomes_now(pipeline, ai_client, family, clock):
    ai_client.extraction = {k: v for k, v in LAB_EXTRACTION.items() if k != "timestamp"}
    doc = run(pipeline.ingest(_upload(), "fam-a", OWNER))
    assert doc.timestamp == clock.now


def test_unknown_document_type_is_stored_as_unknown(pipeline, ai_client, family):
    ai_client.extraction = {"document_type": "Horoscope", "report_type": "Weekly"}
    doc = run(pipeline.ingest(_upload(), "fam-a", OWNER))
    assert isinstance(doc, ClinicalDocument)
    assert doc.document_type == "Unknown"


def test_extraction_failure_leaves_store_unchanged(pipeline, ai_client, family, store):
    ai_client.failing.add("extract")

    with pytest.raises(ExtractionFailedException):
        run(pipeline.ingest(_upload(), "fam-a", OWNER))
    assert run(store.count(RecordKind.DOCUMENTS)) == 0


def test_unsupported_file_is_rejected_before_ai(pipeline, ai_client, family, store):
    with pytest.raises(ExtractionFailedException):
        run(pipeline.ingest(_upload("scan.docx"), "fam-a", OWNER))
    assert ai_client.calls == []
    assert run(store.count(RecordKind.DOCUMENTS)) == 0


def test_empty_file_is_rejected(pipeline, ai_client, family):
    with pytest.raises(ExtractionFailedException):
        run(pipeline.ingest(_upload(data=b""), "fam-a", OWNER))
    assert ai_client.calls == []


def test_unknown_family_member(pipeline, ai_client, family):
    ai_client.extraction = LAB_EXTRACTION
    with pytest.raises(NotFoundException):
        run(pipeline.ingest(_upload(), "fam-zzz", OWNER))
