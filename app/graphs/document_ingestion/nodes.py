"""LangGraph nodes for the document ingestion workflow."""

import asyncio
import copy
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import ValidationError

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.core.time_utils import Clock, normalize_timestamp, to_utc, utc_now
from app.features.documents.models import ClaimStatus, DocumentType, parse_health_document
from app.graphs.document_ingestion.state import DocumentIngestionState
from app.services.ai_client import AIHealthClient
from app.services.document_reader import DocumentReader, is_supported_file
from app.shared.exceptions import ExtractionFailedException, NotFoundException, TransientServiceFailure
from app.store.base import RecordKind, RecordStore


# "<lower> - <upper>", e.g. "70 - 200" or "13.5-17.5"
RANGE_PATTERN = re.compile(r"([\d.]+)\s*-\s*([\d.]+)")

_DOCUMENT_TYPES = {t.value for t in DocumentType}


def backfill_abnormal_flags(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Force ``is_abnormal`` on numeric lab values outside a printed "<lower> - <upper>" range.

    Values inside the range, non-numeric values, and references without both
    bounds (e.g. "<100") keep whatever flag the AI returned.
    """
    for name, item in values.items():
        if not isinstance(item, dict):
            continue
        value = item.get("value")
        ref = item.get("ref")
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not isinstance(ref, str):
            continue

        match = RANGE_PATTERN.search(ref)
        if not match:
            continue
        try:
            lower, upper = float(match.group(1)), float(match.group(2))
        except ValueError:
            continue

        if value < lower or value > upper:
            if not item.get("is_abnormal"):
                logger.info(f"Flagging {name}={value} outside reference range {ref}")
            item["is_abnormal"] = True
    return values


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item not in (None, "")]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _clean_extracted_values(values: Any) -> Dict[str, Any]:
    if not isinstance(values, dict):
        return {}
    return {
        str(name): item
        for name, item in values.items()
        if isinstance(item, dict) and item.get("value") not in (None, "")
    }


# Currency symbols, codes and thousands separators around a printed amount
_AMOUNT_NOISE = re.compile(r"[^\d.\-]")


def _amount(value: Any) -> Optional[float]:
    """A money amount as a float; "₹2,044.64", "Rs. 800" and "1,200/-" are accepted."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    cleaned = _AMOUNT_NOISE.sub("", value).lstrip(".").rstrip(".-")
    try:
        return float(cleaned)
    except ValueError:
        return None


def _billing_info(value: Any) -> Optional[Dict[str, Any]]:
    """Billing info with numeric amounts, or None when the total cannot be read."""
    if not isinstance(value, dict):
        return None
    total = _amount(value.get("total_amount"))
    if total is None:
        if value.get("total_amount") is not None:
            logger.warning(f"Dropping billing info with unreadable total {value.get('total_amount')!r}")
        return None

    items = []
    for item in value.get("items") or []:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        amount = _amount(item.get("amount"))
        if amount is not None:
            items.append({"name": str(item["name"]), "amount": amount})
    return {"total_amount": total, "items": items}


class DocumentIngestionNodes:
    """Workflow steps, bound to the collaborators they need."""

    def __init__(
        self,
        store: RecordStore,
        ai_client: AIHealthClient,
        reader: Optional[DocumentReader] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Clock = utc_now,
        max_upload_bytes: Optional[int] = None,
    ):
        self.store = store
        self.ai_client = ai_client
        self.reader = reader or DocumentReader()
        self.id_generator = id_generator or store.id_generator
        self.clock = clock
        self.max_upload_bytes = max_upload_bytes

    # ============ NODE 1: RECEIVE UPLOAD ============

    async def receive_upload(self, state: DocumentIngestionState) -> dict:
        """Validate the upload and the target family member."""
        upload = state["upload"]
        logger.info(f"Receiving upload {upload.file_name} for family member {state['family_member_id']}")

        if not is_supported_file(upload.file_name):
            raise ExtractionFailedException(
                "Unsupported file type. Accepted formats: PDF, PNG, JPG, JPEG, WEBP, GIF, TXT"
            )
        if not upload.data:
            raise ExtractionFailedException("The uploaded file is empty")
        if self.max_upload_bytes and len(upload.data) > self.max_upload_bytes:
            raise ExtractionFailedException("The uploaded file is too large")

        member = await self.store.get(RecordKind.FAMILY_MEMBERS, state["family_member_id"])
        if member is None or member.user_id not in self.store.owner_ids(state["owner_id"]):
            raise NotFoundException("Family member not found")

        return {"family_member": member}

    # ============ NODE 2: READ DOCUMENT ============

    async def read_document(self, state: DocumentIngestionState) -> dict:
        """Turn the upload into text, tables and page images."""
        content = await asyncio.to_thread(self.reader.read, state["upload"])
        return {"content": content}

    # ============ NODE 3: AI EXTRACTION ============

    async def extract_with_ai(self, state: DocumentIngestionState) -> dict:
        """Delegate document understanding to the AI collaborator."""
        try:
            extracted = await self.ai_client.extract(state["content"], state["owner_id"])
        except TransientServiceFailure as e:
            logger.error(f"AI extraction failed for {state['upload'].file_name}: {e}")
            raise ExtractionFailedException() from e

        if not isinstance(extracted, dict):
            raise ExtractionFailedException()

        extracted = copy.deepcopy(extracted)
        document_type = extracted.get("document_type")
        if document_type not in _DOCUMENT_TYPES:
            logger.warning(f"AI returned unknown document type {document_type!r}, using Unknown")
            extracted["document_type"] = DocumentType.UNKNOWN.value
        extracted["extracted_values"] = _clean_extracted_values(extracted.get("extracted_values"))

        return {"extracted": extracted}

    # ============ NODE 4: ABNORMALITY BACK-FILL ============

    async def flag_abnormal_values(self, state: DocumentIngestionState) -> dict:
        extracted = dict(state["extracted"])
        extracted["extracted_values"] = backfill_abnormal_flags(dict(extracted["extracted_values"]))
        return {"extracted": extracted}

    # ============ NODE 5: BUILD RECORD ============

    async def build_record(self, state: DocumentIngestionState) -> dict:
        """Merge AI output with generated metadata into a typed document."""
        extracted = state["extracted"]
        upload = state["upload"]
        document_type = extracted["document_type"]

        record: Dict[str, Any] = {
            "id": self.id_generator.new_id("doc"),
            "user_id": state["owner_id"],
            "family_member_id": state["family_member_id"],
            "file_name": upload.file_name,
            "uploaded_at": to_utc(self.clock()),
            "timestamp": normalize_timestamp(extracted.get("timestamp"), self.clock),
            "document_type": document_type,
            "report_type": _text(extracted.get("report_type")),
            "hospital": _text(extracted.get("hospital")),
            "diagnosis": _string_list(extracted.get("diagnosis")),
            "medications": _string_list(extracted.get("medications")),
            "abnormalities": _string_list(extracted.get("abnormalities")),
            "patient_summary": _text(extracted.get("patient_summary")),
            "doctor_summary": _text(extracted.get("doctor_summary")),
        }
        if document_type == DocumentType.LAB_REPORT:
            record["extracted_values"] = extracted.get("extracted_values") or {}
        elif document_type == DocumentType.RECEIPT:
            record["billing_info"] = _billing_info(extracted.get("billing_info"))
            record["claim_status"] = ClaimStatus.NOT_SUBMITTED

        try:
            document = parse_health_document(record)
        except ValidationError as e:
            logger.error(f"AI output for {upload.file_name} does not fit a {document_type} record: {e}")
            raise ExtractionFailedException() from e

        return {"document": document}

    # ============ NODE 6: COMMIT ============

    async def commit_record(self, state: DocumentIngestionState) -> dict:
        document = await self.store.insert(RecordKind.DOCUMENTS, state["document"])
        logger.info(
            f"Committed {document.document_type} {document.id} for family member {document.family_member_id}"
        )
        return {"document": document}


# ============ ROUTING FUNCTIONS ============

def route_after_extract(state: DocumentIngestionState) -> Literal["flag_abnormal_values", "build_record"]:
    """Only documents with lab values need the abnormality back-fill."""
    if state["extracted"].get("extracted_values"):
        return "flag_abnormal_values"
    return "build_record"
