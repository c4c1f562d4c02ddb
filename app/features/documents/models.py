# Health Documents Feature - Models

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class DocumentType(str, Enum):
    """Classification of an uploaded medical document."""
    LAB_REPORT = "Lab Report"
    PRESCRIPTION = "Prescription"
    RECEIPT = "Receipt"
    CLINICAL_NOTE = "Clinical Note"
    SCAN_REPORT = "Scan Report"
    INSURANCE_POLICY = "Insurance Policy"
    CLAIM_DOCUMENT = "Claim Document"
    UNKNOWN = "Unknown"


class ClaimStatus(str, Enum):
    """Insurance adjudication state of a billing document."""
    NOT_SUBMITTED = "Not Submitted"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    DENIED = "Denied"
    APPEALED = "Appealed"


class ExtractedValue(BaseModel):
    """A single lab result as read from the report."""
    value: Union[float, str]
    unit: str = ""
    ref: str = ""  # Reference range as printed, e.g. "70 - 200" or "<100"
    is_abnormal: Optional[bool] = None


class BillingItem(BaseModel):
    name: str
    amount: float


class BillingInfo(BaseModel):
    total_amount: float
    items: List[BillingItem] = Field(default_factory=list)


class _DocumentBase(BaseModel):
    """Fields shared by every document variant."""

    id: Optional[str] = None
    user_id: str
    family_member_id: str

    file_name: str = ""
    file_url: str = "#"
    uploaded_at: datetime
    timestamp: datetime  # Clinical event time, drives all ordering

    report_type: str = ""
    hospital: str = ""

    diagnosis: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    abnormalities: List[str] = Field(default_factory=list)

    patient_summary: str = ""
    doctor_summary: str = ""


class LabReportDocument(_DocumentBase):
    """Lab report with its extracted values keyed by test name."""
    document_type: Literal["Lab Report"] = "Lab Report"
    extracted_values: Dict[str, ExtractedValue] = Field(default_factory=dict)


class ReceiptDocument(_DocumentBase):
    """Bill or receipt; the only variant that carries a claim status."""
    document_type: Literal["Receipt"] = "Receipt"
    billing_info: Optional[BillingInfo] = None
    claim_status: ClaimStatus = ClaimStatus.NOT_SUBMITTED


class ClinicalDocument(_DocumentBase):
    """Any other document type; no type-specific payload."""
    document_type: Literal[
        "Prescription",
        "Clinical Note",
        "Scan Report",
        "Insurance Policy",
        "Claim Document",
        "Unknown",
    ] = "Unknown"


HealthDocument = Annotated[
    Union[LabReportDocument, ReceiptDocument, ClinicalDocument],
    Field(discriminator="document_type"),
]

health_document_adapter: TypeAdapter = TypeAdapter(HealthDocument)


def parse_health_document(data: dict) -> Union[LabReportDocument, ReceiptDocument, ClinicalDocument]:
    """Validate a raw mapping into the variant matching its ``document_type``."""
    return health_document_adapter.validate_python(data)
