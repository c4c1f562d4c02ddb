"""Contract the app expects from its generative-AI collaborator."""

from typing import Any, Dict, Protocol, Sequence

from app.features.documents.models import HealthDocument
from app.features.insurance.models import InsurancePolicy
from app.services.document_reader import DocumentContent


class AIHealthClient(Protocol):
    """
    Document understanding, summarization and translation.

    ``extract`` raises ``ExtractionFailedException`` on unreadable input; every
    other method raises ``TransientServiceFailure`` when the call fails.
    """

    async def extract(self, content: DocumentContent, owner_id: str) -> Dict[str, Any]:
        """Structured fields of one document (document_type, report_type, hospital, ...)."""
        ...

    async def insights(self, documents: Sequence[HealthDocument]) -> Dict[str, Any]:
        """``{"vitals": {...} | None, "insights": [{category, severity, title, ...}]}``."""
        ...

    async def chat(self, message: str, documents: Sequence[HealthDocument]) -> str:
        ...

    async def translate(self, text: str, language: str) -> str:
        ...

    async def visit_summary(self, documents: Sequence[HealthDocument]) -> str:
        ...

    async def analyze_bill(self, document: HealthDocument, policy: InsurancePolicy) -> str:
        ...

    async def draft_appeal(self, document: HealthDocument, policy: InsurancePolicy, patient_name: str) -> str:
        ...
