"""OpenAI-backed implementation of the AI health collaborator."""

import json
import re
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from app.core.logging import logger
from app.features.documents.models import HealthDocument
from app.features.insurance.models import InsurancePolicy
from app.services.document_reader import DocumentContent
from app.shared.exceptions import ExtractionFailedException, TransientServiceFailure


EXTRACTION_PROMPT = """You are a medical document data extractor.

Classify the attached medical document as one of: "Lab Report", "Prescription",
"Receipt", "Clinical Note", "Scan Report", "Insurance Policy", "Claim Document", "Unknown".

Return a JSON object with:
{
    "document_type": "The classification above",
    "report_type": "Specific title, e.g. Complete Blood Count, Coronary Angiogram, Pharmacy Bill",
    "hospital": "Hospital, clinic, lab or pharmacy name",
    "timestamp": "Primary date of the document in YYYY-MM-DD format, or null",
    "extracted_values": {
        "<test name exactly as shown>": {
            "value": numeric_value_or_text,
            "unit": "Unit of measurement",
            "ref": "Reference range as printed, e.g. 70 - 200 or <100",
            "is_abnormal": true_or_false
        }
    },
    "billing_info": {"total_amount": number, "items": [{"name": "...", "amount": number}]},
    "diagnosis": ["Diagnoses or impressions"],
    "medications": ["Prescribed medications"],
    "abnormalities": ["Key abnormal findings"],
    "patient_summary": "One simple paragraph for the patient",
    "doctor_summary": "Concise clinical summary for a doctor"
}

Important:
- extracted_values only for lab reports, billing_info only for receipts/bills; otherwise null
- For value, use a number whenever the result is numeric
- Use empty strings or empty lists for missing fields
- Return ONLY valid JSON, no markdown code blocks or explanation"""

INSIGHTS_PROMPT = """You are a proactive AI health analyst. Analyze this timeline of a patient's health documents.

1. Vitals: from the MOST RECENT document that has them, extract up to 4 key values such as
   Blood Pressure, Total Cholesterol, LDL, HDL, Hemoglobin or Blood Sugar.
2. Insights: identify up to 2 important trends, drug interactions, follow-up reminders or observations.

Return a single JSON object:
{
    "vitals": {"<name>": {"value": number_or_text, "unit": "..."}} or null,
    "insights": [
        {
            "category": "Trend | Interaction | Reminder | Observation | Insurance",
            "severity": "Low | Medium | High",
            "title": "...",
            "description": "Plain-language description",
            "recommendation": "..."
        }
    ]
}

Patient's health data:
{context}"""

CHAT_PROMPT = """You are a friendly assistant that explains a family's medical records.

Medical data (JSON):
{context}

Question: "{message}"

Answer ONLY from the data above, in a simple conversational tone.
- For a specific value (e.g. hemoglobin), give the latest value, its unit and the report date.
- If the data does not answer the question, say "I'm sorry, but I can't find that information in your uploaded documents."
- Do not give medical advice; suggest consulting a doctor."""

VISIT_SUMMARY_PROMPT = """You are an expert medical assistant. From the health history below write a
"Doctor's Visit Brief" in Markdown with these sections:

### Key Health Summary
One paragraph on the main conditions and history.

### Recent Events (Last 6 Months)
Bulleted major events, diagnoses and new medications.

### Key Discussion Points
3-4 bulleted questions the patient should raise with their doctor.

Patient's health data:
{context}"""

BILL_ANALYSIS_PROMPT = """You are an insurance claims assistant. Write a short Markdown pre-claim
analysis for the bill below under the policy below. Include the total bill amount, the estimated
insurance coverage, the patient's estimated cost given the remaining deductible, and any alerts
(e.g. missing pre-authorization).

Bill:
{bill}

Policy:
{policy}"""

APPEAL_PROMPT = """You are an insurance claims assistant. Draft a formal Markdown appeal letter
for the denied claim below, addressed to the claims department of {provider}, written by {patient}.
Quote the policy number, the claim reference and the service date, and argue medical necessity
from the bill and its related clinical details. Today's date is {today}.

Denied bill:
{bill}

Policy:
{policy}"""


def extract_json_from_text(text: str) -> Optional[dict]:
    """
    Extract JSON object from text that may contain markdown or other content.
    Uses multiple strategies to find valid JSON.
    """
    if not text:
        return None

    # Strategy 1: Try parsing the text directly
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError:
        pass

    # Strategy 2: Remove markdown code blocks
    patterns = [
        r'```json\s*([\s\S]*?)\s*```',  # ```json ... ```
        r'```\s*([\s\S]*?)\s*```',       # ``` ... ```
    ]

    for pattern in patterns:
        match = re.search(pattern, text, re.IGNORECASE)
        if match:
            try:
                return json.loads(match.group(1).strip())
            except json.JSONDecodeError:
                continue

    # Strategy 3: Find the outermost { ... }
    start_idx = text.find('{')
    if start_idx != -1:
        depth = 0
        end_idx = start_idx
        for i, char in enumerate(text[start_idx:], start_idx):
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    end_idx = i
                    break

        if end_idx > start_idx:
            try:
                return json.loads(text[start_idx:end_idx + 1])
            except json.JSONDecodeError:
                pass

    return None


def _document_context(documents: Sequence[HealthDocument], fields: Sequence[str]) -> str:
    rows = []
    for doc in documents:
        data = doc.model_dump(mode="json")
        rows.append({field: data.get(field) for field in fields})
    return json.dumps(rows, indent=2)


class OpenAIHealthClient:
    """Calls the OpenAI chat completions API for every AI feature."""

    def __init__(self, api_key: str, model: str = "gpt-4o", client: Optional[AsyncOpenAI] = None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise TransientServiceFailure("OPENAI_API_KEY is not configured")
            # No automatic retries: a failed call surfaces immediately
            self._client = AsyncOpenAI(api_key=self.api_key, max_retries=0)
        return self._client

    async def _complete(self, content: Any, json_mode: bool = False, max_tokens: int = 2000) -> str:
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": content}],
                max_tokens=max_tokens,
                temperature=0.1,
                **kwargs,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise TransientServiceFailure(str(e)) from e

        text = response.choices[0].message.content or ""
        logger.debug(f"OpenAI raw response: {text[:500]}...")
        return text

    async def _complete_json(self, content: Any, max_tokens: int = 2000) -> dict:
        text = await self._complete(content, json_mode=True, max_tokens=max_tokens)
        parsed = extract_json_from_text(text)
        if not isinstance(parsed, dict):
            logger.error(f"Failed to extract JSON from OpenAI response. Raw: {text}")
            raise TransientServiceFailure("Failed to parse AI response")
        return parsed

    async def extract(self, content: DocumentContent, owner_id: str) -> Dict[str, Any]:
        logger.info(f"Starting AI extraction for {content.file_name} (owner {owner_id})")

        parts: List[Dict[str, Any]] = [{"type": "text", "text": EXTRACTION_PROMPT}]
        if content.text:
            parts.append({"type": "text", "text": f"Document text:\n{content.text}"})
        if content.tables:
            parts.append({"type": "text", "text": f"Tables:\n{json.dumps(content.tables)}"})
        for image in content.images:
            parts.append({"type": "image_url", "image_url": {"url": image.data_url, "detail": "high"}})

        try:
            parsed = await self._complete_json(parts, max_tokens=4000)
        except TransientServiceFailure as e:
            raise ExtractionFailedException() from e

        logger.info(f"Extracted {parsed.get('document_type', 'Unknown')} from {content.file_name}")
        return parsed

    async def insights(self, documents: Sequence[HealthDocument]) -> Dict[str, Any]:
        context = _document_context(
            documents,
            ["timestamp", "document_type", "diagnosis", "medications", "extracted_values", "abnormalities"],
        )
        return await self._complete_json(INSIGHTS_PROMPT.replace("{context}", context))

    async def chat(self, message: str, documents: Sequence[HealthDocument]) -> str:
        context = _document_context(
            documents,
            ["report_type", "timestamp", "diagnosis", "abnormalities", "patient_summary", "extracted_values"],
        )
        prompt = CHAT_PROMPT.replace("{context}", context).replace("{message}", message)
        return await self._complete(prompt)

    async def translate(self, text: str, language: str) -> str:
        prompt = (
            f"Translate the following English text to {language}. "
            f"Respond only with the translated text, nothing else.\n\n{text}"
        )
        return await self._complete(prompt)

    async def visit_summary(self, documents: Sequence[HealthDocument]) -> str:
        context = _document_context(
            documents,
            ["timestamp", "document_type", "hospital", "doctor_summary", "diagnosis", "medications"],
        )
        return await self._complete(VISIT_SUMMARY_PROMPT.replace("{context}", context))

    async def analyze_bill(self, document: HealthDocument, policy: InsurancePolicy) -> str:
        prompt = (
            BILL_ANALYSIS_PROMPT
            .replace("{bill}", document.model_dump_json(indent=2))
            .replace("{policy}", policy.model_dump_json(indent=2))
        )
        return await self._complete(prompt)

    async def draft_appeal(self, document: HealthDocument, policy: InsurancePolicy, patient_name: str) -> str:
        prompt = (
            APPEAL_PROMPT
            .replace("{provider}", policy.provider_name)
            .replace("{patient}", patient_name)
            .replace("{today}", date.today().isoformat())
            .replace("{bill}", document.model_dump_json(indent=2))
            .replace("{policy}", policy.model_dump_json(indent=2))
        )
        return await self._complete(prompt)
