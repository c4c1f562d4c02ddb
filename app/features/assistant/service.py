# AI Assistant Feature - Service
#
# Thin orchestration over the AI collaborator. Nothing here is persisted and
# nothing is cached; a failed AI call degrades to an empty result or a fixed
# placeholder instead of an error.

from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.features.assistant.models import (
    VITALS_INSIGHT_ID,
    HealthInsight,
    InsightCategory,
    InsightSeverity,
    VitalReading,
)
from app.features.documents.models import ClaimStatus, HealthDocument, ReceiptDocument
from app.features.insurance.models import InsurancePolicy
from app.services.ai_client import AIHealthClient
from app.shared.exceptions import BadRequestException, TransientServiceFailure


DEFAULT_LANGUAGE = "English"

NO_DOCUMENTS_MESSAGE = "I don't have any documents to analyze yet. Please upload a medical document first."
CHAT_UNAVAILABLE_MESSAGE = "I'm having trouble connecting to my AI brain right now. Please try again in a moment."
SUMMARY_UNAVAILABLE_MESSAGE = "Could not generate summary at this time. Please try again later."


def translation_failed(language: str) -> str:
    return f"[Translation to {language} failed]"


def build_vitals_insight(vitals: Dict[str, Any]) -> HealthInsight:
    readings = {}
    for name, reading in vitals.items():
        if isinstance(reading, dict):
            readings[name] = VitalReading.model_validate(reading)
        else:
            readings[name] = VitalReading(value=reading)

    return HealthInsight(
        id=VITALS_INSIGHT_ID,
        category=InsightCategory.OBSERVATION,
        severity=InsightSeverity.LOW,
        title="Latest Health Vitals",
        description="A snapshot of your most recent key metrics.",
        recommendation="Monitor these values and discuss any concerns with your doctor.",
        vitals=readings,
    )


class AssistantService:
    """Insights, chat, summaries and translation backed by the AI collaborator."""

    def __init__(self, ai_client: AIHealthClient, id_generator: Optional[IdGenerator] = None):
        self.ai_client = ai_client
        self.id_generator = id_generator or IdGenerator()

    # ============ INSIGHTS ============

    async def health_insights(
        self,
        documents: Sequence[HealthDocument],
        language: str = DEFAULT_LANGUAGE,
    ) -> List[HealthInsight]:
        """
        Insights over a document set, with the vitals snapshot first when present.

        Returns an empty list for no documents or when the AI call fails.
        """
        if not documents:
            return []

        try:
            response = await self.ai_client.insights(documents)
        except TransientServiceFailure as e:
            logger.warning(f"Health insights unavailable: {e}")
            return []

        insights: List[HealthInsight] = []
        vitals = response.get("vitals")
        if isinstance(vitals, dict) and vitals:
            try:
                insights.append(build_vitals_insight(vitals))
            except ValidationError as e:
                logger.warning(f"Ignoring malformed vitals from AI: {e}")

        for raw in response.get("insights") or []:
            if not isinstance(raw, dict):
                continue
            try:
                insight = HealthInsight.model_validate({**raw, "id": self.id_generator.new_id("insight")})
            except ValidationError as e:
                logger.warning(f"Ignoring malformed insight from AI: {e}")
                continue
            insights.append(insight)

        logger.info(f"Generated {len(insights)} insights from {len(documents)} documents")

        if language != DEFAULT_LANGUAGE:
            return await self.translate_insights(insights, language)
        return insights

    async def translate_insights(self, insights: Sequence[HealthInsight], language: str) -> List[HealthInsight]:
        """Translate title, description and recommendation; everything else is kept as is."""
        translated = []
        for insight in insights:
            updates = {}
            for field in ("title", "description", "recommendation"):
                updates[field] = await self.translate(getattr(insight, field), language)
            translated.append(insight.model_copy(update=updates))
        return translated

    async def translate(self, text: str, language: str) -> str:
        try:
            return await self.ai_client.translate(text, language)
        except TransientServiceFailure as e:
            logger.warning(f"Translation to {language} failed: {e}")
            return translation_failed(language)

    # ============ CHAT & SUMMARIES ============

    async def chat(self, message: str, documents: Sequence[HealthDocument]) -> str:
        if not documents:
            return NO_DOCUMENTS_MESSAGE

        try:
            return await self.ai_client.chat(message, documents)
        except TransientServiceFailure as e:
            logger.warning(f"Chat response unavailable: {e}")
            return CHAT_UNAVAILABLE_MESSAGE

    async def visit_summary(self, documents: Sequence[HealthDocument]) -> str:
        try:
            return await self.ai_client.visit_summary(documents)
        except TransientServiceFailure as e:
            logger.warning(f"Visit summary unavailable: {e}")
            return SUMMARY_UNAVAILABLE_MESSAGE

    # ============ INSURANCE ============

    async def analyze_bill(self, document: HealthDocument, policy: InsurancePolicy) -> str:
        """Markdown explanation of a bill against the policy's cost sharing."""
        if not isinstance(document, ReceiptDocument):
            raise BadRequestException("Only receipts can be analyzed against a policy")

        try:
            return await self.ai_client.analyze_bill(document, policy)
        except TransientServiceFailure as e:
            logger.warning(f"Bill analysis unavailable for {document.id}: {e}")
            return SUMMARY_UNAVAILABLE_MESSAGE

    async def draft_appeal(self, document: HealthDocument, policy: InsurancePolicy, patient_name: str) -> str:
        """Appeal letter draft for a denied claim."""
        if not isinstance(document, ReceiptDocument) or document.claim_status != ClaimStatus.DENIED:
            raise BadRequestException("Appeals can only be drafted for denied claims")

        try:
            return await self.ai_client.draft_appeal(document, policy, patient_name)
        except TransientServiceFailure as e:
            logger.warning(f"Appeal draft unavailable for {document.id}: {e}")
            return SUMMARY_UNAVAILABLE_MESSAGE
