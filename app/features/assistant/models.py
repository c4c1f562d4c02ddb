# AI Assistant Feature - Models

from enum import Enum
from typing import Dict, Optional, Union
from pydantic import BaseModel


VITALS_INSIGHT_ID = "vitals-summary"


class InsightCategory(str, Enum):
    TREND = "Trend"
    INTERACTION = "Interaction"
    REMINDER = "Reminder"
    OBSERVATION = "Observation"
    INSURANCE = "Insurance"


class InsightSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class VitalReading(BaseModel):
    value: Union[float, str]
    unit: str = ""


class HealthInsight(BaseModel):
    """AI-derived observation about a document set. Never persisted."""

    id: str
    category: InsightCategory
    severity: InsightSeverity
    title: str
    description: str
    recommendation: str
    vitals: Optional[Dict[str, VitalReading]] = None
