# Insurance Co-Pilot Feature - Models

from typing import Optional
from pydantic import BaseModel, computed_field


class CostShareTracker(BaseModel):
    """Limit and amount met so far, for an individual and the whole family."""

    individual: float
    family: float
    individual_met: float = 0
    family_met: float = 0

    @computed_field
    @property
    def individual_remaining(self) -> float:
        return max(self.individual - self.individual_met, 0)

    @computed_field
    @property
    def family_remaining(self) -> float:
        return max(self.family - self.family_met, 0)


class CoPaySchedule(BaseModel):
    """Co-pay per visit category."""

    primary: float
    specialist: float
    emergency: float


class InsurancePolicy(BaseModel):
    """The single insurance policy of an account."""

    id: Optional[str] = None
    user_id: str
    provider_name: str
    policy_number: str
    deductible: CostShareTracker
    out_of_pocket_max: CostShareTracker
    co_pay: CoPaySchedule
