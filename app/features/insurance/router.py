# Insurance Co-Pilot Feature - Router

from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies import get_assistant_service, get_family_service, get_insurance_service
from app.features.assistant.service import AssistantService
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.family.service import FamilyService
from app.features.insurance.models import InsurancePolicy
from app.features.insurance.schemas import BillAnalysisResponse, BillListResponse
from app.features.insurance.service import InsuranceService


router = APIRouter(prefix="/insurance", tags=["Insurance"])


@router.get("/policy", response_model=InsurancePolicy)
async def get_policy(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InsuranceService = Depends(get_insurance_service),
):
    """The user's insurance policy with deductible and out-of-pocket progress."""
    return await service.get_policy(current_user.id)


@router.get("/bills", response_model=BillListResponse)
async def list_bills(
    family_member_id: Optional[str] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InsuranceService = Depends(get_insurance_service),
):
    """
    Medical bills (receipts), newest first.

    - **family_member_id**: Only this family member's bills
    """
    bills = await service.list_bills(current_user.id, family_member_id=family_member_id)
    return BillListResponse(bills=bills, total=len(bills))


@router.post("/bills/{document_id}/analysis", response_model=BillAnalysisResponse)
async def analyze_bill(
    document_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InsuranceService = Depends(get_insurance_service),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Explain what the policy should cover on this bill."""
    bill = await service.get_bill(current_user.id, document_id)
    policy = await service.get_policy(current_user.id)
    content = await assistant.analyze_bill(bill, policy)
    return BillAnalysisResponse(document_id=document_id, content=content)


@router.post("/bills/{document_id}/appeal", response_model=BillAnalysisResponse)
async def draft_appeal(
    document_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: InsuranceService = Depends(get_insurance_service),
    family: FamilyService = Depends(get_family_service),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Draft an appeal letter for a denied claim."""
    bill = await service.get_bill(current_user.id, document_id)
    policy = await service.get_policy(current_user.id)
    patient = await family.get_family_member(current_user.id, bill.family_member_id)
    content = await assistant.draft_appeal(bill, policy, patient.name)
    return BillAnalysisResponse(document_id=document_id, content=content)
