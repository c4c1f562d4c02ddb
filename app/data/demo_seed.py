"""
Demo household loaded at startup when ``SEED_DEMO_DATA`` is enabled.

Every record is owned by the shared demo owner, so all signed-in users see it
alongside their own records.
"""

from datetime import datetime, timezone

from app.core.logging import logger
from app.data.doctor_directory import get_directory_profile
from app.features.doctors.models import Doctor
from app.features.documents.models import (
    BillingInfo,
    BillingItem,
    ClaimStatus,
    ClinicalDocument,
    ExtractedValue,
    LabReportDocument,
    ReceiptDocument,
)
from app.features.family.models import FamilyMember
from app.features.insurance.models import CoPaySchedule, CostShareTracker, InsurancePolicy
from app.store.base import RecordKind, RecordStore


DEMO_DOCTOR_TOKEN = "doctoken-1678886400000"


def _utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def demo_family_members(owner_id: str):
    return [
        FamilyMember(id="fam-1", user_id=owner_id, name="Dhanya", relationship="father",
                     photo_url="https://i.pravatar.cc/150?u=dhanya"),
        FamilyMember(id="fam-2", user_id=owner_id, name="Krishna", relationship="self",
                     photo_url="https://i.pravatar.cc/150?u=krishna"),
        FamilyMember(id="fam-3", user_id=owner_id, name="lee", relationship="Child",
                     photo_url="https://i.pravatar.cc/150?u=anika"),
    ]


def demo_documents(owner_id: str):
    return [
        LabReportDocument(
            id="doc-1",
            user_id=owner_id,
            family_member_id="fam-1",
            file_name="dhanya_lipid_panel.pdf",
            uploaded_at=_utc(2024, 1, 15, 10, 30),
            timestamp=_utc(2024, 1, 14, 9),
            report_type="Lipid Panel",
            hospital="City Health Clinic",
            extracted_values={
                "Total Cholesterol": ExtractedValue(value=210, unit="mg/dL", ref="<200", is_abnormal=True),
                "LDL": ExtractedValue(value=140, unit="mg/dL", ref="<100", is_abnormal=True),
                "HDL": ExtractedValue(value=45, unit="mg/dL", ref=">40", is_abnormal=False),
            },
            diagnosis=["Hyperlipidemia"],
            medications=["Atorvastatin 20mg"],
            abnormalities=["High Total Cholesterol", "High LDL"],
            patient_summary=(
                'Your cholesterol levels are a bit high, especially the "bad" LDL cholesterol. '
                "Your doctor has prescribed medication to help manage this."
            ),
            doctor_summary=(
                "Patient diagnosed with hyperlipidemia. LDL at 140 mg/dL. Initiated on Atorvastatin "
                "20mg daily. Advised on diet and lifestyle modifications."
            ),
        ),
        ClinicalDocument(
            id="doc-krishna-1",
            user_id=owner_id,
            family_member_id="fam-2",
            document_type="Scan Report",
            file_name="krishna_ct_scan.pdf",
            uploaded_at=_utc(2024, 2, 10, 11),
            timestamp=_utc(2024, 2, 9, 16),
            report_type="Coronary Angiogram",
            hospital="Apollo Hospital",
            diagnosis=["CAD-Borderline TVD"],
            medications=["T. RIOSTAT-CV", "T. OLMESARTAN"],
            abnormalities=["Moderate stenosis in proximal LAD"],
            patient_summary=(
                "A CT scan of your heart shows some moderate narrowing in one of the main arteries. "
                "Your doctor has recommended medical management."
            ),
            doctor_summary=(
                "Coronary Angiogram reveals moderate stenosis (40%) in proximal LAD and proximal OM. "
                "CAD-Borderline TVD. Medical management advised."
            ),
        ),
        ReceiptDocument(
            id="doc-krishna-2",
            user_id=owner_id,
            family_member_id="fam-2",
            file_name="krishna_pharmacy_bill.pdf",
            uploaded_at=_utc(2024, 2, 11, 12),
            timestamp=_utc(2024, 2, 10, 18),
            report_type="Pharmacy Bill",
            hospital="Apollo Pharmacy",
            patient_summary="This is a receipt for medications purchased for Krishna.",
            doctor_summary="Pharmacy receipt for prescribed medications.",
            billing_info=BillingInfo(
                total_amount=2044.64,
                items=[
                    BillingItem(name="CDSTAT CL", amount=511.88),
                    BillingItem(name="FENOLIP 145", amount=800.13),
                    BillingItem(name="OLMEZEST BETA 50", amount=732.63),
                ],
            ),
            claim_status=ClaimStatus.DENIED,
        ),
    ]


def demo_insurance_policy(owner_id: str) -> InsurancePolicy:
    return InsurancePolicy(
        id="policy-1",
        user_id=owner_id,
        provider_name="United Health Shield",
        policy_number="UHS-987654321",
        deductible=CostShareTracker(individual=5000, family=15000, individual_met=1200, family_met=3400),
        out_of_pocket_max=CostShareTracker(individual=25000, family=50000, individual_met=4500, family_met=8800),
        co_pay=CoPaySchedule(primary=500, specialist=1500, emergency=5000),
    )


def demo_doctor(owner_id: str, public_base_url: str) -> Doctor:
    profile = get_directory_profile("dir-dr-106")
    return Doctor(
        **profile.model_dump(exclude={"id"}),
        id="demo-doctor-1",
        directory_id=profile.id,
        user_id=owner_id,
        access_token=DEMO_DOCTOR_TOKEN,
        access_link=f"{public_base_url.rstrip('/')}/doctor-view/{DEMO_DOCTOR_TOKEN}",
        created_at=_utc(2024, 3, 15, 10),
        family_member_ids=["fam-1", "fam-2"],
    )


async def seed_demo_data(store: RecordStore, owner_id: str, public_base_url: str) -> bool:
    """Insert the demo household unless it is already present. Returns True if seeded."""
    if await store.get(RecordKind.FAMILY_MEMBERS, "fam-1") is not None:
        logger.info("Demo data already present, skipping seed")
        return False

    for member in demo_family_members(owner_id):
        await store.insert(RecordKind.FAMILY_MEMBERS, member)
    for document in demo_documents(owner_id):
        await store.insert(RecordKind.DOCUMENTS, document)
    await store.insert(RecordKind.INSURANCE_POLICIES, demo_insurance_policy(owner_id))
    await store.insert(RecordKind.DOCTORS, demo_doctor(owner_id, public_base_url))

    logger.info(f"Seeded demo household for owner {owner_id}")
    return True
