# Doctor Sharing Feature - Service

from typing import List, Optional, Sequence

from app.core.ids import IdGenerator
from app.core.logging import logger
from app.core.time_utils import Clock, to_utc, utc_now
from app.data.doctor_directory import search_directory
from app.features.doctors.models import Doctor, DoctorProfile
from app.features.doctors.schemas import DoctorViewResponse
from app.features.documents.queries import DocumentQueryService
from app.shared.exceptions import AccessDeniedException, NotFoundException, ValidationFailedException
from app.store.base import RecordKind, RecordStore


class DoctorAccessService:
    """
    Grants, revokes and resolves read-only sharing links for doctors.

    Each account holds its own record per directory doctor: granting the same
    doctor again unions the family-member set and keeps that account's token.
    Tokens are stored raw and matched exactly; they do not expire.
    """

    def __init__(
        self,
        store: RecordStore,
        public_base_url: str,
        id_generator: Optional[IdGenerator] = None,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.id_generator = id_generator or store.id_generator
        self.clock = clock
        self.queries = DocumentQueryService(store)

    def build_access_link(self, token: str) -> str:
        return f"{self.public_base_url}/doctor-view/{token}"

    @staticmethod
    def search_directory(query: str) -> List[DoctorProfile]:
        return search_directory(query)

    async def list_doctors(self, owner_id: str) -> List[Doctor]:
        return await self.store.list(RecordKind.DOCTORS, {"user_id": owner_id})

    async def find_grant(self, owner_id: str, directory_id: str) -> Optional[Doctor]:
        """The owner's own record for a directory doctor, if any."""
        # A list value skips the shared demo owner
        matches = await self.store.list(
            RecordKind.DOCTORS, {"user_id": [owner_id], "directory_id": directory_id}
        )
        return matches[0] if matches else None

    async def _check_family_members(self, owner_id: str, family_member_ids: Sequence[str]) -> None:
        owners = self.store.owner_ids(owner_id)
        for family_member_id in family_member_ids:
            member = await self.store.get(RecordKind.FAMILY_MEMBERS, family_member_id)
            if member is None or member.user_id not in owners:
                raise NotFoundException(f"Family member {family_member_id} not found")

    async def grant(self, owner_id: str, profile: DoctorProfile, family_member_ids: Sequence[str]) -> Doctor:
        """
        Give a doctor read access to some family members.

        Args:
            owner_id: Account granting access
            profile: Directory profile of the doctor
            family_member_ids: Members to share; unioned with any earlier grant

        Raises:
            ValidationFailedException: no family members given
            NotFoundException: a family member does not belong to the owner
        """
        requested = list(dict.fromkeys(family_member_ids))
        if not requested:
            raise ValidationFailedException("Select at least one family member to share")
        await self._check_family_members(owner_id, requested)

        existing = await self.find_grant(owner_id, profile.id)
        if existing is not None:
            merged = list(dict.fromkeys([*existing.family_member_ids, *requested]))
            doctor = await self.store.update(RecordKind.DOCTORS, existing.id, {"family_member_ids": merged})
            logger.info(f"Extended access for doctor {doctor.id} to {len(merged)} family members")
            return doctor

        token = self.id_generator.new_token()
        doctor = Doctor(
            **profile.model_dump(exclude={"id"}),
            directory_id=profile.id,
            user_id=owner_id,
            access_token=token,
            access_link=self.build_access_link(token),
            created_at=to_utc(self.clock()),
            family_member_ids=requested,
        )
        doctor = await self.store.insert(RecordKind.DOCTORS, doctor)
        logger.info(f"Granted doctor {doctor.id} access to {len(requested)} family members")
        return doctor

    async def revoke(self, owner_id: str, doctor_id: str) -> None:
        """Delete the doctor record; its token stops resolving immediately."""
        doctor = await self.store.get(RecordKind.DOCTORS, doctor_id)
        if doctor is None or doctor.user_id not in self.store.owner_ids(owner_id):
            raise NotFoundException("Doctor not found")

        await self.store.delete(RecordKind.DOCTORS, doctor_id)
        logger.info(f"Revoked access for doctor {doctor_id}")

    async def resolve(self, token: str) -> DoctorViewResponse:
        """
        Documents visible through a sharing token, newest first.

        Raises:
            AccessDeniedException: unknown or revoked token
        """
        if not token:
            raise AccessDeniedException()

        matches = await self.store.list(RecordKind.DOCTORS, {"access_token": token})
        if not matches:
            logger.warning(f"Rejected doctor view for unknown token {token[:6]}...")
            raise AccessDeniedException()

        doctor = matches[0]
        documents = await self.queries.for_doctor(doctor)

        names = []
        for family_member_id in doctor.family_member_ids:
            member = await self.store.get(RecordKind.FAMILY_MEMBERS, family_member_id)
            if member is not None:
                names.append(member.name)
        patient_label = f"Records for {', '.join(names)}" if names else "Shared Records"

        logger.info(f"Doctor {doctor.id} opened shared view with {len(documents)} documents")
        return DoctorViewResponse(
            doctor_name=doctor.name,
            patient_label=patient_label,
            documents=documents,
        )
