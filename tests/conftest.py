"""Shared fixtures."""

import pytest

from app.features.family.models import FamilyMember
from app.store.base import RecordKind
from app.store.memory import InMemoryRecordStore
from tests.fakes import OWNER, FakeAIClient, FixedClock, SequentialIdGenerator, run


@pytest.fixture
def id_generator():
    return SequentialIdGenerator()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(id_generator):
    return InMemoryRecordStore(id_generator=id_generator)


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def family(store):
    """Two family members, A and B, owned by OWNER."""

    async def _add():
        a = await store.insert(
            RecordKind.FAMILY_MEMBERS,
            FamilyMember(id="fam-a", user_id=OWNER, name="Dhanya", relationship="father"),
        )
        b = await store.insert(
            RecordKind.FAMILY_MEMBERS,
            FamilyMember(id="fam-b", user_id=OWNER, name="Krishna", relationship="self"),
        )
        return a, b

    return run(_add())
