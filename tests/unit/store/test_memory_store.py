import asyncio

import pytest

from clinic.store.adapters.memory import InMemoryEntityStore
from tests.factories import make_appointment_input, make_patient_input


class TestConcurrentAccess:
    @pytest.mark.asyncio
    async def test_parallel_creates_get_unique_ids(self, store: InMemoryEntityStore) -> None:
        patients = await asyncio.gather(
            *(store.create_patient(make_patient_input().to_draft()) for _ in range(50))
        )

        assert len({p.id for p in patients}) == 50

    @pytest.mark.asyncio
    async def test_readers_never_see_half_a_cascade(self, store: InMemoryEntityStore) -> None:
        patient = await store.create_patient(make_patient_input().to_draft())
        for _ in range(5):
            await store.create_appointment(make_appointment_input(patient.id).to_draft())

        observed: list[tuple[bool, int]] = []

        async def reader() -> None:
            for _ in range(20):
                found = await store.get_patient(patient.id)
                observed.append((found is not None, await store.count_appointments()))
                await asyncio.sleep(0)

        await asyncio.gather(reader(), store.delete_patient(patient.id), reader())

        # Either the patient with all five appointments, or neither.
        assert set(observed) <= {(True, 5), (False, 0)}
        assert observed[-1] == (False, 0)

    @pytest.mark.asyncio
    async def test_parallel_updates_to_same_patient_all_apply_whole(
        self, store: InMemoryEntityStore
    ) -> None:
        patient = await store.create_patient(make_patient_input().to_draft())
        names = [f"Name{i:02d}" for i in range(20)]

        await asyncio.gather(
            *(
                store.update_patient(patient.id, {"first_name": n, "last_name": n})
                for n in names
            )
        )

        final = await store.get_patient(patient.id)
        assert final is not None
        assert final.first_name == final.last_name
        assert final.first_name in names


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_fails_health_check(self, store: InMemoryEntityStore) -> None:
        assert await store.health_check() is True

        await store.close()

        assert store.closed is True
        assert await store.health_check() is False
