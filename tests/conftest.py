from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from clinic.api.app import create_app
from clinic.config import AppConfig
from clinic.domain.models import Patient
from clinic.notifications.confirmation import ConfirmationNotifier
from clinic.services.appointments import AppointmentService
from clinic.services.patients import PatientService
from clinic.store.adapters.memory import InMemoryEntityStore
from tests.factories import TODAY, make_patient_input


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def patient_service(store: InMemoryEntityStore) -> PatientService:
    return PatientService(store, today=lambda: TODAY)


@pytest.fixture
def appointment_service(store: InMemoryEntityStore) -> AppointmentService:
    return AppointmentService(store)


@pytest_asyncio.fixture
async def patient(store: InMemoryEntityStore) -> Patient:
    """A patient already in ``store``."""
    return await store.create_patient(make_patient_input().to_draft())


@pytest.fixture
def notifier() -> ConfirmationNotifier:
    return ConfirmationNotifier(delay_seconds=0)


@pytest.fixture
def app(store: InMemoryEntityStore, notifier: ConfirmationNotifier) -> FastAPI:
    return create_app(AppConfig(), store=store, confirmation_task=notifier)


@pytest_asyncio.fixture
async def api(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """An HTTP client talking to ``app`` in-process, with the lifespan running."""
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
