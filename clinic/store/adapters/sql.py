import datetime as dt
from typing import Any

from loguru import logger
from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    delete,
    event,
    func,
    select,
    text,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from clinic.domain.exceptions import PatientNotFoundError
from clinic.domain.models import (
    Appointment,
    AppointmentDraft,
    AppointmentStatus,
    Patient,
    PatientDraft,
)
from clinic.store.ports import AbstractEntityStore


class Base(DeclarativeBase):
    pass


class PatientRow(Base):
    __tablename__ = "patients"
    # Without AUTOINCREMENT SQLite may hand out the id of a deleted last row again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255))
    last_name: Mapped[str] = mapped_column(String(255))
    date_of_birth: Mapped[dt.date] = mapped_column(Date)
    contact_number: Mapped[str] = mapped_column(String(255))


class AppointmentRow(Base):
    __tablename__ = "appointments"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    appointment_date_time: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))
    reason_for_visit: Mapped[str] = mapped_column(Text)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus, name="appointment_status"),
        default=AppointmentStatus.SCHEDULED,
    )
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), index=True
    )


def _to_patient(row: PatientRow, appointment_ids: list[int]) -> Patient:
    return Patient(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        date_of_birth=row.date_of_birth,
        contact_number=row.contact_number,
        appointments=appointment_ids,
    )


def _to_appointment(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=row.id,
        appointment_date_time=row.appointment_date_time,
        reason_for_visit=row.reason_for_visit,
        status=row.status,
        patient_id=row.patient_id,
    )


class SqlEntityStore(AbstractEntityStore):
    """Entity store backed by a relational database through SQLAlchemy's asyncio API.

    Each operation runs in its own transaction. Rows being changed are read
    with ``SELECT ... FOR UPDATE`` where the database supports it, and a
    patient is deleted together with its appointments in one transaction.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        engine_kwargs: dict[str, Any] = {}
        if url.startswith("sqlite") and ":memory:" in url:
            # A private in-memory database exists per connection; share one.
            engine_kwargs = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        self._engine = create_async_engine(url, echo=echo, **engine_kwargs)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

        if self._engine.dialect.name == "sqlite":

            @event.listens_for(self._engine.sync_engine, "connect")
            def _enable_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    async def initialize(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready ({})", self._engine.url.render_as_string())

    async def _appointment_ids(self, session: AsyncSession, patient_id: int) -> list[int]:
        ids = await session.scalars(
            select(AppointmentRow.id)
            .where(AppointmentRow.patient_id == patient_id)
            .order_by(AppointmentRow.id)
        )
        return list(ids)

    async def _select_patients(
        self, session: AsyncSession, patient_id: int | None = None
    ) -> list[Patient]:
        # One statement, so the patient and its appointment ids come from the
        # same snapshot even when a cascade delete commits concurrently.
        query = select(PatientRow, AppointmentRow.id).outerjoin(
            AppointmentRow, AppointmentRow.patient_id == PatientRow.id
        )
        if patient_id is not None:
            query = query.where(PatientRow.id == patient_id)
        query = query.order_by(PatientRow.id, AppointmentRow.id)

        rows: dict[int, PatientRow] = {}
        owned: dict[int, list[int]] = {}
        for patient_row, appointment_id in await session.execute(query):
            rows.setdefault(patient_row.id, patient_row)
            ids = owned.setdefault(patient_row.id, [])
            if appointment_id is not None:
                ids.append(appointment_id)
        return [_to_patient(row, owned[pid]) for pid, row in rows.items()]

    async def create_patient(self, draft: PatientDraft) -> Patient:
        async with self._sessions() as session, session.begin():
            row = PatientRow(**draft.model_dump())
            session.add(row)
            await session.flush()
            return _to_patient(row, [])

    async def get_patient(self, patient_id: int) -> Patient | None:
        async with self._sessions() as session:
            found = await self._select_patients(session, patient_id)
        return found[0] if found else None

    async def update_patient(self, patient_id: int, fields: dict[str, Any]) -> Patient | None:
        async with self._sessions() as session, session.begin():
            row = await session.get(PatientRow, patient_id, with_for_update=True)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            await session.flush()
            return _to_patient(row, await self._appointment_ids(session, patient_id))

    async def delete_patient(self, patient_id: int) -> bool:
        async with self._sessions() as session, session.begin():
            await session.execute(
                delete(AppointmentRow).where(AppointmentRow.patient_id == patient_id)
            )
            result = await session.execute(delete(PatientRow).where(PatientRow.id == patient_id))
            return result.rowcount > 0  # type: ignore[attr-defined]

    async def list_patients(self) -> list[Patient]:
        async with self._sessions() as session:
            return await self._select_patients(session)

    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        async with self._sessions() as session, session.begin():
            # Lock the owner so a concurrent cascade cannot remove it mid-insert.
            owner = await session.get(PatientRow, draft.patient_id, with_for_update=True)
            if owner is None:
                raise PatientNotFoundError(draft.patient_id)
            row = AppointmentRow(**draft.model_dump())
            session.add(row)
            await session.flush()
            return _to_appointment(row)

    async def get_appointment(self, appointment_id: int) -> Appointment | None:
        async with self._sessions() as session:
            row = await session.get(AppointmentRow, appointment_id)
            return _to_appointment(row) if row is not None else None

    async def update_appointment(
        self, appointment_id: int, fields: dict[str, Any]
    ) -> Appointment | None:
        async with self._sessions() as session, session.begin():
            row = await session.get(AppointmentRow, appointment_id, with_for_update=True)
            if row is None:
                return None
            new_owner = fields.get("patient_id", row.patient_id)
            if new_owner != row.patient_id:
                owner = await session.get(PatientRow, new_owner, with_for_update=True)
                if owner is None:
                    raise PatientNotFoundError(new_owner)
            for key, value in fields.items():
                setattr(row, key, value)
            await session.flush()
            return _to_appointment(row)

    async def delete_appointment(self, appointment_id: int) -> bool:
        async with self._sessions() as session, session.begin():
            result = await session.execute(
                delete(AppointmentRow).where(AppointmentRow.id == appointment_id)
            )
            return result.rowcount > 0  # type: ignore[attr-defined]

    async def list_appointments(self) -> list[Appointment]:
        async with self._sessions() as session:
            rows = await session.scalars(select(AppointmentRow).order_by(AppointmentRow.id))
            return [_to_appointment(row) for row in rows]

    async def count_appointments(self) -> int:
        async with self._sessions() as session:
            count = await session.scalar(select(func.count()).select_from(AppointmentRow))
            return count or 0

    async def health_check(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            logger.warning("Database health check failed: {}", exc)
            return False

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Database engine disposed")
