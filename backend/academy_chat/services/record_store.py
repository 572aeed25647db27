"""
Record Store Gateway

Create/read access to the trial-session records. Every call returns a
tagged result model instead of raising, so tool handlers can relay
store failures to the LLM as plain messages.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from academy_chat.models.trial_session import TrialSession


class TrialSessionData(BaseModel):
    """The eight fields collected from the parent during the booking flow."""

    category: str = Field(
        min_length=1, description="Categoría para la clase de prueba."
    )
    testDay: str = Field(
        min_length=1, description="Día preferido para la prueba."
    )
    testTimes: str = Field(
        min_length=1,
        description="Horario preferido para la prueba, como '6:00pm', '7:00 am'.",
    )
    childrenFullName: str = Field(
        min_length=1, description="Nombre completo del niño o niña."
    )
    childrenAge: int = Field(
        gt=0, strict=True, description="Edad del niño o niña (debe ser un número)."
    )
    parentFullName: str = Field(
        min_length=1, description="Nombre completo del padre, madre o apoderado."
    )
    phone: str = Field(
        min_length=7, description="Número de celular del padre/madre."
    )
    email: EmailStr = Field(description="Correo electrónico del padre/madre.")

    model_config = ConfigDict(str_strip_whitespace=True)


class TrialSessionRecord(TrialSessionData):
    id: str
    createdAt: datetime | None = None


class CreateResult(BaseModel):
    success: bool
    id: str | None = None
    error: str | None = None


class ListResult(BaseModel):
    success: bool
    records: list[TrialSessionRecord] = []
    count: int = 0
    error: str | None = None


def _to_record(row: TrialSession) -> TrialSessionRecord:
    return TrialSessionRecord.model_construct(
        id=str(row.id),
        category=row.category,
        testDay=row.test_day,
        testTimes=row.test_times,
        childrenFullName=row.children_full_name,
        childrenAge=row.children_age,
        parentFullName=row.parent_full_name,
        phone=row.phone,
        email=row.email,
        createdAt=row.created_at,
    )


class RecordStore:
    """Gateway over the trial_sessions table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(self, data: TrialSessionData) -> CreateResult:
        """Persist one booking; the creation timestamp comes from the database."""
        try:
            async with self.session_factory() as session:
                row = TrialSession(
                    category=data.category,
                    test_day=data.testDay,
                    test_times=data.testTimes,
                    children_full_name=data.childrenFullName,
                    children_age=int(data.childrenAge),
                    parent_full_name=data.parentFullName,
                    phone=data.phone,
                    email=str(data.email),
                )
                session.add(row)
                await session.commit()
                await session.refresh(row)
        except Exception as e:
            print(f"[Store] Error saving trial session: {e}")
            return CreateResult(success=False, error=str(e) or type(e).__name__)

        print(f"[Store] Trial session saved with ID: {row.id}")
        return CreateResult(success=True, id=str(row.id))

    async def list_all(self) -> ListResult:
        """Read every record. Always hits the database; nothing is cached."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(TrialSession).order_by(TrialSession.created_at)
                )
                rows = result.scalars().all()
        except Exception as e:
            print(f"[Store] Error reading trial sessions: {e}")
            return ListResult(success=False, error=str(e) or type(e).__name__)

        records = [_to_record(row) for row in rows]
        print(f"[Store] Retrieved {len(records)} trial sessions")
        return ListResult(success=True, records=records, count=len(records))
