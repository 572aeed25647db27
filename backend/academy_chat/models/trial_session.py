import uuid
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from academy_chat.core.database import Base


class TrialSession(Base):
    __tablename__ = "trial_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    test_day: Mapped[str] = mapped_column(String(100), nullable=False)
    test_times: Mapped[str] = mapped_column(String(100), nullable=False)
    children_full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    children_age: Mapped[int] = mapped_column(Integer, nullable=False)
    parent_full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # Assigned by the database at insert time
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
