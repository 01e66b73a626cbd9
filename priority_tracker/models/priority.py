"""Priority model: one weekly commitment of a user."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from priority_tracker.models.database import Base

TITLE_MAX_LENGTH = 150


class PriorityStatus(str, enum.Enum):
    """Progress status of a priority."""

    EN_TIEMPO = "EN_TIEMPO"
    EN_RIESGO = "EN_RIESGO"
    BLOQUEADO = "BLOQUEADO"
    COMPLETADO = "COMPLETADO"

    @property
    def label(self) -> str:
        return {
            PriorityStatus.EN_TIEMPO: "En Tiempo",
            PriorityStatus.EN_RIESGO: "En Riesgo",
            PriorityStatus.BLOQUEADO: "Bloqueado",
            PriorityStatus.COMPLETADO: "Completado",
        }[self]


class Priority(Base):
    """Priority model for a user's commitment in a Monday-Friday week."""

    __tablename__ = "priorities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    initiative_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("strategic_initiatives.id"), nullable=False, index=True
    )

    # Monday 00:00:00.000 / Friday 23:59:59.999 of the same week
    week_start: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    week_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    completion_percentage: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[PriorityStatus] = mapped_column(
        Enum(PriorityStatus), default=PriorityStatus.EN_TIEMPO, nullable=False
    )

    was_edited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_edited_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_carried_over: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="priorities")
    initiative: Mapped["StrategicInitiative"] = relationship(
        "StrategicInitiative", back_populates="priorities"
    )

    @property
    def is_completed(self) -> bool:
        return self.status == PriorityStatus.COMPLETADO

    def __repr__(self) -> str:
        return f"<Priority(id={self.id}, title='{self.title[:30]}...', status={self.status.value})>"
