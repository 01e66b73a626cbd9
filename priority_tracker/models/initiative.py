"""Strategic initiative model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from priority_tracker.models.database import Base

DEFAULT_INITIATIVE_COLOR = "#3B82F6"


class StrategicInitiative(Base):
    """Company-wide initiative that weekly priorities are tagged to."""

    __tablename__ = "strategic_initiatives"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default="")
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_INITIATIVE_COLOR, nullable=False)

    # Display position, 1-based; reassigned on reorder
    order: Mapped[int] = mapped_column(Integer, default=1, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    priorities: Mapped[list["Priority"]] = relationship("Priority", back_populates="initiative")

    def __repr__(self) -> str:
        return f"<StrategicInitiative(id={self.id}, name='{self.name[:30]}', order={self.order})>"
