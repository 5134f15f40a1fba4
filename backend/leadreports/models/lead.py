from datetime import datetime
import enum

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadreports.core.database import Base


class DeviceType(str, enum.Enum):
    pc = "pc"
    mobile = "mobile"
    tablet = "tablet"
    unknown = "unknown"


class Lead(Base):
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    phone: Mapped[str | None] = mapped_column(String(30), index=True)
    # Companies define their own status vocabulary, so this is not an Enum column.
    status: Mapped[str | None] = mapped_column(String(50), default="new")
    device_type: Mapped[DeviceType | None] = mapped_column(Enum(DeviceType), default=DeviceType.unknown)
    assigned_to: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    assignee = relationship("User")
