from sqlalchemy import (
    Column, String, Date, Time, DateTime, Integer, Boolean, ForeignKey,
    Text, CheckConstraint, func,
)
from laborops.models.base import Base
import uuid


class EmployeeAvailability(Base):
    __tablename__ = "employee_availability"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(String, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)

    day_of_week = Column(Integer, nullable=False, index=True)  # 0 = Sunday .. 6 = Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_preferred = Column(Boolean, default=False)

    effective_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_dow"),
        CheckConstraint("start_time < end_time", name="ck_availability_time_range"),
    )
