from sqlalchemy import (
    Column, String, Date, Time, DateTime, Integer, Boolean, ForeignKey,
    Numeric, Text, CheckConstraint, Index, func,
)
from laborops.models.base import Base
from laborops.services.labor.cost import labor_cost
import uuid


class Shift(Base):
    __tablename__ = "shifts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    schedule_id = Column(String, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(String, ForeignKey("locations.id"), nullable=False, index=True)

    # NULL = open shift
    user_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)

    position = Column(String, nullable=False)
    shift_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    break_minutes = Column(Integer, nullable=False, default=0)

    total_hours = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    estimated_cost = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    status = Column(String, nullable=False, default="scheduled")
    requires_coverage = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)

    clock_in_at = Column(DateTime, nullable=True)
    clock_out_at = Column(DateTime, nullable=True)
    actual_hours = Column(Numeric(5, 2, asdecimal=False), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_shifts_time_range"),
        CheckConstraint("break_minutes >= 0", name="ck_shifts_break_nonneg"),
        CheckConstraint("total_hours IS NULL OR total_hours >= 0", name="ck_shifts_hours_nonneg"),
    )

    # labor-line view used by summarize_labor
    @property
    def scheduled_hours(self) -> float:
        return self.total_hours or 0

    @property
    def labor_cost(self) -> float:
        return labor_cost(self.total_hours, self.actual_hours, self.hourly_rate)


Index("ix_shifts_user_date", Shift.user_id, Shift.shift_date)
