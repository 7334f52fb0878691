from sqlalchemy import (
    Column, String, Date, Time, DateTime, Integer, ForeignKey,
    Numeric, Float, Text, CheckConstraint, Index, func,
)
from laborops.models.base import Base
import uuid


class LaborEntry(Base):
    """Flattened shift + timeclock record used for labor summaries and forecasting."""

    __tablename__ = "labor_entries"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    location_id = Column(String, ForeignKey("locations.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    position = Column(String, nullable=True)
    status = Column(String, nullable=False, default="scheduled")

    # Store naive local datetimes, same wall clock as start/end
    clock_in_time = Column(DateTime(timezone=False), nullable=True)
    clock_out_time = Column(DateTime(timezone=False), nullable=True)
    clock_in_location = Column(String, nullable=True)
    break_minutes = Column(Integer, nullable=False, default=0)

    scheduled_hours = Column(Numeric(6, 2, asdecimal=False), nullable=False, default=0)
    actual_hours = Column(Numeric(6, 2, asdecimal=False), nullable=False, default=0)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    labor_cost = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)

    approved_by = Column(String, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)

    # sales attributed to this shift; actual wins over projected
    actual_sales = Column(Float, nullable=True)
    projected_sales = Column(Float, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("break_minutes >= 0", name="ck_labor_entries_break_nonneg"),
        CheckConstraint("labor_cost >= 0", name="ck_labor_entries_cost_nonneg"),
    )

    @property
    def sales(self):
        if self.actual_sales is not None:
            return self.actual_sales
        return self.projected_sales


Index("ix_labor_entries_location_date", LaborEntry.location_id, LaborEntry.date)
