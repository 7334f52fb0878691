from sqlalchemy import (
    Column, String, Date, Time, DateTime, Integer, Boolean, ForeignKey,
    Text, CheckConstraint, UniqueConstraint, func,
)
from laborops.models.base import Base
import uuid


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    location_id = Column(String, ForeignKey("locations.id"), nullable=False, index=True)
    schedule_date = Column(Date, nullable=False)

    # derived once at creation from schedule_date, never edited
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)

    status = Column(String, nullable=False, default="draft")
    notes = Column(Text, nullable=True)

    created_by = Column(String, ForeignKey("users.id"), nullable=True)
    published_by = Column(String, ForeignKey("users.id"), nullable=True)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("location_id", "schedule_date", name="uq_schedules_location_date"),
    )


# -- A reusable day layout ("Standard Weekday")
class ScheduleTemplate(Base):
    __tablename__ = "schedule_templates"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    location_id = Column(String, ForeignKey("locations.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    day_of_week = Column(Integer, nullable=True)  # 0 = Sunday
    is_active = Column(Boolean, default=True)
    created_by = Column(String, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_schedule_templates_dow",
        ),
    )


# -- One position slot in a template; required_count shifts are generated from it
class TemplateShift(Base):
    __tablename__ = "template_shifts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String, ForeignKey("schedule_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(String, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    required_count = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
