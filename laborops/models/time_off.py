from sqlalchemy import (
    Column, String, Date, DateTime, Integer, ForeignKey, Text, CheckConstraint, func,
)
from laborops.models.base import Base
import uuid


class TimeOffRequest(Base):
    __tablename__ = "time_off_requests"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(String, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)

    request_type = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=True)  # inclusive
    reason = Column(Text, nullable=True)

    # only "approved" blocks assignment
    status = Column(String, nullable=False, default="pending", index=True)
    requested_at = Column(DateTime, server_default=func.now())
    reviewed_by = Column(String, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_notes = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_time_off_dates"),
    )
