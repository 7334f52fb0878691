from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text, func
from laborops.models.base import Base
import uuid


class ShiftTrade(Base):
    __tablename__ = "shift_trades"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    shift_id = Column(String, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    from_user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)  # set on accept

    trade_type = Column(String, nullable=False)  # giveaway | swap | pickup
    offered_shift_id = Column(String, ForeignKey("shifts.id"), nullable=True)  # swaps only
    reason = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="pending", index=True)
    manager_approval_required = Column(Boolean, default=True)
    approved_by = Column(String, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
