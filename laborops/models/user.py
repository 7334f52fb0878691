from sqlalchemy import Column, String, Boolean, ForeignKey, Numeric
from laborops.models.base import Base
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    role = Column(String, nullable=False, default="crew")  # "manager", "crew", ...
    location_id = Column(String, ForeignKey("locations.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=True)
