import enum


class ShiftStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    NO_SHOW = "no_show"
    OPEN = "open"
    CANCELLED = "cancelled"
    DECLINED = "declined"


# shifts in these states never block an employee's time
INACTIVE_SHIFT_STATUSES = (ShiftStatus.CANCELLED.value, ShiftStatus.DECLINED.value)


class ScheduleStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    LOCKED = "locked"
    ARCHIVED = "archived"


class TimeOffType(str, enum.Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    UNPAID = "unpaid"
    OTHER = "other"


class TimeOffStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


class TradeType(str, enum.Enum):
    GIVEAWAY = "giveaway"
    SWAP = "swap"
    PICKUP = "pickup"


class TradeStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    APPROVED = "approved"
    REJECTED = "rejected"


class ForecastConfidence(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INSUFFICIENT = "insufficient-data"
