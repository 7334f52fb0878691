from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, time, datetime


# Times arrive as "HH:MM" strings and are parsed by the service layer, so a
# malformed value is a 400 from the domain rather than a 422 from pydantic.


# ---------- Schedule ----------
class ScheduleCreate(BaseModel):
    location_id: str
    schedule_date: date
    notes: Optional[str] = None
    created_by: Optional[str] = None


class SchedulePublish(BaseModel):
    published_by: str


class ScheduleRead(BaseModel):
    id: str
    location_id: str
    schedule_date: date
    week_start: date
    week_end: date
    status: str
    notes: Optional[str] = None
    created_by: Optional[str] = None
    published_by: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- Shift ----------
class ShiftCreate(BaseModel):
    schedule_id: str
    user_id: Optional[str] = None
    position: str
    shift_date: date
    start_time: str
    end_time: str
    break_minutes: int = 0
    notes: Optional[str] = None


class ShiftAssign(BaseModel):
    user_id: str


class ShiftStatusUpdate(BaseModel):
    status: str
    user_id: Optional[str] = None  # owner guard for self-service confirm/decline
    notes: Optional[str] = None


class ShiftClock(BaseModel):
    timestamp: Optional[datetime] = None


class ShiftRead(BaseModel):
    id: str
    schedule_id: str
    location_id: str
    user_id: Optional[str] = None
    position: str
    shift_date: date
    start_time: time
    end_time: time
    break_minutes: int
    total_hours: Optional[float] = None
    hourly_rate: Optional[float] = None
    estimated_cost: Optional[float] = None
    status: str
    requires_coverage: bool = False
    notes: Optional[str] = None
    clock_in_at: Optional[datetime] = None
    clock_out_at: Optional[datetime] = None
    actual_hours: Optional[float] = None

    class Config:
        from_attributes = True


class ScheduleDetail(ScheduleRead):
    shifts: List[ShiftRead] = []


# ---------- Templates ----------
class TemplateShiftCreate(BaseModel):
    position: str
    start_time: str
    end_time: str
    required_count: int = Field(default=1, ge=1)
    notes: Optional[str] = None


class TemplateShiftRead(BaseModel):
    id: str
    template_id: str
    position: str
    start_time: time
    end_time: time
    required_count: int
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class TemplateCreate(BaseModel):
    location_id: str
    name: str
    description: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    created_by: Optional[str] = None
    shifts: List[TemplateShiftCreate] = []


class TemplateRead(BaseModel):
    id: str
    location_id: str
    name: str
    description: Optional[str] = None
    day_of_week: Optional[int] = None
    is_active: bool = True
    created_by: Optional[str] = None
    shifts: List[TemplateShiftRead] = []

    class Config:
        from_attributes = True


class TemplateGenerate(BaseModel):
    schedule_id: str
    shift_date: date


# ---------- Availability ----------
class AvailabilityCreate(BaseModel):
    user_id: str
    location_id: str
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    is_preferred: bool = False
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None


class AvailabilityRead(BaseModel):
    id: str
    user_id: str
    location_id: str
    day_of_week: int
    start_time: time
    end_time: time
    is_preferred: bool = False
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


# ---------- Time off ----------
class TimeOffCreate(BaseModel):
    user_id: str
    location_id: str
    request_type: str
    start_date: date
    end_date: date
    reason: Optional[str] = None


class TimeOffReview(BaseModel):
    status: str
    reviewed_by: str
    review_notes: Optional[str] = None


class TimeOffRead(BaseModel):
    id: str
    user_id: str
    location_id: str
    request_type: str
    start_date: date
    end_date: date
    total_days: Optional[int] = None
    reason: Optional[str] = None
    status: str
    requested_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None

    class Config:
        from_attributes = True


# ---------- Trades ----------
class TradeCreate(BaseModel):
    shift_id: str
    from_user_id: str
    trade_type: str
    to_user_id: Optional[str] = None
    offered_shift_id: Optional[str] = None
    reason: Optional[str] = None
    manager_approval_required: bool = True


class TradeResponse(BaseModel):
    user_id: str
    response: str


class TradeApprove(BaseModel):
    approved_by: str


class TradeRead(BaseModel):
    id: str
    shift_id: str
    from_user_id: str
    to_user_id: Optional[str] = None
    trade_type: str
    offered_shift_id: Optional[str] = None
    reason: Optional[str] = None
    status: str
    manager_approval_required: bool = True
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TradeListItem(TradeRead):
    shift_date: date
    start_time: time
    end_time: time
    position: str
    from_user_name: Optional[str] = None
    to_user_name: Optional[str] = None


# ---------- Eligibility / auto-assign ----------
class EligibilityQuery(BaseModel):
    shift_date: date
    start_time: str
    end_time: str
    location_id: Optional[str] = None
    exclude_shift_id: Optional[str] = None


class Assignment(BaseModel):
    shift_id: str
    employee_id: str
    employee_name: Optional[str] = None


class AutoAssignReport(BaseModel):
    total_unassigned: int
    assigned: int
    remaining: int
    assignments: List[Assignment] = []


# ---------- Labor summary ----------
class PositionCoverage(BaseModel):
    scheduled_hours: float
    actual_hours: float
    headcount: int


class LaborSummary(BaseModel):
    total_shifts: int
    scheduled_hours: float
    actual_hours: float
    total_hours: float
    total_cost: float
    labor_percent: Optional[float] = None
    overtime_hours: float
    open_shifts: int
    coverage_by_position: Dict[str, PositionCoverage] = {}


class WeeklySummary(LaborSummary):
    week_start: date
    week_end: date
    unique_employees: int
    uncovered_shifts: int
    confirmed_shifts: int
    declined_shifts: int
    estimated_cost: float = 0


class ScheduleConflict(BaseModel):
    conflict_type: str  # "overlap" or "time_off"
    user_id: str
    shift_date: date
    shift1_id: str
    shift2_id: Optional[str] = None
    time_off_id: Optional[str] = None


class TimeOffListItem(TimeOffRead):
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    reviewer_name: Optional[str] = None
