from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, time, datetime

from laborops.schemas.scheduling import LaborSummary


class LaborEntryCreate(BaseModel):
    location_id: str
    user_id: str
    date: date
    start_time: str
    end_time: str
    position: Optional[str] = None
    status: str = "scheduled"
    break_minutes: int = 0
    hourly_rate: Optional[float] = None  # falls back to the employee's rate
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    clock_in_location: Optional[str] = None
    approved_by: Optional[str] = None
    notes: Optional[str] = None
    actual_sales: Optional[float] = None
    projected_sales: Optional[float] = None


class LaborEntryRead(BaseModel):
    id: str
    location_id: str
    user_id: str
    date: date
    start_time: time
    end_time: time
    position: Optional[str] = None
    status: str
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    clock_in_location: Optional[str] = None
    break_minutes: int = 0
    scheduled_hours: float = 0
    actual_hours: float = 0
    hourly_rate: float = 0
    labor_cost: float = 0
    approved_by: Optional[str] = None
    notes: Optional[str] = None
    actual_sales: Optional[float] = None
    projected_sales: Optional[float] = None

    class Config:
        from_attributes = True


class LaborEntryList(BaseModel):
    entries: List[LaborEntryRead] = []
    labor_summary: LaborSummary


class ClockIn(BaseModel):
    timestamp: Optional[datetime] = None
    location: Optional[str] = None
    break_minutes: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class ClockOut(BaseModel):
    timestamp: Optional[datetime] = None
    break_minutes: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class StaffingSuggestion(BaseModel):
    position: str
    hours: float
    average_shift_length: float
    recommended_headcount: int


class Forecast(BaseModel):
    date: date
    location_id: Optional[str] = None
    historical_sample_size: int
    forecasted_sales: float
    recommended_labor_hours: float
    suggested_staffing: List[StaffingSuggestion] = []
    confidence: str


class TrendPoint(BaseModel):
    date: str
    granularity: str
    sales: float
    labor_cost: float


class LaborVsSales(BaseModel):
    entry_id: str
    date: date
    labor_cost: float
    sales: float
    position: Optional[str] = None


class LaborTrends(BaseModel):
    start: date
    end: date
    trend: List[TrendPoint] = []
    labor_vs_sales: List[LaborVsSales] = []
