from .base import Base
from .location import Location
from .user import User
from .schedule import Schedule, ScheduleTemplate, TemplateShift
from .shift import Shift
from .availability import EmployeeAvailability
from .time_off import TimeOffRequest
from .shift_trade import ShiftTrade
from .labor_entry import LaborEntry
