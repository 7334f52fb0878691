"""Shift assignment: availability resolution, auto-assignment, trades."""
from laborops.services.scheduling.auto_assign import AutoAssigner
from laborops.services.scheduling.availability import AvailabilityResolver
from laborops.services.scheduling.directory import EmployeeDirectory
from laborops.services.scheduling.trades import ShiftTradeService

__all__ = [
    "AutoAssigner",
    "AvailabilityResolver",
    "EmployeeDirectory",
    "ShiftTradeService",
]
