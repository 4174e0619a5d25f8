"""Domain services for the Olympics tracker."""

from .registry import activate, get_active, get_active_olympics
from .schedule import ScheduleFilters, live_rounds, schedule, upcoming_rounds
from .standings import standings
from .stats import build_stats

__all__ = [
    "activate",
    "get_active",
    "get_active_olympics",
    "ScheduleFilters",
    "schedule",
    "live_rounds",
    "upcoming_rounds",
    "standings",
    "build_stats",
]
