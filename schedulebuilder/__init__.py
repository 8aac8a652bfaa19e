"""
schedulebuilder: conflict-free weekly class schedules from a course catalog snapshot.
"""

from schedulebuilder.builder import EngineConfig, generate
from schedulebuilder.model import Course, Schedule, SchedulePreferences, Section

__all__ = ["Course", "EngineConfig", "Schedule", "SchedulePreferences", "Section", "generate"]
