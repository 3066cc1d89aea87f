"""
Data models for the Personal Activity Summary tool.

This module defines the data structures used throughout the application:
- DailyMetricRecord: One day of step / calorie / distance totals
- ActivitySessionRecord: A single logged activity session
- TimeRange: Selectable summary window
- ResolvedRange: Concrete [start, end] instants for a TimeRange
- AggregationSnapshot: Derived statistics for one query
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Optional


class MalformedRecordError(ValueError):
    """Raised when a record cannot be placed on the calendar."""


class TimeRange(Enum):
    """Summary window selector."""
    TODAY = 'today'
    WEEK = 'week'
    MONTH = 'month'
    YEAR = 'year'
    ALL = 'all'


class AveragePolicy(Enum):
    """How per-day averages pick their denominator."""
    NOMINAL = 'nominal'  # 1 / 7 / 30 / 365 / record count
    ELAPSED = 'elapsed'  # calendar days actually spanned


@dataclass(frozen=True)
class DailyMetricRecord:
    """Daily step totals for one calendar day."""
    id: str
    date: date
    step_count: int
    calories_burned: float = 0
    distance: float = 0  # kilometers
    source: str = 'App'


@dataclass(frozen=True)
class ActivitySessionRecord:
    """A single activity session."""
    id: str
    date: date
    type: str
    duration: int = 0  # minutes
    metadata: dict = field(default_factory=dict)

    @property
    def calories(self) -> float:
        """Calories from metadata; anything that is not a number counts as 0."""
        value = self.metadata.get('calories')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return value


@dataclass(frozen=True)
class ResolvedRange:
    """Inclusive instant range produced by the range resolver."""
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class AggregationSnapshot:
    """Statistics for the records falling inside one resolved range."""
    time_range: TimeRange
    resolved_range: Optional[ResolvedRange] = None
    total_steps: int = 0
    total_calories: float = 0
    total_distance: float = 0
    total_activity_count: int = 0
    average_steps: int = 0
    average_calories: int = 0
    best_day: Optional[DailyMetricRecord] = None
    worst_day: Optional[DailyMetricRecord] = None
    activity_breakdown: dict = field(default_factory=dict)
    total_activity_minutes: int = 0
    total_activity_calories: float = 0
