"""Thresholds class for per-aircraft warning configuration."""
from typing import List, Optional

DEFAULT_DATE_THRESHOLD_DAYS = [30, 10, 3]
DEFAULT_HOUR_THRESHOLDS = [10, 5, 1]


class Thresholds:
    """
    Due-soon breakpoints for the date and hours axes.

    Both lists are unordered; they are sorted when evaluated.
    """

    def __init__(
            self,
            date_threshold_days: Optional[List[int]] = None,
            hour_thresholds: Optional[List[float]] = None,
    ):
        if date_threshold_days is None:
            date_threshold_days = list(DEFAULT_DATE_THRESHOLD_DAYS)
        if hour_thresholds is None:
            hour_thresholds = list(DEFAULT_HOUR_THRESHOLDS)
        self.date_threshold_days = date_threshold_days
        self.hour_thresholds = hour_thresholds
