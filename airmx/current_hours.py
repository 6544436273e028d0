"""CurrentHours class for aircraft meter readings."""
from typing import Optional

from .rule import HourSource


class CurrentHours:
    """Snapshot of the aircraft's Hobbs and Tach meters."""

    def __init__(
            self,
            hobbs: Optional[float] = None,
            tach: Optional[float] = None,
            updated_at: Optional[str] = None,
    ):
        self.hobbs = hobbs
        self.tach = tach
        self.updated_at = updated_at

    def reading_for(self, source: HourSource) -> Optional[float]:
        """Meter value designated by an item's hour source."""
        if source == HourSource.TACH:
            return self.tach
        return self.hobbs
