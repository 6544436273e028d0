"""StatusType enum for maintenance urgency levels."""

from enum import Enum


class StatusType(Enum):
    """Maintenance status categories, as stored in aircraft files."""

    GOOD = "good"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"

    @property
    def severity(self) -> int:
        """Higher value = more urgent."""
        return _SEVERITY[self]


_SEVERITY = {
    StatusType.GOOD: 0,
    StatusType.DUE_SOON: 1,
    StatusType.OVERDUE: 2,
}
