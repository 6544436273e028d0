"""ComputedStatus dataclass for calculated item status."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from .status import StatusType

if TYPE_CHECKING:
    from .maintenance_item import MaintenanceItem


@dataclass
class ComputedStatus:
    """Derived status for one maintenance item. Never persisted."""

    item: "MaintenanceItem"
    status: StatusType
    due_date: Optional[datetime] = None
    due_hours: Optional[float] = None
    days_remaining: Optional[int] = None
    hours_remaining: Optional[float] = None
    due_text: str = "status unknown"
    urgency_score: float = 0

    @property
    def is_due(self) -> bool:
        return self.status in (StatusType.OVERDUE, StatusType.DUE_SOON)
