"""Aircraft class - the main aggregate for aircraft data and status."""

from datetime import date, datetime
from typing import List, Optional, Union

from .computed_status import ComputedStatus
from .current_hours import CurrentHours
from .maintenance_item import MaintenanceItem
from .rule import HourMode
from .status import StatusType
from .status_engine import compute_all_statuses, get_overall_status
from .thresholds import Thresholds


class Aircraft:
    """Aircraft record with meter readings, thresholds and maintenance items."""

    def __init__(
        self,
        tail: str,
        model: str,
        hour_mode: Union[HourMode, str] = HourMode.BOTH,
        current: Optional[CurrentHours] = None,
        thresholds: Optional[Thresholds] = None,
        maintenance_items: Optional[List[MaintenanceItem]] = None,
    ):
        self.tail = tail
        self.model = model
        self.hour_mode = HourMode(hour_mode)
        self.current = current or CurrentHours()
        self.thresholds = thresholds or Thresholds()
        self.maintenance_items = maintenance_items or []

    @property
    def name(self) -> str:
        """Human-readable aircraft name."""
        return f"{self.tail} ({self.model})" if self.model else self.tail

    def get_item(self, item_id: str) -> Optional[MaintenanceItem]:
        """Find a maintenance item by id."""
        for item in self.maintenance_items:
            if item.id == item_id:
                return item
        return None

    def get_all_statuses(
        self, today: Optional[Union[date, datetime]] = None
    ) -> List[ComputedStatus]:
        """Prioritized status of every maintenance item."""
        return compute_all_statuses(
            self.maintenance_items,
            self.current,
            self.thresholds,
            self.hour_mode,
            today,
        )

    def overall_status(
        self, today: Optional[Union[date, datetime]] = None
    ) -> StatusType:
        return get_overall_status(self.get_all_statuses(today))
