"""
integrations/calendar.py - Work orders and calendar event shaping.

The calendar gateway accepts a CalendarEvent and returns an opaque event
id. The id is stored on the work order and never interpreted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from ..cost.schema import new_record_id
from ..proposals.schema import format_datetime, parse_datetime, utc_now


class WorkOrderPriority(int, Enum):
    EMERGENCY = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4

    @property
    def label(self) -> str:
        return self.name.title()


class WorkOrderStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass
class WorkOrder:
    """Scheduled job created from an accepted proposal."""
    work_order_id: str
    work_order_number: str
    customer_name: str
    scheduled_start: datetime
    estimated_duration_hours: float = 4.0
    priority: WorkOrderPriority = WorkOrderPriority.NORMAL
    status: WorkOrderStatus = WorkOrderStatus.SCHEDULED
    address: str = ""
    proposal_id: Optional[str] = None
    crew: List[str] = field(default_factory=list)
    equipment: List[str] = field(default_factory=list)
    safety_notes: str = ""
    calendar_event_id: Optional[str] = None

    def __post_init__(self):
        self.priority = WorkOrderPriority(self.priority)
        self.status = WorkOrderStatus(self.status)

    @property
    def scheduled_end(self) -> datetime:
        return self.scheduled_start + timedelta(hours=self.estimated_duration_hours)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return self.scheduled_start < now and self.status != WorkOrderStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_order_id": self.work_order_id,
            "work_order_number": self.work_order_number,
            "customer_name": self.customer_name,
            "scheduled_start": format_datetime(self.scheduled_start),
            "estimated_duration_hours": self.estimated_duration_hours,
            "priority": self.priority.value,
            "status": self.status.value,
            "address": self.address,
            "proposal_id": self.proposal_id,
            "crew": list(self.crew),
            "equipment": list(self.equipment),
            "safety_notes": self.safety_notes,
            "calendar_event_id": self.calendar_event_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkOrder":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        known["scheduled_start"] = parse_datetime(known["scheduled_start"])
        return cls(**known)


@dataclass
class CalendarEvent:
    """Record handed to the calendar collaborator."""
    title: str
    start: datetime
    end: datetime
    location: str = ""
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start": format_datetime(self.start),
            "end": format_datetime(self.end),
            "location": self.location,
            "notes": self.notes,
        }


class CalendarGateway(Protocol):
    """Protocol for calendar backends."""

    def create_event(self, event: CalendarEvent) -> str:
        """Create the event and return its external identifier."""
        ...


def build_calendar_event(work_order: WorkOrder) -> CalendarEvent:
    lines = [
        f"Work Order: {work_order.work_order_number}",
        f"Customer: {work_order.customer_name}",
        f"Priority: {work_order.priority.label}",
    ]
    if work_order.crew:
        lines.append(f"Crew: {', '.join(work_order.crew)}")
    if work_order.equipment:
        lines.append(f"Equipment: {', '.join(work_order.equipment)}")
    if work_order.safety_notes:
        lines.append(f"Safety Notes: {work_order.safety_notes}")

    return CalendarEvent(
        title=f"Work Order: {work_order.customer_name}",
        start=work_order.scheduled_start,
        end=work_order.scheduled_end,
        location=work_order.address,
        notes="\n".join(lines),
    )


def schedule_work_order(work_order: WorkOrder, gateway: CalendarGateway) -> str:
    """Create the calendar event and store its id on the work order."""
    event_id = gateway.create_event(build_calendar_event(work_order))
    work_order.calendar_event_id = event_id
    return event_id


def new_work_order(customer_name: str, scheduled_start: datetime, number: str, **fields: Any) -> WorkOrder:
    return WorkOrder(
        work_order_id=new_record_id(),
        work_order_number=number,
        customer_name=customer_name,
        scheduled_start=scheduled_start,
        **fields,
    )
