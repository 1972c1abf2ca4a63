"""
integrations/ - External collaborator contracts.

Persistence, calendar, accounting export and geocoding are described as
protocols plus the record shaping the core owns.
"""

from .persistence import Persistence, Record

from .calendar import (
    WorkOrder,
    WorkOrderPriority,
    WorkOrderStatus,
    CalendarEvent,
    CalendarGateway,
    build_calendar_event,
    schedule_work_order,
    new_work_order,
)

from .accounting import (
    EstimateExport,
    EstimateLine,
    AccountingGateway,
    build_estimate_export,
)

from .geocoding import Geocoder, Coordinates, apply_geocode


__all__ = [
    "Persistence",
    "Record",
    "WorkOrder",
    "WorkOrderPriority",
    "WorkOrderStatus",
    "CalendarEvent",
    "CalendarGateway",
    "build_calendar_event",
    "schedule_work_order",
    "new_work_order",
    "EstimateExport",
    "EstimateLine",
    "AccountingGateway",
    "build_estimate_export",
    "Geocoder",
    "Coordinates",
    "apply_geocode",
]
