"""
Unit tests for external collaborator shaping: calendar, accounting, geocoding.
"""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

from treeshop.integrations import (
    WorkOrder,
    WorkOrderPriority,
    WorkOrderStatus,
    apply_geocode,
    build_calendar_event,
    build_estimate_export,
    new_work_order,
    schedule_work_order,
)
from treeshop.pricing import LineItem, ServiceType
from treeshop.proposals import Customer, Proposal


@pytest.fixture
def work_order(fixed_now):
    return new_work_order(
        "Jane Doe",
        fixed_now,
        "WO-20260314-001",
        estimated_duration_hours=6.0,
        priority=WorkOrderPriority.HIGH,
        address="1 Oak St",
        crew=["Mike Johnson", "Jake Williams"],
        equipment=["Bandit Chipper #1"],
        safety_notes="Energized lines on the north side",
    )


class TestCalendar:
    """Tests for work order calendar events."""

    def test_event_fields(self, work_order, fixed_now):
        event = build_calendar_event(work_order)
        assert event.title == "Work Order: Jane Doe"
        assert event.start == fixed_now
        assert event.end == fixed_now + timedelta(hours=6)
        assert event.location == "1 Oak St"

    def test_event_notes(self, work_order):
        notes = build_calendar_event(work_order).notes.splitlines()
        assert notes[0] == "Work Order: WO-20260314-001"
        assert "Priority: High" in notes
        assert "Crew: Mike Johnson, Jake Williams" in notes
        assert "Equipment: Bandit Chipper #1" in notes
        assert "Safety Notes: Energized lines on the north side" in notes

    def test_optional_notes_omitted(self, fixed_now):
        wo = new_work_order("Jane", fixed_now, "WO-1")
        notes = build_calendar_event(wo).notes
        assert "Crew:" not in notes
        assert "Safety Notes:" not in notes

    def test_schedule_stores_event_id(self, work_order):
        gateway = Mock()
        gateway.create_event = Mock(return_value="evt-123")
        assert schedule_work_order(work_order, gateway) == "evt-123"
        assert work_order.calendar_event_id == "evt-123"
        gateway.create_event.assert_called_once()

    def test_overdue(self, work_order, fixed_now):
        assert work_order.is_overdue(fixed_now + timedelta(hours=1))
        work_order.status = WorkOrderStatus.COMPLETED
        assert not work_order.is_overdue(fixed_now + timedelta(hours=1))

    def test_round_trip(self, work_order):
        assert WorkOrder.from_dict(work_order.to_dict()) == work_order


class TestAccountingExport:
    """Tests for estimate export shaping."""

    def test_export(self, fixed_now):
        proposal = Proposal(
            "p", "EST-20260314-001",
            line_items=[
                LineItem(ServiceType.STUMP_GRINDING, description="Front yard oak", quantity=2,
                         unit_price=168.0, total_price=336.0, af_score=96, sort_order=1),
                LineItem(ServiceType.TREE_REMOVAL, unit_price=850.0, total_price=850.0,
                         af_score=74, sort_order=0),
            ],
            discount=59.3,
            created_at=fixed_now,
            notes="Gate code 1234",
        )
        export = build_estimate_export(proposal, Customer("c", "Jane Doe"))

        assert export.number == "EST-20260314-001"
        assert export.txn_date == date(2026, 3, 14)
        assert export.customer_name == "Jane Doe"
        assert [line.description for line in export.lines] == [
            "Tree Removal", "Stump Grinding - Front yard oak",
        ]
        assert export.custom_fields == {"TreeScore": 170.0}
        assert export.total == pytest.approx(proposal.total)
        assert export.memo == "Gate code 1234"

    def test_export_without_customer(self):
        export = build_estimate_export(Proposal("p", "EST-1"))
        assert export.customer_name == ""
        assert export.total == 0.0


class TestGeocoding:
    """Tests for customer geocoding."""

    def test_success(self):
        customer = Customer.create("Jane", address="1 Oak St")
        geocoder = Mock()
        geocoder.geocode = Mock(return_value=(28.54, -81.38))
        assert apply_geocode(customer, geocoder) is True
        assert (customer.latitude, customer.longitude) == (28.54, -81.38)
        assert customer.has_location

    def test_not_found_leaves_coordinates(self):
        customer = Customer.create("Jane", address="Nowhere", latitude=1.0, longitude=2.0)
        geocoder = Mock()
        geocoder.geocode = Mock(return_value=None)
        assert apply_geocode(customer, geocoder) is False
        assert (customer.latitude, customer.longitude) == (1.0, 2.0)

    def test_blank_address_skips_lookup(self):
        customer = Customer.create("Jane")
        geocoder = Mock()
        assert apply_geocode(customer, geocoder) is False
        geocoder.geocode.assert_not_called()
