"""
proposals/schema.py - Proposal and customer records.

Proposal status is stored; expiry is derived at read time. A proposal
whose expiry has passed keeps its stored status (e.g. Sent) while
is_expired(now) reads True. Conversion statistics key off the stored
status, expiry banners key off the derived flag.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from ..cost.schema import new_record_id
from ..pricing.line_items import LineItem


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class ProposalStatus(str, Enum):
    """Stored proposal status."""
    DRAFT = "Draft"
    SENT = "Sent"
    VIEWED = "Viewed"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    EXPIRED = "Expired"


TERMINAL_STATUSES: FrozenSet[ProposalStatus] = frozenset({
    ProposalStatus.ACCEPTED,
    ProposalStatus.REJECTED,
})


# Maps each status to the statuses it can move to. Expired is never entered
# here; it only exists for records that already carry it.
LEGAL_TRANSITIONS: Dict[ProposalStatus, List[ProposalStatus]] = {
    ProposalStatus.DRAFT: [
        ProposalStatus.SENT,
    ],

    ProposalStatus.SENT: [
        ProposalStatus.VIEWED,
        ProposalStatus.ACCEPTED,
        ProposalStatus.REJECTED,
        ProposalStatus.DRAFT,
    ],

    ProposalStatus.VIEWED: [
        ProposalStatus.ACCEPTED,
        ProposalStatus.REJECTED,
        ProposalStatus.DRAFT,
    ],

    ProposalStatus.EXPIRED: [
        ProposalStatus.DRAFT,
    ],

    ProposalStatus.ACCEPTED: [],
    ProposalStatus.REJECTED: [],
}


def can_transition(from_status: ProposalStatus, to_status: ProposalStatus) -> bool:
    return to_status in LEGAL_TRANSITIONS.get(from_status, [])


# =============================================================================
# PROPOSAL
# =============================================================================

@dataclass
class Proposal:
    """Customer estimate. Owns its line items."""
    proposal_id: str
    proposal_number: str
    customer_id: Optional[str] = None
    status: ProposalStatus = ProposalStatus.DRAFT

    line_items: List[LineItem] = field(default_factory=list)
    discount: float = 0.0

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    expires_at: Optional[datetime] = None

    notes: str = ""
    includes_cleanup: bool = False
    includes_hauling: bool = False

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = ProposalStatus(self.status)

    @property
    def subtotal(self) -> float:
        return sum(item.total_price for item in self.line_items)

    @property
    def total(self) -> float:
        return self.subtotal - self.discount

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Derived expiry: past expires_at and not accepted or rejected."""
        if self.expires_at is None:
            return False
        now = now or utc_now()
        return now > self.expires_at and self.status not in TERMINAL_STATUSES

    def days_until_expiry(self, now: Optional[datetime] = None) -> Optional[int]:
        if self.expires_at is None:
            return None
        now = now or utc_now()
        return (self.expires_at - now).days

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "proposal_number": self.proposal_number,
            "customer_id": self.customer_id,
            "status": self.status.value,
            "line_items": [item.to_dict() for item in self.line_items],
            "subtotal": self.subtotal,
            "discount": self.discount,
            "total": self.total,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
            "expires_at": format_datetime(self.expires_at),
            "notes": self.notes,
            "includes_cleanup": self.includes_cleanup,
            "includes_hauling": self.includes_hauling,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        return cls(
            proposal_id=data["proposal_id"],
            proposal_number=data["proposal_number"],
            customer_id=data.get("customer_id"),
            status=ProposalStatus(data.get("status", ProposalStatus.DRAFT.value)),
            line_items=[LineItem.from_dict(d) for d in data.get("line_items", [])],
            discount=data.get("discount", 0.0),
            created_at=parse_datetime(data.get("created_at")) or utc_now(),
            updated_at=parse_datetime(data.get("updated_at")) or utc_now(),
            expires_at=parse_datetime(data.get("expires_at")),
            notes=data.get("notes", ""),
            includes_cleanup=data.get("includes_cleanup", False),
            includes_hauling=data.get("includes_hauling", False),
        )


# =============================================================================
# CUSTOMER
# =============================================================================

@dataclass
class CustomerStats:
    """Aggregate over a customer's proposals."""
    proposal_count: int = 0
    total_value: float = 0.0
    last_proposal_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposal_count": self.proposal_count,
            "total_value": round(self.total_value, 2),
            "last_proposal_date": format_datetime(self.last_proposal_date),
        }


@dataclass
class Customer:
    """Customer contact record. Referenced, not owned, by proposals."""
    customer_id: str
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, **fields: Any) -> "Customer":
        return cls(customer_id=new_record_id(), name=name, **fields)

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def stats(self, proposals: List[Proposal]) -> CustomerStats:
        """Stats over the proposals in the supplied collection that reference this customer."""
        own = [p for p in proposals if p.customer_id == self.customer_id]
        return CustomerStats(
            proposal_count=len(own),
            total_value=sum(p.total for p in own),
            last_proposal_date=max((p.created_at for p in own), default=None),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "notes": self.notes,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("created_at", "updated_at"):
            if key in known:
                known[key] = parse_datetime(known[key]) or utc_now()
        return cls(**known)
