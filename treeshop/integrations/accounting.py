"""
integrations/accounting.py - Estimate export for the accounting system.

Tax is computed by the accounting system, not here. Avoiding duplicate
estimates on retry is the caller's responsibility.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from ..pricing.enums import ServiceType
from ..proposals.schema import Customer, Proposal


@dataclass
class EstimateLine:
    description: str
    quantity: float
    rate: float

    @property
    def amount(self) -> float:
        return self.quantity * self.rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "rate": round(self.rate, 2),
            "amount": round(self.amount, 2),
        }


@dataclass
class EstimateExport:
    """Proposal-shaped record for the accounting collaborator."""
    number: str
    txn_date: date
    customer_name: str
    lines: List[EstimateLine] = field(default_factory=list)
    discount: float = 0.0
    custom_fields: Dict[str, float] = field(default_factory=dict)
    memo: str = ""

    @property
    def total(self) -> float:
        return sum(line.amount for line in self.lines) - self.discount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "txn_date": self.txn_date.isoformat(),
            "customer_name": self.customer_name,
            "lines": [line.to_dict() for line in self.lines],
            "discount": round(self.discount, 2),
            "total": round(self.total, 2),
            "custom_fields": dict(self.custom_fields),
            "memo": self.memo,
        }


class AccountingGateway(Protocol):
    """Protocol for accounting backends."""

    def create_estimate(self, estimate: EstimateExport) -> str:
        """Create the estimate and return its record id."""
        ...


def _line_description(service_type: ServiceType, description: str) -> str:
    label = service_type.value.replace("_", " ").title()
    return f"{label} - {description}" if description else label


def build_estimate_export(proposal: Proposal, customer: Optional[Customer] = None) -> EstimateExport:
    """Shape a proposal for export. TreeScore is the summed AF score of its items."""
    lines = [
        EstimateLine(
            description=_line_description(item.service_type, item.description),
            quantity=item.quantity,
            rate=item.unit_price,
        )
        for item in sorted(proposal.line_items, key=lambda i: i.sort_order)
    ]
    return EstimateExport(
        number=proposal.proposal_number,
        txn_date=proposal.created_at.date(),
        customer_name=customer.name if customer else "",
        lines=lines,
        discount=proposal.discount,
        custom_fields={"TreeScore": float(sum(item.af_score for item in proposal.line_items))},
        memo=proposal.notes,
    )
