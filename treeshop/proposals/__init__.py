"""
proposals/ - Proposal assembly, numbering and status tracking.
"""

from .schema import (
    Proposal,
    ProposalStatus,
    Customer,
    CustomerStats,
    LEGAL_TRANSITIONS,
    TERMINAL_STATUSES,
    can_transition,
    utc_now,
)

from .numbering import next_proposal_number, day_prefix

from .assembler import (
    ProposalAssembler,
    bundle_discount_rate,
    DEFAULT_VALIDITY_DAYS,
)

from .statistics import ProposalStatistics, compute_statistics


__all__ = [
    "Proposal",
    "ProposalStatus",
    "Customer",
    "CustomerStats",
    "LEGAL_TRANSITIONS",
    "TERMINAL_STATUSES",
    "can_transition",
    "utc_now",
    "next_proposal_number",
    "day_prefix",
    "ProposalAssembler",
    "bundle_discount_rate",
    "DEFAULT_VALIDITY_DAYS",
    "ProposalStatistics",
    "compute_statistics",
]
