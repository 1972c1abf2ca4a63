"""
proposals/statistics.py - Proposal pipeline statistics.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from .schema import Proposal, ProposalStatus, utc_now


@dataclass
class ProposalStatistics:
    """
    Pipeline summary.

    conversion_rate uses stored status (Accepted / total). expired_count
    uses the derived expiry flag, so an expired proposal still counts
    under its stored status in by_status.
    """
    total_count: int = 0
    total_value: float = 0.0
    accepted_count: int = 0
    expired_count: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)

    @property
    def average_value(self) -> float:
        return self.total_value / self.total_count if self.total_count else 0.0

    @property
    def conversion_rate(self) -> float:
        return self.accepted_count / self.total_count if self.total_count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "total_value": round(self.total_value, 2),
            "average_value": round(self.average_value, 2),
            "accepted_count": self.accepted_count,
            "conversion_rate": round(self.conversion_rate, 4),
            "expired_count": self.expired_count,
            "by_status": dict(self.by_status),
        }


def compute_statistics(
    proposals: Iterable[Proposal],
    now: Optional[datetime] = None,
) -> ProposalStatistics:
    now = now or utc_now()
    stats = ProposalStatistics(by_status={s.value: 0 for s in ProposalStatus})

    for proposal in proposals:
        stats.total_count += 1
        stats.total_value += proposal.total
        stats.by_status[proposal.status.value] += 1
        if proposal.status == ProposalStatus.ACCEPTED:
            stats.accepted_count += 1
        if proposal.is_expired(now):
            stats.expired_count += 1

    return stats
