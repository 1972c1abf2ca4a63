"""
proposals/assembler.py - Proposal assembly and status transitions.

assemble() prices any unpriced line items, applies the bundle discount
(or an explicit one), numbers the proposal and stores it in the Sent
state. Draft is reached only through revert_to_draft().
"""

from __future__ import annotations
from datetime import datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
import logging

from ..cost.schema import new_record_id
from ..errors import ErrorCode, InvalidTransitionError, PersistenceError, PricingError, UnknownRecordError
from ..pricing import LineItem, TreeScorePricer, UrgencyTier
from .numbering import next_proposal_number
from .schema import Proposal, ProposalStatus, can_transition, utc_now

if TYPE_CHECKING:
    from ..directory import Directory

logger = logging.getLogger(__name__)


DEFAULT_VALIDITY_DAYS = 7


def bundle_discount_rate(item_count: int) -> float:
    """Multi-service discount: 2 items 5 %, 3-4 items 10 %, 5+ items 15 %."""
    if item_count >= 5:
        return 0.15
    if item_count >= 3:
        return 0.10
    if item_count >= 2:
        return 0.05
    return 0.0


class ProposalAssembler:
    """
    Builds proposals and drives their stored status.

    Usage:
        assembler = ProposalAssembler(proposals_dir, pricer)
        proposal = assembler.assemble(customer.customer_id, [LineItem(...)])
        assembler.accept(proposal.proposal_id)
    """

    def __init__(
        self,
        proposals: "Directory[Proposal]",
        pricer: Optional[TreeScorePricer] = None,
        validity_days: int = DEFAULT_VALIDITY_DAYS,
        apply_bundle_discount: bool = True,
        clock: Callable[[], datetime] = utc_now,
        number_timezone: Optional[tzinfo] = None,
    ):
        self.proposals = proposals
        self.pricer = pricer or TreeScorePricer()
        self.validity_days = validity_days
        self.apply_bundle_discount = apply_bundle_discount
        self._clock = clock
        # Day boundary for EST-yyyyMMdd numbers; None keeps the clock's own zone (UTC)
        self.number_timezone = number_timezone

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------

    def assemble(
        self,
        customer_id: Optional[str],
        line_items: List[LineItem],
        discount: Optional[float] = None,
        notes: str = "",
        includes_cleanup: bool = False,
        includes_hauling: bool = False,
        urgency: UrgencyTier = UrgencyTier.NORMAL,
        crew_size: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Proposal:
        """Create, number and store a proposal in the Sent state."""
        now = now or self._clock()

        pricing_options: Dict[str, Any] = {
            "includes_cleanup": includes_cleanup,
            "includes_hauling": includes_hauling,
            "urgency": urgency,
        }
        if crew_size is not None:
            pricing_options["crew_size"] = crew_size

        for index, item in enumerate(line_items):
            if not item.is_priced:
                self.pricer.price_line_item(item, **pricing_options)
            item.sort_order = index

        subtotal = sum(item.total_price for item in line_items)
        number_day = now.astimezone(self.number_timezone) if self.number_timezone else now

        proposal = Proposal(
            proposal_id=new_record_id(),
            proposal_number=next_proposal_number(
                (p.proposal_number for p in self.proposals), number_day,
            ),
            customer_id=customer_id,
            status=ProposalStatus.SENT,
            line_items=list(line_items),
            discount=self._discount(subtotal, len(line_items), discount),
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(days=self.validity_days),
            notes=notes,
            includes_cleanup=includes_cleanup,
            includes_hauling=includes_hauling,
        )

        self.proposals.add(proposal)
        logger.info(
            f"Assembled proposal {proposal.proposal_number}: "
            f"{len(line_items)} items, total={proposal.total:.2f}"
        )
        return proposal

    def _discount(self, subtotal: float, item_count: int, explicit: Optional[float]) -> float:
        if explicit is not None:
            if not 0 <= explicit <= subtotal:
                raise PricingError(
                    f"discount must be between 0 and the subtotal {subtotal:.2f} (got {explicit})",
                    code=ErrorCode.CFG_INVALID_VALUE,
                    details={"discount": explicit, "subtotal": subtotal},
                )
            return explicit
        if not self.apply_bundle_discount:
            return 0.0
        return subtotal * bundle_discount_rate(item_count)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def mark_viewed(self, proposal_id: str) -> Proposal:
        return self.transition(proposal_id, ProposalStatus.VIEWED)

    def accept(self, proposal_id: str) -> Proposal:
        return self.transition(proposal_id, ProposalStatus.ACCEPTED)

    def reject(self, proposal_id: str) -> Proposal:
        return self.transition(proposal_id, ProposalStatus.REJECTED)

    def revert_to_draft(self, proposal_id: str) -> Proposal:
        """Manual edit: any non-terminal proposal back to Draft."""
        return self.transition(proposal_id, ProposalStatus.DRAFT)

    def send(self, proposal_id: str) -> Proposal:
        """Re-send a draft. Restarts the validity window."""
        now = self._clock()
        return self._transition(
            proposal_id, ProposalStatus.SENT, now,
            expires_at=now + timedelta(days=self.validity_days),
        )

    def transition(self, proposal_id: str, to_status: ProposalStatus) -> Proposal:
        return self._transition(proposal_id, to_status, self._clock())

    def _transition(
        self,
        proposal_id: str,
        to_status: ProposalStatus,
        now: datetime,
        **changes: Any,
    ) -> Proposal:
        proposal = self._get(proposal_id)
        if not can_transition(proposal.status, to_status):
            raise InvalidTransitionError(proposal.status, to_status)

        from_status = proposal.status
        self._store(proposal, status=to_status, updated_at=now, **changes)

        logger.info(f"Proposal {proposal.proposal_number}: {from_status.value} -> {to_status.value}")
        return proposal

    def update_line_items(self, proposal_id: str, line_items: List[LineItem], **pricing_options: Any) -> Proposal:
        """Replace a draft's line items, repricing them."""
        proposal = self._get(proposal_id)
        if proposal.status != ProposalStatus.DRAFT:
            raise InvalidTransitionError(proposal.status, ProposalStatus.DRAFT)

        for index, item in enumerate(line_items):
            self.pricer.price_line_item(item, **pricing_options)
            item.sort_order = index

        subtotal = sum(item.total_price for item in line_items)
        self._store(
            proposal,
            line_items=list(line_items),
            discount=self._discount(subtotal, len(line_items), None),
            updated_at=self._clock(),
        )
        return proposal

    def _get(self, proposal_id: str) -> Proposal:
        proposal = self.proposals.get(proposal_id)
        if proposal is None:
            raise UnknownRecordError(self.proposals.entity, proposal_id)
        return proposal

    def _store(self, proposal: Proposal, **changes: Any) -> None:
        """Apply field changes as one update; put the old values back if the save fails."""
        previous = {name: getattr(proposal, name) for name in changes}
        for name, value in changes.items():
            setattr(proposal, name, value)
        try:
            self.proposals.update(proposal)
        except PersistenceError:
            for name, value in previous.items():
                setattr(proposal, name, value)
            raise
