"""
deployment/api.py - REST API v1

Exposes pricing, AFISS lookup, equipment and loadout costing, and
proposal assembly over HTTP.
"""

from __future__ import annotations
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime, timezone
import logging

from pydantic import BaseModel, Field, field_validator

from ..cost import EquipmentCostModel
from ..errors import InvalidTransitionError, PricingError, TreeShopError, UnknownRecordError
from ..pricing import (
    AFISSAssessment,
    AFISSCategory,
    EquipmentClass,
    LineItem,
    PricingRequest,
    ServiceType,
    UrgencyTier,
    AFISS_FACTORS,
    factors_by_category,
    search,
    suggest_factors,
    tree_score,
)
from ..proposals import ProposalStatus

if TYPE_CHECKING:
    from ..bootstrap.app import AppContext

logger = logging.getLogger("deployment.api")

API_VERSION = "0.1.0"


# =============================================================================
# Request/Response Models
# =============================================================================

class TreeScoreRequest(BaseModel):
    """Request model for a raw TreeScore calculation."""
    height: float = Field(ge=0)
    dbh: float = Field(ge=0)
    canopy_radius: float = Field(default=0.0, ge=0)


class QuoteRequest(BaseModel):
    """Request model for pricing one service request."""
    service_type: ServiceType
    quantity: float = Field(default=1.0, ge=0)

    height: float = 0.0
    dbh: float = 0.0
    canopy_radius: float = 0.0
    trim_percent: float = 100.0

    stump_diameter: float = 0.0
    stump_height: Optional[float] = None
    grind_depth: Optional[float] = None

    acres: Optional[float] = None
    max_dbh: Optional[float] = None

    afiss_factors: List[str] = []
    near_structure: bool = False
    power_lines: bool = False
    slope: bool = False

    includes_cleanup: bool = False
    includes_hauling: bool = False
    urgency: UrgencyTier = UrgencyTier.NORMAL
    equipment_class: Optional[EquipmentClass] = None
    crew_size: int = Field(default=2, ge=1)

    def to_pricing_request(self) -> PricingRequest:
        data = self.model_dump()
        names = data.pop("afiss_factors")
        return PricingRequest(afiss=AFISSAssessment.from_names(names), **data)


class PropertyQuoteRequest(BaseModel):
    """Request model for pricing every tree on a property."""
    requests: List[QuoteRequest] = Field(min_length=1)
    bulk_discount: float = Field(default=0.0, ge=0, le=1)


class LineItemCreate(BaseModel):
    """Line item inside a proposal request."""
    service_type: ServiceType
    description: str = ""
    quantity: float = Field(default=1.0, ge=0)

    height: float = 0.0
    dbh: float = 0.0
    canopy_radius: float = 0.0
    trim_percent: float = 100.0

    stump_diameter: float = 0.0
    stump_height: Optional[float] = None
    grind_depth: Optional[float] = None

    acres: Optional[float] = None
    max_dbh: Optional[float] = None

    near_structure: bool = False
    power_lines: bool = False
    slope: bool = False
    afiss_factors: List[str] = []


class ProposalCreate(BaseModel):
    """Request model for assembling a proposal."""
    customer_id: Optional[str] = None
    line_items: List[LineItemCreate]
    discount: Optional[float] = Field(default=None, ge=0)
    notes: str = ""
    includes_cleanup: bool = False
    includes_hauling: bool = False
    urgency: UrgencyTier = UrgencyTier.NORMAL
    crew_size: Optional[int] = Field(default=None, ge=1)

    @field_validator("line_items")
    @classmethod
    def validate_line_items(cls, v):
        if not v:
            raise ValueError("line_items cannot be empty")
        return v


_STATUS_ACTIONS = {
    "viewed": "mark_viewed",
    "accepted": "accept",
    "rejected": "reject",
    "draft": "revert_to_draft",
    "sent": "send",
}


class StatusChange(BaseModel):
    """Request model for a proposal status change."""
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v.lower() not in _STATUS_ACTIONS:
            raise ValueError(f"Invalid status: {v}. Valid: {sorted(_STATUS_ACTIONS)}")
        return v.lower()


# =============================================================================
# Application
# =============================================================================

def create_fastapi_app(context: "AppContext"):
    """
    Create FastAPI application bound to an application context.

    Args:
        context: Application context with config and directories

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, HTTPException
    from fastapi.middleware.cors import CORSMiddleware

    enable_docs = context.config.api.enable_docs
    docs_url = context.config.api.docs_url

    app = FastAPI(
        title="TreeShop API",
        description="Tree service cost and pricing API",
        version=API_VERSION,
        docs_url=docs_url if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _proposal_or_404(proposal_id: str):
        proposal = context.proposals.get(proposal_id)
        if proposal is None:
            raise HTTPException(status_code=404, detail="Proposal not found")
        return proposal

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": API_VERSION,
            "uptime_seconds": round(context.get_uptime(), 1),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/v1/meta")
    async def meta():
        return context.summary()

    # =========================================================================
    # Pricing
    # =========================================================================

    @app.post("/api/v1/pricing/tree-score")
    async def calculate_tree_score(request: TreeScoreRequest):
        return {"score": tree_score(request.height, request.dbh, request.canopy_radius)}

    @app.post("/api/v1/pricing/quote")
    async def quote(request: QuoteRequest):
        try:
            result = context.pricer.price(request.to_pricing_request())
        except PricingError as e:
            raise HTTPException(status_code=400, detail=e.to_dict())
        return result.to_dict()

    @app.post("/api/v1/pricing/property")
    async def quote_property(request: PropertyQuoteRequest):
        try:
            result = context.pricer.price_property(
                [r.to_pricing_request() for r in request.requests],
                bulk_discount=request.bulk_discount,
            )
        except PricingError as e:
            raise HTTPException(status_code=400, detail=e.to_dict())
        return result.to_dict()

    @app.get("/api/v1/afiss/factors")
    async def list_afiss_factors(
        query: Optional[str] = None,
        category: Optional[AFISSCategory] = None,
        describe: Optional[str] = None,
    ):
        if describe:
            factors = suggest_factors(describe)
        elif query:
            factors = search(query)
        elif category:
            factors = factors_by_category(category)
        else:
            factors = list(AFISS_FACTORS)
        return {"factors": [f.to_dict() for f in factors], "count": len(factors)}

    # =========================================================================
    # Equipment / Loadouts
    # =========================================================================

    @app.get("/api/v1/equipment")
    async def list_equipment():
        return {"equipment": [e.to_dict() for e in context.equipment]}

    @app.get("/api/v1/equipment/{equipment_id}/rate")
    async def equipment_rate(equipment_id: str):
        equipment = context.equipment.get(equipment_id)
        if equipment is None:
            raise HTTPException(status_code=404, detail="Equipment not found")
        return {
            "equipment_id": equipment.equipment_id,
            "name": equipment.name,
            **EquipmentCostModel().hourly_rate(equipment).to_dict(),
        }

    @app.get("/api/v1/loadouts")
    async def list_loadouts():
        return {"loadouts": [l.to_dict() for l in context.loadouts]}

    @app.get("/api/v1/loadouts/{loadout_id}/cost")
    async def loadout_cost(loadout_id: str, markup: Optional[float] = None):
        loadout = context.loadouts.get(loadout_id)
        if loadout is None:
            raise HTTPException(status_code=404, detail="Loadout not found")
        breakdown = context.loadout_cost(loadout)
        data = breakdown.to_dict()
        if markup is not None:
            data["billable_rate"] = round(breakdown.with_markup(markup), 2)
        return data

    # =========================================================================
    # Proposals
    # =========================================================================

    @app.get("/api/v1/proposals")
    async def list_proposals(status: Optional[ProposalStatus] = None):
        proposals = context.proposals.all()
        if status is not None:
            proposals = [p for p in proposals if p.status == status]
        return {"proposals": [p.to_dict() for p in proposals]}

    @app.post("/api/v1/proposals", status_code=201)
    async def create_proposal(request: ProposalCreate):
        if request.customer_id and request.customer_id not in context.customers:
            raise HTTPException(status_code=404, detail="Customer not found")

        items = [LineItem(**item.model_dump()) for item in request.line_items]
        try:
            proposal = context.assembler.assemble(
                request.customer_id,
                items,
                discount=request.discount,
                notes=request.notes,
                includes_cleanup=request.includes_cleanup,
                includes_hauling=request.includes_hauling,
                urgency=request.urgency,
                crew_size=request.crew_size,
            )
        except PricingError as e:
            raise HTTPException(status_code=400, detail=e.to_dict())
        return proposal.to_dict()

    @app.get("/api/v1/proposals/{proposal_id}")
    async def get_proposal(proposal_id: str):
        proposal = _proposal_or_404(proposal_id)
        data = proposal.to_dict()
        data["is_expired"] = proposal.is_expired()
        return data

    @app.post("/api/v1/proposals/{proposal_id}/status")
    async def change_status(proposal_id: str, request: StatusChange):
        _proposal_or_404(proposal_id)
        action = getattr(context.assembler, _STATUS_ACTIONS[request.status])
        try:
            proposal = action(proposal_id)
        except InvalidTransitionError as e:
            raise HTTPException(status_code=409, detail=e.to_dict())
        except UnknownRecordError:
            raise HTTPException(status_code=404, detail="Proposal not found")
        except TreeShopError as e:
            logger.error(f"Status change failed for {proposal_id}: {e.message}")
            raise HTTPException(status_code=500, detail=e.to_dict())
        return proposal.to_dict()

    return app
