"""
deployment/ - Deployment Infrastructure

HTTP API over the application context.
"""

from .api import (
    create_fastapi_app,
    TreeScoreRequest,
    QuoteRequest,
    LineItemCreate,
    ProposalCreate,
    StatusChange,
)

__all__ = [
    "create_fastapi_app",
    "TreeScoreRequest",
    "QuoteRequest",
    "LineItemCreate",
    "ProposalCreate",
    "StatusChange",
]
