"""
errors/taxonomy.py - Error classification system

Structured exceptions raised by the cost, pricing, proposal and directory
layers. Loadout resolution misses have no exception type here: they are
reported as data.
"""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error categories."""
    CONFIGURATION = "configuration"
    PERSISTENCE = "persistence"
    STATE = "state"
    LOOKUP = "lookup"
    PRICING = "pricing"


class ErrorCode(Enum):
    """Specific error codes."""

    # Configuration (1xxx)
    CFG_NON_POSITIVE_LIFE_HOURS = 1001
    CFG_NON_POSITIVE_ANNUAL_HOURS = 1002
    CFG_INVALID_VALUE = 1003

    # Persistence (2xxx)
    PER_LOAD_FAILED = 2001
    PER_SAVE_FAILED = 2002
    PER_CORRUPT_RECORD = 2003

    # State (3xxx)
    STA_ILLEGAL_TRANSITION = 3001

    # Lookup (4xxx)
    LKP_UNKNOWN_RECORD = 4001
    LKP_DUPLICATE_RECORD = 4002

    # Pricing (5xxx)
    PRC_UNKNOWN_SERVICE = 5001
    PRC_UNKNOWN_FACTOR = 5002


class TreeShopError(Exception):
    """Base exception for all TreeShop core failures."""

    code: ErrorCode = ErrorCode.CFG_INVALID_VALUE
    category: ErrorCategory = ErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        recoverable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.recoverable = recoverable
        self.details = details or {}
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category.value,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
        }


class EquipmentConfigurationError(TreeShopError, ValueError):
    """Raised when an equipment record would produce an infinite or NaN rate."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, field_name: str, value: float, code: ErrorCode):
        super().__init__(
            f"{field_name} must be greater than zero (got {value})",
            code=code,
            details={"field": field_name, "value": value},
        )
        self.field_name = field_name
        self.value = value


class PersistenceError(TreeShopError):
    """Raised when a whole-collection load or save fails."""

    category = ErrorCategory.PERSISTENCE
    code = ErrorCode.PER_SAVE_FAILED

    def __init__(self, entity: str, message: str, code: Optional[ErrorCode] = None):
        super().__init__(
            f"{entity}: {message}",
            code=code,
            recoverable=True,
            details={"entity": entity},
        )
        self.entity = entity


class InvalidTransitionError(TreeShopError):
    """Raised on a proposal status change the state machine does not allow."""

    category = ErrorCategory.STATE
    code = ErrorCode.STA_ILLEGAL_TRANSITION

    def __init__(self, from_status: Any, to_status: Any):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        super().__init__(
            f"Illegal proposal transition: {from_value} -> {to_value}",
            details={"from": from_value, "to": to_value},
        )
        self.from_status = from_status
        self.to_status = to_status


class UnknownRecordError(TreeShopError, KeyError):
    """Raised when update/delete targets an identifier that is not stored."""

    category = ErrorCategory.LOOKUP
    code = ErrorCode.LKP_UNKNOWN_RECORD

    def __init__(self, entity: str, record_id: str, code: Optional[ErrorCode] = None):
        super().__init__(
            f"{entity} record not found: {record_id}",
            code=code,
            recoverable=True,
            details={"entity": entity, "record_id": record_id},
        )
        self.entity = entity
        self.record_id = record_id

    def __str__(self) -> str:
        return self.message


class PricingError(TreeShopError):
    """Raised when a pricing lookup table has no entry for a request."""

    category = ErrorCategory.PRICING
    code = ErrorCode.PRC_UNKNOWN_SERVICE


class DuplicateRecordError(TreeShopError, ValueError):
    """Raised when add() is given an identifier that is already stored."""

    category = ErrorCategory.LOOKUP
    code = ErrorCode.LKP_DUPLICATE_RECORD

    def __init__(self, entity: str, record_id: str):
        super().__init__(
            f"{entity} record already exists: {record_id}",
            recoverable=True,
            details={"entity": entity, "record_id": record_id},
        )
        self.entity = entity
        self.record_id = record_id
