"""
Errors raised by the expense-splitting and settlement engine.
"""
from typing import Any, Dict, Optional


class SettlementError(ValueError):
    """Base class for rejected money data. The whole computation fails."""

    code = "settlement_error"

    def __init__(
        self,
        message: str,
        expense_id: Optional[Any] = None,
        member_id: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.expense_id = expense_id
        self.member_id = member_id

    def details(self) -> Dict[str, Any]:
        """Context for API error bodies."""
        details: Dict[str, Any] = {"code": self.code}
        if self.expense_id is not None:
            details["expenseId"] = self.expense_id
        if self.member_id is not None:
            details["memberId"] = self.member_id
        return details


class InvalidAmount(SettlementError):
    """A money value is not a non-negative whole number of minor units."""

    code = "invalid_amount"


class InvalidSplit(SettlementError):
    """A split row is malformed or its shares exceed what is allowed."""

    code = "invalid_split"


class OverAllocated(SettlementError):
    """Amount and percentage shares together exceed the expense total."""

    code = "over_allocated"


class UnallocatedRemainder(SettlementError):
    """Part of the expense is left over with no equal-share member to absorb it."""

    code = "unallocated_remainder"


class InternalInconsistency(RuntimeError):
    """Balances do not sum to zero. This is a bug, never a user error."""

    code = "internal_inconsistency"
