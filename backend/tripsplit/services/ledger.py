"""
Plain record types consumed and produced by the settlement engine.

The engine reads records by attribute, so ORM rows, request schemas and the
dataclasses below are interchangeable as input.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tripsplit.core.enums import ShareType


@dataclass(frozen=True)
class MemberRecord:
    id: Any
    name: str = ""
    user_id: Optional[Any] = None  # None for guests


@dataclass(frozen=True)
class ExpenseRecord:
    id: Any
    payer_id: Any
    amount: int
    item_id: Optional[Any] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class SplitRecord:
    member_id: Any
    share_type: ShareType = ShareType.EQUAL
    share_value: Optional[int] = None


@dataclass
class MemberBalance:
    """Net position of one member: positive is owed money, negative owes."""
    member_id: Any
    member_name: str = ""
    total_paid: int = 0
    total_owed: int = 0

    @property
    def balance(self) -> int:
        return self.total_paid - self.total_owed


@dataclass(frozen=True)
class Transfer:
    """Represents a single transfer between members."""
    from_member_id: Any
    to_member_id: Any
    amount: int


@dataclass
class SettlementSummary:
    """Everything the API layer returns for a trip's settlement."""
    members: List[Any] = field(default_factory=list)
    balances: List[MemberBalance] = field(default_factory=list)
    settlements: List[Transfer] = field(default_factory=list)
    total_expenses: int = 0

    def member_names(self) -> Dict[Any, str]:
        return {b.member_id: b.member_name for b in self.balances}
