"""
Pydantic schemas for settlement summaries.
"""
from pydantic import Field
from typing import List
from tripsplit.schemas.base import ApiModel
from tripsplit.schemas.member import MemberResponse


class MemberBalanceResponse(ApiModel):
    """Net position of a member (positive = is owed money)."""
    member_id: int
    member_name: str
    total_paid: int
    total_owed: int
    balance: int


class TransferResponse(ApiModel):
    """Schema for a single transfer in settlement."""
    from_member_id: int = Field(alias="from")
    from_name: str
    to_member_id: int = Field(alias="to")
    to_name: str
    amount: int


class SettlementSummaryResponse(ApiModel):
    """Schema for settlement summary."""
    members: List[MemberResponse]
    balances: List[MemberBalanceResponse]
    settlements: List[TransferResponse]
    total_expenses: int
    currency: str
    summary: str
