"""
Pydantic schemas for Expense entity.
"""
from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime
from tripsplit.core.config import settings
from tripsplit.schemas.base import ApiModel
from tripsplit.core.enums import ShareType


class SplitCreate(ApiModel):
    """One member's share of an expense."""
    member_id: int
    share_type: ShareType = ShareType.EQUAL
    share_value: Optional[int] = None  # Percentage (0-100) or fixed amount; ignored for equal


def _clean_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if len(v) > settings.MAX_DESCRIPTION_LENGTH:
        raise ValueError(f"Description must be at most {settings.MAX_DESCRIPTION_LENGTH} characters")
    return v or None


class ExpenseCreate(ApiModel):
    """Schema for expense creation."""
    payer_id: int
    amount: int = Field(gt=0)  # Minor currency units
    description: Optional[str] = None
    item_id: Optional[str] = None
    splits: List[SplitCreate] = []
    
    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _clean_description(v)


class ExpenseUpdate(ApiModel):
    """Schema for expense update. Given splits replace all existing ones."""
    payer_id: Optional[int] = None
    amount: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = None
    item_id: Optional[str] = None
    splits: Optional[List[SplitCreate]] = None
    
    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _clean_description(v)


class ExpensePreview(ApiModel):
    """Unsaved expense whose shares should be computed."""
    amount: int = Field(gt=0)
    splits: List[SplitCreate] = []


class SplitResponse(ApiModel):
    """Schema for split response."""
    id: int
    member_id: int
    member_name: str
    share_type: ShareType
    share_value: Optional[int] = None


class ExpenseResponse(ApiModel):
    """Schema for expense response."""
    id: int
    trip_id: int
    payer_id: int
    payer_name: str
    amount: int
    item_id: Optional[str] = None
    description: Optional[str] = None
    splits: List[SplitResponse] = []
    created_at: datetime


class ShareItem(ApiModel):
    """Resolved amount one member owes for an expense."""
    member_id: int
    amount: int


class ExpensePreviewResponse(ApiModel):
    """Schema for share preview response."""
    amount: int
    shares: List[ShareItem]
