"""
Pydantic schemas for trip members.
"""
from pydantic import field_validator
from typing import Optional
from datetime import datetime
from tripsplit.core.config import settings
from tripsplit.schemas.base import ApiModel


class MemberCreate(ApiModel):
    """Schema for adding a member. Omit user_id for a guest."""
    name: str
    user_id: Optional[str] = None
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Member name is required")
        if len(v) > settings.MAX_MEMBER_NAME_LENGTH:
            raise ValueError(f"Member name must be at most {settings.MAX_MEMBER_NAME_LENGTH} characters")
        return v


class MemberResponse(ApiModel):
    """Schema for member response."""
    id: int
    trip_id: int
    user_id: Optional[str] = None
    name: str
    created_at: datetime
