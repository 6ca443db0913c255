"""
Pydantic schemas for Trip entity.
"""
from pydantic import field_validator
from datetime import datetime
from tripsplit.core.config import settings
from tripsplit.schemas.base import ApiModel


class TripCreate(ApiModel):
    """Schema for trip creation."""
    name: str
    base_currency: str = settings.DEFAULT_CURRENCY
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Trip name is required")
        return v
    
    @field_validator("base_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3:
            raise ValueError("Currency must be a 3-letter code")
        return v


class TripResponse(ApiModel):
    """Schema for trip response."""
    id: int
    name: str
    base_currency: str
    created_at: datetime
