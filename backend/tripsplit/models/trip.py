"""
Trip model holding members and expenses.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"
    
    name = Column(String(200), nullable=False)
    base_currency = Column(String(3), nullable=False, default="JPY")
    
    # Relationships
    members = relationship(
        "TripMember", back_populates="trip",
        cascade="all, delete-orphan", order_by="TripMember.id"
    )
    expenses = relationship(
        "Expense", back_populates="trip",
        cascade="all, delete-orphan", order_by="Expense.id"
    )
