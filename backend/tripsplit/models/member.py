"""
Trip member model for expense sharing.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class TripMember(BaseModel):
    """A participant in a trip's cost sharing. Guests have no user_id."""
    __tablename__ = "trip_members"
    
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=True, index=True)  # Account id from the auth service, NULL for guests
    name = Column(String(50), nullable=False)
    
    # Relationships
    trip = relationship("Trip", back_populates="members")
    expenses_paid = relationship(
        "Expense", back_populates="payer",
        cascade="all, delete-orphan"
    )
    splits = relationship(
        "ExpenseSplit", back_populates="member",
        cascade="all, delete-orphan"
    )
