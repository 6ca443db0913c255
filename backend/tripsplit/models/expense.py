"""
Expense and split models for tracking who paid and who owes.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, Text, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel
from tripsplit.core.enums import ShareType


class Expense(BaseModel):
    """Expense model representing a single payment event."""
    __tablename__ = "expenses"
    
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("trip_members.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # Minor currency units
    item_id = Column(String(64), nullable=True, index=True)  # Linked itinerary item, informational only
    description = Column(Text, nullable=True)
    
    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    payer = relationship("TripMember", back_populates="expenses_paid")
    splits = relationship(
        "ExpenseSplit", back_populates="expense",
        cascade="all, delete-orphan", order_by="ExpenseSplit.id"
    )


class ExpenseSplit(BaseModel):
    """How much of one expense a member owes. No row means not included."""
    __tablename__ = "expense_splits"
    __table_args__ = (
        UniqueConstraint("expense_id", "member_id", name="uq_expense_split_member"),
    )
    
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("trip_members.id", ondelete="CASCADE"), nullable=False, index=True)
    share_type = Column(
        SQLEnum(ShareType, values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=ShareType.EQUAL
    )
    share_value = Column(Integer, nullable=True)  # Percentage (0-100) or fixed amount; ignored for equal
    
    # Relationships
    expense = relationship("Expense", back_populates="splits")
    member = relationship("TripMember", back_populates="splits")
