"""Models package - Import all models for SQLAlchemy registration."""
from tripsplit.models.trip import Trip
from tripsplit.models.member import TripMember
from tripsplit.models.expense import Expense, ExpenseSplit

__all__ = [
    "Trip",
    "TripMember",
    "Expense",
    "ExpenseSplit",
]
