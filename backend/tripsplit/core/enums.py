"""
Enumerations shared by models, schemas and services.
"""
import enum


class ShareType(str, enum.Enum):
    """How a split row divides an expense."""
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    AMOUNT = "amount"
