"""
Utility functions for the application.
"""
from typing import Any, Dict


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response


def format_amount(amount: int, currency: str) -> str:
    """Format a minor-unit amount for display, e.g. ``1,000 JPY``."""
    return f"{amount:,} {currency}"


def format_signed_amount(amount: int, currency: str) -> str:
    """Format a balance with an explicit sign, e.g. ``+2,000 JPY``."""
    return f"{amount:+,} {currency}"
