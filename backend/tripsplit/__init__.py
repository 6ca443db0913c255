"""Tripsplit: expense splitting and settlement for shared trips."""
