"""Booking engine core: stay, pricing, cancellation policy and reservation lifecycle."""

__version__ = "0.1.0"
