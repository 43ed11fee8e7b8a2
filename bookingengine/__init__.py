"""Booking pricing, cancellation and modification engine."""

__version__ = "1.0.0"
