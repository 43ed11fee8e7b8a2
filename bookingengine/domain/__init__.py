"""Booking, modification and cancellation domain rules."""
