"""Pricing, availability, cancellation and modification services."""
