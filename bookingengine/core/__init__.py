"""Core error and money helpers."""
