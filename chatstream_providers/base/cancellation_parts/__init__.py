"""Cancellation parts package (one class per module)."""
