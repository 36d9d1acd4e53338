"""Protocol parts package (one class per module)."""
