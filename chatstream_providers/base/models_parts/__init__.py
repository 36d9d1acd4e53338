"""Domain model parts package (one class per module)."""
