"""Message data models."""
