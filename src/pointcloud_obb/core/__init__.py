"""Value types and wire layout."""
