"""HTTP adapter for the TimeScope engine."""
