"""Internal helpers for the exponential backoff calculator."""
