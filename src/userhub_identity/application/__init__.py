"""Application layer for identity."""
