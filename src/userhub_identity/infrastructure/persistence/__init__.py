"""Credential store implementations."""
