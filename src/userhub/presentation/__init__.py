"""Presentation layer for userhub."""
