"""Utility modules for recipebox."""
