"""Adapters for external systems."""

from .process_adapter import ProcessAdapter, create_process_adapter


__all__ = ["ProcessAdapter", "create_process_adapter"]
