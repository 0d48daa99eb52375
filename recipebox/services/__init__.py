"""Services orchestrating builds."""

from .build_service import BuildService, create_build_service
from .revision import detect_revision


__all__ = ["BuildService", "create_build_service", "detect_revision"]
