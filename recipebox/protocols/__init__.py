"""Protocol definitions for recipebox adapters and interfaces."""

from .process_adapter_protocol import ProcessAdapterProtocol, ProcessEnv, ProcessResult


__all__ = ["ProcessAdapterProtocol", "ProcessEnv", "ProcessResult"]
