"""Protocol definition for external process execution."""

from pathlib import Path
from typing import Protocol, TypeAlias, runtime_checkable


ProcessEnv: TypeAlias = dict[str, str]
# (return_code, stdout, stderr)
ProcessResult: TypeAlias = tuple[int, list[str], list[str]]


@runtime_checkable
class ProcessAdapterProtocol(Protocol):
    """Protocol for running external toolchain commands."""

    def run(
        self,
        command: list[str],
        environment: ProcessEnv | None = None,
        cwd: Path | None = None,
    ) -> ProcessResult:
        """Run a command, streaming its output to the log.

        Args:
            command: Command line to execute
            environment: Complete environment of the child process
            cwd: Working directory

        Returns:
            Tuple containing (return_code, stdout_lines, stderr_lines)

        Raises:
            ExternalToolchainError: If the executable cannot be started
        """
        ...

    def capture(
        self,
        command: list[str],
        environment: ProcessEnv | None = None,
        cwd: Path | None = None,
    ) -> tuple[int, bytes, str]:
        """Run a command and capture its standard output verbatim.

        Returns:
            Tuple containing (return_code, raw stdout bytes, decoded stderr)

        Raises:
            ExternalToolchainError: If the executable cannot be started
        """
        ...
