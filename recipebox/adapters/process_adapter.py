"""Process adapter for external toolchain invocations."""

import logging
import shlex
import subprocess
from pathlib import Path

from recipebox.core.errors import ExternalToolchainError
from recipebox.protocols.process_adapter_protocol import (
    ProcessAdapterProtocol,
    ProcessEnv,
    ProcessResult,
)
from recipebox.utils import stream_process
from recipebox.utils.stream_process import OutputMiddleware


logger = logging.getLogger(__name__)


class LoggerOutputMiddleware(OutputMiddleware[str]):
    """Forward subprocess output lines to a logger."""

    def __init__(
        self, logger: logging.Logger, stdout_prefix: str = "", stderr_prefix: str = ""
    ):
        self.logger = logger
        self.stderr_prefix = stderr_prefix
        self.stdout_prefix = stdout_prefix

    def process(self, line: str, stream_type: str) -> str:
        if stream_type == "stdout":
            self.logger.debug("%s%s", self.stdout_prefix, line)
        else:
            self.logger.info("%s%s", self.stderr_prefix, line)
        return line


class ProcessAdapter:
    """Implementation of the process adapter on top of subprocess."""

    def run(
        self,
        command: list[str],
        environment: ProcessEnv | None = None,
        cwd: Path | None = None,
    ) -> ProcessResult:
        """Run a command, streaming output lines to the log."""
        cmd_str = " ".join(shlex.quote(arg) for arg in command)
        logger.debug("Running command: %s", cmd_str)

        try:
            return stream_process.run_command(
                command, LoggerOutputMiddleware(logger), env=environment, cwd=cwd
            )
        except FileNotFoundError as e:
            logger.error("Executable not found: %s", e)
            raise ExternalToolchainError(
                f"Executable not found: {command[0]}", command, 127
            ) from e
        except PermissionError as e:
            logger.error("Executable not runnable: %s", e)
            raise ExternalToolchainError(
                f"Executable not runnable: {command[0]}", command, 126
            ) from e

    def capture(
        self,
        command: list[str],
        environment: ProcessEnv | None = None,
        cwd: Path | None = None,
    ) -> tuple[int, bytes, str]:
        """Run a command and return its stdout bytes exactly as written.

        stderr is decoded for logging; undecodable bytes are replaced.
        """
        cmd_str = " ".join(shlex.quote(arg) for arg in command)
        logger.debug("Capturing output of: %s", cmd_str)

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                env=environment,
                cwd=cwd,
                check=False,
            )
        except FileNotFoundError as e:
            logger.error("Executable not found: %s", e)
            raise ExternalToolchainError(
                f"Executable not found: {command[0]}", command, 127
            ) from e
        except PermissionError as e:
            logger.error("Executable not runnable: %s", e)
            raise ExternalToolchainError(
                f"Executable not runnable: {command[0]}", command, 126
            ) from e

        stderr = result.stderr.decode("utf-8", errors="replace")
        return result.returncode, result.stdout, stderr


def create_process_adapter() -> ProcessAdapterProtocol:
    """Create a process adapter instance."""
    return ProcessAdapter()
