"""Line-by-line streaming of toolchain subprocess output.

Cargo and the packaged binary can run for minutes; ``run_command`` hands each
line to an ``OutputMiddleware`` as soon as it is written so callers can log
progress, and returns the collected lines once the process exits.
"""

import shlex
import subprocess
from pathlib import Path
from threading import Thread
from typing import IO, Generic, Literal, TypeAlias, TypeVar, cast


T = TypeVar("T")

StreamName: TypeAlias = Literal["stdout", "stderr"]

# (return_code, stdout lines, stderr lines)
StreamedResult: TypeAlias = tuple[int, list[T], list[T]]


class OutputMiddleware(Generic[T]):
    """Receives every output line of a streamed subprocess.

    ``process`` may transform the line; returning ``None`` drops it from the
    collected result.
    """

    def process(self, line: str, stream_type: str) -> T:
        raise NotImplementedError()


class DefaultOutputMiddleware(OutputMiddleware[str]):
    """Echo lines to the terminal, marking stderr lines."""

    def __init__(self, stdout_prefix: str = "", stderr_prefix: str = "ERROR: ") -> None:
        self.prefixes = {"stdout": stdout_prefix, "stderr": stderr_prefix}

    def process(self, line: str, stream_type: str) -> str:
        print(f"{self.prefixes.get(stream_type, '')}{line}")
        return line


def _pump(
    stream: IO[str],
    stream_type: StreamName,
    middleware: OutputMiddleware[T],
    sink: list[T],
) -> None:
    with stream:
        for raw in stream:
            processed = middleware.process(raw.rstrip("\r\n"), stream_type)
            if processed is not None:
                sink.append(processed)


def run_command(
    cmd: str | list[str],
    middleware: OutputMiddleware[T] | None = None,
    env: dict[str, str] | None = None,
    cwd: Path | None = None,
) -> StreamedResult[T]:
    """Run ``cmd`` to completion, streaming both pipes through ``middleware``.

    Args:
        cmd: Argument vector, or a shell-style string split with ``shlex``
        middleware: Line handler; echoes to the terminal when omitted
        env: Full child environment; the parent's is inherited when None
        cwd: Working directory of the child

    Returns:
        The exit code followed by the collected stdout and stderr lines

    Raises:
        FileNotFoundError: The executable does not exist
        PermissionError: The executable cannot be run
    """
    handler = middleware or cast(OutputMiddleware[T], DefaultOutputMiddleware())
    argv = shlex.split(cmd) if isinstance(cmd, str) else cmd

    process = subprocess.Popen(
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        bufsize=1,
        env=env,
        cwd=cwd,
    )

    collected: dict[StreamName, list[T]] = {"stdout": [], "stderr": []}
    readers = [
        Thread(
            target=_pump,
            args=(pipe, name, handler, collected[name]),
            daemon=True,
        )
        for name, pipe in (("stdout", process.stdout), ("stderr", process.stderr))
    ]
    for reader in readers:
        reader.start()

    return_code = process.wait()
    for reader in readers:
        reader.join()

    return return_code, collected["stdout"], collected["stderr"]
