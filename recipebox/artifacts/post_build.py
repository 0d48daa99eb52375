"""Post-build artifact generation by invoking the freshly built binary."""

import os
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import cast

from recipebox.config.project import MIN_COMPLETION_SHELLS
from recipebox.core.errors import ConfigurationError, ExternalToolchainError
from recipebox.core.structlog_logger import StructlogMixin
from recipebox.models.recipe import ArtifactKind, PostInstallStep
from recipebox.models.results import ArtifactManifest
from recipebox.protocols import ProcessAdapterProtocol


class PostBuildArtifactGenerator(StructlogMixin):
    """Generate man page and shell completions from a built binary.

    Steps run in order and the first failing invocation aborts the rest:
    these are install-time artifacts, not optional extras.
    """

    def __init__(self, process_adapter: ProcessAdapterProtocol) -> None:
        super().__init__()
        self.process_adapter = process_adapter

    def generate(
        self,
        binary: Path,
        prefix: Path,
        steps: Sequence[PostInstallStep],
        work_dir: Path | None = None,
        environment: dict[str, str] | None = None,
    ) -> ArtifactManifest:
        """Run every post-install step against ``binary``.

        Args:
            binary: Path of the installed binary
            prefix: Install prefix the artifacts are registered under
            steps: Ordered post-install steps from the recipe
            work_dir: Where the man page is captured before install
                (defaults to the current directory)
            environment: Environment of the binary invocations

        Returns:
            ArtifactManifest: Installed man page and completion scripts

        Raises:
            ConfigurationError: If the steps do not describe one man page
                and at least three distinct completion shells
            ExternalToolchainError: If any invocation fails; carries the
                binary's own exit code
        """
        self._validate_steps(steps)
        if not binary.is_file() or not os.access(binary, os.X_OK):
            raise ExternalToolchainError(
                f"Built binary not found or not executable: {binary}",
                [str(binary)],
                127,
            )

        work_dir = work_dir or Path.cwd()
        manifest = ArtifactManifest()
        for step in steps:
            output = self._invoke(binary, step, environment)
            destination = prefix / step.destination

            if step.kind == ArtifactKind.MAN_PAGE:
                captured = work_dir / Path(step.destination).name
                self._write(captured, output)
                self._install(captured, destination)
                manifest.man_page = destination
            else:
                shell = cast(str, step.shell)
                self._write(destination, output)
                manifest.completions[shell] = destination

            self.logger.info(
                "artifact_installed",
                kind=step.kind.value,
                shell=step.shell,
                destination=str(destination),
            )

        return manifest

    def _validate_steps(self, steps: Sequence[PostInstallStep]) -> None:
        man_pages = [s for s in steps if s.kind == ArtifactKind.MAN_PAGE]
        shells = [s.shell for s in steps if s.kind == ArtifactKind.COMPLETION]
        if len(man_pages) != 1:
            raise ConfigurationError(
                f"Expected exactly one man page step, got {len(man_pages)}"
            )
        if steps[0].kind != ArtifactKind.MAN_PAGE:
            raise ConfigurationError("The man page step must run first")
        if None in shells or len(set(shells)) != len(shells):
            raise ConfigurationError(f"Completion shells must be distinct: {shells}")
        if len(shells) < MIN_COMPLETION_SHELLS:
            raise ConfigurationError(
                f"At least {MIN_COMPLETION_SHELLS} completion shells are required, "
                f"got {len(shells)}"
            )

    def _invoke(
        self,
        binary: Path,
        step: PostInstallStep,
        environment: dict[str, str] | None,
    ) -> bytes:
        argv = step.argv(binary)
        returncode, stdout, stderr = self.process_adapter.capture(
            argv, environment=environment
        )
        if returncode != 0:
            self.logger.error(
                "artifact_generation_failed",
                command=argv,
                returncode=returncode,
                stderr=stderr.strip(),
            )
            raise ExternalToolchainError(
                f"Generating {step.kind.value} failed with exit code {returncode}",
                argv,
                returncode,
                stderr,
            )
        if not stdout:
            self.logger.warning("artifact_output_empty", command=argv)
        return stdout

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def _install(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)


def create_post_build_generator(
    process_adapter: ProcessAdapterProtocol,
) -> PostBuildArtifactGenerator:
    """Create post-build artifact generator instance."""
    return PostBuildArtifactGenerator(process_adapter)
