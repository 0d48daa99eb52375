"""Build service running a resolved recipe through the external toolchain."""

import os
import shlex
from pathlib import Path

from recipebox.artifacts.post_build import PostBuildArtifactGenerator
from recipebox.core.errors import ConfigurationError, ExternalToolchainError
from recipebox.core.structlog_logger import StructlogMixin
from recipebox.models.recipe import BuildIntent, BuildPhase, BuildRecipe
from recipebox.models.results import BuildResult
from recipebox.protocols import ProcessAdapterProtocol
from recipebox.resolution.recipe_builder import PREFIX_PLACEHOLDER


class BuildService(StructlogMixin):
    """Execute the phases of a BuildRecipe, then its post-install steps.

    Every external invocation is a blocking call; the first non-zero exit
    code aborts the remaining steps and is propagated unchanged.
    """

    def __init__(
        self,
        process_adapter: ProcessAdapterProtocol,
        artifact_generator: PostBuildArtifactGenerator | None = None,
    ) -> None:
        super().__init__()
        self.process_adapter = process_adapter
        self.artifact_generator = artifact_generator or PostBuildArtifactGenerator(
            process_adapter
        )

    def run(
        self,
        recipe: BuildRecipe,
        source_root: Path,
        prefix: Path,
        base_environment: dict[str, str] | None = None,
    ) -> BuildResult:
        """Run ``recipe`` against ``source_root``, installing into ``prefix``.

        Args:
            recipe: Resolved recipe (release-package or ci-check)
            source_root: Directory the toolchain runs in, usually a snapshot
            prefix: Install prefix
            base_environment: Environment the recipe is merged into;
                the current process environment when None

        Returns:
            BuildResult: Executed/skipped phases and installed artifacts

        Raises:
            ConfigurationError: For dev-shell recipes, which never build
            ExternalToolchainError: If any invocation fails
        """
        if recipe.intent == BuildIntent.DEV_SHELL:
            raise ConfigurationError("dev-shell recipes do not invoke a build")

        prefix = Path(os.path.abspath(prefix))
        base = dict(os.environ if base_environment is None else base_environment)
        environment = {**base, **recipe.environment}

        result = BuildResult(success=True, intent=recipe.intent.value, prefix=prefix)
        self.logger.info(
            "build_started",
            intent=recipe.intent.value,
            pname=recipe.pname,
            version=recipe.version,
            prefix=str(prefix),
        )

        for phase in recipe.phases:
            if phase.is_noop:
                self.logger.info("phase_skipped", phase=phase.name.value)
                result.skipped_phases.append(phase.name.value)
                continue
            self._run_phase(phase, source_root, prefix, environment)
            result.executed_phases.append(phase.name.value)

        if recipe.intent == BuildIntent.CI_CHECK:
            # Nothing is installed, the output only records that checks passed
            prefix.parent.mkdir(parents=True, exist_ok=True)
            prefix.touch()
            result.add_message("Checks passed")
            return result

        binary = prefix / "bin" / recipe.binary
        result.artifacts = self.artifact_generator.generate(
            binary,
            prefix,
            recipe.post_install_steps,
            work_dir=source_root,
            environment=environment,
        )
        result.add_message(f"Installed {recipe.pname} {recipe.version} to {prefix}")
        return result

    def _run_phase(
        self,
        phase: BuildPhase,
        source_root: Path,
        prefix: Path,
        environment: dict[str, str],
    ) -> None:
        command = [
            arg.replace(PREFIX_PLACEHOLDER, str(prefix)) for arg in phase.command
        ]
        phase_environment = {**environment, **phase.environment}
        self.logger.info(
            "phase_started",
            phase=phase.name.value,
            command=" ".join(shlex.quote(arg) for arg in command),
        )

        returncode, _stdout, stderr = self.process_adapter.run(
            command, environment=phase_environment, cwd=source_root
        )
        if returncode != 0:
            self.logger.error(
                "phase_failed", phase=phase.name.value, returncode=returncode
            )
            raise ExternalToolchainError(
                f"{phase.name.value} phase failed with exit code {returncode}",
                command,
                returncode,
                "\n".join(stderr),
            )
        self.logger.info("phase_completed", phase=phase.name.value)


def create_build_service(process_adapter: ProcessAdapterProtocol) -> BuildService:
    """Create build service instance with the default artifact generator."""
    return BuildService(process_adapter)
