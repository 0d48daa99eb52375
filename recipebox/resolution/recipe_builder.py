"""Build recipe composition per build intent."""

from pydantic import ValidationError

from recipebox.config.project import COMPLETION_DESTINATIONS, ProjectConfig
from recipebox.core.errors import ConfigurationError
from recipebox.core.structlog_logger import StructlogMixin
from recipebox.models.platform import DependencyKind, PlatformProfile
from recipebox.models.recipe import (
    ArtifactKind,
    BuildIntent,
    BuildPhase,
    BuildRecipe,
    PhaseName,
    PostInstallStep,
)
from recipebox.resolution.environment_constructor import EnvironmentConstructor


DIRTY_REVISION = "dirty"
SHORT_REVISION_LENGTH = 7
RELEASE_PROFILE = "release"
TEST_PROFILE = "test"

# Substituted with the install prefix when the install phase runs
PREFIX_PLACEHOLDER = "{prefix}"


class BuildRecipeBuilder(StructlogMixin):
    """Compose a BuildRecipe from an intent and a platform profile."""

    def __init__(self, project: ProjectConfig) -> None:
        super().__init__()
        self.project = project
        self.environment_constructor = EnvironmentConstructor(project)

    def build(
        self,
        intent: BuildIntent | str,
        profile: PlatformProfile,
        revision: str | None = None,
    ) -> BuildRecipe:
        """Resolve the recipe for ``intent``.

        Args:
            intent: Requested build intent
            profile: Output of the platform profile resolver
            revision: Current revision identifier, None when unavailable

        Returns:
            BuildRecipe: Freshly constructed, immutable recipe

        Raises:
            ConfigurationError: If the intent is not recognized or the
                project configuration is inconsistent
        """
        resolved = BuildIntent.parse(intent)
        builders = {
            BuildIntent.RELEASE_PACKAGE: self._release_package,
            BuildIntent.CI_CHECK: self._ci_check,
            BuildIntent.DEV_SHELL: self._dev_shell,
        }
        try:
            recipe = builders[resolved](profile, revision)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {resolved.value} recipe: {e}") from e

        self.logger.info(
            "recipe_resolved",
            intent=resolved.value,
            platform=profile.platform.value,
            version=recipe.version,
            phases=[p.name.value for p in recipe.phases if not p.is_noop],
        )
        return recipe

    def binary_selection(self) -> list[str]:
        """Feature and binary-target arguments of a release build."""
        if self.project.binary in self.project.auxiliary_binaries:
            raise ConfigurationError(
                f"Binary '{self.project.binary}' is an auxiliary helper binary"
            )
        args: list[str] = []
        if self.project.packaging_features:
            args.extend(["--features", ",".join(self.project.packaging_features)])
        args.extend(["--bin", self.project.binary])
        return args

    def version(self, revision: str | None) -> str:
        short = revision[:SHORT_REVISION_LENGTH] if revision else DIRTY_REVISION
        return f"unstable-{short}"

    def release_environment(
        self, profile: PlatformProfile, revision: str | None
    ) -> dict[str, str]:
        """Environment of a release build, in a stable order."""
        environment = {var: "1" for var in self.project.pkg_config_env_vars}
        if profile.link_args:
            environment["RUSTFLAGS"] = profile.link_args_string
        environment[self.project.revision_env_var] = revision or DIRTY_REVISION
        # Incremental artifacts are never reused by a clean package build
        environment["CARGO_INCREMENTAL"] = "0"
        return environment

    def post_install_steps(self) -> list[PostInstallStep]:
        """Man page first, then one completion script per shell."""
        cmd = self.project.command
        section = self.project.man_section
        steps = [
            PostInstallStep(
                kind=ArtifactKind.MAN_PAGE,
                arguments=tuple(self.project.mangen_arguments),
                destination=f"share/man/man{section}/{cmd}.{section}",
            )
        ]
        for shell in self.project.shells:
            steps.append(
                PostInstallStep(
                    kind=ArtifactKind.COMPLETION,
                    arguments=(*self.project.completion_arguments, shell),
                    destination=COMPLETION_DESTINATIONS[shell].format(cmd=cmd),
                    shell=shell,
                )
            )
        return steps

    def check_phase(self, cargo_profile: str) -> BuildPhase:
        features: list[str] = []
        if self.project.packaging_features:
            features = ["--features", ",".join(self.project.packaging_features)]
        if self.project.use_nextest:
            command = ["cargo", "nextest", "run", "--cargo-profile", cargo_profile]
        else:
            command = ["cargo", "test", "--profile", cargo_profile]
        return BuildPhase(
            name=PhaseName.CHECK,
            command=(*command, "--frozen", *features),
            profile=cargo_profile,
            environment={"RUST_BACKTRACE": "1"},
        )

    def _release_package(
        self, profile: PlatformProfile, revision: str | None
    ) -> BuildRecipe:
        selection = self.binary_selection()
        phases = (
            BuildPhase(
                name=PhaseName.BUILD,
                command=(
                    "cargo",
                    "build",
                    "--profile",
                    RELEASE_PROFILE,
                    "--frozen",
                    *selection,
                ),
                profile=RELEASE_PROFILE,
            ),
            self.check_phase(RELEASE_PROFILE),
            BuildPhase(
                name=PhaseName.INSTALL,
                command=(
                    "cargo",
                    "install",
                    "--frozen",
                    "--no-track",
                    "--path",
                    ".",
                    "--root",
                    PREFIX_PLACEHOLDER,
                    *selection,
                ),
                profile=RELEASE_PROFILE,
            ),
        )

        tools = list(self.project.native_build_inputs)
        tools.extend(profile.dependency_names(DependencyKind.TOOL))
        inputs = list(self.project.build_inputs)
        inputs.extend(
            dep.name for dep in sorted(profile.dependencies, key=lambda d: d.name)
            if dep.kind != DependencyKind.TOOL
        )

        return BuildRecipe(
            intent=BuildIntent.RELEASE_PACKAGE,
            platform=profile.platform,
            pname=self.project.pname,
            version=self.version(revision),
            binary=self.project.binary,
            build_args=tuple(selection),
            environment=self.release_environment(profile, revision),
            native_dependencies=profile.dependencies,
            native_build_inputs=tuple(tools),
            build_inputs=tuple(inputs),
            phases=phases,
            post_install_steps=tuple(self.post_install_steps()),
            excluded_binaries=tuple(self.project.auxiliary_binaries),
        )

    def _ci_check(self, profile: PlatformProfile, revision: str | None) -> BuildRecipe:
        # The dependency cache gets invalidated between the build and check
        # phases, so CI only runs the test suite against the test profile.
        release = self._release_package(profile, revision)
        return release.model_copy(
            update={
                "intent": BuildIntent.CI_CHECK,
                "phases": (
                    BuildPhase(name=PhaseName.BUILD),
                    self.check_phase(TEST_PROFILE),
                    BuildPhase(name=PhaseName.INSTALL),
                ),
                "post_install_steps": (),
            }
        )

    def _dev_shell(self, profile: PlatformProfile, revision: str | None) -> BuildRecipe:
        dev_environment = self.environment_constructor.construct(profile)
        return BuildRecipe(
            intent=BuildIntent.DEV_SHELL,
            platform=profile.platform,
            pname=self.project.pname,
            version=self.version(revision),
            binary=self.project.binary,
            environment=dev_environment.environment,
            native_dependencies=profile.dependencies,
            build_inputs=(
                dev_environment.toolchain,
                *dev_environment.foreign_dependencies,
            ),
            developer_tools=dev_environment.developer_tools,
        )


def create_recipe_builder(project: ProjectConfig) -> BuildRecipeBuilder:
    """Create build recipe builder instance."""
    return BuildRecipeBuilder(project)
