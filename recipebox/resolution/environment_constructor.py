"""Construct the provisioned environment of an interactive development session."""

from recipebox.config.project import ProjectConfig
from recipebox.core.structlog_logger import get_struct_logger
from recipebox.models.platform import PlatformProfile
from recipebox.models.recipe import DevEnvironment


logger = get_struct_logger(__name__)

# Foreign dependencies are also needed by the package build itself
FOREIGN_DEPENDENCIES = ("openssl", "zstd", "libgit2", "libssh2", "pkg-config")


class EnvironmentConstructor:
    """Compose a development environment from a platform profile.

    The environment is returned as a value for the caller to merge into a
    child process; nothing here touches ``os.environ``.
    """

    def __init__(self, project: ProjectConfig) -> None:
        self.project = project

    def construct(self, profile: PlatformProfile) -> DevEnvironment:
        """Assemble toolchain, utilities and exports for ``profile``.

        Args:
            profile: Resolved platform profile

        Returns:
            DevEnvironment: Environment handed to the interactive session
        """
        environment = {"RUST_BACKTRACE": "1"}
        for var in self.project.pkg_config_env_vars:
            environment[var] = "1"
        rustflags = [*self.project.dev_rustflags, *profile.link_args]
        if rustflags:
            environment["RUSTFLAGS"] = " ".join(rustflags)

        dev_environment = DevEnvironment(
            platform=profile.platform,
            toolchain=self.project.toolchain,
            native_dependencies=profile.dependencies,
            foreign_dependencies=FOREIGN_DEPENDENCIES,
            developer_tools=tuple(self.project.developer_tools),
            environment=environment,
        )
        logger.debug(
            "dev_environment_constructed",
            platform=profile.platform.value,
            package_count=len(dev_environment.packages),
            exports=sorted(environment),
        )
        return dev_environment


def create_environment_constructor(project: ProjectConfig) -> EnvironmentConstructor:
    """Create environment constructor instance."""
    return EnvironmentConstructor(project)
