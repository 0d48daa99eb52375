"""Platform profile resolution: native dependencies and linker flags per OS."""

import logging
import platform as host_platform
from types import MappingProxyType

from recipebox.core.errors import ConfigurationError
from recipebox.models.platform import (
    DependencyKind,
    LinkerFlag,
    NativeDependency,
    Platform,
    PlatformProfile,
)


logger = logging.getLogger(__name__)


def _profile(
    target: Platform,
    dependencies: list[tuple[str, DependencyKind]],
    flags: list[str],
) -> PlatformProfile:
    return PlatformProfile(
        platform=target,
        dependencies=frozenset(
            NativeDependency(name=name, kind=kind, platforms=(target,))
            for name, kind in dependencies
        ),
        linker_flags=tuple(LinkerFlag(value=flag) for flag in flags),
    )


# Faster linkers than the platform defaults; they noticeably improve link
# time even for medium sized projects.
PLATFORM_PROFILES: MappingProxyType[Platform, PlatformProfile] = MappingProxyType(
    {
        Platform.LINUX: _profile(
            Platform.LINUX,
            [("mold-wrapped", DependencyKind.TOOL)],
            ["-fuse-ld=mold", "-Wl,--compress-debug-sections=zstd"],
        ),
        Platform.DARWIN: _profile(
            Platform.DARWIN,
            [
                ("Security", DependencyKind.FRAMEWORK),
                ("SystemConfiguration", DependencyKind.FRAMEWORK),
                ("libiconv", DependencyKind.LIBRARY),
            ],
            ["-fuse-ld=/usr/bin/ld", "-ld_new"],
        ),
        Platform.UNKNOWN: _profile(Platform.UNKNOWN, [], []),
    }
)


def detect_platform(system: str | None = None) -> Platform:
    """Map the host operating system onto the platform enum.

    Args:
        system: ``platform.system()`` value; the host's when None

    Returns:
        Platform: ``unknown`` for anything other than Linux or macOS
    """
    name = (system if system is not None else host_platform.system()).lower()
    if name == "linux":
        return Platform.LINUX
    if name == "darwin":
        return Platform.DARWIN
    logger.debug("Host system %r has no dedicated platform profile", name)
    return Platform.UNKNOWN


class PlatformProfileResolver:
    """Resolve the native dependency set and linker flags of a platform.

    Resolution is a pure table lookup; the resolver holds no state.
    """

    def __init__(
        self, profiles: "MappingProxyType[Platform, PlatformProfile] | None" = None
    ) -> None:
        self.profiles = profiles if profiles is not None else PLATFORM_PROFILES
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve(self, target: Platform | str) -> PlatformProfile:
        """Return the profile for ``target``.

        Args:
            target: Detected platform, or an explicit platform name

        Returns:
            PlatformProfile: Dependencies and ordered linker flags

        Raises:
            ConfigurationError: If an explicit name is not a known platform
        """
        resolved = Platform.parse(target)
        profile = self.profiles.get(resolved)
        if profile is None:
            raise ConfigurationError(f"No platform profile for '{resolved.value}'")

        if resolved is Platform.UNKNOWN:
            # TODO: confirm with the package owners whether unknown hosts
            # should keep degrading to an empty profile or fail outright.
            self.logger.warning(
                "No platform-specific dependencies or linker flags for unknown platform"
            )

        self.logger.debug(
            "Resolved %s profile: %d dependencies, link args %r",
            resolved.value,
            len(profile.dependencies),
            profile.link_args_string,
        )
        return profile

    def resolve_host(self) -> PlatformProfile:
        """Resolve the profile of the detected host platform."""
        return self.resolve(detect_platform())


def create_platform_profile_resolver() -> PlatformProfileResolver:
    """Create platform profile resolver instance.

    Returns:
        PlatformProfileResolver: New resolver using the built-in table
    """
    return PlatformProfileResolver()
