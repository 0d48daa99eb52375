"""Tests for platform, recipe and result models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from recipebox.core.errors import ConfigurationError
from recipebox.models.platform import (
    DependencyKind,
    LinkerFlag,
    NativeDependency,
    Platform,
    PlatformProfile,
)
from recipebox.models.recipe import (
    ArtifactKind,
    BuildIntent,
    BuildPhase,
    BuildRecipe,
    DevEnvironment,
    PhaseName,
    PostInstallStep,
)
from recipebox.models.results import ArtifactManifest, BuildResult, SnapshotResult


class TestPlatform:
    """Test Platform enum parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("linux", Platform.LINUX),
            ("Linux", Platform.LINUX),
            ("darwin", Platform.DARWIN),
            ("macOS", Platform.DARWIN),
            ("unknown", Platform.UNKNOWN),
        ],
    )
    def test_parse(self, value: str, expected: Platform):
        assert Platform.parse(value) == expected

    def test_parse_rejects_unrecognized(self):
        with pytest.raises(ConfigurationError, match="expected one of"):
            Platform.parse("windows")


class TestNativeDependency:
    """Test NativeDependency model."""

    def test_applies_to(self):
        everywhere = NativeDependency(name="openssl")
        darwin_only = NativeDependency(
            name="Security", kind=DependencyKind.FRAMEWORK, platforms=(Platform.DARWIN,)
        )

        assert everywhere.applies_to(Platform.LINUX)
        assert darwin_only.applies_to(Platform.DARWIN)
        assert not darwin_only.applies_to(Platform.LINUX)

    def test_dependencies_are_hashable_set_members(self):
        deps = {NativeDependency(name="libiconv"), NativeDependency(name="libiconv")}

        assert len(deps) == 1


class TestLinkerFlag:
    """Test LinkerFlag model."""

    def test_as_link_args(self):
        assert LinkerFlag(value="-fuse-ld=mold").as_link_args() == (
            "-C",
            "link-arg=-fuse-ld=mold",
        )

    @pytest.mark.parametrize("value", ["", "-fuse-ld mold", "\t"])
    def test_rejects_empty_or_whitespace(self, value: str):
        with pytest.raises(ValidationError):
            LinkerFlag(value=value)


class TestPlatformProfile:
    """Test PlatformProfile model."""

    def test_empty_profile(self):
        profile = PlatformProfile(platform=Platform.UNKNOWN)

        assert profile.link_args == []
        assert profile.link_args_string == ""
        assert profile.dependency_names() == []

    def test_json_output_is_deterministic(self):
        deps = [NativeDependency(name=name) for name in ("zlib", "alpha", "midway")]
        first = PlatformProfile(platform=Platform.LINUX, dependencies=frozenset(deps))
        second = PlatformProfile(
            platform=Platform.LINUX, dependencies=frozenset(reversed(deps))
        )

        assert first.model_dump_json() == second.model_dump_json()
        names = [d["name"] for d in json.loads(first.model_dump_json())["dependencies"]]
        assert names == ["alpha", "midway", "zlib"]


class TestBuildPhase:
    """Test BuildPhase model."""

    def test_empty_command_is_noop(self):
        assert BuildPhase(name=PhaseName.BUILD).is_noop is True
        check = BuildPhase(name=PhaseName.CHECK, command=("cargo", "test"))
        assert check.is_noop is False


class TestEnvironmentIsReadOnly:
    """Test that resolved environments cannot be changed after construction."""

    def _recipe(self, environment: dict[str, str]) -> BuildRecipe:
        return BuildRecipe(
            intent=BuildIntent.RELEASE_PACKAGE,
            platform=Platform.LINUX,
            pname="jujutsu",
            version="unstable-dirty",
            binary="jj",
            environment=environment,
        )

    def test_item_assignment_raises(self):
        recipe = self._recipe({"CARGO_INCREMENTAL": "0"})

        with pytest.raises(TypeError):
            recipe.environment["CARGO_INCREMENTAL"] = "1"  # type: ignore[index]

        assert recipe.environment == {"CARGO_INCREMENTAL": "0"}

    def test_source_mapping_is_copied(self):
        source = {"RUST_BACKTRACE": "1"}
        environment = DevEnvironment(
            platform=Platform.LINUX, toolchain="rust", environment=source
        )
        source["RUST_BACKTRACE"] = "0"

        assert environment.environment["RUST_BACKTRACE"] == "1"

    def test_default_is_read_only(self):
        phase = BuildPhase(name=PhaseName.BUILD)

        with pytest.raises(TypeError):
            phase.environment["X"] = "y"  # type: ignore[index]

    def test_serializes_as_plain_mapping(self):
        data = json.loads(self._recipe({"A": "1"}).model_dump_json())

        assert data["environment"] == {"A": "1"}
        assert self._recipe({"A": "1"}).model_dump()["environment"] == {"A": "1"}


class TestPostInstallStep:
    """Test PostInstallStep model."""

    def setup_method(self):
        self.step = PostInstallStep(
            kind=ArtifactKind.COMPLETION,
            arguments=("util", "completion", "fish"),
            destination="share/fish/vendor_completions.d/jj.fish",
            shell="fish",
        )

    def test_argv(self):
        assert self.step.argv(Path("/out/bin/jj")) == [
            "/out/bin/jj",
            "util",
            "completion",
            "fish",
        ]

    def test_describe(self):
        assert self.step.describe("/out/bin/jj") == (
            "/out/bin/jj util completion fish > share/fish/vendor_completions.d/jj.fish"
        )


class TestResults:
    """Test result models."""

    def test_errors_force_failure(self):
        result = SnapshotResult(
            success=True, destination=Path("/tmp/snap"), errors=["copy failed"]
        )

        assert result.success is False
        assert result.is_success() is False

    def test_summary(self):
        result = BuildResult(success=True, intent="ci-check")
        result.add_message("Checks passed")

        summary = result.get_summary()

        assert summary["success"] is True
        assert summary["message_count"] == 1
        assert summary["errors"] is None

    def test_manifest_files(self):
        manifest = ArtifactManifest(
            man_page=Path("/out/share/man/man1/jj.1"),
            completions={"bash": Path("/out/share/bash-completion/completions/jj")},
        )

        assert manifest.files == [
            Path("/out/share/man/man1/jj.1"),
            Path("/out/share/bash-completion/completions/jj"),
        ]

    def test_build_result_serializes(self):
        result = BuildResult(
            success=True, intent="release-package", prefix=Path("/out")
        )

        data = result.to_json_dict()

        assert data["prefix"] == "/out"
        assert data["executed_phases"] == []
