"""Tests for the recipebox command line interface."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import yaml
from typer.testing import CliRunner

from recipebox.cli import app
from recipebox.protocols import ProcessAdapterProtocol


REVISION = "0123456789abcdef0123456789abcdef01234567"
PINNED = ["-p", "linux", "--revision", REVISION]


def create_mock_adapter(
    run_results: list[tuple[int, list[str], list[str]]] | None = None,
) -> Mock:
    adapter = Mock(spec=ProcessAdapterProtocol)
    adapter.capture.return_value = (0, b"", "")
    if run_results is None:
        adapter.run.return_value = (0, [], [])
    else:
        adapter.run.side_effect = run_results
    return adapter


class TestMainApp:
    """Test the top-level application."""

    def test_help_lists_commands(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("profile", "recipe", "snapshot", "build", "shell"):
            assert command in result.output

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "recipebox v" in result.output


class TestProfileCommand:
    """Test the profile command."""

    def test_json_output(self, cli_runner: CliRunner):
        result = cli_runner.invoke(
            app, ["profile", "--platform", "linux", "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["platform"] == "linux"
        assert [flag["value"] for flag in data["linker_flags"]] == [
            "-fuse-ld=mold",
            "-Wl,--compress-debug-sections=zstd",
        ]
        assert data["link_args"][0] == "-C"

    def test_table_output(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["profile", "--platform", "darwin"])

        assert result.exit_code == 0
        assert "SystemConfiguration" in result.stdout
        assert "-ld_new" in result.stdout

    def test_platform_from_environment(self, cli_runner: CliRunner):
        result = cli_runner.invoke(
            app,
            ["profile", "--format", "json"],
            env={"RECIPEBOX_PLATFORM": "darwin"},
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["platform"] == "darwin"

    def test_unrecognized_platform_exits_1(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["profile", "--platform", "plan9"])

        assert result.exit_code == 1


class TestRecipeCommand:
    """Test the recipe command."""

    def test_release_recipe_json(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app,
            [
                "recipe",
                "release-package",
                "--root",
                str(tmp_path),
                "--platform",
                "linux",
                "--revision",
                REVISION,
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["intent"] == "release-package"
        assert data["version"] == "unstable-0123456"
        assert data["build_args"] == ["--features", "packaging", "--bin", "jj"]
        assert data["environment"]["NIX_JJ_GIT_HASH"] == REVISION
        assert len(data["post_install_steps"]) == 4

    def test_ci_check_recipe_json(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app,
            [
                "recipe",
                "ci-check",
                "-r",
                str(tmp_path),
                "-p",
                "darwin",
                "--revision",
                REVISION,
                "-f",
                "json",
            ],
        )

        assert result.exit_code == 0
        phases = {p["name"]: p for p in json.loads(result.stdout)["phases"]}
        assert phases["build"]["command"] == []
        assert phases["install"]["command"] == []
        assert phases["check"]["profile"] == "test"

    def test_revision_detected_from_git(self, cli_runner: CliRunner, tmp_path: Path):
        with patch(
            "recipebox.cli.helpers.context.detect_revision", return_value=None
        ) as mock_detect:
            result = cli_runner.invoke(
                app,
                [
                    "recipe",
                    "release-package",
                    "-r",
                    str(tmp_path),
                    "-p",
                    "linux",
                    "-f",
                    "json",
                ],
            )

        assert result.exit_code == 0
        mock_detect.assert_called_once()
        assert json.loads(result.stdout)["version"] == "unstable-dirty"

    def test_table_output(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app,
            ["recipe", "release-package", "-r", str(tmp_path), *PINNED],
        )

        assert result.exit_code == 0
        assert "jujutsu" in result.stdout
        assert "fake-editor" in result.stdout

    def test_unknown_intent_exits_1(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app, ["recipe", "nightly", "-r", str(tmp_path), "-p", "linux"]
        )

        assert result.exit_code == 1

    def test_project_file_at_root_is_used(self, cli_runner: CliRunner, tmp_path: Path):
        (tmp_path / "recipebox.yaml").write_text(
            yaml.safe_dump({"pname": "tool", "binary": "tool"})
        )

        result = cli_runner.invoke(
            app,
            ["recipe", "release-package", "-r", str(tmp_path), *PINNED, "-f", "json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["pname"] == "tool"
        assert data["build_args"][-2:] == ["--bin", "tool"]

    def test_missing_explicit_project_file_exits_1(
        self, cli_runner: CliRunner, tmp_path: Path
    ):
        result = cli_runner.invoke(
            app,
            ["-c", str(tmp_path / "missing.yaml"), "recipe", "ci-check", "-p", "linux"],
        )

        assert result.exit_code == 1


class TestSnapshotCommand:
    """Test the snapshot command."""

    def test_snapshot(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path):
        destination = tmp_path / "snap"

        result = cli_runner.invoke(
            app, ["snapshot", str(source_tree), str(destination), "--list"]
        )

        assert result.exit_code == 0
        assert "src/main.rs" in result.stdout
        assert (destination / "Cargo.toml").exists()
        assert not (destination / "target").exists()

    def test_invalid_rule_in_project_file(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path
    ):
        (source_tree / "recipebox.yaml").write_text("exclusion_rules: ['(bad']\n")
        destination = tmp_path / "snap"

        result = cli_runner.invoke(
            app, ["snapshot", str(source_tree), str(destination)]
        )

        assert result.exit_code == 1
        assert not destination.exists()

    def test_missing_root(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app, ["snapshot", str(tmp_path / "nope"), str(tmp_path / "snap")]
        )

        assert result.exit_code == 1


class TestBuildCommand:
    """Test the build command."""

    def test_ci_check_build(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path
    ):
        adapter = create_mock_adapter()
        prefix = tmp_path / "result"

        with patch(
            "recipebox.cli.commands.build.create_process_adapter", return_value=adapter
        ):
            result = cli_runner.invoke(
                app,
                [
                    "build",
                    "ci-check",
                    "-r",
                    str(source_tree),
                    "-o",
                    str(prefix),
                    *PINNED,
                ],
            )

        assert result.exit_code == 0
        assert prefix.exists()
        adapter.run.assert_called_once()
        command = adapter.run.call_args.args[0]
        assert command[:5] == ["cargo", "nextest", "run", "--cargo-profile", "test"]
        cwd = adapter.run.call_args.kwargs["cwd"]
        assert cwd != source_tree

    def test_failed_phase_propagates_exit_code(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path
    ):
        adapter = create_mock_adapter([(0, [], []), (101, [], ["test failed"])])

        with patch(
            "recipebox.cli.commands.build.create_process_adapter", return_value=adapter
        ):
            result = cli_runner.invoke(
                app,
                [
                    "build",
                    "release-package",
                    "-r",
                    str(source_tree),
                    "-o",
                    str(tmp_path / "out"),
                    *PINNED,
                ],
            )

        assert result.exit_code == 101
        assert adapter.run.call_count == 2

    def test_in_place_build_runs_in_root(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path
    ):
        adapter = create_mock_adapter()

        with patch(
            "recipebox.cli.commands.build.create_process_adapter", return_value=adapter
        ):
            result = cli_runner.invoke(
                app,
                [
                    "build",
                    "ci-check",
                    "--in-place",
                    "-r",
                    str(source_tree),
                    "-o",
                    str(tmp_path / "result"),
                    *PINNED,
                ],
            )

        assert result.exit_code == 0
        assert adapter.run.call_args.kwargs["cwd"] == source_tree

    def test_dev_shell_cannot_be_built(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path
    ):
        adapter = create_mock_adapter()

        with patch(
            "recipebox.cli.commands.build.create_process_adapter", return_value=adapter
        ):
            result = cli_runner.invoke(
                app,
                ["build", "dev-shell", "-r", str(source_tree), *PINNED],
            )

        assert result.exit_code == 1
        adapter.run.assert_not_called()


class TestShellCommand:
    """Test the shell command."""

    def test_env_output(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(app, ["shell", "-r", str(tmp_path), "-p", "linux"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0].startswith("# packages: rust-nightly-complete")
        assert "export RUST_BACKTRACE=1" in lines
        assert any(line.startswith("export RUSTFLAGS='-Zthreads=0 ") for line in lines)

    def test_json_output(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(
            app, ["shell", "-r", str(tmp_path), "-p", "darwin", "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["platform"] == "darwin"
        assert "libiconv" in data["packages"]
        assert data["environment"]["ZSTD_SYS_USE_PKG_CONFIG"] == "1"

    @pytest.mark.parametrize("fmt", ["yaml", "toml"])
    def test_unsupported_format(self, cli_runner: CliRunner, tmp_path: Path, fmt: str):
        result = cli_runner.invoke(
            app, ["shell", "-r", str(tmp_path), "-p", "linux", "--format", fmt]
        )

        assert result.exit_code == 2
