"""Test CLI commands."""

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from onboard import cli as cli_module
from onboard.cli import cli
from onboard.core.config import CONFIG_ENV_VAR

from conftest import FakeRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def use_fake_runner(monkeypatch: pytest.MonkeyPatch, fake_runner: FakeRunner) -> FakeRunner:
    """Route every external command through the fake runner."""
    monkeypatch.setattr(cli_module, "CommandRunner", lambda: fake_runner)
    return fake_runner


@pytest.mark.parametrize("args", [["shell"], ["shell", "install"], ["python", "bogus"]])
def test_invalid_action(cli_runner: CliRunner, args: list) -> None:
    """Missing or unknown actions print usage and exit 1."""
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 1
    assert "Usage:" in result.output
    assert "[setup|teardown|test]" in result.output


def test_shell_setup_and_test(cli_runner: CliRunner, fake_runner: FakeRunner, home: Path) -> None:
    """Setup succeeds and test then passes."""
    result = cli_runner.invoke(cli, ["shell", "setup"])
    assert result.exit_code == 0, result.output
    assert (home / ".zshrc").exists()

    result = cli_runner.invoke(cli, ["shell", "test"])
    assert result.exit_code == 0, result.output


def test_shell_test_missing(cli_runner: CliRunner, fake_runner: FakeRunner) -> None:
    """Test exits 1 when a single resource is missing."""
    assert cli_runner.invoke(cli, ["shell", "setup"]).exit_code == 0
    fake_runner.formulae.discard("gum")

    result = cli_runner.invoke(cli, ["shell", "test"])

    assert result.exit_code == 1
    assert "Missing" in result.output


def test_setup_aborts_on_failure(cli_runner: CliRunner, fake_runner: FakeRunner) -> None:
    """A failed install aborts with exit 1."""
    fake_runner.tools.add("brew")
    fake_runner.failures[("brew", "install", "wget")] = 1

    result = cli_runner.invoke(cli, ["shell", "setup"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert ("brew", "install", "gh") not in fake_runner.commands


def test_teardown_clean_machine(cli_runner: CliRunner) -> None:
    """Teardown with nothing installed succeeds."""
    for profile in ("shell", "python"):
        result = cli_runner.invoke(cli, [profile, "teardown"])
        assert result.exit_code == 0, result.output


def test_dry_run(cli_runner: CliRunner, fake_runner: FakeRunner, home: Path) -> None:
    """--dry-run installs and writes nothing."""
    result = cli_runner.invoke(cli, ["--dry-run", "shell", "setup"])

    assert result.exit_code == 0, result.output
    assert fake_runner.installs() == []
    assert not (home / ".zshrc").exists()
    assert not (home / ".backup").exists()


def test_python_setup(cli_runner: CliRunner, fake_runner: FakeRunner) -> None:
    """The python profile is wired to the CLI."""
    fake_runner.tools.add("brew")
    assert cli_runner.invoke(cli, ["python", "setup"]).exit_code == 0
    assert cli_runner.invoke(cli, ["python", "test"]).exit_code == 0
    assert fake_runner.pipx_apps == {"poetry"}


def test_info(cli_runner: CliRunner, fake_runner: FakeRunner) -> None:
    """info prints the system table."""
    fake_runner.sysctl["hw.ncpu"] = "12"
    result = cli_runner.invoke(cli, ["info"])
    assert result.exit_code == 0, result.output
    assert "CPU Cores" in result.output
    assert "12" in result.output


def test_config_command(cli_runner: CliRunner) -> None:
    """config prints the effective configuration as YAML."""
    result = cli_runner.invoke(cli, ["config"])
    assert result.exit_code == 0, result.output
    assert "packages:" in result.output
    assert "Configuration is valid." in result.output


def test_config_from_env(
    cli_runner: CliRunner, fake_runner: FakeRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """MAC_ONBOARD_CONFIG selects the config file."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"packages": ["jq"], "plugins": {}}))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    result = cli_runner.invoke(cli, ["shell", "setup"])

    assert result.exit_code == 0, result.output
    assert fake_runner.formulae == {"jq"}
    assert not any(c[:2] == ("git", "clone") for c in fake_runner.commands)


def test_config_validation_errors(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Profiles refuse to run with an invalid configuration."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"packages": []}))

    result = cli_runner.invoke(cli, ["--config", str(path), "shell", "setup"])
    assert result.exit_code == 1
    assert "packages must not be empty" in result.output

    result = cli_runner.invoke(cli, ["--config", str(path), "config"])
    assert result.exit_code == 1


@pytest.mark.parametrize(
    "data",
    [{"packages": "wget"}, {"shell_rc_files": [1]}, {"dotfiles": {"zshrc": None}}],
)
def test_malformed_config(cli_runner: CliRunner, tmp_path: Path, data: dict) -> None:
    """A config with wrongly typed values aborts."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))

    result = cli_runner.invoke(cli, ["--config", str(path), "shell", "test"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_log_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    """--log-file captures debug output."""
    log_file = tmp_path / "logs" / "onboard.log"
    result = cli_runner.invoke(cli, ["--log-file", str(log_file), "shell", "teardown"])
    assert result.exit_code == 0, result.output
    assert "Starting shell teardown" in log_file.read_text()


def test_setup_file_error_aborts(cli_runner: CliRunner, fake_runner: FakeRunner, tmp_path: Path) -> None:
    """A filesystem error during setup is reported and exits 1."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"dotfiles": {"aliases": str(blocker / "alias.sh")}}))

    result = cli_runner.invoke(cli, ["--config", str(path), "shell", "setup"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert not isinstance(result.exception, OSError)
    assert fake_runner.downloads == []
