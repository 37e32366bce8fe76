"""Installable resources.

A resource is a named unit with a presence check, an install action and a
remove action. Resources never decide whether to run; the installer asks
``is_present()`` first and only then calls ``install()``.
"""

from __future__ import annotations

import logging
import shlex
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .backup import scrub_lines
from .errors import CommandError
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class Resource:
    """Base class for installable units.

    Attributes:
        name (str): Unique name of the resource.
        runner (CommandRunner): Runner used for external commands.
        verifiable (bool): Whether ``test`` reports this resource.
        removable (bool): Whether teardown removes this resource.
    """

    kind = "resource"
    verifiable = True
    removable = True

    def __init__(self, name: str, runner: CommandRunner) -> None:
        """Initialize resource."""
        self.name = name
        self.runner = runner

    def __repr__(self) -> str:
        """Return string representation."""
        return f"{type(self).__name__}({self.name!r})"

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return self.name

    def is_present(self) -> bool:
        """Check whether the resource is installed."""
        raise NotImplementedError

    def install(self) -> None:
        """Install the resource."""
        raise NotImplementedError

    def remove(self) -> None:
        """Remove the resource. Absent resources are a no-op."""


class Step(Resource):
    """An action without a presence check that runs on every setup.

    Used for ``brew update`` and ``softwareupdate -l``. A tolerant step logs
    failures instead of aborting the run.
    """

    kind = "step"
    verifiable = False
    removable = False

    def __init__(
        self,
        name: str,
        runner: CommandRunner,
        action: Callable[[CommandRunner], None],
        tolerate: bool = False,
        fallback_message: str = "",
    ) -> None:
        """Initialize step."""
        super().__init__(name, runner)
        self.action = action
        self.tolerate = tolerate
        self.fallback_message = fallback_message

    def is_present(self) -> bool:
        """Steps are never present."""
        return False

    def install(self) -> None:
        """Run the step."""
        try:
            self.action(self.runner)
        except CommandError as e:
            if not self.tolerate:
                raise
            if self.fallback_message:
                logger.info(self.fallback_message)
            else:
                logger.warning("%s failed: %s", self.name, e)


class Homebrew(Resource):
    """The Homebrew package manager itself.

    Teardown never uninstalls Homebrew; only the packages it installed.
    """

    kind = "package manager"
    removable = False

    def __init__(self, runner: CommandRunner, install_url: str, prefix: Path) -> None:
        """Initialize Homebrew resource."""
        super().__init__("brew", runner)
        self.install_url = install_url
        self.prefix = Path(prefix)

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return "Homebrew"

    def is_present(self) -> bool:
        """Check for ``brew`` on PATH."""
        return self.runner.command_exists("brew")

    def install(self) -> None:
        """Run the official install script, then put brew on PATH."""
        self.runner.run_shell(f'/bin/bash -c "$(curl -fsSL {shlex.quote(self.install_url)})"')
        self.runner.prepend_path(self.prefix / "bin")


class BrewPackage(Resource):
    """A Homebrew formula."""

    kind = "package"

    def is_present(self) -> bool:
        """Check ``brew list --formula`` for an exact line match."""
        try:
            installed = self.runner.run("brew", "list", "--formula")
        except CommandError:
            return False
        return self.name in installed.splitlines()

    def install(self) -> None:
        """Install the formula."""
        self.runner.run("brew", "install", self.name, capture=False)

    def remove(self) -> None:
        """Uninstall the formula if brew is available."""
        if not self.runner.command_exists("brew"):
            return
        self.runner.run("brew", "uninstall", self.name, check=False)


class OhMyZsh(Resource):
    """The Oh My Zsh checkout."""

    kind = "framework"

    def __init__(self, runner: CommandRunner, install_url: str, path: Path) -> None:
        """Initialize Oh My Zsh resource."""
        super().__init__("oh-my-zsh", runner)
        self.install_url = install_url
        self.path = Path(path)

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return "Oh My Zsh"

    def is_present(self) -> bool:
        """Check for the install directory."""
        return self.path.is_dir()

    def install(self) -> None:
        """Pipe the install script into bash."""
        # RUNZSH=no keeps the installer from starting an interactive shell
        self.runner.run_shell(
            f"curl -fsSL {shlex.quote(self.install_url)} | "
            f"ZSH={shlex.quote(str(self.path))} RUNZSH=no bash"
        )

    def remove(self) -> None:
        """Delete the install directory."""
        if self.path.exists():
            shutil.rmtree(self.path)


class GitPlugin(Resource):
    """A Zsh plugin cloned into the Oh My Zsh custom plugin directory."""

    kind = "plugin"

    def __init__(self, name: str, runner: CommandRunner, url: str, plugin_dir: Path) -> None:
        """Initialize plugin resource."""
        super().__init__(name, runner)
        self.url = url
        self.path = Path(plugin_dir) / name

    def is_present(self) -> bool:
        """Check for the clone directory."""
        return self.path.is_dir()

    def install(self) -> None:
        """Clone the plugin repository."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.runner.run("git", "clone", self.url, str(self.path), capture=False)

    def remove(self) -> None:
        """Delete the clone directory."""
        if self.path.exists():
            shutil.rmtree(self.path)


class ManagedFile(Resource):
    """A static configuration file written only when it does not exist.

    Teardown does not delete managed files; the backup manager restores the
    original copies instead.
    """

    kind = "file"
    removable = False

    def __init__(self, runner: CommandRunner, path: Path, content: str) -> None:
        """Initialize managed file."""
        super().__init__(str(path), runner)
        self.path = Path(path)
        self.content = content

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return self.path.name

    def is_present(self) -> bool:
        """Check for the file."""
        return self.path.is_file()

    def install(self) -> None:
        """Write the static content."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.content)


class Download(Resource):
    """A file fetched over HTTP."""

    kind = "download"

    def __init__(self, runner: CommandRunner, path: Path, url: str) -> None:
        """Initialize download resource."""
        super().__init__(str(path), runner)
        self.path = Path(path)
        self.url = url

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return self.path.name

    def is_present(self) -> bool:
        """Check for the downloaded file."""
        return self.path.is_file()

    def install(self) -> None:
        """Download the file."""
        self.runner.download(self.url, self.path)

    def remove(self) -> None:
        """Delete the file and its directory once empty."""
        if self.path.exists():
            self.path.unlink()
        parent = self.path.parent
        if parent.is_dir() and not any(parent.iterdir()):
            parent.rmdir()


class BrewTool(Resource):
    """A command line tool installed with Homebrew and checked on PATH.

    Teardown uninstalls the formula, deletes the tool's home directory and
    drops lines mentioning the tool from the shell rc files.
    """

    kind = "tool"

    def __init__(
        self,
        name: str,
        runner: CommandRunner,
        home: Optional[Path] = None,
        rc_files: Sequence[Path] = (),
    ) -> None:
        """Initialize tool resource."""
        super().__init__(name, runner)
        self.home = Path(home) if home else None
        self.rc_files: List[Path] = [Path(p) for p in rc_files]

    def is_present(self) -> bool:
        """Check for the command on PATH."""
        return self.runner.command_exists(self.name)

    def install(self) -> None:
        """Install the formula and configure it."""
        self.runner.run("brew", "install", self.name, capture=False)
        self.configure()

    def configure(self) -> None:
        """Post-install configuration."""

    def remove(self) -> None:
        """Uninstall the formula and clean up after it."""
        if self.runner.command_exists("brew"):
            self.runner.run("brew", "uninstall", self.name, check=False)
        if self.home is not None and self.home.exists():
            shutil.rmtree(self.home)
        for rc_file in self.rc_files:
            scrub_lines(rc_file, self.name)


class Pyenv(BrewTool):
    """pyenv, with its bin and shims directories put on PATH after install."""

    def __init__(
        self, runner: CommandRunner, root: Path, rc_files: Sequence[Path] = ()
    ) -> None:
        """Initialize pyenv resource."""
        super().__init__("pyenv", runner, home=root, rc_files=rc_files)
        self.root = Path(root)

    def configure(self) -> None:
        """Equivalent of ``pyenv init --path`` for the rest of this run."""
        self.runner.prepend_path(self.root / "bin")
        self.runner.prepend_path(self.root / "shims")


class Pipx(BrewTool):
    """pipx, with ``pipx ensurepath`` run after install."""

    def __init__(
        self, runner: CommandRunner, home: Path, rc_files: Sequence[Path] = ()
    ) -> None:
        """Initialize pipx resource."""
        super().__init__("pipx", runner, home=home, rc_files=rc_files)

    def configure(self) -> None:
        """Add the pipx bin directory to the user's PATH."""
        self.runner.run("pipx", "ensurepath", capture=False)


class PythonVersion(Resource):
    """A Python interpreter built by pyenv."""

    kind = "python"

    @property
    def label(self) -> str:
        """Human readable name used in log lines."""
        return f"Python {self.name}"

    def is_present(self) -> bool:
        """Check ``pyenv versions --bare`` for the version."""
        try:
            versions = self.runner.run("pyenv", "versions", "--bare")
        except CommandError:
            return False
        return self.name in [line.strip() for line in versions.splitlines()]

    def install(self) -> None:
        """Build the version."""
        self.runner.run("pyenv", "install", self.name, capture=False)

    def remove(self) -> None:
        """Uninstall the version if pyenv is available."""
        if not self.runner.command_exists("pyenv"):
            return
        self.runner.run("pyenv", "uninstall", "-f", self.name, check=False)


class Poetry(Resource):
    """Poetry installed through pipx.

    pipx keeps a single ``poetry`` venv, so Poetry is installed once against
    the first configured Python version whose interpreter exists.
    """

    kind = "tool"

    def __init__(self, runner: CommandRunner, pyenv_root: Path, python_versions: Sequence[str]) -> None:
        """Initialize Poetry resource."""
        super().__init__("poetry", runner)
        self.pyenv_root = Path(pyenv_root)
        self.python_versions = list(python_versions)

    def interpreter(self, version: str) -> Path:
        """Path of the pyenv-built interpreter for a version."""
        return self.pyenv_root / "versions" / version / "bin" / "python"

    def is_present(self) -> bool:
        """Check ``pipx list --short`` for poetry."""
        try:
            installed = self.runner.run("pipx", "list", "--short")
        except CommandError:
            return False
        return any(line.split()[0] == "poetry" for line in installed.splitlines() if line.strip())

    def install(self) -> None:
        """Install poetry with the first available interpreter."""
        for version in self.python_versions:
            python = self.interpreter(version)
            if python.is_file():
                logger.info("Installing Poetry using pipx for Python %s", version)
                self.runner.run("pipx", "install", "poetry", "--python", str(python), capture=False)
                return
            logger.warning("Python %s not found, skipping Poetry installation for it", version)
        logger.warning("No configured Python version is installed, Poetry was not installed")

    def remove(self) -> None:
        """Uninstall poetry if pipx is available."""
        if not self.runner.command_exists("pipx"):
            return
        self.runner.run("pipx", "uninstall", "poetry", check=False)
