"""Resource lists for the supported environments."""

from __future__ import annotations

from typing import Callable, Dict, List

from .backup import BackupManager
from .config import DOTFILE_KEYS, Config
from .installer import Installer
from .resources import (
    BrewPackage,
    Download,
    GitPlugin,
    Homebrew,
    ManagedFile,
    OhMyZsh,
    Pipx,
    Poetry,
    Pyenv,
    PythonVersion,
    Resource,
    Step,
)
from .runner import CommandRunner
from .templates import DOTFILE_TEMPLATES


def _brew_update(runner: CommandRunner) -> None:
    runner.run("brew", "update", capture=False)
    runner.run("brew", "upgrade", capture=False)


def _list_software_updates(runner: CommandRunner) -> None:
    runner.run("softwareupdate", "-l", capture=False)


def shell_profile(config: Config, runner: CommandRunner, dry_run: bool = False) -> Installer:
    """Homebrew, Zsh, Oh My Zsh, plugins, dotfiles and the Terminal profile.

    Order matters: Homebrew before packages, Oh My Zsh before its plugins.
    """
    resources: List[Resource] = [
        Homebrew(runner, config.get("homebrew_install_url"), config.homebrew_prefix),
        Step("brew update", runner, _brew_update),
    ]
    resources.extend(BrewPackage(package, runner) for package in config.packages)
    resources.append(
        Step(
            "softwareupdate",
            runner,
            _list_software_updates,
            tolerate=True,
            fallback_message="No updates available.",
        )
    )
    resources.append(OhMyZsh(runner, config.get("oh_my_zsh_install_url"), config.oh_my_zsh_dir))
    resources.extend(
        GitPlugin(name, runner, url, config.plugin_dir) for name, url in config.plugins.items()
    )
    resources.extend(
        ManagedFile(runner, config.dotfiles[key], DOTFILE_TEMPLATES[key]) for key in DOTFILE_KEYS
    )
    resources.append(
        Download(runner, config.terminal_profile["path"], config.terminal_profile["url"])
    )

    return Installer(
        "shell",
        resources,
        backup=BackupManager(config.backup_dir, dry_run=dry_run),
        managed_files=[config.dotfiles[key] for key in DOTFILE_KEYS],
        dry_run=dry_run,
    )


def python_profile(config: Config, runner: CommandRunner, dry_run: bool = False) -> Installer:
    """pyenv, the configured Python versions, pipx and Poetry."""
    rc_files = config.shell_rc_files
    resources: List[Resource] = [Pyenv(runner, config.pyenv_root, rc_files=rc_files)]
    resources.extend(PythonVersion(version, runner) for version in config.python_versions)
    resources.append(Pipx(runner, config.pipx_home, rc_files=rc_files))
    resources.append(Poetry(runner, config.pyenv_root, config.python_versions))
    return Installer("python", resources, dry_run=dry_run)


PROFILES: Dict[str, Callable[[Config, CommandRunner, bool], Installer]] = {
    "shell": shell_profile,
    "python": python_profile,
}
