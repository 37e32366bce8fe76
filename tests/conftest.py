"""Test configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest

from onboard.core.config import CONFIG_ENV_VAR, Config
from onboard.core.errors import CommandError
from onboard.core.runner import CommandRunner


class FakeRunner(CommandRunner):
    """Simulates brew, git, pyenv and pipx without running anything.

    Tools on PATH, installed formulae, Python versions and pipx apps are kept
    as sets so tests can arrange any starting state and inspect the result.
    """

    def __init__(self, home: Path) -> None:
        super().__init__(env={"PATH": "/usr/bin:/bin", "HOME": str(home)})
        self.home = home
        self.commands: List[Tuple[str, ...]] = []
        self.tools: Set[str] = set()
        self.formulae: Set[str] = set()
        self.pythons: Set[str] = set()
        self.pipx_apps: Set[str] = set()
        self.failures: Dict[Tuple[str, ...], int] = {}
        self.sysctl: Dict[str, str] = {}
        self.system_profiler = ""
        self.downloads: List[Tuple[str, Path]] = []

    def installs(self) -> List[Tuple[str, ...]]:
        """Commands that changed state."""
        return [
            c
            for c in self.commands
            if c[:2] in {("brew", "install"), ("pyenv", "install"), ("pipx", "install")}
            or c[:2] == ("git", "clone")
            or c[0] == "/bin/bash"
        ]

    def command_exists(self, name: str) -> bool:
        return name in self.tools

    def run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        input: Optional[str] = None,
    ) -> str:
        self.commands.append(args)
        for prefix, code in self.failures.items():
            if args[: len(prefix)] == prefix:
                return self._fail(args, code, check)

        handler = getattr(self, f"_{args[0].split('/')[-1]}", None)
        if handler is None:
            return self._fail(args, 127, check)
        result = handler(*args[1:])
        if result is None:
            return self._fail(args, 1, check)
        return result

    def download(self, url: str, dest: Path, timeout: int = 60) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(f"downloaded from {url}")
        self.downloads.append((url, dest))

    def _fail(self, args: Tuple[str, ...], code: int, check: bool) -> str:
        if check:
            raise CommandError(f"Command failed: {' '.join(args)}", " ".join(args), code)
        return ""

    def _bash(self, flag: str, script: str) -> Optional[str]:
        if "Homebrew" in script:
            self.tools.add("brew")
        elif "ohmyzsh" in script:
            (self.home / ".oh-my-zsh").mkdir(parents=True, exist_ok=True)
        return ""

    def _brew(self, *args: str) -> Optional[str]:
        if "brew" not in self.tools:
            return None
        if args == ("list", "--formula"):
            return "\n".join(sorted(self.formulae))
        if args[0] == "install":
            self.formulae.add(args[1])
            if args[1] in ("pyenv", "pipx"):
                self.tools.add(args[1])
            return ""
        if args[0] == "uninstall":
            if args[1] not in self.formulae:
                return None
            self.formulae.discard(args[1])
            self.tools.discard(args[1])
            return ""
        if args[0] in ("update", "upgrade"):
            return ""
        return None

    def _softwareupdate(self, *args: str) -> Optional[str]:
        return "No new software available."

    def _git(self, *args: str) -> Optional[str]:
        if args[0] == "clone":
            Path(args[2]).mkdir(parents=True)
            return ""
        return None

    def _pyenv(self, *args: str) -> Optional[str]:
        if "pyenv" not in self.tools:
            return None
        if args == ("versions", "--bare"):
            return "\n".join(sorted(self.pythons))
        if args[0] == "install":
            self.pythons.add(args[1])
            python = self.home / ".pyenv" / "versions" / args[1] / "bin" / "python"
            python.parent.mkdir(parents=True, exist_ok=True)
            python.write_text("")
            return ""
        if args[:2] == ("uninstall", "-f"):
            self.pythons.discard(args[2])
            return ""
        return None

    def _pipx(self, *args: str) -> Optional[str]:
        if "pipx" not in self.tools:
            return None
        if args == ("ensurepath",):
            return ""
        if args == ("list", "--short"):
            return "\n".join(f"{app} 1.8.0" for app in sorted(self.pipx_apps))
        if args[0] == "install":
            self.pipx_apps.add(args[1])
            return ""
        if args[0] == "uninstall":
            if args[1] not in self.pipx_apps:
                return None
            self.pipx_apps.discard(args[1])
            return ""
        return None

    def _sysctl(self, flag: str, key: str) -> Optional[str]:
        return self.sysctl.get(key)

    def _system_profiler(self, *args: str) -> Optional[str]:
        return self.system_profiler or None


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return home


@pytest.fixture
def config(home: Path) -> Config:
    """Default configuration rooted in the temporary HOME."""
    return Config()


@pytest.fixture
def fake_runner(home: Path) -> FakeRunner:
    """A runner that simulates the external tools."""
    return FakeRunner(home)


@pytest.fixture
def dotfiles(home: Path) -> Dict[str, str]:
    """Pre-existing user dotfiles."""
    originals = {
        ".zprofile": "export EDITOR=vim\n",
        ".zshrc": "# my zshrc\neval \"$(pyenv init -)\"\n",
        ".alias.sh": "alias ll='ls -l'\n",
    }
    for name, content in originals.items():
        (home / name).write_text(content)
    return originals
