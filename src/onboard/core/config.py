"""Configuration management for mac-onboard."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MAC_ONBOARD_CONFIG"
DEFAULT_CONFIG_FILE = "~/.config/mac-onboard/config.yaml"

# Names of the shell dotfiles that setup writes and teardown restores
DOTFILE_KEYS = ("zprofile", "zshrc", "aliases")

DEFAULT_CONFIG: Dict[str, Any] = {
    "backup_dir": "~/.backup",
    "homebrew_prefix": "/opt/homebrew",
    "homebrew_install_url": "https://raw.githubusercontent.com/Homebrew/install/master/install.sh",
    "oh_my_zsh_dir": "~/.oh-my-zsh",
    "oh_my_zsh_install_url": "https://raw.github.com/ohmyzsh/ohmyzsh/master/tools/install.sh",
    "plugin_dir": "~/.oh-my-zsh/custom/plugins",
    "packages": ["zsh", "zsh-autosuggestions", "zsh-syntax-highlighting", "wget", "gh", "gum"],
    "plugins": {
        "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
        "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
    },
    "dotfiles": {
        "zprofile": "~/.zprofile",
        "zshrc": "~/.zshrc",
        "aliases": "~/.alias.sh",
    },
    "terminal_profile": {
        "path": "~/workspace/terminal-profiles/SolarizedDark.terminal",
        "url": (
            "https://raw.githubusercontent.com/rajasoun/mac-onboard/"
            "9e22d9e5f9dbdf002f98fba7777621b5625ac0e4/profiles/SolarizedDark.terminal"
        ),
    },
    "python_versions": ["3.12.2", "3.13.2"],
    "pyenv_root": "~/.pyenv",
    "pipx_home": "~/.local/pipx",
    "shell_rc_files": ["~/.bashrc", "~/.bash_profile", "~/.zshrc"],
    "log_file": None,
}


def default_config_path() -> Path:
    """Return the config file location, honouring MAC_ONBOARD_CONFIG."""
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)).expanduser()


def _expand(path: Any, key: str = "path") -> Path:
    if not isinstance(path, str) or not path:
        raise ConfigError(f"{key} must be a non-empty string")
    return Path(path).expanduser()


def _require_list(config: Dict[str, Any], key: str) -> List[Any]:
    value = config[key]
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list")
    return value


def _require_dict(config: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = config[key]
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a dictionary")
    return value


class Config:
    """Configuration class for mac-onboard.

    Values start from ``DEFAULT_CONFIG`` and are overridden key by key by a
    YAML file. Path values are stored with ``~`` already expanded.
    """

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """Initialize configuration."""
        self.config: Dict[str, Any] = {}
        self.backup_dir: Path = Path()
        self.homebrew_prefix: Path = Path()
        self.oh_my_zsh_dir: Path = Path()
        self.plugin_dir: Path = Path()
        self.pyenv_root: Path = Path()
        self.pipx_home: Path = Path()
        self.packages: List[str] = []
        self.plugins: Dict[str, str] = {}
        self.dotfiles: Dict[str, Path] = {}
        self.terminal_profile: Dict[str, Any] = {}
        self.python_versions: List[str] = []
        self.shell_rc_files: List[Path] = []
        self.load_config(config_file)

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file.

        A missing or unreadable file is logged and the defaults are kept.
        Malformed values raise ``ConfigError``.
        """
        self._merge_config(DEFAULT_CONFIG)

        if config_file is None:
            return

        config_path = Path(config_file).expanduser()
        if not config_path.exists():
            logger.debug("Config file %s not found, using defaults", config_path)
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.error("Error loading config file %s: %s", config_path, e)
            return

        if user_config:
            self._merge_config(user_config)
        logger.debug("Loaded config file %s", config_path)

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a dictionary")

        self.config.update(config)

        for key in (
            "backup_dir",
            "homebrew_prefix",
            "oh_my_zsh_dir",
            "plugin_dir",
            "pyenv_root",
            "pipx_home",
        ):
            if key in config:
                setattr(self, key, _expand(config[key], key))

        if "packages" in config:
            self.packages = [str(p) for p in _require_list(config, "packages")]

        if "python_versions" in config:
            self.python_versions = [str(v) for v in _require_list(config, "python_versions")]

        if "shell_rc_files" in config:
            self.shell_rc_files = [
                _expand(p, "shell_rc_files entry") for p in _require_list(config, "shell_rc_files")
            ]

        if "plugins" in config:
            plugins = _require_dict(config, "plugins")
            for name, url in plugins.items():
                if not isinstance(url, str) or not url:
                    raise ConfigError(f"Plugin {name} must have a git URL")
            self.plugins = dict(plugins)

        if "dotfiles" in config:
            dotfiles = _require_dict(config, "dotfiles")
            for key, path in dotfiles.items():
                if key not in DOTFILE_KEYS:
                    raise ConfigError(f"Unknown dotfile {key}, expected one of {DOTFILE_KEYS}")
                self.dotfiles[key] = _expand(path, f"dotfile {key}")

        if "terminal_profile" in config:
            profile = _require_dict(config, "terminal_profile")
            merged = dict(self.terminal_profile)
            merged.update(profile)
            if "path" not in merged or "url" not in merged:
                raise ConfigError("terminal_profile must have a path and a url")
            if not isinstance(merged["url"], str):
                raise ConfigError("terminal_profile url must be a string")
            self.terminal_profile = {
                "path": _expand(merged["path"], "terminal_profile path"),
                "url": merged["url"],
            }

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        if not self.packages:
            errors.append("packages must not be empty")
        for package in self.packages:
            if not package or " " in package:
                errors.append(f"package name {package!r} is invalid")

        for name, url in self.plugins.items():
            if not url.startswith(("https://", "git@", "file://")):
                errors.append(f"plugin {name} URL {url} is not a git URL")

        for version in self.python_versions:
            if not version or not version[0].isdigit():
                errors.append(f"python version {version!r} is invalid")

        for key in DOTFILE_KEYS:
            if key not in self.dotfiles:
                errors.append(f"dotfile {key} is not configured")

        for key in ("homebrew_install_url", "oh_my_zsh_install_url"):
            if not str(self.config.get(key, "")).startswith("https://"):
                errors.append(f"{key} must be an https URL")

        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value.

        Args:
            key: The configuration key to get.
            default: The default value to return if the key is not found.

        Returns:
            The configuration value, or the default if not found.
        """
        value = self.config.get(key)
        return default if value is None else value

    def as_dict(self) -> Dict[str, Any]:
        """Return the effective configuration as plain data."""
        return {
            "backup_dir": str(self.backup_dir),
            "homebrew_prefix": str(self.homebrew_prefix),
            "homebrew_install_url": self.get("homebrew_install_url"),
            "oh_my_zsh_dir": str(self.oh_my_zsh_dir),
            "oh_my_zsh_install_url": self.get("oh_my_zsh_install_url"),
            "plugin_dir": str(self.plugin_dir),
            "packages": list(self.packages),
            "plugins": dict(self.plugins),
            "dotfiles": {key: str(path) for key, path in self.dotfiles.items()},
            "terminal_profile": {
                "path": str(self.terminal_profile["path"]),
                "url": self.terminal_profile["url"],
            },
            "python_versions": list(self.python_versions),
            "pyenv_root": str(self.pyenv_root),
            "pipx_home": str(self.pipx_home),
            "shell_rc_files": [str(p) for p in self.shell_rc_files],
            "log_file": self.get("log_file"),
        }
