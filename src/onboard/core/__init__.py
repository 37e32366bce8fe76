"""Core functionality for mac-onboard."""

from .backup import BackupManager
from .config import Config
from .installer import Installer, TestReport
from .runner import CommandRunner

__all__ = ["BackupManager", "CommandRunner", "Config", "Installer", "TestReport"]
