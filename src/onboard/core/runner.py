"""External command execution for mac-onboard."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import urllib.error
import urllib.request
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from .errors import CommandError, DownloadError

logger = logging.getLogger(__name__)

USER_AGENT = "mac-onboard/1.0"


class CommandRunner:
    """Runs package-manager and version-manager commands.

    Every call blocks until the process exits. The runner owns a copy of the
    process environment so that ``PATH`` changes made after installing a tool
    (Homebrew, pyenv) are visible to later commands of the same run and are
    never written back to the user's shell.

    Attributes:
        env (Dict[str, str]): Environment passed to every child process.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        """Initialize runner."""
        self.env: Dict[str, str] = dict(os.environ if env is None else env)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"CommandRunner(PATH={self.env.get('PATH', '')!r})"

    def prepend_path(self, directory: Union[str, Path]) -> None:
        """Prepend a directory to PATH for subsequent commands."""
        directory = str(directory)
        parts = [p for p in self.env.get("PATH", "").split(os.pathsep) if p]
        if parts and parts[0] == directory:
            return
        self.env["PATH"] = os.pathsep.join([directory, *parts])
        logger.debug("PATH now starts with %s", directory)

    def command_exists(self, name: str) -> bool:
        """Check if a command is on PATH, like ``command -v``."""
        return shutil.which(name, path=self.env.get("PATH")) is not None

    def run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        input: Optional[str] = None,
    ) -> str:
        """Run a command and return its stripped stdout.

        Args:
            *args: Command and arguments.
            check: Raise ``CommandError`` on a non-zero exit status.
            capture: Capture output. When False the child inherits the
                terminal so installers can prompt (e.g. for sudo).
            input: Optional text fed to stdin.

        Returns:
            str: Captured stdout, or an empty string when not capturing.

        Raises:
            CommandError: If the command fails and ``check`` is True, or if
                the executable cannot be found.
        """
        command = shlex.join(args)
        logger.debug("Running: %s", command)
        try:
            result = subprocess.run(
                list(args),
                capture_output=capture,
                text=True,
                env=self.env,
                input=input,
            )
        except FileNotFoundError as e:
            raise CommandError(f"Command not found: {args[0]}", command, 127) from e

        stdout = (result.stdout or "").strip() if capture else ""
        if result.returncode != 0:
            output = ((result.stderr or "") if capture else "").strip() or stdout
            if check:
                raise CommandError(
                    f"Command failed with exit code {result.returncode}: {command}",
                    command,
                    result.returncode,
                    output,
                )
            logger.debug("Ignoring exit code %d from %s", result.returncode, command)
        return stdout

    def run_shell(self, script: str, check: bool = True, capture: bool = False) -> str:
        """Run a script through bash."""
        return self.run("/bin/bash", "-c", script, check=check, capture=capture)

    def succeeds(self, *args: str) -> bool:
        """Return True if the command exits with status 0."""
        try:
            self.run(*args, check=True)
            return True
        except CommandError:
            return False

    def download(self, url: str, dest: Path, timeout: int = 60) -> None:
        """Download a URL to a file, creating parent directories.

        Raises:
            DownloadError: If the request fails or the file cannot be written.
        """
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Downloading %s to %s", url, dest)

        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp, open(dest, "wb") as f:
                shutil.copyfileobj(resp, f)
        except (urllib.error.URLError, OSError) as e:
            if dest.exists():
                dest.unlink()
            raise DownloadError(f"Failed to download {url}: {e}", url) from e
