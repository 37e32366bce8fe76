"""Command line interface for mac-onboard."""

from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape

from .core.config import CONFIG_ENV_VAR, Config, default_config_path
from .core.errors import CommandError, ConfigError, OnboardError
from .core.logging import setup_logging
from .core.profiles import PROFILES
from .core.runner import CommandRunner
from .core.sysinfo import collect, render

console = Console()

ACTIONS = ("setup", "teardown", "test")


@click.group()
@click.option("--debug", is_flag=True, help="Show debug output")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar=CONFIG_ENV_VAR,
    help="YAML file overriding the default resource lists and paths",
)
@click.option("--log-file", help="Also write a debug log to this file")
@click.option("--dry-run", is_flag=True, help="Show what would change without changing anything")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    config_file: Optional[Path],
    log_file: Optional[str],
    dry_run: bool,
) -> None:
    """macOS environment bootstrap.

    Installs and removes developer tooling. Every environment supports the
    same three actions:

      setup      Install whatever is missing (safe to run repeatedly)
      teardown   Restore backed-up dotfiles and remove installed tooling
      test       Check that everything is installed; exits 1 if not

    Environments:

      shell     Homebrew, Zsh, Oh My Zsh, plugins and shell dotfiles
      python    pyenv, Python versions, pipx and Poetry

    Examples:

      mac-onboard shell setup
      mac-onboard --dry-run python teardown
      mac-onboard info
    """
    try:
        config = Config(config_file or default_config_path())
    except ConfigError as e:
        console.print(f"[red]Error: Invalid configuration: {e}")
        raise click.Abort()

    setup_logging(debug=debug, log_file=log_file or config.get("log_file"))
    ctx.obj = {"config": config, "runner": CommandRunner(), "dry_run": dry_run}


def _run_profile(ctx: click.Context, profile: str, action: Optional[str]) -> None:
    """Dispatch an action to a profile's installer."""
    if action not in ACTIONS:
        console.print(f"Usage: {ctx.command_path} [{'|'.join(ACTIONS)}]", markup=False)
        ctx.exit(1)

    config: Config = ctx.obj["config"]
    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Config error: {error}")
        raise click.Abort()

    installer = PROFILES[profile](config, ctx.obj["runner"], ctx.obj["dry_run"])
    try:
        if action == "setup":
            installer.setup()
        elif action == "teardown":
            installer.teardown()
        else:
            report = installer.test()
            if not report.ok:
                ctx.exit(1)
    except CommandError as e:
        console.print(f"[red]Error: {escape(str(e))}")
        if e.output:
            console.print(e.output, markup=False)
        raise click.Abort()
    except (OnboardError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}")
        raise click.Abort()


@cli.command()
@click.argument("action", required=False)
@click.pass_context
def shell(ctx: click.Context, action: Optional[str]) -> None:
    """Set up, tear down or test the Zsh environment.

    ACTION is one of setup, teardown or test.

    Setup backs up ~/.zprofile, ~/.zshrc and ~/.alias.sh, installs Homebrew
    and the configured formulae, Oh My Zsh and its plugins, writes any
    missing dotfiles and downloads the Terminal profile. Teardown restores
    the backed-up dotfiles and removes what setup installed.
    """
    _run_profile(ctx, "shell", action)


@cli.command()
@click.argument("action", required=False)
@click.pass_context
def python(ctx: click.Context, action: Optional[str]) -> None:
    """Set up, tear down or test the Python toolchain.

    ACTION is one of setup, teardown or test.

    Setup installs pyenv, builds the configured Python versions, installs
    pipx and then Poetry through pipx. Teardown removes them again and
    drops pyenv and pipx lines from the shell rc files.
    """
    _run_profile(ctx, "python", action)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the Mac model, memory, CPU, GPU and disk usage."""
    render(collect(ctx.obj["runner"]), console)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration and any validation errors."""
    config: Config = ctx.obj["config"]
    console.print(yaml.safe_dump(config.as_dict(), sort_keys=False), markup=False, soft_wrap=True)

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Config error: {error}")
        ctx.exit(1)
    console.print("[green]Configuration is valid.")


def main() -> None:
    """Entry point for the mac-onboard CLI."""
    cli()


if __name__ == "__main__":
    main()
