"""
Loaderkit CLI - Module loader and transpiler provisioning.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import httpx
import typer
from rich.console import Console
from rich.panel import Panel

from .config import ConfigStore
from .core import LoaderCore
from .endpoints import default_registry
from .models import LoaderVersions, ProvisionOutcome
from .settings import get_settings

# Setup
app = typer.Typer(
    name="loaderkit",
    help="Versioned, cached module loader provisioning",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


def _config_file(config: Optional[Path]) -> Path:
    """Resolve the project configuration file.

    Args:
        config: Explicit path from --config, if any

    Returns:
        The given path, or the configured file name in the current directory
    """
    if config is not None:
        return config
    return Path.cwd() / get_settings().config_file


def _create_command_panel(title: str, color: str, config_file: Path) -> Panel:
    """Create a Rich Panel for command display.

    Args:
        title: Command title (e.g., "Loaderkit Check")
        color: Border color (e.g., "blue", "cyan", "red")
        config_file: Project configuration file in use

    Returns:
        Formatted Rich Panel
    """
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Config: {config_file}",
        border_style=color,
    )


async def _invoke(config_file: Path, core_method: str, **kwargs):
    """Load the project config, build a LoaderCore and call one of its methods."""
    settings = get_settings()
    store = ConfigStore(config_file)
    config = await store.load()

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        core = LoaderCore(
            config,
            store,
            default_registry(settings, client),
            cache_root=settings.cache_root,
        )
        return await getattr(core, core_method)(**kwargs)


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Report a failed command and exit.

    Args:
        e: Exception that occurred
        command_type: Type of command (for error message context)

    Raises:
        SystemExit: Always exits with code 1
    """
    logger.exception(f"{command_type} failed")
    console.print(f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}")
    raise typer.Exit(code=1)


def _run_command(
    command_name: str,
    panel_title: str,
    panel_color: str,
    core_method: str,
    success_handler,
    config: Optional[Path] = None,
    **kwargs,
):
    """Execute a Loaderkit command with common setup and error handling.

    Args:
        command_name: Command name for error messages (e.g., "check")
        panel_title: Title for the command panel
        panel_color: Border color for the panel
        core_method: Name of the LoaderCore method to call
        success_handler: Callable that takes the result and prints success output
        config: Optional project configuration file override
        **kwargs: Additional keyword arguments to pass to the core method
    """
    config_file = _config_file(config)
    console.print(_create_command_panel(panel_title, panel_color, config_file))

    try:
        result = asyncio.run(_invoke(config_file, core_method, **kwargs))
    except Exception as e:
        _handle_command_error(e, command_name)
    else:
        success_handler(result)


CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Project configuration file (default: ./loaderkit.json)"
)
TRANSPILER_OPTION = typer.Option(
    None, "--transpiler", "-t", help="Transpiler engine (traceur or babel)"
)


def _print_outcome(result: ProvisionOutcome):
    if result == ProvisionOutcome.FULL:
        console.print("\n[bold green]✓ Loader files downloaded successfully[/bold green]")
    else:
        console.print("\n[bold green]✓ Loader files are up to date[/bold green]")


@app.command()
def check(
    transpiler: Optional[str] = TRANSPILER_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """Download the loader files if they are missing or outdated."""
    _run_command(
        command_name="check",
        panel_title="Loaderkit Check",
        panel_color="cyan",
        core_method="check_and_provision",
        success_handler=_print_outcome,
        config=config,
        transpiler_name=transpiler,
    )


@app.command(name="dl-loader")
def dl_loader(
    transpiler: Optional[str] = TRANSPILER_OPTION,
    unminified: bool = typer.Option(
        False, "--unminified", help="Install unminified sources without source maps"
    ),
    edge: bool = typer.Option(
        False, "--edge", help="Use the latest unstable loader sources"
    ),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Download the loader files, replacing any installed ones."""

    def _handle_success(result: LoaderVersions):
        console.print("\n[bold green]✓ Loader files downloaded successfully[/bold green]")
        console.print(f"[dim]es6-module-loader@{result.esml}[/dim]")
        console.print(f"[dim]systemjs@{result.system}[/dim]")

    _run_command(
        command_name="download",
        panel_title="Loaderkit Download",
        panel_color="blue",
        core_method="provision_loader",
        success_handler=_handle_success,
        config=config,
        transpiler_name=transpiler,
        unminified=unminified,
        edge=edge,
    )


@app.command(name="dl-transpiler")
def dl_transpiler(
    name: Optional[str] = typer.Argument(None, help="Transpiler engine (traceur or babel)"),
    update: bool = typer.Option(
        False, "--update", help="Re-check the transpiler packages against the registry"
    ),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Install the transpiler and its runtime."""

    def _handle_success(result: str):
        console.print(f"\n[bold green]✓ Transpiler {result} is installed[/bold green]")

    _run_command(
        command_name="transpiler",
        panel_title="Loaderkit Transpiler",
        panel_color="blue",
        core_method="provision_transpiler",
        success_handler=_handle_success,
        config=config,
        transpiler_name=name,
        update=update,
    )


@app.command(name="set-mode")
def set_mode(
    modes: List[str] = typer.Argument(..., help="local and/or remote"),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Point the loader at local library sources or at the CDN."""

    def _handle_success(messages: List[str]):
        for message in messages:
            console.print(f"[green]✓[/green] {message}")

    _run_command(
        command_name="set-mode",
        panel_title="Loaderkit Mode",
        panel_color="cyan",
        core_method="set_mode",
        success_handler=_handle_success,
        config=config,
        modes=modes,
    )


@app.command()
def init(
    path: Optional[Path] = typer.Argument(None, help="Project directory (default: current)"),
):
    """Create or verify the project configuration and install the loader."""
    config = None
    if path is not None:
        config = path.resolve() / get_settings().config_file

    _run_command(
        command_name="init",
        panel_title="Loaderkit Init",
        panel_color="blue",
        core_method="init",
        success_handler=_print_outcome,
        config=config,
    )


@app.command()
def reset(config: Optional[Path] = CONFIG_OPTION):
    """Remove the loader manifest and the download cache."""

    def _handle_success(_result):
        console.print("\n[bold green]✓ Loader cache reset[/bold green]")

    _run_command(
        command_name="reset",
        panel_title="Loaderkit Reset",
        panel_color="red",
        core_method="reset",
        success_handler=_handle_success,
        config=config,
    )


@app.command()
def version():
    """Show Loaderkit version."""
    from . import __version__

    console.print(f"Loaderkit version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
