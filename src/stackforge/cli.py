# src/stackforge/cli.py
"""stackforge Command Line Interface.

Entry point for the stackforge CLI tool.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from stackforge import __version__
from stackforge.contracts.errors import SynthesisError
from stackforge.core.config import SynthSettings, load_settings, resolve_config
from stackforge.core.logging import configure_logging, get_logger

if TYPE_CHECKING:
    from stackforge.constructs.app import App

__all__ = ["app"]

app = typer.Typer(
    name="stackforge",
    help="stackforge: synthesize deployment templates from construct graphs.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"stackforge version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """stackforge: synthesize deployment templates from construct graphs."""


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    console.print(Panel(content, title=f"[red bold]{title}[/]", border_style="red", expand=False))


def _load_settings_or_exit(settings: Path | None) -> SynthSettings:
    settings_path = settings.expanduser() if settings is not None else None
    try:
        return load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        _format_error(
            title="YAML Syntax Error",
            message=f"Failed to parse {settings_path.name if settings_path else 'settings'}",
            details=[str(e.problem)] if hasattr(e, "problem") else None,
            hint="Check for unclosed brackets, incorrect indentation, or invalid characters.",
        )
        raise typer.Exit(1) from None
    except FileNotFoundError:
        _format_error(
            title="File Not Found",
            message=f"Settings file does not exist: {settings}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = [f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()]
        _format_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name if settings_path else 'environment'}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


def _invalid_app_exit(app_ref: str, error: SynthesisError) -> NoReturn:
    """Report an error raised while the app's construct graph was being built."""
    _format_error(
        title="Invalid App",
        message=f"Building '{app_ref}' failed: {error}",
        hint=f"Error type: {type(error).__name__}. Check construct ids and build tokens inside 'with app:'.",
    )
    raise typer.Exit(1) from None


def _load_app(app_ref: str, app_dir: Path) -> App:
    """Import ``module:attribute`` and return the App it names.

    The attribute may be an App or a zero-argument callable returning one.
    """
    from stackforge.constructs.app import App

    module_name, sep, attribute = app_ref.partition(":")
    if not sep or not module_name or not attribute:
        raise typer.BadParameter(f"Expected 'module:attribute', got '{app_ref}'", param_hint="APP_REF")

    app_dir_str = str(app_dir.expanduser().resolve())
    if app_dir_str not in sys.path:
        sys.path.insert(0, app_dir_str)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {e}", param_hint="APP_REF") from e
    except SynthesisError as e:
        _invalid_app_exit(app_ref, e)

    try:
        target = getattr(module, attribute)
    except AttributeError:
        raise typer.BadParameter(f"Module '{module_name}' has no attribute '{attribute}'", param_hint="APP_REF") from None

    if not isinstance(target, App) and callable(target):
        try:
            target = target()
        except SynthesisError as e:
            _invalid_app_exit(app_ref, e)
    if not isinstance(target, App):
        raise typer.BadParameter(f"'{app_ref}' is not an App (got {type(target).__name__})", param_hint="APP_REF")
    return target


@app.command()
def synth(
    app_ref: str = typer.Argument(..., help="App to synthesize, as 'module:attribute'."),
    settings: Path | None = typer.Option(None, "--settings", "-s", help="Path to settings YAML file."),
    output_dir: Path | None = typer.Option(None, "--output", "-o", help="Output directory (overrides settings)."),
    app_dir: Path = typer.Option(Path("."), "--app-dir", help="Directory added to the import path."),
    stdout: bool = typer.Option(False, "--stdout", help="Print templates instead of writing files."),
) -> None:
    """Synthesize every stack of an app into template files."""
    from stackforge.core.synth import synthesize_app, write_template

    config = _load_settings_or_exit(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)
    get_logger(__name__).info("synth_started", app=app_ref, settings=resolve_config(config))
    construct_app = _load_app(app_ref, app_dir)

    try:
        results = synthesize_app(construct_app, config)
    except SynthesisError as e:
        _format_error(title="Synthesis Failed", message=str(e), hint=f"Error type: {type(e).__name__}")
        raise typer.Exit(1) from None

    if stdout:
        for result in results:
            typer.echo(result.render(indent=config.indent), nl=False)
        return

    target_dir = (output_dir or config.output_dir).expanduser()
    for result in results:
        path = write_template(result, target_dir, indent=config.indent)
        typer.secho(f"✓ {result.stack_name}", fg=typer.colors.GREEN, nl=False)
        typer.echo(f"  {path}  sha256:{result.template_hash[:12]}")


@app.command()
def graph(
    app_ref: str = typer.Argument(..., help="App to inspect, as 'module:attribute'."),
    settings: Path | None = typer.Option(None, "--settings", "-s", help="Path to settings YAML file."),
    app_dir: Path = typer.Option(Path("."), "--app-dir", help="Directory added to the import path."),
) -> None:
    """Show each stack's resource dependencies and deploy order."""
    from stackforge.core.synth import synthesize_stack

    config = _load_settings_or_exit(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)
    construct_app = _load_app(app_ref, app_dir)

    for stack in construct_app.stacks:
        try:
            result = synthesize_stack(stack, config)
        except SynthesisError as e:
            _format_error(title=f"Synthesis Failed: {stack.stack_name}", message=str(e), hint=f"Error type: {type(e).__name__}")
            raise typer.Exit(1) from None

        typer.secho(result.stack_name, bold=True)
        for logical_id, dependencies in result.dependencies.items():
            if dependencies:
                typer.echo(f"  {logical_id} -> {', '.join(dependencies)}")
            else:
                typer.echo(f"  {logical_id}")
        typer.echo(f"  deploy order: {', '.join(result.deploy_order)}")


if __name__ == "__main__":
    app()
