"""CLI entry point for dcs-toolkit.

Invoked as::

    dcs [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m dcs.cli.main

Commands
--------
decorate    Apply a decorator command set to a models file
extract     Extract decorators into command sets and vocabularies
validate    Validate a decorator command set
version     Show version information

Models and command sets are read from JSON files, or from YAML files
when the extension is ``.yaml`` or ``.yml``.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from dcs.typesystem import ModelManager

console = Console()
err_console = Console(stderr=True)

_YAML_SUFFIXES = {".yaml", ".yml"}


def _read_document(path: str) -> dict[str, Any]:
    """Read a JSON or YAML document, exiting on error."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    try:
        if Path(path).suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot parse {path}: {exc}")
        sys.exit(1)
    if not isinstance(data, dict):
        err_console.print(f"[red]Error:[/red] {path} does not contain an object")
        sys.exit(1)
    return data


def _load_models(path: str) -> "ModelManager":
    """Load a models file into a ``ModelManager``, exiting on error."""
    from dcs.errors import DcsError
    from dcs.metamodel import AstSerializer
    from dcs.typesystem import ModelManager

    data = _read_document(path)
    try:
        return ModelManager.from_ast(AstSerializer().from_dict(data))
    except (DcsError, ValueError, KeyError) as exc:
        err_console.print(f"[red]Invalid models file[/red] {path}: {exc}")
        sys.exit(1)


def _fail(exc: Exception) -> None:
    err_console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="dcs-toolkit")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Decorator Command Sets: apply, validate and extract model decorators."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from dcs import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]dcs-toolkit[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("commands", type=click.Path(exists=False))
@click.option("--models", "models_path", default=None, help="Models file to check targets against")
@click.option(
    "--check-commands",
    is_flag=True,
    default=False,
    help="Also check that every command target exists (requires --models)",
)
def validate_command(commands: str, models_path: str | None, check_commands: bool) -> None:
    """Validate a decorator command set.

    COMMANDS is the path to the command set file.
    """
    import dcs
    from dcs.commands import CommandSetSerializer
    from dcs.errors import DcsError

    if check_commands and not models_path:
        err_console.print("[red]Error:[/red] --check-commands requires --models")
        sys.exit(1)

    payload = _read_document(commands)
    model_files = _load_models(models_path).get_model_files() if models_path else None

    try:
        manager = dcs.validate(payload, model_files)
        if check_commands:
            for command in CommandSetSerializer().from_dict(payload).commands:
                dcs.validate_command(manager, command)
    except DcsError as exc:
        _fail(exc)

    console.print(f"[green]OK[/green] {commands} — command set is valid")


# ---------------------------------------------------------------------------
# decorate command
# ---------------------------------------------------------------------------


@cli.command(name="decorate")
@click.argument("models", type=click.Path(exists=False))
@click.argument("commands", type=click.Path(exists=False))
@click.option("--validate", "validate_set", is_flag=True, default=False, help="Validate the command set first")
@click.option(
    "--validate-commands",
    is_flag=True,
    default=False,
    help="Check every command target against the models (implies --validate)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def decorate_command(
    models: str,
    commands: str,
    validate_set: bool,
    validate_commands: bool,
    output_format: str,
    output: str | None,
) -> None:
    """Apply a decorator command set to a models file.

    MODELS is the models file, COMMANDS the command set file.
    """
    import dcs
    from dcs.errors import DcsError
    from dcs.metamodel import AstSerializer

    manager = _load_models(models)
    payload = _read_document(commands)

    try:
        decorated = dcs.decorate_models(
            manager,
            payload,
            validate=validate_set or validate_commands,
            validate_commands=validate_commands,
        )
    except (DcsError, ValueError, KeyError) as exc:
        _fail(exc)

    serializer = AstSerializer()
    ast = decorated.get_ast()
    text = serializer.to_json(ast) if output_format == "json" else serializer.to_yaml(ast)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Decorated models written to[/green] {output}")
    else:
        console.print(Syntax(text, output_format, line_numbers=True))


# ---------------------------------------------------------------------------
# extract command
# ---------------------------------------------------------------------------


@cli.command(name="extract")
@click.argument("models", type=click.Path(exists=False))
@click.option("--locale", default="en", show_default=True, help="Vocabulary locale")
@click.option(
    "--remove-decorators",
    is_flag=True,
    default=False,
    help="Also write the models with their decorators removed",
)
@click.option("--output", "-o", default=None, help="Output directory (defaults to stdout)")
def extract_command(models: str, locale: str, remove_decorators: bool, output: str | None) -> None:
    """Extract decorators into command sets and vocabularies.

    MODELS is the models file to extract from.
    """
    import dcs
    from dcs.commands import CommandSetSerializer
    from dcs.metamodel import AstSerializer

    manager = _load_models(models)
    result = dcs.extract_decorators(
        manager, remove_decorators_from_model=remove_decorators, locale=locale
    )

    serializer = CommandSetSerializer()
    files: dict[str, tuple[str, str]] = {}
    for command_set in result.decorator_command_sets:
        name = f"{command_set.name}@{command_set.version}.dcs.json"
        files[name] = (serializer.to_json(command_set), "json")
    for namespace, vocabulary in zip(result.index.namespaces, result.vocabularies):
        files[f"{namespace}_{locale}.voc.yaml"] = (vocabulary, "yaml")
    if remove_decorators:
        files["models.json"] = (AstSerializer().to_json(result.model_manager.get_ast()), "json")

    if not files:
        console.print(f"[yellow]No decorators found[/yellow] in {models}")
        return

    if output:
        output_dir = Path(output)
        output_dir.mkdir(parents=True, exist_ok=True)
        for filename, (content, _) in files.items():
            dest = output_dir / filename
            dest.write_text(content, encoding="utf-8")
            console.print(f"[green]Written:[/green] {dest}")
    else:
        for filename, (content, lang) in files.items():
            console.print(f"[bold]{filename}[/bold]")
            console.print(Syntax(content, lang, line_numbers=True))

    console.print(
        f"\n[bold]Extracted[/bold] {len(result.decorator_command_sets)} command set(s) "
        f"and {len(result.vocabularies)} vocabular(ies) [dim]→ locale: {locale}[/dim]"
    )


if __name__ == "__main__":
    cli()
