"""CLI interface for flowcheck using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from flowcheck import __description__, __version__
from flowcheck.config import FlowcheckConfig, OutputFormat, load_config
from flowcheck.models.chatflow import CONFIG_MODELS, Chatflow, NodeKind
from flowcheck.schemas import DocumentValidator, SchemaGenerator
from flowcheck.validation import ValidationResult, registered_kinds, validate_chatflow
from flowcheck.whatsapp import get_unreachable_screens, validate_flow_json

app = typer.Typer(
    name="flowcheck",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_state: dict[str, Any] = {"log_level": None}


def _configure_logging(level: str) -> None:
    """Route flowcheck's loggers to stderr at the requested level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("flowcheck").setLevel(LOG_LEVELS.get(level, logging.WARNING))


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"flowcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level: error, warn, info, debug (default: from config)")
    ] = None,
) -> None:
    """flowcheck - validation for chatflow automations and WhatsApp Flows."""
    if log_level is not None and log_level not in LOG_LEVELS:
        console.print(f"[red]Error:[/red] Invalid log level '{log_level}'. Must be one of: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)
    _state["log_level"] = log_level


def _load_settings(config_path: Path | None) -> FlowcheckConfig:
    """Load configuration and apply its logging level unless overridden."""
    flow_config = load_config(config_path)
    _configure_logging(_state["log_level"] or flow_config.logging.level)
    return flow_config


def _resolve_format(format: str | None, flow_config: FlowcheckConfig) -> str:
    fmt = format or flow_config.output.format
    valid_formats = [f.value for f in OutputFormat]
    if fmt not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{fmt}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)
    return fmt


def _check_size_limits(chatflow: Chatflow, flow_config: FlowcheckConfig) -> None:
    """Reject documents larger than the configured caps before validating them."""
    limits = flow_config.validation
    if len(chatflow.nodes) > limits.max_nodes:
        raise ValueError(f"Chatflow has {len(chatflow.nodes)} nodes, limit is {limits.max_nodes}")
    if len(chatflow.edges) > limits.max_edges:
        raise ValueError(f"Chatflow has {len(chatflow.edges)} edges, limit is {limits.max_edges}")


def _render_result(result: ValidationResult, fmt: str, title: str, extra: dict[str, Any] | None = None) -> None:
    """Print a validation result in the requested format."""
    if fmt == "json":
        payload = result.to_dict()
        payload.update(extra or {})
        typer.echo(jsonlib.dumps(payload, indent=2))
        return

    if fmt == "markdown":
        console.print(f"# Validation Report: {title}", markup=False)
        console.print(f"**Valid:** {'yes' if result.valid else 'no'}", markup=False)
        console.print(f"**Exit Code:** {result.exit_code}", markup=False)
        console.print()

        if result.errors:
            console.print("## Errors", markup=False)
            for message in result.errors:
                console.print(f"- {message}", markup=False)
            console.print()

        if result.warnings:
            console.print("## Warnings", markup=False)
            for message in result.warnings:
                console.print(f"- {message}", markup=False)
        return

    status_color = "green" if result.status.value == "pass" else "yellow" if result.status.value == "warn" else "red"
    console.print(f"[bold]{escape(title)}[/bold]")
    console.print(f"[{status_color}]Validation Status: {result.status.value.upper()}[/{status_color}]")
    console.print(f"Valid: {'yes' if result.valid else 'no'}")

    if result.counters:
        counter_table = Table()
        counter_table.add_column("Metric", style="cyan")
        counter_table.add_column("Count", style="white", justify="right")
        for key, value in sorted(result.counters.items()):
            counter_table.add_row(key.replace("_", " ").title(), str(value))
        console.print(counter_table)

    if result.issues:
        console.print("\n[blue]Issues Found:[/blue]")
        issues_table = Table()
        issues_table.add_column("Rule", style="cyan")
        issues_table.add_column("Severity", style="white")
        issues_table.add_column("Message", style="white")
        issues_table.add_column("Location", style="dim")

        for issue in result.issues:
            severity_color = "red" if issue.severity.value == "fail" else "yellow"
            location = issue.node_id or issue.path or ""
            issues_table.add_row(
                issue.rule,
                f"[{severity_color}]{issue.severity.value.upper()}[/{severity_color}]",
                escape(issue.message),
                escape(location)
            )

        console.print(issues_table)
    else:
        console.print("\n[green]No issues found![/green]")


@app.command()
def validate(
    path: Annotated[
        Path,
        typer.Argument(help="Path to a chatflow JSON document")
    ],
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .flowcheck.json)")
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with code 1 when warnings are found")
    ] = False,
) -> None:
    """Validate a chatflow before saving or publishing it."""
    try:
        flow_config = _load_settings(config)
        fmt = _resolve_format(format, flow_config)
        chatflow = Chatflow.load(path)
        _check_size_limits(chatflow, flow_config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = validate_chatflow(chatflow.nodes, chatflow.edges, flow_config)
    _render_result(result, fmt, chatflow.name)

    fail_on_warnings = strict or flow_config.validation.fail_on_warnings
    if result.exit_code == 0 and fail_on_warnings and result.warnings:
        raise typer.Exit(1)
    raise typer.Exit(result.exit_code)


@app.command()
def flow(
    path: Annotated[
        Path,
        typer.Argument(help="Path to a WhatsApp Flow JSON document")
    ],
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .flowcheck.json)")
    ] = None,
) -> None:
    """Validate a WhatsApp Flow JSON document."""
    try:
        flow_config = _load_settings(config)
        fmt = _resolve_format(format, flow_config)
        if not path.exists():
            raise ValueError(f"Flow JSON file not found: {path}")
        with open(path, encoding="utf-8") as f:
            data = jsonlib.load(f)
        if not isinstance(data, dict):
            raise ValueError("Flow JSON document must be a JSON object")
    except jsonlib.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON in {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = validate_flow_json(data)
    screens = data.get("screens")
    unreachable = get_unreachable_screens(screens) if isinstance(screens, list) else []

    _render_result(result, fmt, path.name, extra={"unreachable_screens": unreachable})
    if unreachable and fmt != "json":
        console.print(f"[yellow]Unreachable screens:[/yellow] {escape(', '.join(map(str, unreachable)))}")

    raise typer.Exit(result.exit_code)


@app.command()
def schema(
    action: Annotated[
        str,
        typer.Argument(help="Action: generate, check")
    ],
    path: Annotated[
        Optional[Path],
        typer.Argument(help="Document to check (check action)")
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output directory for schemas (default: from config)")
    ] = None,
    document_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Document type for check: chatflow, flow_json")
    ] = "chatflow",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .flowcheck.json)")
    ] = None,
) -> None:
    """Generate JSON schemas or check a document against one."""
    valid_actions = ["generate", "check"]
    valid_types = ["chatflow", "flow_json"]

    if action not in valid_actions:
        console.print(f"[red]Error:[/red] Invalid action '{action}'. Must be one of: {', '.join(valid_actions)}")
        raise typer.Exit(1)

    try:
        flow_config = _load_settings(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    generator = SchemaGenerator()
    schemas = generator.generate_all_schemas()
    validator = DocumentValidator(schemas)

    if action == "generate":
        problems = validator.check_schemas()
        if problems:
            console.print("[yellow]Schema validation warnings:[/yellow]")
            for problem in problems:
                console.print(f"  • {escape(problem)}")

        output_dir = output or Path(flow_config.output.schemas_dir)
        schema_files = generator.save_schemas(output_dir)
        console.print(f"[green]Generated {len(schema_files)} JSON schemas:[/green]")
        for schema_name, schema_file in schema_files.items():
            console.print(f"  • {schema_name}: {escape(str(schema_file))}")
        return

    if path is None:
        console.print("[red]Error:[/red] Document path required for 'check' action")
        raise typer.Exit(1)

    if document_type not in valid_types:
        console.print(f"[red]Error:[/red] Invalid type '{document_type}'. Must be one of: {', '.join(valid_types)}")
        raise typer.Exit(1)

    errors = validator.validate_file(path, document_type)
    if not errors:
        console.print("[green]Document matches schema![/green]")
        return

    console.print(f"[yellow]Found {len(errors)} schema errors:[/yellow]")
    for error in errors[:20]:
        console.print(f"  • {escape(str(error))}")
    if len(errors) > 20:
        console.print(f"  ... and {len(errors) - 20} more errors")
    raise typer.Exit(1)


@app.command()
def kinds() -> None:
    """List node kinds and whether their configuration is checked."""
    checked = set(registered_kinds())

    table = Table(title="Node kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Config model", style="white")
    table.add_column("Config check", style="white")

    for kind in NodeKind:
        model = CONFIG_MODELS.get(kind.value)
        table.add_row(
            kind.value,
            model.__name__ if model else "-",
            "[green]yes[/green]" if kind.value in checked else "[dim]pass-through[/dim]"
        )

    console.print(table)


if __name__ == "__main__":
    app()
