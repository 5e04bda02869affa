"""Tunnelgate CLI - Command line interface."""

from __future__ import annotations

import json
import logging
import sys

import click
import pydantic
import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tunnelgate.core.config import get_config, load_ingress_document
from tunnelgate.ingress import IngressError, RoutingTable, parse_ingress, split_request_url

console = Console()


def _configure_logging(log_level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
    )


def _load_table(config_file: str | None, quiet: bool = False) -> RoutingTable:
    """Compile the ingress rules from the given file or the configured default.

    Exits with status 1 if no file is configured or it doesn't compile.
    With quiet=True nothing is printed unless loading fails.
    """
    path = config_file or get_config().ingress_file
    if not path:
        console.print(
            "[red]No config file given.[/red] Use --config or set TUNNELGATE_INGRESS_FILE."
        )
        sys.exit(1)

    try:
        document = load_ingress_document(path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Failed to load config:[/red] {escape(str(e))}")
        sys.exit(1)

    if not quiet:
        console.print(f"Validating rules from {escape(str(path))}", style="dim")
    try:
        return parse_ingress(document)
    except IngressError as e:
        console.print(f"[red]Validation failed:[/red] {escape(str(e))}")
        sys.exit(1)


def _rules_table(table: RoutingTable) -> Table:
    rules = Table(title="Ingress Rules")
    rules.add_column("#", justify="right", style="dim")
    rules.add_column("Hostname", style="cyan")
    rules.add_column("Path")
    rules.add_column("Service", style="green")

    for i, rule in enumerate(table, start=1):
        data = rule.to_dict()
        rules.add_row(
            str(i),
            escape(data["hostname"] or "*"),
            escape(data["path"] or ""),
            escape(data["service"]),
        )
    return rules


@click.group()
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log level (default: TUNNELGATE_LOG_LEVEL or warning)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(log_level: str | None, verbose: bool):
    """Tunnelgate - hostname and path routing for tunnel ingress."""
    if verbose:
        effective_log_level = "debug"
    elif log_level:
        effective_log_level = log_level
    else:
        try:
            effective_log_level = get_config().log_level
        except pydantic.ValidationError as e:
            console.print(f"[red]Invalid settings:[/red] {escape(str(e))}")
            sys.exit(1)
    _configure_logging(effective_log_level)


@main.group()
def ingress():
    """Validate and test ingress rules.

    Examples:

        tunnelgate ingress validate --config config.yml

        tunnelgate ingress rule https://api.example.com/users --config config.yml
    """
    pass


@ingress.command("validate")
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(),
    help="Path to YAML config file (default: TUNNELGATE_INGRESS_FILE)",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def ingress_validate(config_file: str | None, json_output: bool):
    """Check that the ingress rules in a config file are valid."""
    table = _load_table(config_file, quiet=json_output)

    if json_output:
        click.echo(json.dumps(table.to_dict(), indent=2))
        return

    console.print(_rules_table(table))
    console.print("[green]OK[/green]")


@ingress.command("rule")
@click.argument("url")
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(),
    help="Path to YAML config file (default: TUNNELGATE_INGRESS_FILE)",
)
def ingress_rule(url: str, config_file: str | None):
    """Show which ingress rule a URL would match.

    URL must be absolute, e.g. https://api.example.com/users
    """
    table = _load_table(config_file)

    host, path = split_request_url(url)
    if not host:
        console.print(f"[red]{escape(url)} is not an absolute URL[/red]")
        sys.exit(1)

    i = table.match_index(host, path)
    if i is None:
        console.print(f"[red]No rule matched {escape(url)}[/red]")
        sys.exit(1)

    rule = table.rules[i].to_dict()
    console.print(f"[bold]Matched rule #{i + 1}[/bold]")
    console.print(f"  hostname: {escape(rule['hostname'] or '*')}")
    if rule["path"]:
        console.print(f"  path: {escape(rule['path'])}")
    console.print(f"  service: [green]{escape(rule['service'])}[/green]")


@main.command()
def version():
    """Show version information."""
    from tunnelgate import __version__

    console.print(f"[bold]Version:[/bold] {__version__}")
    console.print(f"[bold]Python:[/bold] {sys.version}")


if __name__ == "__main__":
    main()
