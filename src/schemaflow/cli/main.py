"""Main CLI entry point for schemaflow.

Applies schemas to data documents and runs task trees from the command line.
"""

from pathlib import Path
from typing import Any
import json
import sys

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.tree import Tree

from schemaflow import __version__
from schemaflow.config import configure, load_settings
from schemaflow.model.base import DynamicObject
from schemaflow.model.loader import load_object
from schemaflow.schema.base import ApplyReport, Schema
from schemaflow.tasks.base import Task
from schemaflow.tasks.scheduler import collect_actions, collect_tasks
from schemaflow.utils.helpers import configure_logging, resolve_reference

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="schemaflow")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Settings YAML file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """schemaflow - Validate object trees with schemas and run task trees."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    settings = configure(load_settings(config_path) if config_path else None)
    configure_logging("DEBUG" if verbose else None, settings=settings)


@cli.command()
@click.argument("schema_ref")
@click.argument("data_path", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), help="Write the cleaned document to this file")
@click.option("--pretty", is_flag=True, help="Pretty print JSON output")
@click.pass_context
def validate(
    ctx: click.Context,
    schema_ref: str,
    data_path: str,
    output: str | None,
    pretty: bool,
) -> None:
    """Apply a schema to a JSON/YAML document.

    SCHEMA_REF is a 'module:attribute' reference to a Schema or a factory.
    DATA_PATH is the document to validate.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        schema = resolve_reference(schema_ref)
        if not isinstance(schema, Schema):
            raise ValueError(f"'{schema_ref}' does not resolve to a Schema")

        target = load_object(data_path)
        report = schema.report(target)

        _print_report(report)

        json_output = _to_json(target, pretty)
        if output:
            Path(output).write_text(json_output)
            console.print(f"[green]Wrote cleaned document to {output}[/green]")
        else:
            click.echo(json_output)

    except Exception as e:
        _fail(e, verbose)

    if not report.valid:
        sys.exit(1)


@cli.command()
@click.argument("task_ref")
@click.option("--reply", "-r", "reply_path", type=click.Path(exists=True), help="JSON/YAML document seeding the reply")
@click.option("--pretty", is_flag=True, help="Pretty print JSON output")
@click.pass_context
def run(ctx: click.Context, task_ref: str, reply_path: str | None, pretty: bool) -> None:
    """Run a task tree and print the reply.

    TASK_REF is a 'module:attribute' reference to a Task or a factory.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        task = _resolve_task(task_ref)
        reply = load_object(reply_path) if reply_path else DynamicObject()
        task.run(reply)
        click.echo(_to_json(reply, pretty))

    except Exception as e:
        _fail(e, verbose)


@cli.command()
@click.argument("task_ref")
@click.pass_context
def inspect(ctx: click.Context, task_ref: str) -> None:
    """Show a task tree in the order it will run.

    TASK_REF is a 'module:attribute' reference to a Task or a factory.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        task = _resolve_task(task_ref)
        tree = Tree(f"[bold]{type(task).__name__}[/bold]")
        _add_branches(tree, task)
        console.print(tree)

    except Exception as e:
        _fail(e, verbose)


def _resolve_task(reference: str) -> Task:
    task = resolve_reference(reference)
    if not isinstance(task, Task):
        raise ValueError(f"'{reference}' does not resolve to a Task")
    return task


def _add_branches(tree: Tree, container: DynamicObject) -> None:
    for name, task in collect_tasks(container):
        actions = [action_name for action_name, _ in collect_actions(task)]
        label = f"[cyan]{name}[/cyan] ({type(task).__name__})"
        if actions:
            label += f" actions: {', '.join(actions)}"
        branch = tree.add(label)
        _add_branches(branch, task)


def _print_report(report: ApplyReport) -> None:
    """Print an apply report."""
    table = Table(title="Field Outcomes")
    table.add_column("Field", style="cyan")
    table.add_column("Valid")
    table.add_column("Removed")
    table.add_column("Error")

    for outcome in report.outcomes:
        table.add_row(
            outcome.field,
            "[green]yes[/green]" if outcome.valid else "[red]no[/red]",
            "yes" if outcome.removed else "-",
            outcome.error or "-",
        )

    console.print(table)

    if report.valid:
        console.print(Panel.fit("[green]Document is valid[/green]", title="Validation"))
    else:
        console.print(Panel.fit(
            f"[red]Invalid fields: {', '.join(report.invalid_fields)}[/red]",
            title="Validation",
        ))


def _to_json(obj: DynamicObject, pretty: bool) -> str:
    return json.dumps(obj.to_dict(), indent=2 if pretty else None, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _fail(error: Exception, verbose: bool) -> None:
    console.print(f"[red]Error: {error}[/red]")
    if verbose:
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


if __name__ == "__main__":
    cli()
