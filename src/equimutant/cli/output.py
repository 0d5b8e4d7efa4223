"""
CLI Output Utilities

Rich tables for humans, minified JSON for machines.
"""

import json
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from equimutant.schemas import MutationResult, SelectionResult
from .config import CLIConfig

_console = Console()
_err_console = Console(stderr=True)


def wants_json(json_output: bool) -> bool:
    return json_output or CLIConfig.is_machine_mode()


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data. Machine mode always minifies, human mode pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        typer.echo(json.dumps(data, separators=(',', ':'), default=str))
    else:
        typer.echo(json.dumps(data, indent=2, default=str))


def structured_error(code: str, message: str, input_value: Optional[str] = None,
                     suggestions: Optional[list] = None) -> dict:
    """
    Create a structured error object for JSON output.

    Args:
        code: Error code (e.g., "INVALID_ARGUMENT", "PARSE_ERROR")
        message: Human-readable error message
        input_value: The input that caused the error
        suggestions: List of alternative values

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    if suggestions:
        error_obj["suggestions"] = suggestions
    return error_obj


def print_error(code: str, message: str, json_output: bool = False, input_value: Optional[str] = None,
                suggestions: Optional[list] = None) -> None:
    if wants_json(json_output):
        print_json(structured_error(code, message, input_value, suggestions))
    else:
        _err_console.print(f"[red]Error:[/red] {escape(message)}")
        if suggestions:
            _err_console.print(f"[dim]Available: {escape(', '.join(suggestions))}[/dim]")


def print_mutation_result(result: MutationResult, json_output: bool = False) -> None:
    if wants_json(json_output):
        data = result.model_dump(mode="json", exclude={"mutants": {"__all__": {"generated_text"}}})
        print_json(data)
        return

    meta = result.metadata
    status = "[green]success[/green]" if result.success else "[yellow]no mutants[/yellow]"
    _console.print(
        f"{status} [dim]({result.outcome.value})[/dim] "
        f"strategy={meta.get('strategy')} candidates={meta.get('candidate_count', 0)} "
        f"attempts={meta.get('plugin_attempt_count', 0)} mutants={result.mutant_count}"
    )

    if result.mutants:
        table = Table(title="Mutants")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Transform", style="cyan")
        table.add_column("Node", style="magenta")
        table.add_column("Snippet")
        table.add_column("File", style="green")
        for i, mutant in enumerate(result.mutants, 1):
            table.add_row(
                str(i),
                mutant.plugin_name,
                mutant.target.label(),
                escape(mutant.target.snippet),
                escape(mutant.output_path or ""),
            )
        _console.print(table)

    for message in result.error_messages:
        _console.print(f"[dim]- {escape(message)}[/dim]")


def print_selection(result: SelectionResult, json_output: bool = False) -> None:
    if wants_json(json_output):
        print_json(result.model_dump(mode="json"))
        return

    table = Table(title=f"{result.strategy}: {result.candidate_count} candidates in {escape(result.input_path)}")
    table.add_column("Kind", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Snippet")
    for candidate in result.candidates[:CLIConfig.MAX_TABLE_ROWS]:
        table.add_row(candidate.kind, str(candidate.line), str(candidate.column), escape(candidate.snippet))
    _console.print(table)

    hidden = result.candidate_count - CLIConfig.MAX_TABLE_ROWS
    if hidden > 0:
        _console.print(f"[dim]... {hidden} more (use --json for the full list)[/dim]")


def print_transforms(rows: List[dict], json_output: bool = False) -> None:
    if wants_json(json_output):
        print_json(rows)
        return

    table = Table(title="Registered transforms")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for row in rows:
        table.add_row(row["name"], escape(row["description"]))
    _console.print(table)
