"""
CLI Mutation Commands

random, guided, target, select, transforms

Exit codes: 0 when at least one mutant was written (or nothing was requested),
1 when the request produced no mutants, 2 on invalid arguments or unreadable input.
"""

from pathlib import Path
from typing import Callable, List, Optional

import typer

from equimutant.exceptions import (
    BugReportError,
    EquimutantError,
    InputFileError,
    InvalidArgumentError,
    ParserError,
    PluginNotFoundError,
)
from equimutant.logging_config import logger
from equimutant.mutation import MutationEngine
from equimutant.schemas import BugReport, MutationResult
from equimutant.transform import TransformRegistry
from .output import print_error, print_mutation_result, print_selection, print_transforms

EXIT_OK = 0
EXIT_NO_MUTANTS = 1
EXIT_INVALID = 2


def _engine(workers: Optional[int] = None) -> MutationEngine:
    config = {"max_workers": workers} if workers else None
    return MutationEngine(TransformRegistry.default(), config=config)


def _fail(error: Exception, json_output: bool) -> None:
    """Report a request-level error and exit with the matching code."""
    if isinstance(error, PluginNotFoundError):
        print_error("PLUGIN_NOT_FOUND", str(error), json_output, error.name, error.available)
    elif isinstance(error, BugReportError):
        print_error("INVALID_BUG_REPORT", str(error), json_output)
    elif isinstance(error, InvalidArgumentError):
        print_error("INVALID_ARGUMENT", str(error), json_output)
    elif isinstance(error, InputFileError):
        print_error("FILE_READ_ERROR", str(error), json_output, error.file_path)
    elif isinstance(error, ParserError):
        print_error("PARSE_ERROR", str(error), json_output, error.file_path)
    else:
        print_error("ERROR", str(error), json_output)
    raise typer.Exit(code=EXIT_INVALID)


def _run(request: Callable[[], MutationResult], json_output: bool) -> None:
    try:
        result = request()
    except EquimutantError as e:
        logger.debug(f"Request rejected: {e}")
        _fail(e, json_output)

    print_mutation_result(result, json_output)
    raise typer.Exit(code=EXIT_OK if result.success else EXIT_NO_MUTANTS)


def random_cmd(
    file: Path = typer.Argument(..., help="Java source file to mutate"),
    output: Path = typer.Option(..., "--output", "-o", help="Directory for mutant files"),
    count: int = typer.Option(5, "--count", "-n", help="Number of nodes to sample (0 = configured default)"),
    plugin: Optional[str] = typer.Option(None, "--plugin", "-p", help="Apply only this transform"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel attempts (overrides config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Mutate randomly sampled nodes of FILE.
    """
    _run(lambda: _engine(workers).run_random(str(file), str(output), count, plugin, seed), json_output)


def guided_cmd(
    file: Path = typer.Argument(..., help="Java source file to mutate"),
    output: Path = typer.Option(..., "--output", "-o", help="Directory for mutant files"),
    lines: Optional[List[int]] = typer.Option(None, "--line", "-l", help="Buggy line (repeatable)"),
    plugin: Optional[str] = typer.Option(None, "--plugin", "-p", help="Apply only this transform"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel attempts (overrides config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Mutate the nodes on the given bug lines and the statements feeding them.
    """
    try:
        report = BugReport.create(True, lines or [])
    except BugReportError as e:
        _fail(e, json_output)

    _run(lambda: _engine(workers).run_guided(str(file), str(output), report, plugin), json_output)


def target_cmd(
    file: Path = typer.Argument(..., help="Java source file to mutate"),
    output: Path = typer.Option(..., "--output", "-o", help="Directory for mutant files"),
    lines: Optional[List[int]] = typer.Option(None, "--line", "-l", help="Target line (repeatable)"),
    plugin: Optional[str] = typer.Option(None, "--plugin", "-p", help="Apply only this transform"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel attempts (overrides config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Mutate every node that starts on one of the given lines.
    """
    _run(lambda: _engine(workers).run_target(str(file), str(output), list(lines or []), plugin), json_output)


def select_cmd(
    file: Path = typer.Argument(..., help="Java source file to inspect"),
    strategy: str = typer.Option("random", "--strategy", "-s", help="random, guided or target"),
    count: int = typer.Option(0, "--count", "-n", help="Sample size for random selection"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random selection"),
    lines: Optional[List[int]] = typer.Option(None, "--line", "-l", help="Bug or target line (repeatable)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the candidate nodes a strategy would pick, without mutating anything.
    """
    try:
        engine = _engine()
        bug_report = BugReport.create(True, lines or []) if strategy == "guided" else None
        result = engine.select(
            str(file),
            strategy=strategy,
            count=count,
            seed=seed,
            bug_report=bug_report,
            target_lines=list(lines or []),
        )
    except EquimutantError as e:
        _fail(e, json_output)

    print_selection(result, json_output)


def transforms_cmd(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the registered transforms.
    """
    registry = TransformRegistry.default()
    rows = [{"name": t.name, "description": t.description} for t in registry.all()]
    print_transforms(rows, json_output)
