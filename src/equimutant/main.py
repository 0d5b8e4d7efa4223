import typer

from equimutant import __version__
from equimutant.cli import mutations
from equimutant.cli.config import CLIConfig
from equimutant.logging_config import logger, reset_logging, setup_logging

app = typer.Typer(help="Equivalent-mutant generator for Java sources.")


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    machine: bool = typer.Option(
        False,
        "--machine",
        "-M",
        help="Machine mode: JSON output, no console logging (also via EQUIMUTANT_MACHINE_MODE env var)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG level"
    ),
):
    """
    equimutant: semantics-preserving rewrites of Java source files.

    Global flags apply to all commands.
    """
    if machine:
        CLIConfig.set_machine_mode(True)

    if machine or verbose:
        reset_logging()
        setup_logging(level="DEBUG" if verbose else "INFO", suppress_console=True if machine else None)


# Mutation commands are top-level
app.command(name="random")(mutations.random_cmd)
app.command(name="guided")(mutations.guided_cmd)
app.command(name="target")(mutations.target_cmd)
app.command(name="select")(mutations.select_cmd)
app.command(name="transforms")(mutations.transforms_cmd)


@app.command()
def version():
    """
    Prints the current version of equimutant.
    """
    logger.debug("version requested")
    typer.echo(f"equimutant v{__version__}")


if __name__ == "__main__":
    app()
