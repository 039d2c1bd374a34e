import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from builder_ide.cli.issues import issues_app
from builder_ide.cli.serve import serve_app
from builder_ide.cli.workspace import export, files, tree

app = typer.Typer(
    name="builder-ide",
    help="Builder IDE CLI: serve, browse and export a sandboxed project.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure_logging(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


app.command("tree")(tree)
app.command("files")(files)
app.command("export")(export)
app.add_typer(issues_app, name="issues")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
