import logging
from typing import Annotated

import typer

from project_tree.cli.doctor import doctor_app, store_app
from project_tree.cli.files import cat, export_app, import_app, node_app, stats, write
from project_tree.cli.projects import project_app
from project_tree.cli.serve import serve_app
from project_tree.cli.sync import rebuild, sync, tree, watch

app = typer.Typer(
    name="project-tree",
    help="Project Tree CLI: keep a virtual project tree in step with files on disk.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


app.add_typer(project_app, name="project")
app.command("sync")(sync)
app.command("rebuild")(rebuild)
app.command("tree")(tree)
app.command("watch")(watch)
app.add_typer(import_app, name="import")
app.add_typer(export_app, name="export")
app.add_typer(node_app, name="node")
app.command("cat")(cat)
app.command("write")(write)
app.command("stats")(stats)
app.add_typer(doctor_app, name="doctor")
app.add_typer(store_app, name="store")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
