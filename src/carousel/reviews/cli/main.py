# reviews/cli/main.py
from __future__ import annotations
import typer

from carousel.reviews.cli.config import config_cmd
from carousel.reviews.cli.fetch import fetch_cmd

app = typer.Typer(help="Reviews carousel command-line utilities", no_args_is_help=True)

app.command("fetch")(fetch_cmd)
app.command("config")(config_cmd)


def run():
    app()


if __name__ == "__main__":
    run()
