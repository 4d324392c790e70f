from __future__ import annotations

import typer

from nfl_ingest.cli import ingest
from nfl_ingest.cli.common import load_settings
from nfl_ingest.cli.listing import app as list_app
from nfl_ingest.cli.listing import status_cmd
from nfl_ingest.core.logging import configure_logging

app = typer.Typer(no_args_is_help=True, help="Ingest NFL data from external providers.")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL."),
    json_logs: bool | None = typer.Option(
        None, "--json-logs/--console-logs", help="Overrides JSON_LOGS."
    ),
) -> None:
    settings = load_settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        json_logs=settings.json_logs if json_logs is None else json_logs,
    )


app.command("teams")(ingest.teams_cmd)
app.command("players")(ingest.players_cmd)
app.command("games")(ingest.games_cmd)
app.command("stats")(ingest.stats_cmd)
app.command("all")(ingest.all_cmd)
app.command("providers")(ingest.providers_cmd)
app.command("status")(status_cmd)
app.add_typer(list_app, name="list")
