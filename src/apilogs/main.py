from typing import List

import typer
from typer.core import TyperGroup

from apilogs.commands import apilogs
from apilogs.commands.apilogs import USAGE
from apilogs.capture import enable_api_logging
from apilogs.logging import setup_logging, get_logger
from apilogs.utils.console import error, info, success


class ApiLogsGroup(TyperGroup):
    """Root command group that answers unknown subcommands with the usage text"""

    def resolve_command(self, ctx, args: List[str]):
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            print(USAGE)
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=ApiLogsGroup,
    help="[bold blue]apilogs[/bold blue] - record outbound API calls and inspect the logs",
    rich_markup_mode="rich",
)

# Counts are parsed leniently, so "-3" must reach the command as an argument
count_settings = {"ignore_unknown_options": True}

app.command("list")(apilogs.list_command)
app.command("tail", context_settings=count_settings)(apilogs.tail_command)
app.command("view", context_settings=count_settings)(apilogs.view_command)
app.command("dir")(apilogs.dir_command)
app.command("clear")(apilogs.clear_command)


@app.command("enable")
def enable() -> None:
    """Create the logs directory and show where entries will be written"""
    try:
        log_path = enable_api_logging()
    except OSError as e:
        error(f"Could not enable API logging: {e}")
        raise typer.Exit(1)
    success("API logging enabled")
    info(f"Logs will be written to: {log_path}")


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """
    [bold blue]apilogs[/bold blue] - record outbound API calls and inspect the logs
    """
    if not ctx.invoked_subcommand:
        print(USAGE)


def main():
    setup_logging()
    logger = get_logger("apilogs.main")
    logger.debug("apilogs CLI started")

    try:
        app()
    except Exception as e:
        logger.error(f"Unhandled exception in main: {str(e)}")
        raise
    finally:
        logger.debug("apilogs CLI finished")


if __name__ == "__main__":
    main()
