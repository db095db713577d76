"""
API log inspection commands.

ApiLogsCommand answers a raw argument string ("list", "tail 5", ...) with
a display string and never raises. The *_command functions below are
registered on the typer application in apilogs.main.
"""

import json
import os
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.text import Text

from apilogs.logging import ApiLogConfig, get_api_logs_directory, get_logger
from apilogs.viewer import LogRecord, list_log_files, read_entries, render_entry

USAGE = """
API Logs Command

Usage:
  apilogs list                 - List all available log files
  apilogs tail [n]             - Show last n entries of most recent log (default: 20)
  apilogs clear                - Clear all API logs (with confirmation)
  apilogs dir                  - Show logs directory path
  apilogs view <file> [n]      - View specific log file or last n entries
"""

CLEAR_PROMPT = "Are you sure you want to clear all API logs?"


def confirm_with_prompt(prompt: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no"""
    return typer.confirm(prompt, default=False)


def parse_count(value: Optional[str], default: int) -> int:
    """
    Parse a positional entry count.

    Non-numeric input falls back to the default; negative values are
    clamped to 0, meaning all entries.
    """
    if value is None:
        return default
    try:
        count = int(value)
    except ValueError:
        return default
    return max(count, 0)


class ApiLogsCommand:
    """View and manage API logs"""

    name = "apilogs"
    description = "View and manage API logs"

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        confirm: Optional[Callable[[str], bool]] = None,
        config: Optional[ApiLogConfig] = None,
    ):
        self.config = config or ApiLogConfig()
        self.log_dir = Path(log_dir) if log_dir else get_api_logs_directory(config=self.config)
        self.confirm = confirm or confirm_with_prompt
        self.logger = get_logger("apilogs.commands.apilogs")

    def call(self, args: str) -> str:
        """Run a subcommand from a raw argument string and return plain text"""
        return self.run(args).plain

    def run(self, args: str) -> Text:
        """Run a subcommand from a raw argument string and return styled text"""
        subcommand, *params = args.split() or [None]

        if subcommand == "list":
            return self.list_logs()
        if subcommand == "tail":
            return self.tail(parse_count(params[0] if params else None, self.config.tail_default))
        if subcommand == "clear":
            return self.clear()
        if subcommand == "dir":
            return self.directory()
        if subcommand == "view":
            if not params:
                return Text("Error: Please specify a log file to view", style="red")
            return self.view(params[0], parse_count(params[1] if len(params) > 1 else None, 0))
        return Text(USAGE)

    def directory(self) -> Text:
        return Text(str(self.log_dir))

    def list_logs(self) -> Text:
        try:
            files = list_log_files(self.log_dir, self.config.recognized_extensions)
        except OSError as e:
            self.logger.error(f"Failed to list log files: {e}")
            return Text(f"Error listing log files: {e}", style="red")

        if not files:
            return Text("No log files found", style="yellow")

        result = Text("API Log Files:\n\n", style="bold")
        for index, log_file in enumerate(files, start=1):
            result.append(f"{index}. {log_file.name}\n", style="cyan")
            result.append(f"   Size: {log_file.size / 1024:.2f} KB\n")
            result.append(f"   Created: {log_file.created_at.strftime('%Y-%m-%d %H:%M:%S')}\n")
            result.append(f"   Path: {log_file.path}\n\n")
        return result

    def tail(self, count: int = 20) -> Text:
        try:
            files = list_log_files(self.log_dir, self.config.recognized_extensions)
        except OSError as e:
            self.logger.error(f"Failed to tail logs: {e}")
            return Text(f"Error tailing logs: {e}", style="red")

        if not files:
            return Text("No log files found", style="yellow")

        return self.view(str(files[0].path), count)

    def resolve_log_path(self, name_or_path: str) -> Path:
        """Resolve a bare file name against the logs directory, adding .jsonl if needed"""
        if os.sep in name_or_path or (os.altsep and os.altsep in name_or_path):
            return Path(name_or_path)
        path = self.log_dir / name_or_path
        if not path.suffix:
            path = path.with_name(path.name + self.config.file_extension)
        return path

    def view(self, name_or_path: str, count: int = 0) -> Text:
        file_path = self.resolve_log_path(name_or_path)

        try:
            if not file_path.exists():
                return Text(f"Log file not found: {file_path}", style="red")

            entries = read_entries(file_path)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Failed to view log file {file_path}: {e}")
            return Text(f"Error viewing log file: {e}", style="red")

        if not entries:
            return Text("Log file is empty", style="yellow")

        if count > 0:
            entries = entries[-count:]

        result = Text(f"Log File: {file_path.name}\n\n", style="bold")
        for entry in entries:
            result.append_text(self.render(entry))
            result.append("\n\n")
        return result

    def render(self, entry: LogRecord) -> Text:
        """Render an entry, falling back to its JSON text if it cannot be formatted"""
        try:
            return render_entry(entry)
        except Exception as e:
            self.logger.warning(f"Could not format log entry: {e}")
            return Text(json.dumps(entry, default=str))

    def clear(self) -> Text:
        try:
            confirmed = self.confirm(CLEAR_PROMPT)
        except typer.Abort:
            confirmed = False
        if not confirmed:
            return Text("Operation cancelled", style="yellow")

        deleted: List[Path] = []
        try:
            if self.log_dir.is_dir():
                for path in self.log_dir.iterdir():
                    if path.is_file() and path.name.endswith(self.config.recognized_extensions):
                        path.unlink()
                        deleted.append(path)
        except OSError as e:
            self.logger.error(f"Failed to clear logs: {e}")
            return Text(f"Error clearing logs: {e}", style="red")

        self.logger.info(f"Cleared {len(deleted)} API log files from {self.log_dir}")
        return Text(f"Successfully deleted {len(deleted)} log files", style="green")


console = Console()


def list_command() -> None:
    """List all available log files"""
    console.print(ApiLogsCommand().list_logs())


def tail_command(
    lines: Optional[str] = typer.Argument(None, help="Number of entries to show (default: 20)"),
) -> None:
    """Show the last entries of the most recent log"""
    command = ApiLogsCommand()
    console.print(command.tail(parse_count(lines, command.config.tail_default)))


def view_command(
    file: str = typer.Argument(..., help="Log file name or path"),
    lines: Optional[str] = typer.Argument(None, help="Number of entries to show, 0 for all"),
) -> None:
    """View a specific log file"""
    console.print(ApiLogsCommand().view(file, parse_count(lines, 0)))


def dir_command() -> None:
    """Show the logs directory path"""
    console.print(ApiLogsCommand().directory(), soft_wrap=True)


def clear_command() -> None:
    """Clear all API logs (with confirmation)"""
    console.print(ApiLogsCommand().clear())
