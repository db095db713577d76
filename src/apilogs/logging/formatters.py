"""
Custom formatters for apilogs diagnostics logging.
"""

import logging
from .utils import sanitize_data
from apilogs.constants import SENSITIVE_KEYS


class DiagnosticsFormatter(logging.Formatter):
    """
    Formatter for the tool's own log records.

    Structured messages and arguments (dicts and lists) are sanitized
    before formatting so secrets never reach the diagnostics log.
    """

    def __init__(
        self,
        include_timestamps: bool = True,
        sanitize_sensitive: bool = True,
        sensitive_keys: tuple = None,
    ):
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_keys = sensitive_keys or SENSITIVE_KEYS
        fmt_parts = []
        if include_timestamps:
            fmt_parts.append("%(asctime)s")
        fmt_parts.extend(["%(levelname)s", "[%(name)s]", "%(message)s"])
        super().__init__(fmt=" ".join(fmt_parts), datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        if self.sanitize_sensitive:
            if isinstance(record.msg, (dict, list)):
                record.msg = sanitize_data(record.msg, self.sensitive_keys)
            # A single mapping argument is stored by LogRecord as the args themselves
            if isinstance(record.args, dict):
                record.args = sanitize_data(record.args, self.sensitive_keys)
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    sanitize_data(arg, self.sensitive_keys)
                    if isinstance(arg, (dict, list))
                    else arg
                    for arg in record.args
                )

        return super().format(record)
