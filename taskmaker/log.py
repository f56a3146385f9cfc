#!/usr/bin/env python3

# Task Maker - grading core for programming contest tasks
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""Logging setup for the command line tools.

Library modules only create their own logger with
logging.getLogger(__name__); handlers are installed here, once, by
whoever owns the process.

"""

import logging
import sys


__all__ = [
    "CustomFormatter", "has_color_support", "setup_logging",
    "shell_handler",
]


ANSI_FG_COLORS = {"black": 30, "red": 31, "green": 32, "yellow": 33,
                  "blue": 34, "magenta": 35, "cyan": 36, "white": 37}


def has_color_support(stream) -> bool:
    """Return whether ANSI escape codes may be written to stream."""
    try:
        return stream.isatty()
    except Exception:
        return False


def _colored(text: str, color: str, bold: bool = False) -> str:
    return "\033[%s%dm%s\033[0m" % ("1;" if bold else "",
                                    ANSI_FG_COLORS[color], text)


class CustomFormatter(logging.Formatter):
    """Formatter printing time, severity, origin and message."""

    SEVERITY_COLORS = {
        logging.CRITICAL: "red",
        logging.ERROR: "red",
        logging.WARNING: "yellow",
        logging.INFO: "green",
        logging.DEBUG: "blue",
    }

    def __init__(self, colors: bool = False):
        super().__init__()
        self.colors = colors

    def format(self, record: logging.LogRecord) -> str:
        severity = record.levelname
        if self.colors:
            severity = _colored(
                severity, self.SEVERITY_COLORS.get(record.levelno, "white"),
                bold=record.levelno >= logging.WARNING)
        result = "%s - %s [%s] %s" % (
            self.formatTime(record, "%Y-%m-%d %H:%M:%S"), severity,
            record.name, record.getMessage())
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


shell_handler = logging.StreamHandler(sys.stderr)
shell_handler.setFormatter(CustomFormatter(has_color_support(sys.stderr)))


def setup_logging(verbose: bool = False):
    """Attach the shell handler to the root logger.

    verbose: show debug messages too.

    """
    root_logger = logging.getLogger()
    if shell_handler not in root_logger.handlers:
        root_logger.addHandler(shell_handler)
    level = logging.DEBUG if verbose else logging.INFO
    root_logger.setLevel(level)
    shell_handler.setLevel(level)
