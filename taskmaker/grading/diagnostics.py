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

"""The diagnostics channel.

An ordered, append-only list of warnings and errors, written by the
aggregator and by every sanity check. What to do with an error is up
to whoever reads the channel.

"""

import logging
from datetime import datetime, timezone

from gevent.lock import RLock

from taskmakercommon.constants import SEVERITY_WARNING, SEVERITY_ERROR, \
    SEVERITIES


__all__ = ["Diagnostic", "Diagnostics"]


logger = logging.getLogger(__name__)


class Diagnostic:
    """A single entry of the channel.

    severity (str): SEVERITY_WARNING or SEVERITY_ERROR.
    message (str): human readable text.
    origin (str|None): who reported it (a check name, "aggregator",
        "pipeline"...).
    timestamp (datetime): when it was appended, UTC.

    """

    def __init__(self, severity: str, message: str,
                 origin: str | None = None,
                 timestamp: datetime | None = None):
        if severity not in SEVERITIES:
            raise ValueError("Unknown severity `%s'." % severity)
        self.severity = severity
        self.message = message
        self.origin = origin
        self.timestamp = timestamp if timestamp is not None \
            else datetime.now(timezone.utc)

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def to_json(self) -> dict:
        return {"severity": self.severity,
                "message": self.message,
                "origin": self.origin}

    def __repr__(self):
        if self.origin is None:
            return "<Diagnostic %s: %s>" % (self.severity, self.message)
        return "<Diagnostic %s [%s]: %s>" % (
            self.severity, self.origin, self.message)


class Diagnostics:
    """The channel itself.

    Many writers may append concurrently; every entry is also sent to
    the logging system.

    """

    def __init__(self):
        self._entries: list[Diagnostic] = []
        self._lock = RLock()

    def append(self, entry: Diagnostic) -> Diagnostic:
        with self._lock:
            self._entries.append(entry)
        if entry.is_error:
            logger.error("%s%s", _prefix(entry.origin), entry.message)
        else:
            logger.warning("%s%s", _prefix(entry.origin), entry.message)
        return entry

    def warning(self, message: str, origin: str | None = None) -> Diagnostic:
        return self.append(Diagnostic(SEVERITY_WARNING, message, origin))

    def error(self, message: str, origin: str | None = None) -> Diagnostic:
        return self.append(Diagnostic(SEVERITY_ERROR, message, origin))

    def since(self, index: int) -> list[Diagnostic]:
        """Return the entries appended after the first index ones."""
        with self._lock:
            return self._entries[index:]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [entry for entry in self if not entry.is_error]

    @property
    def errors(self) -> list[Diagnostic]:
        return [entry for entry in self if entry.is_error]

    @property
    def has_errors(self) -> bool:
        return any(entry.is_error for entry in self)

    def to_json(self) -> list[dict]:
        return [entry.to_json() for entry in self]

    def __iter__(self):
        with self._lock:
            entries = list(self._entries)
        return iter(entries)

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __getitem__(self, index):
        with self._lock:
            return self._entries[index]


def _prefix(origin: str | None) -> str:
    return "[%s] " % origin if origin is not None else ""
