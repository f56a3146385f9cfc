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

"""Exceptions raised by the grading core.

"""

__all__ = [
    "ProtocolViolation", "MalformedEvent", "CheckError",
    "ConfigurationError", "EvaluationAborted", "CheckFailure",
]


class ProtocolViolation(Exception):
    """An event contradicted the state machine of the aggregator.

    This means the producer of the events and the aggregator are out
    of sync; it is a bug upstream, never a problem of the task.

    """
    pass


class MalformedEvent(ProtocolViolation):
    """An event could not be decoded or carries invalid values."""
    pass


class CheckError(Exception):
    """A sanity check could not inspect what it had to inspect."""
    pass


class ConfigurationError(Exception):
    pass


class CheckFailure:
    """A hook that raised instead of returning.

    check_name (str): name of the failed check.
    hook (str): "pre_hook" or "post_hook".
    error (Exception): what the hook raised.

    """

    def __init__(self, check_name: str, hook: str, error: Exception):
        self.check_name = check_name
        self.hook = hook
        self.error = error

    def __repr__(self):
        return "<CheckFailure %s.%s: %r>" % (
            self.check_name, self.hook, self.error)

    def __str__(self):
        return "%s.%s failed: %s" % (self.check_name, self.hook, self.error)


class EvaluationAborted(Exception):
    """The evaluation cannot go on.

    Raised when a pre-hook reports an error or fails, and when the
    event stream violates the protocol.

    failures ([CheckFailure]): hooks that raised, possibly empty when
        the abort is caused only by reported errors.

    """

    def __init__(self, message: str, failures: list[CheckFailure] | None = None):
        super().__init__(message)
        self.failures = list(failures) if failures is not None else []
