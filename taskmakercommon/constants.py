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

"""Constants shared by the core and the contributed tools.

The names are also the ones used on the wire, so they must not be
changed without updating every producer of events.

"""

__all__ = [
    "COMPILATION_PENDING", "COMPILATION_RUNNING", "COMPILATION_DONE",
    "COMPILATION_FAILED", "COMPILATION_SKIPPED",
    "COMPILATION_STATES", "COMPILATION_TERMINAL_STATES",

    "TESTCASE_PENDING", "TESTCASE_RUNNING", "TESTCASE_ACCEPTED",
    "TESTCASE_WRONG_ANSWER", "TESTCASE_PARTIAL",
    "TESTCASE_TIME_LIMIT_EXCEEDED", "TESTCASE_MEMORY_LIMIT_EXCEEDED",
    "TESTCASE_RUNTIME_ERROR", "TESTCASE_SKIPPED", "TESTCASE_INTERNAL_ERROR",
    "TESTCASE_STATES", "TESTCASE_TERMINAL_STATES",

    "SEVERITY_WARNING", "SEVERITY_ERROR", "SEVERITIES",

    "STATEMENT_PATH",
    ]


COMPILATION_PENDING = "Pending"
COMPILATION_RUNNING = "Running"
COMPILATION_DONE = "Done"
COMPILATION_FAILED = "Failed"
COMPILATION_SKIPPED = "Skipped"

COMPILATION_STATES = (
    COMPILATION_PENDING, COMPILATION_RUNNING, COMPILATION_DONE,
    COMPILATION_FAILED, COMPILATION_SKIPPED,
)
COMPILATION_TERMINAL_STATES = frozenset([
    COMPILATION_DONE, COMPILATION_FAILED, COMPILATION_SKIPPED,
])


TESTCASE_PENDING = "Pending"
TESTCASE_RUNNING = "Running"
TESTCASE_ACCEPTED = "Accepted"
TESTCASE_WRONG_ANSWER = "WrongAnswer"
TESTCASE_PARTIAL = "Partial"
TESTCASE_TIME_LIMIT_EXCEEDED = "TimeLimitExceeded"
TESTCASE_MEMORY_LIMIT_EXCEEDED = "MemoryLimitExceeded"
TESTCASE_RUNTIME_ERROR = "RuntimeError"
TESTCASE_SKIPPED = "Skipped"
TESTCASE_INTERNAL_ERROR = "InternalError"

TESTCASE_STATES = (
    TESTCASE_PENDING, TESTCASE_RUNNING, TESTCASE_ACCEPTED,
    TESTCASE_WRONG_ANSWER, TESTCASE_PARTIAL, TESTCASE_TIME_LIMIT_EXCEEDED,
    TESTCASE_MEMORY_LIMIT_EXCEEDED, TESTCASE_RUNTIME_ERROR, TESTCASE_SKIPPED,
    TESTCASE_INTERNAL_ERROR,
)
TESTCASE_TERMINAL_STATES = frozenset(TESTCASE_STATES) - frozenset([
    TESTCASE_PENDING, TESTCASE_RUNNING,
])


SEVERITY_WARNING = "Warning"
SEVERITY_ERROR = "Error"
SEVERITIES = (SEVERITY_WARNING, SEVERITY_ERROR)


# Relative to the task directory.
STATEMENT_PATH = "statement/statement.md"
