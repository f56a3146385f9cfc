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

"""Events produced by the execution pipeline.

On the wire every event is a JSON object on its own line, with a
"type" key selecting the variant:

    {"type": "CompilationStatus", "file": "sol/sol.cpp",
     "status": {"type": "Done", "result": {"time": 0.4}}}
    {"type": "TestcaseStatus", "solution": "sol/sol.cpp",
     "subtask": 0, "testcase": 3, "status": "Accepted"}
    {"type": "Warning", "message": "..."}

Errors, and the scores the pipeline computed on its own, use the
"Error", "SubtaskScore" and "SolutionScore" types.

"""

import json
import math
from typing import IO, Iterable, Iterator

from .errors import MalformedEvent
from .status import CompilationStatus, TestcaseEvaluationStatus


__all__ = [
    "Event", "CompilationEvent", "TestcaseEvent", "WarningEvent",
    "ErrorEvent", "SubtaskScoreEvent", "SolutionScoreEvent",
    "EVENT_TYPES", "parse_event", "loads_event", "read_events",
    "write_events",
]


class Event:
    """Base class of the events; TYPE is the name used on the wire."""

    TYPE: str = ""

    def to_json(self) -> dict:
        raise NotImplementedError

    @classmethod
    def from_json(cls, data: dict) -> "Event":
        raise NotImplementedError

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_json() == other.to_json()

    __hash__ = None

    def __repr__(self):
        return "<%s %r>" % (type(self).__name__, self.to_json())


class CompilationEvent(Event):
    """The compilation of a file changed status."""

    TYPE = "CompilationStatus"

    def __init__(self, file: str, status: CompilationStatus):
        self.file = file
        self.status = status

    def to_json(self):
        return {"type": self.TYPE, "file": self.file,
                "status": self.status.to_json()}

    @classmethod
    def from_json(cls, data):
        file = _get(data, "file", str)
        try:
            status = CompilationStatus.from_json(_get(data, "status", object))
        except ValueError as error:
            raise MalformedEvent(str(error))
        return cls(file, status)


class TestcaseEvent(Event):
    """The evaluation of a solution on a testcase changed status."""

    TYPE = "TestcaseStatus"
    # Not a test, despite the name.
    __test__ = False

    def __init__(self, solution: str, subtask: int, testcase: int,
                 status: TestcaseEvaluationStatus):
        self.solution = solution
        self.subtask = subtask
        self.testcase = testcase
        self.status = status

    def to_json(self):
        return {"type": self.TYPE, "solution": self.solution,
                "subtask": self.subtask, "testcase": self.testcase,
                "status": self.status.to_json()}

    @classmethod
    def from_json(cls, data):
        solution = _get(data, "solution", str)
        subtask = _get(data, "subtask", int)
        testcase = _get(data, "testcase", int)
        try:
            status = TestcaseEvaluationStatus.from_json(
                _get(data, "status", object))
        except ValueError as error:
            raise MalformedEvent(str(error))
        return cls(solution, subtask, testcase, status)


class WarningEvent(Event):
    """A non fatal message from the pipeline."""

    TYPE = "Warning"

    def __init__(self, message: str):
        self.message = message

    def to_json(self):
        return {"type": self.TYPE, "message": self.message}

    @classmethod
    def from_json(cls, data):
        return cls(_get(data, "message", str))


class ErrorEvent(WarningEvent):
    """A message from the pipeline reporting something went wrong."""

    TYPE = "Error"


class SubtaskScoreEvent(Event):
    """The score of a subtask as computed by the pipeline."""

    TYPE = "SubtaskScore"

    def __init__(self, solution: str, subtask: int, score: float):
        self.solution = solution
        self.subtask = subtask
        self.score = score

    def to_json(self):
        return {"type": self.TYPE, "solution": self.solution,
                "subtask": self.subtask, "score": self.score}

    @classmethod
    def from_json(cls, data):
        return cls(_get(data, "solution", str), _get(data, "subtask", int),
                   _get_score(data))


class SolutionScoreEvent(Event):
    """The total score of a solution as computed by the pipeline."""

    TYPE = "SolutionScore"

    def __init__(self, solution: str, score: float):
        self.solution = solution
        self.score = score

    def to_json(self):
        return {"type": self.TYPE, "solution": self.solution,
                "score": self.score}

    @classmethod
    def from_json(cls, data):
        return cls(_get(data, "solution", str), _get_score(data))


EVENT_TYPES: dict[str, type[Event]] = {
    event_class.TYPE: event_class
    for event_class in [CompilationEvent, TestcaseEvent, WarningEvent,
                        ErrorEvent, SubtaskScoreEvent, SolutionScoreEvent]
}


def _get(data: dict, key: str, type_: type):
    try:
        value = data[key]
    except KeyError:
        raise MalformedEvent("Event %s is missing `%s'."
                             % (data.get("type"), key))
    # bool is an int for Python, not for us.
    if type_ is not object and (
            not isinstance(value, type_) or isinstance(value, bool)):
        raise MalformedEvent("Field `%s' of event %s must be of type %s."
                             % (key, data.get("type"), type_.__name__))
    return value


def _get_score(data: dict) -> float:
    score = _get(data, "score", object)
    if isinstance(score, bool) or not isinstance(score, (int, float)) \
            or math.isnan(score):
        raise MalformedEvent("Field `score' of event %s must be a number."
                             % data.get("type"))
    return float(score)


def parse_event(data) -> Event:
    """Build an event from its decoded JSON form.

    raise (MalformedEvent): if data is not a valid event.

    """
    if not isinstance(data, dict):
        raise MalformedEvent("Event must be a JSON object, got %r." % (data,))
    type_name = data.get("type")
    if not isinstance(type_name, str):
        raise MalformedEvent("Event type must be a string, got %r."
                             % (type_name,))
    event_class = EVENT_TYPES.get(type_name)
    if event_class is None:
        raise MalformedEvent("Unknown event type %r." % (data.get("type"),))
    return event_class.from_json(data)


def loads_event(line: str) -> Event:
    """Decode a single line of the stream.

    raise (MalformedEvent): if the line is not a valid event.

    """
    try:
        data = json.loads(line)
    except ValueError as error:
        raise MalformedEvent("Invalid JSON in event stream: %s" % error)
    return parse_event(data)


def read_events(lines: Iterable[str]) -> Iterator[Event]:
    """Decode a stream of lines lazily, skipping blank ones."""
    for line in lines:
        if line.strip():
            yield loads_event(line)


def write_events(events: Iterable[Event], f: IO[str]):
    """Write events in the format read_events accepts."""
    for event in events:
        f.write(json.dumps(event.to_json()))
        f.write("\n")
