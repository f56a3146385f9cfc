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

"""Statuses of compilations and testcase evaluations.

Both are immutable values. A status is either a bare name (e.g.
"Running") or a name with a payload: the metadata of a finished
compilation, or the score of a Partial testcase. The JSON form follows
the same shape: a plain string, or an object with a "type" key.

"""

import math

from taskmakercommon.constants import \
    COMPILATION_STATES, COMPILATION_TERMINAL_STATES, \
    COMPILATION_PENDING, COMPILATION_RUNNING, COMPILATION_DONE, \
    COMPILATION_FAILED, COMPILATION_SKIPPED, \
    TESTCASE_STATES, TESTCASE_TERMINAL_STATES, \
    TESTCASE_PENDING, TESTCASE_RUNNING, TESTCASE_ACCEPTED, \
    TESTCASE_WRONG_ANSWER, TESTCASE_PARTIAL, \
    TESTCASE_TIME_LIMIT_EXCEEDED, TESTCASE_MEMORY_LIMIT_EXCEEDED, \
    TESTCASE_RUNTIME_ERROR, TESTCASE_SKIPPED, TESTCASE_INTERNAL_ERROR


__all__ = [
    "CompilationStatus", "TestcaseEvaluationStatus",
    "PENDING", "RUNNING", "ACCEPTED", "WRONG_ANSWER",
    "TIME_LIMIT_EXCEEDED", "MEMORY_LIMIT_EXCEEDED", "RUNTIME_ERROR",
    "SKIPPED", "INTERNAL_ERROR",
]


class CompilationStatus:
    """Status of the compilation of one source file.

    state (str): one of COMPILATION_STATES.
    result (dict|None): metadata of a finished compilation (exit
        status, stderr, resources used...); present only, and always,
        for Done and Failed.

    """

    _WITH_RESULT = frozenset([COMPILATION_DONE, COMPILATION_FAILED])

    def __init__(self, state: str, result: dict | None = None):
        if state not in COMPILATION_STATES:
            raise ValueError("Unknown compilation status `%s'." % state)
        if state in self._WITH_RESULT:
            result = dict(result) if result is not None else {}
        elif result is not None:
            raise ValueError("Compilation status `%s' carries no result."
                             % state)
        self.state = state
        self.result = result

    @classmethod
    def pending(cls) -> "CompilationStatus":
        return cls(COMPILATION_PENDING)

    @classmethod
    def running(cls) -> "CompilationStatus":
        return cls(COMPILATION_RUNNING)

    @classmethod
    def done(cls, result: dict | None = None) -> "CompilationStatus":
        return cls(COMPILATION_DONE, result)

    @classmethod
    def failed(cls, result: dict | None = None) -> "CompilationStatus":
        return cls(COMPILATION_FAILED, result)

    @classmethod
    def skipped(cls) -> "CompilationStatus":
        return cls(COMPILATION_SKIPPED)

    @property
    def is_terminal(self) -> bool:
        return self.state in COMPILATION_TERMINAL_STATES

    def to_json(self) -> str | dict:
        if self.result is None:
            return self.state
        return {"type": self.state, "result": dict(self.result)}

    @classmethod
    def from_json(cls, data) -> "CompilationStatus":
        """Decode the JSON form produced by to_json.

        raise (ValueError): if data is not a valid status.

        """
        if isinstance(data, str):
            return cls(data)
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            result = data.get("result")
            if result is not None and not isinstance(result, dict):
                raise ValueError("Compilation result must be an object.")
            if result is None and data["type"] in cls._WITH_RESULT:
                result = {}
            return cls(data["type"], result)
        raise ValueError("Invalid compilation status: %r" % (data,))

    def __eq__(self, other):
        if not isinstance(other, CompilationStatus):
            return NotImplemented
        return self.state == other.state and self.result == other.result

    __hash__ = None

    def __repr__(self):
        if self.result is None:
            return "<CompilationStatus %s>" % self.state
        return "<CompilationStatus %s %r>" % (self.state, self.result)


class TestcaseEvaluationStatus:
    """Outcome of the evaluation of a solution on one testcase.

    state (str): one of TESTCASE_STATES.
    score (float|None): the fraction of the testcase awarded, only
        for Partial.

    """

    # Not a test, despite the name.
    __test__ = False

    _ZERO_STATES = frozenset([
        TESTCASE_WRONG_ANSWER, TESTCASE_TIME_LIMIT_EXCEEDED,
        TESTCASE_MEMORY_LIMIT_EXCEEDED, TESTCASE_RUNTIME_ERROR,
        TESTCASE_SKIPPED, TESTCASE_INTERNAL_ERROR,
    ])

    def __init__(self, state: str, score: float | None = None):
        if state not in TESTCASE_STATES:
            raise ValueError("Unknown testcase status `%s'." % state)
        if state == TESTCASE_PARTIAL:
            if isinstance(score, bool) or not isinstance(score, (int, float)):
                raise ValueError("Partial status requires a numeric score.")
            score = float(score)
            if math.isnan(score) or not 0.0 <= score <= 1.0:
                raise ValueError(
                    "Partial score must be between 0 and 1, got %r." % score)
        elif score is not None:
            raise ValueError("Testcase status `%s' carries no score." % state)
        self.state = state
        self.score = score

    @classmethod
    def partial(cls, score: float) -> "TestcaseEvaluationStatus":
        return cls(TESTCASE_PARTIAL, score)

    @property
    def is_terminal(self) -> bool:
        return self.state in TESTCASE_TERMINAL_STATES

    @property
    def rank(self) -> int:
        """Position in the lifecycle: 0 pending, 1 running, 2 done."""
        if self.state == TESTCASE_PENDING:
            return 0
        if self.state == TESTCASE_RUNNING:
            return 1
        return 2

    @property
    def score_contribution(self) -> float | None:
        """Fraction of the testcase awarded, None if not known yet."""
        if self.state == TESTCASE_ACCEPTED:
            return 1.0
        if self.state == TESTCASE_PARTIAL:
            return self.score
        if self.state in self._ZERO_STATES:
            return 0.0
        return None

    def to_json(self) -> str | dict:
        if self.state == TESTCASE_PARTIAL:
            return {"type": self.state, "score": self.score}
        return self.state

    @classmethod
    def from_json(cls, data) -> "TestcaseEvaluationStatus":
        """Decode the JSON form produced by to_json.

        raise (ValueError): if data is not a valid status.

        """
        if isinstance(data, str):
            return cls(data)
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            return cls(data["type"], data.get("score"))
        raise ValueError("Invalid testcase status: %r" % (data,))

    def __eq__(self, other):
        if not isinstance(other, TestcaseEvaluationStatus):
            return NotImplemented
        return self.state == other.state and self.score == other.score

    def __hash__(self):
        return hash((self.state, self.score))

    def __repr__(self):
        if self.state == TESTCASE_PARTIAL:
            return "<TestcaseEvaluationStatus Partial(%g)>" % self.score
        return "<TestcaseEvaluationStatus %s>" % self.state


PENDING = TestcaseEvaluationStatus(TESTCASE_PENDING)
RUNNING = TestcaseEvaluationStatus(TESTCASE_RUNNING)
ACCEPTED = TestcaseEvaluationStatus(TESTCASE_ACCEPTED)
WRONG_ANSWER = TestcaseEvaluationStatus(TESTCASE_WRONG_ANSWER)
TIME_LIMIT_EXCEEDED = TestcaseEvaluationStatus(TESTCASE_TIME_LIMIT_EXCEEDED)
MEMORY_LIMIT_EXCEEDED = \
    TestcaseEvaluationStatus(TESTCASE_MEMORY_LIMIT_EXCEEDED)
RUNTIME_ERROR = TestcaseEvaluationStatus(TESTCASE_RUNTIME_ERROR)
SKIPPED = TestcaseEvaluationStatus(TESTCASE_SKIPPED)
INTERNAL_ERROR = TestcaseEvaluationStatus(TESTCASE_INTERNAL_ERROR)
