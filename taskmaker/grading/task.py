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

"""Definition of a task, as seen by the grading core.

A Task is built once by a loader and never changes afterwards: the
mappings it exposes are read-only views.

"""

from types import MappingProxyType
from typing import Iterable, Mapping


__all__ = ["Testcase", "Subtask", "SolutionInfo", "Task"]


class Testcase:
    """A single input of a subtask.

    id (int): unique within the subtask.
    subtask (int): id of the owning subtask.
    input_path (str|None), output_path (str|None): where the files
        are, when the loader knows it.

    """

    # Not a test, despite the name.
    __test__ = False

    def __init__(self, id: int, subtask: int,
                 input_path: str | None = None,
                 output_path: str | None = None):
        self.id = id
        self.subtask = subtask
        self.input_path = input_path
        self.output_path = output_path

    def __repr__(self):
        return "<Testcase %d.%d>" % (self.subtask, self.id)


class Subtask:
    """A scored group of testcases.

    id (int): non-negative, dense within the task.
    max_score (float): points awarded when every testcase is correct.
    testcases ({int: Testcase}): read-only, in definition order.
    description (str|None): free text.

    """

    def __init__(self, id: int, max_score: float,
                 testcases: Iterable[Testcase] | Mapping[int, Testcase],
                 description: str | None = None):
        if isinstance(id, bool) or not isinstance(id, int) or id < 0:
            raise ValueError("Subtask id must be a non-negative integer, "
                             "got %r." % (id,))
        max_score = float(max_score)
        if not max_score >= 0.0:
            raise ValueError("Max score of subtask %d must be non-negative, "
                             "got %r." % (id, max_score))

        if isinstance(testcases, Mapping):
            items = list(testcases.items())
        else:
            items = [(testcase.id, testcase) for testcase in testcases]
        by_id = {}
        for key, testcase in items:
            if key != testcase.id:
                raise ValueError("Testcase %r of subtask %d is stored under "
                                 "id %r." % (testcase.id, id, key))
            if testcase.subtask != id:
                raise ValueError("Testcase %r belongs to subtask %r, not %d."
                                 % (testcase.id, testcase.subtask, id))
            if key in by_id:
                raise ValueError("Duplicate testcase %r in subtask %d."
                                 % (key, id))
            by_id[key] = testcase

        self.id = id
        self.max_score = max_score
        self.testcases = MappingProxyType(by_id)
        self.description = description

    def __repr__(self):
        return "<Subtask %d (%g points, %d testcases)>" % (
            self.id, self.max_score, len(self.testcases))


class SolutionInfo:
    """A solution shipped with the task, and what it should score.

    path (str): the solution file, as named in the events.
    language (str|None): language name, if known.
    subtask_expected_scores ({int: float}|None): expected score of
        each subtask; subtasks not listed are not checked.
    expected_score_min (float|None), expected_score_max (float|None):
        bounds on the total score.

    """

    def __init__(self, path: str, language: str | None = None,
                 subtask_expected_scores: Mapping[int, float] | None = None,
                 expected_score_min: float | None = None,
                 expected_score_max: float | None = None):
        self.path = path
        self.language = language
        self.subtask_expected_scores = (
            MappingProxyType({int(k): float(v)
                              for k, v in subtask_expected_scores.items()})
            if subtask_expected_scores is not None else None)
        self.expected_score_min = expected_score_min
        self.expected_score_max = expected_score_max

    @property
    def has_expectations(self) -> bool:
        return (self.subtask_expected_scores is not None
                or self.expected_score_min is not None
                or self.expected_score_max is not None)

    def __repr__(self):
        return "<SolutionInfo %s>" % self.path


class Task:
    """An immutable task definition.

    name (str): short identifier.
    path (str|None): task directory, None for tasks built in memory.
    title (str|None): human readable name.
    time_limit (float|None): seconds.
    memory_limit (int|None): bytes.
    subtasks ({int: Subtask}): read-only; ids are exactly 0..n-1, in
        order.
    solutions ({str: SolutionInfo}): read-only, keyed by path.

    raise (ValueError): if the subtask ids are not dense or the limits
        are not positive.

    """

    def __init__(self, name: str,
                 subtasks: Iterable[Subtask],
                 path: str | None = None,
                 title: str | None = None,
                 time_limit: float | None = None,
                 memory_limit: int | None = None,
                 solutions: Iterable[SolutionInfo] = ()):
        subtasks = list(subtasks)
        for expected_id, subtask in enumerate(subtasks):
            if subtask.id != expected_id:
                raise ValueError(
                    "Subtask ids must be dense and in order: expected %d, "
                    "got %d." % (expected_id, subtask.id))

        if time_limit is not None:
            time_limit = float(time_limit)
            if not time_limit > 0.0:
                raise ValueError("Time limit must be positive, got %r."
                                 % time_limit)
        if memory_limit is not None:
            if isinstance(memory_limit, bool) \
                    or not isinstance(memory_limit, int) \
                    or memory_limit <= 0:
                raise ValueError("Memory limit must be a positive number of "
                                 "bytes, got %r." % (memory_limit,))

        by_path = {}
        for solution in solutions:
            if solution.path in by_path:
                raise ValueError("Duplicate solution %s." % solution.path)
            by_path[solution.path] = solution

        self.name = name
        self.path = path
        self.title = title
        self.time_limit = time_limit
        self.memory_limit = memory_limit
        self.subtasks = MappingProxyType(
            {subtask.id: subtask for subtask in subtasks})
        self.solutions = MappingProxyType(by_path)

    @property
    def max_score(self) -> float:
        return sum(subtask.max_score for subtask in self.subtasks.values())

    def has_testcase(self, subtask: int, testcase: int) -> bool:
        return subtask in self.subtasks \
            and testcase in self.subtasks[subtask].testcases

    def testcase_keys(self) -> list[tuple[int, int]]:
        """Return every (subtask, testcase) pair, in definition order."""
        return [(subtask.id, testcase_id)
                for subtask in self.subtasks.values()
                for testcase_id in subtask.testcases]

    def __repr__(self):
        return "<Task %s (%d subtasks)>" % (self.name, len(self.subtasks))
