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

"""Helpers building small tasks and events for the tests."""

from taskmaker.grading.events import CompilationEvent, TestcaseEvent
from taskmaker.grading.status import CompilationStatus
from taskmaker.grading.task import Task, Subtask, Testcase, SolutionInfo


def make_task(scores=(40.0, 60.0), testcases=2, solutions=(), name="task",
              **kwargs):
    """Return an in-memory task.

    scores ([float]): the max score of each subtask.
    testcases (int|[int]): number of testcases of every subtask, or of
        each subtask. Testcase ids are numbered across the task.
    solutions ([str|SolutionInfo]): the solutions of the task.

    """
    if isinstance(testcases, int):
        testcases = [testcases] * len(scores)
    subtasks = []
    next_id = 0
    for subtask_id, (score, count) in enumerate(zip(scores, testcases)):
        subtasks.append(Subtask(subtask_id, score, [
            Testcase(testcase_id, subtask_id)
            for testcase_id in range(next_id, next_id + count)]))
        next_id += count
    solutions = [solution if isinstance(solution, SolutionInfo)
                 else SolutionInfo(solution) for solution in solutions]
    return Task(name, subtasks, solutions=solutions, **kwargs)


def testcase_keys(task, subtask_id):
    return list(task.subtasks[subtask_id].testcases)


def testcase_events(solution, subtask, testcase, *statuses):
    return [TestcaseEvent(solution, subtask, testcase, status)
            for status in statuses]


def compilation_events(file, *statuses):
    return [CompilationEvent(file, status) for status in statuses]


def compiled(file):
    """Events of a successful compilation."""
    return compilation_events(file, CompilationStatus.pending(),
                              CompilationStatus.running(),
                              CompilationStatus.done({"time": 0.1}))


# Not tests, despite the names.
testcase_keys.__test__ = False
testcase_events.__test__ = False
