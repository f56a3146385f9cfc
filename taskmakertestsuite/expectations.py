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

"""Expectations on the outcome of the evaluation of a task.

Used by the tests to describe what a recorded run should produce:

    TaskExpectations() \
        .time_limit(1.0) \
        .must_compile("sol.cpp") \
        .solution_score("sol.cpp", [40.0, 60.0]) \
        .solution_statuses("wrong.cpp", [ACCEPTED, WRONG_ANSWER]) \
        .replay(task, events)

Files and solutions are referred to by their base name, so that the
expectations don't depend on where the task lives.

"""

import logging
import os

from taskmaker.grading.evaluation import Evaluation
from taskmaker.sanity import SanityCheckRegistry
from taskmakercommon.constants import COMPILATION_DONE, COMPILATION_FAILED


__all__ = ["TaskExpectations"]


logger = logging.getLogger(__name__)


TOLERANCE = 1e-9


def _close(a, b):
    return abs(a - b) <= TOLERANCE


class TaskExpectations:
    """A fluent collection of expectations, checked all at once."""

    def __init__(self):
        self._time_limit = None
        self._memory_limit = None
        self._max_score = None
        self._must_compile = []
        self._must_not_compile = []
        self._not_compiled = []
        self._subtask_scores = None
        self._solution_scores = {}
        self._solution_statuses = {}

    def time_limit(self, time_limit):
        self._time_limit = time_limit
        return self

    def memory_limit(self, memory_limit):
        self._memory_limit = memory_limit
        return self

    def max_score(self, max_score):
        self._max_score = max_score
        return self

    def must_compile(self, name):
        self._must_compile.append(name)
        return self

    def must_not_compile(self, name):
        self._must_not_compile.append(name)
        return self

    def not_compiled(self, name):
        self._not_compiled.append(name)
        return self

    def subtask_scores(self, scores):
        """Expect the max scores of the subtasks, in id order."""
        self._subtask_scores = list(scores)
        return self

    def solution_score(self, name, scores):
        """Expect the score of each subtask of a solution, in id order.

        The total score is expected to be their sum.

        """
        self._solution_scores.setdefault(name, list(scores))
        return self

    def solution_statuses(self, name, statuses):
        """Expect the statuses of the testcases of a solution.

        Statuses are matched in (subtask, testcase) order; the last one
        stands for all the testcases after it.

        """
        statuses = list(statuses)
        if not statuses:
            raise ValueError("At least one status is needed.")
        self._solution_statuses.setdefault(name, statuses)
        return self

    def check(self, state):
        """Check every expectation against a result tree.

        state (ResultTree): the tree to check.

        raise (AssertionError): at the first expectation not met.

        """
        self._check_limits(state)
        self._check_compilations(state)
        self._check_subtasks(state)
        self._check_solution_scores(state)
        self._check_solution_statuses(state)

    def replay(self, task, events, checks=None):
        """Fold events into a new tree and check it.

        task (Task): the task the events refer to.
        events ([Event]): the recorded events.
        checks (SanityCheckRegistry|None): sanity checks to run; none
            if None.

        return (Evaluation): the finished evaluation.

        """
        if checks is None:
            checks = SanityCheckRegistry()
        evaluation = Evaluation(task, checks=checks)
        evaluation.run(events)
        self.check(evaluation.state)
        return evaluation

    def _check_limits(self, state):
        task = state.task
        if self._time_limit is not None and task.time_limit is not None:
            assert _close(self._time_limit, task.time_limit), \
                "Wrong time limit: expected %g, got %g" % (
                    self._time_limit, task.time_limit)
        if self._memory_limit is not None and task.memory_limit is not None:
            assert self._memory_limit == task.memory_limit, \
                "Wrong memory limit: expected %d, got %d" % (
                    self._memory_limit, task.memory_limit)
        if self._max_score is not None:
            assert _close(self._max_score, state.max_score), \
                "Wrong max score: expected %g, got %g" % (
                    self._max_score, state.max_score)

    def _check_compilations(self, state):
        compilations = {os.path.basename(file): status
                        for file, status in state.compilations.items()}
        for name in self._must_compile:
            assert name in compilations, \
                "Expecting %s to compile, but it was never compiled" % name
            assert compilations[name].state == COMPILATION_DONE, \
                "Expecting %s to compile, but was %s" % (
                    name, compilations[name].state)
        for name in self._must_not_compile:
            assert name in compilations, \
                "Expecting %s not to compile, but it was never compiled" \
                % name
            assert compilations[name].state == COMPILATION_FAILED, \
                "Expecting %s not to compile, but was %s" % (
                    name, compilations[name].state)
        for name in self._not_compiled:
            assert name not in compilations, \
                "Expecting %s not to be compiled, but was %s" % (
                    name, compilations[name].state)

    def _check_subtasks(self, state):
        if self._subtask_scores is None:
            return
        subtasks = state.task.subtasks
        assert len(self._subtask_scores) == len(subtasks), \
            "Expecting %d subtasks, got %d" % (
                len(self._subtask_scores), len(subtasks))
        for subtask_id, expected in enumerate(self._subtask_scores):
            actual = subtasks[subtask_id].max_score
            assert _close(expected, actual), \
                "Subtask %d is worth %g, expected %g" % (
                    subtask_id, actual, expected)

    def _evaluations(self, state):
        return {os.path.basename(path): evaluation
                for path, evaluation in state.evaluations().items()}

    def _check_solution_scores(self, state):
        evaluations = self._evaluations(state)
        for name, scores in self._solution_scores.items():
            assert name in evaluations, "Solution %s was not evaluated" % name
            evaluation = evaluations[name]
            assert evaluation.score is not None, \
                "Solution %s has no score" % name
            assert _close(sum(scores), evaluation.score), \
                "Solution %s scored %g, expected %g" % (
                    name, evaluation.score, sum(scores))
            assert len(scores) == len(evaluation.subtasks), \
                "Solution %s: expecting %d subtasks, got %d" % (
                    name, len(scores), len(evaluation.subtasks))
            for subtask_id, expected in enumerate(scores):
                actual = evaluation.subtasks[subtask_id].score
                assert actual is not None and _close(expected, actual), \
                    "Solution %s, subtask %d scored %r, expected %g" % (
                        name, subtask_id, actual, expected)

    def _check_solution_statuses(self, state):
        evaluations = self._evaluations(state)
        for name, statuses in self._solution_statuses.items():
            assert name in evaluations, "Solution %s was not evaluated" % name
            evaluation = evaluations[name]
            actuals = [
                (subtask_id, testcase_id,
                 evaluation.subtasks[subtask_id].testcases[testcase_id])
                for subtask_id in sorted(evaluation.subtasks)
                for testcase_id in sorted(
                    evaluation.subtasks[subtask_id].testcases)]
            for index, (subtask_id, testcase_id, actual) \
                    in enumerate(actuals):
                expected = statuses[min(index, len(statuses) - 1)]
                assert expected == actual, \
                    "Solution %s, testcase %d.%d: expected %r, got %r" % (
                        name, subtask_id, testcase_id, expected, actual)
