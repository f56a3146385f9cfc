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

"""Checks on the solutions shipped with a task.

The pre-hook looks for the files on disk; the post-hooks compare what
the evaluation produced with what the task author expected. A value
that is still unknown when the evaluation ends is never taken as a
failure of the solution: it is reported as unknown.

"""

import os

from taskmaker import config
from taskmakercommon.constants import COMPILATION_DONE
from taskmaker.grading.errors import CheckError
from .base import SanityCheck


__all__ = [
    "SolutionsPresent", "EvaluationComplete", "SolutionScores",
    "SolutionsCompiled",
]


class SolutionsPresent(SanityCheck):
    """Every solution listed by the task must exist on disk."""

    name = "SolutionsPresent"

    def pre_hook(self, task, diagnostics):
        if not task.solutions:
            return
        if task.path is None:
            raise CheckError("Task %s has no directory to inspect."
                             % task.name)
        for path in task.solutions:
            if not os.path.isfile(os.path.join(task.path, path)):
                diagnostics.warning("Solution %s does not exist" % path)


class EvaluationComplete(SanityCheck):
    """Report the solutions the evaluation left (partially) unknown."""

    name = "EvaluationComplete"

    def post_hook(self, task, state, diagnostics):
        for path in task.solutions:
            if not state.has_solution(path):
                diagnostics.warning("Solution %s was not evaluated" % path)
        for path in state.solutions:
            unresolved = state.unresolved_testcases(path)
            if unresolved:
                diagnostics.warning(
                    "Solution %s: the outcome of %d testcases is unknown"
                    % (path, len(unresolved)))


class SolutionScores(SanityCheck):
    """Compare the scores with the ones declared by the task author."""

    name = "SolutionScores"

    def post_hook(self, task, state, diagnostics):
        tolerance = config.grading.score_tolerance
        for path, info in task.solutions.items():
            if not info.has_expectations or not state.has_solution(path):
                continue

            if info.subtask_expected_scores is not None:
                for subtask_id, expected in \
                        info.subtask_expected_scores.items():
                    if subtask_id not in task.subtasks:
                        diagnostics.error(
                            "Solution %s: expected score for unknown "
                            "subtask %d" % (path, subtask_id))
                        continue
                    actual = state.subtask_score(path, subtask_id)
                    if actual is not None \
                            and abs(actual - expected) > tolerance:
                        diagnostics.error(
                            "Solution %s: subtask %d scored %g, expected %g"
                            % (path, subtask_id, actual, expected))

            score = state.solution_score(path)
            if score is None:
                continue
            if info.expected_score_min is not None \
                    and score < info.expected_score_min - tolerance:
                diagnostics.error(
                    "Solution %s scored %g, expected at least %g"
                    % (path, score, info.expected_score_min))
            if info.expected_score_max is not None \
                    and score > info.expected_score_max + tolerance:
                diagnostics.error(
                    "Solution %s scored %g, expected at most %g"
                    % (path, score, info.expected_score_max))


class SolutionsCompiled(SanityCheck):

    name = "SolutionsCompiled"

    def post_hook(self, task, state, diagnostics):
        for path in task.solutions:
            status = state.compilation(path)
            # Not compiled at all, e.g. an interpreted language.
            if status is None:
                continue
            if status.state != COMPILATION_DONE:
                diagnostics.warning("Solution %s did not compile (%s)"
                                    % (path, status.state))
