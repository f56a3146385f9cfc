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

"""Checks on the structure of the task definition.

These only look at the Task object, never at the filesystem.

"""

from taskmaker import config
from .base import SanityCheck


__all__ = ["SubtaskScoresSum", "EmptySubtasks", "TaskLimits"]


class SubtaskScoresSum(SanityCheck):
    """Warn when the subtasks don't add up to the usual total."""

    name = "SubtaskScoresSum"

    def pre_hook(self, task, diagnostics):
        expected = config.sanity.expected_max_score
        if abs(task.max_score - expected) > config.grading.score_tolerance:
            diagnostics.warning(
                "The subtasks of %s are worth %g points, not %g"
                % (task.name, task.max_score, expected))


class EmptySubtasks(SanityCheck):
    """A subtask without testcases cannot tell solutions apart."""

    name = "EmptySubtasks"

    def pre_hook(self, task, diagnostics):
        for subtask in task.subtasks.values():
            if len(subtask.testcases) == 0:
                diagnostics.error("Subtask %d has no testcases" % subtask.id)


class TaskLimits(SanityCheck):

    name = "TaskLimits"

    def pre_hook(self, task, diagnostics):
        if task.time_limit is None:
            diagnostics.warning("The task has no time limit")
        if task.memory_limit is None:
            diagnostics.warning("The task has no memory limit")
