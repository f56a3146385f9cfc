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

"""Tests for the checks on the task structure."""

import unittest

from taskmaker.grading.diagnostics import Diagnostics
from taskmaker.grading.errors import EvaluationAborted
from taskmaker.sanity import SanityCheckRegistry
from taskmaker.sanity.task import SubtaskScoresSum, EmptySubtasks, \
    TaskLimits
from taskmakertestsuite.unit_tests.taskfixtures import make_task


def run_pre_hook(check, task):
    diagnostics = Diagnostics()
    SanityCheckRegistry([check]).run_pre_hooks(task, diagnostics)
    return [entry.message for entry in diagnostics]


class TestSubtaskScoresSum(unittest.TestCase):

    def test_hundred(self):
        self.assertEqual(
            run_pre_hook(SubtaskScoresSum(), make_task([40, 60])), [])

    def test_other_total(self):
        self.assertEqual(
            run_pre_hook(SubtaskScoresSum(), make_task([40, 50])),
            ["The subtasks of task are worth 90 points, not 100"])


class TestEmptySubtasks(unittest.TestCase):

    def test_empty_subtask_aborts(self):
        diagnostics = Diagnostics()
        registry = SanityCheckRegistry([EmptySubtasks()])
        with self.assertRaises(EvaluationAborted):
            registry.run_pre_hooks(make_task([40, 60], [0, 2]), diagnostics)
        self.assertEqual([entry.message for entry in diagnostics.errors],
                         ["Subtask 0 has no testcases"])


class TestTaskLimits(unittest.TestCase):

    def test_no_limits(self):
        self.assertEqual(run_pre_hook(TaskLimits(), make_task()),
                         ["The task has no time limit",
                          "The task has no memory limit"])

    def test_limits(self):
        task = make_task(time_limit=1.0, memory_limit=256 * 1024 * 1024)
        self.assertEqual(run_pre_hook(TaskLimits(), task), [])


if __name__ == "__main__":
    unittest.main()
