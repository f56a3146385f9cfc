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

"""Tests for the aggregator folding events into the result tree."""

import itertools
import unittest

from taskmaker.grading.aggregator import Aggregator, AGGREGATOR_ORIGIN, \
    PIPELINE_ORIGIN
from taskmaker.grading.errors import ProtocolViolation
from taskmaker.grading.events import WarningEvent, ErrorEvent, \
    SubtaskScoreEvent, SolutionScoreEvent
from taskmaker.grading.state import ResultTree
from taskmaker.grading.status import CompilationStatus, \
    TestcaseEvaluationStatus, PENDING, RUNNING, ACCEPTED, WRONG_ANSWER, \
    SKIPPED, INTERNAL_ERROR, TIME_LIMIT_EXCEEDED
from taskmakertestsuite.unit_tests.taskfixtures import make_task, \
    testcase_events, compilation_events, compiled


def partial(score):
    return TestcaseEvaluationStatus.partial(score)


class TestAggregator(unittest.TestCase):

    def setUp(self):
        # Subtask 0: testcases 0 and 1; subtask 1: testcases 2 and 3.
        self.task = make_task([40.0, 60.0], 2, solutions=["sol.cpp"])
        self.aggregator = Aggregator(self.task)
        self.tree = self.aggregator.tree

    def apply(self, *event_lists):
        for events in event_lists:
            self.aggregator.apply_all(events)

    def test_forty_sixty(self):
        self.apply(
            testcase_events("sol.cpp", 0, 0, PENDING, RUNNING, ACCEPTED),
            testcase_events("sol.cpp", 0, 1, RUNNING, ACCEPTED),
            testcase_events("sol.cpp", 1, 2, ACCEPTED),
            testcase_events("sol.cpp", 1, 3, RUNNING, WRONG_ANSWER))

        self.assertEqual(self.tree.subtask_score("sol.cpp", 0), 40.0)
        self.assertEqual(self.tree.subtask_score("sol.cpp", 1), 0.0)
        self.assertEqual(self.tree.solution_score("sol.cpp"), 40.0)
        self.assertFalse(self.aggregator.diagnostics.has_errors)

    def test_partial_uses_minimum(self):
        self.apply(testcase_events("sol.cpp", 1, 2, partial(0.8)),
                   testcase_events("sol.cpp", 1, 3, partial(0.5)))
        self.assertAlmostEqual(self.tree.subtask_score("sol.cpp", 1), 30.0)

    def test_unknown_is_not_zero(self):
        self.apply(testcase_events("sol.cpp", 1, 2, WRONG_ANSWER),
                   testcase_events("sol.cpp", 1, 3, RUNNING))
        self.assertIsNone(self.tree.subtask_score("sol.cpp", 1))
        self.assertIsNone(self.tree.solution_score("sol.cpp"))

        self.apply(testcase_events("sol.cpp", 1, 3, TIME_LIMIT_EXCEEDED))
        self.assertEqual(self.tree.subtask_score("sol.cpp", 1), 0.0)
        # Subtask 0 is still unknown, and so is the total.
        self.assertIsNone(self.tree.subtask_score("sol.cpp", 0))
        self.assertIsNone(self.tree.solution_score("sol.cpp"))

    def test_skipped_and_internal_error_score_zero(self):
        self.apply(testcase_events("sol.cpp", 0, 0, SKIPPED),
                   testcase_events("sol.cpp", 0, 1, ACCEPTED),
                   testcase_events("sol.cpp", 1, 2, ACCEPTED),
                   testcase_events("sol.cpp", 1, 3, INTERNAL_ERROR))
        self.assertEqual(self.tree.solution_score("sol.cpp"), 0.0)

    def test_pending_straight_to_final(self):
        self.apply(testcase_events("sol.cpp", 0, 0, PENDING, ACCEPTED))
        self.assertEqual(self.tree.testcase_status("sol.cpp", 0, 0),
                         ACCEPTED)

    def test_repeated_running(self):
        self.apply(testcase_events("sol.cpp", 0, 0, RUNNING, RUNNING))
        self.assertEqual(self.tree.testcase_status("sol.cpp", 0, 0), RUNNING)

    def test_final_status_is_immutable(self):
        self.apply(testcase_events("sol.cpp", 0, 0, ACCEPTED))
        for status in [WRONG_ANSWER, ACCEPTED, RUNNING, PENDING]:
            with self.assertRaises(ProtocolViolation):
                self.aggregator.apply_all(
                    testcase_events("sol.cpp", 0, 0, status))
        self.assertEqual(self.tree.testcase_status("sol.cpp", 0, 0),
                         ACCEPTED)
        errors = self.aggregator.diagnostics.errors
        self.assertEqual(len(errors), 4)
        self.assertTrue(all(entry.origin == AGGREGATOR_ORIGIN
                            for entry in errors))

    def test_no_going_back(self):
        self.apply(testcase_events("sol.cpp", 0, 0, RUNNING))
        with self.assertRaises(ProtocolViolation):
            self.apply(testcase_events("sol.cpp", 0, 0, PENDING))

    def test_unknown_testcase(self):
        with self.assertRaises(ProtocolViolation):
            self.apply(testcase_events("sol.cpp", 2, 0, ACCEPTED))
        with self.assertRaises(ProtocolViolation):
            # Testcase 2 belongs to subtask 1.
            self.apply(testcase_events("sol.cpp", 0, 2, ACCEPTED))
        self.assertFalse(self.tree.has_solution("sol.cpp"))

    def test_order_independence(self):
        statuses = [ACCEPTED, partial(0.3), partial(0.7)]
        task = make_task([10.0, 90.0], [1, 3])
        scores = set()
        for permutation in itertools.permutations(zip([1, 2, 3], statuses)):
            aggregator = Aggregator(task)
            for testcase_id, status in permutation:
                aggregator.apply_all(
                    testcase_events("a", 1, testcase_id, RUNNING, status))
            scores.add(round(aggregator.tree.subtask_score("a", 1), 9))
        self.assertEqual(scores, {27.0})

    def test_sum_invariant(self):
        task = make_task([33.3, 33.3, 33.4], 2)
        aggregator = Aggregator(task)
        contributions = [partial(0.1), ACCEPTED, partial(0.7), partial(0.9),
                         ACCEPTED, ACCEPTED]
        for (subtask_id, testcase_id), status in zip(task.testcase_keys(),
                                                     contributions):
            aggregator.apply_all(
                testcase_events("a", subtask_id, testcase_id, status))

        tree = aggregator.tree
        subtask_scores = [tree.subtask_score("a", subtask_id)
                          for subtask_id in task.subtasks]
        self.assertLessEqual(
            abs(tree.solution_score("a") - sum(subtask_scores)), 1e-9)
        self.assertAlmostEqual(tree.solution_score("a"), 3.33 + 23.31 + 33.4)

    def test_empty_subtask_scores_zero(self):
        task = make_task([10.0, 20.0], [0, 1])
        aggregator = Aggregator(task)
        aggregator.apply_all(testcase_events("a", 1, 0, RUNNING))
        self.assertEqual(aggregator.tree.subtask_score("a", 0), 0.0)
        self.assertIsNone(aggregator.tree.solution_score("a"))
        aggregator.apply_all(testcase_events("a", 1, 0, ACCEPTED))
        self.assertEqual(aggregator.tree.solution_score("a"), 20.0)

    def test_solutions_interleave(self):
        self.apply(testcase_events("a", 0, 0, RUNNING),
                   testcase_events("b", 0, 0, ACCEPTED),
                   testcase_events("a", 0, 0, WRONG_ANSWER),
                   testcase_events("b", 0, 1, ACCEPTED),
                   testcase_events("a", 0, 1, ACCEPTED))
        self.assertEqual(self.tree.subtask_score("a", 0), 0.0)
        self.assertEqual(self.tree.subtask_score("b", 0), 40.0)
        self.assertEqual(self.tree.solutions, ["a", "b"])

    def test_tree_of_another_task(self):
        with self.assertRaises(ValueError):
            Aggregator(self.task, ResultTree(make_task()))


class TestCompilations(unittest.TestCase):

    def setUp(self):
        self.task = make_task([40.0, 60.0], 2, solutions=["sol.cpp"])
        self.aggregator = Aggregator(self.task)
        self.tree = self.aggregator.tree

    def test_last_write_wins(self):
        self.aggregator.apply_all(compilation_events(
            "sol.cpp", CompilationStatus.failed({"exit_status": 1}),
            CompilationStatus.running()))
        self.assertEqual(self.tree.compilation("sol.cpp"),
                         CompilationStatus.running())
        self.assertFalse(self.aggregator.diagnostics.has_errors)

    def test_failed_compilation_scores_zero(self):
        self.aggregator.apply_all(compilation_events(
            "sol.cpp", CompilationStatus.failed()))
        self.assertTrue(self.tree.has_solution("sol.cpp"))
        self.assertEqual(self.tree.solution_score("sol.cpp"), 0.0)
        self.assertIsNone(self.tree.subtask_score("sol.cpp", 0))

        # A later status withdraws the zero.
        self.aggregator.apply_all(compilation_events(
            "sol.cpp", CompilationStatus.running()))
        self.assertIsNone(self.tree.solution_score("sol.cpp"))

    def test_successful_compilation(self):
        self.aggregator.apply_all(compiled("sol.cpp"))
        self.assertTrue(self.tree.has_solution("sol.cpp"))
        self.assertIsNone(self.tree.solution_score("sol.cpp"))

    def test_other_files(self):
        self.aggregator.apply_all(compilation_events(
            "checker.cpp", CompilationStatus.failed()))
        self.assertEqual(self.tree.compilation("checker.cpp").state,
                         "Failed")
        self.assertFalse(self.tree.has_solution("checker.cpp"))


class TestPipelineMessages(unittest.TestCase):

    def setUp(self):
        self.task = make_task([40.0, 60.0], 1)
        self.aggregator = Aggregator(self.task)
        self.diagnostics = self.aggregator.diagnostics

    def test_warning_and_error(self):
        self.aggregator.apply(WarningEvent("slow"))
        self.aggregator.apply(ErrorEvent("broken"))
        self.assertEqual([(entry.severity, entry.message, entry.origin)
                          for entry in self.diagnostics],
                         [("Warning", "slow", PIPELINE_ORIGIN),
                          ("Error", "broken", PIPELINE_ORIGIN)])

    def test_reported_scores_agree(self):
        self.aggregator.apply(SubtaskScoreEvent("a", 0, 40.0))
        self.aggregator.apply(SolutionScoreEvent("a", 40.0))
        self.aggregator.apply_all(testcase_events("a", 0, 0, ACCEPTED))
        self.aggregator.apply_all(testcase_events("a", 1, 1, WRONG_ANSWER))
        self.assertFalse(self.diagnostics.has_errors)

    def test_reported_scores_disagree(self):
        self.aggregator.apply_all(testcase_events("a", 0, 0, ACCEPTED))
        self.aggregator.apply_all(testcase_events("a", 1, 1, WRONG_ANSWER))
        self.aggregator.apply(SubtaskScoreEvent("a", 1, 60.0))
        self.aggregator.apply(SolutionScoreEvent("a", 100.0))

        # The derived scores are kept.
        self.assertEqual(self.aggregator.tree.subtask_score("a", 1), 0.0)
        self.assertEqual(self.aggregator.tree.solution_score("a"), 40.0)
        self.assertEqual(len(self.diagnostics.errors), 2)

    def test_reported_score_of_unknown_subtask(self):
        with self.assertRaises(ProtocolViolation):
            self.aggregator.apply(SubtaskScoreEvent("a", 7, 1.0))


if __name__ == "__main__":
    unittest.main()
