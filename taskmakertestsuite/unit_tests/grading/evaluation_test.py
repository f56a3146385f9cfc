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

"""Tests for the lifecycle of an evaluation."""

import unittest

from taskmaker.grading.errors import CheckError, EvaluationAborted, \
    MalformedEvent, ProtocolViolation
from taskmaker.grading.evaluation import Evaluation
from taskmaker.grading.events import read_events
from taskmaker.grading.status import ACCEPTED, RUNNING, WRONG_ANSWER
from taskmaker.sanity import SanityCheck, SanityCheckRegistry
from taskmakertestsuite.unit_tests.taskfixtures import make_task, \
    testcase_events


class RecordingCheck(SanityCheck):
    """Remember what the hooks saw."""

    name = "Recording"

    def __init__(self):
        self.evaluation = None
        self.pre_calls = 0
        self.post_snapshots = []

    def pre_hook(self, task, diagnostics):
        self.pre_calls += 1

    def post_hook(self, task, state, diagnostics):
        self.post_snapshots.append(
            (self.evaluation.finished, state.solution_score("a")))


class ErrorOnPreHook(SanityCheck):

    name = "ErrorOnPreHook"

    def pre_hook(self, task, diagnostics):
        diagnostics.error("The task is broken")


class FailingPreHook(SanityCheck):

    name = "FailingPreHook"

    def pre_hook(self, task, diagnostics):
        raise CheckError("cannot read")


class TestEvaluation(unittest.TestCase):

    def setUp(self):
        self.task = make_task([40.0, 60.0], 1)
        self.check = RecordingCheck()
        self.evaluation = Evaluation(
            self.task, checks=SanityCheckRegistry([self.check]))
        self.check.evaluation = self.evaluation

    def full_run(self):
        return (testcase_events("a", 0, 0, RUNNING, ACCEPTED)
                + testcase_events("a", 1, 1, WRONG_ANSWER))

    def test_run(self):
        state = self.evaluation.run(self.full_run())
        self.assertEqual(state.solution_score("a"), 40.0)
        self.assertEqual(self.check.pre_calls, 1)
        # Post-hooks see the closed evaluation and the final scores.
        self.assertEqual(self.check.post_snapshots, [(True, 40.0)])
        self.assertFalse(self.evaluation.aborted)

    def test_apply_before_start(self):
        with self.assertRaises(RuntimeError):
            self.evaluation.apply(self.full_run()[0])
        with self.assertRaises(RuntimeError):
            self.evaluation.finish()

    def test_start_twice(self):
        self.evaluation.start()
        with self.assertRaises(RuntimeError):
            self.evaluation.start()

    def test_event_after_finish(self):
        self.evaluation.start()
        self.evaluation.finish()
        with self.assertRaises(ProtocolViolation):
            self.evaluation.apply(self.full_run()[0])
        self.assertTrue(self.evaluation.diagnostics.has_errors)
        with self.assertRaises(RuntimeError):
            self.evaluation.finish()

    def test_early_end(self):
        state = self.evaluation.run(testcase_events("a", 0, 0, ACCEPTED))
        self.assertFalse(self.evaluation.aborted)
        self.assertFalse(state.is_complete())
        self.assertEqual(state.subtask_score("a", 0), 40.0)
        self.assertIsNone(state.solution_score("a"))
        self.assertEqual(self.check.post_snapshots, [(True, None)])

    def test_protocol_violation_aborts(self):
        events = testcase_events("a", 0, 0, ACCEPTED, WRONG_ANSWER)
        with self.assertRaises(ProtocolViolation):
            self.evaluation.run(events)
        self.assertTrue(self.evaluation.aborted)
        self.assertEqual(self.check.post_snapshots, [])
        self.assertEqual(self.evaluation.finish(), [])

    def test_malformed_stream_aborts(self):
        lines = ['{"type": "Warning", "message": "ok"}', '{"type": ']
        with self.assertRaises(MalformedEvent):
            self.evaluation.run(read_events(lines))
        self.assertTrue(self.evaluation.aborted)
        self.assertEqual(len(self.evaluation.diagnostics.errors), 1)
        self.assertEqual(self.check.post_snapshots, [])

    def test_event_type_not_a_string_aborts(self):
        lines = ['{"type": "Warning", "message": "ok"}',
                 '{"type": {"a": 1}}']
        with self.assertRaises(MalformedEvent):
            self.evaluation.run(read_events(lines))
        self.assertTrue(self.evaluation.aborted)
        self.assertEqual(len(self.evaluation.diagnostics.errors), 1)
        self.assertEqual(self.check.post_snapshots, [])


class TestPreHooksAbort(unittest.TestCase):

    def test_error_aborts(self):
        task = make_task()
        evaluation = Evaluation(
            task, checks=SanityCheckRegistry([ErrorOnPreHook()]))
        with self.assertRaises(EvaluationAborted):
            evaluation.start()
        self.assertTrue(evaluation.aborted)
        with self.assertRaises(ProtocolViolation):
            evaluation.apply(testcase_events("a", 0, 0, ACCEPTED)[0])

    def test_failure_aborts(self):
        recording = RecordingCheck()
        evaluation = Evaluation(
            make_task(),
            checks=SanityCheckRegistry([FailingPreHook(), recording]))
        recording.evaluation = evaluation
        with self.assertRaises(EvaluationAborted) as context:
            evaluation.run([])
        # The other pre-hooks ran anyway.
        self.assertEqual(recording.pre_calls, 1)
        self.assertEqual([failure.check_name
                          for failure in context.exception.failures],
                         ["FailingPreHook"])
        self.assertEqual(recording.post_snapshots, [])

    def test_default_checks_need_a_directory(self):
        evaluation = Evaluation(make_task())
        with self.assertRaises(EvaluationAborted):
            evaluation.start()


if __name__ == "__main__":
    unittest.main()
