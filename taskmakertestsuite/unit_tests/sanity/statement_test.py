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

"""Tests for StatementPresent."""

import os
import shutil
import tempfile
import unittest

from taskmaker.grading.diagnostics import Diagnostics
from taskmaker.grading.errors import CheckError, EvaluationAborted
from taskmaker.grading.evaluation import Evaluation
from taskmaker.sanity import SanityCheckRegistry
from taskmaker.sanity.statement import StatementPresent
from taskmakertestsuite.unit_tests.taskfixtures import make_task


class TestStatementPresent(unittest.TestCase):

    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        self.registry = SanityCheckRegistry([StatementPresent()])

    def tearDown(self):
        shutil.rmtree(self.base_dir)

    def test_missing_statement(self):
        task = make_task(path=self.base_dir)
        evaluation = Evaluation(task, checks=self.registry)
        evaluation.start()

        self.assertFalse(evaluation.aborted)
        entries = list(evaluation.diagnostics)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].severity, "Warning")
        self.assertEqual(entries[0].message,
                         "statement/statement.md does not exist")
        self.assertEqual(entries[0].origin, "StatementPresent")

    def test_statement_present(self):
        os.mkdir(os.path.join(self.base_dir, "statement"))
        with open(os.path.join(self.base_dir, "statement", "statement.md"),
                  "wt", encoding="utf-8") as f:
            f.write("# Statement\n")
        diagnostics = Diagnostics()
        self.registry.run_pre_hooks(make_task(path=self.base_dir),
                                    diagnostics)
        self.assertEqual(len(diagnostics), 0)

    def test_missing_directory(self):
        diagnostics = Diagnostics()
        task = make_task(path=os.path.join(self.base_dir, "nope"))
        with self.assertRaises(EvaluationAborted) as context:
            self.registry.run_pre_hooks(task, diagnostics)
        self.assertIsInstance(context.exception.failures[0].error,
                              CheckError)
        self.assertEqual(len(diagnostics.errors), 1)


if __name__ == "__main__":
    unittest.main()
