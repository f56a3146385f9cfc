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

"""Tests for the configuration."""

import os
import shutil
import tempfile
import unittest

from taskmaker.conf import Config
from taskmaker.grading.errors import ConfigurationError


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.config = Config()
        self.base_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.base_dir)

    def write(self, content):
        path = os.path.join(self.base_dir, "taskmaker.yaml")
        with open(path, "wt", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_defaults(self):
        self.assertEqual(self.config.grading.score_tolerance, 1e-9)
        self.assertEqual(self.config.sanity.disabled, [])
        self.assertEqual(self.config.sanity.expected_max_score, 100.0)

    def test_update(self):
        self.config.update({"sanity": {"concurrency": 8,
                                       "disabled": ["TaskLimits"],
                                       "expected_max_score": 50}})
        self.assertEqual(self.config.sanity.concurrency, 8)
        self.assertEqual(self.config.sanity.disabled, ["TaskLimits"])
        self.assertIsInstance(self.config.sanity.expected_max_score, float)

    def test_unknown_keys_ignored(self):
        with self.assertLogs("taskmaker.conf", level="WARNING"):
            self.config.update({"nope": {}, "grading": {"nope": 1}})
        self.assertFalse(hasattr(self.config.grading, "nope"))

    def test_wrong_type(self):
        with self.assertRaises(ConfigurationError):
            self.config.update({"sanity": {"concurrency": "many"}})
        with self.assertRaises(ConfigurationError):
            self.config.update({"database": {"echo": 1}})
        with self.assertRaises(ConfigurationError):
            self.config.update({"sanity": ["concurrency"]})

    def test_load(self):
        path = self.write("database:\n  url: sqlite://\n")
        self.assertTrue(self.config.load(path))
        self.assertEqual(self.config.database.url, "sqlite://")
        self.assertEqual(self.config.loaded_from, path)

    def test_load_missing(self):
        self.assertFalse(
            self.config.load(os.path.join(self.base_dir, "missing.yaml")))

    def test_load_empty(self):
        self.assertTrue(self.config.load(self.write("")))

    def test_load_invalid(self):
        with self.assertRaises(ConfigurationError):
            self.config.load(self.write("grading: [unterminated\n"))


if __name__ == "__main__":
    unittest.main()
