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

"""Tests for the pairing of static testcases."""

import os
import shutil
import tempfile
import unittest

from taskmakercommon.testcases import numbered_template_regex, \
    pair_numbered_names, pair_numbered_files


class TestPairNumberedNames(unittest.TestCase):

    def setUp(self):
        self.input_re = numbered_template_regex("input*.txt")
        self.output_re = numbered_template_regex("output*.txt")

    def test_template(self):
        self.assertEqual(self.input_re.match("input12.txt").group(1), "12")
        self.assertIsNone(self.input_re.match("input.txt"))
        self.assertIsNone(self.input_re.match("input1.txt.bak"))
        with self.assertRaises(ValueError):
            numbered_template_regex("input.txt")
        with self.assertRaises(ValueError):
            numbered_template_regex("in*put*.txt")

    def test_pairs_sorted_by_number(self):
        pairs = pair_numbered_names(
            ["input10.txt", "input2.txt", "README"],
            ["output2.txt", "output10.txt"],
            self.input_re, self.output_re)
        self.assertEqual(pairs, [(2, "input2.txt", "output2.txt"),
                                 (10, "input10.txt", "output10.txt")])

    def test_missing_side(self):
        with self.assertRaises(ValueError) as context:
            pair_numbered_names(["input0.txt", "input1.txt"],
                                ["output0.txt", "output2.txt"],
                                self.input_re, self.output_re)
        self.assertIn("Missing outputs for: 1", str(context.exception))
        self.assertIn("Missing inputs for: 2", str(context.exception))

    def test_duplicate_number(self):
        with self.assertRaises(ValueError):
            pair_numbered_names(["input1.txt", "input01.txt"],
                                ["output1.txt"],
                                self.input_re, self.output_re)


class TestPairNumberedFiles(unittest.TestCase):

    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        for folder, name in [("input", "input0.txt"),
                             ("output", "output0.txt")]:
            os.makedirs(os.path.join(self.base_dir, folder), exist_ok=True)
            with open(os.path.join(self.base_dir, folder, name), "wt",
                      encoding="utf-8") as f:
                f.write("1\n")

    def tearDown(self):
        shutil.rmtree(self.base_dir)

    def test_paths_joined(self):
        pairs = pair_numbered_files(os.path.join(self.base_dir, "input"),
                                    os.path.join(self.base_dir, "output"))
        self.assertEqual(pairs, [(
            0,
            os.path.join(self.base_dir, "input", "input0.txt"),
            os.path.join(self.base_dir, "output", "output0.txt"))])


if __name__ == "__main__":
    unittest.main()
