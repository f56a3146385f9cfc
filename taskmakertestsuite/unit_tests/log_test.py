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

"""Tests for the logging setup."""

import io
import logging
import sys
import unittest

from taskmaker.log import CustomFormatter, has_color_support, \
    setup_logging, shell_handler


class TestCustomFormatter(unittest.TestCase):

    def make_record(self, level, msg, *args):
        return logging.LogRecord("taskmaker.test", level, __file__, 1,
                                 msg, args, None)

    def test_plain(self):
        formatted = CustomFormatter(colors=False).format(
            self.make_record(logging.WARNING, "Solution %s scored %g.",
                             "sol.cpp", 30))
        self.assertTrue(formatted.endswith(
            " - WARNING [taskmaker.test] Solution sol.cpp scored 30."))
        self.assertNotIn("\033[", formatted)

    def test_colors(self):
        formatted = CustomFormatter(colors=True).format(
            self.make_record(logging.ERROR, "boom"))
        self.assertIn("\033[1;31mERROR\033[0m", formatted)

    def test_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = logging.LogRecord("taskmaker.test", logging.ERROR,
                                       __file__, 1, "failed", (),
                                       sys.exc_info())
        formatted = CustomFormatter().format(record)
        self.assertIn("Traceback", formatted)
        self.assertIn("ValueError: bad value", formatted)


class TestHasColorSupport(unittest.TestCase):

    def test_not_a_tty(self):
        self.assertFalse(has_color_support(io.StringIO()))

    def test_no_isatty(self):
        self.assertFalse(has_color_support(object()))


class TestSetupLogging(unittest.TestCase):

    def setUp(self):
        self.root_logger = logging.getLogger()
        self.old_level = self.root_logger.level
        self.old_handlers = list(self.root_logger.handlers)

    def tearDown(self):
        self.root_logger.handlers = self.old_handlers
        self.root_logger.setLevel(self.old_level)

    def test_levels(self):
        setup_logging()
        self.assertEqual(self.root_logger.level, logging.INFO)
        self.assertEqual(shell_handler.level, logging.INFO)
        setup_logging(verbose=True)
        self.assertEqual(self.root_logger.level, logging.DEBUG)
        self.assertEqual(shell_handler.level, logging.DEBUG)

    def test_handler_added_once(self):
        setup_logging()
        setup_logging()
        self.assertEqual(self.root_logger.handlers.count(shell_handler), 1)


if __name__ == "__main__":
    unittest.main()
