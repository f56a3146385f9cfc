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

"""Checks on the statement of a task."""

import os

from taskmakercommon.constants import STATEMENT_PATH
from taskmaker.grading.errors import CheckError
from .base import SanityCheck


__all__ = ["StatementPresent"]


class StatementPresent(SanityCheck):
    """Check that the statement file is present."""

    name = "StatementPresent"

    def pre_hook(self, task, diagnostics):
        if task.path is None:
            raise CheckError("Task %s has no directory to inspect."
                             % task.name)
        if not os.path.isdir(task.path):
            raise CheckError("Task directory %s is not accessible."
                             % task.path)
        if not os.path.exists(os.path.join(task.path, STATEMENT_PATH)):
            diagnostics.warning("%s does not exist" % STATEMENT_PATH)
