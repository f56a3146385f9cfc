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

from taskmaker.grading.status import ACCEPTED, TIME_LIMIT_EXCEEDED
from taskmakertestsuite.expectations import TaskExpectations


expectations = TaskExpectations() \
    .time_limit(2.5) \
    .memory_limit(256 * 1024 * 1024) \
    .max_score(50.0) \
    .subtask_scores([50.0]) \
    .must_compile("sol.py") \
    .solution_score("sol.py", [0.0]) \
    .solution_statuses("sol.py", [ACCEPTED, TIME_LIMIT_EXCEEDED])
