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

from taskmaker.grading.status import ACCEPTED, SKIPPED, WRONG_ANSWER, \
    TestcaseEvaluationStatus
from taskmakertestsuite.expectations import TaskExpectations


expectations = TaskExpectations() \
    .time_limit(1.0) \
    .memory_limit(64 * 1024 * 1024) \
    .max_score(100.0) \
    .subtask_scores([0.0, 30.0, 70.0]) \
    .must_compile("sol.cpp") \
    .must_compile("wrong.cpp") \
    .must_not_compile("not_compile.cpp") \
    .not_compiled("grader.cpp") \
    .solution_score("sol.cpp", [0.0, 30.0, 70.0]) \
    .solution_score("wrong.cpp", [0.0, 30.0, 0.0]) \
    .solution_score("not_compile.cpp", [0.0, 0.0, 0.0]) \
    .solution_statuses("sol.cpp", [ACCEPTED]) \
    .solution_statuses("wrong.cpp", [
        ACCEPTED, ACCEPTED, ACCEPTED, WRONG_ANSWER,
        TestcaseEvaluationStatus.partial(0.5)]) \
    .solution_statuses("not_compile.cpp", [SKIPPED])
