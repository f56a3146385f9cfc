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

"""Sanity checks run around the evaluation of a task.

"""

import logging

from taskmaker import config
from .base import SanityCheck, CheckDiagnostics, SanityCheckRegistry, \
    PRE_HOOK, POST_HOOK
from .solutions import SolutionsPresent, EvaluationComplete, \
    SolutionScores, SolutionsCompiled
from .statement import StatementPresent
from .task import SubtaskScoresSum, EmptySubtasks, TaskLimits


__all__ = [
    "SanityCheck", "CheckDiagnostics", "SanityCheckRegistry",
    "PRE_HOOK", "POST_HOOK", "DEFAULT_CHECKS", "get_sanity_checks",
]


logger = logging.getLogger(__name__)


# In the order they are registered.
DEFAULT_CHECKS = [
    StatementPresent,
    SubtaskScoresSum,
    EmptySubtasks,
    TaskLimits,
    SolutionsPresent,
    EvaluationComplete,
    SolutionScores,
    SolutionsCompiled,
]


def get_sanity_checks(extra=()) -> SanityCheckRegistry:
    """Return a registry with the default checks plus extra ones.

    Checks named in the configuration (sanity.disabled) are left out.

    extra ([SanityCheck]): checks specific to a kind of task.

    """
    disabled = set(config.sanity.disabled)
    registry = SanityCheckRegistry()
    for check in [check_class() for check_class in DEFAULT_CHECKS] \
            + list(extra):
        if check.name in disabled:
            logger.info("Sanity check %s is disabled.", check.name)
            continue
        registry.register(check)
    return registry
