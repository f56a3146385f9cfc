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

"""Fold of the event stream into a result tree.

The aggregator consumes one event at a time, in the order the
pipeline serialized them. Events about different solutions, subtasks
and testcases may interleave freely; the events about one testcase
must follow its lifecycle, Pending -> Running -> final status.

Compilation statuses are last-write-wins: whatever arrives last is
recorded, even when it looks like a step back. Testcase statuses are
not: a final status is never replaced, and trying to is a protocol
violation.

A subtask scores max_score times the worst testcase contribution,
and is resolved when its last testcase gets a final status. A solution
scores the sum of its subtasks once all of them are resolved.

"""

import logging
from typing import Iterable, NoReturn

from taskmaker import config
from taskmakercommon.constants import COMPILATION_FAILED
from .diagnostics import Diagnostics
from .errors import ProtocolViolation
from .events import Event, CompilationEvent, TestcaseEvent, WarningEvent, \
    ErrorEvent, SubtaskScoreEvent, SolutionScoreEvent
from .state import ResultTree
from .task import Task


__all__ = ["Aggregator", "AGGREGATOR_ORIGIN", "PIPELINE_ORIGIN"]


logger = logging.getLogger(__name__)


# Origins of the diagnostics written by the aggregator.
AGGREGATOR_ORIGIN = "aggregator"
PIPELINE_ORIGIN = "pipeline"


class Aggregator:
    """Apply events to a result tree.

    task (Task): the task being evaluated.
    tree (ResultTree|None): the tree to fill; a new one if None. The
        aggregator takes its writer, so a tree can be filled by one
        aggregator only.
    diagnostics (Diagnostics|None): where violations and messages from
        the pipeline go; a new channel if None.

    """

    def __init__(self, task: Task, tree: ResultTree | None = None,
                 diagnostics: Diagnostics | None = None):
        if tree is None:
            tree = ResultTree(task)
        elif tree.task is not task:
            raise ValueError("The result tree refers to another task.")
        self.task = task
        self.tree = tree
        self.diagnostics = diagnostics if diagnostics is not None \
            else Diagnostics()
        self._writer = tree.writer()

        # Scores computed by the pipeline, waiting for ours.
        self._reported_subtask_scores: dict[tuple[str, int], float] = {}
        self._reported_solution_scores: dict[str, float] = {}
        # Solutions whose subtasks are all resolved.
        self._resolved_solutions: set[str] = set()

        self._handlers = {
            CompilationEvent: self._apply_compilation,
            TestcaseEvent: self._apply_testcase,
            WarningEvent: self._apply_warning,
            ErrorEvent: self._apply_error,
            SubtaskScoreEvent: self._apply_subtask_score,
            SolutionScoreEvent: self._apply_solution_score,
        }

    def apply(self, event: Event):
        """Apply a single event.

        raise (ProtocolViolation): if the event contradicts what is
            known; the violation is also written to the diagnostics.

        """
        handler = self._handlers.get(type(event))
        if handler is None:
            self._violation("Unsupported event %r." % (event,))
        handler(event)

    def apply_all(self, events: Iterable[Event]) -> ResultTree:
        for event in events:
            self.apply(event)
        return self.tree

    def _violation(self, message: str) -> NoReturn:
        self.diagnostics.error(message, origin=AGGREGATOR_ORIGIN)
        raise ProtocolViolation(message)

    def _same_score(self, a: float, b: float) -> bool:
        return abs(a - b) <= config.grading.score_tolerance

    # Solutions.

    def _ensure_solution(self, solution: str):
        """Create the state of a solution the first time it is seen."""
        if self.tree.has_solution(solution):
            return
        self._writer.add_solution(solution)
        logger.debug("Tracking solution %s.", solution)
        # Subtasks without testcases have nothing left to wait for.
        for subtask in self.task.subtasks.values():
            if len(subtask.testcases) == 0:
                self._writer.set_subtask_score(solution, subtask.id, 0.0)
        self._update_solution_score(solution)

    def _update_solution_score(self, solution: str):
        scores = [self.tree.subtask_score(solution, subtask_id)
                  for subtask_id in self.task.subtasks]
        if all(score is not None for score in scores):
            self._writer.set_solution_score(solution, sum(scores))
            if solution not in self._resolved_solutions:
                self._resolved_solutions.add(solution)
                logger.info("Solution %s scored %g.", solution, sum(scores))
                self._cross_check_solution(solution)
            return

        compilation = self.tree.compilation(solution)
        if compilation is not None and compilation.state == COMPILATION_FAILED:
            self._writer.set_solution_score(solution, 0.0)
        else:
            self._writer.set_solution_score(solution, None)

    # Compilations.

    def _apply_compilation(self, event: CompilationEvent):
        previous = self.tree.compilation(event.file)
        if previous is not None and previous.is_terminal \
                and not event.status.is_terminal:
            logger.debug("Compilation of %s went from %s back to %s.",
                         event.file, previous.state, event.status.state)
        self._writer.set_compilation(event.file, event.status)

        if event.file in self.task.solutions:
            self._ensure_solution(event.file)
        if self.tree.has_solution(event.file):
            self._update_solution_score(event.file)

    # Testcases.

    def _check_testcase_key(self, solution: str, subtask: int, testcase: int):
        if subtask not in self.task.subtasks:
            self._violation("Solution %s: unknown subtask %r."
                            % (solution, subtask))
        if testcase not in self.task.subtasks[subtask].testcases:
            self._violation("Solution %s: unknown testcase %r in subtask %d."
                            % (solution, testcase, subtask))

    def _apply_testcase(self, event: TestcaseEvent):
        solution, subtask, testcase = \
            event.solution, event.subtask, event.testcase
        self._check_testcase_key(solution, subtask, testcase)

        current = self.tree.testcase_status(solution, subtask, testcase)
        new = event.status
        if current is not None:
            if current.is_terminal:
                self._violation(
                    "Solution %s, testcase %d.%d: already %s, got %s."
                    % (solution, subtask, testcase, current.state, new.state))
            if new.rank < current.rank:
                self._violation(
                    "Solution %s, testcase %d.%d: went from %s back to %s."
                    % (solution, subtask, testcase, current.state, new.state))

        self._ensure_solution(solution)
        self._writer.set_testcase_status(solution, subtask, testcase, new)
        if new.is_terminal:
            self._update_subtask_score(solution, subtask)

    def _update_subtask_score(self, solution: str, subtask_id: int):
        if not self.tree.is_subtask_resolved(solution, subtask_id):
            return
        subtask = self.task.subtasks[subtask_id]
        worst = min(
            self.tree.testcase_status(
                solution, subtask_id, testcase_id).score_contribution
            for testcase_id in subtask.testcases)
        score = subtask.max_score * worst

        previous = self.tree.subtask_score(solution, subtask_id)
        if previous is not None:
            if not self._same_score(previous, score):
                self._violation(
                    "Solution %s, subtask %d: score changed from %g to %g "
                    "after being resolved."
                    % (solution, subtask_id, previous, score))
            return

        self._writer.set_subtask_score(solution, subtask_id, score)
        logger.debug("Solution %s, subtask %d scored %g.",
                     solution, subtask_id, score)
        self._cross_check_subtask(solution, subtask_id)
        self._update_solution_score(solution)

    # Messages from the pipeline.

    def _apply_warning(self, event: WarningEvent):
        self.diagnostics.warning(event.message, origin=PIPELINE_ORIGIN)

    def _apply_error(self, event: ErrorEvent):
        self.diagnostics.error(event.message, origin=PIPELINE_ORIGIN)

    # Scores computed by the pipeline. They are never trusted, only
    # compared with the derived ones.

    def _apply_subtask_score(self, event: SubtaskScoreEvent):
        if event.subtask not in self.task.subtasks:
            self._violation("Solution %s: unknown subtask %r."
                            % (event.solution, event.subtask))
        self._ensure_solution(event.solution)
        self._reported_subtask_scores[(event.solution, event.subtask)] = \
            event.score
        self._cross_check_subtask(event.solution, event.subtask)

    def _apply_solution_score(self, event: SolutionScoreEvent):
        self._ensure_solution(event.solution)
        self._reported_solution_scores[event.solution] = event.score
        self._cross_check_solution(event.solution)

    def _cross_check_subtask(self, solution: str, subtask: int):
        derived = self.tree.subtask_score(solution, subtask)
        reported = self._reported_subtask_scores.get((solution, subtask))
        if derived is None or reported is None:
            return
        if not self._same_score(derived, reported):
            self.diagnostics.error(
                "Solution %s, subtask %d: the pipeline reported score %g, "
                "but the testcases give %g." % (solution, subtask, reported,
                                                derived),
                origin=AGGREGATOR_ORIGIN)

    def _cross_check_solution(self, solution: str):
        reported = self._reported_solution_scores.get(solution)
        if reported is None:
            return
        subtask_scores = [self.tree.subtask_score(solution, subtask_id)
                          for subtask_id in self.task.subtasks]
        if any(score is None for score in subtask_scores):
            return
        derived = sum(subtask_scores)
        if not self._same_score(derived, reported):
            self.diagnostics.error(
                "Solution %s: the pipeline reported score %g, but the "
                "subtasks give %g." % (solution, reported, derived),
                origin=AGGREGATOR_ORIGIN)
