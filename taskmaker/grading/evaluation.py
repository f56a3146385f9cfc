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

"""Lifecycle of the evaluation of a task.

    evaluation = Evaluation(task)
    evaluation.start()           # pre-hooks, may abort
    for event in events:
        evaluation.apply(event)  # fold into the result tree
    evaluation.finish()          # barrier, then post-hooks

or simply evaluation.run(events). Post-hooks never see the tree while
events are still being applied: finish() closes the evaluation before
running them. An event stream that ends early is not an error; the
testcases it didn't cover stay unknown.

"""

import logging
from typing import Iterable

from taskmaker.sanity import SanityCheckRegistry, get_sanity_checks
from .aggregator import Aggregator, AGGREGATOR_ORIGIN
from .diagnostics import Diagnostics
from .errors import CheckFailure, EvaluationAborted, ProtocolViolation
from .events import Event
from .state import ResultTree
from .task import Task


__all__ = ["Evaluation"]


logger = logging.getLogger(__name__)


class Evaluation:
    """One evaluation run of a task.

    task (Task): the task.
    checks (SanityCheckRegistry|None): checks to run around the
        evaluation; the default ones if None.
    diagnostics (Diagnostics|None): the channel to write to; a new one
        if None.

    """

    def __init__(self, task: Task,
                 checks: SanityCheckRegistry | None = None,
                 diagnostics: Diagnostics | None = None):
        self.task = task
        self.checks = checks if checks is not None else get_sanity_checks()
        self.diagnostics = diagnostics if diagnostics is not None \
            else Diagnostics()
        self.state = ResultTree(task)
        self.aggregator = Aggregator(task, self.state, self.diagnostics)

        self.started = False
        self.finished = False
        self.aborted = False
        # Post-hooks that could not complete.
        self.failures: list[CheckFailure] = []

    def _abort(self):
        self.aborted = True
        self.finished = True
        logger.error("Evaluation of task %s aborted.", self.task.name)

    def start(self):
        """Run the pre-hooks.

        raise (EvaluationAborted): if a pre-hook failed or reported an
            error; no event may be applied afterwards.

        """
        if self.started:
            raise RuntimeError("Evaluation already started.")
        self.started = True
        try:
            self.checks.run_pre_hooks(self.task, self.diagnostics)
        except EvaluationAborted:
            self._abort()
            raise
        logger.info("Evaluation of task %s started.", self.task.name)

    def apply(self, event: Event):
        """Apply an event to the result tree.

        raise (ProtocolViolation): if the event is invalid, or arrives
            when the evaluation is over; the evaluation is aborted.

        """
        if not self.started:
            raise RuntimeError("Evaluation not started.")
        if self.finished:
            message = "Event %r arrived after the end of the evaluation." \
                % (event,)
            self.diagnostics.error(message, origin=AGGREGATOR_ORIGIN)
            raise ProtocolViolation(message)
        try:
            self.aggregator.apply(event)
        except ProtocolViolation:
            self._abort()
            raise

    def finish(self) -> list[CheckFailure]:
        """Close the evaluation and run the post-hooks.

        Nothing is run for an aborted evaluation.

        return: the post-hooks that could not complete.

        """
        if self.aborted:
            return []
        if self.finished:
            raise RuntimeError("Evaluation already finished.")
        if not self.started:
            raise RuntimeError("Evaluation not started.")
        self.finished = True

        if not self.state.is_complete():
            logger.warning("Evaluation of task %s ended with testcases "
                           "still unknown.", self.task.name)
        self.failures = self.checks.run_post_hooks(
            self.task, self.state, self.diagnostics)
        logger.info("Evaluation of task %s finished.", self.task.name)
        return self.failures

    def run(self, events: Iterable[Event]) -> ResultTree:
        """Run the whole lifecycle on a stream of events.

        raise (EvaluationAborted): see start.
        raise (ProtocolViolation): see apply; this includes lines of
            the stream that cannot be decoded.

        """
        self.start()
        try:
            for event in events:
                self.apply(event)
        except ProtocolViolation as error:
            # Decoding errors come from the iterator, not from apply.
            if not self.aborted:
                self.diagnostics.error(str(error), origin=AGGREGATOR_ORIGIN)
                self._abort()
            raise
        self.finish()
        return self.state
