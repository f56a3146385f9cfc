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

"""Persistence of finished evaluations.

This module stores a snapshot of a result tree, together with the
diagnostics, so that reports can be produced later without replaying
the events, and reads the stored scores back.

"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from taskmaker.db import EvaluationRun, CompilationResult, SolutionResult, \
    SubtaskResult, DiagnosticRecord
from .diagnostics import Diagnostics
from .state import ResultTree


__all__ = [
    "store_evaluation",
    "get_latest_run",
    "get_solution_scores",
    "get_subtask_scores",
]


logger = logging.getLogger(__name__)


def _naive_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


def store_evaluation(
    session: Session,
    state: ResultTree,
    diagnostics: Diagnostics,
    aborted: bool = False,
) -> EvaluationRun:
    """Store a snapshot of an evaluation.

    The caller is responsible for committing.

    session: the database session.
    state: the result tree; only read.
    diagnostics: the diagnostics of the evaluation.
    aborted: whether the evaluation was aborted.

    returns: the new run.

    """
    task = state.task
    run = EvaluationRun(
        task_name=task.name,
        max_score=task.max_score,
        timestamp=_naive_utc(datetime.now(timezone.utc)),
        complete=state.is_complete(),
        aborted=aborted,
    )
    session.add(run)

    for file, status in state.compilations.items():
        run.compilations.append(CompilationResult(
            file=file,
            status=status.state,
            result=status.result,
        ))

    for path, evaluation in state.evaluations().items():
        solution = SolutionResult(path=path, score=evaluation.score)
        for subtask in evaluation.subtasks.values():
            solution.subtasks.append(SubtaskResult(
                subtask=subtask.id,
                score=subtask.score,
                testcases={
                    str(testcase_id): (status.to_json()
                                       if status is not None else None)
                    for testcase_id, status in subtask.testcases.items()},
            ))
        run.solutions.append(solution)

    for position, entry in enumerate(diagnostics):
        run.diagnostics.append(DiagnosticRecord(
            position=position,
            severity=entry.severity,
            message=entry.message,
            origin=entry.origin,
            timestamp=_naive_utc(entry.timestamp),
        ))

    session.flush()
    logger.info("Stored evaluation of task %s as run %d.", task.name, run.id)
    return run


def get_latest_run(
    session: Session,
    task_name: str,
) -> EvaluationRun | None:
    """Return the most recent stored run of a task, if any."""
    return session.query(EvaluationRun).filter(
        EvaluationRun.task_name == task_name,
    ).order_by(
        EvaluationRun.timestamp.desc(), EvaluationRun.id.desc(),
    ).first()


def get_solution_scores(
    session: Session,
    run: EvaluationRun,
) -> dict[str, float | None]:
    """Return the total score of every solution of a run.

    None stands for a score that was not known when the run was
    stored.

    """
    solutions = session.query(SolutionResult).filter(
        SolutionResult.run_id == run.id,
    ).order_by(SolutionResult.id).all()
    return {solution.path: solution.score for solution in solutions}


def get_subtask_scores(
    session: Session,
    run: EvaluationRun,
    path: str,
) -> dict[int, float | None] | None:
    """Return the subtask scores of a solution of a run.

    returns: subtask id -> score (None if unknown), or None if the
        solution is not part of the run.

    """
    solution = session.query(SolutionResult).filter(
        SolutionResult.run_id == run.id,
        SolutionResult.path == path,
    ).first()
    if solution is None:
        return None
    return {subtask.subtask: subtask.score for subtask in solution.subtasks}
