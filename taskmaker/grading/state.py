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

"""The result tree: everything known so far about an evaluation.

Values are stored flat, keyed by (solution, subtask, testcase),
(solution, subtask) and solution. The nested view used by reports,
task -> solution -> subtask -> testcase, is built on demand as
read-only snapshots.

Every accessor returns None for something that is not known yet; a
zero is returned only for something that ran and scored zero.

The tree has exactly one writer, obtained with ResultTree.writer().

"""

from types import MappingProxyType

from .status import CompilationStatus, TestcaseEvaluationStatus
from .task import Task


__all__ = [
    "SubtaskEvaluationState", "SolutionEvaluationState", "ResultTree",
    "ResultTreeWriter",
]


class SubtaskEvaluationState:
    """Snapshot of a subtask of a solution.

    id (int): the subtask id.
    score (float|None): derived score, None until resolved.
    testcases ({int: TestcaseEvaluationStatus|None}): every testcase
        of the subtask; None for the ones without events.

    """

    def __init__(self, id: int, score: float | None,
                 testcases: dict[int, TestcaseEvaluationStatus | None]):
        self.id = id
        self.score = score
        self.testcases = MappingProxyType(testcases)

    def __repr__(self):
        return "<SubtaskEvaluationState %d score=%r>" % (self.id, self.score)


class SolutionEvaluationState:
    """Snapshot of the evaluation of a solution.

    path (str): the solution.
    score (float|None): total score, None until every subtask is
        resolved (or the solution failed to compile).
    subtasks ({int: SubtaskEvaluationState}): every subtask of the
        task.

    """

    def __init__(self, path: str, score: float | None,
                 subtasks: dict[int, SubtaskEvaluationState]):
        self.path = path
        self.score = score
        self.subtasks = MappingProxyType(subtasks)

    def __repr__(self):
        return "<SolutionEvaluationState %s score=%r>" % (
            self.path, self.score)


class ResultTree:
    """State of the evaluation of a task.

    task (Task): the definition the state refers to; never modified.

    """

    def __init__(self, task: Task):
        self.task = task
        self._compilations: dict[str, CompilationStatus] = {}
        self._testcases: dict[tuple[str, int, int],
                              TestcaseEvaluationStatus] = {}
        self._subtask_scores: dict[tuple[str, int], float] = {}
        self._solution_scores: dict[str, float] = {}
        # Used as an ordered set: solutions in order of appearance.
        self._solutions: dict[str, None] = {}
        self._writer = None

    def writer(self) -> "ResultTreeWriter":
        """Return the only object allowed to change this tree.

        raise (RuntimeError): if a writer was already handed out.

        """
        if self._writer is not None:
            raise RuntimeError("The result tree already has a writer.")
        self._writer = ResultTreeWriter(self)
        return self._writer

    # Task metadata.

    @property
    def max_score(self) -> float:
        return self.task.max_score

    # Compilations.

    @property
    def compilations(self) -> MappingProxyType:
        return MappingProxyType(self._compilations)

    def compilation(self, file: str) -> CompilationStatus | None:
        return self._compilations.get(file)

    # Evaluations.

    @property
    def solutions(self) -> list[str]:
        return list(self._solutions)

    def has_solution(self, solution: str) -> bool:
        return solution in self._solutions

    def testcase_status(self, solution: str, subtask: int,
                        testcase: int) -> TestcaseEvaluationStatus | None:
        return self._testcases.get((solution, subtask, testcase))

    def subtask_score(self, solution: str, subtask: int) -> float | None:
        return self._subtask_scores.get((solution, subtask))

    def solution_score(self, solution: str) -> float | None:
        return self._solution_scores.get(solution)

    def solution(self, solution: str) -> SolutionEvaluationState | None:
        """Build the nested view of a solution, None if never seen."""
        if solution not in self._solutions:
            return None
        subtasks = {}
        for subtask in self.task.subtasks.values():
            testcases = {
                testcase_id: self._testcases.get(
                    (solution, subtask.id, testcase_id))
                for testcase_id in subtask.testcases}
            subtasks[subtask.id] = SubtaskEvaluationState(
                subtask.id, self._subtask_scores.get((solution, subtask.id)),
                testcases)
        return SolutionEvaluationState(
            solution, self._solution_scores.get(solution), subtasks)

    def evaluations(self) -> dict[str, SolutionEvaluationState]:
        return {solution: self.solution(solution)
                for solution in self._solutions}

    def unresolved_testcases(self, solution: str) -> list[tuple[int, int]]:
        """Return the (subtask, testcase) pairs without a final status."""
        result = []
        for subtask_id, testcase_id in self.task.testcase_keys():
            status = self._testcases.get((solution, subtask_id, testcase_id))
            if status is None or not status.is_terminal:
                result.append((subtask_id, testcase_id))
        return result

    def is_subtask_resolved(self, solution: str, subtask: int) -> bool:
        for testcase_id in self.task.subtasks[subtask].testcases:
            status = self._testcases.get((solution, subtask, testcase_id))
            if status is None or not status.is_terminal:
                return False
        return True

    def is_complete(self) -> bool:
        """Whether every known solution has a final status everywhere."""
        return all(not self.unresolved_testcases(solution)
                   for solution in self._solutions)

    def to_json(self) -> dict:
        """Return a plain-dict snapshot, with None for unknown values."""
        task = self.task
        return {
            "task": {
                "name": task.name,
                "title": task.title,
                "time_limit": task.time_limit,
                "memory_limit": task.memory_limit,
                "max_score": task.max_score,
                "subtasks": {
                    str(subtask.id): {
                        "max_score": subtask.max_score,
                        "testcases": list(subtask.testcases),
                    }
                    for subtask in task.subtasks.values()},
            },
            "compilations": {
                file: status.to_json()
                for file, status in self._compilations.items()},
            "evaluations": {
                path: {
                    "score": evaluation.score,
                    "subtasks": {
                        str(subtask.id): {
                            "score": subtask.score,
                            "testcases": {
                                str(testcase_id): (status.to_json()
                                                   if status is not None
                                                   else None)
                                for testcase_id, status
                                in subtask.testcases.items()},
                        }
                        for subtask in evaluation.subtasks.values()},
                }
                for path, evaluation in self.evaluations().items()},
        }


class ResultTreeWriter:
    """Mutation entry point of a ResultTree.

    It performs no validation: deciding what may change is the job of
    the aggregator holding it.

    """

    def __init__(self, tree: ResultTree):
        self.tree = tree

    def add_solution(self, solution: str):
        self.tree._solutions.setdefault(solution, None)

    def set_compilation(self, file: str, status: CompilationStatus):
        self.tree._compilations[file] = status

    def set_testcase_status(self, solution: str, subtask: int, testcase: int,
                            status: TestcaseEvaluationStatus):
        self.add_solution(solution)
        self.tree._testcases[(solution, subtask, testcase)] = status

    def set_subtask_score(self, solution: str, subtask: int,
                          score: float | None):
        if score is None:
            self.tree._subtask_scores.pop((solution, subtask), None)
        else:
            self.tree._subtask_scores[(solution, subtask)] = score

    def set_solution_score(self, solution: str, score: float | None):
        if score is None:
            self.tree._solution_scores.pop(solution, None)
        else:
            self.tree._solution_scores[solution] = score
