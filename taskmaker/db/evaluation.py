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

"""Stored evaluations.

An EvaluationRun is a snapshot of a result tree and of the diagnostics
at the end of an evaluation. Unknown scores and statuses are stored as
NULL, never as zero.

"""

from datetime import datetime

from sqlalchemy.orm import relationship
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import Boolean, DateTime, Float, Integer, JSON, \
    Unicode

from . import Base


class EvaluationRun(Base):
    """An evaluation of a task."""
    __tablename__ = 'evaluation_runs'

    id: int = Column(
        Integer,
        primary_key=True)

    task_name: str = Column(
        Unicode,
        nullable=False,
        index=True)

    # Sum of the max scores of the subtasks at evaluation time.
    max_score: float = Column(
        Float,
        nullable=False)

    timestamp: datetime = Column(
        DateTime,
        nullable=False,
        index=True)

    # Whether every evaluated solution has a final status everywhere.
    complete: bool = Column(
        Boolean,
        nullable=False,
        default=False)

    aborted: bool = Column(
        Boolean,
        nullable=False,
        default=False)

    compilations: list["CompilationResult"] = relationship(
        "CompilationResult",
        back_populates="run",
        cascade="all, delete-orphan",
        passive_deletes=True)

    solutions: list["SolutionResult"] = relationship(
        "SolutionResult",
        back_populates="run",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SolutionResult.id")

    diagnostics: list["DiagnosticRecord"] = relationship(
        "DiagnosticRecord",
        back_populates="run",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DiagnosticRecord.position")


class CompilationResult(Base):
    """Last known status of the compilation of a file."""
    __tablename__ = 'compilation_results'
    __table_args__ = (
        UniqueConstraint('run_id', 'file'),
    )

    id: int = Column(
        Integer,
        primary_key=True)

    run_id: int = Column(
        Integer,
        ForeignKey(EvaluationRun.id,
                   onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True)
    run: EvaluationRun = relationship(
        EvaluationRun,
        back_populates="compilations")

    file: str = Column(
        Unicode,
        nullable=False)

    status: str = Column(
        Unicode,
        nullable=False)

    result: dict | None = Column(
        JSON,
        nullable=True)


class SolutionResult(Base):
    """Outcome of a solution."""
    __tablename__ = 'solution_results'
    __table_args__ = (
        UniqueConstraint('run_id', 'path'),
    )

    id: int = Column(
        Integer,
        primary_key=True)

    run_id: int = Column(
        Integer,
        ForeignKey(EvaluationRun.id,
                   onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True)
    run: EvaluationRun = relationship(
        EvaluationRun,
        back_populates="solutions")

    path: str = Column(
        Unicode,
        nullable=False)

    score: float | None = Column(
        Float,
        nullable=True)

    subtasks: list["SubtaskResult"] = relationship(
        "SubtaskResult",
        back_populates="solution",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SubtaskResult.subtask")


class SubtaskResult(Base):
    """Outcome of a solution on a subtask, with its testcases."""
    __tablename__ = 'subtask_results'
    __table_args__ = (
        UniqueConstraint('solution_result_id', 'subtask'),
    )

    id: int = Column(
        Integer,
        primary_key=True)

    solution_result_id: int = Column(
        Integer,
        ForeignKey(SolutionResult.id,
                   onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True)
    solution: SolutionResult = relationship(
        SolutionResult,
        back_populates="subtasks")

    subtask: int = Column(
        Integer,
        nullable=False)

    score: float | None = Column(
        Float,
        nullable=True)

    # Testcase id (as a string) -> JSON form of the status, or None.
    testcases: dict = Column(
        JSON,
        nullable=False,
        default=dict)


class DiagnosticRecord(Base):
    """An entry of the diagnostics channel."""
    __tablename__ = 'diagnostic_records'
    __table_args__ = (
        UniqueConstraint('run_id', 'position'),
    )

    id: int = Column(
        Integer,
        primary_key=True)

    run_id: int = Column(
        Integer,
        ForeignKey(EvaluationRun.id,
                   onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True)
    run: EvaluationRun = relationship(
        EvaluationRun,
        back_populates="diagnostics")

    # Index in the channel.
    position: int = Column(
        Integer,
        nullable=False)

    severity: str = Column(
        Unicode,
        nullable=False)

    message: str = Column(
        Unicode,
        nullable=False)

    origin: str | None = Column(
        Unicode,
        nullable=True)

    timestamp: datetime = Column(
        DateTime,
        nullable=False)
