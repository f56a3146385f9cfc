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

"""Database interface for SQLAlchemy.

Finished evaluations can be stored for later reporting; see
taskmaker.grading.resultstore for the functions writing and reading
them.

"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from taskmaker import config


__all__ = [
    "Base", "Session", "SessionGen", "init_db",
    "EvaluationRun", "CompilationResult", "SolutionResult",
    "SubtaskResult", "DiagnosticRecord",
]


logger = logging.getLogger(__name__)


class _BaseClass:
    # The models annotate their columns with plain Python types.
    __allow_unmapped__ = True


Base = declarative_base(cls=_BaseClass)

Session = sessionmaker()


def init_db(url: str | None = None) -> Engine:
    """Bind the sessions to a database, creating the tables if needed.

    url: SQLAlchemy database URL; config.database.url if None.

    return: the engine.

    """
    if url is None:
        url = config.database.url
    engine = create_engine(url, echo=config.database.echo)
    Session.configure(bind=engine)
    Base.metadata.create_all(engine)
    logger.debug("Database %s initialized.", engine.url)
    return engine


@contextmanager
def SessionGen():
    """Yield a session, closing it afterwards.

    Nothing is committed automatically.

    """
    session = Session()
    try:
        yield session
    finally:
        session.close()


from .evaluation import EvaluationRun, CompilationResult, SolutionResult, \
    SubtaskResult, DiagnosticRecord  # noqa: E402
