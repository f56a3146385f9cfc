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

"""Mixin for the tests needing a database."""

from taskmaker.db import Session, init_db


class DatabaseMixin:
    """Bind the sessions to a fresh in-memory SQLite database.

    Every test gets its own database, and self.session to use it.

    """

    def setUp(self):
        super().setUp()
        self.engine = init_db("sqlite://")
        self.session = Session()

    def tearDown(self):
        self.session.rollback()
        self.session.close()
        self.engine.dispose()
        super().tearDown()
