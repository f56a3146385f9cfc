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

"""Base class of the task loaders.

A loader knows one on-disk format of a task and turns a directory in
that format into the Task definition used by the grading core.

"""

from taskmaker.grading.task import Task


__all__ = ["TaskLoader", "LoaderValidationError"]


class LoaderValidationError(Exception):
    """The task directory is not a valid task in the loader's format."""
    pass


class TaskLoader:
    """Base class for deriving task loaders.

    Each loader must extend this class and support the following
    access pattern:

      * the class method detect() can be called at any time;
      * once a loader is instantiated, get_task() can be called on it,
        possibly more than once.

    """

    # Short name of this loader, meant to be a unique identifier.
    short_name = None

    # Description of this loader, meant to be human readable.
    description = None

    def __init__(self, path: str):
        """Initialize the loader.

        path: the filesystem location given by the user.

        """
        self.path = path

    @staticmethod
    def detect(path: str) -> bool:
        """Detect whether this loader is able to interpret a path.

        If the loader chooses to not support autodetection, just
        always return False.

        path: the path to scan.

        return: True if the loader can read the task at path.

        """
        raise NotImplementedError("Please extend TaskLoader")

    def get_task(self) -> Task:
        """Produce a Task object.

        return: the Task.

        raise (LoaderValidationError): if the task is malformed.

        """
        raise NotImplementedError("Please extend TaskLoader")
