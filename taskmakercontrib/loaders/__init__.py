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

"""Loaders of task definitions from disk.

"""

from .base_loader import TaskLoader, LoaderValidationError
from .ioi_yaml import IOIYamlLoader


__all__ = [
    "TaskLoader", "LoaderValidationError", "LOADERS", "choose_loader",
]


LOADERS = dict(
    (loader_class.short_name, loader_class) for loader_class in [
        IOIYamlLoader,
    ]
)


def choose_loader(path, name=None):
    """Return the loader class to use for a task directory.

    path (str): the task directory.
    name (str|None): short name of the loader to use; if None, the
        only loader detecting the format is chosen.

    return (type): a subclass of TaskLoader.

    raise (LoaderValidationError): if name is unknown, or the format
        cannot be detected unambiguously.

    """
    if name is not None:
        try:
            return LOADERS[name]
        except KeyError:
            raise LoaderValidationError(
                "Unknown loader `%s'; available: %s."
                % (name, ", ".join(sorted(LOADERS))))

    detected = [loader_class for loader_class in LOADERS.values()
                if loader_class.detect(path)]
    if len(detected) == 0:
        raise LoaderValidationError(
            "No loader recognizes the task in %s." % path)
    if len(detected) > 1:
        raise LoaderValidationError(
            "More than one loader recognizes the task in %s: %s."
            % (path, ", ".join(loader_class.short_name
                               for loader_class in detected)))
    return detected[0]
