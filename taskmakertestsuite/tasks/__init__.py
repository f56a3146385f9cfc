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

"""Sample tasks with a recorded run of the pipeline.

Every task is a directory in the IOI YAML format with an events.jsonl
file, the event stream of its evaluation; the package of the task
defines `expectations`, what that run must produce.

"""

import importlib
import os

from taskmaker.grading.events import read_events
from taskmakercontrib.loaders import IOIYamlLoader


__all__ = ["TASKS_DIR", "ALL_TASKS", "task_path", "load_task",
           "load_events", "get_expectations"]


TASKS_DIR = os.path.dirname(os.path.abspath(__file__))

ALL_TASKS = ["with_st", "static"]


def task_path(name):
    return os.path.join(TASKS_DIR, name)


def load_task(name):
    return IOIYamlLoader(task_path(name)).get_task()


def load_events(name):
    """Return the recorded events of a task, decoded."""
    with open(os.path.join(task_path(name), "events.jsonl"),
              "rt", encoding="utf-8") as f:
        return list(read_events(f))


def get_expectations(name):
    module = importlib.import_module("%s.%s" % (__name__, name))
    return module.expectations
