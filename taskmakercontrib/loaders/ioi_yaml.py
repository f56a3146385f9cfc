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

"""Loader for tasks in the IOI YAML format.

A task directory looks like:

    task.yaml          name, title, limits, expected scores
    gen/GEN            testcases and subtasks (optional)
    input/inputN.txt   static testcases (when there is no gen/GEN)
    output/outputN.txt
    sol/               solutions
    statement/

In gen/GEN every non-blank, non-comment line is a testcase, as is a
"#COPY: file" line; a "#ST: points" line opens a new subtask. Without
any "#ST:" line, or without gen/GEN at all, the task has a single
subtask worth total_value points (100 by default).

Testcases are numbered across the whole task, in order of appearance.

"""

import logging
import os

import yaml

from taskmaker.grading.task import Task, Subtask, Testcase, SolutionInfo
from taskmakercommon.testcases import pair_numbered_files
from .base_loader import TaskLoader, LoaderValidationError


__all__ = ["IOIYamlLoader", "parse_gen", "load"]


logger = logging.getLogger(__name__)


# Extensions of the files considered solutions in sol/.
SOURCE_EXTS = frozenset([
    ".c", ".cc", ".cpp", ".cxx", ".c++", ".py", ".java", ".pas", ".rs",
    ".go", ".hs", ".js", ".kt", ".cs", ".sh",
])

# Files in sol/ that are not solutions, by base name.
NON_SOLUTION_BASENAMES = frozenset(["grader", "stub", "template"])


def load(src, dst, src_name, dst_name=None, conv=lambda i: i):
    """Execute dst[dst_name] = conv(src[src_name]) if src has it.

    If src_name is a list, the first name src has is used. If dst_name
    is None it is set to src_name (or to its first element). If dst is
    None, the converted value (or conv(None)) is returned instead.

    """
    if dst is not None and dst_name is None:
        if isinstance(src_name, list):
            dst_name = src_name[0]
        else:
            dst_name = src_name
    names = src_name if isinstance(src_name, list) else [src_name]
    for name in names:
        if name in src:
            if dst is None:
                return conv(src[name])
            dst[dst_name] = conv(src[name])
            return None
    if dst is None:
        return conv(None)
    return None


def parse_gen(lines) -> tuple[list[tuple[float, int]], int]:
    """Parse the content of a gen/GEN file.

    lines: iterable of the lines of the file.

    return: (subtasks, testcases) where subtasks is a list of
        (points, number of testcases), empty if the file defines no
        subtask, and testcases is the total number of testcases.

    raise (LoaderValidationError): if a line is both a testcase and a
        command, if a subtask has invalid points, or if testcases
        appear before the first subtask of a file defining subtasks.

    """
    subtasks = []
    testcases = 0
    total = 0
    points = None
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        splitted = line.split('#', 1)

        if len(splitted) == 1:
            if splitted[0] != '':
                testcases += 1
                total += 1
            continue

        testcase, comment = splitted
        testcase = testcase.strip()
        comment = comment.strip()
        testcase_detected = len(testcase) > 0
        copy_testcase_detected = comment.startswith("COPY:")
        subtask_detected = comment.startswith("ST:")

        flags = [testcase_detected, copy_testcase_detected, subtask_detected]
        if len([x for x in flags if x]) > 1:
            raise LoaderValidationError(
                "gen/GEN line %d: no testcase and command in the same line "
                "allowed" % lineno)

        if testcase_detected or copy_testcase_detected:
            testcases += 1
            total += 1

        if subtask_detected:
            if points is None:
                if testcases != 0:
                    raise LoaderValidationError(
                        "gen/GEN line %d: %d testcases before the first "
                        "subtask" % (lineno, testcases))
            else:
                subtasks.append((points, testcases))
            testcases = 0
            try:
                points = float(comment[3:].strip())
            except ValueError:
                raise LoaderValidationError(
                    "gen/GEN line %d: invalid subtask points `%s'"
                    % (lineno, comment[3:].strip()))

    if points is not None:
        subtasks.append((points, testcases))
    return subtasks, total


class IOIYamlLoader(TaskLoader):
    """Load a task in the IOI YAML format.

    """

    short_name = 'ioi_yaml'
    description = 'IOI YAML-based format (task.yaml, gen/GEN, sol/)'

    @staticmethod
    def detect(path):
        """See docstring in class TaskLoader."""
        return os.path.exists(os.path.join(path, "task.yaml"))

    def _load_conf(self) -> dict:
        conf_path = os.path.join(self.path, "task.yaml")
        try:
            with open(conf_path, "rt", encoding="utf-8") as f:
                conf = yaml.safe_load(f)
        except OSError as error:
            raise LoaderValidationError(
                "Cannot read %s: %s" % (conf_path, error))
        except yaml.YAMLError as error:
            raise LoaderValidationError(
                "Cannot parse %s: %s" % (conf_path, error))
        if conf is None:
            conf = {}
        if not isinstance(conf, dict):
            raise LoaderValidationError("%s must be a mapping." % conf_path)
        return conf

    def get_task(self):
        """See docstring in class TaskLoader."""
        conf = self._load_conf()

        name = conf.get("name", os.path.basename(os.path.normpath(self.path)))
        logger.info("Loading parameters for task %s.", name)

        args = {}
        try:
            load(conf, args, ["time_limit", "timeout"], conv=float)
            # The IOI YAML format specifies memory limits in MiB.
            load(conf, args, ["memory_limit", "memlimit"],
                 conv=lambda mb: int(mb * 1024 * 1024))
        except (TypeError, ValueError) as error:
            raise LoaderValidationError("Invalid limits in task.yaml: %s"
                                        % error)

        subtasks = self._load_subtasks(conf)
        solutions = self._load_solutions(conf)

        try:
            task = Task(name, subtasks, path=self.path,
                        title=conf.get("title"), solutions=solutions,
                        **args)
        except ValueError as error:
            raise LoaderValidationError(str(error))

        logger.info("Task %s loaded: %d subtasks, %d testcases, "
                    "%d solutions.", name, len(task.subtasks),
                    len(task.testcase_keys()), len(task.solutions))
        return task

    def _load_subtasks(self, conf) -> list[Subtask]:
        total_value = float(conf.get("total_value", 100.0))
        gen_path = os.path.join(self.path, "gen", "GEN")

        if os.path.exists(gen_path):
            try:
                with open(gen_path, "rt", encoding="utf-8") as gen_file:
                    gen_subtasks, n_input = parse_gen(gen_file)
            except OSError as error:
                raise LoaderValidationError(
                    "Cannot read %s: %s" % (gen_path, error))
            if not gen_subtasks:
                gen_subtasks = [(total_value, n_input)]
            paths = [(None, None)] * n_input
        else:
            try:
                paired = pair_numbered_files(
                    os.path.join(self.path, "input"),
                    os.path.join(self.path, "output"))
            except FileNotFoundError:
                raise LoaderValidationError(
                    "Task %s has neither gen/GEN nor input/ and output/."
                    % self.path)
            except (OSError, ValueError) as error:
                raise LoaderValidationError(str(error))
            numbers = [number for number, _, _ in paired]
            if numbers != list(range(len(numbers))):
                raise LoaderValidationError(
                    "Static testcases must be numbered from 0 without gaps, "
                    "found %s." % ", ".join(map(str, numbers)))
            n_input = len(paired)
            gen_subtasks = [(total_value, n_input)]
            paths = [(input_path, output_path)
                     for _, input_path, output_path in paired]

        if n_input == 0:
            raise LoaderValidationError("Task %s has no testcases."
                                        % self.path)
        expected_n_input = load(conf, None, ["n_input", "n_test"])
        if expected_n_input is not None and int(expected_n_input) != n_input:
            raise LoaderValidationError(
                "task.yaml declares %s testcases, but %d were found."
                % (expected_n_input, n_input))

        subtasks = []
        next_testcase = 0
        for subtask_id, (points, count) in enumerate(gen_subtasks):
            testcases = []
            for testcase_id in range(next_testcase, next_testcase + count):
                input_path, output_path = paths[testcase_id]
                testcases.append(Testcase(testcase_id, subtask_id,
                                          input_path, output_path))
            next_testcase += count
            subtasks.append(Subtask(subtask_id, points, testcases))
        return subtasks

    def _find_solutions_dir(self) -> str | None:
        found = [folder for folder in ["sol", "solutions"]
                 if os.path.isdir(os.path.join(self.path, folder))]
        if len(found) > 1:
            raise LoaderValidationError(
                "Multiple alternative folders found: %s. "
                "Please keep only one." % ", ".join(found))
        return found[0] if found else None

    def _load_solutions(self, conf) -> list[SolutionInfo]:
        """Find the solutions and attach the expected scores to them.

        Expected scores come from the model_solutions list of
        task.yaml, whose entries are matched to files by name, with or
        without extension.

        """
        folder = self._find_solutions_dir()
        files = []
        if folder is not None:
            for entry in sorted(os.listdir(os.path.join(self.path, folder))):
                base, ext = os.path.splitext(entry)
                if ext.lower() not in SOURCE_EXTS \
                        or base in NON_SOLUTION_BASENAMES:
                    continue
                if os.path.isfile(os.path.join(self.path, folder, entry)):
                    files.append((base, entry, "%s/%s" % (folder, entry)))

        model_solutions = conf.get("model_solutions", []) or []
        if not isinstance(model_solutions, list):
            raise LoaderValidationError("model_solutions must be a list.")
        meta_by_name = {}
        for sol_conf in model_solutions:
            if not isinstance(sol_conf, dict) or not sol_conf.get("name"):
                logger.warning("Model solution missing 'name' field, "
                               "skipping")
                continue
            meta_by_name[sol_conf["name"]] = sol_conf

        solutions = []
        used = set()
        for base, filename, path in files:
            meta_name = filename if filename in meta_by_name else base
            meta = meta_by_name.get(meta_name)
            if meta is None:
                solutions.append(SolutionInfo(path))
                continue
            used.add(meta_name)
            solutions.append(self._make_solution(path, meta))

        for name in meta_by_name:
            if name not in used:
                logger.warning("Model solution '%s' is defined in task.yaml "
                               "but has no file in the solutions folder",
                               name)
        return solutions

    @staticmethod
    def _make_solution(path, meta) -> SolutionInfo:
        expected = meta.get("subtask_expected_scores")
        try:
            if isinstance(expected, list):
                expected = dict(enumerate(expected))
            elif expected is not None and not isinstance(expected, dict):
                raise ValueError("subtask_expected_scores must be a list "
                                 "or a mapping")
            return SolutionInfo(
                path,
                language=meta.get("language"),
                subtask_expected_scores=expected,
                expected_score_min=load(meta, None, "expected_score_min",
                                        conv=_optional_float),
                expected_score_max=load(meta, None, "expected_score_max",
                                        conv=_optional_float))
        except (TypeError, ValueError) as error:
            raise LoaderValidationError(
                "Invalid expectations for solution %s: %s" % (path, error))


def _optional_float(value) -> float | None:
    return float(value) if value is not None else None
