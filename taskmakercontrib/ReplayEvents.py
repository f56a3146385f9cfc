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

"""Replay a stream of pipeline events against a task and report.

The events are read as JSON lines from a file, or from the standard
input when no file (or "-") is given. The outcome is printed as a
short report, or as JSON with --json, and can be stored in a database
with --store.

Exit status: 0 if the evaluation ran to its end, 1 if it was aborted,
2 if the task, the configuration or the events file could not be
read.

"""

import argparse
import json
import logging
import sys

from taskmaker import config
from taskmaker.db import SessionGen, init_db
from taskmaker.grading.diagnostics import Diagnostics
from taskmaker.grading.errors import ConfigurationError, EvaluationAborted, \
    ProtocolViolation
from taskmaker.grading.evaluation import Evaluation
from taskmaker.grading.events import read_events
from taskmaker.grading.resultstore import store_evaluation
from taskmaker.log import setup_logging
from taskmaker.sanity import SanityCheckRegistry
from taskmakercontrib.loaders import LoaderValidationError, choose_loader


logger = logging.getLogger(__name__)


def _format_score(score):
    return "?" if score is None else "%g" % score


def print_report(evaluation, out):
    """Write a human readable summary of an evaluation to out."""
    state = evaluation.state
    task = evaluation.task
    out.write("Task %s (max score %g)\n" % (task.name, task.max_score))
    for file, status in state.compilations.items():
        out.write("  compile %-30s %s\n" % (file, status.state))
    for path, solution in state.evaluations().items():
        out.write("  %-38s %s\n" % (path, _format_score(solution.score)))
        for subtask in solution.subtasks.values():
            out.write("    subtask %-4d %8s / %g\n" % (
                subtask.id, _format_score(subtask.score),
                task.subtasks[subtask.id].max_score))
    for entry in evaluation.diagnostics:
        out.write("[%s] %s%s\n" % (
            entry.severity,
            "(%s) " % entry.origin if entry.origin is not None else "",
            entry.message))
    if evaluation.aborted:
        out.write("Evaluation aborted.\n")


def replay(task, lines, checks=None):
    """Run an evaluation of task on the events in lines.

    return (Evaluation): the evaluation, finished or aborted.

    """
    evaluation = Evaluation(task, checks=checks, diagnostics=Diagnostics())
    try:
        evaluation.run(read_events(lines))
    except EvaluationAborted as error:
        logger.error("Evaluation aborted by the sanity checks: %s", error)
    except ProtocolViolation as error:
        logger.error("Evaluation aborted: %s", error)
    return evaluation


def main(argv=None):
    """Parse arguments and replay the events.

    return (int): the exit status.

    """
    parser = argparse.ArgumentParser(
        description="Replay pipeline events against a task.")
    parser.add_argument("task_dir", action="store",
                        help="directory of the task")
    parser.add_argument("events", action="store", nargs="?", default="-",
                        help="file with one JSON event per line "
                        "(default: standard input)")
    parser.add_argument("-l", "--loader", action="store", default=None,
                        help="loader to use (default: autodetect)")
    parser.add_argument("--json", action="store_true",
                        help="print the result tree and the diagnostics "
                        "as JSON")
    parser.add_argument("--store", action="store", metavar="URL",
                        nargs="?", const="", default=None,
                        help="store the evaluation in a database "
                        "(default URL: from the configuration)")
    parser.add_argument("--no-sanity-checks", action="store_true",
                        help="do not run the sanity checks")
    parser.add_argument("-c", "--config", action="store", default=None,
                        help="configuration file to use")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="show debug messages")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        if args.config is not None and not config.load(args.config):
            logger.critical("Configuration file %s not found.", args.config)
            return 2
        loader_class = choose_loader(args.task_dir, args.loader)
        task = loader_class(args.task_dir).get_task()
    except ConfigurationError as error:
        logger.critical("Invalid configuration: %s", error)
        return 2
    except LoaderValidationError as error:
        logger.critical("Cannot load task %s: %s", args.task_dir, error)
        return 2

    checks = SanityCheckRegistry() if args.no_sanity_checks else None
    if args.events == "-":
        evaluation = replay(task, sys.stdin, checks)
    else:
        try:
            f = open(args.events, "rt", encoding="utf-8")
        except OSError as error:
            logger.critical("Cannot read events from %s: %s",
                            args.events, error)
            return 2
        with f:
            evaluation = replay(task, f, checks)

    if args.json:
        json.dump({"state": evaluation.state.to_json(),
                   "diagnostics": evaluation.diagnostics.to_json(),
                   "aborted": evaluation.aborted},
                  sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print_report(evaluation, sys.stdout)

    if args.store is not None:
        init_db(args.store or None)
        with SessionGen() as session:
            run = store_evaluation(session, evaluation.state,
                                   evaluation.diagnostics,
                                   aborted=evaluation.aborted)
            session.commit()
            logger.info("Evaluation stored as run %d.", run.id)

    return 1 if evaluation.aborted else 0


if __name__ == "__main__":
    sys.exit(main())
