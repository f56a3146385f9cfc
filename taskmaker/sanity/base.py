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

"""Sanity checks and the registry running them.

A sanity check is a small, named, stateless validator. It may look at
the task definition before the evaluation starts (pre_hook), at the
result tree once the evaluation is over (post_hook), or both:

    class NoEmptyTitle(SanityCheck):
        name = "NoEmptyTitle"

        def pre_hook(self, task, diagnostics):
            if not task.title:
                diagnostics.warning("The task has no title")

What a check finds goes to the diagnostics it receives. Raising is
reserved for when the check cannot do its job at all (CheckError, e.g.
a directory it cannot read); the registry collects those failures and
keeps running the other checks.

"""

import logging

from gevent.pool import Pool

from taskmaker import config
from taskmaker.grading.diagnostics import Diagnostic, Diagnostics
from taskmaker.grading.errors import CheckError, CheckFailure, \
    ConfigurationError, EvaluationAborted
from taskmaker.grading.state import ResultTree
from taskmaker.grading.task import Task


__all__ = [
    "SanityCheck", "CheckDiagnostics", "SanityCheckRegistry",
    "PRE_HOOK", "POST_HOOK",
]


logger = logging.getLogger(__name__)


PRE_HOOK = "pre_hook"
POST_HOOK = "post_hook"


class SanityCheck:
    """Base class of the checks.

    Subclasses set name and define pre_hook(task, diagnostics),
    post_hook(task, state, diagnostics), or both; the hooks they don't
    define stay None.

    """

    name: str = ""

    pre_hook = None
    post_hook = None

    @property
    def has_pre_hook(self) -> bool:
        return callable(self.pre_hook)

    @property
    def has_post_hook(self) -> bool:
        return callable(self.post_hook)

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, self.name)


class CheckDiagnostics:
    """What a hook receives instead of the raw channel.

    Entries are appended to the shared channel, with the name of the
    check as their origin.

    """

    def __init__(self, diagnostics: Diagnostics, origin: str):
        self._diagnostics = diagnostics
        self.origin = origin

    def warning(self, message: str) -> Diagnostic:
        return self._diagnostics.warning(message, origin=self.origin)

    def error(self, message: str) -> Diagnostic:
        return self._diagnostics.error(message, origin=self.origin)


def _call_hook(check: SanityCheck, hook: str, args: tuple,
               diagnostics: Diagnostics) -> CheckFailure | None:
    """Run one hook, turning an exception into a CheckFailure."""
    try:
        getattr(check, hook)(*args, CheckDiagnostics(diagnostics, check.name))
    except CheckError as error:
        logger.error("Check %s could not run its %s: %s",
                     check.name, hook, error)
        failure = CheckFailure(check.name, hook, error)
    except Exception as error:
        logger.exception("Unexpected error in %s of check %s.",
                         hook, check.name)
        failure = CheckFailure(check.name, hook, error)
    else:
        return None
    diagnostics.error("Check could not complete: %s" % failure.error,
                      origin=check.name)
    return failure


class SanityCheckRegistry:
    """An ordered set of checks, keyed by their name.

    checks ([SanityCheck]): checks to register right away.

    """

    def __init__(self, checks=()):
        self._checks: dict[str, SanityCheck] = {}
        for check in checks:
            self.register(check)

    def register(self, check: SanityCheck):
        """Add a check.

        raise (ConfigurationError): if the check has no name, has no
            hook, or has the name of a registered check.

        """
        if not check.name:
            raise ConfigurationError("Sanity check %r has no name."
                                     % (check,))
        if not check.has_pre_hook and not check.has_post_hook:
            raise ConfigurationError(
                "Sanity check %s implements neither hook." % check.name)
        if check.name in self._checks:
            raise ConfigurationError(
                "Sanity check %s is already registered." % check.name)
        self._checks[check.name] = check
        logger.debug("Registered sanity check %s.", check.name)

    @property
    def names(self) -> list[str]:
        return list(self._checks)

    def get(self, name: str) -> SanityCheck | None:
        return self._checks.get(name)

    def __iter__(self):
        return iter(list(self._checks.values()))

    def __len__(self):
        return len(self._checks)

    def __contains__(self, name):
        return name in self._checks

    def _run_hooks(self, hook: str, checks: list[SanityCheck], args: tuple,
                   diagnostics: Diagnostics) -> list[CheckFailure]:
        """Run a hook of every check, concurrently, and wait for all.

        return: failures, in registration order.

        """
        if not checks:
            return []
        pool = Pool(size=max(1, config.sanity.concurrency))
        greenlets = [pool.spawn(_call_hook, check, hook, args, diagnostics)
                     for check in checks]
        pool.join()
        return [greenlet.value for greenlet in greenlets
                if greenlet.value is not None]

    def run_pre_hooks(self, task: Task, diagnostics: Diagnostics):
        """Run every pre-hook against the task definition.

        All pre-hooks run even if some of them fail.

        raise (EvaluationAborted): if any pre-hook failed or reported
            an error.

        """
        checks = [check for check in self if check.has_pre_hook]
        logger.info("Running %d pre-evaluation sanity checks.", len(checks))
        first_entry = len(diagnostics)
        failures = self._run_hooks(PRE_HOOK, checks, (task,), diagnostics)
        errors = [entry for entry in diagnostics.since(first_entry)
                  if entry.is_error]
        if failures or errors:
            raise EvaluationAborted(
                "Sanity checks failed before the evaluation (%d errors)."
                % len(errors), failures)

    def run_post_hooks(self, task: Task, state: ResultTree,
                       diagnostics: Diagnostics) -> list[CheckFailure]:
        """Run every post-hook against the finished evaluation.

        Errors are only reported: the scores stay as they are.

        return: the hooks that failed.

        """
        checks = [check for check in self if check.has_post_hook]
        logger.info("Running %d post-evaluation sanity checks.", len(checks))
        return self._run_hooks(POST_HOOK, checks, (task, state), diagnostics)
