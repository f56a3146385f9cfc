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

"""Process-wide configuration.

The configuration is made of sections, each one a plain object whose
attributes are the defaults. A YAML file may override any of them:

    grading:
      score_tolerance: 1.0e-6
    sanity:
      concurrency: 8
      disabled: [TaskLimits]
    database:
      url: postgresql+psycopg2://taskmaker@localhost/taskmaker

"""

import logging
import os

import yaml

from taskmaker.grading.errors import ConfigurationError


logger = logging.getLogger(__name__)


class GradingConfig:

    def __init__(self):
        # Tolerance used when comparing scores reported by the
        # pipeline with the derived ones.
        self.score_tolerance = 1e-9


class SanityConfig:

    def __init__(self):
        # Maximum number of hooks running at the same time.
        self.concurrency = 4
        # Names of the checks that are never registered.
        self.disabled = []
        # What the subtask max scores of a task should add up to.
        self.expected_max_score = 100.0


class DatabaseConfig:

    def __init__(self):
        self.url = "sqlite:///taskmaker.db"
        self.echo = False


class Config:
    """The whole configuration, with a section per concern."""

    SECTIONS = ("grading", "sanity", "database")

    def __init__(self):
        self.grading = GradingConfig()
        self.sanity = SanityConfig()
        self.database = DatabaseConfig()

        # Path of the file the values were loaded from, if any.
        self.loaded_from = None

        paths = [os.path.join(".", "config", "taskmaker.yaml"),
                 "/usr/local/etc/taskmaker.yaml",
                 "/etc/taskmaker.yaml"]
        if "TASKMAKER_CONFIG" in os.environ:
            paths.insert(0, os.environ["TASKMAKER_CONFIG"])

        for path in paths:
            if self.load(path):
                break
        else:
            logger.debug("No configuration file found, using defaults.")

    def load(self, path: str) -> bool:
        """Override the current values with the ones in a YAML file.

        path: the file to read.

        return: False if the file doesn't exist, True if it was loaded.

        raise (ConfigurationError): if the file cannot be parsed or
            contains values of the wrong type.

        """
        try:
            with open(path, "rt", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            return False
        except OSError as error:
            raise ConfigurationError(
                "Unable to read configuration file %s: %s" % (path, error))
        except yaml.YAMLError as error:
            raise ConfigurationError(
                "Unable to parse configuration file %s: %s" % (path, error))

        self.update(data or {}, source=path)
        self.loaded_from = path
        logger.info("Using configuration file %s.", path)
        return True

    def update(self, data: dict, source: str = "<dict>"):
        """Override the current values with the ones in data.

        Unknown sections and keys are ignored with a warning; a value
        whose type differs from the default's is an error (ints are
        accepted where floats are expected).

        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration in %s must be a mapping." % source)

        for section_name, values in data.items():
            if section_name not in self.SECTIONS:
                logger.warning("Unknown configuration section `%s' in %s.",
                               section_name, source)
                continue
            if not isinstance(values, dict):
                raise ConfigurationError(
                    "Section `%s' in %s must be a mapping."
                    % (section_name, source))
            section = getattr(self, section_name)
            for key, value in values.items():
                if not hasattr(section, key):
                    logger.warning("Unknown configuration key `%s.%s' in %s.",
                                   section_name, key, source)
                    continue
                default = getattr(section, key)
                if isinstance(default, float) and isinstance(value, int) \
                        and not isinstance(value, bool):
                    value = float(value)
                elif not isinstance(value, type(default)):
                    raise ConfigurationError(
                        "Configuration key `%s.%s' in %s must be of type %s."
                        % (section_name, key, source, type(default).__name__))
                setattr(section, key, value)


config = Config()
