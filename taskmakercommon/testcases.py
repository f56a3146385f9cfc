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

"""Pairing of static testcase files.

Tasks without a generator keep their testcases as numbered files in
two sibling directories, e.g. input/input0.txt and output/output0.txt.
These helpers find the numbered pairs; they never read the files.

"""

import os
import re
from typing import Iterable, Pattern


__all__ = [
    "numbered_template_regex", "pair_numbered_names",
    "pair_numbered_files",
]


def numbered_template_regex(template: str) -> Pattern:
    """Compile a template like "input*.txt" into a regex.

    template: file name template with exactly one '*', standing for
        the testcase number.

    return: compiled regex whose only group captures the number.

    raise (ValueError): if the template doesn't have exactly one '*'.

    """
    if template.count('*') != 1:
        raise ValueError(
            "Template must have exactly one '*' placeholder, got: %s"
            % template)
    return re.compile(re.escape(template).replace("\\*", "([0-9]+)") + "$")


def pair_numbered_names(
    input_names: Iterable[str],
    output_names: Iterable[str],
    input_re: Pattern,
    output_re: Pattern,
) -> list[tuple[int, str, str]]:
    """Match input and output names carrying the same number.

    Names not matching their template are ignored.

    return: list of (number, input_name, output_name), sorted by
        number.

    raise (ValueError): if a number has only one of the two files, or
        if two names of the same side map to the same number (e.g.
        "input1.txt" and "input01.txt").

    """
    def collect(names, regex, side):
        found = {}
        for name in names:
            match = regex.match(name)
            if match is None:
                continue
            number = int(match.group(1))
            if number in found:
                raise ValueError(
                    "Duplicate %s files for testcase %d: %s, %s"
                    % (side, number, found[number], name))
            found[number] = name
        return found

    inputs = collect(input_names, input_re, "input")
    outputs = collect(output_names, output_re, "output")

    if inputs.keys() != outputs.keys():
        error_parts = []
        missing_outputs = sorted(inputs.keys() - outputs.keys())
        missing_inputs = sorted(outputs.keys() - inputs.keys())
        if missing_outputs:
            error_parts.append("Missing outputs for: %s"
                               % ", ".join(map(str, missing_outputs)))
        if missing_inputs:
            error_parts.append("Missing inputs for: %s"
                               % ", ".join(map(str, missing_inputs)))
        raise ValueError("Testcase pairing failed. %s"
                         % "; ".join(error_parts))

    return [(number, inputs[number], outputs[number])
            for number in sorted(inputs)]


def pair_numbered_files(
    input_dir: str,
    output_dir: str,
    input_template: str = "input*.txt",
    output_template: str = "output*.txt",
) -> list[tuple[int, str, str]]:
    """Pair the testcase files found in two directories.

    return: list of (number, input_path, output_path) with paths
        joined to their directory, sorted by number.

    raise (ValueError): see pair_numbered_names.
    raise (OSError): if a directory cannot be listed.

    """
    paired = pair_numbered_names(
        os.listdir(input_dir), os.listdir(output_dir),
        numbered_template_regex(input_template),
        numbered_template_regex(output_template))
    return [(number,
             os.path.join(input_dir, input_name),
             os.path.join(output_dir, output_name))
            for number, input_name, output_name in paired]
