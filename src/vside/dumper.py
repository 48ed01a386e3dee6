#
#  This file is part of vside, Visual Studio projects generator
#
#  Copyright (C) 2012-2013 Vaclav Slavik
#
#  Permission is hereby granted, free of charge, to any person obtaining a copy
#  of this software and associated documentation files (the "Software"), to
#  deal in the Software without restriction, including without limitation the
#  rights to use, copy, modify, merge, publish, distribute, sublicense, and/or
#  sell copies of the Software, and to permit persons to whom the Software is
#  furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included in
#  all copies or substantial portions of the Software.
#
#  THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
#  IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
#  FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
#  AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
#  LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
#  FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
#  IN THE SOFTWARE.
#

"""
Helpers for dumping the registered projects into human-readable form.
"""

import os.path

from vside.plugins.visualstudio import EXTENSION_NAME


def dump_build(build):
    """
    Returns string with dumped, human-readable description of projects
    registered in all units of *build*, which is a :class:`vside.model.Build`.
    """
    out = ""
    for unit in build.all_units():
        ext = unit.extensions.get(EXTENSION_NAME)
        if ext is None:
            continue
        out += "unit %s {\n" % unit.path
        out += _indent(dump_registry(ext.registry))
        out += "}\n"
        if ext.solution is not None:
            out += dump_solution(ext.solution) + "\n"
    return out.strip()


def dump_registry(registry):
    """
    Returns string with dumped description of all projects of *registry*, a
    :class:`vside.registry.ProjectRegistry`.
    """
    return "".join(dump_project(p) + "\n" for p in registry)


def dump_project(project):
    """
    Returns string with dumped, human-readable description of *project*, which
    is an instance of :class:`vside.registry.VisualStudioProject`.
    """
    base = project.unit.directory
    out = "project %s {\n" % project.name
    out += "  file = %s\n" % _path(project.project_file, base)
    out += "  configurations {\n"
    for cfg in project.configurations:
        out += "    %s %s\n" % (cfg.vs_name, cfg.kind)
    out += "  }\n"
    if project.compiled_files:
        out += "  sources {\n"
        out += _indent(_indent("\n".join(_path(f, base) for f in project.compiled_files)))
        out += "  }\n"
    if project.header_files:
        out += "  headers {\n"
        out += _indent(_indent("\n".join(_path(f, base) for f in project.header_files)))
        out += "  }\n"
    if project.source_files:
        out += "  extra {\n"
        out += _indent(_indent("\n".join(_path(f, base) for f in project.source_files)))
        out += "  }\n"
    out += "}"
    return out


def dump_solution(solution):
    out = "solution %s {\n" % solution.name
    for p in solution.projects:
        out += "  %s\n" % p.unit.child_path(p.name)
    out += "}"
    return out


def _path(filename, base):
    # use Unix filename syntax in the dumps even on Windows
    if os.path.isabs(filename):
        filename = os.path.relpath(filename, base)
    return filename.replace("\\", "/")


def _indent(text):
    lines = text.split("\n")
    out = ""
    for x in lines:
        if x != "":
            x = "  %s" % x
            out += "%s\n" % x
    return out
