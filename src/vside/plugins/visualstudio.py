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
The ``visual-studio`` plugin.

Applying the plugin to a build unit registers a project for every application
and library of the unit as soon as their binaries are finalized, and creates
tasks generating the project, filters and (in the root unit) solution files:

  - ``<component>VisualStudioProject`` and ``<component>VisualStudioFilters``
    for every project;
  - ``<component>VisualStudio`` lifecycle task for every project;
  - ``<root>VisualStudioSolution`` in the root unit;
  - ``visualStudio`` and ``cleanVisualStudio`` in every unit.
"""

import logging
logger = logging.getLogger("vside.visualstudio")

from vside.api import IdePlugin, Property, PropertiesHolder
from vside.error import InvariantError, error_context
from vside.io import STATUS_UNCHANGED
from vside.model import Application, Library
from vside.registry import ProjectRegistry, VisualStudioSolution
from vside.targets import EXECUTABLE, VisualStudioTargetBinary, classify
from vside.tasks import Task

from vside.plugins import vs201x


#: Key of :class:`VisualStudioExtension` in :attr:`vside.model.BuildUnit.extensions`
EXTENSION_NAME = "visualStudio"

DEFAULT_VERSION = 2022


def _default_version(ext):
    # sub-units follow the root unit's setting
    if ext.unit.is_root:
        return DEFAULT_VERSION
    root_ext = ext.unit.build.root.extensions.get(EXTENSION_NAME)
    if root_ext is None:
        return DEFAULT_VERSION
    return root_ext["version"]


class VisualStudioExtension(PropertiesHolder):
    """
    Per-unit state of the plugin, available as ``unit.extensions["visualStudio"]``.

    .. attribute:: registry

       :class:`vside.registry.ProjectRegistry` with the unit's projects.

    .. attribute:: solution

       :class:`vside.registry.VisualStudioSolution` with projects of all
       units, only present in the root unit (:const:`None` elsewhere).
    """

    properties = [
        Property("version",
                 type=int,
                 default=_default_version,
                 choices=sorted(vs201x.all_versions),
                 doc="Visual Studio version to generate files for."),
        Property("generate-solution",
                 type=bool,
                 default=True,
                 doc="Whether to generate the solution file (root unit only)."),
        ]

    def __init__(self, unit):
        self.unit = unit
        self.registry = ProjectRegistry(unit)
        if unit.is_root:
            self.solution = VisualStudioSolution(unit.name, unit, self._all_registries)
        else:
            self.solution = None

    def __str__(self):
        return "Visual Studio settings of %s" % self.unit

    @property
    def projects(self):
        return self.registry

    @property
    def format(self):
        """Files format class (e.g. :class:`vside.plugins.vs201x.VS2019Format`)."""
        return vs201x.get_format(self["version"])

    def _all_registries(self):
        return [u.extensions[EXTENSION_NAME].registry
                for u in self.unit.build.all_units()
                if EXTENSION_NAME in u.extensions]


class ProjectFilesTask(Task):
    """
    Base class for tasks writing files of one project, :attr:`project`.
    """
    def __init__(self, name, unit):
        super(ProjectFilesTask, self).__init__(name, unit)
        self.project = None
        self.outputs.file(self._output_file)

    def _output_file(self):
        if self.project is None:
            return None
        return self.get_output_file(self.project)

    def get_output_file(self, project):
        raise NotImplementedError

    def generate(self, writer):
        """Writes the file using *writer*, returns the commit status."""
        raise NotImplementedError

    def run(self):
        fmt = self.unit.extensions[EXTENSION_NAME].format
        with error_context(self.project):
            status = self.generate(vs201x.VS201xProjectWriter(fmt, self.project))
        return status != STATUS_UNCHANGED


class GenerateProjectFileTask(ProjectFilesTask):
    """
    Writes the ``.vcxproj`` file of :attr:`project`.
    """
    def get_output_file(self, project):
        return project.project_file

    def generate(self, writer):
        return writer.generate_project(creator=self)


class GenerateFiltersFileTask(ProjectFilesTask):
    """
    Writes the ``.vcxproj.filters`` file of :attr:`project`.
    """
    def get_output_file(self, project):
        return project.filters_file

    def generate(self, writer):
        return writer.generate_filters(creator=self)


class GenerateSolutionFileTask(Task):
    """
    Writes the ``.sln`` file of :attr:`solution`, unless the solution is
    disabled with the ``generate-solution`` property.
    """
    def __init__(self, name, unit):
        super(GenerateSolutionFileTask, self).__init__(name, unit)
        self.solution = None
        self.outputs.file(self._solution_file)

    @property
    def enabled(self):
        return self.unit.extensions[EXTENSION_NAME]["generate-solution"]

    def _solution_file(self):
        if self.solution is None or not self.enabled:
            return None
        return self.solution.solution_file

    def run(self):
        if not self.enabled:
            logger.debug("%s: solution generation disabled", self.path)
            return False
        fmt = self.unit.extensions[EXTENSION_NAME].format
        with error_context(self.solution):
            status = fmt.Solution(self.solution).generate(creator=self)
        return status != STATUS_UNCHANGED


class VisualStudioPlugin(IdePlugin):
    """
    Generates Visual Studio 2010-2022 projects and solution.
    """
    name = "visual-studio"
    lifecycle_task_name = "visualStudio"

    def on_apply(self, unit):
        extension = VisualStudioExtension(unit)
        unit.extensions[EXTENSION_NAME] = extension

        lifecycle = self.get_lifecycle_task(unit)
        if unit.is_root:
            lifecycle.depends_on(extension.solution)
        else:
            lifecycle.depends_on(extension.projects)

        self.bind_components(unit, extension.registry)
        self.include_build_file(unit, extension.registry)
        self.create_tasks(unit, extension)

    def bind_components(self, unit, registry):
        """
        Registers a project configuration for every binary of unit's
        components as it gets finalized.
        """
        def add_configuration(component, binary, kind):
            tb = VisualStudioTargetBinary(unit.name, unit.path, component, binary, kind)
            registry.add_project_configuration(tb)

        def on_application(app):
            def on_binary(binary):
                with error_context(binary):
                    kind = classify(binary)
                    if kind != EXECUTABLE:
                        raise InvariantError("binaries of %s must be executables" % app)
                    add_configuration(app, binary, kind)
            app.binaries.when_element_finalized(on_binary)

        def on_library(lib):
            def on_binary(binary):
                with error_context(binary):
                    kind = classify(binary)
                    if kind is None:
                        logger.debug("skipping %s, it can't be represented in a project", binary)
                        return
                    add_configuration(lib, binary, kind)
            lib.binaries.when_element_finalized(on_binary)

        unit.components.with_type(Application).all(on_application)
        unit.components.with_type(Library).all(on_library)

    def include_build_file(self, unit, registry):
        if unit.build_file is not None:
            registry.add_auxiliary_source(unit.build_file)

    def create_tasks(self, unit, extension):
        extension.registry.all(lambda project: self.add_project_tasks(unit, project))
        if unit.is_root:
            self.add_solution_task(unit, extension.solution)
        self.configure_clean_task(unit)

    def add_project_tasks(self, unit, project):
        project_task = unit.tasks.create("%sVisualStudioProject" % project.name,
                                         GenerateProjectFileTask)
        project_task.project = project
        project_task.description = "Generates the Visual Studio project for %s." % project.name

        filters_task = unit.tasks.create("%sVisualStudioFilters" % project.name,
                                         GenerateFiltersFileTask)
        filters_task.project = project
        filters_task.description = "Generates the Visual Studio filters for %s." % project.name

        project.built_by(project_task, filters_task)

        lifecycle = unit.tasks.maybe_create("%sVisualStudio" % project.name)
        lifecycle.group = "IDE"
        lifecycle.description = "Generates the Visual Studio project for %s." % project.name
        lifecycle.depends_on(project)

    def add_solution_task(self, unit, solution):
        task = unit.tasks.create("%sVisualStudioSolution" % solution.name,
                                 GenerateSolutionFileTask)
        task.solution = solution
        task.description = "Generates the Visual Studio solution."
        task.depends_on(lambda: solution.projects)
        solution.built_by(task)

    def configure_clean_task(self, unit):
        clean = self.get_clean_task(unit)
        for task_type in (GenerateSolutionFileTask,
                          GenerateFiltersFileTask,
                          GenerateProjectFileTask):
            unit.tasks.with_type(task_type).all(lambda task: clean.delete(task.outputs))
