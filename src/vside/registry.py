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
In-memory description of the Visual Studio projects and solution to generate.

:class:`ProjectRegistry` maps component names to :class:`VisualStudioProject`
descriptors, each of which collects one configuration per binary of the
component. :class:`VisualStudioSolution` refers to the projects of all
registries of the build tree. None of these classes do any I/O.
"""

import os.path
import threading

import logging
logger = logging.getLogger("vside.registry")

from vside.containers import DomainObjectSet
from vside.error import InvariantError, NotFoundError
from vside.utils import OrderedSet


# States of a project descriptor
STATE_UNREGISTERED = "unregistered"
STATE_REGISTERED   = "registered"
STATE_TASK_BOUND   = "task-bound"
STATE_GENERATED    = "generated"


class VisualStudioProject(object):
    """
    Descriptor of one project, i.e. of one component and all of its
    configurations.

    .. attribute:: name

       Name of the project, same as the name of the component.

    .. attribute:: unit

       :class:`vside.model.BuildUnit` the component belongs to.
    """
    def __init__(self, name, unit, lock=None):
        self.name = name
        self.unit = unit
        self._lock = lock if lock is not None else threading.RLock()
        self._configurations = []
        self._source_files = OrderedSet()
        self._built_by = []
        self._project_file = None

    def __str__(self):
        return "project %s" % self.unit.child_path(self.name)

    def __repr__(self):
        return "<VisualStudioProject %s>" % self.unit.child_path(self.name)

    @property
    def source_pos(self):
        return str(self)

    @property
    def identity(self):
        return (self.unit.path, self.name)

    @property
    def configurations(self):
        """Configurations (:class:`vside.targets.VisualStudioTargetBinary`) in insertion order."""
        with self._lock:
            return list(self._configurations)

    @property
    def source_files(self):
        """Auxiliary source files, such as the build file of the unit."""
        with self._lock:
            return list(self._source_files)

    def add_configuration(self, target_binary):
        with self._lock:
            if target_binary.component_identity != self.identity:
                raise InvariantError("cannot add %s of component %s to %s" %
                                     (target_binary, ":".join(target_binary.component_identity), self),
                                     pos=self.source_pos)
            if self.get_configuration(target_binary.vs_name) is not None:
                raise InvariantError("duplicate configuration %s in %s" %
                                     (target_binary.vs_name, self),
                                     pos=self.source_pos)
            self._configurations.append(target_binary)
            logger.debug("%s: added configuration %s (%s)",
                         self, target_binary.vs_name, target_binary.kind)

    def add_source_file(self, filename):
        with self._lock:
            self._source_files.add(filename)

    def get_configuration(self, vs_name):
        with self._lock:
            for c in self._configurations:
                if c.vs_name == vs_name:
                    return c
        return None

    @property
    def platforms(self):
        """Names of all platforms used by the configurations, in order."""
        return list(OrderedSet(c.platform_name for c in self.configurations))

    @property
    def compiled_files(self):
        """Union of the source files of all configurations."""
        result = OrderedSet()
        for c in self.configurations:
            result.update(c.source_files)
        return list(result)

    @property
    def header_files(self):
        """Union of the header files of all configurations."""
        result = OrderedSet()
        for c in self.configurations:
            result.update(c.header_files)
        return list(result)

    @property
    def link_dependencies(self):
        """Union of the names of components linked by any configuration."""
        result = OrderedSet()
        for c in self.configurations:
            result.update(c.link_dependencies)
        return list(result)

    def _get_project_file(self):
        if self._project_file is not None:
            return self._project_file
        return os.path.join(self.unit.directory, "%s.vcxproj" % self.name)

    def _set_project_file(self, filename):
        self._project_file = os.path.abspath(filename)

    project_file = property(_get_project_file, _set_project_file,
                            doc="Location of the project file; defaults to "
                                "``<name>.vcxproj`` in the unit's directory.")

    @property
    def filters_file(self):
        return self.project_file + ".filters"

    def built_by(self, *tasks):
        """Registers the tasks generating files of this project."""
        with self._lock:
            self._built_by.extend(tasks)

    def build_dependencies(self):
        with self._lock:
            return list(self._built_by)

    @property
    def state(self):
        with self._lock:
            if not self._configurations:
                return STATE_UNREGISTERED
            if not self._built_by:
                return STATE_REGISTERED
            if all(t.state is not None for t in self._built_by):
                return STATE_GENERATED
            return STATE_TASK_BOUND


class ProjectRegistry(object):
    """
    Registry of all projects of one build unit, keyed by component name and
    iterated in registration order.

    All modifications are serialized by a per-registry lock, so the registry
    may be filled from several threads.
    """
    def __init__(self, unit):
        self.unit = unit
        self._lock = threading.RLock()
        self._projects = DomainObjectSet()

    def __str__(self):
        return "projects of %s" % self.unit

    def register(self, component_name):
        """
        Returns project for *component_name*, creating it if necessary.
        """
        with self._lock:
            project = self._projects.find(component_name)
            if project is None:
                project = VisualStudioProject(component_name, self.unit, self._lock)
                logger.debug("registered %s", project)
                self._projects.add(project)
            return project

    def add_configuration(self, project, target_binary):
        with self._lock:
            if self._projects.find(project.name) is not project:
                raise InvariantError("%s is not registered in %s" % (project, self))
            project.add_configuration(target_binary)

    def add_project_configuration(self, target_binary):
        """
        Adds *target_binary* as a configuration of the project of its
        component, registering the project first if needed.
        """
        with self._lock:
            project = self.register(target_binary.project_name)
            self.add_configuration(project, target_binary)
            return project

    def add_auxiliary_source(self, filename):
        """
        Adds *filename* to all projects, including the ones registered in the
        future.
        """
        self.all(lambda project: project.add_source_file(filename))

    def all(self, action):
        """
        Runs *action* for every registered project and for every project
        registered later.
        """
        with self._lock:
            self._projects.all(action)

    def for_each(self, visitor):
        """Runs *visitor* for all currently registered projects, in order."""
        for project in self:
            visitor(project)

    def find(self, name):
        with self._lock:
            return self._projects.find(name)

    def __getitem__(self, name):
        project = self.find(name)
        if project is None:
            raise NotFoundError("project \"%s\" not found" % name, pos=self.unit.source_pos)
        return project

    def __contains__(self, name):
        return self.find(name) is not None

    def __iter__(self):
        with self._lock:
            return iter(list(self._projects))

    def __len__(self):
        return len(self._projects)

    def build_dependencies(self):
        return list(self)


class VisualStudioSolution(object):
    """
    Descriptor of a solution, referring to the projects of all registries of
    the build tree.

    .. attribute:: name

       Name of the solution, same as the name of the root unit.
    """
    def __init__(self, name, unit, registries):
        """
        :param registries: Callable returning the list of
               :class:`ProjectRegistry` objects to take projects from. It is
               called every time the projects are needed, so that registries
               and projects added later are included.
        """
        self.name = name
        self.unit = unit
        self._registries = registries
        self._built_by = []
        self._solution_file = None

    def __str__(self):
        return "solution %s" % self.name

    @property
    def source_pos(self):
        return str(self)

    @property
    def projects(self):
        result = []
        for registry in self._registries():
            result.extend(registry)
        return result

    def find_project(self, name, prefer_unit=None):
        """
        Returns the project called *name*, preferring the one from unit
        *prefer_unit* if there are more of them, or :const:`None`.
        """
        found = [p for p in self.projects if p.name == name]
        for p in found:
            if p.unit is prefer_unit:
                return p
        return found[0] if found else None

    def _get_solution_file(self):
        if self._solution_file is not None:
            return self._solution_file
        return os.path.join(self.unit.directory, "%s.sln" % self.name)

    def _set_solution_file(self, filename):
        self._solution_file = os.path.abspath(filename)

    solution_file = property(_get_solution_file, _set_solution_file)

    def built_by(self, *tasks):
        self._built_by.extend(tasks)

    def build_dependencies(self):
        return list(self._built_by)
