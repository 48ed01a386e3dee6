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
Model of the native build the IDE files are generated from.

The model is a tree of build units (:class:`BuildUnit`), rooted in the unit
owned by a :class:`Build`. Units contain components (:class:`Application`,
:class:`Library`) and each component produces binaries
(:class:`Executable`, :class:`SharedLibrary`, :class:`StaticLibrary` or
:class:`ObjectFiles`), one per configuration and architecture.

Binaries are created first and can be modified until they are finalized,
after which they are frozen and plugins are notified about them.
"""

import re
import os.path

import logging
logger = logging.getLogger("vside.model")

from vside.containers import DomainObjectSet, FinalizableSet
from vside.error import Error, InvariantError, NotFoundError, error_context
from vside.tasks import TaskContainer, TaskExecutor
from vside.utils import capitalize


class Build(object):
    """
    One invocation of the build. Owns the tree of build units and everything
    plugins attach to them; nothing survives the object except the files
    written by tasks.

    .. attribute:: root

       The root :class:`BuildUnit`.
    """
    def __init__(self, root_dir, name=None, build_file=None):
        if name is None:
            name = os.path.basename(os.path.abspath(root_dir))
        self.root = BuildUnit(self, None, name, root_dir, build_file)

    def all_units(self):
        """Yields all units of the build, parents before their children."""
        todo = [self.root]
        while todo:
            unit = todo.pop(0)
            yield unit
            todo = list(unit.subunits) + todo

    def find_unit(self, path):
        for u in self.all_units():
            if u.path == path:
                return u
        raise NotFoundError("build unit \"%s\" not found" % path)

    def apply_plugin(self, name, units=None, requires=None):
        """
        Applies plugin called *name* to *units* (all units of the build by
        default).

        :param requires: Minimal vside version required by the build, if any.
        """
        import vside.plugins
        from vside.api import Plugin
        from vside.version import check_version
        if requires is not None:
            check_version(requires)
        plugin = Plugin.get(name)
        if units is None:
            units = list(self.all_units())
        for u in units:
            u.apply_plugin(plugin)
        return plugin

    def execute(self, *names):
        """
        Executes the given tasks and their dependencies. Each name is either
        an absolute task path (e.g. ``":libs:core:coreVisualStudio"``) or a
        plain task name, in which case the tasks of that name in all units are
        executed.

        Binaries still pending are finalized first, so that the tasks see the
        complete model. Every call is a separate invocation of the task graph,
        i.e. each task runs at most once per call. Returns the list of tasks
        that ran.
        """
        self.finalize_binaries()
        tasks = []
        for name in names:
            if name.startswith(":"):
                unit_path, _, task_name = name.rpartition(":")
                unit = self.find_unit(unit_path or ":")
                tasks.append(unit.tasks[task_name])
            else:
                found = [u.tasks.find(name) for u in self.all_units()]
                found = [t for t in found if t is not None]
                if not found:
                    raise NotFoundError("task \"%s\" not found in any unit" % name)
                tasks.extend(found)
        return TaskExecutor().execute(tasks)

    def finalize_binaries(self):
        """Finalizes every binary of every component that isn't finalized yet."""
        for unit in self.all_units():
            for component in list(unit.components):
                component.binaries.finalize_all()


class BuildUnit(object):
    """
    One node of the build tree, typically corresponding to one directory with
    a build file in it.

    .. attribute:: name

       Name of the unit.

    .. attribute:: directory

       Directory of the unit; generated files are put there by default.

    .. attribute:: build_file

       Build definition file of the unit or :const:`None` if it doesn't have
       any.

    .. attribute:: components

       Live set of all components (:class:`Component`) of the unit.

    .. attribute:: tasks

       :class:`vside.tasks.TaskContainer` with the unit's tasks.

    .. attribute:: extensions

       Dictionary of objects registered by plugins, keyed by name.
    """
    def __init__(self, build, parent, name, directory, build_file=None):
        self.build = build
        self.parent = parent
        self.name = name
        self.directory = os.path.abspath(directory)
        self.build_file = build_file
        self.subunits = []
        self.components = DomainObjectSet()
        self.tasks = TaskContainer(self)
        self.extensions = {}
        self.applied_plugins = []

    def __str__(self):
        return "build unit %s" % self.path

    @property
    def source_pos(self):
        return str(self)

    @property
    def is_root(self):
        return self.parent is None

    @property
    def path(self):
        if self.is_root:
            return ":"
        return self.parent.child_path(self.name)

    def child_path(self, name):
        """Returns fully qualified path of an object called *name* in this unit."""
        if self.is_root:
            return ":" + name
        return "%s:%s" % (self.path, name)

    def add_subunit(self, name, directory=None, build_file=None):
        """
        Creates a sub-unit. Its directory defaults to subdirectory *name* of
        this unit's directory.
        """
        if any(u.name == name for u in self.subunits):
            raise Error("duplicate build unit \"%s\"" % name, pos=self.source_pos)
        if directory is None:
            directory = os.path.join(self.directory, name)
        unit = BuildUnit(self.build, self, name, directory, build_file)
        self.subunits.append(unit)
        return unit

    def add_application(self, name):
        return self._add_component(Application(self, name))

    def add_library(self, name):
        return self._add_component(Library(self, name))

    def _add_component(self, component):
        if self.components.find(component.name) is not None:
            raise Error("duplicate component \"%s\"" % component.name, pos=self.source_pos)
        logger.debug("added %s", component)
        self.components.add(component)
        return component

    def apply_plugin(self, plugin):
        """Applies *plugin* to this unit, unless it was already applied."""
        if plugin.name in self.applied_plugins:
            return
        self.applied_plugins.append(plugin.name)
        logger.debug("applying %s to %s", plugin, self)
        with error_context(self):
            plugin.apply(self)


class Component(object):
    """
    Logical component of a unit, e.g. an application or a library. Its
    identity is given by the unit path and its name.

    Source files, headers and include directories set on the component are
    used as defaults for all binaries created afterwards.

    .. attribute:: binaries

       :class:`vside.containers.FinalizableSet` of all binaries of the
       component.
    """
    def __init__(self, unit, name):
        self.unit = unit
        self.name = name
        self.sources = []
        self.headers = []
        self.include_dirs = []
        self.binaries = FinalizableSet()

    def __str__(self):
        return "%s %s" % (self.kind_description, self.unit.child_path(self.name))

    kind_description = "component"

    @property
    def source_pos(self):
        return str(self)

    @property
    def identity(self):
        return (self.unit.path, self.name)

    def _create_binary(self, binary_class, configuration, arch):
        binary = binary_class(self, configuration, arch)
        if self.binaries.find(binary.name) is not None:
            raise Error("duplicate binary \"%s\"" % binary.name, pos=self.source_pos)
        self.binaries.add(binary)
        return binary


class Application(Component):
    """Application component, producing executables."""

    kind_description = "application"

    def create_executable(self, configuration, arch="x86"):
        return self._create_binary(Executable, configuration, arch)


class Library(Component):
    """Library component, producing shared and/or static libraries."""

    kind_description = "library"

    def create_shared_library(self, configuration, arch="x86"):
        return self._create_binary(SharedLibrary, configuration, arch)

    def create_static_library(self, configuration, arch="x86"):
        return self._create_binary(StaticLibrary, configuration, arch)

    def create_object_files(self, configuration, arch="x86"):
        return self._create_binary(ObjectFiles, configuration, arch)


class Binary(object):
    """
    One binary variant of a component, for a specific configuration and
    architecture.

    .. attribute:: configuration

       Name of the configuration, e.g. ``"debug"``.

    .. attribute:: arch

       Target architecture, e.g. ``"x86"`` or ``"x86_64"``.

    .. attribute:: debuggable

       Whether this is a debug build; defaults to true for configurations
       with names starting with "debug".

    .. attribute:: sources, headers, include_dirs, defines, link_dependencies

       Lists of source files, header files, include directories, preprocessor
       definitions and names of components linked into this binary. They
       become tuples when the binary is finalized.

    .. attribute:: output_file

       Full path of the produced file; computed on finalization unless set.
    """

    #: Subdirectory of the build directory for this kind of binaries
    output_dir = None
    #: Extension of the output file
    output_extension = None

    _frozen_lists = ("sources", "headers", "include_dirs", "defines", "link_dependencies")

    def __init__(self, component, configuration, arch="x86"):
        self.component = component
        self.configuration = configuration
        self.arch = arch
        self.name = "%s%s" % (configuration, capitalize(re.sub(r"[^A-Za-z0-9]", "", arch)))
        self.debuggable = configuration.lower().startswith("debug")
        self.sources = list(component.sources)
        self.headers = list(component.headers)
        self.include_dirs = list(component.include_dirs)
        self.defines = []
        self.link_dependencies = []
        self.output_file = None
        self._finalized = False

    def __setattr__(self, name, value):
        if self.__dict__.get("_finalized", False):
            raise InvariantError("cannot modify \"%s\" of finalized %s" % (name, self))
        object.__setattr__(self, name, value)

    def __str__(self):
        return "binary %s" % self.component.unit.child_path("%s:%s" % (self.component.name, self.name))

    @property
    def source_pos(self):
        return str(self)

    @property
    def is_finalized(self):
        return self._finalized

    def default_output_file(self):
        if self.output_extension is None:
            return None
        return os.path.join(self.component.unit.directory, "build", self.output_dir,
                            self.component.name, self.configuration, self.arch,
                            "%s.%s" % (self.component.name, self.output_extension))

    def finalize(self):
        """
        Freezes the binary. Called by the owning component's binaries
        container, use :meth:`vside.containers.FinalizableSet.finalize`.
        """
        for attr in self._frozen_lists:
            object.__setattr__(self, attr, tuple(getattr(self, attr)))
        if self.output_file is None:
            object.__setattr__(self, "output_file", self.default_output_file())
        object.__setattr__(self, "_finalized", True)


class Executable(Binary):
    output_dir = "exe"
    output_extension = "exe"


class SharedLibrary(Binary):
    output_dir = "lib"
    output_extension = "dll"


class StaticLibrary(Binary):
    output_dir = "lib"
    output_extension = "lib"


class ObjectFiles(Binary):
    """
    Compiled object files of a library that are not linked into any
    library binary.
    """
    output_dir = "obj"
