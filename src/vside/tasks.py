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
Tasks and the task graph.

A :class:`Task` is a unit of work created during the configuration phase and
executed later by :class:`TaskExecutor`. Both dependencies and outputs of a
task may be given lazily, as callables evaluated only when they are needed, so
that tasks wired early still see everything added to the model afterwards.
"""

import os
import os.path

import logging
logger = logging.getLogger("vside.tasks")

import vside.io
from vside.containers import DomainObjectSet
from vside.error import Error, NotFoundError, error_context
from vside.utils import filter_duplicates


STATE_EXECUTED   = "executed"
STATE_UP_TO_DATE = "up-to-date"


class TaskOutputs(object):
    """
    Declared output files of a task.

    Files are registered with :meth:`file` either as paths or as callables
    returning a path or a list of paths; the callables are evaluated every
    time :attr:`files` is read.
    """
    def __init__(self, task):
        self.task = task
        self._files = []

    def file(self, f):
        self._files.append(f)

    @property
    def files(self):
        result = []
        for f in self._files:
            value = f() if callable(f) else f
            if value is None:
                continue
            if isinstance(value, str):
                result.append(value)
            else:
                result.extend(value)
        return list(filter_duplicates(os.path.abspath(x) for x in result))

    def __iter__(self):
        return iter(self.files)


class Task(object):
    """
    Base class for all tasks. Plain :class:`Task` instances do nothing by
    themselves and are used as lifecycle tasks aggregating other tasks via
    their dependencies.

    .. attribute:: name

       Name of the task, unique within its unit.

    .. attribute:: unit

       :class:`vside.model.BuildUnit` the task belongs to.

    .. attribute:: outputs

       :class:`TaskOutputs` with the files produced by this task.

    .. attribute:: state

       :const:`None` if the task didn't run yet, :const:`STATE_EXECUTED` if it
       did some work or :const:`STATE_UP_TO_DATE` if there was nothing to do.
    """
    def __init__(self, name, unit):
        self.name = name
        self.unit = unit
        self.group = None
        self.description = None
        self.outputs = TaskOutputs(self)
        self.state = None
        self._dependencies = []

    def __str__(self):
        return "task %s" % self.path

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.path)

    @property
    def path(self):
        return self.unit.child_path(self.name)

    @property
    def source_pos(self):
        return str(self)

    def depends_on(self, *deps):
        """
        Adds dependencies of this task. Each dependency may be

          - another :class:`Task`;
          - name of a task in the same unit;
          - any object with ``build_dependencies()`` method returning
            dependencies (e.g. a project built by some tasks);
          - an iterable of any of the above;
          - a callable returning any of the above, evaluated when the task
            graph is resolved.
        """
        self._dependencies.extend(deps)

    def task_dependencies(self):
        """Returns the list of tasks this task depends on."""
        result = []
        for d in self._dependencies:
            self._resolve(d, result)
        return list(filter_duplicates(result))

    def _resolve(self, dep, result):
        if isinstance(dep, Task):
            result.append(dep)
        elif isinstance(dep, str):
            result.append(self.unit.tasks[dep])
        elif hasattr(dep, "build_dependencies"):
            for x in dep.build_dependencies():
                self._resolve(x, result)
        elif callable(dep):
            self._resolve(dep(), result)
        elif dep is None:
            pass
        else:
            for x in dep:
                self._resolve(x, result)

    def execute(self):
        """
        Runs the task and updates its :attr:`state`.
        """
        with error_context(self):
            try:
                did_work = self.run()
            except EnvironmentError as e:
                raise Error("task failed: %s" % e)
        self.state = STATE_EXECUTED if did_work else STATE_UP_TO_DATE
        logger.debug("%s: %s", self.path, self.state)
        return did_work

    def run(self):
        """
        Does the actual work. Returns true if anything was done, false if the
        task was up to date.
        """
        return False


class Delete(Task):
    """
    Task deleting files.

    Files to delete are added with :meth:`delete` and are only resolved when
    the task runs, so they may be given as :class:`TaskOutputs` of tasks whose
    outputs aren't known yet.
    """
    def __init__(self, name, unit):
        super(Delete, self).__init__(name, unit)
        self._targets = []
        self.deleted = []

    def delete(self, *targets):
        """
        Adds files to delete. Each target may be a path, :class:`TaskOutputs`
        instance, a callable returning paths or an iterable of these.
        """
        self._targets.extend(targets)

    @property
    def targets(self):
        result = []
        for t in self._targets:
            self._resolve_target(t, result)
        return list(filter_duplicates(os.path.abspath(x) for x in result))

    def _resolve_target(self, target, result):
        if isinstance(target, str):
            result.append(target)
        elif isinstance(target, TaskOutputs):
            result.extend(target.files)
        elif callable(target):
            self._resolve_target(target(), result)
        elif target is None:
            pass
        else:
            for x in target:
                self._resolve_target(x, result)

    def run(self):
        self.deleted = []
        for filename in self.targets:
            if not os.path.exists(filename):
                continue
            logger.info("D\t%s", vside.io.display_path(filename))
            if not vside.io.dry_run:
                os.remove(filename)
            self.deleted.append(filename)
        return len(self.deleted) > 0


class TaskContainer(DomainObjectSet):
    """
    All tasks of one build unit.
    """
    def __init__(self, unit):
        super(TaskContainer, self).__init__()
        self.unit = unit

    def create(self, name, type=Task):
        """
        Creates a new task of class *type* called *name* and adds it to the
        container. It is an error if such task already exists.
        """
        if self.find(name) is not None:
            raise Error("task \"%s\" already exists" % name, pos=self.unit.source_pos)
        task = type(name, self.unit)
        logger.debug("created task %s (%s)", task.path, type.__name__)
        self.add(task)
        return task

    def maybe_create(self, name, type=Task):
        """
        Returns task called *name*, creating it if it doesn't exist yet.
        """
        task = self.find(name)
        if task is None:
            return self.create(name, type)
        if not isinstance(task, type):
            raise Error("task \"%s\" exists, but is not %s" % (name, type.__name__),
                        pos=self.unit.source_pos)
        return task

    def __getitem__(self, name):
        task = self.find(name)
        if task is None:
            raise NotFoundError("task \"%s\" not found" % name, pos=self.unit.source_pos)
        return task


class TaskExecutor(object):
    """
    Executes tasks together with all their dependencies, in dependency order.
    Every task runs at most once per executor.

    .. attribute:: executed

       List of tasks executed so far, in execution order.
    """
    def __init__(self):
        self.executed = []

    def execute(self, tasks):
        """
        Executes *tasks* and their dependencies and returns the list of tasks
        that were run by this call.
        """
        order = self.order(tasks)
        self._check_outputs(order)
        ran = []
        for t in order:
            if t in self.executed:
                continue
            t.execute()
            self.executed.append(t)
            ran.append(t)
        return ran

    def order(self, tasks):
        """
        Returns *tasks* and all their dependencies, topologically sorted.
        """
        result = []
        done = set()
        visiting = []

        def visit(t):
            if t in done:
                return
            if t in visiting:
                cycle = visiting[visiting.index(t):] + [t]
                raise Error("circular dependency between tasks: %s" %
                            " -> ".join(x.path for x in cycle))
            visiting.append(t)
            for d in t.task_dependencies():
                visit(d)
            visiting.pop()
            done.add(t)
            result.append(t)

        for t in tasks:
            visit(t)
        return result

    def _check_outputs(self, tasks):
        producers = {}
        for t in tasks:
            for f in t.outputs.files:
                other = producers.get(f)
                if other is not None and other is not t:
                    raise Error("conflict in file %s, generated both by %s and %s" %
                                (f, other, t))
                producers[f] = t
