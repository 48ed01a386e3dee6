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
This module contains helper classes for simple handling of errors. In
particular, the :exc:`Error` class keeps track of the build unit, component or
task the error relates to.
"""

import threading

import logging
logger = logging.getLogger("vside.error")


class Error(Exception):
    """
    Base class for all vside errors.

    When converted to string, the message is formatted in the usual way of
    compilers, as ``position: error``.

    .. attribute:: msg

        Error message to show to the user.

    .. attribute:: pos

        Description of the location the error relates to, typically the
        ``source_pos`` of a component, binary or task (e.g.
        ``:libs:core component "core"``). May be :const:`None`.
    """
    def __init__(self, msg, pos=None):
        super(Error, self).__init__(msg)
        self.msg = msg
        self.pos = pos

    def __str__(self):
        if self.pos:
            return "%s: %s" % (self.pos, self.msg)
        else:
            return self.msg


class InvariantError(Error):
    """
    Exception raised when an internal invariant of the project model is
    violated, e.g. when a configuration is added to the project of a different
    component or when a binary of unknown kind is adapted.

    This always indicates a bug in the calling code and is never a
    recoverable condition.
    """
    pass


class VersionError(Error):
    """
    Exception raised when vside version is too old for the build.
    """
    pass


class UnsupportedError(Error):
    """
    Exception class for errors when something is unsupported, e.g. unknown
    Visual Studio version.
    """
    pass


class TypeError(Error):
    """
    Exception class for property type errors.

    .. attribute:: detail

        Any extra details about the error or (usually) :const:`None`.
    """
    def __init__(self, prop, value, msg=None, pos=None):
        """
        Convenience constructor creates error message appropriate for the
        property and value, in the form of ``value "x" is not a valid value of
        property "p"``.

        :param prop:  :class:`vside.api.Property` the error is related to.
        :param value: The offending value.
        :param msg:   Optional error message detailing reasons for the error.
                      This will be stored as :attr:`detail` if provided.
        """
        text = 'value "%s" is not a valid value of property "%s"' % (value, prop.name)
        if msg:
            text += ": %s" % msg
        super(TypeError, self).__init__(text, pos)
        self.detail = msg


class NotFoundError(Error):
    """
    Exception thrown when a property, task or project wasn't found at all.
    """
    pass


class _LocalContextStack(threading.local):
    """
    Helper class for keeping track of :class:`error_context` instances.
    """
    stack = []

    def push(self, ctx):
        if not self.stack:
            self.stack = [ctx]
        else:
            self.stack.append(ctx)

    def pop(self):
        self.stack.pop()

    @property
    def pos(self):
        for c in reversed(self.stack):
            p = c.pos
            if p: return p
        return None


_context_stack = _LocalContextStack()


class error_context:
    """
    Error context for adding positional information to exceptions thrown
    without one. It's much better to provide coarse position information (e.g.
    the component being processed) than not providing any at all.

    Usage:

    .. code-block:: python

       with error_context(component):
          ...do something that may throw...

    .. attribute:: pos

        Position description taken from the context object, may be
        :const:`None`.
    """
    def __init__(self, context):
        self.context = context

    def __enter__(self):
        _context_stack.push(self)

    def __exit__(self, exc_type, exc_value, traceback):
        _context_stack.pop()
        if exc_value is not None:
            if isinstance(exc_value, Error) and exc_value.pos is None:
                exc_value.pos = self.pos

    @property
    def pos(self):
        c = self.context
        if hasattr(c, "source_pos"):
            return c.source_pos
        elif hasattr(c, "pos"):
            return c.pos
        else:
            return None


def warning(msg, *args, **kwargs):
    """
    Logs a warning.

    The function takes position arguments similarly to logging module's
    functions. It also accepts optional *pos* argument with position
    information.

    Uses active :class:`error_context` instances to decorate the warning with
    position information if not provided.

    Usage:

    .. code-block:: python

       vside.error.warning("project %s has no configurations", p.name, pos=p.source_pos)
    """
    text = msg % args
    try:
        pos = kwargs["pos"]
    except KeyError:
        pos = _context_stack.pos
    if pos:
        text = "%s: %s" % (pos, text)
    logger.warning(text, extra={"pos": pos})
