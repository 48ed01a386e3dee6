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
Adapters presenting finalized binaries as Visual Studio project
configurations.
"""

import os.path

import vside.model
from vside.error import InvariantError
from vside.utils import capitalize


# Kinds of binaries that can be represented as a project configuration:
EXECUTABLE     = "executable"
SHARED_LIBRARY = "shared-library"
STATIC_LIBRARY = "static-library"

OUTPUT_KINDS = (EXECUTABLE, SHARED_LIBRARY, STATIC_LIBRARY)

# Values of ConfigurationType element in project files
CONFIGURATION_TYPES = {
    EXECUTABLE:     "Application",
    SHARED_LIBRARY: "DynamicLibrary",
    STATIC_LIBRARY: "StaticLibrary",
}

ARCHS_MAPPING = {
    "x86":    "Win32",
    "i386":   "Win32",
    "x86_64": "x64",
    "x86-64": "x64",
    "amd64":  "x64",
    "arm64":  "ARM64",
}


def classify(binary):
    """
    Returns output kind of *binary* or :const:`None` if the binary cannot be
    represented in a project (e.g. it's only a collection of object files).
    """
    if isinstance(binary, vside.model.Executable):
        return EXECUTABLE
    elif isinstance(binary, vside.model.SharedLibrary):
        return SHARED_LIBRARY
    elif isinstance(binary, vside.model.StaticLibrary):
        return STATIC_LIBRARY
    else:
        return None


def platform_for_arch(arch):
    """Returns Visual Studio platform name ("Win32", "x64") for *arch*."""
    try:
        return ARCHS_MAPPING[arch.lower()]
    except KeyError:
        # VS uses the architecture name for platforms it has no alias for
        return arch


class VisualStudioTargetBinary(object):
    """
    Immutable view of one finalized binary as a configuration of the project
    of its component.

    .. attribute:: unit_name, unit_path

       Name and path of the build unit the component belongs to.

    .. attribute:: component_name

       Name of the owning component; this is also the name of the project.

    .. attribute:: kind

       One of :const:`OUTPUT_KINDS`.

    .. attribute:: configuration_name

       Configuration name as used by Visual Studio, e.g. ``"Debug"``.

    .. attribute:: platform_name

       Platform name as used by Visual Studio, e.g. ``"Win32"``.
    """

    __slots__ = ("unit_name", "unit_path", "component_name", "kind",
                 "configuration_name", "platform_name", "is_debug",
                 "source_files", "header_files", "include_dirs", "defines",
                 "link_dependencies", "output_file", "source_pos")

    def __init__(self, unit_name, unit_path, component, binary, kind):
        if kind not in OUTPUT_KINDS:
            raise InvariantError("unrecognized kind \"%s\" of %s" % (kind, binary))
        if binary.component is not component:
            raise InvariantError("%s doesn't belong to %s" % (binary, component))
        if not binary.is_finalized:
            raise InvariantError("%s is not finalized yet" % binary)
        s = super(VisualStudioTargetBinary, self).__setattr__
        s("unit_name", unit_name)
        s("unit_path", unit_path)
        s("component_name", component.name)
        s("kind", kind)
        s("configuration_name", capitalize(binary.configuration))
        s("platform_name", platform_for_arch(binary.arch))
        s("is_debug", binary.debuggable)
        s("source_files", tuple(binary.sources))
        s("header_files", tuple(binary.headers))
        s("include_dirs", tuple(binary.include_dirs))
        s("defines", tuple(binary.defines))
        s("link_dependencies", tuple(binary.link_dependencies))
        s("output_file", binary.output_file)
        s("source_pos", binary.source_pos)

    def __setattr__(self, name, value):
        raise InvariantError("%s is read-only" % self)

    def __str__(self):
        return "configuration %s of %s" % (self.vs_name, self.component_name)

    def __repr__(self):
        return "<VisualStudioTargetBinary %s %s %s>" % (self.component_name, self.vs_name, self.kind)

    @property
    def component_identity(self):
        return (self.unit_path, self.component_name)

    @property
    def project_name(self):
        return self.component_name

    @property
    def vs_name(self):
        """Configuration and platform, e.g. ``"Debug|Win32"``."""
        return "%s|%s" % (self.configuration_name, self.platform_name)

    @property
    def configuration_type(self):
        return CONFIGURATION_TYPES[self.kind]

    @property
    def output_name(self):
        """Base name of the output file without extension, or None."""
        if self.output_file is None:
            return None
        return os.path.splitext(os.path.basename(self.output_file))[0]

    @property
    def output_extension(self):
        """Extension of the output file including the dot, or None."""
        if self.output_file is None:
            return None
        return os.path.splitext(self.output_file)[1]
