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
Base classes for Visual Studio files output.
"""

import os.path
import uuid
from xml.sax.saxutils import escape, quoteattr

import logging
logger = logging.getLogger("vside.vsbase")

from vside.error import error_context, warning
from vside.io import OutputFile, EOL_WINDOWS
from vside.utils import OrderedSet, filter_duplicates, native_relpath


# Namespace constants for the GUID function
NAMESPACE_PROJECT   = uuid.UUID("{D9BD5916-F055-4D77-8C69-9448E02BF433}")
NAMESPACE_SLN_GROUP = uuid.UUID("{2D0C29E0-512F-47BE-9AC4-F4CAE74AE16E}")

# Kinds of projects, as used in solution files
PROJECT_KIND_C      = "{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}"

def GUID(namespace, solution, data):
    """
    Generates GUID in given namespace, for given solution (unit path), with
    given data (typically, project name).
    """
    g = uuid.uuid5(namespace, '%s/%s' % (str(solution), str(data)))
    return str(g).upper()


def project_guid(project):
    return GUID(NAMESPACE_PROJECT, project.unit.path, project.name)


def solution_guid(solution):
    return GUID(NAMESPACE_SLN_GROUP, solution.unit.path, solution.name)


class Node(object):
    """
    Convenience representation of XML node for project file output. It provides
    two useful features:

      1. Ability to concisely specify attributes
      2. Values aren't limited to strings, they may be any Python objects
         convertible to strings, booleans or lists.

    Attributes are added to the node using keyword arguments to the constructor
    or using dictionary-like access:
    >>> node["Label"] = "PropertySheets"

    Child nodes are added using the :meth:`add()` method.
    """
    def __init__(self, name, text=None, **kwargs):
        """
        Creates an XML node with given element name. If provided, the text is
        used for its textual content. Any provided keyword arguments are used
        to add attributes to the node.

        Examples:

        >>> Node("ImportGroup", Label="PropertySheets", Foo="A")
            # creates <ImportGroup Foo="A" Label="PropertySheets"/>
        >>> Node("LinkIncremental", True)
            # creates <LinkIncremental>true</LinkIncremental>
        """
        self.name = name
        self.text = text
        self.attrs = {}
        self.children = []
        for key in sorted(kwargs.keys()):
            self.attrs[key] = kwargs[key]

    def __setitem__(self, key, value):
        self.attrs[key] = value

    def __getitem__(self, key):
        return self.attrs[key]

    def add(self, *args, **kwargs):
        """
        Add a child to this node. There are several ways of invoking add():

        The argument may be another node:
        >>> n.add(Node("foo"))

        Or it may be key-value pair, where the value is any Python value
        convertible to string; the first argument is name of child element
        and the second one is its textual value:
        >>> n.add("ProjectGuid", "{31DC1570-67C5-40FD-9130-C5F57BAEBA88}")

        Or it can take the same arguments that Node constructor takes; this is
        equivalent to creating a Node using the same arguments and then adding
        it using the first form of add():
        >>> n.add("ImportGroup", Label="PropertySheets")
        """
        assert len(args) > 0
        arg0 = args[0]
        if len(args) == 1:
            if isinstance(arg0, Node):
                self.children.append((arg0.name, arg0))
                return
            elif isinstance(arg0, str):
                self.children.append((arg0, Node(arg0, **kwargs)))
                return
        elif len(args) == 2:
            if isinstance(arg0, str) and len(kwargs) == 0:
                    self.children.append((arg0, args[1]))
                    return
        assert 0, "add() is confused: what are you trying to do?"

    def add_with_default(self, name, value):
        """
        Add an element with the given value and the default element value.

        This produces output of the form "<Foo>our-value-of-foo;%(Foo)</Foo>"
        in the generated project file, which is desirable as it preserves any
        changes to this property in the previously included property sheets.

        If the value is empty, this method doesn't do anything at all.
        """
        if not value:
            return
        value_with_def = list(value)
        value_with_def.append('%%(%s)' % name)
        self.children.append((name, value_with_def))

    def has_children(self):
        return len(self.children) > 0


XML_HEADER = """\
<?xml version="1.0" encoding="%(charset)s"?>
<!-- This file was generated by vside.
     Do not modify, all changes will be overwritten! -->
"""

class XmlFormatter(object):
    """
    Formats Node hierarchy into XML output that looks like Visual Studio's
    native format.
    """

    #: String used to increase indentation
    indent_step = "  "

    #: Separator of list items
    list_sep = ";"

    #: Elements which are written in full form when empty.
    elems_not_collapsed = set()

    def __init__(self, charset="utf-8"):
        self.charset = charset

    def format(self, node):
        """
        Formats given node as an XML document and returns the document as a
        string.
        """
        return XML_HEADER % dict(charset=self.charset) + self._do_format_node(node, "")

    def _do_format_node(self, n, indent):
        attrs = self._get_quoted_nonempty_attrs(n)
        if n.children:
            children_markup = []
            assert not n.text, "nodes with both text and children not implemented"
            subindent = indent + self.indent_step
            for key, value in n.children:
                if isinstance(value, Node):
                    assert key == value.name
                    children_markup.append(self._do_format_node(value, subindent))
                else:
                    v = escape(self.format_value(value))
                    if v:
                        children_markup.append("%s<%s>%s</%s>\n" % (subindent, key, v, key))
                    # else: empty value, don't write that
            children_markup = "".join(children_markup)
        else:
            children_markup = None
        text = escape(self.format_value(n.text)) if n.text is not None else None
        return self.format_node(n.name, attrs, text, children_markup, indent)

    def format_node(self, name, attrs, text, children_markup, indent):
        """
        Formats given Node instance, indented with *indent* text.

        Content is either *text* or *children_markup*; the other is None. All
        arguments already use properly escaped markup; values in *attrs* are
        quoted and escaped.
        """
        s = "%s<%s" % (indent, name)
        if attrs:
            s += self.format_attrs(attrs, indent)

            if text or children_markup:
                s += ">"
            else: # An empty element
                # Some empty elements are output as "<foo/>" while others as
                # "<foo>\n</foo>".
                if name not in self.elems_not_collapsed:
                    s += " />\n"
                    return s

                s += ">\n"
                s += indent
        else:
            if text or children_markup:
                s += ">"
            else:
                s += ">\n"
                s += indent

        if text:
            s += text
        elif children_markup:
            s += "\n"
            s += children_markup
            s += indent

        s += "</%s>\n" % name

        return s

    def format_attrs(self, attrs, indent):
        s = ''
        for key, value in attrs:
            s += ' %s=%s' % (key, value)
        return s

    def format_value(self, val):
        """
        Formats given value (of any type) into XML text.
        """
        if isinstance(val, bool):
            return "true" if val else "false"
        elif isinstance(val, (list, tuple)):
            return self.list_sep.join(x for x in (self.format_value(i) for i in val) if x)
        elif val is None:
            return ""
        else:
            return str(val)

    def _get_quoted_nonempty_attrs(self, n):
        ret = []
        for key, value in n.attrs.items():
            fv = self.format_value(value)
            if fv:
                ret.append((key, quoteattr(fv)))
        return ret


class VSSolutionBase(object):
    """
    Base class for writing a Visual Studio solution file.

    Derived classes must set :attr:`format_version` and :attr:`human_version`
    and may override :meth:`write_header()`.
    """

    #: String with format version as used in the header
    format_version = None
    #: ...and in the comment under it (2005 and up)
    human_version = None

    def __init__(self, solution):
        self.solution = solution
        self.slnfile = solution.solution_file
        self.guid = solution_guid(solution)
        self.sln_dir = os.path.dirname(self.slnfile)

    def write_header(self, file):
        file.write("\ufeff\n")
        file.write("Microsoft Visual Studio Solution File, Format Version %s\n" % self.format_version)
        if self.human_version:
            file.write("# Visual Studio %s\n" % self.human_version)

    def _project_dependencies(self, prj):
        deps = []
        for name in prj.link_dependencies:
            dep = self.solution.find_project(name, prefer_unit=prj.unit)
            if dep is None:
                logger.debug("%s: dependency \"%s\" is not a project of %s",
                             prj, name, self.solution)
                continue
            if dep is prj:
                continue
            deps.append(dep)
        return list(filter_duplicates(deps))

    def write(self, outf):
        """Writes the solution to *outf*, an :class:`vside.io.OutputFile`."""
        self.write_header(outf)

        # Projects are enumerated only now, so that projects registered after
        # the solution was set up are included too:
        projects = [p for p in self.solution.projects if p.configurations]

        configurations_set = OrderedSet()
        for prj in projects:
            configurations_set.update(c.vs_name for c in prj.configurations)

        # MSVS own projects always list configurations in alphabetical order,
        # so do the same thing as it does.
        configurations = sorted(configurations_set, key=lambda c: c.lower())

        for prj in projects:
            projectfile = native_relpath(prj.project_file, self.sln_dir)
            outf.write('Project("%s") = "%s", "%s", "{%s}"\n' %
                       (PROJECT_KIND_C, prj.name, projectfile, project_guid(prj)))
            deps = self._project_dependencies(prj)
            if deps:
                outf.write("\tProjectSection(ProjectDependencies) = postProject\n")
                for d in deps:
                    outf.write("\t\t{%(g)s} = {%(g)s}\n" % {'g':project_guid(d)})
                outf.write("\tEndProjectSection\n")
            outf.write("EndProject\n")

        # Global settings:
        outf.write("Global\n")
        outf.write("\tGlobalSection(SolutionConfigurationPlatforms) = preSolution\n")
        for cfg in configurations:
            outf.write("\t\t%s = %s\n" % (cfg, cfg))
        outf.write("\tEndGlobalSection\n")
        outf.write("\tGlobalSection(ProjectConfigurationPlatforms) = postSolution\n")
        for prj in projects:
            guid = project_guid(prj)
            for cfg in configurations:
                cfgp = prj.get_configuration(cfg)
                if cfgp is not None:
                    outf.write("\t\t{%s}.%s.ActiveCfg = %s\n" % (guid, cfg, cfgp.vs_name))
                    outf.write("\t\t{%s}.%s.Build.0 = %s\n" % (guid, cfg, cfgp.vs_name))
                else:
                    # Can't build in this solution config. Just use the best
                    # matching project configuration and omit the Build.0
                    # node, VS does the same in this case.
                    cfgp = _get_matching_project_config(cfg, prj, projects)
                    outf.write("\t\t{%s}.%s.ActiveCfg = %s\n" % (guid, cfg, cfgp.vs_name))
        outf.write("\tEndGlobalSection\n")
        outf.write("\tGlobalSection(SolutionProperties) = preSolution\n")
        outf.write("\t\tHideSolutionNode = FALSE\n")
        outf.write("\tEndGlobalSection\n")
        self.write_extra_global_sections(outf)
        outf.write("EndGlobal\n")

    def write_extra_global_sections(self, outf):
        """Writes version-specific sections at the end of the Global block."""
        pass

    def generate(self, creator=None):
        """Writes the solution file, returns :meth:`vside.io.OutputFile.commit` status."""
        outf = OutputFile(self.slnfile, EOL_WINDOWS,
                          creator=creator, create_for=self.solution)
        self.write(outf)
        return outf.commit()


def _is_debug_config(vs_name, projects):
    for prj in projects:
        cfg = prj.get_configuration(vs_name)
        if cfg is not None:
            return cfg.is_debug
    return False


def _get_matching_project_config(vs_name, prj, projects):
    """
    Returns best match project configuration for given solution configuration
    that the project doesn't have.
    """
    with error_context(prj):
        configuration, _, platform = vs_name.partition("|")
        is_debug = _is_debug_config(vs_name, projects)

        # Try to at least match debug/release setting, preferring the same
        # platform:
        compatibles = [x for x in prj.configurations if x.is_debug == is_debug]
        compatibles.sort(key=lambda x: x.platform_name != platform)
        if compatibles:
            ret = compatibles[0]
            warning("using unrelated project configuration \"%s\" for solution configuration \"%s\"",
                    ret.vs_name, vs_name)
            return ret
        else:
            ret = prj.configurations[0]
            warning("using incompatible project configuration \"%s\" for solution configuration \"%s\"",
                    ret.vs_name, vs_name)
            return ret
