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
MSBuild-based project files (``.vcxproj`` and ``.vcxproj.filters``) and
solutions for Visual Studio 2010 and later.
"""

import os.path

from vside.error import UnsupportedError
from vside.io import OutputFile, EOL_WINDOWS
from vside.targets import EXECUTABLE, SHARED_LIBRARY, STATIC_LIBRARY
from vside.utils import native_relpath

from vside.plugins.vsbase import (Node, XmlFormatter, VSSolutionBase,
                                  project_guid)


class VS201xXmlFormatter(XmlFormatter):
    """
    XmlFormatter for VS 201x output.
    """

    elems_not_collapsed = set(["ImportGroup"])


class VS2010Solution(VSSolutionBase):
    format_version = "11.00"
    human_version = "2010"


class VS2012Solution(VS2010Solution):
    format_version = "12.00"
    human_version = "2012"


class VS2013Solution(VS2010Solution):
    format_version = "12.00" # not a typo - same as VS2012
    human_version = "2013"

    #: Value of VisualStudioVersion in the header
    full_version = "12.0.21005.1"

    def write_header(self, file):
        super(VS2013Solution, self).write_header(file)
        file.write("VisualStudioVersion = %s\n" % self.full_version)
        file.write("MinimumVisualStudioVersion = 10.0.40219.1\n")


class VS2015Solution(VS2013Solution):
    # Unlike the previous versions, this one uses the numeric version and not
    # the year in the comment.
    human_version = "14"
    full_version = "14.0.23107.0"


class VS2017Solution(VS2013Solution):
    human_version = "15"
    full_version = "15.0.27130.2003"

    def write_extra_global_sections(self, file):
        file.write("\tGlobalSection(ExtensibilityGlobals) = postSolution\n")
        file.write("\t\tSolutionGuid = {%s}\n" % self.guid)
        file.write("\tEndGlobalSection\n")


class VS2019Solution(VS2017Solution):
    human_version = "16"
    full_version = "16.0.29020.237"


class VS2022Solution(VS2017Solution):
    human_version = "17"
    full_version = "17.0.31919.166"


class VS2010Format(object):
    """
    Visual Studio 2010 files format.
    """

    #: Version of the MSVS product
    msvs_version = 2010
    #: PlatformToolset property, if VS doesn't use its default
    platform_toolset = None
    #: ToolsVersion property
    tools_version = "4.0"
    #: Solution class for this VS version
    Solution = VS2010Solution


class VS2012Format(VS2010Format):
    msvs_version = 2012
    platform_toolset = "v110"
    Solution = VS2012Solution


class VS2013Format(VS2010Format):
    msvs_version = 2013
    platform_toolset = "v120"
    tools_version = "12.0"
    Solution = VS2013Solution


class VS2015Format(VS2010Format):
    msvs_version = 2015
    platform_toolset = "v140"
    tools_version = "14.0"
    Solution = VS2015Solution


class VS2017Format(VS2010Format):
    msvs_version = 2017
    platform_toolset = "v141"
    tools_version = "15.0"
    Solution = VS2017Solution


class VS2019Format(VS2010Format):
    msvs_version = 2019
    platform_toolset = "v142"
    tools_version = "16.0"
    Solution = VS2019Solution


class VS2022Format(VS2010Format):
    msvs_version = 2022
    platform_toolset = "v143"
    tools_version = "17.0"
    Solution = VS2022Solution


all_versions = {
        2010: VS2010Format,
        2012: VS2012Format,
        2013: VS2013Format,
        2015: VS2015Format,
        2017: VS2017Format,
        2019: VS2019Format,
        2022: VS2022Format,
    }


def get_format(msvs_version):
    try:
        return all_versions[msvs_version]
    except KeyError:
        raise UnsupportedError("Visual Studio %s is not supported (supported versions: %s)" %
                               (msvs_version, ", ".join(str(x) for x in sorted(all_versions))))


def _condition(cfg):
    return "'$(Configuration)|$(Platform)'=='%s'" % cfg.vs_name


class VS201xProjectWriter(object):
    """
    Writes project and filters files of one project.

    The project is only read by :meth:`generate_project` and
    :meth:`generate_filters`, so the output always reflects its current
    content.
    """

    XmlFormatter = VS201xXmlFormatter

    def __init__(self, fmt, project):
        self.format = fmt
        self.project = project
        self.project_dir = os.path.dirname(project.project_file)

    def _path(self, filename):
        """Returns *filename* relative to the project file."""
        if not os.path.isabs(filename):
            filename = os.path.join(self.project.unit.directory, filename)
        return native_relpath(filename, self.project_dir)

    def get_std_defines(self, cfg):
        """
        Returns list of predefined preprocessor symbols to use.
        """
        defs = ["WIN32"]
        defs.append("_DEBUG" if cfg.is_debug else "NDEBUG")
        if cfg.kind == EXECUTABLE:
            defs.append("_CONSOLE")
        elif cfg.kind == STATIC_LIBRARY:
            defs.append("_LIB")
        elif cfg.kind == SHARED_LIBRARY:
            defs.append("%s_EXPORTS" % self.project.name.upper())
        return defs

    def project_node(self):
        prj = self.project
        configs = prj.configurations

        root = Node("Project")
        root["DefaultTargets"] = "Build"
        root["ToolsVersion"] = self.format.tools_version
        root["xmlns"] = "http://schemas.microsoft.com/developer/msbuild/2003"

        n_configs = Node("ItemGroup", Label="ProjectConfigurations")
        for cfg in configs:
            n = Node("ProjectConfiguration", Include=cfg.vs_name)
            n.add("Configuration", cfg.configuration_name)
            n.add("Platform", cfg.platform_name)
            n_configs.add(n)
        root.add(n_configs)

        n_globals = Node("PropertyGroup", Label="Globals")
        n_globals.add("ProjectGuid", "{%s}" % project_guid(prj))
        n_globals.add("Keyword", "Win32Proj")
        n_globals.add("RootNamespace", prj.name)
        n_globals.add("ProjectName", prj.name)
        root.add(n_globals)

        root.add("Import", Project="$(VCTargetsPath)\\Microsoft.Cpp.Default.props")

        for cfg in configs:
            n = Node("PropertyGroup", Label="Configuration")
            n["Condition"] = _condition(cfg)
            n.add("ConfigurationType", cfg.configuration_type)
            n.add("UseDebugLibraries", cfg.is_debug)
            n.add("CharacterSet", "Unicode")
            if self.format.platform_toolset:
                n.add("PlatformToolset", self.format.platform_toolset)
            root.add(n)

        root.add("Import", Project="$(VCTargetsPath)\\Microsoft.Cpp.props")
        root.add("ImportGroup", Label="ExtensionSettings")

        for cfg in configs:
            n = Node("ImportGroup", Label="PropertySheets")
            n["Condition"] = _condition(cfg)
            n.add("Import",
                  Project="$(UserRootDir)\\Microsoft.Cpp.$(Platform).user.props",
                  Condition="exists('$(UserRootDir)\\Microsoft.Cpp.$(Platform).user.props')",
                  Label="LocalAppDataPlatform")
            root.add(n)

        root.add("PropertyGroup", Label="UserMacros")

        for cfg in configs:
            n = Node("PropertyGroup")
            if cfg.kind != STATIC_LIBRARY:
                n.add("LinkIncremental", cfg.is_debug)
            if cfg.output_file is not None:
                n.add("OutDir", self._path(os.path.dirname(cfg.output_file)) + "\\")
                if cfg.output_name != prj.name:
                    n.add("TargetName", cfg.output_name)
                n.add("TargetExt", cfg.output_extension)
            if n.has_children():
                n["Condition"] = _condition(cfg)
                root.add(n)

        for cfg in configs:
            n = Node("ItemDefinitionGroup")
            n["Condition"] = _condition(cfg)
            n_cl = Node("ClCompile")
            n_cl.add("WarningLevel", "Level3")
            if cfg.is_debug:
                n_cl.add("Optimization", "Disabled")
            else:
                n_cl.add("Optimization", "MaxSpeed")
                n_cl.add("FunctionLevelLinking", True)
                n_cl.add("IntrinsicFunctions", True)
            n_cl.add_with_default("PreprocessorDefinitions",
                                  list(cfg.defines) + self.get_std_defines(cfg))
            n_cl.add_with_default("AdditionalIncludeDirectories",
                                  [self._path(x) for x in cfg.include_dirs])
            n_cl.add("RuntimeLibrary", "MultiThreadedDebugDLL" if cfg.is_debug else "MultiThreadedDLL")
            n.add(n_cl)

            if cfg.kind != STATIC_LIBRARY:
                n_link = Node("Link")
                n_link.add("SubSystem", "Console")
                n_link.add("GenerateDebugInformation", True)
                if not cfg.is_debug:
                    n_link.add("EnableCOMDATFolding", True)
                    n_link.add("OptimizeReferences", True)
                n.add(n_link)
            root.add(n)

        headers = prj.header_files
        if headers:
            items = Node("ItemGroup")
            root.add(items)
            for f in headers:
                items.add(Node("ClInclude", Include=self._path(f)))

        sources = prj.compiled_files
        if sources:
            items = Node("ItemGroup")
            root.add(items)
            for f in sources:
                items.add(Node("ClCompile", Include=self._path(f)))

        extras = prj.source_files
        if extras:
            items = Node("ItemGroup")
            root.add(items)
            for f in extras:
                items.add(Node("None", Include=self._path(f)))

        root.add("Import", Project="$(VCTargetsPath)\\Microsoft.Cpp.targets")
        root.add("ImportGroup", Label="ExtensionTargets")
        return root

    def filters_node(self):
        prj = self.project

        root = Node("Project")
        root["ToolsVersion"] = "4.0" # even if tools_version is different (VS2013)
        root["xmlns"] = "http://schemas.microsoft.com/developer/msbuild/2003"
        filters = Node("ItemGroup")
        root.add(filters)
        f = Node("Filter", Include="Source Files")
        filters.add(f)
        f.add("UniqueIdentifier", "{4FC737F1-C7A5-4376-A066-2A32D752A2FF}")
        f.add("Extensions", "cpp;c;cc;cxx;def;odl;idl;hpj;bat;asm;asmx")
        f = Node("Filter", Include="Header Files")
        filters.add(f)
        f.add("UniqueIdentifier", "{93995380-89BD-4b04-88EB-625FBE52EBFB}")
        f.add("Extensions", "h;hpp;hxx;hm;inl;inc;xsd")

        headers = prj.header_files
        if headers:
            group = Node("ItemGroup")
            root.add(group)
            for sfile in headers:
                n = Node("ClInclude", Include=self._path(sfile))
                group.add(n)
                n.add("Filter", "Header Files")

        sources = prj.compiled_files
        if sources:
            group = Node("ItemGroup")
            root.add(group)
            for sfile in sources:
                n = Node("ClCompile", Include=self._path(sfile))
                group.add(n)
                n.add("Filter", "Source Files")

        extras = prj.source_files
        if extras:
            group = Node("ItemGroup")
            root.add(group)
            for sfile in extras:
                group.add(Node("None", Include=self._path(sfile)))

        return root

    def _generate(self, filename, root, creator):
        formatter = self.XmlFormatter()
        f = OutputFile(filename, EOL_WINDOWS,
                       creator=creator, create_for=self.project)
        f.write("\ufeff")
        f.write(formatter.format(root))
        return f.commit()

    def generate_project(self, creator=None):
        """Writes the project file, returns the commit status."""
        return self._generate(self.project.project_file, self.project_node(), creator)

    def generate_filters(self, creator=None):
        """Writes the filters file, returns the commit status."""
        return self._generate(self.project.filters_file, self.filters_node(), creator)
