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

import pytest

from vside import error
from vside.model import Build
from vside.plugins import vs201x
from vside.plugins.visualstudio import EXTENSION_NAME
from vside.plugins.vsbase import Node, project_guid, solution_guid


def read(path):
    data = path.read_binary()
    assert data.startswith(b"\xef\xbb\xbf")
    text = data.decode("utf-8-sig")
    assert "\n" not in text.replace("\r\n", "")
    return text.replace("\r\n", "\n")


@pytest.fixture
def build(tmpdir):
    build = Build(str(tmpdir), name="game", build_file=str(tmpdir.join("build.vside")))
    build.apply_plugin("visual-studio")

    app = build.root.add_application("game")
    app.sources = ["src/main.cpp"]
    app.headers = ["src/game.h"]
    app.include_dirs = ["include"]
    debug = app.create_executable("debug")
    debug.defines.append("GAME_DEBUG")
    release = app.create_executable("release", arch="x86_64")
    release.output_file = str(tmpdir.join("bin", "Game2.exe"))
    app.binaries.finalize_all()

    lib = build.root.add_library("core")
    lib.sources = ["core.c"]
    lib.create_static_library("debug")
    lib.create_shared_library("release")
    lib.binaries.finalize_all()
    return build


def test_project_file(build, tmpdir):
    build.execute(":gameVisualStudioProject")
    prj = read(tmpdir.join("game.vcxproj"))
    guid = project_guid(build.root.extensions[EXTENSION_NAME].registry["game"])

    assert prj.startswith('<?xml version="1.0" encoding="utf-8"?>\n')
    assert '<Project DefaultTargets="Build" ToolsVersion="17.0" ' \
           'xmlns="http://schemas.microsoft.com/developer/msbuild/2003">' in prj
    assert '<ProjectConfiguration Include="Debug|Win32">' in prj
    assert '<ProjectConfiguration Include="Release|x64">' in prj
    assert "<ProjectGuid>{%s}</ProjectGuid>" % guid in prj
    assert "<RootNamespace>game</RootNamespace>" in prj
    assert "<ConfigurationType>Application</ConfigurationType>" in prj
    assert "<UseDebugLibraries>true</UseDebugLibraries>" in prj
    assert "<UseDebugLibraries>false</UseDebugLibraries>" in prj
    assert prj.count("<PlatformToolset>v143</PlatformToolset>") == 2
    assert "<OutDir>build\\exe\\game\\debug\\x86\\</OutDir>" in prj
    assert "<OutDir>bin\\</OutDir>" in prj
    assert "<TargetName>Game2</TargetName>" in prj
    assert "<TargetExt>.exe</TargetExt>" in prj
    assert "<PreprocessorDefinitions>GAME_DEBUG;WIN32;_DEBUG;_CONSOLE;%(PreprocessorDefinitions)</PreprocessorDefinitions>" in prj
    assert "<PreprocessorDefinitions>WIN32;NDEBUG;_CONSOLE;%(PreprocessorDefinitions)</PreprocessorDefinitions>" in prj
    assert "<AdditionalIncludeDirectories>include;%(AdditionalIncludeDirectories)</AdditionalIncludeDirectories>" in prj
    assert '<ClCompile Include="src\\main.cpp" />' in prj
    assert '<ClInclude Include="src\\game.h" />' in prj
    assert '<None Include="build.vside" />' in prj
    assert '<ImportGroup Label="ExtensionSettings">\n  </ImportGroup>' in prj
    assert prj.endswith('<Import Project="$(VCTargetsPath)\\Microsoft.Cpp.targets" />\n'
                        '  <ImportGroup Label="ExtensionTargets">\n'
                        '  </ImportGroup>\n'
                        '</Project>\n')


def test_library_project_file(build, tmpdir):
    build.execute(":coreVisualStudioProject")
    prj = read(tmpdir.join("core.vcxproj"))
    assert "<ConfigurationType>StaticLibrary</ConfigurationType>" in prj
    assert "<ConfigurationType>DynamicLibrary</ConfigurationType>" in prj
    assert "WIN32;_DEBUG;_LIB;%(PreprocessorDefinitions)" in prj
    assert "WIN32;NDEBUG;CORE_EXPORTS;%(PreprocessorDefinitions)" in prj
    assert "<TargetExt>.lib</TargetExt>" in prj
    assert "<TargetExt>.dll</TargetExt>" in prj
    assert "AdditionalIncludeDirectories" not in prj
    # only the shared library is linked
    assert prj.count("<Link>") == 1


def test_filters_file(build, tmpdir):
    build.execute(":gameVisualStudioFilters")
    flt = read(tmpdir.join("game.vcxproj.filters"))
    assert '<Project ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">' in flt
    assert '<Filter Include="Source Files">' in flt
    assert '<Filter Include="Header Files">' in flt
    assert ('<ClCompile Include="src\\main.cpp">\n'
            '      <Filter>Source Files</Filter>\n'
            '    </ClCompile>') in flt
    assert ('<ClInclude Include="src\\game.h">\n'
            '      <Filter>Header Files</Filter>\n'
            '    </ClInclude>') in flt
    assert '<None Include="build.vside" />' in flt


def test_solution_file(build, tmpdir):
    build.execute("visualStudio")
    sln = read(tmpdir.join("game.sln"))
    lines = sln.split("\n")
    assert lines[:5] == [
        "",
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio 17",
        "VisualStudioVersion = 17.0.31919.166",
        "MinimumVisualStudioVersion = 10.0.40219.1",
    ]
    assert "\tGlobalSection(SolutionConfigurationPlatforms) = preSolution\n" \
           "\t\tDebug|Win32 = Debug|Win32\n" \
           "\t\tRelease|Win32 = Release|Win32\n" \
           "\t\tRelease|x64 = Release|x64\n" \
           "\tEndGlobalSection\n" in sln
    solution = build.root.extensions[EXTENSION_NAME].solution
    assert "\t\tSolutionGuid = {%s}\n" % solution_guid(solution) in sln
    assert sln.endswith("EndGlobal\n")


@pytest.mark.parametrize("version,tools_version,toolset,header", [
    (2010, "4.0", None, ["Format Version 11.00", "# Visual Studio 2010"]),
    (2012, "4.0", "v110", ["Format Version 12.00", "# Visual Studio 2012"]),
    (2013, "12.0", "v120", ["Format Version 12.00", "# Visual Studio 2013",
                            "VisualStudioVersion = 12.0.21005.1"]),
    (2015, "14.0", "v140", ["# Visual Studio 14", "VisualStudioVersion = 14.0.23107.0"]),
    (2017, "15.0", "v141", ["# Visual Studio 15", "VisualStudioVersion = 15.0.27130.2003"]),
    (2019, "16.0", "v142", ["# Visual Studio 16", "VisualStudioVersion = 16.0.29020.237"]),
])
def test_versions(build, tmpdir, version, tools_version, toolset, header):
    build.root.extensions[EXTENSION_NAME]["version"] = version
    build.execute("visualStudio")
    prj = read(tmpdir.join("game.vcxproj"))
    assert 'ToolsVersion="%s"' % tools_version in prj
    if toolset:
        assert "<PlatformToolset>%s</PlatformToolset>" % toolset in prj
    else:
        assert "PlatformToolset" not in prj
    sln = read(tmpdir.join("game.sln"))
    for h in header:
        assert h in sln


def test_version_affects_subunits(tmpdir):
    build = Build(str(tmpdir), name="game")
    sub = build.root.add_subunit("core")
    build.apply_plugin("visual-studio")
    assert sub.extensions[EXTENSION_NAME]["version"] == 2022
    build.root.extensions[EXTENSION_NAME]["version"] = 2015
    assert sub.extensions[EXTENSION_NAME]["version"] == 2015
    sub.extensions[EXTENSION_NAME]["version"] = 2019
    assert sub.extensions[EXTENSION_NAME].format is vs201x.VS2019Format


def test_invalid_versions(tmpdir):
    build = Build(str(tmpdir), name="game")
    build.apply_plugin("visual-studio")
    ext = build.root.extensions[EXTENSION_NAME]
    with pytest.raises(error.TypeError):
        ext["version"] = 2011
    with pytest.raises(error.TypeError):
        ext["version"] = "2019"
    with pytest.raises(error.UnsupportedError):
        vs201x.get_format(2008)


def test_node_formatting():
    n = Node("ItemGroup", Label="Test")
    n.add("Empty", None)
    n.add("Flag", False)
    n.add_with_default("Defs", [])
    n.add_with_default("Dirs", ["a", "b"])
    n.add(Node("ClCompile", Include="a&b.cpp"))
    out = vs201x.VS201xXmlFormatter().format(n)
    assert out.endswith('<ItemGroup Label="Test">\n'
                        '  <Flag>false</Flag>\n'
                        '  <Dirs>a;b;%(Dirs)</Dirs>\n'
                        '  <ClCompile Include="a&amp;b.cpp" />\n'
                        '</ItemGroup>\n')
