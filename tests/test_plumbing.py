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
Misc tests of vside's internals' correctness.
"""

import logging
import os
import stat
import sys

import pytest

import vside.io
import vside.plugins
from vside import error
from vside.api import Plugin, Property, PropertiesHolder
from vside.error import Error, error_context, warning
from vside.utils import OrderedSet, capitalize, native_relpath
from vside.version import check_version, get_version_tuple


def test_file_io_unix(tmpdir):
    p = tmpdir.join("textfile")
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("one\ntwo\n")
    assert f.commit() == vside.io.STATUS_CREATED
    text_read = p.read_binary()
    assert text_read == b"one\ntwo\n"

def test_file_io_win(tmpdir):
    p = tmpdir.join("textfile")
    f = vside.io.OutputFile(str(p), vside.io.EOL_WINDOWS)
    f.write("one\ntwo\n")
    f.commit()
    text_read = p.read_binary()
    assert text_read == b"one\r\ntwo\r\n"


def test_file_io_unchanged(tmpdir):
    p = tmpdir.join("sub", "textfile")
    for expected in (vside.io.STATUS_CREATED, vside.io.STATUS_UNCHANGED):
        f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
        f.write("same")
        assert f.commit() == expected
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("different")
    assert f.commit() == vside.io.STATUS_UPDATED
    assert p.read() == "different"
    assert [x.basename for x in p.dirpath().listdir()] == ["textfile"]


def test_file_io_dry_run(tmpdir, monkeypatch):
    monkeypatch.setattr(vside.io, "dry_run", True)
    p = tmpdir.join("textfile")
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("text")
    assert f.commit() == vside.io.STATUS_CREATED
    assert not p.check()


def test_file_io_force_output(tmpdir, monkeypatch):
    p = tmpdir.join("textfile")
    p.write("same")
    monkeypatch.setattr(vside.io, "force_output", True)
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("same")
    assert f.commit() == vside.io.STATUS_UPDATED


def test_file_io_replace(tmpdir):
    p = tmpdir.join("textfile")
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("count=@N@, again @N@")
    f.replace("@N@", "2")
    f.commit()
    assert p.read() == "count=2, again @N@"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
def test_file_io_mode_follows_umask(tmpdir):
    p = tmpdir.join("textfile")
    old_umask = os.umask(0o022)
    try:
        f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
        f.write("one\n")
        assert f.commit() == vside.io.STATUS_CREATED
    finally:
        os.umask(old_umask)
    assert stat.S_IMODE(os.stat(str(p)).st_mode) == 0o644


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
def test_file_io_keeps_mode_of_replaced_file(tmpdir):
    p = tmpdir.join("textfile")
    p.write("old")
    os.chmod(str(p), 0o640)
    f = vside.io.OutputFile(str(p), vside.io.EOL_UNIX)
    f.write("new")
    assert f.commit() == vside.io.STATUS_UPDATED
    assert p.read() == "new"
    assert stat.S_IMODE(os.stat(str(p)).st_mode) == 0o640


def test_file_io_logs_creator(tmpdir, caplog):
    p = tmpdir.join("game.vcxproj")
    f = vside.io.OutputFile(str(p), vside.io.EOL_WINDOWS,
                            creator="task gameVisualStudioProject", create_for="project game")
    f.write("x")
    with caplog.at_level(logging.DEBUG, logger="vside.io"):
        f.commit()
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.endswith("written by task gameVisualStudioProject for project game")
               for m in messages)


def test_error_context():
    class Thing(object):
        source_pos = "library :core"
    with pytest.raises(Error) as exc:
        with error_context(Thing()):
            raise Error("something broke")
    assert str(exc.value) == "library :core: something broke"

    with pytest.raises(Error) as exc:
        with error_context(Thing()):
            raise Error("something broke", pos="elsewhere")
    assert str(exc.value) == "elsewhere: something broke"


def test_warning_uses_context(caplog):
    class Thing(object):
        source_pos = "project :game"
    with caplog.at_level(logging.WARNING, logger="vside.error"):
        with error_context(Thing()):
            warning("configuration %s is odd", "Debug|Win32")
    assert caplog.records[-1].getMessage() == "project :game: configuration Debug|Win32 is odd"


def test_ordered_set():
    s = OrderedSet(["b", "a", "b", "c"])
    assert list(s) == ["b", "a", "c"]
    s.discard("a")
    s.add("a")
    assert list(s) == ["b", "c", "a"]
    assert "c" in s
    assert len(s) == 3


def test_path_helpers():
    assert capitalize("debugStatic") == "DebugStatic"
    assert capitalize("") == ""
    assert native_relpath("/src/game/build/exe/game.exe", "/src/game") == "build\\exe\\game.exe"
    assert native_relpath("/src/core/core.vcxproj", "/src/game") == "..\\core\\core.vcxproj"


def test_version_check():
    assert get_version_tuple("1.2.3") == (1, 2, 3)
    check_version("0.1")
    with pytest.raises(error.VersionError):
        check_version("99.0")
    with pytest.raises(Error):
        check_version("latest")


class Settings(PropertiesHolder):
    properties = [
        Property("level", type=int, default=3, choices=[1, 2, 3]),
        Property("name", type=str, default=lambda obj: obj.default_name),
        Property("enabled", type=bool, default=True),
    ]
    default_name = "computed"


def test_properties():
    s = Settings()
    assert s["level"] == 3
    assert s["name"] == "computed"
    assert not s.is_explicitly_set("level")
    s["level"] = 1
    s["enabled"] = False
    assert s["level"] == 1
    assert s["enabled"] is False
    assert s.is_explicitly_set("level")
    with pytest.raises(error.TypeError):
        s["level"] = 5
    with pytest.raises(error.TypeError):
        s["level"] = "1"
    with pytest.raises(error.TypeError):
        s["level"] = True
    with pytest.raises(error.NotFoundError):
        s["color"]


def test_plugin_registry():
    assert "visual-studio" in Plugin.all_names()
    assert Plugin.get("visual-studio") is Plugin.get("visual-studio")
    with pytest.raises(error.NotFoundError):
        Plugin.get("eclipse")


PLUGIN_SOURCE = """
from vside.api import Plugin

class NoteTakerPlugin(Plugin):
    name = "note-taker"

    def apply(self, unit):
        unit.extensions["notes"] = []
"""

def test_load_plugin_from_file(tmpdir):
    p = tmpdir.join("note_taker.py")
    p.write(PLUGIN_SOURCE)
    module = vside.plugins.load_from_file(str(p))
    assert vside.plugins.load_from_file(str(p)) is module
    assert Plugin.get("note-taker").__class__.__name__ == "NoteTakerPlugin"

    other = tmpdir.mkdir("other").join("note_taker.py")
    other.write(PLUGIN_SOURCE)
    with pytest.raises(Error):
        vside.plugins.load_from_file(str(other))


def test_load_broken_plugin(tmpdir):
    p = tmpdir.join("broken_plugin.py")
    p.write("import no_such_module_here\n")
    with pytest.raises(Error):
        vside.plugins.load_from_file(str(p))
