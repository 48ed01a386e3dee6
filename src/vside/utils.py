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
Misc. helpers for other vside code.
"""

import os.path
import collections.abc


class OrderedSet(collections.abc.MutableSet):
    """
    Set class that preserves insertion order during iteration.
    """
    def __init__(self, data=None):
        self._list = list()
        self._set = set()
        if data:
            self.update(data)

    def __contains__(self, x):
        return x in self._set

    def __len__(self):
        return len(self._list)

    def __iter__(self):
        return iter(self._list)

    def __repr__(self):
        return "OrderedSet(%r)" % self._list

    def add(self, x):
        if x not in self._set:
            self._set.add(x)
            self._list.append(x)

    def discard(self, x):
        if x in self._set:
            self._set.remove(x)
            self._list.remove(x)

    def update(self, other):
        for i in other:
            self.add(i)


def filter_duplicates(it):
    """
    Yields items from 'it', removing any duplicates.
    """
    found = set()
    for x in it:
        if x not in found:
            found.add(x)
            yield x


def capitalize(name):
    """
    Returns *name* with the first letter in upper case and the rest left
    intact, i.e. ``"debugStatic"`` becomes ``"DebugStatic"``.
    """
    return name[:1].upper() + name[1:]


def native_relpath(path, start):
    """
    Returns *path* relative to directory *start*, using backslashes as
    Visual Studio files do. Paths on another drive are returned absolute.
    """
    try:
        rel = os.path.relpath(path, start)
    except ValueError:
        # This can happen under Windows if the path is on a different drive
        # from the start directory.
        rel = path
    return rel.replace("/", "\\")
