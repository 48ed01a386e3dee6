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

import re

# Grep-friendly version string
VERSION="0.3.0"


def get_version():
    return VERSION


def get_version_tuple(version_str=None):
    if version_str is None:
        version_str = get_version()
    components = re.split(r'[.-]', version_str)
    return tuple(int(x) for x in components)


def check_version(required):
    """
    Checks if given version requirement is satisfied and throws if not.
    """
    our_ver = get_version_tuple()
    try:
        req_ver = get_version_tuple(required)
    except ValueError:
        from vside.error import Error
        raise Error("invalid version number \"%s\"" % required)

    if our_ver < req_ver:
        from vside.error import VersionError
        raise VersionError("vside version >= %s is required (you have %s)" %
                           (required, get_version()))
