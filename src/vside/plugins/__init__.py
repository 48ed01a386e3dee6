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

import sys
import logging
__logger = logging.getLogger("vside.plugins")


def load_from_file(filename):
    """
    Load a vside plugin from given file.
    """
    import os.path
    import importlib.util
    from vside.error import Error
    basename = os.path.splitext(os.path.basename(filename))[0]
    if basename.startswith("vside.plugins."):
        modname = basename
    else:
        modname = "vside.plugins.%s" % basename.replace(".", "_")

    if modname in sys.modules:
        prev_file = sys.modules[modname].__file__
        if os.path.abspath(filename) == os.path.abspath(prev_file):
            # plugin already loaded from this file, skip it
            __logger.debug("plugin %s from %s is already loaded, nothing to do", modname, filename)
            return sys.modules[modname]
        else:
            raise Error("cannot load plugin %s from %s: plugin with the same name already loaded from %s" %
                        (modname, filename, prev_file))

    __logger.debug("loading plugin %s from %s", modname, filename)
    try:
        spec = importlib.util.spec_from_file_location(modname, filename)
        module = importlib.util.module_from_spec(spec)
        sys.modules[modname] = module
        spec.loader.exec_module(module)
    except Error:
        del sys.modules[modname]
        raise
    except IOError as e:
        del sys.modules[modname]
        raise Error("failed to load plugin %s:\n%s" % (filename, e))
    except Exception:
        import traceback
        del sys.modules[modname]
        raise Error("failed to load plugin %s:\n%s" % (filename, traceback.format_exc()))
    globals()[basename] = module
    __all__.append(basename)
    return module


def __find_all_plugins():
    """
    Finds all vside plugins and yields them.
    """
    import pkgutil
    for _, name, _ in pkgutil.walk_packages(__path__):
        yield name


# import all plugins:
__all__ = list(__find_all_plugins())
from . import *
assert __all__, "No plugins found - broken vside installation?"

__logger.debug("loaded plugins:")
for p in __all__:
    m = sys.modules["vside.plugins.%s" % p]
    __logger.debug("    %-25s (from %s)", m.__name__, m.__file__)
