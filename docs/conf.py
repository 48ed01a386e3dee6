# -*- coding: utf-8 -*-
#
# vside documentation build configuration file.
#
# This file is execfile()d with the current directory set to its containing dir.
#
# All configuration values have a default value; values that are commented out
# serve to show the default value.

import sys, os

# Check if Sphinx is running on readthedocs.org
on_rtd = os.environ.get('READTHEDOCS', None) == 'True'

# If your extensions are in another directory, add it here. If the directory
# is relative to the documentation root, use os.path.abspath to make it
# absolute, like shown here.
sys.path.append(os.path.abspath('../src'))

import vside.version


# General configuration
# ---------------------

# Add any Sphinx extension module names here, as strings. They can be extensions
# coming with Sphinx (named 'sphinx.ext.*') or your custom ones.
extensions = ['sphinx.ext.autodoc']

# The suffix of source filenames.
source_suffix = '.rst'

# The master toctree document.
master_doc = 'index'

# General substitutions.
project = 'vside'
copyright = '2012-2013 Vaclav Slavik'

# The default replacements for |version| and |release|, also used in various
# other places throughout the built documents.
#
# The short X.Y version.
version = '%d.%d' % vside.version.get_version_tuple()[0:2]
# The full version, including alpha/beta/rc tags.
release = vside.version.get_version()

# There are two options for replacing |today|: either, you set today to some
# non-false value, then it is used:
#today = ''
# Else, today_fmt is used as the format for a strftime call.
today_fmt = '%B %d, %Y'

# If true, '()' will be appended to :func: etc. cross-reference text.
add_function_parentheses = True


# Options for HTML output
# -----------------------

if not on_rtd:
    html_theme = 'haiku'

# If not '', a 'Last updated on:' timestamp is inserted at every page bottom,
# using the given strftime format.
html_last_updated_fmt = '%b %d, %Y'

# Output file base name for HTML help builder.
htmlhelp_basename = 'vsidedoc'


# Options for autodoc
# -------------------

autodoc_member_order = "groupwise"
autoclass_content = "both"
