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
Helper classes for vside I/O. Manages atomic writing of output, detecting
changes, line endings conversions etc.
"""

import os
import os.path
import stat
import tempfile

import logging
logger = logging.getLogger("vside.io")


# Set to true to prevent any output from being written
dry_run = False

# Set to true to force writing of output files, even if they exist and would be
# unchanged. In other words, always touch output files.
force_output = False

EOL_WINDOWS = "win"
EOL_UNIX    = "unix"

# Status codes returned by OutputFile.commit():
STATUS_CREATED   = "A"
STATUS_UPDATED   = "U"
STATUS_UNCHANGED = "."


def display_path(filename):
    """Returns *filename* relative to CWD if possible, for use in messages."""
    try:
        return os.path.relpath(filename)
    except ValueError:
        # This can happen under Windows if the filename is on a different
        # drive from the current directory, in this case we have no other
        # choice but to use the absolute path to it.
        return filename


class OutputFile(object):
    """
    File to be written by vside.

    Example usage:

    ::

      f = io.OutputFile("core.vcxproj", io.EOL_WINDOWS)
      f.write(body)
      f.commit()

    Notice the need to explicitly call commit(). The file is only touched if
    its content changed and it is replaced atomically, so that an interrupted
    run never leaves a half-written file behind.
    """
    def __init__(self, filename, eol, charset="utf-8",
                 creator=None, create_for=None):
        """
        Creates output file.

        :param filename: Name of the output file. Should be either relative
                         to CWD or absolute; the latter is recommended.
        :param eol:      Line endings to use. One of EOL_WINDOWS and EOL_UNIX.
        :param charset:  Charset used to encode the text.
        :param creator:  Who is creating the file; typically a task.
        :param create_for: Object the file is created for, e.g. a project.
        """
        self.filename = filename
        self.eol = eol
        self.charset = charset
        self.creator = creator
        self.create_for = create_for
        self.text = ""

    def write(self, text):
        """
        Writes text to the output, performing line endings conversion as
        needed. Note that the changes don't take effect until you call
        commit().
        """
        self.text += text

    def replace(self, placeholder, value):
        """
        Replaces the value of the given placeholder with its real value. This
        is useful for parts of the output which are not known at the time they
        are written because they depend on other parts coming after them.

        Notice that only the first occurrency of the placeholder is replaced.
        """
        self.text = self.text.replace(placeholder, value, 1)

    def content(self):
        """Returns the encoded bytes that commit() would write."""
        text = self.text
        if self.eol == EOL_WINDOWS:
            text = text.replace("\n", "\r\n")
        return text.encode(self.charset)

    def commit(self):
        """
        Writes the file to disk if it changed and returns one of the
        ``STATUS_*`` codes describing what happened.
        """
        data = self.content()
        rel_fn = display_path(self.filename)

        if not force_output:
            try:
                with open(self.filename, "rb") as f:
                    old = f.read()
            except IOError:
                old = None
            if old == data:
                logger.info("%s\t%s", STATUS_UNCHANGED, rel_fn)
                return STATUS_UNCHANGED
        else:
            old = None if not os.path.exists(self.filename) else True

        status = STATUS_CREATED if old is None else STATUS_UPDATED
        logger.info("%s\t%s", status, rel_fn)
        if self.creator is not None:
            logger.debug("%s written by %s for %s", rel_fn, self.creator, self.create_for)

        if dry_run:
            return status # nothing to do, just pretending to write output

        dirname = os.path.dirname(self.filename)
        if dirname and not os.path.isdir(dirname):
            os.makedirs(dirname)
        fd, tmpname = tempfile.mkstemp(prefix=".%s." % os.path.basename(self.filename),
                                       dir=dirname or None)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmpname, self._file_mode())
            os.replace(tmpname, self.filename)
        except BaseException:
            os.remove(tmpname)
            raise
        return status

    def _file_mode(self):
        # keep the mode of the file being replaced, new files honor the umask
        try:
            return stat.S_IMODE(os.stat(self.filename).st_mode)
        except OSError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
