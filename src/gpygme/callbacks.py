# Copyright (C) 2004 Igor Belyi <belyi@users.sourceforge.net>
# Copyright (C) 2002 John Goerzen <jgoerzen@complete.org>
#
#    This library is free software; you can redistribute it and/or
#    modify it under the terms of the GNU Lesser General Public
#    License as published by the Free Software Foundation; either
#    version 2.1 of the License, or (at your option) any later version.
#
#    This library is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
#    Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with this library; if not, write to the Free Software
#    Foundation, Inc., 59 Temple Place, Suite 330, Boston, MA 02111-1307  USA

import os


class IOCallbacks(object):
    """Data callbacks over a stream

    Adapts a file-like object exposing read(), write(), seek() and
    tell() to the callback protocol of Data objects.  Passing an
    instance where a Data object is expected states that the object
    is to be used as a stream.

    """

    def __init__(self, io):
        self.io = io

    def read(self, length, hook=None):
        return self.io.read(length)

    def write(self, buffer, length, hook=None):
        chunk = bytes(buffer[:length])
        written = self.io.write(chunk)
        return len(chunk) if written is None else written

    def seek(self, offset, whence, hook=None):
        # A zero offset relative to the current position is a query.
        if offset == 0 and whence == os.SEEK_CUR:
            return self.io.tell()
        self.io.seek(offset, whence)
        return self.io.tell()

    @property
    def cbs(self):
        """The (read, write, seek, release) tuple for Data"""
        return (self.read, self.write, self.seek, None)
