# Copyright (C) 2016 g10 Code GmbH
# Copyright (C) 2004,2008 Igor Belyi <belyi@users.sourceforge.net>
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

import io

from collections.abc import Mapping


def process_constants(prefix, scope):
    """Called by the constant modules to load up the constants from the
    ABI table starting with PREFIX.  Matching constants will be
    inserted into SCOPE with PREFIX stripped from the names.  Returns
    the names of inserted constants.

    """
    from . import abi
    index = len(prefix)
    constants = {
        identifier[index:]: getattr(abi, identifier)
        for identifier in dir(abi) if identifier.startswith(prefix)
    }
    scope.update(constants)
    return list(constants.keys())


def is_a_string(x):
    return isinstance(x, str)


def split_args(args, maximum):
    """Split trailing options off positional ARGS.

    If the last positional argument is a mapping, it is taken as the
    options.  At most MAXIMUM positional arguments (not counting the
    options) are accepted.

    Returns:
    args		-- the positional arguments
    options		-- a new dict with the options

    Raises:
    TypeError		-- if too many arguments were given

    """
    args = list(args)
    if args and isinstance(args[-1], Mapping):
        options = dict(args.pop())
    else:
        options = {}
    if len(args) > maximum:
        raise TypeError('wrong number of arguments ({} given, at most {} '
                        'expected)'.format(len(args), maximum))
    return args, options


def input_data(value):
    """Adapt VALUE into a Data object to be read by an operation.

    A Data object is used as-is, bytes-like objects and strings are
    copied into memory, and streams (io.IOBase instances or explicit
    callbacks.IOCallbacks adapters) are read through callbacks.

    """
    from .core import Data
    from .callbacks import IOCallbacks

    if isinstance(value, Data):
        return value
    if isinstance(value, (bytes, bytearray, memoryview, str)):
        return Data(value)
    if isinstance(value, IOCallbacks):
        return Data(cbs=value)
    if isinstance(value, io.IOBase):
        return Data(cbs=IOCallbacks(value))
    raise TypeError('unsupported input: {!r}'.format(value))


def output_data(value):
    """Adapt VALUE into a Data object to be written by an operation.

    None maps to a fresh in-memory buffer, whose content the caller
    is expected to read back after the operation.  Text streams are
    refused, the engine produces bytes.

    """
    from .core import Data
    from .callbacks import IOCallbacks

    if value is None:
        return Data()
    if isinstance(value, Data):
        return value
    stream = value.io if isinstance(value, IOCallbacks) else value
    if isinstance(stream, io.TextIOBase):
        raise TypeError('output needs a binary stream: {!r}'.format(stream))
    if isinstance(value, IOCallbacks):
        return Data(cbs=value)
    if isinstance(value, io.IOBase):
        return Data(cbs=IOCallbacks(value))
    raise TypeError('unsupported output: {!r}'.format(value))
