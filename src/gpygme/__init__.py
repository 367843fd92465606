# Copyright (C) 2016 g10 Code GmbH
# Copyright (C) 2004 Igor Belyi <belyi@users.sourceforge.net>
# Copyright (C) 2002 John Goerzen <jgoerzen@complete.org>
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 59 Temple Place, Suite 330, Boston, MA 02111-1307  USA
"""gpygme: object-oriented GnuPG for Python

FEATURES
--------

 * Contexts to sign, encrypt, decrypt, and verify data, to list keys,
   to export, import and delete keys, and to generate new ones.

 * Data objects unifying memory, files, descriptors and Python
   streams behind one read/write/seek interface.

 * Passphrase and progress callbacks written in pure Python.
   Exceptions raised in callbacks are properly propagated.

 * Read-only result records describing signatures, keys and the
   outcome of every operation.

 * One-shot functions for the common cases.

QUICK EXAMPLE
-------------

    >>> import gpygme
    >>> cipher, _ = gpygme.encrypt(['alice@example.org'], b'Hello world :)',
    ...                            {'armor': True})
    >>> gpygme.decrypt(cipher)
    (b'Hello world :)', <gpygme.results.VerifyResult ...>)

    >>> with gpygme.Context(armor=True) as c:
    ...     for key in c.each_key('alice', True):
    ...         print(key)

GENERAL OVERVIEW
----------------

The work is done by an engine, by default GnuPG driven through the
GPGME library (install the 'gpgme' extra).  Every failure the engine
reports is raised as gpygme.errors.GPGMEError; its 'kind' tells which
failure it was, 'code' and 'source' carry the raw values, and
'message' the engine's own description.

Engine calls not wrapped explicitly are still available on a Context
as op_* methods, with error checking.

"""

from . import core
from . import errors
from . import constants
from . import util
from . import callbacks
from . import engine
from . import results
from . import version
from .core import Context
from .core import Data
from .errors import ErrorKind, GpgError, GPGMEError
from .facade import decrypt, each_key, encrypt, find_keys, sign, verify

# This is a white-list of symbols.  Any other will alert pyflakes.
_ = [
    Context, Data, ErrorKind, GpgError, GPGMEError, core, errors, constants,
    util, callbacks, engine, results, version, decrypt, each_key, encrypt,
    find_keys, sign, verify
]
del _

__all__ = [
    "Context", "Data", "ErrorKind", "GpgError", "GPGMEError", "core",
    "errors", "constants", "util", "callbacks", "engine", "results",
    "version", "decrypt", "each_key", "encrypt", "find_keys", "sign",
    "verify"
]
