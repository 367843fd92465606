# Copyright (C) 2016-2017 g10 Code GmbH
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

import enum

from . import abi
from . import util

# To appease static analysis tools, we define some constants here.
# They are overwritten with the proper values by process_constants.
NO_ERROR = 0
EOF = None

util.process_constants('GPG_ERR_', globals())
del util


class ErrorKind(enum.IntEnum):
    """The kinds of engine errors callers can tell apart

    Each member's value is the gpg-error code it stands for.  Codes
    that are not listed here are reported as OTHER.

    """
    OTHER = -1
    GENERAL = abi.GPG_ERR_GENERAL
    INV_VALUE = abi.GPG_ERR_INV_VALUE
    UNUSABLE_PUBKEY = abi.GPG_ERR_UNUSABLE_PUBKEY
    UNUSABLE_SECKEY = abi.GPG_ERR_UNUSABLE_SECKEY
    NO_DATA = abi.GPG_ERR_NO_DATA
    CONFLICT = abi.GPG_ERR_CONFLICT
    NOT_IMPLEMENTED = abi.GPG_ERR_NOT_IMPLEMENTED
    DECRYPT_FAILED = abi.GPG_ERR_DECRYPT_FAILED
    BAD_PASSPHRASE = abi.GPG_ERR_BAD_PASSPHRASE
    CANCELED = abi.GPG_ERR_CANCELED
    INV_ENGINE = abi.GPG_ERR_INV_ENGINE
    AMBIGUOUS_NAME = abi.GPG_ERR_AMBIGUOUS_NAME
    WRONG_KEY_USAGE = abi.GPG_ERR_WRONG_KEY_USAGE
    CERT_REVOKED = abi.GPG_ERR_CERT_REVOKED
    CERT_EXPIRED = abi.GPG_ERR_CERT_EXPIRED
    NO_CRL_KNOWN = abi.GPG_ERR_NO_CRL_KNOWN
    NO_POLICY_MATCH = abi.GPG_ERR_NO_POLICY_MATCH
    NO_SECKEY = abi.GPG_ERR_NO_SECKEY
    MISSING_CERT = abi.GPG_ERR_MISSING_CERT
    BAD_CERT_CHAIN = abi.GPG_ERR_BAD_CERT_CHAIN
    UNSUPPORTED_ALGORITHM = abi.GPG_ERR_UNSUPPORTED_ALGORITHM
    BAD_SIGNATURE = abi.GPG_ERR_BAD_SIGNATURE
    NO_PUBKEY = abi.GPG_ERR_NO_PUBKEY

    @classmethod
    def from_code(cls, code):
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER


class GpgError(Exception):
    """A GPG Error

    This is the base of all errors thrown by this library.

    If the error originated from the engine, then additional
    information can be found by looking at 'code' for the error code,
    and 'source' for the errors origin.  Suitable constants for
    comparison are defined in this module.  'code_str' and
    'source_str' are human-readable versions of the former two
    properties, taken from the engine's string tables.

    If 'context' is not None, then it contains a human-readable hint
    as to where the error originated from.

    If 'results' is not None, it is a tuple containing results of the
    operation that failed.  Some operations return results even though
    they signal an error, and often this information is useful for
    diagnostic uses or to give the user feedback.  Since the normal
    control flow is disrupted by the exception, the callee can no
    longer return results, hence we attach them to the exception
    objects.

    """

    def __init__(self, error=None, context=None, results=None, engine=None):
        super(GpgError, self).__init__(error)
        self.error = error
        self.context = context
        self.results = results
        self.engine = engine

    def _engine(self):
        if self.engine is None:
            from . import engine
            self.engine = engine.get_default()
        return self.engine

    @property
    def code(self):
        if self.error is None:
            return None
        return abi.err_code(self.error)

    @property
    def code_str(self):
        if self.error is None:
            return None
        return self._engine().strerror(self.error)

    @property
    def source(self):
        if self.error is None:
            return None
        return abi.err_source(self.error)

    @property
    def source_str(self):
        if self.error is None:
            return None
        return self._engine().strsource(self.error)

    def __str__(self):
        msgs = []
        if self.context is not None:
            msgs.append(self.context)
        if self.error is not None:
            msgs.append(self.source_str)
            msgs.append(self.code_str)
        return ': '.join(msgs)


class GPGMEError(GpgError):
    '''Engine error

    This is the single error type for failures reported by the
    engine.  Which failure it was is told by 'kind', an ErrorKind
    member selected by the exact error code.

    '''

    @property
    def kind(self):
        return ErrorKind.from_code(self.code)

    @property
    def message(self):
        return self.code_str

    def getstring(self):
        return str(self)

    def getcode(self):
        return self.code

    def getsource(self):
        return self.source


class EndOfStream(GpgError, EOFError):
    """End of data

    Signals that a read loop or a key listing is exhausted.  It is
    consumed by the iteration helpers and never escapes the
    convenience functions.

    """


def error_to_exception(err, context=None, engine=None):
    """Map the status word ERR to an exception object

    Returns None if ERR signals success, an EndOfStream for the EOF
    code, and a GPGMEError otherwise.

    """
    if not err or abi.err_code(err) == NO_ERROR:
        return None
    if abi.err_code(err) == EOF:
        return EndOfStream(err, context, engine=engine)
    return GPGMEError(err, context, engine=engine)


def errorcheck(retval, extradata=None, engine=None):
    exc = error_to_exception(retval, extradata, engine)
    if exc is not None:
        raise exc


def make_error(code, source=abi.GPG_ERR_SOURCE_GPGME):
    return abi.err_make(source, code)
