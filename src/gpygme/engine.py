# Copyright (C) 2016 g10 Code GmbH
#
# This file is part of GPyGME.
#
# GPyGME is free software; you can redistribute it and/or modify it
# under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation; either version 2.1 of the
# License, or (at your option) any later version.
#
# GPyGME is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY
# or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU Lesser General
# Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, see <https://www.gnu.org/licenses/>.
"""Engine boundary

The cryptographic work is done by an engine living outside of this
package.  Contexts talk to it through the call protocol described by
the Engine class below: every call receives the session handle
obtained from new() and reports a gpg-error status word.  Calls that
produce a value and can fail return a (status, value) pair;
plain accessors return their value.

Buffers are handed over as gpygme.core.Data objects, keys as
gpygme.results.Key records.  Records returned by the result
accessors are fragile: they are only valid until the next operation
on the same session, and are copied by the caller.

"""

import threading

_default = None
_lock = threading.Lock()


class Engine(object):
    """Engine protocol

    Not to be instantiated directly.  All methods must be implemented
    by concrete engines.

    """

    # Sessions.

    def new(self):
        raise NotImplementedError()

    def release(self, handle):
        raise NotImplementedError()

    # Configuration.

    def get_protocol(self, handle):
        raise NotImplementedError()

    def set_protocol(self, handle, protocol):
        raise NotImplementedError()

    def get_armor(self, handle):
        raise NotImplementedError()

    def set_armor(self, handle, yes):
        raise NotImplementedError()

    def get_textmode(self, handle):
        raise NotImplementedError()

    def set_textmode(self, handle, yes):
        raise NotImplementedError()

    def get_keylist_mode(self, handle):
        raise NotImplementedError()

    def set_keylist_mode(self, handle, mode):
        raise NotImplementedError()

    def engine_check_version(self, protocol):
        raise NotImplementedError()

    def get_engine_info(self, handle=None):
        raise NotImplementedError()

    def set_engine_info(self, handle, protocol, file_name, home_dir):
        raise NotImplementedError()

    # Credentials.

    def set_passphrase_cb(self, handle, func):
        """FUNC(hint, desc, prev_bad) returns the passphrase, or None
        to cancel."""
        raise NotImplementedError()

    def set_progress_cb(self, handle, func):
        """FUNC(what, type, current, total) is called as work
        progresses."""
        raise NotImplementedError()

    # Signers.

    def signers_add(self, handle, key):
        raise NotImplementedError()

    def signers_clear(self, handle):
        raise NotImplementedError()

    def signers_count(self, handle):
        raise NotImplementedError()

    def signers_enum(self, handle, index):
        raise NotImplementedError()

    # Operations.

    def op_encrypt(self, handle, recipients, flags, plain, cipher):
        raise NotImplementedError()

    def op_encrypt_sign(self, handle, recipients, flags, plain, cipher):
        raise NotImplementedError()

    def op_decrypt(self, handle, cipher, plain):
        raise NotImplementedError()

    def op_decrypt_verify(self, handle, cipher, plain):
        raise NotImplementedError()

    def op_verify(self, handle, sig, signed_text, plain):
        raise NotImplementedError()

    def op_sign(self, handle, plain, sig, mode):
        raise NotImplementedError()

    def op_keylist_start(self, handle, pattern, secret_only):
        raise NotImplementedError()

    def op_keylist_next(self, handle):
        raise NotImplementedError()

    def op_keylist_end(self, handle):
        raise NotImplementedError()

    def get_key(self, handle, fpr, secret):
        raise NotImplementedError()

    def op_import(self, handle, keydata):
        raise NotImplementedError()

    def op_export(self, handle, pattern, mode, keydata):
        raise NotImplementedError()

    def op_delete(self, handle, key, allow_secret):
        raise NotImplementedError()

    def op_genkey(self, handle, parms, pubkey, seckey):
        raise NotImplementedError()

    # Results of the last operation.

    def op_encrypt_result(self, handle):
        raise NotImplementedError()

    def op_decrypt_result(self, handle):
        raise NotImplementedError()

    def op_verify_result(self, handle):
        raise NotImplementedError()

    def op_sign_result(self, handle):
        raise NotImplementedError()

    def op_import_result(self, handle):
        raise NotImplementedError()

    def op_genkey_result(self, handle):
        raise NotImplementedError()

    # String tables.

    def strerror(self, err):
        raise NotImplementedError()

    def strsource(self, err):
        raise NotImplementedError()


def get_default():
    """Return the engine used by contexts created without one

    The GPGME engine is set up on first use unless another engine was
    installed with set_default().

    """
    global _default
    with _lock:
        if _default is None:
            from .backend import GpgmeEngine
            _default = GpgmeEngine()
        return _default


def set_default(engine):
    """Install ENGINE as the default, returning the previous one."""
    global _default
    with _lock:
        old, _default = _default, engine
    return old
