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
"""GPGME engine

Drives GnuPG through the GPGME library, using its Python binding
(the 'gpg' distribution, installed with the 'gpgme' extra).  Sessions
are gpg.Context objects.  Errors raised by the binding are turned
back into status words, the binding's own result objects are handed
out as the fragile records.

"""

import functools

import gpg
import structlog

from . import abi
from .engine import Engine

logger = structlog.get_logger(__name__)

EOF = abi.err_make(abi.GPG_ERR_SOURCE_GPGME, abi.GPG_ERR_EOF)
CANCELED = abi.err_make(abi.GPG_ERR_SOURCE_GPGME, abi.GPG_ERR_CANCELED)


def _status(func):
    """Report the binding's errors as status words"""

    @functools.wraps(func)
    def wrapper(*args):
        try:
            func(*args)
        except gpg.errors.GPGMEError as e:
            return e.error
        return abi.GPG_ERR_NO_ERROR

    return wrapper


def _valued(func):
    """Like _status, for calls producing a value"""

    @functools.wraps(func)
    def wrapper(*args):
        try:
            return abi.GPG_ERR_NO_ERROR, func(*args)
        except gpg.errors.GPGMEError as e:
            return e.error, None

    return wrapper


def _bridge(data):
    """Expose DATA to the library through data callbacks"""
    if data is None:
        return None

    def read(amount, hook=None):
        return data.read(amount)

    def write(chunk, hook=None):
        return data.write(chunk)

    def seek(offset, whence, hook=None):
        return data.seek(offset, whence)

    def release(hook=None):
        pass

    bridged = gpg.Data(cbs=(read, write, seek, release))
    if data.encoding:
        bridged.set_encoding(data.encoding)
    if data.file_name:
        bridged.set_file_name(data.file_name)
    return bridged


class GpgmeEngine(Engine):
    """The engine backed by the GPGME library"""

    @_valued
    def new(self):
        handle = gpg.Context()
        logger.debug("GPGME session opened", version=gpg.version.versionstr)
        return handle

    def release(self, handle):
        handle.__exit__(None, None, None)
        logger.debug("GPGME session closed")

    def get_protocol(self, handle):
        return handle.get_protocol()

    @_status
    def set_protocol(self, handle, protocol):
        handle.set_protocol(protocol)

    def get_armor(self, handle):
        return handle.armor

    def set_armor(self, handle, yes):
        handle.armor = yes

    def get_textmode(self, handle):
        return handle.textmode

    def set_textmode(self, handle, yes):
        handle.textmode = yes

    def get_keylist_mode(self, handle):
        return handle.get_keylist_mode()

    @_status
    def set_keylist_mode(self, handle, mode):
        handle.set_keylist_mode(mode)

    def engine_check_version(self, protocol):
        return gpg.gpgme.gpgme_engine_check_version(protocol)

    def get_engine_info(self, handle=None):
        if handle is None:
            return gpg.core.get_engine_info() or []
        return handle.get_engine_info() or []

    @_status
    def set_engine_info(self, handle, protocol, file_name, home_dir):
        if handle is None:
            gpg.core.set_engine_info(protocol, file_name, home_dir)
        else:
            handle.set_engine_info(protocol, file_name, home_dir)

    def set_passphrase_cb(self, handle, func):
        if func is None:
            handle.set_passphrase_cb(None)
            handle.pinentry_mode = gpg.constants.PINENTRY_MODE_DEFAULT
            return

        def passphrase_cb(hint, desc, prev_bad, hook=None):
            passphrase = func(hint, desc, prev_bad)
            if passphrase is None:
                raise gpg.errors.GPGMEError(CANCELED)
            return passphrase

        handle.pinentry_mode = gpg.constants.PINENTRY_MODE_LOOPBACK
        handle.set_passphrase_cb(passphrase_cb)

    def set_progress_cb(self, handle, func):
        if func is None:
            handle.set_progress_cb(None)
            return

        def progress_cb(what, type, current, total, hook=None):
            func(what, type, current, total)

        handle.set_progress_cb(progress_cb)

    def _lookup(self, handle, key, secret=False):
        return handle.get_key(key.fingerprint, secret)

    @_status
    def signers_add(self, handle, key):
        handle.signers_add(self._lookup(handle, key, key.secret))

    def signers_clear(self, handle):
        handle.signers_clear()

    def signers_count(self, handle):
        return handle.signers_count()

    def signers_enum(self, handle, index):
        return handle.signers_enum(index)

    def _recipients(self, handle, recipients):
        if recipients is None:
            return None
        return [self._lookup(handle, key) for key in recipients]

    @_status
    def op_encrypt(self, handle, recipients, flags, plain, cipher):
        handle.op_encrypt(
            self._recipients(handle, recipients), flags, _bridge(plain),
            _bridge(cipher))

    @_status
    def op_encrypt_sign(self, handle, recipients, flags, plain, cipher):
        handle.op_encrypt_sign(
            self._recipients(handle, recipients), flags, _bridge(plain),
            _bridge(cipher))

    @_status
    def op_decrypt(self, handle, cipher, plain):
        handle.op_decrypt(_bridge(cipher), _bridge(plain))

    @_status
    def op_decrypt_verify(self, handle, cipher, plain):
        handle.op_decrypt_verify(_bridge(cipher), _bridge(plain))

    @_status
    def op_verify(self, handle, sig, signed_text, plain):
        handle.op_verify(_bridge(sig), _bridge(signed_text), _bridge(plain))

    @_status
    def op_sign(self, handle, plain, sig, mode):
        handle.op_sign(_bridge(plain), _bridge(sig), mode)

    @_status
    def op_keylist_start(self, handle, pattern, secret_only):
        if isinstance(pattern, (list, tuple)):
            handle.op_keylist_ext_start(list(pattern), secret_only, 0)
        else:
            handle.op_keylist_start(pattern, secret_only)

    def op_keylist_next(self, handle):
        try:
            key = handle.op_keylist_next()
        except gpg.errors.GPGMEError as e:
            return e.error, None
        if key is None:
            return EOF, None
        return abi.GPG_ERR_NO_ERROR, key

    @_status
    def op_keylist_end(self, handle):
        handle.op_keylist_end()

    @_valued
    def get_key(self, handle, fpr, secret):
        return handle.get_key(fpr, secret)

    @_status
    def op_import(self, handle, keydata):
        handle.op_import(_bridge(keydata))

    @_status
    def op_export(self, handle, pattern, mode, keydata):
        handle.op_export(pattern, mode, _bridge(keydata))

    @_status
    def op_delete(self, handle, key, allow_secret):
        handle.op_delete(self._lookup(handle, key, key.secret), allow_secret)

    @_status
    def op_genkey(self, handle, parms, pubkey, seckey):
        handle.op_genkey(parms, _bridge(pubkey), _bridge(seckey))

    def op_encrypt_result(self, handle):
        return handle.op_encrypt_result()

    def op_decrypt_result(self, handle):
        return handle.op_decrypt_result()

    def op_verify_result(self, handle):
        return handle.op_verify_result()

    def op_sign_result(self, handle):
        return handle.op_sign_result()

    def op_import_result(self, handle):
        return handle.op_import_result()

    def op_genkey_result(self, handle):
        return handle.op_genkey_result()

    def strerror(self, err):
        return gpg.gpgme.gpgme_strerror(err)

    def strsource(self, err):
        return gpg.gpgme.gpgme_strsource(err)
