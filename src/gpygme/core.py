# -*- coding: utf-8 -*-

import contextlib
import io
import os
import sys
import weakref

import structlog

from . import constants
from . import errors
from . import results
from . import util
from .engine import get_default
from .errors import errorcheck

# Copyright (C) 2016-2018 g10 Code GmbH
# Copyright (C) 2004, 2008 Igor Belyi <belyi@users.sourceforge.net>
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
"""Core functionality

Core functionality wrapped in a object-oriented fashion.  Provides
the 'Context' class for performing cryptographic operations, and the
'Data' class describing buffers of data.

"""

logger = structlog.get_logger(__name__)

BLOCK_SIZE = 4096


def _hooked(hookdata):
    """Return a trampoline calling the user function in HOOKDATA

    HOOKDATA is (weakref-to-owner, func[, hook]).  The hook is passed
    as last argument only if one was given.  Exceptions raised by the
    function are stashed in the owner and re-raised once the engine
    call returns, the engine sees None meanwhile.

    """

    def trampoline(*args):
        owner = hookdata[0]()
        if owner is None or owner._callback_excinfo:
            return None
        try:
            return hookdata[1](*(args + tuple(hookdata[2:])))
        except Exception:
            owner._callback_excinfo = sys.exc_info()
            return None

    return trampoline


class EngineWrapper(object):
    """Base wrapper class

    Not to be instantiated directly.

    """

    engine = None
    wrapped = None
    _result_types = {}

    def __init__(self, engine, wrapped):
        self._callback_excinfo = None
        self.engine = engine
        self.wrapped = wrapped

    def __repr__(self):
        return '<{}/{!r}>'.format(
            super(EngineWrapper, self).__repr__(), self.wrapped)

    def __str__(self):
        acc = ['{}.{}'.format(__name__, self.__class__.__name__)]
        flags = [f for f in self._boolean_properties if getattr(self, f)]
        if flags:
            acc.append('({})'.format(' '.join(flags)))

        return '<{}>'.format(' '.join(acc))

    def _errorcheck(self, name):
        """Must be implemented by child classes.

        This function must return a trueish value for all engine calls
        returning a bare status word."""
        raise NotImplementedError()

    def _check_released(self):
        if self.wrapped is None:
            raise ValueError('operation on a released {}'.format(
                self.__class__.__name__))

    def _raise_callback_exception(self):
        excinfo, self._callback_excinfo = self._callback_excinfo, None
        if excinfo:
            raise excinfo[1].with_traceback(excinfo[2])

    """The set of all boolean properties"""
    _boolean_properties = set()

    def __wrap_boolean_property(self, key, do_set=False, value=None):

        def get(slf):
            slf._check_released()
            return bool(getattr(slf.engine, 'get_' + key)(slf.wrapped))

        def set_(slf, value):
            slf._check_released()
            getattr(slf.engine, 'set_' + key)(slf.wrapped, bool(value))

        p = property(get, set_, doc="{} flag".format(key))
        setattr(self.__class__, key, p)

        if do_set:
            set_(self, bool(value))
        else:
            return get(self)

    def __getattr__(self, key):
        """On-the-fly generation of wrapper methods and properties"""
        if key[0] == '_' or self.engine is None:
            raise AttributeError(key)

        if key in self._boolean_properties:
            return self.__wrap_boolean_property(key)

        func = getattr(type(self.engine), key, None)
        if func is None or not callable(func):
            raise AttributeError(key)

        if key in self._result_types:
            record = self._result_types[key]

            def _funcwrap(slf):
                slf._check_released()
                fragile = getattr(slf.engine, key)(slf.wrapped)
                if fragile is None:
                    return None
                return record(fragile, slf.engine)
        elif self._errorcheck(key):

            def _funcwrap(slf, *args):
                return errorcheck(slf._invoke(key, *args), key, slf.engine)
        else:

            def _funcwrap(slf, *args):
                return slf._call(key, *args)

        _funcwrap.__doc__ = func.__doc__

        # Monkey-patch the class.
        setattr(self.__class__, key, _funcwrap)

        # Bind the method to 'self'.
        def wrapper(*args):
            return _funcwrap(self, *args)

        wrapper.__doc__ = func.__doc__

        return wrapper

    def __setattr__(self, key, value):
        """On-the-fly generation of properties"""
        if key in self._boolean_properties:
            self.__wrap_boolean_property(key, True, value)
        else:
            super(EngineWrapper, self).__setattr__(key, value)


class Context(EngineWrapper):
    """Context for cryptographic operations

    All cryptographic operations are performed within a context,
    which contains the internal state of the operation as well as
    configuration parameters.  By using several contexts you can run
    several cryptographic operations, with different configuration.

    Access to a context must be synchronized.  Exactly one operation
    may be in flight at a time; this includes an open key listing.
    Passphrase and progress callbacks run synchronously while an
    operation is in flight and must not start another operation on
    the same context.

    """

    """Facade option names and the constructor arguments they set"""
    _options = {
        'armor': 'armor',
        'textmode': 'textmode',
        'protocol': 'protocol',
        'keylist_mode': 'keylist_mode',
        'signers': 'signers',
        'passphrase_callback': 'passphrase_cb',
        'passphrase_callback_value': 'passphrase_cb_value',
        'passphrase_cb': 'passphrase_cb',
        'passphrase_cb_value': 'passphrase_cb_value',
        'progress_callback': 'progress_cb',
        'progress_callback_value': 'progress_cb_value',
        'progress_cb': 'progress_cb',
        'progress_cb_value': 'progress_cb_value',
        'home_dir': 'home_dir',
        'engine': 'engine',
    }

    def __init__(self,
                 armor=False,
                 textmode=False,
                 protocol=constants.PROTOCOL_OpenPGP,
                 keylist_mode=None,
                 signers=(),
                 passphrase_cb=None,
                 passphrase_cb_value=None,
                 progress_cb=None,
                 progress_cb_value=None,
                 home_dir=None,
                 engine=None):
        """Construct a context object

        Keyword arguments:
        armor		-- enable ASCII armoring (default False)
        textmode	-- enable canonical text mode (default False)
        protocol	-- protocol to use (default PROTOCOL_OpenPGP)
        keylist_mode	-- keylist mode bits (default: engine default)
        signers		-- list of keys used for signing (default [])
        passphrase_cb	-- passphrase callback, see set_passphrase_cb
        passphrase_cb_value -- hook passed to the passphrase callback
        progress_cb	-- progress callback, see set_progress_cb
        progress_cb_value -- hook passed to the progress callback
        home_dir	-- state directory (default is the engine default)
        engine		-- engine to use (default engine.get_default())

        """
        if engine is None:
            engine = get_default()
        status, wrapped = engine.new()
        errorcheck(status, 'new', engine)
        super(Context, self).__init__(engine, wrapped)
        self._busy = False
        self._listing = False
        self._passphrase_cb = None
        self._progress_cb = None
        logger.debug("Context created", handle=wrapped)

        self.armor = armor
        self.textmode = textmode
        self.protocol = protocol
        if keylist_mode is not None:
            self.keylist_mode = keylist_mode
        self.signers = signers
        if passphrase_cb is not None:
            self.set_passphrase_cb(passphrase_cb, passphrase_cb_value)
        if progress_cb is not None:
            self.set_progress_cb(progress_cb, progress_cb_value)
        if home_dir is not None:
            self.home_dir = home_dir

    @classmethod
    def translate_options(cls, options):
        """Translate facade OPTIONS into constructor arguments

        Raises:
        TypeError	-- if an option is not recognized

        """
        kwargs = {}
        for key, value in options.items():
            if key not in cls._options:
                raise TypeError('unknown option {!r}'.format(key))
            kwargs[cls._options[key]] = value
        return kwargs

    @classmethod
    def from_options(cls, options):
        """Construct a context from a mapping of facade options"""
        return cls(**cls.translate_options(options))

    def __repr__(self):
        if self.wrapped is None:
            return "Context(<released>)"
        return ("Context(armor={0.armor}, textmode={0.textmode}, "
                "protocol={1}, keylist_mode={2}, signers={3}"
                ")").format(
                    self,
                    constants.PROTOCOL_NAMES.get(self.protocol,
                                                 self.protocol),
                    constants.keylist_mode_names(self.keylist_mode),
                    [key.fingerprint for key in self.signers])

    def _call(self, name, *args):
        """Forward the engine call NAME, re-raising callback exceptions"""
        self._check_released()
        if self._busy:
            raise errors.GPGMEError(
                errors.make_error(errors.CONFLICT), name, engine=self.engine)
        self._busy = True
        try:
            result = getattr(self.engine, name)(self.wrapped, *args)
        finally:
            self._busy = False
        self._raise_callback_exception()
        return result

    def _invoke(self, name, *args):
        """Run the operation NAME, refusing to overlap a key listing"""
        self._check_released()
        if self._listing:
            raise errors.GPGMEError(
                errors.make_error(errors.CONFLICT), name, engine=self.engine)
        status = self._call(name, *args)
        logger.debug("Engine operation", operation=name, status=status)
        return status

    def _checked(self, status, name, *accessors):
        """Raise on STATUS, attaching the results of the failed operation"""
        exc = errors.error_to_exception(status, name, self.engine)
        if exc is None:
            return
        exc.results = tuple(
            accessor() if accessor is not None else None
            for accessor in accessors)
        raise exc

    def _state_error(self, name):
        return errors.GPGMEError(
            errors.make_error(errors.INV_VALUE), name, engine=self.engine)

    def encrypt(self, recipients, plain, cipher=None,
                flags=0):
        """Encrypt data

        Encrypt PLAIN for the keys in RECIPIENTS.  If RECIPIENTS is
        None, the data is encrypted symmetrically with a passphrase
        obtained through the passphrase callback.

        Returns:
        cipher		-- the Data object the ciphertext was written to

        Raises:
        GPGMEError	-- as signaled by the engine, carrying
                           (encrypt_result, None) as results

        """
        plain = util.input_data(plain)
        cipher = util.output_data(cipher)
        status = self._invoke('op_encrypt', _key_list(recipients), flags,
                              plain, cipher)
        self._checked(status, 'encrypt', self.encrypt_result, None)
        return cipher

    def encrypt_sign(self, recipients, plain, cipher=None,
                     flags=0):
        """Encrypt and sign data

        Like encrypt, but also signs PLAIN with the context's signers.
        Failures carry (encrypt_result, sign_result) as results.

        """
        plain = util.input_data(plain)
        cipher = util.output_data(cipher)
        status = self._invoke('op_encrypt_sign', _key_list(recipients),
                              flags, plain, cipher)
        self._checked(status, 'encrypt_sign', self.encrypt_result,
                      self.sign_result)
        return cipher

    def decrypt(self, cipher, plain=None):
        """Decrypt data

        Returns:
        plain		-- the Data object the plaintext was written to

        Raises:
        GPGMEError	-- as signaled by the engine, carrying
                           (decrypt_result, None) as results

        """
        cipher = util.input_data(cipher)
        plain = util.output_data(plain)
        status = self._invoke('op_decrypt', cipher, plain)
        self._checked(status, 'decrypt', self.decrypt_result, None)
        return plain

    def decrypt_verify(self, cipher, plain=None):
        """Decrypt data and verify embedded signatures

        The signatures are described by verify_result() afterwards.
        Failures carry (decrypt_result, verify_result) as results.

        """
        cipher = util.input_data(cipher)
        plain = util.output_data(plain)
        status = self._invoke('op_decrypt_verify', cipher, plain)
        self._checked(status, 'decrypt_verify', self.decrypt_result,
                      self.verify_result)
        return plain

    def verify(self, sig, signed_text=None, plain=None):
        """Verify signatures

        If SIGNED_TEXT is given, SIG is a detached signature over it
        and nothing is written to PLAIN unless one is given.
        Otherwise SIG is a normal or cleartext signature and the
        signed data is written to PLAIN (a new Data object by
        default).

        The outcome of each signature check is described by
        verify_result() afterwards; a bad signature does not raise.

        Returns:
        plain		-- the Data object the signed data was written to,
                           or None for a detached signature

        """
        sig = util.input_data(sig)
        if signed_text is not None:
            signed_text = util.input_data(signed_text)
            if plain is not None:
                plain = util.output_data(plain)
        else:
            plain = util.output_data(plain)
        status = self._invoke('op_verify', sig, signed_text, plain)
        self._checked(status, 'verify', self.verify_result)
        return plain

    def sign(self, plain, sig=None, mode=constants.SIG_MODE_NORMAL):
        """Sign data

        Sign PLAIN with the context's signers, or the engine's default
        key if there are none.  MODE is one of constants.sig.mode.

        Returns:
        sig		-- the Data object the signature was written to

        Raises:
        GPGMEError	-- as signaled by the engine, carrying
                           (sign_result,) as results

        """
        plain = util.input_data(plain)
        sig = util.output_data(sig)
        status = self._invoke('op_sign', plain, sig, mode)
        self._checked(status, 'sign', self.sign_result)
        return sig

    def add_signer(self, *keys):
        """Append KEYS to the signers"""
        for key in keys:
            self.signers_add(key)

    def clear_signers(self):
        self.signers_clear()

    def keylist_start(self, pattern=None, secret_only=False):
        """Start listing the keys matching PATTERN

        PATTERN may be None (all keys), a string, or a list of
        strings.

        """
        status = self._invoke('op_keylist_start', pattern, bool(secret_only))
        errorcheck(status, 'keylist_start', self.engine)
        self._listing = True
        logger.debug("Keylist started", secret_only=bool(secret_only))

    def keylist_next(self):
        """Return the next Key of the listing

        Raises:
        EndOfStream	-- if the listing is exhausted
        GPGMEError	-- if no listing is in progress

        """
        if not self._listing:
            raise self._state_error('keylist_next')
        status, key = self._call('op_keylist_next')
        errorcheck(status, 'keylist_next', self.engine)
        return results.Key(key, self.engine)

    def keylist_end(self):
        """Finish the listing, also after EndOfStream was raised"""
        if not self._listing:
            raise self._state_error('keylist_end')
        self._listing = False
        status = self._call('op_keylist_end')
        logger.debug("Keylist ended", status=status)
        errorcheck(status, 'keylist_end', self.engine)

    op_keylist_start = keylist_start
    op_keylist_next = keylist_next
    op_keylist_end = keylist_end

    @contextlib.contextmanager
    def keylisting(self, pattern=None, secret_only=False):
        """Scope a key listing

        Yields an iterator over the matching keys; the listing is
        ended when the block is left, whichever way.

        """
        self.keylist_start(pattern, secret_only)
        try:
            yield self._keylist_iter()
        finally:
            self.keylist_end()

    def _keylist_iter(self):
        while True:
            try:
                key = self.keylist_next()
            except errors.EndOfStream:
                return
            yield key

    def each_key(self, pattern=None, secret_only=False):
        """Iterate over the keys matching PATTERN"""
        with self.keylisting(pattern, secret_only) as keys:
            for key in keys:
                yield key

    each_keys = each_key

    def keys(self, pattern=None, secret_only=False):
        """Return the list of keys matching PATTERN"""
        return list(self.each_key(pattern, secret_only))

    def get_key(self, fpr, secret=False):
        """Get a key given a fingerprint

        Keyword arguments:
        secret		-- to request a secret key

        Returns:
                        -- the matching key, or None if there is none

        Raises:
        GPGMEError	-- as signaled by the engine

        """
        status, key = self._invoke('get_key', fpr, bool(secret))
        try:
            errorcheck(status, 'get_key', self.engine)
        except errors.EndOfStream:
            return None
        return results.Key(key, self.engine)

    def import_keys(self, keydata):
        """Import the keys in KEYDATA

        The outcome is described by import_result() afterwards.

        """
        keydata = util.input_data(keydata)
        status = self._invoke('op_import', keydata)
        self._checked(status, 'import', self.import_result)

    import_ = import_keys

    def export_keys(self, pattern=None, keydata=None,
                    mode=0):
        """Export the public keys matching PATTERN

        Returns:
        keydata		-- the Data object the key block was written to

        """
        keydata = util.output_data(keydata)
        status = self._invoke('op_export', pattern, mode, keydata)
        errorcheck(status, 'export', self.engine)
        return keydata

    export = export_keys

    def delete_key(self, key, allow_secret=False):
        """Delete KEY from the keyring

        A key with a secret part is only deleted if ALLOW_SECRET is
        true.

        """
        status = self._invoke('op_delete', key, bool(allow_secret))
        errorcheck(status, 'delete', self.engine)

    delete = delete_key

    def generate_key(self, parms, pubkey=None, seckey=None):
        """Generate a key pair

        PARMS is the engine's parameter block, passed through as is.
        If PUBKEY and SECKEY are None the new pair is stored in the
        keyring, otherwise it is written to them.  The outcome is
        described by genkey_result() afterwards.

        """
        if pubkey is not None:
            pubkey = util.output_data(pubkey)
        if seckey is not None:
            seckey = util.output_data(seckey)
        status = self._invoke('op_genkey', parms, pubkey, seckey)
        self._checked(status, 'genkey', self.genkey_result)

    genkey = generate_key

    def encrypt_result(self):
        return self.op_encrypt_result()

    def decrypt_result(self):
        return self.op_decrypt_result()

    def verify_result(self):
        return self.op_verify_result()

    def sign_result(self):
        return self.op_sign_result()

    def import_result(self):
        return self.op_import_result()

    def genkey_result(self):
        return self.op_genkey_result()

    def describe_signature(self, sig):
        """Render the outcome of SIG, naming the signer key if known"""
        key = self.get_key(sig.fpr) if sig.fpr else None
        if key is None:
            return sig.describe()
        uid = key.uids[0].uid if key.uids else key.fingerprint
        return sig.describe('{} {}'.format(key.keyid, uid))

    @property
    def signers(self):
        """Keys used for signing"""
        return [
            results.Key(self.signers_enum(i), self.engine)
            for i in range(self.signers_count())
        ]

    @signers.setter
    def signers(self, signers):
        old = self.signers
        self.signers_clear()
        try:
            for key in signers:
                self.signers_add(key)
        except Exception:
            self.signers_clear()
            for key in old:
                self.signers_add(key)
            raise

    @property
    def protocol(self):
        """Protocol to use"""
        return self.get_protocol()

    @protocol.setter
    def protocol(self, value):
        errorcheck(self.engine.engine_check_version(value), 'protocol',
                   self.engine)
        self.set_protocol(value)

    @property
    def keylist_mode(self):
        """Keylist mode bits"""
        return self.get_keylist_mode()

    @keylist_mode.setter
    def keylist_mode(self, value):
        self.set_keylist_mode(value)

    @property
    def home_dir(self):
        """Engine's home directory"""
        return self.engine_info.home_dir

    @home_dir.setter
    def home_dir(self, value):
        self.set_engine_info(self.protocol, home_dir=value)

    _result_types = {
        'op_encrypt_result': results.EncryptResult,
        'op_decrypt_result': results.DecryptResult,
        'op_verify_result': results.VerifyResult,
        'op_sign_result': results.SignResult,
        'op_import_result': results.ImportResult,
        'op_genkey_result': results.GenkeyResult,
    }

    def _errorcheck(self, name):
        """This function should list all calls returning a status word"""
        return ((name.startswith('op_') and not name.endswith('_result')) or
                name in {
                    'set_protocol',
                    'set_keylist_mode',
                    'set_engine_info',
                    'signers_add',
                })

    _boolean_properties = {'armor', 'textmode'}

    def release(self):
        """Finalize the engine session

        Safe to call more than once; only the first call has an
        effect.

        """
        if self.wrapped is None:
            return
        handle = self._free()
        logger.debug("Context released", handle=handle)

    def _free(self):
        handle, self.wrapped = self.wrapped, None
        self._passphrase_cb = None
        self._progress_cb = None
        self._listing = False
        self.engine.release(handle)
        return handle

    def __del__(self):
        if self.wrapped is not None:
            self._free()

    # Implement the context manager protocol.
    def __enter__(self):
        return self

    def __exit__(self, type, value, tb):
        self.release()

    def set_passphrase_cb(self, func, hook=None):
        """Sets the passphrase callback to the function specified by func.

        When the engine needs a passphrase, it will call func with three
        args: hint, a string describing the key it needs the passphrase
        for; desc, a string describing the passphrase it needs;
        prev_bad, a boolean equal True if this is a call made after
        unsuccessful previous attempt.  The function returns the
        passphrase, or None to cancel.

        If hook has a value other than None it will be passed into the func
        as a forth argument.

        """
        self._check_released()
        if func is None:
            hookdata = None
        else:
            if hook is None:
                hookdata = (weakref.ref(self), func)
            else:
                hookdata = (weakref.ref(self), func, hook)
        self._passphrase_cb = hookdata
        self.engine.set_passphrase_cb(
            self.wrapped, None if hookdata is None else _hooked(hookdata))

    set_passphrase_callback = set_passphrase_cb

    def set_progress_cb(self, func, hook=None):
        """Sets the progress meter callback to the function specified by FUNC.
        If FUNC is None, the callback will be cleared.

        This function will be called to provide an interactive update
        of the engine's progress.  The function will be called with
        four arguments, what, type, current, and total.  If HOOK is
        not None, it will be supplied as fifth argument.

        """
        self._check_released()
        if func is None:
            hookdata = None
        else:
            if hook is None:
                hookdata = (weakref.ref(self), func)
            else:
                hookdata = (weakref.ref(self), func, hook)
        self._progress_cb = hookdata
        self.engine.set_progress_cb(
            self.wrapped, None if hookdata is None else _hooked(hookdata))

    set_progress_callback = set_progress_cb

    @property
    def engine_info(self):
        """Configuration of the engine currently in use"""
        p = self.protocol
        infos = [i for i in self.get_engine_info() if i.protocol == p]
        assert len(infos) == 1
        return infos[0]

    def get_engine_info(self):
        """Get engine configuration

        Returns information about all configured and installed
        engines.

        Returns:
        infos		-- a list of engine infos

        """
        self._check_released()
        return [
            results.EngineInfo(info, self.engine)
            for info in self.engine.get_engine_info(self.wrapped)
        ]

    def set_engine_info(self, proto, file_name=None, home_dir=None):
        """Change engine configuration

        Changes the configuration of the crypto engine implementing
        the protocol 'proto' for the context.

        Keyword arguments:
        file_name	-- engine program file name (unchanged if None)
        home_dir	-- configuration directory (unchanged if None)

        """
        self._check_released()
        errorcheck(
            self.engine.set_engine_info(self.wrapped, proto, file_name,
                                        home_dir), 'set_engine_info',
            self.engine)


def _key_list(keys):
    if keys is None:
        return None
    return list(keys)


class _Memory(object):
    """Growable in-memory storage"""

    def __init__(self, initial=b''):
        self.buffer = bytearray(initial)
        self.position = 0

    def read(self, size):
        chunk = bytes(self.buffer[self.position:self.position + size])
        self.position += len(chunk)
        return chunk

    def write(self, chunk):
        if self.position > len(self.buffer):
            self.buffer.extend(bytes(self.position - len(self.buffer)))
        self.buffer[self.position:self.position + len(chunk)] = chunk
        self.position += len(chunk)
        return len(chunk)

    def seek(self, offset, whence):
        self.position = _position(offset, whence, self.position,
                                  len(self.buffer))
        return self.position

    def release(self):
        pass


class _Aliased(object):
    """Caller-owned memory, used in place"""

    def __init__(self, region):
        self.view = memoryview(region).cast('B')
        self.position = 0

    def read(self, size):
        chunk = self.view[self.position:self.position + size].tobytes()
        self.position += len(chunk)
        return chunk

    def write(self, chunk):
        if self.view.readonly:
            raise io.UnsupportedOperation('aliased memory is read-only')
        # The region never grows.
        count = max(0, min(len(chunk), len(self.view) - self.position))
        self.view[self.position:self.position + count] = chunk[:count]
        self.position += count
        return count

    def seek(self, offset, whence):
        self.position = _position(offset, whence, self.position,
                                  len(self.view))
        return self.position

    def release(self):
        self.view.release()


class _File(object):
    """A file object, opened on first use when given by name"""

    def __init__(self, file=None, filename=None, owned=False):
        self.file = file
        self.filename = filename
        self.owned = owned

    def _open(self):
        if self.file is None:
            self.file = open(self.filename, 'rb')
        return self.file

    def read(self, size):
        return self._open().read(size)

    def write(self, chunk):
        written = self._open().write(chunk)
        return len(chunk) if written is None else written

    def seek(self, offset, whence):
        return self._open().seek(offset, whence)

    def release(self):
        if self.owned and self.file is not None:
            self.file.close()
        self.file = None


class _Descriptor(object):
    """An operating system file descriptor, never closed here"""

    def __init__(self, fd):
        self.fd = fd

    def read(self, size):
        return os.read(self.fd, size)

    def write(self, chunk):
        return os.write(self.fd, chunk)

    def seek(self, offset, whence):
        return os.lseek(self.fd, offset, whence)

    def release(self):
        pass


class _Callbacks(object):
    """User supplied read, write, seek and release functions"""

    def __init__(self, read_cb, write_cb, seek_cb, release_cb, hook=None):
        self.read_cb = read_cb
        self.write_cb = write_cb
        self.seek_cb = seek_cb
        self.release_cb = release_cb
        self.extra = () if hook is None else (hook, )

    def read(self, size):
        if self.read_cb is None:
            raise io.UnsupportedOperation('no read callback')
        chunk = self.read_cb(size, *self.extra)
        if chunk is None:
            return b''
        if isinstance(chunk, str):
            chunk = chunk.encode('utf-8')
        return bytes(chunk)

    def write(self, chunk):
        if self.write_cb is None:
            raise io.UnsupportedOperation('no write callback')
        return self.write_cb(chunk, len(chunk), *self.extra)

    def seek(self, offset, whence):
        if self.seek_cb is None:
            raise io.UnsupportedOperation('no seek callback')
        return self.seek_cb(offset, whence, *self.extra)

    def release(self):
        if self.release_cb is not None:
            self.release_cb(*self.extra)


def _position(offset, whence, current, size):
    if whence == os.SEEK_SET:
        position = offset
    elif whence == os.SEEK_CUR:
        position = current + offset
    elif whence == os.SEEK_END:
        position = size + offset
    else:
        raise ValueError('invalid whence ({!r})'.format(whence))
    if position < 0:
        raise ValueError('negative seek position {}'.format(position))
    return position


def _to_bytes(string):
    if util.is_a_string(string):
        return string.encode('utf-8')
    return string


class Data(object):
    """Data buffer

    A lot of data has to be exchanged between the user and the crypto
    engine, like plaintext messages, ciphertext, signatures and
    information about the keys.  The user provides and receives the
    data via Data objects, regardless of where the bytes actually
    live: in memory, in a file, behind a descriptor, or behind user
    supplied callbacks.

    Every Data object has exactly one current position, shared by
    reads and writes.

    Please see the information about __init__ for instantiation.

    """

    def __init__(self,
                 string=None,
                 file=None,
                 offset=None,
                 length=None,
                 cbs=None,
                 copy=True):
        """Initialize a new Data object.

        If no args are specified, make it an empty object.

        If string alone is specified, initialize it with the data
        contained there.  Strings are encoded using UTF-8.  If copy is
        False, a bytes-like object is used in place instead of being
        copied; it must stay alive as long as the Data object.

        If file, offset, and length are all specified, file must
        be either a filename or a file-like object, and the object
        will be initialized by reading the specified chunk from the file.

        If cbs is specified, it MUST be either a callbacks.IOCallbacks
        object or a tuple of the form:

        (read_cb, write_cb, seek_cb, release_cb[, hook])

        where the first four items are functions implementing reading,
        writing, seeking the data, and releasing any resources once
        the data object is released.  The functions must match the
        following prototypes:

            def read(length, hook=None):
                return <a b"bytes" object, b"" at the end>

            def write(buffer, length, hook=None):
                return <the number of bytes written>

            def seek(offset, whence, hook=None):
                return <the new file position>

            def release(hook=None):
                <return value is ignored>

        The hook is only passed if one was given.  The functions may
        be bound methods.  In that case, you can simply use the 'self'
        reference instead of using a hook.

        If file is specified without any other arguments, then it
        must be a filename, an integer file descriptor, or an object
        with a fileno() method.

        """
        self._backend = None
        self._encoding = constants.DATA_ENCODING_NONE
        self._file_name = None

        if cbs is not None:
            self.new_from_cbs(*getattr(cbs, 'cbs', cbs))
        elif string is not None:
            self.new_from_mem(string, copy)
        elif file is not None and offset is not None and length is not None:
            self.new_from_filepart(file, offset, length)
        elif file is not None:
            if util.is_a_string(file):
                self.new_from_file(file, copy)
            else:
                self.new_from_fd(file)
        else:
            self.new()

    def __repr__(self):
        if self._backend is None:
            return '<Data released>'
        kind = self._backend.__class__.__name__.strip('_').lower()
        try:
            position = self.tell()
        except OSError:
            # Not seekable.
            return '<Data {}>'.format(kind)
        return '<Data {} at position {}>'.format(kind, position)

    def release(self):
        """Release the underlying resources

        Runs the release callback or closes a file opened by this
        object.  Safe to call more than once.

        """
        backend, self._backend = self._backend, None
        if backend is not None:
            backend.release()

    def __del__(self):
        if getattr(self, '_backend', None) is not None:
            self.release()

    # Implement the context manager protocol.
    def __enter__(self):
        return self

    def __exit__(self, type, value, tb):
        self.release()

    def _check_released(self):
        if self._backend is None:
            raise ValueError('I/O operation on a released Data object')
        return self._backend

    def new(self):
        self._backend = _Memory()

    def new_from_mem(self, string, copy=True):
        if copy or util.is_a_string(string):
            self._backend = _Memory(bytes(_to_bytes(string)))
        else:
            self._backend = _Aliased(string)

    def new_from_file(self, filename, copy=True):
        if copy:
            with open(filename, 'rb') as fp:
                self._backend = _Memory(fp.read())
        else:
            self._backend = _File(filename=filename, owned=True)
        self._file_name = filename

    def new_from_cbs(self, read_cb, write_cb, seek_cb, release_cb=None,
                     hook=None):
        self._backend = _Callbacks(read_cb, write_cb, seek_cb, release_cb,
                                   hook)

    def new_from_filepart(self, file, offset, length):
        """Snapshot LENGTH bytes at OFFSET of FILE.

        The argument "file" may be:

        * a string specifying a file name, or
        * a file-like object supporting read() and seek().

        """
        if util.is_a_string(file):
            with open(file, 'rb') as fp:
                fp.seek(offset)
                chunk = fp.read(length)
            self._file_name = file
        else:
            file.seek(offset)
            chunk = _to_bytes(file.read(length))
        self._backend = _Memory(chunk)

    def new_from_fd(self, file):
        """Use the descriptor FILE, an integer or an object supporting
        the fileno() method.  The descriptor is not closed by this
        object.

        """
        fd = file if isinstance(file, int) else file.fileno()
        self._backend = _Descriptor(fd)

    def write(self, buffer, length=None):
        """Write buffer given as string or bytes.

        If a string is given, it is implicitly encoded using UTF-8.
        If LENGTH is given, only the first LENGTH bytes are written.

        Returns the number of bytes written."""
        backend = self._check_released()
        chunk = _to_bytes(buffer)
        if length is not None:
            chunk = chunk[:length]
        return backend.write(bytes(chunk))

    def read(self, size=-1):
        """Read at most size bytes, returned as bytes.

        If the size argument is negative or omitted, read until EOF is reached.

        Returns the data read, or the empty string if there was no data
        to read before EOF was reached."""
        backend = self._check_released()

        if size == 0:
            return b''

        if size > 0:
            return backend.read(size)
        else:
            chunks = []
            while True:
                result = backend.read(BLOCK_SIZE)
                if len(result) == 0:
                    break
                chunks.append(result)
            return b''.join(chunks)

    def seek(self, offset, whence=os.SEEK_SET):
        """Move the position, returning the new one."""
        return self._check_released().seek(offset, whence)

    def tell(self):
        return self._check_released().seek(0, os.SEEK_CUR)

    @property
    def encoding(self):
        """Encoding hint, one of constants.data.encoding"""
        return self._encoding

    @encoding.setter
    def encoding(self, value):
        self._check_released()
        self._encoding = value

    @property
    def file_name(self):
        """File name hint, stored along with encrypted data"""
        return self._file_name

    @file_name.setter
    def file_name(self, value):
        self._check_released()
        self._file_name = value


def engine_check_version(proto, engine=None):
    if engine is None:
        engine = get_default()
    try:
        errorcheck(engine.engine_check_version(proto), None, engine)
        return True
    except errors.GPGMEError:
        return False


def get_engine_info(engine=None):
    """Return the default configuration of all engines"""
    if engine is None:
        engine = get_default()
    return [
        results.EngineInfo(info, engine) for info in engine.get_engine_info()
    ]


def set_engine_info(proto, file_name, home_dir=None, engine=None):
    """Changes the default configuration of the crypto engine implementing
    the protocol 'proto'. 'file_name' is the file name of
    the executable program implementing this protocol. 'home_dir' is the
    directory name of the configuration directory (engine's default is
    used if omitted)."""
    if engine is None:
        engine = get_default()
    errorcheck(engine.set_engine_info(None, proto, file_name, home_dir),
               'set_engine_info', engine)
