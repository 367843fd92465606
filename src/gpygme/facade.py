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
"""One-shot operations

Each function builds a Context from its trailing options mapping,
adapts its arguments into Data objects, runs one operation and
releases the context again.  Outputs that were not given are
collected in memory and returned as bytes; if a sink is given, None
is returned in its place.

Recognized options are those of Context.from_options, plus 'mode'
(sign), and 'sign' and 'always_trust' (encrypt).  'signers' may name
keys by string in every function; names are looked up among the
secret keys.  Unknown options raise TypeError.

"""

import os

from . import constants
from . import util
from .core import Context
from .results import Key


def _read_back(sink, data):
    if sink is not None or data is None:
        return None
    data.seek(0, os.SEEK_SET)
    return data.read()


def find_keys(ctx, keys_or_names, secret_only=False):
    """Resolve KEYS_OR_NAMES into a list of keys

    Each entry is either a Key, used as is, or a string, replaced by
    all keys matching it (possibly none).  A single Key or string is
    treated as a one-element list.

    """
    if isinstance(keys_or_names, Key) or util.is_a_string(keys_or_names):
        keys_or_names = [keys_or_names]
    keys = []
    for item in keys_or_names:
        if isinstance(item, Key):
            keys.append(item)
        elif util.is_a_string(item):
            keys.extend(ctx.keys(item, secret_only))
        else:
            raise TypeError('not a key or name: {!r}'.format(item))
    return keys


def _add_signers(ctx, signers):
    if signers:
        ctx.add_signer(*find_keys(ctx, signers, True))


def decrypt(cipher, *args):
    """decrypt(cipher[, plain][, options]) -> (plaintext, verify_result)

    Decrypt CIPHER and verify embedded signatures.  VERIFY_RESULT is
    None if the engine produced no verification result, otherwise a
    VerifyResult whose signatures may be empty.

    """
    args, options = util.split_args(args, 1)
    plain = args[0] if args else None
    signers = options.pop('signers', None)
    kwargs = Context.translate_options(options)
    cipher_data = util.input_data(cipher)
    plain_data = util.output_data(plain)

    with Context(**kwargs) as ctx:
        _add_signers(ctx, signers)
        ctx.decrypt_verify(cipher_data, plain_data)
        verify_result = ctx.verify_result()
    return _read_back(plain, plain_data), verify_result


def verify(sig, *args):
    """verify(sig[, signed_text[, plain]][, options]) -> (plaintext, verify_result)

    If SIGNED_TEXT is given, SIG is a detached signature over it and
    PLAINTEXT is None.

    """
    args, options = util.split_args(args, 2)
    signed_text = args[0] if args else None
    plain = args[1] if len(args) > 1 else None
    signers = options.pop('signers', None)
    kwargs = Context.translate_options(options)
    sig_data = util.input_data(sig)
    if signed_text is not None:
        signed_text_data = util.input_data(signed_text)
        plain_data = util.output_data(plain) if plain is not None else None
    else:
        signed_text_data = None
        plain_data = util.output_data(plain)

    with Context(**kwargs) as ctx:
        _add_signers(ctx, signers)
        ctx.verify(sig_data, signed_text_data, plain_data)
        verify_result = ctx.verify_result()
    return _read_back(plain, plain_data), verify_result


def sign(plain, *args):
    """sign(plain[, sig][, options]) -> (signature, sign_result)

    Options 'signers' (keys or names of secret keys) and 'mode' (one
    of constants.sig.mode, default normal) select how to sign.

    """
    args, options = util.split_args(args, 1)
    sig = args[0] if args else None
    signers = options.pop('signers', None)
    mode = options.pop('mode', constants.SIG_MODE_NORMAL)
    kwargs = Context.translate_options(options)
    plain_data = util.input_data(plain)
    sig_data = util.output_data(sig)

    with Context(**kwargs) as ctx:
        _add_signers(ctx, signers)
        ctx.sign(plain_data, sig_data, mode)
        sign_result = ctx.sign_result()
    return _read_back(sig, sig_data), sign_result


def encrypt(recipients, plain, *args):
    """encrypt(recipients, plain[, cipher][, options]) -> (ciphertext, encrypt_result)

    RECIPIENTS are keys or names of public keys; None encrypts
    symmetrically.  With the 'sign' option the plaintext is also
    signed, by the 'signers' if given.  'always_trust' skips the
    validity check of the recipients.

    """
    args, options = util.split_args(args, 1)
    cipher = args[0] if args else None
    do_sign = options.pop('sign', False)
    signers = options.pop('signers', None)
    flags = 0
    if options.pop('always_trust', False):
        flags |= constants.ENCRYPT_ALWAYS_TRUST
    kwargs = Context.translate_options(options)
    plain_data = util.input_data(plain)
    cipher_data = util.output_data(cipher)

    with Context(**kwargs) as ctx:
        if recipients is None:
            recipient_keys = None
        else:
            recipient_keys = find_keys(ctx, recipients, False)
        if do_sign:
            _add_signers(ctx, signers)
            ctx.encrypt_sign(recipient_keys, plain_data, cipher_data, flags)
        else:
            ctx.encrypt(recipient_keys, plain_data, cipher_data, flags)
        encrypt_result = ctx.encrypt_result()
    return _read_back(cipher, cipher_data), encrypt_result


def each_key(*args):
    """each_key([pattern[, secret_only]][, options]) -> iterator of keys

    The listing runs in its own context, which is released once the
    iterator is exhausted or closed.

    """
    args, options = util.split_args(args, 2)
    pattern = args[0] if args else None
    secret_only = args[1] if len(args) > 1 else False
    signers = options.pop('signers', None)
    kwargs = Context.translate_options(options)
    return _each_key(kwargs, signers, pattern, secret_only)


def _each_key(kwargs, signers, pattern, secret_only):
    with Context(**kwargs) as ctx:
        _add_signers(ctx, signers)
        with ctx.keylisting(pattern, secret_only) as keys:
            for key in keys:
                yield key
