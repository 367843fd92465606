# Robust result objects
#
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
"""Robust result objects

Results returned by the engine are fragile, i.e. they are only valid
until the next operation is performed in the context.

We cannot arbitrarily constrain the lifetime of Python objects, we
therefore create deep copies of the results.  The copies are
read-only: they describe what the engine reported at the time and
are never updated afterwards.

"""

import time

from . import abi
from . import constants
from . import errors


class Result(object):
    """Result object

    Describes the result of an operation.

    """
    """Convert to types"""
    _type = {}
    """Map functions over list attributes"""
    _map = {}
    """Automatically copy unless blacklisted"""
    _blacklist = {
        'acquire',
        'append',
        'disown',
        'next',
        'own',
        'this',
        'thisown',
    }

    def __init__(self, fragile, engine=None):
        # Errors derived from the record use the producing engine.
        values = {'_engine': engine}
        for key, func in self._type.items():
            if hasattr(fragile, key):
                values[key] = func(getattr(fragile, key))

        for key, func in self._map.items():
            if hasattr(fragile, key):
                values[key] = tuple(
                    func(item, engine) for item in getattr(fragile, key) or ())

        for key in dir(fragile):
            if key.startswith('_') or key in self._blacklist:
                continue
            if key in values or hasattr(type(self), key):
                continue
            value = getattr(fragile, key)
            if callable(value):
                continue
            if isinstance(value, list):
                value = tuple(value)
            values[key] = value

        self.__dict__.update(values)

    def __setattr__(self, key, value):
        raise AttributeError('{} is read-only'.format(
            self.__class__.__name__))

    def __delattr__(self, key):
        raise AttributeError('{} is read-only'.format(
            self.__class__.__name__))

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join('{}={!r}'.format(k, v)
                      for k, v in sorted(self.__dict__.items())
                      if not k.startswith('_')))


def _status_error(record, err):
    return errors.error_to_exception(err, engine=record._engine)


class InvalidKey(Result):
    @property
    def fingerprint(self):
        return self.fpr

    @property
    def error(self):
        """The reason mapped to an error, or None"""
        return _status_error(self, self.reason)


class EncryptResult(Result):
    _map = dict(invalid_recipients=InvalidKey)


class Recipient(Result):
    pass


class DecryptResult(Result):
    _type = dict(wrong_key_usage=bool, is_de_vs=bool)
    _map = dict(recipients=Recipient)


class NewSignature(Result):
    @property
    def fingerprint(self):
        return self.fpr


class SignResult(Result):
    _map = dict(invalid_signers=InvalidKey, signatures=NewSignature)


class Notation(Result):
    pass


class Signature(Result):
    _type = dict(wrong_key_usage=bool, chain_model=bool, is_de_vs=bool)
    _map = dict(notations=Notation)

    _descriptions = {
        errors.NO_ERROR: 'Good signature from {}',
        errors.SIG_EXPIRED: 'Expired signature from {}',
        errors.KEY_EXPIRED: 'Signature made from expired key {}',
        errors.CERT_REVOKED: 'Signature made from revoked key {}',
        errors.BAD_SIGNATURE: 'Bad signature from {}',
        errors.NO_PUBKEY: 'No public key for {}',
    }

    @property
    def fingerprint(self):
        return self.fpr

    @property
    def error(self):
        """The status mapped to an error, or None if the signature is
        good"""
        return _status_error(self, self.status)

    def describe(self, origin=None):
        """Describe the signature, naming ORIGIN (default: the
        fingerprint) as the signer."""
        if origin is None:
            origin = self.fpr
        template = self._descriptions.get(abi.err_code(self.status or 0))
        if template is None:
            return 'Signature from {}: {}'.format(origin,
                                                  self.error.code_str)
        return template.format(origin)

    def __str__(self):
        return self.describe()


class VerifyResult(Result):
    _map = dict(signatures=Signature)


class ImportStatus(Result):
    @property
    def fingerprint(self):
        return self.fpr

    @property
    def error(self):
        return _status_error(self, self.result)


class ImportResult(Result):
    _map = dict(imports=ImportStatus)


class GenkeyResult(Result):
    _type = dict(primary=bool, sub=bool)


class EngineInfo(Result):
    @property
    def required_version(self):
        return self.req_version


_flag = dict((name, bool) for name in (
    'revoked', 'expired', 'disabled', 'invalid', 'can_encrypt',
    'can_sign', 'can_certify', 'can_authenticate', 'secret'))


def _day(timestamp):
    return time.strftime('%Y-%m-%d', time.gmtime(timestamp or 0))


class _Trust(object):
    """Derived trust and capability of keys and subkeys"""

    @property
    def trust(self):
        for flag in ('revoked', 'expired', 'disabled', 'invalid'):
            if getattr(self, flag, False):
                return flag
        return None

    @property
    def capability(self):
        caps = []
        if getattr(self, 'can_encrypt', False):
            caps.append('encrypt')
        if getattr(self, 'can_sign', False):
            caps.append('sign')
        if getattr(self, 'can_certify', False):
            caps.append('certify')
        if getattr(self, 'can_authenticate', False):
            caps.append('authenticate')
        return caps


class KeySig(Result):
    _type = dict(revoked=bool, expired=bool, invalid=bool, exportable=bool)

    def __repr__(self):
        return '<KeySig {} timestamp={}, expires={}>'.format(
            self.keyid, self.timestamp, self.expires)


class UserID(Result):
    _type = dict(revoked=bool, invalid=bool)
    _map = dict(signatures=KeySig)

    def __repr__(self):
        return '<UserID {} <{}> validity={}, signatures={!r}>'.format(
            self.name, self.email,
            constants.VALIDITY_NAMES.get(self.validity, self.validity),
            list(self.signatures))


class SubKey(_Trust, Result):
    _type = dict(_flag, is_qualified=bool)

    PUBKEY_ALGO_LETTERS = {
        constants.PK_RSA: 'R',
        constants.PK_ELG_E: 'g',
        constants.PK_ELG: 'G',
        constants.PK_DSA: 'D',
    }

    @property
    def fingerprint(self):
        return self.fpr

    @property
    def pubkey_algo_letter(self):
        return self.PUBKEY_ALGO_LETTERS.get(self.pubkey_algo, '?')

    def _line(self):
        return '{}   {:4d}{}/{} {}'.format(
            'ssc' if self.secret else 'sub', self.length,
            self.pubkey_algo_letter, (self.fpr or self.keyid)[-8:],
            _day(self.timestamp))

    def __str__(self):
        return self._line() + '\n'

    def __repr__(self):
        return '<SubKey {} trust={!r}, capability={!r}>'.format(
            self._line(), self.trust, self.capability)


class Key(_Trust, Result):
    """A public or secret key

    A snapshot of the keyring entry taken when the key was listed.
    The first subkey is the primary key.

    """
    _type = _flag
    _map = dict(subkeys=SubKey, uids=UserID)

    @property
    def primary(self):
        return self.subkeys[0]

    @property
    def fingerprint(self):
        return self.primary.fpr

    @property
    def keyid(self):
        return self.primary.keyid

    def __eq__(self, other):
        if not isinstance(other, Key):
            return NotImplemented
        return (self.fingerprint, self.secret) == (other.fingerprint,
                                                   other.secret)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash((self.fingerprint, self.secret))

    def _line(self):
        primary = self.primary
        return '{}   {:4d}{}/{} {}'.format(
            'sec' if primary.secret else 'pub', primary.length,
            primary.pubkey_algo_letter, (primary.fpr or primary.keyid)[-8:],
            _day(primary.timestamp))

    def __str__(self):
        lines = [self._line() + '\n']
        for uid in self.uids:
            lines.append('uid\t\t{} <{}>\n'.format(uid.name, uid.email))
        for subkey in self.subkeys:
            lines.append(str(subkey))
        return ''.join(lines)

    def __repr__(self):
        return ('<Key {} trust={!r}, owner_trust={!r}, capability={!r}, '
                'subkeys={!r}, uids={!r}>').format(
                    self._line(), self.trust,
                    constants.VALIDITY_NAMES.get(self.owner_trust),
                    self.capability, list(self.subkeys), list(self.uids))
