# Copyright (C) 2016 g10 Code GmbH
#
# This file is part of GPyGME.
#
# GPyGME is free software; you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# GPyGME is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY
# or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU Lesser General
# Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, see <https://www.gnu.org/licenses/>.
"""A scripted engine for the tests

FakeEngine keeps an in-memory keyring and "seals" messages as JSON
documents, optionally armored.  Signatures are SHA-256 digests over
the signer's fingerprint and the payload, so tampering with a message
is detected.  None of this is cryptography; it only behaves like an
engine as far as the call protocol is concerned.

"""

import base64
import hashlib
import json
import os
import types

from gpygme import abi
from gpygme import constants
from gpygme.engine import Engine

# known keys
alice = "A0FF4590BB6122EDEF6E3C542D727CC768697734"
bob = "D695676BDCEDCC2CDD6152BCFE180B1DA9E3B0B2"
carol = "7CCA20CCDE5394CEE71C9F0BFED153F12F18F45D"
dave = "F52770D5C4DB41408D918C9F920572769B9FE19C"
no_such_key = "A" * 40

carol_passphrase = "hunter2"

TIMESTAMP = 1451606400  # 2016-01-01

ARMOR_BEGIN = "-----BEGIN PGP MESSAGE-----"
ARMOR_END = "-----END PGP MESSAGE-----"
CLEAR_BEGIN = "-----BEGIN PGP SIGNED MESSAGE-----"
CLEAR_SIG_BEGIN = "-----BEGIN PGP SIGNATURE-----"
CLEAR_SIG_END = "-----END PGP SIGNATURE-----"
BINARY_MAGIC = b"FAKEPGP\x00"


def err(code, source=abi.GPG_ERR_SOURCE_GPG):
    return abi.err_make(source, code)


OK = abi.GPG_ERR_NO_ERROR
EOF = err(abi.GPG_ERR_EOF, abi.GPG_ERR_SOURCE_GPGME)

ERROR_STRINGS = {
    abi.GPG_ERR_NO_ERROR: "Success",
    abi.GPG_ERR_GENERAL: "General error",
    abi.GPG_ERR_BAD_SIGNATURE: "Bad signature",
    abi.GPG_ERR_NO_PUBKEY: "No public key",
    abi.GPG_ERR_BAD_PASSPHRASE: "Bad passphrase",
    abi.GPG_ERR_NO_SECKEY: "No secret key",
    abi.GPG_ERR_UNUSABLE_PUBKEY: "Unusable public key",
    abi.GPG_ERR_UNUSABLE_SECKEY: "Unusable secret key",
    abi.GPG_ERR_INV_VALUE: "Invalid value",
    abi.GPG_ERR_NO_DATA: "No data",
    abi.GPG_ERR_NOT_SUPPORTED: "Not supported",
    abi.GPG_ERR_NOT_IMPLEMENTED: "Not implemented",
    abi.GPG_ERR_CONFLICT: "Conflicting use",
    abi.GPG_ERR_CANCELED: "Operation cancelled",
    abi.GPG_ERR_INV_ENGINE: "Invalid crypto engine",
    abi.GPG_ERR_DECRYPT_FAILED: "Decryption failed",
    abi.GPG_ERR_KEY_EXPIRED: "Key expired",
    abi.GPG_ERR_SIG_EXPIRED: "Signature expired",
    abi.GPG_ERR_CERT_REVOKED: "Certificate revoked",
    abi.GPG_ERR_EOF: "End of file",
}

SOURCE_STRINGS = {
    abi.GPG_ERR_SOURCE_UNKNOWN: "Unspecified source",
    abi.GPG_ERR_SOURCE_GPG: "GnuPG",
    abi.GPG_ERR_SOURCE_GPGME: "GPGME",
    abi.GPG_ERR_SOURCE_USER_1: "User defined source 1",
}


def _digest(*parts):
    h = hashlib.sha256()
    for part in parts:
        h.update(part if isinstance(part, bytes) else part.encode('utf-8'))
    return h.hexdigest()


def _b64(raw):
    return base64.b64encode(raw).decode('ascii')


def _unb64(text):
    return base64.b64decode(text.encode('ascii'))


def encode_message(doc, armor):
    raw = json.dumps(doc, sort_keys=True).encode('utf-8')
    if armor:
        return "{}\n\n{}\n{}\n".format(ARMOR_BEGIN, _b64(raw),
                                       ARMOR_END).encode('ascii')
    return BINARY_MAGIC + raw


def decode_message(blob):
    """Return the document in BLOB, or None if there is none"""
    try:
        if blob.startswith(BINARY_MAGIC):
            return json.loads(blob[len(BINARY_MAGIC):].decode('utf-8'))
        text = blob.decode('ascii')
        if text.startswith(CLEAR_BEGIN):
            return _decode_cleartext(text)
        if text.startswith(ARMOR_BEGIN):
            body = text[len(ARMOR_BEGIN):text.index(ARMOR_END)]
            return json.loads(_unb64(body.strip()).decode('utf-8'))
    except ValueError:
        return None
    return None


def _decode_cleartext(text):
    head, _, rest = text.partition("\n\n")
    payload, _, signature = rest.partition("\n" + CLEAR_SIG_BEGIN)
    body = signature[:signature.index(CLEAR_SIG_END)]
    doc = json.loads(_unb64(body.strip()).decode('utf-8'))
    doc['payload'] = _b64(payload.encode('utf-8'))
    return doc


def is_armored(blob):
    return blob.startswith(ARMOR_BEGIN.encode('ascii'))


def tamper(blob):
    """Replace the payload of the message in BLOB, keeping its
    signatures."""
    doc = decode_message(blob)
    doc['payload'] = _b64(b'tampered ' + _unb64(doc['payload']))
    return encode_message(doc, is_armored(blob))


def make_entry(fpr, name, email, secret, passphrase=None, expired=False,
               algo=constants.PK_RSA, comment=''):
    return {
        'fpr': fpr,
        'name': name,
        'email': email,
        'comment': comment,
        'secret': secret,
        'passphrase': passphrase,
        'expired': expired,
        'algo': algo,
        'length': 2048 if algo == constants.PK_RSA else 1024,
        'timestamp': TIMESTAMP,
        'sub_fpr': hashlib.sha1(fpr.encode('ascii')).hexdigest().upper(),
    }


def default_keyring():
    return {
        alice: make_entry(alice, "Alice", "alice@example.org", True),
        bob: make_entry(bob, "Bob", "bob@example.org", False),
        carol: make_entry(carol, "Carol", "carol@example.org", True,
                          passphrase=carol_passphrase,
                          algo=constants.PK_DSA, comment="work"),
        dave: make_entry(dave, "Dave", "dave@example.org", False,
                         expired=True),
    }


class Session(object):
    def __init__(self, engine_info):
        self.armor = False
        self.textmode = False
        self.protocol = constants.PROTOCOL_OpenPGP
        self.keylist_mode = constants.KEYLIST_MODE_LOCAL
        self.signers = []
        self.passphrase_cb = None
        self.progress_cb = None
        self.results = {}
        self.listing = None
        self.engine_info = [dict(info) for info in engine_info]


class FakeEngine(Engine):
    """Engine implementation over an in-memory keyring"""

    def __init__(self, keyring=None):
        self.keyring = default_keyring() if keyring is None else keyring
        self.sessions = {}
        self.released = []
        self.calls = []
        self.passphrase_prompts = []
        self.progress_reports = []
        self.symmetric = {}
        self.engine_info = [
            dict(protocol=constants.PROTOCOL_OpenPGP,
                 file_name='/usr/bin/gpg', version='2.2.40',
                 req_version='1.4.0', home_dir=None),
            dict(protocol=constants.PROTOCOL_CMS,
                 file_name='/usr/bin/gpgsm', version='2.2.40',
                 req_version='2.0.4', home_dir=None),
        ]
        self._next_handle = 1
        self._generated = 0

    def _session(self, handle):
        return self.sessions[handle]

    def count(self, name):
        return self.calls.count(name)

    # Sessions.

    def new(self):
        handle = self._next_handle
        self._next_handle += 1
        self.sessions[handle] = Session(self.engine_info)
        return OK, handle

    def release(self, handle):
        self.calls.append('release')
        self.released.append(handle)
        del self.sessions[handle]

    # Configuration.

    def get_protocol(self, handle):
        return self._session(handle).protocol

    def set_protocol(self, handle, protocol):
        if self.engine_check_version(protocol):
            return self.engine_check_version(protocol)
        self._session(handle).protocol = protocol
        return OK

    def get_armor(self, handle):
        return self._session(handle).armor

    def set_armor(self, handle, yes):
        self._session(handle).armor = yes

    def get_textmode(self, handle):
        return self._session(handle).textmode

    def set_textmode(self, handle, yes):
        self._session(handle).textmode = yes

    def get_keylist_mode(self, handle):
        return self._session(handle).keylist_mode

    def set_keylist_mode(self, handle, mode):
        self._session(handle).keylist_mode = mode
        return OK

    def engine_check_version(self, protocol):
        if protocol in (constants.PROTOCOL_OpenPGP, constants.PROTOCOL_CMS):
            return OK
        return err(abi.GPG_ERR_INV_ENGINE, abi.GPG_ERR_SOURCE_GPGME)

    def get_engine_info(self, handle=None):
        infos = (self.engine_info
                 if handle is None else self._session(handle).engine_info)
        return [types.SimpleNamespace(**info) for info in infos]

    def set_engine_info(self, handle, protocol, file_name, home_dir):
        infos = (self.engine_info
                 if handle is None else self._session(handle).engine_info)
        for info in infos:
            if info['protocol'] == protocol:
                if file_name is not None:
                    info['file_name'] = file_name
                if home_dir is not None:
                    info['home_dir'] = home_dir
                return OK
        return err(abi.GPG_ERR_INV_ENGINE, abi.GPG_ERR_SOURCE_GPGME)

    # Credentials.

    def set_passphrase_cb(self, handle, func):
        self._session(handle).passphrase_cb = func

    def set_progress_cb(self, handle, func):
        self._session(handle).progress_cb = func

    def _ask(self, session, hint, desc, check):
        if session.passphrase_cb is None:
            return err(abi.GPG_ERR_CANCELED)
        prev_bad = False
        for attempt in range(3):
            self.passphrase_prompts.append((hint, desc, prev_bad))
            passphrase = session.passphrase_cb(hint, desc, prev_bad)
            if passphrase is None:
                return err(abi.GPG_ERR_CANCELED)
            if isinstance(passphrase, bytes):
                passphrase = passphrase.decode('utf-8')
            if check(passphrase):
                return OK
            prev_bad = True
        return err(abi.GPG_ERR_BAD_PASSPHRASE)

    def _unlock(self, session, entry):
        if entry['passphrase'] is None:
            return OK
        hint = "{} {} <{}>".format(entry['fpr'][-16:], entry['name'],
                                   entry['email'])
        desc = "{} {} {} 0".format(entry['fpr'][-16:], entry['fpr'][-16:],
                                   entry['algo'])
        return self._ask(session, hint, desc,
                         lambda p: p == entry['passphrase'])

    def _progress(self, session, what, current, total):
        self.progress_reports.append((what, current, total))
        if session.progress_cb is not None:
            session.progress_cb(what, ord('?'), current, total)

    # Signers.

    def signers_add(self, handle, key):
        if key.fingerprint not in self.keyring:
            return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME)
        self._session(handle).signers.append(key.fingerprint)
        return OK

    def signers_clear(self, handle):
        self._session(handle).signers = []

    def signers_count(self, handle):
        return len(self._session(handle).signers)

    def signers_enum(self, handle, index):
        fpr = self._session(handle).signers[index]
        return self._key(self.keyring[fpr], constants.KEYLIST_MODE_LOCAL,
                         self.keyring[fpr]['secret'])

    # Keys.

    def _key(self, entry, mode, secret):
        keyid = entry['fpr'][-16:]
        flags = dict(revoked=0, expired=int(entry['expired']), disabled=0,
                     invalid=0)
        primary = types.SimpleNamespace(
            pubkey_algo=entry['algo'], length=entry['length'], keyid=keyid,
            fpr=entry['fpr'], timestamp=entry['timestamp'],
            expires=entry['timestamp'] - 1 if entry['expired'] else 0,
            can_encrypt=0, can_sign=1, can_certify=1, can_authenticate=0,
            secret=int(secret), is_qualified=0, **flags)
        subkey = types.SimpleNamespace(
            pubkey_algo=constants.PK_ELG_E, length=entry['length'],
            keyid=entry['sub_fpr'][-16:], fpr=entry['sub_fpr'],
            timestamp=entry['timestamp'], expires=primary.expires,
            can_encrypt=1, can_sign=0, can_certify=0, can_authenticate=0,
            secret=int(secret), is_qualified=0, **flags)
        signatures = []
        if mode & constants.KEYLIST_MODE_SIGS:
            signatures.append(
                types.SimpleNamespace(
                    pubkey_algo=entry['algo'], keyid=keyid,
                    timestamp=entry['timestamp'], expires=0, revoked=0,
                    expired=0, invalid=0, exportable=1,
                    uid=self._uid_string(entry), name=entry['name'],
                    email=entry['email'], comment=entry['comment'],
                    sig_class=0x13, status=OK))
        uid = types.SimpleNamespace(
            validity=constants.VALIDITY_ULTIMATE
            if entry['secret'] else constants.VALIDITY_FULL,
            uid=self._uid_string(entry), name=entry['name'],
            comment=entry['comment'], email=entry['email'], revoked=0,
            invalid=0, signatures=signatures)
        return types.SimpleNamespace(
            keylist_mode=mode, protocol=constants.PROTOCOL_OpenPGP,
            owner_trust=uid.validity, issuer_serial=None, issuer_name=None,
            chain_id=None, can_encrypt=1, can_sign=1, can_certify=1,
            can_authenticate=0, secret=int(secret),
            subkeys=[primary, subkey], uids=[uid], **flags)

    def _uid_string(self, entry):
        if entry['comment']:
            return "{} ({}) <{}>".format(entry['name'], entry['comment'],
                                         entry['email'])
        return "{} <{}>".format(entry['name'], entry['email'])

    def _matches(self, entry, pattern):
        if pattern is None:
            return True
        if isinstance(pattern, (list, tuple)):
            return any(self._matches(entry, p) for p in pattern)
        pattern = pattern.lower()
        return (pattern in self._uid_string(entry).lower() or
                entry['fpr'].lower().endswith(pattern))

    def op_keylist_start(self, handle, pattern, secret_only):
        self.calls.append('op_keylist_start')
        session = self._session(handle)
        with_secret = (secret_only or
                       session.keylist_mode & constants.KEYLIST_MODE_WITH_SECRET)
        keys = [
            self._key(entry, session.keylist_mode,
                      bool(with_secret and entry['secret']))
            for fpr, entry in sorted(self.keyring.items())
            if self._matches(entry, pattern) and
            (not secret_only or entry['secret'])
        ]
        session.listing = iter(keys)
        return OK

    def op_keylist_next(self, handle):
        self.calls.append('op_keylist_next')
        session = self._session(handle)
        if session.listing is None:
            return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME), None
        for key in session.listing:
            return OK, key
        return EOF, None

    def op_keylist_end(self, handle):
        self.calls.append('op_keylist_end')
        self._session(handle).listing = None
        return OK

    def get_key(self, handle, fpr, secret):
        self.calls.append('get_key')
        entry = self.keyring.get(fpr)
        if entry is None or (secret and not entry['secret']):
            return EOF, None
        return OK, self._key(entry, self._session(handle).keylist_mode,
                             secret)

    # Operations.

    def _begin(self, session):
        session.results = {}

    def _signers(self, session):
        if session.signers:
            return list(session.signers)
        usable = sorted(
            (entry['passphrase'] is not None, fpr)
            for fpr, entry in self.keyring.items() if entry['secret'])
        return [fpr for _, fpr in usable[:1]]

    def _make_signatures(self, session, payload, mode):
        """Returns (status, signatures) for the session's signers"""
        signatures = []
        new = []
        invalid = []
        for fpr in self._signers(session):
            entry = self.keyring[fpr]
            if not entry['secret']:
                invalid.append(
                    types.SimpleNamespace(
                        fpr=fpr, reason=err(abi.GPG_ERR_UNUSABLE_SECKEY)))
                continue
            status = self._unlock(session, entry)
            if status:
                return status, None
            signatures.append(
                dict(fpr=fpr, timestamp=TIMESTAMP,
                     mac=_digest(fpr, payload)))
            new.append(
                types.SimpleNamespace(
                    type=mode, pubkey_algo=entry['algo'],
                    hash_algo=constants.MD_SHA256,
                    sig_class=1 if session.textmode else 0,
                    timestamp=TIMESTAMP, fpr=fpr))
        session.results['sign'] = types.SimpleNamespace(
            invalid_signers=invalid, signatures=new)
        if invalid:
            return err(abi.GPG_ERR_UNUSABLE_SECKEY), None
        return OK, signatures

    def _check_signatures(self, session, doc, payload):
        checked = []
        for sig in doc.get('signatures', []):
            entry = self.keyring.get(sig['fpr'])
            if entry is None:
                status = err(abi.GPG_ERR_NO_PUBKEY)
                summary = constants.SIGSUM_KEY_MISSING
            elif sig['mac'] != _digest(sig['fpr'], payload):
                status = err(abi.GPG_ERR_BAD_SIGNATURE)
                summary = constants.SIGSUM_RED
            elif entry['expired']:
                status = err(abi.GPG_ERR_KEY_EXPIRED)
                summary = constants.SIGSUM_KEY_EXPIRED
            else:
                status = OK
                summary = constants.SIGSUM_VALID | constants.SIGSUM_GREEN
            checked.append(
                types.SimpleNamespace(
                    summary=summary, fpr=sig['fpr'], status=status,
                    notations=[], timestamp=sig['timestamp'],
                    exp_timestamp=0, wrong_key_usage=0,
                    validity=constants.VALIDITY_FULL
                    if status == OK else constants.VALIDITY_UNKNOWN,
                    validity_reason=OK,
                    pubkey_algo=entry['algo'] if entry else 0,
                    hash_algo=constants.MD_SHA256, chain_model=0,
                    is_de_vs=0))
        session.results['verify'] = types.SimpleNamespace(
            signatures=checked, file_name=None)

    def _encrypt(self, handle, recipients, flags, plain, cipher, sign):
        session = self._session(handle)
        self._begin(session)
        payload = plain.read()
        self._progress(session, 'encrypt', 0, len(payload))

        doc = dict(type='encrypted', recipients=[], symmetric=None,
                   payload=_b64(payload), signatures=[])
        invalid = []
        if recipients is None:
            salt = _digest(str(len(self.symmetric)))
            passphrase = []

            def remember(p):
                passphrase.append(p)
                return True

            status = self._ask(session, 'Enter passphrase', 'symmetric',
                               remember)
            if status:
                return status
            self.symmetric[salt] = passphrase[0]
            doc['symmetric'] = salt
        elif not recipients:
            return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME)
        else:
            for key in recipients:
                entry = self.keyring.get(key.fingerprint)
                if entry is None or (entry['expired'] and not
                                     flags & constants.ENCRYPT_ALWAYS_TRUST):
                    invalid.append(
                        types.SimpleNamespace(
                            fpr=key.fingerprint,
                            reason=err(abi.GPG_ERR_UNUSABLE_PUBKEY)))
                else:
                    doc['recipients'].append(key.fingerprint)
        session.results['encrypt'] = types.SimpleNamespace(
            invalid_recipients=invalid)
        if invalid:
            return err(abi.GPG_ERR_UNUSABLE_PUBKEY)

        if sign:
            status, signatures = self._make_signatures(
                session, payload, constants.SIG_MODE_NORMAL)
            if status:
                return status
            doc['signatures'] = signatures

        cipher.write(encode_message(doc, session.armor))
        self._progress(session, 'encrypt', len(payload), len(payload))
        return OK

    def op_encrypt(self, handle, recipients, flags, plain, cipher):
        self.calls.append('op_encrypt')
        return self._encrypt(handle, recipients, flags, plain, cipher, False)

    def op_encrypt_sign(self, handle, recipients, flags, plain, cipher):
        self.calls.append('op_encrypt_sign')
        return self._encrypt(handle, recipients, flags, plain, cipher, True)

    def _decrypt(self, handle, cipher, plain, verify):
        session = self._session(handle)
        self._begin(session)
        doc = decode_message(cipher.read())
        if doc is None or doc.get('type') != 'encrypted':
            return err(abi.GPG_ERR_NO_DATA)

        recipients = [
            types.SimpleNamespace(keyid=fpr[-16:],
                                  pubkey_algo=constants.PK_ELG_E,
                                  status=OK) for fpr in doc['recipients']
        ]
        session.results['decrypt'] = types.SimpleNamespace(
            unsupported_algorithm=None, wrong_key_usage=0,
            recipients=recipients, file_name=None, is_de_vs=0)

        if doc['symmetric'] is not None:
            expected = self.symmetric.get(doc['symmetric'])
            status = self._ask(session, 'Enter passphrase', 'symmetric',
                               lambda p: p == expected)
            if status:
                return status
        else:
            owners = [
                self.keyring[fpr] for fpr in doc['recipients']
                if fpr in self.keyring and self.keyring[fpr]['secret']
            ]
            if not owners:
                for recipient in recipients:
                    recipient.status = err(abi.GPG_ERR_NO_SECKEY)
                return err(abi.GPG_ERR_NO_SECKEY)
            status = self._unlock(session, owners[0])
            if status:
                return status

        payload = _unb64(doc['payload'])
        if verify:
            self._check_signatures(session, doc, payload)
        plain.write(payload)
        return OK

    def op_decrypt(self, handle, cipher, plain):
        self.calls.append('op_decrypt')
        return self._decrypt(handle, cipher, plain, False)

    def op_decrypt_verify(self, handle, cipher, plain):
        self.calls.append('op_decrypt_verify')
        return self._decrypt(handle, cipher, plain, True)

    def op_sign(self, handle, plain, sig, mode):
        self.calls.append('op_sign')
        session = self._session(handle)
        self._begin(session)
        payload = plain.read()
        self._progress(session, 'sign', 0, len(payload))
        status, signatures = self._make_signatures(session, payload, mode)
        if status:
            return status
        if mode == constants.SIG_MODE_DETACH:
            sig.write(
                encode_message(
                    dict(type='detached', signatures=signatures),
                    session.armor))
        elif mode == constants.SIG_MODE_CLEAR:
            body = json.dumps(dict(type='signed', signatures=signatures),
                              sort_keys=True).encode('utf-8')
            sig.write("{}\nHash: SHA256\n\n{}\n{}\n\n{}\n{}\n".format(
                CLEAR_BEGIN, payload.decode('utf-8'), CLEAR_SIG_BEGIN,
                _b64(body), CLEAR_SIG_END).encode('utf-8'))
        else:
            sig.write(
                encode_message(
                    dict(type='signed', payload=_b64(payload),
                         signatures=signatures), session.armor))
        self._progress(session, 'sign', len(payload), len(payload))
        return OK

    def op_verify(self, handle, sig, signed_text, plain):
        self.calls.append('op_verify')
        session = self._session(handle)
        self._begin(session)
        doc = decode_message(sig.read())
        if doc is None or doc.get('type') not in ('signed', 'detached'):
            return err(abi.GPG_ERR_NO_DATA)
        if doc['type'] == 'detached':
            if signed_text is None:
                return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME)
            payload = signed_text.read()
        else:
            payload = _unb64(doc['payload'])
        self._check_signatures(session, doc, payload)
        if plain is not None and doc['type'] == 'signed':
            plain.write(payload)
        return OK

    def _export_entries(self, entries, secret, armor):
        keys = []
        for entry in entries:
            entry = dict(entry)
            if not secret:
                entry['secret'] = False
                entry['passphrase'] = None
            keys.append(entry)
        return encode_message(dict(type='keys', keys=keys), armor)

    def op_import(self, handle, keydata):
        self.calls.append('op_import')
        session = self._session(handle)
        self._begin(session)
        doc = decode_message(keydata.read())
        if doc is None or doc.get('type') != 'keys':
            return err(abi.GPG_ERR_NO_DATA)
        counters = dict(considered=0, no_user_id=0, imported=0,
                        imported_rsa=0, unchanged=0, new_user_ids=0,
                        new_sub_keys=0, new_signatures=0, new_revocations=0,
                        secret_read=0, secret_imported=0, secret_unchanged=0,
                        skipped_new_keys=0, not_imported=0)
        imports = []
        for entry in doc['keys']:
            counters['considered'] += 1
            if entry['secret']:
                counters['secret_read'] += 1
            known = self.keyring.get(entry['fpr'])
            if known is None:
                self.keyring[entry['fpr']] = entry
                counters['imported'] += 1
                if entry['algo'] == constants.PK_RSA:
                    counters['imported_rsa'] += 1
                status = constants.IMPORT_NEW
                if entry['secret']:
                    counters['secret_imported'] += 1
                    status |= constants.IMPORT_SECRET
            elif entry['secret'] and not known['secret']:
                self.keyring[entry['fpr']] = entry
                counters['secret_imported'] += 1
                status = constants.IMPORT_SECRET
            else:
                counters['unchanged'] += 1
                if entry['secret']:
                    counters['secret_unchanged'] += 1
                status = 0
            imports.append(
                types.SimpleNamespace(fpr=entry['fpr'], result=OK,
                                      status=status))
        session.results['import'] = types.SimpleNamespace(
            imports=imports, **counters)
        return OK

    def op_export(self, handle, pattern, mode, keydata):
        self.calls.append('op_export')
        session = self._session(handle)
        self._begin(session)
        entries = [
            entry for fpr, entry in sorted(self.keyring.items())
            if self._matches(entry, pattern)
        ]
        keydata.write(
            self._export_entries(entries,
                                 mode & constants.EXPORT_MODE_SECRET,
                                 session.armor))
        return OK

    def op_delete(self, handle, key, allow_secret):
        self.calls.append('op_delete')
        self._begin(self._session(handle))
        entry = self.keyring.get(key.fingerprint)
        if entry is None:
            return err(abi.GPG_ERR_NO_PUBKEY)
        if entry['secret'] and not allow_secret:
            return err(abi.GPG_ERR_CONFLICT)
        del self.keyring[key.fingerprint]
        return OK

    def op_genkey(self, handle, parms, pubkey, seckey):
        self.calls.append('op_genkey')
        session = self._session(handle)
        self._begin(session)
        if not parms or '<GnupgKeyParms format="internal">' not in parms:
            return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME)
        body = parms.split('<GnupgKeyParms format="internal">', 1)[1]
        body = body.split('</GnupgKeyParms>', 1)[0]
        params = {}
        for line in body.splitlines():
            name, sep, value = line.strip().partition(':')
            if sep:
                params[name.strip().lower()] = value.strip()
        if 'key-type' not in params or 'name-real' not in params:
            return err(abi.GPG_ERR_INV_VALUE, abi.GPG_ERR_SOURCE_GPGME)

        for step in range(3):
            self._progress(session, 'primegen', step, 3)

        self._generated += 1
        fpr = hashlib.sha1('{}{}{}'.format(
            params['name-real'], params.get('name-email', ''),
            self._generated).encode('utf-8')).hexdigest().upper()
        entry = make_entry(
            fpr, params['name-real'], params.get('name-email', ''), True,
            passphrase=params.get('passphrase'),
            algo=constants.PK_DSA
            if params['key-type'].upper() == 'DSA' else constants.PK_RSA,
            comment=params.get('name-comment', ''))
        if 'key-length' in params:
            entry['length'] = int(params['key-length'])

        if pubkey is None and seckey is None:
            self.keyring[fpr] = entry
        else:
            if pubkey is not None:
                pubkey.write(
                    self._export_entries([entry], False, session.armor))
            if seckey is not None:
                seckey.write(
                    self._export_entries([entry], True, session.armor))
        session.results['genkey'] = types.SimpleNamespace(
            primary=1, sub=int('subkey-type' in params), fpr=fpr)
        return OK

    # Results of the last operation.

    def op_encrypt_result(self, handle):
        return self._session(handle).results.get('encrypt')

    def op_decrypt_result(self, handle):
        return self._session(handle).results.get('decrypt')

    def op_verify_result(self, handle):
        return self._session(handle).results.get('verify')

    def op_sign_result(self, handle):
        return self._session(handle).results.get('sign')

    def op_import_result(self, handle):
        return self._session(handle).results.get('import')

    def op_genkey_result(self, handle):
        return self._session(handle).results.get('genkey')

    # String tables.

    def strerror(self, err):
        return ERROR_STRINGS.get(abi.err_code(err), "Unknown error code")

    def strsource(self, err):
        return SOURCE_STRINGS.get(abi.err_source(err), "Unknown source")


def write_file(directory, name, content):
    path = os.path.join(str(directory), name)
    with open(path, 'wb') as fp:
        fp.write(content)
    return path
