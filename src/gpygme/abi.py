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
"""Numeric ABI of GPGME and libgpg-error

The values below are the ones published in gpgme.h and
gpg-error.h.  They are shared by every engine, so the constants and
errors modules load them from here with util.process_constants.

"""

# Protocols.
GPGME_PROTOCOL_OpenPGP = 0
GPGME_PROTOCOL_CMS = 1
GPGME_PROTOCOL_GPGCONF = 2
GPGME_PROTOCOL_ASSUAN = 3
GPGME_PROTOCOL_G13 = 4
GPGME_PROTOCOL_UISERVER = 5
GPGME_PROTOCOL_SPAWN = 6
GPGME_PROTOCOL_DEFAULT = 254
GPGME_PROTOCOL_UNKNOWN = 255

# Key listing modes.
GPGME_KEYLIST_MODE_LOCAL = 1
GPGME_KEYLIST_MODE_EXTERN = 2
GPGME_KEYLIST_MODE_SIGS = 4
GPGME_KEYLIST_MODE_SIG_NOTATIONS = 8
GPGME_KEYLIST_MODE_WITH_SECRET = 16
GPGME_KEYLIST_MODE_EPHEMERAL = 128
GPGME_KEYLIST_MODE_VALIDATE = 256

# Signature modes.
GPGME_SIG_MODE_NORMAL = 0
GPGME_SIG_MODE_DETACH = 1
GPGME_SIG_MODE_CLEAR = 2

# Validity and owner trust.
GPGME_VALIDITY_UNKNOWN = 0
GPGME_VALIDITY_UNDEFINED = 1
GPGME_VALIDITY_NEVER = 2
GPGME_VALIDITY_MARGINAL = 3
GPGME_VALIDITY_FULL = 4
GPGME_VALIDITY_ULTIMATE = 5

# Encryption flags.
GPGME_ENCRYPT_ALWAYS_TRUST = 1
GPGME_ENCRYPT_NO_ENCRYPT_TO = 2
GPGME_ENCRYPT_PREPARE = 4
GPGME_ENCRYPT_EXPECT_SIGN = 8
GPGME_ENCRYPT_NO_COMPRESS = 16
GPGME_ENCRYPT_SYMMETRIC = 32

# Signature summary bits.
GPGME_SIGSUM_VALID = 0x0001
GPGME_SIGSUM_GREEN = 0x0002
GPGME_SIGSUM_RED = 0x0004
GPGME_SIGSUM_KEY_REVOKED = 0x0010
GPGME_SIGSUM_KEY_EXPIRED = 0x0020
GPGME_SIGSUM_SIG_EXPIRED = 0x0040
GPGME_SIGSUM_KEY_MISSING = 0x0080
GPGME_SIGSUM_CRL_MISSING = 0x0100
GPGME_SIGSUM_CRL_TOO_OLD = 0x0200
GPGME_SIGSUM_BAD_POLICY = 0x0400
GPGME_SIGSUM_SYS_ERROR = 0x0800

# Data encodings.
GPGME_DATA_ENCODING_NONE = 0
GPGME_DATA_ENCODING_BINARY = 1
GPGME_DATA_ENCODING_BASE64 = 2
GPGME_DATA_ENCODING_ARMOR = 3
GPGME_DATA_ENCODING_URL = 4
GPGME_DATA_ENCODING_URLESC = 5
GPGME_DATA_ENCODING_URL0 = 6
GPGME_DATA_ENCODING_MIME = 7

# Public key algorithms.
GPGME_PK_RSA = 1
GPGME_PK_RSA_E = 2
GPGME_PK_RSA_S = 3
GPGME_PK_ELG_E = 16
GPGME_PK_DSA = 17
GPGME_PK_ECC = 18
GPGME_PK_ELG = 20
GPGME_PK_ECDSA = 301
GPGME_PK_ECDH = 302
GPGME_PK_EDDSA = 303

# Hash algorithms used by the records.
GPGME_MD_NONE = 0
GPGME_MD_MD5 = 1
GPGME_MD_SHA1 = 2
GPGME_MD_RMD160 = 3
GPGME_MD_SHA256 = 8
GPGME_MD_SHA384 = 9
GPGME_MD_SHA512 = 10
GPGME_MD_SHA224 = 11

# Import status flags.
GPGME_IMPORT_NEW = 1
GPGME_IMPORT_UID = 2
GPGME_IMPORT_SIG = 4
GPGME_IMPORT_SUBKEY = 8
GPGME_IMPORT_SECRET = 16

# Export modes.
GPGME_EXPORT_MODE_EXTERN = 2
GPGME_EXPORT_MODE_MINIMAL = 4
GPGME_EXPORT_MODE_SECRET = 16
GPGME_EXPORT_MODE_RAW = 32
GPGME_EXPORT_MODE_PKCS12 = 64

# Error sources.
GPG_ERR_SOURCE_UNKNOWN = 0
GPG_ERR_SOURCE_GCRYPT = 1
GPG_ERR_SOURCE_GPG = 2
GPG_ERR_SOURCE_GPGSM = 3
GPG_ERR_SOURCE_GPGAGENT = 4
GPG_ERR_SOURCE_PINENTRY = 5
GPG_ERR_SOURCE_SCD = 6
GPG_ERR_SOURCE_GPGME = 7
GPG_ERR_SOURCE_KEYBOX = 8
GPG_ERR_SOURCE_KSBA = 9
GPG_ERR_SOURCE_DIRMNGR = 10
GPG_ERR_SOURCE_GSTI = 11
GPG_ERR_SOURCE_GPA = 12
GPG_ERR_SOURCE_KLEO = 13
GPG_ERR_SOURCE_G13 = 14
GPG_ERR_SOURCE_ASSUAN = 15
GPG_ERR_SOURCE_USER_1 = 32
GPG_ERR_SOURCE_USER_2 = 33
GPG_ERR_SOURCE_USER_3 = 34
GPG_ERR_SOURCE_USER_4 = 35

# Error codes.
GPG_ERR_NO_ERROR = 0
GPG_ERR_GENERAL = 1
GPG_ERR_BAD_SIGNATURE = 8
GPG_ERR_NO_PUBKEY = 9
GPG_ERR_BAD_PASSPHRASE = 11
GPG_ERR_NO_SECKEY = 17
GPG_ERR_WRONG_SECKEY = 18
GPG_ERR_INV_PASSPHRASE = 31
GPG_ERR_UNUSABLE_PUBKEY = 53
GPG_ERR_UNUSABLE_SECKEY = 54
GPG_ERR_INV_VALUE = 55
GPG_ERR_BAD_CERT_CHAIN = 56
GPG_ERR_MISSING_CERT = 57
GPG_ERR_NO_DATA = 58
GPG_ERR_BUG = 59
GPG_ERR_NOT_SUPPORTED = 60
GPG_ERR_INV_OP = 61
GPG_ERR_NOT_IMPLEMENTED = 69
GPG_ERR_CONFLICT = 70
GPG_ERR_UNSUPPORTED_ALGORITHM = 84
GPG_ERR_CERT_REVOKED = 94
GPG_ERR_NO_CRL_KNOWN = 95
GPG_ERR_CANCELED = 99
GPG_ERR_CERT_EXPIRED = 101
GPG_ERR_AMBIGUOUS_NAME = 107
GPG_ERR_NO_POLICY_MATCH = 116
GPG_ERR_WRONG_KEY_USAGE = 125
GPG_ERR_INV_ENGINE = 150
GPG_ERR_DECRYPT_FAILED = 152
GPG_ERR_KEY_EXPIRED = 153
GPG_ERR_SIG_EXPIRED = 154
GPG_ERR_EOF = 16383

GPG_ERR_SOURCE_SHIFT = 24
GPG_ERR_SOURCE_MASK = 127
GPG_ERR_CODE_MASK = 65535


def err_make(source, code):
    """Compose a status word from SOURCE and CODE."""
    if code == GPG_ERR_NO_ERROR:
        return GPG_ERR_NO_ERROR
    return (((source & GPG_ERR_SOURCE_MASK) << GPG_ERR_SOURCE_SHIFT) |
            (code & GPG_ERR_CODE_MASK))


def err_code(err):
    return err & GPG_ERR_CODE_MASK


def err_source(err):
    return (err >> GPG_ERR_SOURCE_SHIFT) & GPG_ERR_SOURCE_MASK
