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

from gpygme import util

# To appease static analysis tools, we define some constants here.
# They are overwritten with the proper values by process_constants.
PROTOCOL_OpenPGP = 0
PROTOCOL_CMS = 1
SIG_MODE_NORMAL = 0

util.process_constants('GPGME_', globals())
del util

PROTOCOL_NAMES = {
    PROTOCOL_OpenPGP: 'OpenPGP',
    PROTOCOL_CMS: 'CMS',
}

KEYLIST_MODE_NAMES = {
    KEYLIST_MODE_LOCAL: 'local',
    KEYLIST_MODE_EXTERN: 'extern',
    KEYLIST_MODE_SIGS: 'sigs',
    KEYLIST_MODE_VALIDATE: 'validate',
}

VALIDITY_NAMES = {
    VALIDITY_UNKNOWN: 'unknown',
    VALIDITY_UNDEFINED: 'undefined',
    VALIDITY_NEVER: 'never',
    VALIDITY_MARGINAL: 'marginal',
    VALIDITY_FULL: 'full',
    VALIDITY_ULTIMATE: 'ultimate',
}


def keylist_mode_names(mode):
    """Return the names of the bits set in the keylist MODE."""
    return [name for bit, name in sorted(KEYLIST_MODE_NAMES.items())
            if mode & bit]


from . import (data, encrypt, export, imports, keylist, md, pk, protocol,
               sig, sigsum, validity)

__all__ = ['data', 'encrypt', 'export', 'imports', 'keylist', 'md', 'pk',
           'protocol', 'sig', 'sigsum', 'validity']
