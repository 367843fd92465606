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

productname = 'gpygme'
versionstr = "1.0.0"

major, minor, patch = (int(part) for part in versionstr.split('.'))

versionlist = [major, minor, patch]

author = "The GPyGME authors"
author_email = "gnupg-devel@gnupg.org"

description = "Object-oriented interface to GPGME for Python"
homepage = "https://www.gnupg.org"

license = """Copyright (C) 2016 g10 Code GmbH

GPyGME is free software; you can redistribute it and/or modify it
under the terms of the GNU Lesser General Public License as
published by the Free Software Foundation; either version 2.1 of the
License, or (at your option) any later version."""
