#
# perch/__meta__.py
#
"""Project Metadata"""

package = 'perch'
project = 'Middleware, routing and response helpers for http.server'

version_info = (0, 3, 0)
version = '.'.join(map(str, version_info))

date = "Oct 19, 2026"
author = "The Perch Developers"
copyright = "Copyright 2026, The Perch Developers"

license = 'Apache v2.0'
