#!/usr/bin/env python3
#
# setup.py
#

from setuptools import setup


metadata = {}
with open("perch/__meta__.py") as f:
    exec(f.read(), metadata)

# Other metadata and options can be found in setup.cfg
setup(
    version=metadata['version'],
    license=metadata['license'],
    author=metadata['author'],
)
