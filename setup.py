#!/usr/bin/env python
# coding=utf-8
# pylint: disable=W,C

from setuptools import setup, find_packages
setup(
    name = "yc_xattredit",
    version = "0.3.12",
    author = "Jacob Hipps",
    author_email = "jacob@ycnrg.org",
    license = "MIT",
    description = "Tool for viewing, editing and restoring extended file attributes",
    keywords = "xattr extended attributes getfattr setfattr dump restore editor",
    url = "https://git.ycnrg.org/projects/YXB/repos/yc_xattredit",

    packages = find_packages(exclude=['tests', 'tests.*']),
    scripts = [],
    python_requires = '>=3.6',

    install_requires = ['xattr'],
    extras_require = {
        'test': ['pytest'],
    },

    package_data = {
        '': [ '*.md' ],
    },

    entry_points = {
        'console_scripts': [ 'xattredit = xattredit.cli:_main' ]
    }

    # could also include long_description, download_url, classifiers, etc.
)
