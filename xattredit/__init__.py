#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit
YC XAttrEdit
Extended file attribute viewer, editor and restore utility

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

Refer to README.md for installation and usage instructions.

"""

from xattredit.common.logthis import LL

__version__ = "0.3.12"
__date__ = "17 Oct 2026"

defaults =  {
                'run': {
                    'mode': None,
                    'infile': None,
                    'paths': None,
                    'name': None,
                    'value': None,
                    'edited': None
                },
                'core': {
                    'loglevel': LL.INFO,
                    'backend': "tool",
                    'color': True
                },
                'tools': {
                    'getfattr': None,
                    'setfattr': None,
                    'match': None
                },
                'editor': {
                    'hook': True,
                    'command': None
                }
            }
