#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.editor
Host editor integration

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import os
import sys
import shlex
import tempfile
import subprocess

from xattredit.common.logthis import *
from xattredit.session import EditSession, reconcile


def editor_command(xconfig):
    """
    Determine which editor to launch
    """
    return xconfig.editor['command'] or os.environ.get('VISUAL') or os.environ.get('EDITOR') or 'vi'


def run_editor(intext, xconfig):
    """
    Open @intext in the user's editor; returns the text as saved
    """
    ecmd = shlex.split(editor_command(xconfig))
    tfd, tfile = tempfile.mkstemp(prefix='xattredit-', suffix='.xattr')
    try:
        with os.fdopen(tfd, 'w', encoding='utf-8') as f:
            f.write(intext)
        logthis("Launching editor:", suffix=ecmd + [tfile], loglevel=LL.DEBUG)
        try:
            rval = subprocess.call(ecmd + [tfile])
        except OSError as e:
            raise ExternalToolError('editor', tfile, output=str(e))
        if rval != 0:
            raise ExternalToolError('editor', tfile, status=rval)
        with open(tfile, 'r', encoding='utf-8') as f:
            return f.read()
    finally:
        os.remove(tfile)


def read_edited(src):
    """
    Read edited dump text from a file, or stdin when @src is '-' or unset
    """
    if not src or src == '-':
        return sys.stdin.read()
    with open(os.path.expanduser(src), 'r', encoding='utf-8') as f:
        return f.read()


def ask_retry():
    logthis("Edit again? [Y/n]", loglevel=LL.PROMPT)
    try:
        resp = input()
    except EOFError:
        return False
    return resp.strip().lower() not in ('n', 'no')


def edit_file(path, backend, xconfig):
    """
    Edit the attributes of @path. Returns the list of Operations issued,
    or None if the edit was cancelled.
    """
    session = EditSession.begin(path, backend)
    otext = session.text()

    if not xconfig.editor['hook']:
        etext = read_edited(xconfig.run['edited'])
        if etext == otext:
            session.cancel()
            return None
        return reconcile(session, etext, backend)

    etext = otext
    while True:
        etext = run_editor(etext, xconfig)
        if not etext.strip() or etext == otext:
            logthis("No changes made.", loglevel=LL.INFO)
            session.cancel()
            return None
        try:
            return reconcile(session, etext, backend)
        except MalformedDump as e:
            logexc(e, "Unable to parse edited attributes")
            if not ask_retry():
                session.cancel()
                raise
