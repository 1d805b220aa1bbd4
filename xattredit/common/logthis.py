#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.common.logthis
Logging & exception handling facilities

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""
# pylint: disable=missing-docstring

import sys
import inspect
import json

class C:
    """ANSI Colors"""
    OFF = '\033[m'
    HI = '\033[1m'
    BLK = '\033[30m'
    RED = '\033[31m'
    GRN = '\033[32m'
    YEL = '\033[33m'
    BLU = '\033[34m'
    MAG = '\033[35m'
    CYN = '\033[36m'
    WHT = '\033[37m'

    @classmethod
    def nocolor(cls):
        cls.OFF = ''
        cls.HI = ''
        cls.BLK = ''
        cls.RED = ''
        cls.GRN = ''
        cls.YEL = ''
        cls.BLU = ''
        cls.MAG = ''
        cls.CYN = ''
        cls.WHT = ''

class ER:
    # pylint: disable=bad-whitespace
    OPT_MISSING = 1
    OPT_BAD     = 2
    MALFORMED   = 3
    PROCFAIL    = 4
    NOTFOUND    = 5
    DEPMISSING  = 6
    CLOSED      = 7
    lname = {
                0: 'none',
                1: 'opt_missing',
                2: 'opt_bad',
                3: 'malformed',
                4: 'procfail',
                5: 'notfound',
                6: 'depmissing',
                7: 'closed'
            }

class xeError(Exception):
    """XAttrEdit Exception class"""
    def __init__(self, etype, msg=None):
        super(xeError, self).__init__(msg or ER.lname[etype])
        self.etype = etype
        self.msg = msg
    def __str__(self):
        if self.msg:
            return self.msg
        return ER.lname[self.etype]

class MalformedDump(xeError):
    """Text does not conform to the attribute dump grammar"""
    def __init__(self, msg, lineno=None, line=None):
        super(MalformedDump, self).__init__(ER.MALFORMED, msg)
        self.lineno = lineno
        self.line = line

class ExternalToolError(xeError):
    """
    An attribute operation reported failure; carries the identity of the
    failed operation (op, path, name) plus exit status and tool output
    """
    def __init__(self, op, path=None, name=None, status=None, output=None):
        msg = "%s failed" % (op)
        if path:
            msg += " for %s" % (path)
        if name:
            msg += " (attribute %s)" % (name)
        if status is not None:
            msg += ": exit status %s" % (status)
        if output:
            msg += ": %s" % (output.strip())
        super(ExternalToolError, self).__init__(ER.PROCFAIL, msg)
        self.op = op
        self.path = path
        self.name = name
        self.status = status
        self.output = output

class AttributeNotFound(xeError):
    """Single attribute query found no such attribute"""
    def __init__(self, path, name):
        super(AttributeNotFound, self).__init__(ER.NOTFOUND, "%s: no such attribute: %s" % (path, name))
        self.path = path
        self.name = name

class SessionClosed(xeError):
    """Edit session has already been saved or cancelled"""
    def __init__(self, path):
        super(SessionClosed, self).__init__(ER.CLOSED, "edit session for %s is closed" % (path))
        self.path = path

class LL:
    # pylint: disable=bad-whitespace
    SILENT   = 0
    CRITICAL = 2
    ERROR    = 3
    WARNING  = 4
    PROMPT   = 5
    INFO     = 6
    VERBOSE  = 7
    DEBUG    = 8
    DEBUG2   = 9
    lname = {
                0: 'silent',
                2: 'critical',
                3: 'error',
                4: 'warning',
                5: 'prompt',
                6: 'info',
                7: 'verbose',
                8: 'debug',
                9: 'debug2'
            }

# set default loglevel
g_loglevel = LL.INFO

def logthis(logline, loglevel=LL.DEBUG, prefix=None, suffix=None, ccode=None):
    """
    Global logging function; handles log line composition and prints messages to the console
    Messages go to stderr, so that attribute dumps written to stdout can be piped
    """
    # pylint: disable=redefined-outer-name
    global g_loglevel

    if g_loglevel < loglevel:
        return

    zline = ''
    if not ccode:
        if loglevel == LL.ERROR: ccode = C.RED
        elif loglevel == LL.WARNING: ccode = C.YEL
        elif loglevel == LL.PROMPT: ccode = C.WHT
        else: ccode = ""
    if prefix: zline += C.WHT + str(prefix) + ": " + C.OFF
    zline += ccode + logline + C.OFF
    if suffix is not None: zline += " " + C.CYN + str(suffix) + C.OFF

    if g_loglevel > LL.INFO:
        # get traceback info
        lframe = inspect.stack()[1][0]
        lfunc = inspect.stack()[1][3]
        mod = inspect.getmodule(lframe)
        lline = inspect.getlineno(lframe)

        if mod:
            lmodname = str(mod.__name__)
        else:
            lmodname = str(__name__)
        if lmodname == "__main__":
            lmodname = "xattredit"
            lfunc = "(main)"
        dbxmod = '%s[%s:%s%s%s:%s] ' % (C.WHT, lmodname, C.YEL, lfunc, C.WHT, lline)
    else:
        dbxmod = ''

    finline = '%s%s<%s>%s %s%s\n' % (dbxmod, C.RED, LL.lname[loglevel], C.WHT, zline, C.OFF)

    # write log message
    sys.stderr.write(finline)

def logexc(e, msg=None, prefix=None):
    """log exception"""
    if msg is not None:
        msg += ": "
    else:
        msg = "Exception logged"
    suffix = C.WHT + "[" + C.YEL + str(e.__class__.__name__) + C.WHT + "] " + C.YEL + str(e)
    logthis(msg, LL.ERROR, prefix, suffix)

def loglevel(newlvl=None):
    global g_loglevel
    if newlvl:
        g_loglevel = newlvl
    return g_loglevel

def failwith(etype, errmsg):
    logthis(errmsg, loglevel=LL.ERROR)
    raise xeError(etype, errmsg)

def exceptionHandler(exception_type, exception, traceback):
    """exception handler callback"""
    # pylint: disable=unused-argument
    sys.stderr.write("%s: %s\n" % (exception_type.__name__, exception))

def print_r(ind):
    """pretty-print a dict as JSON"""
    return json.dumps(ind, indent=4, separators=(',', ': '))

def configure_logging(xconfig):
    """apply logging options from the running configuration"""
    loglevel(xconfig.core['loglevel'])
    if not xconfig.core['color']:
        C.nocolor()
