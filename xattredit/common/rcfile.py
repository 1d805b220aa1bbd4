#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.common.rcfile
Configuration parser

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import os
import re
import json
import configparser

from xattredit import defaults
from xattredit.common.logthis import *

rcfiles = ['./xattredit.conf', '~/.xattredit/xattredit.conf', '~/.xattredit', '/etc/xattredit.conf']

BOOL_TRUE = ['y', 'yes', 'on', 't', 'true', '1']
BOOL_FALSE = ['n', 'no', 'off', 'f', 'false', '0']


class XConfig(object):
    """
    Config management object; allow access via attributes or items
    """
    def __init__(self, idata):
        self.__data = idata

    def _dump(self):
        return json.dumps(self.__data)

    def _todict(self):
        return json.loads(json.dumps(self.__data))

    def _clone(self):
        return XConfig(json.loads(json.dumps(self.__data)))

    def __getattr__(self, aname):
        if aname.startswith('__'):
            raise AttributeError(aname)
        if aname in self.__data:
            if isinstance(self.__data[aname], dict):
                return XConfig(self.__data[aname])
            else:
                return self.__data[aname]
        else:
            raise KeyError(aname)

    def __getitem__(self, aname):
        return self.__getattr__(aname)

    def __setitem__(self, aname, aval):
        self.__data[aname] = aval

    def __contains__(self, aname):
        return aname in self.__data

    def get(self, aname, default=None):
        return self.__data.get(aname, default)

    def __str__(self):
        return print_r(self.__data)

    def __repr__(self):
        return "<XConfig>"


def rcList(xtraConf=None):
    """
    build list of config files to parse
    """
    rcc = []

    if xtraConf:
        xcf = os.path.expanduser(xtraConf)
        if os.path.exists(xcf):
            rcc.append(xcf)
            logthis("Added rcfile candidate (from command line):", suffix=xcf, loglevel=LL.DEBUG)
        else:
            logthis("Specified rcfile does not exist:", suffix=xcf, loglevel=LL.ERROR)

    for tf in rcfiles:
        ttf = os.path.expanduser(tf)
        logthis("Checking for rcfile candidate", suffix=ttf, loglevel=LL.DEBUG2)
        if os.path.isfile(ttf):
            rcc.append(ttf)
            logthis("Got rcfile candidate", suffix=ttf, loglevel=LL.DEBUG2)

    return rcc


def parse(xtraConf=None):
    """
    Parse rcfile (xattredit.conf)
    Output: (rcfile, rcdata)
    """
    # get rcfile list
    rcl = rcList(xtraConf)
    logthis("Parsing any local, user, or system RC files...", loglevel=LL.DEBUG)

    # only first file is parsed
    rcpar = configparser.ConfigParser(interpolation=None)
    rcfile = None
    if len(rcl):
        rcfile = os.path.realpath(rcl[0])
        logthis("Parsing config file:", suffix=rcfile, loglevel=LL.VERBOSE)
        try:
            with open(rcfile, 'r', encoding='utf-8') as f:
                rcpar.read_file(f)
        except configparser.Error as e:
            logthis("Error parsing config file: %s" % e, loglevel=LL.ERROR)
            return (rcfile, {})

    # build a dict
    rcdict = {}
    rsecs = rcpar.sections()
    logthis("Config sections:", suffix=rsecs, loglevel=LL.DEBUG2)
    for ss in rsecs:
        rcdict[ss] = {}
        for ikey, ival in rcpar.items(ss):
            logthis(">> %s" % ikey, suffix=ival, loglevel=LL.DEBUG2)
            rcdict[ss][ikey] = ival

    # return loaded filename and rcdata
    return (rcfile, rcdict)


def merge(inrc, cops):
    """
    Merge options from loaded rcfile with defaults; strip quotes and perform type-conversion.
    Any defined value set in the config will override the default value.
    """
    outrc = {}
    # set defaults first
    for dsec in defaults:
        outrc.setdefault(dsec, {})
        for dkey in defaults[dsec]:
            outrc[dsec][dkey] = defaults[dsec][dkey]

    # set options defined in rcfile, overriding defaults
    for dsec in inrc:
        outrc.setdefault(dsec, {})
        for dkey in inrc[dsec]:
            rval = qstrip(inrc[dsec][dkey])
            dval = outrc[dsec].get(dkey)

            # only perform conversion if key exists in defaults
            if isinstance(dval, bool):
                if rval.lower() in BOOL_TRUE:
                    tkval = True
                elif rval.lower() in BOOL_FALSE:
                    tkval = False
                else:
                    logthis("Unable to cast string to bool:", prefix="%s:%s" % (dsec, dkey), suffix=rval, loglevel=LL.WARNING)
                    continue
            elif isinstance(dval, int):
                try:
                    tkval = int(rval)
                except ValueError as e:
                    logexc(e, "Unable to convert value to integer. Check config option value. Value: '%s'" % (rval), prefix="%s:%s" % (dsec, dkey))
                    continue
            else:
                tkval = rval

            logthis("** Option set:", prefix="rcfile", suffix="%s => %s => '%s'" % (dsec, dkey, tkval), loglevel=LL.DEBUG2)
            outrc[dsec][dkey] = tkval

    # add in cli options
    for dsec in cops:
        outrc.setdefault(dsec, {})
        for dkey in cops[dsec]:
            # only if the value has actually been set (eg. non-false)
            if cops[dsec][dkey]:
                logthis("** Option:", prefix="cliopts", suffix="%s => %s => '%s'" % (dsec, dkey, cops[dsec][dkey]), loglevel=LL.DEBUG2)
                outrc[dsec][dkey] = cops[dsec][dkey]

    return outrc


def qstrip(inval):
    """
    Strip quotes from quote-delimited strings
    """
    rxm = re.match('^([\"\'])(.+)(\\1)$', inval)
    if rxm:
        return rxm.groups()[1]
    else:
        return inval

def optexpand(iop):
    """
    expand CLI options like "tools.getfattr" from 1D to 2D array/dict (like [tools][getfattr])
    """
    outrc = {}
    for i in iop or {}:
        dsec, dkey = i.split(".")
        outrc.setdefault(dsec, {})
        outrc[dsec][dkey] = iop[i]
    logthis("Expanded cli optdex:", suffix=outrc, loglevel=LL.DEBUG2)
    return outrc

def loadConfig(xtraConf=None, cliopts=None):
    """
    Top-level class for loading configuration from xattredit.conf
    """
    rcfile, rci = parse(xtraConf)  #pylint: disable=unused-variable
    cxopt = optexpand(cliopts)
    optrc = merge(rci, cxopt)
    return XConfig(optrc)
