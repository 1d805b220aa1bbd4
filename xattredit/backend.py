#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.backend
Extended attribute backends: getfattr/setfattr & friends, or direct syscalls via xattr

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import os
import re
import errno
import tempfile
import subprocess

import xattr

from xattredit.common.logthis import *
from xattredit import dump

# getfattr default when no match pattern is configured
DEFAULT_MATCH = r'^user\.'


def locate(prog, isFatal=True):
    """
    Locate path to a binary
    """
    try:
        wiout = subprocess.check_output(['whereis', '-b', prog], universal_newlines=True)
    except (OSError, subprocess.CalledProcessError) as e:
        logexc(e, "whereis failed")
        wiout = ''
    bgrp = re.match(r'^[^:]+: (.+)$', wiout.strip())
    if bgrp:
        tpath = bgrp.groups()[0].split(' ')[0]
        logthis("Located %s binary:" % prog, suffix=tpath, loglevel=LL.VERBOSE)
        return tpath
    else:
        if isFatal:
            logthis("Unable to locate required binary:", suffix=prog, loglevel=LL.ERROR)
            failwith(ER.DEPMISSING, "External dependency missing. Unable to continue. Aborting")
        return False


def _fill(records, paths):
    """
    Return one record per requested path, in request order; files without
    any attributes get an empty record
    """
    rmap = dict([(x.path, x) for x in records])
    return [rmap.get(x) or dump.FileAttributeRecord(x) for x in paths]


class ToolBackend(object):
    """
    Attribute backend that runs the getfattr/setfattr utilities from the attr package
    """
    def __init__(self, xconfig):
        self.getfattr = xconfig.tools['getfattr'] or locate('getfattr')
        self.setfattr = xconfig.tools['setfattr'] or locate('setfattr')
        self.match = xconfig.tools['match']

    def _run(self, op, optlist, path=None, name=None):
        logthis("Running %s:" % (op), suffix=optlist, loglevel=LL.DEBUG)
        try:
            return subprocess.check_output(optlist, stderr=subprocess.PIPE, universal_newlines=True)
        except subprocess.CalledProcessError as e:
            logthis("%s failed:" % (os.path.basename(optlist[0])), suffix=e, loglevel=LL.DEBUG)
            raise ExternalToolError(op, path, name, e.returncode, e.stderr or e.output)
        except OSError as e:
            raise ExternalToolError(op, path, name, output=str(e))

    def _getopts(self):
        optlist = [self.getfattr, '--absolute-names', '--dump']
        if self.match:
            optlist += ['--match', self.match]
        return optlist

    def get_attributes(self, paths):
        """
        Dump attributes for all @paths; returns a list of FileAttributeRecords
        """
        paths = [os.path.abspath(x) for x in paths]
        fout = self._run('get', self._getopts() + ['--'] + paths, path=', '.join(paths))
        return _fill(dump.parse(fout), paths)

    def get_attribute(self, path, name):
        """
        Get the raw (encoded) value of a single attribute
        """
        path = os.path.abspath(path)
        try:
            fout = self._run('get', [self.getfattr, '--absolute-names', '--name', name, '--', path], path, name)
        except ExternalToolError as e:
            if e.output and 'No such attribute' in e.output:
                raise AttributeNotFound(path, name)
            raise

        for trec in dump.parse(fout):
            tattr = trec.get(name)
            if tattr:
                return tattr.value
        raise AttributeNotFound(path, name)

    def set_attribute(self, path, name, value):
        self._run('set', [self.setfattr, '--name', name, '--value', value, '--', path], path, name)
        logthis("Set attribute %s on" % (name), suffix=path, loglevel=LL.VERBOSE)

    def remove_attribute(self, path, name):
        self._run('remove', [self.setfattr, '--remove', name, '--', path], path, name)
        logthis("Removed attribute %s from" % (name), suffix=path, loglevel=LL.VERBOSE)

    def restore_from_dump(self, dumptext):
        """
        Restore attributes from dump text via `setfattr --restore`; the dump
        is staged in a temp file which is always removed afterwards
        """
        rpath = ', '.join([x.path for x in dump.parse(dumptext)])
        tfd, tfile = tempfile.mkstemp(prefix='xattredit-', suffix='.dump')
        try:
            with os.fdopen(tfd, 'w', encoding='utf-8') as f:
                f.write(dumptext)
            self._run('restore', [self.setfattr, '--restore=' + tfile], rpath)
        finally:
            os.remove(tfile)
        logthis("Restored attributes for", suffix=rpath, loglevel=LL.VERBOSE)


class XattrBackend(object):
    """
    Attribute backend using the xattr module (direct syscalls); values are
    encoded/decoded in the same syntax getfattr uses
    """
    def __init__(self, xconfig):
        tmatch = xconfig.tools['match'] or DEFAULT_MATCH
        self.match = None if tmatch == '-' else re.compile(tmatch)

    def _wanted(self, name):
        return self.match is None or bool(self.match.search(name))

    def get_attributes(self, paths):
        outlist = []
        for tpath in [os.path.abspath(x) for x in paths]:
            trec = dump.FileAttributeRecord(tpath)
            try:
                for tname in xattr.listxattr(tpath):
                    if self._wanted(tname):
                        trec.attributes.append(dump.AttributeEntry(tname, dump.encode_value(xattr.getxattr(tpath, tname))))
            except (IOError, OSError) as e:
                raise ExternalToolError('get', tpath, output=str(e))
            outlist.append(trec)
        return outlist

    def get_attribute(self, path, name):
        path = os.path.abspath(path)
        try:
            return dump.encode_value(xattr.getxattr(path, name))
        except (IOError, OSError) as e:
            if e.errno == errno.ENODATA:
                raise AttributeNotFound(path, name)
            raise ExternalToolError('get', path, name, output=str(e))

    def _decode(self, op, path, name, value):
        try:
            return dump.decode_value(value)
        except MalformedDump as e:
            raise ExternalToolError(op, path, name, output=str(e))

    def set_attribute(self, path, name, value):
        rawval = self._decode('set', path, name, value)
        try:
            xattr.setxattr(path, name, rawval)
        except (IOError, OSError) as e:
            raise ExternalToolError('set', path, name, output=str(e))
        logthis("Set attribute %s on" % (name), suffix=path, loglevel=LL.VERBOSE)

    def remove_attribute(self, path, name):
        try:
            xattr.removexattr(path, name)
        except (IOError, OSError) as e:
            raise ExternalToolError('remove', path, name, output=str(e))
        logthis("Removed attribute %s from" % (name), suffix=path, loglevel=LL.VERBOSE)

    def restore_from_dump(self, dumptext):
        """
        Set every attribute in @dumptext; all values are decoded before the
        first write, so a bad value leaves every file untouched
        """
        records = dump.parse(dumptext)
        rvals = []
        for trec in records:
            rvals.append([(x.name, self._decode('restore', trec.path, x.name, x.value)) for x in trec.attributes])

        for trec, tvals in zip(records, rvals):
            for tname, rawval in tvals:
                try:
                    xattr.setxattr(trec.path, tname, rawval)
                except (IOError, OSError) as e:
                    raise ExternalToolError('restore', trec.path, tname, output=str(e))
            logthis("Restored attributes for", suffix=trec.path, loglevel=LL.VERBOSE)


backends = {
                'tool': ToolBackend,
                'xattr': XattrBackend
           }

def get_backend(xconfig):
    """
    Instantiate the backend selected by core.backend
    """
    bname = xconfig.core['backend']
    if bname not in backends:
        failwith(ER.OPT_BAD, "Unknown backend '%s' (choose from: %s)" % (bname, ', '.join(sorted(backends))))
    logthis("Using attribute backend:", suffix=bname, loglevel=LL.DEBUG)
    return backends[bname](xconfig)
