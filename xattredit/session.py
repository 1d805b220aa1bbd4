#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.session
Edit sessions & reconciliation of edited dumps back onto the file

Saving an edit is a two pass operation: attributes which disappeared from
the edited text are removed one at a time, then everything left in the text
is written back with a single bulk restore. Removals are not rolled back if
a later call fails.

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import os

from xattredit.common.logthis import *
from xattredit import dump


class OP:
    """operation kind enum"""
    REMOVE = 'remove'
    RESTORE = 'restore'


class Operation(object):
    """
    A single backend call issued by the reconciler
    """
    def __init__(self, kind, path, name=None, dumptext=None):
        self.kind = kind
        self.path = path
        self.name = name
        self.dumptext = dumptext

    def apply(self, backend):
        if self.kind == OP.REMOVE:
            backend.remove_attribute(self.path, self.name)
        elif self.kind == OP.RESTORE:
            backend.restore_from_dump(self.dumptext)

    def __eq__(self, other):
        if not isinstance(other, Operation):
            return NotImplemented
        return (self.kind, self.path, self.name, self.dumptext) == (other.kind, other.path, other.name, other.dumptext)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        if self.kind == OP.REMOVE:
            return "<Operation remove %s from %s>" % (self.name, self.path)
        return "<Operation restore %s>" % (self.path)


class EditSession(object):
    """
    State of one in-progress edit of one file's attributes
    """
    def __init__(self, path, original_attributes):
        self.path = path
        self.original_attributes = list(original_attributes)
        self.closed = False

    @classmethod
    def begin(cls, path, backend):
        """
        Snapshot the current attributes of @path and open a session on them
        """
        path = os.path.abspath(path)
        trec = backend.get_attributes([path])[0]
        logthis("Editing %d attributes of" % (len(trec.attributes)), suffix=path, loglevel=LL.VERBOSE)
        return cls(path, trec.attributes)

    def check(self):
        if self.closed:
            raise SessionClosed(self.path)

    def text(self):
        """
        Dump text of the original snapshot, for editing
        """
        self.check()
        return dump.serialize(dump.FileAttributeRecord(self.path, self.original_attributes))

    def cancel(self):
        self.check()
        self.closed = True
        logthis("Edit cancelled for", suffix=self.path, loglevel=LL.VERBOSE)

    def __repr__(self):
        return "<EditSession %s%s>" % (self.path, " (closed)" if self.closed else "")


def plan(session, edited_text):
    """
    Compute the backend calls needed to bring the file in line with @edited_text,
    without issuing them. Raises MalformedDump if the text cannot be parsed.
    """
    session.check()
    edited = dump.parse_single(edited_text)
    enames = set(edited.names())

    oplist = []
    for tattr in session.original_attributes:
        if tattr.name not in enames:
            oplist.append(Operation(OP.REMOVE, session.path, tattr.name))

    # header always names the session file, regardless of what the edited header says
    rtext = dump.serialize(dump.FileAttributeRecord(session.path, edited.attributes))
    oplist.append(Operation(OP.RESTORE, session.path, dumptext=rtext))
    return oplist


def reconcile(session, edited_text, backend):
    """
    Apply an edited dump to the session's file and close the session.
    Returns the list of Operations that were issued.
    """
    oplist = plan(session, edited_text)
    logthis("Reconciling %s:" % (session.path), suffix=oplist, loglevel=LL.DEBUG)

    for top in oplist:
        top.apply(backend)

    session.closed = True
    rcount = len([x for x in oplist if x.kind == OP.REMOVE])
    logthis("Saved attributes for %s;" % (session.path), suffix="%d removed" % (rcount), loglevel=LL.VERBOSE)
    return oplist
