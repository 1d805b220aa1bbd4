#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.dump
Attribute dump parser, serializer & value classifier

The dump format is the one produced by `getfattr --dump` and accepted by
`setfattr --restore`:

    # file: /path/to/file
    user.name="value"
    user.blob=0sAAECAw==

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import os
import re
import base64
import binascii

from xattredit.common.logthis import *

HEADER = "# file: "

rx_header = re.compile(r'^# file: (.+)$')
rx_attrib = re.compile(r'^([^=]+)=(.+)$')
rx_escape = re.compile(r'\\([0-7]{3}|\\|")')
rx_octal = re.compile(br'\\([0-7]{3})')


class ValueType:
    """value encoding enum"""
    STRING = 'string'
    HEX = 'hex'
    BASE64 = 'base64'
    UNKNOWN = 'unknown'


class AttributeEntry(object):
    """
    A single name=value pair; value is the raw encoded token from the dump
    """
    __slots__ = ('name', 'value')

    def __init__(self, name, value):
        self.name = name
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, AttributeEntry):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.name, self.value))

    def __repr__(self):
        return "<AttributeEntry %s=%s>" % (self.name, self.value)


class FileAttributeRecord(object):
    """
    Attributes of one file, in dump order
    """
    def __init__(self, path, attributes=None):
        self.path = path
        self.attributes = list(attributes or [])

    def names(self):
        return [x.name for x in self.attributes]

    def get(self, name):
        for tattr in self.attributes:
            if tattr.name == name:
                return tattr
        return None

    def __eq__(self, other):
        if not isinstance(other, FileAttributeRecord):
            return NotImplemented
        return self.path == other.path and self.attributes == other.attributes

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "<FileAttributeRecord %s (%d attribs)>" % (self.path, len(self.attributes))


def quote_path(path):
    """
    Escape a path for a '# file:' header as getfattr does: backslashes and
    any byte outside printable ASCII become \\ooo octal escapes
    """
    qout = ''
    for tbyte in os.fsencode(path):
        if tbyte == 0x5c or tbyte < 0x20 or tbyte > 0x7e:
            qout += '\\%03o' % tbyte
        else:
            qout += chr(tbyte)
    return qout

def unquote_path(qpath):
    """
    Reverse quote_path; like setfattr, only \\ooo sequences are special
    """
    qraw = qpath.encode('utf-8', 'surrogateescape')
    return os.fsdecode(rx_octal.sub(lambda m: bytes([int(m.group(1), 8) & 0xff]), qraw))


def parse(intext):
    """
    Parse a textual attribute dump into a list of FileAttributeRecords,
    one per '# file:' header, in header order
    """
    dump = []
    current = None

    for lineno, tline in enumerate(intext.split('\n'), 1):
        if not tline:
            continue

        hmatch = rx_header.match(tline)
        if hmatch:
            current = FileAttributeRecord(unquote_path(hmatch.group(1)))
            dump.append(current)
            logthis("Dump header:", suffix=current.path, loglevel=LL.DEBUG2)
            continue

        amatch = rx_attrib.match(tline)
        if amatch:
            if current is None:
                raise MalformedDump("line %d: attribute before any '%s' header: %s" % (lineno, HEADER.strip(), tline), lineno, tline)
            current.attributes.append(AttributeEntry(amatch.group(1), amatch.group(2)))
        else:
            logthis("Ignoring dump line %d:" % (lineno), suffix=tline, loglevel=LL.DEBUG2)

    return dump


def parse_single(intext):
    """
    Parse a dump that must describe exactly one file (eg. an edited buffer)
    """
    dump = parse(intext)
    if len(dump) != 1:
        raise MalformedDump("expected exactly one '%s' header, found %d" % (HEADER.strip(), len(dump)))
    return dump[0]


def serialize(record):
    """
    Render a single FileAttributeRecord as a dump block; values are emitted verbatim
    """
    sout = HEADER + quote_path(record.path) + "\n"
    for tattr in record.attributes:
        sout += "%s=%s\n" % (tattr.name, tattr.value)
    return sout


def serialize_dump(records):
    """
    Render a full dump; blocks are separated by a blank line like getfattr output
    """
    return "\n".join([serialize(x) for x in records])


def classify(rawval):
    """
    Classify the encoding of a raw attribute value token
    """
    if rawval.startswith('"'):
        return ValueType.STRING
    elif rawval[:2] in ('0x', '0X'):
        return ValueType.HEX
    elif rawval[:2] in ('0s', '0S'):
        return ValueType.BASE64
    else:
        return ValueType.UNKNOWN


def _is_text(rawbytes):
    try:
        tstr = rawbytes.decode('utf-8')
    except UnicodeDecodeError:
        return False
    return all(x.isprintable() or x in '\t\n' for x in tstr)

def _escape(tchar):
    if tchar == '\\':
        return '\\\\'
    elif tchar == '"':
        return '\\"'
    elif not tchar.isprintable():
        return ''.join(['\\%03o' % x for x in tchar.encode('utf-8')])
    return tchar

def encode_value(rawbytes):
    """
    Encode a raw attribute value the way `getfattr --dump` does:
    quoted string for printable text, 0s-prefixed base64 otherwise
    """
    if rawbytes and _is_text(rawbytes):
        return '"' + ''.join([_escape(x) for x in rawbytes.decode('utf-8')]) + '"'
    return '0s' + base64.b64encode(rawbytes).decode('ascii')


def _unescape(tmatch):
    tseq = tmatch.group(1)
    if tseq in ('\\', '"'):
        return tseq.encode('utf-8')
    return bytes([int(tseq, 8)])

def decode_value(rawval):
    """
    Decode a raw value token to bytes; unknown encodings are taken as
    literal text, as `setfattr` does
    """
    vtype = classify(rawval)
    try:
        if vtype == ValueType.STRING:
            inner = rawval[1:-1] if len(rawval) > 1 and rawval.endswith('"') else rawval[1:]
            # escapes may encode partial UTF-8 sequences, so rebuild as bytes
            bout = b''
            lpos = 0
            for tmatch in rx_escape.finditer(inner):
                bout += inner[lpos:tmatch.start()].encode('utf-8') + _unescape(tmatch)
                lpos = tmatch.end()
            return bout + inner[lpos:].encode('utf-8')
        elif vtype == ValueType.HEX:
            return binascii.unhexlify(rawval[2:])
        elif vtype == ValueType.BASE64:
            return base64.b64decode(rawval[2:], validate=True)
        else:
            return rawval.encode('utf-8')
    except (ValueError, binascii.Error) as e:
        raise MalformedDump("bad %s value %s: %s" % (vtype, rawval, e), line=rawval)


def highlight(intext):
    """
    Colorize dump text for terminal output; values are colored by encoding
    """
    vcolors = {
                ValueType.STRING: C.YEL,
                ValueType.HEX: C.MAG,
                ValueType.BASE64: C.BLU,
                ValueType.UNKNOWN: C.RED
              }
    hout = []
    for tline in intext.split('\n'):
        if rx_header.match(tline):
            hout.append(C.GRN + tline + C.OFF)
            continue
        amatch = rx_attrib.match(tline)
        if amatch:
            tname, tval = amatch.groups()
            hout.append("%s%s%s=%s%s%s" % (C.WHT, tname, C.OFF, vcolors[classify(tval)], tval, C.OFF))
        else:
            hout.append(tline)
    return '\n'.join(hout)
