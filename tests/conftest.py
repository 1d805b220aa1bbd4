"""
Shared test fixtures for xattredit tests.
"""

import pytest

from xattredit.common.logthis import ExternalToolError, AttributeNotFound
from xattredit.common.rcfile import XConfig, merge
from xattredit import dump


class FakeBackend(object):
    """
    In-memory attribute backend that records every call made to it.
    @fail_on is an (op, name) tuple; the matching call raises ExternalToolError.
    """

    def __init__(self, files=None, fail_on=None):
        self.files = {}
        for tpath, tattrs in (files or {}).items():
            self.files[tpath] = list(tattrs)
        self.calls = []
        self.fail_on = fail_on

    def _check(self, op, path, name=None):
        if self.fail_on == (op, name):
            raise ExternalToolError(op, path, name, status=1, output="simulated failure")

    def get_attributes(self, paths):
        self.calls.append(('get_attributes', tuple(paths)))
        return [dump.FileAttributeRecord(x, [dump.AttributeEntry(n, v) for n, v in self.files.get(x, [])]) for x in paths]

    def get_attribute(self, path, name):
        self.calls.append(('get_attribute', path, name))
        for tname, tval in self.files.get(path, []):
            if tname == name:
                return tval
        raise AttributeNotFound(path, name)

    def set_attribute(self, path, name, value):
        self.calls.append(('set_attribute', path, name, value))
        self._check('set', path, name)
        tattrs = self.files.setdefault(path, [])
        for i, (tname, _) in enumerate(tattrs):
            if tname == name:
                tattrs[i] = (name, value)
                return
        tattrs.append((name, value))

    def remove_attribute(self, path, name):
        self.calls.append(('remove_attribute', path, name))
        self._check('remove', path, name)
        self.files[path] = [x for x in self.files.get(path, []) if x[0] != name]

    def restore_from_dump(self, dumptext):
        self.calls.append(('restore_from_dump', dumptext))
        self._check('restore', None)
        for trec in dump.parse(dumptext):
            for tattr in trec.attributes:
                tattrs = self.files.setdefault(trec.path, [])
                for i, (tname, _) in enumerate(tattrs):
                    if tname == tattr.name:
                        tattrs[i] = (tattr.name, tattr.value)
                        break
                else:
                    tattrs.append((tattr.name, tattr.value))

    def mutations(self):
        return [x for x in self.calls if x[0] in ('set_attribute', 'remove_attribute', 'restore_from_dump')]


@pytest.fixture
def fake_backend():
    """Factory for FakeBackends"""

    def _make(files=None, fail_on=None):
        return FakeBackend(files, fail_on)

    return _make


@pytest.fixture
def make_config():
    """Build an XConfig from built-in defaults plus 'section.key' overrides, without reading rc files."""

    def _make(**opts):
        cops = {}
        for tkey, tval in opts.items():
            dsec, dkey = tkey.split('__')
            cops.setdefault(dsec, {})[dkey] = tval
        return XConfig(merge({}, cops))

    return _make
