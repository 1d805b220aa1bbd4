"""Tests for dump parsing, serialization and value classification."""

import pytest

from xattredit import dump
from xattredit.dump import AttributeEntry, FileAttributeRecord, ValueType
from xattredit.common.logthis import C, MalformedDump


DUMP = """# file: /srv/a
user.one="1"
user.two=0x02

# file: /srv/b
user.three=0sAw==
# file: /srv/c
"""


class TestParse:
    """Test parsing dump text into records."""

    def test_header_order(self):
        records = dump.parse(DUMP)
        assert [x.path for x in records] == ['/srv/a', '/srv/b', '/srv/c']

    def test_attributes_stay_under_their_header(self):
        records = dump.parse(DUMP)
        assert records[0].attributes == [AttributeEntry('user.one', '"1"'), AttributeEntry('user.two', '0x02')]
        assert records[1].attributes == [AttributeEntry('user.three', '0sAw==')]
        assert records[2].attributes == []

    def test_empty_text(self):
        assert dump.parse("") == []
        assert dump.parse("\n\n") == []

    def test_other_lines_ignored(self):
        records = dump.parse("# file: /x\nnot an attribute\n# just a comment\nuser.k=v\n")
        assert records[0].attributes == [AttributeEntry('user.k', 'v')]

    def test_comment_before_header_ignored(self):
        records = dump.parse("# getfattr output\n# file: /x\nuser.k=v\n")
        assert len(records) == 1

    def test_value_split_on_first_equals(self):
        records = dump.parse("# file: /x\nuser.expr=\"a=b=c\"\n")
        assert records[0].attributes == [AttributeEntry('user.expr', '"a=b=c"')]

    def test_empty_value_line_ignored(self):
        records = dump.parse("# file: /x\nuser.empty=\n")
        assert records[0].attributes == []

    def test_header_path_with_equals(self):
        records = dump.parse("# file: /srv/k=v\nuser.k=v\n")
        assert records[0].path == '/srv/k=v'
        assert records[0].attributes == [AttributeEntry('user.k', 'v')]

    def test_attribute_before_header(self):
        with pytest.raises(MalformedDump) as excinfo:
            dump.parse("\nuser.a=1\n# file: /x\n")
        assert excinfo.value.lineno == 2
        assert excinfo.value.line == 'user.a=1'

    def test_parse_single(self):
        record = dump.parse_single("# file: /x\nuser.a=1\n")
        assert record == FileAttributeRecord('/x', [AttributeEntry('user.a', '1')])

    @pytest.mark.parametrize("text", ["", "user.a=1\n", "# file: /x\n# file: /y\n"])
    def test_parse_single_rejects(self, text):
        with pytest.raises(MalformedDump):
            dump.parse_single(text)


class TestSerialize:
    """Test rendering records back to dump text."""

    def test_single_record(self):
        record = FileAttributeRecord('/x', [AttributeEntry('user.a', '"1"'), AttributeEntry('user.b', '0xff')])
        assert dump.serialize(record) == '# file: /x\nuser.a="1"\nuser.b=0xff\n'

    def test_empty_record(self):
        assert dump.serialize(FileAttributeRecord('/x')) == '# file: /x\n'

    @pytest.mark.parametrize("record", [
        FileAttributeRecord('/x'),
        FileAttributeRecord('/srv/media/file with spaces.mkv', [AttributeEntry('user.a', '"hello world"')]),
        FileAttributeRecord('/x', [AttributeEntry('user.z', '0sAAECAw=='), AttributeEntry('user.a', '0XDEAD'), AttributeEntry('trusted.q', 'a=b')]),
    ])
    def test_round_trip(self, record):
        assert dump.parse(dump.serialize(record)) == [record]

    def test_header_path_escaped(self):
        record = FileAttributeRecord('/srv/a\\b\nc', [AttributeEntry('user.a', '1')])
        assert dump.serialize(record) == '# file: /srv/a\\134b\\012c\nuser.a=1\n'
        assert dump.parse(dump.serialize(record)) == [record]

    def test_header_path_non_ascii(self):
        assert dump.quote_path('/srv/café') == '/srv/caf\\303\\251'
        assert dump.unquote_path('/srv/caf\\303\\251') == '/srv/café'

    def test_unquote_leaves_other_backslashes(self):
        assert dump.unquote_path('/srv/a\\b') == '/srv/a\\b'

    def test_full_dump_round_trip(self):
        records = dump.parse(DUMP)
        assert dump.parse(dump.serialize_dump(records)) == records

    def test_full_dump_blocks_separated(self):
        text = dump.serialize_dump([FileAttributeRecord('/a'), FileAttributeRecord('/b')])
        assert text == '# file: /a\n\n# file: /b\n'


class TestClassify:
    """Test value classification."""

    @pytest.mark.parametrize("raw,expected", [
        ('"hello"', ValueType.STRING),
        ('"', ValueType.STRING),
        ('"0xFF"', ValueType.STRING),
        ('0xFF', ValueType.HEX),
        ('0X00', ValueType.HEX),
        ('0sQQ==', ValueType.BASE64),
        ('0SQQ==', ValueType.BASE64),
        ('42', ValueType.UNKNOWN),
        ('0', ValueType.UNKNOWN),
        ('', ValueType.UNKNOWN),
        ('x0x1', ValueType.UNKNOWN),
    ])
    def test_classify(self, raw, expected):
        assert dump.classify(raw) == expected


class TestValueCodec:
    """Test encoding raw bytes to dump tokens and back."""

    def test_encode_text(self):
        assert dump.encode_value(b'hello') == '"hello"'

    def test_encode_escapes(self):
        assert dump.encode_value(b'a"b\\c\nd') == '"a\\"b\\\\c\\012d"'

    def test_encode_binary(self):
        assert dump.encode_value(b'\x00\xff') == '0sAP8='

    def test_encode_empty(self):
        assert dump.encode_value(b'') == '0s'

    @pytest.mark.parametrize("raw,expected", [
        ('"hello"', b'hello'),
        ('"a\\"b\\\\c\\012d"', b'a"b\\c\nd'),
        ('"caf\\303\\251"', b'caf\xc3\xa9'),
        ('0x4142', b'AB'),
        ('0XfF', b'\xff'),
        ('0sAP8=', b'\x00\xff'),
        ('plain text', b'plain text'),
    ])
    def test_decode(self, raw, expected):
        assert dump.decode_value(raw) == expected

    @pytest.mark.parametrize("raw", ['0xZZ', '0x123', '0s!!!'])
    def test_decode_bad(self, raw):
        with pytest.raises(MalformedDump):
            dump.decode_value(raw)

    def test_encoded_values_decode(self):
        for raw in [b'text', b'tab\there', b'\x01\x02', 'ünïcode'.encode('utf-8')]:
            assert dump.decode_value(dump.encode_value(raw)) == raw


class TestHighlight:
    """Test terminal colorizing of dump text."""

    def test_values_colored_by_type(self):
        out = dump.highlight('# file: /x\nuser.a="s"\nuser.b=0xff\nuser.c=0sAA==\n')
        assert C.GRN + '# file: /x' in out
        assert C.YEL + '"s"' in out
        assert C.MAG + '0xff' in out
        assert C.BLU + '0sAA==' in out

    def test_line_count_preserved(self):
        text = '# file: /x\nuser.a=1\n\nnoise\n'
        assert dump.highlight(text).count('\n') == text.count('\n')
