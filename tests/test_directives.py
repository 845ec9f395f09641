"""Tests for splitting configuration text into directives and fields."""

from image_meta.directives import format_record, get_input_list, parse_record


class TestGetInputList:
    """Test splitting multi-line input into directives."""

    def test_empty_input(self):
        assert get_input_list("") == []

    def test_one_directive_per_line(self):
        assert get_input_list("foo\nbar\n\n  baz  \n") == ["foo", "bar", "baz"]

    def test_crlf_line_breaks(self):
        assert get_input_list("foo\r\nbar\r\n") == ["foo", "bar"]

    def test_commas_stay_inside_a_line(self):
        text = "type=ref,event=branch\ntype=semver,pattern={{version}}"
        assert get_input_list(text) == [
            "type=ref,event=branch",
            "type=semver,pattern={{version}}",
        ]

    def test_comment_lines_are_dropped(self):
        text = "# default rules\ntype=schedule\n  # disabled\ntype=sha"
        assert get_input_list(text) == ["type=schedule", "type=sha"]

    def test_quoted_value_spans_lines(self):
        text = '"org.opencontainers.image.description=first\nsecond"\nmaintainer=CrazyMax'
        assert get_input_list(text) == [
            "org.opencontainers.image.description=first\nsecond",
            "maintainer=CrazyMax",
        ]

    def test_leading_quoted_field_keeps_its_quotes(self):
        text = '"type=match,pattern=a,b",group=0\ntype=sha'
        assert get_input_list(text) == ['"type=match,pattern=a,b",group=0', "type=sha"]

    def test_quoted_field_inside_a_line(self):
        text = 'type=match,"pattern=\\d{1,3}.\\d{1,3}",group=0'
        entries = get_input_list(text)

        assert entries == [text]
        assert parse_record(entries[0])[1] == "pattern=\\d{1,3}.\\d{1,3}"

    def test_quote_inside_a_value_does_not_join_lines(self):
        assert get_input_list('type=raw,value=5"\ntype=sha') == ['type=raw,value=5"', "type=sha"]


class TestParseRecord:
    """Test splitting one directive into fields."""

    def test_plain_fields(self):
        assert parse_record("type=raw,value=foo") == ["type=raw", "value=foo"]

    def test_quoted_field_keeps_commas(self):
        assert parse_record('type=match,"pattern=\\d{1,3}.\\d{1,3}",group=0') == [
            "type=match",
            "pattern=\\d{1,3}.\\d{1,3}",
            "group=0",
        ]

    def test_space_before_quoted_field(self):
        assert parse_record('foo, "bar,baz"') == ["foo", "bar,baz"]

    def test_escaped_quotes(self):
        assert parse_record('"value=say ""hi"""') == ['value=say "hi"']

    def test_empty_directive(self):
        assert parse_record("") == []


class TestFormatRecord:
    """Test joining fields back into a directive."""

    def test_plain_fields(self):
        assert format_record(["type=raw", "value=foo"]) == "type=raw,value=foo"

    def test_field_with_comma_is_quoted(self):
        record = format_record(["type=raw", "value=a,b"])
        assert record == 'type=raw,"value=a,b"'
        assert parse_record(record) == ["type=raw", "value=a,b"]
