"""Tests for CSV ingestion."""
import pytest

from constants import NO_VALID_DATA_MESSAGE, PARSE_ERROR_MESSAGE
from errors import ParseError
from models import ContentRow
from parsing import (
    decode_upload,
    ingest_text,
    is_header_line,
    parse_content_csv,
    parse_content_row,
    split_csv_line,
)


class TestSplitCsvLine:
    """Tests for split_csv_line function."""

    def test_plain_fields(self):
        """Test splitting a line without quotes."""
        assert split_csv_line("a,b,c") == ["a", "b", "c"]

    def test_comma_inside_quotes_is_not_a_delimiter(self):
        """Test that a quoted comma stays inside its field."""
        result = split_csv_line('https://x.com/a,"Breaking, News",123')
        assert result == ["https://x.com/a", '"Breaking, News"', "123"]

    def test_quoted_thousands_separator(self):
        """Test a quoted number with a comma stays one field."""
        result = split_csv_line('u,h,"1,234"')
        assert result == ["u", "h", '"1,234"']

    def test_trailing_comma_yields_empty_field(self):
        """Test a trailing comma produces an empty last field."""
        assert split_csv_line("a,b,") == ["a", "b", ""]


class TestParseContentRow:
    """Tests for parse_content_row function."""

    def test_valid_row(self):
        """Test fields are trimmed into a ContentRow."""
        row = parse_content_row("https://x.com/a, Cancer breakthrough , 1500")
        assert row == ContentRow(url="https://x.com/a", headline="Cancer breakthrough", total_users=1500)

    def test_quotes_stripped(self):
        """Test surrounding quotes are removed from every field."""
        row = parse_content_row('"https://x.com/a","Cancer breakthrough","1500"')
        assert row.url == "https://x.com/a"
        assert row.headline == "Cancer breakthrough"
        assert row.total_users == 1500

    def test_thousands_separator(self):
        """Test commas inside the users field are removed."""
        row = parse_content_row('https://x.com/a,Headline,"1,234"')
        assert row.total_users == 1234

    def test_too_few_fields(self):
        """Test a line with fewer than three fields is dropped."""
        assert parse_content_row("https://x.com/a,Headline") is None

    def test_empty_url(self):
        """Test a line with an empty URL is dropped."""
        assert parse_content_row(",Headline,10") is None

    def test_empty_headline(self):
        """Test a line with an empty headline is dropped."""
        assert parse_content_row('https://x.com/a,"",10') is None

    def test_non_numeric_users(self):
        """Test a non-numeric users field drops the line."""
        assert parse_content_row("https://x.com/a,Headline,many") is None

    def test_negative_users(self):
        """Test a negative users field drops the line."""
        assert parse_content_row("https://x.com/a,Headline,-5") is None

    def test_extra_fields_ignored(self):
        """Test fields after the third are ignored."""
        row = parse_content_row("https://x.com/a,Headline,10,extra,columns")
        assert row.total_users == 10

    def test_quoted_count_with_inner_spaces(self):
        """Test a quoted count with spaces and a thousands separator is read."""
        row = parse_content_row('u,h," 1,500 "')
        assert row.total_users == 1500

    def test_decimal_count_keeps_leading_integer(self):
        """Test a decimal count is read up to the decimal point."""
        assert parse_content_row("u,h,1500.0").total_users == 1500

    def test_leading_text_in_count_drops_line(self):
        """Test a count that does not start with a digit drops the line."""
        assert parse_content_row("u,h,about 1500") is None


class TestIsHeaderLine:
    """Tests for is_header_line function."""

    @pytest.mark.parametrize("line", ["URL,Headline,Users", "url,title,count", "Page,HEADLINE,Users"])
    def test_header_tokens_any_case(self, line):
        """Test header tokens are matched case-insensitively."""
        assert is_header_line(line)

    def test_data_line(self):
        """Test an ordinary data line is not a header."""
        assert not is_header_line("https://x.com/a,Cancer breakthrough,1500")


class TestParseContentCsv:
    """Tests for parse_content_csv function."""

    def test_end_to_end_example(self):
        """Test the two-row example with a quoted headline and no header."""
        text = 'https://x.com/a,"Cancer breakthrough",1500\nhttps://x.com/b,Heart Attack Study,900'
        rows = parse_content_csv(text)
        assert rows == [
            ContentRow(url="https://x.com/a", headline="Cancer breakthrough", total_users=1500),
            ContentRow(url="https://x.com/b", headline="Heart Attack Study", total_users=900),
        ]

    def test_header_skipped(self, sample_csv_text):
        """Test a header line is skipped and quoted fields survive."""
        rows = parse_content_csv(sample_csv_text)
        assert len(rows) == 3
        assert rows[1].headline == "Breaking, News"
        assert rows[1].total_users == 1234

    def test_header_skipped_even_if_parseable(self):
        """Test a first line mentioning URL is dropped even with a numeric third field."""
        text = "URL,Headline,100\nhttps://x.com/a,Story,5"
        rows = parse_content_csv(text)
        assert [r.url for r in rows] == ["https://x.com/a"]

    def test_header_token_only_checked_on_first_line(self):
        """Test header tokens in later lines do not drop them."""
        text = "https://x.com/a,Story,5\nhttps://x.com/url-guide,Headline tips,7"
        rows = parse_content_csv(text)
        assert len(rows) == 2

    def test_crlf_line_endings(self):
        """Test CRLF line endings are handled."""
        text = "https://x.com/a,A,1\r\nhttps://x.com/b,B,2\r\n"
        rows = parse_content_csv(text)
        assert [r.total_users for r in rows] == [1, 2]

    def test_invalid_lines_dropped_order_kept(self):
        """Test unusable lines are dropped and order is preserved."""
        text = "\n".join([
            "https://x.com/a,A,1",
            "broken line",
            "https://x.com/b,B,not-a-number",
            "",
            "https://x.com/c,C,3",
        ])
        rows = parse_content_csv(text)
        assert [r.url for r in rows] == ["https://x.com/a", "https://x.com/c"]

    def test_all_invalid_raises(self):
        """Test text with no usable line raises ParseError."""
        with pytest.raises(ParseError, match=NO_VALID_DATA_MESSAGE):
            parse_content_csv("a,b\nc,d\n")

    def test_empty_text_raises(self):
        """Test empty text raises ParseError."""
        with pytest.raises(ParseError):
            parse_content_csv("")

    def test_header_only_raises(self):
        """Test a header with no data raises ParseError."""
        with pytest.raises(ParseError):
            parse_content_csv("URL,Headline,Users")

    def test_large_batch_not_truncated(self):
        """Test large inputs keep every row."""
        text = "\n".join(f"https://x.com/{i},Story {i},{i}" for i in range(1200))
        rows = parse_content_csv(text)
        assert len(rows) == 1200
        assert rows[-1].total_users == 1199


class TestDecodeUpload:
    """Tests for decode_upload function."""

    def test_utf8_with_bom(self):
        """Test a UTF-8 byte order mark is removed."""
        assert decode_upload(b"\xef\xbb\xbfURL,Headline") == "URL,Headline"

    def test_latin1_fallback(self):
        """Test bytes that are not UTF-8 are read as latin-1."""
        assert decode_upload("Café,News,1".encode("latin-1")) == "Café,News,1"

    def test_any_bytes_decode(self):
        """Test arbitrary bytes still decode without replacement characters."""
        assert decode_upload(b"\xff\xfe,\x80,1") == "\u00ff\u00fe,\u0080,1"


class TestIngestText:
    """Tests for ingest_text function."""

    def test_success_replaces_rows_and_clears_error(self):
        """Test a successful parse replaces rows and clears the error."""
        state = {'content_rows': [], 'error_message': "old"}
        assert ingest_text(state, "https://x.com/a,A,1") is True
        assert len(state['content_rows']) == 1
        assert state['error_message'] is None

    def test_failure_keeps_previous_rows(self):
        """Test a failed parse keeps the previous rows and sets the error."""
        previous = [ContentRow(url="https://x.com/a", headline="A", total_users=1)]
        state = {'content_rows': previous, 'error_message': None}
        assert ingest_text(state, "nothing,useful") is False
        assert state['content_rows'] is previous
        assert state['error_message'] == PARSE_ERROR_MESSAGE
