"""
Tests for the CsvEncoder facade.

Encoding is lossy: what we encode does not keep the hierarchy of the data
passed in, because list fields are flattened into cells. Thus
decode(encode(x)) != x, but a second encode/decode cycle is stable.
"""

import warnings
from dataclasses import dataclass

import pytest
from flatcsv import (
    CsvDialect,
    CsvEncoder,
    EmptyInputError,
    EncodingError,
    InvalidDataTypeError,
    NestingDepthError,
    UnsupportedFormatError,
)
from flatcsv.encoder import normalize_input, rebuild_record
from flatcsv.formatter import ValueFormatter


def build_records():
    return [
        {
            "title": "This is title 1",
            "body": "This is, body 1",
            "images": ["img1.jpg"],
            "alias": "",
            "status": 1,
        },
        {
            "title": "This is title 2",
            "body": "<p>This is, body 2</p>",
            "images": ["img1.jpg", "img2.jpg"],
            "alias": "",
            "status": 0,
        },
        {
            "title": "This is title 3",
            "body": ["<p>This is, body 3</p>"],
            "images": [
                {"src": "img1.jpg", "alt": "Image 1"},
                {"src": "img2.jpg", "alt": "Image, 2"},
            ],
            "alias": "",
            "status": 0,
        },
    ]


ENCODED = (
    "title,body,images,alias,status\n"
    'This is title 1,"This is, body 1",img1.jpg,,1\n'
    'This is title 2,"This is, body 2",img1.jpg,img2.jpg,,0\n'
    'This is title 3,"This is, body 3",img1.jpg|Image 1,"img2.jpg|Image, 2",,0\n'
)


@pytest.fixture
def encoder():
    return CsvEncoder(line_terminator="\n")


class TestFormatSupport:
    """Test format tag handling."""

    def test_supports_csv_only(self, encoder):
        assert encoder.supports_encoding("csv")
        assert encoder.supports_decoding("csv")
        assert not encoder.supports_encoding("json")
        assert not encoder.supports_decoding("CSV")

    def test_file_extension(self):
        assert CsvEncoder.get_file_extension() == "csv"

    def test_encode_rejects_other_formats(self, encoder):
        with pytest.raises(UnsupportedFormatError):
            encoder.encode(build_records(), "xml")

    def test_decode_rejects_other_formats(self, encoder):
        with pytest.raises(UnsupportedFormatError):
            encoder.decode(ENCODED, "xml")


class TestEncode:
    """Test encoding."""

    def test_single_record(self, encoder):
        text = encoder.encode(
            [{"title": "T", "body": "B, C", "images": ["a.jpg"], "alias": "", "status": 1}],
            "csv",
        )
        assert text == 'title,body,images,alias,status\nT,"B, C",a.jpg,,1\n'

    def test_fixture(self, encoder):
        assert encoder.encode(build_records(), "csv") == ENCODED

    def test_item_list_expands_into_cells(self, encoder):
        text = encoder.encode([build_records()[2]], "csv")
        data_line = text.splitlines()[1]
        assert data_line == 'This is title 3,"This is, body 3",img1.jpg|Image 1,"img2.jpg|Image, 2",,0'

    def test_mapping_is_one_record(self, encoder):
        assert encoder.encode({"a": "1", "b": "2"}, "csv") == "a,b\n1,2\n"

    def test_generator_input(self, encoder):
        records = ({"n": i} for i in range(2))
        assert encoder.encode(records, "csv") == "n\n0\n1\n"

    def test_dataclass_input(self, encoder):
        @dataclass
        class Article:
            title: str
            tags: list

        assert encoder.encode(Article("T", ["x", "y"]), "csv") == "title,tags\nT,x,y\n"

    def test_default_line_terminator(self):
        text = CsvEncoder().encode([{"a": "1"}], "csv")
        assert text.splitlines() == ["a", "1"]

    def test_custom_delimiter(self):
        encoder = CsvEncoder(delimiter=";", line_terminator="\n")
        assert encoder.encode([{"a": "x;y", "b": "1,2"}], "csv") == 'a;b\n"x;y";1,2\n'

    def test_from_dialect(self):
        encoder = CsvEncoder.from_dialect(CsvDialect(delimiter="\t", line_terminator="\n"))
        assert encoder.encode([{"a": "1", "b": "2"}], "csv") == "a\tb\n1\t2\n"

    def test_custom_formatter(self):
        encoder = CsvEncoder(line_terminator="\n", formatter=ValueFormatter(narrow_charset=True))
        assert encoder.encode([{"name": "Zoë €"}], "csv") == "name\nZoë ?\n"

    def test_utf8_kept_by_default(self, encoder):
        assert encoder.encode([{"name": "日本"}], "csv") == "name\n日本\n"

    def test_whole_float(self, encoder):
        assert encoder.encode([{"price": 1.0, "rate": 0.25}], "csv") == "price,rate\n1,0.25\n"


class TestEncodeErrors:
    """Test the encode error contract."""

    def test_empty_sequence(self, encoder):
        with pytest.raises(EmptyInputError):
            encoder.encode([], "csv")

    def test_empty_input_is_invalid_data_type(self, encoder):
        with pytest.raises(InvalidDataTypeError):
            encoder.encode([], "csv")

    def test_scalar_input(self, encoder):
        with pytest.raises(InvalidDataTypeError):
            encoder.encode("hello", "csv")

    def test_later_record_not_a_mapping(self, encoder):
        with pytest.raises(InvalidDataTypeError):
            encoder.encode([{"a": 1}, 42], "csv")

    def test_too_deep(self, encoder):
        with pytest.raises(NestingDepthError):
            encoder.encode([{"images": [{"src": {"url": "x"}}]}], "csv")

    def test_writer_fault_is_wrapped(self, encoder, monkeypatch):
        def broken_write(self, headers, rows, buffer=None):
            raise EncodingError("boom")

        monkeypatch.setattr("flatcsv.encoder.CsvWriter.write", broken_write)
        with pytest.raises(InvalidDataTypeError) as excinfo:
            encoder.encode(build_records(), "csv")
        assert isinstance(excinfo.value.__cause__, EncodingError)
        assert "boom" in str(excinfo.value)


class TestDecode:
    """Test decoding."""

    def test_fixture(self, encoder):
        rows = encoder.decode(ENCODED, "csv", {"list_fields": ["images"]})
        assert rows == [
            {
                "title": "This is title 1",
                "body": "This is, body 1",
                "images": "img1.jpg",
                "alias": "",
                "status": "1",
            },
            {
                "title": "This is title 2",
                "body": "This is, body 2",
                "images": ["img1.jpg", "img2.jpg"],
                "alias": "",
                "status": "0",
            },
            {
                "title": "This is title 3",
                "body": "This is, body 3",
                # The items were flattened during encoding: sub-keys are gone.
                "images": ["img1.jpg", "Image 1", "img2.jpg", "Image, 2"],
                "alias": "",
                "status": "0",
            },
        ]

    def test_pipe_cell_absorbs_surplus_without_hint(self, encoder):
        text = encoder.encode([build_records()[2]], "csv")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            (row,) = encoder.decode(text, "csv")
        assert row["images"] == ["img1.jpg", "Image 1", "img2.jpg", "Image, 2"]
        assert row["alias"] == ""
        assert row["status"] == "0"

    def test_unhinted_list_of_scalars_warns(self, encoder):
        """Without a pipe or a hint the expanded column cannot be found."""
        text = encoder.encode([{"title": "T", "tags": ["x", "y"], "status": 1}], "csv")
        with pytest.warns(UserWarning, match="list_fields"):
            (row,) = encoder.decode(text, "csv")
        assert row == {"title": "T", "tags": "x", "status": ["y", "1"]}

    def test_hinted_list_of_scalars(self, encoder):
        text = encoder.encode([{"title": "T", "tags": ["x", "y"], "status": 1}], "csv")
        (row,) = encoder.decode(text, "csv", {"list_fields": ["tags"]})
        assert row == {"title": "T", "tags": ["x", "y"], "status": "1"}

    def test_latin1_bytes(self, encoder):
        raw = "name,city\nZoë,Montréal\n".encode("latin-1")
        assert encoder.decode(raw, "csv") == [{"name": "Zoë", "city": "Montréal"}]

    def test_legacy_export_decodes(self):
        encoder = CsvEncoder(line_terminator="\n", formatter=ValueFormatter(narrow_charset=True))
        text = encoder.encode([{"name": "Zoë", "city": "Montréal"}], "csv")
        rows = encoder.decode(text.encode("latin-1"), "csv")
        assert rows == [{"name": "Zoë", "city": "Montréal"}]

    def test_no_type_inference(self, encoder):
        (row,) = encoder.decode("n,flag\n1,true\n", "csv")
        assert row == {"n": "1", "flag": "true"}

    def test_pipe_splits_scalar_cells(self, encoder):
        (row,) = encoder.decode("a,b\nx|y,z\n", "csv")
        assert row == {"a": ["x", "y"], "b": "z"}

    def test_empty_and_header_only(self, encoder):
        assert encoder.decode("", "csv") == []
        assert encoder.decode("a,b\n", "csv") == []

    def test_short_row_warns(self, encoder):
        with pytest.warns(UserWarning):
            (row,) = encoder.decode("a,b,c\n1\n", "csv")
        assert row == {"a": "1", "b": "", "c": ""}

    def test_bytes(self, encoder):
        assert encoder.decode(b"a\n1\n", "csv") == [{"a": "1"}]


class TestRoundTrip:
    """decode(encode(x)) is lossy but stable."""

    def test_scalars_and_lists_survive(self, encoder):
        records = [{"title": " <b>T</b> ", "images": ["a.jpg"], "tags": ["x", "y"]}]
        rows = encoder.decode(encoder.encode(records, "csv"), "csv", {"list_fields": ["tags"]})
        assert rows == [{"title": "T", "images": "a.jpg", "tags": ["x", "y"]}]

    def test_second_cycle_is_stable(self, encoder):
        context = {"list_fields": ["images"]}
        once = encoder.decode(encoder.encode(build_records(), "csv"), "csv", context)
        twice = encoder.decode(encoder.encode(once, "csv"), "csv", context)
        assert once == twice

    def test_second_cycle_needs_hint_once_pipes_are_gone(self, encoder):
        """Re-encoded items lose their pipes, so the unhinted guess warns."""
        once = encoder.decode(encoder.encode([build_records()[2]], "csv"), "csv")
        with pytest.warns(UserWarning, match="list_fields"):
            twice = encoder.decode(encoder.encode(once, "csv"), "csv")
        assert twice != once
        assert twice[0]["status"] == ["img2.jpg", "Image, 2", "", "0"]


class TestHelpers:
    """Test the module-level helpers."""

    def test_normalize_input(self):
        assert normalize_input({"a": 1}) == [{"a": 1}]
        assert normalize_input("x") == ["x"]
        assert normalize_input(5) == [5]
        assert normalize_input(({"a": 1},)) == [{"a": 1}]

    def test_rebuild_record_falls_back_to_last_column(self):
        with pytest.warns(UserWarning, match="assigned to 'b'"):
            record = rebuild_record(["a", "b"], ["1", "2", "3"])
        assert record == {"a": "1", "b": ["2", "3"]}

    def test_rebuild_record_uses_list_fields(self):
        record = rebuild_record(["a", "b", "c"], ["1", "x", "y", "2"], list_fields=["b"])
        assert record == {"a": "1", "b": ["x", "y"], "c": "2"}
