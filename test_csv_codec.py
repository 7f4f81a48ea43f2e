import os
import tempfile

import pytest

import csv_codec
from errors import ImportFailure
from record import Record


def _records():
    return [
        Record("a", "Zoe", "zoe@example.com", 30, "Lead"),
        Record("b", 'Said "Hi"', "", None, "Dev", extras={"team": "core"}),
        Record("c", "Comma, Inc", "c@example.com", 41.5, ""),
    ]


def test_encode_quotes_every_cell_and_joins_with_crlf():
    text = csv_codec.encode(_records(), ["name", "age"])
    assert text == 'name,age\r\n"Zoe","30"\r\n"Said ""Hi""",""\r\n"Comma, Inc","41.5"'


def test_encode_emits_only_requested_keys_in_order():
    text = csv_codec.encode(_records()[:1], ["role", "name"])
    assert text.split("\r\n") == ["role,name", '"Lead","Zoe"']


def test_encode_missing_values_render_empty():
    text = csv_codec.encode([Record("x")], ["team", "age"])
    assert text == 'team,age\r\n"",""'


def test_encode_without_records_is_header_only():
    assert csv_codec.encode([], ["name", "email"]) == "name,email"


def test_decode_header_names_fields():
    records, errors = csv_codec.decode('name,age\r\n"Zoe","30"')
    assert errors == []
    assert records == [{"name": "Zoe", "age": "30"}]


def test_decode_skips_blank_lines():
    records, errors = csv_codec.decode("a,b\n\n1,2\n\n3,4\n")
    assert errors == []
    assert records == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_decode_empty_input(text):
    assert csv_codec.decode(text) == ([], [])


def test_decode_keeps_leading_zeros_as_text():
    records, _ = csv_codec.decode("code,name\n007,Bond\n")
    assert records == [{"code": "007", "name": "Bond"}]


def test_decode_reports_row_with_too_many_fields_and_continues():
    records, errors = csv_codec.decode("a,b\n1,2,3\n4,5\n")
    assert len(errors) == 1
    assert "Too many fields" in errors[0].message
    assert {"a": "4", "b": "5"} in records
    assert {"a": "1", "b": "2"} in records


def test_decode_reports_row_with_too_few_fields_and_continues():
    records, errors = csv_codec.decode("a,b,c\n1,2\n4,5,6\n")
    assert records == [{"a": "1", "b": "2"}, {"a": "4", "b": "5", "c": "6"}]
    assert len(errors) == 1
    assert errors[0].row == 1
    assert "c" in errors[0].message


def test_decode_empty_quoted_cell_is_empty_string():
    records, errors = csv_codec.decode('name,age\n"Ann",""\n')
    assert errors == []
    assert records == [{"name": "Ann", "age": ""}]


def test_round_trip_preserves_named_fields():
    keys = ["name", "email", "age", "role", "team"]
    records = _records()
    decoded, errors = csv_codec.decode(csv_codec.encode(records, keys))
    assert errors == []
    assert len(decoded) == len(records)
    for original, back in zip(records, decoded):
        for key in keys:
            expected = original.get(key)
            expected = "" if expected is None else str(expected)
            assert back[key] == expected


def test_round_trip_keeps_empty_value_in_single_column_export():
    records = [Record("a", name=""), Record("b", name="x")]
    text = csv_codec.encode(records, ["name"])
    assert text == 'name\r\n""\r\n"x"'
    decoded, errors = csv_codec.decode(text)
    assert errors == []
    assert decoded == [{"name": ""}, {"name": "x"}]


def test_decode_row_numbers_ignore_blank_lines():
    records, errors = csv_codec.decode("a,b\n\n1\n")
    assert records == [{"a": "1"}]
    assert errors[0].row == 1


def test_to_import_fields_coerces_age_and_defaults_text():
    fields, errors = csv_codec.to_import_fields(
        [{"name": "Zoe", "age": "30"}, {"email": "x@y.z", "age": ""}]
    )
    assert errors == []
    assert fields[0] == {"name": "Zoe", "email": "", "role": "", "age": 30}
    assert fields[1] == {"name": "", "email": "x@y.z", "role": ""}
    assert "age" not in fields[1]


def test_to_import_fields_drops_ids_and_keeps_extras():
    fields, _ = csv_codec.to_import_fields([{"id": "r9", "name": "A", "team": "ops"}])
    assert "id" not in fields[0]
    assert fields[0]["team"] == "ops"


def test_to_import_fields_reports_non_numeric_age():
    fields, errors = csv_codec.to_import_fields([{"name": "A", "age": "old"}])
    assert "age" not in fields[0]
    assert len(errors) == 1
    assert errors[0].row == 1


def test_read_file_missing_path_raises_import_failure():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(ImportFailure):
            csv_codec.read_file(os.path.join(tmp, "missing.csv"))


def test_write_then_read_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "out.csv")
        csv_codec.write_file(path, csv_codec.encode(_records()[:1], ["name", "age"]))
        with open(path, "rb") as f:
            assert b"\r\n" in f.read()
        records, errors = csv_codec.read_file(path)
        assert errors == []
        assert records == [{"name": "Zoe", "age": "30"}]
