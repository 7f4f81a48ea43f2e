import csv
import io
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from app_logging import get_logger
from errors import ImportFailure, ParseError
from field_coercion import display_text, parse_number

logger = get_logger(__name__)

LINE_TERMINATOR = "\r\n"
TEXT_FIELDS = ("name", "email", "role")


def _is_missing(value) -> bool:
    return value is None or pd.isna(value)


def _read_frame(text: str, **kwargs) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=False,
        engine="python",
        **kwargs,
    )


def decode(text: str) -> Tuple[List[Dict[str, str]], List[ParseError]]:
    """Decode CSV text whose first line names the fields.

    Rows with too many fields are truncated to the header width, rows with
    too few keep only the fields they have. Both are reported as
    ParseError and decoding carries on. Zero-length lines are skipped; a
    line holding only an empty quoted value is a record.
    """
    if text is None:
        return [], []
    if text.startswith("\ufeff"):
        text = text[1:]
    text = text.lstrip("\r\n")
    if not text.strip():
        return [], []

    errors: List[ParseError] = []
    try:
        width = _read_frame(text, nrows=1).shape[1]

        def _on_bad_line(fields: List[str]):
            errors.append(
                ParseError(
                    None,
                    f"Too many fields: expected {width}, found {len(fields)}",
                )
            )
            return fields[:width]

        frame = _read_frame(text, on_bad_lines=_on_bad_line)
    except pd.errors.EmptyDataError:
        return [], []
    except (pd.errors.ParserError, csv.Error, ValueError) as exc:
        raise ImportFailure(f"Could not parse CSV: {exc}") from exc

    header = [display_text(v) for v in frame.iloc[0].tolist()]
    records: List[Dict[str, str]] = []
    position = 0
    for values in frame.iloc[1:].itertuples(index=False, name=None):
        present = [not _is_missing(v) for v in values]
        if not any(present):
            # zero-length source line
            continue
        position += 1
        record = {}
        missing = []
        for key, value, has_value in zip(header, values, present):
            if not has_value:
                missing.append(key)
                continue
            record[key] = value if isinstance(value, str) else display_text(value)
        if missing:
            errors.append(
                ParseError(position, f"Too few fields: missing {', '.join(missing)}")
            )
        records.append(record)

    for err in errors:
        logger.debug("CSV parse error: %s", err)
    return records, errors


def read_file(path: str) -> Tuple[List[Dict[str, str]], List[ParseError]]:
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportFailure(f"Could not read '{path}': {exc}") from exc
    return decode(text)


def to_import_fields(decoded: Iterable[Dict[str, str]]) -> Tuple[List[Dict], List[ParseError]]:
    """Shape decoded CSV mappings into record fields for an import.

    Ids are never taken from the file. Age is coerced to a number and
    left unset when empty or absent.
    """
    rows: List[Dict] = []
    errors: List[ParseError] = []
    for position, raw in enumerate(decoded, start=1):
        fields = {k: v for k, v in raw.items() if k != "id"}
        for key in TEXT_FIELDS:
            if fields.get(key) is None:
                fields[key] = ""
        age = fields.pop("age", None)
        if age is not None and str(age).strip() != "":
            try:
                fields["age"] = parse_number(age)
            except ValueError:
                errors.append(ParseError(position, f"Age '{age}' is not a number"))
        rows.append(fields)
    return rows, errors


def encode(records: Sequence, ordered_visible_keys: Sequence[str]) -> str:
    keys = list(ordered_visible_keys)
    header = ",".join(keys)
    if not records:
        return header
    if not keys:
        return LINE_TERMINATOR.join([header] + [""] * len(records))

    cells = [[display_text(record.get(key)) for key in keys] for record in records]
    frame = pd.DataFrame(cells, columns=keys, dtype=object)
    body = frame.to_csv(
        header=False,
        index=False,
        quoting=csv.QUOTE_ALL,
        lineterminator=LINE_TERMINATOR,
    )
    if body.endswith(LINE_TERMINATOR):
        body = body[: -len(LINE_TERMINATOR)]
    return header + LINE_TERMINATOR + body


def write_file(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
