"""
Serialization helpers for dialects and decoded rows.

Dialects round-trip losslessly through an explicit dict representation,
to JSON and to YAML, so a codec configuration can be stored next to the
files it reads and writes. Decoded rows can be dumped for inspection.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from flatcsv.dialect import CsvDialect


def dialect_to_dict(d: CsvDialect) -> Dict[str, Any]:
    return {
        "delimiter": d.delimiter,
        "enclosure": d.enclosure,
        "escape_char": d.escape_char,
        "line_terminator": d.line_terminator,
    }


def dialect_from_dict(d: Dict[str, Any] | None) -> CsvDialect:
    if d is None:
        return CsvDialect()
    defaults = CsvDialect()
    return CsvDialect(
        delimiter=d.get("delimiter", defaults.delimiter),
        enclosure=d.get("enclosure", defaults.enclosure),
        escape_char=d.get("escape_char", defaults.escape_char),
        line_terminator=d.get("line_terminator", defaults.line_terminator),
    )


def dialect_to_json(d: CsvDialect) -> str:
    return json.dumps(dialect_to_dict(d), sort_keys=True)


def dialect_from_json(s: str) -> CsvDialect:
    return dialect_from_dict(json.loads(s))


def dialect_to_yaml(d: CsvDialect) -> str:
    return yaml.safe_dump(dialect_to_dict(d))


def dialect_from_yaml(s: str) -> CsvDialect:
    return dialect_from_dict(yaml.safe_load(s))


def rows_to_json(rows: List[Dict[str, Any]]) -> str:
    return json.dumps(rows, ensure_ascii=False)


def rows_to_yaml(rows: List[Dict[str, Any]]) -> str:
    # Key order matters: it is the column order.
    return yaml.safe_dump(rows, sort_keys=False, allow_unicode=True)
