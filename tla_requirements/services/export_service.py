"""
Export Service — JSON and spreadsheet-friendly CSV renderings.
"""

from __future__ import annotations

import csv
import io
import json

from tla_requirements.models.schemas import Requirement

CSV_HEADERS = ["id", "kind", "priority", "status", "text", "rationale", "evidence"]
UTF8_BOM = "\ufeff"


def to_json(requirements: list[Requirement]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in requirements], indent=2, ensure_ascii=False)


def _cell(value: object) -> str:
    if value is None:
        return ""
    return str(value).replace("\r\n", " ").replace("\n", " ")


def to_csv(requirements: list[Requirement]) -> str:
    """CSV with a UTF-8 BOM so spreadsheet tools pick the right encoding."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    for r in requirements:
        writer.writerow([
            _cell(r.id),
            _cell(r.kind.value),
            _cell(r.priority.value),
            _cell(r.status.value),
            _cell(r.text),
            _cell(r.rationale),
            _cell(r.evidence),
        ])
    return UTF8_BOM + buffer.getvalue().rstrip("\n")
