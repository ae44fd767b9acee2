from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Sequence


def write_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> bytes:
    """Render rows as CSV bytes (UTF-8 with BOM so spreadsheet tools pick the encoding)."""

    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return out.getvalue().encode("utf-8-sig")
