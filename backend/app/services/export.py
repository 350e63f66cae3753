import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Optional


def filter_data(rows: List[Dict[str, Any]], search_term: str, search_fields: Iterable[str]) -> List[Dict[str, Any]]:
    """Keep rows where any of the fields contains the term (case-insensitive for text)."""
    if not search_term:
        return rows

    term = search_term.lower()
    fields = list(search_fields)

    def matches(row):
        for name in fields:
            value = row.get(name)
            if isinstance(value, bool):
                continue
            if isinstance(value, str) and term in value.lower():
                return True
            if isinstance(value, (int, float)) and term in str(value):
                return True
        return False

    return [row for row in rows if matches(row)]


def sort_data(rows: List[Dict[str, Any]], field: str, direction: str = "asc") -> List[Dict[str, Any]]:
    """
    Stable sort on one field. Strings compare case-insensitively and numbers
    numerically; rows whose value is neither keep their relative position
    after the comparable ones.
    """
    reverse = direction == "desc"

    def key(row):
        value = row.get(field)
        if isinstance(value, str):
            return (0, value.lower())
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (0, value)
        return (1, 0)

    comparable = [r for r in rows if key(r)[0] == 0]
    rest = [r for r in rows if key(r)[0] == 1]
    # Mixed str/number columns cannot be ordered together
    try:
        comparable = sorted(comparable, key=key, reverse=reverse)
    except TypeError:
        pass
    return comparable + rest


def _cell(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if value is None:
        return ""
    return value


def iter_csv(rows: List[Dict[str, Any]], headers: Optional[List[str]] = None) -> Iterator[str]:
    """Yield CSV text line by line; headers default to the keys of the first row."""
    headers = headers or list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

    writer.writerow(headers)
    yield buffer.getvalue()
    buffer.seek(0)
    buffer.truncate(0)

    for row in rows:
        writer.writerow([_cell(row.get(h)) for h in headers])
        yield buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)


def to_csv(rows: List[Dict[str, Any]], headers: Optional[List[str]] = None) -> str:
    if not rows:
        return ""
    return "".join(iter_csv(rows, headers))


def export_filename(name: str, today: Optional[date] = None) -> str:
    return f"{name}_{(today or date.today()).isoformat()}.csv"
