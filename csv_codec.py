"""
Session codec for the Expert Elicitation Plotter.

Encodes a list of scenarios plus their sparse baseline/treatment
distributions into a comma-separated record (one header row, one row per
scenario) and decodes it back.  Handles:

- Attribute columns that differ between scenarios (blank cells)
- Unset distribution fields (blank cells, never 0)
- Comment escaping (commas dropped, line breaks as ``\\n``)
- UTF-8 BOM markers and blank lines
- Duplicate ``scenario_id`` rows that differ only by group
- Yield column auto-detection

Decoding always rebuilds the session from scratch; it never merges with
previously loaded state.
"""

import csv
import io
import math
import os
import warnings
from collections import Counter
from typing import Dict, List, Mapping, Optional, Sequence

from .constants import (
    COL_COMMENT, COL_SCENARIO_GROUP, COL_SCENARIO_ID, COMMENT_NEWLINE_ESCAPE,
    DIST_COLUMNS, DIST_FIELDS, REQUIRED_COLUMNS, RESERVED_COLUMNS,
    WHICH_OPTIONS, YIELD_MARKER,
)
from .data_model import (
    AttributeValue, Scenario, Session, SparseDistribution,
    SparseScenarioDistribution,
)
from .errors import ConflictError, StructuralError


# ── Cell formatting ──────────────────────────────────────────────────────

def _format_number(value) -> str:
    """Literal number text; integral floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _format_attribute(value: Optional[AttributeValue]) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return _format_number(value)


def _escape_comment(comment: Optional[str]) -> str:
    """Drop commas and write line breaks as the two characters ``\\n``.

    The escape is not reversible for text that already contains a
    literal backslash-n (a Windows path such as ``C:\\new``): it is read
    back as a line break.
    """
    if not comment:
        return ""
    text = comment.replace(",", "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\n", COMMENT_NEWLINE_ESCAPE)


def _unescape_comment(cell: str) -> Optional[str]:
    """Every literal ``\\n`` in *cell* becomes a line break."""
    if not cell:
        return None
    return cell.replace(COMMENT_NEWLINE_ESCAPE, "\n")


# ── Cell parsing ─────────────────────────────────────────────────────────

def _parse_attribute(text: str) -> AttributeValue:
    """Number when the cell lexically parses as one, else the text.

    Free text is never an error and is returned exactly as written,
    surrounding spaces included.  Underscore digit grouping and
    ``nan``/``inf`` spellings stay text.
    """
    s = text.strip()
    if "_" in s:
        return text
    try:
        return int(s)
    except ValueError:
        pass
    try:
        value = float(s)
    except ValueError:
        return text
    return value if math.isfinite(value) else text


def _parse_distribution_cell(text: str) -> float:
    """Parse a non-blank distribution cell.

    Raises ``ValueError`` for non-numeric or non-finite text.
    """
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value: {text!r}")
    return value


def detect_yield_column(headers: Sequence[str]) -> Optional[str]:
    """First header containing "yield" (case-insensitive), else ``None``."""
    for header in headers:
        if YIELD_MARKER in header.lower():
            return header
    return None


# ── Encode ───────────────────────────────────────────────────────────────

def session_headers(scenarios: Sequence[Scenario]) -> List[str]:
    """Column order: ids, comment, sorted attribute keys, distributions."""
    attribute_keys = sorted({key for s in scenarios for key in s.attributes})
    return (
        [COL_SCENARIO_ID, COL_SCENARIO_GROUP, COL_COMMENT]
        + attribute_keys
        + list(DIST_COLUMNS)
    )


def encode_session(
    scenarios: Sequence[Scenario],
    distributions: Mapping[str, SparseScenarioDistribution],
) -> str:
    """Serialise *scenarios* and their sparse distributions to text.

    Parameters
    ----------
    scenarios : sequence of Scenario
        Rows in output order.
    distributions : mapping
        ``{scenario_id: SparseScenarioDistribution}``; scenarios with no
        entry are written with every distribution cell blank.

    Returns
    -------
    str
        Record text with ``\\n`` line endings.

    Raises
    ------
    StructuralError
        If *scenarios* is empty.
    """
    if not scenarios:
        raise StructuralError(
            "Cannot export a session with no scenarios."
        )

    headers = session_headers(scenarios)
    attribute_keys = headers[3:len(headers) - len(DIST_COLUMNS)]

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)

    for scenario in scenarios:
        pair = distributions.get(scenario.id) or SparseScenarioDistribution()
        row = [scenario.id, scenario.group, _escape_comment(scenario.comment)]
        row.extend(_format_attribute(scenario.attributes.get(key)) for key in attribute_keys)
        for which in WHICH_OPTIONS:
            sparse = getattr(pair, which)
            for name in DIST_FIELDS:
                value = getattr(sparse, name)
                row.append("" if value is None else _format_number(value))
        writer.writerow(row)

    return buf.getvalue()


# ── Decode ───────────────────────────────────────────────────────────────

def _validate_headers(headers: List[str]) -> None:
    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise StructuralError(
            f"Session file is missing required column(s): "
            f"{', '.join(missing)}. Expected {COL_SCENARIO_ID}, "
            f"{COL_SCENARIO_GROUP} and all of {', '.join(DIST_COLUMNS)}."
        )

    repeated = sorted(
        name for name, count in Counter(h for h in headers if h).items()
        if count > 1
    )
    if repeated:
        raise StructuralError(
            f"Session file header repeats column(s): {', '.join(repeated)}."
        )


def _build_pair(
    cells: List[str],
    index: Dict[str, int],
    line_num: int,
    bad_tokens: List[str],
) -> SparseScenarioDistribution:
    sides = {}
    for which in WHICH_OPTIONS:
        values = {}
        for name in DIST_FIELDS:
            column = f"{which}_{name}"
            cell = cells[index[column]].strip()
            if not cell:
                values[name] = None
                continue
            try:
                values[name] = _parse_distribution_cell(cell)
            except ValueError:
                bad_tokens.append(f"line {line_num} {column}: '{cell}'")
                values[name] = None
        sides[which] = SparseDistribution(**values)
    return SparseScenarioDistribution(**sides)


def decode_session(text: str) -> Session:
    """Parse record text into a fresh ``Session``.

    Parameters
    ----------
    text : str
        Full file contents.

    Returns
    -------
    Session
        Scenarios in first-appearance order, their sparse distributions,
        and the detected yield column.

    Raises
    ------
    StructuralError
        If the document is empty, has no data rows, repeats a header, or
        lacks ``scenario_id``, ``scenario_group`` or a distribution column.
    ConflictError
        If rows sharing a ``scenario_id`` differ in any column other than
        ``scenario_group``.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text))
    records = []
    for row in reader:
        # Skip blank lines
        if any(cell.strip() for cell in row):
            records.append((reader.line_num, row))

    if not records:
        raise StructuralError("Session file is empty.")

    headers = [h.strip() for h in records[0][1]]
    _validate_headers(headers)

    if len(records) < 2:
        raise StructuralError("Session file has a header row but no scenarios.")

    index = {h: i for i, h in enumerate(headers) if h}
    ignored = [
        h for h in headers
        if h in RESERVED_COLUMNS and h not in REQUIRED_COLUMNS and h != COL_COMMENT
    ]
    if ignored:
        warnings.warn(
            f"Reserved column(s) {ignored} are not scenario attributes "
            f"and were ignored.",
            stacklevel=2,
        )
    attribute_columns = [
        h for h in headers if h and h not in RESERVED_COLUMNS
    ]
    compared_columns = [
        h for h in headers if h and h != COL_SCENARIO_GROUP
    ]
    yield_column = detect_yield_column(attribute_columns)

    order: List[str] = []
    first_rows: Dict[str, tuple] = {}
    groups: Dict[str, str] = {}

    for line_num, raw in records[1:]:
        cells = list(raw) + [""] * (len(headers) - len(raw))
        scenario_id = cells[index[COL_SCENARIO_ID]]
        group = cells[index[COL_SCENARIO_GROUP]]

        if scenario_id == "":
            warnings.warn(
                f"Line {line_num} has a blank {COL_SCENARIO_ID}; skipping.",
                stacklevel=2,
            )
            continue

        if scenario_id in first_rows:
            _, previous = first_rows[scenario_id]
            mismatched = [
                h for h in compared_columns
                if previous[index[h]] != cells[index[h]]
            ]
            if mismatched:
                raise ConflictError(scenario_id, mismatched)
            if group != groups[scenario_id]:
                warnings.warn(
                    f"Scenario '{scenario_id}' is listed again at line "
                    f"{line_num} under group '{group}' (was "
                    f"'{groups[scenario_id]}'); keeping the later group.",
                    stacklevel=2,
                )
            groups[scenario_id] = group
            continue

        order.append(scenario_id)
        first_rows[scenario_id] = (line_num, cells)
        groups[scenario_id] = group

    if not order:
        raise StructuralError("Session file contains no scenario rows with an id.")

    scenarios: List[Scenario] = []
    distributions: Dict[str, SparseScenarioDistribution] = {}
    bad_tokens: List[str] = []

    for scenario_id in order:
        line_num, cells = first_rows[scenario_id]
        comment = None
        if COL_COMMENT in index:
            comment = _unescape_comment(cells[index[COL_COMMENT]])
        attributes = {}
        for column in attribute_columns:
            cell = cells[index[column]]
            if cell != "":
                attributes[column] = _parse_attribute(cell)

        scenarios.append(Scenario(
            id=scenario_id,
            group=groups[scenario_id],
            comment=comment,
            attributes=attributes,
        ))
        distributions[scenario_id] = _build_pair(cells, index, line_num, bad_tokens)

    if bad_tokens:
        detail = "; ".join(bad_tokens[:10])
        if len(bad_tokens) > 10:
            detail += f" ... and {len(bad_tokens) - 10} more"
        warnings.warn(
            f"Non-numeric distribution values: {detail}. "
            f"These cells were treated as unset.",
            stacklevel=2,
        )

    return Session(
        scenarios=scenarios,
        distributions=distributions,
        yield_column=yield_column,
    )


# ── File helpers ─────────────────────────────────────────────────────────

def read_session_file(filepath: str) -> Session:
    """Load a session file (UTF-8, BOM tolerated)."""
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"Session file not found: {filepath}")
    with open(filepath, 'r', encoding='utf-8-sig', newline='') as fh:
        return decode_session(fh.read())


def write_session_file(
    filepath: str,
    scenarios: Sequence[Scenario],
    distributions: Mapping[str, SparseScenarioDistribution],
) -> str:
    """Write a session file and return its path.

    The text is encoded before the file is opened, so a
    ``StructuralError`` leaves any existing file untouched.
    """
    text = encode_session(scenarios, distributions)
    with open(filepath, 'w', encoding='utf-8', newline='') as fh:
        fh.write(text)
    return filepath
