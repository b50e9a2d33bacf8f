"""Read statement text (pasted or from a CSV/TSV export) into rows."""

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path

from ledgerflow.domain.errors import StatementParseError
from ledgerflow.domain.headers import detect_columns
from ledgerflow.logging_setup import get_logger

logger = get_logger(__name__)

HEADER_SCAN_LINES = 20
CANDIDATE_DELIMITERS = ",\t;|"
MIN_ROW_CELLS = 2


@dataclass(frozen=True)
class ParsedStatement:
    headers: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)


def detect_delimiter(line: str) -> str:
    """Guess the delimiter of a header line, defaulting to comma."""
    try:
        return csv.Sniffer().sniff(line, delimiters=CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return "\t" if line.count("\t") > line.count(",") else ","


def _split_line(line: str, delimiter: str) -> list[str]:
    return [cell.strip() for cell in next(csv.reader([line], delimiter=delimiter), [])]


def read_statement_text(text: str) -> ParsedStatement:
    """Parse statement text into a header row and header-keyed rows.

    The header is the first of the leading non-empty lines that has a date
    column; preamble lines above it (bank name, account number) are skipped.
    Data lines with fewer than two non-empty cells are skipped.

    Raises:
        StatementParseError: If no header or no data rows can be found. The
            exception keeps the original text for a retry.
    """
    original_text = text
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise StatementParseError("Statement text is empty", original_text)

    lines = text.splitlines()
    header_at = None
    delimiter = ","
    scanned = 0
    for line_num, line in enumerate(lines):
        if not line.strip():
            continue
        scanned += 1
        if scanned > HEADER_SCAN_LINES:
            break
        delimiter = detect_delimiter(line)
        if detect_columns(_split_line(line, delimiter)).date is not None:
            header_at = line_num
            break

    if header_at is None:
        raise StatementParseError(
            "Could not find a header row with a date column in the statement text",
            original_text,
        )

    reader = csv.reader(io.StringIO("\n".join(lines[header_at:])), delimiter=delimiter)
    headers = [cell.strip() for cell in next(reader)]
    rows = []
    for cells in reader:
        cells = [cell.strip() for cell in cells]
        if sum(1 for cell in cells if cell) < MIN_ROW_CELLS:
            continue
        cells += [""] * (len(headers) - len(cells))
        rows.append(dict(zip(headers, cells)))

    if not rows:
        raise StatementParseError("The statement text has a header but no transaction rows", original_text)

    logger.debug("Read %d rows with delimiter %r and headers %s", len(rows), delimiter, headers)
    return ParsedStatement(headers=headers, rows=rows)


def read_statement_file(path: str | Path) -> ParsedStatement:
    """Read a CSV/TSV statement export.

    Raises:
        FileNotFoundError: If the file does not exist
        StatementParseError: If the contents cannot be parsed
    """
    statement_path = Path(path)
    if not statement_path.exists():
        raise FileNotFoundError(f"Statement file not found: {path}")
    with open(statement_path, "r", encoding="utf-8-sig", newline="") as f:
        return read_statement_text(f.read())
