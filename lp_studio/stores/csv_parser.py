"""Texte délimité (CSV) → en-têtes + lignes."""
import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List

BOM = "\ufeff"


@dataclass
class CsvParseResult:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


def _is_blank(row: List[str]) -> bool:
    return not row or (len(row) == 1 and not row[0].strip())


def parse_csv(text: str, delimiter: str = ",") -> CsvParseResult:
    """BOM retiré, fins de ligne CRLF / CR acceptées, lignes vides ignorées, cellules trimées."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    lines = [[cell.strip() for cell in row] for row in reader if not _is_blank(row)]
    if not lines:
        return CsvParseResult()
    return CsvParseResult(headers=lines[0], rows=lines[1:])


def decode_csv_bytes(data: bytes) -> str:
    """Octets d'upload → texte ; UTF-8 (BOM toléré), sinon Shift_JIS (exports Excel japonais)."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("cp932", errors="replace")


def rows_to_records(headers: List[str], rows: List[List[str]]) -> List[Dict[str, str]]:
    """Lignes-listes → dicts ; une ligne courte est complétée par ""."""
    return [
        {header: row[index] if index < len(row) else "" for index, header in enumerate(headers)}
        for row in rows
    ]
