"""
Aperçu d'import de la table de magasins.

Vérifie les en-têtes obligatoires (présence puis ordre), valide les lignes,
groupe les doublons d'identifiant, compte les labels vrais/faux des colonnes
supplémentaires et prépare un échantillon d'aperçu. Rien n'est fatal : une
entrée vide donne des compteurs à zéro.
"""
import os
import unicodedata
from typing import Callable, Dict, List, Optional

from pydantic import Field

from ..core.model import CamelModel

PREVIEW_SIZE = int(os.getenv("LP_PREVIEW_SIZE", "12"))

TRUTHY_TOKENS = {"対象", "〇", "○", "はい", "yes", "y", "true", "1", "on"}


def is_truthy_flag(value: str) -> bool:
    normalized = unicodedata.normalize("NFKC", value or "").strip().lower()
    return bool(normalized) and normalized in TRUTHY_TOKENS


# ── Modèles ─────────────────────────────────────────────────────────────────

class ImportSummary(CamelModel):
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    duplicate_id_count: int = 0
    duplicate_row_count: int = 0
    missing_required_headers: List[str] = Field(default_factory=list)
    header_order_valid: bool = True


class LabelStat(CamelModel):
    column: str
    truthy_count: int = 0
    falsey_count: int = 0
    total_count: int = 0


class DuplicateEntry(CamelModel):
    store_id: str
    count: int
    sample_name: str = ""
    sample_address: str = ""
    rows: List[Dict[str, str]] = Field(default_factory=list)


class ImportPreview(CamelModel):
    summary: ImportSummary
    label_stats: List[LabelStat] = Field(default_factory=list)
    duplicates: List[DuplicateEntry] = Field(default_factory=list)
    preview_headers: List[str] = Field(default_factory=list)
    preview_rows: List[List[str]] = Field(default_factory=list)
    invalid_row_indices: List[int] = Field(default_factory=list)


# ── Calcul ──────────────────────────────────────────────────────────────────

def _cell(row: Dict[str, str], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


def _label_stats(columns: List[str], rows: List[Dict[str, str]],
                 is_truthy: Callable[[str], bool]) -> List[LabelStat]:
    stats = []
    for column in columns:
        truthy = 0
        for row in rows:
            value = _cell(row, column).strip()
            if value and is_truthy(value):
                truthy += 1
        stats.append(LabelStat(
            column=column,
            truthy_count=truthy,
            falsey_count=len(rows) - truthy,
            total_count=len(rows),
        ))
    return stats


def _duplicates(rows: List[Dict[str, str]], required: List[str]) -> List[DuplicateEntry]:
    id_key = required[0] if required else ""
    name_key = required[1] if len(required) > 1 else ""
    address_key = required[3] if len(required) > 3 else ""

    groups: Dict[str, List[Dict[str, str]]] = {}
    for row in rows:
        store_id = _cell(row, id_key).strip()
        if store_id:
            groups.setdefault(store_id, []).append(row)

    return [
        DuplicateEntry(
            store_id=store_id,
            count=len(entries),
            sample_name=_cell(entries[0], name_key) if name_key else "",
            sample_address=_cell(entries[0], address_key) if address_key else "",
            rows=entries,
        )
        for store_id, entries in groups.items() if len(entries) > 1
    ]


def build_import_preview(
    headers: List[str],
    rows: List[Dict[str, str]],
    required_headers: List[str],
    *,
    preview_size: int = PREVIEW_SIZE,
    preview_headers: Optional[List[str]] = None,
    is_truthy: Callable[[str], bool] = is_truthy_flag,
) -> ImportPreview:
    missing = [h for h in required_headers if h not in headers]
    order_valid = all(
        index < len(headers) and headers[index] == header
        for index, header in enumerate(required_headers)
    )

    valid = 0
    invalid_indices: List[int] = []
    if not missing and order_valid:
        for index, row in enumerate(rows):
            if all(_cell(row, h).strip() for h in required_headers):
                valid += 1
            else:
                invalid_indices.append(index)
        invalid = len(invalid_indices)
    else:
        # en-têtes défectueux : toutes les lignes sont invalides, sans détail par ligne
        invalid = len(rows)

    duplicates = _duplicates(rows, required_headers)
    shown = preview_headers or headers

    return ImportPreview(
        summary=ImportSummary(
            total_rows=len(rows),
            valid_rows=valid,
            invalid_rows=invalid,
            duplicate_id_count=len(duplicates),
            duplicate_row_count=sum(d.count for d in duplicates),
            missing_required_headers=missing,
            header_order_valid=order_valid,
        ),
        label_stats=_label_stats(headers[len(required_headers):], rows, is_truthy),
        duplicates=duplicates,
        preview_headers=list(shown),
        preview_rows=[[_cell(row, h) for h in shown] for row in rows[:max(0, preview_size)]],
        invalid_row_indices=invalid_indices,
    )
