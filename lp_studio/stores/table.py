"""Import CSV → StoreTable canonique (cinq colonnes réservées + colonnes de labels)."""
from typing import Dict, List

from ..core.schemas import CanonicalKeys, StoreTable
from ..normalizer import CANONICAL_COLUMN_COUNT, normalize_store_table
from .label_colors import unique_label_colors


def build_store_table(headers: List[str], records: List[Dict[str, str]]) -> StoreTable:
    """Les cinq premiers en-têtes deviennent les clés canoniques ; le reste, des colonnes de labels."""
    canonical = CanonicalKeys()
    if len(headers) >= CANONICAL_COLUMN_COUNT:
        canonical = CanonicalKeys.model_validate(dict(zip(
            ("storeIdKey", "storeNameKey", "postalCodeKey", "addressKey", "prefectureKey"),
            headers[:CANONICAL_COLUMN_COUNT],
        )))
    return normalize_store_table({
        "columns": headers,
        "extraColumns": headers[CANONICAL_COLUMN_COUNT:],
        "rows": records,
        "canonical": canonical.to_json_dict(),
    })


def store_label_defaults(table: StoreTable) -> Dict[str, Dict[str, str]]:
    """Réglages de labels initiaux (storeLabels) pour les colonnes supplémentaires."""
    colors = unique_label_colors(table.extra_columns)
    return {
        column: {"columnKey": column, "displayName": column, "color": colors[column]}
        for column in table.extra_columns
    }
