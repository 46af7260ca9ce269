"""
rankingTable et guide d'historique de paiement.

Les colonnes acceptent des chaînes ou des objets {key, label} ; les lignes
des tableaux ou des objets {id, values} (legacy : {label, value}). Chaque
ligne est ramenée au nombre de colonnes.
"""
from typing import Any, Dict, List, Literal

from pydantic import Field

from ..core.coerce import as_dict, to_str, to_str_list, to_str_or
from ..core.model import CoercedModel
from .base import SectionData


class RankingHeaders(CoercedModel):
    rank: str = "順位"
    label: str = "項目"
    value: str = "決済金額"


class RankingColumn(CoercedModel):
    key: str = ""
    label: str = ""


class RankingRow(CoercedModel):
    id: str = ""
    values: List[str] = Field(default_factory=list)


class RankingTableStyle(CoercedModel):
    header_bg: str = "#f8fafc"
    header_text: str = "#0f172a"
    cell_bg: str = "#ffffff"
    cell_text: str = "#0f172a"
    border: str = "#e2e8f0"
    rank_bg: str = "#e2e8f0"
    rank_text: str = "#0f172a"
    top1_bg: str = "#f59e0b"
    top2_bg: str = "#cbd5f5"
    top3_bg: str = "#fb923c"
    period_label_bg: str = "#f1f5f9"
    period_label_text: str = "#0f172a"


def _fit(values: List[str], width: int) -> List[str]:
    """Tronque ou complète par "" jusqu'à `width` cellules."""
    return values[:width] + [""] * max(0, width - len(values))


def _reshape_columns(raw_columns: Any, headers: RankingHeaders) -> List[Dict[str, str]]:
    columns = []
    for index, col in enumerate(raw_columns if isinstance(raw_columns, list) else [], start=1):
        if isinstance(col, dict):
            key, label = to_str(col.get("key")), to_str(col.get("label"))
        else:
            key, label = "", to_str(col)
        columns.append({"key": key or f"col_{index}", "label": label or f"列{index}"})
    if not columns:
        columns = [
            {"key": "label", "label": headers.label},
            {"key": "value", "label": headers.value},
        ]
    return columns


def _reshape_rows(raw_rows: Any, width: int) -> List[Dict[str, Any]]:
    rows = []
    for index, row in enumerate(raw_rows if isinstance(raw_rows, list) else [], start=1):
        if isinstance(row, list):
            rows.append({"id": f"rank_{index}", "values": _fit(to_str_list(row), width)})
            continue
        entry = as_dict(row)
        if isinstance(entry.get("values"), list):
            values = to_str_list(entry["values"])
        else:
            values = [to_str(entry.get("label")), to_str(entry.get("value"))]
        rows.append({
            "id": to_str(entry.get("id")) or f"rank_{index}",
            "values": _fit(values, width),
        })
    return rows


class RankingTableData(SectionData):
    section_type = "rankingTable"
    title: str = "ランキング"
    subtitle: str = ""
    period: str = ""
    date: str = ""
    rank_label: str = "順位"
    headers: RankingHeaders = Field(default_factory=RankingHeaders)
    notes: List[str] = Field(default_factory=list)
    columns: List[RankingColumn] = Field(default_factory=list)
    rows: List[RankingRow] = Field(default_factory=list)
    table_style: RankingTableStyle = Field(default_factory=RankingTableStyle)

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        headers = RankingHeaders.model_validate(raw.get("headers"))
        rank_label = raw.get("rankLabel")
        if rank_label is None:
            rank_label = as_dict(raw.get("headers")).get("rank")
        raw["rankLabel"] = to_str_or(rank_label, "順位")
        raw["headers"] = headers.to_json_dict()
        raw["notes"] = to_str_list(raw.get("notes"), drop_empty=True)
        columns = _reshape_columns(raw.get("columns"), headers)
        raw["columns"] = columns
        raw["rows"] = _reshape_rows(raw.get("rows"), len(columns))
        return raw


class PaymentHistoryGuideData(SectionData):
    section_type = "paymentHistoryGuide"
    title: str = "決済履歴の確認方法"
    body: str = ""
    link_text: str = ""
    link_url: str = ""
    link_target_kind: Literal["url", "section"] = "url"
    link_section_id: str = ""
    link_suffix: str = ""
    alert: str = ""
    image_url: str = "/footer-defaults/img-02.png"
    image_alt: str = ""
    image_asset_id: str = ""
