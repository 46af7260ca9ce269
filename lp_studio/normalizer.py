"""
Normaliseur de schéma — JSON quelconque → ProjectDocument canonique.

Ne lève SchemaError que dans trois cas : l'entrée n'est pas un objet, `meta`
manque, `sections` n'est pas une liste. Tout le reste se dégrade en défauts.
normalize(dump_document(normalize(x))) == normalize(x).
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from .core.coerce import as_dict, string_map, to_str, to_str_list
from .core.defaults import normalize_meta, normalize_settings, now_iso
from .core.schemas import (
    AssetMeta, AssetRecord, CanonicalKeys, ProjectDocument, ProjectMeta, Section, StoreTable,
)
from .errors import SchemaError
from .sections import normalize_section

log = logging.getLogger(__name__)

CANONICAL_COLUMN_COUNT = 5

# clés de suivi recopiées seulement si leur forme est correcte
_STRING_FIELDS = ("schemaVersion", "appVersion")
_DICT_FIELDS = ("globalSettings", "storeListSpec", "themeSpec", "pageBaseStyle")


def normalize(raw: Any) -> ProjectDocument:
    if not isinstance(raw, dict):
        raise SchemaError("fichier projet invalide : un objet JSON est attendu")
    meta = raw.get("meta")
    if not isinstance(meta, dict):
        raise SchemaError("fichier projet invalide : méta-informations absentes")
    sections = raw.get("sections")
    if not isinstance(sections, list):
        raise SchemaError("fichier projet invalide : liste de sections absente")

    now = now_iso()
    store_raw = raw.get("storeTable") if "storeTable" in raw else raw.get("stores")
    document: Dict[str, Any] = {
        "meta": ProjectMeta.model_validate(normalize_meta(meta, now)),
        "settings": normalize_settings(raw.get("settings")),
        "sections": unique_section_ids([normalize_section(entry, index) for index, entry in enumerate(sections)]),
        "store_table": normalize_store_table(store_raw),
        "assets": normalize_asset_records(raw.get("assets")),
        "asset_meta": normalize_asset_meta(raw.get("assetMeta")),
    }
    for key in _STRING_FIELDS:
        if isinstance(raw.get(key), str):
            document[key] = raw[key]
    for key in _DICT_FIELDS:
        if isinstance(raw.get(key), dict):
            document[key] = raw[key]
    if isinstance(raw.get("animationRegistry"), list):
        document["animationRegistry"] = raw["animationRegistry"]

    log.debug("projet normalisé : %d sections", len(document["sections"]))
    return ProjectDocument.model_validate(document)


def dump_document(doc: ProjectDocument) -> Dict[str, Any]:
    """Forme JSON simple (camelCase, None omis)."""
    return doc.to_json_dict()


# ── Sections ────────────────────────────────────────────────────────────────

def unique_section_ids(sections: List[Section]) -> List[Section]:
    """Les ids en double reçoivent un suffixe `_<n>` ; la première occurrence garde le sien."""
    taken = {section.id for section in sections}
    seen = set()
    result = []
    for section in sections:
        if section.id in seen:
            suffix = 2
            while f"{section.id}_{suffix}" in taken:
                suffix += 1
            new_id = f"{section.id}_{suffix}"
            log.debug("id de section dupliqué %r → %r", section.id, new_id)
            section = section.model_copy(update={"id": new_id})
            taken.add(new_id)
        seen.add(section.id)
        result.append(section)
    return result


# ── Table de magasins ──────────────────────────────────────────────────────

def normalize_store_table(raw: Any) -> Optional[StoreTable]:
    """Colonnes / lignes en chaînes, clés canoniques par défaut ; None si absent."""
    if not isinstance(raw, dict):
        return None
    columns = to_str_list(raw.get("columns"))
    if isinstance(raw.get("extraColumns"), list):
        extra_columns = to_str_list(raw["extraColumns"])
    else:
        extra_columns = columns[CANONICAL_COLUMN_COUNT:]
    raw_rows = raw.get("rows")
    rows = [string_map(row) for row in raw_rows] if isinstance(raw_rows, list) else []

    known = set(columns)
    for row in rows:
        for key in row:
            if key not in known:
                columns.append(key)
                known.add(key)

    return StoreTable(
        columns=columns,
        extra_columns=extra_columns,
        rows=rows,
        canonical=CanonicalKeys.model_validate(raw.get("canonical")),
    )


# ── Assets ──────────────────────────────────────────────────────────────────

def normalize_asset_records(raw: Any) -> Optional[Dict[str, AssetRecord]]:
    """
    Dictionnaire id → {id, filename, data} ; les entrées sans data sont ignorées.
    Aucun asset utilisable → None.
    """
    if not isinstance(raw, dict):
        return None
    records = {}
    for key, value in raw.items():
        entry = as_dict(value)
        if not isinstance(entry.get("data"), str):
            continue
        asset_id = to_str(entry.get("id")) or to_str(key)
        records[to_str(key)] = AssetRecord(
            id=asset_id,
            filename=to_str(entry.get("filename")),
            data=entry["data"],
        )
    return records or None


def split_asset_meta(raw: List[Any]) -> Tuple[List[AssetMeta], List[AssetMeta]]:
    """(utilisables, rejetées) ; une entrée sans id ou sans chemin est rejetée."""
    kept: List[AssetMeta] = []
    rejected: List[AssetMeta] = []
    for entry in raw:
        meta = AssetMeta.model_validate(entry)
        if meta.is_usable():
            kept.append(meta)
        else:
            log.debug("métadonnée d'asset rejetée : id=%r path=%r", meta.id, meta.path)
            rejected.append(meta)
    return kept, rejected


def normalize_asset_meta(raw: Any) -> Optional[List[AssetMeta]]:
    if not isinstance(raw, list):
        return None
    return split_asset_meta(raw)[0]
