"""
Encodage ProjectDocument → bundle ZIP.

Contenu de l'archive (ordre fixe) :
  project.json                     document complet, assets en métadonnées
  manifest.json                    résumé d'export (versions, compteurs, sha256 de project.json)
  assets/<dossier>/<sha256>.<ext>  binaires adressés par contenu
  assets/data/stores.normalized.json + stores.csv   table de magasins
"""
import csv
import hashlib
import io
import json
import logging
import os
import zipfile
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.defaults import now_iso
from ..core.schemas import AssetMeta, ProjectDocument, StoreTable
from ..normalizer import dump_document
from .assets import asset_kind, asset_path, extension_for, hash_bytes, parse_data_url

log = logging.getLogger(__name__)

SCHEMA_VERSION = os.getenv("LP_SCHEMA_VERSION", "1.0.0")
APP_VERSION = os.getenv("LP_APP_VERSION", "0.1.0")

PROJECT_PATH = "project.json"
SUMMARY_PATH = "manifest.json"
STORES_JSON_PATH = "assets/data/stores.normalized.json"
STORES_CSV_PATH = "assets/data/stores.csv"

# horodatage constant : deux exports du même document sont identiques octet à octet
FIXED_ZIP_TIME = (1980, 1, 1, 0, 0, 0)

_PATH_KEYS = {"path", "filepath", "src", "imagepath", "fontpath", "relativepath", "url"}

# champs de suivi recopiés seulement s'ils existent dans le document
_OPTIONAL_KEYS = (
    "schemaVersion", "appVersion", "globalSettings",
    "pageBaseStyle", "storeListSpec", "themeSpec", "animationRegistry",
)


@dataclass
class EncodeOptions:
    include_summary: bool = True
    include_store_files: bool = True
    schema_version: str = SCHEMA_VERSION
    exported_at: Optional[str] = None


@dataclass
class BundleContents:
    entries: Dict[str, bytes] = field(default_factory=dict)
    asset_meta: List[AssetMeta] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)


# ── Nettoyage du document ───────────────────────────────────────────────────

def strip_data_urls(value: Any) -> Any:
    """Toute chaîne `data:` dans l'arbre devient "" (les binaires vivent dans assets/)."""
    if isinstance(value, list):
        return [strip_data_urls(v) for v in value]
    if isinstance(value, dict):
        return {
            k: "" if isinstance(v, str) and v.startswith("data:") else strip_data_urls(v)
            for k, v in value.items()
        }
    return value


def _is_path_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in _PATH_KEYS or lowered.endswith(("path", "src", "url"))


def normalize_paths(value: Any) -> Any:
    """Séparateurs `\\` → `/` dans les clés de type chemin / url / src."""
    if isinstance(value, list):
        return [normalize_paths(v) for v in value]
    if isinstance(value, dict):
        result = {}
        for key, entry in value.items():
            entry = normalize_paths(entry)
            if isinstance(entry, str) and "\\" in entry and _is_path_key(key):
                entry = entry.replace("\\", "/")
            result[key] = entry
        return result
    return value


# ── Assets ──────────────────────────────────────────────────────────────────

def _encode_assets(doc: ProjectDocument, contents: BundleContents) -> None:
    for asset_id, record in (doc.assets or {}).items():
        if not record.data:
            log.warning("asset %s ignoré : données vides", asset_id)
            contents.warnings.append({"assetId": asset_id, "message": "données d'asset vides"})
            continue
        parsed = parse_data_url(record.data)
        if parsed is None:
            log.warning("asset %s ignoré : data URL invalide", asset_id)
            contents.warnings.append({"assetId": asset_id, "message": "data URL invalide"})
            continue
        mime, data = parsed
        digest = hash_bytes(data)
        kind = asset_kind(mime, record.filename)
        path = asset_path(kind, digest, extension_for(record.filename, mime))
        contents.entries[path] = data
        contents.asset_meta.append(AssetMeta(
            id=asset_id,
            filename=record.filename,
            path=path,
            kind=kind,
            mime_type=mime,
            size=len(data),
            hash=digest,
        ))


# ── Fichiers JSON ───────────────────────────────────────────────────────────

def build_project_file(doc: ProjectDocument, asset_meta: List[AssetMeta], options: EncodeOptions) -> Dict[str, Any]:
    body = normalize_paths(strip_data_urls(dump_document(doc)))
    project_file = {
        "meta": body["meta"],
        "settings": body["settings"],
        "sections": body["sections"],
        "assets": [m.to_json_dict() for m in asset_meta],
    }
    for key in _OPTIONAL_KEYS:
        if key in body:
            project_file[key] = body[key]
    return project_file


def build_summary(project_json: str, project_file: Dict[str, Any], options: EncodeOptions) -> Dict[str, Any]:
    return {
        "schemaVersion": project_file.get("schemaVersion") or options.schema_version,
        "appVersion": project_file.get("appVersion") or APP_VERSION,
        "exportedAt": options.exported_at or now_iso(),
        "assetCount": len(project_file["assets"]),
        "sectionCount": len(project_file["sections"]),
        "hash": hashlib.sha256(project_json.encode("utf-8")).hexdigest(),
    }


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def stores_to_csv(table: StoreTable) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(table.columns)
    for row in table.rows:
        writer.writerow([row.get(column, "") for column in table.columns])
    return buf.getvalue()


# ── Point d'entrée ──────────────────────────────────────────────────────────

def build_bundle(doc: ProjectDocument, options: Optional[EncodeOptions] = None) -> BundleContents:
    """Entrées de l'archive (chemin → octets) sans encore écrire le ZIP."""
    options = options or EncodeOptions()
    contents = BundleContents()
    _encode_assets(doc, contents)

    project_file = build_project_file(doc, contents.asset_meta, options)
    project_json = _dumps(project_file)
    head: List[Tuple[str, bytes]] = [(PROJECT_PATH, project_json.encode("utf-8"))]
    if options.include_summary:
        summary = build_summary(project_json, project_file, options)
        head.append((SUMMARY_PATH, _dumps(summary).encode("utf-8")))

    if options.include_store_files and doc.store_table is not None:
        contents.entries[STORES_JSON_PATH] = _dumps(doc.store_table.to_json_dict()).encode("utf-8")
        contents.entries[STORES_CSV_PATH] = stores_to_csv(doc.store_table).encode("utf-8")

    ordered = dict(head)
    for path in sorted(contents.entries):
        ordered[path] = contents.entries[path]
    contents.entries = ordered
    return contents


def write_zip(entries: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            info = zipfile.ZipInfo(name, date_time=FIXED_ZIP_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, data)
    return buf.getvalue()


def encode(doc: ProjectDocument, options: Optional[EncodeOptions] = None) -> bytes:
    contents = build_bundle(doc, options)
    log.info(
        "bundle encodé : %d sections, %d assets, %d avertissements",
        len(doc.sections), len(contents.asset_meta), len(contents.warnings),
    )
    return write_zip(contents.entries)
