"""
Décodage d'un bundle ZIP → ProjectDocument.

Deux formes de manifest coexistent :
  - riche : `assets` est une liste de métadonnées, les binaires sont dans l'archive
  - plate : le document tel que l'éditeur le stocke (assets inline ou absents)
Une sonde de capacité choisit la forme ; les deux produisent un ParsedBundle.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.coerce import as_dict, string_map, to_str_list
from ..core.schemas import AssetMeta, CanonicalKeys, ProjectDocument, StoreTable
from ..errors import AssetResolutionWarning, FormatError
from ..normalizer import dump_document, normalize, normalize_store_table, split_asset_meta
from ..templates import ensure_required_sections
from .archive import ArchiveEntry, ArchiveHandle, load
from .assets import resolve

log = logging.getLogger(__name__)

MANIFEST_CANDIDATES = (
    "project.json",
    "manifest.json",
    "project.lp-project.json",
    "project/project.lp-project.json",
)
PROJECT_SUFFIX = ".lp-project.json"
STATIC_SITE_MARKER = "index.html"
STORES_NORMALIZED_PATH = "assets/data/stores.normalized.json"
LEGACY_STORES_PATH = "stores/stores.json"

# champs de suivi transmis tels quels au normaliseur (qui vérifie leur forme)
_PASSTHROUGH_KEYS = (
    "schemaVersion", "appVersion", "globalSettings", "storeListSpec", "themeSpec",
    "animationRegistry", "pageBaseStyle", "storeTable", "stores",
)


@dataclass
class ParsedBundle:
    """Forme intermédiaire commune aux deux chemins d'analyse."""
    document: Dict[str, Any]
    missing_assets: List[str] = field(default_factory=list)
    warnings: List[AssetResolutionWarning] = field(default_factory=list)


@dataclass
class DecodeResult:
    project: ProjectDocument
    missing_assets: List[str] = field(default_factory=list)
    warnings: List[AssetResolutionWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": dump_document(self.project),
            "missingAssets": list(self.missing_assets),
            "warnings": [w.to_dict() for w in self.warnings],
        }


# ── Manifest ────────────────────────────────────────────────────────────────

def find_manifest(archive: ArchiveHandle) -> Optional[ArchiveEntry]:
    for name in MANIFEST_CANDIDATES:
        entry = archive.file(name)
        if entry is not None:
            return entry
    fallback = next((n for n in archive.names() if n.endswith(PROJECT_SUFFIX)), None)
    return archive.file(fallback) if fallback else None


def _read_manifest(archive: ArchiveHandle) -> Any:
    entry = find_manifest(archive)
    if entry is None:
        if archive.file(STATIC_SITE_MARKER) is not None:
            raise FormatError("cette archive est un export de site statique, pas un bundle de projet")
        raise FormatError("aucun fichier projet JSON trouvé dans l'archive")
    text = entry.as_text()
    try:
        return json.loads(text)
    except ValueError as exc:
        raise FormatError(f"{entry.name} : JSON invalide ({exc})") from exc


def is_rich_shape(raw: Any) -> bool:
    """Sonde de capacité : un manifest riche liste ses assets."""
    return isinstance(raw, dict) and isinstance(raw.get("assets"), list)


# ── Analyse ─────────────────────────────────────────────────────────────────

def _rejected_warning(meta: AssetMeta) -> AssetResolutionWarning:
    log.warning("métadonnée d'asset ignorée : id=%r path=%r", meta.id, meta.path)
    return AssetResolutionWarning(
        asset_id=meta.id, path=meta.path, message="métadonnée d'asset sans id ou sans chemin",
    )


def _parse_rich(raw: Dict[str, Any], archive: ArchiveHandle) -> ParsedBundle:
    asset_meta, rejected = split_asset_meta(raw["assets"])
    resolution = resolve(archive, asset_meta)
    warnings = [_rejected_warning(meta) for meta in rejected] + resolution.warnings

    meta = raw.get("meta")
    if not isinstance(meta, dict):
        app_version = raw.get("appVersion")
        meta = {"version": app_version} if isinstance(app_version, str) else {}

    sections = raw.get("sections")
    document = {
        "meta": meta,
        "settings": as_dict(raw.get("settings")),
        "sections": [] if sections is None else sections,
        "assets": {key: record.to_json_dict() for key, record in resolution.assets.items()},
    }
    for key in _PASSTHROUGH_KEYS:
        if key in raw:
            document[key] = raw[key]
    return ParsedBundle(document, resolution.missing, warnings)


def _parse_flat(raw: Any) -> ParsedBundle:
    return ParsedBundle(raw)


# ── Tables de magasins ─────────────────────────────────────────────────────

def _read_json_entry(archive: ArchiveHandle, path: str) -> Optional[Any]:
    entry = archive.file(path)
    if entry is None:
        return None
    text = entry.as_text()
    try:
        return json.loads(text)
    except ValueError as exc:
        log.warning("%s ignoré : JSON invalide (%s)", path, exc)
        return None


def _read_normalized_stores(archive: ArchiveHandle) -> Optional[StoreTable]:
    payload = _read_json_entry(archive, STORES_NORMALIZED_PATH)
    if payload is None:
        return None
    if not (isinstance(payload, dict)
            and isinstance(payload.get("columns"), list)
            and isinstance(payload.get("rows"), list)):
        log.warning("%s ignoré : columns/rows absents", STORES_NORMALIZED_PATH)
        return None
    return normalize_store_table(payload)


def build_legacy_store_table(payload: Dict[str, Any]) -> StoreTable:
    """stores/stores.json (canonicalKeys, columns, rows[].raw) → StoreTable."""
    canonical = CanonicalKeys.model_validate(payload.get("canonicalKeys"))
    columns = to_str_list(payload.get("columns")) or canonical.as_list()
    rows = payload.get("rows")
    records = [string_map(as_dict(row).get("raw")) for row in rows] if isinstance(rows, list) else []
    return normalize_store_table({
        "columns": columns,
        "extraColumns": columns[len(canonical.as_list()):],
        "rows": records,
        "canonical": canonical.to_json_dict(),
    })


def _read_legacy_stores(archive: ArchiveHandle) -> Optional[StoreTable]:
    payload = _read_json_entry(archive, LEGACY_STORES_PATH)
    if not isinstance(payload, dict):
        return None
    return build_legacy_store_table(payload)


# ── Point d'entrée ──────────────────────────────────────────────────────────

def decode(archive_bytes: bytes) -> DecodeResult:
    """
    Archive → DecodeResult(project, missing_assets, warnings).
    FormatError si l'archive est illisible ou sans manifest ; SchemaError si
    le manifest n'a pas la forme d'un projet.
    """
    archive = load(archive_bytes)
    raw = _read_manifest(archive)

    rich = is_rich_shape(raw)
    parsed = _parse_rich(raw, archive) if rich else _parse_flat(raw)
    project = normalize(parsed.document)

    if rich:
        stores = _read_normalized_stores(archive)
        if stores is not None:
            project = project.model_copy(update={"store_table": stores})
    if project.store_table is None:
        stores = _read_legacy_stores(archive)
        if stores is not None:
            project = project.model_copy(update={"store_table": stores})

    project = ensure_required_sections(project)
    log.info(
        "bundle décodé (%s) : %d sections, %d assets, %d manquants",
        "riche" if rich else "plat", len(project.sections),
        len(project.assets or {}), len(parsed.missing_assets),
    )
    return DecodeResult(project, parsed.missing_assets, parsed.warnings)
