"""
Magasin de contenu des assets.

Un asset vit sous deux formes :
  - dans le document : data URL inline (AssetRecord.data)
  - dans l'archive   : binaire adressé par contenu, assets/<dossier>/<sha256>.<ext>
"""
import base64
import binascii
import hashlib
import logging
import mimetypes
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote_to_bytes

from ..core.schemas import DEFAULT_MIME, AssetMeta, AssetRecord, asset_kind
from ..errors import AssetResolutionWarning
from .archive import ArchiveHandle

log = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*),(?P<payload>.*)$", re.DOTALL)
_EXTENSION_RE = re.compile(r"\.([a-z0-9]+)$", re.IGNORECASE)

_FOLDERS = {
    "image": "assets/images",
    "video": "assets/videos",
    "font": "assets/fonts",
    "data": "assets/data",
}


# ── Primitives ──────────────────────────────────────────────────────────────

def hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def normalize_path(path: str) -> str:
    """Séparateurs `\\` → `/`, préfixes `./` et `/` retirés."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def parse_data_url(value: str) -> Optional[Tuple[str, bytes]]:
    """data:<mime>[;base64],<payload> → (mime, octets), None si invalide."""
    match = _DATA_URL_RE.match(value or "")
    if not match:
        return None
    mime = match.group("mime") or DEFAULT_MIME
    payload = match.group("payload")
    if ";base64" in match.group("params"):
        try:
            return mime, base64.b64decode(payload, validate=True)
        except binascii.Error:
            return None
    return mime, unquote_to_bytes(payload)


def to_data_url(mime: str, data: bytes) -> str:
    return f"data:{mime or DEFAULT_MIME};base64,{base64.b64encode(data).decode('ascii')}"


def extension_for(filename: str, mime: str) -> str:
    match = _EXTENSION_RE.search(filename or "")
    if match:
        return match.group(1).lower()
    parts = (mime or "").split("/")
    return parts[1].lower() if len(parts) > 1 and parts[1] else "bin"


def asset_folder(kind: str) -> str:
    return _FOLDERS.get(kind, "assets/data")


def asset_path(kind: str, digest: str, extension: str) -> str:
    return f"{asset_folder(kind)}/{digest}.{extension}"


# ── Résolution (archive → document) ─────────────────────────────────────────

@dataclass
class AssetResolution:
    assets: Dict[str, AssetRecord] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
    warnings: List[AssetResolutionWarning] = field(default_factory=list)


def resolve(archive: ArchiveHandle, asset_meta_list: List[AssetMeta]) -> AssetResolution:
    """Chaque métadonnée → data URL inline ; les entrées absentes sont signalées, pas fatales."""
    result = AssetResolution()
    for meta in asset_meta_list:
        path = normalize_path(meta.path)
        entry = archive.file(path)
        if entry is None:
            log.warning("asset %s introuvable dans l'archive (%s)", meta.id, path)
            result.missing.append(meta.id)
            result.warnings.append(AssetResolutionWarning(asset_id=meta.id, path=path))
            continue
        mime = meta.mime_type or mimetypes.guess_type(meta.filename or path)[0] or DEFAULT_MIME
        result.assets[meta.id] = AssetRecord(
            id=meta.id,
            filename=meta.filename,
            data=to_data_url(mime, entry.as_bytes()),
        )
    return result
