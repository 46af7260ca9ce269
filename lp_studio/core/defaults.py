"""
Constructeurs par défaut — un par entité.

Chaque point du code qui a besoin d'un contenu ou de réglages
par défaut passe par ici ; les valeurs elles-mêmes vivent dans core/schemas.py.
"""
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import Field

from .coerce import as_dict, to_choice, to_str
from .model import CoercedModel
from .schemas import SectionContent

DEFAULT_PROJECT_NAME = "キャンペーンLP"
DEFAULT_PROJECT_VERSION = "1.0"

TEMPLATE_TYPES = ("coupon", "point", "quickchance", "target")
BACKGROUND_SPEC_TYPES = {"solid", "gradient", "pattern", "layers", "image", "video", "preset"}


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_content(**overrides: Any) -> SectionContent:
    """Un item texte vide, sauf si `items` est fourni."""
    raw = {"items": [{"type": "text", "lines": [{"text": ""}]}]}
    raw.update(overrides)
    return SectionContent.model_validate(raw)


# ── Réglages de page ────────────────────────────────────────────────────────

class PageMetaPresets(CoercedModel):
    append_au_pay_title: bool = False
    ogp_from_mv: bool = False
    inject_campaign_period: bool = False

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        return {key: bool(value) for key, value in raw.items()}


class PageMeta(CoercedModel):
    title: str = ""
    description: str = ""
    favicon_url: str = ""
    favicon_asset_id: str = ""
    ogp_image_url: str = ""
    ogp_image_asset_id: str = ""
    ogp_title: str = ""
    ogp_description: str = ""
    presets: PageMetaPresets = Field(default_factory=PageMetaPresets)

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        # seules les vraies chaînes sont conservées
        return {
            key: value for key, value in raw.items()
            if key == "presets" or isinstance(value, str)
        }


def _default_background() -> Dict[str, Any]:
    return {"type": "solid", "color": "#ffffff"}


def is_background_spec(value: Any) -> bool:
    return isinstance(value, dict) and value.get("type") in BACKGROUND_SPEC_TYPES


def default_settings() -> Dict[str, Any]:
    return normalize_settings({})


def normalize_settings(raw: Any) -> Dict[str, Any]:
    """Sac clé/valeur ouvert ; `backgrounds` et `pageMeta` toujours complets."""
    settings = as_dict(raw)
    backgrounds = as_dict(settings.get("backgrounds"))
    page = backgrounds.get("page")
    mv = backgrounds.get("mv")
    settings["backgrounds"] = {
        "page": dict(page) if is_background_spec(page) else _default_background(),
        "mv": dict(mv) if is_background_spec(mv) else _default_background(),
    }
    settings["pageMeta"] = PageMeta.model_validate(settings.get("pageMeta")).to_json_dict()
    return settings


def normalize_meta(raw: Dict[str, Any], now: str) -> Dict[str, Any]:
    """meta brute → champs ProjectMeta (chaînes vides ou absentes → défauts)."""
    return {
        "projectName": to_str(raw.get("projectName")) or DEFAULT_PROJECT_NAME,
        "templateType": to_choice(raw.get("templateType"), TEMPLATE_TYPES, "coupon"),
        "version": to_str(raw.get("version")) or DEFAULT_PROJECT_VERSION,
        "createdAt": to_str(raw.get("createdAt")) or now,
        "updatedAt": to_str(raw.get("updatedAt")) or now,
    }
