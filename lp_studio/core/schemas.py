"""
Schémas Pydantic du ProjectDocument.
Structure : ProjectDocument → Section → (data, content, style, sectionCardStyle)

Tous les modèles héritent de CoercedModel : une entrée JSON étrangère est
coercée champ par champ, jamais rejetée. Les valeurs par défaut déclarées ici
sont la seule source de vérité (voir core/defaults.py pour les constructeurs).
"""
import mimetypes
from typing import Annotated, Any, Dict, List, Literal, Optional, Union, get_args

from pydantic import Field

from .card_style import SectionCardStyle
from .coerce import as_dict, new_id, non_blank, to_str
from .model import CamelModel, CoercedModel

TemplateType = Literal["coupon", "point", "quickchance", "target"]
AssetKind = Literal["image", "video", "font", "data", "other"]


# ── Style de section ────────────────────────────────────────────────────────

class Padding(CoercedModel):
    t: float = 32
    r: float = 24
    b: float = 32
    l: float = 24


class Typography(CoercedModel):
    font_family: str = "system-ui"
    font_size: float = 16
    font_weight: float = 400
    line_height: float = 1.6
    letter_spacing: float = 0
    text_align: Literal["left", "center", "right"] = "left"
    text_color: str = "#111111"


class Background(CoercedModel):
    type: Literal["solid", "gradient"] = "solid"
    color1: str = "#ffffff"
    color2: str = "#f1f5f9"


class Border(CoercedModel):
    enabled: bool = False
    width: float = 1
    color: str = "#e5e7eb"


class Layout(CoercedModel):
    padding: Padding = Field(default_factory=Padding)
    max_width: float = 1200
    align: Literal["left", "center"] = "center"
    radius: float = 12
    full_width: bool = False
    min_height: float = 0


class SectionStyle(CoercedModel):
    typography: Typography = Field(default_factory=Typography)
    background: Background = Field(default_factory=Background)
    border: Border = Field(default_factory=Border)
    shadow: Literal["none", "sm", "md"] = "none"
    layout: Layout = Field(default_factory=Layout)
    custom_css: str = ""


# ── Contenu riche ───────────────────────────────────────────────────────────

class Callout(CoercedModel):
    enabled: bool = False
    variant: Literal["note", "warn", "info"] = "note"
    bg: bool = True
    border: bool = True
    bg_color: Optional[str] = None
    border_color: Optional[str] = None
    radius: float = 12
    padding: Literal["sm", "md", "lg"] = "md"
    shadow: Literal["none", "sm", "md"] = "none"

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        raw["enabled"] = bool(raw.get("enabled"))
        for key in ("bgColor", "borderColor"):
            if not non_blank(raw.get(key)):
                raw.pop(key, None)
        return raw


class LineMarks(CoercedModel):
    bold: Optional[bool] = None
    color: Optional[str] = None
    size: Optional[float] = None
    bullet: Optional[Literal["none", "disc"]] = None
    text_align: Optional[Literal["left", "center", "right"]] = None
    callout: Optional[Callout] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(raw.get("color"), str):
            raw.pop("color", None)
        return raw

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class Animation(CoercedModel):
    preset: Literal["fade", "slideUp", "zoom"] = "fade"
    duration_ms: float = 400
    delay_ms: float = 0


class PrimaryLine(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("line"))
    text: str = ""
    marks: Optional[LineMarks] = None
    animation: Optional[Animation] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(raw.get("text"), str):
            raw.pop("text", None)
        marks = raw.get("marks")
        if isinstance(marks, dict) and LineMarks.model_validate(marks).is_empty():
            raw.pop("marks")
        return raw


class TextItem(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("item"))
    type: Literal["text"] = "text"
    lines: List[PrimaryLine] = Field(default_factory=list)
    animation: Optional[Animation] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        lines = raw.get("lines")
        if isinstance(lines, list):
            raw["lines"] = [{"text": line} if isinstance(line, str) else line for line in lines]
        return raw


class TitleItem(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("item"))
    type: Literal["title"] = "title"
    text: str = ""
    marks: Optional[LineMarks] = None
    animation: Optional[Animation] = None


class ImageEntry(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("img"))
    src: str = ""
    alt: str = ""
    animation: Optional[Animation] = None


class ImageItem(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("item"))
    type: Literal["image"] = "image"
    images: List[ImageEntry] = Field(default_factory=list)
    layout: Optional[Literal[
        "auto", "vertical", "horizontal", "columns2", "columns3", "grid", "slideshow",
    ]] = None
    animation: Optional[Animation] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        images = raw.get("images")
        if isinstance(images, list):
            raw["images"] = [
                image for image in images
                if isinstance(image, dict) and to_str(image.get("src")).strip()
            ]
        return raw


class ButtonTarget(CoercedModel):
    kind: Literal["url", "section"] = "url"
    url: Optional[str] = None
    section_id: Optional[str] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        if raw.get("kind") == "section" and isinstance(raw.get("sectionId"), str):
            return {"kind": "section", "sectionId": raw["sectionId"]}
        if raw.get("kind") == "url" and isinstance(raw.get("url"), str):
            return {"kind": "url", "url": raw["url"]}
        return {"kind": "url", "url": ""}


class ButtonStyle(CoercedModel):
    preset_id: Optional[str] = None
    align: Optional[Literal["left", "center", "right"]] = None
    full_width: Optional[bool] = None
    width: Optional[float] = None
    radius: Optional[float] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    border_color: Optional[str] = None
    border_width: Optional[float] = None


class ButtonItem(CoercedModel):
    id: str = Field(default_factory=lambda: new_id("item"))
    type: Literal["button"] = "button"
    label: str = ""
    target: ButtonTarget = Field(default_factory=ButtonTarget)
    variant: Literal["primary", "secondary"] = "primary"
    style: Optional[ButtonStyle] = None
    animation: Optional[Animation] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        style = raw.get("style")
        if isinstance(style, dict) and not ButtonStyle.model_validate(style).model_dump(exclude_none=True):
            raw.pop("style")
        return raw


ContentItem = Annotated[
    Union[TextItem, TitleItem, ImageItem, ButtonItem],
    Field(discriminator="type"),
]

_ITEM_TYPES = ("text", "title", "image", "button")


class StoreCsv(CoercedModel):
    headers: List[str] = Field(default_factory=list)
    rows: List[Dict[str, str]] = Field(default_factory=list)
    imported_at: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        rows = raw.get("rows")
        if isinstance(rows, list):
            raw["rows"] = [
                {to_str(k): to_str(v) for k, v in row.items()} if isinstance(row, dict) else {}
                for row in rows
            ]
        if not isinstance(raw.get("stats"), dict) and raw.get("rows"):
            raw["stats"] = {"totalRows": len(raw["rows"])}
        return raw


class StoreLabel(CoercedModel):
    column_key: str = ""
    display_name: str = ""
    color: str = "#CBD5F5"
    true_text: str = "ON"
    false_text: str = "OFF"
    value_display: Literal["toggle", "raw"] = "toggle"
    show_as_filter: bool = True
    show_as_badge: bool = True

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("displayName", "color", "trueText", "falseText"):
            if not non_blank(raw.get(key)):
                raw.pop(key, None)
        if "displayName" not in raw and isinstance(raw.get("columnKey"), str):
            raw["displayName"] = raw["columnKey"]
        return raw


class SectionContent(CoercedModel):
    title: str = ""
    items: List[ContentItem] = Field(default_factory=list)
    store_csv: Optional[StoreCsv] = None
    store_labels: Optional[Dict[str, StoreLabel]] = None
    store_filters: Optional[Dict[str, bool]] = None
    store_filter_operator: Optional[Literal["AND", "OR"]] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        items = raw.get("items")
        normalized = []
        if isinstance(items, list):
            for item in items:
                if not isinstance(item, dict):
                    continue
                entry = dict(item)
                if entry.get("type") not in _ITEM_TYPES:
                    entry["type"] = "text"
                normalized.append(entry)
        if not normalized:
            normalized = _legacy_items(raw)
        raw["items"] = normalized

        labels = raw.get("storeLabels")
        if isinstance(labels, dict):
            raw["storeLabels"] = {
                key: {"columnKey": key, **value}
                for key, value in labels.items() if isinstance(value, dict)
            }
        filters = raw.get("storeFilters")
        if isinstance(filters, dict):
            raw["storeFilters"] = {key: bool(value) for key, value in filters.items()}
        if "storeFilterOperator" in raw:
            raw["storeFilterOperator"] = "OR" if raw["storeFilterOperator"] == "OR" else "AND"
        for key in ("primaryText", "primaryLines", "image", "button"):
            raw.pop(key, None)
        return raw


def _legacy_items(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Ancienne forme plate (primaryText / primaryLines / image / button) → items."""
    items: List[Dict[str, Any]] = []
    lines = raw.get("primaryLines")
    if not (isinstance(lines, list) and lines):
        text = to_str(raw.get("primaryText"))
        lines = [part.strip() for part in text.split("\n") if part.strip()]
    if lines:
        items.append({"type": "text", "lines": lines})

    image = as_dict(raw.get("image"))
    src = to_str(image.get("src"))
    if src.strip():
        items.append({"type": "image", "images": [{"src": src, "alt": to_str(image.get("alt"))}]})

    button = as_dict(raw.get("button"))
    label = to_str(button.get("label"))
    href = to_str(button.get("href"))
    if label.strip() or href.strip():
        items.append({"type": "button", "label": label, "target": {"kind": "url", "url": href}})
    return items


# ── Section ─────────────────────────────────────────────────────────────────

class Section(CamelModel):
    """Bloc ordonné de la page. `data` ne contient que les clés de son type."""
    id: str
    type: str
    visible: bool = True
    locked: bool = False
    name: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    content: SectionContent = Field(default_factory=SectionContent)
    style: SectionStyle = Field(default_factory=SectionStyle)
    section_card_style: SectionCardStyle = Field(default_factory=SectionCardStyle)


# ── Table de magasins ──────────────────────────────────────────────────────

class CanonicalKeys(CoercedModel):
    store_id_key: str = "店舗ID"
    store_name_key: str = "店舗名"
    postal_code_key: str = "郵便番号"
    address_key: str = "住所"
    prefecture_key: str = "都道府県"

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        # "" compte comme absent : la clé canonique n'est jamais vide
        return {k: v for k, v in raw.items() if v not in ("", None)}

    def as_list(self) -> List[str]:
        return [
            self.store_id_key, self.store_name_key, self.postal_code_key,
            self.address_key, self.prefecture_key,
        ]


class StoreTable(CamelModel):
    columns: List[str] = Field(default_factory=list)
    extra_columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, str]] = Field(default_factory=list)
    canonical: CanonicalKeys = Field(default_factory=CanonicalKeys)


# ── Assets ──────────────────────────────────────────────────────────────────

DEFAULT_MIME = "application/octet-stream"


def asset_kind(mime: str, filename: str = "") -> str:
    """Famille d'asset déduite du type MIME (à défaut, de l'extension)."""
    if not mime or mime == DEFAULT_MIME:
        mime = mimetypes.guess_type(filename)[0] or ""
    if mime.startswith("image/"):
        return "image"
    if mime.startswith("video/"):
        return "video"
    if mime.startswith("font/") or "font" in mime:
        return "font"
    if mime:
        return "data"
    return "other"


class AssetMeta(CoercedModel):
    """Entrée `assets[]` d'un manifest riche ; id et path vides = entrée inutilisable."""
    id: str = ""
    filename: str = ""
    path: str = ""
    kind: AssetKind = "other"
    mime_type: Optional[str] = None
    size: Optional[int] = None
    hash: Optional[str] = None

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        if raw.get("kind") not in get_args(AssetKind):
            mime = to_str(raw.get("mimeType", raw.get("mime_type")))
            name = to_str(raw.get("filename")) or to_str(raw.get("path"))
            raw["kind"] = asset_kind(mime, name)
        return raw

    def is_usable(self) -> bool:
        return bool(self.id and self.path)


class AssetRecord(CamelModel):
    """Payload inline (data URL) — transitoire, pour le stockage local."""
    id: str
    filename: str = ""
    data: str = ""


# ── Document ────────────────────────────────────────────────────────────────

class ProjectMeta(CamelModel):
    project_name: str
    template_type: TemplateType = "coupon"
    version: str = "1.0"
    created_at: str
    updated_at: str


class ProjectDocument(CamelModel):
    meta: ProjectMeta
    settings: Dict[str, Any] = Field(default_factory=dict)
    sections: List[Section] = Field(default_factory=list)
    page_base_style: Optional[Dict[str, Any]] = None
    store_table: Optional[StoreTable] = None
    assets: Optional[Dict[str, AssetRecord]] = None
    schema_version: Optional[str] = None
    app_version: Optional[str] = None
    global_settings: Optional[Dict[str, Any]] = None
    asset_meta: Optional[List[AssetMeta]] = None
    store_list_spec: Optional[Dict[str, Any]] = None
    theme_spec: Optional[Dict[str, Any]] = None
    animation_registry: Optional[List[Any]] = None

    def section_of_type(self, section_type: str) -> Optional[Section]:
        return next((s for s in self.sections if s.type == section_type), None)


class ProjectRecord(CamelModel):
    """Enregistrement clé-valeur consommé par la persistance locale."""
    id: str
    data: ProjectDocument
    updated_at: int
