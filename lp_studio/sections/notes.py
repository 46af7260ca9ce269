"""Mentions légales, pied de page HTML et notes à onglets."""
from typing import Any, Dict, List, Literal

from pydantic import Field

from ..core.coerce import as_dict, to_str_list
from ..core.model import CoercedModel
from .base import SectionData, indexed_default

TargetKind = Literal["url", "section"]


class LegalNotesData(SectionData):
    section_type = "legalNotes"
    title: str = "注意事項"
    items: List[str] = Field(default_factory=list)
    text: str = ""
    bullet: Literal["disc", "none"] = "disc"
    note_width_pct: float = 100


class FooterHtmlData(SectionData):
    section_type = "footerHtml"
    html: str = ""
    footer_assets: Dict[str, str] = Field(default_factory=dict)


# ── tabbedNotes ─────────────────────────────────────────────────────────────

class TabNoteItem(CoercedModel):
    id: str = ""
    text: str = ""
    bullet: Literal["disc", "none"] = "disc"
    tone: Literal["normal", "accent"] = "normal"
    bold: bool = False
    sub_items: List[str] = Field(default_factory=list)

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        raw["bold"] = bool(raw.get("bold"))
        raw["subItems"] = to_str_list(raw.get("subItems"), drop_empty=True)
        return raw


class NoteTab(CoercedModel):
    id: str = ""
    label_top: str = ""
    label_bottom: str = "注意事項"
    intro: str = ""
    items: List[TabNoteItem] = Field(default_factory=list)
    footnote: str = ""
    cta_text: str = ""
    cta_link_text: str = ""
    cta_link_url: str = ""
    cta_target_kind: TargetKind = "url"
    cta_section_id: str = ""
    cta_image_url: str = ""
    cta_image_alt: str = ""
    cta_image_asset_id: str = ""
    button_text: str = ""
    button_target_kind: TargetKind = "url"
    button_url: str = ""
    button_section_id: str = ""


class TabStyle(CoercedModel):
    variant: Literal["simple", "sticky", "underline", "popout"] = "simple"
    inactive_bg: str = "#DDDDDD"
    inactive_text: str = "#000000"
    active_bg: str = "#000000"
    active_text: str = "#FFFFFF"
    border: str = "#000000"
    content_bg: str = "#FFFFFF"
    content_border: str = "#000000"
    accent: str = "#EB5505"


class TabbedNotesData(SectionData):
    section_type = "tabbedNotes"
    title: str = "注意事項"
    tabs: List[NoteTab] = Field(default_factory=list)
    tab_style: TabStyle = Field(default_factory=TabStyle)

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        tabs = raw.get("tabs")
        if not isinstance(tabs, list):
            return raw
        # ids et libellés positionnels : tab_1, tab_item_1_2, タブ1…
        reshaped = []
        for index, tab in enumerate(tabs, start=1):
            entry = indexed_default(as_dict(tab), "id", f"tab_{index}")
            indexed_default(entry, "labelTop", f"タブ{index}")
            items = entry.get("items")
            entry["items"] = [
                indexed_default(as_dict(item), "id", f"tab_item_{index}_{item_index}")
                for item_index, item in enumerate(items if isinstance(items, list) else [], start=1)
            ]
            reshaped.append(entry)
        raw["tabs"] = reshaped
        return raw
