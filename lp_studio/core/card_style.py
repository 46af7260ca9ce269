"""
Presets de carte de section (sectionCardStyle).

Un preset inconnu retombe sur "au PAY" ; l'opacité d'ombre est bornée.
"""
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from .coerce import to_number
from .model import CoercedModel

DEFAULT_PRESET_ID = "au PAY"

# (preset_id, nom, couleur de bandeau)
_BOX_PRESETS = [
    ("box01", "実線", "#0ea5e9"),
    ("box02", "角丸", "#22c55e"),
    ("box03", "二重線", "#f59e0b"),
    ("box04", "左帯", "#6366f1"),
    ("box05", "上帯", "#ef4444"),
    ("box06", "点線", "#14b8a6"),
    ("box07", "破線", "#84cc16"),
    ("box08", "影枠", "#3b82f6"),
    ("box09", "斜線", "#a855f7"),
    ("box10", "格子", "#f97316"),
    ("box11", "角丸太線", "#22d3ee"),
    ("box12", "引き出し", "#94a3b8"),
    ("box13", "付箋", "#facc15"),
    ("box14", "角落とし", "#0f766e"),
    ("box15", "左アクセント", "#ea580c"),
    ("box16", "ピル枠", "#0ea5e9"),
    ("box17", "ブロック影", "#a78bfa"),
    ("box18", "斜め帯", "#fb7185"),
    ("box19", "上下線", "#10b981"),
    ("box20", "ステッチ", "#f59e0b"),
    ("box21", "枠内影", "#3b82f6"),
    ("box22", "折り返し", "#14b8a6"),
    ("box23", "斜めストライプ", "#f97316"),
    ("box24", "角丸ダブル", "#6366f1"),
    ("box25", "バッジ", "#ef4444"),
]

SHADOW_OPACITY_MIN = 0.02
SHADOW_OPACITY_MAX = 0.3


def clamp_shadow_opacity(value: float) -> float:
    return min(SHADOW_OPACITY_MAX, max(SHADOW_OPACITY_MIN, value))


class CardPadding(CoercedModel):
    t: float = 0
    r: float = 0
    b: float = 0
    l: float = 0


class SectionCardStyle(CoercedModel):
    preset_id: str = DEFAULT_PRESET_ID
    border_color: str = "transparent"
    border_width: float = 0
    radius: float = 0
    padding: CardPadding = Field(default_factory=CardPadding)
    header_style: Literal["bandBold", "box26"] = "bandBold"
    header_bg_color: str = "#EB5505"
    header_text_color: str = "#ffffff"
    label_chip_enabled: bool = False
    label_chip_bg: Literal["sm", "lg"] = "lg"
    label_chip_text_color: str = "center"
    shadow_enabled: bool = True
    shadow_opacity: float = 0.22
    inner_bg_color: str = ""
    text_color: str = ""

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        if raw.get("presetId") not in PRESET_IDS:
            raw.pop("presetId", None)
        opacity = to_number(raw.get("shadowOpacity"), None)
        if opacity is not None:
            raw["shadowOpacity"] = clamp_shadow_opacity(opacity)
        return raw


class SectionCardPreset(BaseModel):
    id: str
    name: str
    card_style: SectionCardStyle
    title_size: int = 18
    header_layout: Literal["band", "inner", "chip"] = "inner"


def _build_presets() -> List[SectionCardPreset]:
    presets = [
        SectionCardPreset(
            id=DEFAULT_PRESET_ID,
            name="au PAY: Title Band Strong",
            card_style=SectionCardStyle(),
            title_size=20,
            header_layout="band",
        )
    ]
    for preset_id, label, color in _BOX_PRESETS:
        presets.append(SectionCardPreset(
            id=preset_id,
            name=f"{preset_id}: {label}",
            card_style=SectionCardStyle(preset_id=preset_id, header_bg_color=color),
        ))
    presets.append(SectionCardPreset(
        id="box26",
        name="box26: タイトル差し込み",
        card_style=SectionCardStyle(
            preset_id="box26",
            header_style="box26",
            header_bg_color="transparent",
            header_text_color="#95ccff",
        ),
        title_size=19,
        header_layout="chip",
    ))
    return presets


PRESET_IDS = {DEFAULT_PRESET_ID, "box26"} | {entry[0] for entry in _BOX_PRESETS}
SECTION_CARD_PRESETS: List[SectionCardPreset] = _build_presets()
