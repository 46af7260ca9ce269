"""
Catalogue de templates, fabrique de sections et sections obligatoires.

TEMPLATE_OPTIONS           → gabarits proposés à la création d'un projet
create_section(type)       → section par défaut d'un type (id aléatoire)
ensure_required_sections   → post-passe de l'import : chaque type obligatoire
                             exactement une fois, dans l'ordre canonique
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .core.coerce import new_id
from .core.defaults import (
    DEFAULT_PROJECT_NAME, DEFAULT_PROJECT_VERSION, default_settings, now_iso,
)
from .core.schemas import ProjectDocument, ProjectMeta, Section, TemplateType
from .normalizer import unique_section_ids
from .sections import normalize_section

log = logging.getLogger(__name__)


# ── Catalogue ───────────────────────────────────────────────────────────────

class TemplateOption(BaseModel):
    id: str
    title: str
    description: str
    template_type: TemplateType
    section_order: List[str]


_CAMPAIGN_ORDER = [
    "brandBar", "heroImage", "campaignPeriodBar", "campaignOverview",
    "targetStores", "couponFlow", "legalNotes", "footerHtml",
]

TEMPLATE_OPTIONS: List[TemplateOption] = [
    TemplateOption(
        id="campaign", title="クーポン", description="クーポン施策向けの標準LP構成",
        template_type="coupon", section_order=_CAMPAIGN_ORDER,
    ),
    TemplateOption(
        id="point", title="ポイント施策", description="ポイント付与向けの標準LP構成",
        template_type="point",
        section_order=[t for t in _CAMPAIGN_ORDER if t != "couponFlow"],
    ),
    TemplateOption(
        id="ranking", title="ランキング施策", description="ランキング訴求向けのLP構成",
        template_type="quickchance",
        section_order=[
            "brandBar", "heroImage", "campaignPeriodBar", "campaignOverview",
            "rankingTable", "paymentHistoryGuide", "targetStores", "legalNotes", "footerHtml",
        ],
    ),
    TemplateOption(
        id="excluded-stores", title="対象外店舗一覧", description="対象外店舗の一覧ページ",
        template_type="target", section_order=["brandBar", "excludedStoresList"],
    ),
    TemplateOption(
        id="excluded-brands", title="対象外ブランド一覧", description="対象外ブランドの一覧ページ",
        template_type="target", section_order=["brandBar", "excludedBrandsList"],
    ),
]


def get_template(template_id: str) -> Optional[TemplateOption]:
    return next((t for t in TEMPLATE_OPTIONS if t.id == template_id), None)


# ── Fabrique de sections ────────────────────────────────────────────────────

_FULL_WIDTH = {"layout": {"fullWidth": True}}

# type → fragments bruts (data / content / style) complétés par normalize_section
_SECTION_SEEDS: Dict[str, Dict[str, Any]] = {
    "brandBar": {
        "data": {"logoText": "新しいブランド", "brandText": "新しいブランド"},
        "style": _FULL_WIDTH,
    },
    "campaignPeriodBar": {
        "data": {"startDate": "2026-03-01", "endDate": "2026-03-31"},
        "style": {
            **_FULL_WIDTH,
            "background": {"type": "solid", "color1": "#EB5505", "color2": "#EB5505"},
        },
    },
    "campaignOverview": {
        "data": {"title": "キャンペーン概要"},
        "content": {"items": [{
            "type": "text",
            "lines": [{
                "text": "期間中、対象店舗でau PAY（コード支払い）で使える割引クーポンをプレゼント！",
                "marks": {"bold": True, "textAlign": "center"},
            }],
        }]},
    },
    "couponFlow": {
        "data": {
            "lead": "＊必ずクーポンを獲得してからau PAY（コード支払い）でお支払いください。",
            "note": "※画面はイメージです。",
            "buttonLabel": "クーポンを獲得する",
        },
        "content": {"items": [
            {
                "type": "image",
                "layout": "slideshow",
                "images": [
                    {"src": f"/footer-defaults/slide-img{n}.png", "alt": f"スライド{n}"}
                    for n in range(1, 7)
                ],
            },
            {
                "type": "button",
                "label": "クーポンを獲得する",
                "target": {"kind": "url", "url": ""},
                "style": {"presetId": "couponFlow", "align": "center", "fullWidth": True},
            },
        ]},
    },
    "targetStores": {
        "content": {"storeCsv": {"headers": [], "rows": []}, "storeLabels": {}, "storeFilters": {}},
    },
    "excludedStoresList": {"content": {"storeCsv": {"headers": [], "rows": []}}},
    "excludedBrandsList": {"content": {"storeCsv": {"headers": [], "rows": []}}},
    "rankingTable": {
        "data": {
            "title": "決済金額ランキング",
            "subtitle": "最新順位はこちら",
            "notes": ["※同一順位の場合は期間中の決済回数が多い方が上位となります。"],
            "columns": [{"key": "amount", "label": "決済金額"}, {"key": "count", "label": "品数"}],
            "rows": [
                {"values": ["368,330円", "940品以上"]},
                {"values": ["308,000円", "790品以上"]},
                {"values": ["246,940円", "630品以上"]},
            ],
        },
    },
    "paymentHistoryGuide": {
        "data": {
            "body": "現在の決済金額については、au PAY アプリ内の「取引履歴」をご確認ください。",
            "linkText": "こちら",
            "linkUrl": "#contact",
            "linkSuffix": "までお問い合わせください。",
            "imageAlt": "決済履歴の確認方法",
        },
    },
    "tabbedNotes": {
        "data": {"tabs": [{
            "labelTop": "事前獲得クーポン",
            "items": [{"text": "クーポンは1回20,000円（税込）以上のお支払いにご利用いただけます。"}],
        }]},
    },
    "legalNotes": {"data": {"items": []}},
}


def create_section(section_type: str) -> Section:
    seed = _SECTION_SEEDS.get(section_type, {})
    raw = {"id": new_id(f"sec_{section_type}"), "type": section_type, **seed}
    return normalize_section(raw, 0)


def create_project_from_template(
    template_type: TemplateType,
    project_name: str,
    section_order: Optional[List[str]] = None,
) -> ProjectDocument:
    """Projet neuf ; l'ordre par défaut est celui du template campagne."""
    order = [t for t in section_order or [] if isinstance(t, str) and t]
    now = now_iso()
    return ProjectDocument(
        meta=ProjectMeta(
            project_name=project_name or DEFAULT_PROJECT_NAME,
            template_type=template_type,
            version=DEFAULT_PROJECT_VERSION,
            created_at=now,
            updated_at=now,
        ),
        settings=default_settings(),
        sections=[create_section(t) for t in order or _CAMPAIGN_ORDER],
    )


# ── Sections obligatoires ───────────────────────────────────────────────────

REQUIRED_SECTION_TYPES = [
    "brandBar", "heroImage", "campaignPeriodBar", "campaignOverview",
    "targetStores", "legalNotes", "footerHtml",
]

# défauts de l'import : ids stables sec_<type>
_REQUIRED_SEEDS: Dict[str, Dict[str, Any]] = {
    "brandBar": {"logoText": "ブランド名", "brandText": "ブランド名"},
    "campaignOverview": {"title": "キャンペーン概要"},
}


def _required_default(section_type: str) -> Section:
    return normalize_section({
        "id": f"sec_{section_type}",
        "type": section_type,
        "data": _REQUIRED_SEEDS.get(section_type, {}),
    }, 0)


def _merge_over(default: Section, existing: Section) -> Section:
    """Fusion champ à champ : les valeurs existantes l'emportent, `locked` repasse à False."""
    base = default.to_json_dict()
    current = existing.to_json_dict()
    merged = {**base, **current, "locked": False}
    for key in ("data", "content", "style"):
        merged[key] = {**base.get(key, {}), **current.get(key, {})}
    return normalize_section(merged, 0)


def ensure_required_sections(doc: ProjectDocument) -> ProjectDocument:
    by_type: Dict[str, Section] = {}
    for section in doc.sections:
        by_type.setdefault(section.type, section)

    required = []
    for section_type in REQUIRED_SECTION_TYPES:
        default = _required_default(section_type)
        existing = by_type.get(section_type)
        if existing is None:
            log.info("section obligatoire ajoutée : %s", section_type)
            required.append(default)
        else:
            required.append(_merge_over(default, existing))

    extra = [s for s in doc.sections if s.type not in REQUIRED_SECTION_TYPES]
    return doc.model_copy(update={"sections": unique_section_ids(required + extra)})
